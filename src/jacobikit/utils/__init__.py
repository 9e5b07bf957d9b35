"""Utility functions for JacobiKit package."""

from .validate import (
    as_point,
    check_output,
    validate_dimension,
)

__all__ = [
    "as_point",
    "check_output",
    "validate_dimension",
]
