"""Exceptions raised by JacobiKit.

Every error derives from :class:`JacobiKitError` and additionally from the
built-in exception a caller would naturally expect, so ``except ValueError``
keeps working for dimension and step-size problems.
"""

from __future__ import annotations

import numpy as np

__all__ = [
    "JacobiKitError",
    "UnboundFunctionError",
    "DimensionMismatchError",
    "InvalidStepSizeError",
    "FunctionEvaluationError",
]


class JacobiKitError(Exception):
    """Base class for all JacobiKit errors."""


class UnboundFunctionError(JacobiKitError, RuntimeError):
    """Raised when a Jacobian is requested from an estimator without a function."""


class DimensionMismatchError(JacobiKitError, ValueError):
    """Raised when a vector does not have the length the estimator expects.

    This covers evaluation points, step-size vectors and the values returned
    by the wrapped function.
    """


class InvalidStepSizeError(JacobiKitError, ValueError):
    """Raised when a step size is not strictly positive and finite."""


class FunctionEvaluationError(JacobiKitError, FloatingPointError):
    """Indicates that the wrapped function failed at a perturbed point.

    The failing point and the Jacobian column being computed are attached so
    that a caller can decide whether to retry with another step or point.
    """

    def __init__(
        self,
        *args: object,
        point: np.ndarray | None = None,
        column: int | None = None,
    ) -> None:
        """Constructor for the exception raised when the wrapped function fails.

        Args:
            args: Arguments passed to ``Exception.__init__``, e.g. a message.
            point: The point at which the function was evaluated.
            column: Index of the Jacobian column being computed, or ``None``
                for the shared base evaluation.
        """
        super().__init__(*args)

        self.point = point
        self.column = column
