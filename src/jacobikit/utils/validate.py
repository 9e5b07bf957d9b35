"""Validation utilities for JacobiKit."""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from jacobikit.exceptions import DimensionMismatchError

__all__ = [
    "validate_dimension",
    "as_point",
    "check_output",
]


def validate_dimension(value: Any, name: str) -> int:
    """Validates a function dimension and returns it as an ``int``.

    Args:
        value: The candidate dimension.
        name: Name used in the error message (e.g. ``"input_dim"``).

    Returns:
        The dimension as a non-negative integer.

    Raises:
        ValueError: If ``value`` is not a non-negative integer.
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be a non-negative integer; got {value!r}.")
    if value < 0:
        raise ValueError(f"{name} must be a non-negative integer; got {value}.")
    return int(value)


def as_point(
    x: ArrayLike,
    input_dim: int,
    dtype: DTypeLike = np.float64,
) -> NDArray[np.floating]:
    """Converts an evaluation point to a fresh 1D array of length ``input_dim``.

    Row vectors of shape ``(1, n)`` and column vectors of shape ``(n, 1)`` are
    flattened; anything else that is not 1D is rejected. The returned array
    is always a copy, so callers may perturb it freely.

    Args:
        x: The evaluation point.
        input_dim: Expected number of coordinates.
        dtype: Floating dtype of the returned array.

    Returns:
        A 1D copy of ``x``.

    Raises:
        DimensionMismatchError: If ``x`` cannot be read as a vector of length
            ``input_dim``.
    """
    arr = np.array(x, dtype=dtype)
    if arr.ndim == 2 and 1 in arr.shape:
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise DimensionMismatchError(
            f"Evaluation point must be a 1D vector; got shape {arr.shape}."
        )
    if arr.size != input_dim:
        raise DimensionMismatchError(
            f"Evaluation point has length {arr.size} but the function expects {input_dim}."
        )
    return arr


def check_output(
    values: Any,
    output_dim: int,
    dtype: DTypeLike = np.float64,
) -> NDArray[np.floating]:
    """Validates a function value and returns it as a 1D array.

    Scalars are accepted when ``output_dim`` is 1.

    Args:
        values: The value returned by the wrapped function.
        output_dim: Expected number of components.
        dtype: Floating dtype of the returned array.

    Returns:
        The function value as a 1D array of length ``output_dim``.

    Raises:
        DimensionMismatchError: If the value is not a vector of length
            ``output_dim``.
    """
    arr = np.atleast_1d(np.asarray(values, dtype=dtype))
    if arr.ndim != 1 or arr.size != output_dim:
        raise DimensionMismatchError(
            f"Function returned shape {arr.shape}; expected ({output_dim},)."
        )
    return arr
