"""Step-size selection for finite-difference Jacobians.

The step size ``h`` is the dominant accuracy trade-off of every
finite-difference quotient. A large ``h`` makes the truncation error
(``O(h^p)`` for a method of error order ``p``) dominate, while a small ``h``
makes the cancellation error in ``F(x+h) - F(x)`` dominate, since that
difference loses roughly ``eps / h`` of relative precision.

The default ``h = sqrt(eps)`` is appropriate for unit-scaled problems.
Coordinates of very different magnitudes should use per-coordinate steps
``h_i = base * max(1, |x_i|)``, see :func:`scaled_step_sizes`.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from jacobikit.exceptions import DimensionMismatchError, InvalidStepSizeError
from jacobikit.methods import DifferentiationMethod, resolve_method

__all__ = [
    "default_step_size",
    "optimal_step_size",
    "scaled_step_sizes",
    "validate_step_sizes",
]


def default_step_size(dtype: DTypeLike = np.float64) -> float:
    """Returns ``sqrt(eps)`` for the machine epsilon of ``dtype``."""
    return float(np.sqrt(np.finfo(dtype).eps))


def optimal_step_size(
    method: DifferentiationMethod | str,
    dtype: DTypeLike = np.float64,
) -> float:
    """Returns the step that balances truncation and cancellation error.

    For a method with truncation error ``O(h^p)`` and a rounding error of
    ``O(eps / h)`` the total error is minimised near ``h = eps^(1/(p+1))``.
    For the Newton quotient this is :func:`default_step_size`.

    Args:
        method: The differentiation method (or its name).
        dtype: Floating dtype whose machine epsilon is used.

    Returns:
        The step size for unit-scaled coordinates.
    """
    p = resolve_method(method).error_order
    eps = float(np.finfo(dtype).eps)
    return eps ** (1.0 / (p + 1))


def scaled_step_sizes(
    x: ArrayLike,
    method: DifferentiationMethod | str | None = None,
    dtype: DTypeLike = np.float64,
) -> NDArray[np.floating]:
    """Returns per-coordinate steps ``base * max(1, |x_i|)``.

    Args:
        x: The evaluation point whose magnitudes set the scale.
        method: If given, ``base`` is :func:`optimal_step_size` for this
            method; otherwise ``base`` is :func:`default_step_size`.
        dtype: Floating dtype of the result.

    Returns:
        A 1D array with one step size per coordinate of ``x``.

    Raises:
        ValueError: If ``x`` contains non-finite values.
    """
    arr = np.asarray(x, dtype=dtype).reshape(-1)
    if not np.isfinite(arr).all():
        raise ValueError("Cannot scale step sizes from a point with non-finite coordinates.")
    base = default_step_size(dtype) if method is None else optimal_step_size(method, dtype)
    return (base * np.maximum(1.0, np.abs(arr))).astype(dtype)


def validate_step_sizes(
    step_sizes: ArrayLike,
    input_dim: int,
    dtype: DTypeLike = np.float64,
) -> NDArray[np.floating]:
    """Validates step sizes and returns them as a private 1D array.

    Args:
        step_sizes: A scalar, broadcast to every coordinate, or one value per
            coordinate.
        input_dim: Number of coordinates of the differentiated function.
        dtype: Floating dtype of the result.

    Returns:
        A new array of length ``input_dim``.

    Raises:
        DimensionMismatchError: If a sequence of the wrong length is given.
        InvalidStepSizeError: If any step is not strictly positive and finite.
    """
    try:
        arr = np.array(step_sizes, dtype=dtype)
    except (TypeError, ValueError) as e:
        raise InvalidStepSizeError(f"Step sizes must be numeric; got {step_sizes!r}.") from e

    if arr.ndim == 0:
        arr = np.full(input_dim, arr, dtype=dtype)
    elif arr.ndim != 1 or arr.size != input_dim:
        raise DimensionMismatchError(
            f"Expected {input_dim} step sizes; got shape {arr.shape}."
        )

    bad = ~(np.isfinite(arr) & (arr > 0))
    if bad.any():
        idx = np.flatnonzero(bad).tolist()
        raise InvalidStepSizeError(
            f"Step sizes must be strictly positive and finite; invalid at indices {idx}."
        )
    return arr
