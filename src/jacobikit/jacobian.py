"""Contains a one-shot function used to construct the Jacobian matrix."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from jacobikit.estimator import JacobianEstimator
from jacobikit.exceptions import DimensionMismatchError, FunctionEvaluationError
from jacobikit.methods import DifferentiationMethod, resolve_method
from jacobikit.stepsize import scaled_step_sizes
from jacobikit.utils.types import VectorFunction

__all__ = ["build_jacobian"]


def build_jacobian(
    function: VectorFunction,
    x0: ArrayLike,
    method: DifferentiationMethod | str | None = None,
    step_sizes: ArrayLike | str | None = None,
    check_finite: bool = True,
) -> NDArray[np.floating]:
    """Computes the Jacobian of a vector-valued function at a single point.

    Unlike :class:`~jacobikit.estimator.JacobianEstimator`, the dimensions
    are inferred: the input dimension from ``x0`` and the output dimension
    from ``function(x0)``. That baseline call is made on top of the stencil
    evaluations, so the Newton quotient costs ``n + 2`` calls here rather
    than ``n + 1``.

    Args:
        function: The vector-valued function to be differentiated. It should
            accept a 1D array of parameter values and return a 1D array.
        x0: The point at which the Jacobian is evaluated.
        method: Method name or alias (e.g. ``"newton"``, ``"symmetric"``,
            ``"second-order"``). If None, the package default is used.
        step_sizes: Scalar or per-coordinate step sizes, or ``"scaled"`` for
            :func:`~jacobikit.stepsize.scaled_step_sizes` at ``x0``. If None,
            ``sqrt(eps)`` is used for every coordinate.
        check_finite: If True, non-finite function values raise.

    Returns:
        A 2D array of shape ``(m, n)``. Each column corresponds to the
        derivative with respect to one parameter.

    Raises:
        ValueError: If ``x0`` is empty or ``step_sizes`` is an unknown string.
        DimensionMismatchError: If ``function`` does not return a 1D vector.
        FunctionEvaluationError: If ``function`` raises, or returns
            non-finite values while ``check_finite`` is set.
    """
    x = np.asarray(x0, dtype=float).ravel()
    if x.size == 0:
        raise ValueError("x0 must be a non-empty 1D array.")

    try:
        y0 = np.asarray(function(x.copy()), dtype=float)
    except Exception as e:
        raise FunctionEvaluationError(
            f"Function evaluation failed at x0={x.tolist()}: {e}", point=x.copy()
        ) from e
    if y0.ndim != 1:
        raise DimensionMismatchError(
            f"build_jacobian expects f: R^n -> R^m with 1-D vector output; got shape {y0.shape}"
        )
    if check_finite and not np.isfinite(y0).all():
        raise FunctionEvaluationError("Non-finite values in function output at x0.", point=x.copy())

    resolved = None if method is None else resolve_method(method)
    if isinstance(step_sizes, str):
        if step_sizes != "scaled":
            raise ValueError(f"Unknown step size policy {step_sizes!r}; expected 'scaled'.")
        step_sizes = scaled_step_sizes(x, method=resolved)

    estimator = JacobianEstimator(
        function,
        input_dim=x.size,
        output_dim=y0.size,
        method=resolved,
        step_sizes=step_sizes,
        check_finite=check_finite,
    )
    return estimator.evaluate(x)
