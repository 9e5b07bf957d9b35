"""Provides the JacobianEstimator class.

The estimator wraps a vector-valued function ``F: R^n -> R^m`` and
approximates its Jacobian at arbitrary points with one of the
finite-difference quotients of :class:`~jacobikit.methods.DifferentiationMethod`.
It is built once per function and then evaluated at as many points as
needed, e.g. once per iteration of a Newton solver.

Examples:
--------
Jacobian of a simple map with the default symmetric quotient:

>>> import numpy as np
>>> from jacobikit.estimator import JacobianEstimator
>>> def f(x):
...     return np.array([x[0] ** 2, x[0] * x[1]])
>>> est = JacobianEstimator(f, input_dim=2, output_dim=2)
>>> np.allclose(est.evaluate([1.0, 2.0]), [[2.0, 0.0], [2.0, 1.0]])
True

Switching to the five-point stencil:

>>> est.set_differentiation_method("second-order")
>>> est.method
<DifferentiationMethod.SECOND_ORDER_QUOTIENT: 2>
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from jacobikit.config import resolve_default_differentiation_method
from jacobikit.exceptions import FunctionEvaluationError, UnboundFunctionError
from jacobikit.logger import jacobikit_logger
from jacobikit.methods import (
    STENCIL_OFFSETS,
    STENCIL_WEIGHTS,
    DifferentiationMethod,
    resolve_method,
)
from jacobikit.stepsize import default_step_size, validate_step_sizes
from jacobikit.utils.types import VectorFunction
from jacobikit.utils.validate import as_point, check_output, validate_dimension

__all__ = ["JacobianEstimator"]


class JacobianEstimator:
    """Approximates the Jacobian of a vector-valued function by finite differences.

    Column ``j`` of the Jacobian holds the partial derivative with respect to
    ``x_j``. It is computed by perturbing only coordinate ``j`` of the
    evaluation point by multiples of the step size ``step_sizes[j]`` and
    combining the function values with the stencil of the selected method.

    Attributes:
        input_dim: Number of inputs of the wrapped function (0 while unbound).
        output_dim: Number of outputs of the wrapped function (0 while unbound).
        dtype: Floating dtype used for points, step sizes and the Jacobian.
        check_finite: If True, non-finite function values raise
            :class:`~jacobikit.exceptions.FunctionEvaluationError`. If False,
            they propagate into the returned Jacobian.
        n_evaluations: Total number of calls made to the wrapped function.

    The estimator keeps one Jacobian buffer that is overwritten on every
    evaluation, so a single instance must not be evaluated from several
    threads at once.
    """

    def __init__(
        self,
        function: VectorFunction | None = None,
        input_dim: int | None = None,
        output_dim: int | None = None,
        *,
        method: DifferentiationMethod | str | None = None,
        step_sizes: ArrayLike | None = None,
        dtype: DTypeLike = np.float64,
        check_finite: bool = False,
    ) -> None:
        """Initialises the estimator, optionally binding a function.

        Args:
            function: The function to differentiate. It must accept a 1D
                array of length ``input_dim`` and return a 1D array-like of
                length ``output_dim``. If None, the estimator is unbound and
                :meth:`bind` must be called before evaluating.
            input_dim: Number of inputs. Defaults to ``function.input_dim``.
            output_dim: Number of outputs. Defaults to ``function.output_dim``.
            method: Differentiation method or alias. Defaults to
                :func:`~jacobikit.config.resolve_default_differentiation_method`.
            step_sizes: Scalar or per-coordinate step sizes. Defaults to
                ``sqrt(eps)`` for every coordinate.
            dtype: Floating dtype used for the computation.
            check_finite: Whether to reject non-finite function values.

        Raises:
            ValueError: If dimensions or step sizes are given without a
                function, or ``dtype`` is not a floating dtype.
        """
        self.dtype = np.dtype(dtype)
        if not np.issubdtype(self.dtype, np.floating):
            raise ValueError(f"dtype must be a floating dtype; got {self.dtype}.")

        self._function: VectorFunction | None = None
        self.input_dim = 0
        self.output_dim = 0
        self._step_sizes = np.empty(0, dtype=self.dtype)
        self._jacobian = np.empty((0, 0), dtype=self.dtype)
        self._method = (
            resolve_default_differentiation_method() if method is None else resolve_method(method)
        )
        self.check_finite = bool(check_finite)
        self.n_evaluations = 0

        if function is None:
            if input_dim is not None or output_dim is not None or step_sizes is not None:
                raise ValueError(
                    "input_dim, output_dim and step_sizes require a function to be given."
                )
            return

        self.bind(function, input_dim, output_dim, step_sizes=step_sizes)

    def bind(
        self,
        function: VectorFunction,
        input_dim: int | None = None,
        output_dim: int | None = None,
        *,
        step_sizes: ArrayLike | None = None,
    ) -> JacobianEstimator:
        """Binds the function to differentiate.

        Binding sizes the Jacobian buffer and sets the step sizes, to
        ``sqrt(eps)`` unless ``step_sizes`` is given. The estimator is left
        unchanged if any argument is rejected.

        Args:
            function: The function to differentiate.
            input_dim: Number of inputs. Defaults to ``function.input_dim``.
            output_dim: Number of outputs. Defaults to ``function.output_dim``.
            step_sizes: Scalar or per-coordinate step sizes.

        Returns:
            The estimator itself.

        Raises:
            RuntimeError: If a function is already bound.
            TypeError: If ``function`` is not callable.
            ValueError: If a dimension is missing or invalid.
            DimensionMismatchError: If ``step_sizes`` has the wrong length.
            InvalidStepSizeError: If any step is not strictly positive and finite.
        """
        if self._function is not None:
            raise RuntimeError("A function is already bound to this estimator.")
        if not callable(function):
            raise TypeError(f"function must be callable; got {type(function).__name__}.")

        n = _resolve_dimension(function, input_dim, "input_dim")
        m = _resolve_dimension(function, output_dim, "output_dim")
        if step_sizes is None:
            steps = np.full(n, default_step_size(self.dtype), dtype=self.dtype)
        else:
            steps = validate_step_sizes(step_sizes, n, self.dtype)

        self._function = function
        self.input_dim = n
        self.output_dim = m
        self._step_sizes = steps
        self._jacobian = np.zeros((m, n), dtype=self.dtype)

        jacobikit_logger.debug(
            "Bound %r with input_dim=%d, output_dim=%d.", function, n, m
        )
        return self

    @property
    def function(self) -> VectorFunction | None:
        """The wrapped function, or None if unbound."""
        return self._function

    @property
    def is_bound(self) -> bool:
        """Whether a function has been bound."""
        return self._function is not None

    @property
    def method(self) -> DifferentiationMethod:
        """The differentiation method used by the next evaluation."""
        return self._method

    @method.setter
    def method(self, method: DifferentiationMethod | str) -> None:
        self.set_differentiation_method(method)

    def set_differentiation_method(self, method: DifferentiationMethod | str) -> None:
        """Selects the differentiation method for subsequent evaluations.

        Args:
            method: A :class:`DifferentiationMethod` or one of its aliases.

        Raises:
            ValueError: If ``method`` does not name a known method.
        """
        self._method = resolve_method(method)
        jacobikit_logger.debug("Differentiation method set to %s.", self._method.name)

    @property
    def step_sizes(self) -> NDArray[np.floating]:
        """A copy of the per-coordinate step sizes.

        Assigning validates eagerly and requires a bound function.
        """
        return self._step_sizes.copy()

    @step_sizes.setter
    def step_sizes(self, step_sizes: ArrayLike) -> None:
        # steps are sized by input_dim, which is unknown until bind()
        if self._function is None:
            raise UnboundFunctionError(
                "Cannot set step sizes before a function is bound; "
                "pass step_sizes to bind() instead."
            )
        self._step_sizes = validate_step_sizes(step_sizes, self.input_dim, self.dtype)

    @property
    def jacobian(self) -> NDArray[np.floating]:
        """A copy of the most recently computed Jacobian."""
        return self._jacobian.copy()

    def evaluate(self, x: ArrayLike) -> NDArray[np.floating]:
        """Computes the Jacobian at ``x``.

        Args:
            x: Evaluation point of length ``input_dim``. It is not modified.

        Returns:
            A new ``(output_dim, input_dim)`` array whose column ``j`` is the
            approximated partial derivative with respect to ``x_j``.

        Raises:
            UnboundFunctionError: If no function is bound.
            DimensionMismatchError: If ``x`` or a function value has the
                wrong length.
            FunctionEvaluationError: If the wrapped function raises, or
                returns non-finite values while ``check_finite`` is set.
        """
        if self._function is None:
            raise UnboundFunctionError(
                "Cannot compute a Jacobian: no function is bound to this estimator."
            )

        point = as_point(x, self.input_dim, self.dtype)
        method = self._method
        offsets = STENCIL_OFFSETS[method]
        weights = STENCIL_WEIGHTS[method].astype(self.dtype)
        calls_before = self.n_evaluations

        self._warn_lost_steps(point)

        # F(x) is shared by every column of the Newton quotient
        base = None
        if self.input_dim > 0 and method.uses_base_point:
            base = self._evaluate_function(point, column=None)

        scratch = point.copy()
        column = np.empty(self.output_dim, dtype=self.dtype)
        for j in range(self.input_dim):
            h = self._step_sizes[j]
            column.fill(0.0)
            for offset, weight in zip(offsets, weights):
                if offset == 0.0:
                    values = base
                else:
                    scratch[j] = point[j] + offset * h
                    values = self._evaluate_function(scratch, column=j)
                column += weight * values
            scratch[j] = point[j]
            self._jacobian[:, j] = column / h

        jacobikit_logger.debug(
            "Computed %dx%d Jacobian with %s using %d function evaluations.",
            self.output_dim,
            self.input_dim,
            method.name,
            self.n_evaluations - calls_before,
        )
        return self._jacobian.copy()

    def __call__(self, x: ArrayLike) -> NDArray[np.floating]:
        """Computes the Jacobian at ``x``; see :meth:`evaluate`."""
        return self.evaluate(x)

    def __repr__(self) -> str:
        """Returns a short description of the estimator."""
        return (
            f"{type(self).__name__}(function={self._function!r}, "
            f"input_dim={self.input_dim}, output_dim={self.output_dim}, "
            f"method={self._method.name})"
        )

    def _evaluate_function(
        self,
        point: NDArray[np.floating],
        column: int | None,
    ) -> NDArray[np.floating]:
        """Calls the wrapped function at ``point`` and validates the result.

        Args:
            point: The (possibly perturbed) point. The function receives a
                copy, so it cannot alter the caller's scratch vector.
            column: The Jacobian column being computed, or None for the
                shared base evaluation.

        Returns:
            The function value as a 1D array of length ``output_dim``.
        """
        self.n_evaluations += 1
        try:
            raw = self._function(point.copy())
        except Exception as e:
            raise FunctionEvaluationError(
                f"Function evaluation failed at {point.tolist()} (column {column}): {e}",
                point=point.copy(),
                column=column,
            ) from e

        values = check_output(raw, self.output_dim, self.dtype)
        if self.check_finite and not np.isfinite(values).all():
            raise FunctionEvaluationError(
                f"Non-finite function value at {point.tolist()} (column {column}).",
                point=point.copy(),
                column=column,
            )
        return values

    def _warn_lost_steps(self, point: NDArray[np.floating]) -> None:
        """Warns about coordinates where ``x_j + h_j`` rounds back to ``x_j``."""
        lost = (point + self._step_sizes) == point
        if lost.any():
            jacobikit_logger.warning(
                "Step sizes at indices %s vanish against the coordinates of the "
                "evaluation point; the corresponding Jacobian columns are meaningless. "
                "Consider jacobikit.stepsize.scaled_step_sizes.",
                np.flatnonzero(lost).tolist(),
            )


def _resolve_dimension(function: Any, explicit: int | None, name: str) -> int:
    """Returns an explicit dimension, or the one declared on ``function``.

    Args:
        function: The wrapped function.
        explicit: The dimension passed by the caller, or None.
        name: Attribute/argument name, ``"input_dim"`` or ``"output_dim"``.

    Returns:
        The validated dimension.

    Raises:
        ValueError: If no dimension is available or it is invalid.
    """
    value = explicit if explicit is not None else getattr(function, name, None)
    if value is None:
        raise ValueError(
            f"{name} must be given explicitly or declared as a '{name}' attribute of the function."
        )
    return validate_dimension(value, name)
