"""Differentiation methods and their finite-difference stencils.

Each :class:`DifferentiationMethod` is a fixed stencil along one coordinate
axis: a set of integer offsets (multiples of the step size ``h``) and the
weights that combine the function values at those offsets into a first
derivative. The derivative along coordinate ``j`` is then

    dF/dx_j ~ sum_k weights[k] * F(x + offsets[k] * h * e_j) / h

The three supported stencils are:

* Newton quotient (forward difference), error O(h):
  ``(F(x+h) - F(x)) / h``
* Symmetric quotient (central difference), error O(h^2):
  ``(F(x+h) - F(x-h)) / (2h)``
* Second-order quotient (five-point central difference), error O(h^4):
  ``(F(x-2h) - 8F(x-h) + 8F(x+h) - F(x+2h)) / (12h)``

Method names are case/spacing/punctuation insensitive, so
``"Symmetric Quotient"``, ``"symmetric_quotient"`` and ``"central"`` all
resolve to :attr:`DifferentiationMethod.SYMMETRIC_QUOTIENT`.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from typing import Mapping

import numpy as np
from numpy.typing import NDArray

__all__ = [
    "DifferentiationMethod",
    "STENCIL_OFFSETS",
    "STENCIL_WEIGHTS",
    "TRUNCATION_ORDER",
    "available_methods",
    "resolve_method",
]


class DifferentiationMethod(Enum):
    """Finite-difference formula used to approximate each Jacobian column.

    A higher-order method gives a more accurate approximation for smooth
    functions at the cost of more function evaluations per column.
    """

    NEWTON_QUOTIENT = 0
    SYMMETRIC_QUOTIENT = 1
    SECOND_ORDER_QUOTIENT = 2

    @property
    def offsets(self) -> NDArray[np.float64]:
        """Stencil offsets in units of the step size."""
        return STENCIL_OFFSETS[self].copy()

    @property
    def weights(self) -> NDArray[np.float64]:
        """Stencil weights, to be divided by the step size."""
        return STENCIL_WEIGHTS[self].copy()

    @property
    def error_order(self) -> int:
        """Power of ``h`` in the leading truncation-error term."""
        return TRUNCATION_ORDER[self]

    @property
    def evaluations_per_column(self) -> int:
        """Number of function calls needed for one column.

        The unperturbed point of the Newton quotient is evaluated once per
        Jacobian and is therefore not counted here.
        """
        return int(np.count_nonzero(STENCIL_OFFSETS[self]))

    @property
    def uses_base_point(self) -> bool:
        """Whether the stencil needs ``F(x)`` at the unperturbed point."""
        return bool(np.any(STENCIL_OFFSETS[self] == 0.0))


#: Stencil offsets for each method, in units of ``h``.
STENCIL_OFFSETS: dict[DifferentiationMethod, NDArray[np.float64]] = {
    DifferentiationMethod.NEWTON_QUOTIENT: np.array([0.0, 1.0]),
    DifferentiationMethod.SYMMETRIC_QUOTIENT: np.array([-1.0, 1.0]),
    DifferentiationMethod.SECOND_ORDER_QUOTIENT: np.array([-2.0, -1.0, 1.0, 2.0]),
}

#: Stencil weights matching :data:`STENCIL_OFFSETS`.
STENCIL_WEIGHTS: dict[DifferentiationMethod, NDArray[np.float64]] = {
    DifferentiationMethod.NEWTON_QUOTIENT: np.array([-1.0, 1.0]),
    DifferentiationMethod.SYMMETRIC_QUOTIENT: np.array([-0.5, 0.5]),
    DifferentiationMethod.SECOND_ORDER_QUOTIENT: np.array([1.0, -8.0, 8.0, -1.0]) / 12.0,
}

#: Leading truncation-error order of each method.
TRUNCATION_ORDER: dict[DifferentiationMethod, int] = {
    DifferentiationMethod.NEWTON_QUOTIENT: 1,
    DifferentiationMethod.SYMMETRIC_QUOTIENT: 2,
    DifferentiationMethod.SECOND_ORDER_QUOTIENT: 4,
}

_METHOD_ALIASES: list[tuple[DifferentiationMethod, list[str]]] = [
    (
        DifferentiationMethod.NEWTON_QUOTIENT,
        ["newton", "newton-quotient", "forward", "forward-difference"],
    ),
    (
        DifferentiationMethod.SYMMETRIC_QUOTIENT,
        ["symmetric", "symmetric-quotient", "central", "central-difference"],
    ),
    (
        DifferentiationMethod.SECOND_ORDER_QUOTIENT,
        ["second-order", "second-order-quotient", "five-point", "5-point"],
    ),
]


def _norm(s: str) -> str:
    """Normalize a method string for robust matching.

    Args:
        s: Input string.

    Returns:
        The lower-cased string with everything but letters and digits removed.
    """
    return re.sub(r"[^a-z0-9]+", "", s.lower())


@lru_cache(maxsize=1)
def _method_map() -> Mapping[str, DifferentiationMethod]:
    """Builds and caches the lookup table from normalized names to methods."""
    method_map: dict[str, DifferentiationMethod] = {}
    for method, aliases in _METHOD_ALIASES:
        method_map[_norm(method.name)] = method
        for alias in aliases:
            method_map[_norm(alias)] = method
    return method_map


def available_methods() -> tuple[str, ...]:
    """Returns the canonical method names, in declaration order."""
    return tuple(m.name.lower() for m in DifferentiationMethod)


def resolve_method(method: DifferentiationMethod | str | int) -> DifferentiationMethod:
    """Returns the :class:`DifferentiationMethod` named by ``method``.

    Args:
        method: A method member, its integer value, or a name/alias string.

    Returns:
        The matching method.

    Raises:
        ValueError: If ``method`` does not name a known method.
        TypeError: If ``method`` has an unsupported type.
    """
    if isinstance(method, DifferentiationMethod):
        return method
    if isinstance(method, str):
        resolved = _method_map().get(_norm(method))
        if resolved is None:
            opts = ", ".join(available_methods())
            raise ValueError(f"Unknown differentiation method {method!r}. Choose one of: {opts}.")
        return resolved
    if isinstance(method, (int, np.integer)) and not isinstance(method, bool):
        try:
            return DifferentiationMethod(int(method))
        except ValueError as e:
            raise ValueError(f"Unknown differentiation method value {method!r}.") from e
    raise TypeError(
        f"method must be a DifferentiationMethod or a string; got {type(method).__name__}."
    )
