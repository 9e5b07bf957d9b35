"""Package-wide defaults for Jacobian estimation."""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import Iterator

from jacobikit.logger import jacobikit_logger
from jacobikit.methods import DifferentiationMethod, resolve_method

__all__ = [
    "set_default_differentiation_method",
    "use_differentiation_method",
    "resolve_default_differentiation_method",
]


_method_var: contextvars.ContextVar[DifferentiationMethod | None] = contextvars.ContextVar(
    "jacobikit_method", default=None
)
_DEFAULT_METHOD: DifferentiationMethod | None = None


def set_default_differentiation_method(method: DifferentiationMethod | str | None) -> None:
    """Sets the module-wide default differentiation method.

    Args:
        method: The method (or its name), or None to restore the built-in
            default, the symmetric quotient.

    Returns:
        None
    """
    global _DEFAULT_METHOD
    _DEFAULT_METHOD = None if method is None else resolve_method(method)
    jacobikit_logger.debug("Default differentiation method set to %s.", _DEFAULT_METHOD)


@contextmanager
def use_differentiation_method(
    method: DifferentiationMethod | str | None,
) -> Iterator[DifferentiationMethod | None]:
    """Temporarily sets the default differentiation method.

    Only estimators constructed inside the context pick up the override;
    existing estimators keep their method.

    Args:
        method: The method (or its name), or ``None`` to fall back to the
            module-wide default inside the context.

    Yields:
        DifferentiationMethod | None: The previous override (restored on exit).
    """
    prev = _method_var.get()
    token = _method_var.set(None if method is None else resolve_method(method))
    try:
        yield prev
    finally:
        _method_var.reset(token)


def resolve_default_differentiation_method() -> DifferentiationMethod:
    """Resolves the method used by estimators built without an explicit one.

    Precedence is context override, then module default, then the
    symmetric quotient.

    Returns:
        The default differentiation method.
    """
    m = _method_var.get()
    if m is not None:
        return m
    if _DEFAULT_METHOD is not None:
        return _DEFAULT_METHOD
    return DifferentiationMethod.SYMMETRIC_QUOTIENT
