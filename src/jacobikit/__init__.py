"""Provides all jacobikit methods."""

from importlib.metadata import PackageNotFoundError, version

from jacobikit.config import (
    resolve_default_differentiation_method,
    set_default_differentiation_method,
    use_differentiation_method,
)
from jacobikit.estimator import JacobianEstimator
from jacobikit.exceptions import (
    DimensionMismatchError,
    FunctionEvaluationError,
    InvalidStepSizeError,
    JacobiKitError,
    UnboundFunctionError,
)
from jacobikit.jacobian import build_jacobian
from jacobikit.methods import DifferentiationMethod, available_methods
from jacobikit.stepsize import (
    default_step_size,
    optimal_step_size,
    scaled_step_sizes,
)

try:
    __version__ = version("jacobikit")
except PackageNotFoundError:
    pass

__all__ = [
    "JacobianEstimator",
    "DifferentiationMethod",
    "available_methods",
    "build_jacobian",
    "default_step_size",
    "optimal_step_size",
    "scaled_step_sizes",
    "set_default_differentiation_method",
    "use_differentiation_method",
    "resolve_default_differentiation_method",
    "JacobiKitError",
    "UnboundFunctionError",
    "DimensionMismatchError",
    "InvalidStepSizeError",
    "FunctionEvaluationError",
]
