"""Unit tests for public API."""

from __future__ import annotations

import jacobikit
from jacobikit import DifferentiationMethod, JacobianEstimator, build_jacobian


def test_core_objects_importable_from_top_level():
    """The estimator, method enum and helper load from the top level."""
    assert JacobianEstimator is jacobikit.estimator.JacobianEstimator
    assert DifferentiationMethod is jacobikit.methods.DifferentiationMethod
    assert build_jacobian is jacobikit.jacobian.build_jacobian


def test_public_all_contains_expected_names():
    """Test that __all__ exposes the estimator, errors and configuration."""
    expected = {
        "JacobianEstimator",
        "DifferentiationMethod",
        "build_jacobian",
        "scaled_step_sizes",
        "use_differentiation_method",
        "UnboundFunctionError",
        "DimensionMismatchError",
        "InvalidStepSizeError",
        "FunctionEvaluationError",
    }
    assert expected.issubset(set(jacobikit.__all__))
    for name in jacobikit.__all__:
        assert hasattr(jacobikit, name)


def test_errors_share_a_base_class():
    """All package errors derive from JacobiKitError."""
    for err in (
        jacobikit.UnboundFunctionError,
        jacobikit.DimensionMismatchError,
        jacobikit.InvalidStepSizeError,
        jacobikit.FunctionEvaluationError,
    ):
        assert issubclass(err, jacobikit.JacobiKitError)
