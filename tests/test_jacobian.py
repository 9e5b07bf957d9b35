"""Unit tests for jacobikit.jacobian.build_jacobian."""

from functools import partial

import numpy as np
import pytest

from jacobikit.exceptions import DimensionMismatchError, FunctionEvaluationError
from jacobikit.jacobian import build_jacobian


def f_linear_mat(th, vec: np.ndarray) -> np.ndarray:
    """Linear map f(θ)=Aθ."""
    return np.asarray(vec, float) @ np.asarray(th, float)


def f_analytic_2d(th) -> np.ndarray:
    """Analytic 2D map with known Jacobian."""
    x, y = np.asarray(th, float)
    return np.array([x**2, np.sin(y), x*y], dtype=float)


def f_nonlinear_3d(th) -> np.ndarray:
    """Nonlinear 3D map used for numeric reference."""
    x, y, z = np.asarray(th, float)
    return np.array([x*y + np.sin(z), x**2 + np.cos(y), np.exp(z) * y], dtype=float)


def f_len1_vector(th) -> np.ndarray:
    """Returns a length-1 vector."""
    x, y = np.asarray(th, float)
    return np.array([x**2 + y], dtype=float)


def f_nonfinite(th) -> np.ndarray:
    """Produces a non-finite output component."""
    x, y = np.asarray(th, float)
    return np.array([x, np.nan * x + y], dtype=float)


def f_plus_minus(th) -> np.ndarray:
    """Returns a function with both plus and minus."""
    x, y = np.asarray(th, float)
    return np.array([x + y, x - y], dtype=float)


def f_large_scale(th) -> np.ndarray:
    """Map whose first coordinate lives at a very large scale."""
    x, y = np.asarray(th, float)
    return np.array([x**2 * 1e-12, x * y * 1e-6], dtype=float)


def num_jacobian(f, theta, eps=1e-5) -> np.ndarray:
    """Plain central-diff numeric Jacobian (reference)."""
    theta = np.asarray(theta, float)
    f0 = np.asarray(f(theta), float)
    m, n = f0.size, theta.size
    jac = np.empty((m, n), dtype=float)
    for j in range(n):
        tp = theta.copy()
        tm = theta.copy()
        tp[j] += eps
        tm[j] -= eps
        jac[:, j] = (np.asarray(f(tp), float) - np.asarray(f(tm), float)) / (2 * eps)
    return jac


def test_jacobian_linear_map():
    """The Jacobian of a fixed linear map equals its matrix."""
    vec = np.array([[1.0, -2.0, 0.5],
                    [0.0,  3.0, 1.0]], dtype=float)
    f = partial(f_linear_mat, vec=vec)
    theta0 = np.array([0.3, -0.7, 1.2], dtype=float)
    jac = build_jacobian(f, theta0)
    assert jac.shape == (vec.shape[0], theta0.size)
    assert np.allclose(jac, vec, atol=1e-6, rtol=0.0)


@pytest.mark.parametrize("method", ["newton", "symmetric", "second-order"])
def test_jacobian_analytic(method):
    """Test jacobian on a function with known analytic Jacobian."""
    x0, y0 = 0.4, -0.2
    jac = build_jacobian(f_analytic_2d, [x0, y0], method=method)
    jac_true = np.array([[2*x0, 0.0],
                         [0.0,  np.cos(y0)],
                         [y0,   x0]], dtype=float)
    assert jac.shape == (3, 2)
    assert np.allclose(jac, jac_true, atol=1e-6, rtol=1e-6)


def test_jacobian_matches_numeric_reference():
    """Test jacobian against plain numeric reference implementation."""
    theta0 = np.array([0.3, -0.7, 0.25], dtype=float)
    jac = build_jacobian(f_nonlinear_3d, theta0, method="second-order")
    jac_ref = num_jacobian(f_nonlinear_3d, theta0)
    assert np.allclose(jac, jac_ref, atol=1e-6, rtol=1e-6)


def test_jacobian_single_output_vector_len1():
    """Test jacobian on a function returning a length-1 vector."""
    theta0 = np.array([0.4, -0.2], dtype=float)
    jac = build_jacobian(f_len1_vector, theta0)
    assert jac.shape == (1, 2)
    assert np.allclose(jac, [[2*theta0[0], 1.0]], atol=1e-6, rtol=1e-6)


def test_jacobian_empty_theta_raises():
    """Test jacobian raises ValueError on empty x0."""
    with pytest.raises(ValueError):
        build_jacobian(f_len1_vector, np.array([]))


def test_jacobian_raises_on_scalar_output():
    """A scalar-valued function is not a vector map."""
    def f_scalar(th):
        return float(np.asarray(th, float).sum())
    with pytest.raises(DimensionMismatchError):
        build_jacobian(f_scalar, np.array([0.1, 0.2]))


def test_jacobian_raises_on_nonfinite_output():
    """Non-finite outputs at x0 raise a FloatingPointError subclass."""
    with pytest.raises(FloatingPointError) as ei:
        build_jacobian(f_nonfinite, np.array([1.0, 2.0]))
    assert isinstance(ei.value, FunctionEvaluationError)


def test_jacobian_nonfinite_allowed_when_unchecked():
    """With check_finite=False non-finite values propagate."""
    jac = build_jacobian(f_nonfinite, np.array([1.0, 2.0]), check_finite=False)
    assert np.isnan(jac[1]).all()
    assert np.allclose(jac[0], [1.0, 0.0], atol=1e-6)


def test_jacobian_does_not_modify_input():
    """Test jacobian does not modify input x0."""
    theta0 = np.array([0.1, 0.2], dtype=float)
    theta_copy = theta0.copy()
    _ = build_jacobian(f_plus_minus, theta0)
    assert np.array_equal(theta0, theta_copy)


def test_jacobian_accepts_list_and_row_vector():
    """Test jacobian accepts list and row-vector inputs."""
    jac1 = build_jacobian(f_plus_minus, [0.3, -0.7])
    jac2 = build_jacobian(f_plus_minus, np.array([[0.3, -0.7]]))
    assert jac1.shape == (2, 2)
    assert np.allclose(jac1, jac2)


def test_jacobian_scaled_steps_handle_large_coordinates():
    """Scaled steps keep the perturbation visible at large coordinates."""
    theta0 = np.array([1e9, 2.0])
    jac = build_jacobian(f_large_scale, theta0, step_sizes="scaled")
    jac_true = np.array([[2e9 * 1e-12, 0.0],
                         [2.0 * 1e-6, 1e9 * 1e-6]])
    assert np.allclose(jac, jac_true, rtol=1e-6, atol=1e-12)


def test_jacobian_explicit_step_sizes():
    """Explicit steps are forwarded to the estimator."""
    jac = build_jacobian(f_len1_vector, [1.0, 0.0], method="newton", step_sizes=0.1)
    assert jac[0, 0] == pytest.approx(2.1, rel=1e-9)


def test_jacobian_unknown_step_policy_raises():
    """Only the 'scaled' policy name is understood."""
    with pytest.raises(ValueError):
        build_jacobian(f_plus_minus, [0.3, -0.7], step_sizes="adaptive")


def test_jacobian_wraps_exception_at_x0():
    """A failure at x0 is reported like a failure at a perturbed point."""
    def f_raises(th):
        raise ZeroDivisionError("boom")
    with pytest.raises(FunctionEvaluationError) as ei:
        build_jacobian(f_raises, np.array([0.5, 1.5]))
    assert isinstance(ei.value.__cause__, ZeroDivisionError)
    assert np.array_equal(ei.value.point, [0.5, 1.5])
    assert ei.value.column is None


@pytest.mark.parametrize("method, expected_calls", [("newton", 4), ("symmetric", 5), ("second-order", 9)])
def test_jacobian_call_count_includes_baseline(method, expected_calls):
    """The baseline call at x0 adds one call to every stencil."""
    calls = []

    def f_counted(th):
        calls.append(1)
        return f_plus_minus(th)

    build_jacobian(f_counted, [0.3, -0.7], method=method)
    assert len(calls) == expected_calls
