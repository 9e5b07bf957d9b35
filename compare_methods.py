"""Quick comparison of the differentiation methods in JacobiKit.

Prints the maximum absolute Jacobian error of each method against the
analytic Jacobian over a sweep of step sizes, showing where truncation
error gives way to cancellation error.

Run with:
    python compare_methods.py
"""

from __future__ import annotations

from typing import Any

import numpy as np

from jacobikit import DifferentiationMethod, JacobianEstimator, optimal_step_size


def max_abs_err(a: np.ndarray, b: np.ndarray) -> float:
    """Largest absolute entry-wise difference."""
    return float(np.max(np.abs(np.asarray(a) - np.asarray(b))))


def main() -> None:
    """Main comparison routine."""
    # Maps to test: name -> (f, analytic jacobian, n, m, x0)
    cases: list[dict[str, Any]] = [
        {
            "name": "[x1^2, x1*x2]",
            "f": lambda x: np.array([x[0] ** 2, x[0] * x[1]]),
            "jac": lambda x: np.array([[2 * x[0], 0.0], [x[1], x[0]]]),
            "dims": (2, 2),
            "x0": np.array([1.5, -0.5]),
        },
        {
            "name": "[sin(a) e^b, cos(ab)]",
            "f": lambda x: np.array([np.sin(x[0]) * np.exp(x[1]), np.cos(x[0] * x[1])]),
            "jac": lambda x: np.array(
                [
                    [np.cos(x[0]) * np.exp(x[1]), np.sin(x[0]) * np.exp(x[1])],
                    [-x[1] * np.sin(x[0] * x[1]), -x[0] * np.sin(x[0] * x[1])],
                ]
            ),
            "dims": (2, 2),
            "x0": np.array([0.7, 0.3]),
        },
        {
            "name": "Runge 1 / (1 + 25 x^2) per coordinate",
            "f": lambda x: 1.0 / (1.0 + 25.0 * x ** 2),
            "jac": lambda x: np.diag(-50.0 * x / (1.0 + 25.0 * x ** 2) ** 2),
            "dims": (3, 3),
            "x0": np.array([-0.9, 0.2, 0.5]),
        },
    ]

    steps = [1e-1, 1e-2, 1e-3, 1e-4, 1e-6, 1e-8, 1e-10]
    line = "-" * 80

    for case in cases:
        n, m = case["dims"]
        x0 = case["x0"]
        truth = case["jac"](x0)

        print(line)
        print(f"Function: {case['name']!r} at x0 = {x0.tolist()}")
        print(line)
        print("  {:>10s}".format("h") + "".join(
            f"  {method.name:>22s}" for method in DifferentiationMethod
        ))

        estimators = {
            method: JacobianEstimator(case["f"], n, m, method=method)
            for method in DifferentiationMethod
        }
        for h in steps:
            row = f"  {h:10.1e}"
            for method, est in estimators.items():
                est.step_sizes = h
                row += f"  {max_abs_err(est.evaluate(x0), truth):22.10e}"
            print(row)

        row = "  {:>10s}".format("optimal")
        for method, est in estimators.items():
            est.step_sizes = optimal_step_size(method)
            row += f"  {max_abs_err(est.evaluate(x0), truth):22.10e}"
        print(row)
        print()


if __name__ == "__main__":
    main()
