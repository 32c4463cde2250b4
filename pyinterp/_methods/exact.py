"""
Exact polynomial interpolators.

All three methods build the unique polynomial of degree n-1 through
n samples with distinct x. They differ in representation:

- Vandermonde: monomial coefficients from a pseudo-inverse solve
- Lagrange: no coefficients, basis polynomials evaluated on every call
- Divided differences: Newton-form coefficients, O(n) evaluation
"""

import warnings
import numpy as np

from .base import (
    ExactMethod,
    InterpolationResult,
    StandardBasis,
    NewtonBasis,
)
from .conditioning import check_conditioning
from .._core.exceptions import SingularMatrixError, IllConditionedWarning
from .._core.linalg import pseudo_inverse, multiply
from .._core.polynomial import design_matrix, evaluate_polynomial
from .._utils import check_samples, check_distinct, frozen, scalar_or_array


def nan_result(method: str, reason: str, condition_number=None):
    """
    Degenerate result for a failed solve.

    The evaluator always returns NaN and the coefficient vector is empty.
    """
    warnings.warn(
        f"{method} interpolation failed ({reason}); "
        f"returning a NaN evaluator. Check result.valid before use.",
        IllConditionedWarning,
        stacklevel=3
    )

    @scalar_or_array
    def evaluator(x):
        return np.full(x.shape, np.nan)

    return InterpolationResult(
        evaluator=evaluator,
        method=method,
        coefficients=StandardBasis(values=np.empty(0, dtype=np.float64)),
        condition_number=condition_number,
        valid=False,
    )


def polynomial_evaluator(coefficients: np.ndarray):
    """Evaluator closed over a read-only monomial coefficient vector."""
    coefficients = frozen(coefficients)

    @scalar_or_array
    def evaluator(x):
        return evaluate_polynomial(coefficients, x)

    return evaluator


class Vandermonde(ExactMethod):
    """
    Interpolation by solving the Vandermonde system X c = y.

    X[i, j] = x_i ** j for j = 0..n-1. The system is solved with an
    SVD pseudo-inverse; a numerically singular X (e.g. repeated x)
    degrades to a NaN evaluator instead of raising.
    """

    name = "vandermonde"
    basis = "standard"

    def fit(self, x, y, **options) -> InterpolationResult:
        self.check_unknown_options(options)
        x, y = check_samples(x, y)
        n = len(x)

        report = check_conditioning(x, n - 1)
        cond = report['condition_number']
        if report['singular']:
            return nan_result(
                self.name,
                f"singular Vandermonde matrix, rank {report['rank']} < {n}",
                condition_number=cond,
            )

        X = design_matrix(x, n - 1)
        try:
            coef = multiply(pseudo_inverse(X), y)
        except SingularMatrixError as e:
            return nan_result(self.name, str(e), condition_number=cond)

        if not np.all(np.isfinite(coef)):
            return nan_result(self.name, "non-finite coefficients", condition_number=cond)

        return InterpolationResult(
            evaluator=polynomial_evaluator(coef),
            method=self.name,
            coefficients=StandardBasis(values=frozen(coef)),
            condition_number=cond,
        )


class Lagrange(ExactMethod):
    """
    Lagrange interpolation.

    Evaluates sum_i y_i L_i(x) with L_i(x) = prod_{j != i} (x - x_j) / (x_i - x_j)
    directly on every call, O(n²) per point. No coefficient vector is
    produced.
    """

    name = "lagrange"

    def fit(self, x, y, **options) -> InterpolationResult:
        self.check_unknown_options(options)
        x, y = check_samples(x, y)
        check_distinct(x)
        xs = frozen(x)
        ys = frozen(y)
        n = len(xs)

        @scalar_or_array
        def evaluator(t):
            total = np.zeros(t.shape, dtype=np.float64)
            for i in range(n):
                basis = np.ones(t.shape, dtype=np.float64)
                for j in range(n):
                    if i != j:
                        basis *= (t - xs[j]) / (xs[i] - xs[j])
                total += ys[i] * basis
            return total

        return InterpolationResult(
            evaluator=evaluator,
            method=self.name,
            coefficients=None,
        )


def divided_difference_table(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Triangular divided-difference table.

    f[i, 0] = y_i
    f[i, j] = (f[i+1, j-1] - f[i, j-1]) / (x_{i+j} - x_i)

    Entries below the anti-diagonal (i + j >= n) are zero.
    """
    n = len(x)
    f = np.zeros((n, n), dtype=np.float64)
    f[:, 0] = y
    for j in range(1, n):
        f[:n - j, j] = (f[1:n - j + 1, j - 1] - f[:n - j, j - 1]) / (x[j:] - x[:n - j])
    return f


class DividedDifferences(ExactMethod):
    """
    Newton interpolation from a divided-difference table.

    The table is built once (O(n²)); evaluation uses the nested Newton
    form in O(n). The exposed coefficients are the first table row,
    i.e. Newton-basis coefficients over the sample nodes, NOT monomial
    coefficients. Use ``result.coefficients.to_standard()`` to convert.
    """

    name = "divided-differences"
    basis = "newton"

    def fit(self, x, y, **options) -> InterpolationResult:
        self.check_unknown_options(options)
        x, y = check_samples(x, y)
        check_distinct(x)
        xs = frozen(x)
        table = frozen(divided_difference_table(xs, y))
        top = frozen(table[0])
        n = len(xs)

        @scalar_or_array
        def evaluator(t):
            result = np.full(t.shape, top[0], dtype=np.float64)
            term = np.ones(t.shape, dtype=np.float64)
            for i in range(1, n):
                term = term * (t - xs[i - 1])
                result = result + top[i] * term
            return result

        return InterpolationResult(
            evaluator=evaluator,
            method=self.name,
            coefficients=NewtonBasis(values=top, nodes=xs),
        )


class Newton(DividedDifferences):
    """Alias of DividedDifferences under its conventional name."""

    name = "newton"
