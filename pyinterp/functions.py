"""
Functional interface to the methods.

Thin wrappers - the method classes do all the work. Each function takes
the sample abscissae and ordinates and returns the method's result,
which is callable as the interpolating function.
"""

import numpy as np

from ._methods import (
    get_method,
    InterpolationResult,
    FitResult,
    SplineResult,
    StandardBasis,
    NewtonBasis,
)
from ._core.polynomial import evaluate_polynomial, format_polynomial


def vandermonde(x, y) -> InterpolationResult:
    """Exact interpolation via the Vandermonde system (monomial coefficients)."""
    return get_method('vandermonde').fit(x, y)


def lagrange(x, y) -> InterpolationResult:
    """Exact Lagrange interpolation (no coefficients)."""
    return get_method('lagrange').fit(x, y)


def divided_differences(x, y) -> InterpolationResult:
    """Exact Newton interpolation (Newton-basis coefficients)."""
    return get_method('divided-differences').fit(x, y)


def newton(x, y) -> InterpolationResult:
    """Same as divided_differences()."""
    return get_method('newton').fit(x, y)


def linear_interpolation(x, y) -> InterpolationResult:
    """Piecewise linear interpolation; raises OutOfRangeError outside the samples."""
    return get_method('linear').fit(x, y)


def linear_spline(x, y) -> InterpolationResult:
    """Piecewise linear spline; evaluates to 0 outside the samples."""
    return get_method('linear-spline').fit(x, y)


def cubic_spline(x, y) -> SplineResult:
    """Natural cubic spline."""
    return get_method('cubic-spline').fit(x, y)


def least_squares(x, y, degree: int) -> FitResult:
    """Degree-d least squares polynomial fit."""
    return get_method('least-squares').fit(x, y, degree=degree)


def gauss_newton(x, y, degree: int, tol: float = 1e-6, max_iter: int = 100) -> FitResult:
    """Degree-d Gauss-Newton polynomial fit."""
    return get_method('gauss-newton').fit(x, y, degree=degree, tol=tol, max_iter=max_iter)


def levenberg_marquardt(
    x, y, degree: int,
    damping: float = 0.01,
    regularization: float = 0.001,
    tol: float = 1e-6,
    max_iter: int = 100,
) -> FitResult:
    """Degree-d Levenberg-Marquardt polynomial fit (fixed damping)."""
    return get_method('levenberg-marquardt').fit(
        x, y, degree=degree, damping=damping, regularization=regularization,
        tol=tol, max_iter=max_iter
    )


def newton_raphson(
    x, y, degree: int,
    ridge: float = 1e-3,
    tol: float = 1e-6,
    max_iter: int = 100,
) -> FitResult:
    """Degree-d ridge-regularized Newton-Raphson polynomial fit."""
    return get_method('newton-raphson').fit(
        x, y, degree=degree, ridge=ridge, tol=tol, max_iter=max_iter
    )


def evaluate_model(coefficients, x):
    """Evaluate monomial coefficients at x. Results are evaluated directly."""
    if isinstance(coefficients, InterpolationResult):
        return coefficients(x)
    if isinstance(coefficients, NewtonBasis):
        coefficients = coefficients.to_standard()
    if isinstance(coefficients, StandardBasis):
        coefficients = coefficients.values
    out = evaluate_polynomial(coefficients, x)
    return float(out) if np.ndim(out) == 0 else out


__all__ = [
    'vandermonde',
    'lagrange',
    'divided_differences',
    'newton',
    'linear_interpolation',
    'linear_spline',
    'cubic_spline',
    'least_squares',
    'gauss_newton',
    'levenberg_marquardt',
    'newton_raphson',
    'evaluate_model',
    'format_polynomial',
]
