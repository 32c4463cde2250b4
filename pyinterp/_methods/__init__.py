"""
Method selection and management.

Provides a unified interface to the exact, piecewise and fitting methods.
"""

from .base import (
    MethodBase,
    InterpolationResult,
    FitResult,
    SplineResult,
    Coefficients,
    StandardBasis,
    NewtonBasis,
)
from .exact import Vandermonde, Lagrange, DividedDifferences, Newton
from .piecewise import LinearInterpolation, LinearSpline, CubicSpline, SplineSegment
from .least_squares import LeastSquares
from .iterative import GaussNewton, LevenbergMarquardt, NewtonRaphson
from .conditioning import check_conditioning, format_conditioning_message


METHODS = {
    cls.name: cls
    for cls in (
        LinearInterpolation,
        LinearSpline,
        CubicSpline,
        Vandermonde,
        Lagrange,
        DividedDifferences,
        Newton,
        LeastSquares,
        GaussNewton,
        LevenbergMarquardt,
        NewtonRaphson,
    )
}


def get_method(method: str = 'cubic-spline') -> MethodBase:
    """
    Get an interpolation or fitting method.

    Parameters
    ----------
    method : str
        Method name:
        - 'linear': Linear interpolation (raises outside the domain)
        - 'linear-spline': Linear spline (0 outside the domain)
        - 'cubic-spline': Natural cubic spline
        - 'vandermonde': Exact polynomial, monomial coefficients
        - 'lagrange': Exact polynomial, no coefficients
        - 'divided-differences' / 'newton': Exact polynomial, Newton coefficients
        - 'least-squares': Fixed-degree least squares
        - 'gauss-newton', 'levenberg-marquardt', 'newton-raphson':
          Fixed-degree iterative fits

    Returns
    -------
    MethodBase
        Method instance

    Examples
    --------
    >>> result = get_method('cubic-spline').fit(x, y)
    >>> result(2.5)

    >>> fit = get_method('levenberg-marquardt').fit(x, y, degree=3)
    >>> fit.converged, fit.coefficients
    """
    if isinstance(method, MethodBase):
        return method

    key = str(method).strip().lower().replace('_', '-')
    try:
        return METHODS[key]()
    except KeyError:
        raise ValueError(
            f"Unknown method: '{method}'\n"
            f"Valid options: {', '.join(repr(m) for m in METHODS)}"
        ) from None


def list_available_methods() -> list:
    """List names of available methods."""
    return list(METHODS)


def print_method_info():
    """Print method information (diagnostic)."""
    print("PyInterp Methods")
    print("=" * 70)
    print(f"{'Method':<22} {'Family':<10} {'Degree':<8} {'Coefficients':<14}")
    print("-" * 70)
    for name in METHODS:
        info = get_method(name).get_method_info()
        coef = info['basis'] or '-'
        degree = 'yes' if info['requires_degree'] else 'no'
        print(f"{name:<22} {info['family']:<10} {degree:<8} {coef:<14}")
    print("-" * 70)


__all__ = [
    'get_method',
    'list_available_methods',
    'print_method_info',
    'MethodBase',
    'InterpolationResult',
    'FitResult',
    'SplineResult',
    'Coefficients',
    'StandardBasis',
    'NewtonBasis',
    'SplineSegment',
    'check_conditioning',
    'format_conditioning_message',
    'METHODS',
]


if __name__ == "__main__":
    print_method_info()
