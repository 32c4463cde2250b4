"""
PyInterp: polynomial interpolation and curve fitting on NumPy/SciPy.

Copyright (C) 2024 SGCX
Licensed under GPL-3.0
"""

__version__ = "1.0.0"

# Import main user-facing API
from .interpolator import interpolate, Interpolator
from .functions import (
    vandermonde,
    lagrange,
    divided_differences,
    newton,
    linear_interpolation,
    linear_spline,
    cubic_spline,
    least_squares,
    gauss_newton,
    levenberg_marquardt,
    newton_raphson,
    evaluate_model,
    format_polynomial,
)
from ._core.exceptions import (
    InterpolationError,
    DimensionMismatchError,
    SingularMatrixError,
    OutOfRangeError,
    NonConvergenceWarning,
    IllConditionedWarning,
)

# Import method utilities (for advanced users)
from ._methods import (
    get_method,
    list_available_methods,
    InterpolationResult,
    FitResult,
    StandardBasis,
    NewtonBasis,
)

__all__ = [
    'interpolate',
    'Interpolator',
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
    'InterpolationError',
    'DimensionMismatchError',
    'SingularMatrixError',
    'OutOfRangeError',
    'NonConvergenceWarning',
    'IllConditionedWarning',
    'get_method',
    'list_available_methods',
    'InterpolationResult',
    'FitResult',
    'StandardBasis',
    'NewtonBasis',
]
