"""
Core algorithms (method-agnostic).
"""

from .exceptions import (
    InterpolationError,
    DimensionMismatchError,
    SingularMatrixError,
    OutOfRangeError,
    NonConvergenceWarning,
    IllConditionedWarning,
)
from .linalg import (
    transpose,
    multiply,
    condition_number,
    inverse,
    pseudo_inverse,
    gaussian_eliminate,
    tridiagonal_solve,
)
from .polynomial import (
    design_matrix,
    evaluate_polynomial,
    residual_sum_of_squares,
    format_polynomial,
)

__all__ = [
    "InterpolationError",
    "DimensionMismatchError",
    "SingularMatrixError",
    "OutOfRangeError",
    "NonConvergenceWarning",
    "IllConditionedWarning",
    "transpose",
    "multiply",
    "condition_number",
    "inverse",
    "pseudo_inverse",
    "gaussian_eliminate",
    "tridiagonal_solve",
    "design_matrix",
    "evaluate_polynomial",
    "residual_sum_of_squares",
    "format_polynomial",
]
