"""
Linear least squares polynomial fit via the normal equations.
"""

import numpy as np

from .base import FittingMethod, FitResult, StandardBasis
from .exact import nan_result, polynomial_evaluator
from .._core.exceptions import SingularMatrixError
from .._core.linalg import transpose, multiply, pseudo_inverse, condition_number
from .._core.polynomial import design_matrix
from .._utils import check_samples, frozen


def solve_normal_equations(X: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Solve (X'X) c = X'y.

    Uses the SVD pseudo-inverse of X'X, so rank-deficient problems
    (degree >= n) return the minimum-norm solution, which interpolates
    the samples.

    Raises
    ------
    SingularMatrixError
        If the pseudo-inverse cannot be computed.
    """
    Xt = transpose(X)
    return multiply(pseudo_inverse(multiply(Xt, X)), multiply(Xt, y))


class LeastSquares(FittingMethod):
    """
    Fixed-degree polynomial least squares.

    Deterministic single pass, no iteration.
    """

    name = "least-squares"

    def fit(self, x, y, degree=None, **options) -> FitResult:
        self.check_unknown_options(options)
        degree = self.check_degree(degree)
        x, y = check_samples(x, y)

        X = design_matrix(x, degree)
        cond = condition_number(X)

        try:
            if degree + 1 >= len(x):
                # Interpolation regime: solve X c = y directly, which gives the
                # minimum-norm interpolant when X is wide
                coef = multiply(pseudo_inverse(X), y)
            else:
                coef = solve_normal_equations(X, y)
        except SingularMatrixError as e:
            failed = nan_result(self.name, str(e), condition_number=cond)
            return FitResult(**vars(failed), degree=degree)

        if not np.all(np.isfinite(coef)):
            failed = nan_result(self.name, "non-finite coefficients", condition_number=cond)
            return FitResult(**vars(failed), degree=degree)

        return FitResult(
            evaluator=polynomial_evaluator(coef),
            method=self.name,
            coefficients=StandardBasis(values=frozen(coef)),
            condition_number=cond,
            degree=degree,
        )
