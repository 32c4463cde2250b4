"""
Iterative polynomial fitters.

Gauss-Newton, Levenberg-Marquardt and regularized Newton-Raphson share
one loop:

    initialize -> Jacobian & residual -> solve -> update -> check

and stop either on convergence or after max_iter iterations. Hitting
max_iter is not an error: the last iterate is returned with
``converged=False`` and a NonConvergenceWarning is emitted.

For a polynomial model the Jacobian is the design matrix, so all three
converge to the ordinary least squares solution (Gauss-Newton in a
single step). The convergence metric differs per method and is kept
that way: Euclidean norm of the step for Gauss-Newton and
Levenberg-Marquardt, largest absolute step component for Newton-Raphson.
"""

import warnings
import numpy as np
from abc import abstractmethod

from .base import FittingMethod, FitResult, StandardBasis
from .exact import polynomial_evaluator
from .least_squares import solve_normal_equations
from .._core.exceptions import (
    SingularMatrixError,
    NonConvergenceWarning,
    IllConditionedWarning,
)
from .._core.linalg import (
    transpose,
    multiply,
    pseudo_inverse,
    gaussian_eliminate,
    condition_number,
)
from .._core.polynomial import design_matrix
from .._utils import check_samples, frozen


DEFAULT_TOL = 1e-6
DEFAULT_MAX_ITER = 100


def _check_positive(name, value):
    if not value > 0:
        raise ValueError(f"{name} must be > 0, got {value}")


def _check_non_negative(name, value):
    if not value >= 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


class IterativeFitter(FittingMethod):
    """Base class for the iterative refiners."""

    def defaults(self) -> dict:
        return {'tol': DEFAULT_TOL, 'max_iter': DEFAULT_MAX_ITER}

    @abstractmethod
    def initial_params(self, X: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Starting parameter vector."""
        pass

    @abstractmethod
    def step(self, J: np.ndarray, params: np.ndarray, y: np.ndarray, **options) -> tuple:
        """Solve for the parameter update; returns the new parameters and the step."""
        pass

    @staticmethod
    def step_size(delta: np.ndarray) -> float:
        """Convergence metric of an update."""
        return float(np.linalg.norm(delta))

    def check_options(self, **options):
        pass

    def fit(
        self,
        x,
        y,
        degree=None,
        tol: float = DEFAULT_TOL,
        max_iter: int = DEFAULT_MAX_ITER,
        **options
    ) -> FitResult:
        """
        Fit a degree-d polynomial iteratively.

        Parameters
        ----------
        x, y : array-like, shape (n,)
            Samples
        degree : int
            Polynomial degree (>= 0)
        tol : float, default=1e-6
            Convergence tolerance on the step size
        max_iter : int, default=100
            Maximum number of iterations
        **options
            Method-specific hyperparameters

        Returns
        -------
        FitResult
            ``converged`` and ``iterations`` report how the loop ended.
        """
        degree = self.check_degree(degree)
        x, y = check_samples(x, y)
        _check_positive("tol", tol)
        if isinstance(max_iter, bool) or int(max_iter) != max_iter or max_iter < 1:
            raise ValueError(f"max_iter must be an integer >= 1, got {max_iter}")
        self.check_unknown_options(options)
        self.check_options(**options)

        # Jacobian of a polynomial model is its design matrix
        J = design_matrix(x, degree)
        params = self.initial_params(J, y)

        converged = False
        iterations = 0
        for iterations in range(1, int(max_iter) + 1):
            params, delta = self.step(J, params, y, **options)
            if self.step_size(delta) < tol:
                converged = True
                break

        if not converged:
            warnings.warn(
                f"{self.name} did not converge in {max_iter} iterations "
                f"(last step {self.step_size(delta):.3e} >= tol {tol:.1e}); "
                f"returning the last iterate.",
                NonConvergenceWarning,
                stacklevel=2
            )

        return FitResult(
            evaluator=polynomial_evaluator(params),
            method=self.name,
            coefficients=StandardBasis(values=frozen(params)),
            condition_number=condition_number(J),
            degree=degree,
            converged=converged,
            iterations=iterations,
        )


class GaussNewton(IterativeFitter):
    """
    Gauss-Newton refinement started from the least squares solution.

    Solves (J'J) Δ = J'r with r = model(x) - y and updates params -= Δ.
    With a model linear in its parameters this re-solves the least
    squares problem each time, so it converges almost immediately.
    """

    name = "gauss-newton"

    def initial_params(self, X, y):
        try:
            params = solve_normal_equations(X, y)
        except SingularMatrixError:
            params = None
        if params is None or not np.all(np.isfinite(params)):
            return np.zeros(X.shape[1], dtype=np.float64)
        return params

    def step(self, J, params, y, **options):
        Jt = transpose(J)
        residuals = multiply(J, params) - y
        delta = multiply(pseudo_inverse(multiply(Jt, J)), multiply(Jt, residuals))
        return params - delta, delta


class LevenbergMarquardt(IterativeFitter):
    """
    Levenberg-Marquardt with fixed damping and Tikhonov regularization.

    Starts at zero and solves (J'J + damping * regularization * I) Δ = J'e
    with e = y - model(x), then params += Δ. The damping is not adapted
    between iterations.
    """

    name = "levenberg-marquardt"

    DEFAULT_DAMPING = 0.01
    DEFAULT_REGULARIZATION = 0.001

    def defaults(self) -> dict:
        return {
            **super().defaults(),
            'damping': self.DEFAULT_DAMPING,
            'regularization': self.DEFAULT_REGULARIZATION,
        }

    def check_options(self, damping=DEFAULT_DAMPING, regularization=DEFAULT_REGULARIZATION):
        _check_non_negative("damping", damping)
        _check_non_negative("regularization", regularization)

    def initial_params(self, X, y):
        return np.zeros(X.shape[1], dtype=np.float64)

    def step(self, J, params, y, damping=DEFAULT_DAMPING,
             regularization=DEFAULT_REGULARIZATION):
        Jt = transpose(J)
        error = y - multiply(J, params)
        H = multiply(Jt, J) + damping * (regularization * np.eye(J.shape[1]))
        delta = multiply(pseudo_inverse(H), multiply(Jt, error))
        return params + delta, delta


class NewtonRaphson(IterativeFitter):
    """
    Newton-Raphson with a ridge penalty.

    Starts at zero and solves (J'J + ridge * I) Δ = J'r with r = y - model(x)
    by Gaussian elimination with partial pivoting, then params += Δ.
    Converges when the largest absolute component of Δ is below tol.

    The system is scaled symmetrically to a unit diagonal before
    elimination; the solution is unchanged. With ridge > 0 the system is
    positive definite, so a pivot lost to rounding (e.g. x given as epoch
    milliseconds) falls back to the pseudo-inverse with an
    IllConditionedWarning instead of failing the fit.
    """

    name = "newton-raphson"

    DEFAULT_RIDGE = 1e-3

    def defaults(self) -> dict:
        return {**super().defaults(), 'ridge': self.DEFAULT_RIDGE}

    def check_options(self, ridge=DEFAULT_RIDGE):
        _check_non_negative("ridge", ridge)

    def initial_params(self, X, y):
        return np.zeros(X.shape[1], dtype=np.float64)

    def step(self, J, params, y, ridge=DEFAULT_RIDGE):
        Jt = transpose(J)
        residuals = y - multiply(J, params)
        A = multiply(Jt, J) + ridge * np.eye(J.shape[1])
        gradient = multiply(Jt, residuals)

        diagonal = np.sqrt(np.abs(np.diag(A)))
        scale = 1.0 / np.where(diagonal > 0, diagonal, 1.0)
        try:
            delta = scale * gaussian_eliminate(A * np.outer(scale, scale), scale * gradient)
        except SingularMatrixError as e:
            if not ridge > 0:
                raise
            warnings.warn(
                f"{self.name}: elimination failed on the ridge system ({e}); "
                f"using the pseudo-inverse for this step.",
                IllConditionedWarning,
                stacklevel=3
            )
            delta = multiply(pseudo_inverse(A), gradient)
        return params + delta, delta

    @staticmethod
    def step_size(delta):
        return float(np.max(np.abs(delta))) if delta.size else 0.0
