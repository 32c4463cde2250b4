"""
Test the curve-fitting engine (least squares and iterative refiners).
"""

import warnings

import pytest
import numpy as np
import pandas as pd
from numpy.polynomial import polynomial as P

from pyinterp import (
    least_squares,
    gauss_newton,
    levenberg_marquardt,
    newton_raphson,
    evaluate_model,
    get_method,
    FitResult,
    NonConvergenceWarning,
    IllConditionedWarning,
    SingularMatrixError,
    interpolate,
)
from pyinterp._core.polynomial import residual_sum_of_squares
from pyinterp._methods.iterative import GaussNewton, LevenbergMarquardt, NewtonRaphson


@pytest.fixture
def noisy_quadratic():
    """y = 1 + 2x - 0.5x^2 + noise on [-1, 1]."""
    np.random.seed(42)
    x = np.linspace(-1, 1, 30)
    y = 1 + 2 * x - 0.5 * x ** 2 + 0.05 * np.random.randn(len(x))
    return x, y


ITERATIVE_FITS = [gauss_newton, levenberg_marquardt, newton_raphson]


class TestLeastSquares:
    """Test linear least squares via the normal equations."""

    def test_parabola_coefficients(self):
        """Test y = x^2 + 1 with degree 2 yields [1, 0, 1]."""
        result = least_squares([0.0, 1.0, 2.0], [1.0, 2.0, 5.0], degree=2)
        assert isinstance(result, FitResult)
        np.testing.assert_allclose(result.coefficient_vector, [1.0, 0.0, 1.0], atol=1e-9)
        assert result.degree == 2
        assert result.converged and result.iterations == 0

    def test_matches_numpy_polyfit(self, noisy_quadratic):
        """Test against numpy.polynomial.polynomial.polyfit."""
        x, y = noisy_quadratic
        result = least_squares(x, y, degree=2)
        np.testing.assert_allclose(result.coefficient_vector, P.polyfit(x, y, 2), atol=1e-9)

    @pytest.mark.parametrize("extra", [0, 1])
    def test_interpolation_regime(self, extra):
        """Test degree >= n-1 passes through every sample."""
        x = np.array([-1.0, 0.0, 0.5, 1.0])
        y = np.array([2.0, -1.0, 0.5, 3.0])
        result = least_squares(x, y, degree=len(x) - 1 + extra)
        assert len(result.coefficient_vector) == len(x) + extra
        np.testing.assert_allclose(result(x), y, atol=1e-9)

    def test_local_optimality(self, noisy_quadratic):
        """Test random perturbations never lower the residual sum of squares."""
        x, y = noisy_quadratic
        coef = least_squares(x, y, degree=2).coefficient_vector
        best = residual_sum_of_squares(coef, x, y)

        rng = np.random.RandomState(0)
        for _ in range(50):
            perturbed = coef + 1e-3 * rng.randn(len(coef))
            assert residual_sum_of_squares(perturbed, x, y) >= best

    def test_constant_fit(self, noisy_quadratic):
        """Test degree 0 gives the mean."""
        x, y = noisy_quadratic
        result = least_squares(x, y, degree=0)
        np.testing.assert_allclose(result.coefficient_vector, [np.mean(y)])

    @pytest.mark.parametrize("degree", [None, -1, 1.5, True])
    def test_invalid_degree(self, degree):
        """Test degree validation."""
        with pytest.raises(ValueError, match="degree"):
            get_method('least-squares').fit([0.0, 1.0], [0.0, 1.0], degree=degree)


class TestIterativeFits:
    """Properties shared by Gauss-Newton, Levenberg-Marquardt and Newton-Raphson."""

    @pytest.mark.parametrize("fit", ITERATIVE_FITS)
    def test_converges_to_least_squares(self, fit, noisy_quadratic):
        """Test a well-conditioned problem converges to the OLS solution."""
        x, y = noisy_quadratic
        result = fit(x, y, degree=2)
        assert result.converged
        assert result.status == "converged"
        assert 1 <= result.iterations < 100
        np.testing.assert_allclose(
            result.coefficient_vector, P.polyfit(x, y, 2), atol=1e-5
        )

    @pytest.mark.parametrize("fit", ITERATIVE_FITS)
    def test_no_worse_than_initial_guess(self, fit, noisy_quadratic):
        """Test the final residual does not exceed that of the starting point."""
        x, y = noisy_quadratic
        result = fit(x, y, degree=2)
        final = residual_sum_of_squares(result.coefficient_vector, x, y)

        if fit is gauss_newton:
            start = least_squares(x, y, degree=2).coefficient_vector
        else:
            start = np.zeros(3)
        assert final <= residual_sum_of_squares(start, x, y) + 1e-12

    @pytest.mark.parametrize("fit", ITERATIVE_FITS)
    def test_evaluator_matches_coefficients(self, fit, noisy_quadratic):
        """Test result(x) equals evaluate_model(coefficients, x)."""
        x, y = noisy_quadratic
        result = fit(x, y, degree=2)
        t = np.linspace(-2, 2, 9)
        np.testing.assert_allclose(result(t), evaluate_model(result.coefficient_vector, t))
        np.testing.assert_allclose(result(t), evaluate_model(result, t))

    def test_max_iterations_reached(self, noisy_quadratic):
        """Test exhausting max_iter warns and returns the last iterate."""
        x, y = noisy_quadratic
        with pytest.warns(NonConvergenceWarning, match="did not converge"):
            result = levenberg_marquardt(x, y, degree=2, max_iter=1)

        assert not result.converged
        assert result.status == "max_iterations_reached"
        assert result.iterations == 1
        # Best-effort parameters are still usable
        assert np.all(np.isfinite(result.coefficient_vector))
        assert result.valid

    def test_converged_fit_does_not_warn(self, noisy_quadratic):
        """Test no warning on a normal run."""
        x, y = noisy_quadratic
        with warnings.catch_warnings():
            warnings.simplefilter("error", NonConvergenceWarning)
            newton_raphson(x, y, degree=2)

    def test_gauss_newton_immediate(self, noisy_quadratic):
        """Test Gauss-Newton started from least squares stops after one step."""
        x, y = noisy_quadratic
        assert gauss_newton(x, y, degree=2).iterations == 1

    @pytest.mark.parametrize("option", [
        {'tol': 0.0},
        {'tol': -1e-6},
        {'max_iter': 0},
        {'max_iter': 2.5},
    ])
    def test_invalid_loop_options(self, option, noisy_quadratic):
        """Test tolerance and iteration limits are validated."""
        x, y = noisy_quadratic
        with pytest.raises(ValueError):
            get_method('gauss-newton').fit(x, y, degree=2, **option)

    def test_invalid_penalties(self, noisy_quadratic):
        """Test negative regularization is rejected."""
        x, y = noisy_quadratic
        with pytest.raises(ValueError, match="damping"):
            levenberg_marquardt(x, y, degree=2, damping=-1.0)
        with pytest.raises(ValueError, match="regularization"):
            levenberg_marquardt(x, y, degree=2, regularization=-1.0)
        with pytest.raises(ValueError, match="ridge"):
            newton_raphson(x, y, degree=2, ridge=-1.0)


class TestConvergenceMetrics:
    """Each method keeps its own convergence metric."""

    def test_euclidean_norm(self):
        """Test Gauss-Newton and Levenberg-Marquardt use the 2-norm."""
        delta = np.array([3.0, -4.0])
        assert GaussNewton.step_size(delta) == pytest.approx(5.0)
        assert LevenbergMarquardt.step_size(delta) == pytest.approx(5.0)

    def test_max_abs_component(self):
        """Test Newton-Raphson uses the largest absolute component."""
        assert NewtonRaphson.step_size(np.array([3.0, -4.0])) == pytest.approx(4.0)


class TestRegularization:
    """Test ridge and Tikhonov penalties."""

    def test_newton_raphson_ridge_handles_repeated_x(self):
        """Test the ridge keeps a rank-deficient problem solvable."""
        x = np.ones(4)
        y = np.array([1.0, 2.0, 3.0, 4.0])
        result = newton_raphson(x, y, degree=2)
        assert result(1.0) == pytest.approx(np.mean(y), abs=1e-3)

    def test_newton_raphson_without_ridge_singular(self):
        """Test a zero ridge on a singular problem fails in elimination."""
        x = np.ones(4)
        y = np.array([1.0, 2.0, 3.0, 4.0])
        with pytest.raises(SingularMatrixError):
            newton_raphson(x, y, degree=2, ridge=0.0)

    def test_newton_raphson_epoch_milliseconds(self):
        """Test the ridge fit survives dates converted to epoch milliseconds."""
        data = pd.DataFrame({
            't': pd.date_range('2024-01-01', periods=30),
            'v': np.linspace(0.0, 1.0, 30) ** 2,
        })
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', NonConvergenceWarning)
            warnings.simplefilter('ignore', IllConditionedWarning)
            curve = interpolate('t', 'v', data=data, method='newton-raphson', degree=2)

        assert curve.result.valid
        assert curve.result.iterations >= 1
        assert np.all(np.isfinite(curve.result.coefficient_vector))
        assert np.all(np.isfinite(curve.fitted_values))

    def test_newton_raphson_badly_scaled_abscissae(self):
        """Test raw epoch-millisecond values go through the array interface too."""
        x = 1.7e12 + 8.64e7 * np.arange(30.0)
        y = np.linspace(0.0, 1.0, 30)
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', NonConvergenceWarning)
            warnings.simplefilter('ignore', IllConditionedWarning)
            result = newton_raphson(x, y, degree=2)
        assert np.all(np.isfinite(result.coefficient_vector))

    def test_method_defaults(self):
        """Test documented default hyperparameters."""
        lm_info = get_method('levenberg-marquardt').get_method_info()
        assert lm_info['defaults'] == {
            'tol': 1e-6, 'max_iter': 100, 'damping': 0.01, 'regularization': 0.001
        }
        nr_info = get_method('newton-raphson').get_method_info()
        assert nr_info['defaults'] == {'tol': 1e-6, 'max_iter': 100, 'ridge': 1e-3}
        gn_info = get_method('gauss-newton').get_method_info()
        assert gn_info['defaults'] == {'tol': 1e-6, 'max_iter': 100}
