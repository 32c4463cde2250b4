"""
Test the user-facing Interpolator API and polynomial formatting.
"""

import pytest
import numpy as np
import pandas as pd

from pyinterp import (
    interpolate,
    Interpolator,
    format_polynomial,
    evaluate_model,
    StandardBasis,
    OutOfRangeError,
)


@pytest.fixture
def readings():
    """Samples of y = x^2 + 1 with one missing and one garbled row."""
    return pd.DataFrame({
        'time': [0.0, 1.0, 2.0, 3.0, np.nan, 4.0],
        'level': ['1', '2', '5', '10', '7', 'n/a'],
    })


class TestFormatPolynomial:
    """Test the polynomial string renderer."""

    def test_parabola(self):
        """Test zero terms are dropped and a leading '+' is stripped."""
        assert format_polynomial([1.0, 0.0, 1.0]) == "1.0000 + 1.0000x^2"

    def test_negative_terms(self):
        """Test sign-aware rendering."""
        assert format_polynomial([0.0, -2.0, 3.0]) == "- 2.0000x + 3.0000x^2"
        assert format_polynomial([1.5, -0.25]) == "1.5000 - 0.2500x"

    def test_rounding(self):
        """Test 4-decimal rounding."""
        assert format_polynomial([0.0, 1.23456]) == "1.2346x"

    def test_all_zero(self):
        """Test an all-zero vector renders as '0'."""
        assert format_polynomial([0.0, 0.0, 0.0]) == "0"

    def test_empty(self):
        """Test an empty vector gets an explicit message."""
        assert format_polynomial([]) == "Could not generate the polynomial"

    def test_standard_basis(self):
        """Test tagged monomial coefficients are accepted."""
        coef = StandardBasis(values=np.array([2.0, 0.0, 0.0, -1.0]))
        assert format_polynomial(coef) == "2.0000 - 1.0000x^3"


class TestEvaluateModel:
    """Test evaluate_model."""

    def test_scalar_and_array(self):
        """Test monomial evaluation at scalars and arrays."""
        assert evaluate_model([1.0, 0.0, 1.0], 2.0) == pytest.approx(5.0)
        np.testing.assert_allclose(evaluate_model([1.0, 2.0], np.array([0.0, 1.0])), [1.0, 3.0])

    def test_empty_coefficients(self):
        """Test an empty vector evaluates to zero."""
        assert evaluate_model([], 3.0) == 0.0


class TestInterpolatorArrays:
    """Test Interpolator with array input."""

    def test_default_is_cubic_spline(self):
        """Test the default method."""
        curve = interpolate([0.0, 1.0, 2.0], [1.0, 2.0, 5.0])
        assert curve.method.name == 'cubic-spline'
        assert curve.coef is None
        assert curve.converged is None
        np.testing.assert_allclose(curve.fitted_values, [1.0, 2.0, 5.0])

    def test_least_squares(self):
        """Test fitted statistics of an exact fit."""
        curve = interpolate([0.0, 1.0, 2.0], [1.0, 2.0, 5.0], method='least-squares', degree=2)
        np.testing.assert_allclose(curve.coef.values, [1.0, 0.0, 1.0], atol=1e-9)
        assert list(curve.coef.index) == ['x^0', 'x^1', 'x^2']
        assert curve.sse == pytest.approx(0.0, abs=1e-15)
        assert curve.r_squared == pytest.approx(1.0)
        assert curve.polynomial() == "1.0000 + 1.0000x^2"

    def test_iterative_fit(self):
        """Test convergence status is exposed."""
        np.random.seed(42)
        x = np.linspace(-1, 1, 25)
        y = 3 - x + 0.01 * np.random.randn(25)
        curve = interpolate(x, y, method='newton-raphson', degree=1)
        assert curve.converged is True
        np.testing.assert_allclose(curve.coef.values, [3.0, -1.0], atol=0.02)

    def test_newton_polynomial_string(self):
        """Test Newton coefficients are converted before formatting."""
        curve = interpolate([0.0, 1.0, 2.0], [1.0, 2.0, 5.0], method='divided-differences')
        assert curve.coef is None
        assert curve.polynomial() == "1.0000 + 1.0000x^2"

    def test_lagrange_polynomial_string(self):
        """Test methods without coefficients."""
        curve = interpolate([0.0, 1.0, 2.0], [1.0, 2.0, 5.0], method='lagrange')
        assert curve.polynomial() == "Could not generate the polynomial"
        assert curve.predict(1.5) == pytest.approx(3.25)

    def test_degree_rejected_for_interpolators(self):
        """Test degree is only accepted by fitting methods."""
        with pytest.raises(ValueError, match="does not take a degree"):
            interpolate([0.0, 1.0], [0.0, 1.0], method='linear', degree=1)

    def test_degree_required_for_fits(self):
        """Test fitting methods need a degree."""
        with pytest.raises(ValueError, match="degree is required"):
            interpolate([0.0, 1.0], [0.0, 1.0], method='least-squares')

    def test_predict_out_of_range(self):
        """Test the linear method's domain check reaches predict()."""
        curve = interpolate([0.0, 10.0], [0.0, 10.0], method='linear')
        with pytest.raises(OutOfRangeError):
            curve.predict(15.0)
        assert interpolate([0.0, 10.0], [0.0, 10.0], method='linear-spline').predict(15.0) == 0.0

    def test_length_mismatch(self):
        """Test x and y must match."""
        with pytest.raises(ValueError, match="same length"):
            Interpolator([0.0, 1.0, 2.0], [0.0, 1.0])

    def test_empty(self):
        """Test an empty sample set is rejected."""
        with pytest.raises(ValueError, match="At least 1"):
            Interpolator([], [])

    def test_conditioning(self):
        """Test conditioning reports for polynomial methods only."""
        x = [0.0, 1.0, 2.0]
        y = [1.0, 2.0, 5.0]
        assert interpolate(x, y, method='linear').conditioning() is None
        report = interpolate(x, y, method='vandermonde').conditioning()
        assert report['rank'] == 3

    def test_repr(self):
        """Test repr."""
        curve = interpolate([0.0, 1.0], [0.0, 1.0], method='linear')
        assert repr(curve) == "Interpolator(method='linear', n=2)"


class TestInterpolatorDataFrame:
    """Test Interpolator with pandas input."""

    def test_drops_unusable_rows(self, readings):
        """Test missing and non-numeric rows are dropped."""
        curve = interpolate(x='time', y='level', data=readings, method='vandermonde')
        assert curve.n_obs == 4
        assert curve.n_dropped == 2
        np.testing.assert_allclose(curve.x_values, [0.0, 1.0, 2.0, 3.0])
        np.testing.assert_allclose(curve.coef.values, [1.0, 0.0, 1.0, 0.0], atol=1e-9)
        assert curve.coef.name == 'level'

    def test_requires_data(self):
        """Test column names need a DataFrame."""
        with pytest.raises(ValueError, match="Must provide data"):
            interpolate(x='time', y='level')

    def test_predict_dataframe(self, readings):
        """Test prediction from a DataFrame column."""
        curve = interpolate(x='time', y='level', data=readings, method='lagrange')
        new = pd.DataFrame({'time': [0.5, 2.5]})
        np.testing.assert_allclose(curve.predict(new), [1.25, 7.25])

    def test_datetime_column(self):
        """Test datetimes become epoch milliseconds."""
        data = pd.DataFrame({
            'date': pd.to_datetime(['2024-01-01', '2024-01-02', '2024-01-04']),
            'value': [1.0, 2.0, 4.0],
        })
        curve = interpolate(x='date', y='value', data=data, method='linear')
        np.testing.assert_allclose(np.diff(curve.x_values), [86_400_000.0, 172_800_000.0])
        assert curve.x_values[0] == pd.Timestamp('2024-01-01').value / 1e6
        assert curve.predict(curve.x_values[0] + 43_200_000.0) == pytest.approx(1.5)

    def test_evaluate_grid(self, readings):
        """Test dense evaluation over the sample domain."""
        curve = interpolate(x='time', y='level', data=readings, method='cubic-spline')

        grid = curve.evaluate_grid(num=7)
        assert list(grid.columns) == ['x', 'y']
        assert len(grid) == 7
        assert grid['x'].iloc[0] == 0.0 and grid['x'].iloc[-1] == 3.0

        stepped = curve.evaluate_grid(step=0.5)
        np.testing.assert_allclose(stepped['x'], np.arange(0.0, 3.01, 0.5))

        with pytest.raises(ValueError, match="step"):
            curve.evaluate_grid(step=0.0)

    def test_summary(self, readings, capsys):
        """Test the printed report."""
        curve = interpolate(x='time', y='level', data=readings,
                            method='levenberg-marquardt', degree=2)
        curve.summary()
        out = capsys.readouterr().out
        assert 'INTERPOLATION RESULTS' in out
        assert 'levenberg-marquardt' in out
        assert 'Rows dropped:           2' in out
        assert 'Status:                  converged' in out
        assert 'Polynomial:' in out
