"""
Interpolation and curve fitting with a pandas-friendly interface.

This is the user-facing API: pick a method, hand over samples, get a curve.
"""

import numpy as np
import pandas as pd
from typing import Optional, Union

from ._methods import get_method, StandardBasis, check_conditioning
from ._core.polynomial import format_polynomial
from ._utils import check_samples


def _column_values(series: pd.Series) -> np.ndarray:
    """Numeric view of a column; datetimes become epoch milliseconds."""
    if pd.api.types.is_datetime64_any_dtype(series):
        elapsed = series - pd.Timestamp(0, tz=series.dt.tz)
        return (elapsed / pd.Timedelta(milliseconds=1)).to_numpy(dtype=np.float64)
    return pd.to_numeric(series, errors='coerce').to_numpy(dtype=np.float64)


class Interpolator:
    """
    Build a curve through (x, y) samples with a chosen method.

    Examples
    --------
    >>> import pandas as pd
    >>> from pyinterp import interpolate
    >>>
    >>> data = pd.read_csv('readings.csv')
    >>>
    >>> # Natural cubic spline through the readings
    >>> curve = interpolate(x='time', y='temperature', data=data)
    >>> curve.predict([1.5, 2.5])
    >>>
    >>> # Degree-3 least squares fit
    >>> fit = interpolate(x='time', y='temperature', data=data,
    ...                   method='least-squares', degree=3)
    >>> fit.summary()
    >>> fit.coef          # Named coefficients
    >>> fit.polynomial()  # '1.0000 + 0.5000x - 0.0100x^3'
    """

    def __init__(
        self,
        x: Union[str, np.ndarray],
        y: Union[str, np.ndarray],
        data: Optional[pd.DataFrame] = None,
        method: str = 'cubic-spline',
        degree: Optional[int] = None,
        **options
    ):
        """
        Fit the curve.

        Parameters
        ----------
        x : str or array
            Sample abscissae
            - If string: column name in data
            - If array: numeric values
        y : str or array
            Sample ordinates
            - If string: column name in data
            - If array: numeric values
        data : DataFrame, optional
            Dataset containing x and y columns. Non-numeric or missing
            entries are coerced to NaN and those rows are dropped.
        method : str
            Method name, see ``list_available_methods()``
        degree : int, optional
            Polynomial degree (fitting methods only)
        **options
            Method hyperparameters (tol, max_iter, damping,
            regularization, ridge). Names the method does not take
            raise ValueError.
        """
        if isinstance(x, str) or isinstance(y, str):
            if data is None:
                raise ValueError("Must provide data when x or y is a column name")
            self.x_name = x if isinstance(x, str) else 'x'
            self.y_name = y if isinstance(y, str) else 'y'
            x_values = _column_values(data[x]) if isinstance(x, str) else np.asarray(x, dtype=np.float64)
            y_values = _column_values(data[y]) if isinstance(y, str) else np.asarray(y, dtype=np.float64)

            # Drop rows the kernel cannot use
            x_values, y_values = check_samples(x_values, y_values, min_samples=0)
            keep = np.isfinite(x_values) & np.isfinite(y_values)
            x_values, y_values = x_values[keep], y_values[keep]
            self.n_dropped = int(np.sum(~keep))
        else:
            self.x_name = 'x'
            self.y_name = 'y'
            x_values, y_values = x, y
            self.n_dropped = 0

        self.x_values, self.y_values = check_samples(x_values, y_values)
        self.n_obs = len(self.x_values)

        self.method = get_method(method)
        self.degree = degree
        if self.method.requires_degree:
            self.result = self.method.fit(self.x_values, self.y_values, degree=degree, **options)
        else:
            if degree is not None:
                raise ValueError(f"Method '{self.method.name}' does not take a degree")
            self.result = self.method.fit(self.x_values, self.y_values, **options)

        self._compute_statistics()

    def _compute_statistics(self):
        """Fitted values, residuals and goodness of fit on the samples."""
        self.fitted_values = np.asarray(self.result(self.x_values), dtype=np.float64)
        self.residuals = self.y_values - self.fitted_values
        self.sse = float(np.sum(self.residuals ** 2))

        tss = float(np.sum((self.y_values - np.mean(self.y_values)) ** 2))
        self.r_squared = 1 - (self.sse / tss) if tss > 0 else np.nan

    @property
    def coefficients(self):
        """Tagged coefficients of the result (None if the method has none)."""
        return self.result.coefficients

    @property
    def coef(self) -> Optional[pd.Series]:
        """Named monomial coefficients (pandas Series), or None."""
        coefficients = self.result.coefficients
        if not isinstance(coefficients, StandardBasis) or len(coefficients) == 0:
            return None
        index = [f'x^{i}' for i in range(len(coefficients))]
        return pd.Series(np.asarray(coefficients.values), index=index, name=self.y_name)

    @property
    def converged(self) -> Optional[bool]:
        """Convergence flag for iterative fits, None otherwise."""
        return getattr(self.result, 'converged', None)

    def polynomial(self) -> str:
        """Human-readable polynomial, e.g. '1.0000 + 1.0000x^2'."""
        coefficients = self.result.coefficients
        if coefficients is None:
            return format_polynomial([])
        if not isinstance(coefficients, StandardBasis):
            coefficients = coefficients.to_standard()
        return format_polynomial(coefficients)

    def conditioning(self) -> Optional[dict]:
        """Conditioning report for polynomial methods, None for piecewise ones."""
        if self.method.family == 'piecewise':
            return None
        degree = self.degree if self.method.requires_degree else self.n_obs - 1
        return check_conditioning(self.x_values, degree)

    def predict(self, newdata: Union[pd.DataFrame, np.ndarray, float]):
        """
        Evaluate the curve at new x values.

        Parameters
        ----------
        newdata : DataFrame, array or float
            - If DataFrame: must have a column matching self.x_name
            - Otherwise: x values

        Returns
        -------
        float or array
            Predicted values
        """
        if isinstance(newdata, pd.DataFrame):
            newdata = _column_values(newdata[self.x_name])
        return self.result(newdata)

    def evaluate_grid(self, num: int = 200, step: Optional[float] = None) -> pd.DataFrame:
        """
        Evaluate the curve on a regular grid over [x_min, x_max].

        Parameters
        ----------
        num : int
            Number of grid points (ignored when step is given)
        step : float, optional
            Grid spacing

        Returns
        -------
        DataFrame
            Columns 'x' and 'y'
        """
        x_min, x_max = float(np.min(self.x_values)), float(np.max(self.x_values))
        if step is not None:
            if step <= 0:
                raise ValueError(f"step must be > 0, got {step}")
            grid = np.arange(x_min, x_max + step / 2, step)
            grid = grid[grid <= x_max]
        else:
            grid = np.linspace(x_min, x_max, num)
        return pd.DataFrame({'x': grid, 'y': self.result(grid)})

    def summary(self):
        """
        Print summary of the interpolation/fit.
        """
        print()
        print("=" * 80)
        print("INTERPOLATION RESULTS")
        print("=" * 80)
        print()

        print(f"Method:                 {self.method.name} ({self.method.family})")
        print(f"Dependent variable:     {self.y_name}")
        print(f"Number of observations: {self.n_obs}")
        if self.n_dropped:
            print(f"Rows dropped:           {self.n_dropped} (missing or non-numeric)")
        print(f"Domain:                 [{np.min(self.x_values):.4g}, {np.max(self.x_values):.4g}]")
        if self.degree is not None:
            print(f"Degree:                 {self.degree}")
        print()

        if not self.result.valid:
            print("WARNING: solve failed, the curve evaluates to NaN.")
            print()

        if self.method.family != 'piecewise':
            print("Polynomial:")
            print(f"  {self.polynomial()}")
            print()

        print("Residuals:")
        residual_summary = pd.Series(self.residuals).describe()
        print(f"  Min:    {residual_summary['min']:>12.4e}")
        print(f"  1Q:     {residual_summary['25%']:>12.4e}")
        print(f"  Median: {residual_summary['50%']:>12.4e}")
        print(f"  3Q:     {residual_summary['75%']:>12.4e}")
        print(f"  Max:    {residual_summary['max']:>12.4e}")
        print()

        print(f"Residual sum of squares: {self.sse:.6e}")
        print(f"R-squared:               {self.r_squared:.6f}")

        if self.converged is not None:
            print(f"Status:                  {self.result.status} "
                  f"after {self.result.iterations} iteration(s)")

        if self.result.condition_number is not None:
            print(f"Condition number:        {self.result.condition_number:.2e}")

        print("=" * 80)
        print()

    def __repr__(self):
        return f"Interpolator(method='{self.method.name}', n={self.n_obs})"


def interpolate(x, y, data=None, **kwargs):
    """
    Interpolate or fit samples (convenience function).

    Parameters
    ----------
    x : str or array
        Sample abscissae (column name when data is given)
    y : str or array
        Sample ordinates (column name when data is given)
    data : DataFrame, optional
        Dataset
    **kwargs
        Additional arguments passed to Interpolator (method, degree, ...)

    Returns
    -------
    Interpolator
        Fitted curve

    Examples
    --------
    >>> curve = interpolate([0, 1, 2], [1, 2, 5], method='lagrange')
    >>> curve.predict(1.5)
    3.25
    """
    return Interpolator(x=x, y=y, data=data, **kwargs)
