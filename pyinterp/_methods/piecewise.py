"""
Piecewise interpolators.

Samples are sorted by x internally and must have distinct x values.
The three methods deliberately differ outside [x_min, x_max]:

- linear: raises OutOfRangeError
- linear-spline: returns 0
- cubic-spline: extends the first/last segment polynomial
"""

import numpy as np
from dataclasses import dataclass

from .base import PiecewiseMethod, InterpolationResult, SplineResult
from .._core.exceptions import OutOfRangeError
from .._core.linalg import tridiagonal_solve
from .._utils import check_samples, check_distinct, sort_samples, frozen, scalar_or_array


def _prepare(x, y, min_samples=1):
    x, y = check_samples(x, y, min_samples=min_samples)
    check_distinct(x)
    x, y = sort_samples(x, y)
    return frozen(x), frozen(y)


def _linear_segments(xs, ys, t):
    """Linear interpolation of in-domain points t (xs sorted ascending)."""
    if len(xs) == 1:
        return np.full(t.shape, ys[0], dtype=np.float64)
    # Segment k spans [xs[k], xs[k+1]]; the right endpoint belongs to the last segment
    k = np.clip(np.searchsorted(xs, t, side='right') - 1, 0, len(xs) - 2)
    x0, x1 = xs[k], xs[k + 1]
    y0, y1 = ys[k], ys[k + 1]
    return y0 + (y1 - y0) * (t - x0) / (x1 - x0)


class LinearInterpolation(PiecewiseMethod):
    """
    Linear interpolation between consecutive samples.

    Extrapolation is rejected: evaluating outside [x_min, x_max]
    raises OutOfRangeError.
    """

    name = "linear"

    def fit(self, x, y, **options) -> InterpolationResult:
        self.check_unknown_options(options)
        xs, ys = _prepare(x, y)
        x_min, x_max = xs[0], xs[-1]

        @scalar_or_array
        def evaluator(t):
            outside = (t < x_min) | (t > x_max) | np.isnan(t)
            if np.any(outside):
                raise OutOfRangeError(t[outside][0], x_min, x_max)
            return _linear_segments(xs, ys, t)

        return InterpolationResult(evaluator=evaluator, method=self.name)


class LinearSpline(PiecewiseMethod):
    """
    Degree-1 spline through the samples.

    Identical to linear interpolation inside the domain, but returns
    0 instead of raising outside it.
    """

    name = "linear-spline"

    OUTSIDE_VALUE = 0.0

    def fit(self, x, y, **options) -> InterpolationResult:
        self.check_unknown_options(options)
        xs, ys = _prepare(x, y)
        x_min, x_max = xs[0], xs[-1]
        outside = float(self.OUTSIDE_VALUE)

        @scalar_or_array
        def evaluator(t):
            out = np.full(t.shape, outside, dtype=np.float64)
            inside = (t >= x_min) & (t <= x_max)
            out[inside] = _linear_segments(xs, ys, t[inside])
            return out

        return InterpolationResult(evaluator=evaluator, method=self.name)


@dataclass(frozen=True)
class SplineSegment:
    """
    One cubic piece a + b dx + c dx² + d dx³ with dx = x - x_start.
    """
    a: float
    b: float
    c: float
    d: float
    x_start: float

    def evaluate(self, x):
        dx = np.asarray(x, dtype=np.float64) - self.x_start
        return self.a + dx * (self.b + dx * (self.c + dx * self.d))

    def derivative(self, x, order: int = 1):
        """Derivative of the segment polynomial (order 0-3)."""
        dx = np.asarray(x, dtype=np.float64) - self.x_start
        if order == 0:
            return self.evaluate(x)
        if order == 1:
            return self.b + dx * (2 * self.c + 3 * self.d * dx)
        if order == 2:
            return 2 * self.c + 6 * self.d * dx
        if order == 3:
            return 6 * self.d + 0 * dx
        raise ValueError(f"order must be 0-3, got {order}")


def natural_spline_coefficients(x: np.ndarray, y: np.ndarray):
    """
    Coefficients (a, b, c, d) of the natural cubic spline.

    Returns four arrays of length n-1, one entry per interval.
    """
    n = len(x)
    h = np.diff(x)
    a = np.asarray(y, dtype=np.float64)

    # Tridiagonal system for c (half the second derivative) with
    # c[0] = c[n-1] = 0
    alpha = np.zeros(n, dtype=np.float64)
    alpha[1:n - 1] = 3.0 / h[1:] * (a[2:] - a[1:n - 1]) - 3.0 / h[:-1] * (a[1:n - 1] - a[:n - 2])

    diag = np.ones(n, dtype=np.float64)
    diag[1:n - 1] = 2.0 * (h[:-1] + h[1:])
    lower = np.zeros(n - 1, dtype=np.float64)
    lower[:n - 2] = h[:-1]
    upper = np.zeros(n - 1, dtype=np.float64)
    upper[1:] = h[1:]

    c = tridiagonal_solve(lower, diag, upper, alpha)

    b = (a[1:] - a[:-1]) / h - h * (c[1:] + 2.0 * c[:-1]) / 3.0
    d = (c[1:] - c[:-1]) / (3.0 * h)

    return a[:-1], b, c[:-1], d


class CubicSpline(PiecewiseMethod):
    """
    Natural cubic spline (zero second derivative at both ends).

    Outside the domain the first or last segment polynomial is used
    unchanged; no extrapolation guard is applied.
    """

    name = "cubic-spline"

    def fit(self, x, y, **options) -> SplineResult:
        self.check_unknown_options(options)
        xs, ys = _prepare(x, y, min_samples=2)

        a, b, c, d = natural_spline_coefficients(xs, ys)
        segments = tuple(
            SplineSegment(float(a[i]), float(b[i]), float(c[i]), float(d[i]), float(xs[i]))
            for i in range(len(xs) - 1)
        )

        starts = frozen(xs[:-1])
        coef = frozen(np.column_stack([a, b, c, d]))

        @scalar_or_array
        def evaluator(t):
            # Greatest x_start <= t, clamped to the first/last segment
            k = np.clip(np.searchsorted(starts, t, side='right') - 1, 0, len(starts) - 1)
            dx = t - starts[k]
            ak, bk, ck, dk = coef[k].T
            return ak + dx * (bk + dx * (ck + dx * dk))

        return SplineResult(
            evaluator=evaluator,
            method=self.name,
            segments=segments,
        )
