"""
Utility functions.
"""

import numpy as np

from ._core.exceptions import DimensionMismatchError


def check_vector(y, name='y', dtype=np.float64):
    """Validate vector input."""
    y = np.asarray(y, dtype=dtype)
    if y.ndim == 0:
        y = y.reshape(1)
    if y.ndim != 1:
        raise ValueError(f"{name} must be 1-dimensional")
    return y


def check_samples(x, y, min_samples=1):
    """
    Validate a sample set given as separate x and y sequences.

    Finiteness is not checked; callers are expected to have cleaned the data.
    """
    x = check_vector(x, name='x')
    y = check_vector(y, name='y')
    if len(x) != len(y):
        raise DimensionMismatchError(
            f"x and y must have the same length, got {len(x)} and {len(y)}"
        )
    if len(x) < min_samples:
        raise ValueError(
            f"At least {min_samples} sample(s) required, got {len(x)}"
        )
    return x, y


def check_distinct(x, name='x'):
    """Raise if x contains repeated values."""
    if len(np.unique(x)) != len(x):
        raise ValueError(f"{name} values must be pairwise distinct")


def sort_samples(x, y):
    """Return (x, y) ordered by ascending x."""
    order = np.argsort(x, kind='stable')
    return x[order], y[order]


def frozen(a):
    """Read-only copy of an array, for closing over in evaluators."""
    a = np.array(a, dtype=np.float64, copy=True)
    a.flags.writeable = False
    return a


def scalar_or_array(func):
    """
    Wrap an array evaluator so scalar input yields a Python float.
    """
    def evaluator(x):
        x_arr = np.asarray(x, dtype=np.float64)
        out = func(np.ravel(x_arr))
        if x_arr.ndim == 0:
            return float(out[0])
        return out.reshape(x_arr.shape)
    evaluator.__doc__ = func.__doc__
    return evaluator
