"""
Exceptions and warnings raised by the interpolation kernel.
"""

import numpy as np


class InterpolationError(Exception):
    """Base class for all kernel errors."""
    pass


class DimensionMismatchError(InterpolationError, ValueError):
    """Matrix or vector shapes are incompatible."""
    pass


class SingularMatrixError(InterpolationError, np.linalg.LinAlgError):
    """A linear system is singular or numerically unstable."""
    pass


class OutOfRangeError(InterpolationError, ValueError):
    """Query point lies outside the interpolation domain."""

    def __init__(self, x, x_min, x_max):
        self.x = x
        self.x_min = x_min
        self.x_max = x_max
        super().__init__(
            f"x = {x} is outside the sample domain [{x_min}, {x_max}]"
        )


class NonConvergenceWarning(UserWarning):
    """An iterative fitter stopped at max_iter without reaching tolerance."""
    pass


class IllConditionedWarning(UserWarning):
    """A design matrix is poorly conditioned or numerically singular."""
    pass


__all__ = [
    "InterpolationError",
    "DimensionMismatchError",
    "SingularMatrixError",
    "OutOfRangeError",
    "NonConvergenceWarning",
    "IllConditionedWarning",
]
