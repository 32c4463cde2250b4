"""
Abstract base classes and result types for methods.

Defines the interface all interpolation and fitting methods implement.
"""

from abc import ABC, abstractmethod
import numpy as np
from typing import Callable, Optional
from dataclasses import dataclass, field
from numpy.polynomial import polynomial as P


@dataclass(frozen=True, eq=False)
class Coefficients:
    """Base class for tagged coefficient vectors."""
    values: np.ndarray

    basis = None

    def __len__(self):
        return len(self.values)


@dataclass(frozen=True, eq=False)
class StandardBasis(Coefficients):
    """Monomial coefficients c[0] + c[1] x + ... + c[d] x^d."""
    basis = "standard"


@dataclass(frozen=True, eq=False)
class NewtonBasis(Coefficients):
    """
    Newton-form coefficients f[0][i] over the given nodes.

    The polynomial is sum_i values[i] * prod_{j<i} (x - nodes[j]).
    """
    nodes: np.ndarray = field(default_factory=lambda: np.empty(0))

    basis = "newton"

    def to_standard(self) -> StandardBasis:
        """Expand the Newton form into monomial coefficients."""
        result = np.zeros(1)
        term = np.ones(1)
        for i, coeff in enumerate(self.values):
            if i > 0:
                term = P.polymul(term, [-self.nodes[i - 1], 1.0])
            result = P.polyadd(result, coeff * term)
        return StandardBasis(values=np.asarray(result, dtype=np.float64))


@dataclass
class InterpolationResult:
    """Result of an interpolation method."""
    evaluator: Callable                          # x -> y, scalar or array
    method: str                                  # Registered method name
    coefficients: Optional[Coefficients] = None  # None when no closed form
    condition_number: Optional[float] = None     # Advisory, design/system matrix
    valid: bool = True                           # False for NaN fallback

    def __call__(self, x):
        return self.evaluator(x)

    @property
    def coefficient_vector(self) -> np.ndarray:
        """Flat coefficient vector (empty when there is none)."""
        if self.coefficients is None:
            return np.empty(0, dtype=np.float64)
        return np.asarray(self.coefficients.values, dtype=np.float64)


@dataclass
class FitResult(InterpolationResult):
    """Result of a fixed-degree polynomial fit."""
    degree: int = 0
    converged: bool = True   # Reached tolerance before max_iter?
    iterations: int = 0      # Iterations performed (0 for closed form)

    @property
    def status(self) -> str:
        return "converged" if self.converged else "max_iterations_reached"


@dataclass
class SplineResult(InterpolationResult):
    """Result of a cubic spline interpolation."""
    segments: tuple = ()


class MethodBase(ABC):
    """Abstract base class for all methods."""

    name = None
    family = None
    requires_degree = False
    basis = None

    @abstractmethod
    def fit(self, x: np.ndarray, y: np.ndarray, **options) -> InterpolationResult:
        """
        Build an evaluator from a sample set.

        Parameters
        ----------
        x : ndarray, shape (n,)
            Sample abscissae
        y : ndarray, shape (n,)
            Sample ordinates
        **options
            Method-specific hyperparameters

        Returns
        -------
        InterpolationResult
        """
        pass

    def defaults(self) -> dict:
        """Default hyperparameters."""
        return {}

    def check_unknown_options(self, options: dict):
        """Reject hyperparameters this method does not take."""
        unknown = sorted(set(options) - set(self.defaults()))
        if unknown:
            accepted = ', '.join(self.defaults()) or 'none'
            raise ValueError(
                f"Unknown option(s) for method '{self.name}': {', '.join(unknown)}. "
                f"Accepted options: {accepted}"
            )

    def get_method_info(self) -> dict:
        """Get method information."""
        return {
            'method': self.name,
            'family': self.family,
            'requires_degree': self.requires_degree,
            'produces_coefficients': self.basis is not None,
            'basis': self.basis,
            'defaults': self.defaults(),
        }

    def __repr__(self):
        return f"{type(self).__name__}()"


class ExactMethod(MethodBase):
    """Exact polynomial interpolator base class."""
    family = "exact"


class PiecewiseMethod(MethodBase):
    """Piecewise interpolator base class."""
    family = "piecewise"


class FittingMethod(MethodBase):
    """Fixed-degree polynomial fitter base class."""
    family = "fitting"
    requires_degree = True
    basis = "standard"

    @staticmethod
    def check_degree(degree) -> int:
        if degree is None:
            raise ValueError("degree is required for fitting methods")
        if isinstance(degree, bool) or int(degree) != degree or degree < 0:
            raise ValueError(f"degree must be an integer >= 0, got {degree}")
        return int(degree)
