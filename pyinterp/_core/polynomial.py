"""
Monomial-basis polynomial helpers.

Coefficient vectors are ordered low to high degree: c[0] + c[1] x + ... + c[d] x^d.
"""

import numpy as np
from numpy.polynomial import polynomial as P


def design_matrix(x: np.ndarray, degree: int) -> np.ndarray:
    """
    Design matrix X[i, j] = x_i ** j for j = 0..degree.

    For a polynomial model this is also the Jacobian of the model
    with respect to its coefficients.
    """
    x = np.asarray(x, dtype=np.float64)
    if degree < 0:
        raise ValueError(f"degree must be >= 0, got {degree}")
    return np.vander(x, degree + 1, increasing=True)


def evaluate_polynomial(coefficients, x):
    """
    Evaluate a monomial-basis polynomial at x (scalar or array).

    An empty coefficient vector evaluates to 0.
    """
    c = np.asarray(coefficients, dtype=np.float64)
    if c.size == 0:
        return np.zeros_like(np.asarray(x, dtype=np.float64))
    return P.polyval(x, c)


def residual_sum_of_squares(coefficients, x, y) -> float:
    """Sum of squared residuals of a polynomial against samples."""
    r = evaluate_polynomial(coefficients, np.asarray(x, dtype=np.float64)) - y
    return float(np.sum(r ** 2))


def format_polynomial(coefficients) -> str:
    """
    Render a coefficient vector as a human-readable polynomial.

    Terms are written low to high degree with 4-decimal coefficients,
    exact-zero terms are dropped and a leading '+' is stripped.

    >>> format_polynomial([1.0, 0.0, -2.5])
    '1.0000 - 2.5000x^2'

    Parameters
    ----------
    coefficients : array-like or StandardBasis
        Monomial-basis coefficients. Newton-basis coefficients are
        rejected, they do not describe c[i] * x^i.

    Returns
    -------
    str
        '0' for an all-zero vector, an explanatory message for an empty one.
    """
    # Avoid a circular import with the result types
    from .._methods.base import Coefficients, StandardBasis

    if isinstance(coefficients, Coefficients):
        if not isinstance(coefficients, StandardBasis):
            raise TypeError(
                f"Cannot format {type(coefficients).__name__} coefficients as a "
                f"monomial polynomial; convert with to_standard() first"
            )
        coefficients = coefficients.values

    if coefficients is None or len(coefficients) == 0:
        return "Could not generate the polynomial"

    terms = []
    for i, coeff in enumerate(coefficients):
        coeff = float(coeff)
        if coeff == 0:
            continue
        magnitude = f"{abs(coeff):.4f}"
        if i == 0:
            term = magnitude
        elif i == 1:
            term = f"{magnitude}x"
        else:
            term = f"{magnitude}x^{i}"
        terms.append(f"+ {term}" if coeff > 0 else f"- {term}")

    if not terms:
        return "0"

    text = " ".join(terms)
    if text.startswith("+ "):
        text = text[2:]
    return text


__all__ = [
    "design_matrix",
    "evaluate_polynomial",
    "residual_sum_of_squares",
    "format_polynomial",
]
