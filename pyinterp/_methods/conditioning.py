"""
Design-matrix conditioning checker.

Reports how trustworthy a polynomial solve is likely to be before
(or after) the kernel computes it. High-degree monomial design matrices
(Vandermonde in particular) lose accuracy quickly, so callers get an
advisory report rather than a silently NaN-producing evaluator.
"""

import numpy as np
from typing import Dict, List

from .._core.linalg import condition_number
from .._core.polynomial import design_matrix


# Condition number thresholds on the design matrix X (not X'X)
WARN_CONDITION = 1e8


def check_conditioning(x: np.ndarray, degree: int) -> Dict:
    """
    Assess the numerical conditioning of a polynomial fit.

    Evaluates:
    - Condition number of the design matrix X
    - Condition number of the normal-equations matrix X'X
    - Column scaling of X
    - Duplicate abscissae

    Parameters
    ----------
    x : ndarray, shape (n,)
        Sample abscissae
    degree : int
        Polynomial degree

    Returns
    -------
    dict with keys:
        - well_conditioned: bool - Expect full double-precision accuracy?
        - singular: bool - Numerically singular (rank deficient)?
        - condition_number: float - κ(X)
        - normal_condition_number: float - κ(X'X), roughly κ(X)²
        - scale_ratio: float
        - rank: int
        - warnings: list[str]
    """
    x = np.asarray(x, dtype=np.float64)
    X = design_matrix(x, degree)
    n, p = X.shape

    # 1. CONDITION NUMBERS
    cond = condition_number(X) if n >= p else np.inf
    cond_normal = condition_number(X.T @ X)

    # 2. RANK
    rank = int(np.linalg.matrix_rank(X)) if X.size else 0

    # 3. SCALING RATIO
    col_norms = np.linalg.norm(X, axis=0)
    col_norms = col_norms[col_norms > 0]
    if len(col_norms) < p:
        scale_ratio = np.inf
    else:
        scale_ratio = float(col_norms.max() / col_norms.min())

    warning_messages: List[str] = []

    n_distinct = len(np.unique(x))
    if n_distinct < n:
        warning_messages.append(
            f"{n - n_distinct} repeated x value(s); exact interpolation is ill-posed."
        )

    if n < p:
        warning_messages.append(
            f"Degree {degree} needs {p} samples for a unique fit, got {n}. "
            f"The minimum-norm solution will be used."
        )

    singular = rank < min(n, p)

    if np.isfinite(cond) and cond > WARN_CONDITION:
        warning_messages.append(
            f"Poorly conditioned design matrix (κ = {cond:.2e}). "
            f"Consider a lower degree or rescaling x."
        )

    if scale_ratio > 1e8:
        warning_messages.append(
            f"Extreme column scaling (ratio = {scale_ratio:.2e}). "
            f"Center and scale x before fitting."
        )

    return {
        'well_conditioned': (not singular) and bool(cond <= WARN_CONDITION),
        'singular': bool(singular),
        'condition_number': float(cond),
        'normal_condition_number': float(cond_normal),
        'scale_ratio': scale_ratio,
        'rank': rank,
        'warnings': warning_messages,
    }


def format_conditioning_message(report: Dict) -> str:
    """
    Format conditioning check results as user-friendly message.

    Parameters
    ----------
    report : dict
        Output from check_conditioning()

    Returns
    -------
    str
        Formatted message for user
    """
    if report['singular']:
        msg = (
            f"Design matrix is numerically singular "
            f"(rank {report['rank']}, κ = {report['condition_number']:.2e}).\n"
            f"Exact interpolation results are not reliable.\n"
        )
    else:
        msg = f"Condition number: {report['condition_number']:.2e}\n"

    if report['warnings']:
        msg += "\nWarnings:\n"
        for warning in report['warnings']:
            msg += f"  - {warning}\n"

    if not report['well_conditioned']:
        msg += (
            "\nOptions:\n"
            "  1. Use a piecewise method ('cubic-spline', 'linear-spline')\n"
            "  2. Lower the polynomial degree\n"
            "  3. Rescale x to a small interval around zero"
        )

    return msg
