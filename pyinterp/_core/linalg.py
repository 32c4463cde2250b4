"""
Dense linear algebra primitives.

Small, explicit building blocks used by the interpolators and fitters.
All functions take and return NumPy float64 arrays.
"""

import numpy as np
from scipy import linalg as sla

from .exceptions import DimensionMismatchError, SingularMatrixError


EPS = np.finfo(np.float64).eps


def _as_matrix(M, name='M'):
    M = np.asarray(M, dtype=np.float64)
    if M.ndim != 2:
        raise DimensionMismatchError(f"{name} must be 2-dimensional, got ndim={M.ndim}")
    return M


def transpose(M: np.ndarray) -> np.ndarray:
    """Matrix transpose."""
    return _as_matrix(M).T.copy()


def multiply(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """
    Matrix product A @ B.

    B may be a matrix or a vector.

    Raises
    ------
    DimensionMismatchError
        If the inner dimensions disagree.
    """
    A = _as_matrix(A, 'A')
    B = np.asarray(B, dtype=np.float64)
    if B.ndim not in (1, 2):
        raise DimensionMismatchError(f"B must be 1- or 2-dimensional, got ndim={B.ndim}")
    if A.shape[1] != B.shape[0]:
        raise DimensionMismatchError(
            f"Cannot multiply {A.shape} by {B.shape}: inner dimensions differ"
        )
    return A @ B


def condition_number(M: np.ndarray) -> float:
    """2-norm condition number (inf for singular matrices)."""
    M = _as_matrix(M)
    # Wide matrices have a non-trivial null space
    if M.size == 0 or M.shape[0] < M.shape[1]:
        return np.inf
    try:
        s = sla.svdvals(M)
    except (np.linalg.LinAlgError, ValueError):
        return np.inf
    if s[-1] == 0:
        return np.inf
    return float(s[0] / s[-1])


def inverse(M: np.ndarray) -> np.ndarray:
    """
    Inverse of a square matrix.

    Raises
    ------
    SingularMatrixError
        If M is singular or too ill-conditioned to invert reliably.
    """
    M = _as_matrix(M)
    if M.shape[0] != M.shape[1]:
        raise DimensionMismatchError(f"Cannot invert non-square matrix {M.shape}")

    cond = condition_number(M)
    if not np.isfinite(cond) or cond > 1.0 / EPS:
        raise SingularMatrixError(f"Matrix is singular to working precision (κ = {cond:.2e})")

    try:
        return sla.inv(M)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(str(e)) from e


def pseudo_inverse(M: np.ndarray) -> np.ndarray:
    """
    Moore-Penrose pseudo-inverse via SVD.

    Rank-deficient input is accepted (small singular values are cut off).

    Raises
    ------
    SingularMatrixError
        If the SVD fails to converge or M contains non-finite values.
    """
    M = _as_matrix(M)
    try:
        return sla.pinv(M)
    except (np.linalg.LinAlgError, ValueError) as e:
        raise SingularMatrixError(f"Pseudo-inverse failed: {e}") from e


def gaussian_eliminate(
    A: np.ndarray,
    b: np.ndarray,
    tol: float = None,
) -> np.ndarray:
    """
    Solve A x = b by Gaussian elimination with partial pivoting.

    Parameters
    ----------
    A : ndarray, shape (n, n)
        Coefficient matrix (not modified)
    b : ndarray, shape (n,)
        Right-hand side (not modified)
    tol : float, optional
        Pivots with absolute value <= tol are treated as zero.
        Default: n * eps * max|A[:, k]| for column k, so a column of
        small entries is not judged against the largest column.

    Returns
    -------
    x : ndarray, shape (n,)

    Raises
    ------
    SingularMatrixError
        If a pivot is numerically zero.
    """
    A = _as_matrix(A, 'A').copy()
    b = np.asarray(b, dtype=np.float64).copy()
    n = A.shape[0]

    if A.shape[1] != n:
        raise DimensionMismatchError(f"A must be square, got {A.shape}")
    if b.shape != (n,):
        raise DimensionMismatchError(f"b must have shape ({n},), got {b.shape}")

    if tol is None:
        tols = n * EPS * (np.max(np.abs(A), axis=0) if n > 0 else np.zeros(0))
    else:
        tols = np.full(n, float(tol))

    # Forward elimination
    for k in range(n):
        p = k + int(np.argmax(np.abs(A[k:, k])))
        if abs(A[p, k]) <= tols[k]:
            raise SingularMatrixError(f"Zero pivot in column {k}")

        if p != k:
            A[[k, p]] = A[[p, k]]
            b[[k, p]] = b[[p, k]]

        factors = A[k + 1:, k] / A[k, k]
        A[k + 1:, k:] -= np.outer(factors, A[k, k:])
        b[k + 1:] -= factors * b[k]

    # Back-substitution
    x = np.zeros(n, dtype=np.float64)
    for i in range(n - 1, -1, -1):
        x[i] = (b[i] - A[i, i + 1:] @ x[i + 1:]) / A[i, i]

    return x


def tridiagonal_solve(
    lower: np.ndarray,
    diag: np.ndarray,
    upper: np.ndarray,
    rhs: np.ndarray,
) -> np.ndarray:
    """
    Solve a tridiagonal system in O(n) (Thomas algorithm).

    Parameters
    ----------
    lower : ndarray, shape (n-1,)
        Sub-diagonal, lower[i] = A[i+1, i]
    diag : ndarray, shape (n,)
        Main diagonal
    upper : ndarray, shape (n-1,)
        Super-diagonal, upper[i] = A[i, i+1]
    rhs : ndarray, shape (n,)
        Right-hand side

    Returns
    -------
    x : ndarray, shape (n,)
    """
    diag = np.asarray(diag, dtype=np.float64)
    lower = np.asarray(lower, dtype=np.float64)
    upper = np.asarray(upper, dtype=np.float64)
    rhs = np.asarray(rhs, dtype=np.float64)
    n = len(diag)

    if len(rhs) != n or len(lower) != max(n - 1, 0) or len(upper) != max(n - 1, 0):
        raise DimensionMismatchError(
            f"Inconsistent tridiagonal bands: lower={len(lower)}, "
            f"diag={n}, upper={len(upper)}, rhs={len(rhs)}"
        )

    # Forward sweep: l is the pivot, mu the normalized upper band, z the
    # normalized right-hand side.
    mu = np.zeros(n, dtype=np.float64)
    z = np.zeros(n, dtype=np.float64)
    for i in range(n):
        l = diag[i] - (lower[i - 1] * mu[i - 1] if i > 0 else 0.0)
        if l == 0.0:
            raise SingularMatrixError(f"Zero pivot in tridiagonal sweep at row {i}")
        mu[i] = upper[i] / l if i < n - 1 else 0.0
        z[i] = (rhs[i] - (lower[i - 1] * z[i - 1] if i > 0 else 0.0)) / l

    # Back-substitution
    x = np.zeros(n, dtype=np.float64)
    for i in range(n - 1, -1, -1):
        x[i] = z[i] - (mu[i] * x[i + 1] if i < n - 1 else 0.0)

    return x


__all__ = [
    "transpose",
    "multiply",
    "condition_number",
    "inverse",
    "pseudo_inverse",
    "gaussian_eliminate",
    "tridiagonal_solve",
]
