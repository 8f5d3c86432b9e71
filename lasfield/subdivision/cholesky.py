"""Cholesky factorisation of conditional covariances.

Functions
---------
tolerant_cholesky
    Lower factor that zeroes columns whose pivot is not positive.
conditional_factor
    Exact factor when possible, tolerant factor otherwise.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike
from scipy import linalg

PIVOT_TOLERANCE = 1e-20


def tolerant_cholesky(
    a: ArrayLike, tol: float = PIVOT_TOLERANCE
) -> tuple[np.ndarray, bool]:
    """Lower-triangular ``L`` with ``L @ L.T ≈ a`` for semi-definite *a*.

    A pivot ``t <= tol`` is treated as zero: the diagonal entry and the
    rest of its column are set to zero and the factorisation continues.

    Args:
        a: Symmetric matrix.
        tol: Pivot tolerance.

    Returns:
        ``(L, complete)`` where *complete* is ``False`` if any pivot was
        zeroed.
    """
    a = np.asarray(a, dtype=float)
    n = a.shape[0]
    L = np.zeros_like(a)
    complete = True
    for j in range(n):
        t = a[j, j] - L[j, :j] @ L[j, :j]
        if t <= tol:
            complete = False
            continue
        L[j, j] = np.sqrt(t)
        L[j + 1:, j] = (a[j + 1:, j] - L[j + 1:, :j] @ L[j, :j]) / L[j, j]
    return L, complete


def conditional_factor(bb: ArrayLike) -> tuple[np.ndarray, bool, float]:
    """Factor a conditional covariance matrix.

    Args:
        bb: Symmetric conditional covariance.

    Returns:
        ``(C, degraded, residual)``: the lower factor, whether the tolerant
        fallback was needed, and ``‖C Cᵀ − bb‖``.
    """
    bb = np.asarray(bb, dtype=float)
    try:
        C = linalg.cholesky(bb, lower=True)
        degraded = False
    except linalg.LinAlgError:
        C, _ = tolerant_cholesky(bb)
        degraded = True
    residual = float(np.linalg.norm(C @ C.T - bb))
    return C, degraded, residual
