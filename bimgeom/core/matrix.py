"""Row-echelon reduction of dense matrices.

All routines work on a copy of the input and never raise for finite input:
a pivot below tolerance is skipped rather than divided by.
"""
from __future__ import annotations

import numpy as np

from .constants import DISTANCE_TOL

__all__ = ['row_echelon_form', 'count_nonzero_rows', 'ref_tolerance', 'matrix_rank']


def row_echelon_form(matrix, reduced: bool = True, tolerance: float = DISTANCE_TOL) -> np.ndarray:
    """Return the (reduced) row-echelon form of ``matrix``.

    Parameters
    ----------
    matrix : (M, N) array-like
    reduced : bool
        Eliminate the pivot column in every other row (Gauss-Jordan) when True,
        only in the rows below the pivot when False.
    tolerance : float
        Entries with ``|a| < tolerance`` are not accepted as pivots.

    Returns
    -------
    (M, N) float64 ndarray, a new array.
    """
    m = np.array(matrix, dtype=np.float64, copy=True)
    if m.ndim != 2:
        raise ValueError(f"matrix must be 2D, got shape {m.shape}")
    rows, cols = m.shape
    lead = 0
    for r in range(rows):
        if lead >= cols:
            break
        # search down the current column, then move right, for a usable pivot
        i = r
        while abs(m[i, lead]) < tolerance:
            i += 1
            if i == rows:
                i = r
                lead += 1
                if lead == cols:
                    break
        if lead == cols:
            break
        m[[r, i]] = m[[i, r]]
        pivot = m[r, lead]
        if abs(pivot) >= tolerance and pivot != 0.0:
            m[r] /= pivot
        targets = range(rows) if reduced else range(r + 1, rows)
        for w in targets:
            if w != r:
                m[w] -= m[w, lead] * m[r]
        lead += 1
    return m


def count_nonzero_rows(matrix, tolerance: float = DISTANCE_TOL) -> int:
    """Number of rows holding at least one entry with ``|a| >= tolerance``."""
    m = np.asarray(matrix, dtype=np.float64)
    if m.size == 0:
        return 0
    return int(np.count_nonzero(np.any(np.abs(m) >= tolerance, axis=1)))


def ref_tolerance(matrix, tolerance: float = DISTANCE_TOL) -> float:
    """Tolerance scaled to the matrix: ``tolerance * max(M, N) * max_row_abs_sum``.

    Capped at ``1 - tolerance``. Advisory only; pass it to
    :func:`row_echelon_form` when inputs may be badly scaled.
    """
    m = np.asarray(matrix, dtype=np.float64)
    if m.size == 0:
        return 0.0
    max_row_sum = float(np.max(np.sum(np.abs(m), axis=1)))
    result = tolerance * max(m.shape) * max_row_sum
    if result >= 1:
        result = 1 - tolerance
    return result


def matrix_rank(matrix, tolerance: float = DISTANCE_TOL) -> int:
    """Approximate rank: non-zero rows of the echelon form at the scaled tolerance.

    The scaled tolerance never drops below ``tolerance``, so an all-zero
    matrix (scaled tolerance 0) has rank 0.
    """
    m = np.asarray(matrix, dtype=np.float64)
    if m.size == 0:
        return 0
    tol = max(ref_tolerance(m, tolerance), tolerance)
    return count_nonzero_rows(row_echelon_form(m, False, tol), tol)
