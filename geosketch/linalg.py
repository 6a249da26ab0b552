"""Dense linear relaxation helpers."""

from __future__ import annotations

import logging
from typing import List, Sequence, Union

import numpy as np

from .model import LinearSystemError

logger = logging.getLogger(__name__)

Vector = Union[np.ndarray, List[float]]


def gauss_seidel(A: Sequence[Sequence[float]], x: Vector, b: Sequence[float], iterations: int) -> Vector:
    """Relax ``A x = b`` with ``iterations`` Gauss-Seidel sweeps.

    ``A`` is a dense, row-major ``n x n`` matrix and ``x`` the initial
    guess, which is overwritten in place and returned. Each sweep updates
    ``x[j]`` in increasing ``j`` using the newest values of all other
    entries. There is no convergence check; the caller picks the number of
    sweeps.
    """

    n = len(x)
    if len(A) != n:
        raise LinearSystemError(f"A has {len(A)} row(s), expected {n} to match size of x")
    for r, row in enumerate(A):
        if len(row) != n:
            raise LinearSystemError(f"row {r} of A has {len(row)} entries, expected {n}")
    matrix = np.asarray(A, dtype=float)
    rhs = np.asarray(b, dtype=float)
    if rhs.shape != (n,):
        raise LinearSystemError(f"size of x ({n}) and b ({rhs.size}) do not match")
    diagonal = np.diag(matrix)
    zero_rows = np.flatnonzero(diagonal == 0.0)
    if zero_rows.size:
        raise LinearSystemError(f"diagonal element of A is 0 in row {int(zero_rows[0])}")
    if isinstance(x, np.ndarray) and not np.issubdtype(x.dtype, np.floating):
        raise TypeError(f"x must hold floating point values, got dtype {x.dtype}")
    if iterations < 0:
        raise ValueError("iterations must be non-negative")

    for _ in range(int(iterations)):
        for j in range(n):
            row = matrix[j]
            total = float(np.dot(row, x)) - row[j] * x[j]
            x[j] = (rhs[j] - total) / diagonal[j]

    logger.debug("Gauss-Seidel finished %d sweep(s) on a %dx%d system", iterations, n, n)
    return x


__all__ = ["gauss_seidel"]
