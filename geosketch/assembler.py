"""Assembly of the global residual vector and Jacobian."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple, Union

import numpy as np

from .constraints import check_arity, evaluate
from .logging_utils import apply_debug_logging
from .model import (
    Constraint,
    EquationGradientMismatch,
    GradientArityMismatch,
    IndexOutOfRange,
)
from .points import PointStore

logger = logging.getLogger(__name__)

Coordinates = Union[PointStore, np.ndarray]


def _coords_array(points: Coordinates) -> np.ndarray:
    if isinstance(points, PointStore):
        return points.array
    coords = np.asarray(points, dtype=float)
    if coords.ndim == 1:
        coords = coords.reshape(-1, 2)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise ValueError(f"expected an (N, 2) coordinate array, got shape {coords.shape}")
    return coords


def _check_indices(constraint: Constraint, size: int) -> None:
    for idx in constraint.indices:
        if idx < 0 or idx >= size:
            raise IndexOutOfRange(idx, size)


def _evaluate_checked(constraint: Constraint, coords: np.ndarray) -> Tuple[np.ndarray, List[np.ndarray]]:
    check_arity(constraint)
    _check_indices(constraint, coords.shape[0])
    values, rows = evaluate(constraint, coords)
    if values.size != len(rows):
        raise EquationGradientMismatch(
            constraint,
            f"constraint '{constraint.kind}' produced {values.size} equation(s) "
            f"but {len(rows)} gradient row(s)",
        )
    expected = 2 * len(constraint.indices)
    for row in rows:
        if row.size != expected:
            raise GradientArityMismatch(
                constraint,
                f"constraint '{constraint.kind}' gradient row has {row.size} entries, "
                f"expected {expected} for {len(constraint.indices)} point(s)",
            )
    return values, rows


def assemble(points: Coordinates, constraints: Sequence[Constraint]) -> Tuple[np.ndarray, np.ndarray]:
    """Build the residual vector ``C`` and Jacobian ``J`` for ``constraints``.

    ``J`` has one row per residual and ``2N`` columns; each local gradient
    row is scattered into the columns ``2*idx`` and ``2*idx + 1`` of the
    points the constraint references, all other entries stay zero. Every
    constraint is evaluated and validated before anything is returned, so
    a structural error never leaves partial results behind.
    """

    coords = _coords_array(points)
    evaluated = [(constraint, _evaluate_checked(constraint, coords)) for constraint in constraints]
    total = sum(values.size for _, (values, _) in evaluated)

    residuals = np.zeros(total, dtype=float)
    jacobian = np.zeros((total, 2 * coords.shape[0]), dtype=float)

    row_idx = 0
    for constraint, (values, rows) in evaluated:
        for value, local in zip(values, rows):
            residuals[row_idx] = value
            for m, idx in enumerate(constraint.indices):
                jacobian[row_idx, 2 * idx] += local[2 * m]
                jacobian[row_idx, 2 * idx + 1] += local[2 * m + 1]
            row_idx += 1

    logger.debug(
        "Assembled %d residual(s) from %d constraint(s) over %d point(s)",
        total,
        len(constraints),
        coords.shape[0],
    )
    return residuals, jacobian


def objective(points: Coordinates, constraints: Sequence[Constraint]) -> float:
    """Return the summed squared residuals."""

    coords = _coords_array(points)
    total = 0.0
    for constraint in constraints:
        values, _ = _evaluate_checked(constraint, coords)
        total += float(np.dot(values, values))
    return total


def residual_breakdown(points: Coordinates, constraints: Sequence[Constraint]) -> List[Dict[str, object]]:
    coords = _coords_array(points)
    breakdown: List[Dict[str, object]] = []
    for constraint in constraints:
        values, _ = _evaluate_checked(constraint, coords)
        breakdown.append(
            {
                "constraint": constraint.describe(),
                "kind": constraint.kind,
                "values": values.tolist(),
                "max_abs": float(np.max(np.abs(values))) if values.size else 0.0,
            }
        )
    return breakdown


apply_debug_logging(globals(), logger=logger)


__all__ = ["assemble", "objective", "residual_breakdown"]
