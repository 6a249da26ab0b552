"""Geometric system owning a point store and its constraints."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from .assembler import assemble, objective, residual_breakdown
from .constraints import check_arity
from .model import Constraint, IndexOutOfRange, Point2D, RelaxMethod, RelaxOptions, RelaxResult, StepReport
from .points import PointStore
from .relax import gauss_newton_step, relax, relaxation_step, solve_least_squares

logger = logging.getLogger(__name__)


class GeometricSystem:
    """Points plus the constraints that relate them.

    Constraints reference points by index only; nothing outside this class
    mutates either collection. Not safe for concurrent use.
    """

    def __init__(self) -> None:
        self.points = PointStore()
        self.constraints: List[Constraint] = []

    def __repr__(self) -> str:
        return f"GeometricSystem(points={len(self.points)}, constraints={len(self.constraints)})"

    def add_point(self, x: float, y: float) -> int:
        return self.points.add_point(x, y)

    def add_constraint(self, constraint: Constraint) -> int:
        """Append ``constraint`` and return its position in the list."""

        check_arity(constraint)
        for idx in constraint.indices:
            if idx < 0 or idx >= len(self.points):
                raise IndexOutOfRange(idx, len(self.points))
        self.constraints.append(constraint)
        logger.debug("Added constraint #%d: %s", len(self.constraints) - 1, constraint.describe())
        return len(self.constraints) - 1

    def point(self, index: int) -> Point2D:
        return self.points.get(index)

    def point_coords(self) -> Dict[int, Point2D]:
        return {idx: coords for idx, coords in enumerate(self.points)}

    def assemble(self) -> Tuple[np.ndarray, np.ndarray]:
        return assemble(self.points, self.constraints)

    def residuals(self) -> np.ndarray:
        values, _ = assemble(self.points, self.constraints)
        return values

    def objective(self) -> float:
        return objective(self.points, self.constraints)

    def residual_breakdown(self) -> List[Dict[str, object]]:
        return residual_breakdown(self.points, self.constraints)

    def step(self, method: RelaxMethod = "steepest") -> StepReport:
        if method == "steepest":
            return relaxation_step(self.points, self.constraints)
        if method == "gauss-newton":
            return gauss_newton_step(self.points, self.constraints)
        raise ValueError(f"unsupported relaxation method '{method}'")

    def relax(self, options: Optional[RelaxOptions] = None) -> RelaxResult:
        return relax(self.points, self.constraints, options or RelaxOptions())

    def solve_least_squares(self, *, tol: float = 1e-12, max_nfev: Optional[int] = None) -> RelaxResult:
        return solve_least_squares(self.points, self.constraints, tol=tol, max_nfev=max_nfev)


__all__ = ["GeometricSystem"]
