"""Core data structures for the constraint solver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple

PointIndex = int
Point2D = Tuple[float, float]

ConstraintKind = str

BUILTIN_KINDS: Tuple[ConstraintKind, ...] = (
    "fixed_x",
    "fixed_y",
    "vertical",
    "horizontal",
    "distance",
    "colinear",
)

StepStatus = Literal["satisfied", "degenerate", "moved", "stalled"]
RelaxMethod = Literal["steepest", "gauss-newton"]


class GeoSketchError(Exception):
    """Base class for solver errors."""


class IndexOutOfRange(GeoSketchError, IndexError):
    """Raised when a point index does not address a stored point."""

    def __init__(self, index: object, size: int):
        super().__init__(f"point index {index!r} out of range for store of {size} point(s)")
        self.index = index
        self.size = size


class UnknownConstraintKind(GeoSketchError, KeyError):
    """Raised when no evaluator is registered for a constraint kind."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown constraint kind"


class ConstraintAssemblyError(GeoSketchError):
    """Structural error detected while assembling a constraint."""

    def __init__(self, constraint: "Constraint", message: str):
        super().__init__(message)
        self.constraint = constraint


class EquationGradientMismatch(ConstraintAssemblyError):
    """Residual count and gradient row count of a constraint differ."""


class GradientArityMismatch(ConstraintAssemblyError):
    """A gradient row does not hold two entries per referenced point."""


class LinearSystemError(GeoSketchError, ValueError):
    """Raised when a dense linear system cannot be relaxed."""


@dataclass(frozen=True)
class Constraint:
    """Tagged constraint descriptor.

    ``indices`` are positions in the point store; their order defines the
    local-to-global column mapping used by the assembler. ``params`` holds
    the kind-specific scalars (target coordinate, target distance).
    """

    kind: ConstraintKind
    indices: Tuple[PointIndex, ...]
    params: Tuple[float, ...] = ()

    def describe(self) -> str:
        parts = [self.kind, "points=" + ",".join(str(idx) for idx in self.indices)]
        if self.params:
            parts.append("params=" + ",".join(f"{value:.6g}" for value in self.params))
        return " | ".join(parts)


@dataclass
class StepReport:
    """Outcome of a single relaxation iteration."""

    status: StepStatus
    objective: float
    step_length: float = 0.0
    gradient_norm_sq: float = 0.0

    @property
    def moved(self) -> bool:
        return self.status == "moved"


@dataclass
class RelaxOptions:
    """Caller-side iteration loop options."""

    max_iterations: int = 100
    tol: float = 0.0
    method: RelaxMethod = "steepest"


@dataclass
class RelaxResult:
    point_coords: List[Point2D]
    iterations: int
    converged: bool
    max_residual: float
    objective_history: List[float] = field(default_factory=list)
    last_status: Optional[StepStatus] = None


__all__ = [
    "BUILTIN_KINDS",
    "Constraint",
    "ConstraintAssemblyError",
    "ConstraintKind",
    "EquationGradientMismatch",
    "GeoSketchError",
    "GradientArityMismatch",
    "IndexOutOfRange",
    "LinearSystemError",
    "Point2D",
    "PointIndex",
    "RelaxMethod",
    "RelaxOptions",
    "RelaxResult",
    "StepReport",
    "StepStatus",
    "UnknownConstraintKind",
]
