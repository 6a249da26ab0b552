"""Constraint factories and residual/gradient evaluators.

Every constraint is a plain :class:`~geosketch.model.Constraint` record.
Evaluation dispatches on ``constraint.kind`` and reads the coordinates
passed at call time, so repeated steps always see the current geometry.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from .model import Constraint, ConstraintKind, GradientArityMismatch, IndexOutOfRange, UnknownConstraintKind

logger = logging.getLogger(__name__)

Evaluation = Tuple[np.ndarray, Sequence[np.ndarray]]
Evaluator = Callable[[Constraint, np.ndarray], Evaluation]

_EVALUATORS: Dict[ConstraintKind, Evaluator] = {}

_ARITY: Dict[ConstraintKind, int] = {
    "fixed_x": 1,
    "fixed_y": 1,
    "vertical": 2,
    "horizontal": 2,
    "distance": 2,
    "colinear": 3,
}


def _index(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"point index must be an integer, got {value!r}")
    if value < 0:
        raise IndexOutOfRange(value, 0)
    return int(value)


def _scalar(value: object, name: str) -> float:
    number = float(value)  # type: ignore[arg-type]
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


def fixed_x(point: int, value: float) -> Constraint:
    return Constraint("fixed_x", (_index(point),), (_scalar(value, "value"),))


def fixed_y(point: int, value: float) -> Constraint:
    return Constraint("fixed_y", (_index(point),), (_scalar(value, "value"),))


def vertical(p0: int, p1: int) -> Constraint:
    return Constraint("vertical", (_index(p0), _index(p1)))


def horizontal(p0: int, p1: int) -> Constraint:
    return Constraint("horizontal", (_index(p0), _index(p1)))


def distance(p0: int, p1: int, value: float) -> Constraint:
    """Keep ``p0`` and ``p1`` at distance ``value`` (compared squared).

    Only the square of ``value`` enters the residual, so a negative
    distance would behave like its absolute value; it is rejected instead.
    """

    length = _scalar(value, "distance")
    if length < 0.0:
        raise ValueError(f"distance must be non-negative, got {value!r}")
    return Constraint("distance", (_index(p0), _index(p1)), (length,))


def colinear(p0: int, p1: int, p2: int) -> Constraint:
    return Constraint("colinear", (_index(p0), _index(p1), _index(p2)))


def _row(*values: float) -> np.ndarray:
    return np.array([values], dtype=float)


def _eval_fixed_x(constraint: Constraint, coords: np.ndarray) -> Evaluation:
    (p,) = constraint.indices
    residual = coords[p, 0] - constraint.params[0]
    return np.array([residual], dtype=float), _row(1.0, 0.0)


def _eval_fixed_y(constraint: Constraint, coords: np.ndarray) -> Evaluation:
    (p,) = constraint.indices
    residual = coords[p, 1] - constraint.params[0]
    return np.array([residual], dtype=float), _row(0.0, 1.0)


def _eval_vertical(constraint: Constraint, coords: np.ndarray) -> Evaluation:
    p0, p1 = constraint.indices
    residual = coords[p0, 0] - coords[p1, 0]
    return np.array([residual], dtype=float), _row(1.0, 0.0, -1.0, 0.0)


def _eval_horizontal(constraint: Constraint, coords: np.ndarray) -> Evaluation:
    p0, p1 = constraint.indices
    residual = coords[p0, 1] - coords[p1, 1]
    return np.array([residual], dtype=float), _row(0.0, 1.0, 0.0, -1.0)


def _eval_distance(constraint: Constraint, coords: np.ndarray) -> Evaluation:
    p0, p1 = constraint.indices
    x0, y0 = coords[p0]
    x1, y1 = coords[p1]
    dx = x1 - x0
    dy = y1 - y0
    value = constraint.params[0]
    residual = dx * dx + dy * dy - value * value
    # half of the strict derivative; only the step scale depends on it
    grad = _row(x0 - x1, y0 - y1, x1 - x0, y1 - y0)
    return np.array([residual], dtype=float), grad


def _eval_colinear(constraint: Constraint, coords: np.ndarray) -> Evaluation:
    p0, p1, p2 = constraint.indices
    x0, y0 = coords[p0]
    x1, y1 = coords[p1]
    x2, y2 = coords[p2]
    residual = (x1 - x0) * (y2 - y0) - (y1 - y0) * (x2 - x0)
    grad = _row(y1 - y2, x2 - x1, y2 - y0, x0 - x2, y0 - y1, x1 - x0)
    return np.array([residual], dtype=float), grad


def check_arity(constraint: Constraint) -> None:
    """Raise :class:`GradientArityMismatch` when a built-in kind has the wrong point count."""

    expected = _ARITY.get(constraint.kind)
    if expected is not None and len(constraint.indices) != expected:
        raise GradientArityMismatch(
            constraint,
            f"constraint '{constraint.kind}' takes {expected} point(s), got {len(constraint.indices)}",
        )


def register_evaluator(kind: ConstraintKind, evaluator: Evaluator) -> None:
    """Register ``evaluator`` for constraints tagged ``kind``."""

    if kind in _EVALUATORS:
        logger.info("Replacing evaluator for constraint kind '%s'", kind)
    _EVALUATORS[kind] = evaluator


def unregister_evaluator(kind: ConstraintKind) -> None:
    _EVALUATORS.pop(kind, None)


def get_evaluator(kind: ConstraintKind) -> Evaluator:
    try:
        return _EVALUATORS[kind]
    except KeyError as exc:
        raise UnknownConstraintKind(f"no evaluator registered for constraint kind '{kind}'") from exc


def evaluate(constraint: Constraint, coords: np.ndarray) -> Tuple[np.ndarray, List[np.ndarray]]:
    """Return ``(residuals, gradient_rows)`` of ``constraint`` at ``coords``.

    ``coords`` is the ``(N, 2)`` coordinate array of the whole store.
    Residuals come back as a 1-D array of length ``k`` and the gradient as
    a list of 1-D rows, one per residual, each expected to hold ``2m``
    entries for ``m`` referenced points. Shapes are not checked here; see
    :func:`geosketch.assembler.assemble`.
    """

    evaluator = get_evaluator(constraint.kind)
    residuals, gradient = evaluator(constraint, coords)
    values = np.atleast_1d(np.asarray(residuals, dtype=float)).reshape(-1)
    rows = [np.asarray(row, dtype=float).reshape(-1) for row in gradient]
    return values, rows


for _kind, _func in (
    ("fixed_x", _eval_fixed_x),
    ("fixed_y", _eval_fixed_y),
    ("vertical", _eval_vertical),
    ("horizontal", _eval_horizontal),
    ("distance", _eval_distance),
    ("colinear", _eval_colinear),
):
    register_evaluator(_kind, _func)


__all__ = [
    "Evaluation",
    "Evaluator",
    "check_arity",
    "colinear",
    "distance",
    "evaluate",
    "fixed_x",
    "fixed_y",
    "get_evaluator",
    "horizontal",
    "register_evaluator",
    "unregister_evaluator",
    "vertical",
]
