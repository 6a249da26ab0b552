"""Utility helpers shared across modules."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, TypeVar

from .model import Point2D

logger = logging.getLogger(__name__)

K = TypeVar("K")


def normalize_point_coords(
    coords: Mapping[K, Point2D],
    scale: float = 100.0,
) -> Dict[K, Point2D]:
    """Normalize a coordinate mapping into ``[0, scale]`` for each axis."""

    if not coords:
        return {}

    xs = [pt[0] for pt in coords.values()]
    ys = [pt[1] for pt in coords.values()]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    span_x = max_x - min_x
    span_y = max_y - min_y

    normalized: Dict[K, Point2D] = {}
    for name, (x, y) in coords.items():
        nx = 0.0 if span_x == 0 else (x - min_x) / span_x
        ny = 0.0 if span_y == 0 else (y - min_y) / span_y
        normalized[name] = (nx * scale, ny * scale)

    logger.debug("Normalized coordinates for %d points with scale=%s", len(coords), scale)
    return normalized


__all__ = ["normalize_point_coords"]
