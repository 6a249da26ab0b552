"""Built-in sketches used by the command line and examples."""

from __future__ import annotations

from typing import Callable, Dict

from . import constraints as c
from .system import GeometricSystem


def reference_system() -> GeometricSystem:
    """Vertical unit segment anchored at the origin."""

    system = GeometricSystem()
    p0 = system.add_point(0.2, 0.1)
    p1 = system.add_point(0.1, 0.9)
    system.add_constraint(c.fixed_x(p0, 0.0))
    system.add_constraint(c.fixed_y(p0, 0.0))
    system.add_constraint(c.vertical(p0, p1))
    system.add_constraint(c.distance(p0, p1, 1.0))
    return system


def colinear_system() -> GeometricSystem:
    system = GeometricSystem()
    p0 = system.add_point(0.0, 0.0)
    p1 = system.add_point(1.0, 0.3)
    p2 = system.add_point(2.0, -0.4)
    system.add_constraint(c.fixed_x(p0, 0.0))
    system.add_constraint(c.fixed_y(p0, 0.0))
    system.add_constraint(c.colinear(p0, p1, p2))
    return system


def rectangle_system() -> GeometricSystem:
    """A 2 x 1 rectangle sketched slightly out of square."""

    system = GeometricSystem()
    a = system.add_point(0.1, -0.1)
    b = system.add_point(2.2, 0.2)
    d = system.add_point(1.8, 1.1)
    e = system.add_point(-0.2, 0.9)
    system.add_constraint(c.fixed_x(a, 0.0))
    system.add_constraint(c.fixed_y(a, 0.0))
    system.add_constraint(c.horizontal(a, b))
    system.add_constraint(c.vertical(b, d))
    system.add_constraint(c.horizontal(d, e))
    system.add_constraint(c.vertical(e, a))
    system.add_constraint(c.distance(a, b, 2.0))
    system.add_constraint(c.distance(b, d, 1.0))
    return system


SCENARIOS: Dict[str, Callable[[], GeometricSystem]] = {
    "reference": reference_system,
    "colinear": colinear_system,
    "rectangle": rectangle_system,
}


__all__ = ["SCENARIOS", "colinear_system", "rectangle_system", "reference_system"]
