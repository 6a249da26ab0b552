import numpy as np
import pytest

from geosketch import (
    SCENARIOS,
    Constraint,
    GeometricSystem,
    GradientArityMismatch,
    IndexOutOfRange,
    RelaxOptions,
    distance,
    fixed_x,
    fixed_y,
    normalize_point_coords,
    vertical,
)


def _reference():
    system = GeometricSystem()
    p0 = system.add_point(0.2, 0.1)
    p1 = system.add_point(0.1, 0.9)
    system.add_constraint(fixed_x(p0, 0.0))
    system.add_constraint(fixed_y(p0, 0.0))
    system.add_constraint(vertical(p0, p1))
    system.add_constraint(distance(p0, p1, 1.0))
    return system


def test_system_starts_empty():
    system = GeometricSystem()
    assert len(system.points) == 0
    assert system.constraints == []
    assert system.residuals().shape == (0,)
    assert system.objective() == 0.0


def test_add_constraint_checks_point_indices():
    system = GeometricSystem()
    system.add_point(0.0, 0.0)

    with pytest.raises(IndexOutOfRange):
        system.add_constraint(vertical(0, 1))
    assert system.constraints == []

    assert system.add_constraint(fixed_x(0, 1.0)) == 0


def test_reference_system_relaxes_step_by_step():
    system = _reference()
    for _ in range(100):
        system.step()

    assert system.point(0) == pytest.approx((0.0, 0.0), abs=1e-3)
    assert system.point(1) == pytest.approx((0.0, 1.0), abs=1e-3)
    assert np.max(np.abs(system.residuals())) < 1e-3


def test_step_rejects_unknown_method():
    with pytest.raises(ValueError):
        _reference().step("conjugate-gradient")  # type: ignore[arg-type]


def test_relax_uses_default_options():
    system = _reference()
    result = system.relax()

    assert result.iterations <= RelaxOptions().max_iterations
    assert result.point_coords[1] == pytest.approx((0.0, 1.0), abs=1e-3)


def test_least_squares_matches_relaxation():
    system = _reference()
    result = system.solve_least_squares()

    assert result.converged
    assert result.max_residual < 1e-8
    assert system.point(0) == pytest.approx((0.0, 0.0), abs=1e-6)
    assert system.point(1) == pytest.approx((0.0, 1.0), abs=1e-6)


def test_residual_breakdown_describes_each_constraint():
    breakdown = _reference().residual_breakdown()
    assert [entry["kind"] for entry in breakdown] == ["fixed_x", "fixed_y", "vertical", "distance"]
    assert breakdown[3]["values"] == pytest.approx([-0.35])


@pytest.mark.parametrize(
    "name, method",
    [
        ("reference", "steepest"),
        ("colinear", "steepest"),
        ("rectangle", "gauss-newton"),
    ],
)
def test_builtin_scenarios_settle(name, method):
    system = SCENARIOS[name]()
    initial = system.objective()

    system.relax(RelaxOptions(max_iterations=400, tol=1e-6, method=method))

    assert system.objective() < initial
    assert np.max(np.abs(system.residuals())) < 1e-4


def test_normalize_point_coords():
    coords = {0: (0.0, 0.0), 1: (2.0, 4.0), 2: (1.0, 2.0)}
    assert normalize_point_coords(coords) == {
        0: (0.0, 0.0),
        1: (100.0, 100.0),
        2: (50.0, 50.0),
    }
    assert normalize_point_coords({0: (3.0, 5.0), 1: (3.0, 7.0)}, scale=10.0) == {
        0: (0.0, 0.0),
        1: (0.0, 10.0),
    }
    assert normalize_point_coords({}) == {}


def test_add_constraint_checks_point_count_of_builtin_kinds():
    system = GeometricSystem()
    system.add_point(0.0, 0.0)
    system.add_point(1.0, 1.0)

    with pytest.raises(GradientArityMismatch) as exc:
        system.add_constraint(Constraint("vertical", (0,)))

    assert "takes 2 point(s), got 1" in str(exc.value)
    assert system.constraints == []
