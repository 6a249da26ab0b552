import numpy as np
import pytest

from geosketch import (
    Constraint,
    EquationGradientMismatch,
    GradientArityMismatch,
    IndexOutOfRange,
    PointStore,
    assemble,
    distance,
    fixed_x,
    fixed_y,
    objective,
    register_evaluator,
    residual_breakdown,
    unregister_evaluator,
    vertical,
)


@pytest.fixture
def custom_kinds():
    registered = []

    def _register(kind, func):
        register_evaluator(kind, func)
        registered.append(kind)

    yield _register
    for kind in registered:
        unregister_evaluator(kind)


def _store(*coords):
    store = PointStore()
    for x, y in coords:
        store.add_point(x, y)
    return store


def test_assemble_reference_configuration():
    store = _store((0.2, 0.1), (0.1, 0.9))
    constraints = [fixed_x(0, 0.0), fixed_y(0, 0.0), vertical(0, 1), distance(0, 1, 1.0)]

    residuals, jacobian = assemble(store, constraints)

    assert residuals == pytest.approx([0.2, 0.1, 0.1, -0.35])
    expected = np.array(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [1.0, 0.0, -1.0, 0.0],
            [0.1, -0.8, -0.1, 0.8],
        ]
    )
    assert np.allclose(jacobian, expected)


def test_scatter_leaves_unreferenced_columns_zero():
    store = _store((0.0, 0.0), (1.0, 1.0), (2.0, 3.0))

    residuals, jacobian = assemble(store, [fixed_x(2, 1.0)])

    assert residuals.tolist() == [1.0]
    assert jacobian.tolist() == [[0.0, 0.0, 0.0, 0.0, 1.0, 0.0]]


def test_assemble_without_constraints():
    store = _store((0.0, 0.0), (1.0, 1.0))
    residuals, jacobian = assemble(store, [])
    assert residuals.shape == (0,)
    assert jacobian.shape == (0, 4)
    assert objective(store, []) == 0.0


def test_assemble_accepts_flat_coordinates():
    residuals, jacobian = assemble(np.array([0.0, 0.0, 3.0, 4.0]), [distance(0, 1, 5.0)])
    assert residuals.tolist() == [0.0]
    assert jacobian.shape == (1, 4)


def test_assemble_rejects_out_of_range_index():
    store = _store((0.0, 0.0))
    with pytest.raises(IndexOutOfRange):
        assemble(store, [vertical(0, 1)])


def test_gradient_row_length_mismatch(custom_kinds):
    custom_kinds("short_row", lambda c, coords: (np.array([1.0]), [np.array([1.0, 0.0, 0.0])]))
    store = _store((0.0, 0.0), (1.0, 1.0))

    with pytest.raises(GradientArityMismatch) as exc:
        assemble(store, [fixed_x(0, 1.0), Constraint("short_row", (0, 1))])

    assert exc.value.constraint.kind == "short_row"
    assert "expected 4" in str(exc.value)


def test_equation_gradient_count_mismatch_names_kind(custom_kinds):
    custom_kinds(
        "two_equations",
        lambda c, coords: (np.array([1.0, 2.0]), [np.array([1.0, 0.0])]),
    )
    store = _store((0.0, 0.0))

    with pytest.raises(EquationGradientMismatch) as exc:
        assemble(store, [Constraint("two_equations", (0,))])

    assert "two_equations" in str(exc.value)


def test_multi_equation_constraint_emits_one_row_per_equation(custom_kinds):
    def pin(constraint, coords):
        (p,) = constraint.indices
        x, y = coords[p]
        return np.array([x - 1.0, y - 2.0]), [np.array([1.0, 0.0]), np.array([0.0, 1.0])]

    custom_kinds("pin", pin)
    store = _store((5.0, 5.0), (0.0, 0.0))

    residuals, jacobian = assemble(store, [Constraint("pin", (1,))])

    assert residuals.tolist() == [-1.0, -2.0]
    assert jacobian.tolist() == [[0.0, 0.0, 1.0, 0.0], [0.0, 0.0, 0.0, 1.0]]


def test_objective_and_breakdown():
    store = _store((1.0, 2.0), (4.0, 6.0))
    constraints = [fixed_x(0, 0.0), distance(0, 1, 5.0)]

    assert objective(store, constraints) == pytest.approx(1.0)

    breakdown = residual_breakdown(store, constraints)
    assert [entry["kind"] for entry in breakdown] == ["fixed_x", "distance"]
    assert breakdown[0]["max_abs"] == pytest.approx(1.0)
    assert breakdown[1]["max_abs"] == pytest.approx(0.0)
