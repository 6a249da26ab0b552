import numpy as np
import pytest

from geosketch import IndexOutOfRange, PointStore


def test_add_point_returns_stable_indices_across_growth():
    store = PointStore(capacity=2)
    indices = [store.add_point(float(i), float(-i)) for i in range(11)]

    assert indices == list(range(11))
    assert len(store) == 11
    assert store.get(0) == (0.0, 0.0)
    assert store.get(10) == (10.0, -10.0)
    assert store.to_list()[3] == (3.0, -3.0)


@pytest.mark.parametrize("index", [2, -1, 1.0, True])
def test_get_rejects_invalid_index(index):
    store = PointStore()
    store.add_point(1.0, 2.0)
    store.add_point(3.0, 4.0)

    with pytest.raises(IndexOutOfRange):
        store.get(index)


def test_out_of_range_is_an_index_error():
    store = PointStore()
    with pytest.raises(IndexError) as exc:
        store.translate(0, 1.0, 1.0)
    assert "out of range" in str(exc.value)


def test_translate_moves_single_point():
    store = PointStore()
    store.add_point(1.0, 2.0)
    store.add_point(3.0, 4.0)

    store.translate(1, 0.5, -1.0)

    assert store.get(0) == (1.0, 2.0)
    assert store.get(1) == (3.5, 3.0)


def test_shift_moves_all_points_and_checks_length():
    store = PointStore()
    store.add_point(0.0, 0.0)
    store.add_point(1.0, 1.0)

    store.shift(np.array([1.0, 2.0, -1.0, -2.0]))
    assert store.to_list() == [(1.0, 2.0), (0.0, -1.0)]

    with pytest.raises(ValueError):
        store.shift(np.zeros(3))


def test_array_view_is_read_only_and_flat_is_a_copy():
    store = PointStore()
    store.add_point(1.0, 2.0)

    view = store.array
    assert view.shape == (1, 2)
    with pytest.raises(ValueError):
        view[0, 0] = 5.0

    flat = store.flat()
    flat[0] = 7.0
    assert store.get(0) == (1.0, 2.0)


def test_copy_and_from_flat_are_independent():
    store = PointStore.from_flat(np.array([0.0, 1.0, 2.0, 3.0]))
    clone = store.copy()
    clone.translate(0, 1.0, 1.0)

    assert store.get(0) == (0.0, 1.0)
    assert clone.get(0) == (1.0, 2.0)
    assert clone.get(1) == (2.0, 3.0)

    with pytest.raises(ValueError):
        PointStore.from_flat(np.array([1.0, 2.0, 3.0]))
