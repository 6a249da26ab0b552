"""Contiguous, index-addressed storage for 2D points."""

from __future__ import annotations

import numbers
from typing import Iterator, List

import numpy as np

from .model import IndexOutOfRange, Point2D

_INITIAL_CAPACITY = 8


class PointStore:
    """Append-only buffer of ``(x, y)`` coordinates.

    Points are identified by their position in the store. The backing
    ``numpy`` buffer grows by doubling, so indices stay stable for the
    lifetime of the store.
    """

    def __init__(self, capacity: int = _INITIAL_CAPACITY) -> None:
        self._data = np.zeros((max(1, int(capacity)), 2), dtype=float)
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Point2D]:
        for idx in range(self._size):
            yield self.get(idx)

    def __repr__(self) -> str:
        return f"PointStore(size={self._size})"

    def _check(self, index: object) -> int:
        if isinstance(index, bool) or not isinstance(index, numbers.Integral):
            raise IndexOutOfRange(index, self._size)
        idx = int(index)
        if idx < 0 or idx >= self._size:
            raise IndexOutOfRange(index, self._size)
        return idx

    def add_point(self, x: float, y: float) -> int:
        if self._size == self._data.shape[0]:
            grown = np.zeros((2 * self._data.shape[0], 2), dtype=float)
            grown[: self._size] = self._data[: self._size]
            self._data = grown
        self._data[self._size] = (float(x), float(y))
        self._size += 1
        return self._size - 1

    def get(self, index: int) -> Point2D:
        idx = self._check(index)
        return float(self._data[idx, 0]), float(self._data[idx, 1])

    def translate(self, index: int, dx: float, dy: float) -> None:
        idx = self._check(index)
        self._data[idx, 0] += dx
        self._data[idx, 1] += dy

    def shift(self, delta: np.ndarray) -> None:
        """Move every point at once by a flat ``[dx0, dy0, dx1, dy1, ...]`` vector."""

        delta = np.asarray(delta, dtype=float)
        if delta.shape != (2 * self._size,):
            raise ValueError(
                f"shift expects a vector of length {2 * self._size}, got shape {delta.shape}"
            )
        self._data[: self._size] += delta.reshape(self._size, 2)

    @property
    def array(self) -> np.ndarray:
        view = self._data[: self._size]
        view = view.view()
        view.flags.writeable = False
        return view

    def flat(self) -> np.ndarray:
        return self._data[: self._size].reshape(-1).copy()

    def to_list(self) -> List[Point2D]:
        return list(self)

    def copy(self) -> "PointStore":
        clone = PointStore(capacity=self._data.shape[0])
        clone._data[: self._size] = self._data[: self._size]
        clone._size = self._size
        return clone

    @classmethod
    def from_flat(cls, values: np.ndarray) -> "PointStore":
        values = np.asarray(values, dtype=float)
        if values.ndim != 1 or values.size % 2:
            raise ValueError("flat coordinate vector must have even length")
        store = cls(capacity=max(1, values.size // 2))
        for x, y in values.reshape(-1, 2):
            store.add_point(x, y)
        return store


__all__ = ["PointStore"]
