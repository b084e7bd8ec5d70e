from collections import namedtuple

import numpy


SequenceSnapshot = namedtuple("SequenceSnapshot", ("nValues", "xValues", "zValues"))


class IterateSequence:
    """
    Rows ``(n, x_n, z_n)`` of an orbit. ``z_n`` is ``None`` for rows computed
    while the k-fold iterate was disabled.

    Not synchronized by itself: the owner appends whole rows under its lock and
    hands out snapshots.
    """

    def __init__(self):
        self._n = []
        self._x = []
        self._z = []

    def append(self, n: int, x: float, z=None):
        if self._n and n <= self._n[-1]:
            raise ValueError("n must be strictly increasing: {} after {}".format(n, self._n[-1]))
        if not self._n and n != 0:
            raise ValueError("first row must have n = 0, got {}".format(n))
        self._n.append(n)
        self._x.append(x)
        self._z.append(z)

    def clear(self):
        self._n = []
        self._x = []
        self._z = []

    def __len__(self):
        return len(self._n)

    def row(self, i):
        return self._n[i], self._x[i], self._z[i]

    def snapshot(self) -> SequenceSnapshot:
        return SequenceSnapshot(tuple(self._n), tuple(self._x), tuple(self._z))


class CobwebPath:

    def __init__(self):
        self._points = []

    def addPoint(self, x: float, y: float):
        self._points.append((x, y))

    def addCorner(self, old: float, new: float):
        # vertical segment from the diagonal to the graph
        self._points.append((old, old))
        self._points.append((old, new))

    def clear(self):
        self._points = []

    def __len__(self):
        return len(self._points)

    def points(self) -> tuple:
        return tuple(self._points)

    def asArray(self) -> numpy.ndarray:
        if not self._points:
            return numpy.empty((0, 2), dtype=numpy.float64)
        return numpy.array(self._points, dtype=numpy.float64)
