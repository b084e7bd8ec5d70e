import math

from collections import namedtuple


class CoordinatePair(namedtuple("CoordinatePair", ("x", "y"))):

    __slots__ = ()

    def __new__(cls, x, y):
        return super().__new__(cls, float(x), float(y))

    def __str__(self):
        return "({:.6f}, {:.6f})".format(self.x, self.y)


class PixelRect(namedtuple("PixelRect", ("x", "y", "width", "height"))):

    __slots__ = ()

    @staticmethod
    def fromDrag(start: tuple, end: tuple, square: bool = False):
        # rectangle spanned by a drag, normalized to non-negative size
        width = int(end[0] - start[0])
        height = int(end[1] - start[1])
        x, y = int(start[0]), int(start[1])

        if square:
            side = max(abs(width), abs(height))
            width = side * (1 if width > 0 else -1)
            height = side * (1 if height > 0 else -1)

        if width < 0:
            width = -width
            x -= width
        if height < 0:
            height = -height
            y -= height

        return PixelRect(x, y, width, height)

    def isEmpty(self):
        return self.width <= 0 or self.height <= 0


PixelRect.EMPTY = PixelRect(0, 0, 0, 0)


class Bounds:
    """
    Immutable view rectangle ``(xMin, xMax, yMin, yMax)`` in data coordinates.

    Instances are replaced, never changed: every "modification" returns a new
    ``Bounds``.
    """

    __slots__ = ("_xMin", "_xMax", "_yMin", "_yMax")

    NAMES = ("xMin", "xMax", "yMin", "yMax")

    def __init__(self, xMin, xMax, yMin, yMax):
        values = tuple(float(v) for v in (xMin, xMax, yMin, yMax))
        if not all(map(math.isfinite, values)):
            raise ValueError("Bounds must be finite, got {}".format(values))
        if values[0] > values[1]:
            raise ValueError("xMin ({}) is greater than xMax ({})".format(values[0], values[1]))
        if values[2] > values[3]:
            raise ValueError("yMin ({}) is greater than yMax ({})".format(values[2], values[3]))
        object.__setattr__(self, "_xMin", values[0])
        object.__setattr__(self, "_xMax", values[1])
        object.__setattr__(self, "_yMin", values[2])
        object.__setattr__(self, "_yMax", values[3])

    def __setattr__(self, key, value):
        raise AttributeError("Bounds is immutable")

    @property
    def xMin(self):
        return self._xMin

    @property
    def xMax(self):
        return self._xMax

    @property
    def yMin(self):
        return self._yMin

    @property
    def yMax(self):
        return self._yMax

    def width(self):
        return self._xMax - self._xMin

    def height(self):
        return self._yMax - self._yMin

    def asTuple(self):
        return self._xMin, self._xMax, self._yMin, self._yMax

    def replace(self, **bounds):
        unknown = set(bounds) - set(Bounds.NAMES)
        if unknown:
            raise KeyError("Unknown bounds: {}".format(", ".join(sorted(unknown))))
        values = dict(zip(Bounds.NAMES, self.asTuple()))
        values.update(bounds)
        return Bounds(**values)

    def fromPixel(self, px, py, w, h) -> CoordinatePair:
        # widget y axis points down, data y axis points up
        return CoordinatePair(
            self._xMin + px / w * (self._xMax - self._xMin),
            self._yMin + (h - py) / h * (self._yMax - self._yMin)
        )

    def toPixel(self, x, y, w, h):
        xSpan = self.width() or 1.0
        ySpan = self.height() or 1.0
        return (
            (x - self._xMin) / xSpan * w,
            h - (y - self._yMin) / ySpan * h
        )

    @staticmethod
    def fromCorners(a: CoordinatePair, b: CoordinatePair):
        return Bounds(min(a.x, b.x), max(a.x, b.x), min(a.y, b.y), max(a.y, b.y))

    def __eq__(self, other):
        if not isinstance(other, Bounds):
            return NotImplemented
        return self.asTuple() == other.asTuple()

    def __hash__(self):
        return hash(self.asTuple())

    def __repr__(self):
        return "Bounds(xMin={}, xMax={}, yMin={}, yMax={})".format(*self.asTuple())
