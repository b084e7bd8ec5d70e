import logging
import math

from typing import Callable

from PyQt5.QtCore import QObject, pyqtSignal as Signal

from .bounds import Bounds, CoordinatePair, PixelRect
from .config import DEFAULT_SCROLL_ZOOM_MARGIN
from .errors import NumberFormatError
from .inputs import parseReal

logger = logging.getLogger(__name__)


FIELD_LABELS = {
    "xMin": "x Min",
    "xMax": "x Max",
    "yMin": "y Min",
    "yMax": "y Max",
}

_COUNTERPARTS = {
    "xMin": ("xMax", "less than or equal to"),
    "xMax": ("xMin", "greater than or equal to"),
    "yMin": ("yMax", "less than or equal to"),
    "yMax": ("yMin", "greater than or equal to"),
}


class ZoomStack:
    """
    Nested view rectangles. The bottom one is the full zoom and is never
    popped; the top one is the active view.
    """

    def __init__(self, fullZoom: Bounds):
        self._levels = (fullZoom,)

    def __len__(self):
        return len(self._levels)

    def levels(self) -> tuple:
        return self._levels

    def top(self) -> Bounds:
        return self._levels[-1]

    def bottom(self) -> Bounds:
        return self._levels[0]

    def push(self, bounds: Bounds):
        self._levels = self._levels + (bounds,)

    def pop(self):
        if len(self._levels) == 1:
            return None
        popped = self._levels[-1]
        self._levels = self._levels[:-1]
        return popped

    def reset(self):
        self._levels = self._levels[:1]

    def setFull(self, fullZoom: Bounds):
        self._levels = (fullZoom,)


class ZoomManager(QObject):

    viewChanged = Signal(object)

    previewChanged = Signal(object)

    cursorMoved = Signal(str)

    fullZoomEditable = Signal(bool)

    def __init__(self, fullZoom: Bounds,
                 pixelToData: Callable[[tuple], CoordinatePair],
                 scrollZoomMargin: int = DEFAULT_SCROLL_ZOOM_MARGIN,
                 parent=None):
        super().__init__(parent)
        self._pixelToData = pixelToData
        self._scrollZoomMargin = scrollZoomMargin
        self._stack = ZoomStack(fullZoom)
        self._cursor = None
        self._dragStartPx = None
        self._dragStart = None
        self._preview = PixelRect.EMPTY

    def stack(self) -> ZoomStack:
        return self._stack

    def depth(self) -> int:
        return len(self._stack)

    def current(self) -> Bounds:
        return self._stack.top()

    def fullZoom(self) -> Bounds:
        return self._stack.bottom()

    def cursor(self):
        return self._cursor

    def isDragging(self) -> bool:
        return self._dragStartPx is not None

    def currentRectangle(self) -> PixelRect:
        return self._preview

    def onPointerMove(self, point: tuple) -> CoordinatePair:
        self._cursor = self._pixelToData(point)
        self.cursorMoved.emit(str(self._cursor))
        return self._cursor

    def onPrimaryButtonDown(self, point: tuple):
        if self._dragStartPx is not None:
            return
        self._dragStartPx = tuple(point)
        self._dragStart = self._cursor if self._cursor is not None else self._pixelToData(point)

    def onPrimaryButtonDrag(self, point: tuple, square: bool = False):
        if self._dragStartPx is None:
            return
        self._preview = PixelRect.fromDrag(self._dragStartPx, point, square)
        self.previewChanged.emit(self._preview)

    def onPrimaryButtonUp(self, point: tuple, square: bool = False):
        if self._dragStartPx is None:
            return None

        start, end = self._dragStart, self._pixelToData(point)
        self._clearDrag()
        if start == end:
            return None

        if square:
            side = max(abs(end.x - start.x), abs(end.y - start.y))
            end = CoordinatePair(
                start.x + math.copysign(side, end.x - start.x),
                start.y + math.copysign(side, end.y - start.y)
            )

        return self._zoomIn(Bounds.fromCorners(start, end))

    def onSecondaryButtonClick(self):
        if self._dragStartPx is not None:
            return None
        self._stack.reset()
        logger.debug("Zoom reset to %s", self._stack.top())
        self.viewChanged.emit(self._stack.top())
        self.fullZoomEditable.emit(True)
        return self._stack.top()

    def onScroll(self, direction: int, center: tuple):
        if direction > 0:
            if self._stack.pop() is None:
                return None
            logger.debug("Zoom out to %s (depth %d)", self._stack.top(), len(self._stack))
            if len(self._stack) == 1:
                self.fullZoomEditable.emit(True)
            self.viewChanged.emit(self._stack.top())
            return self._stack.top()

        if direction < 0:
            m = self._scrollZoomMargin
            topLeft = self._pixelToData((center[0] - m, center[1] - m))
            bottomRight = self._pixelToData((center[0] + m, center[1] + m))
            return self._zoomIn(Bounds.fromCorners(topLeft, bottomRight))

        return None

    def setFullZoom(self, fullZoom: Bounds):
        self._stack.setFull(fullZoom)
        logger.debug("Full zoom set to %s", fullZoom)
        self.viewChanged.emit(fullZoom)
        self.fullZoomEditable.emit(True)

    def editFullZoom(self, name: str, text) -> Bounds:
        if name not in FIELD_LABELS:
            raise KeyError("Unknown bound: {}".format(name))
        value = parseReal(text, FIELD_LABELS[name])
        try:
            fullZoom = self.fullZoom().replace(**{name: value})
        except ValueError as e:
            other, relation = _COUNTERPARTS[name]
            raise NumberFormatError(FIELD_LABELS[name], text, expected="{} {} ({})".format(
                relation, FIELD_LABELS[other], getattr(self.fullZoom(), other)
            )) from e
        self.setFullZoom(fullZoom)
        return fullZoom

    def _zoomIn(self, bounds: Bounds) -> Bounds:
        self._stack.push(bounds)
        logger.debug("Zoom in to %s (depth %d)", bounds, len(self._stack))
        self.viewChanged.emit(bounds)
        self.fullZoomEditable.emit(False)
        return bounds

    def _clearDrag(self):
        self._dragStartPx = None
        self._dragStart = None
        self._preview = PixelRect.EMPTY
        self.previewChanged.emit(self._preview)
