import math

import numpy

from PyQt5.QtCore import Qt, QPointF, QRect
from PyQt5.QtGui import QPainter, QPen, QColor, QPainterPath, QPolygonF
from PyQt5.QtWidgets import QWidget

from ..bounds import Bounds, PixelRect
from ..config import DEFAULT_CURVE_SAMPLES

# name -> color
CURVES = {
    "line": QColor(Qt.black),
    "f": QColor(Qt.blue),
    "fk": QColor(Qt.yellow),
    "web": QColor(Qt.red),
    "kWeb": QColor(Qt.green),
}

BACKGROUND_COLOR = QColor(Qt.lightGray)
GRID_COLOR = QColor(200, 200, 200)
AXIS_COLOR = QColor(Qt.darkGray)

# keeps QPainter away from coordinates it cannot rasterize
PIXEL_LIMIT = 1e6


def gridStep(span: float, lines: int = 10) -> float:
    if span <= 0 or not math.isfinite(span):
        return 0.0
    raw = span / lines
    magnitude = 10 ** math.floor(math.log10(raw))
    for m in (1, 2, 5, 10):
        if m * magnitude >= raw:
            return m * magnitude
    return 10 * magnitude


def mouseButtonsState(event):
    return bool(Qt.LeftButton & event.buttons()), bool(Qt.RightButton & event.buttons())


def squareModifier(event):
    return bool(event.modifiers() & Qt.AltModifier)


class PlotWidget(QWidget):

    def __init__(self, bounds: Bounds, samples: int = DEFAULT_CURVE_SAMPLES, parent=None):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setMinimumSize(300, 300)
        self._bounds = bounds
        self._samples = samples
        self._zoom = None
        self._formulas = {"f": None, "fk": None}
        self._webs = {"web": numpy.empty((0, 2)), "kWeb": numpy.empty((0, 2))}
        self._visible = {name: True for name in CURVES}
        self._kEnabled = False
        self._gridLines = True
        self._preview = PixelRect.EMPTY

    # coordinate mapping

    def bounds(self) -> Bounds:
        return self._bounds

    def pixelToData(self, point):
        return self._bounds.fromPixel(point[0], point[1], max(self.width(), 1), max(self.height(), 1))

    def dataToPixel(self, x, y):
        px, py = self._bounds.toPixel(x, y, self.width(), self.height())
        return numpy.clip(px, -PIXEL_LIMIT, PIXEL_LIMIT), numpy.clip(py, -PIXEL_LIMIT, PIXEL_LIMIT)

    def setViewBounds(self, bounds: Bounds):
        self._bounds = bounds
        self.update()

    # content

    def attach(self, zoomManager):
        self._zoom = zoomManager
        zoomManager.viewChanged.connect(self.setViewBounds)
        zoomManager.previewChanged.connect(self.setPreview)

    def setPreview(self, rect: PixelRect):
        self._preview = rect
        self.update()

    def setFormulas(self, f, fk):
        self._formulas = {"f": f, "fk": fk}
        self.update()

    def setCobwebs(self, web: numpy.ndarray, kWeb: numpy.ndarray):
        self._webs = {"web": web, "kWeb": kWeb}
        self.update()

    def setKEnabled(self, enabled: bool):
        self._kEnabled = enabled
        self.update()

    def setCurveVisible(self, name: str, visible: bool):
        if name not in CURVES:
            raise KeyError("Unknown curve: {}".format(name))
        self._visible[name] = visible
        self.update()

    def isCurveVisible(self, name: str) -> bool:
        return self._visible[name]

    def setGridLines(self, enabled: bool):
        self._gridLines = enabled
        self.update()

    # mouse

    def mouseMoveEvent(self, event):
        super().mouseMoveEvent(event)
        if self._zoom is None:
            return
        pos = (event.x(), event.y())
        self._zoom.onPointerMove(pos)
        left, _ = mouseButtonsState(event)
        if left:
            self._zoom.onPrimaryButtonDrag(pos, squareModifier(event))

    def mousePressEvent(self, event):
        super().mousePressEvent(event)
        self.setFocus()
        if self._zoom is not None and event.button() == Qt.LeftButton:
            self._zoom.onPrimaryButtonDown((event.x(), event.y()))

    def mouseReleaseEvent(self, event):
        super().mouseReleaseEvent(event)
        if self._zoom is None:
            return
        if event.button() == Qt.LeftButton:
            self._zoom.onPrimaryButtonUp((event.x(), event.y()), squareModifier(event))
        elif event.button() == Qt.RightButton:
            self._zoom.onSecondaryButtonClick()

    def wheelEvent(self, event):
        if self._zoom is None:
            return
        delta = event.angleDelta().y()
        if delta == 0:
            return
        # wheel up zooms in
        self._zoom.onScroll(-1 if delta > 0 else 1, (event.pos().x(), event.pos().y()))
        event.accept()

    # painting

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), BACKGROUND_COLOR)

        if self._gridLines:
            self._drawGrid(painter)

        if self._visible["line"]:
            b = self._bounds
            lo, hi = min(b.xMin, b.yMin), max(b.xMax, b.yMax)
            self._drawPolyline(painter, numpy.array([[lo, lo], [hi, hi]]), CURVES["line"])

        for name in ("f", "fk"):
            formula = self._formulas[name]
            if formula is None or not self._visible[name] or (name == "fk" and not self._kEnabled):
                continue
            xs = numpy.linspace(self._bounds.xMin, self._bounds.xMax, self._samples)
            self._drawCurve(painter, xs, formula.sample(xs), CURVES[name])

        for name in ("web", "kWeb"):
            if not self._visible[name] or (name == "kWeb" and not self._kEnabled):
                continue
            self._drawPolyline(painter, self._webs[name], CURVES[name])

        if not self._preview.isEmpty():
            pen = QPen(Qt.black, 1, Qt.DashLine)
            painter.setPen(pen)
            painter.setBrush(Qt.NoBrush)
            painter.drawRect(QRect(*self._preview))

        painter.end()

    def _drawGrid(self, painter: QPainter):
        b, w, h = self._bounds, self.width(), self.height()

        painter.setPen(QPen(GRID_COLOR, 1))
        step = gridStep(b.width())
        if step > 0:
            for x in numpy.arange(math.ceil(b.xMin / step) * step, b.xMax + step / 2, step):
                px, _ = self.dataToPixel(x, b.yMin)
                painter.drawLine(QPointF(px, 0), QPointF(px, h))
        step = gridStep(b.height())
        if step > 0:
            for y in numpy.arange(math.ceil(b.yMin / step) * step, b.yMax + step / 2, step):
                _, py = self.dataToPixel(b.xMin, y)
                painter.drawLine(QPointF(0, py), QPointF(w, py))

        painter.setPen(QPen(AXIS_COLOR, 1))
        if b.xMin <= 0 <= b.xMax:
            px, _ = self.dataToPixel(0.0, b.yMin)
            painter.drawLine(QPointF(px, 0), QPointF(px, h))
        if b.yMin <= 0 <= b.yMax:
            _, py = self.dataToPixel(b.xMin, 0.0)
            painter.drawLine(QPointF(0, py), QPointF(w, py))

    def _drawCurve(self, painter: QPainter, xs, ys, color: QColor):
        px, py = self.dataToPixel(xs, ys)
        path = QPainterPath()
        penDown = False
        for x, y, valid in zip(px, py, numpy.isfinite(ys)):
            if not valid:
                penDown = False
            elif penDown:
                path.lineTo(x, y)
            else:
                path.moveTo(x, y)
                penDown = True
        painter.setPen(QPen(color, 1.5))
        painter.setBrush(Qt.NoBrush)
        painter.drawPath(path)

    def _drawPolyline(self, painter: QPainter, points: numpy.ndarray, color: QColor):
        if len(points) < 2:
            return
        px, py = self.dataToPixel(points[:, 0], points[:, 1])
        painter.setPen(QPen(color, 1))
        painter.drawPolyline(QPolygonF([QPointF(x, y) for x, y in zip(px, py)]))
