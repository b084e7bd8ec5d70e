import logging

from PyQt5.QtCore import Qt, QThread, QTimer
from PyQt5.QtGui import QFont, QKeySequence
from PyQt5.QtWidgets import QWidget, QLabel, QLineEdit, QCheckBox, QPushButton, QRadioButton, \
    QButtonGroup, QGroupBox, QGridLayout, QProgressBar, QTableView, QMessageBox, QShortcut, \
    QApplication, QAbstractItemView

from ..config import loadConfig, fullZoomOf, BATCH_CHOICES
from ..engine import IterationEngine, IterationWorker
from ..errors import FormulaError, NumberFormatError, IterationError
from ..zoom import ZoomManager, FIELD_LABELS
from . import vStack, hStack
from .plot_widget import PlotWidget
from .table import IterateTableModel

logger = logging.getLogger(__name__)


TABLE_INFO_MESSAGE = """For each nth iteration:

X_n = f( X_{n-1} )
Z_n = f^k( Z_{n-1} )

Rows in the table can be selected using the <SHIFT> or <CTRL> keys, <CTRL>-A.
Once selected, values can be copied with <CTRL>-C.
These values can be pasted into a variety of applications (such as a text editor or a spreadsheet)."""

ZOOMING_HELP_MESSAGE = """Zooming Controls:
Use the left mouse button to drag a box over an area to zoom in.
Use the right mouse button to reset to the full zoom specified by x min, x max, y min, y max.
Use the scroll wheel to zoom in and out centered on the mouse cursor.

Holding <ALT> while dragging the mouse will cause the zooming area to be a square.
This will maintain the aspect ratio of the previous zoom.
If you want the x and y ranges to be the same (i.e. show the graph with an aspect ratio of 1),
you should have x max - x min == y max - y min
and make sure to zoom holding down <ALT> each time."""

ITERATION_INFO_MESSAGE = """Iterating more than 1000 times at once may take a long time.

Hit ESC to stop the iteration process"""

GRAPH_OPTIONS = (
    ("grid", "Show grid lines"),
    ("line", "Show y=x"),
    ("f", "Show f(x)"),
    ("fk", "Show f^k(x)"),
    ("web", "Show cobweb plot of f(x)"),
    ("kWeb", "Show cobweb plot of f^k(x)"),
)


def titledGroup(title, layout):
    group = QGroupBox(title)
    group.setLayout(layout)
    return group


class CobwebPanel(QWidget):

    def __init__(self, config: dict = None, parent=None):
        super().__init__(parent)
        self._config = config if config is not None else loadConfig()
        self._thread = None
        self._worker = None
        self._reporting = False

        self.engine = IterationEngine(
            function=self._config["function"],
            seed=self._config["seed"],
            k=self._config["k"],
            kEnabled=self._config["kEnabled"],
            batchSize=BATCH_CHOICES[0],
            redrawInterval=self._config["redrawInterval"],
        )
        self.plot = PlotWidget(fullZoomOf(self._config), samples=self._config["curveSamples"])
        self.zoom = ZoomManager(fullZoomOf(self._config), self.plot.pixelToData,
                                scrollZoomMargin=self._config["scrollZoomMargin"])
        self.plot.attach(self.zoom)
        self.tableModel = IterateTableModel()

        self.makeWidgets()
        self.setupLayout()
        self.connectEverything()

        self.refreshFormulas()
        self.applyKEnabled(self.engine.kEnabled())
        self.applyEditorsLocked(False)

    def makeWidgets(self):
        self.titleLabel = QLabel("Cobweb Plot")
        self.titleLabel.setAlignment(Qt.AlignCenter)
        self.titleLabel.setFont(QFont("Sans", 24, QFont.Bold))

        self.pointLabel = QLabel("(0.000000, 0.000000)")
        self.pointLabel.setAlignment(Qt.AlignCenter)
        self.zoomHelpButton = QPushButton("Zooming Help")

        self.tableView = QTableView()
        self.tableView.setModel(self.tableModel)
        self.tableView.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.tableView.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.tableView.verticalHeader().setVisible(False)
        self.tableView.setMinimumWidth(400)
        self.tableInfoButton = QPushButton("Table Information")

        # function
        self.fEdit = QLineEdit(self._config["function"])
        self.seedEdit = QLineEdit(str(self._config["seed"]))
        self.kCheckBox = QCheckBox("Enable kth iterate f^k(x)")
        self.kCheckBox.setChecked(self.engine.kEnabled())
        self.kLabel = QLabel("k = ")
        self.kEdit = QLineEdit(str(self._config["k"]))
        self.resetButton = QPushButton("Reset")

        # iteration
        self.batchGroup = QButtonGroup(self)
        self.batchButtons = []
        for size in BATCH_CHOICES:
            button = QRadioButton(str(size))
            self.batchGroup.addButton(button)
            self.batchButtons.append((button, size))
        self.batchButtons[0][0].setChecked(True)
        self.customBatchButton = QRadioButton()
        self.batchGroup.addButton(self.customBatchButton)
        self.customBatchEdit = QLineEdit(str(self._config["customBatchSize"]))
        self.customBatchEdit.setEnabled(False)
        self.iterationInfoButton = QPushButton("?")
        self.iterationInfoButton.setFixedWidth(24)
        self.iterateButton = QPushButton("Iterate")
        self.iterationProgress = QProgressBar()
        self.iterationProgress.setTextVisible(True)
        self.iterationProgress.setVisible(False)

        # graph options
        self.optionBoxes = {}
        for name, text in GRAPH_OPTIONS:
            box = QCheckBox(text)
            box.setChecked(True)
            self.optionBoxes[name] = box

        # full zoom
        fullZoom = self.zoom.fullZoom()
        self.fullZoomEdits = {
            name: QLineEdit(str(getattr(fullZoom, name)))
            for name in FIELD_LABELS
        }

    def setupLayout(self):
        functionLayout = QGridLayout()
        functionLayout.addWidget(QLabel("f(x) = "), 0, 0)
        functionLayout.addWidget(self.fEdit, 0, 1)
        functionLayout.addWidget(QLabel("Initial Value: "), 1, 0)
        functionLayout.addWidget(self.seedEdit, 1, 1)
        functionLayout.addWidget(self.kCheckBox, 2, 0, 1, 2)
        functionLayout.addWidget(self.kLabel, 3, 0)
        functionLayout.addWidget(self.kEdit, 3, 1)
        functionLayout.addWidget(self.resetButton, 4, 0, 1, 2)

        iterationLayout = QGridLayout()
        for row, (button, _) in enumerate(self.batchButtons):
            iterationLayout.addWidget(button, row, 0, 1, 3)
        row = len(self.batchButtons)
        iterationLayout.addWidget(self.customBatchButton, row, 0)
        iterationLayout.addWidget(self.customBatchEdit, row, 1)
        iterationLayout.addWidget(self.iterationInfoButton, row, 2)
        iterationLayout.addWidget(self.iterateButton, row + 1, 0, 1, 3)
        iterationLayout.addWidget(self.iterationProgress, row + 2, 0, 1, 3)

        optionsLayout = QGridLayout()
        for i, (name, _) in enumerate(GRAPH_OPTIONS):
            optionsLayout.addWidget(self.optionBoxes[name], i % 3, i // 3)

        fullZoomLayout = QGridLayout()
        for i, (name, label) in enumerate(FIELD_LABELS.items()):
            fullZoomLayout.addWidget(QLabel(label.lower() + ": "), i // 2, (i % 2) * 2)
            fullZoomLayout.addWidget(self.fullZoomEdits[name], i // 2, (i % 2) * 2 + 1)

        self.fullZoomGroup = titledGroup("Graph dimensions when fully zoomed out", fullZoomLayout)

        self.setLayout(vStack(
            self.titleLabel,
            hStack(
                vStack(self.plot, self.pointLabel, self.zoomHelpButton, sp=2),
                vStack(self.tableView, self.tableInfoButton, sp=2),
                sp=8
            ),
            hStack(
                titledGroup("Function", functionLayout),
                titledGroup("Iteration", iterationLayout),
                vStack(
                    titledGroup("Graph Options", optionsLayout),
                    self.fullZoomGroup,
                    sp=4
                ),
                sp=4
            ),
            cm=(8, 8, 8, 8), sp=8
        ))

    def connectEverything(self):
        self.zoom.cursorMoved.connect(self.pointLabel.setText)
        self.zoom.fullZoomEditable.connect(self.fullZoomGroup.setEnabled)
        self.zoom.viewChanged.connect(lambda _: self.refreshCobwebs())

        self.engine.redrawRequested.connect(self.refreshCobwebs)
        self.engine.sequenceChanged.connect(self.refreshTable)
        self.engine.formulaChanged.connect(self.refreshFormulas)
        self.engine.kEnabledChanged.connect(self.applyKEnabled)
        self.engine.editorsLocked.connect(self.applyEditorsLocked)
        # emitted from the worker thread
        self.engine.batchProgress.connect(self.onBatchProgress)
        self.engine.batchFailed.connect(self.onBatchFailed)

        self.fEdit.editingFinished.connect(
            lambda: self.commit(self.fEdit, self.engine.setBaseFormula))
        self.seedEdit.editingFinished.connect(
            lambda: self.commit(self.seedEdit, self.engine.setSeed))
        self.kEdit.editingFinished.connect(
            lambda: self.commit(self.kEdit, self.engine.setK))
        self.kCheckBox.toggled.connect(self.setKEnabled)
        self.resetButton.clicked.connect(self.reset)

        for button, size in self.batchButtons:
            button.toggled.connect(lambda checked, size=size: self.setBatchSize(size, checked))
        self.customBatchButton.toggled.connect(self.setCustomBatch)
        self.customBatchEdit.editingFinished.connect(
            lambda: self.commit(self.customBatchEdit, self.engine.setIterationBatchSize, "Invalid Iteration"))
        self.iterateButton.clicked.connect(self.iterate)

        for name, box in self.optionBoxes.items():
            if name == "grid":
                box.toggled.connect(self.plot.setGridLines)
            else:
                box.toggled.connect(lambda checked, name=name: self.plot.setCurveVisible(name, checked))

        for name, edit in self.fullZoomEdits.items():
            edit.editingFinished.connect(
                lambda name=name, edit=edit: self.commit(edit, lambda text: self.zoom.editFullZoom(name, text)))

        self.zoomHelpButton.clicked.connect(
            lambda: QMessageBox.information(self, "Zooming Help", ZOOMING_HELP_MESSAGE))
        self.tableInfoButton.clicked.connect(
            lambda: QMessageBox.information(self, "Table Information", TABLE_INFO_MESSAGE))
        self.iterationInfoButton.clicked.connect(
            lambda: QMessageBox.information(self, "Iteration Information", ITERATION_INFO_MESSAGE))

        QShortcut(QKeySequence(Qt.Key_Escape), self, activated=self.cancelIteration)
        QShortcut(QKeySequence.Copy, self.tableView, activated=self.copySelection)

    # input

    def commit(self, edit: QLineEdit, apply, title="Syntax Error"):
        if self._reporting or edit.isReadOnly():
            return
        try:
            apply(edit.text())
        except (FormulaError, NumberFormatError) as e:
            self.reportError(edit, title, e)

    def reportError(self, edit: QLineEdit, title: str, error: Exception):
        logger.info("Rejected input %r: %s", edit.text(), error)
        self._reporting = True
        try:
            QMessageBox.critical(self, title, str(error))
        finally:
            self._reporting = False
        QTimer.singleShot(0, edit.setFocus)
        QTimer.singleShot(0, edit.selectAll)

    def setKEnabled(self, enabled: bool):
        try:
            self.engine.setKEnabled(enabled)
        except IterationError as e:
            logger.warning("%s", e)
            self.kCheckBox.blockSignals(True)
            self.kCheckBox.setChecked(self.engine.kEnabled())
            self.kCheckBox.blockSignals(False)

    def setBatchSize(self, size: int, checked: bool = True):
        if not checked:
            return
        self.customBatchEdit.setEnabled(False)
        self.engine.setIterationBatchSize(size)

    def setCustomBatch(self, checked: bool):
        self.customBatchEdit.setEnabled(checked)
        if checked:
            self.commit(self.customBatchEdit, self.engine.setIterationBatchSize, "Invalid Iteration")

    # state

    def applyKEnabled(self, enabled: bool):
        self.kEdit.setEnabled(enabled and not self.engine.isStarted())
        self.kLabel.setEnabled(enabled)
        self.optionBoxes["fk"].setEnabled(enabled)
        self.optionBoxes["kWeb"].setEnabled(enabled)
        self.plot.setKEnabled(enabled)
        self.tableModel.setZColumnVisible(enabled)

    def applyEditorsLocked(self, locked: bool):
        self.fEdit.setReadOnly(locked)
        self.seedEdit.setReadOnly(locked)
        self.kEdit.setReadOnly(locked)
        self.fEdit.setEnabled(not locked)
        self.seedEdit.setEnabled(not locked)
        self.kCheckBox.setEnabled(not locked)
        self.kEdit.setEnabled(not locked and self.engine.kEnabled())
        self.resetButton.setEnabled(locked and self._thread is None)

    def refreshFormulas(self):
        self.plot.setFormulas(self.engine.baseFormula(), self.engine.kFormula())

    def refreshCobwebs(self):
        snapshot = self.engine.snapshot()
        self.plot.setCobwebs(snapshot.cobweb, snapshot.kCobweb)

    def refreshTable(self):
        self.tableModel.setSnapshot(self.engine.snapshot().sequence)
        self.tableView.scrollToBottom()

    def copySelection(self):
        rows = [index.row() for index in self.tableView.selectionModel().selectedRows()]
        if rows:
            QApplication.clipboard().setText(self.tableModel.rowsAsText(rows))

    # iteration

    def reset(self):
        if self._thread is not None:
            return
        self.engine.reset()

    def iterate(self):
        if self._thread is not None:
            return
        self.engine.start()
        count = self.engine.batchSize()

        self.iterateButton.setVisible(False)
        self.resetButton.setEnabled(False)
        self.iterationProgress.setRange(0, count)
        self.iterationProgress.setValue(0)
        self.iterationProgress.setVisible(True)

        self._worker = IterationWorker(self.engine, count)
        self._thread = QThread(self)
        self._worker.moveToThread(self._thread)
        self._thread.started.connect(self._worker.run)
        self._worker.finished.connect(self.onBatchFinished)
        self._thread.start()

    def cancelIteration(self):
        if self._worker is not None:
            logger.info("Iteration cancelled by user")
            self._worker.cancel()

    def onBatchProgress(self, done: int, total: int):
        self.iterationProgress.setValue(done)

    def onBatchFailed(self, message: str):
        QMessageBox.warning(self, "Iteration stopped", message)

    def onBatchFinished(self, result):
        self._thread.quit()
        self._thread.wait()
        self._worker.deleteLater()
        self._thread.deleteLater()
        self._worker = None
        self._thread = None

        self.iterationProgress.setVisible(False)
        self.iterateButton.setVisible(True)
        self.resetButton.setEnabled(True)
        self.refreshCobwebs()
        self.refreshTable()
        logger.debug("Batch finished: %s", result)

    def closeEvent(self, event):
        if self._worker is not None:
            self._worker.cancel()
            self._thread.quit()
            self._thread.wait()
        super().closeEvent(event)
