import logging
import threading
import time

from collections import namedtuple
from typing import Callable

from PyQt5.QtCore import QObject, pyqtSignal as Signal, pyqtSlot as Slot

from .config import DEFAULT_FUNCTION, DEFAULT_SEED, DEFAULT_K, DEFAULT_REDRAW_INTERVAL
from .errors import DomainError, IterationError, NumberFormatError
from .formula import Formula
from .inputs import parseReal, parsePositiveInteger
from .sequence import IterateSequence, CobwebPath

logger = logging.getLogger(__name__)


BatchResult = namedtuple("BatchResult", ("requested", "completed", "cancelled", "error"))

EngineSnapshot = namedtuple("EngineSnapshot", ("sequence", "cobweb", "kCobweb"))


class IterationEngine(QObject):
    """
    Orbit of x -> f(x) (and, optionally, of the k-fold iterate) together with
    the cobweb paths and the table of iterates.

    All mutation goes through the methods below, each step is applied under a
    lock so readers calling ``snapshot()`` from another thread never observe a
    half-appended step.
    """

    sequenceChanged = Signal()

    redrawRequested = Signal()

    editorsLocked = Signal(bool)

    formulaChanged = Signal()

    kEnabledChanged = Signal(bool)

    batchProgress = Signal(int, int)

    batchFailed = Signal(str)

    batchFinished = Signal(object)

    def __init__(self,
                 function: str = DEFAULT_FUNCTION,
                 seed: float = DEFAULT_SEED,
                 k: int = DEFAULT_K,
                 kEnabled: bool = False,
                 batchSize: int = 1,
                 redrawInterval: int = DEFAULT_REDRAW_INTERVAL,
                 parent=None):
        super().__init__(parent)
        self._lock = threading.Lock()
        self._k = parsePositiveInteger(k, "k value")
        self._kEnabled = bool(kEnabled)
        self._seed = parseReal(seed, "Initial value")
        self._batchSize = parsePositiveInteger(batchSize, "Iterations")
        self._redrawInterval = parsePositiveInteger(redrawInterval, "Redraw interval")
        self._base = None
        self._kFormula = None
        self._current = None
        self._kCurrent = None
        self._index = 0
        self._running = False
        self._sequence = IterateSequence()
        self._web = CobwebPath()
        self._kWeb = CobwebPath()
        self.setBaseFormula(function)

    # state

    def isStarted(self) -> bool:
        return self._current is not None

    def isRunning(self) -> bool:
        return self._running

    def index(self) -> int:
        return self._index

    def current(self):
        return self._current

    def kCurrent(self):
        return self._kCurrent

    def seed(self) -> float:
        return self._seed

    def k(self) -> int:
        return self._k

    def kEnabled(self) -> bool:
        return self._kEnabled

    def batchSize(self) -> int:
        return self._batchSize

    def baseFormula(self) -> Formula:
        return self._base

    def kFormula(self) -> Formula:
        return self._kFormula

    def snapshot(self) -> EngineSnapshot:
        with self._lock:
            return EngineSnapshot(self._sequence.snapshot(), self._web.asArray(), self._kWeb.asArray())

    # editing

    def setBaseFormula(self, text: str) -> Formula:
        base = Formula(text)
        kFormula = base.kFold(self._k)
        with self._lock:
            self._base, self._kFormula = base, kFormula
        logger.debug("f(x) = %s, f^%d(x) = %s", base, self._k, kFormula)
        self.formulaChanged.emit()
        return base

    def setK(self, value) -> Formula:
        k = parsePositiveInteger(value, "k value")
        kFormula = self._base.kFold(k)
        with self._lock:
            self._k, self._kFormula = k, kFormula
        logger.debug("f^%d(x) = %s", k, kFormula)
        self.formulaChanged.emit()
        return kFormula

    def setKEnabled(self, enabled: bool):
        if self.isStarted():
            raise IterationError("k-th iterate cannot be toggled until the iteration is reset")
        self._kEnabled = bool(enabled)
        self.kEnabledChanged.emit(self._kEnabled)

    def setSeed(self, text) -> float:
        self._seed = parseReal(text, "Initial value")
        return self._seed

    def setIterationBatchSize(self, value) -> int:
        self._batchSize = parsePositiveInteger(value, "Iterations")
        return self._batchSize

    # iteration

    def start(self, seed=None) -> bool:
        value = self._seed if seed is None else parseReal(seed, "Initial value")
        with self._lock:
            if self._current is not None:
                return False
            self._current = self._kCurrent = value
            self._index = 0
            self._sequence.append(0, value, value)
        logger.debug("Started from x0 = %s", value)
        self.editorsLocked.emit(True)
        self.sequenceChanged.emit()
        return True

    def step(self) -> int:
        with self._lock:
            if self._current is None:
                raise IterationError("iteration has not been started")
            base = self._base

            # evaluate everything before touching the sequences
            kOld = kNew = self._kCurrent
            if self._kEnabled:
                for _ in range(self._k):
                    kNew = base.evaluate(kNew)
            old = self._current
            new = base.evaluate(old)

            if self._kEnabled:
                self._kWeb.addCorner(kOld, kNew)
                self._kCurrent = kNew
            self._web.addCorner(old, new)
            self._current = new
            self._index += 1
            self._sequence.append(self._index, new, kNew if self._kEnabled else None)
            return self._index

    def runBatch(self, count=None, cancelled: Callable[[], bool] = None) -> BatchResult:
        count = self._batchSize if count is None else parsePositiveInteger(count, "Iterations")
        with self._lock:
            if self._current is None:
                raise IterationError("iteration has not been started")
            if self._running:
                raise IterationError("a batch is already running")
            self._running = True

        logger.info("Iterating %d times from n = %d", count, self._index)
        startTime = time.monotonic()
        completed, wasCancelled, error = 0, False, None
        try:
            for i in range(count):
                if cancelled is not None and cancelled():
                    wasCancelled = True
                    break
                self.step()
                completed += 1
                self.batchProgress.emit(completed, count)
                if i % self._redrawInterval == 0:
                    self.redrawRequested.emit()
                    self.sequenceChanged.emit()
        except DomainError as e:
            error = str(e)
            logger.warning("Iteration stopped at n = %d: %s", self._index, e)
            self.batchFailed.emit(error)
        finally:
            with self._lock:
                self._running = False
            self.redrawRequested.emit()
            self.sequenceChanged.emit()

        logger.info("Time for %d iterations: %d ms.", completed, (time.monotonic() - startTime) * 1000)
        result = BatchResult(count, completed, wasCancelled, error)
        self.batchFinished.emit(result)
        return result

    def iterate(self, count=None, cancelled: Callable[[], bool] = None) -> BatchResult:
        self.start()
        return self.runBatch(count, cancelled)

    def reset(self):
        with self._lock:
            if self._running:
                raise IterationError("cannot reset while iterating")
            self._current = self._kCurrent = None
            self._index = 0
            self._web.clear()
            self._kWeb.clear()
            self._sequence.clear()
        logger.debug("Iteration reset")
        self.editorsLocked.emit(False)
        self.sequenceChanged.emit()
        self.redrawRequested.emit()


class IterationWorker(QObject):
    """
    Runs one batch of an ``IterationEngine``; meant to be moved to a ``QThread``.
    """

    finished = Signal(object)

    def __init__(self, engine: IterationEngine, count=None):
        super().__init__()
        self._engine = engine
        self._count = count
        self._cancel = threading.Event()

    def cancel(self):
        self._cancel.set()

    def isCancelled(self) -> bool:
        return self._cancel.is_set()

    @Slot()
    def run(self):
        try:
            result = self._engine.runBatch(self._count, cancelled=self._cancel.is_set)
        except (IterationError, NumberFormatError) as e:
            logger.error("Cannot iterate: %s", e)
            result = BatchResult(self._count or self._engine.batchSize(), 0, False, str(e))
        self.finished.emit(result)
