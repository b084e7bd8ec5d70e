import os
import time
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtCore import QEventLoop, QThread, QTimer
from PyQt5.QtWidgets import QApplication

from cobweb.engine import IterationEngine, IterationWorker, BatchResult
from cobweb.errors import DomainError, FormulaError, IterationError, NumberFormatError

app = None


def setUpModule():
    global app
    app = QApplication.instance() or QApplication([])


class TestIteration(unittest.TestCase):

    def setUp(self):
        self.engine = IterationEngine("2*x*(1-x)", seed=0.1, k=2)

    def test_start_adds_seed_row(self):
        assert self.engine.start()
        seq = self.engine.snapshot().sequence
        assert seq.nValues == (0,)
        assert seq.xValues == (0.1,)
        assert not self.engine.start()

    def test_logistic_orbit(self):
        self.engine.start()
        for _ in range(2):
            self.engine.step()
        seq = self.engine.snapshot().sequence
        assert seq.nValues == (0, 1, 2)
        for actual, expected in zip(seq.xValues, (0.1, 0.18, 0.2952)):
            self.assertAlmostEqual(actual, expected)
        assert seq.zValues[1:] == (None, None)

    def test_cobweb_has_two_points_per_step(self):
        self.engine.start()
        for _ in range(3):
            self.engine.step()
        snap = self.engine.snapshot()
        assert snap.cobweb.shape == (6, 2)
        assert snap.kCobweb.shape == (0, 2)
        self.assertAlmostEqual(snap.cobweb[0][0], 0.1)
        self.assertAlmostEqual(snap.cobweb[0][1], 0.1)
        self.assertAlmostEqual(snap.cobweb[1][1], 0.18)

    def test_k_fold_orbit(self):
        self.engine.setKEnabled(True)
        self.engine.start()
        self.engine.step()
        snap = self.engine.snapshot()
        self.assertAlmostEqual(snap.sequence.zValues[1], 0.2952)
        self.assertAlmostEqual(self.engine.kCurrent(), 0.2952)
        assert snap.kCobweb.shape == (2, 2)

    def test_step_before_start(self):
        with self.assertRaises(IterationError):
            self.engine.step()

    def test_k_toggle_is_locked_while_started(self):
        self.engine.start()
        with self.assertRaises(IterationError):
            self.engine.setKEnabled(True)

    def test_reset(self):
        locked = []
        self.engine.editorsLocked.connect(locked.append)
        self.engine.start()
        self.engine.step()
        self.engine.reset()
        snap = self.engine.snapshot()
        assert not self.engine.isStarted()
        assert self.engine.index() == 0
        assert len(snap.sequence.nValues) == 0
        assert snap.cobweb.shape == (0, 2)
        assert locked == [True, False]

    def test_domain_error_leaves_state_untouched(self):
        engine = IterationEngine("1/x", seed=0)
        engine.start()
        with self.assertRaises(DomainError):
            engine.step()
        assert engine.index() == 0
        assert len(engine.snapshot().sequence.nValues) == 1
        assert engine.snapshot().cobweb.shape == (0, 2)


class TestFormulas(unittest.TestCase):

    def test_k_formula_text(self):
        engine = IterationEngine("x^2", k=3)
        assert engine.kFormula().text == "((x^2)^2)^2"

    def test_set_k(self):
        engine = IterationEngine("x^2", k=1)
        engine.setK("2")
        assert engine.k() == 2
        assert engine.kFormula().text == "(x^2)^2"

    def test_invalid_formula_keeps_previous(self):
        engine = IterationEngine("x^2", k=2)
        with self.assertRaises(FormulaError):
            engine.setBaseFormula("x +* 1")
        assert engine.baseFormula().text == "x^2"
        assert engine.kFormula().text == "(x^2)^2"

    def test_invalid_setters(self):
        engine = IterationEngine()
        with self.assertRaises(NumberFormatError):
            engine.setK("0")
        with self.assertRaises(NumberFormatError):
            engine.setSeed("one")
        with self.assertRaises(NumberFormatError):
            engine.setIterationBatchSize("-3")
        assert engine.setSeed("1/4") == 0.25
        assert engine.setIterationBatchSize("10") == 10


class TestBatch(unittest.TestCase):

    def test_batch_completes(self):
        engine = IterationEngine("2*x*(1-x)", seed=0.1, batchSize=10)
        finished = []
        engine.batchFinished.connect(finished.append)
        result = engine.iterate()
        assert result == BatchResult(10, 10, False, None)
        assert finished == [result]
        assert engine.index() == 10
        assert not engine.isRunning()

    def test_batch_stops_at_domain_error(self):
        engine = IterationEngine("sqrt(x) - 1", seed=4)
        failures = []
        engine.batchFailed.connect(failures.append)
        result = engine.iterate(10)
        assert result.completed == 3
        assert result.error is not None
        assert failures == [result.error]
        for actual, expected in zip(engine.snapshot().sequence.xValues, (4, 1, 0, -1)):
            self.assertAlmostEqual(actual, expected)

    def test_cancel(self):
        engine = IterationEngine("2*x*(1-x)", seed=0.1)
        engine.start()
        result = engine.runBatch(100, cancelled=lambda: engine.index() >= 5)
        assert result.completed == 5
        assert result.cancelled
        assert engine.index() == 5

    def test_redraw_interval(self):
        engine = IterationEngine("2*x*(1-x)", seed=0.1, redrawInterval=20)
        redraws = []
        engine.redrawRequested.connect(lambda: redraws.append(engine.index()))
        engine.iterate(45)
        # after steps 1, 21, 41 and once at the end
        assert redraws == [1, 21, 41, 45]

    def test_progress(self):
        engine = IterationEngine("2*x*(1-x)", seed=0.1)
        progress = []
        engine.batchProgress.connect(lambda done, total: progress.append((done, total)))
        engine.iterate(3)
        assert progress == [(1, 3), (2, 3), (3, 3)]

    def test_batch_requires_start(self):
        with self.assertRaises(IterationError):
            IterationEngine().runBatch(5)

    def test_batches_continue_the_orbit(self):
        engine = IterationEngine("2*x*(1-x)", seed=0.1)
        engine.iterate(2)
        engine.iterate(3)
        assert engine.snapshot().sequence.nValues == (0, 1, 2, 3, 4, 5)


class TestWorker(unittest.TestCase):

    def test_run(self):
        engine = IterationEngine("2*x*(1-x)", seed=0.1)
        engine.start()
        worker = IterationWorker(engine, 7)
        results = []
        worker.finished.connect(results.append)
        worker.run()
        assert results == [BatchResult(7, 7, False, None)]

    def test_cancelled_before_run(self):
        engine = IterationEngine("2*x*(1-x)", seed=0.1)
        engine.start()
        worker = IterationWorker(engine, 7)
        worker.cancel()
        assert worker.isCancelled()
        results = []
        worker.finished.connect(results.append)
        worker.run()
        assert results[0].completed == 0
        assert results[0].cancelled

    def test_run_without_start_reports_error(self):
        worker = IterationWorker(IterationEngine(), 3)
        results = []
        worker.finished.connect(results.append)
        worker.run()
        assert results[0].completed == 0
        assert results[0].error is not None


class TestWorkerThread(unittest.TestCase):

    def test_cancel_from_main_thread(self):
        engine = IterationEngine("2*x*(1-x)", seed=0.1)
        engine.start()
        requested = 10 ** 7
        worker = IterationWorker(engine, requested)
        thread = QThread()
        worker.moveToThread(thread)
        thread.started.connect(worker.run)

        loop = QEventLoop()
        results = []
        worker.finished.connect(results.append)
        # queued back to this thread
        worker.finished.connect(loop.quit)
        QTimer.singleShot(60000, loop.quit)

        thread.start()
        deadline = time.monotonic() + 10
        while engine.index() == 0 and time.monotonic() < deadline:
            time.sleep(0.001)
        worker.cancel()
        loop.exec_()
        thread.quit()
        thread.wait()

        assert len(results) == 1
        result = results[0]
        assert result.cancelled
        assert 0 < result.completed < requested
        assert not engine.isRunning()
        seq = engine.snapshot().sequence
        assert len(seq.nValues) == result.completed + 1
        assert len(seq.xValues) == len(seq.nValues)
        assert len(seq.zValues) == len(seq.nValues)


if __name__ == "__main__":
    unittest.main()
