import unittest

from cobweb.sequence import IterateSequence, CobwebPath


class TestIterateSequence(unittest.TestCase):

    def test_append_and_snapshot(self):
        seq = IterateSequence()
        seq.append(0, 0.1, 0.1)
        seq.append(1, 0.18)
        snap = seq.snapshot()
        assert snap.nValues == (0, 1)
        assert snap.xValues == (0.1, 0.18)
        assert snap.zValues == (0.1, None)
        assert seq.row(1) == (1, 0.18, None)

    def test_snapshot_is_detached(self):
        seq = IterateSequence()
        seq.append(0, 0.5)
        snap = seq.snapshot()
        seq.append(1, 0.5)
        assert len(snap.nValues) == 1

    def test_first_row_must_be_zero(self):
        with self.assertRaises(ValueError):
            IterateSequence().append(1, 0.5)

    def test_n_strictly_increasing(self):
        seq = IterateSequence()
        seq.append(0, 0.5)
        with self.assertRaises(ValueError):
            seq.append(0, 0.5)

    def test_clear(self):
        seq = IterateSequence()
        seq.append(0, 0.5)
        seq.clear()
        assert len(seq) == 0
        seq.append(0, 0.25)
        assert len(seq) == 1


class TestCobwebPath(unittest.TestCase):

    def test_corner(self):
        path = CobwebPath()
        path.addCorner(0.1, 0.18)
        path.addCorner(0.18, 0.2952)
        assert path.points() == ((0.1, 0.1), (0.1, 0.18), (0.18, 0.18), (0.18, 0.2952))
        assert path.asArray().shape == (4, 2)

    def test_empty(self):
        path = CobwebPath()
        path.addPoint(1, 2)
        path.clear()
        assert len(path) == 0
        assert path.asArray().shape == (0, 2)


if __name__ == "__main__":
    unittest.main()
