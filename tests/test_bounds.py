import unittest

from cobweb.bounds import Bounds, CoordinatePair, PixelRect


class TestBounds(unittest.TestCase):

    def test_ordering_is_enforced(self):
        with self.assertRaises(ValueError):
            Bounds(1, 0, 0, 1)
        with self.assertRaises(ValueError):
            Bounds(0, 1, 1, 0)
        with self.assertRaises(ValueError):
            Bounds(0, float("inf"), 0, 1)

    def test_degenerate_window_is_allowed(self):
        b = Bounds(0.5, 0.5, 0, 1)
        assert b.width() == 0.0
        assert b.height() == 1.0

    def test_value_equality(self):
        assert Bounds(0, 1, 0, 1) == Bounds(0.0, 1.0, 0.0, 1.0)
        assert Bounds(0, 1, 0, 1) != Bounds(0, 1, 0, 2)
        assert len({Bounds(0, 1, 0, 1), Bounds(0, 1, 0, 1)}) == 1

    def test_immutable(self):
        b = Bounds(0, 1, 0, 1)
        with self.assertRaises(AttributeError):
            b.xMin = 0.5
        with self.assertRaises(AttributeError):
            b.width = 3

    def test_replace_returns_new_instance(self):
        b = Bounds(0, 1, 0, 1)
        r = b.replace(xMin=-1.0)
        assert r.asTuple() == (-1.0, 1.0, 0.0, 1.0)
        assert b.asTuple() == (0.0, 1.0, 0.0, 1.0)
        with self.assertRaises(ValueError):
            b.replace(yMax=-1.0)
        with self.assertRaises(KeyError):
            b.replace(zMin=0.0)

    def test_from_corners(self):
        b = Bounds.fromCorners(CoordinatePair(0.6, 0.2), CoordinatePair(0.2, 0.5))
        assert b.asTuple() == (0.2, 0.6, 0.2, 0.5)

    def test_pixel_mapping_inverts_y(self):
        b = Bounds(0, 2, -1, 1)
        assert b.fromPixel(0, 0, 200, 100) == CoordinatePair(0.0, 1.0)
        assert b.fromPixel(200, 100, 200, 100) == CoordinatePair(2.0, -1.0)
        assert b.fromPixel(100, 50, 200, 100) == CoordinatePair(1.0, 0.0)
        px, py = b.toPixel(1.5, 0.5, 200, 100)
        self.assertAlmostEqual(px, 150)
        self.assertAlmostEqual(py, 25)


class TestCoordinatePair(unittest.TestCase):

    def test_string_has_six_decimals(self):
        assert str(CoordinatePair(0.2, 0.5)) == "(0.200000, 0.500000)"
        assert str(CoordinatePair(-1, 1.0 / 3)) == "(-1.000000, 0.333333)"

    def test_value_equality(self):
        assert CoordinatePair(1, 2) == CoordinatePair(1.0, 2.0)
        assert CoordinatePair(1, 2) != CoordinatePair(2, 1)


class TestPixelRect(unittest.TestCase):

    def test_drag_is_normalized(self):
        assert PixelRect.fromDrag((50, 40), (10, 70)) == PixelRect(10, 40, 40, 30)
        assert PixelRect.fromDrag((10, 70), (50, 40)) == PixelRect(10, 40, 40, 30)

    def test_square_drag_keeps_direction(self):
        assert PixelRect.fromDrag((50, 50), (90, 70), square=True) == PixelRect(50, 50, 40, 40)
        assert PixelRect.fromDrag((50, 50), (10, 70), square=True) == PixelRect(10, 50, 40, 40)
        assert PixelRect.fromDrag((50, 50), (70, 20), square=True) == PixelRect(50, 20, 30, 30)

    def test_empty(self):
        assert PixelRect.EMPTY.isEmpty()
        assert PixelRect.fromDrag((5, 5), (5, 9)).isEmpty()
        assert not PixelRect(0, 0, 1, 1).isEmpty()


if __name__ == '__main__':
    unittest.main()
