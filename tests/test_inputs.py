import math
import unittest

from cobweb.errors import NumberFormatError
from cobweb.inputs import parseReal, parsePositiveInteger


class TestParseReal(unittest.TestCase):

    def test_decimal(self):
        assert parseReal("0.25") == 0.25
        assert parseReal(" -3e-2 ") == -0.03
        assert parseReal(7) == 7.0

    def test_symbolic(self):
        assert parseReal("1/4") == 0.25
        self.assertAlmostEqual(parseReal("pi/4"), math.pi / 4)
        self.assertAlmostEqual(parseReal("sqrt(2)"), math.sqrt(2))

    def test_rejected(self):
        for text in ("", "   ", "abc", "1/0", "inf", "nan", "I", "x + 1", "2*("):
            with self.assertRaises(NumberFormatError, msg=text):
                parseReal(text, "Initial value")

    def test_error_names_field(self):
        with self.assertRaises(NumberFormatError) as cm:
            parseReal("abc", "x Min")
        assert cm.exception.field == "x Min"
        assert cm.exception.text == "abc"
        assert str(cm.exception).startswith("x Min must be")


class TestParsePositiveInteger(unittest.TestCase):

    def test_accepted(self):
        assert parsePositiveInteger("10") == 10
        assert parsePositiveInteger(" 1000 ") == 1000
        assert parsePositiveInteger(3) == 3

    def test_rejected(self):
        for value in ("0", "-1", "1.5", "ten", "", 0, -4, True):
            with self.assertRaises(NumberFormatError, msg=repr(value)):
                parsePositiveInteger(value, "Iterations")


if __name__ == '__main__':
    unittest.main()
