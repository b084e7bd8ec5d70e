import math
import numbers

import sympy

from .errors import NumberFormatError


def parseReal(text, field="value"):
    """
    Convert user input to a finite float.

    Plain decimal notation is tried first; anything else (``1/3``, ``pi/4``)
    goes through SymPy and must evaluate to a real number.
    """
    if isinstance(text, numbers.Real) and not isinstance(text, bool):
        value = float(text)
    else:
        s = str(text).strip()
        if not s:
            raise NumberFormatError(field, text)
        try:
            value = float(s)
        except ValueError:
            try:
                expr = sympy.sympify(s)
                value = complex(expr.evalf())
            except (sympy.SympifyError, TypeError, ValueError, SyntaxError) as e:
                raise NumberFormatError(field, text) from e
            if value.imag != 0:
                raise NumberFormatError(field, text)
            value = value.real
    if not math.isfinite(value):
        raise NumberFormatError(field, text)
    return value


def parsePositiveInteger(text, field="value"):
    if isinstance(text, numbers.Integral) and not isinstance(text, bool):
        value = int(text)
    else:
        try:
            value = int(str(text).strip())
        except ValueError as e:
            raise NumberFormatError(field, text, expected="a positive integer") from e
    if value < 1:
        raise NumberFormatError(field, text, expected="a positive integer")
    return value
