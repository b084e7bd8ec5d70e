import logging
import math
import re

import numpy
import sympy

from sympy.core.function import AppliedUndef
from sympy.parsing.sympy_parser import parse_expr, standard_transformations, \
    implicit_multiplication_application, convert_xor

from .errors import FormulaError, DomainError

logger = logging.getLogger(__name__)

TRANSFORMATIONS = standard_transformations + (implicit_multiplication_application, convert_xor)

# self-substitution grows exponentially with k for formulas mentioning x more than once
MAX_FORMULA_LENGTH = 1 << 16


def kFoldText(text: str, k: int, variable: str = "x") -> str:
    """
    Derive the text of f^k from the text of f.

    Every occurrence of ``variable`` in the working text is replaced with
    ``(text)``, ``k - 1`` times, so ``x^2`` with ``k = 3`` becomes
    ``((x^2)^2)^2``.
    """
    if k < 1:
        raise ValueError("k must be a positive integer, got {}".format(k))
    pattern = re.compile(r"(?<![A-Za-z_]){}(?!\w)".format(re.escape(variable)))
    replacement = "(" + text + ")"
    result = text
    for _ in range(k - 1):
        result = pattern.sub(lambda _: replacement, result)
        if len(result) > MAX_FORMULA_LENGTH:
            raise FormulaError(text, "f^{} is too long to expand".format(k))
    return result


class Formula:

    def __init__(self, text: str, variable: str = "x"):
        self.text = text
        self.variable = variable
        self._symbol = sympy.Symbol(variable, real=True)

        localDict = {variable: self._symbol, "e": sympy.E, "pi": sympy.pi}
        try:
            expr = parse_expr(text, local_dict=localDict, transformations=TRANSFORMATIONS)
        except Exception as e:
            raise FormulaError(text, str(e) or type(e).__name__) from e

        if not isinstance(expr, sympy.Expr):
            raise FormulaError(text, "not an expression")

        undefined = expr.atoms(AppliedUndef)
        if undefined:
            raise FormulaError(text, "unknown functions: {}".format(
                ", ".join(sorted(str(u.func) for u in undefined))
            ))

        unknown = expr.free_symbols - {self._symbol}
        if unknown:
            raise FormulaError(text, "unknown symbols: {}".format(
                ", ".join(sorted(map(str, unknown)))
            ))

        self.expr = expr
        self._scalar = sympy.lambdify(self._symbol, expr, modules=["math", "mpmath"])
        self._vector = sympy.lambdify(self._symbol, expr, modules="numpy")

    @staticmethod
    def compile(text: str, variable: str = "x"):
        return Formula(text, variable)

    def evaluate(self, x: float) -> float:
        try:
            value = float(self._scalar(float(x)))
        except (ArithmeticError, ValueError, TypeError) as e:
            raise DomainError(self.text, x, str(e) or type(e).__name__) from e
        if not math.isfinite(value):
            raise DomainError(self.text, x, "result is not finite")
        return value

    __call__ = evaluate

    def sample(self, xs: numpy.ndarray) -> numpy.ndarray:
        xs = numpy.asarray(xs, dtype=numpy.float64)
        with numpy.errstate(all="ignore"):
            try:
                ys = numpy.asarray(self._vector(xs))
            except (ArithmeticError, ValueError, TypeError) as e:
                logger.debug("Cannot sample %s over the view: %s", self.text, e)
                return numpy.full(xs.shape, numpy.nan)
            if numpy.iscomplexobj(ys):
                ys = numpy.where(ys.imag == 0, ys.real, numpy.nan)
            ys = numpy.broadcast_to(ys.astype(numpy.float64), xs.shape).copy()
        ys[~numpy.isfinite(ys)] = numpy.nan
        return ys

    def kFold(self, k: int):
        return Formula(kFoldText(self.text, k, self.variable), self.variable)

    def __str__(self):
        return self.text

    def __repr__(self):
        return "Formula({!r})".format(self.text)
