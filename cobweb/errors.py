class CobwebError(Exception):
    pass


class FormulaError(CobwebError, ValueError):

    def __init__(self, text, reason=None):
        self.text = text
        self.reason = reason
        msg = "{} is not a valid formula".format(text)
        if reason:
            msg += " ({})".format(reason)
        super().__init__(msg)


class DomainError(CobwebError, ArithmeticError):

    def __init__(self, formula, x, reason=None):
        self.formula = formula
        self.x = x
        self.reason = reason
        msg = "cannot evaluate {} at x = {}".format(formula, x)
        if reason:
            msg += ": {}".format(reason)
        super().__init__(msg)


class NumberFormatError(CobwebError, ValueError):

    def __init__(self, field, text, expected="a double precision floating point number"):
        self.field = field
        self.text = text
        super().__init__("{} must be {} (got {!r})".format(field, expected, text))


class IterationError(CobwebError, RuntimeError):
    pass


class ConfigError(CobwebError, ValueError):
    pass
