"""Error taxonomy shared by the kernel, the decimal engine and interval arithmetic.

Search-bound overruns are not errors: the period search reports -1 and the
shortest-decimal search reports None.
"""


class FormatError(ValueError):
    """Malformed numeral text. The message names the offending substring."""

    def __init__(self, message: str, text: str = None):
        if text is not None:
            message = f"{message}: {text!r}"
        super().__init__(message)
        self.text = text


class DivisionByZero(ZeroDivisionError):
    pass


class UndefinedPower(ArithmeticError):
    pass


class IndexOutOfRange(IndexError):
    pass
