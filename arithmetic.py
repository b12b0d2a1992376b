from __future__ import annotations
import numbers
import re
from fractions import Fraction
from typing import Tuple

from errors import FormatError, DivisionByZero, UndefinedPower
from numtheory import ceil_div, expand_repeats, repeating_to_ratio, digits_to_int, int_to_digits

_INTEGER = re.compile(r"(-?)(\d+)")
_FRACTION = re.compile(r"(-?)(\d+)/(\d+)")
_MIXED = re.compile(r"(-?)(\d+)\.\.(\d+)/(\d+)")
_DECIMAL = re.compile(r"(-?)(\d*)\.(\d+)")
_REPEATING = re.compile(r"(-?)(\d*)\.(\d*)#(\d*)")


def _signed(neg: str, n: int) -> int:
    return -n if neg else n


def _parse_repeating(s: str) -> Tuple[int, int]:
    expanded = s
    if expanded.count("#") > 1:
        raise FormatError("Multiple repeat markers", s)
    if expanded.count(".") > 1:
        raise FormatError("Multiple decimal points", s)
    head, payload = expanded.split("#")
    if payload == "":
        raise FormatError("Empty repeat payload", s)
    if not payload.isdigit():
        raise FormatError("Repeat payload must contain only digits", payload)
    if "." not in head:
        raise FormatError("Repeat marker must follow a decimal point", s)
    m = _REPEATING.fullmatch(expanded)
    if m is None:
        bad = "".join(ch for ch in head if not (ch.isdigit() or ch in ".-"))
        raise FormatError("Invalid repeating decimal", bad or head)
    neg, whole, prefix, period = m.groups()
    num, den = repeating_to_ratio(whole, prefix, period)
    return _signed(neg, num), den


def _parse_literal(text: str) -> Tuple[int, int]:
    """
    (numerator, denominator) of an exact numeral:
      integer  -12      fraction  -3/4      mixed  -2..1/4
      decimal  -1.25    repeating -0.1#6   (with optional {d~n} runs)
    """
    s = text.strip()
    if not s:
        raise FormatError("Empty numeral", text)
    if "{" in s or "}" in s:
        s = expand_repeats(s)
    if "#" in s:
        return _parse_repeating(s)
    if ".." in s:
        if "/" not in s:
            raise FormatError("Mixed number is missing its fraction", s)
        m = _MIXED.fullmatch(s)
        if m is None:
            raise FormatError("Invalid mixed number (use W..N/D)", s)
        neg = m.group(1)
        w, n, d = (digits_to_int(g) for g in m.groups()[1:])
        if d == 0:
            raise FormatError("Zero denominator", s)
        return _signed(neg, w * d + n), d
    if "." in s:
        if s.count(".") > 1:
            raise FormatError("Multiple decimal points", s)
        m = _DECIMAL.fullmatch(s)
        if m is None:
            raise FormatError("Invalid decimal", s)
        neg, whole, frac = m.groups()
        return _signed(neg, digits_to_int((whole or "0") + frac)), 10 ** len(frac)
    m = _FRACTION.fullmatch(s)
    if m is not None:
        neg = m.group(1)
        n, d = digits_to_int(m.group(2)), digits_to_int(m.group(3))
        if d == 0:
            raise FormatError("Zero denominator", s)
        return _signed(neg, n), d
    m = _INTEGER.fullmatch(s)
    if m is None:
        if s.count("/") > 1:
            raise FormatError("Invalid fraction (more than one '/')", s)
        bad = "".join(ch for ch in s if not (ch.isdigit() or ch in "-/"))
        raise FormatError("Invalid rational", bad or s)
    neg, n = m.groups()
    return _signed(neg, digits_to_int(n)), 1


def _as_rational(x):
    """Coerce ints and fractions; anything else (floats, intervals) gives None."""
    if isinstance(x, Rational):
        return x
    if isinstance(x, numbers.Rational):
        return Rational(int(x.numerator), int(x.denominator))
    return None


class Rational(Fraction):
    """
    Exact rational number, always in lowest terms with a positive denominator.

    Extends fractions.Fraction so every arithmetic result stays a Rational, and
    adds the notations of this library:
      Rational(3, 4), Rational("3/4"), Rational("2..1/4"), Rational("1.25"),
      Rational("0.#3"), Rational("0.{0~6}#3")
    Floats are refused: they are not exact.

    Derived views (decimal metadata, continued fraction, convergents) are
    computed on first request and cached on the instance.
    """

    __slots__ = ("_decimal_cache", "_cf_cache", "_convergent_cache")

    def __new__(cls, numerator=0, denominator=None):
        if isinstance(numerator, float) or isinstance(denominator, float):
            raise TypeError("Rational does not accept floats; pass an integer pair or a string")
        if isinstance(numerator, str):
            if denominator is not None:
                raise TypeError("A string numerator takes no separate denominator")
            n, d = _parse_literal(numerator)
        elif denominator is None:
            if not isinstance(numerator, numbers.Rational):
                raise TypeError(f"Cannot build a Rational from {type(numerator).__name__}")
            n, d = int(numerator.numerator), int(numerator.denominator)
        else:
            if not (isinstance(numerator, numbers.Integral) and isinstance(denominator, numbers.Integral)):
                raise TypeError("Numerator and denominator must both be integers")
            n, d = int(numerator), int(denominator)
            if d == 0:
                raise DivisionByZero(f"Denominator cannot be zero ({int_to_digits(n)}/0)")
        self = super().__new__(cls, n, d)
        self._decimal_cache = None
        self._cf_cache = None
        self._convergent_cache = None
        return self

    def __repr__(self):
        return f"Rational('{self}')"

    def __str__(self):
        """'n/d', or 'n' for integers, at any size."""
        if self.denominator == 1:
            return int_to_digits(self.numerator)
        return f"{int_to_digits(self.numerator)}/{int_to_digits(self.denominator)}"

    def to_mixed_string(self) -> str:
        """'W..N/D' with the sign on the whole part; proper fractions drop the '0..'."""
        if self.denominator == 1:
            return int_to_digits(self.numerator)
        sign = "-" if self.numerator < 0 else ""
        r, d = int_to_digits(self.remainder), int_to_digits(self.denominator)
        if self.whole_part == 0:
            return f"{sign}{r}/{d}"
        return f"{sign}{int_to_digits(self.whole_part)}..{r}/{d}"

    @property
    def whole_part(self) -> int:
        return abs(self.numerator) // self.denominator

    @property
    def remainder(self) -> int:
        return abs(self.numerator) % self.denominator

    # --- arithmetic ---------------------------------------------------------

    def _add(self, o: Rational) -> Rational:
        a, b, c, d = self.numerator, self.denominator, o.numerator, o.denominator
        return Rational(a * d + b * c, b * d)

    def _sub(self, o: Rational) -> Rational:
        a, b, c, d = self.numerator, self.denominator, o.numerator, o.denominator
        return Rational(a * d - b * c, b * d)

    def _mul(self, o: Rational) -> Rational:
        return Rational(self.numerator * o.numerator, self.denominator * o.denominator)

    def _div(self, o: Rational) -> Rational:
        if o.numerator == 0:
            raise DivisionByZero("Division by zero")
        return Rational(self.numerator * o.denominator, self.denominator * o.numerator)

    def __add__(self, other):
        o = _as_rational(other)
        return NotImplemented if o is None else self._add(o)

    def __radd__(self, other):
        o = _as_rational(other)
        return NotImplemented if o is None else o._add(self)

    def __sub__(self, other):
        o = _as_rational(other)
        return NotImplemented if o is None else self._sub(o)

    def __rsub__(self, other):
        o = _as_rational(other)
        return NotImplemented if o is None else o._sub(self)

    def __mul__(self, other):
        o = _as_rational(other)
        return NotImplemented if o is None else self._mul(o)

    def __rmul__(self, other):
        o = _as_rational(other)
        return NotImplemented if o is None else o._mul(self)

    def __truediv__(self, other):
        o = _as_rational(other)
        return NotImplemented if o is None else self._div(o)

    def __rtruediv__(self, other):
        o = _as_rational(other)
        return NotImplemented if o is None else o._div(self)

    def __mod__(self, other):
        o = _as_rational(other)
        if o is None:
            return NotImplemented
        if o.numerator == 0:
            raise DivisionByZero("Modulo by zero")
        return self._sub(o._mul(Rational(self // o)))

    def __neg__(self):
        return Rational(-self.numerator, self.denominator)

    def __pos__(self):
        return self

    def __abs__(self):
        return self if self.numerator >= 0 else -self

    def __pow__(self, exponent, modulo=None):
        if modulo is not None:
            return NotImplemented
        if isinstance(exponent, numbers.Rational) and exponent.denominator == 1:
            return self.pow(int(exponent.numerator))
        return NotImplemented

    def __rpow__(self, base, modulo=None):
        if self.denominator != 1 or modulo is not None:
            return NotImplemented
        b = _as_rational(base)
        return NotImplemented if b is None else b.pow(self.numerator)

    # Named forms; intervals on the right are handled by their reflected operators.

    def add(self, other):
        return self + other

    def subtract(self, other):
        return self - other

    def multiply(self, other):
        return self * other

    def divide(self, other):
        return self / other

    def negate(self) -> Rational:
        return -self

    def reciprocal(self) -> Rational:
        if self.numerator == 0:
            raise DivisionByZero("Cannot take reciprocal of zero")
        return Rational(self.denominator, self.numerator)

    def abs(self) -> Rational:
        return abs(self)

    def pow(self, exponent) -> Rational:
        """
        Integer power by binary exponentiation of numerator and denominator separately,
        O(log n) multiplications. Negative exponents raise the reciprocal.
        """
        if isinstance(exponent, bool) or not isinstance(exponent, numbers.Integral):
            raise TypeError(f"Exponent must be an integer, got {exponent!r}")
        n = int(exponent)
        if n == 0:
            if self.numerator == 0:
                raise UndefinedPower("Zero cannot be raised to the power of zero")
            return ONE
        if n < 0:
            if self.numerator == 0:
                raise UndefinedPower("Zero cannot be raised to a negative power")
            return self.reciprocal().pow(-n)
        num, den = self.numerator, self.denominator
        rnum, rden = 1, 1
        while n:
            if n & 1:
                rnum *= num
                rden *= den
            num *= num
            den *= den
            n >>= 1
        return Rational(rnum, rden)

    def E(self, exponent: int) -> Rational:
        """self * 10^exponent."""
        exponent = int(exponent)
        if exponent >= 0:
            return self._mul(Rational(10 ** exponent))
        return self._mul(Rational(1, 10 ** -exponent))

    # --- comparison ----------------------------------------------------------

    def compare(self, other) -> int:
        """-1, 0 or 1 by cross-multiplication: a/b vs c/d  <=>  a*d vs b*c."""
        o = _as_rational(other)
        if o is None:
            raise TypeError(f"Cannot compare Rational with {type(other).__name__}")
        lhs = self.numerator * o.denominator
        rhs = self.denominator * o.numerator
        return (lhs > rhs) - (lhs < rhs)

    def equals(self, other) -> bool:
        o = _as_rational(other)
        return o is not None and self.numerator == o.numerator and self.denominator == o.denominator

    def sign(self) -> int:
        return (self.numerator > 0) - (self.numerator < 0)

    def is_zero(self) -> bool:
        return self.numerator == 0

    def is_positive(self) -> bool:
        return self.numerator > 0

    def is_negative(self) -> bool:
        return self.numerator < 0

    def is_integer(self) -> bool:
        return self.denominator == 1

    def bit_length(self) -> int:
        return max(abs(self.numerator).bit_length(), self.denominator.bit_length())

    def to_float(self) -> float:
        """Lossy; for diagnostics and display only."""
        return self.numerator / self.denominator

    # --- decimal and continued-fraction views --------------------------------

    def decimal_metadata(self, max_period_digits: int = None, radix: int = 10):
        from decimals import decimal_metadata
        return decimal_metadata(self, max_period_digits, radix)

    def period_length(self) -> int:
        from decimals import period_length
        return period_length(self)

    def to_repeating_decimal(self, use_repeat_notation: bool = False) -> str:
        from decimals import to_repeating_decimal
        return to_repeating_decimal(self, use_repeat_notation)

    def to_decimal(self, digits: int = None) -> str:
        from decimals import to_decimal
        return to_decimal(self, digits)

    def to_scientific(self, use_repeat_notation: bool = True, precision: int = 11,
                      show_period_info: bool = False) -> str:
        from decimals import to_scientific
        return to_scientific(self, use_repeat_notation, precision, show_period_info)

    def to_continued_fraction(self, max_terms: int = None):
        from continued_fraction import to_continued_fraction
        return to_continued_fraction(self, max_terms)

    def convergents(self):
        from continued_fraction import convergents
        return convergents(self)

    def best_approximation(self, max_denominator: int) -> Rational:
        from continued_fraction import best_approximation
        return best_approximation(self, max_denominator)


Q = Rational  # rational type alias

ZERO = Rational(0)
ONE = Rational(1)


def to_q(x) -> Rational:
    """Convert an int, numeral string or Fraction to Q. Floats are rejected (not exact)."""
    if isinstance(x, Rational):
        return x
    return Rational(x)


def floor_q(x) -> int:
    """Largest integer <= x, computed on the exact numerator and denominator."""
    x = to_q(x)
    return x.numerator // x.denominator


def ceil_q(x) -> int:
    """Smallest integer >= x, computed on the exact numerator and denominator."""
    x = to_q(x)
    return ceil_div(x.numerator, x.denominator)
