"""
Closed rational intervals [low, high] with exact endpoints.

Arithmetic is the usual interval arithmetic: + and - act on the endpoints
monotonically, * and / take the min and max over the four endpoint products.
Division by an interval that contains zero (even only as an endpoint) is refused.

    [1/2, 3/4] * [2/3, 4/3] = [1/3, 1]

pow() is the tight integer power ([-1, 2]^2 = [0, 4]); mpow() is repeated
interval multiplication ([-1, 2].mpow(2) = [-2, 4]).
"""
from __future__ import annotations
import numbers
from math import gcd
from typing import Optional

import numpy as np

import config
from arithmetic import Rational, to_q, floor_q, ceil_q, ZERO as Q_ZERO, ONE as Q_ONE
from decimals import to_decimal, to_repeating_decimal, period_length
from errors import DivisionByZero, UndefinedPower, FormatError
from numtheory import log_ceil


class RationalInterval:
    __slots__ = ("_low", "_high")

    def __init__(self, a, b=None):
        low = to_q(a)
        high = low if b is None else to_q(b)
        if high < low:
            low, high = high, low
        self._low = low
        self._high = high

    @property
    def low(self) -> Rational:
        return self._low

    @property
    def high(self) -> Rational:
        return self._high

    @classmethod
    def point(cls, value) -> RationalInterval:
        v = to_q(value)
        return cls(v, v)

    @classmethod
    def from_string(cls, text: str) -> RationalInterval:
        """Read "a:b" with exact endpoints (integers, fractions, mixed numbers, #-decimals)."""
        s = text.strip()
        if s.count(":") != 1:
            raise FormatError("Interval must be written low:high", s)
        a, b = s.split(":")
        if not a.strip() or not b.strip():
            raise FormatError("Interval endpoint is empty", s)
        return cls(Rational(a.strip()), Rational(b.strip()))

    # --- arithmetic ---------------------------------------------------------

    def add(self, other) -> RationalInterval:
        o = _coerce(other)
        return RationalInterval(self._low + o._low, self._high + o._high)

    def subtract(self, other) -> RationalInterval:
        o = _coerce(other)
        return RationalInterval(self._low - o._high, self._high - o._low)

    def multiply(self, other) -> RationalInterval:
        o = _coerce(other)
        products = [self._low * o._low, self._low * o._high, self._high * o._low, self._high * o._high]
        return RationalInterval(min(products), max(products))

    def divide(self, other) -> RationalInterval:
        o = _coerce(other)
        if o.contains_zero():
            raise DivisionByZero(f"Cannot divide by an interval containing zero ({o})")
        return self.multiply(o.reciprocate())

    def negate(self) -> RationalInterval:
        return RationalInterval(-self._high, -self._low)

    def reciprocate(self) -> RationalInterval:
        if self.contains_zero():
            raise DivisionByZero(f"Cannot take the reciprocal of an interval containing zero ({self})")
        return RationalInterval(self._high.reciprocal(), self._low.reciprocal())

    def pow(self, exponent: int) -> RationalInterval:
        """
        Tight image of the interval under x -> x^n.

        Args:
            exponent: integer n. n = 0 gives [1, 1] unless the interval contains zero;
                negative n needs an interval that excludes zero.

        Raises:
            UndefinedPower: for 0^0 or a negative power of a zero-containing interval.
        """
        if isinstance(exponent, bool) or not isinstance(exponent, numbers.Integral):
            raise TypeError(f"Interval exponent must be an integer, got {type(exponent).__name__}")
        n = int(exponent)
        if n == 0:
            if self._low == 0 and self._high == 0:
                raise UndefinedPower("Zero cannot be raised to the power of zero")
            if self.contains_zero():
                raise UndefinedPower("Cannot raise an interval containing zero to the power of zero")
            return ONE
        if n < 0:
            if self.contains_zero():
                raise UndefinedPower("Cannot raise an interval containing zero to a negative power")
            p = self.pow(-n)
            return RationalInterval(p._high.reciprocal(), p._low.reciprocal())
        if n == 1:
            return self
        if n % 2 == 0:
            if self._low <= 0 <= self._high:
                return RationalInterval(Q_ZERO, max(abs(self._low) ** n, abs(self._high) ** n))
            if self._high < 0:
                return RationalInterval(self._high ** n, self._low ** n)
        return RationalInterval(self._low ** n, self._high ** n)

    def mpow(self, exponent: int) -> RationalInterval:
        """Multiply the interval by itself n times (each factor ranges independently)."""
        n = int(exponent)
        if n == 0:
            raise UndefinedPower("Multiplicative power needs at least one factor")
        if n < 0:
            return self.reciprocate().mpow(-n)
        result = self
        for _ in range(n - 1):
            result = result.multiply(self)
        return result

    def E(self, exponent: int) -> RationalInterval:
        return RationalInterval(self._low.E(exponent), self._high.E(exponent))

    # operators go through the promotion table so ints and Rationals mix in on either side
    def __add__(self, other):
        return _dispatch("add", self, other)

    def __radd__(self, other):
        return _dispatch("add", other, self)

    def __sub__(self, other):
        return _dispatch("subtract", self, other)

    def __rsub__(self, other):
        return _dispatch("subtract", other, self)

    def __mul__(self, other):
        return _dispatch("multiply", self, other)

    def __rmul__(self, other):
        return _dispatch("multiply", other, self)

    def __truediv__(self, other):
        return _dispatch("divide", self, other)

    def __rtruediv__(self, other):
        return _dispatch("divide", other, self)

    def __pow__(self, exponent):
        return self.pow(exponent)

    def __neg__(self):
        return self.negate()

    def __pos__(self):
        return self

    # --- set operations -----------------------------------------------------

    def overlaps(self, other) -> bool:
        o = _coerce(other)
        return not (self._high < o._low or o._high < self._low)

    def contains(self, other) -> bool:
        """True when `other` (an interval, or a single value) lies inside this interval."""
        if not isinstance(other, RationalInterval):
            return self.contains_value(other)
        return self._low <= other._low and other._high <= self._high

    def contains_value(self, value) -> bool:
        v = to_q(value)
        return self._low <= v <= self._high

    def contains_zero(self) -> bool:
        return self._low <= 0 <= self._high

    def __contains__(self, value):
        return self.contains(value)

    def intersection(self, other) -> Optional[RationalInterval]:
        o = _coerce(other)
        if not self.overlaps(o):
            return None
        return RationalInterval(max(self._low, o._low), min(self._high, o._high))

    def union(self, other) -> Optional[RationalInterval]:
        """Smallest interval covering both, or None when they neither overlap nor touch."""
        o = _coerce(other)
        touching = self._high == o._low or o._high == self._low
        if not self.overlaps(o) and not touching:
            return None
        return RationalInterval(min(self._low, o._low), max(self._high, o._high))

    def equals(self, other) -> bool:
        o = _coerce(other)
        return self._low == o._low and self._high == o._high

    def __eq__(self, other):
        if isinstance(other, RationalInterval):
            return self._low == other._low and self._high == other._high
        return NotImplemented

    def __hash__(self):
        return hash((self._low, self._high))

    # --- measures -----------------------------------------------------------

    def midpoint(self) -> Rational:
        return (self._low + self._high) / 2

    def mediant(self) -> Rational:
        """(a+c)/(b+d) for endpoints a/b and c/d."""
        return Rational(self._low.numerator + self._high.numerator,
                        self._low.denominator + self._high.denominator)

    def width(self) -> Rational:
        return self._high - self._low

    def bit_length(self) -> int:
        return max(self._low.bit_length(), self._high.bit_length())

    def is_point(self) -> bool:
        return self._low == self._high

    # --- text ---------------------------------------------------------------

    def __str__(self):
        return f"{self._low}:{self._high}"

    def __repr__(self):
        return f"RationalInterval('{self}')"

    def to_mixed_string(self) -> str:
        return f"{self._low.to_mixed_string()}:{self._high.to_mixed_string()}"

    def to_repeating_decimal(self, use_repeat_notation: bool = False) -> str:
        return (f"{to_repeating_decimal(self._low, use_repeat_notation)}:"
                f"{to_repeating_decimal(self._high, use_repeat_notation)}")

    def shortest_decimal(self, base: int = 10) -> Optional[Rational]:
        """
        Value in the interval with the smallest power-of-base denominator.

        For k = 0, 1, ... the candidates p/base^k have p in [ceil(low*base^k), floor(high*base^k)];
        the first k with any candidate wins, taking the one nearest the midpoint (the lower on a tie).
        A width w guarantees a candidate once base^k >= 1/w, so the search stops
        config.SHORTEST_DECIMAL_MARGIN steps past that. Point intervals are tried up to
        config.POINT_SEARCH_LIMIT places. Returns None if nothing was found.
        """
        if base < 2:
            raise ValueError(f"Base must be at least 2, got {base}")
        if self.is_point():
            v = self._low
            scale = 1
            for _ in range(config.POINT_SEARCH_LIMIT + 1):
                if (v.numerator * scale) % v.denominator == 0:
                    return v
                scale *= base
            if config.DEBUG:
                config.dbg(f"shortest_decimal: no base-{base} expansion within "
                           f"{config.POINT_SEARCH_LIMIT} places")
            return None

        w = self.width()
        max_k = log_ceil(w.numerator, w.denominator, base) + config.SHORTEST_DECIMAL_MARGIN
        mid = self.midpoint()
        scale = 1
        for k in range(max_k + 1):
            lo = ceil_q(self._low * scale)
            hi = floor_q(self._high * scale)
            if lo <= hi:
                target = mid * scale
                p = floor_q(target)
                if target - p > Rational(1, 2):
                    p += 1
                p = min(max(p, lo), hi)
                if config.DEBUG:
                    config.dbg(f"shortest_decimal: k={k}, {hi - lo + 1} candidates")
                return Rational(p, scale)
            scale *= base
        config.warn(f"shortest_decimal: no candidate within {max_k} places")
        return None

    def compacted_decimal_interval(self) -> str:
        """
        Shared leading digits written once: [1.23, 1.27] -> "1.2[3:7]".
        Falls back to "low:high" in #-notation when the endpoints do not terminate
        or share too little.
        """
        fallback = self.to_repeating_decimal()
        if self.is_point() or period_length(self._low) != 0 or period_length(self._high) != 0:
            return fallback
        lo, hi = _pad_fractions(to_decimal(self._low), to_decimal(self._high))
        n = 0
        while n < min(len(lo), len(hi)) and lo[n] == hi[n]:
            n += 1
        prefix, lo_rest, hi_rest = lo[:n], lo[n:], hi[n:]
        if (len(prefix.lstrip("-")) <= 1 or not lo_rest or not hi_rest
                or not lo_rest.isdigit() or not hi_rest.isdigit() or len(lo_rest) != len(hi_rest)):
            return fallback
        return f"{prefix}[{lo_rest}:{hi_rest}]"

    def relative_mid_decimal_interval(self) -> str:
        """Midpoint with a symmetric offset: [1.2, 1.3] -> "1.25[+-50]" (offset in units of the next place)."""
        mid = self.midpoint()
        if period_length(mid) != 0:
            return self.to_repeating_decimal()
        return _relative(mid, mid - self._low, self._high - mid)

    def relative_decimal_interval(self) -> str:
        """Shortest decimal in the interval with the offsets to each end: [1.2, 1.35] -> "1.3[+5,-10]"."""
        s = self.shortest_decimal(10)
        if s is None:
            return self.to_repeating_decimal()
        return _relative(s, s - self._low, self._high - s)

    def random_rational(self, max_denominator: int = config.DEFAULT_MAX_DENOMINATOR,
                        rng: np.random.Generator = None) -> Rational:
        """
        Uniform pick among the distinct reduced fractions p/q (q <= max_denominator) in the interval.
        Falls back to the midpoint when there are none.
        """
        if max_denominator < 1:
            raise ValueError(f"max_denominator must be positive, got {max_denominator}")
        if rng is None:
            rng = np.random.default_rng()
        candidates = []
        for q in range(1, max_denominator + 1):
            for p in range(ceil_q(self._low * q), floor_q(self._high * q) + 1):
                if gcd(p, q) == 1:
                    candidates.append((p, q))
        if not candidates:
            return self.midpoint()
        p, q = candidates[int(rng.integers(len(candidates)))]
        return Rational(p, q)


def _pad_fractions(a: str, b: str):
    """Give two plain decimals the same number of fractional digits."""
    fa = len(a.split(".")[1]) if "." in a else 0
    fb = len(b.split(".")[1]) if "." in b else 0
    n = max(fa, fb)
    if n == 0:
        return a, b

    def pad(s, f):
        return (s if f else s + ".") + "0" * (n - f)
    return pad(a, fa), pad(b, fb)


def _offset_text(x: Rational) -> str:
    return to_decimal(x) if period_length(x) == 0 else to_repeating_decimal(x)


def _relative(center: Rational, below: Rational, above: Rational) -> str:
    text = to_decimal(center)
    if "." in text:
        scale = 10 ** (len(text.split(".")[1]) + 1)
    else:
        scale = 1
    below, above = below * scale, above * scale
    if below == above:
        return f"{text}[+-{_offset_text(above)}]"
    return f"{text}[+{_offset_text(above)},-{_offset_text(below)}]"


def _coerce(x) -> RationalInterval:
    if isinstance(x, RationalInterval):
        return x
    return RationalInterval.point(x)


def _dispatch(op: str, a, b):
    import promotion
    try:
        promotion.level_of(a)
        promotion.level_of(b)
    except TypeError:
        return NotImplemented
    return getattr(promotion, op)(a, b)


ZERO = RationalInterval(Q_ZERO, Q_ZERO)
ONE = RationalInterval(Q_ONE, Q_ONE)
UNIT_INTERVAL = RationalInterval(Q_ZERO, Q_ONE)
