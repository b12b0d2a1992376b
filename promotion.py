"""
Three-level numeric tower: Integer < Rational < Interval.

Every mixed operation lifts both operands to the higher of their two levels
(PROMOTION_TABLE) and runs the operation of that level. Results are never
demoted implicitly, with one exception: dividing two integers gives an int
when the quotient is exact. simplify() demotes on request.
"""
from __future__ import annotations
import numbers
from enum import IntEnum
from typing import Tuple

from arithmetic import Rational
from errors import DivisionByZero
from interval import RationalInterval
from numtheory import int_to_digits


class NumericLevel(IntEnum):
    INTEGER = 0
    RATIONAL = 1
    INTERVAL = 2


PROMOTION_TABLE = {
    (a, b): max(a, b) for a in NumericLevel for b in NumericLevel
}


def level_of(x) -> NumericLevel:
    if isinstance(x, bool) or isinstance(x, float):
        raise TypeError(f"{type(x).__name__} is not an exact numeric type")
    if isinstance(x, RationalInterval):
        return NumericLevel.INTERVAL
    if isinstance(x, numbers.Integral):
        return NumericLevel.INTEGER
    if isinstance(x, numbers.Rational):
        return NumericLevel.RATIONAL
    raise TypeError(f"Unsupported numeric type {type(x).__name__}")


def promote(x, level: NumericLevel):
    """Lift x to `level`. Asking for a lower level than x already has is an error."""
    current = level_of(x)
    if level < current:
        raise ValueError(f"Cannot demote {NumericLevel(current).name} to {NumericLevel(level).name}; use simplify()")
    if level == NumericLevel.INTEGER:
        return int(x)
    if level == NumericLevel.RATIONAL:
        return x if isinstance(x, Rational) else Rational(x)
    return x if isinstance(x, RationalInterval) else RationalInterval.point(x)


def promote_pair(a, b) -> Tuple[object, object, NumericLevel]:
    level = PROMOTION_TABLE[(level_of(a), level_of(b))]
    return promote(a, level), promote(b, level), level


def add(a, b):
    x, y, level = promote_pair(a, b)
    if level == NumericLevel.INTEGER:
        return x + y
    return x.add(y)


def subtract(a, b):
    x, y, level = promote_pair(a, b)
    if level == NumericLevel.INTEGER:
        return x - y
    return x.subtract(y)


def multiply(a, b):
    x, y, level = promote_pair(a, b)
    if level == NumericLevel.INTEGER:
        return x * y
    return x.multiply(y)


def divide(a, b):
    x, y, level = promote_pair(a, b)
    if level == NumericLevel.INTEGER:
        if y == 0:
            raise DivisionByZero(f"Division by zero ({int_to_digits(x)}/0)")
        if x % y == 0:
            return x // y
        return Rational(x, y)
    return x.divide(y)


def power(a, n: int):
    """Integer power; for intervals this is the tight power, see multiply_power for x*x*...*x."""
    level = level_of(a)
    if level == NumericLevel.INTEGER:
        if n > 0 or (n == 0 and a != 0):
            return int(a) ** n
        return Rational(a).pow(n)
    if level == NumericLevel.RATIONAL:
        return promote(a, level).pow(n)
    return a.pow(n)


def multiply_power(a, n: int):
    level = level_of(a)
    if level == NumericLevel.INTERVAL:
        return a.mpow(n)
    # for exact values repeated multiplication and the power agree
    return power(a, n)


def negate(a):
    level = level_of(a)
    if level == NumericLevel.INTEGER:
        return -int(a)
    return promote(a, level).negate()


def simplify(x):
    """Demote as far as the value allows: a point interval to its Rational, an integral Rational to int."""
    level = level_of(x)
    if level == NumericLevel.INTERVAL:
        if not x.is_point():
            return x
        x = x.low
    if level_of(x) == NumericLevel.RATIONAL and x.denominator == 1:
        return int(x.numerator)
    return x
