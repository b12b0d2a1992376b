from fractions import Fraction
from math import gcd

import pytest

from arithmetic import Rational, Q, ZERO, ONE, to_q, floor_q, ceil_q
from errors import FormatError, DivisionByZero, UndefinedPower


@pytest.mark.parametrize("args,expected", [
    ((6, 8), (3, 4)),
    ((-6, 8), (-3, 4)),
    ((6, -8), (-3, 4)),
    ((0, 5), (0, 1)),
    ((0, -5), (0, 1)),
    ((7,), (7, 1)),
])
def test_canonical_form(args, expected):
    r = Rational(*args)
    assert (r.numerator, r.denominator) == expected
    assert r.denominator > 0
    assert gcd(abs(r.numerator), r.denominator) == 1


@pytest.mark.parametrize("text,expected", [
    ("3/4", Fraction(3, 4)),
    ("-3/4", Fraction(-3, 4)),
    ("12", Fraction(12)),
    ("  -12 ", Fraction(-12)),
    ("2..1/4", Fraction(9, 4)),
    ("-2..1/4", Fraction(-9, 4)),
    ("1.25", Fraction(5, 4)),
    ("-.5", Fraction(-1, 2)),
    ("0.#3", Fraction(1, 3)),
    ("0.1#6", Fraction(1, 6)),
    ("-0.#142857", Fraction(-1, 7)),
    ("1.25#0", Fraction(5, 4)),
    ("0.{0~6}#3", Fraction(1, 3 * 10**6)),
    ("1.{3~3}#{9~2}", Fraction(1334, 1000)),
])
def test_construct_from_text(text, expected):
    r = Rational(text)
    assert isinstance(r, Rational)
    assert r == expected


@pytest.mark.parametrize("text", [
    "", "abc", "1/0", "1/2/3", "1..2", "0.#", "1#2", "0.#3#3", "1.2.3#4",
    "0.#3a", "1.2x", "0.{3~}#3",
])
def test_malformed_text(text):
    with pytest.raises(FormatError):
        Rational(text)


def test_format_error_names_the_text():
    with pytest.raises(FormatError) as exc:
        Rational("1/0")
    assert "1/0" in str(exc.value)


def test_zero_denominator_pair():
    with pytest.raises(DivisionByZero):
        Rational(1, 0)
    assert issubclass(DivisionByZero, ZeroDivisionError)


def test_floats_are_rejected():
    with pytest.raises(TypeError):
        Rational(0.5)
    with pytest.raises(TypeError):
        to_q(0.5)
    with pytest.raises(TypeError):
        Rational(1, 2) + 0.5


def test_arithmetic_stays_rational():
    a, b = Rational(1, 2), Rational(1, 3)
    for result, expected in [(a + b, Fraction(5, 6)), (a - b, Fraction(1, 6)),
                             (a * b, Fraction(1, 6)), (a / b, Fraction(3, 2)),
                             (1 + a, Fraction(3, 2)), (1 - a, Fraction(1, 2)),
                             (2 * b, Fraction(2, 3)), (1 / b, Fraction(3))]:
        assert isinstance(result, Rational)
        assert result == expected
    assert a.add(b) == a + b
    assert a.subtract(b) == a - b
    assert a.multiply(b) == a * b
    assert a.divide(b) == a / b


def test_additive_inverse():
    r = Rational(-17, 23)
    total = r + (-r)
    assert (total.numerator, total.denominator) == (0, 1)
    assert r.negate() == -r


def test_division_by_zero():
    with pytest.raises(DivisionByZero):
        Rational(1, 2) / 0
    with pytest.raises(DivisionByZero):
        Rational(1, 2).divide(ZERO)
    with pytest.raises(DivisionByZero):
        ZERO.reciprocal()


def test_reciprocal_and_abs():
    assert Rational(-3, 4).reciprocal() == Rational(-4, 3)
    assert Rational(-3, 4).abs() == Rational(3, 4)
    assert abs(Rational(3, 4)) == Rational(3, 4)


@pytest.mark.parametrize("base,n,expected", [
    (Rational(2, 3), 3, Fraction(8, 27)),
    (Rational(2, 3), -2, Fraction(9, 4)),
    (Rational(-1, 2), 3, Fraction(-1, 8)),
    (Rational(5), 0, Fraction(1)),
    (ZERO, 4, Fraction(0)),
])
def test_pow(base, n, expected):
    assert base.pow(n) == expected
    assert base ** n == expected


def test_undefined_powers():
    with pytest.raises(UndefinedPower):
        ZERO.pow(0)
    with pytest.raises(UndefinedPower):
        ZERO.pow(-1)
    with pytest.raises(TypeError):
        Rational(2).pow(Rational(1, 2))


def test_compare_and_predicates():
    a, b = Rational(1, 3), Rational(2, 5)
    assert a.compare(b) == -1
    assert b.compare(a) == 1
    assert a.compare(Rational("0.#3")) == 0
    assert a.equals(Rational(2, 6))
    assert a < b and b > a and a <= a
    assert Rational(-2, 3).sign() == -1
    assert ZERO.is_zero() and ZERO.sign() == 0
    assert ONE.is_positive() and Rational(-1).is_negative()
    assert Rational(4, 2).is_integer()
    assert not Rational(1, 2).is_integer()


def test_bit_length():
    assert Rational(255, 256).bit_length() == 9
    assert Rational(-1024, 3).bit_length() == 11
    assert ZERO.bit_length() == 1


def test_text_forms():
    assert str(Rational(3, 4)) == "3/4"
    assert str(Rational(8, 4)) == "2"
    assert repr(Rational(3, 4)) == "Rational('3/4')"
    assert Rational(9, 4).to_mixed_string() == "2..1/4"
    assert Rational(-9, 4).to_mixed_string() == "-2..1/4"
    assert Rational(1, 4).to_mixed_string() == "1/4"
    assert Rational(-9, 4).whole_part == 2
    assert Rational(-9, 4).remainder == 1


def test_E_scaling():
    assert Rational(3, 2).E(2) == 150
    assert Rational(3).E(-3) == Fraction(3, 1000)


def test_floor_ceil():
    assert floor_q(Rational(-7, 2)) == -4
    assert ceil_q(Rational(-7, 2)) == -3
    assert floor_q(Rational(7, 2)) == 3
    assert ceil_q(Rational(7, 2)) == 4
    assert ceil_q(5) == 5


def test_alias_and_coercion():
    assert Q is Rational
    assert to_q("1/2") == Rational(1, 2)
    assert to_q(Fraction(2, 4)) == Rational(1, 2)
    assert isinstance(to_q(3), Rational)


def test_to_float_is_display_only():
    assert Rational(1, 4).to_float() == 0.25
