import pytest

import config
from arithmetic import Rational
from decimals import (decimal_metadata, period_length, extract_period_segment, to_repeating_decimal,
                      to_repeating_decimal_with_period, to_decimal, repeating_decimal_to_rational,
                      to_scientific, expand, E)
from errors import FormatError
from formats import Radix
from numtheory import digits_to_int, int_to_digits


@pytest.mark.parametrize("value,text", [
    (Rational(1, 3), "0.#3"),
    (Rational(1, 6), "0.1#6"),
    (Rational(1, 7), "0.#142857"),
    (Rational(-1, 7), "-0.#142857"),
    (Rational(5, 4), "1.25#0"),
    (Rational(1, 12), "0.08#3"),
    (Rational(22, 7), "3.#142857"),
    (Rational(5), "5"),
    (Rational(-5), "-5"),
    (Rational(0), "0"),
])
def test_repeating_text(value, text):
    assert to_repeating_decimal(value) == text
    assert repeating_decimal_to_rational(text) == value


def test_scenarios(third, seventh):
    assert to_repeating_decimal(third) == "0.#3"
    assert repeating_decimal_to_rational("0.#3") == third
    text, period = to_repeating_decimal_with_period(seventh)
    assert (text, period) == ("0.#142857", 6)


@pytest.mark.parametrize("text", [
    "0.#3", "0.1#6", "12.34#567", "-0.00#9", "3.#142857", "0.{0~6}#3",
])
def test_round_trip_from_text(text):
    r = repeating_decimal_to_rational(text)
    assert repeating_decimal_to_rational(to_repeating_decimal(r, use_repeat_notation=True)) == r


@pytest.mark.parametrize("num,den", [(1, 97), (123456, 7), (-5, 64), (1, 9999), (355, 113)])
def test_round_trip_from_value(num, den):
    r = Rational(num, den)
    assert repeating_decimal_to_rational(to_repeating_decimal(r)) == r


def test_period_lengths():
    assert period_length(Rational(1, 3)) == 1
    assert period_length(Rational(1, 7)) == 6
    assert period_length(Rational(1, 97)) == 96
    assert period_length(Rational(3, 8)) == 0
    assert period_length(Rational(4)) == 0


def test_metadata():
    md = decimal_metadata(Rational(1, 12))
    assert md.initial_segment == "08"
    assert md.period_digits == "3"
    assert md.period_length == 1
    assert md.factors_of_2 == 2 and md.factors_of_5 == 0
    assert md.initial_segment_leading_zeros == 1
    assert not md.is_terminating

    short = decimal_metadata(Rational(1, 7), 3)
    assert short.period_digits == "142"
    assert not short.has_full_period
    full = decimal_metadata(Rational(1, 7), 10)
    assert full.period_digits == "142857"
    assert full.has_full_period


def test_metadata_is_cached_per_value():
    r = Rational(2, 7)
    first = decimal_metadata(r, 10)
    assert decimal_metadata(r, 5) is first


def test_leading_zeros_in_period():
    md = decimal_metadata(Rational(1, 1001))
    assert md.period_digits == "000999"
    assert md.leading_zeros_in_period == 3
    assert md.period_digits_rest == "999"


def test_extract_period_segment():
    r = Rational(1, 14)   # 0.0#714285
    assert extract_period_segment(r, 3) == "714"
    assert extract_period_segment(r, 100) == "714285"
    assert extract_period_segment(Rational(1, 8), 5) == ""


def test_repeat_notation():
    r = Rational("0.{0~6}#3")
    assert to_repeating_decimal(r) == "0.000000#3"
    assert to_repeating_decimal(r, use_repeat_notation=True) == "0.{0~6}#3"
    assert to_repeating_decimal(Rational(1, 9), use_repeat_notation=True) == "0.#1"


def test_unknown_period_is_marked(monkeypatch):
    monkeypatch.setattr(config, "MAX_PERIOD_DIGITS", 3)
    monkeypatch.setattr(config, "MAX_PERIOD_CHECK", 3)
    text, period = to_repeating_decimal_with_period(Rational(3, 7))
    assert text == "0.#428..."
    assert period == -1
    with pytest.raises(FormatError):
        repeating_decimal_to_rational(text)


def test_known_period_is_written_in_full(monkeypatch):
    monkeypatch.setattr(config, "MAX_PERIOD_DIGITS", 3)
    assert to_repeating_decimal(Rational(3, 7)) == "0.#428571"


@pytest.mark.parametrize("den", [17, 97])
def test_round_trip_beyond_display_digits(monkeypatch, den):
    monkeypatch.setattr(config, "MAX_PERIOD_DIGITS", 10)
    r = Rational(-167 * den + 3, den)
    text, period = to_repeating_decimal_with_period(r)
    assert period == den - 1
    assert not text.endswith("...")
    assert repeating_decimal_to_rational(text) == r


def test_period_search_bound(monkeypatch, capsys):
    monkeypatch.setattr(config, "MAX_PERIOD_CHECK", 3)
    assert period_length(Rational(5, 7)) == -1
    assert "WARNING:" in capsys.readouterr().out


def test_bounded_period_does_not_stick():
    r = Rational(1, 7)
    assert period_length(r, bound=3) == -1
    assert period_length(r) == 6
    assert to_repeating_decimal(r) == "0.#142857"

    s = Rational(2, 7)
    assert period_length(s, bound=3) == -1
    assert to_repeating_decimal(s) == "0.#285714"


def test_metadata_is_cached_per_alphabet():
    r = Rational(5, 2)
    assert expand(r, "binary") == "10.1#0"
    tally = Radix("tally", 2, "-|")
    assert expand(r, tally) == "|-.|#-"
    assert expand(r, "binary") == "10.1#0"


def test_plain_decimal_display():
    assert to_decimal(Rational(1, 3)) == "0." + "3" * 20
    assert to_decimal(Rational(1, 3), 4) == "0.3333"
    assert to_decimal(Rational(-5, 4)) == "-1.25"
    assert to_decimal(Rational(1, 2**30)) == "0." + str(5**30).zfill(30)


def test_plain_decimal_is_not_exact():
    with pytest.raises(FormatError):
        repeating_decimal_to_rational("1.23")


@pytest.mark.parametrize("value,text", [
    (Rational(1, 3), "3.#3E-1"),
    (Rational(2, 3), "6.#6E-1"),
    (Rational(1, 6), "1.#6E-1"),
    (Rational(10, 3), "3.#3E0"),
    (Rational(100, 3), "3.#3E1"),
    (Rational(114, 37), "3.#081E0"),
    (Rational(1, 7), "1.#428571E-1"),
    (Rational(1, 12), "8.#3E-2"),
    (Rational(1, 2), "5E-1"),
    (Rational(1, 4), "2.5E-1"),
    (Rational(1, 8), "1.25E-1"),
    (Rational(1, 10**7), "1E-7"),
    (Rational(1000), "1E3"),
    (Rational(10**6), "1E6"),
    (Rational(-1, 4), "-2.5E-1"),
    (Rational(0), "0"),
])
def test_scientific(value, text):
    assert to_scientific(value) == text


def test_scientific_truncates_visibly():
    assert to_scientific(Rational(1, 97)).endswith("...E-2")
    assert to_scientific(Rational(123456789012345)).endswith("...E14")


def test_scientific_period_info():
    out = to_scientific(Rational(1, 7), show_period_info=True)
    assert out == "1.#428571E-1 {period: 6}"


@pytest.mark.parametrize("value,radix,text", [
    (Rational(1, 3), 3, "0.1#0"),
    (Rational(1, 2), 3, "0.#1"),
    (Rational(255, 16), "hex", "f.f#0"),
    (Rational(5), "binary", "101"),
    (Rational(1, 3), "binary", "0.#01"),
])
def test_other_radixes(value, radix, text):
    assert expand(value, radix) == text
    assert repeating_decimal_to_rational(text, radix) == value


def test_unknown_radix():
    with pytest.raises(NotImplementedError):
        expand(Rational(1, 3), "roman")


def test_E_on_values():
    assert E(Rational(1, 3), 1) == Rational(10, 3)
    assert E(7, -1) == Rational(7, 10)


def test_digit_strings_past_the_int_conversion_limit():
    assert int_to_digits(10 ** 5000) == "1" + "0" * 5000
    assert int_to_digits(-(10 ** 5000 - 1)) == "-" + "9" * 5000
    assert digits_to_int("9" * 5000) == 10 ** 5000 - 1
    assert digits_to_int("-1" + "0" * 4999) == -(10 ** 4999)
    assert digits_to_int("42") == 42


def test_long_literals():
    assert Rational("7" * 5000) == 7 * (10 ** 5000 - 1) // 9
    assert Rational("1" + "0" * 5000 + "/3") == Rational(10 ** 5000, 3)
    assert Rational("2.." + "1" * 4400 + "/" + "1" + "0" * 4400) == 2 + Rational((10 ** 4400 - 1) // 9, 10 ** 4400)
    assert Rational("0." + "0" * 4999 + "1") == Rational(1, 10 ** 5000)
    assert Rational("0.#" + "0" * 4999 + "1") == Rational(1, 10 ** 5000 - 1)


def test_huge_value_renders():
    r = Rational(10 ** 5000 + 1, 3)
    assert to_repeating_decimal(r) == "3" * 5000 + ".#6"
    assert str(r) == "1" + "0" * 4999 + "1/3"
    assert to_decimal(r, 2) == "3" * 5000 + ".66"
    assert to_scientific(r).endswith("E4999")


@pytest.mark.parametrize("value", [
    Rational(1, 4339),
    Rational(-3, 4339),
    Rational(10 ** 5000 + 1, 3),
    Rational(-(10 ** 4500) - 7, 2 ** 20 * 7),
    Rational(1, 3 * 10 ** 4400),
])
def test_round_trip_of_large_values(value):
    assert repeating_decimal_to_rational(to_repeating_decimal(value)) == value
    assert repeating_decimal_to_rational(to_repeating_decimal(value, use_repeat_notation=True)) == value


def test_period_longer_than_int_conversion_limit():
    r = Rational(1, 4339)
    text, period = to_repeating_decimal_with_period(r)
    assert period > 4300
    assert len(text) == len("0.#") + period


def test_huge_value_renders_with_debugging(monkeypatch, capsys):
    monkeypatch.setattr(config, "DEBUG", True)
    r = Rational(10 ** 5000 + 2, 7)
    assert repeating_decimal_to_rational(to_repeating_decimal(r)) == r
    assert "[DBG]" in capsys.readouterr().out
