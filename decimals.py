"""Exact decimal expansion of rationals, and its inverse.

Forward direction, for a reduced fraction n/d written in base b:

    prefix length  = number of gcd(d, b) strips needed to make d coprime to b
                     (for b = 10 this is max(count of 2, count of 5) in d)
    R              = d with those factors removed
    period length  = 0 if R == 1 (terminating), otherwise the multiplicative
                     order of b mod R, found by iterated modular multiplication
                     and abandoned (reported as -1) after config.MAX_PERIOD_CHECK steps

The period length never needs the digits, and the digits are produced by long
division only as far as a caller asks, so "how long is the period" and "what
are its first k digits" cost independently of each other.

Text form:  [-]<whole>.<prefix>#<period>
    1/3 -> "0.#3",  1/6 -> "0.1#6",  5/4 -> "1.25#0",  7 -> "7"
A terminating non-integer ends in "#0" so it is not mistaken for a truncated
expansion. Output that had to be cut short ends in "..." instead.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple

import config
from arithmetic import Rational, to_q
from errors import FormatError
from formats import DECIMAL, Radix, get_radix
from numtheory import (count_factors, strip_radix, multiplicative_order, long_division, skip_digits,
                       int_to_digits, compress_repeats, expand_repeats)

PERIOD_UNKNOWN = -1
TRUNCATED = "..."


@dataclass(frozen=True)
class DecimalMetadata:
    """Digits of |value| in one radix, split into whole part, prefix and period.

    period_digits holds at most digits_requested digits; compare its length with
    period_length to know whether the full period is present.
    """
    negative: bool
    radix: int
    whole_part: int
    remainder: int
    initial_segment: str        # non-repeating digits after the point
    period_digits: str          # repeating digits (possibly only the first few)
    period_length: int          # 0 terminating, -1 larger than the search bound
    reduced_denominator: int    # denominator with the radix's prime factors removed
    factors_of_2: int
    factors_of_5: int
    leading_zeros_in_period: int
    digits_requested: int

    @property
    def is_terminating(self) -> bool:
        return self.period_length == 0

    @property
    def prefix_length(self) -> int:
        return len(self.initial_segment)

    @property
    def has_full_period(self) -> bool:
        return self.period_length >= 0 and len(self.period_digits) == self.period_length

    @property
    def initial_segment_leading_zeros(self) -> int:
        return len(self.initial_segment) - len(self.initial_segment.lstrip("0"))

    @property
    def initial_segment_rest(self) -> str:
        return self.initial_segment.lstrip("0")

    @property
    def period_digits_rest(self) -> str:
        return self.period_digits[self.leading_zeros_in_period:]


def _cache(r: Rational) -> dict:
    if r._decimal_cache is None:
        r._decimal_cache = {}
    return r._decimal_cache


def _int_to_radix(n: int, rad: Radix) -> str:
    if rad.digits == DECIMAL.digits:
        return int_to_digits(n)
    if n == 0:
        return rad.digits[0]
    out = []
    while n:
        n, d = divmod(n, rad.base)
        out.append(rad.digits[d])
    return "".join(reversed(out))


def _leading_zeros(start: int, den: int, base: int, bound: int) -> int:
    """Zero digits produced by long division from remainder `start` before the first nonzero one."""
    zeros = 0
    x = start * base
    while x < den and zeros < bound:
        x *= base
        zeros += 1
    return zeros


def period_length(x, radix=10, bound: int = None) -> int:
    """
    Length of the repeating cycle of x in the given radix; 0 if it terminates, -1 past the bound.

    A -1 is cached with the bound it was found under, so a later call with a
    larger bound searches again instead of repeating the sentinel.
    """
    r = to_q(x)
    base = get_radix(radix).base
    limit = bound or config.MAX_PERIOD_CHECK
    key = ("period", base)
    known = _cache(r).get(key)
    if known is not None:
        length, searched = known
        if length != PERIOD_UNKNOWN or searched >= limit:
            return length
    if r.denominator == 1:
        return 0
    reduced, _ = strip_radix(r.denominator, base)
    if reduced == 1:
        length = 0
    else:
        length = multiplicative_order(base, reduced, limit)
        if length == PERIOD_UNKNOWN:
            config.warn(f"period exceeds {limit} digits ({r.bit_length()}-bit value); reported as -1")
    _cache(r)[key] = (length, limit)
    return length


def decimal_metadata(x, max_period_digits: int = None, radix=10) -> DecimalMetadata:
    """
    Whole part, prefix and up to max_period_digits period digits of x.

    Results are cached on the value per radix, alphabet included; a later
    request for more digits than the cached entry holds recomputes and
    replaces it.
    """
    r = to_q(x)
    rad = get_radix(radix)
    base = rad.base
    wanted = max_period_digits if max_period_digits is not None else config.DEFAULT_PERIOD_DIGITS

    cache = _cache(r)
    key = ("digits", rad)
    cached = cache.get(key)
    if (cached is not None and cached.period_length == period_length(r, rad)
            and (cached.digits_requested >= wanted or cached.has_full_period)):
        return cached

    num, den = r.numerator, r.denominator
    whole, rem = abs(num) // den, abs(num) % den

    if rem == 0:
        md = DecimalMetadata(negative=num < 0, radix=base, whole_part=whole, remainder=0,
                             initial_segment="", period_digits="", period_length=0,
                             reduced_denominator=1, factors_of_2=0, factors_of_5=0,
                             leading_zeros_in_period=0, digits_requested=wanted)
        cache[key] = md
        return md

    reduced, prefix_len = strip_radix(den, base)
    prefix, current = long_division(rem, den, prefix_len, base)

    if reduced == 1:
        plen = 0
        period: List[int] = []
        zeros = 0
    else:
        plen = period_length(r, base)
        count = wanted if plen == PERIOD_UNKNOWN else min(plen, wanted)
        period, _ = long_division(current, den, count, base, stop_at_zero=False)
        zeros = _leading_zeros(current, den, base, config.MAX_PERIOD_CHECK)
        if config.DEBUG:
            config.dbg(f"prefix {prefix_len} digits, period {plen}, {len(period)} period digits extracted")

    md = DecimalMetadata(
        negative=num < 0,
        radix=base,
        whole_part=whole,
        remainder=rem,
        initial_segment=rad.render(prefix),
        period_digits=rad.render(period),
        period_length=plen,
        reduced_denominator=reduced,
        factors_of_2=count_factors(den, 2),
        factors_of_5=count_factors(den, 5),
        leading_zeros_in_period=zeros,
        digits_requested=wanted,
    )
    cache[key] = md
    return md


def extract_period_segment(x, digits_requested: int, radix=10) -> str:
    """
    First digits_requested digits of the period (capped at the full period length),
    jumping over the prefix with a modular power instead of dividing through it.
    """
    r = to_q(x)
    rad = get_radix(radix)
    plen = period_length(r, rad.base)
    if plen == 0:
        return ""
    count = digits_requested if plen == PERIOD_UNKNOWN else min(digits_requested, plen)
    den = r.denominator
    reduced, prefix_len = strip_radix(den, rad.base)
    start = skip_digits(abs(r.numerator) % den, den, prefix_len, rad.base)
    digits, _ = long_division(start, den, count, rad.base, stop_at_zero=False)
    return rad.render(digits)


def to_repeating_decimal_with_period(x, use_repeat_notation: bool = False, radix=10) -> Tuple[str, int]:
    """
    Text form of x and its period length. A known period is always written in
    full; one past the search bound shows config.MAX_PERIOD_DIGITS digits and "...".
    """
    r = to_q(x)
    rad = get_radix(radix)
    if r.numerator == 0:
        return rad.digits[0], 0
    plen = period_length(r, rad)
    md = decimal_metadata(r, plen if plen > 0 else config.MAX_PERIOD_DIGITS, rad)
    text = ("-" if md.negative else "") + _int_to_radix(md.whole_part, rad)

    if md.is_terminating:
        if md.initial_segment:
            prefix = md.initial_segment
            if use_repeat_notation:
                prefix = compress_repeats(prefix, config.PREFIX_REPEAT_THRESHOLD)
            text += "." + prefix + "#" + rad.digits[0]
        return text, 0

    prefix, period = md.initial_segment, md.period_digits
    if use_repeat_notation:
        prefix = compress_repeats(prefix, config.PREFIX_REPEAT_THRESHOLD)
        period = compress_repeats(period, config.PERIOD_REPEAT_THRESHOLD)
    text += "." + prefix + "#" + period
    if not md.has_full_period:
        text += TRUNCATED
    return text, md.period_length


def to_repeating_decimal(x, use_repeat_notation: bool = False, radix=10) -> str:
    return to_repeating_decimal_with_period(x, use_repeat_notation, radix)[0]


def to_decimal(x, digits: int = None) -> str:
    """
    Plain decimal without a repeat marker. Terminating values are written exactly;
    repeating ones are cut after `digits` fractional digits (display only).
    """
    r = to_q(x)
    if r.numerator == 0:
        return "0"
    sign = "-" if r.numerator < 0 else ""
    whole, rem = r.whole_part, r.remainder
    if rem == 0:
        return sign + int_to_digits(whole)
    if period_length(r) == 0:
        count = strip_radix(r.denominator, 10)[1]
    else:
        count = digits if digits is not None else config.DISPLAY_DIGITS
    frac, _ = long_division(rem, r.denominator, count)
    return f"{sign}{int_to_digits(whole)}." + "".join(map(str, frac))


def _digits_value(digits: str, rad: Radix) -> int:
    v = 0
    for ch in digits:
        v = v * rad.base + rad.digit_for_char(ch)
    return v


def repeating_decimal_to_rational(text: str, radix=10) -> Rational:
    """
    Exact value of "[-]W.P#R" text (with optional {d~n} runs), or of a bare integer.

    With n = len(P), m = len(R), the value is (WPR - WP) / (b^n * (b^m - 1));
    a period of exactly "0" means the expansion stops after P.
    Plain decimals without a marker are ambiguous and rejected here.
    """
    rad = get_radix(radix)
    s = text.strip()
    if s.endswith(TRUNCATED):
        raise FormatError("Truncated expansion cannot be read back exactly", s)
    if rad.base == 10:
        if "#" not in s and "{" not in s and "." in s:
            raise FormatError("Decimal without a repeat marker is not exact", s)
        return Rational(s)

    s = expand_repeats(s)
    neg = s.startswith("-")
    body = s[1:] if neg else s
    if "#" not in body:
        if "." in body:
            raise FormatError("Radix expansion without a repeat marker is not exact", s)
        try:
            value = _digits_value(body, rad) if body else None
        except ValueError:
            raise FormatError(f"Invalid digit for {rad.name}", body)
        if value is None:
            raise FormatError("Empty numeral", text)
        return Rational(-value if neg else value)
    if body.count("#") > 1:
        raise FormatError("Multiple repeat markers", s)
    head, period = body.split("#")
    if head.count(".") != 1:
        raise FormatError("Repeat marker must follow exactly one radix point", s)
    if period == "":
        raise FormatError("Empty repeat payload", s)
    whole, prefix = head.split(".")
    try:
        WP = _digits_value(whole + prefix, rad)
        WPR = _digits_value(whole + prefix + period, rad)
    except ValueError:
        raise FormatError(f"Invalid digit for {rad.name}", s)
    n, m = len(prefix), len(period)
    if period == rad.digits[0]:
        value = Rational(WP, rad.base ** n)
    else:
        value = Rational(WPR - WP, rad.base ** n * (rad.base ** m - 1))
    return -value if neg else value


def _rotated_period(r: Rational, md: DecimalMetadata, offset: int, count: int) -> str:
    """`count` period digits starting `offset` places into the period (cyclically)."""
    den = r.denominator
    start = skip_digits(abs(r.numerator) % den, den, md.prefix_length)
    if md.period_length > 0:
        offset %= md.period_length
    rem = skip_digits(start, den, offset)
    digits, _ = long_division(rem, den, count, stop_at_zero=False)
    return "".join(map(str, digits))


def _period_info(md: DecimalMetadata) -> str:
    if md.is_terminating:
        return ""
    info = []
    if md.initial_segment_leading_zeros > 0:
        info.append(f"initial: {md.initial_segment_leading_zeros} zeros")
    if md.leading_zeros_in_period > 0:
        info.append(f"period starts: +{md.leading_zeros_in_period} zeros")
    if md.period_length == PERIOD_UNKNOWN:
        info.append(f"period: >{config.MAX_PERIOD_CHECK}")
    else:
        info.append(f"period: {md.period_length}")
    return " {" + ", ".join(info) + "}"


def to_scientific(x, use_repeat_notation: bool = True, precision: int = 11,
                  show_period_info: bool = False) -> str:
    """
    Scientific notation with one nonzero digit before the point:
        1/3 -> "3.#3E-1",  1/4 -> "2.5E-1",  1000 -> "1E3",  100/3 -> "3.#3E1"
    When the first significant digit lies inside the period, the period is
    rotated so the mantissa still repeats exactly. Digits beyond `precision`
    are dropped and marked with "...".
    """
    r = to_q(x)
    if r.numerator == 0:
        return "0"
    md = decimal_metadata(r, max(config.DEFAULT_PERIOD_DIGITS, precision + 1))
    sign = "-" if md.negative else ""
    P = md.initial_segment
    plen = md.period_length

    if md.whole_part > 0:
        W = int_to_digits(md.whole_part)
        exponent = len(W) - 1
        lead, nonrep = W[0], W[1:] + P
        rep_offset = 0
    else:
        z = md.initial_segment_leading_zeros
        if z < len(P):
            exponent = -(z + 1)
            lead, nonrep = P[z], P[z + 1:]
            rep_offset = 0
        else:
            # all of the prefix is zeros: the first significant digit is in the period
            zr = md.leading_zeros_in_period
            exponent = -(len(P) + zr + 1)
            lead = _rotated_period(r, md, zr, 1)
            nonrep = ""
            rep_offset = zr + 1

    if md.is_terminating:
        nonrep = nonrep.rstrip("0")
        cut = len(nonrep) > precision - 1
        if cut:
            nonrep = nonrep[:max(0, precision - 1)]
        if use_repeat_notation:
            nonrep = compress_repeats(nonrep, config.PREFIX_REPEAT_THRESHOLD)
        mantissa = lead + ("." + nonrep if nonrep else "") + (TRUNCATED if cut else "")
        return f"{sign}{mantissa}E{exponent}"

    limit = max(1, precision - 1 - len(nonrep))
    full = plen != PERIOD_UNKNOWN and plen <= limit
    rep = _rotated_period(r, md, rep_offset, plen if full else limit)
    if full:
        # fold trailing non-repeating digits that merely restate the period
        while nonrep and nonrep[-1] == rep[-1]:
            rep = rep[-1] + rep[:-1]
            nonrep = nonrep[:-1]
    if use_repeat_notation:
        nonrep = compress_repeats(nonrep, config.PREFIX_REPEAT_THRESHOLD)
        rep = compress_repeats(rep, config.PERIOD_REPEAT_THRESHOLD)
    mantissa = f"{lead}.{nonrep}#{rep}" + ("" if full else TRUNCATED)
    out = f"{sign}{mantissa}E{exponent}"
    if show_period_info:
        out += _period_info(md)
    return out


def E(x, exponent: int):
    """x * 10^exponent for a Rational or a RationalInterval."""
    if hasattr(x, "E"):
        return x.E(exponent)
    return to_q(x).E(exponent)


def expand(x, radix) -> str:
    """x written in another radix, e.g. expand(Rational(1, 3), "ternary") -> "0.1#0"."""
    return to_repeating_decimal(x, radix=radix)
