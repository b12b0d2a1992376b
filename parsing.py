from arithmetic import Q
from continued_fraction import parse_continued_fraction
from errors import FormatError
from interval import RationalInterval

ALLOWED_CHARS = set("0123456789.-+/#~:[],{}")

# Accepted notations
#   7            integer            -> int
#   3/4  2..1/4  fraction, mixed    -> Rational
#   0.1#6        repeating decimal  -> Rational (exact)
#   1.23         plain decimal      -> RationalInterval [1.225, 1.235]
#   3.~7~15      continued fraction -> Rational
#   1/3:1/2      interval           -> RationalInterval
#   1.2[3:7]  1.25[+-50]  1.3[+5,-10]  uncertainty forms -> RationalInterval


def load_text_strict(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        s = f.read().strip()
    if any(c not in ALLOWED_CHARS for c in s):
        bad = sorted(set(c for c in s if c not in ALLOWED_CHARS))
        raise FormatError(f"Illegal character(s) found: {bad}. Allowed are only {''.join(sorted(ALLOWED_CHARS))}")
    if not s:
        raise FormatError("Empty file.")
    return s


def scan_digits(s: str, i: int, required: bool = True):
    n = len(s)
    start = i
    while i < n and s[i].isdigit():
        i += 1
    if required and i == start:
        raise FormatError(f"Expected digit at position {i}", s)
    return s[start:i], i


def expect_char(s: str, i: int, ch: str):
    if i >= len(s) or s[i] != ch:
        raise FormatError(f"Expected '{ch}' at position {i}", s)
    return i + 1


def parse_plain_decimal(s: str):
    """
    "-?[0-9]*.[0-9]+" without a repeat marker: the digits shown are only known to
    half a unit in the last place, so the result is that interval.
    """
    i = 0
    if s.startswith("-"):
        i += 1
    _, i = scan_digits(s, i, required=False)
    i = expect_char(s, i, ".")
    frac, i = scan_digits(s, i)
    if i != len(s):
        raise FormatError(f"Unexpected trailing content at position {i}", s[i:])
    value = Q(s)
    half = Q(1, 2 * 10 ** len(frac))
    return RationalInterval(value - half, value + half)


def parse_base(s: str):
    """Base of an uncertainty form: returns (value, size of one offset unit)."""
    i = 0
    if s.startswith("-"):
        i += 1
    whole, i = scan_digits(s, i, required=False)
    frac = None
    if i < len(s) and s[i] == ".":
        frac, i = scan_digits(s, i + 1, required=False)
    if i != len(s):
        raise FormatError(f"Invalid uncertainty base at position {i}", s)
    if not whole and not frac:
        raise FormatError("Uncertainty base needs digits", s)
    value = Q((s[:-1] if s.endswith(".") else s) or "0")
    # offsets count units of the place after the base's last digit
    scale = Q(1, 10 ** (len(frac) + 1)) if frac is not None else Q(1)
    return value, scale


def parse_offset(s: str):
    if not s:
        raise FormatError("Empty offset", s)
    if not (s[0].isdigit() or s[0] == "."):
        raise FormatError("Offset must be an unsigned decimal", s)
    if "/" in s or ".." in s:
        raise FormatError("Offset must be an unsigned decimal", s)
    return Q(s)


def parse_uncertainty(s: str):
    """base[low:high], base[+-d] / base[-+d], base[+hi,-lo] / base[-lo,+hi]."""
    open_at = s.index("[")
    if not s.endswith("]"):
        raise FormatError(f"Expected ']' at position {len(s)}", s)
    base, body = s[:open_at], s[open_at + 1:-1]
    if "[" in body or "]" in body:
        raise FormatError("Nested brackets", body)

    if ":" in body:
        lo_digits, hi_digits = body.split(":", 1)
        for part in (lo_digits, hi_digits):
            if not part.isdigit():
                raise FormatError("Range digits must be digits only", part)
        parse_base(base)
        return RationalInterval(Q(base + lo_digits), Q(base + hi_digits))

    value, scale = parse_base(base)
    if body.startswith("+-") or body.startswith("-+"):
        d = parse_offset(body[2:]) * scale
        return RationalInterval(value - d, value + d)
    parts = body.split(",")
    if len(parts) != 2:
        raise FormatError("Expected [+-d] or [+hi,-lo]", body)
    offsets = {}
    for p in parts:
        sign = p[:1]
        if sign not in ("+", "-") or sign in offsets:
            raise FormatError("Expected one '+' offset and one '-' offset", body)
        offsets[sign] = parse_offset(p[1:]) * scale
    return RationalInterval(value - offsets["-"], value + offsets["+"])


def parse_repeating_decimal(text: str):
    """
    Decimal notations only: integers (exact int), '#' decimals (exact Rational),
    plain decimals and uncertainty forms (RationalInterval).
    """
    s = text.strip()
    if not s:
        raise FormatError("Empty input", text)
    if "[" in s:
        return parse_uncertainty(s)
    if "#" in s or "{" in s or "}" in s:
        return Q(s)
    if "." in s:
        return parse_plain_decimal(s)
    value = Q(s)
    if value.denominator != 1:
        raise FormatError("Expected a decimal", s)
    return int(value.numerator)


parse_decimal = parse_repeating_decimal


def parse_value(text: str):
    """Any accepted notation, dispatched on its distinguishing characters."""
    s = text.strip()
    if not s:
        raise FormatError("Empty input", text)
    if "[" in s or "]" in s:
        if "[" not in s:
            raise FormatError("Unmatched ']'", s)
        return parse_uncertainty(s)
    if ":" in s:
        return RationalInterval.from_string(s)
    if ".~" in s:
        return parse_continued_fraction(s)
    if "#" in s or "{" in s or "}" in s or ".." in s or "/" in s:
        return Q(s)
    return parse_repeating_decimal(s)


def load_value_from_file(path: str):
    s = load_text_strict(path)
    return parse_value(s)
