"""
Integer-only primitives behind the decimal, continued-fraction and interval engines.

Nothing here touches a float: ceilings, floors and logarithm bounds are all
computed on exact integers.
"""
from __future__ import annotations
import re
from math import gcd
from typing import List, Tuple

from errors import FormatError

REPEAT_GROUP = re.compile(r"\{(\d+)~(\d+)\}")
STR_CHUNK = 1000    # digits per int()/str() call; CPython refuses strings past 4300 digits


def digits_to_int(digits: str) -> int:
    """Value of a (optionally signed) decimal digit string of any length."""
    if digits.startswith("-"):
        return -digits_to_int(digits[1:])
    if len(digits) <= STR_CHUNK:
        return int(digits)
    head = len(digits) % STR_CHUNK or STR_CHUNK
    value = int(digits[:head])
    step = 10 ** STR_CHUNK
    for i in range(head, len(digits), STR_CHUNK):
        value = value * step + int(digits[i:i + STR_CHUNK])
    return value


def int_to_digits(n: int) -> str:
    """Decimal text of an int of any size."""
    if n < 0:
        return "-" + int_to_digits(-n)
    step = 10 ** STR_CHUNK
    if n < step:
        return str(n)
    chunks = []
    while n >= step:
        n, low = divmod(n, step)
        chunks.append(str(low).zfill(STR_CHUNK))
    chunks.append(str(n))
    return "".join(reversed(chunks))


def count_factors(n: int, p: int) -> int:
    """
    Multiplicity of the prime p in n (0 for n == 0).
    Divides by p^16, p^8, p^4, p^2, p in turn so large multiplicities
    cost a handful of big divisions instead of one per factor.
    """
    n = abs(n)
    if n == 0:
        return 0
    if p == 2:
        return (n & -n).bit_length() - 1
    count = 0
    for e in (16, 8, 4, 2, 1):
        pe = p ** e
        while n % pe == 0:
            n //= pe
            count += e
    return count


def strip_radix(d: int, base: int) -> Tuple[int, int]:
    """
    Remove from d every prime factor it shares with base.

    Returns (reduced, steps) where steps is the length of the non-repeating
    prefix of any reduced fraction with denominator d written in this base:
    each gcd strip accounts for one more digit place. For base 10 this is
    max(count of 2, count of 5).
    """
    steps = 0
    g = gcd(d, base)
    while g > 1:
        d //= g
        steps += 1
        g = gcd(d, base)
    return d, steps


def multiplicative_order(base: int, modulus: int, bound: int) -> int:
    """
    Smallest k >= 1 with base^k == 1 (mod modulus), by iterated modular multiplication.
    Returns -1 once bound steps pass without reaching 1. modulus must be coprime to base.
    """
    if modulus == 1:
        return 1
    k = 1
    r = base % modulus
    while r != 1 and k < bound:
        r = (r * base) % modulus
        k += 1
    return k if r == 1 else -1


def long_division(remainder: int, denominator: int, count: int, base: int = 10,
                  stop_at_zero: bool = True) -> Tuple[List[int], int]:
    """Next `count` digits of remainder/denominator (0 <= remainder < denominator)."""
    digits: List[int] = []
    for _ in range(count):
        if stop_at_zero and remainder == 0:
            break
        remainder *= base
        digits.append(remainder // denominator)
        remainder %= denominator
    return digits, remainder


def skip_digits(remainder: int, denominator: int, count: int, base: int = 10) -> int:
    """Remainder after `count` long-division steps, without producing the digits."""
    return (remainder * pow(base, count, denominator)) % denominator


def repeating_to_ratio(whole: str, prefix: str, period: str) -> Tuple[int, int]:
    """
    Exact (numerator, denominator) of  whole.prefix#period  (unsigned digit strings).

    With n = len(prefix), m = len(period), P = whole+prefix+period and
    Q = whole+prefix read as integers, the value is (P - Q) / (10^n * (10^m - 1)).
    A period of exactly "0" marks a terminating value: whole+prefix / 10^n.
    """
    whole = whole or "0"
    n = len(prefix)
    if period == "0":
        return digits_to_int(whole + prefix), 10 ** n
    m = len(period)
    P = digits_to_int(whole + prefix + period)
    Q = digits_to_int(whole + prefix)
    return P - Q, 10 ** n * (10 ** m - 1)


def ceil_div(a: int, b: int) -> int:
    return -((-a) // b)


def log_ceil(num: int, den: int, base: int) -> int:
    """Smallest k >= 0 with base^k * num >= den, i.e. ceil(log_base(den/num)) for num > 0."""
    k = 0
    p = num
    while p < den:
        p *= base
        k += 1
    return k


def compress_repeats(digits: str, threshold: int) -> str:
    """Rewrite every run of >= threshold identical digits as {d~n}."""
    if not digits:
        return digits
    out = []
    i = 0
    while i < len(digits):
        ch = digits[i]
        j = i
        while j < len(digits) and digits[j] == ch:
            j += 1
        run = j - i
        out.append(f"{{{ch}~{run}}}" if run >= threshold else ch * run)
        i = j
    return "".join(out)


def expand_repeats(text: str) -> str:
    """Inverse of compress_repeats. Braces that are not a valid {digits~count} group are rejected."""
    if "{" not in text and "}" not in text:
        return text
    expanded = REPEAT_GROUP.sub(lambda m: m.group(1) * int(m.group(2)), text)
    if "{" in expanded or "}" in expanded:
        start = expanded.find("{") if "{" in expanded else expanded.find("}")
        raise FormatError("Invalid repeat group", expanded[start:])
    return expanded
