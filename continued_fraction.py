"""
Continued fraction expansion of exact rationals, with convergents and best approximations.

A rational x = [a0; a1, a2, ..., an] where a0 = floor(x) (any sign) and every
later term is a positive integer. The expansion is kept canonical: it never
ends in a 1 unless that is the only term ([3; 7, 1] is written [3; 8]).

Text form:  "a0.~a1~a2~..."   e.g. 22/7 -> "3.~7",  an integer 5 -> "5.~0"
"""
from __future__ import annotations
import re
from collections.abc import Sequence
from typing import List, Tuple

import config
from arithmetic import Rational, to_q
from errors import FormatError, IndexOutOfRange
from numtheory import digits_to_int, int_to_digits

_CF_TEXT = re.compile(r"(-?\d+)\.~(.*)")


def to_continued_fraction(x, max_terms: int = None) -> List[int]:
    """
    Euclidean expansion with floor division, so a0 may be negative and later terms are positive.

    Args:
        x: anything to_q accepts.
        max_terms: cap on the number of terms (config.MAX_CF_TERMS by default).
            A capped expansion is reported and returned as far as it got.

    Returns:
        list of int terms [a0, a1, ...].
    """
    r = to_q(x)
    cap = max_terms if max_terms is not None else config.MAX_CF_TERMS
    if r._cf_cache is not None and len(r._cf_cache) <= cap:
        return list(r._cf_cache)

    terms: List[int] = []
    n, d = r.numerator, r.denominator
    while d != 0 and len(terms) < cap:
        a, rem = divmod(n, d)
        terms.append(a)
        n, d = d, rem
    if d != 0:
        config.warn(f"continued fraction cut at {cap} terms ({r.bit_length()}-bit value)")
        return terms

    if len(terms) > 1 and terms[-1] == 1:
        terms.pop()
        terms[-1] += 1
    r._cf_cache = tuple(terms)
    return terms


def _fold(terms) -> Tuple[List[int], List[int]]:
    """Numerators and denominators of every convergent of `terms`."""
    p_prev, p = 1, terms[0]
    q_prev, q = 0, 1
    ps, qs = [p], [q]
    for a in terms[1:]:
        p_prev, p = p, a * p + p_prev
        q_prev, q = q, a * q + q_prev
        ps.append(p)
        qs.append(q)
    return ps, qs


def _check_terms(terms) -> List[int]:
    terms = [int(a) for a in terms]
    if not terms:
        raise FormatError("Continued fraction needs at least one term", "")
    for a in terms[1:]:
        if a <= 0:
            raise FormatError("Continued fraction terms after the first must be positive", int_to_digits(a))
    return terms


def from_continued_fraction(terms) -> Rational:
    """Rebuild the value from [a0, a1, ...] with p_k = a_k p_(k-1) + p_(k-2), q_k likewise."""
    terms = _check_terms(terms)
    ps, qs = _fold(terms)
    return Rational(ps[-1], qs[-1])


class Convergents(Sequence):
    """The convergents p_k/q_k of a continued fraction, in order; the last one is the value itself."""

    def __init__(self, terms):
        self.terms = tuple(_check_terms(terms))
        ps, qs = _fold(self.terms)
        self._values = tuple(Rational(p, q) for p, q in zip(ps, qs))

    def __getitem__(self, index):
        if isinstance(index, slice):
            return list(self._values[index])
        try:
            return self._values[index]
        except IndexError:
            raise IndexOutOfRange(f"Convergent index {index} out of range (have {len(self._values)})")

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return f"Convergents({[str(v) for v in self._values]})"


def convergents(x) -> Convergents:
    r = to_q(x)
    if r._convergent_cache is None:
        r._convergent_cache = Convergents(to_continued_fraction(r))
    return r._convergent_cache


def best_approximation(x, max_denominator: int) -> Rational:
    """Last convergent of x whose denominator does not exceed max_denominator."""
    if max_denominator < 1:
        raise ValueError(f"max_denominator must be at least 1, got {max_denominator}")
    best = None
    for c in convergents(x):
        if c.denominator > max_denominator:
            break
        best = c
    return best


def approximation_error(approx, target) -> Rational:
    return abs(to_q(approx) - to_q(target))


def to_continued_fraction_string(x) -> str:
    terms = to_continued_fraction(x)
    if len(terms) == 1:
        return f"{int_to_digits(terms[0])}.~0"
    return f"{int_to_digits(terms[0])}.~" + "~".join(int_to_digits(a) for a in terms[1:])


def parse_continued_fraction(text: str) -> Rational:
    """Read "a0.~a1~a2..." back to its value. A sole "~0" tail marks an integer."""
    s = text.strip()
    m = _CF_TEXT.fullmatch(s)
    if m is None:
        raise FormatError("Invalid continued fraction (use a0.~a1~a2)", s)
    head, tail = m.groups()
    parts = tail.split("~")
    for p in parts:
        if p == "":
            raise FormatError("Empty continued fraction term", s)
        if not p.isdigit():
            raise FormatError("Continued fraction terms must be digits", p)
    if parts == ["0"]:
        return Rational(digits_to_int(head))
    if "0" in [p.lstrip("0") or "0" for p in parts]:
        raise FormatError("Zero term inside continued fraction", s)
    return from_continued_fraction([digits_to_int(head)] + [digits_to_int(p) for p in parts])
