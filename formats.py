from dataclasses import dataclass
from typing import Union

_DIGITS36 = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class Radix:
    name: str
    base: int
    digits: str         # one character per digit value, len(digits) == base

    def char_for_digit(self, d: int) -> str:
        if not 0 <= d < self.base:
            raise ValueError(f"Digit {d} out of range for base {self.base}")
        return self.digits[d]

    def digit_for_char(self, ch: str) -> int:
        i = self.digits.find(ch)
        if i < 0:
            i = self.digits.find(ch.lower())
        if i < 0:
            raise ValueError(f"Character {ch!r} is not a digit in {self.name}")
        return i

    def render(self, digits) -> str:
        return "".join(self.digits[d] for d in digits)


def _derive(name: str, base: int, digits: str = None) -> Radix:
    if base < 2:
        raise ValueError(f"Base must be at least 2, got {base}")
    if digits is None:
        if base > len(_DIGITS36):
            raise ValueError(f"Base {base} needs an explicit digit alphabet")
        digits = _DIGITS36[:base]
    if len(digits) != base or len(set(digits)) != base:
        raise ValueError(f"Radix {name!r} needs {base} distinct digit characters")
    return Radix(name=name, base=base, digits=digits)


_REGISTRY = {
    "binary":      2,
    "bin":         2,
    "ternary":     3,
    "octal":       8,
    "oct":         8,
    "decimal":    10,
    "dec":        10,
    "duodecimal": 12,
    "hexadecimal": 16,
    "hex":        16,
    "base36":     36,
}

DECIMAL = _derive("decimal", 10)


def get_radix(radix: Union[str, int, Radix, None] = None) -> Radix:
    """Look up a named radix, wrap a bare integer base, or pass a Radix through."""
    if isinstance(radix, Radix):
        return radix
    if radix is None:
        return DECIMAL
    if isinstance(radix, int) and not isinstance(radix, bool):
        return DECIMAL if radix == 10 else _derive(f"base{radix}", radix)
    key = str(radix).lower()
    try:
        base = _REGISTRY[key]
    except KeyError:
        raise NotImplementedError(f"Radix '{radix}' not implemented. Supported radixes {list(_REGISTRY.keys())}")
    return _derive(key, base)
