import os

# Decimal expansion
DEFAULT_PERIOD_DIGITS = 20
MAX_PERIOD_DIGITS = 1000
MAX_PERIOD_CHECK = 10_000_000     # 10^7 modular steps before giving up on the period
DISPLAY_DIGITS = 20               # digits shown by the plain (truncated) decimal form

# {d~n} compression thresholds
PREFIX_REPEAT_THRESHOLD = 4
PERIOD_REPEAT_THRESHOLD = 6

# Continued fractions
MAX_CF_TERMS = 1000

# Interval exports
SHORTEST_DECIMAL_MARGIN = 2
POINT_SEARCH_LIMIT = 50
DEFAULT_MAX_DENOMINATOR = 1000

DEBUG = os.environ.get("RATMATH_DEBUG", "").lower() in ("1", "true", "yes", "on")


def dbg(msg: str) -> None:
    if DEBUG:
        print(f"[DBG] {msg}")


def warn(msg: str) -> None:
    print(f"WARNING: {msg}")
