from __future__ import annotations

"""
calkit.core.numeric

Modular arithmetic and rounding helpers shared by every calendar.

The modulo functions do not follow Python's ``%`` for negative moduli; they take
the truncated remainder first and then shift it, so that

    mod(x, m)   lies in [0, m)   for m > 0
    amod(x, m)  lies in (0, m]   for m > 0

and ``mod(x, 0) == amod(x, 0) == 0``.
"""

import math
from typing import Callable, Dict, Optional, Union

Number = Union[int, float]


# ---------------------------------------------------------------------------
# Modular arithmetic
# ---------------------------------------------------------------------------

def _trunc_rem(dividend: Number, modulus: Number) -> Number:
    if isinstance(dividend, int) and isinstance(modulus, int):
        r = abs(dividend) % abs(modulus)
        return -r if dividend < 0 else r
    return math.fmod(dividend, modulus)


def mod(dividend: Number, modulus: Number) -> Number:
    """Remainder that is never negative for a positive modulus."""
    if modulus == 0:
        return 0
    x = _trunc_rem(dividend, modulus)
    return x + modulus if x < 0 else x


def amod(dividend: Number, modulus: Number) -> Number:
    """Adjusted remainder: like mod() but returns the modulus instead of 0."""
    if modulus == 0:
        return 0
    x = _trunc_rem(dividend, modulus)
    return x + modulus if x <= 0 else x


# ---------------------------------------------------------------------------
# Rounding modes
# ---------------------------------------------------------------------------

def signum(num: Number) -> int:
    return -1 if num < 0 else 1


def floor(num: Number) -> int:
    return math.floor(num)


def ceiling(num: Number) -> int:
    return math.ceil(num)


def down(num: Number) -> int:
    """Round toward zero."""
    return math.ceil(num) if num < 0 else math.floor(num)


def up(num: Number) -> int:
    """Round away from zero."""
    return math.floor(num) if num < 0 else math.ceil(num)


def halfup(num: Number) -> int:
    """Round half away from zero."""
    return math.ceil(num - 0.5) if num < 0 else math.floor(num + 0.5)


def halfdown(num: Number) -> int:
    """Round half toward zero."""
    return math.floor(num + 0.5) if num < 0 else math.ceil(num - 0.5)


def halfeven(num: Number) -> int:
    return math.ceil(num - 0.5) if math.floor(num) % 2 == 0 else math.floor(num + 0.5)


def halfodd(num: Number) -> int:
    return math.ceil(num - 0.5) if math.floor(num) % 2 != 0 else math.floor(num + 0.5)


ROUNDING_MODES: Dict[str, Callable[[Number], int]] = {
    "floor": floor,
    "ceiling": ceiling,
    "down": down,
    "up": up,
    "halfup": halfup,
    "halfdown": halfdown,
    "halfeven": halfeven,
    "halfodd": halfodd,
}


def rounding(name: str) -> Callable[[Number], int]:
    if name not in ROUNDING_MODES:
        raise KeyError(f"Unknown rounding mode '{name}'. Available: {sorted(ROUNDING_MODES)}")
    return ROUNDING_MODES[name]


# ---------------------------------------------------------------------------
# Decimal shifting
# ---------------------------------------------------------------------------

def shift_decimal(number: Number, precision: int) -> float:
    """
    Multiply by 10**precision by rewriting the exponent of the decimal text.

    shift_decimal(1.005, 2) == 100.5 exactly, where 1.005 * 100 is 100.49999999999999.
    """
    mantissa, _, exponent = repr(float(number)).partition("e")
    return float(f"{mantissa}e{int(exponent or 0) + precision}")


def log10(num: Number) -> float:
    return math.log10(num)


def _round_half_up(x: float) -> int:
    """Round half toward positive infinity."""
    return math.floor(x + 0.5)


def significant(number: Number, digits: int, rnd: Optional[Callable[[float], Number]] = None) -> Number:
    """Round to the given number of significant digits."""
    if digits < 1 or number == 0:
        return number
    fn = rnd or _round_half_up
    factor = -math.floor(log10(abs(number))) + digits - 1
    return shift_decimal(fn(shift_decimal(number, factor)), -factor)
