from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

log = logging.getLogger(__name__)

DEFAULT_PRECISION = 1e-13

# A bracket of width ~1e4 halves down to 1e-13 in under 60 steps; anything past
# this means the bracket did not shrink (NaN from func, or inf bounds).
_MAX_STEPS = 200


def _num_cmp(element: float, target: float) -> float:
    return element - target


def bsearch(
    target: float,
    arr: Optional[Sequence[float]],
    comparator: Optional[Callable[[float, float], float]] = None,
) -> int:
    """
    Binary search over a sorted array.

    Returns the index of an element equal to target, otherwise the index at which
    target would be inserted to keep the array sorted. Returns -1 for a missing
    or empty array.
    """
    if not arr:
        return -1
    cmp = comparator or _num_cmp
    low, high = 0, len(arr) - 1
    while low <= high:
        mid = (low + high) // 2
        value = cmp(arr[mid], target)
        if value > 0:
            high = mid - 1
        elif value < 0:
            low = mid + 1
        else:
            return mid
    return low


def bisection_search(
    target: float,
    low: float,
    high: float,
    precision: Optional[float],
    func: Callable[[float], float],
) -> float:
    """
    Find x in [low, high] where an increasing func crosses target.

    The bracket is halved until it is no wider than precision (1e-13 when
    precision is None or not positive). Returns the last midpoint evaluated,
    or the midpoint where func hits target exactly.
    """
    pre = precision if precision is not None and precision > 0 else DEFAULT_PRECISION
    mid = (low + high) / 2.0
    for _ in range(_MAX_STEPS):
        mid = (low + high) / 2.0
        value = func(mid)
        if value > target:
            high = mid
        elif value < target:
            low = mid
        else:
            return mid
        if high - low <= pre:
            return mid
    log.debug("bisection_search stopped after %d steps at bracket width %g", _MAX_STEPS, high - low)
    return mid
