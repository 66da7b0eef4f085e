from __future__ import annotations

"""
calkit.calendars.persian_algo

Arithmetic Persian calendar (Birashk's 2820-year cycle, as given in
Calendrical Calculations). Shares the month structure of the astronomical
Persian calendar: six months of 31 days, five of 30, and Esfand with 29 or 30.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from ..core.numeric import mod
from ..core.search import bsearch
from ..core.types import DateFields
from .base import CalendarDate, check_fields, split_rd, time_fraction

PERSIAN_EPOCH = 1948319.5  # day before 1 Farvardin 1 AP (0622-03-19 Julian)

# days before each month; the final entry is the length of a common year
CUMULATIVE = (0, 31, 62, 93, 124, 155, 186, 216, 246, 276, 306, 336, 365)


def days_before_month(month: int) -> int:
    return 31 * (month - 1) if month <= 7 else 30 * (month - 1) + 6


def persian_month_length(month: int, leap: bool) -> int:
    if 1 <= month <= 6:
        return 31
    if 7 <= month <= 11:
        return 30
    if month == 12:
        return 30 if leap else 29
    return 0


def split_day_of_year(doy: int) -> Tuple[int, int]:
    """(month, day) for a 1-based day of the year."""
    # Esfand 30 of a leap year lies past the last entry
    month = min(bsearch(doy, CUMULATIVE), 12)
    return month, doy - CUMULATIVE[month - 1]


def equivalent_cycle_year(year: int) -> int:
    """Position of `year` in the 2820-year cycle, shifted to 474..3293."""
    y = year - 474 if year > 0 else year - 473
    return mod(y, 2820) + 474


def is_persian_algo_leap(year: int) -> bool:
    return mod((equivalent_cycle_year(year) + 38) * 682, 2816) < 682


def persian_algo_rd(year: int, month: int, day: int) -> int:
    y = year - 474 if year > 0 else year - 473
    ecy = mod(y, 2820) + 474
    return (1029983 * math.floor(y / 2820) + 365 * (ecy - 1)
            + math.floor((682 * ecy - 110) / 2816) + days_before_month(month) + day)


_YEAR_475 = persian_algo_rd(475, 1, 1)


def persian_algo_year_from_rd(rd: float) -> int:
    d0 = math.floor(rd) - _YEAR_475
    n2820 = math.floor(d0 / 1029983)
    d1 = mod(d0, 1029983)
    if d1 == 1029982:
        y2820 = 2820
    else:
        y2820 = math.floor((2816 * d1 + 1031337) / 1028522)
    year = 474 + 2820 * n2820 + y2820
    # no year 0
    return year if year > 0 else year - 1


@dataclass(frozen=True)
class PersianAlgoPolicy:
    name: str = "persian-algo"
    epoch: float = PERSIAN_EPOCH

    def num_months(self, year: int) -> int:
        return 0 if year == 0 else 12

    def is_leap_year(self, year: int) -> bool:
        return is_persian_algo_leap(year)

    def month_length(self, month: int, year: int) -> int:
        if year == 0:
            return 0
        return persian_month_length(month, is_persian_algo_leap(year))

    def days_in_year(self, year: int) -> int:
        return 366 if is_persian_algo_leap(year) else 365

    def day_of_year(self, fields: DateFields) -> int:
        return days_before_month(fields.month) + fields.day

    def validate(self, fields: DateFields) -> None:
        check_fields(self, fields)

    def rd_from_fields(self, fields: DateFields) -> float:
        return persian_algo_rd(fields.year, fields.month, fields.day) + time_fraction(fields)

    def fields_from_rd(self, rd: float) -> DateFields:
        day, ms = split_rd(rd)
        year = persian_algo_year_from_rd(day)
        month, dom = split_day_of_year(day - persian_algo_rd(year, 1, 1) + 1)
        return DateFields(year, month, dom).with_time(ms)


PERSIAN_ALGO = PersianAlgoPolicy()


class PersianAlgoDate(CalendarDate):
    calendar = "persian-algo"
