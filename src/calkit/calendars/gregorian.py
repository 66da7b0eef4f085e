from __future__ import annotations

"""
calkit.calendars.gregorian

Proleptic Gregorian calendar on the fixed day count of Calendrical Calculations:
RD 1 is 0001-01-01, years are astronomical (1 BCE is year 0).

The module-level day-count functions do not touch the astronomy engine, so
the engine can import them for its own date arithmetic.
"""

import math
from dataclasses import dataclass

from ..core.numeric import mod
from ..core.ratadie import GREGORIAN_EPOCH
from ..core.search import bsearch
from ..core.types import DateFields
from .base import CalendarDate, check_fields, split_rd, time_fraction

# cumulative days before each month
CUMULATIVE = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334, 365)
CUMULATIVE_LEAP = (0, 31, 60, 91, 121, 152, 182, 213, 244, 274, 305, 335, 366)

MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_gregorian_leap(year: int) -> bool:
    return mod(year, 4) == 0 and (mod(year, 100) != 0 or mod(year, 400) == 0)


def gregorian_rd(year: int, month: int, day: int) -> int:
    """Fixed day number of a Gregorian date (RD 1 = 0001-01-01)."""
    y = year - 1
    cum = CUMULATIVE_LEAP if is_gregorian_leap(year) else CUMULATIVE
    return (365 * y + math.floor(y / 4) - math.floor(y / 100) + math.floor(y / 400)
            + cum[month - 1] + day)


def gregorian_year_from_rd(rd: float) -> int:
    """Gregorian year containing fixed day rd (fractions of a day are ignored)."""
    d0 = math.floor(rd) - 1
    n400 = math.floor(d0 / 146097)
    d1 = mod(d0, 146097)
    n100 = math.floor(d1 / 36524)
    d2 = mod(d1, 36524)
    n4 = math.floor(d2 / 1461)
    d3 = mod(d2, 1461)
    n1 = math.floor(d3 / 365)
    year = 400 * n400 + 100 * n100 + 4 * n4 + n1
    # Dec 31 of a leap year (end of a 4- or 400-year block)
    if n100 == 4 or n1 == 4:
        return year
    return year + 1


@dataclass(frozen=True)
class GregorianPolicy:
    name: str = "gregorian"
    epoch: float = GREGORIAN_EPOCH

    def num_months(self, year: int) -> int:
        return 12

    def is_leap_year(self, year: int) -> bool:
        return is_gregorian_leap(year)

    def month_length(self, month: int, year: int) -> int:
        if not 1 <= month <= 12:
            return 0
        if month == 2 and is_gregorian_leap(year):
            return 29
        return MONTH_LENGTHS[month - 1]

    def days_in_year(self, year: int) -> int:
        return 366 if is_gregorian_leap(year) else 365

    def day_of_year(self, fields: DateFields) -> int:
        cum = CUMULATIVE_LEAP if is_gregorian_leap(fields.year) else CUMULATIVE
        return cum[fields.month - 1] + fields.day

    def validate(self, fields: DateFields) -> None:
        check_fields(self, fields)

    def rd_from_fields(self, fields: DateFields) -> float:
        return gregorian_rd(fields.year, fields.month, fields.day) + time_fraction(fields)

    def fields_from_rd(self, rd: float) -> DateFields:
        day, ms = split_rd(rd)
        year = gregorian_year_from_rd(day)
        remainder = day - gregorian_rd(year, 1, 1) + 1
        cum = CUMULATIVE_LEAP if is_gregorian_leap(year) else CUMULATIVE
        month = bsearch(remainder, cum)
        return DateFields(year, month, remainder - cum[month - 1]).with_time(ms)


GREGORIAN = GregorianPolicy()


class GregorianDate(CalendarDate):
    calendar = "gregorian"

    def era(self) -> int:
        """1 for CE, -1 for BCE (astronomical year 0 and earlier)."""
        return 1 if self.year > 0 else -1

