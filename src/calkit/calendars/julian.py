from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.numeric import mod
from ..core.search import bsearch
from ..core.types import DateFields
from .base import CalendarDate, check_fields, split_rd, time_fraction
from .gregorian import CUMULATIVE, CUMULATIVE_LEAP, MONTH_LENGTHS

JULIAN_EPOCH = 1721422.5  # JD of the day before 0001-01-01 (Julian)


def is_julian_leap(year: int) -> bool:
    # no year 0: 1 BCE, 5 BCE, ... are leap
    return mod(year, 4) == (0 if year > 0 else 3)


def julian_rd(year: int, month: int, day: int) -> int:
    y = year + 1 if year < 0 else year
    cum = CUMULATIVE_LEAP if is_julian_leap(year) else CUMULATIVE
    return 365 * (y - 1) + math.floor((y - 1) / 4) + cum[month - 1] + day


def julian_year_from_rd(rd: float) -> int:
    year = math.floor((4 * (math.floor(rd) - 1) + 1464) / 1461)
    return year - 1 if year <= 0 else year


@dataclass(frozen=True)
class JulianPolicy:
    """Julian calendar; years run ..., -2, -1, 1, 2, ... with no year 0."""
    name: str = "julian"
    epoch: float = JULIAN_EPOCH

    def num_months(self, year: int) -> int:
        return 0 if year == 0 else 12

    def is_leap_year(self, year: int) -> bool:
        return is_julian_leap(year)

    def month_length(self, month: int, year: int) -> int:
        if year == 0 or not 1 <= month <= 12:
            return 0
        if month == 2 and is_julian_leap(year):
            return 29
        return MONTH_LENGTHS[month - 1]

    def days_in_year(self, year: int) -> int:
        if year == 0:
            return 0
        return 366 if is_julian_leap(year) else 365

    def day_of_year(self, fields: DateFields) -> int:
        cum = CUMULATIVE_LEAP if is_julian_leap(fields.year) else CUMULATIVE
        return cum[fields.month - 1] + fields.day

    def validate(self, fields: DateFields) -> None:
        check_fields(self, fields)

    def rd_from_fields(self, fields: DateFields) -> float:
        return julian_rd(fields.year, fields.month, fields.day) + time_fraction(fields)

    def fields_from_rd(self, rd: float) -> DateFields:
        day, ms = split_rd(rd)
        year = julian_year_from_rd(day)
        remainder = day - julian_rd(year, 1, 1) + 1
        cum = CUMULATIVE_LEAP if is_julian_leap(year) else CUMULATIVE
        month = bsearch(remainder, cum)
        return DateFields(year, month, remainder - cum[month - 1]).with_time(ms)


JULIAN = JulianPolicy()


class JulianDate(CalendarDate):
    calendar = "julian"
