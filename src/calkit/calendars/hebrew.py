from __future__ import annotations

"""
calkit.calendars.hebrew

Arithmetic Hebrew calendar (Calendrical Calculations, ch. 8).

Months are numbered from Nisan = 1, so the year starts in month 7 (Tishri) and
a leap year inserts Adar II as month 13. Days begin at 18:00 of the previous
civil day: the epoch (JD 347997.25) is the eve of Tishri 1, AM 1, and the
fractional part of a day number counts from that 18:00.

Time of day may also be given in halaqim ("parts", 1080 per hour), which
replace the minute/second/millisecond fields.
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from ..core.numeric import mod
from ..core.types import DateFields
from .base import CalendarDate, check_fields, split_rd

HEBREW_EPOCH = 347997.25

MS_PER_PART = 10000 / 3   # one heleq is 3 1/3 seconds

# days from Tishri 1 to the first of each month (Nisan .. Adar), with a 29-day
# Heshvan and Kislev; long_heshvan/long_kislev add one day each
CUMULATIVE = (176, 206, 235, 265, 294, 324, 0, 30, 59, 88, 117, 147)
CUMULATIVE_LEAP = (206, 236, 265, 295, 324, 354, 0, 30, 59, 88, 117, 147, 177)


# ------------------------------------------------------------
# Year arithmetic
# ------------------------------------------------------------

def is_hebrew_leap(year: int) -> bool:
    return mod(1 + 7 * year, 19) < 7


@lru_cache(maxsize=4096)
def elapsed_days(year: int) -> int:
    """Days from the epoch to the molad of Tishri of `year`, after the Sunday/Wednesday/Friday delay."""
    months = math.floor((235 * year - 234) / 19)
    parts = 204 + 793 * mod(months, 1080)
    hours = 11 + 12 * months + 793 * math.floor(months / 1080) + math.floor(parts / 1080)
    days = 29 * months + math.floor(hours / 24)
    if mod(3 * (days + 1), 7) < 3:
        return days + 1
    return days


def new_years_correction(year: int) -> int:
    """Further delay of Tishri 1 that keeps year lengths within 353..385 days."""
    ny0 = elapsed_days(year - 1)
    ny1 = elapsed_days(year)
    ny2 = elapsed_days(year + 1)
    if ny2 - ny1 == 356:
        return 2
    if ny1 - ny0 == 382:
        return 1
    return 0


def new_year(year: int) -> int:
    """Day number (at 18:00 on the eve) of Tishri 1 of `year`."""
    return elapsed_days(year) + new_years_correction(year)


def days_in_year(year: int) -> int:
    return new_year(year + 1) - new_year(year)


def long_heshvan(year: int) -> bool:
    return days_in_year(year) % 10 == 5


def long_kislev(year: int) -> bool:
    return days_in_year(year) % 10 != 3


def hebrew_month_length(month: int, year: int) -> int:
    if month in (2, 4, 6, 10):
        return 29
    if month == 13:
        return 29 if is_hebrew_leap(year) else 0
    if month == 12:
        return 30 if is_hebrew_leap(year) else 29
    if month == 8:
        return 30 if long_heshvan(year) else 29
    if month == 9:
        return 30 if long_kislev(year) else 29
    if month in (1, 3, 5, 7, 11):
        return 30
    return 0


def _days_before_month(month: int, year: int) -> int:
    table = CUMULATIVE_LEAP if is_hebrew_leap(year) else CUMULATIVE
    days = table[month - 1]
    if (month < 7 or month > 8) and long_heshvan(year):
        days += 1
    if (month < 7 or month > 9) and long_kislev(year):
        days += 1
    return days


# ------------------------------------------------------------
# Time of day
# ------------------------------------------------------------

def parts_to_ms(parts: int) -> int:
    return round(parts * MS_PER_PART)


def _ms_past_hour(fields: DateFields) -> int:
    if fields.parts is not None:
        return parts_to_ms(fields.parts)
    return fields.minute * 60000 + fields.second * 1000 + fields.millisecond


def _day_fraction(fields: DateFields) -> float:
    ms = _ms_past_hour(fields)
    if fields.hour >= 18:
        return ((fields.hour - 18) * 3600000 + ms) / 86400000
    # 6 hours from 18:00 to civil midnight
    return 0.25 + (fields.hour * 3600000 + ms) / 86400000


def _wall_time(ms_of_day: int) -> Tuple[int, int, int, int]:
    hour, rem = divmod(ms_of_day, 3600000)
    hour = hour - 6 if hour >= 6 else hour + 18
    minute, rem = divmod(rem, 60000)
    second, ms = divmod(rem, 1000)
    return hour, minute, second, ms


@dataclass(frozen=True)
class HebrewPolicy:
    name: str = "hebrew"
    epoch: float = HEBREW_EPOCH

    def num_months(self, year: int) -> int:
        return 13 if is_hebrew_leap(year) else 12

    def is_leap_year(self, year: int) -> bool:
        return is_hebrew_leap(year)

    def month_length(self, month: int, year: int) -> int:
        return hebrew_month_length(month, year)

    def days_in_year(self, year: int) -> int:
        return days_in_year(year)

    def day_of_year(self, fields: DateFields) -> int:
        """1-based, counted from Tishri 1."""
        return _days_before_month(fields.month, fields.year) + fields.day

    def validate(self, fields: DateFields) -> None:
        check_fields(self, fields)

    def rd_from_fields(self, fields: DateFields) -> float:
        days = new_year(fields.year) + _days_before_month(fields.month, fields.year) + fields.day - 1
        return days + _day_fraction(fields)

    def year_from_rd(self, day: int) -> int:
        year = math.floor(day / 365.246822206) + 1
        while new_year(year) > day:
            year -= 1
        while new_year(year + 1) <= day:
            year += 1
        return year

    def fields_from_rd(self, rd: float) -> DateFields:
        day, ms = split_rd(rd)
        year = self.year_from_rd(day)
        remainder = day - new_year(year)
        last = 13 if is_hebrew_leap(year) else 12
        for month in (*range(7, last + 1), *range(1, 7)):
            length = hebrew_month_length(month, year)
            if remainder < length:
                break
            remainder -= length
        hour, minute, second, millis = _wall_time(ms)
        return DateFields(year, month, remainder + 1, hour, minute, second, millis)


HEBREW = HebrewPolicy()


class HebrewDate(CalendarDate):
    calendar = "hebrew"

    def halaqim(self) -> float:
        """Time past the hour in parts (1/1080 hour)."""
        f = self.fields
        return (f.minute * 60000 + f.second * 1000 + f.millisecond) * 0.0003
