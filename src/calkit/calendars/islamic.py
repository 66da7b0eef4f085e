from __future__ import annotations

"""
calkit.calendars.islamic

Tabular (civil) Islamic calendar: 30-year cycle with 11 leap years
(2, 5, 7, 10, 13, 16, 18, 21, 24, 26, 29), Friday epoch 0622-07-16 (Julian).
"""

import math
from dataclasses import dataclass

from ..core.numeric import mod
from ..core.types import DateFields
from .base import CalendarDate, check_fields, split_rd, time_fraction

ISLAMIC_EPOCH = 1948439.5

# fixed day number (RD) of the epoch on the Gregorian count
GREGORIAN_DIFF = 227015


def is_islamic_leap(year: int) -> bool:
    return mod(14 + 11 * year, 30) < 11


def islamic_month_length(month: int, year: int) -> int:
    if not 1 <= month <= 12:
        return 0
    if month == 12 and is_islamic_leap(year):
        return 30
    return 30 if month % 2 == 1 else 29


def islamic_rd(year: int, month: int, day: int) -> int:
    """Days from the epoch; 1/1/1 is day 0."""
    return ((year - 1) * 354 + math.ceil(29.5 * (month - 1)) + day
            + math.floor((3 + 11 * year) / 30) - 1)


@dataclass(frozen=True)
class IslamicPolicy:
    name: str = "islamic"
    epoch: float = ISLAMIC_EPOCH

    def num_months(self, year: int) -> int:
        return 12

    def is_leap_year(self, year: int) -> bool:
        return is_islamic_leap(year)

    def month_length(self, month: int, year: int) -> int:
        return islamic_month_length(month, year)

    def days_in_year(self, year: int) -> int:
        return 355 if is_islamic_leap(year) else 354

    def day_of_year(self, fields: DateFields) -> int:
        return islamic_rd(fields.year, fields.month, fields.day) - islamic_rd(fields.year, 1, 1) + 1

    def validate(self, fields: DateFields) -> None:
        check_fields(self, fields)

    def rd_from_fields(self, fields: DateFields) -> float:
        return islamic_rd(fields.year, fields.month, fields.day) + time_fraction(fields)

    def fields_from_rd(self, rd: float) -> DateFields:
        day, ms = split_rd(rd)
        year = math.floor((30 * day + 10646) / 10631)
        remainder = day - islamic_rd(year, 1, 1)
        month = 1
        while month < 12 and remainder >= islamic_month_length(month, year):
            remainder -= islamic_month_length(month, year)
            month += 1
        return DateFields(year, month, remainder + 1).with_time(ms)


ISLAMIC = IslamicPolicy()


class IslamicDate(CalendarDate):
    calendar = "islamic"
