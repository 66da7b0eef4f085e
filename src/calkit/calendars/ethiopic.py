from __future__ import annotations

"""
calkit.calendars.ethiopic

Ethiopic and Coptic calendars: twelve 30-day months plus a 5- or 6-day
thirteenth month, with a Julian-style leap every fourth year. The two differ
only in their epoch, so they share one policy class.
"""

import math
from dataclasses import dataclass

from ..core.numeric import mod
from ..core.types import DateFields
from .base import CalendarDate, check_fields, split_rd, time_fraction

ETHIOPIC_EPOCH = 1724219.5  # 0008-08-29 (Julian)
COPTIC_EPOCH = 1825028.5    # 0284-08-29 (Julian), era of the martyrs


def is_alexandrian_leap(year: int) -> bool:
    return mod(year, 4) == 3


@dataclass(frozen=True)
class EthiopicPolicy:
    name: str = "ethiopic"
    epoch: float = ETHIOPIC_EPOCH

    def num_months(self, year: int) -> int:
        return 13

    def is_leap_year(self, year: int) -> bool:
        return is_alexandrian_leap(year)

    def month_length(self, month: int, year: int) -> int:
        if 1 <= month <= 12:
            return 30
        if month == 13:
            return 6 if is_alexandrian_leap(year) else 5
        return 0

    def days_in_year(self, year: int) -> int:
        return 366 if is_alexandrian_leap(year) else 365

    def day_of_year(self, fields: DateFields) -> int:
        return 30 * (fields.month - 1) + fields.day

    def validate(self, fields: DateFields) -> None:
        check_fields(self, fields)

    def rd_from_fields(self, fields: DateFields) -> float:
        y = fields.year
        days = 365 * (y - 1) + math.floor(y / 4) + 30 * (fields.month - 1) + fields.day
        return days + time_fraction(fields)

    def fields_from_rd(self, rd: float) -> DateFields:
        day, ms = split_rd(rd)
        year = math.floor((4 * (day - 1) + 1463) / 1461)
        new_year = 365 * (year - 1) + math.floor(year / 4) + 1
        doy = day - new_year
        month = doy // 30 + 1
        return DateFields(year, month, doy - 30 * (month - 1) + 1).with_time(ms)


ETHIOPIC = EthiopicPolicy()
COPTIC = EthiopicPolicy(name="coptic", epoch=COPTIC_EPOCH)


class EthiopicDate(CalendarDate):
    calendar = "ethiopic"


class CopticDate(CalendarDate):
    calendar = "coptic"
