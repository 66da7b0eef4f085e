from __future__ import annotations

"""
calkit.calendars.thaisolar

Thai solar calendar: Gregorian months and leap rule with the Buddhist era
year (Gregorian + 543), counted from its own epoch. The policy holds a
Gregorian policy and shifts years and day numbers on the way in and out.
"""

from dataclasses import dataclass, replace

from ..core.types import DateFields
from .base import CalendarDate, check_fields
from .gregorian import GREGORIAN, GregorianPolicy

THAI_SOLAR_EPOCH = 1523097.5
YEAR_OFFSET = 543
DAY_OFFSET = 198327  # GREGORIAN_EPOCH - THAI_SOLAR_EPOCH


@dataclass(frozen=True)
class ThaiSolarPolicy:
    name: str = "thaisolar"
    epoch: float = THAI_SOLAR_EPOCH
    base: GregorianPolicy = GREGORIAN

    def num_months(self, year: int) -> int:
        return self.base.num_months(year - YEAR_OFFSET)

    def is_leap_year(self, year: int) -> bool:
        return self.base.is_leap_year(year - YEAR_OFFSET)

    def month_length(self, month: int, year: int) -> int:
        return self.base.month_length(month, year - YEAR_OFFSET)

    def days_in_year(self, year: int) -> int:
        return self.base.days_in_year(year - YEAR_OFFSET)

    def day_of_year(self, fields: DateFields) -> int:
        return self.base.day_of_year(replace(fields, year=fields.year - YEAR_OFFSET))

    def validate(self, fields: DateFields) -> None:
        check_fields(self, fields)

    def rd_from_fields(self, fields: DateFields) -> float:
        return self.base.rd_from_fields(replace(fields, year=fields.year - YEAR_OFFSET)) + DAY_OFFSET

    def fields_from_rd(self, rd: float) -> DateFields:
        f = self.base.fields_from_rd(rd - DAY_OFFSET)
        return replace(f, year=f.year + YEAR_OFFSET)


THAI_SOLAR = ThaiSolarPolicy()


class ThaiSolarDate(CalendarDate):
    calendar = "thaisolar"
