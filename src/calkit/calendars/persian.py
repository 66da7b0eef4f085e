from __future__ import annotations

"""
calkit.calendars.persian

Astronomical Persian (Solar Hijri) calendar: the year begins on the day of the
March equinox when the equinox falls before apparent noon in Tehran
(52.5 deg E), otherwise on the day after.
"""

import logging
import math
from typing import Dict

from ..astro.engine import AstroEngine
from ..core.ratadie import GREGORIAN_EPOCH
from ..core.types import DateFields
from .base import CalendarDate, check_fields, split_rd, time_fraction
from .gregorian import gregorian_year_from_rd
from .persian_algo import PERSIAN_EPOCH, days_before_month, persian_month_length, split_day_of_year

log = logging.getLogger(__name__)

TEHRAN_LONGITUDE = 52.5
GREGORIAN_OFFSET = 621  # year AP = Gregorian year of its opening equinox - 621


class PersianPolicy:
    """Persian calendar bound to an AstroEngine; year starts are cached per instance."""

    name = "persian"
    epoch = PERSIAN_EPOCH

    def __init__(self, engine: AstroEngine):
        self.engine = engine
        self._starts: Dict[int, float] = {}

    def __repr__(self) -> str:
        return f"PersianPolicy({self.engine!r})"

    # ------------------------------------------------------------
    # Equinox and year starts
    # ------------------------------------------------------------

    def tehran_equinox(self, gregorian_year: int) -> float:
        """JD of the March equinox in Tehran apparent solar time."""
        eng = self.engine
        jde = eng.equinox(gregorian_year, 0)
        jd = jde - eng.delta_t(gregorian_year) / 86400.0
        # apparent time at Greenwich, then shifted to the Tehran meridian
        return jd + eng.equation_of_time(jde) + TEHRAN_LONGITUDE / 360

    def year_start(self, year: int) -> float:
        """JD (midnight) of 1 Farvardin of `year`."""
        start = self._starts.get(year)
        if start is None:
            # floor() + 0.5 lands on the midnight after noon of the equinox day
            start = math.floor(self.tehran_equinox(year + GREGORIAN_OFFSET)) + 0.5
            self._starts[year] = start
            log.debug("persian year %d starts at JD %s", year, start)
        return start

    def year_from_jd(self, jd: float) -> int:
        year = gregorian_year_from_rd(jd - GREGORIAN_EPOCH) - GREGORIAN_OFFSET
        while self.year_start(year) > jd:
            year -= 1
        while self.year_start(year + 1) <= jd:
            year += 1
        return year

    # ------------------------------------------------------------
    # Policy
    # ------------------------------------------------------------

    def num_months(self, year: int) -> int:
        return 12

    def is_leap_year(self, year: int) -> bool:
        return self.year_start(year + 1) - self.year_start(year) > 365

    def month_length(self, month: int, year: int) -> int:
        if not 1 <= month <= 12:
            return 0
        return persian_month_length(month, month == 12 and self.is_leap_year(year))

    def days_in_year(self, year: int) -> int:
        return int(self.year_start(year + 1) - self.year_start(year))

    def day_of_year(self, fields: DateFields) -> int:
        return days_before_month(fields.month) + fields.day

    def validate(self, fields: DateFields) -> None:
        check_fields(self, fields)

    def rd_from_fields(self, fields: DateFields) -> float:
        jd = self.year_start(fields.year) + days_before_month(fields.month) + fields.day - 1
        return jd - self.epoch + time_fraction(fields)

    def fields_from_rd(self, rd: float) -> DateFields:
        day, ms = split_rd(rd)
        jd = day + self.epoch
        year = self.year_from_jd(jd)
        month, dom = split_day_of_year(int(jd - self.year_start(year)) + 1)
        return DateFields(year, month, dom).with_time(ms)


class PersianDate(CalendarDate):
    calendar = "persian"
