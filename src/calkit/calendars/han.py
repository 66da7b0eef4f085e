from __future__ import annotations

"""
calkit.calendars.han

Chinese (Han) lunisolar calendar, computed astronomically for the meridian of
Beijing (Calendrical Calculations, ch. 19).

Conventions used here:
- Years are elapsed years since the legendary epoch, 2697 years before the
  Gregorian year of the same spring (Gregorian 2024 spring -> Han year 4721).
  A year given as 1..60 together with a `cycle` is read as 60 * cycle + year.
- Months are numbered 1..12 (or 1..13) in order from one new year to the next.
  In a 13-month year the leap month follows the month it doubles;
  get_leap_month() returns the number of that doubled month.
- A "sui" is the period between two winter solstices; a sui with 13 new moons
  gets a leap month at its first month lacking a major solar term.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..astro.engine import (
    AstroEngine,
    ceil_to_jd,
    fixangle,
    floor_to_jd,
    local_from_universal,
    universal_from_local,
)
from ..core.numeric import amod
from ..core.ratadie import GREGORIAN_EPOCH
from ..core.types import DateFields
from .base import CalendarDate, check_fields, split_rd, time_fraction
from .gregorian import gregorian_rd, gregorian_year_from_rd

log = logging.getLogger(__name__)

HAN_YEAR_OFFSET = 2697
MEAN_SYNODIC_MONTH = 29.530588853

# UTC offset of the calendar's reference meridian, minutes
BEIJING_MEAN_TIME = 1397 / 3   # 116 deg 25 min E, before 1929
CHINA_STANDARD_TIME = 480      # 120 deg E, from 1929


def chinese_tz(jd: float) -> float:
    year = gregorian_year_from_rd(jd - GREGORIAN_EPOCH)
    return BEIJING_MEAN_TIME if year < 1929 else CHINA_STANDARD_TIME


def elapsed_year(year: int, cycle: Optional[int] = None) -> int:
    if cycle is not None and year < 61:
        return 60 * cycle + year
    return year


@dataclass(frozen=True)
class SuiInfo:
    """Winter solstices bracketing a Han year and the new moons counted between them."""
    elapsed_year: int
    solstice1: float
    solstice2: float
    m1: float   # first new moon after the opening solstice day
    m2: float   # last new moon before the closing solstice day ends
    leap: bool  # 13 months in the sui


class HanPolicy:
    """Han calendar bound to an AstroEngine; results are cached per instance."""

    name = "han"
    epoch = GREGORIAN_EPOCH

    def __init__(self, engine: AstroEngine):
        self.engine = engine
        self._sui: Dict[int, SuiInfo] = {}
        self._new_years: Dict[int, float] = {}
        self._month_starts: Dict[Tuple[int, int], float] = {}

    def __repr__(self) -> str:
        return f"HanPolicy({self.engine!r})"

    # ------------------------------------------------------------
    # Local-time astronomy
    # ------------------------------------------------------------

    def next_solar_longitude(self, jd: float, longitude: float) -> float:
        tz = chinese_tz(jd)
        uni = universal_from_local(jd, tz)
        return local_from_universal(self.engine.next_solar_longitude(uni, longitude), tz)

    def major_solar_term_on_or_after(self, jd: float) -> float:
        tz = chinese_tz(jd)
        s = self.engine.solar_longitude(universal_from_local(jd, tz))
        return self.next_solar_longitude(jd, fixangle(30 * math.ceil(s / 30)))

    def current_major_solar_term(self, jd: float) -> int:
        s = self.engine.solar_longitude(universal_from_local(jd, chinese_tz(jd)))
        return amod(2 + math.floor(s / 30), 12)

    def new_moon_on_or_after(self, jd: float) -> float:
        """Start (local midnight) of the day of the first new moon at or after jd."""
        tz = chinese_tz(jd)
        moon = self.engine.new_moon_at_or_after(universal_from_local(jd, tz))
        return floor_to_jd(local_from_universal(moon, tz))

    def new_moon_before(self, jd: float) -> float:
        """Start (local midnight) of the day of the last new moon before jd."""
        tz = chinese_tz(jd)
        moon = self.engine.new_moon_before(universal_from_local(jd, tz))
        return floor_to_jd(local_from_universal(moon, tz))

    def no_major_solar_term(self, jd: float) -> bool:
        """True when the month starting at jd contains no major solar term."""
        return self.current_major_solar_term(jd) == self.current_major_solar_term(self.new_moon_on_or_after(jd + 1))

    def solstice_before(self, year: int, cycle: Optional[int] = None) -> float:
        """Winter solstice that opens the sui of the Han year."""
        gregyear = elapsed_year(year, cycle) - HAN_YEAR_OFFSET
        jd = gregorian_rd(gregyear - 1, 12, 15) + GREGORIAN_EPOCH
        return self.major_solar_term_on_or_after(jd)

    def prior_leap_month(self, jd1: float, jd2: float) -> bool:
        """True when some month starting in [jd1, jd2] lacks a major solar term."""
        while jd2 >= jd1:
            if self.no_major_solar_term(jd2):
                return True
            jd2 = self.new_moon_before(jd2)
        return False

    # ------------------------------------------------------------
    # Years and months
    # ------------------------------------------------------------

    def leap_year_calc(self, year: int, cycle: Optional[int] = None) -> SuiInfo:
        y = elapsed_year(year, cycle)
        info = self._sui.get(y)
        if info is None:
            s1 = self.solstice_before(y)
            s2 = self.solstice_before(y + 1)
            m1 = self.new_moon_on_or_after(ceil_to_jd(s1))
            m2 = self.new_moon_before(ceil_to_jd(s2))
            leap = round((m2 - m1) / MEAN_SYNODIC_MONTH) == 12
            info = SuiInfo(y, s1, s2, m1, m2, leap)
            self._sui[y] = info
        return info

    def new_years(self, year: int, cycle: Optional[int] = None) -> float:
        """JD (local midnight) of the first day of the Han year."""
        y = elapsed_year(year, cycle)
        ny = self._new_years.get(y)
        if ny is None:
            calc = self.leap_year_calc(y)
            m2 = self.new_moon_on_or_after(calc.m1 + 1)
            if calc.leap and (self.no_major_solar_term(calc.m1) or self.no_major_solar_term(m2)):
                ny = self.new_moon_on_or_after(m2 + 1)
            else:
                ny = m2
            self._new_years[y] = ny
            log.debug("han year %d begins at JD %s", y, ny)
        return ny

    def month_start(self, year: int, month: int) -> float:
        key = (year, month)
        start = self._month_starts.get(key)
        if start is None:
            start = self.new_moon_on_or_after(self.new_years(year) + 29 * (month - 1))
            self._month_starts[key] = start
        return start

    def is_leap_month(self, year: int, month: int) -> bool:
        """True when month `month` of `year` is an intercalary month."""
        start = self.month_start(year, month)
        sui = self.leap_year_calc(year + 1)
        if start < sui.m1:
            sui = self.leap_year_calc(year)
        if not sui.leap or not self.no_major_solar_term(start):
            return False
        return not self.prior_leap_month(sui.m1, self.new_moon_before(start))

    def get_leap_month(self, year: int, cycle: Optional[int] = None) -> int:
        """Number of the month doubled by this year's leap month, or -1."""
        y = elapsed_year(year, cycle)
        if not self.is_leap_year(y):
            return -1
        for month in range(2, 14):
            if self.is_leap_month(y, month):
                return month - 1
        log.warning("han year %d has 13 months but no month qualifies as leap", y)
        return -1

    # ------------------------------------------------------------
    # Policy
    # ------------------------------------------------------------

    def is_leap_year(self, year: int) -> bool:
        span = self.new_years(year + 1) - self.new_years(year)
        return round(span / MEAN_SYNODIC_MONTH) == 13

    def num_months(self, year: int) -> int:
        return 13 if self.is_leap_year(year) else 12

    def month_length(self, month: int, year: int) -> int:
        if not 1 <= month <= self.num_months(year):
            return 0
        start = self.month_start(year, month)
        return int(self.new_moon_on_or_after(start + 1) - start)

    def days_in_year(self, year: int) -> int:
        return int(self.new_years(year + 1) - self.new_years(year))

    def day_of_year(self, fields: DateFields) -> int:
        y = elapsed_year(fields.year, fields.cycle)
        return int(self.month_start(y, fields.month) - self.new_years(y)) + fields.day

    def validate(self, fields: DateFields) -> None:
        check_fields(self, fields, year=elapsed_year(fields.year, fields.cycle))

    def rd_from_fields(self, fields: DateFields) -> float:
        y = elapsed_year(fields.year, fields.cycle)
        jd = self.month_start(y, fields.month) + fields.day - 1
        return jd - self.epoch + time_fraction(fields)

    def fields_from_rd(self, rd: float) -> DateFields:
        day, ms = split_rd(rd)
        jd = day + self.epoch
        year = gregorian_year_from_rd(day) + HAN_YEAR_OFFSET
        if jd < self.new_years(year):
            year -= 1
        ny = self.new_years(year)
        m = self.new_moon_before(jd + 1)
        month = round((m - ny) / MEAN_SYNODIC_MONTH) + 1
        return DateFields(
            year,
            month,
            int(jd - m) + 1,
            cycle=(year - 1) // 60,
            leap_month=self.is_leap_month(year, month),
        ).with_time(ms)


class HanDate(CalendarDate):
    calendar = "han"

    @property
    def cycle(self) -> int:
        return (self.year - 1) // 60

    @property
    def cycle_year(self) -> int:
        return amod(self.year, 60)

    def is_leap_month(self) -> bool:
        return self.fields.leap_month

    def new_years(self) -> float:
        return self.policy.new_years(self.year)
