from __future__ import annotations

"""
calkit.core.ratadie

Continuous day counts.

A RataDie is "days since an epoch", where the epoch is the Julian Day of day 0 of
some calendar. Every calendar keeps its own epoch, so the same instant carries a
different value in each calendar, but all of them agree once converted to a
Julian Day (or normalized to the Gregorian epoch).

Values are rounded to the nearest millisecond when a RataDie is built, so that
repeated conversions do not accumulate floating-point drift.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import UnrepresentableUnixTime
from .numeric import halfup, mod

if TYPE_CHECKING:
    from .types import DateFields

GREGORIAN_EPOCH = 1721424.5  # JD of 0000-12-31 (Gregorian), so RD 1 is 0001-01-01
UNIX_EPOCH = 2440587.5       # JD of 1970-01-01T00:00Z
MS_PER_DAY = 86400000

# getTime() range: 1970-01-01 .. 2038-01-19T03:14:07Z
UNIX_MIN_JD = 2440587.5
UNIX_MAX_JD = 2465442.634803241

# extended range: +/- 100 million days around the Unix epoch
EXTENDED_MIN_JD = -97559412.5
EXTENDED_MAX_JD = 102440587.5


def round_to_ms(days: float) -> float:
    return halfup(days * MS_PER_DAY) / MS_PER_DAY


def weekday_shift(epoch: float) -> int:
    """
    Day-of-week of day 0 for a calendar with the given epoch (0 = Sunday).

    Epochs ending in .5 start at midnight; the Hebrew epoch (.25) starts at
    18:00 on the eve, so its day 0 belongs to the following civil weekday.
    """
    # JD n (noon) falls on weekday (n + 1) mod 7; day 0 has its noon at ceil(epoch - 0.5) + 1
    return int(mod(math.ceil(epoch - 0.5) + 2, 7))


@dataclass(frozen=True, order=False)
class JulianDay:
    """A Julian Day split into whole days and the fraction past noon."""
    value: float

    @property
    def days(self) -> int:
        return math.floor(self.value)

    @property
    def frac(self) -> float:
        return self.value - self.days

    def plus(self, days: float) -> "JulianDay":
        return JulianDay(self.value + days)

    def to_rata_die(self, epoch: float = GREGORIAN_EPOCH) -> "RataDie":
        return RataDie.from_julian_day(self.value, epoch=epoch)


@dataclass(frozen=True)
class RataDie:
    value: float
    epoch: float = GREGORIAN_EPOCH

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", round_to_ms(self.value))

    # ---------------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------------

    @classmethod
    def from_julian_day(cls, jd: float, *, epoch: float = GREGORIAN_EPOCH) -> "RataDie":
        return cls(jd - epoch, epoch)

    @classmethod
    def from_unix_millis(cls, millis: int, *, epoch: float = GREGORIAN_EPOCH) -> "RataDie":
        return cls.from_julian_day(UNIX_EPOCH + millis / MS_PER_DAY, epoch=epoch)

    @classmethod
    def from_fields(cls, policy, fields: "DateFields") -> "RataDie":
        """Day number of the given fields in the calendar of `policy` (no time zone applied)."""
        return cls(policy.rd_from_fields(fields), policy.epoch)

    # ---------------------------------------------------------------------
    # Conversion
    # ---------------------------------------------------------------------

    def julian_day(self) -> float:
        return self.value + self.epoch

    def julian(self) -> JulianDay:
        return JulianDay(self.julian_day())

    def normalized(self) -> "RataDie":
        """The same instant counted from the Gregorian epoch."""
        return self.rebased(GREGORIAN_EPOCH)

    def rebased(self, epoch: float) -> "RataDie":
        if epoch == self.epoch:
            return self
        return RataDie(self.value + (self.epoch - epoch), epoch)

    def unix_millis(self) -> int:
        jd = self.julian_day()
        if jd < UNIX_MIN_JD or jd > UNIX_MAX_JD:
            raise UnrepresentableUnixTime(f"JD {jd} is outside the 1970-2038 Unix time range")
        return round((jd - UNIX_EPOCH) * MS_PER_DAY)

    def extended_unix_millis(self) -> int:
        jd = self.julian_day()
        if jd < EXTENDED_MIN_JD or jd > EXTENDED_MAX_JD:
            raise UnrepresentableUnixTime(f"JD {jd} is outside the extended Unix time range")
        return round((jd - UNIX_EPOCH) * MS_PER_DAY)

    def plus_days(self, days: float) -> "RataDie":
        return RataDie(self.value + days, self.epoch)

    # ---------------------------------------------------------------------
    # Day of week
    # ---------------------------------------------------------------------

    def day_of_week(self, offset: float = 0.0) -> int:
        """0 = Sunday .. 6 = Saturday, evaluated in wall-clock time (`offset` in days)."""
        return int(mod(math.floor(self.value + offset) + weekday_shift(self.epoch), 7))

    def _on_or_before(self, rd: float, day_of_week: int) -> float:
        return rd - mod(math.floor(rd) + weekday_shift(self.epoch) - day_of_week, 7)

    def _nav(self, base: float, day_of_week: int, offset: float) -> "RataDie":
        return RataDie(self._on_or_before(self.value + base + offset, day_of_week) - offset, self.epoch)

    def on_or_before(self, day_of_week: int, offset: float = 0.0) -> "RataDie":
        return self._nav(0, day_of_week, offset)

    def on_or_after(self, day_of_week: int, offset: float = 0.0) -> "RataDie":
        return self._nav(6, day_of_week, offset)

    def before(self, day_of_week: int, offset: float = 0.0) -> "RataDie":
        return self._nav(-1, day_of_week, offset)

    def after(self, day_of_week: int, offset: float = 0.0) -> "RataDie":
        return self._nav(7, day_of_week, offset)

    # ---------------------------------------------------------------------
    # Ordering across epochs
    # ---------------------------------------------------------------------

    def _key(self) -> float:
        return round_to_ms(self.julian_day() - GREGORIAN_EPOCH)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RataDie):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: "RataDie") -> bool:
        return self._key() < other._key()

    def __le__(self, other: "RataDie") -> bool:
        return self._key() <= other._key()

    def __gt__(self, other: "RataDie") -> bool:
        return self._key() > other._key()

    def __ge__(self, other: "RataDie") -> bool:
        return self._key() >= other._key()

    def __float__(self) -> float:
        return self.value
