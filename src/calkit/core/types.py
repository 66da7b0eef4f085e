from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional

MS_PER_HOUR = 3600000
MS_PER_MINUTE = 60000

@dataclass(frozen=True)
class DateFields:
    """Calendar fields of a date, interpreted in wall-clock time."""
    year: int
    month: int = 1
    day: int = 1
    hour: int = 0
    minute: int = 0
    second: int = 0
    millisecond: int = 0
    parts: Optional[int] = None   # Hebrew halaqim (0..1079), replaces minute/second/millisecond
    cycle: Optional[int] = None   # Han sexagenary cycle; year is then 1..60 within the cycle
    leap_month: bool = False      # Han: set on decomposition, ignored on input

    def time_of_day_ms(self) -> int:
        return (self.hour * MS_PER_HOUR + self.minute * MS_PER_MINUTE
                + self.second * 1000 + self.millisecond)

    def with_time(self, ms_of_day: int) -> "DateFields":
        """Copy with hour/minute/second/millisecond taken from milliseconds past midnight."""
        h, rem = divmod(int(ms_of_day), MS_PER_HOUR)
        m, rem = divmod(rem, MS_PER_MINUTE)
        s, ms = divmod(rem, 1000)
        return replace(self, hour=h, minute=m, second=s, millisecond=ms)

@dataclass(frozen=True)
class SunPosition:
    """Low-precision solar coordinates (degrees) at a Julian Day."""
    mean_longitude: float
    mean_anomaly: float
    eccentricity: float
    equation_of_center: float
    sun_longitude: float
    apparent_longitude: float
    inclination: float
    apparent_right_ascension: float

@dataclass(frozen=True)
class Nutation:
    """Nutation in longitude and obliquity, degrees."""
    delta_psi: float
    delta_epsilon: float
