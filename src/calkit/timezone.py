from __future__ import annotations

"""
calkit.timezone

Time zones as seen by the calendars: only the UTC offset at an instant (or at a
wall-clock time) is needed. Rule data comes from the standard zoneinfo database;
the calendars never look at transition rules themselves.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.errors import UnknownTimeZone
from .core.ratadie import MS_PER_DAY, UNIX_EPOCH

__all__ = [
    "TimeZone",
    "FixedOffsetZone",
    "ZoneInfoZone",
    "UTC",
    "get_zone",
]

# datetime covers 0001-01-01 .. 9999-12-31; offsets outside are taken at the ends
_MIN_JD = 1721425.5 + 1
_MAX_JD = 5373484.5 - 1

_OFFSET_RE = re.compile(r"^(?:UTC|GMT)?\s*(?P<sign>[+-])(?P<h>\d{1,2})(?::?(?P<m>\d{2}))?$")


class TimeZone(Protocol):
    id: str

    def offset_millis(self, jd: float) -> int:
        """Offset from UTC in ms at the UTC instant jd."""
        ...

    def offset_millis_wall_time(self, jd: float) -> int:
        """Offset from UTC in ms for a Julian Day read as local wall-clock time."""
        ...

    def in_daylight_time(self, jd: float) -> bool: ...


@dataclass(frozen=True)
class FixedOffsetZone:
    minutes: int = 0
    id: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            sign = "-" if self.minutes < 0 else "+"
            h, m = divmod(abs(self.minutes), 60)
            object.__setattr__(self, "id", f"{sign}{h:02d}:{m:02d}")

    def offset_millis(self, jd: float) -> int:
        return self.minutes * 60000

    def offset_millis_wall_time(self, jd: float) -> int:
        return self.minutes * 60000

    def in_daylight_time(self, jd: float) -> bool:
        return False


UTC = FixedOffsetZone(0, "Etc/UTC")


def _jd_to_datetime(jd: float) -> datetime:
    jd = min(max(jd, _MIN_JD), _MAX_JD)
    return datetime(1970, 1, 1) + timedelta(milliseconds=round((jd - UNIX_EPOCH) * MS_PER_DAY))


class ZoneInfoZone:
    """IANA time zone backed by zoneinfo. Ambiguous wall times resolve to the earlier offset."""

    def __init__(self, name: str):
        try:
            self._zone = ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise UnknownTimeZone(f"Unknown time zone '{name}'") from e
        self.id = name

    def __repr__(self) -> str:
        return f"ZoneInfoZone({self.id!r})"

    def _utc(self, jd: float) -> datetime:
        return _jd_to_datetime(jd).replace(tzinfo=timezone.utc).astimezone(self._zone)

    def offset_millis(self, jd: float) -> int:
        off = self._utc(jd).utcoffset()
        return round(off.total_seconds() * 1000) if off is not None else 0

    def offset_millis_wall_time(self, jd: float) -> int:
        off = _jd_to_datetime(jd).replace(tzinfo=self._zone, fold=0).utcoffset()
        return round(off.total_seconds() * 1000) if off is not None else 0

    def in_daylight_time(self, jd: float) -> bool:
        dst = self._utc(jd).dst()
        return bool(dst)


def get_zone(name: Optional[str]) -> TimeZone:
    """
    Resolve a zone name: None, "UTC", "Z" -> UTC; "+05:30", "UTC-3" -> fixed
    offset; anything else is looked up in the IANA database.
    """
    if name is None or name in ("UTC", "Etc/UTC", "Z", "GMT"):
        return UTC
    m = _OFFSET_RE.match(name.strip())
    if m:
        minutes = int(m.group("h")) * 60 + int(m.group("m") or 0)
        return FixedOffsetZone(-minutes if m.group("sign") == "-" else minutes)
    return ZoneInfoZone(name)
