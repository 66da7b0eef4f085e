from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, Union

from .astro.engine import AstroEngine
from .calendars.base import CalendarDate, CalendarPolicy
from .calendars.ethiopic import COPTIC, ETHIOPIC, CopticDate, EthiopicDate
from .calendars.gregorian import GREGORIAN, GregorianDate
from .calendars.han import HanDate, HanPolicy
from .calendars.hebrew import HEBREW, HebrewDate
from .calendars.islamic import ISLAMIC, IslamicDate
from .calendars.julian import JULIAN, JulianDate
from .calendars.persian import PersianDate, PersianPolicy
from .calendars.persian_algo import PERSIAN_ALGO, PersianAlgoDate
from .calendars.thaisolar import THAI_SOLAR, ThaiSolarDate
from .core.errors import UnknownCalendarType
from .core.ratadie import RataDie
from .core.types import DateFields
from .timezone import TimeZone

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarEntry:
    policy: CalendarPolicy
    date_type: Type[CalendarDate]


@dataclass
class CalendarRegistry:
    _calendars: Dict[str, CalendarEntry] = field(default_factory=dict)

    def get(self, name: str) -> CalendarEntry:
        if name not in self._calendars:
            raise UnknownCalendarType(f"Unknown calendar '{name}'. Available: {sorted(self._calendars)}")
        return self._calendars[name]

    def list(self) -> List[str]:
        return sorted(self._calendars.keys())

    def register(
        self,
        name: str,
        policy: CalendarPolicy,
        date_type: Type[CalendarDate] = CalendarDate,
        *,
        overwrite: bool = False,
    ) -> None:
        if (not overwrite) and (name in self._calendars):
            raise KeyError(f"Calendar '{name}' already exists. Use overwrite=True to replace.")
        if name in self._calendars:
            log.warning("Replacing calendar '%s'", name)
        self._calendars[name] = CalendarEntry(policy, date_type)
        log.debug("Registered calendar '%s' (%s)", name, type(policy).__name__)

    def create(
        self,
        name: str,
        fields: Optional[DateFields] = None,
        *,
        timezone: Optional[TimeZone] = None,
        **kwargs: Any,
    ) -> CalendarDate:
        """New date in calendar `name` from fields (or field keywords), validated."""
        entry = self.get(name)
        return entry.date_type.from_fields(entry.policy, fields, timezone=timezone, **kwargs)

    def from_rd(
        self,
        name: str,
        rd: Union[RataDie, float],
        *,
        timezone: Optional[TimeZone] = None,
    ) -> CalendarDate:
        entry = self.get(name)
        return entry.date_type.from_rd(entry.policy, rd, timezone=timezone)

    def from_julian_day(self, name: str, jd: float, *, timezone: Optional[TimeZone] = None) -> CalendarDate:
        entry = self.get(name)
        return entry.date_type.from_julian_day(entry.policy, jd, timezone=timezone)

    def convert(self, date: CalendarDate, name: str) -> CalendarDate:
        """The instant of `date` viewed in calendar `name`, same time zone."""
        entry = self.get(name)
        return entry.date_type.from_date(entry.policy, date)


def build_registry(engine: Optional[AstroEngine] = None) -> CalendarRegistry:
    """
    Registry with every built-in calendar.

    The astronomical calendars (persian, han) use `engine`; without one they are
    still registered but raise DataNotLoaded when a date is computed.
    """
    eng = engine if engine is not None else AstroEngine()
    reg = CalendarRegistry()
    reg.register("gregorian", GREGORIAN, GregorianDate)
    reg.register("julian", JULIAN, JulianDate)
    reg.register("ethiopic", ETHIOPIC, EthiopicDate)
    reg.register("coptic", COPTIC, CopticDate)
    reg.register("hebrew", HEBREW, HebrewDate)
    reg.register("islamic", ISLAMIC, IslamicDate)
    reg.register("persian-algo", PERSIAN_ALGO, PersianAlgoDate)
    reg.register("persian", PersianPolicy(eng), PersianDate)
    reg.register("han", HanPolicy(eng), HanDate)
    reg.register("thaisolar", THAI_SOLAR, ThaiSolarDate)
    return reg
