"""calkit public API.

Calendar conversions go through a CalendarRegistry:

    reg = calkit.default_registry()
    d = reg.create("hebrew", year=5784, month=7, day=1)
    reg.convert(d, "gregorian")
"""

from .api import (
    aload_coefficients,
    build_registry,
    convert,
    default_registry,
    load_coefficients,
    new_date,
)
from .astro.engine import AstroEngine, AstroSettings
from .calendars.base import CalendarDate
from .core.errors import (
    CalkitError,
    DataNotLoaded,
    InvalidDateComponents,
    UnknownCalendarType,
    UnknownTimeZone,
    UnrepresentableUnixTime,
)
from .core.ratadie import JulianDay, RataDie
from .core.types import DateFields
from .registry import CalendarRegistry
from .timezone import UTC, FixedOffsetZone, ZoneInfoZone, get_zone

__all__ = [
    "load_coefficients",
    "aload_coefficients",
    "default_registry",
    "build_registry",
    "new_date",
    "convert",
    "AstroEngine",
    "AstroSettings",
    "CalendarDate",
    "CalendarRegistry",
    "DateFields",
    "RataDie",
    "JulianDay",
    "UTC",
    "FixedOffsetZone",
    "ZoneInfoZone",
    "get_zone",
    "CalkitError",
    "DataNotLoaded",
    "InvalidDateComponents",
    "UnknownCalendarType",
    "UnknownTimeZone",
    "UnrepresentableUnixTime",
]
