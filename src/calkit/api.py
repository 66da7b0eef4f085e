from __future__ import annotations

import logging
from typing import Any, Optional

from .astro.coefficients import aload_table, load_table
from .astro.engine import AstroEngine, AstroSettings
from .calendars.base import CalendarDate
from .registry import CalendarRegistry, build_registry
from .timezone import TimeZone

log = logging.getLogger(__name__)


def load_coefficients(name: str = "astro", settings: Optional[AstroSettings] = None) -> AstroEngine:
    """Load a coefficient table and return an engine bound to it."""
    return AstroEngine(load_table(name), settings)


async def aload_coefficients(name: str = "astro", settings: Optional[AstroSettings] = None) -> AstroEngine:
    return AstroEngine(await aload_table(name), settings)


def default_registry() -> CalendarRegistry:
    """Registry with the packaged coefficients loaded."""
    return build_registry(load_coefficients())


def new_date(
    registry: CalendarRegistry,
    name: str,
    *,
    timezone: Optional[TimeZone] = None,
    **fields: Any,
) -> CalendarDate:
    return registry.create(name, timezone=timezone, **fields)


def convert(date: CalendarDate, name: str, registry: CalendarRegistry) -> CalendarDate:
    out = registry.convert(date, name)
    log.debug("converted %r -> %r", date, out)
    return out


__all__ = [
    "load_coefficients",
    "aload_coefficients",
    "default_registry",
    "build_registry",
    "new_date",
    "convert",
]
