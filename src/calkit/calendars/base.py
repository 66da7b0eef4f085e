from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional, Protocol, Tuple, Type, TypeVar, Union

from ..core.errors import InvalidDateComponents
from ..core.ratadie import MS_PER_DAY, RataDie
from ..core.types import DateFields
from ..timezone import UTC, TimeZone

D = TypeVar("D", bound="CalendarDate")


class CalendarPolicy(Protocol):
    """Leap-year rule, month lengths and field <-> day-number mapping of one calendar."""
    name: str
    epoch: float

    def num_months(self, year: int) -> int: ...
    def month_length(self, month: int, year: int) -> int: ...
    def is_leap_year(self, year: int) -> bool: ...
    def days_in_year(self, year: int) -> int: ...
    def day_of_year(self, fields: DateFields) -> int: ...
    def validate(self, fields: DateFields) -> None: ...
    def rd_from_fields(self, fields: DateFields) -> float: ...
    def fields_from_rd(self, rd: float) -> DateFields: ...


# ============================================================
# Helpers shared by the policies
# ============================================================

def split_rd(rd: float) -> Tuple[int, int]:
    """
    Split a day number into (whole day, milliseconds into that day).

    Rounding happens on the total so that 0.99999999 days carries into the
    next day instead of producing a 24:00 time.
    """
    total = round(rd * MS_PER_DAY)
    day, ms = divmod(total, MS_PER_DAY)
    return int(day), int(ms)


def time_fraction(fields: DateFields) -> float:
    return fields.time_of_day_ms() / MS_PER_DAY


def check_fields(policy: CalendarPolicy, fields: DateFields, *, year: Optional[int] = None) -> None:
    """Raise InvalidDateComponents unless the fields name an existing date and time."""
    y = fields.year if year is None else year
    n = policy.num_months(y)
    if n == 0:
        raise InvalidDateComponents(f"{policy.name}: year {y} does not exist")
    if not 1 <= fields.month <= n:
        raise InvalidDateComponents(f"{policy.name}: month {fields.month} out of range 1..{n} for year {y}")
    length = policy.month_length(fields.month, y)
    if not 1 <= fields.day <= length:
        raise InvalidDateComponents(
            f"{policy.name}: day {fields.day} out of range 1..{length} for {y}-{fields.month}"
        )
    if not 0 <= fields.hour < 24:
        raise InvalidDateComponents(f"hour {fields.hour} out of range 0..23")
    if not 0 <= fields.minute < 60:
        raise InvalidDateComponents(f"minute {fields.minute} out of range 0..59")
    if not 0 <= fields.second < 60:
        raise InvalidDateComponents(f"second {fields.second} out of range 0..59")
    if not 0 <= fields.millisecond < 1000:
        raise InvalidDateComponents(f"millisecond {fields.millisecond} out of range 0..999")
    if fields.parts is not None and not 0 <= fields.parts < 1080:
        raise InvalidDateComponents(f"parts {fields.parts} out of range 0..1079")


# ============================================================
# Dates
# ============================================================

class CalendarDate:
    """
    A point in time viewed through one calendar.

    The instant is held as a RataDie on the policy's epoch, in UTC. Fields are
    derived on first access, in the wall-clock time of `timezone`, and memoized.
    Dates never change; arithmetic returns new objects.
    """

    calendar = ""

    def __init__(self, policy: CalendarPolicy, rd: RataDie, *, timezone: Optional[TimeZone] = None):
        self.policy = policy
        self.rd = rd.rebased(policy.epoch)
        self.timezone = timezone or UTC
        self._offset: Optional[float] = None
        self._fields: Optional[DateFields] = None

    # ------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------

    @classmethod
    def from_fields(
        cls: Type[D],
        policy: CalendarPolicy,
        fields: Optional[DateFields] = None,
        *,
        timezone: Optional[TimeZone] = None,
        **kwargs: Any,
    ) -> D:
        if fields is None:
            fields = DateFields(**kwargs)
        elif kwargs:
            fields = replace(fields, **kwargs)
        policy.validate(fields)
        tz = timezone or UTC
        local = policy.rd_from_fields(fields)
        offset_ms = tz.offset_millis_wall_time(local + policy.epoch)
        return cls(policy, RataDie(local - offset_ms / MS_PER_DAY, policy.epoch), timezone=tz)

    @classmethod
    def from_rd(cls: Type[D], policy: CalendarPolicy, rd: Union[RataDie, float], *, timezone: Optional[TimeZone] = None) -> D:
        if not isinstance(rd, RataDie):
            rd = RataDie(rd, policy.epoch)
        return cls(policy, rd, timezone=timezone)

    @classmethod
    def from_julian_day(cls: Type[D], policy: CalendarPolicy, jd: float, *, timezone: Optional[TimeZone] = None) -> D:
        return cls(policy, RataDie.from_julian_day(jd, epoch=policy.epoch), timezone=timezone)

    @classmethod
    def from_unix_millis(cls: Type[D], policy: CalendarPolicy, millis: int, *, timezone: Optional[TimeZone] = None) -> D:
        return cls(policy, RataDie.from_unix_millis(millis, epoch=policy.epoch), timezone=timezone)

    @classmethod
    def from_date(cls: Type[D], policy: CalendarPolicy, other: "CalendarDate", *, timezone: Optional[TimeZone] = None) -> D:
        """Same instant as `other` (any calendar), viewed through `policy`."""
        return cls(policy, other.rd, timezone=timezone or other.timezone)

    def _same(self: D, rd: RataDie) -> D:
        return type(self)(self.policy, rd, timezone=self.timezone)

    # ------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------

    @property
    def offset(self) -> float:
        """UTC offset of this instant in `timezone`, in days."""
        if self._offset is None:
            self._offset = self.timezone.offset_millis(self.rd.julian_day()) / MS_PER_DAY
        return self._offset

    @property
    def fields(self) -> DateFields:
        if self._fields is None:
            self._fields = self.policy.fields_from_rd(self.rd.value + self.offset)
        return self._fields

    @property
    def year(self) -> int:
        return self.fields.year

    @property
    def month(self) -> int:
        return self.fields.month

    @property
    def day(self) -> int:
        return self.fields.day

    @property
    def hour(self) -> int:
        return self.fields.hour

    @property
    def minute(self) -> int:
        return self.fields.minute

    @property
    def second(self) -> int:
        return self.fields.second

    @property
    def millisecond(self) -> int:
        return self.fields.millisecond

    # ------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------

    def julian_day(self) -> float:
        return self.rd.julian_day()

    def unix_millis(self) -> int:
        return self.rd.unix_millis()

    def extended_unix_millis(self) -> int:
        return self.rd.extended_unix_millis()

    def convert(self, date_type: Type[D], policy: CalendarPolicy) -> D:
        return date_type.from_date(policy, self)

    # ------------------------------------------------------------
    # Calendar queries
    # ------------------------------------------------------------

    def day_of_week(self) -> int:
        """0 = Sunday .. 6 = Saturday, in wall-clock time."""
        return self.rd.day_of_week(self.offset)

    def day_of_year(self) -> int:
        return self.policy.day_of_year(self.fields)

    def is_leap_year(self) -> bool:
        return self.policy.is_leap_year(self.year)

    def months_in_year(self) -> int:
        return self.policy.num_months(self.year)

    def days_in_month(self) -> int:
        return self.policy.month_length(self.month, self.year)

    def era(self) -> int:
        return -1 if self.year < 1 else 1

    # ------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------

    def on_or_before(self: D, day_of_week: int) -> D:
        return self._same(self.rd.on_or_before(day_of_week, self.offset))

    def on_or_after(self: D, day_of_week: int) -> D:
        return self._same(self.rd.on_or_after(day_of_week, self.offset))

    def before(self: D, day_of_week: int) -> D:
        return self._same(self.rd.before(day_of_week, self.offset))

    def after(self: D, day_of_week: int) -> D:
        return self._same(self.rd.after(day_of_week, self.offset))

    def plus_days(self: D, days: float) -> D:
        return self._same(self.rd.plus_days(days))

    # ------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self.rd == other.rd

    def __hash__(self) -> int:
        return hash(self.rd)

    def __lt__(self, other: "CalendarDate") -> bool:
        return self.rd < other.rd

    def __le__(self, other: "CalendarDate") -> bool:
        return self.rd <= other.rd

    def __gt__(self, other: "CalendarDate") -> bool:
        return self.rd > other.rd

    def __ge__(self, other: "CalendarDate") -> bool:
        return self.rd >= other.rd

    def __repr__(self) -> str:
        f = self.fields
        return (
            f"{type(self).__name__}({f.year:04d}-{f.month:02d}-{f.day:02d}"
            f"T{f.hour:02d}:{f.minute:02d}:{f.second:02d}.{f.millisecond:03d}, tz={self.timezone.id})"
        )
