class CalkitError(Exception):
    """Base error."""

class CalkitLookupError(CalkitError, KeyError):
    """Raised when a name (calendar, time zone) is not known."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""

class UnknownCalendarType(CalkitLookupError):
    """Raised when a registry is asked for a calendar name it does not know."""

class UnknownTimeZone(CalkitLookupError):
    """Raised when a time zone name is neither an offset nor an IANA zone."""

class InvalidDateComponents(CalkitError, ValueError):
    """Raised when date fields fall outside the range allowed by a calendar policy."""

class DataNotLoaded(CalkitError, RuntimeError):
    """Raised when an astronomical computation runs without its coefficient table."""

class UnrepresentableUnixTime(CalkitError, OverflowError):
    """Raised when a day number cannot be expressed as Unix milliseconds."""
