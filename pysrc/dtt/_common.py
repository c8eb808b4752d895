from __future__ import annotations

import enum
from datetime import (
    datetime as _datetime,
    timedelta as _timedelta,
    timezone as _timezone,
)
from functools import lru_cache
from typing import Any, ClassVar

UTC = _timezone.utc


# We cache fixed-offset tzinfo objects to avoid creating multiple identical ones.
# It's very common to only have whole-hour offsets, so this helps a lot.
@lru_cache
def mk_fixed_tzinfo(minutes: int, /) -> _timezone:
    return UTC if minutes == 0 else _timezone(_timedelta(minutes=minutes))


def check_utc_bounds(dt: _datetime) -> _datetime:
    try:
        dt.astimezone(UTC)
    except (OverflowError, ValueError):
        raise OutOfRangeError("Instant out of range") from None
    return dt


class ErrorKind(enum.Enum):
    """The closed set of reasons an operation can fail"""

    INVALID_FIELD = "invalid_field"
    INVALID_FORMAT = "invalid_format"
    UNKNOWN_TIMEZONE = "unknown_timezone"
    OUT_OF_RANGE = "out_of_range"


class DateTimeError(ValueError):
    """Base class for all errors raised by ``dtt``.

    Each subclass corresponds to exactly one :class:`ErrorKind`.
    """

    kind: ClassVar[ErrorKind]

    def to_dict(self) -> dict[str, Any]:
        """A structured representation of the error, e.g. for logging
        or transmitting it to another process.

        Example
        -------
        >>> UnknownTimezoneError.for_key("XYZ").to_dict()
        {'kind': 'unknown_timezone', 'message': "Unknown timezone: 'XYZ'", 'key': 'XYZ'}
        """
        return {"kind": self.kind.value, "message": str(self)}


class InvalidFieldError(DateTimeError):
    """A date or time field is outside of its valid range"""

    kind = ErrorKind.INVALID_FIELD

    def __init__(self, field: object, value: object, /) -> None:
        super().__init__(f"Invalid {field}: {value!r}")
        self.field = str(field)
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "field": self.field,
            "value": self.value,
        }


class InvalidFormatError(DateTimeError):
    """Text doesn't match the expected grammar"""

    kind = ErrorKind.INVALID_FORMAT

    @classmethod
    def for_input(cls, s: str) -> InvalidFormatError:
        return cls(f"Invalid format: {s!r}")


class UnknownTimezoneError(DateTimeError):
    """A timezone abbreviation is not in the timezone table"""

    kind = ErrorKind.UNKNOWN_TIMEZONE

    def __init__(self, msg: str, key: str = "") -> None:
        super().__init__(msg)
        self.key = key

    @classmethod
    def for_key(cls, key: str) -> UnknownTimezoneError:
        return cls(f"Unknown timezone: {key!r}", key)

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "key": self.key}


class OutOfRangeError(DateTimeError):
    """The result of an operation falls outside the representable range"""

    kind = ErrorKind.OUT_OF_RANGE


class Weekday(enum.Enum):
    """The days of the week; ``.value`` corresponds with ISO numbering."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    def __str__(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_name(cls, name: str, /) -> Weekday:
        """Look up a weekday by its English name or three-letter abbreviation.

        Example
        -------
        >>> Weekday.from_name("tue")
        Weekday.TUESDAY
        """
        return _lookup_name(cls, name, "weekday")


class Month(enum.Enum):
    """The months of the year; ``.value`` is the month number (1-12)."""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    def __str__(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_name(cls, name: str, /) -> Month:
        """Look up a month by its English name or three-letter abbreviation.

        Example
        -------
        >>> Month.from_name("September")
        Month.SEPTEMBER
        >>> Month.from_name("sep")
        Month.SEPTEMBER
        """
        return _lookup_name(cls, name, "month")

    def days_in(self, year: int, /) -> int:
        """The number of days in this month for the given year

        Example
        -------
        >>> Month.FEBRUARY.days_in(2024)
        29
        """
        from ._math import days_in_month

        return days_in_month(year, self.value)


def _lookup_name(cls: Any, name: str, kind: str) -> Any:
    if not isinstance(name, str):
        raise TypeError(f"{kind} name must be a string")
    key = name.upper()
    for member in cls:
        if key == member.name or (len(key) == 3 and member.name[:3] == key):
            return member
    raise InvalidFieldError(kind, name)
