"""Fixed UTC offsets and the table of timezone abbreviations."""

from __future__ import annotations

import re
from datetime import timedelta as _timedelta, timezone as _timezone
from types import MappingProxyType
from typing import ClassVar, Mapping, no_type_check

from ._common import (
    InvalidFieldError,
    InvalidFormatError,
    UnknownTimezoneError,
    mk_fixed_tzinfo,
)

_MAX_OFFSET_MINUTES = 23 * 60 + 59
_object_new = object.__new__
_match_offset = re.compile(r"([+-])(\d{2}):(\d{2})", re.ASCII).fullmatch


class UtcOffset:
    """A fixed offset from UTC, between -23:59 and +23:59.

    The minutes take the sign of the hours. Only if ``hours`` is zero,
    the sign of ``minutes`` determines the sign of the offset.

    Example
    -------
    >>> UtcOffset(5, 30)
    UtcOffset(+05:30)
    >>> UtcOffset(-3, 30)
    UtcOffset(-03:30)
    >>> UtcOffset(0, -45)
    UtcOffset(-00:45)
    """

    __slots__ = ("_minutes",)
    _minutes: int

    UTC: ClassVar[UtcOffset]

    def __init__(self, hours: int, minutes: int = 0) -> None:
        if type(hours) is not int or type(minutes) is not int:
            raise TypeError("hours and minutes must be integers")
        if not -23 <= hours <= 23:
            raise InvalidFieldError("offset hours", hours)
        if not -59 <= minutes <= 59:
            raise InvalidFieldError("offset minutes", minutes)
        if hours:
            total = hours * 60 + (abs(minutes) if hours > 0 else -abs(minutes))
        else:
            total = minutes
        self._minutes = total

    @classmethod
    def from_parts(cls, sign: int, hours: int, minutes: int) -> UtcOffset:
        """Create from an explicit sign (``1`` or ``-1``)
        and the magnitude of the hours and minutes.

        Example
        -------
        >>> UtcOffset.from_parts(-1, 0, 30)
        UtcOffset(-00:30)
        """
        if sign not in (1, -1):
            raise ValueError("sign must be 1 or -1")
        if not 0 <= hours <= 23:
            raise InvalidFieldError("offset hours", hours)
        if not 0 <= minutes <= 59:
            raise InvalidFieldError("offset minutes", minutes)
        return cls._from_minutes_unchecked(sign * (hours * 60 + minutes))

    @classmethod
    def from_minutes(cls, minutes: int, /) -> UtcOffset:
        """Create from the total (signed) number of minutes"""
        if not -_MAX_OFFSET_MINUTES <= minutes <= _MAX_OFFSET_MINUTES:
            raise InvalidFieldError("offset", minutes)
        return cls._from_minutes_unchecked(minutes)

    @property
    def total_minutes(self) -> int:
        return self._minutes

    @property
    def hours(self) -> int:
        """The whole hours of the offset, carrying its sign"""
        hrs = abs(self._minutes) // 60
        return -hrs if self._minutes < 0 else hrs

    @property
    def minutes(self) -> int:
        """The minutes past the hour, carrying the sign of the offset"""
        mins = abs(self._minutes) % 60
        return -mins if self._minutes < 0 else mins

    @property
    def sign(self) -> str:
        return "-" if self._minutes < 0 else "+"

    def py_timezone(self) -> _timezone:
        """Convert to a standard library :class:`~datetime.timezone`"""
        return mk_fixed_tzinfo(self._minutes)

    def py_timedelta(self) -> _timedelta:
        return _timedelta(minutes=self._minutes)

    def format_common_iso(self) -> str:
        """Format as ``±HH:MM``

        >>> UtcOffset(-5).format_common_iso()
        '-05:00'
        """
        hrs, mins = divmod(abs(self._minutes), 60)
        return f"{self.sign}{hrs:02d}:{mins:02d}"

    @classmethod
    def parse_common_iso(cls, s: str, /) -> UtcOffset:
        """Parse ``±HH:MM``, or ``Z`` for UTC.

        >>> UtcOffset.parse_common_iso("+05:30")
        UtcOffset(+05:30)
        """
        if s == "Z":
            return cls.UTC
        if (match := _match_offset(s)) is None:
            raise InvalidFormatError.for_input(s)
        hrs, mins = int(match[2]), int(match[3])
        if hrs > 23 or mins > 59:
            raise InvalidFormatError.for_input(s)
        return cls._from_minutes_unchecked(
            (hrs * 60 + mins) * (-1 if match[1] == "-" else 1)
        )

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"UtcOffset({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._minutes == other._minutes

    def __hash__(self) -> int:
        return hash(self._minutes)

    def __lt__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._minutes < other._minutes

    def __le__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._minutes <= other._minutes

    def __gt__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._minutes > other._minutes

    def __ge__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._minutes >= other._minutes

    def __bool__(self) -> bool:
        return bool(self._minutes)

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self

    @no_type_check
    def __reduce__(self):
        return UtcOffset.from_minutes, (self._minutes,)

    @classmethod
    def _from_minutes_unchecked(cls, minutes: int) -> UtcOffset:
        self = _object_new(cls)
        self._minutes = minutes
        return self


UtcOffset.UTC = UtcOffset._from_minutes_unchecked(0)


# Each abbreviation maps to exactly one offset. Seasonal variants
# (e.g. EST/EDT) are separate entries: there are no DST rules.
_TIMEZONES: Mapping[str, UtcOffset] = MappingProxyType(
    {
        "UTC": UtcOffset.UTC,
        "GMT": UtcOffset.UTC,
        # North America
        "EST": UtcOffset(-5),
        "EDT": UtcOffset(-4),
        "CST": UtcOffset(-6),
        "CDT": UtcOffset(-5),
        "MST": UtcOffset(-7),
        "MDT": UtcOffset(-6),
        "PST": UtcOffset(-8),
        "PDT": UtcOffset(-7),
        # Europe
        "CET": UtcOffset(1),
        "CEST": UtcOffset(2),
        "EET": UtcOffset(2),
        "EEST": UtcOffset(3),
        # Asia
        "JST": UtcOffset(9),
        "IST": UtcOffset(5, 30),
        "HKT": UtcOffset(8),
        # Australia
        "AEDT": UtcOffset(11),
        "AEST": UtcOffset(10),
        "WADT": UtcOffset(8, 45),
    }
)


def resolve_tz(name: str, /) -> UtcOffset:
    """Look up the fixed offset for a timezone abbreviation.
    Abbreviations are case-sensitive.

    Raises
    ------
    UnknownTimezoneError
        If the abbreviation isn't in the table.

    Example
    -------
    >>> resolve_tz("CEST")
    UtcOffset(+02:00)
    """
    if not isinstance(name, str):
        raise TypeError("timezone name must be a string")
    try:
        return _TIMEZONES[name]
    except KeyError:
        raise UnknownTimezoneError.for_key(name) from None


def is_known_tz(name: str, /) -> bool:
    return name in _TIMEZONES


def available_timezones() -> frozenset[str]:
    """The set of all timezone abbreviations that can be resolved"""
    return frozenset(_TIMEZONES)
