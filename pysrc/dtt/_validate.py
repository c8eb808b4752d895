"""Predicates deciding whether a text token is a valid value for a single
date or time field.

The predicates never raise on malformed input: anything that isn't a
well-formed value is simply invalid.
"""

from __future__ import annotations

import enum
import re

from ._common import InvalidFieldError
from ._math import days_in_month, days_in_year, weeks_in_iso_year


class Field(enum.Enum):
    """The date and time fields that can be validated"""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MICROSECOND = "microsecond"
    ORDINAL = "ordinal"
    ISO_WEEK = "iso_week"

    def __str__(self) -> str:
        return self.value


# Inclusive ranges. Years have no fixed range here: the range of
# representable years is checked separately.
_RANGES = {
    Field.MONTH: (1, 12),
    Field.DAY: (1, 31),
    Field.HOUR: (0, 23),
    Field.MINUTE: (0, 59),
    Field.SECOND: (0, 59),
    Field.MICROSECOND: (0, 999_999),
    Field.ORDINAL: (1, 366),
    Field.ISO_WEEK: (1, 53),
}

_match_unsigned = re.compile(r"\d+", re.ASCII).fullmatch
_match_signed = re.compile(r"[+-]?\d+", re.ASCII).fullmatch
_match_time = re.compile(
    r"([0-2]\d):([0-5]\d):([0-5]\d)", re.ASCII
).fullmatch
# Also used by the ISO 8601 parser. Groups: the six date and time fields,
# the fraction, and the offset sign, hours and minutes.
match_iso_8601 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,6}))?"
    r"(?:Z|([+-])(\d{2}):(\d{2}))",
    re.ASCII,
).fullmatch

# Tokens with more significant digits are rejected outright, years included
_MAX_DIGITS = 9


def _to_int(token: str, signed: bool = False) -> int | None:
    if not isinstance(token, str):
        return None
    if (_match_signed if signed else _match_unsigned)(token) is None:
        return None
    # int() limits the length of digit strings, leading zeros included
    digits = token.lstrip("+-").lstrip("0")
    if len(digits) > _MAX_DIGITS:
        return None
    value = int(digits or "0")
    return -value if token[0] == "-" else value


def check_field(field: Field, value: int) -> int:
    """Raise :class:`InvalidFieldError` if the value is out of range
    for the given field."""
    if type(value) is not int:
        raise TypeError(f"{field} must be an int, got {type(value).__name__}")
    lo, hi = _RANGES[field]
    if not lo <= value <= hi:
        raise InvalidFieldError(field, value)
    return value


def is_valid(token: str, field: Field) -> bool:
    """Whether the token is a valid value for the given field.

    Only the fixed range of the field is checked. For example, ``"31"``
    is a valid day, regardless of the month.

    >>> is_valid("23", Field.HOUR)
    True
    >>> is_valid("24", Field.HOUR)
    False
    """
    if field is Field.YEAR:
        return _to_int(token, signed=True) is not None
    value = _to_int(token)
    if value is None:
        return False
    lo, hi = _RANGES[field]
    return lo <= value <= hi


def is_valid_year(token: str) -> bool:
    return is_valid(token, Field.YEAR)


def is_valid_month(token: str) -> bool:
    return is_valid(token, Field.MONTH)


def is_valid_day(
    token: str, *, year: int | None = None, month: int | None = None
) -> bool:
    """Whether the token is a valid day of the month (1-31).

    If ``month`` (and optionally ``year``) is given, the day is also checked
    against the length of that month. Without a year, February is
    allowed 29 days.

    >>> is_valid_day("31")
    True
    >>> is_valid_day("31", month=4)
    False
    >>> is_valid_day("29", year=2023, month=2)
    False
    """
    if not is_valid(token, Field.DAY):
        return False
    if month is None:
        return True
    if not 1 <= month <= 12:
        return False
    # a leap year gives the most lenient month lengths
    return int(token.lstrip("0")) <= days_in_month(
        4 if year is None else year, month
    )


def is_valid_hour(token: str) -> bool:
    return is_valid(token, Field.HOUR)


def is_valid_minute(token: str) -> bool:
    return is_valid(token, Field.MINUTE)


def is_valid_second(token: str) -> bool:
    return is_valid(token, Field.SECOND)


def is_valid_microsecond(token: str) -> bool:
    return is_valid(token, Field.MICROSECOND)


def is_valid_ordinal(token: str, *, year: int | None = None) -> bool:
    """Whether the token is a valid day of the year (1-366).
    If a year is given, day 366 is only valid in leap years.
    """
    if not is_valid(token, Field.ORDINAL):
        return False
    return year is None or int(token.lstrip("0")) <= days_in_year(year)


def is_valid_iso_week(token: str, *, year: int | None = None) -> bool:
    """Whether the token is a valid ISO week number (1-53).
    If an ISO year is given, week 53 is only valid in years that have one.
    """
    if not is_valid(token, Field.ISO_WEEK):
        return False
    return year is None or int(token.lstrip("0")) <= weeks_in_iso_year(year)


def is_valid_time(token: str) -> bool:
    """Whether the token is a time of day in the form ``HH:MM:SS``

    >>> is_valid_time("23:59:59")
    True
    >>> is_valid_time("24:00:00")
    False
    >>> is_valid_time("9:00:00")
    False
    """
    if not isinstance(token, str) or (match := _match_time(token)) is None:
        return False
    return int(match[1]) <= 23


def is_valid_iso_8601(token: str) -> bool:
    """Whether the token is a complete ISO 8601 timestamp in the form
    ``YYYY-MM-DDTHH:MM:SS[.ffffff](Z|±HH:MM)``.

    Unlike the single-field validators, the day is checked against
    the actual length of the month.

    >>> is_valid_iso_8601("2024-02-29T12:00:00+01:00")
    True
    >>> is_valid_iso_8601("2023-02-29T12:00:00Z")
    False
    """
    if not isinstance(token, str):
        return False
    if (match := match_iso_8601(token)) is None:
        return False
    year, month, day, hour, minute, second = map(int, match.groups()[:6])
    if year == 0 or not 1 <= month <= 12:
        return False
    if not 1 <= day <= days_in_month(year, month):
        return False
    if hour > 23 or minute > 59 or second > 59:
        return False
    if match[8] is not None and (int(match[9]) > 23 or int(match[10]) > 59):
        return False
    return True


__all__ = [
    "Field",
    "is_valid",
    "is_valid_day",
    "is_valid_hour",
    "is_valid_iso_8601",
    "is_valid_iso_week",
    "is_valid_microsecond",
    "is_valid_minute",
    "is_valid_month",
    "is_valid_ordinal",
    "is_valid_second",
    "is_valid_time",
    "is_valid_year",
]
