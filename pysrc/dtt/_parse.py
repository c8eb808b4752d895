"""Parsing and formatting of ISO 8601 strings and custom patterns."""

from __future__ import annotations

import re
from datetime import datetime as _datetime, timedelta as _timedelta
from functools import lru_cache
from typing import Callable, NoReturn, Union

from ._common import InvalidFieldError, InvalidFormatError, Month, Weekday
from ._math import (
    check_year,
    date_from_ordinal_day,
    days_in_month,
    iso_week,
    ordinal_day,
    weekday,
)
from ._tz import UtcOffset
from ._validate import Field, check_field, match_iso_8601

# year, month, day, hour, minute, second, microsecond, offset
Fields = tuple[int, int, int, int, int, int, int, UtcOffset]

_ONE_MINUTE = _timedelta(minutes=1)


def _parse_err(s: str) -> NoReturn:
    raise InvalidFormatError.for_input(s) from None


def _parse_micros(s: str) -> int:
    return int(s.ljust(6, "0")) if s else 0


def _split_offset(s: str) -> tuple[str | None, str, str]:
    # the placeholder regex guarantees "Z" or "±HH:MM"
    return (None, "", "") if s == "Z" else (s[0], s[1:3], s[4:6])


def _offset_from_parts(sign: str | None, hrs: str, mins: str) -> UtcOffset:
    if not sign:
        return UtcOffset.UTC
    return UtcOffset.from_parts(-1 if sign == "-" else 1, int(hrs), int(mins))


def fields_from_iso(s: str) -> Fields:
    """Split ``YYYY-MM-DDTHH:MM:SS[.ffffff](Z|±HH:MM)`` into its fields.

    Only the grammar is checked here. Ranges are checked
    when the fields are combined into a datetime.
    """
    if not isinstance(s, str):
        raise TypeError("Can only parse strings")
    if (match := match_iso_8601(s)) is None:
        _parse_err(s)
    year, month, day, hour, minute, second = map(int, match.groups()[:6])
    micros_raw, sign, offset_hrs, offset_mins = match.groups()[6:]
    offset = _offset_from_parts(sign, offset_hrs, offset_mins)
    return (
        year,
        month,
        day,
        hour,
        minute,
        second,
        _parse_micros(micros_raw or ""),
        offset,
    )


def _fmt_offset(d: _datetime) -> str:
    return str(UtcOffset.from_minutes(d.utcoffset() // _ONE_MINUTE))  # type: ignore[operator]


def _fmt_ordinal(d: _datetime) -> str:
    return f"{ordinal_day(d.year, d.month, d.day):03d}"


def _fmt_iso_week(d: _datetime) -> str:
    return f"{iso_week(d.year, d.month, d.day):02d}"


# Placeholders of the pattern mini-language. Each has a regex (for parsing)
# and a function rendering an aware datetime (for formatting).
_PLACEHOLDERS: dict[str, tuple[str, Callable[[_datetime], str]]] = {
    "year": (r"\d{4}", lambda d: f"{d.year:04d}"),
    "month": (r"\d{2}", lambda d: f"{d.month:02d}"),
    "day": (r"\d{2}", lambda d: f"{d.day:02d}"),
    "hour": (r"\d{2}", lambda d: f"{d.hour:02d}"),
    "minute": (r"\d{2}", lambda d: f"{d.minute:02d}"),
    "second": (r"\d{2}", lambda d: f"{d.second:02d}"),
    "subsecond": (r"\d{1,6}", lambda d: f"{d.microsecond:06d}"),
    "offset": (r"Z|[+-]\d{2}:\d{2}", _fmt_offset),
    "weekday": (
        r"[A-Za-z]+",
        lambda d: str(Weekday(weekday(d.year, d.month, d.day))),
    ),
    "month_name": (r"[A-Za-z]+", lambda d: str(Month(d.month))),
    "ordinal": (r"\d{3}", _fmt_ordinal),
    "iso_week": (r"\d{2}", _fmt_iso_week),
}


class _Placeholder(str):
    """Marks a placeholder name in a compiled pattern"""

    __slots__ = ()


_Token = Union[str, _Placeholder]


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> tuple[_Token, ...]:
    """Split a pattern into literal text and placeholders.

    >>> compile_pattern("[year]-[month] [[x]")
    ('year', '-', 'month', ' [x]')
    """
    if not isinstance(pattern, str):
        raise TypeError("pattern must be a string")
    tokens: list[_Token] = []
    literal = ""
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c != "[":
            literal += c
            i += 1
        elif pattern.startswith("[[", i):
            literal += "["
            i += 2
        else:
            end = pattern.find("]", i)
            if end == -1:
                raise InvalidFormatError(
                    f"Unterminated placeholder in pattern {pattern!r}"
                )
            name = pattern[i + 1 : end]
            if name not in _PLACEHOLDERS:
                raise InvalidFormatError(
                    f"Unknown placeholder [{name}] in pattern {pattern!r}"
                )
            if literal:
                tokens.append(literal)
                literal = ""
            tokens.append(_Placeholder(name))
            i = end + 1
    if literal:
        tokens.append(literal)
    return tuple(tokens)


@lru_cache(maxsize=64)
def _pattern_regex(pattern: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    regex = ""
    names = []
    for tok in compile_pattern(pattern):
        if isinstance(tok, _Placeholder):
            regex += f"({_PLACEHOLDERS[tok][0]})"
            names.append(str(tok))
        else:
            regex += re.escape(tok)
    return re.compile(regex, re.ASCII), tuple(names)


def format_pattern(d: _datetime, pattern: str) -> str:
    """Render an aware datetime through a pattern"""
    return "".join(
        _PLACEHOLDERS[tok][1](d) if isinstance(tok, _Placeholder) else tok
        for tok in compile_pattern(pattern)
    )


def fields_from_pattern(s: str, pattern: str) -> Fields:
    """Extract the fields from a string according to a pattern.

    The pattern must determine the date: either with ``[year]``,
    ``[month]`` (or ``[month_name]``), and ``[day]``, or with ``[year]``
    and ``[ordinal]``. Missing time fields default to zero, a missing
    offset to UTC. If ``[weekday]`` or ``[iso_week]`` are present,
    they must agree with the date.
    """
    if not isinstance(s, str):
        raise TypeError("Can only parse strings")
    regex, names = _pattern_regex(pattern)
    if (match := regex.fullmatch(s)) is None:
        _parse_err(s)

    raw: dict[str, str] = {}
    for name, value in zip(names, match.groups()):
        # A repeated placeholder must have the same value each time
        if raw.setdefault(name, value) != value:
            _parse_err(s)

    if "year" not in raw:
        raise InvalidFormatError(
            f"Pattern {pattern!r} doesn't specify a complete date"
        )
    year = check_year(int(raw["year"]))

    month: int | None = None
    if "month" in raw:
        month = check_field(Field.MONTH, int(raw["month"]))
    if "month_name" in raw:
        named = Month.from_name(raw["month_name"]).value
        if month is not None and month != named:
            raise InvalidFieldError("month_name", raw["month_name"])
        month = named

    if month is not None and "day" in raw:
        day = int(raw["day"])
        if not 1 <= day <= days_in_month(year, month):
            raise InvalidFieldError(Field.DAY, day)
        if "ordinal" in raw and int(raw["ordinal"]) != ordinal_day(
            year, month, day
        ):
            raise InvalidFieldError(Field.ORDINAL, int(raw["ordinal"]))
    elif "ordinal" in raw and month is None and "day" not in raw:
        month, day = date_from_ordinal_day(year, int(raw["ordinal"]))
    else:
        raise InvalidFormatError(
            f"Pattern {pattern!r} doesn't specify a complete date"
        )

    if "weekday" in raw and Weekday.from_name(raw["weekday"]).value != weekday(
        year, month, day
    ):
        raise InvalidFieldError("weekday", raw["weekday"])
    if "iso_week" in raw and int(raw["iso_week"]) != iso_week(year, month, day):
        raise InvalidFieldError(Field.ISO_WEEK, int(raw["iso_week"]))

    return (
        year,
        month,
        day,
        check_field(Field.HOUR, int(raw.get("hour", 0))),
        check_field(Field.MINUTE, int(raw.get("minute", 0))),
        check_field(Field.SECOND, int(raw.get("second", 0))),
        _parse_micros(raw.get("subsecond", "")),
        _offset_from_parts(*_split_offset(raw.get("offset", "Z"))),
    )
