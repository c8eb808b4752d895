# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - The DateTime class wraps an aware standard library datetime with
#   a fixed offset. All calendar logic (leap years, month lengths, ISO weeks,
#   month arithmetic) lives in _math.py, so the fields of the wrapped datetime
#   are the only state. Derived fields are always computed on access.
# - Every method that "changes" a DateTime returns a new instance that
#   has passed through the same checks as the constructor.
from __future__ import annotations

__version__ = "0.1.0"

from datetime import (
    date as _date,
    datetime as _datetime,
    time as _time,
    timedelta as _timedelta,
)
from struct import pack, unpack
from time import time_ns
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Mapping,
    no_type_check,
    overload,
)

from . import _math
from ._common import (
    UTC,
    DateTimeError,
    ErrorKind,
    InvalidFieldError,
    InvalidFormatError,
    Month,
    OutOfRangeError,
    UnknownTimezoneError,
    Weekday,
    check_utc_bounds,
)
from ._parse import (
    Fields,
    fields_from_iso,
    fields_from_pattern,
    format_pattern,
)
from ._tz import UtcOffset, available_timezones, is_known_tz, resolve_tz
from ._validate import Field, check_field

__all__ = [
    # Date and time
    "DateTime",
    "UtcOffset",
    # Enums
    "Weekday",
    "Month",
    "Field",
    "ErrorKind",
    # Exceptions
    "DateTimeError",
    "InvalidFieldError",
    "InvalidFormatError",
    "UnknownTimezoneError",
    "OutOfRangeError",
    # Timezones
    "resolve_tz",
    "available_timezones",
    "is_known_tz",
    # Constants
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
]

MONDAY = Weekday.MONDAY
TUESDAY = Weekday.TUESDAY
WEDNESDAY = Weekday.WEDNESDAY
THURSDAY = Weekday.THURSDAY
FRIDAY = Weekday.FRIDAY
SATURDAY = Weekday.SATURDAY
SUNDAY = Weekday.SUNDAY

# Helpers that pre-compute/lookup as much as possible
_object_new = object.__new__
_fromtimestamp = _datetime.fromtimestamp
_EPOCH = _datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MICROSECOND = _timedelta(microseconds=1)
_FIELD_NAMES = (
    "year",
    "month",
    "day",
    "hour",
    "minute",
    "second",
    "microsecond",
)


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


@final
class DateTime(_ImmutableBase):
    """A date and time with a fixed offset from UTC.

    The fields are checked on creation: the date must exist in the
    (proleptic) Gregorian calendar, and the time must be a valid time of day.

    Example
    -------
    >>> DateTime(2024, 1, 31, 12, 30)
    DateTime(2024-01-31 12:30:00Z)
    >>> DateTime(2024, 1, 31, 12, 30, offset="CET")
    DateTime(2024-01-31 12:30:00+01:00)
    >>> DateTime(2024, 1, 31, 12, 30, offset=UtcOffset(-3, 30))
    DateTime(2024-01-31 12:30:00-03:30)

    Note
    ----
    Timezone abbreviations are resolved to a fixed offset once,
    on creation. There is no daylight saving time logic.
    """

    __slots__ = ("_py_dt", "_offset")
    _py_dt: _datetime
    _offset: UtcOffset

    MIN: ClassVar[DateTime]
    """The earliest possible datetime"""
    MAX: ClassVar[DateTime]
    """The latest possible datetime"""

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        microsecond: int = 0,
        offset: UtcOffset | str = UtcOffset.UTC,
    ) -> None:
        self._offset = offset = _load_offset(offset)
        self._py_dt = _build(
            year, month, day, hour, minute, second, microsecond, offset
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @classmethod
    def now(cls, tz: str | UtcOffset = "UTC", /) -> DateTime:
        """Create an instance from the current time, in the given
        timezone abbreviation or offset.

        Example
        -------
        >>> DateTime.now()
        DateTime(2024-08-15 22:12:00.49821Z)
        >>> DateTime.now("JST")
        DateTime(2024-08-16 07:12:00.50332+09:00)
        """
        return cls._from_epoch_nanos(time_ns(), _load_offset(tz))

    @classmethod
    def now_with_offset(cls, hours: int, minutes: int = 0) -> DateTime:
        """Create an instance from the current time, at a custom offset.
        The minutes take the sign of the hours (see :class:`UtcOffset`).

        Raises
        ------
        InvalidFieldError
            If the offset is outside of -23:59 to +23:59

        Example
        -------
        >>> DateTime.now_with_offset(5, 30)
        DateTime(2024-08-16 03:42:00.50332+05:30)
        """
        return cls._from_epoch_nanos(time_ns(), UtcOffset(hours, minutes))

    def refresh(self) -> DateTime:
        """The current time, at the same offset as this instance

        Example
        -------
        >>> d = DateTime(2020, 1, 1, offset="EST")
        >>> d.refresh()
        DateTime(2024-08-15 17:12:00.49821-05:00)
        """
        return self._from_epoch_nanos(time_ns(), self._offset)

    @classmethod
    def from_timestamp(
        cls, i: int | float, /, *, offset: UtcOffset | str = UtcOffset.UTC
    ) -> DateTime:
        """Create an instance from a UNIX timestamp (in seconds).

        The inverse of :meth:`timestamp`.

        Example
        -------
        >>> DateTime.from_timestamp(0, offset="CET")
        DateTime(1970-01-01 01:00:00+01:00)
        """
        offset = _load_offset(offset)
        try:
            py_dt = _fromtimestamp(i, offset.py_timezone())
        except (OverflowError, ValueError, OSError):
            raise OutOfRangeError(f"Timestamp out of range: {i!r}") from None
        return cls._from_py_unchecked(py_dt, offset)

    @classmethod
    def from_py_datetime(cls, d: _datetime, /) -> DateTime:
        """Create an instance from a standard library ``datetime`` object.
        The datetime must be aware, and have an offset of whole minutes.

        The inverse of :meth:`py_datetime`.

        Example
        -------
        >>> DateTime.from_py_datetime(datetime(2020, 8, 15, tzinfo=timezone.utc))
        DateTime(2020-08-15 00:00:00Z)
        """
        if not isinstance(d, _datetime):
            raise TypeError(f"Expected datetime, got {type(d)!r}")
        if (offset := d.utcoffset()) is None:
            raise ValueError("Cannot create from a naive datetime")
        if offset % _timedelta(minutes=1):
            raise InvalidFieldError("offset", offset)
        return cls(
            d.year,
            d.month,
            d.day,
            d.hour,
            d.minute,
            d.second,
            microsecond=d.microsecond,
            offset=UtcOffset.from_minutes(offset // _timedelta(minutes=1)),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], /) -> DateTime:
        """Create an instance from the structured form created by
        :meth:`to_dict`. All fields are checked like in the constructor.

        Example
        -------
        >>> DateTime.from_dict({"year": 2020, "month": 8, "day": 15,
        ...     "hour": 0, "minute": 0, "second": 0, "microsecond": 0,
        ...     "offset": "+02:00"})
        DateTime(2020-08-15 00:00:00+02:00)
        """
        try:
            fields = [data[name] for name in _FIELD_NAMES]
            offset = data["offset"]
        except KeyError as e:
            raise InvalidFormatError(f"Missing field: {e.args[0]!r}") from None
        *date_and_time, micros = fields
        return cls(
            *date_and_time,
            microsecond=micros,
            offset=(
                UtcOffset.parse_common_iso(offset)
                if isinstance(offset, str)
                else offset
            ),
        )

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    @property
    def year(self) -> int:
        return self._py_dt.year

    @property
    def month(self) -> int:
        return self._py_dt.month

    @property
    def day(self) -> int:
        return self._py_dt.day

    @property
    def hour(self) -> int:
        return self._py_dt.hour

    @property
    def minute(self) -> int:
        return self._py_dt.minute

    @property
    def second(self) -> int:
        return self._py_dt.second

    @property
    def microsecond(self) -> int:
        return self._py_dt.microsecond

    @property
    def offset(self) -> UtcOffset:
        return self._offset

    def weekday(self) -> Weekday:
        """The day of the week

        Example
        -------
        >>> DateTime(2022, 1, 1).weekday()
        Weekday.SATURDAY
        >>> Weekday.SATURDAY.value
        6  # the ISO value
        """
        return Weekday(_math.weekday(self.year, self.month, self.day))

    def month_of_year(self) -> Month:
        """The month as an enum member

        Example
        -------
        >>> DateTime(2022, 3, 1).month_of_year()
        Month.MARCH
        """
        return Month(self.month)

    def ordinal(self) -> int:
        """The day of the year (1-366)

        Example
        -------
        >>> DateTime(2024, 12, 31).ordinal()
        366
        """
        return _math.ordinal_day(self.year, self.month, self.day)

    def iso_week(self) -> int:
        """The ISO 8601 week number (1-53).

        Week 1 is the week containing the first Thursday of the year.
        Dates early in January may therefore belong to the last week
        of the previous year.

        Example
        -------
        >>> DateTime(2022, 1, 1).iso_week()
        52
        >>> DateTime(2024, 12, 30).iso_week()
        1
        """
        return _math.iso_week(self.year, self.month, self.day)

    def iso_year(self) -> int:
        """The year the ISO week (see :meth:`iso_week`) belongs to

        Example
        -------
        >>> DateTime(2022, 1, 1).iso_year()
        2021
        """
        return _math.iso_calendar(self.year, self.month, self.day)[0]

    def is_leap_year(self) -> bool:
        return _math.is_leap(self.year)

    def days_in_month(self) -> int:
        return _math.days_in_month(self.year, self.month)

    def date(self) -> _date:
        """The date part, as a standard library :class:`~datetime.date`"""
        return self._py_dt.date()

    def time(self) -> _time:
        """The time part, as a standard library :class:`~datetime.time`"""
        return self._py_dt.time()

    def py_datetime(self) -> _datetime:
        """Convert to a standard library :class:`~datetime.datetime`"""
        return self._py_dt

    def timestamp(self) -> int:
        """The UNIX timestamp for this datetime, in whole seconds.

        Example
        -------
        >>> DateTime(1970, 1, 1, 1, offset="CET").timestamp()
        0
        """
        return (self._py_dt - _EPOCH) // _timedelta(seconds=1)

    def timestamp_micros(self) -> int:
        """Like :meth:`timestamp`, but with microsecond precision."""
        return (self._py_dt - _EPOCH) // _ONE_MICROSECOND

    def to_dict(self) -> dict[str, Any]:
        """A field-for-field representation of this datetime,
        built from plain types. The inverse of :meth:`from_dict`.

        Example
        -------
        >>> DateTime(2020, 8, 15, 23, 12, offset="CEST").to_dict()
        {'year': 2020, 'month': 8, 'day': 15, 'hour': 23, 'minute': 12,
        'second': 0, 'microsecond': 0, 'offset': '+02:00'}
        """
        d = self._py_dt
        return {
            "year": d.year,
            "month": d.month,
            "day": d.day,
            "hour": d.hour,
            "minute": d.minute,
            "second": d.second,
            "microsecond": d.microsecond,
            "offset": str(self._offset),
        }

    # ------------------------------------------------------------------
    # Replacing fields
    # ------------------------------------------------------------------

    def replace(self, **kwargs: Any) -> DateTime:
        """Construct a new instance with the given fields replaced.
        The result is checked like in the constructor.

        Note that replacing the offset doesn't convert the time:
        use :meth:`to_fixed_offset` for that.

        Example
        -------
        >>> d = DateTime(2020, 8, 15, 23, 12)
        >>> d.replace(year=2021, offset="EST")
        DateTime(2021-08-15 23:12:00-05:00)
        """
        fields = self.to_dict()
        fields["offset"] = self._offset
        if not fields.keys() >= kwargs.keys():
            unknown = ", ".join(sorted(kwargs.keys() - fields.keys()))
            raise TypeError(f"Unknown field(s): {unknown}")
        fields.update(kwargs)
        return DateTime(**fields)

    def set_date(self, year: int, month: int, day: int) -> DateTime:
        """Replace the date, keeping the time and offset.

        Example
        -------
        >>> DateTime(2020, 8, 15, 23, 12).set_date(2024, 2, 29)
        DateTime(2024-02-29 23:12:00Z)
        >>> DateTime(2020, 8, 15, 23, 12).set_date(2023, 2, 29)
        Traceback (most recent call last):
          ...
        dtt.InvalidFieldError: Invalid day: 29
        """
        return self.replace(year=year, month=month, day=day)

    def set_time(
        self, hour: int, minute: int, second: int, microsecond: int = 0
    ) -> DateTime:
        """Replace the time of day, keeping the date and offset.

        Example
        -------
        >>> DateTime(2020, 8, 15, 23, 12).set_time(8, 0, 30)
        DateTime(2020-08-15 08:00:30Z)
        """
        return self.replace(
            hour=hour, minute=minute, second=second, microsecond=microsecond
        )

    # ------------------------------------------------------------------
    # Timezone conversion
    # ------------------------------------------------------------------

    def to_fixed_offset(self, offset: UtcOffset | str, /) -> DateTime:
        """Express the same moment in time at a different offset.

        Example
        -------
        >>> d = DateTime(2020, 8, 15, 23, offset="CEST")
        >>> d.to_fixed_offset(UtcOffset(-4))
        DateTime(2020-08-15 17:00:00-04:00)
        """
        offset = _load_offset(offset)
        try:
            py_dt = self._py_dt.astimezone(offset.py_timezone())
        except OverflowError:
            raise OutOfRangeError("Result out of range") from None
        return self._from_py_unchecked(py_dt, offset)

    def to_tz(self, tz: str, /) -> DateTime:
        """Express the same moment in time in a different timezone.

        Raises
        ------
        UnknownTimezoneError
            If the timezone abbreviation is unknown.

        Example
        -------
        >>> DateTime(2024, 1, 1, 12).to_tz("EST")
        DateTime(2024-01-01 07:00:00-05:00)
        """
        return self.to_fixed_offset(resolve_tz(tz))

    def to_utc(self) -> DateTime:
        return self.to_fixed_offset(UtcOffset.UTC)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        microseconds: float = 0,
    ) -> DateTime:
        """Add a time amount to this datetime.

        Years and months are added first. If the day doesn't exist
        in the resulting month, it's clamped to the last day of the month.
        Then weeks and days are added, followed by the exact time units.

        Example
        -------
        >>> d = DateTime(2023, 1, 31, 12)
        >>> d.add(months=1, hours=13)
        DateTime(2023-03-01 01:00:00Z)
        """
        try:
            delta = _timedelta(
                hours=hours,
                minutes=minutes,
                seconds=seconds,
                microseconds=microseconds,
            )
        except OverflowError:
            raise OutOfRangeError("Time amount out of range") from None
        return self._shift(years * 12 + months, weeks * 7 + days, delta)

    def subtract(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        microseconds: float = 0,
    ) -> DateTime:
        """Subtract a time amount from this datetime.
        The inverse of :meth:`add`, with the same clamping rules.

        Example
        -------
        >>> DateTime(2024, 3, 31).subtract(months=1)
        DateTime(2024-02-29 00:00:00Z)
        """
        return self.add(
            years=-years,
            months=-months,
            weeks=-weeks,
            days=-days,
            hours=-hours,
            minutes=-minutes,
            seconds=-seconds,
            microseconds=-microseconds,
        )

    def add_days(self, days: int, /) -> DateTime:
        """Add a number of calendar days. Negative values go back in time.

        Example
        -------
        >>> DateTime(2024, 2, 28).add_days(2)
        DateTime(2024-03-01 00:00:00Z)
        """
        return self._shift(0, days)

    def subtract_days(self, days: int, /) -> DateTime:
        return self._shift(0, -days)

    def add_months(self, months: int, /) -> DateTime:
        """Add a number of months, clamping the day to the end of the month.

        Example
        -------
        >>> DateTime(2023, 1, 31).add_months(1)
        DateTime(2023-02-28 00:00:00Z)
        >>> DateTime(2024, 1, 31).add_months(1)
        DateTime(2024-02-29 00:00:00Z)
        """
        return self._shift(months, 0)

    def subtract_months(self, months: int, /) -> DateTime:
        return self._shift(-months, 0)

    def add_years(self, years: int, /) -> DateTime:
        """Add a number of years. February 29 becomes February 28
        in non-leap years.

        Example
        -------
        >>> DateTime(2024, 2, 29).add_years(1)
        DateTime(2025-02-28 00:00:00Z)
        """
        return self._shift(years * 12, 0)

    def subtract_years(self, years: int, /) -> DateTime:
        return self._shift(-years * 12, 0)

    def next_day(self) -> DateTime:
        return self._shift(0, 1)

    def previous_day(self) -> DateTime:
        return self._shift(0, -1)

    def duration_since(self, other: DateTime, /) -> _timedelta:
        """The exact time elapsed since another datetime.
        Negative if the other datetime is later.

        Equivalent to ``self - other``.

        Example
        -------
        >>> a = DateTime(2024, 1, 2, 12)
        >>> a.duration_since(DateTime(2024, 1, 1, offset="CET"))
        datetime.timedelta(days=1, seconds=46800)
        """
        if not isinstance(other, DateTime):
            raise TypeError(f"Expected DateTime, got {type(other)!r}")
        return self._py_dt - other._py_dt

    def is_within_range(self, start: DateTime, end: DateTime, /) -> bool:
        """Whether this datetime lies between ``start`` and ``end`` (inclusive).

        If ``start`` is later than ``end``, the range is empty
        and the result is always ``False``.

        Example
        -------
        >>> d = DateTime(2024, 1, 15)
        >>> d.is_within_range(DateTime(2024, 1, 1), DateTime(2024, 1, 31))
        True
        >>> d.is_within_range(DateTime(2024, 1, 31), DateTime(2024, 1, 1))
        False
        """
        return start <= self <= end

    # ------------------------------------------------------------------
    # Period boundaries. These keep the time of day and offset.
    # ------------------------------------------------------------------

    def start_of_week(self) -> DateTime:
        """The Monday of the same week

        Example
        -------
        >>> DateTime(2024, 1, 17, 9).start_of_week()
        DateTime(2024-01-15 09:00:00Z)
        """
        return self._with_date(
            *_math.start_of_week(self.year, self.month, self.day)
        )

    def end_of_week(self) -> DateTime:
        """The Sunday of the same week"""
        return self._with_date(
            *_math.end_of_week(self.year, self.month, self.day)
        )

    def start_of_month(self) -> DateTime:
        return self._with_date(self.year, self.month, 1)

    def end_of_month(self) -> DateTime:
        """The last day of the same month

        Example
        -------
        >>> DateTime(2023, 2, 10).end_of_month()
        DateTime(2023-02-28 00:00:00Z)
        """
        return self._with_date(self.year, self.month, self.days_in_month())

    def start_of_year(self) -> DateTime:
        return self._with_date(self.year, 1, 1)

    def end_of_year(self) -> DateTime:
        return self._with_date(self.year, 12, 31)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS[.ffffff]±HH:MM``.
        The offset is always numeric.

        The inverse of :meth:`parse_common_iso`.

        Example
        -------
        >>> DateTime(2020, 8, 15, 23, 12, 9).format_common_iso()
        '2020-08-15T23:12:09+00:00'
        """
        return self._format_local() + str(self._offset)

    def format_rfc3339(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS[.ffffff](Z|±HH:MM)``,
        using ``Z`` for a zero offset.

        Example
        -------
        >>> DateTime(2020, 8, 15, 23, 12, 9, microsecond=5).format_rfc3339()
        '2020-08-15T23:12:09.000005Z'
        >>> DateTime(2020, 8, 15, 23, 12, 9, offset="IST").format_rfc3339()
        '2020-08-15T23:12:09+05:30'
        """
        return self._format_local() + (
            str(self._offset) if self._offset else "Z"
        )

    __str__ = format_rfc3339

    @classmethod
    def parse_common_iso(cls, s: str, /) -> DateTime:
        """Parse ``YYYY-MM-DDTHH:MM:SS[.ffffff](Z|±HH:MM)``.

        The inverse of :meth:`format_common_iso` and :meth:`format_rfc3339`.

        Raises
        ------
        InvalidFormatError
            If the string doesn't match the format
        InvalidFieldError
            If a field is out of range (e.g. ``2023-02-29``)

        Example
        -------
        >>> DateTime.parse_common_iso("2022-01-01T12:00:00+01:00")
        DateTime(2022-01-01 12:00:00+01:00)
        """
        return cls._from_fields(fields_from_iso(s))

    def format(self, pattern: str, /) -> str:
        """Format according to a pattern of placeholders.

        Available placeholders are ``[year]``, ``[month]``, ``[day]``,
        ``[hour]``, ``[minute]``, ``[second]``, ``[subsecond]``
        (microseconds), ``[offset]``, ``[weekday]``, ``[month_name]``,
        ``[ordinal]``, and ``[iso_week]``. Use ``[[`` for a literal ``[``.
        All other text is copied as-is.

        Example
        -------
        >>> d = DateTime(2024, 3, 5, 8, 30, offset="CET")
        >>> d.format("[weekday] [day] [month_name] [year], [hour]:[minute]")
        'Tuesday 05 March 2024, 08:30'
        """
        return format_pattern(self._py_dt, pattern)

    def format_in_tz(self, tz: str, pattern: str, /) -> str:
        """Convert to the given timezone, then format with a pattern.
        See :meth:`to_tz` and :meth:`format`.
        """
        return self.to_tz(tz).format(pattern)

    @classmethod
    def parse_custom_format(cls, s: str, pattern: str, /) -> DateTime:
        """Parse a string according to a pattern.
        See :meth:`format` for the available placeholders.

        Time fields that are not in the pattern default to zero,
        the offset defaults to UTC.

        Example
        -------
        >>> DateTime.parse_custom_format("15/08/2020 23:12", "[day]/[month]/[year] [hour]:[minute]")
        DateTime(2020-08-15 23:12:00Z)
        """
        return cls._from_fields(fields_from_pattern(s, pattern))

    def __repr__(self) -> str:
        return f"DateTime({str(self).replace('T', ' ')})"

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def exact_eq(self, other: DateTime, /) -> bool:
        """Compare by field values, instead of by the moment in time.

        Example
        -------
        >>> a = DateTime(2020, 8, 15, hour=12, offset="CET")
        >>> b = DateTime(2020, 8, 15, hour=13, offset="CEST")
        >>> a == b
        True  # same moment in time
        >>> a.exact_eq(b)
        False  # different hour and offset
        """
        if type(other) is not DateTime:
            raise TypeError("Cannot compare different types")
        return (self._py_dt.replace(tzinfo=None), self._offset) == (
            other._py_dt.replace(tzinfo=None),
            other._offset,
        )

    def __eq__(self, other: object) -> bool:
        """Check if two datetimes represent the same moment in time

        Example
        -------
        >>> DateTime(2020, 8, 15, 23, offset="CEST") == DateTime(2020, 8, 15, 21)
        True
        """
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._py_dt == other._py_dt

    def __hash__(self) -> int:
        return hash(self._py_dt)

    def __lt__(self, other: DateTime) -> bool:
        """Compare two datetimes by when they occur in time

        Example
        -------
        >>> DateTime(2020, 8, 15, 23, offset="CEST") < DateTime(2020, 8, 15, 22)
        True
        """
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._py_dt < other._py_dt

    def __le__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._py_dt <= other._py_dt

    def __gt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._py_dt > other._py_dt

    def __ge__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._py_dt >= other._py_dt

    def __add__(self, delta: _timedelta) -> DateTime:
        """Add an exact duration. The calendar is not taken into account:
        a day is always 24 hours.
        """
        if not isinstance(delta, _timedelta):
            return NotImplemented
        return self._shift(0, 0, delta)

    @overload
    def __sub__(self, other: DateTime) -> _timedelta: ...

    @overload
    def __sub__(self, other: _timedelta) -> DateTime: ...

    def __sub__(self, other: DateTime | _timedelta) -> _timedelta | DateTime:
        """Subtract an exact duration, or calculate the duration
        between two datetimes (see :meth:`duration_since`)

        Example
        -------
        >>> DateTime(2024, 1, 2) - DateTime(2024, 1, 1)
        datetime.timedelta(days=1)
        >>> DateTime(2024, 1, 2) - timedelta(hours=1)
        DateTime(2024-01-01 23:00:00Z)
        """
        if isinstance(other, DateTime):
            return self.duration_since(other)
        elif isinstance(other, _timedelta):
            return self._shift(0, 0, -other)
        return NotImplemented

    # ------------------------------------------------------------------
    # Integrations
    # ------------------------------------------------------------------

    # a custom pickle implementation with a smaller payload
    @no_type_check
    def __reduce__(self):
        return (
            _unpkl_dtt,
            (
                pack(
                    "<HBBBBBIh",
                    *self._py_dt.timetuple()[:6],
                    self._py_dt.microsecond,
                    self._offset.total_minutes,
                ),
            ),
        )

    @classmethod
    def __get_pydantic_core_schema__(cls, *_: Any, **kwargs: Any) -> Any:
        from pydantic_core import core_schema

        return core_schema.no_info_plain_validator_function(
            _pydantic_parse,
            serialization=core_schema.plain_serializer_function_ser_schema(
                cls.format_rfc3339, when_used="json-unless-none"
            ),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _format_local(self) -> str:
        d = self._py_dt
        micros = d.microsecond
        return (
            f"{d.year:04d}-{d.month:02d}-{d.day:02d}"
            f"T{d.hour:02d}:{d.minute:02d}:{d.second:02d}"
            + bool(micros) * f".{micros:06d}"
        )

    def _shift(
        self, months: int, days: int, delta: _timedelta | None = None
    ) -> DateTime:
        py_dt = self._py_dt
        if months or days:
            y, m, d = _math.add_months(
                py_dt.year, py_dt.month, py_dt.day, months
            )
            y, m, d = _math.add_days(y, m, d, days)
            py_dt = py_dt.replace(year=y, month=m, day=d)
        if delta:
            try:
                py_dt += delta
            except OverflowError:
                raise OutOfRangeError("Result out of range") from None
        return self._from_py_unchecked(check_utc_bounds(py_dt), self._offset)

    def _with_date(self, year: int, month: int, day: int) -> DateTime:
        return self._from_py_unchecked(
            check_utc_bounds(
                self._py_dt.replace(year=year, month=month, day=day)
            ),
            self._offset,
        )

    @classmethod
    def _from_fields(cls, fields: Fields) -> DateTime:
        *date_and_time, micros, offset = fields
        return cls(*date_and_time, microsecond=micros, offset=offset)

    @classmethod
    def _from_epoch_nanos(cls, nanos: int, offset: UtcOffset) -> DateTime:
        secs, nanos = divmod(nanos, 1_000_000_000)
        return cls._from_py_unchecked(
            _fromtimestamp(secs, offset.py_timezone()).replace(
                microsecond=nanos // 1_000
            ),
            offset,
        )

    @classmethod
    def _from_py_unchecked(
        cls, d: _datetime, offset: UtcOffset, /
    ) -> DateTime:
        self = _object_new(cls)
        self._py_dt = d
        self._offset = offset
        return self


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_dtt(data: bytes) -> DateTime:
    *args, micros, offset_mins = unpack("<HBBBBBIh", data)
    return DateTime(
        *args, microsecond=micros, offset=UtcOffset.from_minutes(offset_mins)
    )


def _pydantic_parse(v: object) -> DateTime:
    if type(v) is DateTime:
        return v
    elif isinstance(v, str):
        return DateTime.parse_common_iso(v)
    raise ValueError(f"Expected DateTime or string, got {type(v)!r}")


def _load_offset(offset: UtcOffset | str, /) -> UtcOffset:
    if isinstance(offset, UtcOffset):
        return offset
    elif isinstance(offset, str):
        return resolve_tz(offset)
    raise TypeError(
        "offset must be a UtcOffset or timezone abbreviation, e.g. 'CET'"
    )


def _build(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    microsecond: int,
    offset: UtcOffset,
) -> _datetime:
    # Fields are checked in order, so the first invalid one is reported
    if type(year) is not int:
        raise TypeError(f"year must be an int, got {type(year).__name__}")
    _math.check_year(year)
    check_field(Field.MONTH, month)
    check_field(Field.DAY, day)
    if day > _math.days_in_month(year, month):
        raise InvalidFieldError(Field.DAY, day)
    check_field(Field.HOUR, hour)
    check_field(Field.MINUTE, minute)
    check_field(Field.SECOND, second)
    check_field(Field.MICROSECOND, microsecond)
    return check_utc_bounds(
        _datetime(
            year,
            month,
            day,
            hour,
            minute,
            second,
            microsecond,
            offset.py_timezone(),
        )
    )


DateTime.MIN = DateTime._from_py_unchecked(
    _datetime(1, 1, 1, tzinfo=UTC), UtcOffset.UTC
)
DateTime.MAX = DateTime._from_py_unchecked(
    _datetime(9999, 12, 31, 23, 59, 59, 999_999, tzinfo=UTC), UtcOffset.UTC
)


# We expose the public members in the root of the module.
# For clarity, we remove the "_pydtt" part from the names,
# since this is an implementation detail.
for name in __all__:
    member = locals()[name]
    if getattr(member, "__module__", "").startswith("dtt."):
        member.__module__ = "dtt"

# clear up loop variables so they don't leak into the namespace
del name
del member

_unpkl_dtt.__module__ = "dtt"


# disable further subclassing
final(_ImmutableBase)


def _patch_time_frozen(d: DateTime) -> None:
    global time_ns

    def time_ns() -> int:
        return d.timestamp_micros() * 1_000


def _patch_time_keep_ticking(d: DateTime) -> None:
    global time_ns

    _patched_at = time_ns()
    _time_ns = time_ns

    def time_ns() -> int:
        return d.timestamp_micros() * 1_000 + _time_ns() - _patched_at


def _unpatch_time() -> None:
    global time_ns

    from time import time_ns
