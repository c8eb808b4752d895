"""Calendar arithmetic on plain integers (proleptic Gregorian calendar)."""

from ._common import InvalidFieldError, OutOfRangeError

# The range of years supported by the standard library's datetime,
# which backs the DateTime class.
MIN_YEAR = 1
MAX_YEAR = 9999

# 1-indexed days per month
_MONTHDAYS = [0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]

# 1-indexed days before the start of each month (non-leap year)
_DAYS_BEFORE_MONTH = [0, 0]
for _n in _MONTHDAYS[1:-1]:
    _DAYS_BEFORE_MONTH.append(_DAYS_BEFORE_MONTH[-1] + _n)
del _n

_DAYS_IN_400_YEARS = 146_097
_DAYS_IN_100_YEARS = 36_524
_DAYS_IN_4_YEARS = 1_461


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidFieldError("month", month)
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


def days_in_year(year: int) -> int:
    return 365 + is_leap(year)


def check_year(year: int) -> int:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise OutOfRangeError(f"year {year} is out of range")
    return year


def ordinal_day(year: int, month: int, day: int) -> int:
    """The day of the year (1-366)"""
    return _DAYS_BEFORE_MONTH[month] + (month > 2 and is_leap(year)) + day


def date_from_ordinal_day(year: int, ordinal: int) -> tuple[int, int]:
    """The inverse of :func:`ordinal_day`: returns ``(month, day)``"""
    if not 1 <= ordinal <= days_in_year(year):
        raise InvalidFieldError("ordinal", ordinal)
    month = 12
    while ordinal_day(year, month, 1) > ordinal:
        month -= 1
    return month, ordinal - ordinal_day(year, month, 1) + 1


def days_from_civil(year: int, month: int, day: int) -> int:
    """Number the days so that 0001-01-01 is day 1.
    The same numbering as :meth:`datetime.date.toordinal`.
    """
    y = year - 1
    days_before_year = y * 365 + y // 4 - y // 100 + y // 400
    return days_before_year + ordinal_day(year, month, day)


def civil_from_days(n: int) -> tuple[int, int, int]:
    """The inverse of :func:`days_from_civil`"""
    n400, n = divmod(n - 1, _DAYS_IN_400_YEARS)
    n100, n = divmod(n, _DAYS_IN_100_YEARS)
    n4, n = divmod(n, _DAYS_IN_4_YEARS)
    n1, n = divmod(n, 365)
    year = n400 * 400 + n100 * 100 + n4 * 4 + n1 + 1
    if n1 == 4 or n100 == 4:
        # the last day of a leap year
        return year - 1, 12, 31
    month, day = date_from_ordinal_day(year, n + 1)
    return year, month, day


def weekday(year: int, month: int, day: int) -> int:
    """ISO weekday: Monday is 1, Sunday is 7"""
    # day 1 (0001-01-01) is a Monday
    return (days_from_civil(year, month, day) - 1) % 7 + 1


def weeks_in_iso_year(year: int) -> int:
    # A year has 53 weeks if it starts on a Thursday,
    # or if it's a leap year starting on a Wednesday.
    jan1 = weekday(year, 1, 1)
    return 53 if jan1 == 4 or (jan1 == 3 and is_leap(year)) else 52


def iso_calendar(year: int, month: int, day: int) -> tuple[int, int, int]:
    """The ISO year, week number, and weekday.

    Week 1 is the week containing the year's first Thursday. Early January
    dates may belong to the last week of the previous ISO year, and late
    December dates to week 1 of the next.
    """
    wday = weekday(year, month, day)
    # The Thursday of the same week determines the ISO year
    thursday = days_from_civil(year, month, day) - wday + 4
    iso_year = civil_from_days(thursday)[0]
    week = (thursday - days_from_civil(iso_year, 1, 1)) // 7 + 1
    return iso_year, week, wday


def iso_week(year: int, month: int, day: int) -> int:
    return iso_calendar(year, month, day)[1]


def add_days(
    year: int, month: int, day: int, days: int
) -> tuple[int, int, int]:
    y, m, d = civil_from_days(days_from_civil(year, month, day) + days)
    check_year(y)
    return y, m, d


def add_months(
    year: int, month: int, day: int, months: int
) -> tuple[int, int, int]:
    """Shift the month, clamping the day to the end of the resulting month.

    >>> add_months(2023, 1, 31, 1)
    (2023, 2, 28)
    """
    year_delta, month0_new = divmod(month - 1 + months, 12)
    year_new = check_year(year + year_delta)
    month_new = month0_new + 1
    return year_new, month_new, min(day, days_in_month(year_new, month_new))


def add_years(
    year: int, month: int, day: int, years: int
) -> tuple[int, int, int]:
    # only Feb 29 is affected by clamping
    return add_months(year, month, day, years * 12)


def start_of_week(year: int, month: int, day: int) -> tuple[int, int, int]:
    # weeks start on Monday
    return add_days(year, month, day, 1 - weekday(year, month, day))


def end_of_week(year: int, month: int, day: int) -> tuple[int, int, int]:
    return add_days(year, month, day, 7 - weekday(year, month, day))
