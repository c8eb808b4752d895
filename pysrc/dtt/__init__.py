from __future__ import annotations

from ._pydtt import *
from ._pydtt import (
    __all__ as _core_all,
    _patch_time_frozen,
    _patch_time_keep_ticking,
    _unpatch_time,
    _unpkl_dtt,
)
from ._validate import *
from ._validate import __all__ as _validate_all

from contextlib import contextmanager as _contextmanager
from dataclasses import dataclass as _dataclass
from datetime import timedelta as _timedelta
from typing import Iterator as _Iterator

from ._pydtt import __version__

__all__ = [
    *_core_all,
    *_validate_all,
    "now",
    "parse",
    "format_datetime",
    "add_days",
    "diff_days",
    "patch_current_time",
]


@_dataclass
class _TimePatch:
    _pin: DateTime
    _keep_ticking: bool

    def shift(self, *args, **kwargs):
        if self._keep_ticking:
            self._pin = new = (
                self._pin + (DateTime.now() - self._pin)
            ).add(*args, **kwargs)
            _patch_time_keep_ticking(new)
        else:
            self._pin = new = self._pin.add(*args, **kwargs)
            _patch_time_frozen(new)


@_contextmanager
def patch_current_time(
    dt: DateTime, /, *, keep_ticking: bool
) -> _Iterator[_TimePatch]:
    """Patch the current time to a fixed value (for testing purposes).
    Behaves as a context manager or decorator, with similar semantics to
    ``unittest.mock.patch``.

    Important
    ---------

    * This function should be used only for testing purposes. It is not
      thread-safe or part of the stable API.
    * This function only affects dtt's ``now`` functions. It does not
      affect the standard library's time functions or any other libraries.

    Example
    -------

    >>> from dtt import DateTime, patch_current_time
    >>> d = DateTime(1980, 3, 2, hour=2)
    >>> with patch_current_time(d, keep_ticking=False) as p:
    ...     assert DateTime.now() == d
    ...     p.shift(hours=4)
    ...     assert DateTime.now() == d.add(hours=4)
    ...
    >>> assert DateTime.now() != d
    """
    if keep_ticking:
        _patch_time_keep_ticking(dt)
    else:
        _patch_time_frozen(dt)

    try:
        yield _TimePatch(dt, keep_ticking)
    finally:
        _unpatch_time()


# Shorthands for the most common operations


def now(tz: str | UtcOffset = "UTC", /) -> DateTime:
    """The current time in the given timezone. See :meth:`DateTime.now`."""
    return DateTime.now(tz)


def parse(s: str, /, pattern: str | None = None) -> DateTime:
    """Parse a common ISO 8601 string, or a string in a custom pattern.

    Example
    -------
    >>> parse("2024-01-01T00:00:00Z")
    DateTime(2024-01-01 00:00:00Z)
    >>> parse("01/02/2024", "[day]/[month]/[year]")
    DateTime(2024-02-01 00:00:00Z)
    """
    if pattern is None:
        return DateTime.parse_common_iso(s)
    return DateTime.parse_custom_format(s, pattern)


def format_datetime(d: DateTime, /, pattern: str | None = None) -> str:
    """Format as RFC 3339, or according to a custom pattern.
    The inverse of :func:`parse`.
    """
    if pattern is None:
        return d.format_rfc3339()
    return d.format(pattern)


def add_days(d: DateTime, days: int, /) -> DateTime:
    return d.add_days(days)


def diff_days(a: DateTime, b: DateTime, /) -> int:
    """The number of whole days elapsed from ``a`` to ``b``.
    Negative if ``b`` is earlier. Partial days are truncated toward zero.

    Example
    -------
    >>> diff_days(DateTime(2024, 1, 1), DateTime(2024, 3, 1, 12))
    60
    >>> diff_days(DateTime(2024, 1, 2), DateTime(2024, 1, 1, 1))
    0
    """
    delta = b.duration_since(a)
    days = abs(delta) // _timedelta(days=1)
    return -days if delta < _timedelta(0) else days

