"""
On-shift evaluation for weekly staff windows.

A window is ``{day_of_week, start_time, end_time}`` plus an enabled flag
(``is_available`` on doctor availability, ``status == 'ACTIVE'`` on
shifts).  ``day_of_week`` is 0=Sunday..6=Saturday and times are zero
padded ``HH:mm`` strings, so plain string comparison orders them.

A window whose end is earlier than its start crosses midnight: Monday
21:00-05:00 is active late Monday and early Tuesday.  Rather than
storing two rows, every window is checked against both today and
yesterday.

The instant is read on its own wall clock.  There is no timezone
parameter: callers pass a local datetime, or nothing to use
``timezone.localtime()``.

Every function here is pure and never raises on malformed windows; a
window that cannot be read simply does not match.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, TypeVar

from django.utils import timezone

ACTIVE_STATUS = 'ACTIVE'

_HHMM = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')

T = TypeVar('T')


def _field(window: Any, *names: str) -> Any:
    for name in names:
        if isinstance(window, dict):
            if name in window:
                return window[name]
        elif hasattr(window, name):
            return getattr(window, name)
    return None


def is_valid_hhmm(value: Any) -> bool:
    return isinstance(value, str) and bool(_HHMM.match(value))


def day_of_week(now: datetime) -> int:
    """Return the 0=Sunday based weekday of ``now``."""
    return (now.weekday() + 1) % 7


def is_enabled(window: Any) -> bool:
    available = _field(window, 'is_available', 'isAvailable')
    if available is not None:
        return bool(available)
    return _field(window, 'status') == ACTIVE_STATUS


def window_is_active(window: Any, now: datetime) -> bool:
    """Return True if ``window`` covers the wall-clock time of ``now``.

    The enabled flag is not considered here, see :func:`is_on_shift_now`.
    """
    day = _field(window, 'day_of_week', 'dayOfWeek')
    start = _field(window, 'start_time', 'startTime')
    end = _field(window, 'end_time', 'endTime')
    if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
        return False
    if not (is_valid_hhmm(start) and is_valid_hhmm(end)):
        return False

    current_day = day_of_week(now)
    previous_day = (current_day + 6) % 7
    current_time = now.strftime('%H:%M')

    if end < start:
        if day == current_day:
            return current_time >= start
        if day == previous_day:
            return current_time <= end
        return False
    return day == current_day and start <= current_time <= end


def is_on_shift_now(windows: Iterable[Any], now: Optional[datetime] = None) -> bool:
    """Return True if any enabled window is active at ``now``."""
    now = now or timezone.localtime()
    return any(is_enabled(w) and window_is_active(w, now) for w in windows or ())


def relevant_days(now: Optional[datetime] = None) -> tuple[int, int]:
    """Days whose windows can be active at ``now``: today and yesterday."""
    now = now or timezone.localtime()
    current_day = day_of_week(now)
    return current_day, (current_day + 6) % 7


def filter_on_shift(owners: Iterable[T], windows_of: Callable[[T], Iterable[Any]],
                    now: Optional[datetime] = None) -> list[T]:
    now = now or timezone.localtime()
    return [o for o in owners if is_on_shift_now(windows_of(o), now)]


def count_on_shift(owners: Iterable[T], windows_of: Callable[[T], Iterable[Any]],
                   now: Optional[datetime] = None) -> int:
    return len(filter_on_shift(owners, windows_of, now))
