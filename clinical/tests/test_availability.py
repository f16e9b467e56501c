from datetime import datetime
from types import SimpleNamespace

import pytest

from clinical.services.availability import (
    count_on_shift,
    day_of_week,
    filter_on_shift,
    is_enabled,
    is_on_shift_now,
    is_valid_hhmm,
    relevant_days,
    window_is_active,
)

# 2024-01-01 is a Monday
MON = datetime(2024, 1, 1)
TUE = datetime(2024, 1, 2)
WED = datetime(2024, 1, 3)
THU = datetime(2024, 1, 4)
SAT = datetime(2024, 1, 6)
SUN = datetime(2024, 1, 7)

MONDAY = 1
WEDNESDAY = 3


def at(day: datetime, hour: int, minute: int = 0) -> datetime:
    return day.replace(hour=hour, minute=minute)


def avail(day, start, end, available=True):
    return {'dayOfWeek': day, 'startTime': start, 'endTime': end, 'isAvailable': available}


def test_day_of_week_counts_from_sunday():
    assert day_of_week(SUN) == 0
    assert day_of_week(MON) == 1
    assert day_of_week(SAT) == 6


def test_relevant_days_wrap_at_sunday():
    assert relevant_days(at(MON, 10)) == (1, 0)
    assert relevant_days(at(SUN, 10)) == (0, 6)


@pytest.mark.parametrize('value,ok', [
    ('00:00', True), ('09:05', True), ('23:59', True),
    ('9:00', False), ('24:00', False), ('12:60', False), ('', False), (None, False), (900, False),
])
def test_is_valid_hhmm(value, ok):
    assert is_valid_hhmm(value) is ok


@pytest.mark.parametrize('now,expected', [
    (at(MON, 22, 30), True),
    (at(MON, 21, 0), True),
    (at(MON, 20, 59), False),
    (at(TUE, 2, 0), True),
    (at(TUE, 5, 0), True),
    (at(TUE, 5, 1), False),
    (at(TUE, 10, 0), False),
    (at(WED, 2, 0), False),
])
def test_overnight_window(now, expected):
    windows = [avail(MONDAY, '21:00', '05:00')]
    assert is_on_shift_now(windows, now) is expected


@pytest.mark.parametrize('now,expected', [
    (at(WED, 8, 59), False),
    (at(WED, 9, 0), True),
    (at(WED, 12, 0), True),
    (at(WED, 17, 0), True),
    (at(WED, 17, 1), False),
    (at(THU, 12, 0), False),
])
def test_same_day_window_bounds_are_inclusive(now, expected):
    windows = [avail(WEDNESDAY, '09:00', '17:00')]
    assert is_on_shift_now(windows, now) is expected


def test_saturday_night_runs_into_sunday():
    windows = [avail(6, '22:00', '06:00')]
    assert is_on_shift_now(windows, at(SAT, 23, 0))
    assert is_on_shift_now(windows, at(SUN, 3, 0))
    assert not is_on_shift_now(windows, at(MON, 3, 0))


def test_disabled_window_never_counts():
    windows = [avail(WEDNESDAY, '09:00', '17:00', available=False)]
    assert window_is_active(windows[0], at(WED, 12, 0))
    assert not is_on_shift_now(windows, at(WED, 12, 0))


def test_shift_status_controls_enabled_flag():
    active = SimpleNamespace(day_of_week=WEDNESDAY, start_time='09:00', end_time='17:00', status='ACTIVE')
    inactive = SimpleNamespace(day_of_week=WEDNESDAY, start_time='09:00', end_time='17:00', status='INACTIVE')
    assert is_enabled(active)
    assert not is_enabled(inactive)
    assert is_on_shift_now([inactive, active], at(WED, 10, 0))
    assert not is_on_shift_now([inactive], at(WED, 10, 0))


def test_model_style_attributes_are_read():
    window = SimpleNamespace(day_of_week=MONDAY, start_time='21:00', end_time='05:00', is_available=True)
    assert is_on_shift_now([window], at(TUE, 4, 0))


@pytest.mark.parametrize('window', [
    avail(7, '09:00', '17:00'),
    avail(-1, '09:00', '17:00'),
    avail('3', '09:00', '17:00'),
    avail(True, '09:00', '17:00'),
    avail(WEDNESDAY, '9:00', '17:00'),
    avail(WEDNESDAY, '09:00', None),
    avail(WEDNESDAY, 'noon', '17:00'),
    {'startTime': '09:00', 'endTime': '17:00', 'isAvailable': True},
    {},
])
def test_malformed_windows_never_match(window):
    assert not window_is_active(window, at(WED, 12, 0))
    assert is_on_shift_now([window], at(WED, 12, 0)) is False


def test_empty_or_missing_windows():
    assert is_on_shift_now([], at(WED, 12, 0)) is False
    assert is_on_shift_now(None, at(WED, 12, 0)) is False


def test_start_equal_to_end_matches_only_that_minute():
    windows = [avail(WEDNESDAY, '12:00', '12:00')]
    assert is_on_shift_now(windows, at(WED, 12, 0))
    assert not is_on_shift_now(windows, at(WED, 12, 1))


def test_seconds_do_not_push_past_end_minute():
    windows = [avail(WEDNESDAY, '09:00', '17:00')]
    assert is_on_shift_now(windows, datetime(2024, 1, 3, 17, 0, 59))


def test_filter_and_count_on_shift():
    staff = {
        'night': [avail(MONDAY, '21:00', '05:00')],
        'day': [avail(MONDAY, '09:00', '17:00')],
        'off': [avail(MONDAY, '21:00', '05:00', available=False)],
        'none': [],
    }
    now = at(TUE, 1, 0)
    assert filter_on_shift(list(staff), staff.get, now) == ['night']
    assert count_on_shift(list(staff), staff.get, now) == 1
    assert count_on_shift(list(staff), staff.get, at(MON, 10, 0)) == 1
