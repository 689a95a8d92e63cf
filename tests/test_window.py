from datetime import datetime, timedelta, timezone

import pytest

from hub_core.errors import ConflictingTimeSpec, InvalidRange, InvalidTimeFormat
from hub_core.window import TimeWindow, resolve_time_window

NOW = datetime(2024, 5, 6, 12, 30, 15, tzinfo=timezone.utc)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_day_range():
    w = resolve_time_window(from_day="2024-01-01", to_day="2024-01-03", now=NOW)
    assert (w.start, w.end) == (utc(2024, 1, 1), utc(2024, 1, 3))


def test_default_is_last_24_hours():
    w = resolve_time_window(now=NOW)
    assert (w.start, w.end) == (NOW - timedelta(hours=24), NOW)


def test_default_uses_current_time():
    before = datetime.now(timezone.utc)
    w = resolve_time_window()
    after = datetime.now(timezone.utc)
    assert before <= w.end <= after
    assert w.end - w.start == timedelta(days=1)


def test_to_day_only():
    w = resolve_time_window(to_day="2024-01-03", now=NOW)
    assert (w.start, w.end) == (utc(2024, 1, 2), utc(2024, 1, 3))


def test_from_day_only_ends_now():
    w = resolve_time_window(from_day="2024-05-01", now=NOW)
    assert (w.start, w.end) == (utc(2024, 5, 1), NOW)


def test_from_hour_only_is_one_hour():
    w = resolve_time_window(from_hour="10:00:00", now=NOW)
    assert (w.start, w.end) == (utc(2024, 5, 6, 10), utc(2024, 5, 6, 11))


def test_hour_range():
    w = resolve_time_window(from_hour="08:15:00", to_hour="09:45:30", now=NOW)
    assert (w.start, w.end) == (utc(2024, 5, 6, 8, 15), utc(2024, 5, 6, 9, 45, 30))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"from_day": "2024-01-01", "from_hour": "10:00:00"},
        {"to_day": "2024-01-03", "to_hour": "11:00:00"},
        {"from_day": "2024-01-01", "to_day": "2024-01-03", "from_hour": "10:00:00", "to_hour": "11:00:00"},
    ],
)
def test_conflicting_styles(kwargs):
    with pytest.raises(ConflictingTimeSpec):
        resolve_time_window(now=NOW, **kwargs)


@pytest.mark.parametrize(
    "kwargs, bad",
    [
        ({"from_day": "2024/01/01"}, "2024/01/01"),
        ({"to_day": "yesterday"}, "yesterday"),
        ({"from_hour": "10:00"}, "10:00"),
        ({"from_hour": "25:00:00"}, "25:00:00"),
        ({"from_day": "2024-1-1", "to_day": "2024-01-03"}, "2024-1-1"),
        ({"to_day": "2024-01-3"}, "2024-01-3"),
        ({"from_hour": "1:2:3"}, "1:2:3"),
    ],
)
def test_invalid_format_echoes_input(kwargs, bad):
    with pytest.raises(InvalidTimeFormat) as exc:
        resolve_time_window(now=NOW, **kwargs)
    assert bad in str(exc.value)
    assert exc.value.code == "E_TIME_FORMAT"


def test_inverted_days():
    with pytest.raises(InvalidRange):
        resolve_time_window(from_day="2024-01-03", to_day="2024-01-01", now=NOW)


def test_inverted_hours():
    with pytest.raises(InvalidRange):
        resolve_time_window(from_hour="11:00:00", to_hour="10:00:00", now=NOW)


def test_to_hour_without_from_hour():
    with pytest.raises(InvalidRange):
        resolve_time_window(to_hour="11:00:00", now=NOW)


def test_window_is_half_open():
    w = TimeWindow(utc(2024, 1, 1), utc(2024, 1, 2))
    assert w.contains(utc(2024, 1, 1))
    assert w.contains(utc(2024, 1, 1, 23, 59, 59))
    assert not w.contains(utc(2024, 1, 2))
    assert not w.contains(utc(2023, 12, 31, 23, 59, 59))


def test_naive_window_bounds_rejected():
    with pytest.raises(InvalidRange) as exc:
        TimeWindow(datetime(2024, 1, 1), datetime(2024, 1, 2))
    assert exc.value.code == "E_TIME_RANGE"
    with pytest.raises(InvalidRange):
        TimeWindow(utc(2024, 1, 1), datetime(2024, 1, 2))


def test_naive_now_rejected():
    with pytest.raises(InvalidRange):
        resolve_time_window(now=datetime(2024, 5, 6, 12, 30, 15))


def test_non_utc_now_is_converted():
    plus2 = timezone(timedelta(hours=2))
    w = resolve_time_window(now=datetime(2024, 5, 6, 14, 30, 15, tzinfo=plus2))
    assert w.end == NOW
    assert w.end.utcoffset() == timedelta(0)
