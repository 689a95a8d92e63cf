"""Resolve user-supplied day/hour bounds into a UTC time window."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .errors import ConflictingTimeSpec, InvalidRange, InvalidTimeFormat

DAY_FORMAT = "%Y-%m-%d"
HOUR_FORMAT = "%H:%M:%S"


@dataclass(frozen=True)
class TimeWindow:
    """Half-open UTC interval [start, end)."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise InvalidRange(f"naive bounds {self.start.isoformat()} .. {self.end.isoformat()}, expected UTC")
        if self.end < self.start:
            raise InvalidRange(f"end {self.end.isoformat()} is before start {self.start.isoformat()}")

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def __str__(self) -> str:
        return f"[{_iso(self.start)}, {_iso(self.end)})"


def _iso(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


def _parse(value: str, fmt: str, kind: str) -> datetime:
    try:
        parsed = datetime.strptime(value, fmt)
    except ValueError:
        raise InvalidTimeFormat(f"{kind} {value!r}, expected {fmt}") from None
    # strptime also takes unpadded fields such as 2024-1-1
    if parsed.strftime(fmt) != value:
        raise InvalidTimeFormat(f"{kind} {value!r}, expected {fmt}")
    return parsed


def _parse_day(value: str) -> datetime:
    return _parse(value, DAY_FORMAT, "day").replace(tzinfo=timezone.utc)


def _at_hour(today: datetime, value: str) -> datetime:
    t = _parse(value, HOUR_FORMAT, "hour").time()
    return datetime.combine(today.date(), t, tzinfo=timezone.utc)


def resolve_time_window(
    from_day: str | None = None,
    to_day: str | None = None,
    from_hour: str | None = None,
    to_hour: str | None = None,
    now: datetime | None = None,
) -> TimeWindow:
    """Build the diff window.

    Hour style uses the current UTC day and defaults to one hour.
    Day style ends at to_day (or now) and defaults to the preceding 24 hours.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        raise InvalidRange(f"naive now {now.isoformat()}, expected UTC")
    now = now.astimezone(timezone.utc)

    hour_style = from_hour is not None or to_hour is not None
    day_style = from_day is not None or to_day is not None
    if hour_style and day_style:
        raise ConflictingTimeSpec(
            f"from_day={from_day!r} to_day={to_day!r} from_hour={from_hour!r} to_hour={to_hour!r}"
        )

    if hour_style:
        if from_hour is None:
            raise InvalidRange(f"to_hour={to_hour!r} given without from_hour")
        start = _at_hour(now, from_hour)
        end = _at_hour(now, to_hour) if to_hour is not None else start + timedelta(hours=1)
        return TimeWindow(start, end)

    end = _parse_day(to_day) if to_day is not None else now
    start = _parse_day(from_day) if from_day is not None else end - timedelta(days=1)
    return TimeWindow(start, end)
