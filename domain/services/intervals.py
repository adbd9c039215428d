from __future__ import annotations

from typing import Optional

from domain.models import (
    HOURS_PER_DAY,
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
    ClockTime,
    Interval,
    ScheduleEvent,
)


def parse_clock(value: object) -> Optional[ClockTime]:
    """Parse an ``HH:MM`` wall-clock string.

    Returns ``None`` for anything that is not a valid 24-hour time. ``24:00`` is
    accepted as midnight at the end of the day; every other hour must be 0-23.
    """
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) != 2:
        return None
    hour_text, minute_text = parts
    if not (hour_text.isascii() and hour_text.isdigit()):
        return None
    if not (minute_text.isascii() and minute_text.isdigit()):
        return None
    if len(hour_text) > 2 or len(minute_text) != 2:
        return None
    hours, minutes = int(hour_text), int(minute_text)
    if minutes >= MINUTES_PER_HOUR:
        return None
    if hours == HOURS_PER_DAY and minutes == 0:
        return ClockTime(hours, minutes)
    if hours >= HOURS_PER_DAY:
        return None
    return ClockTime(hours, minutes)


def clock_to_minutes(value: object) -> Optional[int]:
    clock = parse_clock(value)
    return None if clock is None else clock.total_minutes


def to_interval(event: ScheduleEvent) -> Optional[Interval]:
    start = clock_to_minutes(event.start_time)
    end = clock_to_minutes(event.end_time)
    if start is None or end is None:
        return None
    # A 24:00 start is midnight of the same day.
    start %= MINUTES_PER_DAY
    # An end not strictly after the start crosses midnight exactly once.
    if end <= start:
        end += MINUTES_PER_DAY
    return Interval(start=start, end=end)


def is_zero_duration(event: ScheduleEvent) -> bool:
    start = clock_to_minutes(event.start_time)
    end = clock_to_minutes(event.end_time)
    if start is None or end is None:
        return False
    return start == end or start % MINUTES_PER_DAY == end


def intervals_overlap(first: Interval, second: Interval) -> bool:
    return first.start < second.end and second.start < first.end
