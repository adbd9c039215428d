from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Dict, List, Optional

from domain.models import (
    HOURS_PER_DAY,
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
    BlockKind,
    ScheduleDisplayConfig,
    TimedEvent,
)
from domain.services.intervals import clock_to_minutes


@dataclass(frozen=True)
class LeadSpan:
    kind: BlockKind
    start: int  # minutes from the event day's midnight, negative when it began the day before
    end: int
    minutes: int


def visual_row_map(start_hour: int, end_hour: int, label_hours: Iterable[int]) -> Dict[int, int]:
    captions = set(label_hours)
    mapping: Dict[int, int] = {}
    row = 0
    for hour in range(start_hour, end_hour):
        if hour not in captions:
            mapping[hour] = row
        row += 1
    mapping[end_hour] = row
    if end_hour == HOURS_PER_DAY and start_hour > 0:
        mapping[0] = row
    return mapping


def visual_row_for_hour(hour: int, config: ScheduleDisplayConfig) -> Optional[float]:
    start, end = config.schedule_start_hour, config.schedule_end_hour
    mapping = visual_row_map(start, end, config.label_hours)
    if hour in mapping:
        return float(mapping[hour])
    if hour not in config.label_hours or not start <= hour < end:
        return None

    # A caption hour has no numeric row of its own: interpolate between neighbours.
    before = next((h for h in range(hour - 1, start - 1, -1) if h in mapping), None)
    after = next((h for h in range(hour + 1, end + 1) if h in mapping), None)
    if before is None or after is None:
        return float(hour - start)
    fraction = (hour - before) / (after - before)
    return mapping[before] + (mapping[after] - mapping[before]) * fraction


def visual_row_count(config: ScheduleDisplayConfig) -> int:
    hours = config.schedule_end_hour - config.schedule_start_hour
    return hours if config.use_24_hour_mode else hours + 1


def grid_height(config: ScheduleDisplayConfig) -> float:
    return visual_row_count(config) * config.pixels_per_hour


def minutes_to_position(minutes: int, config: ScheduleDisplayConfig) -> Optional[float]:
    hour, minute = divmod(minutes, MINUTES_PER_HOUR)
    if not config.schedule_start_hour <= hour < config.schedule_end_hour:
        return None
    pixels = config.pixels_per_hour
    if config.use_24_hour_mode:
        return (hour - config.schedule_start_hour) * pixels + (minute / MINUTES_PER_HOUR) * pixels
    row = visual_row_for_hour(hour, config)
    if row is None:
        return None
    return row * pixels + (minute / MINUTES_PER_HOUR) * pixels


def time_to_position(time_string: object, config: ScheduleDisplayConfig) -> Optional[float]:
    minutes = clock_to_minutes(time_string)
    if minutes is None:
        return None
    return minutes_to_position(minutes, config)


def minutes_to_height(start: int, end: int, config: ScheduleDisplayConfig) -> float:
    window_start, window_end = config.window_start_minutes, config.window_end_minutes
    if end <= window_start or start >= window_end:
        return 0.0
    visible = min(end, window_end) - max(start, window_start)
    return max(0, visible) * config.pixels_per_minute


def duration_to_height(start_time: object, end_time: object, config: ScheduleDisplayConfig) -> float:
    start = clock_to_minutes(start_time)
    end = clock_to_minutes(end_time)
    if start is None or end is None or start == end or start % MINUTES_PER_DAY == end:
        return 0.0
    start %= MINUTES_PER_DAY
    if end < start:
        end += MINUTES_PER_DAY
    return minutes_to_height(start, end, config)


def clamped_top(start: int, config: ScheduleDisplayConfig) -> Optional[float]:
    return minutes_to_position(max(start, config.window_start_minutes), config)


def lead_time_spans(item: TimedEvent) -> List[LeadSpan]:
    start = item.interval.start
    preparation = item.event.preparation_time
    travel = item.event.travel_time
    spans: List[LeadSpan] = []
    if travel > 0:
        spans.append(
            LeadSpan(BlockKind.TRAVEL, start - preparation - travel, start - preparation, travel)
        )
    if preparation > 0:
        spans.append(LeadSpan(BlockKind.PREPARATION, start - preparation, start, preparation))
    return spans
