from __future__ import annotations

import math
from datetime import datetime, time
from typing import List, Optional, Union

from domain.models import (
    HOURS_PER_DAY,
    MINUTES_PER_HOUR,
    PERIOD_CAPTIONS,
    HourLabel,
    PeriodBand,
    ScheduleDisplayConfig,
)
from domain.services.projection import minutes_to_position, visual_row_count

HEADER_OFFSET = 160
MIN_PIXELS_PER_HOUR = 40
MAX_PIXELS_PER_HOUR = 120
NIGHT_START_HOUR = 23
NIGHT_BAND = "night"


def _clock_label(hour: int) -> str:
    return f"{hour % HOURS_PER_DAY:02d}:00"


def _caption(hour: int) -> str:
    return PERIOD_CAPTIONS.get(hour, _clock_label(hour))


def _caption_hours(config: ScheduleDisplayConfig) -> List[int]:
    return [
        hour
        for hour in config.label_hours
        if config.schedule_start_hour <= hour < config.schedule_end_hour
    ]


def hour_labels(config: ScheduleDisplayConfig) -> List[HourLabel]:
    start, end = config.schedule_start_hour, config.schedule_end_hour
    if config.use_24_hour_mode:
        return [HourLabel(label=_clock_label(hour), row=row) for row, hour in enumerate(range(start, end))]

    captions = set(_caption_hours(config))
    labels: List[HourLabel] = []
    for row, hour in enumerate(range(start, end + 1)):
        if hour in captions:
            labels.append(HourLabel(label=_caption(hour), row=row, is_caption=True))
        else:
            labels.append(HourLabel(label=_clock_label(hour), row=row))
    return labels


def period_bands(config: ScheduleDisplayConfig) -> List[PeriodBand]:
    """Background bands behind the label-row grid.

    The first band starts at the top of the window; each later band starts on
    the row right after its caption. A night band runs from the 23:00 row to
    the final row when the window reaches past 23:00.
    """
    if config.use_24_hour_mode:
        return []
    captions = _caption_hours(config)
    if not captions:
        return []

    start = config.schedule_start_hour
    names = [_caption(hour).lower() for hour in captions]
    starts = [0] + [hour - start + 1 for hour in captions[1:]]
    night_row = NIGHT_START_HOUR - start
    if start < NIGHT_START_HOUR < config.schedule_end_hour and night_row > starts[-1]:
        names.append(NIGHT_BAND)
        starts.append(night_row)
    ends = starts[1:] + [visual_row_count(config) - 1]
    pixels = config.pixels_per_hour
    return [
        PeriodBand(
            name=name,
            top=first_row * pixels,
            height=(last_row - first_row) * pixels,
        )
        for name, first_row, last_row in zip(names, starts, ends)
    ]


def current_time_position(
    now: Union[datetime, time], config: ScheduleDisplayConfig
) -> Optional[float]:
    return minutes_to_position(now.hour * MINUTES_PER_HOUR + now.minute, config)


def pixels_per_hour_for_viewport(
    viewport_height: float,
    config: ScheduleDisplayConfig,
    header_offset: float = HEADER_OFFSET,
    minimum: int = MIN_PIXELS_PER_HOUR,
    maximum: int = MAX_PIXELS_PER_HOUR,
) -> int:
    available = viewport_height - header_offset
    calculated = math.floor(available / visual_row_count(config))
    return max(minimum, min(maximum, calculated))
