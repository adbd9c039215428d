from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 24
MINUTES_PER_DAY = MINUTES_PER_HOUR * HOURS_PER_DAY

SCHEDULE_START_HOUR = 7
# Exclusive end of day: 24 means 00:00 of the next day.
SCHEDULE_END_HOUR = 24
DEFAULT_PIXELS_PER_HOUR = 80.0
DEFAULT_LABEL_HOURS: Tuple[int, ...] = (8, 12, 18)
PERIOD_CAPTIONS: Dict[int, str] = {8: "Morning", 12: "Afternoon", 18: "Evening"}


class ScheduleEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    type: str = "task"
    title: str = ""
    preparation_time: int = Field(default=0, alias="preparationTime")
    travel_time: int = Field(default=0, alias="travelTime")
    day: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: object) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            msg = "Event id must not be empty"
            raise ValueError(msg)
        return str(value)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def keep_text_times(cls, value: object) -> Optional[str]:
        # Malformed times are judged by the interval model, not rejected here.
        return value if isinstance(value, str) else None

    @field_validator("preparation_time", "travel_time", mode="before")
    @classmethod
    def default_missing_lead_time(cls, value: object) -> object:
        if value is None or value == "":
            return 0
        return value

    @field_validator("preparation_time", "travel_time", mode="after")
    @classmethod
    def clamp_lead_time(cls, value: int) -> int:
        return max(0, value)


@dataclass(frozen=True)
class ScheduleDisplayConfig:
    schedule_start_hour: int = SCHEDULE_START_HOUR
    schedule_end_hour: int = SCHEDULE_END_HOUR
    use_24_hour_mode: bool = False
    pixels_per_hour: float = DEFAULT_PIXELS_PER_HOUR
    label_hours: Tuple[int, ...] = DEFAULT_LABEL_HOURS

    def __post_init__(self) -> None:
        if not 0 <= self.schedule_start_hour < HOURS_PER_DAY:
            msg = f"schedule_start_hour must be within 0-23, got {self.schedule_start_hour}"
            raise ValueError(msg)
        if not 0 < self.schedule_end_hour <= HOURS_PER_DAY:
            msg = f"schedule_end_hour must be within 1-24, got {self.schedule_end_hour}"
            raise ValueError(msg)
        if self.schedule_end_hour <= self.schedule_start_hour:
            msg = (
                f"schedule_end_hour ({self.schedule_end_hour}) must be after "
                f"schedule_start_hour ({self.schedule_start_hour})"
            )
            raise ValueError(msg)
        pixels = float(self.pixels_per_hour)
        if not math.isfinite(pixels) or pixels <= 0:
            msg = f"pixels_per_hour must be a positive number, got {self.pixels_per_hour}"
            raise ValueError(msg)
        object.__setattr__(self, "pixels_per_hour", pixels)
        object.__setattr__(self, "label_hours", tuple(sorted({int(h) for h in self.label_hours})))

    @classmethod
    def for_mode(
        cls,
        use_24_hour_mode: bool,
        pixels_per_hour: float = DEFAULT_PIXELS_PER_HOUR,
    ) -> "ScheduleDisplayConfig":
        if use_24_hour_mode:
            return cls(
                schedule_start_hour=0,
                schedule_end_hour=HOURS_PER_DAY,
                use_24_hour_mode=True,
                pixels_per_hour=pixels_per_hour,
            )
        return cls(use_24_hour_mode=False, pixels_per_hour=pixels_per_hour)

    @property
    def window_start_minutes(self) -> int:
        return self.schedule_start_hour * MINUTES_PER_HOUR

    @property
    def window_end_minutes(self) -> int:
        return self.schedule_end_hour * MINUTES_PER_HOUR

    @property
    def pixels_per_minute(self) -> float:
        return self.pixels_per_hour / MINUTES_PER_HOUR


@dataclass(frozen=True)
class ClockTime:
    hours: int
    minutes: int

    @property
    def total_minutes(self) -> int:
        return self.hours * MINUTES_PER_HOUR + self.minutes


@dataclass(frozen=True)
class Interval:
    start: int
    end: int  # adjusted: past MINUTES_PER_DAY for midnight-spanning events

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class TimedEvent:
    event: ScheduleEvent
    interval: Interval
    order: int  # position in the caller's input
    instant: bool = False  # zero-duration: never grouped, rendered with height 0

    @property
    def event_id(self) -> str:
        return self.event.id


@dataclass(frozen=True)
class ColumnAssignment:
    column_index: int
    column_count: int

    @property
    def left(self) -> float:
        return self.column_index * (100 / self.column_count)

    @property
    def width(self) -> float:
        return 100 / self.column_count


SINGLE_COLUMN = ColumnAssignment(column_index=0, column_count=1)


class BlockKind(str, Enum):
    EVENT = "event"
    PREPARATION = "preparation"
    TRAVEL = "travel"


@dataclass(frozen=True)
class BlockPlacement:
    event_id: str
    kind: BlockKind
    top: float
    height: float
    left: float
    width: float
    column_index: int
    column_count: int
    event_type: str
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eventId": self.event_id,
            "kind": self.kind.value,
            "top": self.top,
            "height": self.height,
            "left": self.left,
            "width": self.width,
            "columnIndex": self.column_index,
            "columnCount": self.column_count,
            "type": self.event_type,
            "label": self.label,
        }


@dataclass(frozen=True)
class SchedulePlan:
    blocks: List[BlockPlacement]
    skipped: List[str] = field(default_factory=list)
    grid_height: float = 0.0

    def blocks_for(self, event_id: str) -> List[BlockPlacement]:
        return [block for block in self.blocks if block.event_id == event_id]

    def main_block(self, event_id: str) -> Optional[BlockPlacement]:
        for block in self.blocks:
            if block.event_id == event_id and block.kind is BlockKind.EVENT:
                return block
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gridHeight": self.grid_height,
            "blocks": [block.to_dict() for block in self.blocks],
            "skipped": list(self.skipped),
        }


@dataclass(frozen=True)
class HourLabel:
    label: str
    row: int
    is_caption: bool = False


@dataclass(frozen=True)
class PeriodBand:
    name: str
    top: float
    height: float
