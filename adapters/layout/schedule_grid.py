from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from domain.models import (
    SINGLE_COLUMN,
    BlockKind,
    BlockPlacement,
    ColumnAssignment,
    ScheduleDisplayConfig,
    ScheduleEvent,
    SchedulePlan,
    TimedEvent,
)
from domain.ports.layout import ScheduleLayoutEngine
from domain.services.column_assignment import resolve_columns
from domain.services.intervals import is_zero_duration, to_interval
from domain.services.overlap_groups import GROUPING_FIRST_MATCH, grouping_strategy
from domain.services.projection import (
    clamped_top,
    grid_height,
    lead_time_spans,
    minutes_to_height,
    minutes_to_position,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutOptions:
    grouping: str = GROUPING_FIRST_MATCH

    def __post_init__(self) -> None:
        grouping_strategy(self.grouping)


class ScheduleGridLayoutEngine(ScheduleLayoutEngine):
    def __init__(self, options: LayoutOptions | None = None) -> None:
        self.options = options or LayoutOptions()

    def build_plan(
        self, events: Sequence[ScheduleEvent], config: ScheduleDisplayConfig
    ) -> SchedulePlan:
        timed, skipped = self._collect(events)
        columns = resolve_columns([item for item in timed if not item.instant], self.options.grouping)
        columns.extend((item, SINGLE_COLUMN) for item in timed if item.instant)

        blocks: List[BlockPlacement] = []
        for item, assignment in sorted(columns, key=lambda pair: pair[0].interval.start):
            placements = self._place_event(item, assignment, config)
            if not placements:
                logger.debug(
                    "Event %s (%s-%s) is outside the visible window %02d:00-%02d:00",
                    item.event_id,
                    item.event.start_time,
                    item.event.end_time,
                    config.schedule_start_hour,
                    config.schedule_end_hour,
                )
                skipped.append((item.order, item.event_id))
                continue
            blocks.extend(placements)

        return SchedulePlan(
            blocks=blocks,
            skipped=[event_id for _, event_id in sorted(skipped)],
            grid_height=grid_height(config),
        )

    def build_day_plans(
        self, events: Sequence[ScheduleEvent], config: ScheduleDisplayConfig
    ) -> Dict[Optional[str], SchedulePlan]:
        by_day: Dict[Optional[str], List[ScheduleEvent]] = {}
        for event in events:
            by_day.setdefault(event.day, []).append(event)
        return {
            day: self.build_plan(by_day[day], config)
            for day in sorted(by_day, key=lambda value: value or "")
        }

    def _collect(
        self, events: Sequence[ScheduleEvent]
    ) -> Tuple[List[TimedEvent], List[Tuple[int, str]]]:
        timed: List[TimedEvent] = []
        skipped: List[Tuple[int, str]] = []
        for order, event in enumerate(events):
            interval = to_interval(event)
            if interval is None:
                logger.warning(
                    "Skipping event %s: invalid time range %r-%r",
                    event.id,
                    event.start_time,
                    event.end_time,
                )
                skipped.append((order, event.id))
                continue
            timed.append(
                TimedEvent(
                    event=event,
                    interval=interval,
                    order=order,
                    instant=is_zero_duration(event),
                )
            )
        return timed, skipped

    def _place_event(
        self, item: TimedEvent, assignment: ColumnAssignment, config: ScheduleDisplayConfig
    ) -> List[BlockPlacement]:
        interval = item.interval
        if item.instant:
            top = minutes_to_position(interval.start, config)
            height = 0.0
        else:
            height = minutes_to_height(interval.start, interval.end, config)
            top = clamped_top(interval.start, config) if height > 0 else None
        if top is None:
            return []

        placements: List[BlockPlacement] = []
        for span in lead_time_spans(item):
            lead_height = minutes_to_height(span.start, span.end, config)
            lead_top = clamped_top(span.start, config)
            if lead_height <= 0 or lead_top is None:
                continue
            suffix = "prep" if span.kind is BlockKind.PREPARATION else "travel"
            placements.append(
                self._block(item, assignment, span.kind, lead_top, lead_height, f"{span.minutes}m {suffix}")
            )

        label = f"{(item.event.start_time or '').strip()}–{(item.event.end_time or '').strip()}"
        placements.append(self._block(item, assignment, BlockKind.EVENT, top, height, label))
        return placements

    def _block(
        self,
        item: TimedEvent,
        assignment: ColumnAssignment,
        kind: BlockKind,
        top: float,
        height: float,
        label: str,
    ) -> BlockPlacement:
        return BlockPlacement(
            event_id=item.event_id,
            kind=kind,
            top=top,
            height=height,
            left=assignment.left,
            width=assignment.width,
            column_index=assignment.column_index,
            column_count=assignment.column_count,
            event_type=item.event.type,
            label=label,
        )
