from __future__ import annotations

from collections.abc import Sequence
from typing import List, Tuple

from domain.models import SINGLE_COLUMN, ColumnAssignment, TimedEvent
from domain.services.overlap_groups import (
    GROUPING_FIRST_MATCH,
    grouping_strategy,
    items_overlap,
    layout_order,
)


def max_overlap_depth(group: Sequence[TimedEvent]) -> int:
    depth = 1
    for first in group:
        count = 1 + sum(
            1 for second in group if second is not first and items_overlap(first, second)
        )
        depth = max(depth, count)
    return depth


def assign_columns(group: Sequence[TimedEvent]) -> List[Tuple[TimedEvent, ColumnAssignment]]:
    if len(group) == 1:
        return [(group[0], SINGLE_COLUMN)]

    column_count = max_overlap_depth(group)
    occupants: List[TimedEvent] = []
    assigned: List[Tuple[TimedEvent, ColumnAssignment]] = []
    for item in layout_order(group):
        column = 0
        while column < len(occupants) and items_overlap(occupants[column], item):
            column += 1
        if column == len(occupants):
            occupants.append(item)
        else:
            occupants[column] = item
        assigned.append((item, ColumnAssignment(column_index=column, column_count=column_count)))
    return assigned


def resolve_columns(
    items: Sequence[TimedEvent], grouping: str = GROUPING_FIRST_MATCH
) -> List[Tuple[TimedEvent, ColumnAssignment]]:
    group_events = grouping_strategy(grouping)
    resolved: List[Tuple[TimedEvent, ColumnAssignment]] = []
    for group in group_events(items):
        resolved.extend(assign_columns(group))
    positions = {id(item): idx for idx, item in enumerate(layout_order(items))}
    return sorted(resolved, key=lambda pair: positions[id(pair[0])])
