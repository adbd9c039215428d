from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Callable, Dict, List, Set

from domain.models import TimedEvent
from domain.services.intervals import intervals_overlap

GROUPING_FIRST_MATCH = "first-match"
GROUPING_CONNECTED = "connected"
GROUPING_STRATEGIES = (GROUPING_FIRST_MATCH, GROUPING_CONNECTED)


def items_overlap(first: TimedEvent, second: TimedEvent) -> bool:
    if first.instant or second.instant:
        return False
    return intervals_overlap(first.interval, second.interval)


def layout_order(items: Iterable[TimedEvent]) -> List[TimedEvent]:
    # Longer events first on equal starts so they anchor the group.
    return sorted(items, key=lambda item: (item.interval.start, -item.interval.duration, item.order))


def group_by_overlap(items: Iterable[TimedEvent]) -> List[List[TimedEvent]]:
    """Single-linkage clustering in layout order.

    Each event joins the first existing group holding a member it overlaps,
    otherwise it opens a new group. Members of a group are transitively
    linked, not necessarily pairwise overlapping.
    """
    groups: List[List[TimedEvent]] = []
    for item in layout_order(items):
        for group in groups:
            if any(items_overlap(member, item) for member in group):
                group.append(item)
                break
        else:
            groups.append([item])
    return groups


def connected_overlap_groups(items: Iterable[TimedEvent]) -> List[List[TimedEvent]]:
    ordered = layout_order(items)
    neighbours: Dict[int, Set[int]] = {idx: set() for idx in range(len(ordered))}
    for left in range(len(ordered)):
        for right in range(left + 1, len(ordered)):
            if items_overlap(ordered[left], ordered[right]):
                neighbours[left].add(right)
                neighbours[right].add(left)

    groups: List[List[TimedEvent]] = []
    visited: Set[int] = set()
    for start in range(len(ordered)):
        if start in visited:
            continue
        component: Set[int] = set()
        stack = [start]
        while stack:
            node = stack.pop()
            if node in component:
                continue
            component.add(node)
            stack.extend(neighbours[node] - component)
        visited |= component
        groups.append([ordered[idx] for idx in sorted(component)])
    return groups


def grouping_strategy(name: str) -> Callable[[Sequence[TimedEvent]], List[List[TimedEvent]]]:
    if name == GROUPING_FIRST_MATCH:
        return group_by_overlap
    if name == GROUPING_CONNECTED:
        return connected_overlap_groups
    msg = f"Unknown grouping strategy: {name!r} (expected one of {', '.join(GROUPING_STRATEGIES)})"
    raise ValueError(msg)
