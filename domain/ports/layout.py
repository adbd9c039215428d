from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import ScheduleDisplayConfig, ScheduleEvent, SchedulePlan


class ScheduleLayoutEngine(Protocol):
    def build_plan(
        self, events: Sequence[ScheduleEvent], config: ScheduleDisplayConfig
    ) -> SchedulePlan:
        ...
