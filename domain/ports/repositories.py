from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import ScheduleEvent


class EventRepository(Protocol):
    def load(self, path: Path) -> Sequence[ScheduleEvent]: ...

    def load_with_errors(
        self, path: Path
    ) -> tuple[Sequence[ScheduleEvent], Sequence[tuple[int, str]]]: ...
