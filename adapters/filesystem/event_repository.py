from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Tuple

from pydantic import ValidationError

from adapters.filesystem.json_utils import load_json
from domain.models import ScheduleEvent
from domain.ports.repositories import EventRepository

logger = logging.getLogger(__name__)


class FileSystemEventRepository(EventRepository):
    def load(self, path: Path) -> List[ScheduleEvent]:
        events, _ = self.load_with_errors(path)
        return events

    def load_with_errors(self, path: Path) -> Tuple[List[ScheduleEvent], List[Tuple[int, str]]]:
        events: List[ScheduleEvent] = []
        rejected: List[Tuple[int, str]] = []
        for index, record in enumerate(self._records(path)):
            try:
                events.append(ScheduleEvent.model_validate(record))
            except ValidationError as exc:
                message = "; ".join(
                    f"{'.'.join(str(part) for part in error['loc']) or 'record'}: {error['msg']}"
                    for error in exc.errors()
                )
                logger.warning("Skipping event record #%d in %s: %s", index, path, message)
                rejected.append((index, message))
        return events, rejected

    def _records(self, path: Path) -> List[Any]:
        payload = load_json(path)
        if isinstance(payload, dict):
            payload = payload.get("events", [])
        if not isinstance(payload, list):
            msg = f"Expected a list of events or an object with an 'events' list in {path}"
            raise ValueError(msg)
        return payload
