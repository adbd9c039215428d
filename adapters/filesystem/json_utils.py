from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional

import orjson

from domain.models import SchedulePlan


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def plans_payload(plans: Mapping[Optional[str], SchedulePlan]) -> Dict[str, Any]:
    # Events without a day are keyed by the empty string.
    return {day or "": plan.to_dict() for day, plan in plans.items()}


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def write_plans(path: Path, plans: Mapping[Optional[str], SchedulePlan]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(plans_payload(plans)))
    tmp_path.replace(path)
