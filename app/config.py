from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from typing import Annotated, ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import DEFAULT_LABEL_HOURS, DEFAULT_PIXELS_PER_HOUR, ScheduleDisplayConfig
from domain.services.grid import pixels_per_hour_for_viewport
from domain.services.overlap_groups import GROUPING_FIRST_MATCH, GROUPING_STRATEGIES

DEFAULT_CONFIG_PATH = Path("config/schedule.yaml")


def _split_string_list_value(raw_value: str) -> list[str]:
    raw = raw_value.strip()
    if not raw:
        return []
    if (
        (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'"))
    ) and len(raw) >= 2:
        raw = raw[1:-1].strip()
    if raw.startswith("[") and raw.endswith("]"):
        raw = raw[1:-1].strip()
    if not raw:
        return []
    return [
        token for token in (part.strip().strip("'").strip('"') for part in raw.split(",")) if token
    ]


class ScheduleSettings(BaseModel):
    use_24_hour_mode: bool = False
    # None falls back to the mode's window: 00-24 in 24-hour mode, 07-24 otherwise.
    start_hour: int | None = None
    end_hour: int | None = None
    pixels_per_hour: float | None = None
    viewport_height: int | None = None
    label_hours: Annotated[list[int], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_LABEL_HOURS)
    )
    grouping: str = GROUPING_FIRST_MATCH

    @field_validator("label_hours", mode="before")
    @classmethod
    def normalize_label_hours(cls, value: object) -> list[object]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            normalized: list[object] = []
            for item in value:
                if isinstance(item, str):
                    normalized.extend(_split_string_list_value(item))
                else:
                    normalized.append(item)
            return normalized
        if isinstance(value, str):
            return list(_split_string_list_value(value))
        return [value]

    @field_validator("grouping", mode="before")
    @classmethod
    def normalize_grouping(cls, value: object) -> str:
        grouping = str(value).strip().lower() if value else GROUPING_FIRST_MATCH
        if grouping not in GROUPING_STRATEGIES:
            msg = f"schedule.grouping must be one of: {', '.join(GROUPING_STRATEGIES)}"
            raise ValueError(msg)
        return grouping

    def to_display_config(self) -> ScheduleDisplayConfig:
        config = ScheduleDisplayConfig.for_mode(self.use_24_hour_mode)
        config = replace(
            config,
            schedule_start_hour=(
                config.schedule_start_hour if self.start_hour is None else self.start_hour
            ),
            schedule_end_hour=config.schedule_end_hour if self.end_hour is None else self.end_hour,
            label_hours=tuple(self.label_hours),
        )
        if self.pixels_per_hour is not None:
            pixels = self.pixels_per_hour
        elif self.viewport_height is not None:
            pixels = pixels_per_hour_for_viewport(self.viewport_height, config)
        else:
            pixels = DEFAULT_PIXELS_PER_HOUR
        return replace(config, pixels_per_hour=pixels)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AURORAE_", env_nested_delimiter="__")

    schedule: ScheduleSettings = ScheduleSettings()
    log_level: str = "WARNING"

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        return str(value).upper() if value else "WARNING"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("AURORAE_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
