from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, ScheduleSettings
from domain.models import ScheduleDisplayConfig


def _clear_aurorae_env() -> None:
    for key in list(os.environ):
        if key.startswith("AURORAE_"):
            os.environ.pop(key, None)


_clear_aurorae_env()


@pytest.fixture(autouse=True)
def clear_aurorae_env() -> Generator[None, None, None]:
    _clear_aurorae_env()
    yield
    _clear_aurorae_env()


@pytest.fixture
def label_config() -> ScheduleDisplayConfig:
    return ScheduleDisplayConfig.for_mode(False, pixels_per_hour=60)


@pytest.fixture
def full_day_config() -> ScheduleDisplayConfig:
    return ScheduleDisplayConfig.for_mode(True, pixels_per_hour=60)


@pytest.fixture
def schedule_settings() -> ScheduleSettings:
    return ScheduleSettings(
        use_24_hour_mode=False,
        start_hour=None,
        end_hour=None,
        pixels_per_hour=60,
        viewport_height=None,
        label_hours=[8, 12, 18],
        grouping="first-match",
    )


@pytest.fixture
def app_settings_factory(
    schedule_settings: ScheduleSettings,
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(schedule=schedule_settings.model_copy(update=overrides))

    return _factory
