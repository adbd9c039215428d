from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config import AppSettings, ScheduleSettings, load_settings
from tests.helpers.event_fixtures import repo_root


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    config = settings.schedule.to_display_config()
    assert settings.log_level == "WARNING"
    assert (config.schedule_start_hour, config.schedule_end_hour) == (7, 24)
    assert not config.use_24_hour_mode
    assert config.pixels_per_hour == 80
    assert config.label_hours == (8, 12, 18)


def test_full_day_mode_uses_midnight_window(
    app_settings_factory: Callable[..., AppSettings],
) -> None:
    config = app_settings_factory(use_24_hour_mode=True).schedule.to_display_config()
    assert (config.schedule_start_hour, config.schedule_end_hour) == (0, 24)
    assert config.pixels_per_hour == 60


def test_explicit_window_overrides_mode_defaults(
    app_settings_factory: Callable[..., AppSettings],
) -> None:
    config = app_settings_factory(start_hour=6, end_hour=22).schedule.to_display_config()
    assert (config.schedule_start_hour, config.schedule_end_hour) == (6, 22)


def test_viewport_height_drives_pixels_per_hour(
    app_settings_factory: Callable[..., AppSettings],
) -> None:
    settings = app_settings_factory(pixels_per_hour=None, viewport_height=1060)
    assert settings.schedule.to_display_config().pixels_per_hour == 50


def test_inverted_window_fails(app_settings_factory: Callable[..., AppSettings]) -> None:
    settings = app_settings_factory(start_hour=20, end_hour=8)
    with pytest.raises(ValueError):
        settings.schedule.to_display_config()


def test_label_hours_accept_comma_lists() -> None:
    assert ScheduleSettings(label_hours="9, 13").label_hours == [9, 13]
    assert ScheduleSettings(label_hours="[9,13,19]").label_hours == [9, 13, 19]
    assert ScheduleSettings(label_hours=["9,13", 19]).label_hours == [9, 13, 19]


def test_grouping_is_validated() -> None:
    assert ScheduleSettings(grouping="Connected").grouping == "connected"
    with pytest.raises(ValidationError):
        ScheduleSettings(grouping="cliques")


def test_yaml_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "schedule.yaml"
    config_path.write_text(
        "schedule:\n"
        "  use_24_hour_mode: true\n"
        "  pixels_per_hour: 45\n"
        "  grouping: connected\n"
        "log_level: debug\n",
        encoding="utf-8",
    )
    settings = load_settings(config_path)
    assert settings.log_level == "DEBUG"
    assert settings.schedule.grouping == "connected"
    config = settings.schedule.to_display_config()
    assert config.use_24_hour_mode
    assert config.pixels_per_hour == 45


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "schedule.yaml"
    config_path.write_text("schedule:\n  start_hour: 8\n", encoding="utf-8")
    monkeypatch.setenv("AURORAE_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("AURORAE_SCHEDULE__PIXELS_PER_HOUR", "100")
    monkeypatch.setenv("AURORAE_LOG_LEVEL", "info")
    settings = load_settings()
    assert settings.log_level == "INFO"
    assert settings.schedule.pixels_per_hour == 100


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


def test_shipped_config_follows_the_mode_window() -> None:
    settings = load_settings(repo_root() / "config" / "schedule.yaml")
    assert (settings.schedule.start_hour, settings.schedule.end_hour) == (None, None)

    labels = settings.schedule.to_display_config()
    assert (labels.schedule_start_hour, labels.schedule_end_hour) == (7, 24)

    full_day = settings.schedule.model_copy(update={"use_24_hour_mode": True}).to_display_config()
    assert (full_day.schedule_start_hour, full_day.schedule_end_hour) == (0, 24)
