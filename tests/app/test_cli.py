from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from app.cli import app
from tests.helpers.event_fixtures import events_fixture_path, repo_root

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def test_layout_json_output() -> None:
    result = runner.invoke(
        app, ["layout", str(events_fixture_path("sample_week.json")), "--json", "--pixels-per-hour", "60"]
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert list(payload) == ["2024-05-06", "2024-05-07"]

    monday = payload["2024-05-06"]
    assert monday["gridHeight"] == 18 * 60
    blocks = {(block["eventId"], block["kind"]): block for block in monday["blocks"]}
    assert blocks[("standup", "event")]["columnCount"] == 2
    assert blocks[("deep-work", "event")]["columnIndex"] == 0
    assert blocks[("dentist", "travel")]["label"] == "30m travel"
    assert blocks[("night-shift", "event")]["height"] == 60


def test_layout_full_day_flag() -> None:
    result = runner.invoke(
        app,
        ["layout", str(events_fixture_path("sample_week.json")), "--json", "--full-day", "--pixels-per-hour", "60"],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["2024-05-06"]["gridHeight"] == 24 * 60
    gym = next(block for block in payload["2024-05-07"]["blocks"] if block["eventId"] == "gym" and block["kind"] == "event")
    assert gym["top"] == 7.5 * 60


def test_full_day_flag_with_shipped_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(repo_root())
    result = runner.invoke(
        app,
        ["layout", str(events_fixture_path("sample_week.json")), "--json", "--full-day", "--pixels-per-hour", "60"],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["2024-05-06"]["gridHeight"] == 24 * 60

    result = runner.invoke(
        app, ["layout", str(events_fixture_path("sample_week.json")), "--json", "--pixels-per-hour", "60"]
    )
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["2024-05-06"]["gridHeight"] == 18 * 60


def test_layout_table_and_output_file(tmp_path: Path) -> None:
    target = tmp_path / "plan.json"
    result = runner.invoke(
        app, ["layout", str(events_fixture_path("sample_week.json")), "--output", str(target)]
    )
    assert result.exit_code == 0, result.output
    assert "Wrote" in result.stdout
    assert json.loads(target.read_text(encoding="utf-8"))["2024-05-07"]["skipped"] == []

    result = runner.invoke(app, ["layout", str(events_fixture_path("sample_week.json"))])
    assert result.exit_code == 0, result.output
    assert "2024-05-06" in result.stdout


def test_layout_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["layout", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "File not found" in result.stdout


def test_layout_rejects_unknown_grouping() -> None:
    result = runner.invoke(
        app, ["layout", str(events_fixture_path("sample_week.json")), "--grouping", "cliques"]
    )
    assert result.exit_code == 1
    assert "Invalid configuration" in result.stdout


def test_validate_reports_bad_records(tmp_path: Path) -> None:
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps(
            [
                {"id": "ok", "startTime": "09:00", "endTime": "10:00"},
                {"id": "clock", "startTime": "25:99", "endTime": "10:00"},
                {"startTime": "09:00"},
            ]
        ),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 1
    assert "clock" in result.stdout
    assert "record #2" in result.stdout


def test_validate_accepts_sample() -> None:
    result = runner.invoke(app, ["validate", str(events_fixture_path("sample_week.json"))])
    assert result.exit_code == 0, result.output
    assert "Valid events file" in result.stdout


def test_grid_lists_captions() -> None:
    result = runner.invoke(app, ["grid", "--label-rows"])
    assert result.exit_code == 0, result.output
    assert "Morning" in result.stdout
    assert "afternoon" in result.stdout
