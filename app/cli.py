from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.filesystem.event_repository import FileSystemEventRepository
from adapters.filesystem.json_utils import dump_json_bytes, plans_payload, write_plans
from adapters.layout.schedule_grid import LayoutOptions, ScheduleGridLayoutEngine
from app.config import AppSettings, ScheduleSettings, load_settings
from domain.models import SchedulePlan
from domain.services.grid import hour_labels, period_bands
from domain.services.intervals import to_interval
from domain.services.projection import visual_row_count

app = typer.Typer(no_args_is_help=True)
console = Console()


def _load_app_settings(
    config: Optional[Path],
    use_24_hour_mode: Optional[bool] = None,
    pixels_per_hour: Optional[float] = None,
    grouping: Optional[str] = None,
) -> AppSettings:
    overrides = {
        key: value
        for key, value in {
            "use_24_hour_mode": use_24_hour_mode,
            "pixels_per_hour": pixels_per_hour,
            "grouping": grouping,
        }.items()
        if value is not None
    }
    try:
        settings = load_settings(config)
        if overrides:
            schedule = ScheduleSettings.model_validate(settings.schedule.model_dump() | overrides)
            settings = settings.model_copy(update={"schedule": schedule})
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Invalid configuration:[/] {exc}")
        raise typer.Exit(code=1) from exc

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


def _plan_table(title: str, plan: SchedulePlan) -> Table:
    table = Table(title=title)
    table.add_column("Event")
    table.add_column("Kind")
    table.add_column("Label")
    table.add_column("Top", justify="right")
    table.add_column("Height", justify="right")
    table.add_column("Left %", justify="right")
    table.add_column("Width %", justify="right")
    table.add_column("Column", justify="right")
    for block in plan.blocks:
        table.add_row(
            block.event_id,
            block.kind.value,
            block.label,
            f"{block.top:.1f}",
            f"{block.height:.1f}",
            f"{block.left:.1f}",
            f"{block.width:.1f}",
            f"{block.column_index + 1}/{block.column_count}",
        )
    return table


@app.command("layout")
def layout(
    events_file: Path = typer.Argument(..., help="JSON file with a list of events."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    full_day: Optional[bool] = typer.Option(
        None, "--full-day/--label-rows", help="24-hour grid or start-hour to midnight with captions.",
    ),
    pixels_per_hour: Optional[float] = typer.Option(None, help="Pixel height of one hour row."),
    grouping: Optional[str] = typer.Option(None, help="Overlap grouping: first-match or connected."),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON."),
    output: Optional[Path] = typer.Option(None, help="Write the plan as JSON to this file."),
) -> None:
    settings = _load_app_settings(config, full_day, pixels_per_hour, grouping)
    if not events_file.exists():
        console.print(f"[red]File not found:[/] {events_file}")
        raise typer.Exit(code=1)

    try:
        events = FileSystemEventRepository().load(events_file)
        display = settings.schedule.to_display_config()
    except ValueError as exc:
        console.print(f"[red]Layout failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    engine = ScheduleGridLayoutEngine(LayoutOptions(grouping=settings.schedule.grouping))
    plans = engine.build_day_plans(events, display)
    if output is not None:
        write_plans(output, plans)
        console.print(f"[green]Wrote[/] {output}")
    if as_json:
        typer.echo(dump_json_bytes(plans_payload(plans)).decode("utf-8"))
        return
    if output is not None:
        return

    for day, plan in plans.items():
        console.print(_plan_table(day or "Schedule", plan))
        for event_id in plan.skipped:
            console.print(f"[yellow]Skipped[/] {event_id}")


@app.command("validate")
def validate(
    events_file: Path = typer.Argument(..., help="JSON file with a list of events."),
) -> None:
    if not events_file.exists():
        console.print(f"[red]File not found:[/] {events_file}")
        raise typer.Exit(code=1)

    try:
        events, rejected = FileSystemEventRepository().load_with_errors(events_file)
    except ValueError as exc:
        console.print(f"[red]Validation failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    problems = [f"record #{index}: {message}" for index, message in rejected]
    problems.extend(
        f"event {event.id}: invalid time range {event.start_time!r}-{event.end_time!r}"
        for event in events
        if to_interval(event) is None
    )
    if problems:
        for problem in problems:
            console.print(f"[red]Invalid[/] {problem}")
        raise typer.Exit(code=1)
    console.print(f"[green]Valid events file:[/] {events_file} ({len(events)} events)")


@app.command("grid")
def grid(
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    full_day: Optional[bool] = typer.Option(None, "--full-day/--label-rows"),
    pixels_per_hour: Optional[float] = typer.Option(None, help="Pixel height of one hour row."),
) -> None:
    settings = _load_app_settings(config, full_day, pixels_per_hour)
    try:
        display = settings.schedule.to_display_config()
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/] {exc}")
        raise typer.Exit(code=1) from exc

    table = Table(title=f"{visual_row_count(display)} rows, {display.pixels_per_hour:g}px per hour")
    table.add_column("Row", justify="right")
    table.add_column("Label")
    table.add_column("Top", justify="right")
    for label in hour_labels(display):
        name = f"[bold]{label.label}[/]" if label.is_caption else label.label
        table.add_row(str(label.row), name, f"{label.row * display.pixels_per_hour:.1f}")
    console.print(table)
    for band in period_bands(display):
        console.print(f"{band.name}: top={band.top:.1f} height={band.height:.1f}")


if __name__ == "__main__":
    app()
