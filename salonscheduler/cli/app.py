"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.http_schedule_source import HttpScheduleSource
from ..adapters.json_schedule_source import JsonScheduleSource
from ..config import AppConfig, get_default_config_path
from ..domain.clock import MINUTES_PER_DAY, from_minutes, to_minutes
from ..domain.exceptions import SchedulingError
from ..domain.models import weekday_names
from ..domain.slot_grid import SlotGridGenerator
from ..services.scheduling_service import SchedulingService

app = typer.Typer(
    name="salonscheduler",
    help="Compute bookable times and validate appointments",
    add_completion=False
)

console = Console()

EXIT_CONFLICT = 2

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)

    logging.basicConfig(
        level=config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    return config


def _build_source(config: AppConfig):
    source_config = config.data_source
    if source_config.kind == "http":
        return HttpScheduleSource(
            base_url=source_config.base_url,
            timeout_seconds=source_config.timeout_seconds,
            timezone=config.timezone,
        )
    return JsonScheduleSource(source_config.path, timezone=config.timezone)


def _build_service(config: AppConfig) -> SchedulingService:
    return SchedulingService(
        _build_source(config),
        SlotGridGenerator(step_minutes=config.scheduling.slot_step_minutes),
        timezone=config.timezone,
        hide_past_slots=config.scheduling.hide_past_slots,
    )


def _parse_day(value: str, tz: str):
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date {value!r}: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def availability(
    staff_id: Annotated[str, typer.Argument(help="Staff member id")],
    day: Annotated[Optional[str], typer.Argument(help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    only_available: Annotated[bool, typer.Option("--only-available", help="Hide blocked slots.")] = False,
    config_file: ConfigOption = None,
):
    """
    Show the full slot grid of a staff member for one day.

    Examples:

        salonscheduler availability ana 2024-11-25 --duration 45
    """
    try:
        config = _load_config(config_file)
        target_day = _parse_day(day, config.timezone) if day else pendulum.today(config.timezone).date()
        minutes = duration if duration is not None else config.scheduling.default_duration_minutes

        service = _build_service(config)
        result = service.get_availability(
            staff_id=staff_id,
            day=target_day,
            duration_minutes=minutes,
        )

        console.print()
        if not result.working:
            console.print(
                f"[yellow]⚠ Staff member {staff_id} does not work on {target_day.isoformat()}.[/yellow]\n"
            )
            return

        table = Table(
            title=f"{staff_id} · {target_day.isoformat()} · {minutes} min",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Time", style="bold")
        table.add_column("Status")
        table.add_column("Reason", style="dim")

        for slot in result.slots:
            if only_available and not slot.available:
                continue
            status = "[green]available[/green]" if slot.available else "[red]unavailable[/red]"
            table.add_row(slot.time, status, slot.reason or "")

        console.print(table)

        stats = result.statistics()
        console.print(
            f"\n[bold]{stats['available']}[/bold] of {stats['total']} slots available, "
            f"{stats['appointments']} appointment(s) on this day."
        )
        if result.free_gaps:
            gaps = ", ".join(str(gap) for gap in result.free_gaps)
            console.print(f"Free gaps: {gaps}")
        console.print()

    except (SchedulingError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def validate(
    staff_id: Annotated[str, typer.Argument(help="Staff member id")],
    client_id: Annotated[str, typer.Argument(help="Client id")],
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    start: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    exclude: Annotated[Optional[str], typer.Option("--exclude", help="Appointment being rescheduled")] = None,
    config_file: ConfigOption = None,
):
    """
    Check whether an appointment can be booked without conflicts.

    Exits with code 2 when the booking conflicts with an existing one.
    """
    try:
        config = _load_config(config_file)
        target_day = _parse_day(day, config.timezone)
        start_minute = to_minutes(start)
        minutes = duration if duration is not None else config.scheduling.default_duration_minutes

        service = _build_service(config)
        result = service.validate_booking(
            staff_id=staff_id,
            client_id=client_id,
            day=target_day,
            start_minute=start_minute,
            duration_minutes=minutes,
            exclude_appointment_id=exclude,
        )

    except (SchedulingError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not result.ok:
        console.print(f"[yellow]✗ {result.conflict.message()}[/yellow]")
        raise typer.Exit(EXIT_CONFLICT)

    end = from_minutes(min(start_minute + minutes, MINUTES_PER_DAY))
    console.print(f"[green]✓ {start} - {end} on {target_day.isoformat()} can be booked.[/green]")


@app.command()
def list_staff(config_file: ConfigOption = None):
    """
    List staff members of the configured JSON data source.
    """
    try:
        config = _load_config(config_file)
        source = _build_source(config)
    except (SchedulingError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not isinstance(source, JsonScheduleSource):
        console.print("[yellow]Listing staff is only supported for the json data source.[/yellow]")
        raise typer.Exit(1)

    table = Table(title="Staff", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="bold yellow")
    table.add_column("Name")
    table.add_column("Work days", style="dim")
    table.add_column("Hours", style="dim")

    for record in source.staff_members():
        staff_id = str(record["id"])
        try:
            calendar = source.get_work_calendar(staff_id)
        except SchedulingError as e:
            table.add_row(staff_id, record.get("name", ""), "[red]invalid[/red]", str(e))
            continue

        hours = (
            str(calendar.work_window) if calendar.has_work_hours else "[red]not configured[/red]"
        )
        if calendar.has_lunch:
            hours += f" (lunch {calendar.lunch_window})"
        table.add_row(
            staff_id,
            record.get("name", ""),
            ", ".join(weekday_names(calendar.active_weekdays)),
            hours,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salonscheduler[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
