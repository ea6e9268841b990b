"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.json_store import JsonFileStore
from ..adapters.memory_store import MemoryStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import AvailabilityError, InvalidRequestError
from ..domain.models import WEEKDAY_NAMES, UnavailableReason
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="appointmentslots",
    help="Find bookable appointment slots for a business",
    add_completion=False
)

console = Console()

EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2

REASON_MESSAGES = {
    UnavailableReason.CLOSED: "The business is closed on this day.",
    UnavailableReason.NO_ACTIVE_STAFF: "No active staff members are available for booking.",
}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
DataOption = Annotated[
    Optional[Path],
    typer.Option("--data", help="JSON file with appointments and staff. Overrides data_file from the config.")
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the given config, or fall back to built-in defaults if none exists."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    config_path = get_default_config_path()
    if config_path.exists():
        return AppConfig.load_from_yaml(config_path)
    return AppConfig()


def _build_service(config: AppConfig, data_file: Optional[Path]) -> AvailabilityService:
    data_path = data_file or config.data_file
    if data_path is not None:
        store: MemoryStore = JsonFileStore(data_path, config=config)
    else:
        store = MemoryStore(config=config)
    return AvailabilityService(
        settings_store=store,
        appointment_store=store,
        staff_store=store
    )


@app.command()
def slots(
    business_id: Annotated[str, typer.Argument(help="Business id")],
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    staff: Annotated[str, typer.Option("--staff", "-s", help="Staff id, or 'any'")] = "any",
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the raw result as JSON.")] = False,
    verbose: VerboseOption = False,
):
    """
    List the bookable slot start times for a business on a date.

    Examples:

        appointmentslots slots salon-1 2024-11-25 --duration 60

        appointmentslots slots salon-1 2024-11-25 --staff staff-a --data data.json
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, data_file)
        duration_minutes = duration if duration is not None else config.defaults.service_duration_minutes

        result = service.get_available_slots(
            business_id=business_id,
            date=date,
            service_duration_minutes=duration_minutes,
            staff_id=staff
        )
    except InvalidRequestError as e:
        console.print(f"[bold red]Invalid request:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_INVALID_INPUT)
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)

    if as_json:
        typer.echo(json.dumps(result.to_dict()))
        return

    if result.reason is not None:
        console.print(f"[yellow]⚠ {REASON_MESSAGES[result.reason]}[/yellow]")
        return

    if not result.slots:
        console.print(
            "[yellow]⚠ No bookable slots found.[/yellow]\n"
            "Try another day, another staff member or a shorter service."
        )
        return

    console.print(f"[bold green]✓ {len(result.slots)} bookable slot(s) on {date}:[/bold green]\n")
    for start in result.slots:
        console.print(f"  {start}")
    console.print()


@app.command()
def check(
    business_id: Annotated[str, typer.Argument(help="Business id")],
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    start: Annotated[str, typer.Argument(help="Start time (HH:mm)")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    staff: Annotated[str, typer.Option("--staff", "-s", help="Staff id, or 'any'")] = "any",
    exclude: Annotated[Optional[str], typer.Option("--exclude", help="Appointment id to ignore (rescheduling)")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether a single start time is still bookable.

    Exits with code 1 if the slot is taken.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, data_file)
        duration_minutes = duration if duration is not None else config.defaults.service_duration_minutes

        available = service.is_slot_available(
            business_id=business_id,
            date=date,
            start_time=start,
            service_duration_minutes=duration_minutes,
            staff_id=staff,
            exclude_appointment_id=exclude
        )
    except InvalidRequestError as e:
        console.print(f"[bold red]Invalid request:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_INVALID_INPUT)
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)

    if available:
        console.print(f"[green]✓ {date} {start} is available.[/green]")
    else:
        console.print(f"[red]✗ {date} {start} is not available.[/red]")
        raise typer.Exit(EXIT_FAILURE)


@app.command()
def hours(
    business_id: Annotated[str, typer.Argument(help="Business id")],
    config_file: ConfigOption = None,
):
    """
    Show the weekly opening hours of a business.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)

    settings = config.settings_for(business_id)
    business = config.find_business(business_id)
    title = business.display_name() if business else f"{business_id} (defaults)"

    table = Table(
        title=f"Opening hours - {title}",
        min_width=40,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Hours")

    for index, day_name in enumerate(WEEKDAY_NAMES):
        day_hours = settings.weekly_hours.for_weekday(index)
        if day_hours.window() is None:
            table.add_row(day_name.capitalize(), "[dim]closed[/dim]")
        else:
            table.add_row(day_name.capitalize(), f"{day_hours.open} - {day_hours.close}")

    console.print()
    console.print(table)
    console.print(f"Slot interval: {settings.slot_interval_minutes} min\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]appointmentslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
