"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_loader import load_doctors, load_slots
from ..adapters.memory_store import InMemoryDoctorRepository
from ..config import AppConfig
from ..domain.exceptions import AvailabilityError
from ..domain.models import SlotStatus, TimeSlot, to_calendar_date
from ..domain.slot_generator import SlotGenerator
from ..services.availability import AvailabilityService, availability_response

app = typer.Typer(
    name="clinicslots",
    help="Look up bookable appointment slots for clinic doctors",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

STATUS_STYLES = {
    SlotStatus.AVAILABLE: "green",
    SlotStatus.BOOKED: "yellow",
    SlotStatus.BLOCKED: "red",
    SlotStatus.CANCELLED: "dim",
}

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
StartOption = Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD), defaults to today")]
EndOption = Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD), defaults to start + lookahead")]
JsonOption = Annotated[bool, typer.Option("--json", help="Print the API response envelope as JSON.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Log engine decisions.")]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build_service(config: AppConfig) -> Tuple[AvailabilityService, InMemoryDoctorRepository]:
    """Wire the fixture-backed stores into an availability service."""
    repository = load_doctors(config.data.doctors_file)
    slot_store = load_slots(config.data.slots_file)

    service = AvailabilityService(
        doctor_repository=repository,
        slot_store=slot_store,
        slot_generator=SlotGenerator(default_duration=config.defaults.appointment_duration_minutes),
        lookahead_days=config.defaults.lookahead_days,
        timezone=config.timezone,
    )
    return service, repository


def _load(config_file: Optional[Path], verbose: bool) -> AppConfig:
    config = AppConfig.load(config_file)
    _configure_logging("DEBUG" if verbose else config.log_level)
    return config


def _render_slots(title: str, slots: List[TimeSlot]) -> None:
    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold")
    table.add_column("Day")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Status")
    table.add_column("Source", style="dim")

    for slot in slots:
        style = STATUS_STYLES.get(slot.status, "")
        table.add_row(
            slot.date.to_date_string(),
            slot.date.format("ddd"),
            slot.start_time,
            slot.end_time,
            f"[{style}]{slot.status.value}[/{style}]" if style else slot.status.value,
            "generated" if slot.generated else (slot.slot_id or "stored"),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def availability(
    doctor_id: Annotated[str, typer.Argument(help="Doctor identifier")],
    config_file: ConfigOption = None,
    start: StartOption = None,
    end: EndOption = None,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
):
    """
    Show the bookable slots of a doctor.

    Stored slots are shown when any exist in the range; otherwise slots are
    generated from the doctor's weekly schedule.

    Examples:

        clinicslots availability doc-001
        clinicslots availability doc-001 --start 2024-11-25 --end 2024-12-01
        clinicslots availability doc-001 --json
    """
    try:
        config = _load(config_file, verbose)
        service, repository = _build_service(config)

        start_date = to_calendar_date(start) if start else None
        end_date = to_calendar_date(end) if end else None

        slots = asyncio.run(service.get_doctor_availability(doctor_id, start_date, end_date))

        if as_json:
            typer.echo(json.dumps(availability_response(slots), indent=2))
            return

        if not slots:
            console.print(
                f"[yellow]⚠ No available slots for {repository.display_name(doctor_id)}.[/yellow]\n"
                "Try a longer date range."
            )
            return

        generated = any(slot.generated for slot in slots)
        console.print(
            f"[bold green]✓ {len(slots)} available slot(s) for {repository.display_name(doctor_id)}[/bold green]"
            + (" [dim](generated from weekly schedule)[/dim]" if generated else "")
        )
        _render_slots("Availability", slots)

    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def slots(
    doctor_id: Annotated[str, typer.Argument(help="Doctor identifier")],
    config_file: ConfigOption = None,
    start: StartOption = None,
    end: EndOption = None,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
):
    """
    List every stored slot of a doctor, whatever its status.
    """
    try:
        config = _load(config_file, verbose)
        service, repository = _build_service(config)

        start_date = to_calendar_date(start) if start else None
        end_date = to_calendar_date(end) if end else None

        stored = asyncio.run(service.get_time_slots(doctor_id, start_date, end_date))

        if as_json:
            typer.echo(json.dumps(availability_response(stored), indent=2))
            return

        if not stored:
            console.print(f"[yellow]No stored slots for {repository.display_name(doctor_id)}.[/yellow]")
            return

        _render_slots(f"Stored slots - {repository.display_name(doctor_id)}", stored)

    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_doctors(
    config_file: ConfigOption = None,
):
    """
    List all doctors and their weekly schedules.
    """
    try:
        config = _load(config_file, verbose=False)
        repository = load_doctors(config.data.doctors_file)

        doctors = repository.list_doctors()
        if not doctors:
            console.print("[yellow]No doctors found in the data file.[/yellow]")
            return

        table = Table(
            title="Doctors",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("ID", style="bold yellow")
        table.add_column("Name")
        table.add_column("Weekly schedule", style="dim")
        table.add_column("Slot (min)", justify="right")

        day_names = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
        for schedule in doctors:
            weekly = ", ".join(
                f"{day_names[day]} {entry.start_time}-{entry.end_time}"
                for day, entry in sorted(schedule.weekly_availability.items())
            )
            table.add_row(
                schedule.doctor_id,
                repository.display_name(schedule.doctor_id),
                weekly or "-",
                str(schedule.effective_duration(config.defaults.appointment_duration_minutes)),
            )

        console.print()
        console.print(table)
        console.print()

    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]clinicslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
