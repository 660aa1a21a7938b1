"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Optional, Annotated

import typer
from rich.console import Console
from rich.table import Table

from ..adapters.memory_gateway import InMemorySalonGateway
from ..config import AppConfig, load_config
from ..domain.models import Actor, ActorRole
from ..domain.result import Err
from ..domain.slot_generator import SlotGenerator
from ..logging_setup import configure_logging
from ..services.appointments import AppointmentService
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="salonbook",
    help="Compute salon availability and manage appointment status",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]


def _bootstrap(config_file: Optional[Path]) -> tuple[AppConfig, InMemorySalonGateway]:
    """Load configuration, set up logging and open the data store."""
    try:
        config = load_config(config_file)
        configure_logging(config.log_level)
        gateway = InMemorySalonGateway.from_json(config.data_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    return config, gateway


def _persist(config: AppConfig, gateway: InMemorySalonGateway) -> None:
    # The bundled sample data is never written to
    if config.data_file is not None:
        gateway.save_json(config.data_file)


def _fail(result: Err) -> None:
    hint = " (the slot was taken concurrently, try again)" if result.error.retryable else ""
    console.print(f"[bold red]{result.kind}:[/bold red] {result.error}{hint}")
    raise typer.Exit(1)


@app.command()
def availability(
    salon_id: Annotated[int, typer.Argument(help="Salon ID")],
    date: Annotated[Optional[str], typer.Option("--date", help="Day to check (YYYY-MM-DD). Defaults to today")] = None,
    service: Annotated[Optional[int], typer.Option("--service", "-s", help="Service ID used to size each slot")] = None,
    config_file: ConfigOption = None,
):
    """
    Show bookable time slots of a salon for one day.

    Examples:

        salonbook availability 1 --date 2026-11-02
        salonbook availability 1 --date 2026-11-02 --service 2
    """
    config, gateway = _bootstrap(config_file)

    service_layer = AvailabilityService(
        gateway=gateway,
        slot_generator=SlotGenerator(slot_interval_minutes=config.slot_interval_minutes),
        default_service_duration_minutes=config.default_service_duration_minutes,
        timezone=config.timezone,
    )

    result = service_layer.compute_availability(salon_id, day=date, service_id=service)
    if isinstance(result, Err):
        _fail(result)

    found = result.value
    hours = found.business_hours.format_display(found.date)

    console.print(f"\n[bold cyan]{found.salon_name}[/bold cyan] - {found.date.isoformat()}")
    console.print(f"   Business hours: {hours['opening_time']} - {hours['closing_time']}")
    if found.service_name:
        console.print(f"   Service: {found.service_name}")
    console.print()

    if not found.slots:
        console.print("[yellow]No available time slots for this day.[/yellow]\n")
        return

    table = Table(
        title=f"{len(found.slots)} available slot(s)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Time", style="bold green")
    table.add_column("Start", style="dim")

    for slot in found.slots:
        table.add_row(slot.formatted_time, slot.start_time.to_datetime_string())

    console.print(table)
    console.print()


@app.command()
def book(
    salon_id: Annotated[int, typer.Argument(help="Salon ID")],
    service_id: Annotated[int, typer.Argument(help="Service ID")],
    when: Annotated[str, typer.Argument(help="Appointment start, e.g. 2026-11-02T09:30")],
    user: Annotated[int, typer.Option("--user", "-u", help="Guest user ID")],
    notes: Annotated[Optional[str], typer.Option("--notes", help="Notes for the salon")] = None,
    config_file: ConfigOption = None,
):
    """
    Book an appointment as a guest. New appointments start out pending.
    """
    config, gateway = _bootstrap(config_file)
    service_layer = AppointmentService(gateway=gateway, timezone=config.timezone)

    result = service_layer.book_appointment(
        {
            "salon_id": salon_id,
            "service_id": service_id,
            "appointment_date": when,
            "notes": notes,
        },
        actor=Actor(user_id=user, role=ActorRole.GUEST),
    )
    if isinstance(result, Err):
        _fail(result)

    _persist(config, gateway)
    appointment = result.value
    console.print(
        f"\n[green]✓ Appointment {appointment.id} booked for "
        f"{appointment.appointment_date.to_datetime_string()} ({appointment.status.value})[/green]\n"
    )


@app.command()
def transition(
    appointment_id: Annotated[int, typer.Argument(help="Appointment ID")],
    status: Annotated[str, typer.Argument(help="Target status: confirmed, cancelled or completed")],
    user: Annotated[int, typer.Option("--user", "-u", help="Acting user ID")],
    role: Annotated[ActorRole, typer.Option("--role", "-r", help="Acting user's role")],
    notes: Annotated[Optional[str], typer.Option("--notes", help="Replace the appointment notes")] = None,
    config_file: ConfigOption = None,
):
    """
    Change the status of an appointment.

    Owners confirm, complete or cancel; guests may only cancel.
    """
    config, gateway = _bootstrap(config_file)
    service_layer = AppointmentService(gateway=gateway, timezone=config.timezone)

    result = service_layer.request_transition(
        appointment_id,
        status,
        actor=Actor(user_id=user, role=role),
        notes=notes,
    )
    if isinstance(result, Err):
        _fail(result)

    _persist(config, gateway)
    console.print(f"\n[green]✓ Appointment {appointment_id} is now {result.value.value}[/green]\n")


@app.command()
def appointments(
    user: Annotated[int, typer.Option("--user", "-u", help="Acting user ID")],
    role: Annotated[ActorRole, typer.Option("--role", "-r", help="Acting user's role")],
    status: Annotated[Optional[str], typer.Option("--status", help="Only show appointments with this status")] = None,
    page: Annotated[int, typer.Option("--page", help="Page number")] = 1,
    limit: Annotated[int, typer.Option("--limit", help="Appointments per page")] = 10,
    config_file: ConfigOption = None,
):
    """
    List appointments, newest first.

    Owners see the appointments of their salons; guests see their own.

    Examples:

        salonbook appointments --user 100 --role owner
        salonbook appointments --user 200 --role guest --status pending
    """
    _, gateway = _bootstrap(config_file)
    service_layer = AppointmentService(gateway=gateway)

    result = service_layer.list_appointments(
        Actor(user_id=user, role=role), status=status, page=page, limit=limit
    )
    if isinstance(result, Err):
        _fail(result)

    found = result.value
    if not found.appointments:
        console.print("\n[yellow]No appointments found.[/yellow]\n")
        return

    table = Table(
        title=f"Appointments (page {found.page} of {found.total_pages}, {found.total} total)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="bold")
    table.add_column("Start", style="green")
    table.add_column("Salon")
    table.add_column("Service")
    table.add_column("Guest")
    table.add_column("Status", style="magenta")

    for appt in found.appointments:
        table.add_row(
            str(appt.id),
            appt.appointment_date.to_datetime_string(),
            str(appt.salon_id),
            str(appt.service_id),
            str(appt.guest_id),
            appt.status.value,
        )

    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salonbook[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
