"""
Main CLI application using Typer.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..adapters.api_client import CalinApiClient
from ..adapters.json_store import JsonStore
from ..adapters.serialization import parse_date, parse_time
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import CalinError, ValidationError
from ..domain.models import Booking, BookingStatus, TimeOfDay
from ..services.availability_service import AvailabilityService
from ..services.booking_service import BookingService
from ..services.event_type_service import EventTypeService
from ..services.seed import seed_defaults

app = typer.Typer(
    name="calin",
    help="Manage event types, availability and bookings",
    add_completion=False
)

console = Console()

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


@dataclass
class CliState:
    config: AppConfig
    store: JsonStore


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the explicit config file, else ./config.yaml, else built-in defaults.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(1)


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _timezone(state: CliState) -> str:
    """Stored timezone, falling back to the config file."""
    return AvailabilityService(state.store).get_timezone(default=state.config.timezone)


def _parse_day(value: str) -> int:
    """Accept 0-6 (0=Sunday) or a weekday name such as 'mon' or 'Monday'."""
    if value.isdigit() and int(value) in range(7):
        return int(value)
    for idx, name in enumerate(DAY_NAMES):
        if len(value) >= 3 and name.lower().startswith(value.lower()):
            return idx
    raise ValidationError(f"Unknown weekday '{value}', use 0-6 (0=Sunday) or a day name")


def _optional_time(value: Optional[str]) -> Optional[TimeOfDay]:
    return parse_time(value) if value else None


def _print_booking(booking: Booking, title: str) -> None:
    console.print(Panel.fit(
        f"[bold]ID:[/bold] {booking.id}\n"
        f"[bold]Booker:[/bold] {booking.booker_name} <{booking.booker_email}>\n"
        f"[bold]Date:[/bold] {booking.date.isoformat()} "
        f"{booking.start_time} - {booking.end_time}\n"
        f"[bold]Status:[/bold] {booking.status.value}",
        title=title
    ))


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Cal.in scheduling from the command line.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(e)

    _setup_logging("DEBUG" if verbose else config.log_level)

    try:
        store = JsonStore(config.data_file)
    except CalinError as e:
        _fail(e)

    ctx.obj = CliState(config=config, store=store)


@app.command()
def slots(
    ctx: typer.Context,
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    event: Annotated[str, typer.Argument(help="Event type slug or id")],
):
    """
    Show the open start times for an event type on a date.

    Examples:

        calin slots 2025-06-10 30min
    """
    state = _state(ctx)
    try:
        on_date = parse_date(date)
        event_type = EventTypeService(state.store).get(event)
        available = BookingService(state.store).available_slots(on_date, event_type.id)
    except CalinError as e:
        _fail(e)

    if not available:
        console.print(f"[yellow]No available slots on {on_date.isoformat()} for {event_type.title}.[/yellow]")
        return

    console.print(
        f"[bold green]{len(available)} available slot(s) on {on_date.isoformat()} "
        f"for {event_type.title} ({event_type.duration_minutes} min):[/bold green]\n"
    )
    for slot in available:
        console.print(f"  {slot}")


@app.command()
def book(
    ctx: typer.Context,
    event: Annotated[str, typer.Argument(help="Event type slug or id")],
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    time: Annotated[str, typer.Argument(help="Start time (HH:MM or HH:MM:SS)")],
    name: Annotated[str, typer.Option("--name", "-n", help="Booker name")],
    email: Annotated[str, typer.Option("--email", "-e", help="Booker email")],
    end: Annotated[Optional[str], typer.Option("--end", help="End time, defaults to start + duration")] = None,
):
    """
    Book a slot.
    """
    state = _state(ctx)
    try:
        booking = BookingService(state.store, timezone=_timezone(state)).create_booking(
            event_type_ref=event,
            booker_name=name,
            booker_email=email,
            on_date=parse_date(date),
            start_time=parse_time(time),
            end_time=_optional_time(end),
        )
    except CalinError as e:
        _fail(e)

    console.print("[green]✓ Booking confirmed[/green]")
    console.print(f"Booking ID: {booking.id}")


@app.command()
def reschedule(
    ctx: typer.Context,
    booking_id: Annotated[str, typer.Argument(help="Booking id")],
    date: Annotated[str, typer.Argument(help="New date (YYYY-MM-DD)")],
    time: Annotated[str, typer.Argument(help="New start time")],
    end: Annotated[Optional[str], typer.Option("--end", help="New end time")] = None,
):
    """
    Move a booking to another date and time.
    """
    state = _state(ctx)
    try:
        booking = BookingService(state.store).reschedule_booking(
            booking_id,
            parse_date(date),
            parse_time(time),
            _optional_time(end),
        )
    except CalinError as e:
        _fail(e)

    console.print(f"[green]✓ Rescheduled to {booking.date.isoformat()} {booking.start_time}[/green]")


@app.command()
def cancel(
    ctx: typer.Context,
    booking_id: Annotated[str, typer.Argument(help="Booking id")],
):
    """
    Cancel a booking.
    """
    state = _state(ctx)
    try:
        BookingService(state.store).cancel_booking(booking_id)
    except CalinError as e:
        _fail(e)

    console.print("[green]✓ Booking cancelled[/green]")


@app.command("bookings")
def list_bookings(
    ctx: typer.Context,
    status: Annotated[Optional[BookingStatus], typer.Option("--status", help="Filter by status")] = None,
    upcoming: Annotated[Optional[bool], typer.Option("--upcoming/--past", help="Only upcoming or only past bookings")] = None,
):
    """
    List bookings.
    """
    state = _state(ctx)
    bookings = BookingService(state.store, timezone=_timezone(state)).list_bookings(
        status=status,
        upcoming=upcoming,
    )

    if not bookings:
        console.print("[yellow]No bookings found.[/yellow]")
        return

    titles = {et.id: et.title for et in state.store.list_event_types()}

    table = Table(title="Bookings", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold")
    table.add_column("Time")
    table.add_column("Event")
    table.add_column("Booker")
    table.add_column("Status")
    table.add_column("ID", style="dim")

    for booking in bookings:
        table.add_row(
            booking.date.isoformat(),
            f"{booking.start_time} - {booking.end_time}",
            titles.get(booking.event_type_id, "?"),
            f"{booking.booker_name} <{booking.booker_email}>",
            booking.status.value,
            booking.id,
        )

    console.print()
    console.print(table)
    console.print()


@app.command("booking")
def show_booking(
    ctx: typer.Context,
    booking_id: Annotated[str, typer.Argument(help="Booking id")],
):
    """
    Show a single booking.
    """
    state = _state(ctx)
    try:
        booking = BookingService(state.store).get_booking(booking_id)
    except CalinError as e:
        _fail(e)

    event_type = state.store.get_event_type(booking.event_type_id)
    _print_booking(booking, title=event_type.title if event_type else "Booking")


@app.command("event-types")
def list_event_types(ctx: typer.Context):
    """
    List all event types.
    """
    state = _state(ctx)
    event_types = EventTypeService(state.store).list()

    if not event_types:
        console.print("[yellow]No event types defined. Run 'calin seed' to create the defaults.[/yellow]")
        return

    table = Table(title="Event types", show_header=True, header_style="bold cyan")
    table.add_column("Slug", style="bold yellow")
    table.add_column("Title")
    table.add_column("Duration")
    table.add_column("ID", style="dim")

    for event_type in event_types:
        table.add_row(
            event_type.slug,
            event_type.title,
            f"{event_type.duration_minutes} min",
            event_type.id,
        )

    console.print()
    console.print(table)
    console.print()


@app.command("create-event-type")
def create_event_type(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="Title")],
    slug: Annotated[str, typer.Argument(help="Unique URL slug")],
    duration: Annotated[int, typer.Argument(help="Duration in minutes")],
    description: Annotated[str, typer.Option("--description", "-d", help="Description")] = "",
):
    """
    Create an event type.
    """
    state = _state(ctx)
    try:
        event_type = EventTypeService(state.store).create(
            title=title,
            slug=slug,
            duration_minutes=duration,
            description=description,
        )
    except CalinError as e:
        _fail(e)

    console.print(f"[green]✓ Created event type {event_type.slug}[/green]")


@app.command("update-event-type")
def update_event_type(
    ctx: typer.Context,
    event: Annotated[str, typer.Argument(help="Event type slug or id")],
    title: Annotated[Optional[str], typer.Option("--title")] = None,
    slug: Annotated[Optional[str], typer.Option("--slug")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration")] = None,
    description: Annotated[Optional[str], typer.Option("--description", "-d")] = None,
):
    """
    Update an event type.
    """
    state = _state(ctx)
    service = EventTypeService(state.store)
    try:
        event_type = service.update(
            service.get(event).id,
            title=title,
            slug=slug,
            duration_minutes=duration,
            description=description,
        )
    except CalinError as e:
        _fail(e)

    console.print(f"[green]✓ Updated event type {event_type.slug}[/green]")


@app.command("delete-event-type")
def delete_event_type(
    ctx: typer.Context,
    event: Annotated[str, typer.Argument(help="Event type slug or id")],
):
    """
    Delete an event type and all of its bookings.
    """
    state = _state(ctx)
    service = EventTypeService(state.store)
    try:
        service.delete(service.get(event).id)
    except CalinError as e:
        _fail(e)

    console.print("[green]✓ Event type deleted[/green]")


@app.command()
def availability(ctx: typer.Context):
    """
    Show the weekly schedule.
    """
    state = _state(ctx)
    service = AvailabilityService(state.store)
    windows = service.list_windows()

    table = Table(
        title=f"Weekly availability ({_timezone(state)})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold")
    table.add_column("Hours")
    table.add_column("Enabled")

    for window in windows:
        table.add_row(
            DAY_NAMES[window.day_of_week],
            f"{window.start_time} - {window.end_time}",
            "[green]yes[/green]" if window.enabled else "[dim]no[/dim]",
        )

    console.print()
    console.print(table)
    console.print()


@app.command("set-day")
def set_day(
    ctx: typer.Context,
    day: Annotated[str, typer.Argument(help="Weekday, 0-6 (0=Sunday) or name")],
    start: Annotated[str, typer.Argument(help="Start time")],
    end: Annotated[str, typer.Argument(help="End time")],
    disabled: Annotated[bool, typer.Option("--disabled", help="Mark the day unavailable")] = False,
):
    """
    Set the weekly hours of one weekday.
    """
    state = _state(ctx)
    try:
        window = AvailabilityService(state.store).set_day(
            _parse_day(day),
            parse_time(start),
            parse_time(end),
            enabled=not disabled,
        )
    except CalinError as e:
        _fail(e)

    console.print(f"[green]✓ {DAY_NAMES[window.day_of_week]} updated[/green]")


@app.command()
def override(
    ctx: typer.Context,
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    start: Annotated[Optional[str], typer.Argument(help="Start time")] = None,
    end: Annotated[Optional[str], typer.Argument(help="End time")] = None,
    disabled: Annotated[bool, typer.Option("--disabled", help="Block the whole date")] = False,
):
    """
    Replace the weekly hours on a single date.
    """
    state = _state(ctx)
    defaults = state.config.defaults
    try:
        created = AvailabilityService(state.store).add_override(
            parse_date(date),
            parse_time(start) if start else defaults.get_start_time(),
            parse_time(end) if end else defaults.get_end_time(),
            enabled=not disabled,
        )
    except CalinError as e:
        _fail(e)

    console.print(f"[green]✓ Override added for {created.date.isoformat()}[/green]")
    console.print(f"Override ID: {created.id}")


@app.command()
def overrides(
    ctx: typer.Context,
    date: Annotated[Optional[str], typer.Option("--date", help="Only this date")] = None,
):
    """
    List date overrides.
    """
    state = _state(ctx)
    try:
        items = AvailabilityService(state.store).list_overrides(parse_date(date) if date else None)
    except CalinError as e:
        _fail(e)

    if not items:
        console.print("[yellow]No date overrides.[/yellow]")
        return

    table = Table(title="Date overrides", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold")
    table.add_column("Hours")
    table.add_column("Available")
    table.add_column("ID", style="dim")

    for item in items:
        table.add_row(
            item.date.isoformat(),
            f"{item.start_time} - {item.end_time}" if item.enabled else "-",
            "[green]yes[/green]" if item.enabled else "[red]no[/red]",
            item.id,
        )

    console.print()
    console.print(table)
    console.print()


@app.command("delete-override")
def delete_override(
    ctx: typer.Context,
    override_id: Annotated[str, typer.Argument(help="Override id")],
):
    """
    Remove a date override.
    """
    state = _state(ctx)
    try:
        AvailabilityService(state.store).delete_override(override_id)
    except CalinError as e:
        _fail(e)

    console.print("[green]✓ Override deleted[/green]")


@app.command()
def timezone(
    ctx: typer.Context,
    name: Annotated[Optional[str], typer.Argument(help="New IANA timezone, e.g. Asia/Kolkata")] = None,
):
    """
    Show or set the display timezone.
    """
    state = _state(ctx)
    service = AvailabilityService(state.store)

    if name is None:
        console.print(f"Timezone: [bold]{_timezone(state)}[/bold]")
        return

    try:
        service.set_timezone(name)
    except CalinError as e:
        _fail(e)

    console.print(f"[green]✓ Timezone set to {name}[/green]")


@app.command()
def seed(
    ctx: typer.Context,
    force: Annotated[bool, typer.Option("--force", help="Seed even if the store has data")] = False,
):
    """
    Create the default event types and a Monday-Friday schedule.
    """
    state = _state(ctx)
    try:
        seed_defaults(state.store, state.config, force=force)
    except CalinError as e:
        _fail(e)

    console.print(f"[green]✓ Seeded {state.config.data_file}[/green]")


@app.command("import-remote")
def import_remote(
    ctx: typer.Context,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="API root of the Cal.in backend")] = None,
):
    """
    Import event types, availability and bookings from a Cal.in backend.
    """
    state = _state(ctx)
    client = CalinApiClient(
        base_url=base_url or state.config.api.base_url,
        timeout=state.config.api.timeout_seconds,
    )

    console.print(f"\n[bold]Importing from {client.base_url}...[/bold]")
    try:
        client.health()
        counts = client.import_into(state.store)
    except CalinError as e:
        _fail(e)

    console.print(
        f"[green]✓ Imported {counts['event_types']} event types, "
        f"{counts['availability']} availability windows, "
        f"{counts['bookings']} bookings[/green]\n"
    )


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]calin[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
