"""CLI commands for PsiPro."""

import asyncio
from datetime import date, datetime
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from psipro.config import get_settings
from psipro.errors import PsiProError

app = typer.Typer(
    name="psipro",
    help="Scheduling and billing for a single-practitioner clinical practice",
    add_completion=False,
)
console = Console()

_STATE_STYLES = {
    "free": "green",
    "start": "bold cyan",
    "continuation": "dim cyan",
}


def _parse_day(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        console.print(f"[red]Invalid date: {value}. Use YYYY-MM-DD[/red]")
        raise typer.Exit(1)


@app.command()
def slots(
    start_hour: Optional[int] = typer.Option(None, "--start", "-s", help="First hour of the grid"),
    end_hour: Optional[int] = typer.Option(None, "--end", "-e", help="Hour the grid stops at"),
    slot_minutes: Optional[int] = typer.Option(None, "--slot", "-m", help="Slot length in minutes"),
):
    """Print the bookable slot labels for a day."""
    from psipro.scheduling.timegrid import generate_slots

    settings = get_settings()
    try:
        labels = generate_slots(
            settings.agenda_start_hour if start_hour is None else start_hour,
            settings.agenda_end_hour if end_hour is None else end_hour,
            settings.slot_minutes if slot_minutes is None else slot_minutes,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    for label in labels:
        console.print(label)


async def _load_day(owner_id: str, day: date):
    from psipro.core.auth import StaticAuthProvider
    from psipro.core.database import close_db, get_session_factory, init_db
    from psipro.core.repository import AppointmentRepository
    from psipro.scheduling.scheduler import SchedulingService

    settings = get_settings()
    await init_db()
    try:
        async with get_session_factory()() as session:
            store = AppointmentRepository(
                session, embed_legacy_justification=settings.embed_legacy_justification
            )
            service = SchedulingService(store, StaticAuthProvider(owner_id), settings)
            return await service.day_view(day)
    finally:
        await close_db()


@app.command()
def day(
    owner: str = typer.Option(..., "--owner", "-o", help="Practitioner (owner) id"),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="Day to show (YYYY-MM-DD)"),
):
    """Show the agenda grid of one day."""
    target = _parse_day(on)
    try:
        view = asyncio.run(_load_day(owner, target))
    except PsiProError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    by_id = {a.id: a for a in view.appointments}
    table = Table(title=f"Agenda {view.date.isoformat()}")
    table.add_column("Time")
    table.add_column("State")
    table.add_column("Patient")
    table.add_column("Until")
    for slot in view.slots:
        appt = by_id.get(slot.appointment_id) if slot.appointment_id else None
        style = _STATE_STYLES.get(slot.state.value, "")
        table.add_row(
            slot.time,
            f"[{style}]{slot.state.value}[/{style}]",
            appt.patient_id if appt and slot.state.value == "start" else "",
            appt.end_time if appt and slot.state.value == "start" else "",
        )
    console.print(table)


@app.command()
def token(
    owner: str = typer.Argument(..., help="Practitioner (owner) id"),
    minutes: Optional[int] = typer.Option(None, "--minutes", help="Token lifetime in minutes"),
):
    """Issue an access token for the API."""
    from psipro.core.auth import create_access_token

    console.print(create_access_token(owner, expires_minutes=minutes), soft_wrap=True)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the REST API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    console.print(f"Starting PsiPro API server on {host}:{port}")
    uvicorn.run(
        "psipro.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )
