"""CLI commands for the voice-call notification channel."""

from datetime import datetime, timezone
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from alertext.config import get_settings
from alertext.core.alerts.models import Alert, NotificationEvent
from alertext.core.errors import TelephoneError
from alertext.core.notify.telephone import build_telephone_notifier

console = Console()
app = typer.Typer(help="Voice-call notification channel")


def _mask(value: str) -> str:
    if not value:
        return "[yellow]not set[/yellow]"
    if len(value) <= 4:
        return "****"
    return value[:2] + "****" + value[-2:]


@app.command("status")
def show_status():
    """Show the telephone channel configuration."""
    settings = get_settings()

    table = Table(title="Telephone Channel")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Base URL", settings.telephone_base_url or "[yellow]not set[/yellow]")
    table.add_row("App key", _mask(settings.telephone_app_key))
    table.add_row("App secret", _mask(settings.telephone_app_secret))
    table.add_row("Username", settings.telephone_username or "[yellow]not set[/yellow]")
    table.add_row("Authorization", _mask(settings.telephone_authorization))
    table.add_row("Display number", settings.telephone_display_number or "[yellow]not set[/yellow]")
    table.add_row("Template ID", settings.telephone_template_id or "[yellow]not set[/yellow]")
    table.add_row("Operators", ", ".join(settings.telephone_operators) or "[yellow]none[/yellow]")
    table.add_row("Token refresh", f"every {settings.telephone_refresh_after_hours}h")

    console.print(table)

    if not settings.telephone_base_url:
        console.print("\n[yellow]Note:[/yellow] TELEPHONE_BASE_URL not set in .env")


@app.command("test")
def send_test(
    to: Optional[List[str]] = typer.Option(
        None, "--to", "-t", help="Number to call (repeatable, defaults to configured operators)"
    ),
):
    """Send a test voice notification."""
    try:
        notifier = build_telephone_notifier()
    except TelephoneError as e:
        console.print(f"[red]Error:[/red] could not log in to the telephone provider: {e}")
        raise typer.Exit(1)

    now = datetime.now(timezone.utc)
    alert = Alert(
        labels={"alertname": "AlertextTest", "severity": "info"},
        annotations={"summary": "Test voice notification"},
        starts_at=now,
        updated_at=now,
    )
    console.print(f"Sending test alert [bold]{alert.name}[/bold]...")
    event = NotificationEvent.of(alert)
    result = notifier.notify(event, destinations=list(to) if to else None)

    if result.error is not None:
        console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(1)

    table = Table(title="Voice Notify")
    table.add_column("Operator", style="cyan")
    table.add_column("Status")
    table.add_column("Details")
    for operator in result.succeeded:
        table.add_row(operator, "[green]sent[/green]", "")
    for operator, reason in result.failed.items():
        table.add_row(operator, "[red]failed[/red]", reason)
    console.print(table)

    if result.failed:
        raise typer.Exit(1)
