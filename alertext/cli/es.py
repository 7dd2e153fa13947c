"""CLI commands for search-index document conversion."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

import typer
from pydantic import ValidationError
from rich.console import Console

from alertext.config import get_settings
from alertext.core.alerts.models import Alert, NotificationEvent
from alertext.core.errors import ConversionError
from alertext.core.es.converter import convert_all

console = Console(stderr=True)
app = typer.Typer(help="Convert alerts into search-index documents")


def load_alerts(path: Path) -> List[Alert]:
    """Read alerts from a JSON file.

    The file may hold a single alert, a list of alerts, or a webhook
    payload with an ``alerts`` list.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return [Alert.model_validate(item) for item in data]
    if isinstance(data, dict) and "alerts" in data:
        return NotificationEvent.model_validate(data).alerts
    return [Alert.model_validate(data)]


@app.command("convert")
def convert_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with alerts"),
    no_validate: bool = typer.Option(
        False, "--no-validate", help="Skip the required-label check"
    ),
):
    """Print the index documents for the alerts in a file."""
    try:
        alerts = load_alerts(path)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        console.print(f"[red]Error:[/red] cannot read alerts from {path}: {e}")
        raise typer.Exit(1)

    try:
        documents = convert_all(
            alerts,
            validate=not no_validate,
            required=get_settings().es_required_labels,
        )
    except ConversionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    typer.echo(json.dumps([doc.to_document() for doc in documents], indent=2, ensure_ascii=False))
