"""Main CLI entry point using Typer."""

import logging

import typer
from rich.console import Console

from alertext.config import PRODUCT_NAME, PRODUCT_TAGLINE, PRODUCT_VERSION, get_settings

console = Console()
app = typer.Typer(
    name="alertext",
    help=f"{PRODUCT_NAME}: {PRODUCT_TAGLINE}",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging on startup."""
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# Import and add subcommands
from alertext.cli.es import app as es_app
from alertext.cli.telephone import app as telephone_app

app.add_typer(es_app, name="es", help="Convert alerts into search-index documents")
app.add_typer(telephone_app, name="telephone", help="Voice-call notification channel")


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]{PRODUCT_NAME}[/] {PRODUCT_VERSION}")
    console.print(PRODUCT_TAGLINE)


if __name__ == "__main__":
    app()
