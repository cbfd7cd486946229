"""Mini README: Entry point CLI for launching the spendlog web service.

Exposes a Typer CLI that starts the FastAPI application with host, port and
production flags, falling back to ``SPENDLOG_`` environment settings.
"""

from __future__ import annotations

import typer
import uvicorn

from spendlog.configuration import get_settings
from spendlog.logging_utils import configure_root_logger

cli = typer.Typer(help="Launch the spendlog expense tracking service.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 / :: wildcard addresses.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting spendlog on {effective_host}:{effective_port}.\n"
        f"Open your browser at http://{browser_host}:{effective_port}/docs"
    )
    # The ledger lives in process memory, so auto-reload wipes it on every change.
    uvicorn.run(
        "spendlog.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not (production or settings.is_production),
    )


if __name__ == "__main__":
    cli()
