"""Mini README: Entry point CLI for launching the deposit board.

This script exposes a Typer CLI that starts the FastAPI application with
configurable host, port and production flags. Settings come from
``DEPOSITBOARD_`` environment variables when no option is given.
"""

from __future__ import annotations

import typer
import uvicorn

from depositboard.configuration import get_settings
from depositboard.logging_utils import configure_root_logger, level_for_environment

cli = typer.Typer(help="Launch the deposit board web service.")


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
    configure_root_logger(level_for_environment(settings.environment))

    # Browsers cannot open the 0.0.0.0 / :: bind addresses directly.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting deposit board on "
        f"{effective_host}:{effective_port}.\n"
        "Open your browser at "
        f"http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "depositboard.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


if __name__ == "__main__":
    cli()
