"""Main entry point for the branchsweep API server."""

import logging

import typer
import uvicorn
from rich.console import Console

from branchsweep.config import Config


cli = typer.Typer(
    name="branchsweep-server",
    help="branchsweep API server",
    add_completion=False,
)
console = Console()


@cli.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
    log_level: str = typer.Option("info", "--log-level", help="Log level"),
):
    """Start the branchsweep API server."""
    logging.basicConfig(level=log_level.upper())
    config = Config()

    console.print("[green]Starting branchsweep API server[/green]")
    console.print(f"Config: {config.config_path}{'' if config.exists else ' (defaults)'}")
    console.print(f"Host: {host}:{port}")

    uvicorn.run(
        "branchsweep.api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level.lower(),
    )


if __name__ == "__main__":
    cli()
