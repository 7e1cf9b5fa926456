"""Utility functions for CLI commands."""

import logging
import os
from typing import Optional, Tuple

import typer
from rich.console import Console

from branchsweep.config import Config, SweepConfig
from branchsweep.core.service import BranchSweeper
from branchsweep.models import RepositoryRef
from branchsweep.remote.client import RepositoryClient

console = Console()


def configure_logging(verbose: bool) -> None:
    """Send library logs to stderr, at DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_config_with_data() -> Tuple[Config, SweepConfig]:
    """Get config and load data, falling back to defaults.

    Returns:
        tuple: (config, config_data)
    """
    config = Config()
    try:
        config_data = config.load_or_default()
    except (ValueError, OSError) as e:
        console.print(f"[red]❌ Could not read {config.config_path}: {e}[/red]")
        raise typer.Exit(1)

    return config, config_data


def get_token(config_data: SweepConfig, profile: Optional[str] = None) -> str:
    """Return the bearer token for ``profile`` or the active profile.

    Raises:
        typer.Exit: If no credential is configured
    """
    if profile:
        if profile not in config_data.profiles:
            console.print(f"[red]❌ Profile '{profile}' not found[/red]")
            raise typer.Exit(1)
        return config_data.profiles[profile].token

    credentials = config_data.active_credentials()
    if credentials is None or not credentials.token:
        console.print("[red]❌ No authentication token found[/red]")
        console.print(
            "[yellow]Set BRANCHSWEEP_TOKEN or run 'branchsweep profile add'[/yellow]"
        )
        raise typer.Exit(1)
    return credentials.token


def get_sweeper(config_data: SweepConfig, profile: Optional[str] = None) -> BranchSweeper:
    """Build a sweeper talking to the API URL of ``profile`` (or the active one)."""
    api_url = None
    if profile and profile in config_data.profiles:
        api_url = config_data.profiles[profile].api_url
    client = RepositoryClient.from_config(config_data, api_url=api_url)
    return BranchSweeper(client, max_workers=config_data.max_workers)


def parse_repo(value: Optional[str], ctx: typer.Context) -> RepositoryRef:
    """Parse an ``owner/name`` argument, showing help when it is missing or malformed."""
    if value is None:
        console.print(ctx.get_help())
        console.print("\n[red]❌ Error: Missing argument 'REPO'.[/red]")
        raise typer.Exit(1)
    try:
        return RepositoryRef.parse(value)
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)


def mask_token(token: str) -> str:
    return f"***{token[-4:] if len(token) > 8 else '*' * len(token)}"


def show_env_config():
    """Display active environment variable configuration."""
    env_vars = {
        "BRANCHSWEEP_HOME": os.environ.get("BRANCHSWEEP_HOME"),
        "BRANCHSWEEP_API_URL": os.environ.get("BRANCHSWEEP_API_URL"),
        "BRANCHSWEEP_TOKEN": "***" if "BRANCHSWEEP_TOKEN" in os.environ else None,
        "BRANCHSWEEP_TAG_PREFIX": os.environ.get("BRANCHSWEEP_TAG_PREFIX"),
        "BRANCHSWEEP_MAX_WORKERS": os.environ.get("BRANCHSWEEP_MAX_WORKERS"),
    }

    active = {k: v for k, v in env_vars.items() if v}
    if active:
        console.print("\n[yellow]Active environment variables:[/yellow]")
        for key, value in active.items():
            console.print(f"  {key}={value}")
    else:
        console.print("\n[dim]No branchsweep environment variables set[/dim]")
