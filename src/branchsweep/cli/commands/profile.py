"""Credential profile management commands."""

import typer
from rich.console import Console
from rich.table import Table
from typing import Optional

from branchsweep.cli.utils import get_config_with_data, mask_token
from branchsweep.config import DEFAULT_API_URL, ProfileConfig

app = typer.Typer(help="Credential profile commands", invoke_without_command=True)
console = Console()


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@app.command("add")
def add_profile(
    alias: str = typer.Argument(..., help="Alias for the profile"),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", help="API token (prompted when omitted)"
    ),
    url: str = typer.Option(DEFAULT_API_URL, "--url", "-u", help="API base URL"),
    use: bool = typer.Option(False, "--use", help="Make this the active profile"),
):
    """Add or update a credential profile."""
    if alias == "env":
        console.print("[red]❌ 'env' is reserved for BRANCHSWEEP_TOKEN[/red]")
        raise typer.Exit(1)

    if not token:
        token = typer.prompt("Token", hide_input=True)

    config, config_data = get_config_with_data()

    if alias in config_data.profiles:
        console.print(
            f"[yellow]⚠️  Profile '{alias}' already exists. Updating...[/yellow]"
        )

    config_data.profiles[alias] = ProfileConfig(api_url=url.rstrip("/"), token=token)
    if use or not config_data.active_profile or config_data.active_profile == "env":
        config_data.active_profile = alias
    config.save(config_data)

    console.print(f"[green]✓ Profile '{alias}' configured successfully[/green]")


@app.command("list")
def list_profiles():
    """List configured profiles."""
    config, config_data = get_config_with_data()

    if not config_data.profiles:
        console.print("[yellow]No profiles configured[/yellow]")
        return

    table = Table(title="Profiles")
    table.add_column("Alias", style="cyan")
    table.add_column("URL", style="green")
    table.add_column("Token", style="dim")
    table.add_column("Active", style="yellow")

    for alias, profile in config_data.profiles.items():
        is_active = "✓" if alias == config_data.active_profile else ""
        table.add_row(alias, profile.api_url, mask_token(profile.token), is_active)

    console.print(table)


@app.command("use")
def use_profile(alias: str = typer.Argument(..., help="Alias of the profile to use")):
    """Set the active profile."""
    config, config_data = get_config_with_data()

    if alias not in config_data.profiles:
        console.print(f"[red]❌ Profile '{alias}' not found[/red]")
        raise typer.Exit(1)

    config_data.active_profile = alias
    config.save(config_data)
    console.print(f"[green]✓ Now using profile '{alias}'[/green]")


@app.command("remove")
def remove_profile(
    alias: str = typer.Argument(..., help="Alias of the profile to remove"),
):
    """Remove a profile and its stored token."""
    config, config_data = get_config_with_data()

    if alias not in config_data.profiles or alias == "env":
        console.print(f"[red]❌ Profile '{alias}' not found[/red]")
        raise typer.Exit(1)

    del config_data.profiles[alias]
    if config_data.active_profile == alias:
        config_data.active_profile = None

    config.save(config_data)
    console.print(f"[green]✓ Profile '{alias}' removed[/green]")
