"""Repository browsing commands."""

import typer
from rich.console import Console
from rich.table import Table as RichTable
from typing import Optional

from branchsweep.cli.utils import get_config_with_data, get_sweeper, get_token
from branchsweep.exceptions import RemoteAPIError

app = typer.Typer(help="Repository commands", invoke_without_command=True)
console = Console()


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@app.command(name="list")
def list_repositories(
    profile: Optional[str] = typer.Option(
        None, "--profile", "-P", help="Credential profile to use"
    ),
):
    """List repositories you own or reach through an organization."""
    _, config_data = get_config_with_data()
    token = get_token(config_data, profile)
    sweeper = get_sweeper(config_data, profile)

    try:
        listing = sweeper.list_repositories(token)
    except RemoteAPIError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    if not listing.items:
        console.print("[yellow]No repositories found[/yellow]")
        return

    table = RichTable(title="Repositories")
    table.add_column("Repository", style="cyan")
    table.add_column("Default Branch", style="green")

    for repo in listing:
        table.add_row(repo.full_name, repo.default_branch or "-")

    console.print(table)
    if listing.truncated:
        console.print(
            f"[yellow]⚠️  Showing the first {len(listing)} repositories only[/yellow]"
        )
