"""Tag listing commands."""

import typer
from rich.console import Console
from rich.table import Table as RichTable
from typing import Optional

from branchsweep.cli.utils import (
    get_config_with_data,
    get_sweeper,
    get_token,
    parse_repo,
)
from branchsweep.exceptions import RemoteAPIError
from branchsweep.utils.pagination import page_count, paginate

app = typer.Typer(help="Tag commands", invoke_without_command=True)
console = Console()


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@app.command(name="list")
def list_tags(
    ctx: typer.Context,
    repo: Optional[str] = typer.Argument(None, help="Repository as owner/name"),
    prefix: Optional[str] = typer.Option(
        None, "--prefix", "-p", help="Only show tags starting with this prefix"
    ),
    page: int = typer.Option(1, "--page", help="Page to show"),
    per_page: int = typer.Option(10, "--per-page", help="Tags per page"),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-P", help="Credential profile to use"
    ),
):
    """List tags of a repository."""
    repo_ref = parse_repo(repo, ctx)
    _, config_data = get_config_with_data()
    token = get_token(config_data, profile)
    sweeper = get_sweeper(config_data, profile)

    try:
        listing = sweeper.list_tags(repo_ref, token)
    except RemoteAPIError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    tags = listing.items
    if prefix:
        tags = [t for t in tags if t.name.startswith(prefix)]

    if not tags:
        console.print("[yellow]No tags found[/yellow]")
        return

    pages = page_count(len(tags), per_page)
    table = RichTable(title=f"Tags in '{repo_ref}' (page {min(max(page, 1), pages)}/{pages})")
    table.add_column("Tag Name", style="cyan")
    table.add_column("Commit SHA", style="dim")

    for tag in paginate(tags, page, per_page):
        table.add_row(tag.name, tag.short_sha)

    console.print(table)
    console.print(f"{len(tags)} Tags")
    if listing.truncated:
        console.print(
            f"[yellow]⚠️  Tag listing was cut off after {len(listing)} tags[/yellow]"
        )
