"""Branch listing and retirement commands."""

import typer
from typing import List, Optional
from rich.console import Console
from rich.table import Table as RichTable

from branchsweep.cli.utils import (
    get_config_with_data,
    get_sweeper,
    get_token,
    parse_repo,
)
from branchsweep.core.confirmation import ConfirmationGate
from branchsweep.core.reporter import WorkingSet, prune, summarize
from branchsweep.exceptions import (
    BranchSweepError,
    ConfirmationMismatch,
    RemoteAPIError,
)
from branchsweep.models import BatchResult, OperationMode, OperationRequest
from branchsweep.utils.pagination import page_count, paginate
from branchsweep.utils.tag_names import derive_tag_name

app = typer.Typer(help="Branch commands", invoke_without_command=True)
console = Console()


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@app.command(name="list")
def list_branches(
    ctx: typer.Context,
    repo: Optional[str] = typer.Argument(None, help="Repository as owner/name"),
    page: int = typer.Option(1, "--page", help="Page to show"),
    per_page: int = typer.Option(10, "--per-page", help="Branches per page"),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-P", help="Credential profile to use"
    ),
):
    """List branches of a repository."""
    repo_ref = parse_repo(repo, ctx)
    _, config_data = get_config_with_data()
    token = get_token(config_data, profile)
    sweeper = get_sweeper(config_data, profile)

    try:
        listing = sweeper.list_branches(repo_ref, token)
    except RemoteAPIError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    if not listing.items:
        console.print("[yellow]No branches found[/yellow]")
        return

    pages = page_count(len(listing), per_page)
    table = RichTable(
        title=f"Branches in '{repo_ref}' (page {min(max(page, 1), pages)}/{pages})"
    )
    table.add_column("Branch Name", style="cyan")
    table.add_column("Commit", style="dim")
    table.add_column("Protected", style="red")

    for branch in paginate(listing.items, page, per_page):
        table.add_row(
            branch.name, branch.commit_sha[:7], "Yes" if branch.protected else "No"
        )

    console.print(table)
    console.print(f"{len(listing)} Branches")
    if listing.truncated:
        console.print(
            f"[yellow]⚠️  Branch listing was cut off after {len(listing)} branches[/yellow]"
        )


def _show_plan(request: OperationRequest) -> None:
    if request.mode is OperationMode.DELETE_ONLY:
        console.print("You are about to [bold]delete[/bold] the following branches:")
    else:
        console.print(
            "You are about to [bold]archive and delete[/bold] the following branches:"
        )
    for name in request.branches:
        if request.mode.archives:
            console.print(f"  • {name} → {derive_tag_name(name, request.tag_prefix)}")
        else:
            console.print(f"  • {name}")

    if request.mode is OperationMode.DELETE_ONLY:
        console.print(
            "[bold red]Warning: This action will permanently delete these branches "
            "without creating archive tags![/bold red]"
        )
    else:
        console.print(
            "[bold red]Warning: This action will permanently delete these branches "
            "after creating archive tags![/bold red]"
        )


def _show_result(result: BatchResult) -> None:
    table = RichTable(title="Results")
    table.add_column("Branch", style="cyan")
    table.add_column("Archived", style="green")
    table.add_column("Deleted", style="green")
    table.add_column("Status")

    for outcome in result.results:
        status = "[green]ok[/green]" if outcome.success else f"[red]{outcome.error}[/red]"
        table.add_row(
            outcome.branch,
            "✓" if outcome.archived else "",
            "✓" if outcome.deleted else "",
            status,
        )
    console.print(table)


@app.command()
def process(
    ctx: typer.Context,
    repo: Optional[str] = typer.Argument(None, help="Repository as owner/name"),
    branches: Optional[List[str]] = typer.Argument(None, help="Branches to process"),
    mode: OperationMode = typer.Option(
        OperationMode.ARCHIVE_ONLY, "--mode", "-m", help="Operation to apply"
    ),
    prefix: Optional[str] = typer.Option(
        None, "--prefix", "-p", help="Archive tag prefix (default from config)"
    ),
    match: Optional[List[str]] = typer.Option(
        None, "--match", help="Also select branches matching a glob pattern"
    ),
    confirm: Optional[str] = typer.Option(
        None, "--confirm", help="Confirmation phrase for deleting operations"
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-P", help="Credential profile to use"
    ),
):
    """Archive and/or delete branches."""
    repo_ref = parse_repo(repo, ctx)
    _, config_data = get_config_with_data()
    token = get_token(config_data, profile)
    sweeper = get_sweeper(config_data, profile)

    try:
        working_set = sweeper.load_working_set(repo_ref, token)
    except RemoteAPIError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    try:
        for name in branches or []:
            working_set.select(name)
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    for pattern in match or []:
        if not working_set.select_matching(pattern):
            console.print(f"[yellow]⚠️  No unprotected branches match '{pattern}'[/yellow]")

    selected = working_set.selected_names()
    if not selected:
        console.print("[yellow]No branches selected[/yellow]")
        raise typer.Exit(1)

    try:
        request = OperationRequest(
            mode=mode, branches=selected, tag_prefix=prefix or config_data.tag_prefix
        )
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    gate = ConfirmationGate()
    typed = None
    if gate.submit(request) is None:
        _show_plan(request)
        typed = confirm
        if typed is None:
            typed = typer.prompt(f"Please type '{gate.expected_phrase}' to confirm")
        try:
            request = gate.confirm(typed)
        except ConfirmationMismatch as e:
            console.print(f"[yellow]Cancelled: {e}[/yellow]")
            raise typer.Exit(1)

    with console.status(f"Processing {len(request.branches)} branches..."):
        try:
            result = sweeper.process(repo_ref, request, token, confirmation=typed)
        except BranchSweepError as e:
            console.print(f"[red]❌ {e}[/red]")
            raise typer.Exit(1)

    _show_result(result)

    summary = summarize(result)
    if summary.success_text():
        console.print(f"[green]✅ {summary.success_text()}[/green]")
    if summary.failure_text():
        console.print(f"[red]❌ {summary.failure_text()}[/red]")

    remaining = prune(working_set, result)
    console.print(f"[dim]{len(remaining)} branches remain in '{repo_ref}'[/dim]")

    if summary.has_failures:
        raise typer.Exit(1)
