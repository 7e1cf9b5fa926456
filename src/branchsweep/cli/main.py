"""Main CLI entry point for branchsweep."""

import typer
from typing import Optional

from branchsweep.cli.commands import branch, profile, repo, tag
from branchsweep.cli.utils import configure_logging

app = typer.Typer(
    name="branchsweep",
    help="branchsweep - Bulk archive and delete repository branches",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    branchsweep - Bulk archive and delete repository branches
    """
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        # No subcommand was invoked, show help
        print(ctx.get_help())
        raise typer.Exit(0)


app.add_typer(repo.app, name="repo", help="Repository commands")
app.add_typer(branch.app, name="branch", help="Branch listing and retirement")
app.add_typer(tag.app, name="tag", help="Tag commands")
app.add_typer(profile.app, name="profile", help="Credential profiles")


@app.command()
def init(
    tag_prefix: Optional[str] = typer.Option(
        None, "--tag-prefix", help="Default archive tag prefix"
    ),
):
    """Create a default configuration file."""
    from branchsweep.config import Config
    from branchsweep.utils.tag_names import InvalidTagPrefixError, validate_tag_prefix

    if tag_prefix:
        try:
            validate_tag_prefix(tag_prefix)
        except InvalidTagPrefixError as e:
            typer.secho(f"❌ {e}", fg=typer.colors.RED)
            raise typer.Exit(1)

    config = Config()
    try:
        config_data = config.init()
    except FileExistsError:
        typer.secho(
            f"❌ Config already exists at {config.config_path}", fg=typer.colors.RED
        )
        raise typer.Exit(1)

    if tag_prefix:
        config_data.tag_prefix = tag_prefix
        config.save(config_data)

    typer.secho(f"✅ Created {config.config_path}", fg=typer.colors.GREEN)


@app.command()
def version():
    """Show branchsweep version."""
    from branchsweep import __version__

    typer.echo(f"branchsweep version {__version__}")


@app.command()
def status():
    """Show configuration and environment variables."""
    from branchsweep.cli.utils import get_config_with_data, mask_token, show_env_config
    from rich.console import Console

    console = Console()
    config, config_data = get_config_with_data()

    console.print("\n[bold]branchsweep Status[/bold]")
    console.print(
        f"Config: {config.config_path}{'' if config.exists else ' (not created)'}"
    )
    console.print(f"Tag prefix: {config_data.tag_prefix}")
    console.print(f"Max workers: {config_data.max_workers}")

    credentials = config_data.active_credentials()
    if credentials:
        console.print(f"Active Profile: {config_data.active_profile}")
        console.print(f"  URL: {credentials.api_url}")
        console.print(f"  Token: {mask_token(credentials.token)}")
    else:
        console.print("Active Profile: [dim]None[/dim]")
        console.print(f"  URL: {config_data.api_url}")

    show_env_config()


if __name__ == "__main__":
    app()
