"""Command line interface for dotfile-manager."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import Config, default_config_file, load_config
from .core.dotfile import AbsDotfile
from .core.errors import DotfileManagerError, NoDotfilesFoundError
from .core.install import DotfileInstaller, InstallState, StaticConfirm, TerminalConfirm
from .core.loader import candidate_paths, find_dotfiles_list, load_dotfiles
from .core.logging import setup_logging

console = Console()
logger = logging.getLogger(__name__)

STATE_STYLES = {
    InstallState.ABSENT: "yellow",
    InstallState.LINKED: "green",
    InstallState.CONFLICT: "red",
}


def report_error(error: DotfileManagerError) -> None:
    """Print an error summary and its details, then abort."""
    console.print(f"[red]Error: {escape(str(error))}")
    console.print(f"[dim]{escape(repr(error))}")
    if error.__cause__ is not None:
        console.print(f"[dim]Caused by: {escape(repr(error.__cause__))}")
    logger.debug("Command failed", exc_info=error)
    raise click.Abort()


def get_config(ctx: click.Context) -> Config:
    """Load the configuration for the current invocation."""
    return load_config(ctx.obj.get("config_path"))


def plan_table(plan: List[Tuple[AbsDotfile, InstallState]], title: str) -> Table:
    """Build a table of resolved dotfiles and their install state."""
    table = Table(title=title)
    table.add_column("Repository", style="cyan")
    table.add_column("Installed", style="magenta")
    table.add_column("State", no_wrap=True)
    for entry, state in plan:
        style = STATE_STYLES[state]
        table.add_row(
            escape(str(entry.repo)),
            escape(str(entry.installed)),
            f"[{style}]{state.value}[/{style}]",
        )
    return table


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file to use (defaults to the platform config directory)",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Also write a debug log to this file",
)
@click.pass_context
def cli(
    ctx: click.Context, config_path: Optional[Path], debug: bool, log_file: Optional[str]
) -> None:
    """Dotfile management tool.

    Dotfiles live in a repository (by default ~/.dotfiles) alongside a list
    file naming them. This tool links each listed dotfile into your home
    directory.

    The list file is <repo>/dotfiles.<ext>, where the first existing extension
    out of nix, json, toml, yaml and yml is used.

    Main commands:

      install   Link every listed dotfile into place
      list      Show listed dotfiles and whether they are linked
      config    Show the configuration in use

    Run 'dotfile-manager COMMAND --help' for more information on a specific command.
    """
    setup_logging(debug=debug, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Overwrite existing files without asking")
@click.option(
    "--dry-run", is_flag=True, help="Show what would be linked without making any changes"
)
@click.pass_context
def install(ctx: click.Context, yes: bool, dry_run: bool) -> None:
    """Link every listed dotfile into the home directory.

    Dotfiles are processed in list order. If something already exists where a
    link should go you are asked whether to replace it; declining stops the
    run. Non-empty directories are never replaced. The first error stops the
    run and later dotfiles are left alone.

    Examples:

      # Link everything, asking before overwriting
      dotfile-manager install

      # Show what would happen
      dotfile-manager install --dry-run

      # Overwrite without asking
      dotfile-manager install --yes
    """
    try:
        config = get_config(ctx)
        dotfiles = load_dotfiles(config)
        policy = StaticConfirm(True) if yes else TerminalConfirm(console)
        installer = DotfileInstaller(config, policy)

        if dry_run:
            console.print(plan_table(installer.plan(dotfiles), "Dotfiles to install"))
            console.print("[yellow]Dry run completed. No links were created.")
            return

        installed = installer.install_all(dotfiles)
        console.print(f"[green]Installed {len(installed)} dotfiles.")
    except DotfileManagerError as e:
        report_error(e)


@cli.command(name="list")
@click.pass_context
def list_dotfiles(ctx: click.Context) -> None:
    """List dotfiles and their state.

    Each dotfile is shown as absent (nothing installed yet), linked (already
    points at the repository) or conflict (something else is in the way).
    """
    try:
        config = get_config(ctx)
        dotfiles = load_dotfiles(config)
        if not dotfiles:
            console.print("[yellow]No dotfiles listed.")
            return
        installer = DotfileInstaller(config, StaticConfirm(False))
        console.print(plan_table(installer.plan(dotfiles), "Dotfiles"))
    except DotfileManagerError as e:
        report_error(e)


@cli.command(name="config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the configuration and which dotfiles list is used."""
    try:
        config_path = ctx.obj.get("config_path") or default_config_file()
        config = get_config(ctx)

        console.print(f"[bold]Config file:[/] {escape(str(config_path))}", soft_wrap=True)
        console.print(f"[bold]Dotfile repo:[/] {escape(str(config.dotfile_repo))}", soft_wrap=True)
        console.print(
            f"[bold]Dotfiles basename:[/] {escape(str(config.dotfiles_basename))}", soft_wrap=True
        )

        try:
            selected: Optional[Path] = find_dotfiles_list(config)[0]
        except NoDotfilesFoundError:
            selected = None

        console.print("[bold]Dotfiles list candidates:")
        for path, source in candidate_paths(config):
            marker = "[green]*[/green]" if path == selected else " "
            console.print(f"  {marker} {escape(str(path))} ({source.name})", soft_wrap=True)
        if selected is None:
            console.print("[yellow]No dotfiles list found.")
    except DotfileManagerError as e:
        report_error(e)


def main() -> None:
    """Entry point for the dotfile-manager CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
