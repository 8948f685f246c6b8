"""Command-line entry point."""

from __future__ import annotations

import logging
import os
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from autorelease import __version__

app = typer.Typer(
    name="autorelease",
    help="Version, changelog and GitHub releases from conventional commits.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

PathOption = Annotated[
    str | None,
    typer.Option("--path", "-p", help="Project directory (defaults to the current directory)."),
]


def setup_logging(verbose: bool) -> None:
    handler = RichHandler(console=err_console, show_path=False, show_time=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    # Request-level detail from httpx is only useful when debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"autorelease {__version__}")
        raise typer.Exit


@app.callback()
def _main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    setup_logging(verbose)


@app.command()
def determine(path: PathOption = None) -> None:
    """Resolve the next version from commits since the last release."""
    from autorelease.cli.commands.determine import run_determine

    run_determine(path, os.environ, console, err_console)


@app.command()
def changelog(path: PathOption = None) -> None:
    """Add the NEW_VERSION section to the changelog."""
    from autorelease.cli.commands.update import run_changelog

    run_changelog(path, os.environ, console, err_console)


@app.command()
def bump(path: PathOption = None) -> None:
    """Write NEW_VERSION to the manifest and version files."""
    from autorelease.cli.commands.update import run_bump

    run_bump(path, os.environ, console, err_console)


@app.command()
def publish(path: PathOption = None) -> None:
    """Create the NEW_VERSION tag and GitHub release."""
    from autorelease.cli.commands.publish import run_publish

    run_publish(path, os.environ, console, err_console)


@app.command()
def release(
    path: PathOption = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show what would happen without changing anything.")
    ] = False,
    commit: Annotated[
        bool, typer.Option("--commit", help="Commit the changelog and version files.")
    ] = False,
    push: Annotated[bool, typer.Option("--push", help="Push the release commit.")] = False,
    no_publish: Annotated[
        bool, typer.Option("--no-publish", help="Skip tag and GitHub release creation.")
    ] = False,
) -> None:
    """Run the whole pipeline: determine, changelog, bump, publish."""
    from autorelease.cli.commands.release import run_release

    run_release(
        path,
        os.environ,
        console,
        err_console,
        dry_run=dry_run,
        commit=commit,
        push=push,
        publish=not no_publish,
    )


@app.command()
def check(path: PathOption = None) -> None:
    """Validate the version manifest."""
    from autorelease.cli.commands.check import run_check

    run_check(path, os.environ, console, err_console)


def main() -> None:
    app()
