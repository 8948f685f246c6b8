"""Implementation of the 'changelog' and 'bump' commands.

Both consume the version resolved by 'determine' through ``NEW_VERSION``
and modify local files only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autorelease.cli.commands._helpers import abort_on_error, build_context
from autorelease.core.changelog import generate_changelog, update_changelog
from autorelease.core.version import Version
from autorelease.project import update_manifest_version, update_version_file
from autorelease.vcs import GitRepository

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date
    from pathlib import Path

    from rich.console import Console

    from autorelease.cli.commands._helpers import CommandContext


def _new_version(ctx: CommandContext, err_console: Console) -> Version:
    with abort_on_error(err_console, "reading NEW_VERSION"):
        return Version.parse(ctx.env.require_new_version())


def run_changelog(
    path: str | None,
    environ: Mapping[str, str],
    console: Console,
    err_console: Console,
    today: date | None = None,
) -> bool:
    """Run the changelog command.

    Returns:
        True if the changelog was modified
    """
    ctx = build_context(path, environ, err_console)
    version = _new_version(ctx, err_console)

    if not ctx.config.changelog.enabled:
        console.print("[dim]Changelog disabled in configuration.[/]")
        return False

    console.print(f"Generating changelog for [green]{ctx.config.tag_name(version)}[/]...")

    with abort_on_error(err_console, "generating changelog"):
        repo = GitRepository(ctx.project_path)
        section = generate_changelog(repo, version, ctx.config, today)

        if section is None:
            console.print("[yellow]No releasable changes found. Changelog not updated.[/]")
            return False

        changed = update_changelog(ctx.changelog_path, section, ctx.config.changelog.header)

    if changed:
        console.print(f"  [green]✓[/] Updated {ctx.config.changelog.path}")
    else:
        console.print(
            f"  [yellow]•[/] {ctx.config.changelog.path} already has a section for {version}"
        )
    return changed


def apply_version(ctx: CommandContext, version: Version, console: Console) -> list[Path]:
    """Write ``version`` to the manifest and extra version files.

    Returns:
        The files that changed
    """
    changed: list[Path] = []

    if update_manifest_version(ctx.manifest_path, version, ctx.config.manifest.required_fields):
        console.print(f"  [green]✓[/] Updated version in {ctx.config.manifest.path}")
        changed.append(ctx.manifest_path)
    else:
        console.print(f"  [yellow]•[/] {ctx.config.manifest.path} already at {version}")

    for version_file in ctx.config.version.version_files:
        version_file_path = ctx.project_path / version_file
        if update_version_file(version_file_path, str(version)):
            console.print(f"  [green]✓[/] Updated version in {version_file}")
            changed.append(version_file_path)

    return changed


def run_bump(
    path: str | None,
    environ: Mapping[str, str],
    console: Console,
    err_console: Console,
) -> list[Path]:
    """Run the bump command."""
    ctx = build_context(path, environ, err_console)
    version = _new_version(ctx, err_console)

    console.print(f"Updating version to [green]{version}[/]...")

    with abort_on_error(err_console, "updating version"):
        return apply_version(ctx, version, console)
