"""Implementation of the 'check' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

from autorelease.cli.commands._helpers import abort_on_error, build_context
from autorelease.exceptions import ConsistencyError
from autorelease.project import get_version_from_file, validate_manifest

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console


def run_check(
    path: str | None,
    environ: Mapping[str, str],
    console: Console,
    err_console: Console,
) -> None:
    """Validate the version manifest and any extra version files.

    Every configured version file must carry the manifest's version.
    """
    ctx = build_context(path, environ, err_console)
    required_fields = ctx.config.manifest.required_fields
    console.print(f"Validating [cyan]{ctx.config.manifest.path}[/]...")

    with abort_on_error(err_console, "validating manifest"):
        manifest = validate_manifest(ctx.manifest_path, required_fields)

    fields = dict.fromkeys(["version", *required_fields])
    for field in fields:
        value = getattr(manifest, field, None)
        console.print(f"  [green]✓[/] {field}: {escape(str(value))}")

    with abort_on_error(err_console, "checking version files"):
        for version_file in ctx.config.version.version_files:
            found = get_version_from_file(ctx.project_path / version_file)
            if found != manifest.version:
                raise ConsistencyError(
                    f"{version_file} has version {found}, manifest has {manifest.version}"
                )
            console.print(f"  [green]✓[/] {version_file}: {escape(found)}")
