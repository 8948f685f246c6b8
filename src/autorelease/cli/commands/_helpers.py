"""Shared plumbing for CLI commands."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from autorelease.config import RuntimeEnvironment, load_config
from autorelease.exceptions import AutoReleaseError

if TYPE_CHECKING:
    from rich.console import Console

    from autorelease.config.models import ReleaseConfig


@dataclass(frozen=True, slots=True)
class CommandContext:
    project_path: Path
    config: ReleaseConfig
    env: RuntimeEnvironment

    @property
    def manifest_path(self) -> Path:
        return self.project_path / self.config.manifest.path

    @property
    def changelog_path(self) -> Path:
        return self.project_path / self.config.changelog.path


@contextmanager
def abort_on_error(err_console: Console, action: str) -> Iterator[None]:
    """Turn library errors into a diagnostic and exit status 1."""
    try:
        yield
    except AutoReleaseError as e:
        err_console.print(f"[red]Error {action}:[/] {escape(str(e))}")
        raise SystemExit(1) from e


def build_context(
    path: str | None,
    environ: Mapping[str, str],
    err_console: Console,
) -> CommandContext:
    project_path = Path(path).resolve() if path else Path.cwd()

    with abort_on_error(err_console, "loading config"):
        config = load_config(project_path)
        env = RuntimeEnvironment.from_environ(environ)

    return CommandContext(project_path=project_path, config=config, env=env)
