"""Implementation of the 'release' command.

Runs the whole pipeline in order: determine, changelog, version update,
optional commit/push, publish.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from rich.panel import Panel

from autorelease.cli.commands._helpers import abort_on_error, build_context
from autorelease.cli.commands.determine import print_plan
from autorelease.cli.commands.publish import publish_version
from autorelease.cli.commands.update import apply_version
from autorelease.core.changelog import build_section, update_changelog
from autorelease.core.publish import PublishOutcome
from autorelease.core.release import determine_release, write_step_outputs
from autorelease.vcs import GitRepository

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date
    from pathlib import Path

    import httpx
    from rich.console import Console

    from autorelease.core.release import ReleasePlan


def run_release(
    path: str | None,
    environ: Mapping[str, str],
    console: Console,
    err_console: Console,
    *,
    dry_run: bool = False,
    commit: bool = False,
    push: bool = False,
    publish: bool = True,
    today: date | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ReleasePlan:
    """Run the release command.

    Args:
        path: Optional path to project directory
        environ: Process environment
        console: Console for standard output
        err_console: Console for error output
        dry_run: Only report what would happen
        commit: Commit the changelog and version files
        push: Push the release commit (implies ``commit``)
        publish: Create the tag and GitHub release
        today: Release date (defaults to the current UTC date)
        transport: httpx transport for the GitHub client
    """
    ctx = build_context(path, environ, err_console)
    commit = commit or push

    # Configuration errors surface before anything is modified.
    if publish and not dry_run:
        with abort_on_error(err_console, "loading environment"):
            ctx.env.require_github_token()
            ctx.env.require_github_repository()

    with abort_on_error(err_console, "determining version"):
        repo = GitRepository(ctx.project_path)
        plan = determine_release(repo, ctx.manifest_path, ctx.config, ctx.changelog_path)

    print_plan(plan, console)

    if ctx.env.github_output is not None and not dry_run:
        with abort_on_error(err_console, "writing step outputs"):
            write_step_outputs(plan.step_outputs(), ctx.env.github_output)

    if plan.new_version is None:
        return plan

    version = plan.new_version
    tag = ctx.config.tag_name(version)

    if dry_run:
        steps = [f"  • Update version in [cyan]{ctx.config.manifest.path}[/]"]
        if ctx.config.changelog.enabled:
            steps.append(f"  • Add {version} to [cyan]{ctx.config.changelog.path}[/]")
        if commit:
            steps.append("  • Commit the release changes" + (" and push" if push else ""))
        if publish:
            steps.append(f"  • Create tag and GitHub release [cyan]{tag}[/]")
        console.print(
            Panel(
                "[bold]Would make the following changes:[/]\n\n" + "\n".join(steps),
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        return plan

    release_files: list[Path] = [ctx.manifest_path]
    release_files.extend(ctx.project_path / f for f in ctx.config.version.version_files)

    with abort_on_error(err_console, "updating release files"):
        if ctx.config.changelog.enabled:
            release_files.append(ctx.changelog_path)
            section = build_section(
                list(plan.commits),
                plan.decision,
                version,
                today or datetime.now(UTC).date(),
                include_scope=ctx.config.changelog.include_scope,
            )
            if update_changelog(ctx.changelog_path, section, ctx.config.changelog.header):
                console.print(f"  [green]✓[/] Updated {ctx.config.changelog.path}")
            else:
                console.print(f"  [yellow]•[/] {ctx.config.changelog.path} already has {version}")

        apply_version(ctx, version, console)

    with abort_on_error(err_console, "committing release"):
        # Files left uncommitted by an earlier unpublished run are included.
        if commit and repo.is_dirty(release_files):
            message = ctx.config.commit_message.format(tag=tag, version=version)
            sha = repo.commit_files(release_files, message)
            console.print(f"  [green]✓[/] Committed {sha[:7]}: {message}")
        if push:
            repo.push()
            console.print("  [green]✓[/] Pushed release commit")

    if not publish:
        return plan

    with abort_on_error(err_console, "publishing release"):
        result = publish_version(ctx, version, repo.head_sha(), console, transport)

    if result.outcome is PublishOutcome.PUBLISHED:
        console.print(
            Panel(
                f"[green]Released {tag}![/]",
                title="[green]Release Complete[/]",
                border_style="green",
            )
        )
    return plan
