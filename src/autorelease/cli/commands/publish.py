"""Implementation of the 'publish' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from autorelease.cli.commands._helpers import abort_on_error, build_context
from autorelease.core.publish import PublishOutcome, publish_release
from autorelease.core.version import Version
from autorelease.vcs import GitHubClient, GitRepository

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx
    from rich.console import Console

    from autorelease.cli.commands._helpers import CommandContext
    from autorelease.core.publish import PublishResult


def publish_version(
    ctx: CommandContext,
    version: Version,
    head_sha: str,
    console: Console,
    transport: httpx.BaseTransport | None = None,
) -> PublishResult:
    token = ctx.env.require_github_token()
    repository = ctx.env.require_github_repository()
    api_url = ctx.env.github_api_url or ctx.config.github.api_url

    console.print(f"Creating GitHub release for [green]{ctx.config.tag_name(version)}[/]...")

    with GitHubClient(
        token,
        repository,
        api_url=api_url,
        timeout=ctx.config.github.timeout,
        transport=transport,
    ) as client:
        result = publish_release(
            client,
            version,
            head_sha,
            ctx.config,
            changelog_path=ctx.changelog_path,
            manifest_path=ctx.manifest_path,
        )

    if result.outcome is PublishOutcome.ALREADY_PUBLISHED:
        console.print(f"[yellow]Tag {result.tag_name} already exists. Nothing to publish.[/]")
    else:
        console.print("  [green]✓[/] GitHub release created")
        if result.release is not None and result.release.html_url:
            console.print(f"  {result.release.html_url}")
    return result


def run_publish(
    path: str | None,
    environ: Mapping[str, str],
    console: Console,
    err_console: Console,
    transport: httpx.BaseTransport | None = None,
) -> PublishResult:
    """Run the publish command.

    Requires ``NEW_VERSION``, ``GITHUB_TOKEN`` and ``GITHUB_REPOSITORY``.
    """
    ctx = build_context(path, environ, err_console)

    with abort_on_error(err_console, "publishing release"):
        version = Version.parse(ctx.env.require_new_version())
        ctx.env.require_github_token()
        ctx.env.require_github_repository()

        repo = GitRepository(ctx.project_path)
        return publish_version(ctx, version, repo.head_sha(), console, transport)
