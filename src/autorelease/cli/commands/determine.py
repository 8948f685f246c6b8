"""Implementation of the 'determine' command.

Resolves the next version from commits since the latest tag and reports it
to the CI step-output file.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from autorelease.cli.commands._helpers import abort_on_error, build_context
from autorelease.core.commits import get_breaking_changes
from autorelease.core.release import determine_release, write_step_outputs
from autorelease.vcs import GitRepository

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

    from autorelease.core.release import ReleasePlan


def commits_table(plan: ReleasePlan) -> Table:
    table = Table(title="Analyzed commits", show_lines=False)
    table.add_column("SHA", style="dim")
    table.add_column("Type")
    table.add_column("Scope")
    table.add_column("Description")

    for pc in plan.commits:
        kind = f"[red]{pc.commit_type}![/]" if pc.is_breaking else str(pc.commit_type)
        table.add_row(pc.sha[:7], kind, escape(pc.scope or ""), escape(pc.description))
    return table


def print_plan(plan: ReleasePlan, console: Console) -> None:
    if plan.commits:
        console.print(commits_table(plan))

    if plan.type_counts:
        counts = ", ".join(f"{t}: {n}" for t, n in plan.type_counts.items())
        console.print(f"[dim]Commit types: {counts}[/]")

    if plan.new_version is None:
        console.print(
            "[yellow]No conventional commits found (feat:, fix:, perf:, BREAKING CHANGE:). "
            "Skipping release.[/]"
        )
        return

    for pc in get_breaking_changes(list(plan.commits)):
        text = pc.breaking_description or pc.description
        console.print(f"[red]Breaking:[/] {escape(text)} [dim]({pc.sha[:7]})[/]")

    if plan.resumed:
        console.print(
            f"[yellow]Resuming unpublished release[/] [green]{plan.new_version}[/] "
            f"(files already updated, latest tag {plan.previous_tag or 'none'})"
        )
        return

    first = " (first release)" if plan.is_first_release else ""
    console.print(
        f"[green]Version bump:[/] [cyan]{plan.old_version}[/] -> "
        f"[green]{plan.new_version}[/] ({plan.bump_type}){first}"
    )
    reason = plan.decision.reason
    if reason is not None:
        console.print(f"[dim]Triggered by {reason.sha[:7]}: {escape(reason.subject)}[/]")


def run_determine(
    path: str | None,
    environ: Mapping[str, str],
    console: Console,
    err_console: Console,
) -> ReleasePlan:
    """Run the determine command.

    Args:
        path: Optional path to project directory
        environ: Process environment
        console: Console for standard output
        err_console: Console for error output
    """
    ctx = build_context(path, environ, err_console)

    with abort_on_error(err_console, "determining version"):
        repo = GitRepository(ctx.project_path)
        plan = determine_release(repo, ctx.manifest_path, ctx.config, ctx.changelog_path)

    print_plan(plan, console)

    if ctx.env.github_output is not None:
        with abort_on_error(err_console, "writing step outputs"):
            write_step_outputs(plan.step_outputs(), ctx.env.github_output)

    return plan
