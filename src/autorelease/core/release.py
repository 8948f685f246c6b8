"""Release resolution: from commit history to a release plan."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from autorelease.core.changelog import read_changelog
from autorelease.core.commits import (
    CommitType,
    calculate_bump,
    count_by_type,
    filter_skip_release_commits,
    parse_commits,
)
from autorelease.core.version import Version
from autorelease.exceptions import InvalidVersionError, ProjectError
from autorelease.project.manifest import get_manifest_version

if TYPE_CHECKING:
    from pathlib import Path

    from autorelease.config.models import ReleaseConfig
    from autorelease.core.commits import ParsedCommit
    from autorelease.core.version import BumpDecision
    from autorelease.vcs.git import GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """Outcome of the determine stage.

    ``should_release`` is False (and ``new_version`` None) when the commits
    do not warrant a release. That is a normal terminal state, not an error.
    ``resumed`` marks a release whose files were already updated by an
    earlier, unpublished run.
    """

    old_version: Version
    decision: BumpDecision
    new_version: Version | None
    commits: tuple[ParsedCommit, ...] = ()
    previous_tag: str | None = None
    type_counts: dict[CommitType, int] = field(default_factory=dict)
    resumed: bool = False

    @property
    def should_release(self) -> bool:
        return self.new_version is not None

    @property
    def is_first_release(self) -> bool:
        return self.previous_tag is None

    @property
    def bump_type(self) -> str:
        return str(self.decision.bump)

    def step_outputs(self) -> dict[str, str]:
        if self.new_version is None:
            return {
                "should_release": "false",
                "old_version": str(self.old_version),
                "bump_type": self.bump_type,
            }
        return {
            "should_release": "true",
            "new_version": str(self.new_version),
            "old_version": str(self.old_version),
            "bump_type": self.bump_type,
        }


def _tag_version(tag: str | None, prefix: str) -> Version | None:
    if tag is None:
        return None
    try:
        return Version.parse(tag.removeprefix(prefix))
    except InvalidVersionError:
        logger.warning("Ignoring tag %s: not a %smajor.minor.patch version", tag, prefix)
        return None


def _has_changelog_section(changelog_path: Path | None, version: Version) -> bool:
    if changelog_path is None:
        return False
    document = read_changelog(changelog_path)
    return document is not None and document.has_version(version)


def determine_release(
    repo: GitRepository,
    manifest_path: Path,
    config: ReleaseConfig,
    changelog_path: Path | None = None,
) -> ReleasePlan:
    """Resolve the next version from commits since the latest release tag.

    The bump is applied to the latest tag's version. A manifest already
    ahead of that tag means an earlier run updated the files but never
    published; its version is kept instead of being bumped a second time.
    Without a previous tag the bump is applied to the manifest's version,
    unless the changelog already has a section for it.

    Raises:
        ManifestError: If the manifest cannot be read
        InvalidVersionError: If the manifest version is malformed
        GitError: If history cannot be read
    """
    current = get_manifest_version(manifest_path)
    latest_tag = repo.get_latest_tag(f"{config.tag_prefix}*")
    if latest_tag is None:
        logger.info("No previous tags found, this will be the first release")
    else:
        logger.info("Latest tag: %s", latest_tag)

    tagged = _tag_version(latest_tag, config.tag_prefix)
    if tagged is None:
        base = current
        pending = latest_tag is None and _has_changelog_section(changelog_path, current)
    else:
        base = max(current, tagged)
        pending = current > tagged

    commits = repo.get_commits_since_tag(latest_tag)
    commits = filter_skip_release_commits(commits, config.commits.skip_release_patterns)
    parsed = parse_commits(commits, config.commits)
    decision = calculate_bump(parsed, config.commits)
    counts = count_by_type(parsed)

    if counts.get(CommitType.OTHER):
        logger.info("%d commit(s) do not follow the conventional format", counts[CommitType.OTHER])

    if not decision.should_release:
        new_version = None
        logger.info("No releasable commits since %s", latest_tag or "the beginning of history")
    elif pending:
        new_version = current
        logger.info("Resuming unpublished release %s (%s)", current, decision.bump)
    else:
        new_version = decision.apply(base)
        logger.info("Version bump: %s -> %s (%s)", base, new_version, decision.bump)

    return ReleasePlan(
        old_version=tagged if pending and tagged is not None else base,
        decision=decision,
        new_version=new_version,
        commits=tuple(parsed),
        previous_tag=latest_tag,
        type_counts=counts,
        resumed=pending and new_version is not None,
    )


def write_step_outputs(outputs: dict[str, str], sink: Path) -> None:
    """Append ``key=value`` lines to a CI step-output file.

    Raises:
        ProjectError: If the file cannot be written
    """
    try:
        with sink.open("a", encoding="utf-8") as f:
            for key, value in outputs.items():
                f.write(f"{key}={value}\n")
    except OSError as e:
        raise ProjectError(f"Cannot write step outputs to {sink}: {e}") from e
    logger.debug("Wrote step outputs to %s", sink)
