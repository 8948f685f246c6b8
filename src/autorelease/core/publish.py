"""Publishing a tagged GitHub release."""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from autorelease.core.changelog import read_changelog
from autorelease.exceptions import ConsistencyError, TagExistsError
from autorelease.project.manifest import get_manifest_version

if TYPE_CHECKING:
    from autorelease.config.models import ReleaseConfig
    from autorelease.core.version import Version
    from autorelease.vcs.github import GitHubClient, PublishedRelease

logger = logging.getLogger(__name__)


class PublishOutcome(StrEnum):
    PUBLISHED = "published"
    ALREADY_PUBLISHED = "already_published"


@dataclass(frozen=True, slots=True)
class PublishResult:
    outcome: PublishOutcome
    tag_name: str
    release: PublishedRelease | None = None


def default_notes_file() -> Path:
    return Path(tempfile.gettempdir()) / "release-notes.md"


def check_consistency(version: Version, changelog_path: Path, manifest_path: Path) -> str:
    """Verify manifest and changelog both describe ``version``.

    Returns:
        The changelog notes for ``version``

    Raises:
        ConsistencyError: If the manifest version differs or the changelog
            has no section for the version
    """
    manifest_version = get_manifest_version(manifest_path)
    if manifest_version != version:
        raise ConsistencyError(
            f"Manifest {manifest_path} is at {manifest_version}, expected {version}. "
            "Run the bump stage first."
        )

    document = read_changelog(changelog_path)
    notes = document.extract_notes(version) if document else None
    if notes is None:
        raise ConsistencyError(f"{changelog_path} has no section for {version}")
    return notes


def compose_release_notes(
    notes: str | None,
    version: Version,
    config: ReleaseConfig,
    repository: str,
) -> str:
    """Changelog notes followed by the installation footer."""
    tag = config.tag_name(version)
    body = notes or f"Release {tag}\n\nSee CHANGELOG.md for details."
    footer = config.github.release_footer.format(tag=tag, version=version, repository=repository)
    return "\n\n".join(part.strip() for part in (body, footer) if part.strip()) + "\n"


def publish_release(
    client: GitHubClient,
    version: Version,
    head_sha: str,
    config: ReleaseConfig,
    *,
    changelog_path: Path,
    manifest_path: Path,
) -> PublishResult:
    """Create tag ``<prefix><version>`` at ``head_sha`` and its release.

    An existing tag is never overwritten: the result is
    ``ALREADY_PUBLISHED`` and nothing is checked, staged or created. The
    staged notes file is removed whatever the outcome.
    """
    tag = config.tag_name(version)

    if client.tag_exists(tag):
        logger.warning("Tag %s already exists, not publishing", tag)
        return PublishResult(PublishOutcome.ALREADY_PUBLISHED, tag)

    if config.github.require_consistency:
        notes = check_consistency(version, changelog_path, manifest_path)
    else:
        document = read_changelog(changelog_path)
        notes = document.extract_notes(version) if document else None

    body = compose_release_notes(notes, version, config, client.repository)
    title = config.github.release_title.format(tag=tag, version=version)
    notes_file = config.notes_file or default_notes_file()

    try:
        notes_file.write_text(body, encoding="utf-8")

        logger.info("Creating GitHub release %s", tag)
        try:
            release = client.create_release(
                tag,
                head_sha,
                title,
                notes_file.read_text(encoding="utf-8"),
                make_latest=True,
            )
        except TagExistsError:
            logger.warning("Tag %s was created concurrently, not publishing", tag)
            return PublishResult(PublishOutcome.ALREADY_PUBLISHED, tag)

        return PublishResult(PublishOutcome.PUBLISHED, tag, release)
    finally:
        notes_file.unlink(missing_ok=True)
