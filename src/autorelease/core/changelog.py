"""Changelog section generation and merging.

A release's changes are first collected into a :class:`ChangelogSection`
(an ordered mapping of category to bullets) and serialized once. The
existing document is split into its fixed header and the historical
sections; the historical text is never re-parsed or re-rendered, so prior
entries are preserved byte-for-byte.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from autorelease.config.models import DEFAULT_CHANGELOG_HEADER
from autorelease.core.commits import (
    CommitType,
    calculate_bump,
    filter_skip_release_commits,
    format_commit_for_changelog,
    parse_commits,
)
from autorelease.exceptions import ChangelogError
from autorelease.project.files import atomic_write_text

if TYPE_CHECKING:
    from pathlib import Path

    from autorelease.config.models import ReleaseConfig
    from autorelease.core.commits import ParsedCommit
    from autorelease.core.version import BumpDecision, Version
    from autorelease.vcs.git import GitRepository

logger = logging.getLogger(__name__)

# Released versions only; an "## [Unreleased]" block stays with the header.
_SECTION_START_RE = re.compile(r"^## \[v?\d", re.MULTILINE)


class ChangelogCategory(Enum):
    """Changelog categories, in rendering order."""

    BREAKING = "⚠️ BREAKING CHANGES"
    FEATURES = "✨ Features"
    FIXES = "🐛 Bug Fixes"
    PERFORMANCE = "⚡ Performance Improvements"
    REFACTOR = "♻️ Code Refactoring"
    DOCS = "📚 Documentation"
    CHORE = "🔧 Chores"

    @property
    def label(self) -> str:
        return self.value


CATEGORY_BY_TYPE = {
    CommitType.FEAT: ChangelogCategory.FEATURES,
    CommitType.FIX: ChangelogCategory.FIXES,
    CommitType.PERF: ChangelogCategory.PERFORMANCE,
    CommitType.REFACTOR: ChangelogCategory.REFACTOR,
    CommitType.DOCS: ChangelogCategory.DOCS,
    CommitType.CHORE: ChangelogCategory.CHORE,
}


@dataclass(frozen=True, slots=True)
class ChangelogSection:
    """One release's rendered changelog entry."""

    version: Version
    date: date
    entries: dict[ChangelogCategory, tuple[str, ...]] = field(default_factory=dict)

    @property
    def heading(self) -> str:
        return f"## [{self.version}] - {self.date.isoformat()}"

    def render(self) -> str:
        lines = [self.heading, ""]
        for category, bullets in self.entries.items():
            lines.extend([f"### {category.label}", "", *bullets, ""])
        return "\n".join(lines)


def build_section(
    commits: list[ParsedCommit],
    decision: BumpDecision,
    version: Version,
    today: date | None = None,
    *,
    include_scope: bool = True,
) -> ChangelogSection:
    """Group classified commits into a new changelog section.

    Breaking commits are listed only under the breaking category, using
    the footer explanation when there is one. Unclassified commits and
    types without a category (style, test, build, ci) are not rendered.

    Raises:
        ChangelogError: If the decision is not a release
    """
    if not decision.should_release:
        raise ChangelogError("No changelog section for a run without a release")

    buckets: dict[ChangelogCategory, list[str]] = {category: [] for category in ChangelogCategory}

    for pc in commits:
        if not pc.is_conventional:
            continue
        if pc.is_breaking:
            text = pc.breaking_description or pc.description
            buckets[ChangelogCategory.BREAKING].append(
                format_commit_for_changelog(pc, include_scope=include_scope, text=text)
            )
            continue
        category = CATEGORY_BY_TYPE.get(pc.commit_type)
        if category is not None:
            buckets[category].append(format_commit_for_changelog(pc, include_scope=include_scope))

    return ChangelogSection(
        version=version,
        date=today or datetime.now(UTC).date(),
        entries={category: tuple(lines) for category, lines in buckets.items() if lines},
    )


@dataclass(frozen=True, slots=True)
class ChangelogDocument:
    """A changelog split into its header block and verbatim history.

    The header runs up to the first released version heading, so it
    includes any ``## [Unreleased]`` section.
    """

    header: str
    history: str = ""

    @classmethod
    def parse(cls, text: str) -> ChangelogDocument:
        match = _SECTION_START_RE.search(text)
        if match is None:
            return cls(header=text)
        return cls(header=text[: match.start()], history=text[match.start() :])

    @staticmethod
    def _heading_re(version: Version | str) -> re.Pattern[str]:
        return re.compile(rf"^## \[{re.escape(str(version))}\]", re.MULTILINE)

    def has_version(self, version: Version | str) -> bool:
        return self._heading_re(version).search(self.history) is not None

    def prepend(self, section: ChangelogSection) -> ChangelogDocument:
        rendered = section.render()
        history = f"{rendered}\n{self.history}" if self.history else rendered
        return ChangelogDocument(header=self.header, history=history)

    def extract_notes(self, version: Version | str) -> str | None:
        """The body of a version's section, without its heading."""
        match = self._heading_re(version).search(self.history)
        if match is None:
            return None
        start = self.history.find("\n", match.end())
        if start == -1:
            return None
        following = _SECTION_START_RE.search(self.history, start)
        end = following.start() if following else len(self.history)
        return self.history[start:end].strip() or None

    def render(self) -> str:
        if not self.history:
            return self.header
        return f"{self.header.rstrip()}\n\n{self.history}"


def read_changelog(path: Path) -> ChangelogDocument | None:
    if not path.is_file():
        return None
    return ChangelogDocument.parse(path.read_text(encoding="utf-8"))


def update_changelog(
    path: Path,
    section: ChangelogSection,
    header: str = DEFAULT_CHANGELOG_HEADER,
) -> bool:
    """Insert ``section`` into the changelog at ``path``.

    The document is created with ``header`` when missing. Returns False
    without touching the file when a section for the version exists.
    """
    document = read_changelog(path)
    if document is None:
        document = ChangelogDocument(header=header)
    elif document.has_version(section.version):
        logger.info("%s already has a section for %s", path, section.version)
        return False

    atomic_write_text(path, document.prepend(section).render())
    logger.info("Added %s to %s", section.heading, path)
    return True


def generate_changelog(
    repo: GitRepository,
    version: Version,
    config: ReleaseConfig,
    today: date | None = None,
) -> ChangelogSection | None:
    """Build the section for ``version`` from commits since the latest tag.

    Returns None when the commits do not warrant a release.
    """
    latest_tag = repo.get_latest_tag(f"{config.tag_prefix}*")
    commits = filter_skip_release_commits(
        repo.get_commits_since_tag(latest_tag), config.commits.skip_release_patterns
    )
    parsed = parse_commits(commits, config.commits)
    decision = calculate_bump(parsed, config.commits)

    if not decision.should_release:
        return None

    return build_section(
        parsed,
        decision,
        version,
        today,
        include_scope=config.changelog.include_scope,
    )
