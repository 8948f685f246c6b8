"""Conventional commit parsing.

Every raw commit is classified exactly once into a :class:`ParsedCommit`;
both the version resolver and the changelog generator consume these
records. Messages that do not follow the grammar

    <type>[(<scope>)][!]: <description>

    [body]

    [BREAKING CHANGE: <explanation>]

are kept as ``CommitType.OTHER`` so they can be counted, but they never
influence the version bump or the changelog. Classification never raises.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from autorelease.core.version import BumpDecision, BumpType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from autorelease.config.models import CommitsConfig
    from autorelease.vcs.git import Commit

logger = logging.getLogger(__name__)

DEFAULT_BREAKING_PATTERN = r"BREAKING[ -]CHANGE:"

_HEADER_RE = re.compile(
    r"^(?P<type>[A-Za-z]+)(?:\((?P<scope>[^()\s][^()]*)\))?(?P<breaking>!)?:(?P<description>.*)$"
)


class CommitType(StrEnum):
    FEAT = "feat"
    FIX = "fix"
    PERF = "perf"
    DOCS = "docs"
    REFACTOR = "refactor"
    CHORE = "chore"
    STYLE = "style"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    OTHER = "other"


KNOWN_TYPES = frozenset(t.value for t in CommitType if t is not CommitType.OTHER)


@dataclass(frozen=True, slots=True)
class ParsedCommit:
    """A classified commit."""

    sha: str
    subject: str
    body: str
    commit_type: CommitType
    scope: str | None
    is_breaking: bool
    description: str
    breaking_description: str | None = None
    raw_type: str | None = None

    @property
    def is_conventional(self) -> bool:
        return self.commit_type is not CommitType.OTHER

    @classmethod
    def from_commit(
        cls,
        commit: Commit,
        breaking_pattern: str = DEFAULT_BREAKING_PATTERN,
    ) -> ParsedCommit:
        return classify_message(commit.message, sha=commit.sha, breaking_pattern=breaking_pattern)


def _find_breaking_footer(body: str, breaking_pattern: str) -> str | None:
    footer = re.compile(rf"^(?:{breaking_pattern})[ \t]*(?P<text>.*)$", re.MULTILINE)
    match = footer.search(body)
    if match is None:
        return None
    return match.group("text").strip()


def classify_message(
    message: str,
    sha: str = "",
    breaking_pattern: str = DEFAULT_BREAKING_PATTERN,
) -> ParsedCommit:
    """Classify one commit message.

    Args:
        message: Full commit message (subject and optional body)
        sha: Commit id, carried through for reference
        breaking_pattern: Regex for the breaking-change footer token

    Returns:
        A ParsedCommit; malformed messages yield ``CommitType.OTHER``
    """
    text = message.strip()
    subject, _, body = text.partition("\n")
    subject = subject.strip()
    body = body.strip()

    other = ParsedCommit(
        sha=sha,
        subject=subject,
        body=body,
        commit_type=CommitType.OTHER,
        scope=None,
        is_breaking=False,
        description=subject,
    )

    match = _HEADER_RE.match(subject)
    if match is None:
        return other

    raw_type = match.group("type").lower()
    description = match.group("description").strip()
    if raw_type not in KNOWN_TYPES or not description:
        logger.debug("Unclassified commit %s: %r", sha[:7], subject)
        return ParsedCommit(
            sha=sha,
            subject=subject,
            body=body,
            commit_type=CommitType.OTHER,
            scope=None,
            is_breaking=False,
            description=description or subject,
            raw_type=raw_type,
        )

    scope = match.group("scope")
    breaking_description = _find_breaking_footer(body, breaking_pattern)

    return ParsedCommit(
        sha=sha,
        subject=subject,
        body=body,
        commit_type=CommitType(raw_type),
        scope=scope.strip() if scope else None,
        is_breaking=bool(match.group("breaking")) or breaking_description is not None,
        description=description,
        breaking_description=breaking_description or None,
        raw_type=raw_type,
    )


def filter_skip_release_commits(commits: list[Commit], patterns: list[str]) -> list[Commit]:
    """Drop commits whose message contains a skip-release marker (case-insensitive)."""
    if not patterns:
        return list(commits)

    lowered = [p.lower() for p in patterns]
    kept = []
    for commit in commits:
        message = commit.message.lower()
        if any(p in message for p in lowered):
            logger.debug("Skipping %s: skip-release marker", commit.short_sha)
            continue
        kept.append(commit)
    return kept


def parse_commits(commits: Iterable[Commit], config: CommitsConfig) -> list[ParsedCommit]:
    """Classify commits, applying the optional scope filter."""
    parsed = [ParsedCommit.from_commit(c, config.breaking_pattern) for c in commits]

    if config.scope_regex:
        scope_re = re.compile(config.scope_regex)
        parsed = [pc for pc in parsed if pc.scope is not None and scope_re.search(pc.scope)]

    return parsed


def _bump_for(pc: ParsedCommit, config: CommitsConfig) -> BumpType:
    if not pc.is_conventional:
        return BumpType.NONE
    if pc.is_breaking or pc.commit_type in config.types_major:
        return BumpType.MAJOR
    if pc.commit_type in config.types_minor:
        return BumpType.MINOR
    if pc.commit_type in config.types_patch:
        return BumpType.PATCH
    return BumpType.NONE


def calculate_bump(parsed: list[ParsedCommit], config: CommitsConfig) -> BumpDecision:
    """Reduce a commit set to one bump decision.

    Any breaking commit means MAJOR; otherwise any minor-type commit means
    MINOR; otherwise any patch-type commit means PATCH; otherwise NONE. The
    reason is the first commit, in the given order, at the winning level.
    """
    best = BumpDecision(BumpType.NONE)

    for pc in parsed:
        bump = _bump_for(pc, config)
        if bump.precedence > best.bump.precedence:
            best = BumpDecision(bump, reason=pc)
            if bump is BumpType.MAJOR:
                break

    return best


def get_breaking_changes(parsed: list[ParsedCommit]) -> list[ParsedCommit]:
    return [pc for pc in parsed if pc.is_breaking]


def count_by_type(parsed: list[ParsedCommit]) -> dict[CommitType, int]:
    """Commit counts per type, including unclassified ones."""
    counts = Counter(pc.commit_type for pc in parsed)
    return {t: counts[t] for t in CommitType if counts[t]}


def format_commit_for_changelog(
    pc: ParsedCommit,
    *,
    include_scope: bool = True,
    text: str | None = None,
) -> str:
    """Render one changelog bullet.

    ``- **<scope>**: <description>`` with a scope, ``- <description>``
    without one. ``text`` replaces the description (used for breaking
    footers).
    """
    line = text if text is not None else pc.description
    if include_scope and pc.scope:
        line = f"**{pc.scope}**: {line}"
    return f"- {line}"
