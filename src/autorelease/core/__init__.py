"""Core business logic for autorelease.

This module contains the fundamental building blocks:
- Version parsing and bump resolution
- Conventional commit classification
- Changelog section generation and merging
"""

from __future__ import annotations

from autorelease.core.changelog import (
    ChangelogCategory,
    ChangelogDocument,
    ChangelogSection,
    build_section,
    generate_changelog,
    update_changelog,
)
from autorelease.core.commits import (
    CommitType,
    ParsedCommit,
    calculate_bump,
    classify_message,
    format_commit_for_changelog,
    get_breaking_changes,
    parse_commits,
)
from autorelease.core.version import BumpDecision, BumpType, Version

__all__ = [
    # Version
    "BumpDecision",
    "BumpType",
    # Changelog
    "ChangelogCategory",
    "ChangelogDocument",
    "ChangelogSection",
    # Commits
    "CommitType",
    "ParsedCommit",
    "Version",
    "build_section",
    "calculate_bump",
    "classify_message",
    "format_commit_for_changelog",
    "generate_changelog",
    "get_breaking_changes",
    "parse_commits",
    "update_changelog",
]
