"""Unit tests for changelog generation."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from autorelease.config.models import DEFAULT_CHANGELOG_HEADER, ReleaseConfig
from autorelease.core.changelog import (
    ChangelogCategory,
    ChangelogDocument,
    build_section,
    generate_changelog,
    update_changelog,
)
from autorelease.core.commits import classify_message
from autorelease.core.version import BumpDecision, BumpType, Version
from autorelease.exceptions import ChangelogError
from autorelease.vcs.git import Commit, GitRepository

if TYPE_CHECKING:
    from pathlib import Path

RELEASE_DAY = date(2024, 1, 15)

EXISTING = (
    DEFAULT_CHANGELOG_HEADER
    + "\n"
    + "## [1.2.3] - 2023-12-01\n"
    + "\n"
    + "### ✨ Features\n"
    + "\n"
    + "-   hand edited   bullet  \n"
    + "\n"
    + "## [1.2.2] - 2023-11-01\n"
    + "\n"
    + "### 🐛 Bug Fixes\n"
    + "\n"
    + "- older fix\n"
)


def _section(*messages: str, version: Version = Version(1, 3, 0), bump=BumpType.MINOR):
    parsed = [classify_message(m, sha=f"{i:07d}") for i, m in enumerate(messages)]
    return build_section(parsed, BumpDecision(bump), version, RELEASE_DAY)


class TestBuildSection:
    """Tests for build_section()."""

    def test_render_single_fix(self):
        """Render exactly one category with a scoped bullet."""
        section = _section("fix(a): x", version=Version(1, 2, 4), bump=BumpType.PATCH)

        assert section.render() == "## [1.2.4] - 2024-01-15\n\n### 🐛 Bug Fixes\n\n- **a**: x\n"

    def test_category_order(self):
        """Categories render in the fixed order regardless of commit order."""
        section = _section(
            "chore: tidy",
            "docs: guide",
            "refactor: extract",
            "perf: cache",
            "fix: bug",
            "feat: thing",
            "feat!: drop old API",
            bump=BumpType.MAJOR,
        )

        assert list(section.entries) == [
            ChangelogCategory.BREAKING,
            ChangelogCategory.FEATURES,
            ChangelogCategory.FIXES,
            ChangelogCategory.PERFORMANCE,
            ChangelogCategory.REFACTOR,
            ChangelogCategory.DOCS,
            ChangelogCategory.CHORE,
        ]

    def test_empty_categories_omitted(self):
        """Only categories with entries are present or rendered."""
        section = _section("feat(ui): dark mode", "style: lint", "Random message")
        rendered = section.render()

        assert list(section.entries) == [ChangelogCategory.FEATURES]
        assert "Bug Fixes" not in rendered
        assert "###" in rendered
        assert rendered.count("###") == 1

    def test_unscoped_bullet(self):
        section = _section("feat: plain")

        assert section.entries[ChangelogCategory.FEATURES] == ("- plain",)

    def test_breaking_uses_footer_text(self):
        """Breaking bullets use the footer explanation when present."""
        section = _section(
            "feat(a)!: x\n\nBREAKING CHANGE: y",
            "fix(b): z",
            bump=BumpType.MAJOR,
        )

        assert section.entries[ChangelogCategory.BREAKING] == ("- **a**: y",)
        assert ChangelogCategory.FEATURES not in section.entries
        assert section.entries[ChangelogCategory.FIXES] == ("- **b**: z",)

    def test_breaking_without_footer_uses_description(self):
        section = _section("feat!: new config format", bump=BumpType.MAJOR)

        assert section.entries[ChangelogCategory.BREAKING] == ("- new config format",)

    def test_include_scope_disabled(self):
        parsed = [classify_message("fix(a): x")]
        section = build_section(
            parsed, BumpDecision(BumpType.PATCH), Version(1, 0, 1), RELEASE_DAY, include_scope=False
        )

        assert section.entries[ChangelogCategory.FIXES] == ("- x",)

    def test_no_release_raises(self):
        """No section is built when the decision is NONE."""
        with pytest.raises(ChangelogError):
            _section("docs: readme", bump=BumpType.NONE)


class TestChangelogDocument:
    """Tests for ChangelogDocument."""

    def test_parse_splits_header(self):
        doc = ChangelogDocument.parse(EXISTING)

        assert doc.header == DEFAULT_CHANGELOG_HEADER + "\n"
        assert doc.history.startswith("## [1.2.3]")

    def test_parse_header_only(self):
        doc = ChangelogDocument.parse(DEFAULT_CHANGELOG_HEADER)

        assert doc.history == ""
        assert doc.render() == DEFAULT_CHANGELOG_HEADER

    def test_has_version(self):
        doc = ChangelogDocument.parse(EXISTING)

        assert doc.has_version(Version(1, 2, 3))
        assert doc.has_version("1.2.2")
        assert not doc.has_version(Version(1, 2, 30))

    def test_extract_notes(self):
        """Notes are the section body without the heading."""
        doc = ChangelogDocument.parse(EXISTING)

        assert doc.extract_notes("1.2.2") == "### 🐛 Bug Fixes\n\n- older fix"
        assert doc.extract_notes("1.2.3") == "### ✨ Features\n\n-   hand edited   bullet"
        assert doc.extract_notes("9.9.9") is None


class TestUpdateChangelog:
    """Tests for update_changelog()."""

    def test_creates_new_document(self, tmp_path: Path):
        """A missing changelog is created with the standard header."""
        path = tmp_path / "CHANGELOG.md"
        section = _section("feat: first")

        assert update_changelog(path, section)

        content = path.read_text()
        assert content.startswith("# Changelog\n")
        assert content == DEFAULT_CHANGELOG_HEADER + "\n" + section.render()

    def test_inserts_after_header(self, tmp_path: Path):
        """The new section goes between the header and the first old section."""
        path = tmp_path / "CHANGELOG.md"
        path.write_text(EXISTING)
        section = _section("feat: shiny")

        update_changelog(path, section)
        content = path.read_text()

        header_end = content.index("## [1.3.0]")
        assert content[:header_end] == DEFAULT_CHANGELOG_HEADER + "\n"
        assert content.index("## [1.3.0]") < content.index("## [1.2.3]")

    def test_preserves_history_byte_for_byte(self, tmp_path: Path):
        path = tmp_path / "CHANGELOG.md"
        path.write_text(EXISTING)
        old_history = ChangelogDocument.parse(EXISTING).history

        update_changelog(path, _section("fix: patch it", version=Version(1, 2, 4)))

        assert path.read_text().endswith("\n" + old_history)

    def test_existing_version_is_noop(self, tmp_path: Path):
        """Re-running for an already present version does not duplicate it."""
        path = tmp_path / "CHANGELOG.md"
        path.write_text(EXISTING)

        changed = update_changelog(path, _section("feat: again", version=Version(1, 2, 3)))

        assert not changed
        assert path.read_text() == EXISTING

    def test_second_run_is_noop(self, tmp_path: Path):
        path = tmp_path / "CHANGELOG.md"
        section = _section("feat: once")

        assert update_changelog(path, section)
        first = path.read_bytes()
        assert not update_changelog(path, section)
        assert path.read_bytes() == first
        assert path.read_text().count("## [1.3.0]") == 1

    def test_custom_header(self, tmp_path: Path):
        path = tmp_path / "CHANGELOG.md"

        update_changelog(path, _section("feat: x"), header="# History\n")

        assert path.read_text().startswith("# History\n\n## [1.3.0]")

    def test_unreleased_block_stays_in_header(self, tmp_path: Path):
        """A leading "Unreleased" block is kept above the new release."""
        unreleased = "## [Unreleased]\n\n- work in progress\n\n"
        path = tmp_path / "CHANGELOG.md"
        history = ChangelogDocument.parse(EXISTING).history
        path.write_text(DEFAULT_CHANGELOG_HEADER + "\n" + unreleased + history)

        update_changelog(path, _section("feat: shiny"))
        content = path.read_text()
        doc = ChangelogDocument.parse(content)

        assert content.index("## [Unreleased]") < content.index("## [1.3.0]")
        assert content.index("## [1.3.0]") < content.index("## [1.2.3]")
        assert "- work in progress" in doc.header
        assert doc.has_version("1.3.0")
        assert doc.extract_notes("1.2.2") == "### 🐛 Bug Fixes\n\n- older fix"
        assert doc.extract_notes("1.3.0") is not None
        assert "work in progress" not in doc.extract_notes("1.3.0")


class TestGenerateChangelog:
    """Tests for generate_changelog()."""

    @pytest.fixture
    def mock_repo(self, tmp_path: Path) -> MagicMock:
        repo = MagicMock(spec=GitRepository)
        repo.path = tmp_path
        repo.get_latest_tag.return_value = "v1.2.3"
        return repo

    def test_generates_from_commits_since_tag(self, mock_repo: MagicMock, sample_commits):
        mock_repo.get_commits_since_tag.return_value = sample_commits

        section = generate_changelog(mock_repo, Version(2, 0, 0), ReleaseConfig(), RELEASE_DAY)

        assert section is not None
        assert section.version == Version(2, 0, 0)
        assert ChangelogCategory.BREAKING in section.entries
        mock_repo.get_latest_tag.assert_called_once_with("v*")
        mock_repo.get_commits_since_tag.assert_called_once_with("v1.2.3")

    def test_no_releasable_commits(self, mock_repo: MagicMock):
        mock_repo.get_commits_since_tag.return_value = [
            Commit("a", "docs: readme", "T", "t@t.com", RELEASE_DAY),
        ]

        assert generate_changelog(mock_repo, Version(1, 2, 4), ReleaseConfig()) is None
