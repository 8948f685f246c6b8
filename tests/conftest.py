"""Shared fixtures for autorelease tests."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from autorelease.vcs.git import Commit
from tests.helpers import MANIFEST_PATH, git, write_manifest

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Path:
    """An empty git repository with a local identity configured."""
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "tag.gpgsign", "false")
    return repo


@pytest.fixture
def plugin_repo(temp_git_repo: Path) -> Path:
    """A repository whose manifest is at 1.2.3 and tagged v1.2.3."""
    write_manifest(temp_git_repo / MANIFEST_PATH)
    git(temp_git_repo, "add", MANIFEST_PATH)
    git(temp_git_repo, "commit", "-q", "-m", "chore: initial commit")
    git(temp_git_repo, "tag", "v1.2.3")
    return temp_git_repo


@pytest.fixture
def manifest_path(tmp_path: Path) -> Path:
    """A plugin.json at version 1.2.3 outside any repository."""
    return write_manifest(tmp_path / "plugin.json")


def _commit(sha: str, message: str) -> Commit:
    return Commit(sha, message, "Test", "test@test.com", datetime(2024, 1, 1))


@pytest.fixture
def feat_commit() -> Commit:
    return _commit("feat123", "feat: add user authentication")


@pytest.fixture
def fix_commit() -> Commit:
    return _commit("fix4567", "fix(core): handle empty config")


@pytest.fixture
def breaking_commit() -> Commit:
    return _commit(
        "brk8910",
        "feat(api)!: remove v1 endpoints\n\nBREAKING CHANGE: the v1 API is gone",
    )


@pytest.fixture
def sample_commits(feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit) -> list[Commit]:
    return [
        breaking_commit,
        feat_commit,
        fix_commit,
        _commit("perf111", "perf(db): cache lookups"),
        _commit("docs222", "docs: describe configuration"),
        _commit("chor333", "chore(deps): bump httpx"),
        _commit("styl444", "style: reformat"),
        _commit("othr555", "Merge branch 'feature/x'"),
    ]
