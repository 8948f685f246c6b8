"""Version control and hosting adapters."""

from __future__ import annotations

from autorelease.vcs.git import Commit, GitRepository
from autorelease.vcs.github import GitHubClient, PublishedRelease

__all__ = ["Commit", "GitHubClient", "GitRepository", "PublishedRelease"]
