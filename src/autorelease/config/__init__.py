"""Configuration management for autorelease."""

from __future__ import annotations

from autorelease.config.environment import RuntimeEnvironment
from autorelease.config.loader import load_config
from autorelease.config.models import (
    ChangelogConfig,
    CommitsConfig,
    GitHubConfig,
    ManifestConfig,
    ReleaseConfig,
    VersionConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "GitHubConfig",
    "ManifestConfig",
    "ReleaseConfig",
    "RuntimeEnvironment",
    "VersionConfig",
    "load_config",
]
