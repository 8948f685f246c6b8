"""Configuration models for autorelease.

All models are frozen pydantic models: configuration is collected once at
process entry and passed explicitly to each component.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CHANGELOG_HEADER = """\
# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).
"""

DEFAULT_RELEASE_FOOTER = """\
---

## Installation

### Using Claude Code CLI

```bash
claude plugins install {repository}
```

### Manual Installation

1. Clone or download this repository
2. Copy the `.claude-plugin` directory and `commands` directory to your project
3. Reload Claude Code

## Documentation

For full documentation, see [README.md](https://github.com/{repository}/blob/main/README.md)
"""


_COMMIT_TYPES = frozenset(
    {"feat", "fix", "perf", "docs", "refactor", "chore", "style", "test", "build", "ci"}
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CommitsConfig(_Frozen):
    """How commits are classified and mapped to version bumps."""

    types_major: list[str] = Field(default_factory=list)
    types_minor: list[str] = Field(default_factory=lambda: ["feat"])
    types_patch: list[str] = Field(default_factory=lambda: ["fix", "perf"])
    breaking_pattern: str = r"BREAKING[ -]CHANGE:"
    scope_regex: str | None = None
    skip_release_patterns: list[str] = Field(
        default_factory=lambda: ["[skip release]", "[release skip]", "[no release]"]
    )

    @field_validator("types_major", "types_minor", "types_patch")
    @classmethod
    def _known_types(cls, value: list[str]) -> list[str]:
        unknown = sorted(set(value) - _COMMIT_TYPES)
        if unknown:
            raise ValueError(f"unknown commit types: {', '.join(unknown)}")
        return value

    @field_validator("breaking_pattern", "scope_regex")
    @classmethod
    def _valid_regex(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"invalid regular expression {value!r}: {e}") from e
        return value


class ChangelogConfig(_Frozen):
    """Changelog document settings."""

    enabled: bool = True
    path: Path = Path("CHANGELOG.md")
    header: str = DEFAULT_CHANGELOG_HEADER
    include_scope: bool = True


class ManifestConfig(_Frozen):
    """The JSON document holding the project's version."""

    path: Path = Path(".claude-plugin/plugin.json")
    required_fields: list[str] = Field(default_factory=lambda: ["name", "version", "description"])


class VersionConfig(_Frozen):
    """Tagging and extra version files."""

    tag_prefix: str = "v"
    version_files: list[Path] = Field(default_factory=list)


class GitHubConfig(_Frozen):
    """Release publishing on GitHub."""

    api_url: str = "https://api.github.com"
    release_title: str = "{tag}"
    release_footer: str = DEFAULT_RELEASE_FOOTER
    require_consistency: bool = True
    timeout: float = 30.0


class ReleaseConfig(_Frozen):
    """Root configuration object."""

    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    notes_file: Path | None = None
    commit_message: str = "chore(release): {tag}"

    @property
    def tag_prefix(self) -> str:
        return self.version.tag_prefix

    def tag_name(self, version: object) -> str:
        """Tag name for a version, e.g. ``v1.2.3``."""
        return f"{self.version.tag_prefix}{version}"
