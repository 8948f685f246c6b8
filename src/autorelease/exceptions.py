"""Exception hierarchy for autorelease.

Every error raised by the library derives from :class:`AutoReleaseError`,
so the CLI can turn any of them into a diagnostic and a non-zero exit.
Outcomes that are not failures ("no release", "already published") are
returned as values and never raised.
"""

from __future__ import annotations


class AutoReleaseError(Exception):
    """Base class for all autorelease errors."""


# Configuration


class ConfigError(AutoReleaseError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """A required configuration file does not exist."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


class MissingEnvironmentError(ConfigError):
    """A required environment variable is not set."""

    def __init__(self, variable: str) -> None:
        super().__init__(f"{variable} environment variable not set")
        self.variable = variable


# Project files


class ProjectError(AutoReleaseError):
    """A project file could not be read or updated."""


class ManifestError(ProjectError):
    """The version manifest is missing, corrupt or incomplete."""


class VersionNotFoundError(ProjectError):
    """No version could be located in a project file."""


class InvalidVersionError(AutoReleaseError):
    """A version string is not of the form ``major.minor.patch``."""


class ChangelogError(AutoReleaseError):
    """The changelog could not be generated or updated."""


class ConsistencyError(AutoReleaseError):
    """Manifest, changelog and release target disagree."""


# Remote / transport


class GitError(AutoReleaseError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}: {self.stderr.strip()}"
        return base


class GitHubError(AutoReleaseError):
    """The GitHub API returned an unexpected response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TagExistsError(GitHubError):
    """The release tag already exists on the remote."""
