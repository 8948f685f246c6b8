"""Runtime values supplied by the CI environment.

The environment is read exactly once, at process entry, into an immutable
:class:`RuntimeEnvironment`. Components never consult ``os.environ``
themselves.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from autorelease.exceptions import ConfigValidationError, MissingEnvironmentError

ENV_VARIABLES = {
    "new_version": "NEW_VERSION",
    "github_token": "GITHUB_TOKEN",
    "github_repository": "GITHUB_REPOSITORY",
    "github_output": "GITHUB_OUTPUT",
    "github_api_url": "GITHUB_API_URL",
}


class RuntimeEnvironment(BaseModel):
    """Environment-provided configuration."""

    model_config = ConfigDict(frozen=True)

    new_version: str | None = None
    github_token: str | None = Field(default=None, repr=False)
    github_repository: str | None = None
    github_output: Path | None = None
    github_api_url: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("github_repository")
    @classmethod
    def _owner_slash_repo(cls, value: str | None) -> str | None:
        if value is not None and value.count("/") != 1:
            raise ValueError(f"expected 'owner/repo', got {value!r}")
        return value

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> RuntimeEnvironment:
        """Collect the known variables from an environment mapping."""
        values = {field: environ.get(name) for field, name in ENV_VARIABLES.items()}
        try:
            return cls.model_validate(values)
        except ValueError as e:
            raise ConfigValidationError(f"Invalid environment: {e}") from e

    def require_new_version(self) -> str:
        if self.new_version is None:
            raise MissingEnvironmentError("NEW_VERSION")
        return self.new_version

    def require_github_token(self) -> str:
        if self.github_token is None:
            raise MissingEnvironmentError("GITHUB_TOKEN")
        return self.github_token

    def require_github_repository(self) -> str:
        if self.github_repository is None:
            raise MissingEnvironmentError("GITHUB_REPOSITORY")
        return self.github_repository
