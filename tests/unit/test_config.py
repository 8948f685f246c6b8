"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from autorelease.config import RuntimeEnvironment
from autorelease.config.loader import extract_config, find_config_file, load_config, load_toml
from autorelease.config.models import (
    ChangelogConfig,
    CommitsConfig,
    GitHubConfig,
    ManifestConfig,
    ReleaseConfig,
    VersionConfig,
)
from autorelease.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    MissingEnvironmentError,
)


class TestReleaseConfig:
    """Tests for ReleaseConfig model."""

    def test_default_config(self):
        """Default configuration has sensible values."""
        config = ReleaseConfig()

        assert config.tag_prefix == "v"
        assert config.changelog.path == Path("CHANGELOG.md")
        assert config.manifest.path == Path(".claude-plugin/plugin.json")
        assert config.notes_file is None

    def test_nested_defaults(self):
        """Nested configurations have defaults."""
        config = ReleaseConfig()

        assert config.commits.types_minor == ["feat"]
        assert config.commits.types_patch == ["fix", "perf"]
        assert config.commits.types_major == []
        assert config.changelog.enabled is True
        assert config.github.api_url == "https://api.github.com"
        assert config.github.require_consistency is True

    def test_tag_name(self):
        config = ReleaseConfig()
        assert config.tag_name("1.2.3") == "v1.2.3"

        config = ReleaseConfig(version=VersionConfig(tag_prefix="release-"))
        assert config.tag_name("1.2.3") == "release-1.2.3"

    def test_frozen(self):
        """Configuration is immutable once built."""
        config = ReleaseConfig()

        with pytest.raises(ValidationError):
            config.notes_file = Path("x")

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            ReleaseConfig.model_validate({"changelog": {"pth": "NEWS.md"}})


class TestCommitsConfig:
    """Tests for CommitsConfig model."""

    def test_defaults(self):
        config = CommitsConfig()

        assert "feat" in config.types_minor
        assert "[skip release]" in config.skip_release_patterns
        assert "[no release]" in config.skip_release_patterns

    def test_unknown_type_rejected(self):
        """Only known commit types can be mapped to bumps."""
        with pytest.raises(ValidationError, match="unknown commit types"):
            CommitsConfig(types_minor=["feature"])

    def test_invalid_regex_rejected(self):
        with pytest.raises(ValidationError, match="invalid regular expression"):
            CommitsConfig(scope_regex="(unclosed")


class TestSmallModels:
    """Defaults of the remaining models."""

    def test_changelog(self):
        config = ChangelogConfig()

        assert config.header.startswith("# Changelog")
        assert config.include_scope is True

    def test_manifest(self):
        assert ManifestConfig().required_fields == ["name", "version", "description"]

    def test_github(self):
        config = GitHubConfig()

        assert config.release_title == "{tag}"
        assert "{repository}" in config.release_footer


class TestFindConfigFile:
    """Tests for find_config_file()."""

    def test_find_pyproject(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")

        assert find_config_file(tmp_path).name == "pyproject.toml"

    def test_prefers_dedicated_file(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text("")
        (tmp_path / "autorelease.toml").write_text("")

        assert find_config_file(tmp_path).name == "autorelease.toml"

    def test_find_in_parent_dir(self, tmp_path: Path):
        (tmp_path / "autorelease.toml").write_text("")
        subdir = tmp_path / "src" / "package"
        subdir.mkdir(parents=True)

        assert find_config_file(subdir) == (tmp_path / "autorelease.toml").resolve()

    def test_not_found_raises(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError):
            find_config_file(tmp_path)


class TestLoadConfig:
    """Tests for load_config() and helpers."""

    def test_load_toml_missing(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError):
            load_toml(tmp_path / "nonexistent.toml")

    def test_extract_from_pyproject(self):
        data = {"tool": {"autorelease": {"notes_file": "notes.md"}}}

        assert extract_config(data, Path("pyproject.toml")) == {"notes_file": "notes.md"}
        assert extract_config({"project": {}}, Path("pyproject.toml")) == {}

    def test_load_from_pyproject(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text(
            """\
[project]
name = "test"

[tool.autorelease.version]
tag_prefix = "rel-"

[tool.autorelease.manifest]
path = ".plugin/plugin.json"
"""
        )
        config = load_config(tmp_path)

        assert config.tag_prefix == "rel-"
        assert config.manifest.path == Path(".plugin/plugin.json")

    def test_load_from_dedicated_file(self, tmp_path: Path):
        (tmp_path / "autorelease.toml").write_text(
            """\
commit_message = "release: {version}"

[changelog]
include_scope = false

[github]
require_consistency = false
"""
        )
        config = load_config(tmp_path)

        assert config.commit_message == "release: {version}"
        assert config.changelog.include_scope is False
        assert config.github.require_consistency is False

    def test_defaults_when_no_file(self, tmp_path: Path):
        assert load_config(tmp_path) == ReleaseConfig()

    def test_invalid_toml(self, tmp_path: Path):
        (tmp_path / "autorelease.toml").write_text("this is = = not toml")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(tmp_path)

    def test_invalid_values(self, tmp_path: Path):
        (tmp_path / "autorelease.toml").write_text("[commits]\ntypes_minor = ['feature']\n")

        with pytest.raises(ConfigValidationError):
            load_config(tmp_path)


class TestRuntimeEnvironment:
    """Tests for RuntimeEnvironment."""

    def test_from_environ(self, tmp_path: Path):
        env = RuntimeEnvironment.from_environ(
            {
                "NEW_VERSION": "1.3.0",
                "GITHUB_TOKEN": "secret",
                "GITHUB_REPOSITORY": "owner/repo",
                "GITHUB_OUTPUT": str(tmp_path / "out"),
                "UNRELATED": "ignored",
            }
        )

        assert env.require_new_version() == "1.3.0"
        assert env.require_github_token() == "secret"
        assert env.require_github_repository() == "owner/repo"
        assert env.github_output == tmp_path / "out"
        assert env.github_api_url is None

    def test_token_hidden_from_repr(self):
        env = RuntimeEnvironment.from_environ({"GITHUB_TOKEN": "secret"})

        assert "secret" not in repr(env)

    def test_blank_values_are_unset(self):
        env = RuntimeEnvironment.from_environ({"NEW_VERSION": "  "})

        with pytest.raises(MissingEnvironmentError, match="NEW_VERSION"):
            env.require_new_version()

    @pytest.mark.parametrize(
        ("method", "variable"),
        [
            ("require_new_version", "NEW_VERSION"),
            ("require_github_token", "GITHUB_TOKEN"),
            ("require_github_repository", "GITHUB_REPOSITORY"),
        ],
    )
    def test_missing_required(self, method: str, variable: str):
        env = RuntimeEnvironment.from_environ({})

        with pytest.raises(MissingEnvironmentError) as exc_info:
            getattr(env, method)()
        assert exc_info.value.variable == variable

    def test_bad_repository(self):
        with pytest.raises(ConfigValidationError, match="owner/repo"):
            RuntimeEnvironment.from_environ({"GITHUB_REPOSITORY": "just-a-name"})
