"""Project files that carry the version: the JSON manifest and extra version files."""

from __future__ import annotations

from autorelease.project.manifest import (
    PluginManifest,
    get_manifest_version,
    read_manifest,
    update_manifest_version,
    validate_manifest,
)
from autorelease.project.version_files import get_version_from_file, update_version_file

__all__ = [
    "PluginManifest",
    "get_manifest_version",
    "get_version_from_file",
    "read_manifest",
    "update_manifest_version",
    "update_version_file",
    "validate_manifest",
]
