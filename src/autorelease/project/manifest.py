"""JSON version manifest (e.g. ``plugin.json``).

The manifest is treated as read, parse, mutate, serialize, write: only
the ``version`` key changes, key order and indentation are kept, and the
file is replaced atomically.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from autorelease.core.version import Version
from autorelease.exceptions import ManifestError
from autorelease.project.files import atomic_write_text

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)

_INDENT_RE = re.compile(r"^[{\[]\s*\n([ \t]+)\S", re.MULTILINE)


REQUIRED_FIELDS = ("name", "version", "description")


class PluginManifest(BaseModel):
    """Well-known manifest fields; anything else is passed through."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    version: str
    description: str | None = None

    @field_validator("name", "version", "description")
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("must not be empty")
        return value


def _detect_indent(text: str) -> int | str:
    match = _INDENT_RE.search(text)
    if match is None:
        return 2
    indent = match.group(1)
    return len(indent) if set(indent) == {" "} else indent


def read_manifest(path: Path) -> dict[str, Any]:
    """Load the manifest as an ordered mapping.

    Raises:
        ManifestError: If the file is missing or not a JSON object
    """
    if not path.is_file():
        raise ManifestError(f"Manifest not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object")
    return data


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _validate(
    data: dict[str, Any],
    path: Path,
    required_fields: Sequence[str] = REQUIRED_FIELDS,
) -> PluginManifest:
    missing = [field for field in required_fields if _is_blank(data.get(field))]
    if missing:
        raise ManifestError(f"Manifest {path} is missing required field(s): {', '.join(missing)}")

    try:
        manifest = PluginManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest {path}:\n{e}") from e
    Version.parse(manifest.version)
    return manifest


def validate_manifest(
    path: Path,
    required_fields: Sequence[str] = REQUIRED_FIELDS,
) -> PluginManifest:
    """Check that every field in ``required_fields`` is present and non-empty.

    ``version`` must always be a valid ``major.minor.patch`` string.
    """
    return _validate(read_manifest(path), path, required_fields)


def get_manifest_version(path: Path) -> Version:
    """Current version recorded in the manifest.

    Raises:
        ManifestError: If the manifest cannot be read or lacks a version
        InvalidVersionError: If the version is not ``major.minor.patch``
    """
    data = read_manifest(path)
    version = data.get("version")
    if not isinstance(version, str):
        raise ManifestError(f"Manifest {path} has no string 'version' field")
    return Version.parse(version)


def update_manifest_version(
    path: Path,
    version: Version,
    required_fields: Sequence[str] = REQUIRED_FIELDS,
) -> bool:
    """Set the manifest's version, preserving every other field.

    Returns:
        True if the file was rewritten, False if it already matched
    """
    original = path.read_text(encoding="utf-8") if path.is_file() else ""
    data = read_manifest(path)
    _validate(data, path, required_fields)

    data["version"] = str(version)
    content = json.dumps(data, indent=_detect_indent(original), ensure_ascii=False) + "\n"

    if content == original:
        logger.info("%s already at version %s", path, version)
        return False

    atomic_write_text(path, content)
    logger.info("Updated %s to version %s", path, version)
    return True
