"""Version strings embedded in source files.

Projects may carry extra copies of the version, typically
``__version__ = "1.2.3"`` in a Python module. These are updated with a
targeted regex replacement so the rest of the file is untouched.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from autorelease.exceptions import ProjectError, VersionNotFoundError
from autorelease.project.files import atomic_write_text

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_PATTERNS = (
    r'^(__version__\s*=\s*)["\']([^"\']+)["\']',
    r'^(VERSION\s*=\s*)["\']([^"\']+)["\']',
    r'^(version\s*=\s*)["\']([^"\']+)["\']',
)


def get_version_from_file(file_path: Path, pattern: str | None = None) -> str:
    """Read the version from a file.

    Args:
        file_path: File to read
        pattern: Regex whose second group captures the version. Defaults
                 to ``__version__``, ``VERSION`` and ``version`` assignments.

    Raises:
        ProjectError: If the file does not exist
        VersionNotFoundError: If no pattern matches
    """
    if not file_path.is_file():
        raise ProjectError(f"Version file not found: {file_path}")

    content = file_path.read_text(encoding="utf-8")
    for pat in (pattern,) if pattern else DEFAULT_PATTERNS:
        match = re.search(pat, content, re.MULTILINE)
        if match:
            return match.group(2)

    raise VersionNotFoundError(f"Could not find version pattern in {file_path}")


def update_version_file(file_path: Path, new_version: str, pattern: str | None = None) -> bool:
    """Replace the first version assignment in a file.

    Returns:
        True if the file changed
    """
    if not file_path.is_file():
        raise ProjectError(f"Version file not found: {file_path}")

    content = file_path.read_text(encoding="utf-8")
    for pat in (pattern,) if pattern else DEFAULT_PATTERNS:
        new_content, count = re.subn(
            pat,
            rf'\g<1>"{new_version}"',
            content,
            count=1,
            flags=re.MULTILINE,
        )
        if count:
            break
    else:
        raise VersionNotFoundError(f"Could not find version pattern in {file_path}")

    if new_content == content:
        return False

    atomic_write_text(file_path, new_content)
    return True
