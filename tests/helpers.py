"""Helpers for tests that drive a real git repository."""

from __future__ import annotations

import json
import shutil
import subprocess
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

MANIFEST_PATH = ".claude-plugin/plugin.json"

MANIFEST = {
    "name": "demo-plugin",
    "version": "1.2.3",
    "description": "A demo plugin",
    "author": {"name": "Demo Team"},
    "keywords": ["ops", "release"],
}


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def make_commit(repo: Path, message: str) -> str:
    git(repo, "commit", "--allow-empty", "-q", "-m", message)
    return git(repo, "rev-parse", "HEAD")


def write_manifest(path: Path, **overrides: object) -> Path:
    data = {**MANIFEST, **overrides}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")
    return path
