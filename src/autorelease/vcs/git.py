"""Git repository access.

Thin wrapper over the ``git`` executable. Read operations return plain
data; any unexpected failure raises :class:`GitError` with git's stderr.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from autorelease.exceptions import GitError

logger = logging.getLogger(__name__)

# Unit/record separators keep multi-line commit bodies intact.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"]) + _RECORD_SEP


@dataclass(frozen=True, slots=True)
class Commit:
    """A raw commit as read from history."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime

    @property
    def subject(self) -> str:
        return self.message.strip().split("\n", 1)[0].strip()

    @property
    def body(self) -> str:
        parts = self.message.strip().split("\n", 1)
        return parts[1].strip() if len(parts) > 1 else ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


class GitRepository:
    """A local git checkout."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = (path or Path.cwd()).resolve()
        result = self._git("rev-parse", "--show-toplevel", check=False)
        if result.returncode != 0:
            raise GitError(f"Not a git repository: {self.path}", stderr=result.stderr)
        self.path = Path(result.stdout.strip())

    def _git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        logger.debug("git %s", " ".join(args))
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e

        if check and result.returncode != 0:
            raise GitError(f"git {args[0]} failed with exit code {result.returncode}", result.stderr)
        return result

    def has_commits(self) -> bool:
        return self._git("rev-parse", "--verify", "--quiet", "HEAD", check=False).returncode == 0

    def head_sha(self) -> str:
        return self._git("rev-parse", "HEAD").stdout.strip()

    def is_dirty(self, paths: list[Path] | None = None) -> bool:
        """Whether the working tree (or just ``paths``) has uncommitted changes."""
        pathspec = ["--", *(str(p) for p in paths)] if paths else []
        return bool(self._git("status", "--porcelain", *pathspec).stdout.strip())

    def get_latest_tag(self, pattern: str = "v*") -> str | None:
        """Most recent tag reachable from HEAD matching ``pattern``."""
        if not self.has_commits():
            return None
        result = self._git("describe", "--tags", "--abbrev=0", "--match", pattern, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def get_commits_since_tag(self, tag: str | None) -> list[Commit]:
        """Commits in ``(tag, HEAD]``, newest first.

        With ``tag=None`` the whole history is returned.
        """
        if not self.has_commits():
            return []

        revision = f"{tag}..HEAD" if tag else "HEAD"
        output = self._git("log", f"--format={_LOG_FORMAT}", revision).stdout
        return [_parse_record(record) for record in output.split(_RECORD_SEP) if record.strip()]

    def commit_files(self, paths: list[Path], message: str) -> str:
        """Stage ``paths``, commit them and return the new HEAD sha."""
        self._git("add", "--", *(str(p) for p in paths))
        self._git("commit", "-m", message)
        return self.head_sha()

    def push(self, ref: str = "HEAD", remote: str = "origin") -> None:
        self._git("push", remote, ref)


def _parse_record(record: str) -> Commit:
    sha, name, email, date, message = record.strip("\n").split(_FIELD_SEP, 4)
    return Commit(
        sha=sha,
        message=message.strip(),
        author_name=name,
        author_email=email,
        date=datetime.fromisoformat(date),
    )
