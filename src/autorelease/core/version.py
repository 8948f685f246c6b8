"""Semantic version parsing and bumping.

Versions are strict ``major.minor.patch`` triples. Exactly one increment is
applied per release, chosen by the highest-precedence :class:`BumpType`
found in the commit set.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from autorelease.exceptions import InvalidVersionError

if TYPE_CHECKING:
    from autorelease.core.commits import ParsedCommit

_VERSION_RE = re.compile(r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


class BumpType(StrEnum):
    """Kind of version increment."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def precedence(self) -> int:
        return BUMP_PRECEDENCE.index(self)


BUMP_PRECEDENCE = (BumpType.NONE, BumpType.PATCH, BumpType.MINOR, BumpType.MAJOR)


@dataclass(frozen=True, order=True, slots=True)
class Version:
    """A semantic version number."""

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise InvalidVersionError(f"Version components must be non-negative: {self!r}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse ``"1.2.3"`` (or ``"v1.2.3"``).

        Raises:
            InvalidVersionError: If the string is not a plain semantic version
        """
        match = _VERSION_RE.match(value.strip())
        if match is None:
            raise InvalidVersionError(f"Invalid version {value!r}: expected major.minor.patch")
        major, minor, patch = (int(part) for part in match.groups())
        return cls(major, minor, patch)

    def bump(self, bump_type: BumpType) -> Version:
        """Return the next version for ``bump_type``.

        Raises:
            ValueError: If ``bump_type`` is ``NONE``
        """
        if bump_type is BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump_type is BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if bump_type is BumpType.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        raise ValueError("Cannot bump a version without a bump type")


@dataclass(frozen=True, slots=True)
class BumpDecision:
    """The single bump resolved from a commit set and the commit behind it."""

    bump: BumpType
    reason: ParsedCommit | None = None

    @property
    def should_release(self) -> bool:
        return self.bump is not BumpType.NONE

    def apply(self, current: Version) -> Version | None:
        """Next version, or ``None`` when there is nothing to release."""
        if not self.should_release:
            return None
        return current.bump(self.bump)
