"""
Minimal semantic version handling.

Only the ``[v]MAJOR.MINOR.PATCH`` prefix of a tag is understood. Any
trailing text (pre-release markers, build metadata) is ignored when
comparing, which keeps the parser deliberately narrow.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


VERSION_TAG_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)")


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A ``major.minor.patch`` triple ordered component by component."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> Optional["SemanticVersion"]:
        """Parse ``text`` or return ``None`` when it is not a version tag."""
        match = VERSION_TAG_RE.match(text)
        if not match:
            return None
        return cls(*(int(group) for group in match.groups()))

    def bump_major(self) -> "SemanticVersion":
        return SemanticVersion(self.major + 1, 0, 0)

    def bump_minor(self) -> "SemanticVersion":
        return SemanticVersion(self.major, self.minor + 1, 0)

    def bump_patch(self) -> "SemanticVersion":
        return SemanticVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
