"""
Data model for classified commits.

:class:`ClassifiedCommits` holds the commit summaries of one changelog
entry, split into the three sections an entry can have.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


ADDED = "Added"
FIXED = "Fixed"
CHANGED = "Changed"

SECTION_ORDER = (ADDED, FIXED, CHANGED)


@dataclass
class ClassifiedCommits:
    """Commit summaries grouped by changelog section.

    Attributes
    ----------
    added : List[str]
        Summaries of commits introducing features.
    fixed : List[str]
        Summaries of bug fixes.
    changed : List[str]
        Everything else.
    """

    added: List[str] = field(default_factory=list)
    fixed: List[str] = field(default_factory=list)
    changed: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.added) + len(self.fixed) + len(self.changed)

    def sections(self) -> Dict[str, List[str]]:
        """Return the buckets keyed by section title, in rendering order."""
        return {
            ADDED: list(self.added),
            FIXED: list(self.fixed),
            CHANGED: list(self.changed),
        }
