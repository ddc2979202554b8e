"""
Rendering of a single changelog entry.

An entry looks like::

    ## [1.2.0] - 2024-05-01

    ### Added
    - feat: export to CSV

    ### Fixed
    - fix: crash on empty input

Only sections with at least one line are written.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List

from changelogger.grouping.group_model import ClassifiedCommits


@dataclass(frozen=True)
class ChangelogEntry:
    """One rendered version block of the changelog."""

    version: str
    date: date
    sections: Dict[str, List[str]]

    @property
    def heading(self) -> str:
        return f"## [{self.version}] - {self.date.isoformat()}"

    def render(self) -> str:
        content = f"{self.heading}\n\n"
        for title, lines in self.sections.items():
            if not lines:
                continue
            content += f"### {title}\n" + "\n".join(f"- {line}" for line in lines) + "\n\n"
        return content


def render_entry(version: str, entry_date: date, classified: ClassifiedCommits) -> str:
    """Render ``classified`` as an entry for ``version`` dated ``entry_date``.

    Returns an empty string when there are no commits at all, which
    callers treat as "nothing to add".
    """
    if classified.total == 0:
        return ""
    return ChangelogEntry(version=version, date=entry_date, sections=classified.sections()).render()
