"""
Keyword heuristics for sorting commits into changelog sections.

The classifier only looks at the first line of each commit message and
uses plain substring checks. It is intentionally simple and
deterministic; a message mentioning both "fix" and "feat" is an
addition because additions are checked first.
"""

from __future__ import annotations

from typing import Iterable

from changelogger.grouping.group_model import ADDED, CHANGED, FIXED, ClassifiedCommits
from changelogger.vcs.git_client import Commit


ADDED_KEYWORDS = ("feat", "feature", "add")
FIXED_KEYWORDS = ("fix", "bug")


def classify_commit(summary: str) -> str:
    """Return the section title for a commit summary.

    Parameters
    ----------
    summary : str
        First line of a commit message.

    Returns
    -------
    str
        ``"Added"``, ``"Fixed"`` or ``"Changed"``.
    """
    lowered = summary.lower()
    if any(keyword in lowered for keyword in ADDED_KEYWORDS):
        return ADDED
    if any(keyword in lowered for keyword in FIXED_KEYWORDS):
        return FIXED
    return CHANGED


def classify_commits(commits: Iterable[Commit]) -> ClassifiedCommits:
    """Partition ``commits`` into added, fixed and changed summaries.

    Every commit lands in exactly one bucket and the input order is
    kept inside each bucket.
    """
    classified = ClassifiedCommits()
    buckets = {
        ADDED: classified.added,
        FIXED: classified.fixed,
        CHANGED: classified.changed,
    }
    for commit in commits:
        buckets[classify_commit(commit.summary)].append(commit.summary)
    return classified
