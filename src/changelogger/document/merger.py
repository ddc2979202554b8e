"""
Merging new entries into a changelog document.

New entries are always placed above the existing content so that the
document stays ordered most-recent-first. The first entry heading of a
document doubles as the cutoff for the next update run.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timezone
from typing import Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


HEADER = (
    "# Changelog\n"
    "\n"
    "All notable changes to this project will be documented in this file.\n"
    "\n"
)

ENTRY_HEADING_RE = re.compile(r"## \[.*?\] - (\d{4}-\d{2}-\d{2})")


def merge(fragment: str, existing: Optional[str]) -> str:
    """Combine a freshly rendered ``fragment`` with ``existing`` content.

    Parameters
    ----------
    fragment : str
        Output of :func:`changelogger.document.renderer.render_entry`.
    existing : str, optional
        Current document text, ``None`` when there is no document yet.

    Returns
    -------
    str
        The complete document to persist. With an empty fragment the
        existing document is returned untouched.
    """
    if existing is None:
        return HEADER + fragment
    if not fragment:
        return existing
    return fragment + "\n" + existing


def extract_cutoff(document: str) -> Optional[datetime]:
    """Return the date of the newest entry as midnight UTC.

    Returns ``None`` when no entry heading is present or its date is not
    a valid calendar date.
    """
    match = ENTRY_HEADING_RE.search(document)
    if not match:
        return None
    try:
        day = date.fromisoformat(match.group(1))
    except ValueError:
        logger.warning("Ignoring invalid changelog date: %s", match.group(1))
        return None
    return datetime.combine(day, time.min, tzinfo=timezone.utc)
