"""
Changelog document handling.

Rendering of new entries, merging them into an existing document,
cutoff extraction and file persistence.
"""

from .merger import HEADER, extract_cutoff, merge  # noqa: F401
from .renderer import ChangelogEntry, render_entry  # noqa: F401
from .store import FileDocumentStore  # noqa: F401
