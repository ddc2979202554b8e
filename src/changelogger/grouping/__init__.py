"""
Grouping logic for changelog entries.

This package sorts commits into the changelog sections. See
:mod:`changelogger.grouping.commit_classifier` and
:mod:`changelogger.grouping.group_model` for details.
"""

from .commit_classifier import classify_commit, classify_commits  # noqa: F401
from .group_model import ClassifiedCommits  # noqa: F401
