"""
Version control system (VCS) integrations.

This package contains the Git client used to read the commit log and
the tag list of a repository, together with the immutable records it
produces.
"""

from .git_client import Commit, GitClient, GitError, Tag  # noqa: F401
