"""
Git client implementation for changelogger.

This module wraps the read-only Git operations required to build a
changelog: locating the repository root, listing commits and listing
tags. All subprocess calls go through :meth:`GitClient._run` so that
unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

# ASCII unit and record separators; they never appear in commit messages.
FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"

LOG_FORMAT = f"%H{FIELD_SEP}%aI{FIELD_SEP}%B{RECORD_SEP}"
TAG_FORMAT = f"%(refname:strip=2){FIELD_SEP}%(objectname)"


@dataclass(frozen=True)
class Commit:
    """A single commit as read from the log."""

    sha: str
    message: str
    timestamp: datetime

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True)
class Tag:
    """A tag name and the object it points at."""

    name: str
    commit: Optional[str] = None


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


def parse_timestamp(value: str) -> datetime:
    """Parse a strict ISO 8601 timestamp; naive values are taken as UTC."""
    stamp = datetime.fromisoformat(value.strip())
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


class GitClient:
    """Client for reading history from a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if the given path is the root of a Git repository."""
        return (path / ".git").exists()

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            logger.debug("Checking for .git at: %s", current / ".git")
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is
            True, or if Git itself cannot be started.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding='utf-8',
                errors='replace',  # Replace invalid characters instead of failing
            )
        except FileNotFoundError as e:
            logger.error("Git executable not found: %s", e)
            raise GitError(f"Git is not installed or not on PATH: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    def _has_commits(self) -> bool:
        """Return True if HEAD resolves to a commit."""
        result = self._run(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.returncode == 0

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def list_commits(self) -> List[Commit]:
        """Return every commit reachable from HEAD, most recent first.

        A repository without any commit yields an empty list rather than
        an error.

        Raises
        ------
        GitError
            If the git log command fails.
        """
        if not self._has_commits():
            logger.debug("Repository at %s has no commits yet", self.repo_root)
            return []

        result = self._run(["log", f"--format={LOG_FORMAT}"], check=True)
        commits: List[Commit] = []
        for record in result.stdout.split(RECORD_SEP):
            record = record.strip("\n")
            if not record.strip():
                continue
            parts = record.split(FIELD_SEP, 2)
            if len(parts) != 3:
                logger.warning("Skipping malformed log record: %r", record[:80])
                continue
            sha, stamp, message = parts
            try:
                timestamp = parse_timestamp(stamp)
            except ValueError:
                logger.warning("Skipping commit %s with unreadable date %r", sha, stamp)
                continue
            commits.append(Commit(sha=sha.strip(), message=message.strip(), timestamp=timestamp))

        logger.debug("Read %d commit(s) from %s", len(commits), self.repo_root)
        return commits

    def list_tags(self) -> List[Tag]:
        """Return all tags of the repository.

        Raises
        ------
        GitError
            If the tag listing fails.
        """
        result = self._run(["for-each-ref", f"--format={TAG_FORMAT}", "refs/tags"], check=True)
        tags: List[Tag] = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            name, _, objectname = line.partition(FIELD_SEP)
            tags.append(Tag(name=name.strip(), commit=objectname.strip() or None))
        return tags
