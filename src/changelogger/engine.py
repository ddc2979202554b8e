"""
Changelog generation pipeline.

:class:`ChangelogEngine` ties the collaborators together: it reads the
commit log, drops commits already covered by the document, infers the
version, classifies and renders the new entry, merges it and writes the
result once. The engine walks through the states of
:class:`EngineState` strictly in order; any exception moves it to
``FAILED`` and is re-raised to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from changelogger.config.loader import ConfigError
from changelogger.document.merger import extract_cutoff, merge
from changelogger.document.renderer import render_entry
from changelogger.document.store import FileDocumentStore
from changelogger.grouping.commit_classifier import classify_commits
from changelogger.vcs.git_client import Commit, GitError
from changelogger.versioning.inferencer import VersionInferencer
from changelogger.versioning.project_metadata import ProjectMetadataReader


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class EngineState(Enum):
    IDLE = "idle"
    LOCATING_REPO = "locating repository"
    READING_LOG = "reading log"
    COMPUTING_CUTOFF = "computing cutoff"
    FILTERING = "filtering"
    INFERRING = "inferring version"
    CLASSIFYING = "classifying"
    RENDERING = "rendering"
    MERGING = "merging"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class Outcome(Enum):
    CREATED = "created"
    UPDATED = "updated"
    NO_NEW_COMMITS = "no new commits"


class ProviderError(Exception):
    """Raised when a collaborator the pipeline cannot do without fails.

    ``source`` is ``"log"`` for commit log retrieval and ``"document"``
    for reading or writing the changelog.
    """

    def __init__(self, source: str, message: str) -> None:
        super().__init__(message)
        self.source = source


class DocumentExistsError(Exception):
    """Raised by a create run when the document exists and may not be overwritten."""

    pass


@dataclass
class GenerationResult:
    """Outcome of one engine run."""

    outcome: Outcome
    path: Path
    version: Optional[str] = None
    commit_count: int = 0
    content: Optional[str] = None


def filter_commits(commits: Iterable[Commit], cutoff: Optional[datetime]) -> List[Commit]:
    """Keep the commits authored strictly after ``cutoff``.

    Without a cutoff every commit is kept. Naive timestamps are taken as
    UTC so they can be compared with the cutoff.
    """
    if cutoff is None:
        return list(commits)
    kept = []
    for commit in commits:
        stamp = commit.timestamp
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=timezone.utc)
        if stamp > cutoff:
            kept.append(commit)
    return kept


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class ChangelogEngine:
    """Generate or update a changelog document from repository history.

    Parameters
    ----------
    repo_root : Path
        Root of the Git repository. ``None`` is rejected with
        :class:`ConfigError` when the engine runs.
    changelog_path : Path
        Location of the changelog document.
    git_client : GitClient
        Provides ``list_commits()`` and ``list_tags()``.
    store : FileDocumentStore, optional
        Document accessor with ``exists``, ``read`` and ``write``.
    metadata_reader : ProjectMetadataReader, optional
        Source of a declared project version.
    prompt : object, optional
        Interactive version prompt, see :class:`VersionInferencer`.
    today : Callable[[], date], optional
        Clock used for the entry date, UTC today by default.
    """

    def __init__(
        self,
        repo_root: Optional[Path],
        changelog_path: Path,
        git_client,
        store=None,
        metadata_reader: Optional[ProjectMetadataReader] = None,
        prompt=None,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self.repo_root = repo_root
        self.changelog_path = changelog_path
        self.git_client = git_client
        self.store = store if store is not None else FileDocumentStore()
        self.inferencer = VersionInferencer(git_client.list_tags, metadata_reader, prompt)
        self.today = today
        self.state = EngineState.IDLE
        self.error: Optional[BaseException] = None

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    def create(self, overwrite: bool = False) -> GenerationResult:
        """Write a fresh changelog, replacing an existing one only if allowed."""
        if not overwrite and self._document_exists():
            raise DocumentExistsError(f"{self.changelog_path} already exists")
        return self.run(is_update=False)

    def update(self) -> GenerationResult:
        """Prepend new commits to the changelog, creating it when absent."""
        return self.run(is_update=True)

    def run(self, is_update: bool) -> GenerationResult:
        self.error = None
        self.state = EngineState.IDLE
        try:
            return self._run(is_update)
        except Exception as exc:
            self.error = exc
            self._advance(EngineState.FAILED)
            raise

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _advance(self, state: EngineState) -> None:
        logger.debug("Engine state: %s -> %s", self.state.value, state.value)
        self.state = state

    def _run(self, is_update: bool) -> GenerationResult:
        self._advance(EngineState.LOCATING_REPO)
        if self.repo_root is None:
            raise ConfigError("No repository location configured")
        is_update = is_update and self._document_exists()

        self._advance(EngineState.READING_LOG)
        try:
            commits = self.git_client.list_commits()
        except GitError as exc:
            raise ProviderError("log", f"Could not read git log: {exc}") from exc

        existing: Optional[str] = None
        cutoff: Optional[datetime] = None
        if is_update:
            self._advance(EngineState.COMPUTING_CUTOFF)
            existing = self._read_document()
            cutoff = extract_cutoff(existing)
            logger.debug("Last changelog date: %s", cutoff)

        self._advance(EngineState.FILTERING)
        commits = filter_commits(commits, cutoff)
        if not commits and is_update:
            logger.info("No new commits found since last changelog update.")
            self._advance(EngineState.DONE)
            return GenerationResult(outcome=Outcome.NO_NEW_COMMITS, path=self.changelog_path)

        version: Optional[str] = None
        fragment = ""
        if commits:
            self._advance(EngineState.INFERRING)
            version = self.inferencer.infer(commits, is_update)

            self._advance(EngineState.CLASSIFYING)
            classified = classify_commits(commits)

            self._advance(EngineState.RENDERING)
            fragment = render_entry(version, self.today(), classified)

        self._advance(EngineState.MERGING)
        content = merge(fragment, existing)

        self._advance(EngineState.PERSISTING)
        try:
            self.store.write(self.changelog_path, content)
        except OSError as exc:
            raise ProviderError("document", f"Could not write {self.changelog_path}: {exc}") from exc

        self._advance(EngineState.DONE)
        return GenerationResult(
            outcome=Outcome.UPDATED if is_update else Outcome.CREATED,
            path=self.changelog_path,
            version=version,
            commit_count=len(commits),
            content=content,
        )

    def _document_exists(self) -> bool:
        return self.store.exists(self.changelog_path)

    def _read_document(self) -> str:
        try:
            return self.store.read(self.changelog_path)
        except (OSError, UnicodeDecodeError) as exc:
            raise ProviderError("document", f"Could not read {self.changelog_path}: {exc}") from exc
