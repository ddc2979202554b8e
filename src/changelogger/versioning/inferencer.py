"""
Semantic version inference for a new changelog entry.

The version of an entry is resolved through a chain of sources, the
first one producing a value wins:

1. the latest ``[v]X.Y.Z`` tag, bumped according to the commit batch;
2. the version declared in the project's packaging files;
3. the answer to an interactive prompt;
4. ``"Unreleased"`` on update runs, ``"1.0.0"`` otherwise.

Failures of the first two sources are logged and never fatal.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from changelogger.vcs.git_client import Commit, GitError, Tag
from changelogger.versioning.project_metadata import MetadataError, ProjectMetadataReader
from changelogger.versioning.semver import SemanticVersion


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_CREATE_VERSION = "1.0.0"
DEFAULT_UPDATE_VERSION = "Unreleased"

PROMPT_TEXT = "Enter version for this changelog entry"
PROMPT_PLACEHOLDER = 'e.g., 1.2.0, v2.0.0, or leave empty for "Unreleased"'

BUMP_MAJOR = "major"
BUMP_MINOR = "minor"
BUMP_PATCH = "patch"


def default_version(is_update: bool) -> str:
    return DEFAULT_UPDATE_VERSION if is_update else DEFAULT_CREATE_VERSION


def latest_version_tag(tags: Iterable[Tag]) -> Optional[Tuple[str, SemanticVersion]]:
    """Return the tag name and version of the highest version tag.

    Tags that do not start with ``[v]X.Y.Z`` are ignored. Equal versions
    (``v1.2.3`` and ``1.2.3``) resolve to the first name in sorted order.
    """
    candidates = []
    for tag in tags:
        version = SemanticVersion.parse(tag.name)
        if version is not None:
            candidates.append((tag.name, version))
    if not candidates:
        return None
    candidates.sort(key=lambda item: item[0])
    return max(candidates, key=lambda item: item[1])


def detect_bump(commits: Sequence[Commit]) -> Optional[str]:
    """Return the bump level signalled by the commit batch.

    Breaking changes outrank features, which outrank fixes. ``None``
    means no commit carries any signal.
    """
    messages = [commit.message for commit in commits]
    lowered = [message.lower() for message in messages]

    if any("breaking" in low or "BREAKING CHANGE" in raw for low, raw in zip(lowered, messages)):
        return BUMP_MAJOR
    if any("feat" in low or "feature" in low for low in lowered):
        return BUMP_MINOR
    if any("fix" in low or "bug" in low for low in lowered):
        return BUMP_PATCH
    return None


def version_from_tags(tags: Iterable[Tag], commits: Sequence[Commit]) -> Optional[str]:
    """Infer the next version from existing tags and the commit batch.

    Returns ``None`` when no tag looks like a version. When the commits
    carry no bump signal the latest tag is returned as-is, prefix and
    suffix included.
    """
    latest = latest_version_tag(tags)
    if latest is None:
        return None
    tag_name, version = latest
    logger.debug("Latest git tag: %s", tag_name)

    bump = detect_bump(commits)
    if bump == BUMP_MAJOR:
        return str(version.bump_major())
    if bump == BUMP_MINOR:
        return str(version.bump_minor())
    if bump == BUMP_PATCH:
        return str(version.bump_patch())
    return tag_name


class VersionInferencer:
    """Resolve the version string for a new changelog entry.

    Parameters
    ----------
    tag_source : Callable[[], Iterable[Tag]]
        Returns the repository tags, typically ``GitClient.list_tags``.
    metadata_reader : ProjectMetadataReader, optional
        Source of a declared project version.
    prompt : object, optional
        Anything with an ``ask(prompt_text, placeholder, default)`` method
        returning the user's answer or ``None`` when cancelled. Without a
        prompt the interactive step is skipped.
    """

    def __init__(
        self,
        tag_source: Callable[[], Iterable[Tag]],
        metadata_reader: Optional[ProjectMetadataReader] = None,
        prompt=None,
    ) -> None:
        self.tag_source = tag_source
        self.metadata_reader = metadata_reader
        self.prompt = prompt

    def infer(self, commits: Sequence[Commit], is_update: bool) -> str:
        version = self._from_tags(commits)
        if version:
            logger.info("Using git tag version: %s", version)
            return version

        version = self._from_metadata()
        if version:
            logger.info("Using declared project version: %s", version)
            return version

        version = self._from_prompt(is_update)
        if version:
            logger.info("Using version entered by user: %s", version)
            return version

        return default_version(is_update)

    def _from_tags(self, commits: Sequence[Commit]) -> Optional[str]:
        try:
            tags: List[Tag] = list(self.tag_source())
        except (GitError, OSError) as exc:
            logger.warning("Could not read git tags: %s", exc)
            return None
        return version_from_tags(tags, commits)

    def _from_metadata(self) -> Optional[str]:
        if self.metadata_reader is None:
            return None
        try:
            return self.metadata_reader.read_declared_version()
        except (MetadataError, OSError) as exc:
            logger.warning("Could not read project version: %s", exc)
            return None

    def _from_prompt(self, is_update: bool) -> Optional[str]:
        if self.prompt is None:
            return None
        answer = self.prompt.ask(PROMPT_TEXT, PROMPT_PLACEHOLDER, default_version(is_update))
        if answer and answer.strip():
            return answer.strip()
        return None
