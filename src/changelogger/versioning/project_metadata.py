"""
Declared project version lookup.

A project may already declare its version in a packaging file. The
:class:`ProjectMetadataReader` checks, for each search directory in
order, ``package.json``, ``pyproject.toml`` and ``setup.cfg`` and
returns the first non-empty version string it finds.
"""

from __future__ import annotations

import configparser
import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class MetadataError(Exception):
    """Raised when a project metadata file exists but cannot be parsed."""

    pass


def _clean(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _table(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key, {})
    return value if isinstance(value, dict) else {}


def _from_package_json(path: Path) -> Optional[str]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:  # JSONDecodeError, UnicodeDecodeError
        raise MetadataError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        return None
    return _clean(data.get("version"))


def _from_pyproject(path: Path) -> Optional[str]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:  # TOMLDecodeError, UnicodeDecodeError
        raise MetadataError(f"Cannot read {path}: {exc}") from exc
    project = _table(data, "project")
    poetry = _table(_table(data, "tool"), "poetry")
    return _clean(project.get("version")) or _clean(poetry.get("version"))


def _from_setup_cfg(path: Path) -> Optional[str]:
    parser = configparser.ConfigParser()
    try:
        parser.read_string(path.read_text(encoding="utf-8"), source=str(path))
    except (OSError, UnicodeDecodeError, configparser.Error) as exc:
        raise MetadataError(f"Cannot read {path}: {exc}") from exc
    return _clean(parser.get("metadata", "version", fallback=None))


READERS = (
    ("package.json", _from_package_json),
    ("pyproject.toml", _from_pyproject),
    ("setup.cfg", _from_setup_cfg),
)


class ProjectMetadataReader:
    """Read the version a project declares in its packaging files."""

    def __init__(self, search_dirs: Iterable[Path]) -> None:
        # Keep order but drop duplicates (project folder == repo root is common)
        self.search_dirs: List[Path] = []
        for directory in search_dirs:
            if directory not in self.search_dirs:
                self.search_dirs.append(directory)

    def read_declared_version(self) -> Optional[str]:
        """Return the first declared version found, or ``None``.

        Raises
        ------
        MetadataError
            If a metadata file is present but malformed.
        """
        for directory in self.search_dirs:
            for filename, reader in READERS:
                path = directory / filename
                if not path.is_file():
                    continue
                version = reader(path)
                if version:
                    logger.debug("Declared version %s found in %s", version, path)
                    return version
        return None
