"""
File-system persistence for changelog documents.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def _target_mode(path: Path) -> int:
    """Permission bits the written file should carry.

    An existing file keeps its mode; a new one gets ``0o666`` minus the
    process umask, like a plain ``open(path, "w")`` would.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class FileDocumentStore:
    """Read and write text documents as UTF-8 files.

    Content is passed through byte for byte: line endings are neither
    translated on read nor on write. Writes go to a temporary file next
    to the target which then replaces it, so readers never observe a
    partially written document.
    """

    encoding = "utf-8"

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read(self, path: Path) -> str:
        """Return the document text.

        Raises
        ------
        OSError
            If the file cannot be read.
        UnicodeDecodeError
            If the file is not valid UTF-8.
        """
        return path.read_bytes().decode(self.encoding)

    def write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        mode = _target_mode(path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as tmp:
                tmp.write(content)
            # mkstemp creates the file 0600
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("Wrote %d characters to %s", len(content), path)
