"""
Recursive directory scanning.

Walks a local directory and produces an ordered mapping from object key
to entry. Keys are rooted at (and include) the scanned directory's own
name, so scanning ``./site`` yields ``site/``, ``site/index.html``,
``site/css/`` and so on. Directory keys end with a slash; file keys don't.

The scan is a pure read. Nothing is uploaded until it has completed.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryMarker:
    """Placeholder for a directory; uploaded as a zero-byte object."""
    pass


@dataclass(frozen=True)
class FileContent:
    """Raw bytes of a scanned file."""
    data: bytes

    def __len__(self) -> int:
        return len(self.data)


DirectoryEntry = Union[DirectoryMarker, FileContent]

DIRECTORY = DirectoryMarker()


def _raise(error: OSError) -> None:
    # os.walk swallows listing errors unless told otherwise
    raise error


def directory_key(prefix: str) -> str:
    """Key for a directory, always with exactly one trailing slash."""
    return prefix.rstrip("/") + "/"


def scan_directory(root: Union[str, Path]) -> dict[str, DirectoryEntry]:
    """
    Scan ``root`` recursively.

    Returns a dict in walk order: each directory's marker comes before
    its contents, files of a directory come before its subdirectories,
    and siblings are sorted by name. Symlinked directories are not
    followed and produce no entries.

    Raises:
        FileNotFoundError: if ``root`` doesn't exist
        NotADirectoryError: if ``root`` is not a directory
        OSError: if a directory can't be listed or a file can't be read
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"No such directory: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    # abspath keeps a symlinked root under the name it was given
    base = Path(os.path.abspath(root)).name
    entries: dict[str, DirectoryEntry] = {}

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        relative = Path(dirpath).relative_to(root).as_posix()
        prefix = base if relative == "." else f"{base}/{relative}"

        entries[directory_key(prefix)] = DIRECTORY

        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            entries[f"{prefix}/{filename}"] = FileContent(path.read_bytes())

    logger.debug(
        "Scanned directory",
        extra={"root": str(root), "entries": len(entries)}
    )

    return entries
