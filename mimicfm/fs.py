"""Local filesystem provider: directory scans plus copy/move/delete.

Every failure surfaces as ``FileSystemError`` carrying the operation and path;
callers never see a bare ``OSError``.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
from datetime import datetime
from pathlib import Path

from .errors import FileSystemError
from .model import KIND_DIRECTORY, KIND_FILE, FileEntry

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"(\d+)")


def natural_name_key(name: str) -> tuple:
    """Case-insensitive sort key that orders embedded numbers numerically (``a2`` < ``a10``)."""
    parts = _DIGITS_RE.split(name.casefold())
    return tuple((0, int(part), "") if part.isdigit() else (1, 0, part) for part in parts if part)


def entry_sort_key(entry: FileEntry) -> tuple:
    return (not entry.is_dir, natural_name_key(entry.name), entry.name)


def parent_path(path: Path) -> Path:
    """Return the parent directory; the root is its own parent."""
    return path.parent


def unique_destination(directory: Path, name: str) -> Path:
    """Return ``directory/name``, or the first free ``stem (n)suffix`` variant with n >= 1."""
    candidate = directory / name
    if not candidate.exists():
        return candidate
    base = Path(name)
    stem, suffix = base.stem, base.suffix
    if not stem:
        stem, suffix = name, ""
    counter = 1
    while True:
        candidate = directory / f"{stem} ({counter}){suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


def _entry_from_stat(name: str, path: Path, stat: os.stat_result, is_dir: bool) -> FileEntry:
    return FileEntry(
        name=name,
        path=path,
        kind=KIND_DIRECTORY if is_dir else KIND_FILE,
        size=None if is_dir else int(stat.st_size),
        modified_at=datetime.fromtimestamp(stat.st_mtime),
    )


class LocalFileSystem:
    """Filesystem provider backed by ``os``/``shutil``."""

    def list_entries(self, directory: Path) -> list[FileEntry]:
        """List visible children of ``directory``: directories first, then natural name order.

        Dot-prefixed names are hidden. Children that vanish or cannot be
        stat'ed mid-scan are skipped; an unreadable directory raises.
        """
        entries: list[FileEntry] = []
        try:
            with os.scandir(directory) as iterator:
                for child in iterator:
                    if child.name.startswith("."):
                        continue
                    try:
                        is_dir = child.is_dir()
                        stat = child.stat()
                    except OSError as exc:
                        logger.warning("Skipping %s: %s", child.path, exc)
                        continue
                    entries.append(_entry_from_stat(child.name, Path(child.path).absolute(), stat, is_dir))
        except OSError as exc:
            raise FileSystemError.from_os_error("read directory", directory, exc) from exc
        entries.sort(key=entry_sort_key)
        return entries

    def stat(self, path: Path) -> FileEntry:
        try:
            stat = path.stat()
        except OSError as exc:
            raise FileSystemError.from_os_error("stat", path, exc) from exc
        is_dir = path.is_dir()
        return _entry_from_stat(path.name or str(path), path.absolute(), stat, is_dir)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def copy(self, source: Path, destination: Path) -> None:
        """Copy a file, or a directory tree recursively."""
        try:
            if source.is_dir():
                shutil.copytree(source, destination)
            else:
                shutil.copy2(source, destination)
        except OSError as exc:
            raise FileSystemError.from_os_error("copy", source, exc) from exc
        logger.info("Copied %s to %s", source, destination)

    def move(self, source: Path, destination: Path) -> None:
        try:
            shutil.move(str(source), str(destination))
        except OSError as exc:
            raise FileSystemError.from_os_error("move", source, exc) from exc
        logger.info("Moved %s to %s", source, destination)

    def delete(self, path: Path) -> None:
        """Delete a file, or a directory tree recursively."""
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            raise FileSystemError.from_os_error("delete", path, exc) from exc
        logger.info("Deleted %s", path)


__all__ = [
    "LocalFileSystem",
    "entry_sort_key",
    "natural_name_key",
    "parent_path",
    "unique_destination",
]
