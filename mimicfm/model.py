"""Domain datatypes shared by the state store, layout engine, and renderer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

KIND_FILE = "file"
KIND_DIRECTORY = "directory"


@dataclass(frozen=True)
class FileEntry:
    """One file or directory record produced by the filesystem provider.

    Identity is ``path``; entries are never mutated after a directory scan.
    """

    name: str
    path: Path
    kind: str
    size: int | None = None
    modified_at: datetime | None = None

    @property
    def is_dir(self) -> bool:
        return self.kind == KIND_DIRECTORY


@dataclass(frozen=True)
class TerminalSize:
    width: int
    height: int


@dataclass(frozen=True)
class Position:
    x: int
    y: int


__all__ = [
    "KIND_DIRECTORY",
    "KIND_FILE",
    "FileEntry",
    "Position",
    "TerminalSize",
]
