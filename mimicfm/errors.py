"""Exception types surfaced by the filesystem provider, launcher, and decoders."""

from __future__ import annotations

from pathlib import Path


class FileManagerError(Exception):
    """Base class for recoverable file-manager failures."""


class FileSystemError(FileManagerError):
    """A filesystem operation failed (unreadable directory, permission, vanished file)."""

    def __init__(self, operation: str, path: Path, reason: str) -> None:
        super().__init__(f"Cannot {operation} {path}: {reason}")
        self.operation = operation
        self.path = path
        self.reason = reason

    @classmethod
    def from_os_error(cls, operation: str, path: Path, exc: OSError) -> FileSystemError:
        reason = exc.strerror or str(exc)
        return cls(operation, path, reason)


class LaunchError(FileManagerError):
    """An external process could not be started or exited unsuccessfully."""


class ProtocolDecodeError(FileManagerError):
    """A terminal byte sequence could not be parsed.

    Never escapes the decoders: callers turn it into an opaque key or drop it.
    """
