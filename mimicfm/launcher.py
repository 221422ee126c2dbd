"""External process launcher for opening entries outside the file manager.

Both helpers spawn a detached child with its standard streams discarded and
raise ``LaunchError`` when the process cannot start or reports failure. They
block until the outcome is known, so callers run them on a worker thread.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from pathlib import Path

from .errors import LaunchError

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "code"
EDITOR_SETTLE_SECONDS = 1.0


def default_handler_command(path: Path, platform: str | None = None) -> list[str]:
    platform = sys.platform if platform is None else platform
    if platform.startswith("win"):
        return ["cmd", "/c", "start", '""', str(path)]
    if platform == "darwin":
        return ["open", str(path)]
    return ["xdg-open", str(path)]


def _spawn(cmd: list[str]) -> subprocess.Popen:
    try:
        return subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        raise LaunchError(f"Failed to launch {cmd[0]}: {exc.strerror or exc}") from exc


def open_with_default_handler(path: Path) -> None:
    """Open ``path`` with the desktop's default application; exit code 0 is success."""
    cmd = default_handler_command(path)
    logger.info("Opening %s with %s", path, cmd[0])
    code = _spawn(cmd).wait()
    if code != 0:
        raise LaunchError(f'Failed to open "{path}": exit code {code}')


def open_with_editor(path: Path, editor: str = DEFAULT_EDITOR, settle_seconds: float = EDITOR_SETTLE_SECONDS) -> None:
    """Open ``path`` in ``editor``.

    Editors commonly keep running after the launch, so a process still alive
    after ``settle_seconds`` counts as success, as does exit code 0.
    """
    cmd = shlex.split(editor)
    if not cmd:
        raise LaunchError("Cannot edit: no editor configured.")
    logger.info("Opening %s with editor %s", path, cmd[0])
    process = _spawn([*cmd, str(path)])
    try:
        code = process.wait(timeout=settle_seconds)
    except subprocess.TimeoutExpired:
        return
    if code != 0:
        raise LaunchError(f'Failed to open "{path}" with {cmd[0]}: exit code {code}')


__all__ = [
    "DEFAULT_EDITOR",
    "default_handler_command",
    "open_with_default_handler",
    "open_with_editor",
]
