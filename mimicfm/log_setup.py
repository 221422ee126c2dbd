"""File-based logging for the full-screen session.

The terminal belongs to the UI while running, so records go to a log file
under the platform's user log directory instead of stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILENAME = f"{APP_NAME}.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def configure_logging(log_path: Path | None = None, verbose: bool = False) -> Path:
    """Route package logging to ``log_path`` (default: user log dir) and return the path used."""
    path = default_log_path() if log_path is None else Path(log_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(path),
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )
    logging.getLogger(__name__).debug("Logging to %s", path)
    return path


__all__ = ["configure_logging", "default_log_path"]
