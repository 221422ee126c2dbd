"""Runtime orchestration: controller, dispatcher loop, and background tasks."""

from __future__ import annotations

from .controller import FileManagerController
from .loop import run_main_loop
from .tasks import BackgroundTaskRunner, TaskOutcome

__all__ = [
    "BackgroundTaskRunner",
    "FileManagerController",
    "TaskOutcome",
    "run_main_loop",
]
