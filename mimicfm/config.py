"""Settings persisted as JSON in the user config directory.

Stores the UI theme, the editor command, and input/status timings.
Reads never raise: a missing or broken file means built-in defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .input.mouse import DOUBLE_CLICK_MS
from .launcher import DEFAULT_EDITOR

logger = logging.getLogger(__name__)

APP_NAME = "mimicfm"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_STATUS_MESSAGE_SECONDS = 3.0


@dataclass(frozen=True)
class Settings:
    """Effective session settings after config and CLI overrides."""

    theme: str | None = None
    editor: str = DEFAULT_EDITOR
    double_click_ms: int = DOUBLE_CLICK_MS
    status_message_seconds: float = DEFAULT_STATUS_MESSAGE_SECONDS


def load_config() -> dict[str, object]:
    """Return the stored config mapping.

    Anything other than a readable file holding a JSON object yields ``{}``.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; write errors are logged and ignored."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Could not write config %s: %s", CONFIG_PATH, exc)


def _string_value(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    """Remember ``theme_name`` for later sessions; blank names are ignored."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


def load_settings() -> Settings:
    """Read every known key; each invalid value falls back to its default on its own."""
    data = load_config()
    defaults = Settings()

    double_click_ms = data.get("double_click_ms")
    if isinstance(double_click_ms, bool) or not isinstance(double_click_ms, int) or double_click_ms <= 0:
        double_click_ms = defaults.double_click_ms

    seconds = data.get("status_message_seconds")
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)) or seconds <= 0:
        seconds = defaults.status_message_seconds

    return Settings(
        theme=_string_value(data, "theme"),
        editor=_string_value(data, "editor") or defaults.editor,
        double_click_ms=double_click_ms,
        status_message_seconds=float(seconds),
    )


__all__ = [
    "CONFIG_PATH",
    "Settings",
    "load_config",
    "load_settings",
    "save_config",
    "save_theme_name",
]
