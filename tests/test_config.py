"""Tests for persisted JSON config loading, sanitising, and saving."""

from __future__ import annotations

import json
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from mimicfm import config
from mimicfm.config import Settings


class ConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "config.json"
        patcher = mock.patch.object(config, "CONFIG_PATH", self.path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def _write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    def test_missing_file_gives_defaults(self) -> None:
        self.assertEqual(config.load_config(), {})
        self.assertEqual(config.load_settings(), Settings())

    def test_malformed_or_non_object_json_gives_defaults(self) -> None:
        self._write("{not json")
        with self.assertLogs("mimicfm.config", level="WARNING"):
            self.assertEqual(config.load_settings(), Settings())
        self._write("[1, 2]")
        self.assertEqual(config.load_config(), {})

    def test_valid_values_are_used(self) -> None:
        self._write(json.dumps({"theme": "ocean", "editor": "vim", "double_click_ms": 250, "status_message_seconds": 5}))
        self.assertEqual(
            config.load_settings(),
            Settings(theme="ocean", editor="vim", double_click_ms=250, status_message_seconds=5.0),
        )

    def test_invalid_values_fall_back_individually(self) -> None:
        self._write(
            json.dumps({"theme": " ", "editor": 3, "double_click_ms": True, "status_message_seconds": -1})
        )
        self.assertEqual(config.load_settings(), Settings())
        self._write(json.dumps({"editor": "nano", "double_click_ms": "fast"}))
        self.assertEqual(config.load_settings(), Settings(editor="nano"))

    def test_save_theme_name_round_trips_and_keeps_other_keys(self) -> None:
        self._write(json.dumps({"editor": "vim"}))
        config.save_theme_name("ocean")
        self.assertEqual(config.load_settings().theme, "ocean")
        self.assertEqual(config.load_config()["editor"], "vim")
        config.save_theme_name("  ")
        self.assertEqual(config.load_settings().theme, "ocean")

    def test_save_creates_parent_directory(self) -> None:
        config.save_config({"theme": "default"})
        self.assertTrue(self.path.exists())
        self.assertTrue(self.path.read_text(encoding="utf-8").endswith("\n"))

    def test_write_errors_are_logged_not_raised(self) -> None:
        with mock.patch.object(Path, "write_text", side_effect=PermissionError(13, "denied")):
            with self.assertLogs("mimicfm.config", level="WARNING"):
                config.save_config({"theme": "default"})


if __name__ == "__main__":
    unittest.main()
