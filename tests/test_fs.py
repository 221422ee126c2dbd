"""Tests for the local filesystem provider and destination naming."""

from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from mimicfm.errors import FileSystemError
from mimicfm.fs import LocalFileSystem, natural_name_key, parent_path, unique_destination
from mimicfm.model import KIND_DIRECTORY, KIND_FILE


class ListEntriesTests(unittest.TestCase):
    def test_directories_first_then_natural_case_insensitive_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "dir10").mkdir()
            (root / "dir2").mkdir()
            (root / "b.txt").write_text("bb", encoding="utf-8")
            (root / "A.txt").write_text("a", encoding="utf-8")
            (root / ".hidden").write_text("x", encoding="utf-8")

            entries = LocalFileSystem().list_entries(root)

        self.assertEqual([entry.name for entry in entries], ["dir2", "dir10", "A.txt", "b.txt"])
        self.assertEqual([entry.kind for entry in entries], [KIND_DIRECTORY, KIND_DIRECTORY, KIND_FILE, KIND_FILE])
        self.assertIsNone(entries[0].size)
        self.assertEqual(entries[3].size, 2)
        self.assertTrue(all(entry.path.is_absolute() for entry in entries))
        self.assertTrue(all(entry.modified_at is not None for entry in entries))

    def test_missing_directory_raises_filesystem_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "gone"
            with self.assertRaises(FileSystemError) as caught:
                LocalFileSystem().list_entries(missing)
        self.assertEqual(caught.exception.operation, "read directory")
        self.assertEqual(caught.exception.path, missing)
        self.assertIn(str(missing), str(caught.exception))

    def test_natural_key(self) -> None:
        names = ["file10", "File2", "file1"]
        self.assertEqual(sorted(names, key=natural_name_key), ["file1", "File2", "file10"])


class UniqueDestinationTests(unittest.TestCase):
    def test_picks_smallest_free_counter_before_extension(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "report.txt").write_text("", encoding="utf-8")
            (root / "report (1).txt").write_text("", encoding="utf-8")
            self.assertEqual(unique_destination(root, "report.txt"), root / "report (2).txt")

    def test_free_name_and_names_without_extension(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self.assertEqual(unique_destination(root, "new.txt"), root / "new.txt")
            (root / "notes").mkdir()
            self.assertEqual(unique_destination(root, "notes"), root / "notes (1)")
            (root / ".env").write_text("", encoding="utf-8")
            self.assertEqual(unique_destination(root, ".env"), root / ".env (1)")

    def test_parent_of_root_is_root(self) -> None:
        self.assertEqual(parent_path(Path("/")), Path("/"))
        self.assertEqual(parent_path(Path("/usr/lib")), Path("/usr"))


class FileOperationTests(unittest.TestCase):
    def test_copy_file_and_directory_tree(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            fs = LocalFileSystem()
            (root / "a.txt").write_text("hello", encoding="utf-8")
            (root / "tree" / "nested").mkdir(parents=True)
            (root / "tree" / "nested" / "leaf.txt").write_text("leaf", encoding="utf-8")

            fs.copy(root / "a.txt", root / "b.txt")
            fs.copy(root / "tree", root / "tree copy")

            self.assertEqual((root / "b.txt").read_text(encoding="utf-8"), "hello")
            self.assertEqual((root / "tree copy" / "nested" / "leaf.txt").read_text(encoding="utf-8"), "leaf")
            self.assertTrue((root / "a.txt").exists())

    def test_move_and_recursive_delete(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            fs = LocalFileSystem()
            (root / "tree" / "nested").mkdir(parents=True)
            (root / "tree" / "nested" / "leaf.txt").write_text("leaf", encoding="utf-8")

            fs.move(root / "tree", root / "moved")
            self.assertFalse(fs.exists(root / "tree"))
            self.assertTrue(fs.exists(root / "moved" / "nested" / "leaf.txt"))

            fs.delete(root / "moved")
            self.assertFalse(fs.exists(root / "moved"))

    def test_failures_are_wrapped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            fs = LocalFileSystem()
            with self.assertRaises(FileSystemError):
                fs.delete(root / "missing")
            with self.assertRaises(FileSystemError):
                fs.copy(root / "missing", root / "dest")
            with self.assertRaises(FileSystemError):
                fs.stat(root / "missing")

    def test_stat_returns_entry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "x.bin"
            target.write_bytes(b"1234")
            entry = LocalFileSystem().stat(target)
        self.assertEqual((entry.name, entry.kind, entry.size), ("x.bin", KIND_FILE, 4))


if __name__ == "__main__":
    unittest.main()
