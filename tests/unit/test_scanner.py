"""
Unit tests for directory scanning.

These run against real temporary directories; scanning is a pure read
so there is nothing worth mocking.
"""

import os

import pytest

from lob.core.scanner import DIRECTORY, DirectoryMarker, FileContent, scan_directory


@pytest.fixture
def source_tree(tmp_path):
    """site/a.txt and site/lib/b.txt"""
    root = tmp_path / "site"
    (root / "lib").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"alpha")
    (root / "lib" / "b.txt").write_bytes(b"beta")
    return root


class TestScanDirectory:

    def test_returns_exactly_the_tree(self, source_tree):
        """Root marker, lib marker and both files; nothing else."""
        assert scan_directory(source_tree) == {
            "site/": DIRECTORY,
            "site/a.txt": FileContent(b"alpha"),
            "site/lib/": DIRECTORY,
            "site/lib/b.txt": FileContent(b"beta"),
        }

    def test_directories_precede_their_contents(self, source_tree):
        keys = list(scan_directory(source_tree))
        assert keys == ["site/", "site/a.txt", "site/lib/", "site/lib/b.txt"]

    def test_directory_keys_end_with_slash(self, source_tree):
        for key, entry in scan_directory(source_tree).items():
            assert key.endswith("/") == isinstance(entry, DirectoryMarker)

    def test_accepts_string_path_with_trailing_slash(self, source_tree):
        content = scan_directory(str(source_tree) + os.sep)
        assert "site/" in content
        assert "site/lib/b.txt" in content

    def test_empty_directory_yields_only_root(self, tmp_path):
        root = tmp_path / "empty"
        root.mkdir()
        assert scan_directory(root) == {"empty/": DIRECTORY}

    def test_nested_empty_directory_is_kept(self, source_tree):
        (source_tree / "lib" / "deep").mkdir()
        assert scan_directory(source_tree)["site/lib/deep/"] == DIRECTORY

    def test_binary_content_is_kept_raw(self, source_tree):
        (source_tree / "img.bin").write_bytes(b"\x00\xff\x10")
        assert scan_directory(source_tree)["site/img.bin"].data == b"\x00\xff\x10"

    def test_does_not_modify_filesystem(self, source_tree):
        before = sorted(p.relative_to(source_tree) for p in source_tree.rglob("*"))
        scan_directory(source_tree)
        after = sorted(p.relative_to(source_tree) for p in source_tree.rglob("*"))
        assert before == after

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            scan_directory(tmp_path / "nope")

    def test_file_root_raises(self, source_tree):
        with pytest.raises(NotADirectoryError):
            scan_directory(source_tree / "a.txt")

    def test_unreadable_file_propagates(self, source_tree, monkeypatch):
        def fail(self):
            raise PermissionError("denied")

        monkeypatch.setattr("pathlib.Path.read_bytes", fail)

        with pytest.raises(OSError, match="denied"):
            scan_directory(source_tree)


class TestFileContent:

    def test_length_is_byte_count(self):
        assert len(FileContent(b"abc")) == 3

    def test_equal_content_is_equal(self):
        assert FileContent(b"x") == FileContent(b"x")
        assert DirectoryMarker() == DIRECTORY


class TestSymlinks:
    """Links are keyed by their own names, never by their targets."""

    def test_symlinked_root_keeps_given_name(self, tmp_path):
        target = tmp_path / "v42"
        target.mkdir()
        (target / "a.txt").write_bytes(b"alpha")
        link = tmp_path / "current"
        link.symlink_to(target, target_is_directory=True)

        assert list(scan_directory(link)) == ["current/", "current/a.txt"]

    def test_symlinked_directory_is_skipped(self, source_tree, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "c.txt").write_bytes(b"gamma")
        (source_tree / "linked").symlink_to(outside, target_is_directory=True)

        content = scan_directory(source_tree)

        assert not any(key.startswith("site/linked") for key in content)
        assert len(content) == 4

    def test_symlinked_file_is_read_through(self, source_tree, tmp_path):
        outside = tmp_path / "c.txt"
        outside.write_bytes(b"gamma")
        (source_tree / "c.txt").symlink_to(outside)

        assert scan_directory(source_tree)["site/c.txt"] == FileContent(b"gamma")
