"""Tests for staging areas and home directory file helpers."""

import os

import pytest

from desksetup.fsutil import chown_tree, copy_tree, ensure_line, make_executable, remove_path
from desksetup.staging import staging_area


class TestStagingArea:
    """Tests for staging_area context manager."""

    def test_removed_after_normal_exit(self, temp_dir):
        with staging_area(base=temp_dir) as staging:
            (staging / "Hack.zip").write_bytes(b"data")
            assert staging.is_dir()

        assert not staging.exists()
        assert list(temp_dir.iterdir()) == []

    def test_removed_after_exception(self, temp_dir):
        with pytest.raises(RuntimeError):
            with staging_area(base=temp_dir) as staging:
                (staging / "nested").mkdir()
                (staging / "nested" / "file").write_text("x")
                raise RuntimeError("effect failed")

        assert not staging.exists()
        assert list(temp_dir.iterdir()) == []

    def test_each_area_is_fresh(self, temp_dir):
        with staging_area(base=temp_dir) as first, staging_area(base=temp_dir) as second:
            assert first != second

    def test_prefix(self, temp_dir):
        with staging_area(prefix="desksetup-go-", base=temp_dir) as staging:
            assert staging.name.startswith("desksetup-go-")


class TestEnsureLine:
    """Tests for ensure_line function."""

    def test_creates_missing_file(self, temp_dir):
        path = temp_dir / ".Xresources"
        assert ensure_line(path, "Xcursor.size: 24") is True
        assert path.read_text() == "Xcursor.size: 24\n"

    def test_idempotent(self, temp_dir):
        path = temp_dir / ".profile"
        ensure_line(path, "export XCURSOR_SIZE=24")
        assert ensure_line(path, "export XCURSOR_SIZE=24") is False
        assert path.read_text().count("XCURSOR_SIZE") == 1

    def test_marker_matches_existing_setting(self, temp_dir):
        path = temp_dir / ".Xresources"
        path.write_text("Xcursor.size: 32\n")

        assert ensure_line(path, "Xcursor.size: 24", marker="Xcursor.size") is False
        assert path.read_text() == "Xcursor.size: 32\n"

    def test_adds_missing_trailing_newline(self, temp_dir):
        path = temp_dir / ".profile"
        path.write_text("export EDITOR=vim")

        ensure_line(path, "export XCURSOR_SIZE=24")

        assert path.read_text() == "export EDITOR=vim\nexport XCURSOR_SIZE=24\n"


class TestTreeHelpers:
    """Tests for copy, chmod, chown and remove helpers."""

    def test_copy_tree_merges_into_existing(self, temp_dir):
        src = temp_dir / "src"
        (src / ".config" / "i3").mkdir(parents=True)
        (src / ".config" / "i3" / "config").write_text("new")
        dest = temp_dir / "home"
        (dest / ".config").mkdir(parents=True)
        (dest / ".config" / "keep").write_text("kept")

        copy_tree(src, dest)

        assert (dest / ".config" / "i3" / "config").read_text() == "new"
        assert (dest / ".config" / "keep").read_text() == "kept"

    def test_make_executable(self, temp_dir):
        script = temp_dir / "battery"
        script.write_text("#!/bin/sh\n")
        script.chmod(0o644)

        make_executable(script)

        assert os.access(script, os.X_OK)

    def test_remove_path(self, temp_dir):
        (temp_dir / ".git" / "objects").mkdir(parents=True)
        (temp_dir / "README.md").write_text("readme")

        remove_path(temp_dir / ".git")
        remove_path(temp_dir / "README.md")
        remove_path(temp_dir / "LICENSE")

        assert list(temp_dir.iterdir()) == []

    def test_chown_tree_handles_missing_path(self, temp_dir):
        chown_tree(temp_dir / "missing", os.getuid(), os.getgid())

    def test_chown_tree_walks_directory(self, temp_dir):
        (temp_dir / "a" / "b").mkdir(parents=True)
        (temp_dir / "a" / "b" / "c").write_text("x")
        (temp_dir / "a" / "link").symlink_to(temp_dir / "elsewhere")

        chown_tree(temp_dir / "a", os.getuid(), os.getgid())

        assert (temp_dir / "a" / "b" / "c").stat().st_uid == os.getuid()
