"""Filesystem helpers for steps that edit the target user's home."""

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Iterable

_logging = logging.getLogger(__name__)


def ensure_line(path: Path, line: str, marker: str | None = None) -> bool:
    """Append line to path unless marker (default: line) already occurs in it.

    Creates the file when missing. Returns True if the file was changed.
    """
    marker = marker or line
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        content = ""

    if marker in content:
        return False

    if content and not content.endswith("\n"):
        content += "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{content}{line}\n", encoding="utf-8")
    _logging.debug(f"Appended {line!r} to {path}")
    return True


def chown_tree(path: Path, uid: int, gid: int) -> None:
    """Recursively give path and everything below it to uid:gid."""
    if not path.exists() and not path.is_symlink():
        return

    os.chown(path, uid, gid, follow_symlinks=False)
    if not path.is_dir() or path.is_symlink():
        return

    for root, dirs, files in os.walk(path):
        for name in dirs + files:
            os.chown(os.path.join(root, name), uid, gid, follow_symlinks=False)


def chown_paths(paths: Iterable[Path], uid: int, gid: int) -> None:
    for path in paths:
        chown_tree(path, uid, gid)


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def copy_tree(src: Path, dest: Path) -> None:
    """Copy the contents of src into dest, overwriting files that exist."""
    shutil.copytree(src, dest, symlinks=True, dirs_exist_ok=True)


def remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


__all__ = [
    "ensure_line",
    "chown_tree",
    "chown_paths",
    "make_executable",
    "copy_tree",
    "remove_path",
]
