"""Scoped staging directories for step effects."""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_logging = logging.getLogger(__name__)


@contextmanager
def staging_area(prefix: str = "desksetup-", base: str | Path | None = None) -> Iterator[Path]:
    """Yield a fresh private directory and remove it on every exit path.

    The directory belongs to the caller for the duration of the block. It is
    deleted whether the block returns normally, raises, or is interrupted.

    Args:
        prefix: Name prefix of the directory
        base: Parent directory; defaults to the system temp location
    """
    path = Path(tempfile.mkdtemp(prefix=prefix, dir=base))
    _logging.debug(f"Created staging area {path}")
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        _logging.debug(f"Removed staging area {path}")


__all__ = ["staging_area"]
