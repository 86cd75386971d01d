"""Package list loading and installation.

The package list is a comma-separated text file with three fields per row::

    # comment lines start with '#'
    ,git,"Version control"
    web,firefox,"A browser"

An empty first field (tag) marks the row as active: the package gets
installed. Any tag marks the row as inert documentation. The description may
be wrapped in double quotes; only the outermost pair is removed, after
surrounding whitespace is trimmed.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from . import console
from .errors import CommandError, PackageListError
from .execution import apt_get, fetch_text

COMMENT_MARKER = "#"

_logging = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageEntry:
    tag: str
    name: str
    description: str

    @property
    def active(self) -> bool:
        return self.tag == ""


def _strip_quotes(value: str) -> str:
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def parse_package_line(line: str) -> PackageEntry | None:
    """Parse one non-comment row into a PackageEntry.

    Only the first two commas separate fields, so a description may contain
    commas. Surrounding whitespace is trimmed from the name and the
    description (not the tag), then one leading and one trailing double
    quote are removed from the description. A row without a description
    gets an empty one. A row without a package name cannot be installed and
    yields None.
    """
    fields = line.rstrip("\r\n").split(",", 2)
    fields += [""] * (3 - len(fields))
    tag, name, description = fields

    name = name.strip()
    if not name:
        return None

    return PackageEntry(
        tag=tag,
        name=name,
        description=_strip_quotes(description.strip()),
    )


def parse_package_list(text: str) -> Iterator[PackageEntry]:
    """Lazily yield the entries of a package list, skipping comments and blanks."""
    for lineno, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_MARKER):
            continue

        entry = parse_package_line(line)
        if entry is None:
            _logging.warning(f"Package list line {lineno} has no package name, ignoring: {line!r}")
            continue
        yield entry


def load_package_list(
    url: str, fetch: Callable[[str], str] = fetch_text
) -> Iterator[PackageEntry]:
    """Download and parse the package list.

    The returned iterator is consumed once; load again to re-read the list.

    Raises:
        PackageListError: reason "download" if the fetch fails, "empty" if
            the list holds no package rows
    """
    try:
        text = fetch(url)
    except CommandError as e:
        raise PackageListError("download", f"Failed to download package list: {e}") from e

    entries = parse_package_list(text)
    first = next(entries, None)
    if first is None:
        raise PackageListError("empty", f"Package list at {url} has no entries")
    return itertools.chain([first], entries)


def active_entries(entries: Iterable[PackageEntry]) -> list[PackageEntry]:
    return [entry for entry in entries if entry.active]


def _apt_install(name: str) -> None:
    apt_get("install", "-y", "-qq", name)


def install_entries(
    entries: Iterable[PackageEntry],
    install: Callable[[str], object] = _apt_install,
) -> list[str]:
    """Install every active entry, one at a time.

    A package that fails to install is reported and the loop moves on.

    Args:
        entries: Parsed package list
        install: Installs one package by name, raising CommandError on
            failure; defaults to apt-get

    Returns:
        Names of the packages that failed to install
    """
    selected = active_entries(entries)
    total = len(selected)
    failed = []

    for n, entry in enumerate(selected, 1):
        console.msg(f"Installing {entry.name} ({n} of {total})... {entry.description}")
        try:
            install(entry.name)
        except CommandError as e:
            _logging.debug(f"apt-get install {entry.name}: {e}")
            console.warn(f"Failed to install {entry.name}")
            failed.append(entry.name)

    return failed


__all__ = [
    "COMMENT_MARKER",
    "PackageEntry",
    "parse_package_line",
    "parse_package_list",
    "load_package_list",
    "active_entries",
    "install_entries",
]
