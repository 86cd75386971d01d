"""Provision an i3 desktop environment on a fresh Ubuntu install."""

import logging
from pathlib import Path

__version__ = "0.1.0"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handlers: list[logging.Handler] = []


def setup_logging(debug: bool = False, log_file: str | Path | None = None) -> None:
    """Configure the root logger for a CLI invocation.

    Console logging stays at WARNING unless debug is set, since progress is
    already printed for the operator. A log file, when given, records
    everything at DEBUG.
    """
    root = logging.getLogger()
    while _handlers:
        handler = _handlers.pop()
        root.removeHandler(handler)
        handler.close()

    root.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if debug else logging.WARNING)
    console.setFormatter(formatter)
    root.addHandler(console)
    _handlers.append(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        _handlers.append(file_handler)


__all__ = ["__version__", "setup_logging"]
