"""Build logging: one ``toys`` logger tree, console output and an optional log file.

Components ask for ``get_logger("compiler")`` and friends; only entry points
call ``configure_logging``. Build phases are wrapped in ``log_phase`` so a
verbose run shows where the time went.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

ROOT_LOGGER = "toys"
CONSOLE_FORMAT = "[toys] %(levelname)s %(message)s"
LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(component: str | None = None) -> logging.Logger:
    """Logger for one builder component, ``toys.<component>``."""
    if not component:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, fmt: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route build messages to stderr, and to ``log_file`` when given.

    Verbose builds log per-file decisions (cache hits, copies, skipped
    hooks) at DEBUG; otherwise only phase summaries are shown.
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = get_logger()
    root.setLevel(level)
    root.propagate = False

    # The service and the tests configure the tree more than once per process.
    for existing in list(root.handlers):
        root.removeHandler(existing)

    _attach(root, logging.StreamHandler(), level, CONSOLE_FORMAT)
    if log_file is not None:
        _attach(root, logging.FileHandler(log_file, encoding="utf-8"), level, LOG_FILE_FORMAT)
    return root


@contextmanager
def log_phase(logger: logging.Logger, phase: str) -> Iterator[None]:
    """Log the start and the duration of one build phase."""
    logger.debug("Phase %s started", phase)
    started = time.perf_counter()
    yield
    logger.debug("Phase %s finished in %.3fs", phase, time.perf_counter() - started)


__all__ = ["configure_logging", "get_logger", "log_phase"]
