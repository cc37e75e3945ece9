"""Task-aware logging for buildgate.

Progress goes to stdout and diagnostics (warnings, per-rule errors, failures) go to
stderr, so a CI log can separate the two. Records emitted while a task body runs are
prefixed with that task's name.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator

_ROOT_NAME = "buildgate"
_current_task: ContextVar[str | None] = ContextVar("buildgate_task", default=None)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{_ROOT_NAME}.{name}" if name else _ROOT_NAME)


def current_task() -> str | None:
    return _current_task.get()


@contextmanager
def task_context(name: str) -> Iterator[None]:
    """Attribute log records emitted inside the block to task ``name``."""
    token = _current_task.set(name)
    try:
        yield
    finally:
        _current_task.reset(token)


class TaskTagFilter(logging.Filter):
    """Adds ``task`` and ``task_prefix`` attributes for the formatters."""

    def filter(self, record: logging.LogRecord) -> bool:
        task = current_task()
        record.task = task or "-"
        record.task_prefix = f"{task}: " if task else ""
        return True


class _BelowLevel(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install stdout/stderr handlers (and an optional file) on the buildgate logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT_NAME)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.Formatter("[buildgate] %(levelname)s %(task_prefix)s%(message)s")

    progress = logging.StreamHandler(sys.stdout)
    progress.setLevel(level)
    progress.addFilter(_BelowLevel(logging.WARNING))

    diagnostics = logging.StreamHandler(sys.stderr)
    diagnostics.setLevel(logging.WARNING)

    handlers: list[logging.Handler] = [progress, diagnostics]
    for handler in handlers:
        handler.setFormatter(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(task)s] %(name)s: %(message)s")
        )
        handlers.append(file_handler)

    for handler in handlers:
        handler.addFilter(TaskTagFilter())
        logger.addHandler(handler)
    return logger


__all__ = ["TaskTagFilter", "configure_logging", "current_task", "get_logger", "task_context"]
