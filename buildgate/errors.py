"""Failure taxonomy shared by buildgate components."""

from __future__ import annotations

from typing import Sequence


class BuildError(RuntimeError):
    """Base class for failures that halt a task chain."""


class ConfigError(BuildError):
    """Raised when the configuration file cannot be parsed."""


class CommandFailure(BuildError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str | None = None) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr or ""
        message = f"Command failed with exit status {returncode}: {' '.join(self.command)}"
        if self.stderr.strip():
            message += "\n" + self.stderr.rstrip()
        super().__init__(message)


class TaskError(BuildError):
    """Raised when the task registry is used incorrectly."""


class UnknownTaskError(TaskError):
    """Raised when a task name is not registered."""


class TaskCycleError(TaskError):
    """Raised when task prerequisites form a cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__("Task dependency cycle: " + " -> ".join(self.cycle))


class ConsistencyViolation(BuildError):
    """Raised once a rule consistency scan finds missing artifacts."""

    def __init__(self, message: str, issues: Sequence[object]) -> None:
        super().__init__(message)
        self.issues = list(issues)


class PerformanceError(BuildError):
    """Raised when the performance gate cannot reach a decision."""


class PerformanceRegression(PerformanceError):
    """Raised when the median trial duration exceeds the threshold."""

    def __init__(self, median_ms: float, threshold_ms: float) -> None:
        self.median_ms = median_ms
        self.threshold_ms = threshold_ms
        super().__init__(
            f"Performance budget exceeded: {median_ms:.0f}ms (limit: {threshold_ms:.0f}ms)"
        )


class ChangelogError(BuildError):
    """Raised when commit history cannot produce a changelog entry."""


__all__ = [
    "BuildError",
    "ChangelogError",
    "CommandFailure",
    "ConfigError",
    "ConsistencyViolation",
    "PerformanceError",
    "PerformanceRegression",
    "TaskCycleError",
    "TaskError",
    "UnknownTaskError",
]
