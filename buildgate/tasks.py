"""Named tasks with explicit prerequisites and fail-fast execution."""

from __future__ import annotations

from dataclasses import dataclass
from graphlib import CycleError, TopologicalSorter
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from .errors import TaskCycleError, TaskError, UnknownTaskError
from .logging import get_logger, task_context


@dataclass(frozen=True)
class Task:
    """A zero-argument build step and the tasks that must run before it."""

    name: str
    action: Callable[[], None] | None
    requires: Tuple[str, ...] = ()
    description: str = ""


class TaskRegistry:
    """Registers tasks by name and runs them in prerequisite order."""

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}
        self.logger = get_logger("tasks")

    def register(
        self,
        name: str,
        action: Callable[[], None] | None = None,
        *,
        requires: Sequence[str] = (),
        description: str = "",
    ) -> Task:
        """Add a task; ``action`` may be omitted for pure aggregate tasks."""
        if not name:
            raise TaskError("Task name must not be empty")
        if name in self._tasks:
            raise TaskError(f"Task '{name}' is already registered")
        task = Task(name=name, action=action, requires=tuple(requires), description=description)
        self._tasks[name] = task
        return task

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(f"Unknown task '{name}'") from None

    def names(self) -> List[str]:
        return sorted(self._tasks)

    def tasks(self) -> List[Task]:
        return [self._tasks[name] for name in self.names()]

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def plan(self, names: Iterable[str]) -> List[Task]:
        """Return the execution order for ``names``.

        Prerequisites run depth-first in their declared order before the task that
        lists them, and every task appears at most once.
        """
        requested = list(names)
        self._check_graph(requested)
        ordered: List[Task] = []
        seen: set[str] = set()

        def visit(name: str) -> None:
            if name in seen:
                return
            seen.add(name)
            task = self.get(name)
            for requirement in task.requires:
                visit(requirement)
            ordered.append(task)

        for name in requested:
            visit(name)
        return ordered

    def run(self, names: Iterable[str]) -> List[str]:
        """Execute the plan for ``names``; the first failure propagates unchanged."""
        completed: List[str] = []
        for task in self.plan(names):
            self.logger.info("Running task %s", task.name)
            if task.action is not None:
                with task_context(task.name):
                    task.action()
            completed.append(task.name)
        return completed

    def _check_graph(self, requested: Sequence[str]) -> None:
        graph: Dict[str, Tuple[str, ...]] = {}
        pending = list(requested)
        while pending:
            name = pending.pop()
            if name in graph:
                continue
            task = self.get(name)
            graph[name] = task.requires
            pending.extend(task.requires)
        try:
            TopologicalSorter(graph).prepare()
        except CycleError as exc:
            raise TaskCycleError(exc.args[1]) from exc


__all__ = ["Task", "TaskRegistry"]
