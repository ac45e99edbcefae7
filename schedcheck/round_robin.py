"""A scheduler that cycles through runnable tasks in id order."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from schedcheck.data import RandomDataSource
from schedcheck.schedule import Schedule, Scheduler, TaskId

__all__ = ["RoundRobinScheduler"]


class RoundRobinScheduler(Scheduler):
    """Runs the test once, switching to the next runnable task at each decision."""

    def __init__(self) -> None:
        self._iterations = 0
        self._data_source = RandomDataSource(0)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(iterations={self._iterations})"

    def new_execution(self) -> Optional[Schedule]:
        if self._iterations:
            return None
        self._iterations += 1
        return Schedule(self._data_source.reinitialize())

    def next_task(
        self,
        runnable_tasks: Sequence[TaskId],
        current_task: Optional[TaskId],
        is_yielding: bool,
    ) -> Optional[TaskId]:
        if not runnable_tasks:
            raise ValueError("runnable_tasks must not be empty")
        if current_task is None:
            return runnable_tasks[0]
        return next((task for task in runnable_tasks if task > current_task), runnable_tasks[0])

    def next_u64(self) -> int:
        return self._data_source.next_u64()