"""Schedules and the scheduler interface used to explore task interleavings."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional, Union

__all__ = ["TaskId", "TaskStep", "RandomStep", "ScheduleStep", "Schedule", "Scheduler"]

TaskId = int


@dataclass(frozen=True)
class TaskStep:
    """A scheduling decision that runs the given task."""

    task: TaskId


@dataclass(frozen=True)
class RandomStep:
    """A request for a random 64-bit value."""


ScheduleStep = Union[TaskStep, RandomStep]


@dataclass
class Schedule:
    """The order in which tasks ran and random values were drawn, with its seed.

    An empty schedule is falsy.
    """

    seed: int = 0
    steps: list[ScheduleStep] = field(default_factory=list)

    @classmethod
    def new_from_task_ids(cls, seed: int, task_ids: Iterable[int]) -> Schedule:
        """Create a schedule that begins by running the given tasks."""
        return cls(seed, [TaskStep(int(task)) for task in task_ids])

    def push_task(self, task: TaskId) -> None:
        """Append a step that runs ``task``."""
        self.steps.append(TaskStep(task))

    def push_random(self) -> None:
        """Append a step that draws a random value."""
        self.steps.append(RandomStep())

    def __len__(self) -> int:
        return len(self.steps)


class Scheduler(ABC):
    """Decides which task runs next and what random data tasks receive.

    A scheduler lives across many executions of a test. ``new_execution`` is
    called before each one; ``next_task`` at every scheduling decision.
    """

    @abstractmethod
    def new_execution(self) -> Optional[Schedule]:
        """Start a new execution, or return None when exploration is over."""

    @abstractmethod
    def next_task(
        self,
        runnable_tasks: Sequence[TaskId],
        current_task: Optional[TaskId],
        is_yielding: bool,
    ) -> Optional[TaskId]:
        """Pick the next task from a non-empty list, or None to stop this execution."""

    @abstractmethod
    def next_u64(self) -> int:
        """Return the next random value for the running task."""