"""A scheduler that replays a recorded schedule step by step."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Union

from schedcheck.data import RandomDataSource
from schedcheck.schedule import RandomStep, Schedule, Scheduler, TaskId, TaskStep
from schedcheck.serialization import deserialize_schedule

__all__ = ["ReplayScheduler"]


class ReplayScheduler(Scheduler):
    """Runs tasks, and draws random values, in the order a schedule records."""

    def __init__(self, schedule: Schedule) -> None:
        self.schedule = schedule
        self.allow_incomplete = False
        self._steps = 0
        self._started = False
        self._data_source = RandomDataSource(schedule.seed)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(schedule={self.schedule!r}, steps={self._steps}, "
            f"allow_incomplete={self.allow_incomplete!r})"
        )

    @classmethod
    def from_encoded(cls, encoded_schedule: str) -> ReplayScheduler:
        """Build a scheduler from a schedule encoded as a hex string."""
        return cls(deserialize_schedule(encoded_schedule))

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike]) -> ReplayScheduler:
        """Build a scheduler from a file holding an encoded schedule."""
        return cls.from_encoded(Path(path).read_text())

    def set_allow_incomplete(self) -> None:
        """Allow the schedule to end, or diverge, before the execution does."""
        self.allow_incomplete = True

    def new_execution(self) -> Optional[Schedule]:
        if self._started:
            return None
        self._started = True
        return Schedule(self._data_source.reinitialize())

    def next_task(
        self,
        runnable_tasks: Sequence[TaskId],
        current_task: Optional[TaskId],
        is_yielding: bool,
    ) -> Optional[TaskId]:
        if self._steps >= len(self.schedule):
            if not self.allow_incomplete:
                raise RuntimeError("schedule ended early")
            return None
        step = self.schedule.steps[self._steps]
        if isinstance(step, RandomStep):
            raise RuntimeError("expected context switch but next schedule step is random choice")
        if step.task not in runnable_tasks:
            if not self.allow_incomplete:
                raise RuntimeError(
                    f"scheduled task is not runnable, expected to run {step.task}, "
                    f"but choices were {list(runnable_tasks)}"
                )
            return None
        self._steps += 1
        return step.task

    def next_u64(self) -> int:
        if self._steps >= len(self.schedule):
            raise RuntimeError("schedule ended early")
        step = self.schedule.steps[self._steps]
        if isinstance(step, TaskStep):
            raise RuntimeError("expected random choice but next schedule step is context switch")
        self._steps += 1
        return self._data_source.next_u64()