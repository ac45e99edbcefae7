"""Exhaustive depth-first enumeration of schedules."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from schedcheck.data import FixedDataSource
from schedcheck.schedule import Schedule, Scheduler, TaskId

__all__ = ["DFS_RANDOM_SEED", "DfsScheduler"]

DFS_RANDOM_SEED = 0x12345678


class DfsScheduler(Scheduler):
    """A scheduler that explores every possible schedule depth first.

    Random data may optionally be allowed. Each execution then receives the
    same sequence of random values, so the search stays deterministic but no
    longer covers every possible random outcome.
    """

    def __init__(self, max_iterations: Optional[int] = None, allow_random_data: bool = False) -> None:
        self.max_iterations = max_iterations
        self.allow_random_data = allow_random_data
        self._iterations = 0
        # (choice made at this level, whether it was the last option there)
        self._levels: list[tuple[TaskId, bool]] = []
        self._steps = 0
        self._data_source = FixedDataSource(DFS_RANDOM_SEED)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max_iterations={self.max_iterations!r}, "
            f"allow_random_data={self.allow_random_data!r}, iterations={self._iterations})"
        )

    def _has_more_choices(self, index: int) -> bool:
        """Whether any level at or below ``index`` has options left to explore."""
        return any(not last for _, last in self._levels[index:])

    def new_execution(self) -> Optional[Schedule]:
        if self.max_iterations is not None and self._iterations >= self.max_iterations:
            return None
        if self._iterations > 0 and not self._has_more_choices(0):
            return None
        self._iterations += 1
        self._steps = 0
        return Schedule(self._data_source.reinitialize())

    def next_task(
        self,
        runnable_tasks: Sequence[TaskId],
        current_task: Optional[TaskId],
        is_yielding: bool,
    ) -> Optional[TaskId]:
        if not runnable_tasks:
            raise ValueError("runnable_tasks must not be empty")

        if self._steps >= len(self._levels):
            if self._steps != len(self._levels):
                raise RuntimeError("scheduling levels are out of step with the execution")
            choice = runnable_tasks[0]
            self._levels.append((choice, len(runnable_tasks) == 1))
        else:
            last_choice, was_last = self._levels[self._steps]
            if self._has_more_choices(self._steps + 1):
                choice = last_choice
            else:
                if was_last:
                    raise RuntimeError(
                        "if we are making a change, there should be another available option"
                    )
                try:
                    next_idx = list(runnable_tasks).index(last_choice) + 1
                except ValueError:
                    raise RuntimeError(
                        f"previously chosen task {last_choice} is no longer runnable"
                    ) from None
                choice = runnable_tasks[next_idx]
                del self._levels[self._steps:]
                self._levels.append((choice, next_idx == len(runnable_tasks) - 1))

        self._steps += 1
        return choice

    def next_u64(self) -> int:
        if not self.allow_random_data:
            raise RuntimeError(
                "requested random data from DFS scheduler with allow_random_data = false"
            )
        return self._data_source.next_u64()