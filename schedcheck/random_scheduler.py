"""A scheduler that picks a random runnable task at every decision."""

from __future__ import annotations

import secrets
from collections.abc import Sequence
from typing import Optional

from schedcheck.data import RandomDataSource
from schedcheck.rng import Pcg64Mcg
from schedcheck.schedule import Schedule, Scheduler, TaskId

__all__ = ["RandomScheduler"]


class RandomScheduler(Scheduler):
    """Chooses uniformly among runnable tasks at each context switch.

    The RNG lives across executions, so each one explores a different random
    schedule. Two schedulers built with the same seed make the same decisions
    on the same workload. Without a seed, one is drawn from the OS.
    """

    def __init__(self, max_iterations: int, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = secrets.randbits(64)
        self.max_iterations = max_iterations
        self.seed = seed
        self._rng = Pcg64Mcg.seed_from_u64(seed)
        self._iterations = 0
        self._data_source = RandomDataSource(seed)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max_iterations={self.max_iterations!r}, "
            f"seed={self.seed:#x}, iterations={self._iterations})"
        )

    def new_execution(self) -> Optional[Schedule]:
        if self._iterations >= self.max_iterations:
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
        return self._rng.choose(runnable_tasks)

    def next_u64(self) -> int:
        return self._data_source.next_u64()