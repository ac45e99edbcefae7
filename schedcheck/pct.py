"""Probabilistic Concurrency Testing (PCT) scheduler.

The algorithm follows "A Randomized Scheduler with Probabilistic Guarantees
of Finding Bugs" (Burckhardt et al., ASPLOS 2010). The bound on the number
of steps is found dynamically: the first execution runs oldest-task-first,
and later executions use the longest run seen so far.
"""

from __future__ import annotations

import secrets
from collections.abc import Sequence
from typing import Optional

from schedcheck.data import RandomDataSource
from schedcheck.rng import Pcg64Mcg
from schedcheck.schedule import Schedule, Scheduler, TaskId

__all__ = ["DEFAULT_INLINE_TASKS", "PctScheduler"]

DEFAULT_INLINE_TASKS = 16


class PctScheduler(Scheduler):
    """Schedules tasks by random priorities that change at random points.

    ``max_depth`` is the bug depth targeted: each execution makes up to
    ``max_depth - 1`` priority changes. Without a seed, one is drawn from
    the OS.
    """

    def __init__(self, max_depth: int, max_iterations: int, seed: Optional[int] = None) -> None:
        if max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        if seed is None:
            seed = secrets.randbits(64)
        self.max_depth = max_depth
        self.max_iterations = max_iterations
        self.seed = seed
        self._iterations = 0
        # Always holds every task id in range(len(self._priority_queue)).
        self._priority_queue: list[TaskId] = list(range(DEFAULT_INLINE_TASKS))
        self._change_points: list[int] = []
        self._max_steps = 0
        self._steps = 0
        self._rng = Pcg64Mcg.seed_from_u64(seed)
        self._data_source = RandomDataSource(seed)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max_depth={self.max_depth!r}, "
            f"max_iterations={self.max_iterations!r}, seed={self.seed:#x}, "
            f"iterations={self._iterations})"
        )

    def new_execution(self) -> Optional[Schedule]:
        if self._iterations >= self.max_iterations:
            return None

        self._steps = 0

        # The first execution only measures how many steps a run takes.
        if self._iterations > 0:
            if self._max_steps <= 0:
                raise RuntimeError("no scheduling decisions were observed in the first execution")
            self._rng.shuffle(self._priority_queue)
            # Change points lie in [1, max_steps]; step 0 is covered by the
            # random initial priorities.
            num_points = min(self.max_depth - 1, self._max_steps - 1)
            self._change_points = [
                point + 1 for point in self._rng.sample(self._max_steps - 1, num_points)
            ]

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

        # Newly created tasks get a random priority.
        for task in range(len(self._priority_queue), max(runnable_tasks) + 1):
            index = self._rng.gen_range(0, len(self._priority_queue) + 1)
            self._priority_queue.insert(index, task)

        # Steps with a single runnable task are not real decisions, so they
        # neither count nor trigger priority changes.
        if len(runnable_tasks) > 1:
            if is_yielding or self._steps in self._change_points:
                if current_task is None:
                    raise RuntimeError("a priority change requires a task to have run")
                try:
                    self._priority_queue.remove(current_task)
                except ValueError:
                    raise RuntimeError(f"unknown current task {current_task}") from None
                self._priority_queue.append(current_task)

            self._steps += 1
            self._max_steps = max(self._max_steps, self._steps)

        runnable = set(runnable_tasks)
        return next(task for task in self._priority_queue if task in runnable)

    def next_u64(self) -> int:
        return self._data_source.next_u64()