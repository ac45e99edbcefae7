"""A scheduler wrapper that collects metrics about the schedules it produces."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Optional

from schedcheck.schedule import Schedule, Scheduler, TaskId

__all__ = ["CountSummaryMetric", "MetricsScheduler"]

logger = logging.getLogger(__name__)

_USIZE_MAX = (1 << 64) - 1


@dataclass
class CountSummaryMetric:
    """Records a stream of counts and reports their minimum, maximum and average."""

    min: int = _USIZE_MAX
    sum: int = 0
    max: int = 0
    n: int = 0

    def record(self, value: int) -> None:
        """Add one value to the summary."""
        self.min = min(self.min, value)
        self.max = max(self.max, value)
        self.sum += value
        self.n += 1

    def __str__(self) -> str:
        text = f"[min={self.min}, max={self.max},"
        if self.n > 0:
            text += f" avg={self.sum / self.n:.1f}"
        return text + "]"


class MetricsScheduler(Scheduler):
    """Wraps a scheduler and tracks steps, context switches, preemptions and random choices.

    Progress is logged every so many executions; a summary is logged by
    :meth:`close`, which also runs on leaving a ``with`` block.
    """

    def __init__(self, inner: Scheduler) -> None:
        self.inner = inner
        self.iterations = 0
        self._iteration_divisor = 10

        self.steps = 0
        self.steps_metric = CountSummaryMetric()

        self._last_task: TaskId = 0
        self.context_switches = 0
        self.context_switches_metric = CountSummaryMetric()
        self.preemptions = 0
        self.preemptions_metric = CountSummaryMetric()

        self.random_choices = 0
        self.random_choices_metric = CountSummaryMetric()

        self._closed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(inner={self.inner!r}, iterations={self.iterations})"

    def _record_and_reset(self) -> None:
        self.steps_metric.record(self.steps)
        self.steps = 0
        self.context_switches_metric.record(self.context_switches)
        self.context_switches = 0
        self.preemptions_metric.record(self.preemptions)
        self.preemptions = 0
        self.random_choices_metric.record(self.random_choices)
        self.random_choices = 0

    def new_execution(self) -> Optional[Schedule]:
        if self.iterations > 0:
            self._record_and_reset()
            if self.iterations % self._iteration_divisor == 0:
                logger.info(
                    "iterations=%d", self.iterations, extra={"iterations": self.iterations}
                )
                if self.iterations == self._iteration_divisor * 10:
                    self._iteration_divisor *= 10
        self.iterations += 1
        return self.inner.new_execution()

    def next_task(
        self,
        runnable_tasks: Sequence[TaskId],
        current_task: Optional[TaskId],
        is_yielding: bool,
    ) -> Optional[TaskId]:
        choice = self.inner.next_task(runnable_tasks, current_task, is_yielding)
        if choice is None:
            return None

        self.steps += 1
        if choice != self._last_task:
            self.context_switches += 1
            if self._last_task in runnable_tasks:
                self.preemptions += 1
        self._last_task = choice
        return choice

    def next_u64(self) -> int:
        self.steps += 1
        self.random_choices += 1
        return self.inner.next_u64()

    def close(self) -> None:
        """Record any unfinished execution and log the run summary, once."""
        if self._closed:
            return
        self._closed = True
        # An unfinished execution (usually one that failed) still counts.
        if self.steps > 0:
            self._record_and_reset()
            self.iterations += 1

        iterations = max(self.iterations - 1, 0)
        logger.info(
            "run finished iterations=%d steps=%s context_switches=%s preemptions=%s "
            "random_choices=%s",
            iterations,
            self.steps_metric,
            self.context_switches_metric,
            self.preemptions_metric,
            self.random_choices_metric,
            extra={
                "iterations": iterations,
                "steps": str(self.steps_metric),
                "context_switches": str(self.context_switches_metric),
                "preemptions": str(self.preemptions_metric),
                "random_choices": str(self.random_choices_metric),
            },
        )

    def __enter__(self) -> MetricsScheduler:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()