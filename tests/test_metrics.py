import logging

import pytest

from schedcheck.metrics import CountSummaryMetric, MetricsScheduler
from schedcheck.random_scheduler import RandomScheduler
from schedcheck.schedule import Schedule, Scheduler

LOGGER = "schedcheck.metrics"


class ScriptedScheduler(Scheduler):
    def __init__(self, choices, executions=1):
        self.choices = list(choices)
        self.executions = executions
        self.started = 0
        self.position = 0
        self.u64_calls = 0

    def new_execution(self):
        if self.started >= self.executions:
            return None
        self.started += 1
        self.position = 0
        return Schedule(0)

    def next_task(self, runnable_tasks, current_task, is_yielding):
        if self.position >= len(self.choices):
            return None
        choice = self.choices[self.position]
        self.position += 1
        return choice

    def next_u64(self):
        self.u64_calls += 1
        return self.u64_calls


def _iterations_logged(caplog):
    return [r.iterations for r in caplog.records if r.name == LOGGER and hasattr(r, "iterations")]


def _iterations_test(caplog, run_iterations, panic_iteration):
    caplog.set_level(logging.INFO, logger=LOGGER)
    scheduler = MetricsScheduler(RandomScheduler(run_iterations, seed=1))
    failed = False
    with scheduler:
        count = 0
        while scheduler.new_execution() is not None:
            count += 1
            current = scheduler.next_task([0], None, False)
            if count >= panic_iteration:
                failed = True
                break
            current = scheduler.next_task([0, 1], current, False)
            scheduler.next_task([0, 1], current, True)
    assert failed == (panic_iteration <= run_iterations)
    logged = _iterations_logged(caplog)
    assert logged[-1] == min(run_iterations, panic_iteration)


def test_iterations_basic(caplog):
    _iterations_test(caplog, 10, 20)


@pytest.mark.parametrize("panic_iteration", [1, 5, 10])
def test_iterations_panic(caplog, panic_iteration):
    _iterations_test(caplog, 10, panic_iteration)


def test_iterations_without_running(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    with MetricsScheduler(RandomScheduler(10, seed=3)):
        pass
    assert _iterations_logged(caplog) == [0]


def test_close_is_idempotent(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    scheduler = MetricsScheduler(RandomScheduler(10, seed=3))
    scheduler.close()
    scheduler.close()
    assert len(_iterations_logged(caplog)) == 1


def test_progress_logged_at_growing_intervals(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    scheduler = MetricsScheduler(ScriptedScheduler([0], executions=250))
    while scheduler.new_execution() is not None:
        scheduler.next_task([0], None, False)
    progress = _iterations_logged(caplog)
    assert progress == list(range(10, 101, 10)) + [200]


def test_counts_invariants_and_step_totals():
    choices = [1, 2, 2, 0, 1]
    scheduler = MetricsScheduler(ScriptedScheduler(choices, executions=2))
    for _ in range(2):
        assert scheduler.new_execution() is not None
        current = None
        for _ in choices:
            current = scheduler.next_task([0, 1, 2], current, False)
        assert scheduler.next_task([0, 1, 2], current, False) is None
    scheduler.new_execution()
    assert scheduler.steps_metric.n == 2
    assert scheduler.steps_metric.sum == 2 * len(choices)
    cs = scheduler.context_switches_metric
    pre = scheduler.preemptions_metric
    assert pre.max <= cs.max <= scheduler.steps_metric.max
    assert cs.min >= 1


def test_switch_without_previous_runnable_is_not_preemption():
    scheduler = MetricsScheduler(ScriptedScheduler([1]))
    scheduler.new_execution()
    assert scheduler.next_task([1], None, False) == 1
    assert scheduler.context_switches == 1
    assert scheduler.preemptions == 0


def test_random_choices_count_as_steps():
    inner = ScriptedScheduler([])
    scheduler = MetricsScheduler(inner)
    scheduler.new_execution()
    values = [scheduler.next_u64() for _ in range(3)]
    assert values == [1, 2, 3]
    assert scheduler.random_choices == 3
    assert scheduler.steps == 3


def test_unfinished_execution_recorded_on_close():
    scheduler = MetricsScheduler(ScriptedScheduler([0, 0]))
    scheduler.new_execution()
    scheduler.next_task([0], None, False)
    scheduler.close()
    assert scheduler.steps_metric.n == 1
    assert scheduler.steps_metric.max == 1
    assert scheduler.steps == 0


def test_summary_metric_empty_format():
    metric = CountSummaryMetric()
    assert str(metric) == "[min=18446744073709551615, max=0,]"


def test_summary_metric_records():
    metric = CountSummaryMetric()
    for value in (3, 1, 2):
        metric.record(value)
    assert metric.min == 1
    assert metric.max == 3
    assert metric.n == 3
    assert str(metric) == "[min=1, max=3, avg=2.0]"