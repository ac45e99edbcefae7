# schedcheck

Scheduling strategies for systematic concurrency testing.

A test harness runs one test body many times. Before each run it asks a
*scheduler* whether to start another execution. During the run it asks the
scheduler which of the runnable tasks runs next, and it asks for any random
values the test needs. Each scheduler searches the space of interleavings in
its own way. Every execution starts from a `Schedule` whose seed, together
with the steps taken, can be encoded and replayed exactly.

## Installation

```
pip install schedcheck
```

The package has no runtime dependencies.

## Schedulers

| Class | Strategy |
|-------|----------|
| `schedcheck.dfs.DfsScheduler(max_iterations=None, allow_random_data=False)` | Depth-first enumeration of every schedule, with an optional bound on iterations |
| `schedcheck.random_scheduler.RandomScheduler(max_iterations, seed=None)` | Picks a runnable task uniformly at random at each step |
| `schedcheck.pct.PctScheduler(max_depth, max_iterations, seed=None)` | Probabilistic Concurrency Testing with a bug-depth bound |
| `schedcheck.round_robin.RoundRobinScheduler()` | One execution in which tasks take turns in id order |
| `schedcheck.replay.ReplayScheduler(schedule)` | Replays a recorded schedule step by step |
| `schedcheck.metrics.MetricsScheduler(inner)` | Wraps another scheduler and counts steps, context switches, preemptions and random choices |

Every scheduler implements the abstract base class
`schedcheck.schedule.Scheduler`:

- `new_execution()` returns a `Schedule` to start another execution, or
  `None` when the search is finished.
- `next_task(runnable_tasks, current_task, is_yielding)` returns the task id
  to run next, or `None` to stop the current execution. Task ids are plain
  integers; `current_task` is `None` before any task has run.
- `next_u64()` returns the next 64-bit random value for the running task.

When `RandomScheduler` or `PctScheduler` is given no seed, it draws one from
the operating system. `PctScheduler` raises `ValueError` if `max_depth` is
not positive. It runs its first execution oldest-task-first to measure the
length of a run. Later executions use random task priorities, with up to
`max_depth - 1` priority change points. A task that signals `is_yielding`
is moved to the lowest priority.

## Driving a scheduler

```python
from schedcheck.dfs import DfsScheduler

scheduler = DfsScheduler(None, False)
while scheduler.new_execution() is not None:
    # Your harness decides which tasks are runnable at each step.
    first = scheduler.next_task([0, 1], None, False)
    second = scheduler.next_task([0, 1], first, False)
    print(first, second)
```

The depth-first scheduler goes through every combination of choices and
then stops. If `allow_random_data` is false and the test asks for random
data, `next_u64()` raises `RuntimeError`. If it is true, every execution
receives the same fixed sequence of random values.

## Recording and replaying

```python
from schedcheck.schedule import Schedule
from schedcheck.serialization import serialize_schedule, deserialize_schedule
from schedcheck.replay import ReplayScheduler

schedule = Schedule.new_from_task_ids(0, [0, 0, 1, 2])
encoded = serialize_schedule(schedule)          # a short hex string
assert deserialize_schedule(encoded) == schedule

replay = ReplayScheduler.from_encoded(encoded)
replay.new_execution()
assert replay.next_task([0, 1, 2], None, False) == 0
```

A `Schedule` holds a `seed` and a list of steps. Each step is either a
`TaskStep(task)` or a `RandomStep()`. Build one with `push_task(task)` and
`push_random()`; `len(schedule)` is the number of steps.

The encoding is a magic byte, then varint-encoded values for the task-id bit
width, the step count and the seed, then the steps packed as bits. The
result is written out as hex so it can be copied from test output.
`deserialize_schedule` raises `ValueError` on input it cannot decode.
`ReplayScheduler.from_file(path)` reads an encoded schedule from a file.

A replay raises `RuntimeError` in these cases:

- the schedule runs out;
- the scheduled task is not runnable;
- a task switch is requested where the schedule records a random choice, or
  the other way round.

Call `set_allow_incomplete()` to have `next_task` return `None` instead when
the schedule runs out or the scheduled task is not runnable.

## Collecting metrics

```python
from schedcheck.metrics import MetricsScheduler
from schedcheck.random_scheduler import RandomScheduler

with MetricsScheduler(RandomScheduler(100, seed=0x12345678)) as scheduler:
    while scheduler.new_execution() is not None:
        scheduler.next_task([0, 1], None, False)
```

The wrapper logs the iteration count through the `schedcheck.metrics`
logger at intervals of 10, 100, 1000 and so on. When `close()` is called,
or the `with` block exits, it logs a summary at INFO level. The summary
gives the minimum, maximum and average of each metric per execution; each
metric is a `CountSummaryMetric`. An execution that was still running at
close time is included in the summary.

## Random data and determinism

Seeded schedulers use `schedcheck.rng.Pcg64Mcg`, a PCG64 generator (MCG
variant). It provides `next_u64`, `gen_range`, `choose`, `shuffle` and
`sample`. Two schedulers given the same seed make the same decisions on the
same workload.

Random values for tasks come from `schedcheck.data`:

- `RandomDataSource` re-seeds at every execution and returns the seed, so
  the execution can be replayed.
- `FixedDataSource` gives the same stream on every execution.

## What this package does not do

schedcheck only makes scheduling and random-data decisions. It does not run
tasks, spawn threads, or provide synchronisation primitives. Nor does it
detect deadlocks or run test bodies. A harness that controls task execution
has to call the schedulers and act on what they return.