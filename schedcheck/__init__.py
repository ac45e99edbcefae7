"""Schedulers, schedules, schedule encoding and random data sources for systematic concurrency testing."""

__version__ = "0.1.0"

__all__ = [
    "rng",
    "data",
    "schedule",
    "serialization",
    "dfs",
    "random_scheduler",
    "round_robin",
    "replay",
    "pct",
    "metrics",
]