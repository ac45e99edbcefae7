"""Compact printable encoding of schedules.

Layout: a magic byte, then LEB128 varints for the task-id bit width, the
number of steps and the seed, then densely packed LSB-first steps. A step
starts with a 0 bit followed by ``bitwidth`` bits of task id, or is a single
1 bit for a random choice. The bytes are written as lowercase hex.
"""

from __future__ import annotations

import string
from collections.abc import Iterator

from schedcheck.schedule import RandomStep, Schedule, ScheduleStep, TaskStep

__all__ = ["SCHEDULE_MAGIC_V2", "serialize_schedule", "deserialize_schedule"]

SCHEDULE_MAGIC_V2 = 0x91

_MASK64 = (1 << 64) - 1
_HEX_DIGITS = frozenset(string.hexdigits)


def _write_varint(buf: bytearray, value: int) -> None:
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            buf.append(byte | 0x80)
        else:
            buf.append(byte)
            return


def _read_varint(data: Iterator[int]) -> int:
    value = 0
    shift = 0
    for byte in data:
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            if value > _MASK64:
                raise ValueError("varint overflows 64 bits")
            return value
        shift += 7
        if shift >= 70:
            raise ValueError("varint is too long")
    raise ValueError("truncated varint")


def serialize_schedule(schedule: Schedule) -> str:
    """Encode a schedule as a hex string."""
    if not 0 <= schedule.seed <= _MASK64:
        raise ValueError(f"seed must be an unsigned 64-bit integer, got {schedule.seed}")
    task_ids = [step.task for step in schedule.steps if isinstance(step, TaskStep)]
    if any(task < 0 for task in task_ids):
        raise ValueError("task ids must not be negative")
    task_id_bits = max(max(task_ids, default=0).bit_length(), 1)

    stream = 0
    offset = 0
    for step in schedule.steps:
        if isinstance(step, TaskStep):
            stream |= step.task << (offset + 1)
            offset += 1 + task_id_bits
        else:
            stream |= 1 << offset
            offset += 1
    total_bits = len(schedule) * (1 + task_id_bits)

    buf = bytearray([SCHEDULE_MAGIC_V2])
    _write_varint(buf, task_id_bits)
    _write_varint(buf, len(schedule))
    _write_varint(buf, schedule.seed)
    buf += stream.to_bytes((total_bits + 7) // 8, "little")
    return buf.hex()


def deserialize_schedule(encoded: str) -> Schedule:
    """Decode a hex string made by :func:`serialize_schedule`.

    Raises ValueError if the string is not a valid encoded schedule.
    """
    if not encoded or not _HEX_DIGITS.issuperset(encoded):
        raise ValueError("encoded schedule must be a non-empty hex string")
    data = bytes.fromhex(encoded)
    if data[0] != SCHEDULE_MAGIC_V2:
        raise ValueError(f"unknown schedule version {data[0]:#x}")

    rest = iter(data[1:])
    task_id_bits = _read_varint(rest)
    schedule_len = _read_varint(rest)
    seed = _read_varint(rest)
    payload = bytes(rest)

    stream = int.from_bytes(payload, "little")
    available = len(payload) * 8
    mask = (1 << task_id_bits) - 1
    steps: list[ScheduleStep] = []
    offset = 0
    while len(steps) < schedule_len:
        if offset >= available:
            raise ValueError("encoded schedule ended early")
        if (stream >> offset) & 1:
            steps.append(RandomStep())
            offset += 1
            continue
        if not 1 <= task_id_bits <= 64:
            raise ValueError(f"invalid task id width {task_id_bits}")
        if offset + 1 + task_id_bits > available:
            raise ValueError("encoded schedule ended early")
        steps.append(TaskStep((stream >> (offset + 1)) & mask))
        offset += 1 + task_id_bits

    return Schedule(seed, steps)