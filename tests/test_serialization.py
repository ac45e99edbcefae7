import pytest
from hypothesis import given
from hypothesis import strategies as st

from schedcheck.schedule import RandomStep, Schedule, TaskStep
from schedcheck.serialization import deserialize_schedule, serialize_schedule


def check_roundtrip(schedule):
    encoded = serialize_schedule(schedule)
    decoded = deserialize_schedule(encoded)
    assert decoded == schedule


def test_serialization_roundtrip_basic():
    check_roundtrip(Schedule(10, [RandomStep()]))
    check_roundtrip(Schedule(10, [TaskStep(0)]))


_steps = st.one_of(
    st.just(RandomStep()),
    st.integers(min_value=0, max_value=9999).map(TaskStep),
)
_schedules = st.builds(
    Schedule,
    st.integers(min_value=0, max_value=2**64 - 1),
    st.lists(_steps, max_size=100),
)


@given(_schedules)
def test_serialization_roundtrip_property(schedule):
    check_roundtrip(schedule)


def test_wire_format_random_step():
    assert serialize_schedule(Schedule(10, [RandomStep()])) == "9101010a01"


def test_wire_format_task_step():
    assert serialize_schedule(Schedule(10, [TaskStep(0)])) == "9101010a00"


def test_empty_schedule_roundtrip():
    check_roundtrip(Schedule(0, []))


def test_max_seed_roundtrip():
    check_roundtrip(Schedule(2**64 - 1, [TaskStep(3), RandomStep()]))


def test_uppercase_hex_accepted():
    schedule = Schedule(10, [TaskStep(5), RandomStep(), TaskStep(2)])
    assert deserialize_schedule(serialize_schedule(schedule).upper()) == schedule


def test_seed_too_large_rejected():
    with pytest.raises(ValueError):
        serialize_schedule(Schedule(2**64, []))


def test_negative_task_rejected():
    with pytest.raises(ValueError):
        serialize_schedule(Schedule(0, [TaskStep(-1)]))


def test_wrong_magic_rejected():
    encoded = serialize_schedule(Schedule(10, [TaskStep(0)]))
    with pytest.raises(ValueError):
        deserialize_schedule("90" + encoded[2:])


@pytest.mark.parametrize("encoded", ["", "zz", "9", "91 01"])
def test_invalid_hex_rejected(encoded):
    with pytest.raises(ValueError):
        deserialize_schedule(encoded)


def test_truncated_payload_rejected():
    encoded = serialize_schedule(Schedule(1, [TaskStep(300)] * 4))
    with pytest.raises(ValueError):
        deserialize_schedule(encoded[:-2])


def test_truncated_header_rejected():
    with pytest.raises(ValueError):
        deserialize_schedule("910101")