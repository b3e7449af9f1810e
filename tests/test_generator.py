import random

import pytest

from schedsim.errors import InvalidWorkloadError
from schedsim.generator import generate_processes


def test_defaults_produce_five_named_processes():
    specs = generate_processes(rng=random.Random(0))
    assert [s.name for s in specs] == [f"Process-{i}" for i in range(1, 6)]


def test_values_stay_in_range():
    specs = generate_processes(
        count=100,
        max_burst_time=4,
        max_io_burst_time=3,
        max_priority=2,
        max_arrival_time=6,
        rng=random.Random(11),
    )
    assert len(specs) == 100
    for s in specs:
        assert 1 <= s.burst_time <= 4
        assert 0 <= s.io_burst_time < 3
        assert 1 <= s.priority <= 2
        assert 0 <= s.arrival_time < 6


def test_seeded_generation_is_repeatable():
    assert generate_processes(count=8, rng=random.Random(3)) == generate_processes(count=8, rng=random.Random(3))


@pytest.mark.parametrize("count", [0, -1, 101])
def test_rejects_bad_count(count):
    with pytest.raises(InvalidWorkloadError):
        generate_processes(count=count)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_burst_time": 0},
        {"max_io_burst_time": 0},
        {"max_priority": 0},
        {"max_arrival_time": 0},
    ],
)
def test_rejects_non_positive_maximums(kwargs):
    with pytest.raises(InvalidWorkloadError):
        generate_processes(**kwargs)
