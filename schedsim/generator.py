from __future__ import annotations

import random
from typing import List, Optional

from .errors import InvalidWorkloadError
from .models import ProcessSpec

MAX_GENERATED_PROCESSES = 100


def generate_processes(
    count: int = 5,
    max_burst_time: int = 10,
    max_io_burst_time: int = 5,
    max_priority: int = 10,
    max_arrival_time: int = 10,
    rng: Optional[random.Random] = None,
) -> List[ProcessSpec]:
    """
    Random demo workload. Burst time and priority fall in ``[1, max]``,
    arrival time and I/O burst in ``[0, max)``. The I/O burst is display
    data only; no scheduler reads it.
    """
    if not 1 <= count <= MAX_GENERATED_PROCESSES:
        raise InvalidWorkloadError(
            f"Invalid process count {count}. Must be between 1 and {MAX_GENERATED_PROCESSES}"
        )
    for label, value in (
        ("max_burst_time", max_burst_time),
        ("max_io_burst_time", max_io_burst_time),
        ("max_priority", max_priority),
        ("max_arrival_time", max_arrival_time),
    ):
        if value < 1:
            raise InvalidWorkloadError(f"{label} must be >= 1, got {value}")

    rng = rng or random.Random()
    return [
        ProcessSpec(
            name=f"Process-{i + 1}",
            arrival_time=rng.randrange(max_arrival_time),
            burst_time=rng.randrange(max_burst_time) + 1,
            io_burst_time=rng.randrange(max_io_burst_time),
            priority=rng.randrange(max_priority) + 1,
        )
        for i in range(count)
    ]
