from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List

from .models import Process, ProcessState


@dataclass
class SimulationStatistics:
    cpu_utilization: float
    avg_waiting_time: float
    avg_turnaround_time: float
    avg_response_time: float
    throughput: float
    context_switches: int
    cpu_idle_time: int
    cpu_idle_percentage: float
    total_processes: int
    completed_processes: int

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def count_context_switches(processes: Iterable[Process]) -> int:
    """
    Approximate context switches as the number of distinct instants at which
    any process entered RUNNING, minus the initial dispatch.
    """
    timestamps = set()
    for p in processes:
        timestamps.update(p.running_timestamps)
    return max(0, len(timestamps) - 1)


def compute_statistics(processes: Iterable[Process], elapsed: int) -> SimulationStatistics:
    """
    Aggregate statistics for a finished or in-progress run. Averages cover
    completed processes only; elapsed is the scheduler's current time.
    """
    processes = list(processes)
    completed: List[Process] = [p for p in processes if p.state is ProcessState.TERMINATED]
    n = len(completed)

    completed_burst = sum(p.burst_time for p in completed)
    consumed = sum(p.consumed_time for p in processes)
    idle = elapsed - consumed

    if n:
        avg_wait = sum(p.waiting_time for p in completed) / n
        avg_tat = sum(p.turnaround_time or 0 for p in completed) / n
        avg_resp = sum(p.response_time or 0 for p in completed) / n
    else:
        avg_wait = avg_tat = avg_resp = 0.0

    return SimulationStatistics(
        cpu_utilization=(completed_burst / elapsed) * 100 if elapsed > 0 else 0.0,
        avg_waiting_time=avg_wait,
        avg_turnaround_time=avg_tat,
        avg_response_time=avg_resp,
        throughput=n / elapsed if elapsed > 0 else 0.0,
        context_switches=count_context_switches(processes),
        cpu_idle_time=idle,
        cpu_idle_percentage=(idle / elapsed) * 100 if elapsed > 0 else 0.0,
        total_processes=len(processes),
        completed_processes=n,
    )
