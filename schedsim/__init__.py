"""
CPU scheduling simulator.

Models processes competing for a single CPU under FCFS, SJF, SRTF, Round
Robin, Priority (non-preemptive and preemptive) and Random dispatch, one time
unit per tick, and derives waiting, turnaround and response times, CPU
utilization, throughput and context switches.
"""

from .factory import SchedulerType, create_scheduler
from .models import Process, ProcessSpec, ProcessState
from .simulation import SimulationSession, run_batch

__all__ = [
    "Process",
    "ProcessSpec",
    "ProcessState",
    "SchedulerType",
    "SimulationSession",
    "create_scheduler",
    "run_batch",
]
