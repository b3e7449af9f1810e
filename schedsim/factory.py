from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Type, Union

from .errors import UnknownPolicyError
from .models import Process
from .observers import SchedulerObserver
from .schedulers import (
    DEFAULT_TIME_QUANTUM,
    BaseScheduler,
    FCFSScheduler,
    PriorityPreemptiveScheduler,
    PriorityScheduler,
    RandomScheduler,
    RoundRobinScheduler,
    SJFScheduler,
    SRTFScheduler,
)

logger = logging.getLogger(__name__)


class SchedulerType(str, Enum):
    FCFS = "FCFS"
    SJF = "SJF"
    SRTF = "SRTF"
    RR = "RR"
    PRIORITY = "PRIORITY"
    PRIORITY_P = "PRIORITY_P"
    RANDOM = "RANDOM"


@dataclass
class SchedulerConfig:
    time_quantum: Optional[int] = None


SCHEDULERS: Dict[SchedulerType, Type[BaseScheduler]] = {
    SchedulerType.FCFS: FCFSScheduler,
    SchedulerType.SJF: SJFScheduler,
    SchedulerType.SRTF: SRTFScheduler,
    SchedulerType.RR: RoundRobinScheduler,
    SchedulerType.PRIORITY: PriorityScheduler,
    SchedulerType.PRIORITY_P: PriorityPreemptiveScheduler,
    SchedulerType.RANDOM: RandomScheduler,
}


ALGORITHM_INFO: Dict[SchedulerType, dict] = {
    SchedulerType.FCFS: {
        "name": "First-Come, First-Served (FCFS)",
        "description": (
            "Runs processes in the order they arrive. Simple, but short jobs can wait behind "
            "long ones (convoy effect)."
        ),
        "preemptive": False,
        "parameters": [],
    },
    SchedulerType.SJF: {
        "name": "Shortest Job First (SJF)",
        "description": (
            "When the CPU is free, runs the ready process with the shortest remaining time. "
            "Minimizes average waiting time but needs burst times in advance."
        ),
        "preemptive": False,
        "parameters": [],
    },
    SchedulerType.SRTF: {
        "name": "Shortest Remaining Time First (SRTF)",
        "description": (
            "Preemptive SJF: a newly ready process with a strictly shorter remaining time "
            "takes the CPU from the running one."
        ),
        "preemptive": True,
        "parameters": [],
    },
    SchedulerType.RR: {
        "name": "Round Robin (RR)",
        "description": (
            "Gives each process a fixed time quantum in turn. A process that uses up its "
            "quantum goes to the back of the ready queue."
        ),
        "preemptive": True,
        "parameters": [
            {
                "name": "time_quantum",
                "description": "Maximum time a process runs before being preempted",
                "default": DEFAULT_TIME_QUANTUM,
            }
        ],
    },
    SchedulerType.PRIORITY: {
        "name": "Priority Scheduling",
        "description": (
            "Runs the ready process with the highest priority (lowest value) whenever the CPU "
            "is free."
        ),
        "preemptive": False,
        "parameters": [],
    },
    SchedulerType.PRIORITY_P: {
        "name": "Priority Scheduling (Preemptive)",
        "description": (
            "Like Priority Scheduling, but a newly ready process with a higher priority "
            "preempts the running one."
        ),
        "preemptive": True,
        "parameters": [],
    },
    SchedulerType.RANDOM: {
        "name": "Random Selection",
        "description": (
            "Picks a random ready process whenever the CPU is free. Useful to show the "
            "impact of an uninformed choice."
        ),
        "preemptive": False,
        "parameters": [],
    },
}


def parse_policy(policy: Union[str, SchedulerType]) -> SchedulerType:
    """
    Normalize a policy name (case-insensitive) or raise UnknownPolicyError.
    """
    if isinstance(policy, SchedulerType):
        return policy
    try:
        return SchedulerType(str(policy).strip().upper())
    except ValueError:
        raise UnknownPolicyError(str(policy), [t.value for t in SchedulerType]) from None


def create_scheduler(
    policy: Union[str, SchedulerType],
    processes: Iterable[Process],
    config: Optional[SchedulerConfig] = None,
    observer: Optional[SchedulerObserver] = None,
    rng: Optional[random.Random] = None,
    strict: bool = False,
) -> BaseScheduler:
    """
    Build the scheduler for ``policy``.

    Unknown policies fall back to FCFS with a warning unless ``strict`` is
    set. ``config.time_quantum`` only applies to Round Robin.
    """
    try:
        kind = parse_policy(policy)
    except UnknownPolicyError:
        if strict:
            raise
        logger.warning("Scheduler type %r is not supported, using FCFS instead", policy)
        kind = SchedulerType.FCFS

    config = config or SchedulerConfig()

    if kind is SchedulerType.RR:
        quantum = config.time_quantum if config.time_quantum is not None else DEFAULT_TIME_QUANTUM
        return RoundRobinScheduler(processes, time_quantum=quantum, observer=observer)
    if kind is SchedulerType.RANDOM:
        return RandomScheduler(processes, rng=rng, observer=observer)
    return SCHEDULERS[kind](processes, observer=observer)
