from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ProcessState(str, Enum):
    NEW = "NEW"
    READY = "READY"
    RUNNING = "RUNNING"
    # Reserved for I/O modelling; no policy moves a process here.
    WAITING = "WAITING"
    TERMINATED = "TERMINATED"


def _new_pid() -> str:
    return uuid.uuid4().hex


@dataclass
class ProcessSpec:
    """
    Caller-supplied description of one process, validated before any
    scheduler is built.
    """

    arrival_time: int
    burst_time: int
    priority: Optional[int] = None
    name: Optional[str] = None
    io_burst_time: Optional[int] = None


@dataclass
class ProcessStats:
    waiting_time: int
    turnaround_time: int
    response_time: int
    completion_time: int


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    Slices are keyed by ``pid``; ``name`` is only the display label.
    """

    pid: str
    start_time: int
    end_time: int
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.pid


@dataclass(eq=False)
class Process:
    """
    One simulated job and its live run state.

    Schedulers drive the lifecycle NEW -> READY -> RUNNING -> TERMINATED
    (with RUNNING -> READY on preemption). The entity itself does not reject
    illegal transitions.
    """

    arrival_time: int
    burst_time: int
    priority: int = 0
    name: Optional[str] = None
    pid: str = field(default_factory=_new_pid)

    state: ProcessState = field(default=ProcessState.NEW, init=False)
    remaining_time: int = field(init=False)
    waiting_time: int = field(default=0, init=False)
    turnaround_time: Optional[int] = field(default=None, init=False)
    response_time: Optional[int] = field(default=None, init=False)
    completion_time: Optional[int] = field(default=None, init=False)
    has_run: bool = field(default=False, init=False)
    running_timestamps: List[int] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time
        if not self.name:
            self.name = f"Process-{self.pid[:4]}"

    @classmethod
    def from_spec(cls, spec: ProcessSpec) -> "Process":
        return cls(
            arrival_time=spec.arrival_time,
            burst_time=spec.burst_time,
            priority=spec.priority or 0,
            name=spec.name,
        )

    def transition_to(self, new_state: ProcessState, at_time: Optional[int] = None) -> None:
        if (
            new_state is ProcessState.RUNNING
            and self.state is not ProcessState.RUNNING
            and at_time is not None
        ):
            self.running_timestamps.append(at_time)
        self.state = new_state

    def advance(self, quantum: int = 1) -> bool:
        """
        Execute for up to ``quantum`` units. Returns True when the process has
        just exhausted its remaining time.
        """
        if self.state is not ProcessState.RUNNING:
            return False

        if not self.has_run:
            self.response_time = self.waiting_time
            self.has_run = True

        self.remaining_time -= min(quantum, self.remaining_time)
        if self.remaining_time <= 0:
            self.state = ProcessState.TERMINATED
            return True
        return False

    def accrue_wait(self, units: int) -> None:
        if self.state in (ProcessState.READY, ProcessState.WAITING):
            self.waiting_time += units

    def finish(self, at_time: int) -> ProcessStats:
        self.state = ProcessState.TERMINATED
        if self.completion_time is None:
            self.completion_time = at_time
            self.turnaround_time = at_time - self.arrival_time
        return self.stats()

    def stats(self) -> ProcessStats:
        return ProcessStats(
            waiting_time=self.waiting_time,
            turnaround_time=self.turnaround_time or 0,
            response_time=self.response_time or 0,
            completion_time=self.completion_time or 0,
        )

    @property
    def consumed_time(self) -> int:
        return self.burst_time - self.remaining_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pid": self.pid,
            "name": self.name,
            "state": self.state.value,
            "arrival_time": self.arrival_time,
            "burst_time": self.burst_time,
            "priority": self.priority,
            "remaining_time": self.remaining_time,
            "waiting_time": self.waiting_time,
            "turnaround_time": self.turnaround_time,
            "response_time": self.response_time,
            "completion_time": self.completion_time,
            "running_timestamps": list(self.running_timestamps),
        }
