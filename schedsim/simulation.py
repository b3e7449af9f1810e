"""
Simulation driver: batch runs, per-step snapshots and interactive sessions.

This is the caller-facing layer. Specs are validated here, before any
scheduler is built, and unknown policy names are rejected instead of
silently falling back to FCFS.
"""

from __future__ import annotations

import logging
import random
import time as _time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from .errors import InvalidSessionError
from .factory import SchedulerConfig, SchedulerType, create_scheduler, parse_policy
from .metrics import SimulationStatistics, compute_statistics
from .models import Process, ProcessSpec, ProcessState, ScheduledSlice
from .observers import CompositeObserver, SchedulerObserver, TimelineRecorder
from .schedulers import DEFAULT_MAX_STEPS, BaseScheduler, RoundRobinScheduler
from .workload_io import validate_spec

logger = logging.getLogger(__name__)

MIN_STEP_DELAY = 0.05
MAX_STEP_DELAY = 5.0
DEFAULT_STEP_DELAY = 1.0


@dataclass
class ProcessResult:
    pid: str
    name: str
    arrival_time: int
    burst_time: int
    priority: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    completion_time: int

    @classmethod
    def from_process(cls, p: Process) -> "ProcessResult":
        stats = p.stats()
        return cls(
            pid=p.pid,
            name=p.name,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            priority=p.priority,
            waiting_time=stats.waiting_time,
            turnaround_time=stats.turnaround_time,
            response_time=stats.response_time,
            completion_time=stats.completion_time,
        )


@dataclass
class BatchResult:
    algorithm: str
    time_quantum: Optional[int]
    results: List[ProcessResult]
    statistics: SimulationStatistics
    total_time: int
    step_limit_reached: bool = False
    timeline: List[ScheduledSlice] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Snapshot:
    time: int
    finished: bool
    processes: List[Dict[str, Any]]
    by_state: Dict[str, List[Dict[str, Any]]]
    ready_queue: List[str]
    running: Optional[Dict[str, Any]]
    statistics: SimulationStatistics

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_processes(specs: Iterable[ProcessSpec]) -> List[Process]:
    return [Process.from_spec(validate_spec(spec)) for spec in specs]


def build_scheduler(
    policy: Union[str, SchedulerType],
    specs: Iterable[ProcessSpec],
    time_quantum: Optional[int] = None,
    observer: Optional[SchedulerObserver] = None,
    rng: Optional[random.Random] = None,
) -> BaseScheduler:
    kind = parse_policy(policy)
    processes = build_processes(specs)
    return create_scheduler(
        kind,
        processes,
        SchedulerConfig(time_quantum=time_quantum),
        observer=observer,
        rng=rng,
        strict=True,
    )


def _quantum_of(scheduler: BaseScheduler) -> Optional[int]:
    return scheduler.time_quantum if isinstance(scheduler, RoundRobinScheduler) else None


def run_batch(
    policy: Union[str, SchedulerType],
    specs: Iterable[ProcessSpec],
    time_quantum: Optional[int] = None,
    max_steps: int = DEFAULT_MAX_STEPS,
    observer: Optional[SchedulerObserver] = None,
    rng: Optional[random.Random] = None,
) -> BatchResult:
    """
    Run ``policy`` over ``specs`` to completion (or ``max_steps``) and
    return per-process results in completion order plus aggregate statistics.
    """
    recorder = TimelineRecorder()
    observers = [recorder] + ([observer] if observer is not None else [])
    scheduler = build_scheduler(policy, specs, time_quantum, CompositeObserver(observers), rng)

    logger.info("Running %s simulation with %d processes", scheduler.name, len(scheduler.processes))
    completed = scheduler.run_to_completion(max_steps)
    if not scheduler.step_limit_reached:
        logger.info("%s simulation completed in %d time units", scheduler.name, scheduler.time)

    return BatchResult(
        algorithm=scheduler.name,
        time_quantum=_quantum_of(scheduler),
        results=[ProcessResult.from_process(p) for p in completed],
        statistics=compute_statistics(scheduler.all_processes(), scheduler.time),
        total_time=scheduler.time,
        step_limit_reached=scheduler.step_limit_reached,
        timeline=recorder.slices,
    )


def take_snapshot(scheduler: BaseScheduler) -> Snapshot:
    processes = scheduler.all_processes()
    by_state: Dict[str, List[Dict[str, Any]]] = {state.value: [] for state in ProcessState}
    for p in processes:
        by_state[p.state.value].append(p.to_dict())

    running = None
    if scheduler.current is not None:
        cur = scheduler.current
        progress = (cur.consumed_time / cur.burst_time) * 100 if cur.burst_time else 100.0
        running = {**cur.to_dict(), "progress": progress}

    return Snapshot(
        time=scheduler.current_time,
        finished=scheduler.is_finished() and scheduler.time > 0,
        processes=[p.to_dict() for p in processes],
        by_state=by_state,
        ready_queue=[p.name for p in scheduler.ready_queue],
        running=running,
        statistics=compute_statistics(processes, scheduler.time),
    )


class SimulationSession:
    """
    One interactively stepped simulation.

    The caller owns the cadence: ``stream()`` sleeps ``step_delay`` seconds
    between ticks, but simulated time always advances one unit per tick.
    Resetting throws the scheduler away and rebuilds it from the stored
    specs.
    """

    def __init__(
        self,
        policy: Union[str, SchedulerType],
        specs: Iterable[ProcessSpec],
        time_quantum: Optional[int] = None,
        step_delay: float = DEFAULT_STEP_DELAY,
        max_steps: int = DEFAULT_MAX_STEPS,
        observer: Optional[SchedulerObserver] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        if step_delay < 0:
            raise InvalidSessionError(f"Invalid step delay {step_delay}. Must be >= 0")
        self.policy = parse_policy(policy)
        self.specs = [validate_spec(s) for s in specs]
        self.time_quantum = time_quantum
        self.max_steps = max_steps
        self.observer = observer
        self.rng = rng
        self.step_delay = step_delay
        self.paused = False
        self.steps = 0
        self.recorder = TimelineRecorder()
        self.scheduler = self._build()

    def _build(self) -> BaseScheduler:
        self.recorder = TimelineRecorder()
        observers = [self.recorder] + ([self.observer] if self.observer is not None else [])
        return build_scheduler(
            self.policy, self.specs, self.time_quantum, CompositeObserver(observers), self.rng
        )

    @property
    def finished(self) -> bool:
        return self.scheduler.is_finished() and self.scheduler.time > 0

    @property
    def exhausted(self) -> bool:
        return self.finished or self.scheduler.step_limit_reached

    def snapshot(self) -> Snapshot:
        return take_snapshot(self.scheduler)

    def step(self) -> Snapshot:
        """Advance exactly one tick (unless done) and return the new snapshot."""
        if not self.exhausted:
            self.scheduler.tick()
            self.steps += 1
            if not self.finished and self.steps >= self.max_steps:
                self.scheduler.step_limit_reached = True
                self.scheduler.observer.step_limit_reached(self.scheduler, self.max_steps)
        return self.snapshot()

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def reset(self) -> Snapshot:
        self.scheduler = self._build()
        self.steps = 0
        self.paused = False
        return self.snapshot()

    def set_step_delay(self, seconds: float) -> None:
        if not MIN_STEP_DELAY <= seconds <= MAX_STEP_DELAY:
            raise InvalidSessionError(
                f"Invalid step delay {seconds}. Must be between {MIN_STEP_DELAY}s and {MAX_STEP_DELAY}s"
            )
        self.step_delay = seconds

    def stream(self, sleep: Callable[[float], None] = _time.sleep) -> Iterator[Snapshot]:
        """
        Yield the current snapshot, then one snapshot per tick until the run
        finishes, hits the step limit, or the session is paused.
        """
        yield self.snapshot()
        while not self.exhausted and not self.paused:
            sleep(self.step_delay)
            yield self.step()

    def result(self) -> BatchResult:
        sched = self.scheduler
        return BatchResult(
            algorithm=sched.name,
            time_quantum=_quantum_of(sched),
            results=[ProcessResult.from_process(p) for p in sched.completed],
            statistics=compute_statistics(sched.all_processes(), sched.time),
            total_time=sched.time,
            step_limit_reached=sched.step_limit_reached,
            timeline=list(self.recorder.slices),
        )
