from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from .models import Process, ScheduledSlice

if TYPE_CHECKING:
    from .schedulers import BaseScheduler


class SchedulerObserver:
    """
    Receives scheduler events. Every hook is a no-op here, so this class is
    also the default observer used when none is injected.
    """

    def arrived(self, scheduler: "BaseScheduler", process: Process) -> None:
        pass

    def dispatched(self, scheduler: "BaseScheduler", process: Process) -> None:
        pass

    def preempted(self, scheduler: "BaseScheduler", process: Process) -> None:
        pass

    def executed(self, scheduler: "BaseScheduler", process: Process) -> None:
        pass

    def quantum_expired(self, scheduler: "BaseScheduler", process: Process, rotated: bool) -> None:
        pass

    def completed(self, scheduler: "BaseScheduler", process: Process) -> None:
        pass

    def step_limit_reached(self, scheduler: "BaseScheduler", max_steps: int) -> None:
        pass


class LoggingObserver(SchedulerObserver):
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("schedsim.scheduler")

    def arrived(self, scheduler, process):
        self.logger.debug("%s: %s arrived at t=%d", scheduler.name, process.name, scheduler.time)

    def dispatched(self, scheduler, process):
        self.logger.debug(
            "%s: %s dispatched at t=%d (remaining=%d, priority=%d)",
            scheduler.name,
            process.name,
            scheduler.time,
            process.remaining_time,
            process.priority,
        )

    def preempted(self, scheduler, process):
        self.logger.debug("%s: %s preempted at t=%d", scheduler.name, process.name, scheduler.time)

    def quantum_expired(self, scheduler, process, rotated):
        if rotated:
            self.logger.debug("%s: %s quantum expired at t=%d", scheduler.name, process.name, scheduler.time)
        else:
            self.logger.debug(
                "%s: %s keeps the CPU at t=%d (ready queue empty)",
                scheduler.name,
                process.name,
                scheduler.time,
            )

    def completed(self, scheduler, process):
        self.logger.debug("%s: %s completed at t=%d", scheduler.name, process.name, scheduler.time)

    def step_limit_reached(self, scheduler, max_steps):
        self.logger.warning(
            "%s simulation reached the step limit (%d) with %d of %d processes completed",
            scheduler.name,
            max_steps,
            len(scheduler.completed),
            len(scheduler.processes),
        )


class TimelineRecorder(SchedulerObserver):
    """
    Collects which process ran on each tick and merges consecutive ticks into
    Gantt slices. Tick ``t`` covers the interval ``[t - 1, t)``.
    """

    def __init__(self) -> None:
        self.slices: List[ScheduledSlice] = []

    def executed(self, scheduler, process):
        start = scheduler.time - 1
        last = self.slices[-1] if self.slices else None
        if last is not None and last.pid == process.pid and last.end_time == start:
            last.end_time = scheduler.time
        else:
            self.slices.append(
                ScheduledSlice(pid=process.pid, start_time=start, end_time=scheduler.time, name=process.name)
            )


class CompositeObserver(SchedulerObserver):
    def __init__(self, observers: Iterable[SchedulerObserver]) -> None:
        self.observers = list(observers)

    def arrived(self, scheduler, process):
        for obs in self.observers:
            obs.arrived(scheduler, process)

    def dispatched(self, scheduler, process):
        for obs in self.observers:
            obs.dispatched(scheduler, process)

    def preempted(self, scheduler, process):
        for obs in self.observers:
            obs.preempted(scheduler, process)

    def executed(self, scheduler, process):
        for obs in self.observers:
            obs.executed(scheduler, process)

    def quantum_expired(self, scheduler, process, rotated):
        for obs in self.observers:
            obs.quantum_expired(scheduler, process, rotated)

    def completed(self, scheduler, process):
        for obs in self.observers:
            obs.completed(scheduler, process)

    def step_limit_reached(self, scheduler, max_steps):
        for obs in self.observers:
            obs.step_limit_reached(scheduler, max_steps)
