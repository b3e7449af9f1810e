from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional

from .errors import InvalidWorkloadError
from .models import Process, ProcessState
from .observers import SchedulerObserver

DEFAULT_MAX_STEPS = 1000
DEFAULT_TIME_QUANTUM = 2


class BaseScheduler(ABC):
    """
    Single-CPU scheduler advanced one time unit per ``tick()``.

    Subclasses only decide which READY process to take next and, for the
    preemptive policies, whether the running process should give up the CPU.
    The scheduler owns its process list for the whole run.
    """

    name = "base"
    preemptive = False

    def __init__(self, processes: Iterable[Process], observer: Optional[SchedulerObserver] = None) -> None:
        self.processes: List[Process] = self._initial_order(list(processes))
        self.ready_queue: List[Process] = []
        self.current: Optional[Process] = None
        self.completed: List[Process] = []
        self.time = 0
        self.step_limit_reached = False
        self.observer = observer or SchedulerObserver()

    def _initial_order(self, processes: List[Process]) -> List[Process]:
        return processes

    @abstractmethod
    def select_next(self) -> Process:
        """Remove and return the next process from a non-empty ready queue."""

    def should_preempt(self) -> bool:
        return False

    def tick(self) -> bool:
        """
        Advance the simulation by one time unit. Returns True once every
        process has completed.
        """
        self.time += 1
        self.check_arrivals()

        if self.current is not None and self.should_preempt():
            self._preempt()

        if self.current is None:
            self._dispatch()

        if self.current is not None:
            self._execute()

        self.accrue_waits()
        return self.is_finished()

    def run_to_completion(self, max_steps: int = DEFAULT_MAX_STEPS) -> List[Process]:
        steps = 0
        finished = self.is_finished() and self.time > 0
        while not finished and steps < max_steps:
            finished = self.tick()
            steps += 1

        if not finished:
            self.step_limit_reached = True
            self.observer.step_limit_reached(self, max_steps)
        return self.completed

    def check_arrivals(self) -> None:
        for process in self.processes:
            if process.state is ProcessState.NEW and process.arrival_time <= self.time:
                process.transition_to(ProcessState.READY)
                self.ready_queue.append(process)
                self.observer.arrived(self, process)

    def accrue_waits(self) -> None:
        for process in self.ready_queue:
            process.accrue_wait(1)

    def is_finished(self) -> bool:
        return len(self.completed) == len(self.processes)

    def all_processes(self) -> List[Process]:
        running = [self.current] if self.current is not None else []
        pending = [p for p in self.processes if p.state is ProcessState.NEW]
        return self.completed + running + self.ready_queue + pending

    @property
    def current_time(self) -> int:
        return self.time

    def _dispatch(self) -> None:
        if not self.ready_queue:
            return
        process = self.select_next()
        process.transition_to(ProcessState.RUNNING, self.time)
        self.current = process
        self._on_dispatch(process)
        self.observer.dispatched(self, process)

    def _on_dispatch(self, process: Process) -> None:
        pass

    def _preempt(self) -> None:
        process = self.current
        assert process is not None
        process.transition_to(ProcessState.READY)
        self.ready_queue.append(process)
        self.current = None
        self.observer.preempted(self, process)

    def _execute(self) -> None:
        process = self.current
        assert process is not None
        done = process.advance()
        self.observer.executed(self, process)
        if done:
            self._complete(process)
            self._dispatch()
        else:
            self._after_slice(process)

    def _after_slice(self, process: Process) -> None:
        pass

    def _complete(self, process: Process) -> None:
        assert process.remaining_time == 0
        process.finish(self.time)
        self.completed.append(process)
        self.current = None
        self.observer.completed(self, process)

    def _take_min(self, key: Callable[[Process], tuple]) -> Process:
        # min() keeps the earliest queue entry among equal keys.
        best = min(self.ready_queue, key=key)
        self.ready_queue.remove(best)
        return best

    def _peek_min(self, key: Callable[[Process], tuple]) -> Optional[Process]:
        if not self.ready_queue:
            return None
        return min(self.ready_queue, key=key)


def _by_remaining(p: Process) -> tuple:
    return (p.remaining_time, p.arrival_time)


def _by_priority(p: Process) -> tuple:
    return (p.priority, p.arrival_time)


class FCFSScheduler(BaseScheduler):
    """
    First-Come First-Serve (non-preemptive). Processes are sorted by arrival
    once, before the run starts; ties keep their input order.
    """

    name = "FCFS"

    def _initial_order(self, processes):
        return sorted(processes, key=lambda p: p.arrival_time)

    def select_next(self):
        return self.ready_queue.pop(0)


class SJFScheduler(BaseScheduler):
    """
    Shortest Job First (non-preemptive).

    When the CPU is free, pick the READY process with the least remaining
    time; break ties by earlier arrival.
    """

    name = "SJF"

    def select_next(self):
        return self._take_min(_by_remaining)


class SRTFScheduler(SJFScheduler):
    """
    Shortest Remaining Time First (preemptive SJF).
    """

    name = "SRTF"
    preemptive = True

    def should_preempt(self):
        best = self._peek_min(_by_remaining)
        return best is not None and best.remaining_time < self.current.remaining_time


class RoundRobinScheduler(BaseScheduler):
    """
    Round Robin with a fixed time quantum.

    The quantum countdown is reset on every dispatch. When it runs out and
    another process is READY, the running one goes to the back of the queue;
    with an empty queue it simply keeps the CPU for a fresh quantum.
    """

    name = "RR"
    preemptive = True

    def __init__(
        self,
        processes: Iterable[Process],
        time_quantum: int = DEFAULT_TIME_QUANTUM,
        observer: Optional[SchedulerObserver] = None,
    ) -> None:
        if isinstance(time_quantum, bool) or not isinstance(time_quantum, int) or time_quantum <= 0:
            raise InvalidWorkloadError(f"Round Robin requires a positive integer quantum, got {time_quantum!r}")
        super().__init__(processes, observer=observer)
        self.time_quantum = time_quantum
        self.slice_remaining = 0

    def select_next(self):
        return self.ready_queue.pop(0)

    def _on_dispatch(self, process):
        self.slice_remaining = self.time_quantum

    def _execute(self):
        self.slice_remaining -= 1
        super()._execute()

    def _after_slice(self, process):
        if self.slice_remaining > 0:
            return

        if self.ready_queue:
            self.observer.quantum_expired(self, process, True)
            self._preempt()
            self._dispatch()
        else:
            self.observer.quantum_expired(self, process, False)
            self.slice_remaining = self.time_quantum


class PriorityScheduler(BaseScheduler):
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority; ties go to the
    earlier arrival.
    """

    name = "PRIORITY"

    def select_next(self):
        return self._take_min(_by_priority)


class PriorityPreemptiveScheduler(PriorityScheduler):
    name = "PRIORITY_P"
    preemptive = True

    def should_preempt(self):
        best = self._peek_min(_by_priority)
        return best is not None and best.priority < self.current.priority


class RandomScheduler(BaseScheduler):
    """
    Picks a uniformly random READY process whenever the CPU is free
    (non-preemptive). Pass a seeded ``random.Random`` for repeatable runs.
    """

    name = "RANDOM"

    def __init__(
        self,
        processes: Iterable[Process],
        rng: Optional[random.Random] = None,
        observer: Optional[SchedulerObserver] = None,
    ) -> None:
        super().__init__(processes, observer=observer)
        self.rng = rng or random.Random()

    def select_next(self):
        return self.ready_queue.pop(self.rng.randrange(len(self.ready_queue)))
