import pytest

from schedsim.metrics import compute_statistics, count_context_switches
from schedsim.models import Process
from schedsim.schedulers import FCFSScheduler, RoundRobinScheduler


def _fcfs_run():
    procs = [
        Process(arrival_time=0, burst_time=5, name="P1"),
        Process(arrival_time=2, burst_time=3, name="P2"),
        Process(arrival_time=4, burst_time=1, name="P3"),
        Process(arrival_time=6, burst_time=4, name="P4"),
    ]
    sched = FCFSScheduler(procs)
    sched.run_to_completion()
    return sched


def test_fcfs_statistics():
    sched = _fcfs_run()
    stats = compute_statistics(sched.all_processes(), sched.time)
    assert stats.avg_waiting_time == pytest.approx(2.5)
    assert stats.avg_turnaround_time == pytest.approx(5.75)
    assert stats.avg_response_time == pytest.approx(2.5)
    assert stats.cpu_utilization == pytest.approx(100.0)
    assert stats.throughput == pytest.approx(4 / 13)
    assert stats.context_switches == 3
    assert stats.cpu_idle_time == 0
    assert stats.cpu_idle_percentage == 0
    assert stats.total_processes == 4
    assert stats.completed_processes == 4


def test_statistics_with_nothing_elapsed():
    stats = compute_statistics([Process(arrival_time=0, burst_time=2)], 0)
    assert stats.cpu_utilization == 0
    assert stats.throughput == 0
    assert stats.avg_waiting_time == 0
    assert stats.cpu_idle_percentage == 0
    assert stats.completed_processes == 0
    assert stats.total_processes == 1


def test_empty_run_counts_one_idle_tick():
    sched = FCFSScheduler([])
    sched.run_to_completion()
    stats = compute_statistics(sched.all_processes(), sched.time)
    assert stats.cpu_idle_time == 1
    assert stats.cpu_idle_percentage == pytest.approx(100.0)
    assert stats.context_switches == 0
    assert stats.throughput == 0


def test_averages_ignore_unfinished_processes():
    procs = [Process(arrival_time=0, burst_time=2, name="A"), Process(arrival_time=0, burst_time=10, name="B")]
    sched = FCFSScheduler(procs)
    sched.run_to_completion(max_steps=4)
    stats = compute_statistics(sched.all_processes(), sched.time)
    assert stats.completed_processes == 1
    assert stats.avg_turnaround_time == pytest.approx(2.0)
    # A ran 2 units and B 2 more out of 4 elapsed.
    assert stats.cpu_idle_time == 0
    assert stats.cpu_utilization == pytest.approx(50.0)


def test_context_switches_use_distinct_dispatch_instants():
    a = Process(arrival_time=0, burst_time=1, name="A")
    b = Process(arrival_time=0, burst_time=1, name="B")
    a.running_timestamps = [1, 4]
    b.running_timestamps = [4, 6]
    assert count_context_switches([a, b]) == 2
    assert count_context_switches([]) == 0


def test_round_robin_lone_process_has_no_switches():
    sched = RoundRobinScheduler([Process(arrival_time=0, burst_time=7)], time_quantum=2)
    sched.run_to_completion()
    assert compute_statistics(sched.all_processes(), sched.time).context_switches == 0


def test_to_dict_has_every_field():
    sched = _fcfs_run()
    data = compute_statistics(sched.all_processes(), sched.time).to_dict()
    assert set(data) == {
        "cpu_utilization",
        "avg_waiting_time",
        "avg_turnaround_time",
        "avg_response_time",
        "throughput",
        "context_switches",
        "cpu_idle_time",
        "cpu_idle_percentage",
        "total_processes",
        "completed_processes",
    }
