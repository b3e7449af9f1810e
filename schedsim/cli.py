from __future__ import annotations

import argparse
import random
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Settings, load_settings
from .errors import SchedulerError
from .factory import ALGORITHM_INFO, SchedulerType
from .gantt import build_rich_gantt
from .generator import generate_processes
from .log import configure_logging
from .observers import LoggingObserver
from .simulation import BatchResult, SimulationSession, Snapshot, run_batch
from .workload_io import dump_workload, load_workload

ALGORITHM_NAMES = [t.value.lower() for t in SchedulerType]


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, RR, Priority, Priority-P, Random).",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level for scheduler events (default: {settings.log_level}).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHM_NAMES)}).",
    )
    run_parser.add_argument("--workload", "-w", required=True, help="Path to JSON or CSV workload file.")
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=settings.time_quantum,
        help=f"Time quantum for round-robin (ignored by the others, default: {settings.time_quantum}).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Stream the simulation one tick at a time in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=settings.step_delay,
        help=f"Seconds to wait between steps when --step is used (default: {settings.step_delay}).",
    )
    run_parser.add_argument(
        "--max-steps",
        type=int,
        default=settings.max_steps,
        help=f"Stop after this many time units (default: {settings.max_steps}).",
    )
    run_parser.add_argument("--seed", type=int, default=settings.random_seed, help="Seed for the random policy.")
    run_parser.add_argument("--json", action="store_true", help="Print the result as JSON.")

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument("--workload", "-w", required=True, help="Path to JSON or CSV workload file.")
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=ALGORITHM_NAMES,
        help=f"Algorithms to compare (default: {' '.join(ALGORITHM_NAMES)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=settings.time_quantum,
        help=f"Time quantum used for RR when included (default: {settings.time_quantum}).",
    )
    compare_parser.add_argument("--seed", type=int, default=settings.random_seed, help="Seed for the random policy.")

    gen_parser = subparsers.add_parser("generate", help="Generate a random workload.")
    gen_parser.add_argument("--count", "-n", type=int, default=5, help="Number of processes (1-100, default: 5).")
    gen_parser.add_argument("--max-burst-time", type=int, default=10)
    gen_parser.add_argument("--max-io-burst-time", type=int, default=5)
    gen_parser.add_argument("--max-priority", type=int, default=10)
    gen_parser.add_argument("--max-arrival-time", type=int, default=10)
    gen_parser.add_argument("--seed", type=int, default=settings.random_seed)
    gen_parser.add_argument("--output", "-o", help="Write the workload to this JSON file instead of printing it.")

    subparsers.add_parser("algorithms", help="Describe the available scheduling algorithms.")

    session_parser = subparsers.add_parser(
        "interactive",
        help="Step through a simulation interactively (step, run, pause, speed, reset).",
    )
    session_parser.add_argument("--algorithm", "-a", required=True, help="Algorithm to use.")
    session_parser.add_argument("--workload", "-w", required=True, help="Path to JSON or CSV workload file.")
    session_parser.add_argument("--quantum", "-q", type=int, default=settings.time_quantum)
    session_parser.add_argument("--step-delay", type=float, default=settings.step_delay)
    session_parser.add_argument("--max-steps", type=int, default=settings.max_steps)
    session_parser.add_argument("--seed", type=int, default=settings.random_seed)

    return parser


def _rng(seed: Optional[int]) -> Optional[random.Random]:
    return random.Random(seed) if seed is not None else None


def _print_result(result: BatchResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.time_quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.time_quantum}")
    if result.step_limit_reached:
        console.print(
            f"[yellow]Stopped at the step limit (t={result.total_time}); results are partial.[/yellow]"
        )

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline, result.total_time)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = ["Name", "Arrive", "Burst", "Priority", "Complete", "Wait", "Turnaround", "Response"]
    proc_table = Table(title="Per-process metrics (completion order)", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "Name" else "right")

    for p in result.results:
        proc_table.add_row(
            escape(p.name),
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    stats = result.statistics
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Total time", str(result.total_time))
    sys_table.add_row("Completed", f"{stats.completed_processes}/{stats.total_processes}")
    sys_table.add_row("Avg waiting", f"{stats.avg_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{stats.avg_turnaround_time:.2f}")
    sys_table.add_row("Avg response", f"{stats.avg_response_time:.2f}")
    sys_table.add_row("Throughput (proc/time)", f"{stats.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{stats.cpu_utilization:.1f}%")
    sys_table.add_row("CPU idle time", f"{stats.cpu_idle_time} ({stats.cpu_idle_percentage:.1f}%)")
    sys_table.add_row("Context switches (approx.)", str(stats.context_switches))

    console.print(sys_table)


def _print_step(snap: Snapshot, console: Console) -> None:
    running = escape(snap.running["name"]) if snap.running else "[dim]idle[/dim]"
    ready = escape(", ".join(snap.ready_queue)) or "-"
    done = len(snap.by_state["TERMINATED"])
    console.print(
        f"t={snap.time:3d}: [green]{running}[/green]  ready: [cyan]{ready}[/cyan]  "
        f"done: {done}/{snap.statistics.total_processes}"
    )


def _print_snapshot(snap: Snapshot, console: Console) -> None:
    table = Table(title=f"State at t={snap.time}", box=box.SIMPLE_HEAVY)
    for h in ["Name", "State", "Arrive", "Burst", "Remaining", "Priority", "Wait"]:
        table.add_column(h, justify="center" if h in {"Name", "State"} else "right")
    for p in snap.processes:
        table.add_row(
            escape(p["name"]),
            p["state"],
            str(p["arrival_time"]),
            str(p["burst_time"]),
            str(p["remaining_time"]),
            str(p["priority"]),
            str(p["waiting_time"]),
        )
    console.print(table)
    stats = snap.statistics
    console.print(
        f"[bold]CPU[/bold] {stats.cpu_utilization:.1f}%  "
        f"[bold]avg wait[/bold] {stats.avg_waiting_time:.2f}  "
        f"[bold]avg turnaround[/bold] {stats.avg_turnaround_time:.2f}"
    )


def _run_command(args, console: Console) -> int:
    specs = load_workload(Path(args.workload))
    observer = LoggingObserver()

    if not args.step:
        result = run_batch(
            args.algorithm,
            specs,
            time_quantum=args.quantum,
            max_steps=args.max_steps,
            observer=observer,
            rng=_rng(args.seed),
        )
    else:
        session = SimulationSession(
            args.algorithm,
            specs,
            time_quantum=args.quantum,
            step_delay=args.step_delay,
            max_steps=args.max_steps,
            observer=observer,
            rng=_rng(args.seed),
        )
        console.print(f"[bold]Simulating {session.scheduler.name}[/bold]")
        console.print("[dim]Press Ctrl+C to skip the animation.[/dim]")
        try:
            for snap in session.stream():
                _print_step(snap, console)
        except KeyboardInterrupt:
            console.print("[yellow]Animation skipped.[/yellow]")
            for _ in session.stream(sleep=lambda _: None):
                pass
        result = session.result()

    if args.json:
        console.print_json(data=result.to_dict())
    else:
        _print_result(result, console)
    return 0


def _compare_command(args, console: Console) -> int:
    specs = load_workload(Path(args.workload))

    summary_table = Table(title=f"Algorithm comparison: {args.workload}", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Switches", justify="right")
    summary_table.add_column("Total time", justify="right")

    for alg in args.algorithms:
        result = run_batch(alg, specs, time_quantum=args.quantum, rng=_rng(args.seed))
        stats = result.statistics
        summary_table.add_row(
            result.algorithm,
            "" if result.time_quantum is None else str(result.time_quantum),
            f"{stats.avg_waiting_time:.2f}",
            f"{stats.avg_turnaround_time:.2f}",
            f"{stats.avg_response_time:.2f}",
            str(stats.context_switches),
            str(result.total_time),
        )

    console.print(summary_table)
    return 0


def _generate_command(args, console: Console) -> int:
    specs = generate_processes(
        count=args.count,
        max_burst_time=args.max_burst_time,
        max_io_burst_time=args.max_io_burst_time,
        max_priority=args.max_priority,
        max_arrival_time=args.max_arrival_time,
        rng=_rng(args.seed),
    )
    if args.output:
        dump_workload(specs, args.output)
        console.print(f"Wrote {len(specs)} processes to [green]{escape(str(args.output))}[/green]")
        return 0

    table = Table(title="Generated workload", box=box.SIMPLE_HEAVY)
    for h in ["Name", "Arrive", "Burst", "I/O burst", "Priority"]:
        table.add_column(h, justify="center" if h == "Name" else "right")
    for s in specs:
        table.add_row(escape(s.name), str(s.arrival_time), str(s.burst_time), str(s.io_burst_time), str(s.priority))
    console.print(table)
    return 0


def _algorithms_command(console: Console) -> int:
    table = Table(title="Scheduling algorithms", box=box.SIMPLE_HEAVY, show_lines=True)
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Description")
    for kind, info in ALGORITHM_INFO.items():
        params = ", ".join(f"{p['name']}={p['default']}" for p in info["parameters"])
        description = info["description"] + (f" Parameters: {params}." if params else "")
        table.add_row(
            kind.value,
            info["name"],
            "preemptive" if info["preemptive"] else "non-preemptive",
            description,
        )
    console.print(table)
    return 0


INTERACTIVE_HELP = (
    "[bold]Commands:[/bold] [yellow]Enter[/yellow]/[yellow]s[/yellow] step, "
    "[yellow]r[/yellow] [N] run (Ctrl+C pauses), [yellow]speed[/yellow] SECONDS, "
    "[yellow]state[/yellow], [yellow]reset[/yellow], [yellow]q[/yellow] quit"
)


def _interactive_command(args, console: Console) -> int:
    specs = load_workload(Path(args.workload))
    session = SimulationSession(
        args.algorithm,
        specs,
        time_quantum=args.quantum,
        step_delay=args.step_delay,
        max_steps=args.max_steps,
        observer=LoggingObserver(),
        rng=_rng(args.seed),
    )

    console.print(f"\n[bold cyan]Interactive {session.scheduler.name} simulation[/bold cyan]")
    console.print(INTERACTIVE_HELP)
    _print_snapshot(session.snapshot(), console)

    reported = False
    while True:
        if session.exhausted and not reported:
            _print_result(session.result(), console)
            console.print("[dim]Simulation finished. Type reset to start over or q to quit.[/dim]")
            reported = True

        try:
            choice = input("> ").strip().lower()
        except EOFError:
            return 0
        parts = choice.split() or [""]

        if parts[0] in {"q", "quit", "exit"}:
            return 0

        if parts[0] in {"", "s", "step"}:
            _print_step(session.step(), console)
            continue

        if parts[0] in {"r", "run"}:
            limit: Optional[int] = None
            if len(parts) > 1:
                try:
                    limit = int(parts[1])
                except ValueError:
                    console.print("[red]Invalid step count.[/red]")
                    continue
            session.resume()
            try:
                for count, snap in enumerate(session.stream()):
                    if count:
                        _print_step(snap, console)
                    if limit is not None and count >= limit:
                        break
            except KeyboardInterrupt:
                session.pause()
                console.print(f"[yellow]Paused at t={session.scheduler.time}.[/yellow]")
            continue

        if parts[0] == "speed":
            try:
                session.set_step_delay(float(parts[1]))
                console.print(f"Step delay set to {session.step_delay}s")
            except (IndexError, ValueError) as exc:
                console.print(f"[red]Invalid speed: {escape(str(exc))}[/red]")
            continue

        if parts[0] == "state":
            _print_snapshot(session.snapshot(), console)
            continue

        if parts[0] == "reset":
            _print_snapshot(session.reset(), console)
            reported = False
            continue

        console.print("[red]Invalid command.[/red]")
        console.print(INTERACTIVE_HELP)


def main(argv: Optional[List[str]] = None) -> int:
    console = Console()
    try:
        settings = load_settings()
    except SchedulerError as exc:
        console.print(f"[red]Configuration error: {escape(str(exc))}[/red]")
        return 2

    parser = build_parser(settings)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.command == "run":
            return _run_command(args, console)
        if args.command == "compare":
            return _compare_command(args, console)
        if args.command == "generate":
            return _generate_command(args, console)
        if args.command == "algorithms":
            return _algorithms_command(console)
        if args.command == "interactive":
            return _interactive_command(args, console)
    except SchedulerError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
