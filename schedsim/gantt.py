from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def build_rich_gantt(slices: List[ScheduledSlice], total_time: Optional[int] = None) -> Tuple[Panel, str]:
    """
    Build a Rich Panel with one colored cell per time unit and a string of
    time marks at every slice boundary. Idle units are drawn as dots, and a
    trailing idle stretch is shown when ``total_time`` extends past the last
    slice.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart"), ""

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))
    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    bars = Text()
    labels = Text()
    marks = [0]
    cursor = 0

    def idle(until: int) -> None:
        nonlocal cursor
        gap = until - cursor
        if gap > 0:
            bars.append("." * gap, style="dim")
            labels.append(" " * gap)
            cursor = until
            marks.append(cursor)

    for sl in slices:
        idle(sl.start_time)
        width = max(1, sl.end_time - sl.start_time)
        bars.append(" " * width, style=f"on {pid_color(sl.pid)}")
        labels.append(sl.label[:width].ljust(width), style="bold")
        cursor = sl.end_time
        marks.append(cursor)

    if total_time is not None:
        idle(total_time)

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bars)
    grid.add_row(labels)

    return Panel.fit(grid, title="Gantt Chart"), " ".join(str(m) for m in marks)
