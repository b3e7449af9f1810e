from rich.console import Console
from rich.panel import Panel

from schedsim.gantt import build_rich_gantt
from schedsim.models import ScheduledSlice


def _render(renderable) -> str:
    console = Console(width=120, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_empty_timeline():
    panel, marks = build_rich_gantt([])
    assert isinstance(panel, Panel)
    assert marks == ""
    assert "No execution" in _render(panel)


def test_marks_include_idle_gaps_and_trailing_idle():
    slices = [ScheduledSlice("A", 0, 2), ScheduledSlice("B", 4, 5)]
    panel, marks = build_rich_gantt(slices, total_time=7)
    assert marks == "0 2 4 5 7"
    text = _render(panel)
    assert ".." in text
    assert "A" in text and "B" in text


def test_slices_are_sorted_by_start():
    slices = [ScheduledSlice("B", 3, 5), ScheduledSlice("A", 0, 3)]
    _, marks = build_rich_gantt(slices)
    assert marks == "0 3 5"


def test_same_label_different_processes_stay_apart():
    slices = [ScheduledSlice("pid-a", 0, 2, name="job"), ScheduledSlice("pid-b", 2, 5, name="job")]
    panel, marks = build_rich_gantt(slices)
    assert marks == "0 2 5"
    text = _render(panel)
    assert "job" in text
    assert "pid-a" not in text
