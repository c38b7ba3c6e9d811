from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart. Busy time is drawn with '=', idle time with '.',
    one column per time unit.
    """
    if not slices:
        return "(no execution)"

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))

    line = "|"
    labels = ""
    time_marks = f"{slices[0].start_time}"

    for sl in slices:
        width = max(1, sl.duration)
        line += ("." if sl.is_idle else "=") * width
        labels += sl.label[:width].ljust(width)
        time_marks += f"{sl.end_time:>3}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def describe_timeline(slices: List[ScheduledSlice]) -> List[str]:
    """One 'Time a-b: Process n' line per slice, idle slices shown as IDLE."""
    lines = []
    for sl in slices:
        who = "IDLE" if sl.is_idle else f"Process {sl.pid}"
        lines.append(f"Time {sl.start_time}-{sl.end_time}: {who}")
    return lines


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = f"{slices[0].start_time}"

    for sl in slices:
        width = max(1, sl.duration)
        if sl.is_idle:
            timeline.append("." * width, style="dim")
            labels.append(" " * width)
        else:
            timeline.append(" " * width, style=f"on {pid_color(sl.pid)}")
            labels.append(sl.label[:width].ljust(width), style="bold")
        time_marks += f"{sl.end_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
