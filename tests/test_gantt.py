from schedsim.gantt import build_rich_gantt, describe_timeline, render_gantt
from schedsim.models import IDLE_PID, ScheduledSlice


def test_render_gantt_busy():
    chart = render_gantt([ScheduledSlice(1, 0, 5), ScheduledSlice(2, 5, 8)])
    lines = chart.splitlines()
    assert lines[1] == "|========|"
    assert lines[2] == "P1   P2 "
    assert lines[3] == "0  5  8"


def test_render_gantt_idle():
    chart = render_gantt([ScheduledSlice(IDLE_PID, 0, 2), ScheduledSlice(1, 2, 4)])
    assert chart.splitlines()[1] == "|..==|"


def test_render_gantt_empty():
    assert render_gantt([]) == "(no execution)"


def test_describe_timeline():
    lines = describe_timeline([ScheduledSlice(IDLE_PID, 0, 5), ScheduledSlice(1, 5, 8)])
    assert lines == ["Time 0-5: IDLE", "Time 5-8: Process 1"]


def test_build_rich_gantt_time_marks():
    _panel, marks = build_rich_gantt([ScheduledSlice(1, 0, 2), ScheduledSlice(IDLE_PID, 2, 4)])
    assert marks == "0  2  4"
