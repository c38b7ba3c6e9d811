"""
Cross-algorithm and cross-scenario comparison.

The functions at the top of the module are pure and only read
ScheduleResult fields; the ``print_*`` helpers render them with rich.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table

from .gantt import build_rich_gantt, describe_timeline
from .models import Process, ScheduleResult

BAR_WIDTH = 40

# (attribute, label, lower_is_better)
METRICS = [
    ("avg_waiting", "Average Waiting Time", True),
    ("avg_turnaround", "Average Turnaround Time", True),
    ("cpu_utilization", "CPU Utilization", False),
    ("throughput", "Throughput", False),
]

RECOMMENDATIONS = [
    ("Short Processes", "For workloads with many short processes"),
    ("Long Processes", "For workloads with few long processes"),
    ("Mixed Processes", "For workloads with mixed process lengths"),
    ("Simultaneous Arrival", "For workloads where processes arrive simultaneously"),
]


@dataclass
class AlgorithmSummary:
    """Averages of one algorithm's results across scenarios."""

    name: str
    avg_waiting: float = 0.0
    avg_turnaround: float = 0.0
    cpu_utilization: float = 0.0
    throughput: float = 0.0
    avg_response: Optional[float] = None
    wins: int = 0


def best_by_metric(results: Sequence[ScheduleResult]) -> Dict[str, ScheduleResult]:
    """
    Best result per metric. The earliest result wins ties.
    """
    best = {}
    for attr, _label, lower_is_better in METRICS:
        pick = min if lower_is_better else max
        best[attr] = pick(results, key=lambda r: getattr(r, attr))
    return best


def _normalized(value: float, low: float, high: float, lower_is_better: bool) -> float:
    spread = high - low
    if spread <= 0:
        return 1.0
    score = (value - low) / spread
    return 1 - score if lower_is_better else score


def scenario_scores(results: Sequence[ScheduleResult]) -> Dict[str, float]:
    """
    Equal-weight score in [0, 1] per algorithm, each metric min-max
    normalised across the given results (1 = best).
    """
    scores: Dict[str, float] = {}
    bounds = {}
    for attr, _label, _lower in METRICS:
        values = [getattr(r, attr) for r in results]
        bounds[attr] = (min(values), max(values))

    for result in results:
        parts = [
            _normalized(getattr(result, attr), *bounds[attr], lower_is_better=lower)
            for attr, _label, lower in METRICS
        ]
        scores[result.algorithm] = sum(parts) / len(parts)
    return scores


def recommend(results: Sequence[ScheduleResult]) -> Tuple[str, float]:
    scores = scenario_scores(results)
    name = max(scores, key=scores.get)
    return name, scores[name]


def overall_comparison(scenario_results: Dict[str, List[ScheduleResult]]) -> Dict[str, AlgorithmSummary]:
    """
    Average every metric per algorithm across scenarios and count wins.

    Per scenario the waiting-time winner always scores a win; the turnaround,
    utilization and throughput winners score one only if they have not
    already won in that scenario.
    """
    if not scenario_results:
        return {}

    first = next(iter(scenario_results.values()))
    summaries = {r.algorithm: AlgorithmSummary(name=r.algorithm) for r in first}
    response_counts = {name: 0 for name in summaries}

    for results in scenario_results.values():
        for result in results:
            summary = summaries[result.algorithm]
            summary.avg_waiting += result.avg_waiting
            summary.avg_turnaround += result.avg_turnaround
            summary.cpu_utilization += result.cpu_utilization
            summary.throughput += result.throughput
            if result.avg_response is not None:
                summary.avg_response = (summary.avg_response or 0.0) + result.avg_response
                response_counts[result.algorithm] += 1

        winners: List[str] = []
        for best in best_by_metric(results).values():
            if best.algorithm not in winners:
                summaries[best.algorithm].wins += 1
            winners.append(best.algorithm)

    count = len(scenario_results)
    for name, summary in summaries.items():
        summary.avg_waiting /= count
        summary.avg_turnaround /= count
        summary.cpu_utilization /= count
        summary.throughput /= count
        if summary.avg_response is not None:
            summary.avg_response /= response_counts[name]

    return summaries


def overall_scores(summaries: Dict[str, AlgorithmSummary]) -> Dict[str, float]:
    """
    Equal-weight score per algorithm with each metric divided by its
    maximum across algorithms (1 - v/max where lower is better).
    """
    maxima = {attr: max(getattr(s, attr) for s in summaries.values()) for attr, _label, _lower in METRICS}

    scores = {}
    for name, summary in summaries.items():
        parts = []
        for attr, _label, lower_is_better in METRICS:
            top = maxima[attr]
            if top <= 0:
                parts.append(1.0)
            elif lower_is_better:
                parts.append(1 - getattr(summary, attr) / top)
            else:
                parts.append(getattr(summary, attr) / top)
        scores[name] = sum(parts) / len(parts)
    return scores


def bar_chart(items: Sequence[Tuple[str, float]], lower_is_better: bool, width: int = BAR_WIDTH) -> List[str]:
    """
    Horizontal text bars, best first, scaled so the largest value spans
    ``width`` characters.
    """
    if not items:
        return []
    top = max(value for _name, value in items)
    scale = width / (top if top > 0 else 1)
    ordered = sorted(items, key=lambda item: item[1], reverse=not lower_is_better)
    return [f"{name:<30} | {'█' * int(value * scale)} {value:.2f}" for name, value in ordered]


def print_processes(console: Console, processes: Sequence[Process], title: str = "Process details") -> None:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    for h in ("PID", "Arrive", "Burst", "Priority"):
        table.add_column(h, justify="right")
    for p in processes:
        table.add_row(str(p.pid), str(p.arrival_time), str(p.burst_time), str(p.priority))
    console.print(table)


def print_result(console: Console, result: ScheduleResult, show_gantt: bool = True) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if show_gantt:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)
        console.print()
    else:
        for line in describe_timeline(result.timeline):
            console.print(line)
        console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            str(p.pid),
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    if result.system:
        sys = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{sys.avg_waiting:.2f}")
        sys_table.add_row("Avg turnaround", f"{sys.avg_turnaround:.2f}")
        sys_table.add_row("Avg response", "N/A" if sys.avg_response is None else f"{sys.avg_response:.2f}")
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization:.1f}%")
        sys_table.add_row("Idle time", str(sys.idle_time))
        sys_table.add_row("Total time", str(sys.total_time))

        console.print(sys_table)


def print_comparison(console: Console, title: str, results: Sequence[ScheduleResult]) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("AWT", justify="right")
    summary_table.add_column("ATT", justify="right")
    summary_table.add_column("CPU Util", justify="right")
    summary_table.add_column("Throughput", justify="right")
    summary_table.add_column("ART", justify="right")

    for result in results:
        summary_table.add_row(
            result.algorithm,
            f"{result.avg_waiting:.2f}",
            f"{result.avg_turnaround:.2f}",
            f"{result.cpu_utilization:.2f}%",
            f"{result.throughput:.2f}",
            "N/A" if result.avg_response is None else f"{result.avg_response:.2f}",
        )

    console.print(summary_table)

    best = best_by_metric(results)
    console.print("[bold]Best algorithms:[/bold]")
    for attr, label, _lower in METRICS:
        winner = best[attr]
        suffix = "%" if attr == "cpu_utilization" else ""
        console.print(f"  Best {label}: {winner.algorithm} ({getattr(winner, attr):.2f}{suffix})")


def print_overall(console: Console, scenario_results: Dict[str, List[ScheduleResult]]) -> None:
    summaries = overall_comparison(scenario_results)
    if not summaries:
        console.print("[yellow]No scenarios to compare.[/yellow]")
        return

    table = Table(title="Overall algorithm comparison", box=box.SIMPLE_HEAVY)
    table.add_column("Algorithm")
    for h in ("Avg AWT", "Avg ATT", "Avg CPU Util", "Avg Throughput", "Wins"):
        table.add_column(h, justify="right")

    for s in sorted(summaries.values(), key=lambda s: s.wins, reverse=True):
        table.add_row(
            s.name,
            f"{s.avg_waiting:.2f}",
            f"{s.avg_turnaround:.2f}",
            f"{s.cpu_utilization:.2f}%",
            f"{s.throughput:.2f}",
            str(s.wins),
        )
    console.print(table)

    ranked = list(summaries.values())
    best_awt = min(ranked, key=lambda s: s.avg_waiting)
    best_att = min(ranked, key=lambda s: s.avg_turnaround)
    best_util = max(ranked, key=lambda s: s.cpu_utilization)
    best_thru = max(ranked, key=lambda s: s.throughput)
    most_wins = max(ranked, key=lambda s: s.wins)

    console.print("[bold]Overall best algorithms:[/bold]")
    console.print(f"  Best Average Waiting Time: {best_awt.name} ({best_awt.avg_waiting:.2f})")
    console.print(f"  Best Average Turnaround Time: {best_att.name} ({best_att.avg_turnaround:.2f})")
    console.print(f"  Best CPU Utilization: {best_util.name} ({best_util.cpu_utilization:.2f}%)")
    console.print(f"  Best Throughput: {best_thru.name} ({best_thru.throughput:.2f})")
    console.print(f"  Most Wins Across Scenarios: {most_wins.name} ({most_wins.wins} wins)")

    recommendations = [(label, name) for name, label in RECOMMENDATIONS if name in scenario_results]
    if recommendations:
        console.print()
        console.print("[bold]Recommendations based on workload type:[/bold]")
        for label, scenario in recommendations:
            name, score = recommend(scenario_results[scenario])
            console.print(f"  {label}: {name} (Score: {score:.2f})")

    console.print()
    console.print("[bold]Conclusion:[/bold]")
    console.print(
        f"Based on overall performance across different scenarios, {most_wins.name} "
        "appears to be the most versatile scheduling algorithm."
    )
    if most_wins.name != best_awt.name:
        console.print(f"However, if minimizing waiting time is critical, {best_awt.name} would be preferable.")
    if most_wins.name != best_thru.name:
        console.print(f"For maximizing throughput, {best_thru.name} shows the best results.")


def print_summary_report(console: Console, scenario_results: Dict[str, List[ScheduleResult]]) -> None:
    summaries = overall_comparison(scenario_results)
    if not summaries:
        return

    for attr, label, lower_is_better in METRICS:
        title = f"Overall {label}" + (" (%)" if attr == "cpu_utilization" else "")
        console.print()
        console.print(f"[bold]{title}[/bold]")
        items = [(s.name, getattr(s, attr)) for s in summaries.values()]
        for line in bar_chart(items, lower_is_better=lower_is_better):
            console.print(line, highlight=False)

    scores = overall_scores(summaries)
    console.print()
    console.print("[bold]Overall algorithm performance score[/bold]")
    for line in bar_chart(list(scores.items()), lower_is_better=False):
        console.print(line, highlight=False)

    best_name = max(scores, key=scores.get)
    console.print()
    console.print(f"[bold green]Overall recommendation:[/bold green] {best_name} (Score: {scores[best_name]:.2f})")
