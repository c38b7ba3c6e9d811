from __future__ import annotations

from typing import List

from .models import ProcessMetrics, ScheduleResult, SystemMetrics
from .validation import DegenerateMetricsError


def compute_system_metrics(result: ScheduleResult, total_time: int, idle_time: int) -> SystemMetrics:
    """
    Reduce a finished run to its aggregates and attach them to the result.

    ``total_time`` is the clock value the simulation loop stopped at and
    ``idle_time`` the idle time accumulated up to it; utilization and
    throughput are both taken over that same span.
    """
    if total_time <= 0:
        raise DegenerateMetricsError(
            f"{result.algorithm}: total elapsed time is {total_time}; utilization and throughput are undefined"
        )

    averages = summarize_process_metrics(result.processes)
    n = len(result.processes)

    system = SystemMetrics(
        total_time=total_time,
        idle_time=idle_time,
        avg_waiting=averages["avg_waiting"],
        avg_turnaround=averages["avg_turnaround"],
        avg_response=averages["avg_response"],
        cpu_utilization=(total_time - idle_time) / total_time * 100,
        throughput=n / total_time,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": None}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
