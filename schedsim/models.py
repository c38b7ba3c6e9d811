from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

IDLE_PID = -1


@dataclass(frozen=True)
class Process:
    """
    A schedulable unit as supplied by the caller. Inputs only; the engine
    keeps per-run state elsewhere so the same list can be fed to every
    algorithm.
    """

    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass(frozen=True)
class ScheduledSlice:
    """
    One contiguous interval [start_time, end_time) of the timeline, either
    owned by a process or idle (pid == IDLE_PID).
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def is_idle(self) -> bool:
        return self.pid == IDLE_PID

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def label(self) -> str:
        return "idle" if self.is_idle else f"P{self.pid}"


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    remaining_time: int = 0

    @property
    def is_completed(self) -> bool:
        return self.remaining_time <= 0


@dataclass
class SystemMetrics:
    total_time: int
    idle_time: int
    avg_waiting: float
    avg_turnaround: float
    cpu_utilization: float
    throughput: float
    avg_response: Optional[float] = None

    @property
    def cpu_busy_time(self) -> int:
        return self.total_time - self.idle_time


@dataclass
class ScheduleResult:
    algorithm: str
    key: str
    quantum: Optional[int] = None
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    @property
    def avg_waiting(self) -> float:
        return self._system().avg_waiting

    @property
    def avg_turnaround(self) -> float:
        return self._system().avg_turnaround

    @property
    def avg_response(self) -> Optional[float]:
        return self._system().avg_response

    @property
    def cpu_utilization(self) -> float:
        return self._system().cpu_utilization

    @property
    def throughput(self) -> float:
        return self._system().throughput

    def _system(self) -> SystemMetrics:
        if self.system is None:
            raise RuntimeError(f"metrics for {self.algorithm} have not been computed")
        return self.system
