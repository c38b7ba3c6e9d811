from __future__ import annotations

from typing import Optional, Sequence

from .models import Process


class SchedulingError(ValueError):
    """Base class for every error raised by the simulator."""


class InvalidWorkloadError(SchedulingError):
    """The process set or the algorithm configuration is unusable."""


class DegenerateMetricsError(SchedulingError):
    """Aggregate metrics were requested for a run with no elapsed time."""


def validate_processes(processes: Sequence[Process]) -> None:
    """
    Reject inputs that would produce meaningless metrics: an empty set,
    duplicate ids, negative arrivals or non-positive bursts.
    """
    if not processes:
        raise InvalidWorkloadError("at least one process is required")

    seen = set()
    for p in processes:
        if p.pid in seen:
            raise InvalidWorkloadError(f"duplicate process id {p.pid}")
        seen.add(p.pid)

        if p.arrival_time < 0:
            raise InvalidWorkloadError(
                f"process {p.pid}: arrival_time must be >= 0 (got {p.arrival_time})"
            )
        if p.burst_time <= 0:
            raise InvalidWorkloadError(
                f"process {p.pid}: burst_time must be > 0 (got {p.burst_time})"
            )


def validate_quantum(quantum: Optional[int]) -> int:
    # bool is an int subclass; True is not a quantum
    if quantum is None or isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise InvalidWorkloadError(f"Round Robin requires a positive integer quantum (got {quantum!r})")
    return quantum
