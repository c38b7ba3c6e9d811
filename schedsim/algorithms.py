from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional, Sequence

from .metrics import compute_system_metrics
from .models import IDLE_PID, Process, ProcessMetrics, ScheduledSlice, ScheduleResult
from .validation import InvalidWorkloadError, validate_processes, validate_quantum

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class _ProcessState:
    """Per-run mutable state for one process. Identity comparison only."""

    process: Process
    remaining_time: int
    start_time: Optional[int] = None

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def is_completed(self) -> bool:
        return self.remaining_time <= 0

    def dispatch(self, now: int) -> None:
        # Response time is fixed by the very first dispatch only.
        if self.start_time is None:
            self.start_time = now

    def run_for(self, delta: int) -> None:
        self.remaining_time -= delta


class _Simulation:
    """
    Bookkeeping shared by every scheduling loop: the clock, the timeline,
    idle accounting and finalization of completed processes.

    Each instance builds its own state arena from the (immutable) input
    processes, so concurrent or repeated runs never alias each other.
    """

    def __init__(self, processes: Sequence[Process], sort_by_arrival: bool = True) -> None:
        validate_processes(processes)
        ordered = sorted(processes, key=lambda p: p.arrival_time) if sort_by_arrival else list(processes)
        self.states: List[_ProcessState] = [_ProcessState(process=p, remaining_time=p.burst_time) for p in ordered]
        self.time = 0
        self.idle_time = 0
        self.timeline: List[ScheduledSlice] = []
        self.completed: List[ProcessMetrics] = []

    def pending(self) -> bool:
        return len(self.completed) < len(self.states)

    def ready(self) -> List[_ProcessState]:
        """Arrived and incomplete processes, in scan order."""
        return [s for s in self.states if s.process.arrival_time <= self.time and not s.is_completed]

    def idle_until_next_arrival(self) -> None:
        """
        Record an idle slice from now to the next arrival. Only called while
        some process is incomplete but none has arrived, so a future arrival
        always exists.
        """
        next_arrival = min(
            s.process.arrival_time for s in self.states if not s.is_completed and s.process.arrival_time > self.time
        )
        logger.debug("CPU idle from t=%d to t=%d", self.time, next_arrival)
        self.timeline.append(ScheduledSlice(pid=IDLE_PID, start_time=self.time, end_time=next_arrival))
        self.idle_time += next_arrival - self.time
        self.time = next_arrival

    def record(self, state: _ProcessState, start_time: int, end_time: int) -> None:
        self.timeline.append(ScheduledSlice(pid=state.pid, start_time=start_time, end_time=end_time))

    def complete(self, state: _ProcessState) -> None:
        p = state.process
        completion_time = self.time
        turnaround_time = completion_time - p.arrival_time
        start_time = state.start_time

        logger.debug("P%d completed at t=%d", p.pid, completion_time)
        self.completed.append(
            ProcessMetrics(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                priority=p.priority,
                start_time=start_time,
                completion_time=completion_time,
                waiting_time=turnaround_time - p.burst_time,
                turnaround_time=turnaround_time,
                response_time=start_time - p.arrival_time,
                remaining_time=state.remaining_time,
            )
        )

    def finish(self, key: str, name: str, quantum: Optional[int] = None) -> ScheduleResult:
        result = ScheduleResult(
            algorithm=name,
            key=key,
            quantum=quantum,
            processes=self.completed,
            timeline=self.timeline,
        )
        compute_system_metrics(result, total_time=self.time, idle_time=self.idle_time)
        return result


Selector = Callable[[List[_ProcessState], int], _ProcessState]


def _run_non_preemptive(processes: Sequence[Process], key: str, name: str, select: Selector) -> ScheduleResult:
    """
    Shared driver for FCFS, SJF, Priority and HRRN.

    At every decision point ``select`` picks one of the ready processes
    (given in stable arrival order) and it runs to completion.
    """
    sim = _Simulation(processes)

    while sim.pending():
        ready = sim.ready()
        if not ready:
            sim.idle_until_next_arrival()
            continue

        state = select(ready, sim.time)
        state.dispatch(sim.time)
        logger.debug("%s: dispatch P%d at t=%d", key, state.pid, sim.time)

        start_time = sim.time
        run_time = state.remaining_time
        state.run_for(run_time)
        sim.time += run_time
        sim.record(state, start_time, sim.time)
        sim.complete(state)

    return sim.finish(key, name)


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    return _run_non_preemptive(processes, "fcfs", ALGORITHM_NAMES["fcfs"], lambda ready, now: ready[0])


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time. Ties go to the
    first candidate in arrival order.
    """
    return _run_non_preemptive(
        processes,
        "sjf",
        ALGORITHM_NAMES["sjf"],
        lambda ready, now: min(ready, key=lambda s: s.process.burst_time),
    )


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. No aging.
    """
    return _run_non_preemptive(
        processes,
        "priority",
        ALGORITHM_NAMES["priority"],
        lambda ready, now: min(ready, key=lambda s: s.process.priority),
    )


def response_ratio(process: Process, now: int) -> float:
    """(waiting + burst) / burst, with waiting measured from arrival to ``now``."""
    waiting_time = now - process.arrival_time
    return (waiting_time + process.burst_time) / process.burst_time


def schedule_hrrn(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Highest Response Ratio Next (non-preemptive).

    Ratios are only evaluated at decision points. The first process reaching
    the highest ratio wins.
    """

    def select(ready: List[_ProcessState], now: int) -> _ProcessState:
        selected = ready[0]
        highest = -1.0
        for state in ready:
            ratio = response_ratio(state.process, now)
            if ratio > highest:
                highest = ratio
                selected = state
        return selected

    return _run_non_preemptive(processes, "hrrn", ALGORITHM_NAMES["hrrn"], select)


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while (or exactly when) a quantum expires are
    queued ahead of the preempted process.
    """
    quantum = validate_quantum(quantum)
    sim = _Simulation(processes)
    ready: Deque[_ProcessState] = deque()

    def enqueue_new_arrivals(exclude: Optional[_ProcessState] = None) -> None:
        for state in sim.ready():
            if state is not exclude and state not in ready:
                ready.append(state)

    while sim.pending():
        enqueue_new_arrivals()

        if not ready:
            sim.idle_until_next_arrival()
            continue

        state = ready.popleft()
        state.dispatch(sim.time)

        run_time = min(quantum, state.remaining_time)
        slice_start = sim.time
        state.run_for(run_time)
        sim.time += run_time
        sim.record(state, slice_start, sim.time)

        if state.is_completed:
            sim.complete(state)
        else:
            enqueue_new_arrivals(exclude=state)
            logger.debug("rr: quantum expired for P%d at t=%d (remaining %d)", state.pid, sim.time, state.remaining_time)
            ready.append(state)

    return sim.finish("rr", round_robin_name(quantum), quantum=quantum)


def schedule_srtf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time First (preemptive SJF).

    The selected process runs until it completes or until the next arrival
    that falls inside its remaining run, whichever is first; a new choice is
    made at that point. Consecutive runs of the same process are merged into
    a single slice. Candidates are scanned in the caller's order.
    """
    sim = _Simulation(processes, sort_by_arrival=False)
    current: Optional[_ProcessState] = None
    slice_start = 0

    while sim.pending():
        ready = sim.ready()
        if not ready:
            sim.idle_until_next_arrival()
            continue

        state = min(ready, key=lambda s: s.remaining_time)

        if state is not current:
            if current is not None:
                logger.debug("srtf: P%d preempts P%d at t=%d", state.pid, current.pid, sim.time)
                sim.record(current, slice_start, sim.time)
            state.dispatch(sim.time)
            slice_start = sim.time
            current = state

        would_finish = sim.time + state.remaining_time
        arrivals = [
            s.process.arrival_time
            for s in sim.states
            if not s.is_completed and sim.time < s.process.arrival_time < would_finish
        ]
        run_until = min(arrivals) if arrivals else would_finish

        state.run_for(run_until - sim.time)
        sim.time = run_until

        if state.is_completed:
            sim.record(state, slice_start, sim.time)
            sim.complete(state)
            current = None

    return sim.finish("srtf", ALGORITHM_NAMES["srtf"])


def round_robin_name(quantum: int) -> str:
    return f"Round Robin (q={quantum})"


ALGORITHM_NAMES = {
    "fcfs": "First Come First Serve",
    "sjf": "Shortest Job First",
    "rr": "Round Robin",
    "priority": "Priority Scheduling",
    "srtf": "Shortest Remaining Time First",
    "hrrn": "Highest Response Ratio Next",
}

ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "rr": schedule_rr,
    "priority": schedule_priority,
    "srtf": schedule_srtf,
    "hrrn": schedule_hrrn,
}

QUANTUM_ALGORITHMS = {"rr"}


@dataclass(frozen=True)
class Algorithm:
    """
    A configured scheduling policy. ``execute`` never mutates its input and
    returns a self-contained result.
    """

    key: str
    quantum: Optional[int] = None

    @property
    def name(self) -> str:
        if self.key == "rr" and self.quantum is not None:
            return round_robin_name(self.quantum)
        return ALGORITHM_NAMES[self.key]

    def execute(self, processes: Sequence[Process]) -> ScheduleResult:
        return ALGORITHMS[self.key](processes, quantum=self.quantum)


def make_algorithm(name: str, quantum: Optional[int] = None) -> Algorithm:
    """
    Build a configured algorithm. The quantum is validated up front for
    Round Robin and dropped for every other policy.
    """
    key = name.lower()
    if key not in ALGORITHMS:
        raise InvalidWorkloadError(
            f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})"
        )
    if key in QUANTUM_ALGORITHMS:
        return Algorithm(key=key, quantum=validate_quantum(quantum))
    return Algorithm(key=key)


def default_lineup(quantum: int = 2) -> List[Algorithm]:
    """The six policies in their canonical comparison order."""
    return [
        make_algorithm("fcfs"),
        make_algorithm("sjf"),
        make_algorithm("rr", quantum=quantum),
        make_algorithm("priority"),
        make_algorithm("srtf"),
        make_algorithm("hrrn"),
    ]


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    return make_algorithm(name, quantum=quantum).execute(processes)
