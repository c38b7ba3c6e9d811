"""
Canned process sets used for the comparative evaluation.

The random scenarios all draw from one shared generator so a given seed
reproduces the whole suite, in order.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional

from .models import Process

DEFAULT_SEED = 42


def standard_case(rng: Optional[random.Random] = None) -> List[Process]:
    return [
        Process(pid=1, arrival_time=0, burst_time=7, priority=2),
        Process(pid=2, arrival_time=2, burst_time=4, priority=1),
        Process(pid=3, arrival_time=4, burst_time=1, priority=3),
        Process(pid=4, arrival_time=5, burst_time=4, priority=2),
        Process(pid=5, arrival_time=8, burst_time=2, priority=1),
    ]


def short_processes(rng: random.Random) -> List[Process]:
    """Ten back-to-back arrivals with bursts of 1-2."""
    processes = []
    for i in range(1, 11):
        burst_time = rng.randint(1, 2)
        priority = rng.randint(1, 4)
        processes.append(Process(pid=i, arrival_time=i - 1, burst_time=burst_time, priority=priority))
    return processes


def long_processes(rng: random.Random) -> List[Process]:
    """Five spaced arrivals with bursts of 10-19."""
    processes = []
    for i in range(1, 6):
        burst_time = rng.randint(10, 19)
        priority = rng.randint(1, 4)
        processes.append(Process(pid=i, arrival_time=i * 2, burst_time=burst_time, priority=priority))
    return processes


def mixed_processes(rng: random.Random) -> List[Process]:
    """Three short, three medium and two long jobs at random arrivals, sorted by arrival."""
    processes = []
    for i in range(1, 9):
        if i <= 3:
            burst_time = rng.randint(1, 3)
        elif i <= 6:
            burst_time = rng.randint(5, 9)
        else:
            burst_time = rng.randint(11, 14)
        arrival_time = rng.randint(0, 9)
        priority = rng.randint(1, 4)
        processes.append(Process(pid=i, arrival_time=arrival_time, burst_time=burst_time, priority=priority))
    return sorted(processes, key=lambda p: p.arrival_time)


def simultaneous_arrival(rng: random.Random) -> List[Process]:
    processes = []
    for i in range(1, 6):
        burst_time = rng.randint(1, 9)
        priority = rng.randint(1, 4)
        processes.append(Process(pid=i, arrival_time=0, burst_time=burst_time, priority=priority))
    return processes


def priority_variation(rng: random.Random) -> List[Process]:
    """Eight staggered arrivals whose priority equals their id."""
    return [Process(pid=i, arrival_time=i, burst_time=rng.randint(3, 7), priority=i) for i in range(1, 9)]


SCENARIOS: Dict[str, Callable[[random.Random], List[Process]]] = {
    "Standard Case": standard_case,
    "Short Processes": short_processes,
    "Long Processes": long_processes,
    "Mixed Processes": mixed_processes,
    "Simultaneous Arrival": simultaneous_arrival,
    "Priority Variation": priority_variation,
}


def build_scenarios(seed: int = DEFAULT_SEED) -> Dict[str, List[Process]]:
    """
    Generate every scenario in order from a single seeded generator.
    """
    rng = random.Random(seed)
    return {name: factory(rng) for name, factory in SCENARIOS.items()}
