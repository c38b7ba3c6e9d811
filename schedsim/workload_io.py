from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List

from .models import Process
from .validation import InvalidWorkloadError, validate_processes

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a validated list of
    Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise InvalidWorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    validate_processes(processes)
    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidWorkloadError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise InvalidWorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping) -> Process:
    try:
        pid = int(mapping["pid"])
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = int(priority_val) if priority_val not in (None, "") else 0
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidWorkloadError(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def dump_workload(processes: List[Process], path: str | Path) -> None:
    """
    Write processes to JSON or CSV, using the same columns ``load_workload``
    reads. Used to export generated scenarios.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    rows = [
        {"pid": p.pid, "arrival_time": p.arrival_time, "burst_time": p.burst_time, "priority": p.priority}
        for p in processes
    ]

    if suffix == ".json":
        with path.open("w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2)
    elif suffix == ".csv":
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=["pid", "arrival_time", "burst_time", "priority"])
            writer.writeheader()
            writer.writerows(rows)
    else:
        raise InvalidWorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("Wrote %d processes to %s", len(processes), path)
