"""
CPU scheduling simulator.

Runs a fixed set of processes through six classical single-CPU policies
(FCFS, SJF, Round Robin, Priority, SRTF, HRRN) and reports per-process and
aggregate performance metrics for comparison.
"""

__version__ = "0.1.0"

__all__ = ["algorithms", "cli", "models", "report", "scenarios"]
