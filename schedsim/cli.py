from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List

from rich.console import Console
from rich.logging import RichHandler

from .algorithms import ALGORITHMS, QUANTUM_ALGORITHMS, default_lineup, make_algorithm
from .models import ScheduleResult
from .report import print_comparison, print_overall, print_processes, print_result, print_summary_report
from .scenarios import DEFAULT_SEED, build_scenarios
from .validation import SchedulingError
from .workload_io import dump_workload, load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, RR, Priority, SRTF, HRRN).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for info, -vv for debug).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum for round-robin (default: 2, ignored by other algorithms).",
    )
    run_parser.add_argument(
        "--no-gantt",
        action="store_true",
        help="List the timeline slice by slice instead of drawing a Gantt chart.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help=f"Algorithms to compare (default: {' '.join(ALGORITHMS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum used for RR when included (default: 2).",
    )

    scenarios_parser = subparsers.add_parser(
        "scenarios",
        help="Evaluate all algorithms over the generated scenario suite.",
    )
    scenarios_parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SEED,
        help=f"Seed for the randomized scenarios (default: {DEFAULT_SEED}).",
    )
    scenarios_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum used for RR (default: 2).",
    )
    scenarios_parser.add_argument(
        "--summary-only",
        action="store_true",
        help="Skip per-algorithm detail and print only comparisons and the summary report.",
    )
    scenarios_parser.add_argument(
        "--export",
        metavar="DIR",
        default=None,
        help="Also write each generated scenario as a JSON workload into DIR.",
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _run_scenarios(args: argparse.Namespace, console: Console) -> None:
    algorithms = default_lineup(quantum=args.quantum)
    scenarios = build_scenarios(seed=args.seed)
    scenario_results: Dict[str, List[ScheduleResult]] = {}

    if args.export:
        export_dir = Path(args.export)
        export_dir.mkdir(parents=True, exist_ok=True)
        for name, processes in scenarios.items():
            dump_workload(processes, export_dir / (name.lower().replace(" ", "_") + ".json"))

    for name, processes in scenarios.items():
        console.rule(f"[bold]Test scenario: {name}[/bold]")
        print_processes(console, processes)

        results = []
        for algorithm in algorithms:
            logger.info("Running %s on %s", algorithm.name, name)
            result = algorithm.execute(processes)
            results.append(result)
            if not args.summary_only:
                console.print()
                print_result(console, result, show_gantt=False)

        console.print()
        print_comparison(console, f"Algorithm comparison for {name}", results)
        scenario_results[name] = results

    console.rule("[bold]Overall[/bold]")
    print_overall(console, scenario_results)

    console.rule("[bold]Summary report[/bold]")
    print_summary_report(console, scenario_results)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    console = Console()

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            algorithm = make_algorithm(args.algorithm, quantum=args.quantum)
            result = algorithm.execute(processes)
            print_result(console, result, show_gantt=not args.no_gantt)
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            results = []
            for alg in args.algorithms:
                q = args.quantum if alg.lower() in QUANTUM_ALGORITHMS else None
                results.append(make_algorithm(alg, quantum=q).execute(processes))
            print_comparison(console, "Algorithm comparison", results)
            return 0

        if args.command == "scenarios":
            _run_scenarios(args, console)
            return 0
    except (SchedulingError, OSError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
