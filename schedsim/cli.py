from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, DEFAULT_QUANTUM, run_algorithm, run_all
from .errors import InvalidArguments, SchedulerError
from .report import ReportSink
from .workload_io import load_workload

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise InvalidArguments(message)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, RR).",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging verbosity on stderr (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    all_parser = subparsers.add_parser(
        "all",
        help="Run every algorithm on a workload file and print each report.",
    )
    all_parser.add_argument("workload", help="Path to CSV or JSON workload file.")
    all_parser.add_argument(
        "--quantum",
        "-q",
        type=_positive_int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    all_parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run the engines on a thread pool; report order is then not fixed.",
    )

    run_parser = subparsers.add_parser("run", help="Run a single scheduling algorithm on a workload file.")
    run_parser.add_argument("workload", help="Path to CSV or JSON workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=_positive_int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin, ignored otherwise (default: {DEFAULT_QUANTUM}).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument("workload", help="Path to CSV or JSON workload file.")
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: all).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=_positive_int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(level: str) -> None:
    """Send the package's log records to stderr through rich."""
    package_logger = logging.getLogger("schedsim")
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _compare_table(workload: str, results) -> Table:
    table = Table(title=f"Algorithm comparison: {workload}", box=box.SIMPLE_HEAVY)
    table.add_column("Algorithm")
    table.add_column("Quantum", justify="right")
    table.add_column("Avg waiting", justify="right")
    table.add_column("Avg turnaround", justify="right")
    table.add_column("Throughput", justify="right")

    for result in results:
        table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{result.system.avg_waiting:.2f}",
            f"{result.system.avg_turnaround:.2f}",
            f"{result.system.throughput:.3f}",
        )
    return table


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except InvalidArguments as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        return 2

    configure_logging(args.log_level)
    console = console or Console()
    sink = ReportSink(console)

    try:
        processes = load_workload(Path(args.workload))

        if args.command == "all":
            workers = len(ALGORITHMS) if args.parallel else None
            run_all(processes, quantum=args.quantum, sink=sink, max_workers=workers)
            return 0

        if args.command == "run":
            sink(run_algorithm(args.algorithm, processes, quantum=args.quantum))
            return 0

        if args.command == "compare":
            results = [run_algorithm(alg, processes, quantum=args.quantum) for alg in args.algorithms]
            console.print(_compare_table(args.workload, results))
            return 0
    except SchedulerError as exc:
        logger.error("%s", exc)
        return 1

    logger.error("Unknown command: %s", args.command)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
