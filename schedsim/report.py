from __future__ import annotations

import threading
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .metrics import compute_system_metrics
from .models import ScheduledSlice, ScheduleResult

CELL_WIDTH = 8
PALETTE = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def render_title(title: str) -> str:
    rule = "-" * (len(title) * 2)
    return "\n".join([rule, " " * (len(title) // 2) + " " + title, rule])


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build the Gantt strip as a Rich Panel plus its tick line.

    Every slice is one ``|  pid  |`` cell, wide enough for the whole pid.
    The tick line puts each cell's start tick under its left edge and
    ends with the last stop tick. A gap where the CPU sat idle gets its
    own dim ``-`` cell.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt schedule")
        return panel, ""

    pid_colors: Dict[int, str] = {}
    strip = Text("|")
    ticks = ""
    clock = 0

    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        if sl.start_time > clock:
            strip.append("-".center(CELL_WIDTH), style="dim")
            strip.append("|")
            ticks += f"{clock:<{CELL_WIDTH + 1}}"

        label = str(sl.pid)
        width = max(CELL_WIDTH, len(label) + 2)
        color = pid_colors.setdefault(sl.pid, PALETTE[len(pid_colors) % len(PALETTE)])
        strip.append(label.center(width), style=f"bold {color}")
        strip.append("|")
        ticks += f"{sl.start_time:<{width + 1}}"
        clock = sl.end_time

    ticks += str(clock)

    grid = Table.grid(padding=(0, 0))
    grid.add_row(strip)
    grid.add_row(Text(ticks))
    return Panel.fit(grid, title="Gantt schedule"), ticks


def build_schedule_table(result: ScheduleResult) -> Table:
    system = result.system or compute_system_metrics(result)

    table = Table(title="Schedule table", box=box.SIMPLE_HEAVY, show_footer=True)
    table.add_column("ID", justify="center")
    table.add_column("Priority", justify="center")
    table.add_column("Burst", justify="right")
    table.add_column("Arrival", justify="right")
    table.add_column("Wait", justify="right", footer=f"Average\n{system.avg_waiting:.2f}")
    table.add_column("Turnaround", justify="right", footer=f"Average\n{system.avg_turnaround:.2f}")
    table.add_column("Exit", justify="right", footer=f"Throughput\n{system.throughput:.2f}/t")

    for p in result.processes:
        table.add_row(
            str(p.pid),
            str(p.priority),
            str(p.burst_time),
            str(p.arrival_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.completion_time),
        )
    return table


class ReportSink:
    """
    Writes schedule reports to a console.

    One sink may be shared by engines running on several threads; each
    report is written whole while holding the sink's lock.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self._lock = threading.Lock()

    def __call__(self, result: ScheduleResult) -> None:
        self.emit(result)

    def emit(self, result: ScheduleResult) -> None:
        panel, _ticks = build_rich_gantt(result.timeline)
        table = build_schedule_table(result)

        with self._lock:
            self.console.print(render_title(result.algorithm), highlight=False)
            if result.quantum is not None:
                self.console.print(f"[bold]Quantum:[/bold] {result.quantum}")
            self.console.print(panel)
            self.console.print()
            self.console.print(table)
