from __future__ import annotations

from typing import List, Tuple

from .errors import EmptyProcessList
from .models import ProcessMetrics, ScheduleResult, SystemMetrics


def average_times(rows: List[ProcessMetrics]) -> Tuple[float, float]:
    """(average waiting, average turnaround), both over every row."""
    count = len(rows)
    total_wait = sum(r.waiting_time for r in rows)
    total_turnaround = sum(r.turnaround_time for r in rows)
    return total_wait / count, total_turnaround / count


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute averages, throughput and CPU utilization given populated
    per-process rows and timeline slices.

    Throughput is taken against the last completion tick across all rows,
    never against whatever tick the engine loop stopped on.
    """
    if not result.processes:
        raise EmptyProcessList(result.algorithm)

    avg_waiting, avg_turnaround = average_times(result.processes)
    makespan = max(p.completion_time for p in result.processes)
    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)

    system = SystemMetrics(
        avg_waiting=avg_waiting,
        avg_turnaround=avg_turnaround,
        throughput=len(result.processes) / makespan,
        makespan=makespan,
        cpu_busy_time=cpu_busy_time,
        cpu_utilization=cpu_busy_time / makespan,
    )
    result.system = system
    return system
