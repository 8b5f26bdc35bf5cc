"""
schedsim package.

Simulates FCFS, shortest-job-first, priority and round-robin CPU
scheduling over a fixed workload and reports per-process timing metrics
alongside a Gantt timeline.
"""

from .algorithms import (
    ALGORITHMS,
    run_algorithm,
    run_all,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from .errors import EmptyProcessList, InputUnreadable, InvalidArguments, MalformedRecord, SchedulerError
from .models import Process, ProcessMetrics, ScheduledSlice, ScheduleResult, SystemMetrics

__all__ = [
    "ALGORITHMS",
    "EmptyProcessList",
    "InputUnreadable",
    "InvalidArguments",
    "MalformedRecord",
    "Process",
    "ProcessMetrics",
    "ScheduleResult",
    "ScheduledSlice",
    "SchedulerError",
    "SystemMetrics",
    "run_algorithm",
    "run_all",
    "schedule_fcfs",
    "schedule_priority",
    "schedule_rr",
    "schedule_sjf",
]
