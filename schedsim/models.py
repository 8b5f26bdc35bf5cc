from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0

    def __post_init__(self) -> None:
        if self.arrival_time < 0:
            raise ValueError(f"Process {self.pid}: arrival_time must be >= 0")
        if self.burst_time <= 0:
            raise ValueError(f"Process {self.pid}: burst_time must be > 0")
        if self.priority < 0:
            raise ValueError(f"Process {self.pid}: priority must be >= 0")


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessMetrics:
    pid: int
    priority: int
    burst_time: int
    arrival_time: int
    waiting_time: int
    turnaround_time: int
    completion_time: int


@dataclass
class SystemMetrics:
    avg_waiting: float
    avg_turnaround: float
    throughput: float
    makespan: int
    cpu_busy_time: int
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None
