from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .models import Process, ProcessMetrics, ScheduledSlice

logger = logging.getLogger(__name__)


class CpuState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


@dataclass
class SimulationState:
    """
    Working state of a single engine run.

    Processes are identified by their index in the input sequence; ``pid``
    is only copied into slices and rows for display. The remaining-burst
    table is a private copy, so the input records are never touched.
    """

    processes: Sequence[Process]
    clock: int = 0
    running: Optional[int] = None
    remaining: List[int] = field(init=False, default_factory=list)
    rows: List[Optional[ProcessMetrics]] = field(init=False, default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.remaining = [p.burst_time for p in self.processes]
        self.rows = [None] * len(self.processes)

    @property
    def state(self) -> CpuState:
        if self.is_done:
            return CpuState.DONE
        if self.running is None:
            return CpuState.IDLE
        return CpuState.RUNNING

    @property
    def is_done(self) -> bool:
        return all(r == 0 for r in self.remaining)

    def is_eligible(self, index: int) -> bool:
        """Arrived by the current clock and still has work left."""
        return self.processes[index].arrival_time <= self.clock and self.remaining[index] > 0

    def eligible(self) -> List[int]:
        return [i for i in range(len(self.processes)) if self.is_eligible(i)]

    def next_arrival(self) -> Optional[int]:
        future = [
            p.arrival_time
            for i, p in enumerate(self.processes)
            if p.arrival_time > self.clock and self.remaining[i] > 0
        ]
        return min(future) if future else None

    def idle_until_next_arrival(self) -> None:
        """
        Nothing can run: move the clock to the next arrival without
        recording a slice.
        """
        nxt = self.next_arrival()
        if nxt is None:
            # Only reachable if every remaining process has already arrived,
            # in which case something would have been eligible.
            raise RuntimeError("idle CPU with no future arrivals")
        logger.debug("t=%d: cpu idle until t=%d", self.clock, nxt)
        self.running = None
        self.clock = nxt

    def run_for(self, index: int, ticks: int) -> int:
        """
        Run process ``index`` for up to ``ticks`` ticks starting at the
        current clock. Returns the number of ticks actually used, which is
        shorter than ``ticks`` when the process finishes early.
        """
        used = min(ticks, self.remaining[index])
        if used <= 0:
            raise ValueError(f"process at index {index} has nothing left to run")

        proc = self.processes[index]
        start = self.clock
        self.clock += used
        self.remaining[index] -= used
        self.running = index
        self._record_slice(proc.pid, start, self.clock)

        if self.remaining[index] == 0:
            self._finalize(index)
            self.running = None
        return used

    def _record_slice(self, pid: int, start: int, end: int) -> None:
        last = self.timeline[-1] if self.timeline else None
        if last is not None and last.pid == pid and last.end_time == start:
            last.end_time = end
        else:
            self.timeline.append(ScheduledSlice(pid=pid, start_time=start, end_time=end))

    def _finalize(self, index: int) -> None:
        p = self.processes[index]
        completion_time = self.clock
        turnaround_time = completion_time - p.arrival_time
        waiting_time = turnaround_time - p.burst_time
        self.rows[index] = ProcessMetrics(
            pid=p.pid,
            priority=p.priority,
            burst_time=p.burst_time,
            arrival_time=p.arrival_time,
            waiting_time=waiting_time,
            turnaround_time=turnaround_time,
            completion_time=completion_time,
        )
        logger.debug("t=%d: process %s finished (wait=%d)", completion_time, p.pid, waiting_time)

    def finished_rows(self) -> List[ProcessMetrics]:
        """Rows in input order; only valid once every process is done."""
        rows = [r for r in self.rows if r is not None]
        if len(rows) != len(self.processes):
            raise RuntimeError("simulation ended before every process completed")
        return rows
