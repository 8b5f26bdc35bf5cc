from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple

from .errors import EmptyProcessList
from .metrics import compute_system_metrics
from .models import Process, ScheduleResult
from .simulation import CpuState, SimulationState

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2

FCFS_TITLE = "First-come, first-serve"
SJF_TITLE = "Shortest-job-first"
PRIORITY_TITLE = "Priority"
RR_TITLE = "Round-robin"


def _finish(title: str, state: SimulationState, quantum: Optional[int] = None) -> ScheduleResult:
    result = ScheduleResult(
        algorithm=title,
        quantum=quantum,
        processes=state.finished_rows(),
        timeline=state.timeline,
    )
    system = compute_system_metrics(result)
    logger.info(
        "%s: %d processes, avg wait %.2f, avg turnaround %.2f, throughput %.3f",
        title,
        len(result.processes),
        system.avg_waiting,
        system.avg_turnaround,
        system.throughput,
    )
    return result


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive).

    Processes run strictly in the order given, not re-sorted by arrival.
    When the next process has not arrived yet the clock jumps forward to
    its arrival; the gap is left out of the timeline.
    """
    if not processes:
        raise EmptyProcessList(FCFS_TITLE)

    state = SimulationState(processes)
    for index, p in enumerate(processes):
        if state.clock < p.arrival_time:
            state.clock = p.arrival_time
        logger.debug("t=%d: dispatch %s", state.clock, p.pid)
        state.run_for(index, p.burst_time)

    return _finish(FCFS_TITLE, state)


SelectionKey = Callable[[SimulationState, int], Tuple[int, ...]]


def _shortest_remaining_key(state: SimulationState, index: int) -> Tuple[int, ...]:
    return (state.remaining[index], index)


def _priority_key(state: SimulationState, index: int) -> Tuple[int, ...]:
    return (state.processes[index].priority, state.remaining[index], index)


def _schedule_per_tick(title: str, processes: Sequence[Process], key: SelectionKey) -> ScheduleResult:
    """
    Tick-driven preemptive loop shared by SJF and Priority-SJF.

    Each tick the eligible process with the smallest ``key`` runs for one
    tick. Consecutive ticks won by the same process collapse into a single
    slice.
    """
    if not processes:
        raise EmptyProcessList(title)

    state = SimulationState(processes)

    while state.state is not CpuState.DONE:
        ready = state.eligible()
        if not ready:
            state.idle_until_next_arrival()
            continue

        current = min(ready, key=lambda i: key(state, i))
        if current != state.running:
            logger.debug("t=%d: dispatch %s", state.clock, processes[current].pid)
        state.run_for(current, 1)

    return _finish(title, state)


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First, preemptive at every tick.

    Picks the smallest remaining burst among arrived, unfinished processes;
    ties go to the lowest input index.
    """
    return _schedule_per_tick(SJF_TITLE, processes, _shortest_remaining_key)


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Priority-modulated preemptive SJF.

    Lower numeric priority value means higher priority. Candidates are
    ordered by priority, then remaining burst, then input index.
    """
    return _schedule_per_tick(PRIORITY_TITLE, processes, _priority_key)


def _next_round_robin(state: SimulationState, cursor: int) -> Optional[int]:
    previous = state.running
    n = len(state.processes)
    for offset in range(n):
        index = (cursor + offset) % n
        if index != previous and state.is_eligible(index):
            return index
    # The process that just ran may be the only one left to run.
    if previous is not None and state.is_eligible(previous):
        return previous
    return None


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin with a fixed time quantum.

    A cursor walks the input sequence circularly, advancing one position
    per dispatch round. Each round runs the first eligible process at or
    after the cursor other than the one that ran last round, for at most
    one quantum.
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    if quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")
    if not processes:
        raise EmptyProcessList(RR_TITLE)

    state = SimulationState(processes)
    cursor = 0

    while state.state is not CpuState.DONE:
        current = _next_round_robin(state, cursor)
        if current is None:
            state.idle_until_next_arrival()
            continue

        logger.debug("t=%d: dispatch %s (cursor %d)", state.clock, processes[current].pid, cursor)
        state.run_for(current, quantum)
        cursor = (cursor + 1) % len(processes)

    return _finish(RR_TITLE, state, quantum)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum only matters for round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}'")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)


def run_all(
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    sink: Optional[Callable[[ScheduleResult], None]] = None,
    max_workers: Optional[int] = None,
) -> List[ScheduleResult]:
    """
    Run every algorithm against the same workload.

    Results come back in ``ALGORITHMS`` order. With ``max_workers`` above 1
    the engines run on a thread pool; ``sink`` is then called from worker
    threads and must serialize its own writes (``ReportSink`` does).
    """
    processes = list(processes)

    def run_one(name: str) -> ScheduleResult:
        result = run_algorithm(name, processes, quantum=quantum)
        if sink is not None:
            sink(result)
        return result

    if max_workers is None or max_workers <= 1:
        return [run_one(name) for name in ALGORITHMS]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(run_one, ALGORITHMS))
