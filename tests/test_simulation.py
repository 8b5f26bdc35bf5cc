import pytest

from schedsim.models import Process
from schedsim.simulation import CpuState, SimulationState


def _state():
    return SimulationState(
        [
            Process(1, arrival_time=0, burst_time=3),
            Process(2, arrival_time=5, burst_time=1),
        ]
    )


def test_run_for_merges_contiguous_slices():
    state = _state()
    state.run_for(0, 1)
    state.run_for(0, 1)
    assert state.state is CpuState.RUNNING
    assert [(s.pid, s.start_time, s.end_time) for s in state.timeline] == [(1, 0, 2)]


def test_run_for_stops_at_completion():
    state = _state()
    assert state.run_for(0, 10) == 3
    assert state.clock == 3
    assert state.rows[0].completion_time == 3
    assert state.state is CpuState.IDLE


def test_idle_jumps_to_next_arrival_then_done():
    state = _state()
    state.run_for(0, 3)
    assert state.eligible() == []
    state.idle_until_next_arrival()
    assert state.clock == 5
    state.run_for(1, 2)
    assert state.state is CpuState.DONE
    assert [r.waiting_time for r in state.finished_rows()] == [0, 0]
    assert [(s.pid, s.start_time, s.end_time) for s in state.timeline] == [(1, 0, 3), (2, 5, 6)]


def test_input_records_untouched():
    procs = [Process(1, arrival_time=0, burst_time=2)]
    state = SimulationState(procs)
    state.run_for(0, 2)
    assert procs[0].burst_time == 2
    assert state.remaining == [0]


def test_finished_rows_before_done():
    with pytest.raises(RuntimeError):
        _state().finished_rows()


def test_process_validation():
    with pytest.raises(ValueError):
        Process(1, arrival_time=-1, burst_time=2)
    with pytest.raises(ValueError):
        Process(1, arrival_time=0, burst_time=0)
    with pytest.raises(ValueError):
        Process(1, arrival_time=0, burst_time=1, priority=-3)


def test_running_follows_dispatch_and_completion():
    state = _state()
    assert state.state is CpuState.IDLE
    state.run_for(0, 1)
    assert state.running == 0
    state.run_for(0, 2)
    # Finishing a process hands the CPU back before the next dispatch.
    assert state.running is None
    state.idle_until_next_arrival()
    assert state.state is CpuState.IDLE
    state.run_for(1, 1)
    assert state.state is CpuState.DONE
