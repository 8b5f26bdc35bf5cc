import io

from rich.console import Console

from schedsim.algorithms import FCFS_TITLE, RR_TITLE, run_all, schedule_fcfs, schedule_rr, schedule_sjf
from schedsim.models import Process
from schedsim.report import ReportSink, build_rich_gantt, render_title


def _console():
    return Console(file=io.StringIO(), width=120, color_system=None)


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=5),
        Process(2, arrival_time=5, burst_time=3),
    ]


def test_render_title_banner():
    banner = render_title("Priority").splitlines()
    assert banner[0] == "-" * 16
    assert banner[1].strip() == "Priority"
    assert banner[2] == banner[0]


def test_gantt_time_marks():
    res = schedule_fcfs([Process(1, arrival_time=0, burst_time=2), Process(2, arrival_time=6, burst_time=2)])
    _panel, marks = build_rich_gantt(res.timeline)
    assert marks.split() == ["0", "2", "6", "8"]


def test_gantt_shows_full_pid_for_one_tick_slice():
    res = schedule_sjf([Process(12, arrival_time=0, burst_time=1), Process(1, arrival_time=0, burst_time=1)])
    panel, marks = build_rich_gantt(res.timeline)
    console = _console()
    console.print(panel)
    out = console.file.getvalue()
    assert "   12   |" in out
    assert marks.split() == ["0", "1", "2"]
    # Tick marks sit under the left edge of each cell.
    assert marks.index("1") == len("|   12   ")


def test_gantt_idle_gap_gets_its_own_cell():
    res = schedule_fcfs([Process(1, arrival_time=0, burst_time=2), Process(2, arrival_time=6, burst_time=2)])
    panel, _marks = build_rich_gantt(res.timeline)
    console = _console()
    console.print(panel)
    assert "|   -    |" in console.file.getvalue()


def test_gantt_empty():
    _panel, marks = build_rich_gantt([])
    assert marks == ""


def test_sink_writes_report():
    console = _console()
    ReportSink(console).emit(schedule_fcfs(_procs()))
    out = console.file.getvalue()
    assert FCFS_TITLE in out
    assert "Gantt schedule" in out
    assert "Schedule table" in out
    assert "Turnaround" in out
    # Average wait 0, average turnaround 4, throughput 2/8.
    assert "0.00" in out
    assert "4.00" in out
    assert "0.25/t" in out


def test_sink_shows_quantum_for_rr():
    console = _console()
    ReportSink(console)(schedule_rr(_procs(), quantum=3))
    out = console.file.getvalue()
    assert RR_TITLE in out
    assert "Quantum: 3" in out


def test_run_all_in_order():
    seen = []
    results = run_all(_procs(), sink=seen.append)
    assert [r.algorithm for r in results] == [r.algorithm for r in seen]
    assert len(results) == 4


def test_run_all_parallel_shares_one_sink():
    console = _console()
    results = run_all(_procs(), quantum=2, sink=ReportSink(console), max_workers=4)
    out = console.file.getvalue()
    assert [r.algorithm for r in results][0] == FCFS_TITLE
    for result in results:
        assert out.count(result.algorithm) >= 1
    assert out.count("Schedule table") == 4
