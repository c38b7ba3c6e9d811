import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    default_lineup,
    make_algorithm,
    response_ratio,
    run_algorithm,
    schedule_fcfs,
    schedule_hrrn,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
    schedule_srtf,
)
from schedsim.models import IDLE_PID, Process
from schedsim.validation import InvalidWorkloadError


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=1, burst_time=3, priority=1),
        Process(3, arrival_time=2, burst_time=8, priority=3),
    ]


def _slices(result):
    return [(s.pid, s.start_time, s.end_time) for s in result.timeline]


def _by_pid(result):
    return {p.pid: p for p in result.processes}


def test_fcfs_order():
    res = schedule_fcfs(_procs())
    assert [s.pid for s in res.timeline] == [1, 2, 3]
    waits = _by_pid(res)
    assert waits[1].waiting_time == 0
    assert waits[2].waiting_time == 4
    assert waits[3].waiting_time == 6


def test_fcfs_two_processes():
    res = schedule_fcfs([Process(1, 0, 5), Process(2, 1, 3)])
    assert _slices(res) == [(1, 0, 5), (2, 5, 8)]
    assert [p.waiting_time for p in res.processes] == [0, 4]


def test_fcfs_response_equals_waiting():
    res = schedule_fcfs(_procs())
    for p in res.processes:
        assert p.response_time == p.waiting_time


def test_fcfs_sorts_by_arrival_keeping_input_order_on_ties():
    res = schedule_fcfs([Process(9, 3, 1), Process(4, 0, 2), Process(7, 0, 2)])
    assert [s.pid for s in res.timeline] == [4, 7, 9]


def test_sjf_order():
    res = schedule_sjf(_procs())
    assert [s.pid for s in res.timeline] == [1, 2, 3]


def test_sjf_tie_goes_to_first_in_scan_order():
    res = schedule_sjf([Process(7, 0, 4), Process(2, 0, 4)])
    assert [s.pid for s in res.timeline] == [7, 2]


def test_sjf_does_not_preempt():
    res = schedule_sjf([Process(1, 0, 10), Process(2, 1, 1)])
    assert _slices(res) == [(1, 0, 10), (2, 10, 11)]


def test_rr_quantum_2():
    res = schedule_rr([Process(1, 0, 5), Process(2, 0, 3)], quantum=2)
    assert _slices(res) == [(1, 0, 2), (2, 2, 4), (1, 4, 6), (2, 6, 7), (1, 7, 8)]
    assert _by_pid(res)[1].completion_time == 8
    assert res.quantum == 2
    assert res.algorithm == "Round Robin (q=2)"


def test_rr_new_arrival_queued_before_preempted_process():
    res = schedule_rr([Process(1, 0, 4), Process(2, 2, 2)], quantum=2)
    assert _slices(res) == [(1, 0, 2), (2, 2, 4), (1, 4, 6)]


def test_rr_response_time_recorded_at_first_dispatch():
    res = schedule_rr([Process(1, 0, 5), Process(2, 0, 3)], quantum=2)
    procs = _by_pid(res)
    assert procs[1].response_time == 0
    assert procs[2].response_time == 2


def test_rr_busy_time_matches_bursts():
    res = schedule_rr(_procs(), quantum=2)
    assert {s.pid for s in res.timeline} == {1, 2, 3}
    assert res.system.cpu_busy_time == sum(p.burst_time for p in _procs())


@pytest.mark.parametrize("quantum", [None, 0, -3])
def test_rr_rejects_bad_quantum(quantum):
    with pytest.raises(InvalidWorkloadError):
        schedule_rr(_procs(), quantum=quantum)


def test_priority_static():
    res = schedule_priority(_procs())
    # P1 is alone at t=0; P2 (priority 1) beats P3 once P1 finishes
    assert [s.pid for s in res.timeline] == [1, 2, 3]


def test_priority_ties_keep_scan_order():
    res = schedule_priority([Process(1, 0, 2, priority=2), Process(2, 0, 2, priority=1), Process(3, 0, 2, priority=1)])
    assert [s.pid for s in res.timeline] == [2, 3, 1]


def test_priority_is_non_preemptive():
    res = schedule_priority([Process(1, 0, 5, priority=3), Process(2, 1, 2, priority=1)])
    assert _slices(res) == [(1, 0, 5), (2, 5, 7)]


def _srtf_procs():
    return [Process(1, 0, 8), Process(2, 1, 4), Process(3, 2, 9), Process(4, 3, 5)]


def test_srtf_preempts_on_shorter_arrival():
    res = schedule_srtf(_srtf_procs())
    assert _slices(res) == [(1, 0, 1), (2, 1, 5), (4, 5, 10), (1, 10, 17), (3, 17, 26)]
    assert sum(1 for s in res.timeline if s.pid == 1) > 1


def test_srtf_metrics():
    res = schedule_srtf(_srtf_procs())
    procs = _by_pid(res)
    assert [p.pid for p in res.processes] == [2, 4, 1, 3]
    assert {pid: p.waiting_time for pid, p in procs.items()} == {1: 9, 2: 0, 3: 15, 4: 2}
    # response time is fixed at the first dispatch even though P1 is preempted
    assert procs[1].response_time == 0
    assert procs[3].response_time == 15
    assert res.avg_waiting == pytest.approx(6.5)


def test_srtf_merges_uninterrupted_runs():
    res = schedule_srtf([Process(1, 0, 10), Process(2, 2, 20), Process(3, 4, 30)])
    assert _slices(res) == [(1, 0, 10), (2, 10, 30), (3, 30, 60)]


def test_srtf_tie_uses_input_order():
    res = schedule_srtf([Process(5, 0, 3), Process(1, 0, 3)])
    assert [s.pid for s in res.timeline] == [5, 1]


def _starvation_procs():
    return [
        Process(1, 0, 3),
        Process(2, 0, 6),
        Process(3, 2, 3),
        Process(4, 5, 3),
        Process(5, 8, 3),
    ]


def test_sjf_keeps_long_job_waiting():
    procs = _by_pid(schedule_sjf(_starvation_procs()))
    assert procs[2].start_time == 12
    assert procs[2].completion_time == max(p.completion_time for p in procs.values())


def test_hrrn_lets_long_job_through():
    res = schedule_hrrn(_starvation_procs())
    assert _slices(res) == [(1, 0, 3), (2, 3, 9), (3, 9, 12), (4, 12, 15), (5, 15, 18)]
    procs = _by_pid(res)
    assert procs[2].completion_time < procs[4].completion_time


def test_response_ratio():
    assert response_ratio(Process(1, 0, 6), now=3) == pytest.approx(1.5)
    assert response_ratio(Process(1, 4, 2), now=4) == pytest.approx(1.0)


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_leading_idle_slice(name):
    res = run_algorithm(name, [Process(1, 5, 3)], quantum=2)
    assert res.timeline[0].pid == IDLE_PID
    assert (res.timeline[0].start_time, res.timeline[0].end_time) == (0, 5)
    assert res.timeline[-1].end_time == 8
    assert res.system.idle_time == 5
    assert res.cpu_utilization == pytest.approx(37.5)
    assert res.throughput == pytest.approx(1 / 8)


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_gap_between_processes_is_idle(name):
    res = run_algorithm(name, [Process(1, 0, 2), Process(2, 6, 1)], quantum=2)
    assert _slices(res) == [(1, 0, 2), (IDLE_PID, 2, 6), (2, 6, 7)]


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_input_is_left_untouched(name):
    procs = _procs()
    snapshot = list(procs)
    first = run_algorithm(name, procs, quantum=2)
    second = run_algorithm(name, procs, quantum=2)
    assert procs == snapshot
    assert _slices(first) == _slices(second)
    assert first.processes is not second.processes


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
@pytest.mark.parametrize(
    "procs",
    [
        [],
        [Process(1, 0, 2), Process(1, 1, 3)],
        [Process(1, -1, 2)],
        [Process(1, 0, 0)],
    ],
)
def test_invalid_input_rejected(name, procs):
    with pytest.raises(InvalidWorkloadError):
        run_algorithm(name, procs, quantum=2)


def test_unknown_algorithm():
    with pytest.raises(InvalidWorkloadError):
        run_algorithm("lottery", _procs())


def test_make_algorithm_drops_quantum_for_non_rr():
    alg = make_algorithm("SJF", quantum=4)
    assert alg.key == "sjf"
    assert alg.quantum is None
    assert alg.name == "Shortest Job First"


def test_make_algorithm_validates_quantum_up_front():
    with pytest.raises(InvalidWorkloadError):
        make_algorithm("rr", quantum=0)


def test_default_lineup():
    lineup = default_lineup(quantum=3)
    assert [a.key for a in lineup] == ["fcfs", "sjf", "rr", "priority", "srtf", "hrrn"]
    assert lineup[2].name == "Round Robin (q=3)"
    results = [a.execute(_procs()) for a in lineup]
    assert [r.algorithm for r in results] == [a.name for a in lineup]
