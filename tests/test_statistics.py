"""Tests for netload.statistics module."""

import pytest

from netload.packet import Sample
from netload.statistics import ReceptionState, StatsReport, compute, jitter, loss


def collect(samples, nbytes=32, at=1000):
    """Build a reception state from (sequence, delay_ms) pairs."""
    state = ReceptionState()
    for sequence, delay in samples:
        state.count_bytes(nbytes, at)
        state.add(Sample(sequence, delay, nbytes))
    return state


def test_average_delay_is_arithmetic_mean():
    report = compute(collect([(1, 10), (2, 20), (3, 30)]), finalize_time_ms=2000)
    assert report.avg_delay_ms == pytest.approx(20.0)


def test_loss_of_ten_expected_eight_received():
    lost, percent = loss(10, 8)
    assert lost == 2
    assert percent == pytest.approx(20.0)


def test_loss_without_expected_packets_is_zero():
    assert loss(0, 0) == (0, 0.0)


def test_compute_counts_gaps_as_lost():
    state = collect([(s, 5) for s in (1, 2, 3, 5, 6, 7, 9, 10)])
    report = compute(state, finalize_time_ms=2000)
    assert report.expected == 10
    assert report.received == 8
    assert report.lost == 2
    assert report.loss_percent == pytest.approx(20.0)


def test_missing_tail_is_not_counted_as_lost():
    # packets 4 and 5 of a 5 packet run never arrived
    report = compute(collect([(1, 5), (2, 5), (3, 5)]), finalize_time_ms=2000)
    assert report.expected == 3
    assert report.lost == 0


def test_empty_state_reports_no_packets():
    report = compute(ReceptionState(), finalize_time_ms=5000)
    assert report.empty
    assert report.expected == 0
    assert report.received == 0
    assert report.lost == 0
    assert report.loss_percent == 0.0
    assert report.avg_delay_ms == 0.0
    assert report.throughput_bps == 0.0
    assert report.throughput_kbps == 0.0
    assert "  NO PACKETS RECEIVED" in report.lines()


def test_short_datagrams_only_still_report_no_packets():
    state = ReceptionState()
    state.count_bytes(8, 1000)
    assert compute(state, finalize_time_ms=3000).empty


def test_repeated_sequence_overwrites_delay_but_counts_in_average():
    state = collect([(1, 10), (1, 30)])
    assert state.delays == {1: 30}
    assert state.arrivals == [10, 30]

    report = compute(state, finalize_time_ms=2000)
    assert report.received == 1
    assert report.expected == 1
    assert report.avg_delay_ms == pytest.approx(20.0)


def test_negative_delays_are_kept():
    report = compute(collect([(1, -4), (2, 6)]), finalize_time_ms=2000)
    assert report.min_delay_ms == -4
    assert report.max_delay_ms == 6
    assert report.avg_delay_ms == pytest.approx(1.0)


def test_throughput_uses_at_least_one_second():
    state = collect([(1, 1)], nbytes=1000, at=1000)
    report = compute(state, finalize_time_ms=1500)
    assert report.elapsed_ms == 500
    assert report.throughput_bps == pytest.approx(8000.0)
    assert report.throughput_kbps == pytest.approx(8.0)


def test_throughput_over_whole_seconds():
    state = collect([(1, 1), (2, 1)], nbytes=1000, at=1000)
    report = compute(state, finalize_time_ms=5999)
    assert report.total_bytes == 2000
    assert report.elapsed_ms == 4999
    assert report.throughput_bps == pytest.approx(4000.0)


def test_first_receive_anchor_is_set_once():
    state = ReceptionState()
    state.count_bytes(10, 1000)
    state.count_bytes(10, 2000)
    assert state.first_receive_ms == 1000
    assert state.total_bytes == 20


@pytest.mark.parametrize("delays, expected", [
    ([], 0.0),
    ([5], 0.0),
    ([10, 20], 10.0),
    ([10, 20, 30], 10.0),
    ([10, 20, 20], 9.375),
])
def test_jitter_rfc1889(delays, expected):
    assert jitter(delays) == pytest.approx(expected)


def test_report_lines_show_loss_and_throughput():
    state = collect([(s, 10) for s in (1, 2, 3, 5, 6, 7, 9, 10)], nbytes=100)
    lines = "\n".join(compute(state, finalize_time_ms=2000).lines())
    assert " 20.0%" in lines
    assert "Throughput:  6400.00 bps (6.40 Kbps)" in lines
    assert "Received:    800 bytes in 1000 ms" in lines


def test_dump_writes_report(capsys):
    StatsReport(expected=5, received=5, total_bytes=160, elapsed_ms=20, throughput_bps=1280.0).dump()
    out = capsys.readouterr().out
    assert "Expected" in out
    assert "1280.00 bps" in out


def test_dump_of_empty_report_goes_to_stderr(capsys):
    StatsReport().dump()
    captured = capsys.readouterr()
    assert "NO PACKETS RECEIVED" in captured.err
    assert "NO PACKETS RECEIVED" not in captured.out
