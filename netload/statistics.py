import click

from netload.utils import format_time, now_ms


class ReceptionState:
    """
    Samples collected by one receiver session. Written only by the receive
    loop; read by compute() once that loop has ended.
    """

    def __init__(self):
        self.delays = {}        # sequence -> delay_ms, last write wins
        self.arrivals = []      # delay_ms in arrival order, repeats included
        self.total_bytes = 0
        self.first_receive_ms = None

    def count_bytes(self, nbytes, timestamp_ms):
        if self.first_receive_ms is None:
            self.first_receive_ms = timestamp_ms
        self.total_bytes += nbytes

    def add(self, sample):
        self.delays[sample.sequence] = sample.delay_ms
        self.arrivals.append(sample.delay_ms)

    @property
    def received(self):
        return len(self.delays)

    @property
    def expected(self):
        if not self.delays:
            return 0
        return max(self.delays)


def loss(expected, received):
    lost = expected - received
    if expected > 0:
        return lost, lost * 100.0 / expected
    return lost, 0.0


def jitter(delays):
    """
    Interarrival jitter estimator of RFC1889 over delays in arrival order
    """
    value = 0.0
    for i in range(1, len(delays)):
        deviation = abs(delays[i] - delays[i - 1])
        if i == 1:
            value = float(deviation)
        else:
            value = value + (deviation - value) / 16
    return value


def compute(state, finalize_time_ms=None):
    if finalize_time_ms is None:
        finalize_time_ms = now_ms()

    if not state.delays:
        return StatsReport()

    expected = state.expected
    received = state.received
    lost, loss_percent = loss(expected, received)

    elapsed_ms = finalize_time_ms - state.first_receive_ms
    elapsed_sec = max(1, elapsed_ms // 1000)

    return StatsReport(
        expected=expected,
        received=received,
        lost=lost,
        loss_percent=loss_percent,
        avg_delay_ms=sum(state.arrivals) / float(len(state.arrivals)),
        min_delay_ms=min(state.arrivals),
        max_delay_ms=max(state.arrivals),
        jitter_ms=jitter(state.arrivals),
        total_bytes=state.total_bytes,
        elapsed_ms=elapsed_ms,
        throughput_bps=state.total_bytes * 8.0 / elapsed_sec)


class StatsReport:

    def __init__(self, expected=0, received=0, lost=0, loss_percent=0.0,
                 avg_delay_ms=0.0, min_delay_ms=0, max_delay_ms=0, jitter_ms=0.0,
                 total_bytes=0, elapsed_ms=0, throughput_bps=0.0):
        self.expected = expected
        self.received = received
        self.lost = lost
        self.loss_percent = loss_percent
        self.avg_delay_ms = avg_delay_ms
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self.jitter_ms = jitter_ms
        self.total_bytes = total_bytes
        self.elapsed_ms = elapsed_ms
        self.throughput_bps = throughput_bps

    @property
    def throughput_kbps(self):
        return self.throughput_bps / 1000

    @property
    def empty(self):
        return self.received == 0

    def lines(self):
        lines = [
            "===============================================================================",
            "Packets       Expected    Received        Lost     Loss",
            "-------------------------------------------------------------------------------"]
        if self.empty:
            lines.append("  NO PACKETS RECEIVED")
        else:
            lines.extend([
                "              %8d    %8d    %8d   %5.1f%%" % (
                    self.expected, self.received, self.lost, self.loss_percent),
                "-------------------------------------------------------------------------------",
                "Delay              Min         Max         Avg      Jitter",
                "-------------------------------------------------------------------------------",
                "              %s  %s  %s  %s" % (
                    format_time(self.min_delay_ms),
                    format_time(self.max_delay_ms),
                    format_time(self.avg_delay_ms),
                    format_time(self.jitter_ms)),
                "-------------------------------------------------------------------------------",
                "  Throughput:  %.2f bps (%.2f Kbps)" % (self.throughput_bps, self.throughput_kbps),
                "  Received:    %d bytes in %d ms" % (self.total_bytes, self.elapsed_ms)])
        lines.extend([
            "-------------------------------------------------------------------------------",
            "                                                    Jitter Algorithm [RFC1889]",
            "==============================================================================="])
        return lines

    def dump(self):
        for line in self.lines():
            click.echo(line, err=self.empty and "NO PACKETS" in line)
