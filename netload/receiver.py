import enum
import select
import threading

from netload.session import UdpSession
from netload.packet import sample
from netload.statistics import ReceptionState, compute
from netload.utils import now_ms
from netload.constants import PORT_DEFAULT, POLL_TIMEOUT_DEFAULT


import logging
logger = logging.getLogger(__name__)


class ReceiverState(enum.Enum):
    INIT = "init"
    LISTENING = "listening"
    STOPPING = "stopping"
    STOPPED = "stopped"


class TrafficReceiver(UdpSession):
    """
    Collects measurement packets arriving on a UDP port until
    request_stop() is called. The receive loop is the only writer of
    `reception`; finalize_and_report() reads it once the loop has ended.

    The loop waits at most `poll_timeout` seconds per iteration, so a stop
    request takes effect within one poll interval.
    """

    def __init__(self, port=PORT_DEFAULT, addr="", ipversion=4, poll_timeout=POLL_TIMEOUT_DEFAULT):
        UdpSession.__init__(self, name="netload_receiver")

        self.addr = addr
        self.port = port
        self.ipversion = ipversion
        self.poll_timeout = poll_timeout

        self.reception = ReceptionState()
        self.state = ReceiverState.INIT
        self.error = None

        self.lock = threading.Lock()
        self.stopping = threading.Event()
        self.ready = threading.Event()

    def transition(self, state, only_from=None):
        with self.lock:
            if only_from is None or self.state == only_from:
                self.state = state

    def run(self):
        self.listen()

    def listen(self):
        try:
            self.create(self.ipversion)
            self.port = self.bind(self.addr, self.port)
        except (OSError, OverflowError) as e:
            logger.error("Traffic receiver cannot listen on [%s]:%d: %s", self.addr, self.port, e)
            self.error = str(e)
            self.close()
            self.transition(ReceiverState.STOPPED)
            self.ready.set()
            return

        self.transition(ReceiverState.LISTENING, only_from=ReceiverState.INIT)
        self.ready.set()
        logger.info("Wait to receive test packets on [%s]:%d", self.addr, self.port)

        try:
            while not self.stopping.is_set():
                readable, _, _ = select.select([self.socket], [], [], self.poll_timeout)
                if readable:
                    self.receive()
        except OSError as e:
            logger.error("Traffic receiver failed: %s", e)
            self.error = str(e)
        finally:
            self.close()
            self.transition(ReceiverState.STOPPED)

        logger.info("Traffic receiver stopped (%d packets received)", self.reception.received)

    def receive(self):
        data, address = self.recvfrom()
        timestamp_ms = now_ms()
        self.reception.count_bytes(len(data), timestamp_ms)

        s = sample(data, timestamp_ms)
        if s is None:
            logger.debug("short packet from %s:%d ignored: %d bytes", address[0], address[1], len(data))
            return

        self.reception.add(s)
        logger.info("Packet from %s:%d [seq=%d delay=%dms]", address[0], address[1], s.sequence, s.delay_ms)

    def request_stop(self, signum=None, frame=None):
        if not self.stopping.is_set():
            logger.info("Stop traffic receiver")
        self.stopping.set()
        self.transition(ReceiverState.STOPPING, only_from=ReceiverState.LISTENING)

    def finalize_and_report(self, finalize_time_ms=None):
        if self.state != ReceiverState.STOPPED or self.is_alive():
            raise RuntimeError("traffic receiver is %s, stop it first" % self.state.value)
        return compute(self.reception, finalize_time_ms)
