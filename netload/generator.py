import enum
import socket
import threading

from netload.session import UdpSession
from netload.packet import encode, packet_size
from netload.utils import now_ms
from netload.constants import TOS_DEFAULT, TTL_DEFAULT


import logging
logger = logging.getLogger(__name__)


class GeneratorStatus(enum.Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class GeneratorOutcome:

    def __init__(self, status, sent, error=None):
        self.status = status
        self.sent = sent
        self.error = error

    @property
    def ok(self):
        return self.status == GeneratorStatus.COMPLETED

    def __repr__(self):
        if self.error:
            return "<GeneratorOutcome %s sent=%d error=%r>" % (self.status.value, self.sent, self.error)
        return "<GeneratorOutcome %s sent=%d>" % (self.status.value, self.sent)


class TrafficGenerator(UdpSession):
    """
    Sends `count` packets of `size` bytes to host:port, `rate` packets per
    second (0 sends back to back). ipversion 4 or 6 restricts name
    resolution to that family; with 0 an IPv4 address is preferred when
    the host has one.

    Runs as a thread via start(), or inline by calling run(); either way
    the result is left in `outcome`.
    """

    def __init__(self, host, port, count, size, rate, tos=TOS_DEFAULT, ttl=TTL_DEFAULT, ipversion=0):
        UdpSession.__init__(self, name="netload_generator")

        self.remote_addr = host
        self.remote_port = port
        self.count = count
        self.size = packet_size(size)
        self.rate = rate
        self.interval_ms = 1000 // rate if rate > 0 else 0
        self.tos = tos
        self.ttl = ttl
        self.ipversion = ipversion

        self.cancelled = threading.Event()
        self.sent = 0
        self.outcome = None

    def stop(self, signum=None, frame=None):
        if not self.cancelled.is_set():
            logger.info("Stop traffic generator")
        self.cancelled.set()

    def resolve(self):
        family = {4: socket.AF_INET, 6: socket.AF_INET6}.get(self.ipversion, socket.AF_UNSPEC)
        infos = socket.getaddrinfo(
            self.remote_addr, self.remote_port, family, socket.SOCK_DGRAM)
        ipv4 = [info for info in infos if info[0] == socket.AF_INET]
        family, _, _, _, address = (ipv4 or infos)[0]
        ipversion = 6 if family == socket.AF_INET6 else 4
        return ipversion, address

    def run(self):
        try:
            self.outcome = self.send_all()
        except (OSError, OverflowError) as e:
            logger.error("Traffic generator failed after %d packets: %s", self.sent, e)
            self.outcome = GeneratorOutcome(GeneratorStatus.FAILED, self.sent, str(e))
        finally:
            self.close()
        return self.outcome

    def send_all(self):
        ipversion, address = self.resolve()
        self.create(ipversion, self.tos, self.ttl)

        logger.info("Send %d packets (%d bytes, %s) to %s:%d",
                    self.count, self.size,
                    "%d pps" % self.rate if self.rate > 0 else "no delay",
                    address[0], address[1])

        for seq in range(1, self.count + 1):
            if self.cancelled.is_set():
                return self.cancel()

            self.sendto(encode(seq, now_ms(), self.size), address)
            self.sent = seq
            logger.info("Sent to %s:%d [seq=%d]", address[0], address[1], seq)

            if self.interval_ms > 0 and seq < self.count:
                if self.cancelled.wait(self.interval_ms / 1000.0):
                    return self.cancel()

        logger.info("Traffic generator finished (%d packets sent)", self.sent)
        return GeneratorOutcome(GeneratorStatus.COMPLETED, self.sent)

    def cancel(self):
        logger.info("Traffic generator cancelled after %d of %d packets", self.sent, self.count)
        return GeneratorOutcome(GeneratorStatus.CANCELLED, self.sent)
