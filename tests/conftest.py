import logging
import socket
import time

import pytest


@pytest.fixture
def wait_until():
    def wait(predicate, timeout=2.0):
        deadline = time.time() + timeout
        while time.time() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()
    return wait


@pytest.fixture
def udp_sink():
    """A bound UDP socket on the loopback address collecting whatever arrives."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


def drain(sock, expected):
    datagrams = []
    for _ in range(expected):
        data, _ = sock.recvfrom(65535)
        datagrams.append(data)
    return datagrams


@pytest.fixture
def receive_datagrams():
    return drain


@pytest.fixture
def netload_log(caplog):
    """caplog wired to the netload logger, which does not propagate once the CLI is loaded."""
    logger = logging.getLogger("netload")
    level, propagate = logger.level, logger.propagate
    logger.addHandler(caplog.handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield caplog
    logger.removeHandler(caplog.handler)
    logger.setLevel(level)
    logger.propagate = propagate
