import binascii
import socket
import threading

from netload.constants import RECV_BUFFER_SIZE, TOS_DEFAULT, TTL_DEFAULT

import logging
logger = logging.getLogger(__name__)


class UdpSession(threading.Thread):

    def __init__(self, name=None):
        threading.Thread.__init__(self, name=name)
        self.daemon = True
        self.socket = None

    def create(self, ipversion=4, tos=TOS_DEFAULT, ttl=TTL_DEFAULT):
        if ipversion == 6:
            self.create6(tos, ttl)
        else:
            self.create4(tos, ttl)

    def create4(self, tos, ttl):
        logger.debug("create4(tos=%d, ttl=%d)", tos, ttl)
        self.socket = socket.socket(
            socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        self.socket.setsockopt(socket.IPPROTO_IP, socket.IP_TOS, tos)
        self.socket.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, ttl)

    def create6(self, tos, ttl):
        logger.debug("create6(tos=%d, ttl=%d)", tos, ttl)
        self.socket = socket.socket(
            socket.AF_INET6, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        self.socket.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_TCLASS, tos)
        self.socket.setsockopt(
            socket.IPPROTO_IPV6, socket.IPV6_UNICAST_HOPS, ttl)

    def bind(self, addr, port):
        """
        Bind the session socket; returns the bound port, which differs
        from the requested one when port 0 asks for an ephemeral port.
        """
        logger.debug("bind(addr=%s, port=%d)", addr, port)
        self.socket.bind((addr, port))
        return self.socket.getsockname()[1]

    def sendto(self, data, address):
        logger.debug("transmit: %s", binascii.hexlify(data[:32]))
        self.socket.sendto(data, address)

    def recvfrom(self):
        data, address = self.socket.recvfrom(RECV_BUFFER_SIZE)
        logger.debug("received: %s (%d bytes)", binascii.hexlify(data[:32]), len(data))
        return data, address

    def close(self):
        if self.socket is not None:
            self.socket.close()
            self.socket = None
