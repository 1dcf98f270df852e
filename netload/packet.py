"""
Wire format of the measurement packets (big-endian):

    offset  0: send timestamp, milliseconds since epoch (8 bytes, signed)
    offset  8: sequence number, starts at 1 (8 bytes, unsigned)
    offset 16: zero padding up to the configured packet size
"""

import struct
from collections import namedtuple

from netload.constants import HEADER_SIZE
from netload.utils import generate_zero_bytes


HEADER = struct.Struct('!qQ')

Sample = namedtuple('Sample', ['sequence', 'delay_ms', 'byte_length'])


def packet_size(size):
    return max(HEADER_SIZE, size)


def encode(sequence, send_timestamp_ms, total_size=HEADER_SIZE):
    header = HEADER.pack(send_timestamp_ms, sequence)
    return header + generate_zero_bytes(packet_size(total_size) - HEADER_SIZE)


def decode(data):
    """
    Return (send_timestamp_ms, sequence), or None if data is too short
    to hold a header.
    """
    if len(data) < HEADER_SIZE:
        return None
    return HEADER.unpack_from(data, 0)


def sample(data, receive_timestamp_ms):
    header = decode(data)
    if header is None:
        return None
    send_timestamp_ms, sequence = header
    return Sample(sequence, receive_timestamp_ms - send_timestamp_ms, len(data))
