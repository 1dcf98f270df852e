HEADER_SIZE = 16            # send timestamp (8 bytes) + sequence number (8 bytes)
MAX_DATAGRAM_SIZE = 65507   # largest UDP payload over IPv4
RECV_BUFFER_SIZE = 65535

HOST_DEFAULT = "localhost"
PORT_DEFAULT = 9999
COUNT_DEFAULT = 10
SIZE_DEFAULT = 1024
RATE_DEFAULT = 5            # packets per second, 0 = no delay
POLL_TIMEOUT_DEFAULT = 1.0  # seconds
LINGER_DEFAULT = 1.0        # seconds

TOS_DEFAULT = 0
TTL_DEFAULT = 64
