import time


def parse_addr(addr, port=9999):
    """ Parse IP addresses and ports.
        Works with:
            IPv6 address with and without port;
            IPv4 address or hostname with and without port;
            port only (":port" or "port").
    """
    if addr == '':
        # no address given (default: any IPv4 address)
        return "", port, 0
    elif addr.isdigit():
        # port only
        return "", int(addr), 0
    elif ']:' in addr:
        # IPv6 address with port
        ip, port = addr.rsplit(':', 1)
        return ip.strip('[]'), int(port), 6
    elif ']' in addr:
        # IPv6 address without port
        return addr.strip('[]'), port, 6
    elif addr.count(':') > 1:
        # IPv6 address without port
        return addr, port, 6
    elif ':' in addr:
        # IPv4 address with port
        ip, port = addr.split(':')
        return ip, int(port), 4
    else:
        # IPv4 address without port
        return addr, port, 4


def now():
    return time.time()


def now_ms():
    """
    Wall-clock time in milliseconds since the epoch
    """
    return int(time.time() * 1000)


def generate_zero_bytes(nbr):
    return bytes(max(0, nbr))


def format_time(ms):
    if abs(ms) > 60000:
        return "%7.1fmin" % float(ms / 60000)
    if abs(ms) > 10000:
        return "%7.1fsec" % float(ms / 1000)
    if abs(ms) > 1000:
        return "%7.2fsec" % float(ms / 1000)
    if abs(ms) > 1:
        return "%8.2fms" % ms
    return "%8dus" % int(ms * 1000)
