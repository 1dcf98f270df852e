#!/usr/bin/env python3

from netload.constants import (COUNT_DEFAULT, SIZE_DEFAULT, RATE_DEFAULT, PORT_DEFAULT, HOST_DEFAULT,
                               TOS_DEFAULT, TTL_DEFAULT, POLL_TIMEOUT_DEFAULT, LINGER_DEFAULT,
                               MAX_DATAGRAM_SIZE)
from netload.generator import GeneratorStatus, TrafficGenerator
from netload.receiver import TrafficReceiver
from netload.utils import parse_addr

import click
import click_log
import signal
import time
import functools

from logging.handlers import TimedRotatingFileHandler


import logging
logger = logging.getLogger("netload")
click_logger = click_log.basic_config(logger)


class HexParamType(click.ParamType):
    name = 'hex'

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return int(value, 16)
        except (ValueError, UnicodeError):
            self.fail('%s is not valid hexadecimal' % value, param, ctx)

    def __repr__(self):
        return 'HEX'


class AddressParamType(click.ParamType):
    name = 'address'

    def __init__(self, default_port=PORT_DEFAULT):
        self.default_port = default_port

    def convert(self, value, param, ctx):
        if isinstance(value, tuple):
            return value
        try:
            addr, port, ipversion = parse_addr(value, self.default_port)
        except ValueError:
            self.fail('%s is not a valid ip:port address' % value, param, ctx)
        if not 0 <= port <= 65535:
            self.fail('port %d is out of range [0..65535]' % port, param, ctx)
        return addr, port, ipversion

    def __repr__(self):
        return 'ADDRESS'


class AliasedGroup(click.Group):

    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        matches = [x for x in self.list_commands(ctx)
                   if x.startswith(cmd_name)]
        if not matches:
            return None
        elif len(matches) == 1:
            return click.Group.get_command(self, ctx, matches[0])
        ctx.fail('Please be more specific \n%s' % '\n'.join(sorted(matches)))


def traffic_options(func):
    @click.option('-c', '--count', metavar='packets', default=COUNT_DEFAULT,
                  type=click.IntRange(0, None), help="number of packets to send")
    @click.option('-s', '--size', metavar='bytes', default=SIZE_DEFAULT,
                  type=click.IntRange(0, MAX_DATAGRAM_SIZE), help="[16..%d], smaller sizes are raised to 16" % MAX_DATAGRAM_SIZE)
    @click.option('-r', '--rate', metavar='pps', default=RATE_DEFAULT,
                  type=click.IntRange(0, None), help="packets per second, 0 sends without delay")
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)
    return wrapper


def ip_options(func):
    @click.option("--tos", metavar="<type-of-service>", default=str(TOS_DEFAULT), type=HexParamType(), help='IP TOS value in hex format. ex.: 0x88')
    @click.option("--ttl", metavar="<time-to-live>", default=TTL_DEFAULT, type=click.IntRange(1, 255), help='[1..255]')
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)
    return wrapper


def report_outcome(outcome):
    if outcome.status == GeneratorStatus.COMPLETED:
        click.echo("Generator finished: %d packets sent" % outcome.sent)
    elif outcome.status == GeneratorStatus.CANCELLED:
        click.echo("Generator cancelled: %d packets sent" % outcome.sent)
    else:
        raise click.ClickException("Generator error after %d packets: %s" % (outcome.sent, outcome.error))


def wait_for(thread):
    while thread.is_alive():
        thread.join(0.1)


def start_listener(listener):
    listener.start()
    while not listener.ready.wait(0.1):
        if not listener.is_alive():
            break
    if listener.error or not listener.ready.is_set():
        listener.join()
        raise click.ClickException("Receiver error: %s" % (listener.error or "receiver thread ended"))


@click.group(cls=AliasedGroup)
@click_log.simple_verbosity_option(logger)
@click.option("-q", "--quiet", "quiet", is_flag=True, help="Only log warnings and errors")
@click.option("-l", "--logfile", "logfile", type=click.Path(), help="Also log to a file, rotated at midnight")
def cli(quiet, logfile):
    """UDP traffic generator and receiver measuring one-way delay,
       packet loss and throughput."""

    if quiet:
        logger.setLevel(logging.WARNING)

    if logfile:
        file_handler = TimedRotatingFileHandler(
            filename=logfile, when='midnight', backupCount=31)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        file_handler.setLevel(logger.level)
        click_logger.addHandler(file_handler)


@cli.command('generator')
@click.argument('far_end', metavar='remote-ip:port', default="%s:%d" % (HOST_DEFAULT, PORT_DEFAULT), type=AddressParamType())
@traffic_options
@ip_options
def generator(far_end, count, size, rate, tos, ttl):
    """Send a stream of measurement packets."""
    host, port, ipversion = far_end

    # hostnames come back as ipversion 4, let resolution pick the family
    sender = TrafficGenerator(host or HOST_DEFAULT, port, count, size, rate,
                              tos=tos, ttl=ttl, ipversion=6 if ipversion == 6 else 0)
    sender.start()

    previous = signal.signal(signal.SIGINT, sender.stop)
    try:
        wait_for(sender)
    finally:
        signal.signal(signal.SIGINT, previous)
    report_outcome(sender.outcome)


@cli.command('receiver')
@click.argument('near_end', metavar='local-ip:port', default=":%d" % PORT_DEFAULT, type=AddressParamType())
@click.option('-t', '--poll-timeout', metavar='sec', default=POLL_TIMEOUT_DEFAULT,
              type=click.FloatRange(0.01, 10), help="stop request latency [0.01..10]")
def receiver(near_end, poll_timeout):
    """Collect measurement packets until interrupted, then show statistics."""
    addr, port, ipversion = near_end

    listener = TrafficReceiver(port, addr=addr, ipversion=ipversion, poll_timeout=poll_timeout)
    start_listener(listener)

    previous = signal.signal(signal.SIGINT, listener.request_stop)
    click.echo("Receiver is running on port %d, press Ctrl+C to stop and show statistics" % listener.port)

    try:
        wait_for(listener)
    finally:
        signal.signal(signal.SIGINT, previous)
    listener.finalize_and_report().dump()


@cli.command('loopback')
@click.option('-p', '--port', metavar='port', default=0, type=click.IntRange(0, 65535),
              help="local port, 0 picks a free one")
@traffic_options
@click.option('--linger', metavar='sec', default=LINGER_DEFAULT, type=click.FloatRange(0, None),
              help="time to keep receiving after the last packet was sent")
def loopback(port, count, size, rate, linger):
    """Run generator and receiver against each other on the local host."""
    listener = TrafficReceiver(port, addr="127.0.0.1", poll_timeout=0.1)
    start_listener(listener)

    sender = TrafficGenerator("127.0.0.1", listener.port, count, size, rate, ipversion=4)
    sender.start()
    previous = signal.signal(signal.SIGINT, sender.stop)
    try:
        wait_for(sender)
        time.sleep(linger)
    finally:
        signal.signal(signal.SIGINT, previous)
        listener.request_stop()
        wait_for(listener)

    outcome = sender.outcome
    listener.finalize_and_report().dump()
    report_outcome(outcome)


if __name__ == "__main__":
    cli()
