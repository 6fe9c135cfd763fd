"""
Echo Session - drives the send/await-reply/timeout cycle.

One transport is opened per run and reused for every request. Requests
are strictly sequential: the next one is built only after the current
one got a reply, failed or timed out. Each sequence number is attempted
exactly once.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .checksum import ChecksumError
from .icmp_forger import (
    EchoReply,
    ICMPForger,
    ICMPForgerError,
    ICMPValidationError,
    MAX_PAYLOAD_SIZE,
    ReplyDecodeError,
)
from .raw_socket import HostNotFoundError, IcmpTransport, TransportOpenError
from .statistics import RunStatistics, StatisticsSummary
from ..output.console import ConsoleFormatter

logger = logging.getLogger(__name__)

NS_PER_MS = 1_000_000


@dataclass
class SessionResult:
    """Outcome of a completed (or interrupted) run."""
    remote_address: str
    statistics: RunStatistics = field(default_factory=RunStatistics)
    interrupted: bool = False

    def summarize(self) -> StatisticsSummary:
        return self.statistics.summarize()


class EchoSession:
    """
    Runs ``count`` echo requests against one host.

    Args:
        transport_factory: Opens a transport for a host name; the transport
            provides ``remote_address``, ``set_deadline``, ``send``, ``recv``
            and ``close`` and is used as a context manager
        reporter: Receives per-attempt progress (default: ConsoleFormatter)
        forger: Packet builder
        clock: Monotonic clock in nanoseconds
        strict_reply_matching: Only accept an Echo Reply whose identifier
            and sequence match the request; otherwise the first datagram
            read is taken as the reply
    """

    def __init__(
        self,
        transport_factory: Callable[[str], IcmpTransport] = IcmpTransport.open,
        reporter: Optional[ConsoleFormatter] = None,
        forger: Optional[ICMPForger] = None,
        clock: Callable[[], int] = time.monotonic_ns,
        strict_reply_matching: bool = False,
    ):
        self.transport_factory = transport_factory
        self.reporter = reporter if reporter is not None else ConsoleFormatter()
        self.forger = forger if forger is not None else ICMPForger()
        self.clock = clock
        self.strict_reply_matching = strict_reply_matching

    def run(self, host: str, count: int, payload_size: int, timeout_ms: int) -> SessionResult:
        """
        Ping ``host`` ``count`` times.

        Raises:
            ICMPValidationError: If arguments are out of range
            HostNotFoundError: If the host cannot be resolved
            TransportOpenError: If the raw socket cannot be opened
        """
        if count < 0:
            raise ICMPValidationError(f"Count must not be negative, got {count}")
        if not 0 <= payload_size <= MAX_PAYLOAD_SIZE:
            raise ICMPValidationError(
                f"Payload size must be between 0 and {MAX_PAYLOAD_SIZE}, got {payload_size}"
            )
        if timeout_ms <= 0:
            raise ICMPValidationError(f"Timeout must be positive, got {timeout_ms}")

        try:
            transport = self.transport_factory(host)
        except HostNotFoundError:
            logger.debug("Host not found: %s", host, exc_info=True)
            self.reporter.host_not_found(host)
            raise
        except TransportOpenError as e:
            logger.debug("Transport unavailable for %s", host, exc_info=True)
            self.reporter.transport_unavailable(host, e.reason)
            raise

        with transport:
            result = SessionResult(remote_address=transport.remote_address)
            self.reporter.pinging(host, result.remote_address, payload_size)

            try:
                for i in range(count):
                    self._attempt(transport, i & 0xFFFF, payload_size, timeout_ms, result.statistics)
            except KeyboardInterrupt:
                logger.debug("Interrupted after %d requests", result.statistics.sent)
                self.reporter.interrupted()
                result.interrupted = True

        self.reporter.summary(result.remote_address, result.summarize())
        return result

    def _attempt(
        self,
        transport: IcmpTransport,
        sequence: int,
        payload_size: int,
        timeout_ms: int,
        stats: RunStatistics,
    ) -> None:
        try:
            packet = self.forger.build(sequence, payload_size)
        except (ICMPForgerError, ChecksumError) as e:
            logger.error("Could not build request %d: %s", sequence, e)
            stats.record_untimed_failure()
            return

        transport.set_deadline(self.clock() + timeout_ms * NS_PER_MS)
        t_start = self.clock()

        try:
            transport.send(packet)
        except OSError as e:
            logger.debug("seq=%d send failed: %s", sequence, e)
            stats.record(self._elapsed_ms(t_start), succeeded=False)
            self.reporter.request_failed()
            return

        try:
            reply = self._await_reply(transport, sequence)
        except (OSError, ICMPForgerError) as e:
            elapsed_ms = self._elapsed_ms(t_start)
            logger.debug("seq=%d no reply after %dms: %s", sequence, elapsed_ms, e)
            stats.record(elapsed_ms, succeeded=False)
            self.reporter.timed_out()
            return

        elapsed_ms = self._elapsed_ms(t_start)
        logger.debug("seq=%d reply from %s in %dms", sequence, reply.source, elapsed_ms)
        stats.record(elapsed_ms, succeeded=True)
        self.reporter.reply(reply, elapsed_ms)

    def _await_reply(self, transport: IcmpTransport, sequence: int) -> EchoReply:
        """
        Read the reply for ``sequence``.

        Without strict matching exactly one datagram is read. With it,
        unrelated or undecodable datagrams are dropped until the deadline
        expires.
        """
        while True:
            datagram = transport.recv()
            try:
                reply = EchoReply.from_datagram(datagram)
            except ReplyDecodeError as e:
                if not self.strict_reply_matching:
                    raise
                logger.debug("seq=%d dropped undecodable datagram: %s", sequence, e)
                continue
            if not self.strict_reply_matching or reply.matches(sequence, sequence):
                return reply
            logger.debug(
                "seq=%d dropped unrelated datagram type=%s id=%s seq=%s",
                sequence, reply.icmp_type, reply.identifier, reply.sequence,
            )

    def _elapsed_ms(self, t_start: int) -> int:
        return (self.clock() - t_start) // NS_PER_MS


def run(
    host: str,
    count: int,
    payload_size: int,
    timeout_ms: int,
    **session_options,
) -> SessionResult:
    """Run one ping session with default collaborators."""
    return EchoSession(**session_options).run(host, count, payload_size, timeout_ms)
