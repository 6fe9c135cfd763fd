"""
Raw Socket Module - Raw ICMP transport for echoping.

Provides a connected raw IPv4 ICMP socket with a per-request deadline
covering both the send and the following read.

Features:
- Host resolution through the system resolver
- Raw socket creation (requires root or CAP_NET_RAW)
- Deadline-bounded send/recv
- Guaranteed release through the context manager protocol
"""

import logging
import os
import socket
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)
security_logger = logging.getLogger('security')

RECV_BUFFER_SIZE = 1 << 16


class TransportError(OSError):
    """Base class for fatal transport errors."""
    pass


class HostNotFoundError(TransportError):
    """Raised when the target host cannot be resolved."""

    def __init__(self, host: str, reason: str = ""):
        self.host = host
        self.reason = reason
        super().__init__(f"Could not resolve host {host!r}: {reason}")


class TransportOpenError(TransportError):
    """Raised when the raw ICMP socket cannot be opened."""

    def __init__(self, host: str, reason: str = ""):
        self.host = host
        self.reason = reason
        super().__init__(f"Could not open ICMP socket to {host!r}: {reason}")


def is_root() -> bool:
    """
    Check if running as root.

    Returns:
        bool: True if running with root privileges
    """
    return hasattr(os, "geteuid") and os.geteuid() == 0


def resolve_ipv4(host: str) -> str:
    """
    Resolve a host name or dotted quad to an IPv4 address.

    Raises:
        HostNotFoundError: If resolution fails
    """
    try:
        return socket.gethostbyname(host)
    except (socket.gaierror, socket.herror, UnicodeError) as e:
        raise HostNotFoundError(host, str(e)) from e


def create_icmp_socket() -> socket.socket:
    """
    Create a raw IPv4 socket for the ICMP protocol.

    The kernel builds the IPv4 header on send and hands received
    datagrams back with their IPv4 header attached.

    Raises:
        PermissionError: If not running with raw socket privileges
    """
    return socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)


class IcmpTransport:
    """
    Connected raw ICMP socket with a settable deadline.

    Usage:
        with IcmpTransport.open("example.com") as transport:
            transport.set_deadline(time.monotonic_ns() + 1_000_000_000)
            transport.send(packet)
            reply = transport.recv()
    """

    def __init__(
        self,
        sock: socket.socket,
        remote_address: str,
        clock: Callable[[], int] = time.monotonic_ns
    ):
        self._sock = sock
        self.remote_address = remote_address
        self._clock = clock
        self._deadline_ns: Optional[int] = None

    @classmethod
    def open(cls, host: str) -> "IcmpTransport":
        """
        Resolve ``host`` and open a raw ICMP socket connected to it.

        Connecting filters incoming datagrams to those sent by the target.

        Raises:
            HostNotFoundError: If the host cannot be resolved
            TransportOpenError: If the socket cannot be created or connected
        """
        remote_address = resolve_ipv4(host)

        try:
            sock = create_icmp_socket()
        except PermissionError as e:
            security_logger.warning(
                "Raw ICMP socket denied (euid root=%s): %s", is_root(), e
            )
            raise TransportOpenError(host, "root privileges required") from e
        except OSError as e:
            raise TransportOpenError(host, str(e)) from e

        try:
            sock.connect((remote_address, 0))
        except OSError as e:
            sock.close()
            raise TransportOpenError(host, str(e)) from e

        logger.debug("Opened raw ICMP socket to %s (%s)", host, remote_address)
        return cls(sock, remote_address)

    def set_deadline(self, deadline_ns: Optional[int]) -> None:
        """Set an absolute monotonic deadline for send and recv; None blocks."""
        self._deadline_ns = deadline_ns

    def _apply_deadline(self) -> None:
        if self._deadline_ns is None:
            self._sock.settimeout(None)
            return

        remaining = (self._deadline_ns - self._clock()) / 1e9
        if remaining <= 0:
            raise socket.timeout("deadline exceeded")
        self._sock.settimeout(remaining)

    def send(self, data: bytes) -> int:
        """Send one datagram to the remote address before the deadline."""
        self._apply_deadline()
        return self._sock.send(data)

    def recv(self) -> bytes:
        """Block for one datagram until the deadline."""
        self._apply_deadline()
        return self._sock.recv(RECV_BUFFER_SIZE)

    def close(self) -> None:
        """Close socket."""
        self._sock.close()

    def __enter__(self) -> "IcmpTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = [
    'HostNotFoundError',
    'IcmpTransport',
    'TransportError',
    'TransportOpenError',
    'create_icmp_socket',
    'is_root',
    'resolve_ipv4',
]
