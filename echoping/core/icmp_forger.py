"""
ICMP Packet Forger - ICMP Echo Request construction and reply decoding.

ICMP Echo Request/Reply Format (RFC 792):
+-----------+-----------+-------------------------+
| Type (8)  | Code (8)  |      Checksum (16)      |
+-----------+-----------+-------------------------+
|   Identifier (16)     |  Sequence Number (16)   |
+-----------------------+-------------------------+
|                    Payload                      |
+-------------------------------------------------+

Replies are read from a raw IPv4 socket, so they arrive with the
20-byte IPv4 header still attached in front of the ICMP message.
"""

import socket
import struct
from dataclasses import dataclass
from typing import Optional

from .checksum import OptimizedChecksum


class ICMPForgerError(Exception):
    """Raised when ICMP packet construction fails."""
    pass


class ICMPValidationError(ICMPForgerError):
    """Raised when ICMP input validation fails."""
    pass


class ReplyDecodeError(ICMPForgerError):
    """Raised when a received datagram cannot be decoded."""
    pass


ICMPV4_ECHO_REPLY = 0
ICMPV4_ECHO_REQUEST = 8

ICMP_HEADER_SIZE = 8
IPV4_HEADER_SIZE = 20
MAX_PAYLOAD_SIZE = 0xFFFF - IPV4_HEADER_SIZE - ICMP_HEADER_SIZE


@dataclass(frozen=True)
class EchoReply:
    """
    Fields extracted from a received datagram.

    ``icmp_type``, ``identifier`` and ``sequence`` are None when the
    datagram is too short to carry a full ICMP header.
    """
    source: str
    ttl: int
    payload_length: int
    icmp_type: Optional[int] = None
    identifier: Optional[int] = None
    sequence: Optional[int] = None

    @classmethod
    def from_datagram(cls, datagram: bytes) -> "EchoReply":
        """
        Decode a raw IPv4 datagram carrying an ICMP message.

        TTL is read at offset 8 and the source address at offsets 12-15.
        The payload length is the datagram length minus the IPv4 and
        ICMP headers.

        Args:
            datagram: Bytes as returned by the raw socket

        Returns:
            Decoded reply

        Raises:
            ReplyDecodeError: If the datagram is shorter than an IPv4 header
        """
        if len(datagram) < IPV4_HEADER_SIZE:
            raise ReplyDecodeError(
                f"Datagram too short: {len(datagram)} bytes. "
                f"Minimum is {IPV4_HEADER_SIZE} bytes."
            )

        icmp_type = identifier = sequence = None
        if len(datagram) >= IPV4_HEADER_SIZE + ICMP_HEADER_SIZE:
            icmp_type, _code, _checksum, identifier, sequence = struct.unpack(
                '!BBHHH',
                datagram[IPV4_HEADER_SIZE:IPV4_HEADER_SIZE + ICMP_HEADER_SIZE]
            )

        return cls(
            source=socket.inet_ntoa(datagram[12:16]),
            ttl=datagram[8],
            payload_length=len(datagram) - IPV4_HEADER_SIZE - ICMP_HEADER_SIZE,
            icmp_type=icmp_type,
            identifier=identifier,
            sequence=sequence,
        )

    def matches(self, identifier: int, sequence: int) -> bool:
        """Check whether this is the Echo Reply to the given request."""
        return (
            self.icmp_type == ICMPV4_ECHO_REPLY
            and self.identifier == identifier
            and self.sequence == sequence
        )


class ICMPForger:
    """
    Builds ICMP Echo Request datagrams.

    The identifier and the sequence number of each request both carry
    the request index.

    Example:
        >>> forger = ICMPForger()
        >>> packet = forger.build(0, 32)
        >>> len(packet)
        40
    """

    def build(self, sequence_number: int, payload_size: int) -> bytes:
        """
        Build an Echo Request with a zero-filled payload.

        Args:
            sequence_number: 16-bit value used as identifier and sequence
            payload_size: Number of payload bytes

        Returns:
            Complete ICMP Echo Request packet

        Raises:
            ICMPValidationError: If parameters are out of range
            ChecksumError: If the checksum cannot be computed
        """
        if not 0 <= sequence_number <= 0xFFFF:
            raise ICMPValidationError(
                f"Sequence number out of range: {sequence_number}"
            )
        if not 0 <= payload_size <= MAX_PAYLOAD_SIZE:
            raise ICMPValidationError(
                f"Payload size out of range: {payload_size} bytes. "
                f"Maximum is {MAX_PAYLOAD_SIZE} bytes."
            )

        return self.craft_icmp_echo(
            icmp_type=ICMPV4_ECHO_REQUEST,
            identifier=sequence_number,
            sequence=sequence_number,
            payload=bytes(payload_size),
        )

    def craft_icmp_echo(
        self,
        icmp_type: int,
        identifier: int,
        sequence: int,
        payload: bytes = b''
    ) -> bytes:
        """
        Craft an ICMP Echo packet with a valid checksum.

        The header is packed with a zero checksum, the checksum is computed
        over header and payload, then written big-endian at offsets 2-3.
        """
        packet = bytearray(
            struct.pack('!BBHHH', icmp_type, 0, 0, identifier, sequence)
        )
        packet += payload

        icmp_checksum = OptimizedChecksum.icmp_checksum(packet)
        struct.pack_into('!H', packet, 2, icmp_checksum)

        return bytes(packet)


def build(sequence_number: int, payload_size: int) -> bytes:
    """Build an Echo Request; shorthand for ``ICMPForger().build``."""
    return ICMPForger().build(sequence_number, payload_size)


__all__ = [
    'EchoReply',
    'ICMPForger',
    'ICMPForgerError',
    'ICMPValidationError',
    'ReplyDecodeError',
    'ICMPV4_ECHO_REPLY',
    'ICMPV4_ECHO_REQUEST',
    'ICMP_HEADER_SIZE',
    'IPV4_HEADER_SIZE',
    'MAX_PAYLOAD_SIZE',
    'build',
]
