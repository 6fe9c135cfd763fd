"""
Core module initialization for echoping.
"""

from .checksum import (
    OptimizedChecksum,
    ChecksumError,
    checksum,
)
from .icmp_forger import (
    EchoReply,
    ICMPForger,
    ICMPForgerError,
    ICMPValidationError,
    ReplyDecodeError,
    build,
)
from .raw_socket import (
    HostNotFoundError,
    IcmpTransport,
    TransportError,
    TransportOpenError,
)
from .statistics import RunStatistics, StatisticsSummary
from .echo_session import EchoSession, SessionResult, run

__all__ = [
    'OptimizedChecksum',
    'ChecksumError',
    'checksum',
    'EchoReply',
    'ICMPForger',
    'ICMPForgerError',
    'ICMPValidationError',
    'ReplyDecodeError',
    'build',
    'HostNotFoundError',
    'IcmpTransport',
    'TransportError',
    'TransportOpenError',
    'RunStatistics',
    'StatisticsSummary',
    'EchoSession',
    'SessionResult',
    'run',
]
