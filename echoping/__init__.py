"""
echoping - ICMP Echo (ping) client
==================================

Sends ICMP Echo Requests over a raw IPv4 socket, measures round-trip
latency and reports loss and min/max/average statistics.

Usage:
    from echoping import EchoSession
    result = EchoSession().run("example.com", count=4, payload_size=32, timeout_ms=1000)

Version: 1.0.0
"""

__version__ = "1.0.0"

from echoping.core.checksum import checksum
from echoping.core.echo_session import EchoSession, SessionResult
from echoping.core.icmp_forger import build
from echoping.core.statistics import RunStatistics, StatisticsSummary

__all__ = [
    'EchoSession',
    'RunStatistics',
    'SessionResult',
    'StatisticsSummary',
    'build',
    'checksum',
    '__version__',
]
