import io
import socket
import struct
from typing import Callable, List, Optional, Sequence, Tuple

import pytest
from scapy.layers.inet import ICMP, IP
from scapy.packet import Raw

from echoping.output.console import ConsoleFormatter

TARGET_ADDRESS = "192.0.2.10"
LOCAL_ADDRESS = "192.0.2.1"
NS_PER_MS = 1_000_000

# (delay_ms, datagram) pairs delivered one per recv() after a send
Responder = Callable[[bytes], Sequence[Tuple[int, bytes]]]


def echo_reply_datagram(
    request: bytes,
    src: str = TARGET_ADDRESS,
    ttl: int = 57,
    icmp_type: int = 0,
    identifier: Optional[int] = None,
    sequence: Optional[int] = None,
) -> bytes:
    """IPv4 datagram answering ``request``, as a raw socket would return it."""
    request_id, request_seq = struct.unpack("!HH", request[4:8])
    icmp = ICMP(
        type=icmp_type,
        id=request_id if identifier is None else identifier,
        seq=request_seq if sequence is None else sequence,
    )
    packet = IP(src=src, dst=LOCAL_ADDRESS, ttl=ttl) / icmp
    if len(request) > 8:
        packet = packet / Raw(load=request[8:])
    return bytes(packet)


class FakeClock:
    """Monotonic nanosecond clock advanced by the fake transport."""

    def __init__(self, start_ns: int = 5_000 * NS_PER_MS) -> None:
        self.now = start_ns

    def __call__(self) -> int:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms * NS_PER_MS


class FakeTransport:
    """In-memory stand-in for IcmpTransport driven by a FakeClock."""

    def __init__(
        self,
        clock: FakeClock,
        responder: Responder,
        remote_address: str = TARGET_ADDRESS,
        fail_sends: Sequence[int] = (),
    ) -> None:
        self.clock = clock
        self.responder = responder
        self.remote_address = remote_address
        self.fail_sends = set(fail_sends)
        self.sent: List[bytes] = []
        self.deadlines: List[int] = []
        self.pending: List[Tuple[int, bytes]] = []
        self.closed = False

    def set_deadline(self, deadline_ns: int) -> None:
        self.deadline = deadline_ns
        self.deadlines.append(deadline_ns)

    def send(self, data: bytes) -> int:
        attempt = len(self.sent)
        self.sent.append(data)
        if attempt in self.fail_sends:
            self.clock.advance_ms(1)
            raise OSError("Network is unreachable")
        self.pending = list(self.responder(data))
        return len(data)

    def recv(self) -> bytes:
        if self.pending:
            delay_ms, datagram = self.pending.pop(0)
            if self.clock.now + delay_ms * NS_PER_MS <= self.deadline:
                self.clock.advance_ms(delay_ms)
                return datagram
        self.clock.now = self.deadline
        raise socket.timeout("timed out")

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def reply_after(delay_ms: int) -> Responder:
    return lambda request: [(delay_ms, echo_reply_datagram(request))]


def never_reply(request: bytes) -> Sequence[Tuple[int, bytes]]:
    return []


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> ConsoleFormatter:
    return ConsoleFormatter(stream=output, colors=False)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in (
        "ECHOPING_CONFIG",
        "ECHOPING_PING_COUNT",
        "ECHOPING_PING_PAYLOAD_SIZE",
        "ECHOPING_PING_TIMEOUT_MS",
        "ECHOPING_PING_STRICT_REPLY_MATCHING",
        "ECHOPING_OUTPUT_COLORS_ENABLED",
        "ECHOPING_OUTPUT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
