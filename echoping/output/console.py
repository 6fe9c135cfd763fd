"""
Console output for echoping.

One line per attempt and a closing statistics block, colored with
colorama when writing to a terminal.
"""

import sys
from typing import Optional, TextIO

from colorama import Fore, Style, just_fix_windows_console


class ConsoleColors:
    """Color codes for terminal output"""
    HEADER = Style.BRIGHT
    SUCCESS = Fore.GREEN
    ERROR = Fore.RED
    WARNING = Fore.YELLOW
    INFO = Fore.CYAN
    ENDC = Style.RESET_ALL


class ConsoleFormatter:
    """
    Writes ping progress and summary lines.

    Args:
        stream: Output stream (default: sys.stdout)
        colors: Color output; None enables it only when stream is a TTY
    """

    def __init__(self, stream: Optional[TextIO] = None, colors: Optional[bool] = None):
        self.stream = stream if stream is not None else sys.stdout
        if colors is None:
            colors = hasattr(self.stream, "isatty") and self.stream.isatty()
        self.colors = colors
        if self.colors:
            just_fix_windows_console()

    def _colored(self, text: str, color: str) -> str:
        if self.colors:
            return f"{color}{text}{ConsoleColors.ENDC}"
        return text

    def _write(self, line: str = "") -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    def pinging(self, host: str, address: str, payload_size: int) -> None:
        self._write(f"Pinging {host} [{address}] with {payload_size} bytes of data:")

    def reply(self, reply, elapsed_ms: int) -> None:
        self._write(self._colored(
            f"Reply from {reply.source}: bytes={reply.payload_length} "
            f"time={elapsed_ms}ms TTL={reply.ttl}",
            ConsoleColors.SUCCESS,
        ))

    def request_failed(self) -> None:
        self._write(self._colored("Request failed.", ConsoleColors.ERROR))

    def timed_out(self) -> None:
        self._write(self._colored("Request timed out.", ConsoleColors.WARNING))

    def interrupted(self) -> None:
        self._write("Control-C")

    def host_not_found(self, host: str) -> None:
        self._write(self._colored(
            f"Ping request could not find host {host}. "
            "Please check the name and try again.",
            ConsoleColors.ERROR,
        ))

    def transport_unavailable(self, host: str, reason: str) -> None:
        self._write(self._colored(
            f"Ping request to {host} failed: {reason}.",
            ConsoleColors.ERROR,
        ))

    def summary(self, address: str, summary) -> None:
        """Print the closing statistics block."""
        self._write()
        self._write(self._colored(f"Ping statistics for {address}:", ConsoleColors.HEADER))
        self._write(
            f"    Packets: Sent = {summary.sent}, Received = {summary.succeeded}, "
            f"Lost = {summary.failed} ({summary.loss_percent:.2f}% loss),"
        )
        self._write("Approximate round trip times in milli-seconds:")
        self._write(
            f"    Minimum = {summary.min_ms}ms, Maximum = {summary.max_ms}ms, "
            f"Average = {summary.avg_ms}ms"
        )
