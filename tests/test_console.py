import io

from colorama import Fore

from echoping.core.icmp_forger import EchoReply
from echoping.core.statistics import StatisticsSummary
from echoping.output.console import ConsoleColors, ConsoleFormatter


SUMMARY = StatisticsSummary(
    sent=4, succeeded=3, failed=1, loss_percent=25.0, min_ms=1, max_ms=1000, avg_ms=253
)


def test_reply_line(reporter, output) -> None:
    reply = EchoReply(source="192.0.2.10", ttl=57, payload_length=32)

    reporter.reply(reply, 12)

    assert output.getvalue() == "Reply from 192.0.2.10: bytes=32 time=12ms TTL=57\n"


def test_failure_lines(reporter, output) -> None:
    reporter.request_failed()
    reporter.timed_out()

    assert output.getvalue() == "Request failed.\nRequest timed out.\n"


def test_summary_block(reporter, output) -> None:
    reporter.summary("192.0.2.10", SUMMARY)

    assert output.getvalue() == (
        "\n"
        "Ping statistics for 192.0.2.10:\n"
        "    Packets: Sent = 4, Received = 3, Lost = 1 (25.00% loss),\n"
        "Approximate round trip times in milli-seconds:\n"
        "    Minimum = 1ms, Maximum = 1000ms, Average = 253ms\n"
    )


def test_loss_percent_has_two_decimals(reporter, output) -> None:
    summary = StatisticsSummary(
        sent=3, succeeded=2, failed=1, loss_percent=100 / 3, min_ms=0, max_ms=0, avg_ms=0
    )

    reporter.summary("192.0.2.10", summary)

    assert "(33.33% loss)" in output.getvalue()


def test_colors_wrap_lines_when_enabled() -> None:
    stream = io.StringIO()
    formatter = ConsoleFormatter(stream=stream, colors=True)

    formatter.timed_out()

    assert stream.getvalue() == f"{Fore.YELLOW}Request timed out.{ConsoleColors.ENDC}\n"


def test_colors_default_off_for_non_tty() -> None:
    assert ConsoleFormatter(stream=io.StringIO()).colors is False
