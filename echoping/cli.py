#!/usr/bin/env python3
"""
echoping - ICMP Echo client
===========================

USAGE:
    echoping [-n count] [-l size] [-w timeout] target_name

OPTIONS:
    -n count       Number of echo requests to send (default: 4)
    -l size        Send buffer size in bytes (default: 32)
    -w timeout     Timeout in milliseconds to wait for each reply (default: 1000)
    --config FILE  JSON configuration file
    --strict       Only accept Echo Replies matching the request
    --no-color     Disable colored output
    -v, --verbose  Debug logging on stderr

Running without arguments prints this usage and exits successfully.
Sending raw ICMP requires root privileges (or CAP_NET_RAW).
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config.config_manager import ConfigManager
from .core.echo_session import EchoSession
from .core.icmp_forger import ICMPValidationError, MAX_PAYLOAD_SIZE
from .core.raw_socket import IcmpTransport, TransportError
from .output.console import ConsoleFormatter

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

USAGE = """Usage: echoping [-n count] [-l size] [-w timeout] target_name

Options:
   -n count       Number of echo requests to send.
   -l size        Send buffer size.
   -w timeout     Timeout in milliseconds to wait for each reply.
"""


class ProfessionalParser(argparse.ArgumentParser):
    """Argument parser that answers every parse problem with the usage text."""

    def __init__(self, *args, **kwargs):
        super().__init__(
            *args,
            prog="echoping",
            description="ICMP Echo client",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            add_help=False,
            **kwargs
        )

    def print_usage(self, file=None):
        if file is None:
            file = sys.stdout
        file.write(USAGE)

    def print_help(self, file=None):
        self.print_usage(file)

    def error(self, message):
        logger.debug("Argument error: %s", message)
        self.print_usage()
        self.exit(0)


# =============================================================================
# INPUT VALIDATION FUNCTIONS
# =============================================================================

def validate_positive_int(value: str, field_name: str, min_value: int = 1, max_value: Optional[int] = None) -> int:
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise argparse.ArgumentTypeError(f"{field_name} must be an integer, got '{value}'")

    if int_value < min_value:
        raise argparse.ArgumentTypeError(f"{field_name} must be at least {min_value}, got {int_value}")

    if max_value is not None and int_value > max_value:
        raise argparse.ArgumentTypeError(f"{field_name} must be at most {max_value}, got {int_value}")

    return int_value


def validate_count_value(value: str) -> int:
    return validate_positive_int(value, "Count", min_value=0)


def validate_size_value(value: str) -> int:
    return validate_positive_int(value, "Size", min_value=0, max_value=MAX_PAYLOAD_SIZE)


def validate_timeout_value(value: str) -> int:
    return validate_positive_int(value, "Timeout", min_value=1)


def create_parser() -> ProfessionalParser:
    parser = ProfessionalParser()
    parser.add_argument('-h', '--help', action='store_true')
    parser.add_argument('-n', dest='count', type=validate_count_value, default=None)
    parser.add_argument('-l', dest='size', type=validate_size_value, default=None)
    parser.add_argument('-w', dest='timeout', type=validate_timeout_value, default=None)
    parser.add_argument('--config', dest='config_file', default=None)
    parser.add_argument('--strict', action='store_true', default=None)
    parser.add_argument('--no-color', dest='colors', action='store_false', default=None)
    parser.add_argument('-v', '--verbose', action='store_true')
    parser.add_argument('target', nargs='?')
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    if not argv:
        parser.print_usage()
        return 0

    args = parser.parse_args(argv)
    if args.help or not args.target:
        parser.print_usage()
        return 0

    config = ConfigManager(args.config_file)
    config.load()
    settings = config.export_for_cli()

    configure_logging("DEBUG" if args.verbose else settings["log_level"])

    if not config.validate():
        parser.print_usage()
        return 0

    count = args.count if args.count is not None else settings["count"]
    size = args.size if args.size is not None else settings["payload_size"]
    timeout_ms = args.timeout if args.timeout is not None else settings["timeout_ms"]
    strict = args.strict if args.strict is not None else settings["strict_reply_matching"]
    colors = None if settings["colors_enabled"] else False
    if args.colors is False:
        colors = False

    session = EchoSession(
        transport_factory=IcmpTransport.open,
        reporter=ConsoleFormatter(colors=colors),
        strict_reply_matching=strict,
    )

    try:
        session.run(args.target, count, size, timeout_ms)
    except ICMPValidationError as e:
        logger.error("Invalid settings: %s", e)
        parser.print_usage()
    except TransportError as e:
        logger.debug("Run aborted: %s", e)

    return 0


if __name__ == "__main__":
    sys.exit(main())
