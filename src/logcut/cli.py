"""Command-line interface for logcut."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import NoReturn

from .dates import resolve_date
from .exceptions import DateParseError, FormatConflictError, LogcutError, OutputError
from .logfile import LogFile
from .models import ISO_FORMAT, SYSLOG_FORMAT, WEB_FORMAT, ReferenceClock, TimestampFormat

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def select_format(
    iso: bool = False,
    syslog: bool = False,
    web: bool = False,
    custom: str | None = None,
) -> TimestampFormat:
    """Pick the timestamp format from mutually exclusive options.

    Defaults to the syslog preset when nothing is selected.

    Raises:
        FormatConflictError: If more than one option is given
    """
    chosen: list[TimestampFormat] = []
    if iso:
        chosen.append(ISO_FORMAT)
    if syslog:
        chosen.append(SYSLOG_FORMAT)
    if web:
        chosen.append(WEB_FORMAT)
    if custom is not None:
        chosen.append(TimestampFormat.custom(custom))
    if len(chosen) > 1:
        raise FormatConflictError(str(chosen[0]))
    return chosen[0] if chosen else SYSLOG_FORMAT


def cmd_cut(args: argparse.Namespace) -> int:
    """Cut the requested time range out of every file, in order."""
    try:
        timestamp_format = select_format(args.iso, args.syslog, args.web, args.custom)
    except (FormatConflictError, ValueError) as e:
        print(e, file=sys.stderr)
        return 1

    clock = ReferenceClock.capture()
    try:
        start = resolve_date(args.start, clock)
        end = resolve_date(args.end, clock)
    except DateParseError as e:
        print(e, file=sys.stderr)
        return 1

    logger.debug("range [%d, %d) format %r", start, end, timestamp_format.pattern)

    sink = sys.stdout.buffer
    for file_path in args.files:
        try:
            log = LogFile(file_path, timestamp_format, clock)
            cut_range = log.cut(sink, start, end)
        except OutputError as e:
            print(f"Error: {e}", file=sys.stderr)
            if isinstance(e.__cause__, BrokenPipeError):
                # the interpreter flushes stdout again on exit
                devnull = os.open(os.devnull, os.O_WRONLY)
                os.dup2(devnull, sys.stdout.fileno())
            return 1
        except (OSError, LogcutError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        logger.debug("%s: wrote %d bytes", file_path, cut_range.length)

    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = _ArgumentParser(
        prog="logcut",
        description="Select the lines of time-sorted log files within [FROM, TO) "
        "using binary search",
        epilog="examples:\n"
        "  logcut -f '2 hours ago' -a /var/log/messages\n"
        "  logcut -f 5:55 -t 8:30 -i app.log\n"
        "  logcut -f 2/1 -t 2/8 -w /var/log/httpd/access_log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    formats = parser.add_argument_group("timestamp format (choose one)")
    formats.add_argument(
        "-i", dest="iso", action="store_true",
        help="Use ISO timestamp format (%%Y-%%m-%%d %%T)",
    )
    formats.add_argument(
        "-a", dest="syslog", action="store_true",
        help="Use ANSI/syslog timestamp format (%%b %%d %%T), the default",
    )
    formats.add_argument(
        "-w", dest="web", action="store_true",
        help="Use web access log timestamp format ([%%d/%%b/%%Y:%%T)",
    )
    formats.add_argument(
        "-F", dest="custom", metavar="FORMAT",
        help="Timestamp format in strptime(3) syntax",
    )

    parser.add_argument(
        "-f", "--from", dest="start", required=True, metavar="DATE",
        help="Start of the range (inclusive)",
    )
    parser.add_argument(
        "-t", "--to", dest="end", default="now", metavar="DATE",
        help="End of the range (exclusive, default: now)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log search steps to stderr"
    )
    parser.add_argument("files", nargs="+", metavar="FILE", help="Log file(s) to cut")
    parser.set_defaults(func=cmd_cut)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
