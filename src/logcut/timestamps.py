"""Timestamp extraction from raw log lines."""

from __future__ import annotations

import re
from datetime import datetime
from functools import lru_cache
from typing import IO

from .models import ReferenceClock, Timestamp, TimestampFormat

# Longest line prefix looked at when parsing a timestamp
MAX_LINE_BYTES = 4096

# glibc shorthands that Python's strptime does not understand
_SHORTHANDS = {
    "%T": "%H:%M:%S",
    "%F": "%Y-%m-%d",
    "%D": "%m/%d/%y",
    "%R": "%H:%M",
    "%e": "%d",
    "%h": "%b",
}
_SHORTHAND_RE = re.compile(r"%%|%[TFDReh]")
_DIRECTIVE_RE = re.compile(r"%(.?)", re.DOTALL)

# Directives datetime.strptime understands once shorthands are expanded
_SUPPORTED = set("aAbBcdfGHIjmMpSuUVwxXyYzZ%")
_YEAR_RE = re.compile(r"%%|%[YyGcx]")

_UNCONVERTED = "unconverted data remains: "

# Yearless lines are parsed against a leap year so that Feb 29 survives
_PLACEHOLDER_YEAR = 2000


@lru_cache(maxsize=32)
def _prepare(pattern: str) -> tuple[str, bool]:
    """Expand shorthands and report whether the pattern carries a year."""
    expanded = _SHORTHAND_RE.sub(lambda m: _SHORTHANDS.get(m.group(), m.group()), pattern)
    has_year = any(m.group() != "%%" for m in _YEAR_RE.finditer(expanded))
    return expanded, has_year


def check_pattern(pattern: str) -> None:
    """Reject patterns containing directives strptime cannot parse.

    Raises:
        ValueError: On an unknown directive or a trailing lone '%'
    """
    expanded, _ = _prepare(pattern)
    for match in _DIRECTIVE_RE.finditer(expanded):
        directive = match.group(1)
        if directive not in _SUPPORTED:
            shown = f"%{directive}" if directive else "trailing %"
            raise ValueError(f"Unsupported directive {shown} in timestamp format: {pattern}")


def _strptime_prefix(text: str, pattern: str) -> datetime:
    """Parse the timestamp at the start of text, ignoring whatever follows it.

    Raises:
        ValueError: If text does not start with a match for pattern
    """
    try:
        return datetime.strptime(text, pattern)
    except ValueError as e:
        message = str(e)
        if not message.startswith(_UNCONVERTED):
            raise
        remainder = len(message) - len(_UNCONVERTED)
        return datetime.strptime(text[: len(text) - remainder], pattern)


def infer_year(month: int, clock: ReferenceClock) -> int:
    """Year for a record that only carries a month.

    Months after the current one belong to last year.
    """
    if month <= clock.month:
        return clock.year
    return clock.year - 1


def extract_timestamp(
    line: bytes,
    timestamp_format: TimestampFormat,
    clock: ReferenceClock,
    max_line_bytes: int = MAX_LINE_BYTES,
) -> Timestamp | None:
    """Parse the timestamp at the start of a log line.

    Args:
        line: Raw line bytes (anything after the first newline is ignored)
        timestamp_format: Layout of the timestamp
        clock: Reference time used to fill in a missing year
        max_line_bytes: Only this many leading bytes are considered

    Returns:
        The parsed Timestamp, or None if the line has no timestamp in the
        expected format (blank lines, stack traces, continuation lines...)
    """
    head = line[:max_line_bytes].split(b"\n", 1)[0]
    if timestamp_format.skips_to_bracket:
        bracket = head.find(b"[")
        if bracket >= 0:
            head = head[bracket + 1 :]
    if not head.strip():
        return None

    text = head.decode("utf-8", errors="replace")
    pattern, has_year = _prepare(timestamp_format.pattern)

    try:
        if has_year:
            parsed = _strptime_prefix(text, pattern)
        else:
            parsed = _strptime_prefix(f"{_PLACEHOLDER_YEAR} {text}", f"%Y {pattern}")
            parsed = parsed.replace(year=infer_year(parsed.month, clock))
    except ValueError:
        return None

    return Timestamp(epoch=clock.to_epoch(parsed), implicit_year=not has_year)


def read_timestamp(
    stream: IO[bytes],
    offset: int,
    timestamp_format: TimestampFormat,
    clock: ReferenceClock,
    max_line_bytes: int = MAX_LINE_BYTES,
) -> Timestamp | None:
    """Read the line starting at offset and extract its timestamp.

    Returns None at end of stream.
    """
    stream.seek(offset)
    line = stream.read(max_line_bytes)
    if not line:
        return None
    return extract_timestamp(line, timestamp_format, clock, max_line_bytes)
