"""Binary search over byte offsets of a time-sorted log.

The log is treated as a sorted array whose elements are lines of varying
length. Each bisection step lands on an arbitrary byte, snaps back to the
start of that line and compares the line's timestamp with the target.

Lines without a parseable timestamp (blank lines, stack traces, wrapped
messages) belong to the record above them. As a consequence a search result
is always the start of a parseable line, or the upper bound of the window.
"""

from __future__ import annotations

import logging
from typing import IO, Union

from .boundaries import BUFFER_SIZE, line_start_at_or_before, next_line_start, stream_size
from .models import CutRange, ReferenceClock, Timestamp, TimestampFormat
from .timestamps import MAX_LINE_BYTES, read_timestamp

logger = logging.getLogger(__name__)

Target = Union[int, Timestamp]


def _epoch(target: Target) -> int:
    return target.epoch if isinstance(target, Timestamp) else int(target)


def search_by_time(
    stream: IO[bytes],
    target: Target,
    timestamp_format: TimestampFormat,
    low: int,
    high: int,
    clock: ReferenceClock,
    *,
    buffer_size: int = BUFFER_SIZE,
    max_line_bytes: int = MAX_LINE_BYTES,
) -> int:
    """Find the first line in [low, high) whose timestamp is >= target.

    Lines with equal timestamps resolve to the earliest one, so every
    duplicate is included when the result is used as a range start.

    Args:
        stream: Seekable binary stream of a time-sorted log
        target: Epoch seconds (or a Timestamp) to search for
        timestamp_format: Layout of the per-line timestamps
        low: Start of the window; must be a line start, and every line
            before it must be older than target
        high: End of the window; must be a line start or the stream length
        clock: Reference time used for year inference
        buffer_size: Chunk size for newline scans
        max_line_bytes: Longest line prefix parsed for a timestamp

    Returns:
        Offset of the matching line, or high if no line qualifies
    """
    wanted = _epoch(target)

    def timestamp_at(offset: int) -> Timestamp | None:
        return read_timestamp(stream, offset, timestamp_format, clock, max_line_bytes)

    while low < high:
        mid = (low + high) // 2
        probe = line_start_at_or_before(stream, mid, buffer_size)

        probed = timestamp_at(probe)
        while probed is None and probe > low:
            probe = line_start_at_or_before(stream, probe - 1, buffer_size)
            probed = timestamp_at(probe)

        if probed is not None and wanted <= probed.epoch:
            logger.debug(
                "high %d => %d (%d <= %d)", high, probe, wanted, probed.epoch
            )
            high = probe
            continue

        # Everything up to and including mid's line is older than the target
        candidate = next_line_start(stream, mid, buffer_size)
        skipped = 0
        while candidate < high and timestamp_at(candidate) is None:
            candidate = next_line_start(stream, candidate, buffer_size)
            skipped += 1
        if skipped:
            logger.debug("skipped %d unparseable line(s) before %d", skipped, candidate)
        logger.debug(
            "low %d => %d (%d > %s)",
            low,
            candidate,
            wanted,
            probed.epoch if probed is not None else "no timestamp",
        )
        low = candidate

    return low


def find_range(
    stream: IO[bytes],
    timestamp_format: TimestampFormat,
    start: Target,
    end: Target,
    clock: ReferenceClock,
    *,
    buffer_size: int = BUFFER_SIZE,
    max_line_bytes: int = MAX_LINE_BYTES,
) -> CutRange:
    """Locate the byte range holding records with start <= timestamp < end.

    The second search starts where the first one stopped, so the range is
    never inverted; an end before start simply gives an empty range.
    """
    size = stream_size(stream)
    options = {"buffer_size": buffer_size, "max_line_bytes": max_line_bytes}

    begin = search_by_time(stream, start, timestamp_format, 0, size, clock, **options)
    finish = search_by_time(stream, end, timestamp_format, begin, size, clock, **options)
    return CutRange(begin, finish)
