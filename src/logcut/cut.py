"""Copying the selected range of a log to an output sink."""

from __future__ import annotations

import logging
from typing import IO, Iterator

from .boundaries import BUFFER_SIZE
from .exceptions import OutputError
from .models import CutRange, ReferenceClock, TimestampFormat
from .search import Target, find_range
from .timestamps import MAX_LINE_BYTES

logger = logging.getLogger(__name__)


def _sink_name(sink: IO[bytes]) -> str:
    name = getattr(sink, "name", None)
    return str(name) if name is not None else "<output>"


def iter_range(
    stream: IO[bytes], cut_range: CutRange, buffer_size: int = BUFFER_SIZE
) -> Iterator[bytes]:
    """Yield the bytes of cut_range in chunks of at most buffer_size."""
    position = cut_range.start
    stream.seek(position)
    while position < cut_range.end:
        chunk = stream.read(min(buffer_size, cut_range.end - position))
        if not chunk:
            break
        position += len(chunk)
        yield chunk


def copy_range(
    stream: IO[bytes],
    sink: IO[bytes],
    cut_range: CutRange,
    buffer_size: int = BUFFER_SIZE,
) -> int:
    """Write the bytes of cut_range to sink and flush it.

    Returns:
        Number of bytes written

    Raises:
        OutputError: If writing to or flushing sink fails. Read errors on
            stream propagate unchanged as OSError
    """
    written = 0
    for chunk in iter_range(stream, cut_range, buffer_size):
        try:
            sink.write(chunk)
        except OSError as e:
            raise OutputError(_sink_name(sink), e.strerror or str(e)) from e
        written += len(chunk)
    try:
        sink.flush()
    except OSError as e:
        raise OutputError(_sink_name(sink), e.strerror or str(e)) from e
    return written


def cut(
    stream: IO[bytes],
    sink: IO[bytes],
    timestamp_format: TimestampFormat,
    start: Target,
    end: Target,
    clock: ReferenceClock,
    *,
    buffer_size: int = BUFFER_SIZE,
    max_line_bytes: int = MAX_LINE_BYTES,
) -> CutRange:
    """Copy every line with start <= timestamp < end from stream to sink.

    Lines are copied verbatim. Read errors propagate as OSError, write errors
    as OutputError; bytes already written to sink stay written.

    Args:
        stream: Seekable binary stream of a time-sorted log
        sink: Binary output stream
        timestamp_format: Layout of the per-line timestamps
        start: Inclusive lower bound, epoch seconds or Timestamp
        end: Exclusive upper bound, epoch seconds or Timestamp
        clock: Reference time used for year inference

    Returns:
        The byte range that was copied
    """
    cut_range = find_range(
        stream,
        timestamp_format,
        start,
        end,
        clock,
        buffer_size=buffer_size,
        max_line_bytes=max_line_bytes,
    )
    logger.debug("cutting bytes [%d, %d)", cut_range.start, cut_range.end)
    copy_range(stream, sink, cut_range, buffer_size)
    return cut_range
