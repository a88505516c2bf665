"""Locating line boundaries in a seekable byte stream.

Both functions read in bounded chunks, so finding a boundary never requires
reading the whole file, and both leave the stream positioned at the offset
they return.
"""

from __future__ import annotations

import io
from typing import IO

# Chunk size used when scanning for newlines
BUFFER_SIZE = 8192


def stream_size(stream: IO[bytes]) -> int:
    """Length of a seekable stream in bytes."""
    return stream.seek(0, io.SEEK_END)


def next_line_start(stream: IO[bytes], offset: int, buffer_size: int = BUFFER_SIZE) -> int:
    """Find the start of the line following the one containing offset.

    Args:
        stream: Seekable binary stream
        offset: Byte offset to scan forward from
        buffer_size: Bytes read per chunk

    Returns:
        Offset just past the next newline at or after offset, or the stream
        length if there is none
    """
    stream.seek(offset)
    while True:
        chunk = stream.read(buffer_size)
        if not chunk:
            break
        newline = chunk.find(b"\n")
        if newline >= 0:
            offset += newline + 1
            break
        offset += len(chunk)
    stream.seek(offset)
    return offset


def line_start_at_or_before(
    stream: IO[bytes], offset: int, buffer_size: int = BUFFER_SIZE
) -> int:
    """Find the start of the line containing offset.

    If offset is itself a line start it is returned unchanged.

    Args:
        stream: Seekable binary stream
        offset: Byte offset to scan backward from
        buffer_size: Bytes read per chunk

    Returns:
        Offset just past the last newline before offset, or 0
    """
    while offset > 0:
        window_start = max(offset - buffer_size, 0)
        stream.seek(window_start)
        chunk = stream.read(offset - window_start)
        newline = chunk.rfind(b"\n")
        if newline >= 0:
            offset = window_start + newline + 1
            break
        offset = window_start
    stream.seek(offset)
    return offset
