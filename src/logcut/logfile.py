"""Path-based access to a time-sorted log file."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Union

from .boundaries import BUFFER_SIZE, stream_size
from .cut import cut as _cut
from .cut import iter_range as _iter_range
from .exceptions import LogFileError
from .models import SYSLOG_FORMAT, CutRange, ReferenceClock, TimestampFormat
from .search import Target
from .search import find_range as _find_range
from .search import search_by_time
from .timestamps import MAX_LINE_BYTES


class LogFile:
    """Binary-search access to a log file sorted by timestamp.

    Every lookup is a fresh O(log N) search; nothing is indexed or cached.

    Example:
        >>> log = LogFile("/var/log/messages")
        >>> start = resolve_date("2 hours ago", log.clock)
        >>> end = resolve_date("now", log.clock)
        >>> with open("recent.log", "wb") as out:
        ...     log.cut(out, start, end)
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        timestamp_format: TimestampFormat = SYSLOG_FORMAT,
        clock: ReferenceClock | None = None,
        *,
        buffer_size: int = BUFFER_SIZE,
        max_line_bytes: int = MAX_LINE_BYTES,
        keep_open: bool = False,
    ) -> None:
        """Prepare a log file for searching.

        Args:
            file_path: Path to the log file
            timestamp_format: Layout of the timestamp at the start of each line
            clock: Reference time for year inference. Captured now if omitted
            buffer_size: Chunk size for newline scans and copying
            max_line_bytes: Longest line prefix parsed for a timestamp
            keep_open: Hold one read stream across lookups until close()
                (use the log as a context manager)

        Raises:
            FileNotFoundError: If file_path does not exist
        """
        self._file_path = Path(file_path)
        if not self._file_path.exists():
            raise FileNotFoundError(f"Log file not found: {self._file_path}")

        self._timestamp_format = timestamp_format
        self._clock = clock or ReferenceClock.capture()
        self._buffer_size = buffer_size
        self._max_line_bytes = max_line_bytes
        self._reader: IO[bytes] | None = (
            open(self._file_path, "rb") if keep_open else None
        )

    @property
    def file_path(self) -> Path:
        """Path to the log file."""
        return self._file_path

    @property
    def file_size(self) -> int:
        """Current size of the log file in bytes."""
        with self.open() as f:
            return stream_size(f)

    @property
    def timestamp_format(self) -> TimestampFormat:
        return self._timestamp_format

    @property
    def clock(self) -> ReferenceClock:
        return self._clock

    @contextmanager
    def open(self) -> Iterator[IO[bytes]]:
        """Binary stream over the log for one search or cut.

        A log constructed with keep_open=True hands out its shared stream so
        repeated lookups skip reopening; otherwise each call opens the path
        afresh and closes it on exit.
        """
        if self._reader is not None:
            yield self._reader
            return
        with open(self._file_path, "rb") as f:
            yield f

    def close(self) -> None:
        """Release the shared stream of a keep_open log. Safe to repeat."""
        reader, self._reader = self._reader, None
        if reader is not None:
            reader.close()

    def __enter__(self) -> "LogFile":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def search(self, target: Target) -> int:
        """Offset of the first line whose timestamp is >= target.

        Returns the file size if every line is older than target.

        Raises:
            LogFileError: If the file cannot be read
        """
        try:
            with self.open() as f:
                return search_by_time(
                    f,
                    target,
                    self._timestamp_format,
                    0,
                    stream_size(f),
                    self._clock,
                    buffer_size=self._buffer_size,
                    max_line_bytes=self._max_line_bytes,
                )
        except OSError as e:
            raise LogFileError(self._file_path, e.strerror or str(e)) from e

    def find_range(self, start: Target, end: Target) -> CutRange:
        """Byte range of the lines with start <= timestamp < end.

        Raises:
            LogFileError: If the file cannot be read
        """
        try:
            with self.open() as f:
                return self._find_range(f, start, end)
        except OSError as e:
            raise LogFileError(self._file_path, e.strerror or str(e)) from e

    def iter_range(self, start: Target, end: Target) -> Iterator[bytes]:
        """Yield the selected range as raw byte chunks.

        Raises:
            LogFileError: If the file cannot be read
        """
        try:
            with self.open() as f:
                cut_range = self._find_range(f, start, end)
                yield from _iter_range(f, cut_range, self._buffer_size)
        except OSError as e:
            raise LogFileError(self._file_path, e.strerror or str(e)) from e

    def cut(self, sink: IO[bytes], start: Target, end: Target) -> CutRange:
        """Write the lines with start <= timestamp < end to sink.

        Args:
            sink: Binary output stream
            start: Inclusive lower bound, epoch seconds or Timestamp
            end: Exclusive upper bound, epoch seconds or Timestamp

        Returns:
            The byte range that was written

        Raises:
            LogFileError: If reading the log fails
            OutputError: If writing to sink fails
        """
        try:
            with self.open() as f:
                return _cut(
                    f,
                    sink,
                    self._timestamp_format,
                    start,
                    end,
                    self._clock,
                    buffer_size=self._buffer_size,
                    max_line_bytes=self._max_line_bytes,
                )
        except OSError as e:
            raise LogFileError(self._file_path, e.strerror or str(e)) from e

    def _find_range(self, f: IO[bytes], start: Target, end: Target) -> CutRange:
        return _find_range(
            f,
            self._timestamp_format,
            start,
            end,
            self._clock,
            buffer_size=self._buffer_size,
            max_line_bytes=self._max_line_bytes,
        )

    def __repr__(self) -> str:
        return f"LogFile({self._file_path!r}, format={self._timestamp_format.kind!r})"
