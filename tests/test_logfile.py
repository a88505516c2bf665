"""Tests for LogFile and searching large files."""

import io
import math
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from logcut import (
    ISO_FORMAT,
    SYSLOG_FORMAT,
    LogFile,
    LogFileError,
    OutputError,
    ReferenceClock,
    search_by_time,
)

CLOCK = ReferenceClock(datetime(2006, 2, 13, 12, 0, 0, tzinfo=timezone.utc))
BASE = datetime(2006, 1, 1, tzinfo=timezone.utc)


def epoch(moment: datetime) -> int:
    return int(moment.timestamp())


@pytest.fixture
def sample_log(tmp_path: Path) -> Path:
    """Create an ISO log with 100 lines, one per minute."""
    file_path = tmp_path / "app.log"
    with open(file_path, "w") as f:
        for i in range(100):
            f.write(f"{BASE + timedelta(minutes=i):%Y-%m-%d %H:%M:%S} INFO item_{i}\n")
    return file_path


@pytest.fixture
def large_log_100k(tmp_path: Path) -> Path:
    """Create an ISO log with 100,000 lines of varying length."""
    file_path = tmp_path / "large.log"
    with open(file_path, "w") as f:
        for i in range(100_000):
            if i % 100 == 0:
                payload = "x" * 2_000
            elif i % 10 == 0:
                payload = "y" * 200
            else:
                payload = f"short_{i}"
            f.write(f"{BASE + timedelta(seconds=i):%Y-%m-%d %H:%M:%S} {payload}\n")
    return file_path


class CountingStream(io.BytesIO):
    """BytesIO that counts read() calls."""

    reads = 0

    def read(self, size=-1):
        self.reads += 1
        return super().read(size)


class TestLogFile:
    """Tests for the path-based API."""

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            LogFile(tmp_path / "missing.log")

    def test_properties(self, sample_log: Path):
        log = LogFile(sample_log, ISO_FORMAT, CLOCK)

        assert log.file_path == sample_log
        assert log.file_size == sample_log.stat().st_size
        assert log.timestamp_format is ISO_FORMAT
        assert log.clock is CLOCK

    def test_defaults(self, sample_log: Path):
        log = LogFile(sample_log)

        assert log.timestamp_format is SYSLOG_FORMAT
        assert log.clock.now.tzinfo is not None

    def test_search(self, sample_log: Path):
        log = LogFile(sample_log, ISO_FORMAT, CLOCK)
        lines = sample_log.read_bytes().splitlines(keepends=True)

        offset = log.search(epoch(BASE + timedelta(minutes=42)))

        assert offset == sum(len(line) for line in lines[:42])

    def test_find_range_and_cut(self, sample_log: Path):
        log = LogFile(sample_log, ISO_FORMAT, CLOCK)
        start = epoch(BASE + timedelta(minutes=10))
        end = epoch(BASE + timedelta(minutes=15))
        sink = io.BytesIO()

        cut_range = log.cut(sink, start, end)

        assert log.find_range(start, end) == cut_range
        output = sink.getvalue().decode()
        assert output.count("\n") == 5
        assert output.startswith("2006-01-01 00:10:00 INFO item_10\n")
        assert "item_15" not in output

    def test_iter_range(self, sample_log: Path):
        log = LogFile(sample_log, ISO_FORMAT, CLOCK, buffer_size=16)
        start = epoch(BASE + timedelta(minutes=90))

        chunks = list(log.iter_range(start, epoch(BASE + timedelta(days=1))))

        assert all(len(chunk) <= 16 for chunk in chunks)
        assert b"".join(chunks).count(b"\n") == 10

    def test_keep_open(self, sample_log: Path):
        """A persistent handle is reused and closed by the context manager."""
        with LogFile(sample_log, ISO_FORMAT, CLOCK, keep_open=True) as log:
            with log.open() as f1:
                pass
            with log.open() as f2:
                pass
            assert f1 is f2
            assert not f1.closed
            log.search(epoch(BASE))

        assert f1.closed
        log.close()

    def test_file_removed_after_open(self, sample_log: Path):
        """Errors while searching name the file."""
        log = LogFile(sample_log, ISO_FORMAT, CLOCK)
        sample_log.unlink()

        with pytest.raises(LogFileError) as exc_info:
            log.search(epoch(BASE))

        assert exc_info.value.file_path == sample_log
        assert str(sample_log) in str(exc_info.value)

    def test_sink_write_error(self, sample_log: Path):
        """A failing output stream is reported against the output, not the log."""

        class BrokenSink(io.BytesIO):
            def write(self, data):
                raise OSError(32, "Broken pipe")

        log = LogFile(sample_log, ISO_FORMAT, CLOCK)

        with pytest.raises(OutputError) as exc_info:
            log.cut(BrokenSink(), epoch(BASE), epoch(BASE + timedelta(hours=1)))

        assert not isinstance(exc_info.value, LogFileError)
        assert str(sample_log) not in str(exc_info.value)
        assert exc_info.value.reason == "Broken pipe"
        assert isinstance(exc_info.value.__cause__, BrokenPipeError)

    def test_repr(self, sample_log: Path):
        log = LogFile(sample_log, ISO_FORMAT, CLOCK)

        assert "LogFile(" in repr(log)
        assert "'iso'" in repr(log)


class TestLargeFiles:
    """Searching stays logarithmic on large files."""

    def test_search_large_file(self, large_log_100k: Path):
        log = LogFile(large_log_100k, ISO_FORMAT, CLOCK)

        for i in (0, 1, 99, 100, 50_000, 99_999):
            offset = log.search(epoch(BASE + timedelta(seconds=i)))
            with open(large_log_100k, "rb") as f:
                f.seek(offset)
                assert f.readline().split(b" ", 2)[:2] == [
                    f"{BASE + timedelta(seconds=i):%Y-%m-%d}".encode(),
                    f"{BASE + timedelta(seconds=i):%H:%M:%S}".encode(),
                ]

    def test_cut_large_file(self, large_log_100k: Path):
        log = LogFile(large_log_100k, ISO_FORMAT, CLOCK)
        sink = io.BytesIO()

        log.cut(sink, epoch(BASE + timedelta(seconds=70_000)), epoch(BASE + timedelta(seconds=70_500)))

        assert sink.getvalue().count(b"\n") == 500

    def test_number_of_reads_is_logarithmic(self, large_log_100k: Path):
        stream = CountingStream(large_log_100k.read_bytes())
        size = len(stream.getvalue())

        search_by_time(
            stream, epoch(BASE + timedelta(seconds=31_337)), ISO_FORMAT, 0, size, CLOCK
        )

        assert stream.reads < 8 * math.log2(size)
