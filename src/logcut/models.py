"""Data models for logcut."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Literal

from dateutil.tz import tzlocal

FormatKind = Literal["iso", "syslog", "web", "custom"]


@dataclass(frozen=True, slots=True)
class TimestampFormat:
    """How the timestamp at the start of each log line is laid out.

    Attributes:
        kind: Which preset this is, or "custom" for a caller-supplied pattern
        pattern: strptime(3)-style pattern; glibc shorthands such as %T are allowed
    """

    kind: FormatKind
    pattern: str

    @property
    def skips_to_bracket(self) -> bool:
        """True if parsing starts after the first '[' (web access logs)."""
        return self.kind == "web"

    @classmethod
    def custom(cls, pattern: str) -> "TimestampFormat":
        """Create a format from a caller-supplied strptime pattern.

        Raises:
            ValueError: If the pattern is empty or uses a directive that
                cannot be parsed (for example %s or %Q)
        """
        from .timestamps import check_pattern

        if not pattern:
            raise ValueError("Timestamp format pattern must not be empty")
        check_pattern(pattern)
        return cls("custom", pattern)

    def __str__(self) -> str:
        return self.pattern


ISO_FORMAT = TimestampFormat("iso", "%Y-%m-%d %T")
SYSLOG_FORMAT = TimestampFormat("syslog", "%b %d %T")
WEB_FORMAT = TimestampFormat("web", "%d/%b/%Y:%T")


@dataclass(frozen=True, order=True, slots=True)
class Timestamp:
    """A point in time parsed from a log line.

    Attributes:
        epoch: Seconds since the Unix epoch
        implicit_year: True if the line had no year and it was inferred
    """

    epoch: int
    implicit_year: bool = field(default=False, compare=False)

    def to_datetime(self, tz: tzinfo | None = None) -> datetime:
        """Convert to an aware datetime (local timezone by default)."""
        return datetime.fromtimestamp(self.epoch, tz or tzlocal())


@dataclass(frozen=True)
class ReferenceClock:
    """The current time, captured once and passed around explicitly.

    Year inference and relative date expressions are both resolved against
    this value, never against the wall clock directly.

    Attributes:
        now: Timezone-aware current time
    """

    now: datetime

    def __post_init__(self) -> None:
        if self.now.tzinfo is None or self.now.utcoffset() is None:
            raise ValueError("ReferenceClock requires a timezone-aware datetime")

    @classmethod
    def capture(cls) -> "ReferenceClock":
        """Capture the current local time."""
        return cls(datetime.now(tzlocal()))

    @property
    def tzinfo(self) -> tzinfo:
        return self.now.tzinfo  # type: ignore[return-value]

    @property
    def year(self) -> int:
        return self.now.year

    @property
    def month(self) -> int:
        return self.now.month

    @property
    def epoch(self) -> int:
        return int(self.now.timestamp())

    def to_epoch(self, value: datetime) -> int:
        """Seconds since the epoch for a datetime.

        Naive values are wall-clock times in the clock's timezone.
        """
        if value.tzinfo is None:
            value = value.replace(tzinfo=self.tzinfo)
        return int(value.timestamp())


@dataclass(frozen=True, slots=True)
class CutRange:
    """Half-open byte range [start, end) selected from a log file.

    Attributes:
        start: Offset of the first selected line
        end: Offset just past the last selected byte
    """

    start: int
    end: int

    @property
    def length(self) -> int:
        return max(self.end - self.start, 0)

    @property
    def is_empty(self) -> bool:
        return self.length == 0
