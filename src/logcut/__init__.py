"""logcut: select a time range from sorted log files via binary search.

Example:
    >>> from logcut import LogFile, ReferenceClock, resolve_date, WEB_FORMAT
    >>> clock = ReferenceClock.capture()
    >>> log = LogFile("/var/log/httpd/access_log", WEB_FORMAT, clock)
    >>>
    >>> # Offset of the first line at or after a point in time
    >>> offset = log.search(resolve_date("2 hours ago", clock))
    >>>
    >>> # Byte range [start, end) of the lines within a time window
    >>> cut_range = log.find_range(resolve_date("2/1", clock), resolve_date("2/8", clock))
    >>>
    >>> # Copy that window to an output stream
    >>> with open("week.log", "wb") as out:
    ...     log.cut(out, resolve_date("2/1", clock), resolve_date("2/8", clock))
"""

from .boundaries import BUFFER_SIZE, line_start_at_or_before, next_line_start
from .cut import copy_range, cut, iter_range
from .dates import resolve_date
from .exceptions import (
    DateParseError,
    FormatConflictError,
    LogcutError,
    LogFileError,
    OutputError,
)
from .logfile import LogFile
from .models import (
    ISO_FORMAT,
    SYSLOG_FORMAT,
    WEB_FORMAT,
    CutRange,
    ReferenceClock,
    Timestamp,
    TimestampFormat,
)
from .search import find_range, search_by_time
from .timestamps import MAX_LINE_BYTES, extract_timestamp, read_timestamp

__version__ = "0.1.0"
__all__ = [
    # Core
    "LogFile",
    "cut",
    "copy_range",
    "iter_range",
    "find_range",
    "search_by_time",
    "next_line_start",
    "line_start_at_or_before",
    "extract_timestamp",
    "read_timestamp",
    "resolve_date",
    "BUFFER_SIZE",
    "MAX_LINE_BYTES",
    # Models
    "TimestampFormat",
    "ISO_FORMAT",
    "SYSLOG_FORMAT",
    "WEB_FORMAT",
    "Timestamp",
    "ReferenceClock",
    "CutRange",
    # Exceptions
    "LogcutError",
    "DateParseError",
    "FormatConflictError",
    "LogFileError",
    "OutputError",
]
