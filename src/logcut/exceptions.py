"""Custom exceptions for logcut."""

from pathlib import Path


class LogcutError(Exception):
    """Base class for errors raised by logcut.

    Unparseable log lines are not errors and never raise; they are skipped
    during the search.
    """


class DateParseError(LogcutError):
    """A date expression could not be resolved to a point in time.

    Attributes:
        expression: The text that failed to parse
    """

    def __init__(self, expression: str) -> None:
        self.expression = expression
        super().__init__(f"parse error: {expression}")


class FormatConflictError(LogcutError):
    """More than one timestamp format was requested.

    Attributes:
        existing: The format that was selected first
    """

    def __init__(self, existing: str) -> None:
        self.existing = existing
        super().__init__(f"Format is already specified: {existing}")


class LogFileError(LogcutError):
    """Reading a log file failed.

    Raised in place of the underlying OSError so the failing path is always
    part of the message. The original error is chained as ``__cause__``.

    Attributes:
        file_path: Path of the log file being processed
        reason: Description of the failure
    """

    def __init__(self, file_path: Path | str, reason: str) -> None:
        self.file_path = Path(file_path)
        self.reason = reason
        super().__init__(f"{self.file_path}: {reason}")


class OutputError(LogcutError):
    """Writing the selected range to the output stream failed.

    Kept apart from LogFileError so a closed pipe or full disk on the output
    side is never reported against the log being read.

    Attributes:
        sink_name: Name of the output stream (``<stdout>`` for standard output)
        reason: Description of the failure
    """

    def __init__(self, sink_name: str, reason: str) -> None:
        self.sink_name = sink_name
        self.reason = reason
        super().__init__(f"{sink_name}: {reason}")
