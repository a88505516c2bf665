"""Resolving human date expressions ("2 hours ago", "5:55", "2/1") to epoch seconds."""

from __future__ import annotations

import re
from datetime import datetime, timedelta

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

from .exceptions import DateParseError
from .models import ReferenceClock

_UNITS = {
    "second": "seconds",
    "sec": "seconds",
    "minute": "minutes",
    "min": "minutes",
    "hour": "hours",
    "day": "days",
    "week": "weeks",
    "month": "months",
    "year": "years",
}

_AGO_RE = re.compile(r"^(\d+)\s*([a-z]+?)s?\s+ago$")
_OFFSET_RE = re.compile(r"^([+-])\s*(\d+)\s*([a-z]+?)s?$")
_EPOCH_RE = re.compile(r"^@(-?\d+)$")

_DAY_WORDS = {"today": 0, "yesterday": -1, "tomorrow": 1}


def _shift(base: datetime, amount: int, unit: str, expression: str) -> datetime:
    field = _UNITS.get(unit)
    if field is None:
        raise DateParseError(expression)
    return base + relativedelta(**{field: amount})


def resolve_date(expression: str, clock: ReferenceClock) -> int:
    """Resolve a date expression against the reference clock.

    Supported forms:
        - "now", "today", "yesterday", "tomorrow" (the last three at midnight)
        - "@1139800000": literal seconds since the epoch
        - "2 hours ago", "+3 days", "-1 week"
        - anything dateutil can parse; missing fields come from today's date
          at midnight, so "5:55" is today at 05:55 and "2/1" is February 1st
          of the current year

    Times without an explicit zone are taken in the clock's timezone.

    Args:
        expression: The date expression
        clock: Reference time for relative expressions

    Returns:
        Seconds since the epoch

    Raises:
        DateParseError: If the expression cannot be resolved
    """
    text = expression.strip().lower()
    if not text:
        raise DateParseError(expression)

    now = clock.now
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if text == "now":
        return clock.epoch
    if text in _DAY_WORDS:
        return clock.to_epoch(midnight + timedelta(days=_DAY_WORDS[text]))

    match = _EPOCH_RE.match(text)
    if match:
        return int(match.group(1))

    match = _AGO_RE.match(text)
    if match:
        return clock.to_epoch(_shift(now, -int(match.group(1)), match.group(2), expression))

    match = _OFFSET_RE.match(text)
    if match:
        amount = int(match.group(2)) * (-1 if match.group(1) == "-" else 1)
        return clock.to_epoch(_shift(now, amount, match.group(3), expression))

    try:
        parsed = dateutil_parser.parse(expression, default=midnight.replace(tzinfo=None))
    except (ValueError, OverflowError) as e:
        raise DateParseError(expression) from e

    return clock.to_epoch(parsed)
