"""Strict validation and parsing of offset-aware timestamps.

The favorites service reports ``created_at`` as an ISO-8601 timestamp with
an explicit numeric UTC offset. Exactly two textual layouts are accepted:

- ``SECONDS``: ``2024-05-20T12:34:56+03:00``
- ``MILLISECONDS``: ``2024-05-20T12:34:56.789+03:00`` (exactly three
  fractional digits)

Everything else is rejected: a ``Z`` suffix, a missing offset, a space in
place of ``T``, any other number of fractional digits, and calendar
impossibilities such as ``2024-02-30``. Matching uses ASCII-only patterns,
so the result never depends on the process locale.

Examples:
    >>> is_valid("2024-05-20T12:34:56+03:00")
    True
    >>> is_valid("2024-05-20T12:34:56Z")
    False
    >>> parse("2024-05-20T12:34:56.500-04:30").utcoffset()
    datetime.timedelta(days=-1, seconds=70200)
"""

import re
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator

# Largest offset the ``zzz`` specifier of the reference platform accepts.
MAX_OFFSET_HOURS = 14

_DATE_TIME = r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
_OFFSET = r"(?P<sign>[+-])(?P<offset_hours>\d{2}):(?P<offset_minutes>\d{2})"


class TimestampLayout(str, Enum):
    """The two accepted textual layouts.

    Attributes:
        SECONDS: ``yyyy-MM-ddTHH:mm:sszzz``
        MILLISECONDS: ``yyyy-MM-ddTHH:mm:ss.fffzzz``
    """

    SECONDS = "SECONDS"
    MILLISECONDS = "MILLISECONDS"


_PATTERNS: dict[TimestampLayout, re.Pattern[str]] = {
    TimestampLayout.SECONDS: re.compile(_DATE_TIME + _OFFSET, re.ASCII),
    TimestampLayout.MILLISECONDS: re.compile(
        _DATE_TIME + r"\.(?P<millis>\d{3})" + _OFFSET, re.ASCII
    ),
}


def _build(match: re.Match[str]) -> datetime | None:
    """Turn a pattern match into an aware datetime, or None if out of range."""
    offset_hours = int(match["offset_hours"])
    offset_minutes = int(match["offset_minutes"])
    if offset_minutes > 59 or offset_hours > MAX_OFFSET_HOURS:
        return None
    if offset_hours == MAX_OFFSET_HOURS and offset_minutes:
        return None

    offset = timedelta(hours=offset_hours, minutes=offset_minutes)
    if match["sign"] == "-":
        offset = -offset

    millis = match.groupdict().get("millis")
    try:
        return datetime(
            int(match["year"]),
            int(match["month"]),
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"]),
            int(millis) * 1000 if millis is not None else 0,
            tzinfo=timezone(offset),
        )
    except ValueError:
        # Month 13, Feb 30, hour 24, second 60, year 0000
        return None


def _match(value: object) -> tuple[TimestampLayout, datetime] | None:
    if not isinstance(value, str) or not value:
        return None
    for layout, pattern in _PATTERNS.items():
        match = pattern.fullmatch(value)
        if match is not None:
            parsed = _build(match)
            return (layout, parsed) if parsed is not None else None
    return None


def match_layout(value: str | None) -> TimestampLayout | None:
    """Return the layout ``value`` is written in, or None if it is invalid.

    Examples:
        >>> match_layout("2024-05-20T12:34:56+03:00")
        <TimestampLayout.SECONDS: 'SECONDS'>
        >>> match_layout("2024-05-20T12:34:56.1+03:00") is None
        True
    """
    result = _match(value)
    return result[0] if result is not None else None


def is_valid(value: str | None) -> bool:
    """Check whether ``value`` is a timestamp in one of the two layouts.

    Args:
        value: Candidate string. None and the empty string are invalid.

    Returns:
        True iff the whole string matches one of the two layouts and
        denotes a real calendar instant with an offset of at most ±14:00.
    """
    return _match(value) is not None


def parse(value: str | None) -> datetime | None:
    """Parse ``value`` into an offset-aware datetime.

    The numeric offset is preserved, not normalized to UTC: the returned
    datetime's ``utcoffset()`` equals the offset written in the string.

    Args:
        value: Candidate string.

    Returns:
        The parsed datetime, or None whenever ``is_valid(value)`` is False.

    Examples:
        >>> parse("2024-05-20T12:34:56+03:00").isoformat()
        '2024-05-20T12:34:56+03:00'
        >>> parse("2024-05-20 12:34:56+03:00") is None
        True
    """
    result = _match(value)
    return result[1] if result is not None else None


def format_timestamp(value: datetime, layout: TimestampLayout = TimestampLayout.SECONDS) -> str:
    """Render an aware datetime in one of the accepted layouts.

    Raises:
        ValueError: If ``value`` is naive, or its offset has a seconds part
            or lies beyond ±14:00.

    Examples:
        >>> tz = timezone(timedelta(hours=3))
        >>> format_timestamp(datetime(2024, 5, 20, 12, 34, 56, 789000, tzinfo=tz),
        ...                  TimestampLayout.MILLISECONDS)
        '2024-05-20T12:34:56.789+03:00'
    """
    offset = value.utcoffset()
    if offset is None:
        raise ValueError("format_timestamp requires an offset-aware datetime")
    if offset % timedelta(minutes=1) or abs(offset) > timedelta(hours=MAX_OFFSET_HOURS):
        raise ValueError(f"offset {offset} cannot be written as ±HH:MM within ±14:00")
    timespec = "milliseconds" if layout is TimestampLayout.MILLISECONDS else "seconds"
    return value.isoformat(timespec=timespec)


def _check_timestamp(value: str) -> str:
    if not is_valid(value):
        raise ValueError(
            f"{value!r} is not an offset-aware timestamp "
            "(expected yyyy-MM-ddTHH:mm:ss[.fff]+HH:MM)"
        )
    return value


# String field type for pydantic models carrying a strict timestamp
IsoTimestamp = Annotated[str, AfterValidator(_check_timestamp)]
