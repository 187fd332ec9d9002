"""Compact date/time decoding for tool arguments.

Dates are YYYYMMDD and times HHMM or HHMMSS. Only ranges are checked:
month in [1, 12] and day in [1, 31], so "20230230" is accepted. Callers
send approximate dates and rely on that.
"""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass

_DATE_RE = re.compile(r"^[0-9]{8}$")
_TIME_RE = re.compile(r"^[0-9]{4}([0-9]{2})?$")


class DateTimeFormatError(ValueError):
    """Input does not have the expected digit layout."""


class DateTimeValueError(ValueError):
    """Digits are well-formed but a component is out of range."""


@dataclass(frozen=True, order=True)
class NaiveDate:
    year: int
    month: int
    day: int

    def to_date(self) -> dt.date:
        """Raises ValueError for calendrically impossible dates (e.g. Feb 30)."""
        return dt.date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True, order=True)
class NaiveTime:
    hour: int
    minute: int
    second: int = 0

    def to_time(self) -> dt.time:
        return dt.time(self.hour, self.minute, self.second)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"


MIDNIGHT = NaiveTime(0, 0, 0)


@dataclass(frozen=True, order=True)
class NaiveDatetime:
    date: NaiveDate
    time: NaiveTime = MIDNIGHT

    def to_datetime(self) -> dt.datetime:
        return dt.datetime.combine(self.date.to_date(), self.time.to_time())

    def __str__(self) -> str:
        return f"{self.date}T{self.time}"


def parse_date(value: str) -> NaiveDate:
    """Parse a YYYYMMDD string.

    Raises:
        DateTimeFormatError: value is not exactly 8 ASCII digits.
        DateTimeValueError: month or day out of range.
    """
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise DateTimeFormatError(f"Invalid date format {value!r}, expected YYYYMMDD")

    year = int(value[0:4])
    month = int(value[4:6])
    day = int(value[6:8])
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise DateTimeValueError(f"Invalid date value {value!r}")
    return NaiveDate(year, month, day)


def parse_time(value: str) -> NaiveTime:
    """Parse an HHMM or HHMMSS string; seconds default to 0.

    Raises:
        DateTimeFormatError: value is not 4 or 6 ASCII digits.
        DateTimeValueError: hour, minute or second out of range.
    """
    if not isinstance(value, str) or not _TIME_RE.match(value):
        raise DateTimeFormatError(f"Invalid time format {value!r}, expected HHMM or HHMMSS")

    hour = int(value[0:2])
    minute = int(value[2:4])
    second = int(value[4:6]) if len(value) > 4 else 0
    if not 0 <= hour <= 23 or not 0 <= minute <= 59 or not 0 <= second <= 59:
        raise DateTimeValueError(f"Invalid time value {value!r}")
    return NaiveTime(hour, minute, second)


def parse_datetime(date_value: str, time_value: str | None = None) -> NaiveDatetime:
    """Combine parse_date and parse_time. A missing or empty time means midnight."""
    date = parse_date(date_value)
    time = parse_time(time_value) if time_value else MIDNIGHT
    return NaiveDatetime(date, time)
