"""Date and time format detection for program CSVs.

Detection runs once per import. The date order (day-first vs month-first) is
inferred from every date value; the concrete date and time formats are picked
from the first sampled value that any known format recognises, so blank or
unrecognised leading values are skipped rather than deciding the format on
their own. The chosen formats are then applied uniformly to every row.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

from confprog.program_import.models import ColumnMapping, DateOrder, RawTable


_GENERIC_DATE_RE = re.compile(r"(\d{1,2})[./-](\d{1,2})[./-](\d{4})")

# HH:MM or HH:MM:SS, as produced by the time parsers and accepted as overrides.
CLOCK_TIME_PATTERN = r"^\d{1,2}:\d{2}(:\d{2})?$"
_CLOCK_TIME_RE = re.compile(CLOCK_TIME_PATTERN)


@dataclass(frozen=True)
class DateFormat:
    name: str
    pattern: re.Pattern[str]
    parse: Callable[[re.Match[str]], str]

    def apply(self, value: str) -> str:
        """Normalize value to YYYY-MM-DD, or "" when it does not match."""
        m = self.pattern.search(value or "")
        return self.parse(m) if m else ""


@dataclass(frozen=True)
class TimeFormat:
    name: str
    pattern: re.Pattern[str]
    parse_start: Callable[[re.Match[str]], str]
    parse_end: Callable[[re.Match[str]], str] | None = None

    @property
    def is_range(self) -> bool:
        return self.parse_end is not None


@dataclass(frozen=True)
class DetectedFormats:
    date_order: DateOrder
    date_format: DateFormat | None
    time_format: TimeFormat | None


def _ymd(year: str, month: str, day: str) -> str:
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def _day_first(m: re.Match[str]) -> str:
    return _ymd(m.group(3), m.group(2), m.group(1))


def _month_first(m: re.Match[str]) -> str:
    return _ymd(m.group(3), m.group(1), m.group(2))


def _iso(m: re.Match[str]) -> str:
    return m.group(0)


_DOT = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})")
_SLASH = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
_ISO = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_DASH = re.compile(r"(\d{1,2})-(\d{1,2})-(\d{4})")

DATE_FORMATS_DD_FIRST: tuple[DateFormat, ...] = (
    DateFormat("DD.MM.YYYY", _DOT, _day_first),
    DateFormat("DD/MM/YYYY", _SLASH, _day_first),
    DateFormat("YYYY-MM-DD", _ISO, _iso),
    DateFormat("DD-MM-YYYY", _DASH, _day_first),
)

DATE_FORMATS_MM_FIRST: tuple[DateFormat, ...] = (
    DateFormat("MM.DD.YYYY", _DOT, _month_first),
    DateFormat("MM/DD/YYYY", _SLASH, _month_first),
    DateFormat("YYYY-MM-DD", _ISO, _iso),
    DateFormat("MM-DD-YYYY", _DASH, _month_first),
)


def to_24h(hour: int, period: str) -> int:
    """Convert a 12-hour clock hour to 24-hour."""
    period = period.upper()
    if period == "PM" and hour < 12:
        return hour + 12
    if period == "AM" and hour == 12:
        return 0
    return hour


def _hms(hour: int | str, minute: str) -> str:
    return f"{str(hour).zfill(2)}:{minute}:00"


TIME_FORMATS: tuple[TimeFormat, ...] = (
    TimeFormat(
        "HH:MM AM/PM - HH:MM AM/PM (range)",
        re.compile(
            r"(\d{1,2}):(\d{2})\s*(AM|PM)\s*[-–to]+\s*(\d{1,2}):(\d{2})\s*(AM|PM)",
            re.IGNORECASE,
        ),
        lambda m: _hms(to_24h(int(m.group(1)), m.group(3)), m.group(2)),
        lambda m: _hms(to_24h(int(m.group(4)), m.group(6)), m.group(5)),
    ),
    TimeFormat(
        "HH:MM AM/PM (single)",
        re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE),
        lambda m: _hms(to_24h(int(m.group(1)), m.group(3)), m.group(2)),
    ),
    TimeFormat(
        "HH:MM - HH:MM (range)",
        re.compile(r"(\d{1,2}):(\d{2})\s*[-–]\s*(\d{1,2}):(\d{2})"),
        lambda m: _hms(m.group(1), m.group(2)),
        lambda m: _hms(m.group(3), m.group(4)),
    ),
    TimeFormat(
        "HH:MM (single)",
        re.compile(r"(\d{1,2}):(\d{2})"),
        lambda m: _hms(m.group(1), m.group(2)),
    ),
)


def date_formats(order: DateOrder) -> tuple[DateFormat, ...]:
    if order == DateOrder.MONTH_FIRST:
        return DATE_FORMATS_MM_FIRST
    return DATE_FORMATS_DD_FIRST


def detect_date_order(values: Iterable[str]) -> DateOrder:
    """Infer day-first vs month-first from every sampled date.

    A first component above 12 cannot be a month, so the data is day-first;
    otherwise a second component above 12 means month-first. Ambiguous data
    defaults to day-first.
    """
    max_first = 0
    max_second = 0
    for value in values:
        m = _GENERIC_DATE_RE.search(value or "")
        if not m:
            continue
        max_first = max(max_first, int(m.group(1)))
        max_second = max(max_second, int(m.group(2)))

    if max_first > 12:
        return DateOrder.DAY_FIRST
    if max_second > 12:
        return DateOrder.MONTH_FIRST
    return DateOrder.DAY_FIRST


_F = TypeVar("_F", DateFormat, TimeFormat)


def _first_match(values: Iterable[str], formats: tuple[_F, ...]) -> _F | None:
    for value in values:
        text = (value or "").strip()
        if not text:
            continue
        for fmt in formats:
            if fmt.pattern.search(text):
                return fmt
    return None


def detect_date_format(values: Iterable[str], order: DateOrder) -> DateFormat | None:
    """Pick the date format of the first recognisable sample."""
    return _first_match(values, date_formats(order))


def detect_time_format(values: Iterable[str]) -> TimeFormat | None:
    """Pick the time format of the first recognisable sample."""
    return _first_match(values, TIME_FORMATS)


def detect_formats(
    table: RawTable,
    mapping: ColumnMapping,
    date_order: DateOrder | None = None,
) -> DetectedFormats:
    """Run date order, date format and time format detection for one import.

    An explicit date_order (the user's toggle) overrides inference.
    """
    date_values = (
        [v for v in table.column_values(mapping.date) if v]
        if mapping.date is not None
        else []
    )
    order = date_order or detect_date_order(date_values)
    date_format = detect_date_format(date_values, order) if date_values else None

    time_format = None
    if mapping.time is not None:
        time_format = detect_time_format(table.column_values(mapping.time))

    return DetectedFormats(
        date_order=order, date_format=date_format, time_format=time_format
    )


def parse_time_value(value: str, fmt: TimeFormat | None) -> tuple[str, str]:
    """Parse (start, end) as HH:MM:SS using fmt; ("", "") when it does not match.

    Single-time formats return end == start.
    """
    if fmt is None:
        return "", ""
    m = fmt.pattern.search(value or "")
    if not m:
        return "", ""
    start = fmt.parse_start(m)
    end = fmt.parse_end(m) if fmt.parse_end else start
    return start, end


def parse_end_time_value(value: str) -> str:
    """Parse a dedicated end-time cell; only the start part of any format is used."""
    for fmt in TIME_FORMATS:
        m = fmt.pattern.search(value or "")
        if m:
            return fmt.parse_start(m)
    return ""


def is_clock_time(value: str) -> bool:
    return bool(_CLOCK_TIME_RE.match(value or ""))


def time_to_minutes(value: str) -> int:
    """Minutes since midnight for HH:MM or HH:MM:SS text."""
    parts = value.split(":")
    return int(parts[0]) * 60 + int(parts[1])


def minutes_to_time(total: int) -> str:
    """HH:MM:00 for a minute count (not wrapped past midnight)."""
    return f"{total // 60:02d}:{total % 60:02d}:00"
