from __future__ import annotations

import calendar
import datetime as dt
import re

# yyyy-M-d h:m a, e.g. "2024-1-1 9:00 AM"
_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})\s+"
    r"(?P<hour>\d{1,2}):(?P<minute>\d{1,2})\s*(?P<meridiem>AM|PM)$",
    re.IGNORECASE,
)


def parse(text: str) -> dt.datetime:
    """Parse a ``yyyy-M-d h:m AM|PM`` string into a naive local datetime.

    Days 1..31 are always accepted: a day past the end of the month resolves
    to the month's last day (2023-2-30 -> 2023-02-28).
    """

    m = _PATTERN.match(text.strip())
    if not m:
        raise ValueError(f"Unable to parse date: {text!r}")

    year = int(m.group("year"))
    month = int(m.group("month"))
    day = int(m.group("day"))
    hour = int(m.group("hour"))
    minute = int(m.group("minute"))

    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range: {month}")
    if not 1 <= day <= 31:
        raise ValueError(f"Day out of range: {day}")
    if not 1 <= hour <= 12:
        raise ValueError(f"Hour out of range for 12-hour clock: {hour}")
    if not 0 <= minute <= 59:
        raise ValueError(f"Minute out of range: {minute}")

    day = min(day, calendar.monthrange(year, month)[1])

    hour %= 12
    if m.group("meridiem").upper() == "PM":
        hour += 12

    return dt.datetime(year, month, day, hour, minute)


def format(value: dt.datetime) -> str:
    # Long date, short time: "January 1, 2024 9:00 AM"
    hour12 = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{calendar.month_name[value.month]} {value.day}, {value.year} {hour12}:{value.minute:02d} {meridiem}"
