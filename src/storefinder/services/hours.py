"""Weekly hours parsing and HH:MM time-window helpers."""

from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Any, Mapping, Optional

from ..models.domain import DayHours

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

ALL_DAY = DayHours(open="00:00", close="23:59")

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_TWENTY_FOUR_HOURS = re.compile(r"\b24\b.*\bhours?\b")


def default_weekly_hours() -> dict[str, DayHours]:
    """Schedule used when authored hours text cannot be interpreted."""

    weekday = DayHours(open="09:00", close="21:00")
    hours = {day: weekday for day in WEEKDAYS[:6]}
    hours["sunday"] = DayHours(open="10:00", close="20:00")
    return hours


def all_day_hours() -> dict[str, DayHours]:
    return {day: ALL_DAY for day in WEEKDAYS}


def is_hhmm(value: Any) -> bool:
    return isinstance(value, str) and bool(_HHMM.match(value))


def to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def clock(now: datetime) -> str:
    """Time of day as zero-padded "HH:MM"."""
    return now.strftime("%H:%M")


def weekday_name(now: datetime) -> str:
    return WEEKDAYS[now.weekday()]


def minutes_between(start: str, end: str) -> int:
    return to_minutes(end) - to_minutes(start)


def is_all_day(hours: DayHours) -> bool:
    return hours.open == ALL_DAY.open and hours.close == ALL_DAY.close


def in_window(current: str, hours: DayHours) -> bool:
    """Half-open [open, close) check; zero-padded HH:MM strings sort chronologically."""
    return hours.open <= current < hours.close


def format_time(value: str) -> str:
    """Render "HH:MM" as 12-hour time, e.g. "21:00" -> "9:00 PM"."""

    hours, minutes = (int(part) for part in value.split(":"))
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {period}"


def coerce_weekly_hours(value: Any) -> Optional[dict[str, Optional[DayHours]]]:
    """Return a weekly schedule if ``value`` already has the structured shape.

    Accepts a mapping keyed by weekday name whose values are ``{"open", "close"}``
    mappings (or ``None`` for a closed day). Unknown keys are ignored; days that are
    missing or malformed are treated as closed. Returns ``None`` when the value is
    not a weekly schedule at all.
    """

    if not isinstance(value, Mapping) or "monday" not in value:
        return None
    schedule: dict[str, Optional[DayHours]] = {}
    for day in WEEKDAYS:
        entry = value.get(day)
        if isinstance(entry, DayHours):
            schedule[day] = entry
        elif isinstance(entry, Mapping) and is_hhmm(entry.get("open")) and is_hhmm(entry.get("close")):
            schedule[day] = DayHours(open=entry["open"], close=entry["close"])
    return schedule


def parse_hours(hours_text: Optional[str]) -> dict[str, Optional[DayHours]]:
    """Interpret authored hours text.

    Structured JSON schedules pass through, "24 hours" maps every day to
    00:00-23:59, and anything else (including free-form ranges such as
    "Mon-Fri: 8AM-9PM") falls back to the default schedule.
    """

    if not hours_text or not hours_text.strip():
        return default_weekly_hours()

    try:
        structured = coerce_weekly_hours(json.loads(hours_text))
    except (json.JSONDecodeError, TypeError):
        structured = None
    if structured is not None:
        return structured

    if _TWENTY_FOUR_HOURS.search(hours_text.lower()):
        return all_day_hours()

    return default_weekly_hours()


def hours_to_dict(hours: Optional[Mapping[str, Optional[DayHours]]]) -> Optional[dict[str, Optional[dict]]]:
    if hours is None:
        return None
    return {
        day: ({"open": entry.open, "close": entry.close} if entry else None)
        for day, entry in hours.items()
    }
