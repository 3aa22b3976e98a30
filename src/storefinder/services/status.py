"""Open/closed status classification for stores."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..config import settings
from ..models.domain import DayHours, SpecialHours, Store, StatusResult
from .hours import clock, format_time, in_window, is_all_day, minutes_between, weekday_name

OPEN = "open"
CLOSING_SOON = "closing-soon"
OPENING_SOON = "opening-soon"
CLOSED = "closed"
UNKNOWN = "unknown"

_COLORS = {
    OPEN: "green",
    CLOSING_SOON: "yellow",
    OPENING_SOON: "yellow",
    CLOSED: "red",
    UNKNOWN: "gray",
}


def _result(state: str, message: str, minutes_remaining: Optional[int] = None) -> StatusResult:
    return StatusResult(state=state, message=message, color=_COLORS[state], minutes_remaining=minutes_remaining)


def _special_hours_for(store: Store, now: datetime) -> Optional[SpecialHours]:
    today = now.date().isoformat()
    return next((entry for entry in store.special_hours if entry.date == today), None)


def _todays_hours(store: Store, now: datetime) -> Optional[DayHours]:
    if not store.hours:
        return None
    return store.hours.get(weekday_name(now))


def is_open(store: Store, now: datetime) -> bool:
    """True when ``now`` falls inside today's opening window."""

    special = _special_hours_for(store, now)
    if special is not None and special.status == CLOSED:
        return False
    hours = _todays_hours(store, now)
    if hours is None:
        return False
    if is_all_day(hours):
        return True
    return in_window(clock(now), hours)


def today_hours_text(store: Store, now: datetime) -> str:
    hours = _todays_hours(store, now)
    if hours is None:
        return "Hours not available"
    if is_all_day(hours):
        return "Open 24 hours"
    if is_open(store, now):
        return f"Open until {format_time(hours.close)}"
    return f"Opens at {format_time(hours.open)}"


def classify(store: Store, now: datetime, *, window_minutes: Optional[int] = None) -> StatusResult:
    """Classify a store as open, closing-soon, opening-soon, closed or unknown at ``now``.

    Depends only on the store's weekly hours, its special hours and ``now``.
    """

    window = window_minutes if window_minutes is not None else settings.status_window_minutes

    if store.hours is None:
        return _result(UNKNOWN, "Hours not available")

    special = _special_hours_for(store, now)
    if special is not None and special.status == CLOSED:
        return _result(CLOSED, "Closed today (special hours)")

    hours = store.hours.get(weekday_name(now))
    if hours is None:
        return _result(CLOSED, "Closed today")

    if is_all_day(hours):
        return _result(OPEN, "Open 24 hours")

    current = clock(now)
    if in_window(current, hours):
        until_close = minutes_between(current, hours.close)
        if until_close <= window:
            return _result(CLOSING_SOON, f"Closes in {until_close} min", until_close)
        return _result(OPEN, f"Open until {format_time(hours.close)}")

    if current < hours.open:
        until_open = minutes_between(current, hours.open)
        if until_open <= window:
            return _result(OPENING_SOON, f"Opens in {until_open} min", until_open)

    return _result(CLOSED, f"Opens at {format_time(hours.open)}")
