import json

from src.storefinder.models.domain import DayHours
from src.storefinder.services.hours import (
    ALL_DAY,
    WEEKDAYS,
    format_time,
    in_window,
    minutes_between,
    parse_hours,
)


def test_twenty_four_hours_text_maps_every_day():
    for text in ("24 hours", "Open 24 Hours", "24 hour"):
        hours = parse_hours(text)
        assert set(hours) == set(WEEKDAYS)
        assert all(entry == ALL_DAY for entry in hours.values())


def test_free_form_ranges_fall_back_to_default_schedule():
    hours = parse_hours("Mon-Fri: 8AM-9PM, Sat-Sun: 9AM-8PM")

    assert hours["monday"] == DayHours(open="09:00", close="21:00")
    assert hours["saturday"] == DayHours(open="09:00", close="21:00")
    assert hours["sunday"] == DayHours(open="10:00", close="20:00")


def test_empty_text_uses_default_schedule():
    assert parse_hours("") == parse_hours(None) == parse_hours("Mon-Fri: 8AM-9PM")


def test_structured_schedule_passes_through():
    text = json.dumps({"monday": {"open": "07:00", "close": "22:00"}, "friday": {"open": "08:00", "close": "23:00"}})
    hours = parse_hours(text)

    assert hours == {
        "monday": DayHours(open="07:00", close="22:00"),
        "friday": DayHours(open="08:00", close="23:00"),
    }


def test_window_is_half_open():
    window = DayHours(open="09:00", close="21:00")
    assert in_window("09:00", window)
    assert in_window("20:59", window)
    assert not in_window("21:00", window)
    assert not in_window("08:59", window)


def test_minutes_between_and_format_time():
    assert minutes_between("20:10", "21:00") == 50
    assert format_time("21:00") == "9:00 PM"
    assert format_time("00:30") == "12:30 AM"
    assert format_time("12:05") == "12:05 PM"
