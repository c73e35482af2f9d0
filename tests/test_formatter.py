from __future__ import annotations

import json

from zmanim.calendar import AstronomicalCalendar
from zmanim.formatter import (
    calendar_to_dict,
    calendar_to_json,
    format_calendar_text,
    format_duration,
    format_instant,
    zman_to_dict,
)
from zmanim.zman import Zman


def test_calendar_to_dict(denver_calendar: AstronomicalCalendar) -> None:
    payload = calendar_to_dict(denver_calendar)
    metadata = payload["metadata"]
    assert metadata["algorithm"] == "US National Oceanic and Atmospheric Administration Algorithm"
    assert metadata["date"] == "2020-06-05"
    assert metadata["location"] == "Denver"
    assert metadata["timezone"] == "America/Denver"
    assert metadata["timezone_offset"] == -7.0
    assert metadata["type"] == "AstronomicalCalendar"
    assert payload["times"]["sunrise"] == "2020-06-05T05:24:30.501-06:00"
    assert payload["times"]["sun_transit"] == "2020-06-05T12:58:43.797-06:00"
    assert payload["durations"]["temporal_hour"] == denver_calendar.temporal_hour()


def test_calendar_to_json_round_trips(denver_calendar: AstronomicalCalendar) -> None:
    assert json.loads(calendar_to_json(denver_calendar)) == calendar_to_dict(denver_calendar)


def test_polar_values_render_as_missing(polar_day_calendar: AstronomicalCalendar) -> None:
    payload = calendar_to_dict(polar_day_calendar)
    assert payload["times"]["sunrise"] is None
    assert payload["durations"]["temporal_hour"] is None
    text = format_calendar_text(polar_day_calendar)
    assert "sunrise:\tN/A" in text
    assert "temporal_hour:\tN/A" in text


def test_format_calendar_text(denver_calendar: AstronomicalCalendar) -> None:
    text = format_calendar_text(denver_calendar)
    assert "sea_level_sunset:\t2020-06-05T20:25:01.588-06:00" in text
    assert text.splitlines()[0].startswith("algorithm:")


def test_format_helpers() -> None:
    assert format_instant(None) is None
    assert format_duration(None) is None
    assert format_duration(4_462_965) == "1:14:22.965"
    assert format_duration(-1_500) == "-0:00:01.500"


def test_zman_to_dict(denver_calendar: AstronomicalCalendar) -> None:
    zman = Zman.from_instant(
        denver_calendar.sunset(), "Sunset", denver_calendar.geo_location, "Elevation adjusted"
    )
    assert zman_to_dict(zman) == {
        "label": "Sunset",
        "zman": "2020-06-05T20:32:57.848-06:00",
        "duration": None,
        "timezone": "America/Denver",
        "description": "Elevation adjusted",
    }
