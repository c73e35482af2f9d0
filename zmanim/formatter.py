"""Text and JSON renderings of astronomical calendars and zmanim.

The calendar itself has no string or JSON form; everything here is built
from its public accessors, so this module depends on the engine and never
the other way round.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from .calendar import AstronomicalCalendar
from .geolocation import HOUR_MILLIS
from .zman import Zman

__all__ = [
    "format_instant",
    "format_duration",
    "calendar_metadata",
    "calendar_to_dict",
    "calendar_to_json",
    "format_calendar_text",
    "zman_to_dict",
]

# (output key, calendar method) pairs, in display order.
BASIC_TIMES: Tuple[Tuple[str, str], ...] = (
    ("begin_astronomical_twilight", "begin_astronomical_twilight"),
    ("begin_nautical_twilight", "begin_nautical_twilight"),
    ("begin_civil_twilight", "begin_civil_twilight"),
    ("sunrise", "sunrise"),
    ("sea_level_sunrise", "sea_level_sunrise"),
    ("sun_transit", "sun_transit"),
    ("sea_level_sunset", "sea_level_sunset"),
    ("sunset", "sunset"),
    ("end_civil_twilight", "end_civil_twilight"),
    ("end_nautical_twilight", "end_nautical_twilight"),
    ("end_astronomical_twilight", "end_astronomical_twilight"),
)


def format_instant(instant: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with millisecond precision and UTC offset, or ``None``."""

    if instant is None:
        return None
    return instant.isoformat(timespec="milliseconds")


def format_duration(millis: Optional[int]) -> Optional[str]:
    """Render milliseconds as ``H:MM:SS.mmm``."""

    if millis is None:
        return None
    sign = "-" if millis < 0 else ""
    millis = abs(millis)
    hours, remainder = divmod(millis, HOUR_MILLIS)
    minutes, remainder = divmod(remainder, 60_000)
    seconds, millis = divmod(remainder, 1000)
    return f"{sign}{hours}:{minutes:02d}:{seconds:02d}.{millis:03d}"


def calendar_metadata(calendar: AstronomicalCalendar) -> Dict[str, object]:
    location = calendar.geo_location
    return {
        "algorithm": calendar.calculator.name,
        "date": calendar.date.isoformat(),
        "location": location.name,
        "latitude": location.latitude,
        "longitude": location.longitude,
        "elevation": location.elevation,
        "timezone": location.timezone,
        "timezone_offset": location.raw_offset() / HOUR_MILLIS,
        "type": type(calendar).__name__,
    }


def calendar_to_dict(calendar: AstronomicalCalendar) -> Dict[str, object]:
    """Metadata plus every basic time of *calendar* as JSON-ready values."""

    times: Dict[str, Optional[str]] = {
        key: format_instant(getattr(calendar, method)()) for key, method in BASIC_TIMES
    }
    return {
        "metadata": calendar_metadata(calendar),
        "times": times,
        "durations": {"temporal_hour": calendar.temporal_hour()},
    }


def calendar_to_json(calendar: AstronomicalCalendar, indent: Optional[int] = None) -> str:
    return json.dumps(calendar_to_dict(calendar), indent=indent)


def format_calendar_text(calendar: AstronomicalCalendar) -> str:
    """Human readable table of the calendar's metadata and times."""

    payload = calendar_to_dict(calendar)
    lines: List[str] = []
    for key, value in payload["metadata"].items():  # type: ignore[union-attr]
        lines.append(f"{key}:\t{value}")
    for key, value in payload["times"].items():  # type: ignore[union-attr]
        lines.append(f"{key}:\t{value if value is not None else 'N/A'}")
    temporal_hour = format_duration(calendar.temporal_hour())
    lines.append(f"temporal_hour:\t{temporal_hour if temporal_hour is not None else 'N/A'}")
    return "\n".join(lines)


def zman_to_dict(zman: Zman) -> Dict[str, object]:
    location = zman.geo_location
    return {
        "label": zman.label,
        "zman": format_instant(zman.zman),
        "duration": zman.duration,
        "timezone": location.timezone if location is not None else None,
        "description": zman.description,
    }
