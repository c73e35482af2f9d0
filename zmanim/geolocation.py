"""Geographic location consumed by the astronomical calendar."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

__all__ = ["GeoLocation"]

MINUTE_MILLIS = 60 * 1000
HOUR_MILLIS = MINUTE_MILLIS * 60

# Standard time is the lesser of the offsets on these two dates.
_RAW_OFFSET_REFERENCES = (datetime(2019, 1, 1), datetime(2019, 7, 1))


@dataclass(frozen=True)
class GeoLocation:
    """Latitude, longitude (west negative), elevation and timezone of an observer."""

    latitude: float
    longitude: float
    elevation: float = 0.0
    timezone: str = "UTC"
    name: Optional[str] = None
    _zone: ZoneInfo = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude must be between -90 and 90: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude must be between -180 and 180: {self.longitude}")
        if self.elevation < 0:
            raise ValueError(f"Elevation cannot be negative: {self.elevation}")
        try:
            zone = ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone identifier: {self.timezone}") from exc
        object.__setattr__(self, "_zone", zone)

    @property
    def zone(self) -> ZoneInfo:
        return self._zone

    def raw_offset(self) -> int:
        """Standard (non-daylight) UTC offset of the timezone in milliseconds."""

        offsets = [
            reference.replace(tzinfo=self._zone).utcoffset() or timedelta(0)
            for reference in _RAW_OFFSET_REFERENCES
        ]
        return int(min(offsets) / timedelta(milliseconds=1))

    def local_mean_time_offset(self) -> int:
        """Offset of local mean time from the zone's standard time, in milliseconds."""

        return int(self.longitude * 4 * MINUTE_MILLIS - self.raw_offset())

    def antimeridian_adjustment(self) -> int:
        """Return -1, 0 or 1 days to shift the date for zones across the antimeridian.

        A zone whose standard time differs from the longitude's mean time by 20
        hours or more (Samoa, Kiribati) keeps a calendar date one day away from
        the one the raw longitude implies.
        """

        local_hours_offset = self.local_mean_time_offset() / HOUR_MILLIS
        if local_hours_offset >= 20:
            return 1
        if local_hours_offset <= -20:
            return -1
        return 0
