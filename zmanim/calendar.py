"""Astronomical calendar: sunrise, sunset, twilight and transit for a date and place."""

from __future__ import annotations

import json
import logging
import math
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional, Union

from .calculators import GEOMETRIC_ZENITH, AstronomicalCalculator, get_calculator
from .config import resolve_calculator_key, resolve_max_solar_dip
from .geolocation import HOUR_MILLIS, MINUTE_MILLIS, GeoLocation

__all__ = ["AstronomicalCalendar", "epoch_millis"]

LOGGER = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)


class _SeaLevelDefault:
    def __repr__(self) -> str:
        return "<sea level>"


# Marks an omitted day bound; ``None`` already means "no such event".
SEA_LEVEL = _SeaLevelDefault()

DayBound = Union[Optional[datetime], _SeaLevelDefault]


def epoch_millis(instant: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware datetime."""

    return (instant - _EPOCH) // _MILLISECOND


class AstronomicalCalendar:
    """Calculates sunrise, sunset, twilight and related times for one date and location.

    The date, location and calculator are plain mutable attributes; every time
    method is a pure function of their current values. Events that do not
    occur on the date (the sun never rises, sets, or reaches a twilight
    depression near the poles) are returned as ``None`` and stay ``None``
    through every derived value. Instants are aware datetimes in the
    location's timezone, truncated to the millisecond.

    Instances are not synchronised; give each thread its own :meth:`copy`.
    """

    GEOMETRIC_ZENITH = GEOMETRIC_ZENITH
    CIVIL_ZENITH = 96.0
    NAUTICAL_ZENITH = 102.0
    ASTRONOMICAL_ZENITH = 108.0

    MINUTE_MILLIS = MINUTE_MILLIS
    HOUR_MILLIS = HOUR_MILLIS

    def __init__(
        self,
        geo_location: GeoLocation,
        date: Union[date, datetime, str, int, None] = None,
        calculator: Optional[AstronomicalCalculator] = None,
    ) -> None:
        self.geo_location = geo_location
        self.date = date if date is not None else datetime.now(geo_location.zone).date()
        self.calculator = calculator if calculator is not None else get_calculator(
            resolve_calculator_key()
        )

    @property
    def date(self) -> date:
        return self._date

    @date.setter
    def date(self, value: Union[date, datetime, str, int]) -> None:
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(UTC)
            self._date = value.date()
        elif isinstance(value, date):
            self._date = value
        elif isinstance(value, str):
            self._date = date.fromisoformat(value)
        elif isinstance(value, int) and not isinstance(value, bool):
            self._date = (_EPOCH + timedelta(milliseconds=value)).date()
        else:
            raise TypeError(f"Unsupported date value: {value!r}")

    def adjusted_date(self) -> date:
        """The date shifted by the location's antimeridian adjustment."""

        offset = self.geo_location.antimeridian_adjustment()
        if offset == 0:
            return self._date
        return self._date + timedelta(days=offset)

    # Sunrise and sunset

    def sunrise(self) -> Optional[datetime]:
        """Elevation-adjusted sunrise: the upper limb touching the visible horizon."""

        return self.date_from_time(self.utc_sunrise(self.GEOMETRIC_ZENITH), True)

    def sea_level_sunrise(self) -> Optional[datetime]:
        """Sunrise ignoring elevation; the base for all light-level calculations."""

        return self.date_from_time(self.utc_sea_level_sunrise(self.GEOMETRIC_ZENITH), True)

    def sunset(self) -> Optional[datetime]:
        return self.date_from_time(self.utc_sunset(self.GEOMETRIC_ZENITH), False)

    def sea_level_sunset(self) -> Optional[datetime]:
        return self.date_from_time(self.utc_sea_level_sunset(self.GEOMETRIC_ZENITH), False)

    def sunrise_offset_by_degrees(self, offset_zenith: float) -> Optional[datetime]:
        """Morning time at which the sun's centre is at *offset_zenith* degrees from the vertical."""

        return self.date_from_time(self.utc_sunrise(offset_zenith), True)

    def sunset_offset_by_degrees(self, offset_zenith: float) -> Optional[datetime]:
        """Evening time at which the sun's centre is at *offset_zenith* degrees from the vertical."""

        return self.date_from_time(self.utc_sunset(offset_zenith), False)

    # Twilight

    def begin_civil_twilight(self) -> Optional[datetime]:
        return self.sunrise_offset_by_degrees(self.CIVIL_ZENITH)

    def begin_nautical_twilight(self) -> Optional[datetime]:
        return self.sunrise_offset_by_degrees(self.NAUTICAL_ZENITH)

    def begin_astronomical_twilight(self) -> Optional[datetime]:
        return self.sunrise_offset_by_degrees(self.ASTRONOMICAL_ZENITH)

    def end_civil_twilight(self) -> Optional[datetime]:
        return self.sunset_offset_by_degrees(self.CIVIL_ZENITH)

    def end_nautical_twilight(self) -> Optional[datetime]:
        return self.sunset_offset_by_degrees(self.NAUTICAL_ZENITH)

    def end_astronomical_twilight(self) -> Optional[datetime]:
        return self.sunset_offset_by_degrees(self.ASTRONOMICAL_ZENITH)

    # UTC fractional hours

    def utc_sunrise(self, zenith: float) -> Optional[float]:
        return self.calculator.utc_sunrise(self.adjusted_date(), self.geo_location, zenith, True)

    def utc_sea_level_sunrise(self, zenith: float) -> Optional[float]:
        return self.calculator.utc_sunrise(self.adjusted_date(), self.geo_location, zenith, False)

    def utc_sunset(self, zenith: float) -> Optional[float]:
        return self.calculator.utc_sunset(self.adjusted_date(), self.geo_location, zenith, True)

    def utc_sea_level_sunset(self, zenith: float) -> Optional[float]:
        return self.calculator.utc_sunset(self.adjusted_date(), self.geo_location, zenith, False)

    # Derived spans

    def temporal_hour(
        self, start_of_day: DayBound = SEA_LEVEL, end_of_day: DayBound = SEA_LEVEL
    ) -> Optional[int]:
        """A twelfth of the day in milliseconds.

        The day runs from sea-level sunrise to sea-level sunset unless other
        bounds are given, so the length of an hour does not depend on elevation.
        """

        if start_of_day is SEA_LEVEL:
            start_of_day = self.sea_level_sunrise()
        if end_of_day is SEA_LEVEL:
            end_of_day = self.sea_level_sunset()
        if start_of_day is None or end_of_day is None:
            return None
        return (epoch_millis(end_of_day) - epoch_millis(start_of_day)) // 12

    def sun_transit(
        self, start_of_day: DayBound = SEA_LEVEL, end_of_day: DayBound = SEA_LEVEL
    ) -> Optional[datetime]:
        """Midpoint between the start and end of the day (sea level by default)."""

        if start_of_day is SEA_LEVEL:
            start_of_day = self.sea_level_sunrise()
        if end_of_day is SEA_LEVEL:
            end_of_day = self.sea_level_sunset()
        temporal_hour = self.temporal_hour(start_of_day, end_of_day)
        if temporal_hour is None:
            return None
        return self.time_offset(start_of_day, temporal_hour * 6)

    @staticmethod
    def time_offset(
        instant: Optional[datetime], offset: Optional[float]
    ) -> Optional[datetime]:
        """Shift *instant* by *offset* milliseconds of elapsed time."""

        if instant is None or offset is None or math.isnan(offset):
            return None
        shifted = instant.astimezone(UTC) + timedelta(milliseconds=math.trunc(offset))
        return shifted.astimezone(instant.tzinfo)

    def date_from_time(self, utc_time: Optional[float], is_sunrise: bool) -> Optional[datetime]:
        """Attach a UTC fractional hour to the adjusted date and the location's zone.

        A sunrise late in the UTC day for a location far west, or a sunset early
        in the UTC day, belongs to the previous or next UTC date respectively.
        """

        if utc_time is None:
            return None
        calculated = utc_time
        hours = int(calculated)
        calculated -= hours
        calculated *= 60
        minutes = int(calculated)
        calculated -= minutes
        calculated *= 60
        seconds = int(calculated)
        calculated -= seconds
        millis = int(calculated * 1000)

        day = self.adjusted_date()
        local_time_hours = math.floor(self.geo_location.longitude / 15)
        if is_sunrise and local_time_hours + hours > 18:
            day -= timedelta(days=1)
        elif not is_sunrise and local_time_hours + hours < 6:
            day += timedelta(days=1)

        utc = datetime.combine(day, time(hours, minutes, seconds, millis * 1000), tzinfo=UTC)
        return utc.astimezone(self.geo_location.zone)

    # Solar dip search

    def sunrise_solar_dip_from_offset(
        self, minutes: Optional[float], max_solar_dip: Optional[float] = None
    ) -> Optional[float]:
        """Degrees below the geometric horizon matching *minutes* before sea-level sunrise.

        Steps of 0.0001° are accumulated exactly until the degree-based time
        crosses the clock-based one. Returns ``None`` when sunrise does not occur
        or no dip up to *max_solar_dip* degrees reaches the target.
        """

        if minutes is None or math.isnan(minutes):
            return None
        sea_level_sunrise = self.sea_level_sunrise()
        offset_by_time = self.time_offset(sea_level_sunrise, -(minutes * self.MINUTE_MILLIS))
        if offset_by_time is None:
            return None
        return self._solar_dip_search(
            minutes,
            sea_level_sunrise,
            offset_by_time,
            Decimal("0.0001"),
            True,
            max_solar_dip,
        )

    def sunset_solar_dip_from_offset(
        self, minutes: Optional[float], max_solar_dip: Optional[float] = None
    ) -> Optional[float]:
        """Degrees below the geometric horizon matching *minutes* after sea-level sunset."""

        if minutes is None or math.isnan(minutes):
            return None
        sea_level_sunset = self.sea_level_sunset()
        offset_by_time = self.time_offset(sea_level_sunset, minutes * self.MINUTE_MILLIS)
        if offset_by_time is None:
            return None
        return self._solar_dip_search(
            minutes,
            sea_level_sunset,
            offset_by_time,
            Decimal("0.001"),
            False,
            max_solar_dip,
        )

    def _solar_dip_search(
        self,
        minutes: float,
        start: Optional[datetime],
        target: datetime,
        increment: Decimal,
        is_sunrise: bool,
        max_solar_dip: Optional[float],
    ) -> Optional[float]:
        limit = Decimal(str(max_solar_dip if max_solar_dip is not None else resolve_max_solar_dip()))
        offset_by_degrees = self.sunrise_offset_by_degrees if is_sunrise else self.sunset_offset_by_degrees
        # Positive minutes move the event away from the day.
        away = -1 if is_sunrise else 1
        target_millis = epoch_millis(target)

        def short_of_target(candidate: Optional[datetime]) -> bool:
            if candidate is None:
                return True
            delta = epoch_millis(candidate) - target_millis
            return (minutes > 0 and delta * away < 0) or (minutes < 0 and delta * away > 0)

        degrees = Decimal(0)
        candidate = start
        iterations = 0
        seen_event = False
        while short_of_target(candidate):
            degrees = degrees + increment if minutes > 0 else degrees - increment
            iterations += 1
            if abs(degrees) > limit:
                self._log_dip_exhausted("max_solar_dip", is_sunrise, minutes, limit, iterations)
                return None
            candidate = offset_by_degrees(self.GEOMETRIC_ZENITH + float(degrees))
            if candidate is not None:
                seen_event = True
            elif seen_event or minutes < 0:
                # Past the sun's extreme position no further step yields an event.
                self._log_dip_exhausted("unreachable", is_sunrise, minutes, limit, iterations)
                return None

        LOGGER.debug(
            json.dumps(
                {
                    "event": "solar_dip_found",
                    "direction": "sunrise" if is_sunrise else "sunset",
                    "minutes": minutes,
                    "degrees": float(degrees),
                    "iterations": iterations,
                }
            )
        )
        return float(degrees)

    def _log_dip_exhausted(
        self, reason: str, is_sunrise: bool, minutes: float, limit: Decimal, iterations: int
    ) -> None:
        LOGGER.warning(
            json.dumps(
                {
                    "event": "solar_dip_search_exhausted",
                    "reason": reason,
                    "direction": "sunrise" if is_sunrise else "sunset",
                    "minutes": minutes,
                    "date": self._date.isoformat(),
                    "latitude": self.geo_location.latitude,
                    "longitude": self.geo_location.longitude,
                    "max_solar_dip": float(limit),
                    "iterations": iterations,
                }
            )
        )

    # Value semantics

    def copy(self) -> "AstronomicalCalendar":
        return AstronomicalCalendar(self.geo_location, self._date, self.calculator)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, AstronomicalCalendar):
            return NotImplemented
        return (
            self._date == other._date
            and self.geo_location == other.geo_location
            and type(self.calculator) is type(other.calculator)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(date={self._date.isoformat()}, "
            f"geo_location={self.geo_location!r}, calculator={self.calculator.name!r})"
        )
