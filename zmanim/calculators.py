"""Solar-position calculators returning sunrise and sunset as UTC fractional hours."""

from __future__ import annotations

import json
import logging
import math
from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Dict, Optional, Protocol

import erfa

from .geolocation import GeoLocation

__all__ = [
    "AstronomicalCalculator",
    "BaseCalculator",
    "NOAACalculator",
    "SunTimesCalculator",
    "CALCULATORS",
    "GEOMETRIC_ZENITH",
    "get_calculator",
]

LOGGER = logging.getLogger(__name__)

GEOMETRIC_ZENITH = 90.0
DEG_PER_HOUR = 360.0 / 24.0  # Degrees of longitude per hour of time.


def _radians(degrees: float) -> float:
    return degrees * math.pi / 180


def _degrees(radians: float) -> float:
    return radians * 180 / math.pi


def _sin_deg(degrees: float) -> float:
    return math.sin(_radians(degrees))


def _cos_deg(degrees: float) -> float:
    return math.cos(_radians(degrees))


def _tan_deg(degrees: float) -> float:
    return math.tan(_radians(degrees))


def _acos_deg(x: float) -> Optional[float]:
    """Arccosine in degrees, or ``None`` outside the function's domain."""

    if not -1.0 <= x <= 1.0:
        return None
    return _degrees(math.acos(x))


def _asin_deg(x: float) -> float:
    return _degrees(math.asin(x))


def _wrap_hours(hours: float) -> float:
    """Bring *hours* into ``[0, 24)``."""

    while hours < 0.0:
        hours += 24.0
    while hours >= 24.0:
        hours -= 24.0
    return hours


class AstronomicalCalculator(Protocol):
    """Interface shared by every sunrise/sunset strategy."""

    name: str

    def adjust_zenith(self, zenith: float, elevation: float) -> float: ...

    def utc_sunrise(
        self, day: date, location: GeoLocation, zenith: float, adjust_for_elevation: bool
    ) -> Optional[float]: ...

    def utc_sunset(
        self, day: date, location: GeoLocation, zenith: float, adjust_for_elevation: bool
    ) -> Optional[float]: ...


class BaseCalculator(ABC):
    """Zenith adjustment common to all calculators.

    Refraction and the solar radius are only added for the geometric zenith,
    together with the dip of the horizon seen from *elevation* meters. Twilight
    and other degree-based zeniths describe the centre of the sun against the
    geometric horizon and are used as given.
    """

    name = "Base"

    def __init__(
        self,
        refraction: float = 34 / 60.0,
        solar_radius: float = 16 / 60.0,
        earth_radius: float = 6356.9,
    ) -> None:
        self.refraction = refraction
        self.solar_radius = solar_radius
        self.earth_radius = earth_radius  # km

    def elevation_adjustment(self, elevation: float) -> float:
        """Dip of the horizon in degrees for an observer *elevation* meters high."""

        return _degrees(math.acos(self.earth_radius / (self.earth_radius + (elevation / 1000))))

    def adjust_zenith(self, zenith: float, elevation: float) -> float:
        if zenith == GEOMETRIC_ZENITH:
            return zenith + (
                self.solar_radius + self.refraction + self.elevation_adjustment(elevation)
            )
        return zenith

    def utc_sunrise(
        self, day: date, location: GeoLocation, zenith: float, adjust_for_elevation: bool
    ) -> Optional[float]:
        elevation = location.elevation if adjust_for_elevation else 0.0
        adjusted_zenith = self.adjust_zenith(zenith, elevation)
        return self._time_utc(day, location.latitude, location.longitude, adjusted_zenith, True)

    def utc_sunset(
        self, day: date, location: GeoLocation, zenith: float, adjust_for_elevation: bool
    ) -> Optional[float]:
        elevation = location.elevation if adjust_for_elevation else 0.0
        adjusted_zenith = self.adjust_zenith(zenith, elevation)
        return self._time_utc(day, location.latitude, location.longitude, adjusted_zenith, False)

    @abstractmethod
    def _time_utc(
        self, day: date, latitude: float, longitude: float, zenith: float, is_sunrise: bool
    ) -> Optional[float]:
        """UTC fractional hour the sun reaches *zenith*, or ``None`` if it never does."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NOAACalculator(BaseCalculator):
    """Sunrise and sunset after the NOAA solar calculator (Meeus series).

    Declination and the equation of time are evaluated at solar noon and then
    refined once at the approximate event time. Longitudes are flipped to the
    NOAA convention (west positive) internally.
    """

    name = "US National Oceanic and Atmospheric Administration Algorithm"

    JULIAN_DAY_JAN_1_2000 = erfa.DJ00
    JULIAN_DAYS_PER_CENTURY = erfa.DJC

    def _time_utc(
        self, day: date, latitude: float, longitude: float, zenith: float, is_sunrise: bool
    ) -> Optional[float]:
        minutes = self._event_utc_minutes(
            self.julian_day(day), latitude, -longitude, zenith, is_sunrise
        )
        if minutes is None:
            return None
        return _wrap_hours(minutes / 60)

    @staticmethod
    def julian_day(day: date) -> float:
        """Julian day number at 0h UT of *day*."""

        djm0, djm = erfa.cal2jd(day.year, day.month, day.day)
        return float(djm0) + float(djm)

    @classmethod
    def julian_centuries(cls, julian_day: float) -> float:
        return (julian_day - cls.JULIAN_DAY_JAN_1_2000) / cls.JULIAN_DAYS_PER_CENTURY

    @classmethod
    def julian_day_from_centuries(cls, julian_centuries: float) -> float:
        return julian_centuries * cls.JULIAN_DAYS_PER_CENTURY + cls.JULIAN_DAY_JAN_1_2000

    @staticmethod
    def sun_geometric_mean_longitude(julian_centuries: float) -> float:
        longitude = 280.46646 + julian_centuries * (36000.76983 + 0.0003032 * julian_centuries)
        while longitude > 360.0:
            longitude -= 360.0
        while longitude < 0.0:
            longitude += 360.0
        return longitude

    @staticmethod
    def sun_geometric_mean_anomaly(julian_centuries: float) -> float:
        return 357.52911 + julian_centuries * (35999.05029 - 0.0001537 * julian_centuries)

    @staticmethod
    def earth_orbit_eccentricity(julian_centuries: float) -> float:
        return 0.016708634 - julian_centuries * (0.000042037 + 0.0000001267 * julian_centuries)

    @classmethod
    def sun_equation_of_center(cls, julian_centuries: float) -> float:
        mrad = _radians(cls.sun_geometric_mean_anomaly(julian_centuries))
        sinm = math.sin(mrad)
        sin2m = math.sin(mrad + mrad)
        sin3m = math.sin(mrad + mrad + mrad)
        return (
            sinm * (1.914602 - julian_centuries * (0.004817 + 0.000014 * julian_centuries))
            + sin2m * (0.019993 - 0.000101 * julian_centuries)
            + sin3m * 0.000289
        )

    @classmethod
    def sun_true_longitude(cls, julian_centuries: float) -> float:
        return cls.sun_geometric_mean_longitude(julian_centuries) + cls.sun_equation_of_center(
            julian_centuries
        )

    @classmethod
    def sun_apparent_longitude(cls, julian_centuries: float) -> float:
        omega = 125.04 - 1934.136 * julian_centuries
        return cls.sun_true_longitude(julian_centuries) - 0.00569 - 0.00478 * math.sin(
            _radians(omega)
        )

    @staticmethod
    def mean_obliquity_of_ecliptic(julian_centuries: float) -> float:
        seconds = 21.448 - julian_centuries * (
            46.8150 + julian_centuries * (0.00059 - julian_centuries * 0.001813)
        )
        return 23.0 + (26.0 + (seconds / 60.0)) / 60.0

    @classmethod
    def obliquity_correction(cls, julian_centuries: float) -> float:
        omega = 125.04 - 1934.136 * julian_centuries
        return cls.mean_obliquity_of_ecliptic(julian_centuries) + 0.00256 * math.cos(
            _radians(omega)
        )

    @classmethod
    def sun_declination(cls, julian_centuries: float) -> float:
        """Solar declination in degrees."""

        sint = math.sin(_radians(cls.obliquity_correction(julian_centuries))) * math.sin(
            _radians(cls.sun_apparent_longitude(julian_centuries))
        )
        return _degrees(math.asin(sint))

    @classmethod
    def equation_of_time(cls, julian_centuries: float) -> float:
        """Equation of time in minutes."""

        epsilon = cls.obliquity_correction(julian_centuries)
        geom_mean_long_sun = cls.sun_geometric_mean_longitude(julian_centuries)
        eccentricity = cls.earth_orbit_eccentricity(julian_centuries)
        geom_mean_anomaly_sun = cls.sun_geometric_mean_anomaly(julian_centuries)

        y = math.tan(_radians(epsilon) / 2.0)
        y *= y

        sin2l0 = math.sin(2.0 * _radians(geom_mean_long_sun))
        sinm = math.sin(_radians(geom_mean_anomaly_sun))
        cos2l0 = math.cos(2.0 * _radians(geom_mean_long_sun))
        sin4l0 = math.sin(4.0 * _radians(geom_mean_long_sun))
        sin2m = math.sin(2.0 * _radians(geom_mean_anomaly_sun))

        equation_of_time = (
            y * sin2l0
            - 2.0 * eccentricity * sinm
            + 4.0 * eccentricity * y * sinm * cos2l0
            - 0.5 * y * y * sin4l0
            - 1.25 * eccentricity * eccentricity * sin2m
        )
        return _degrees(equation_of_time) * 4.0

    @staticmethod
    def sun_hour_angle(
        latitude: float, solar_declination: float, zenith: float, is_sunrise: bool
    ) -> Optional[float]:
        """Hour angle of the event in radians, or ``None`` if the sun never reaches *zenith*."""

        lat_rad = _radians(latitude)
        sd_rad = _radians(solar_declination)
        ratio = math.cos(_radians(zenith)) / (math.cos(lat_rad) * math.cos(sd_rad)) - math.tan(
            lat_rad
        ) * math.tan(sd_rad)
        if not -1.0 <= ratio <= 1.0:
            return None
        hour_angle = math.acos(ratio)
        return hour_angle if is_sunrise else -hour_angle

    @classmethod
    def solar_noon_utc(cls, julian_centuries: float, longitude: float) -> float:
        """Solar noon in minutes after 0h UT for a west-positive *longitude*."""

        tnoon = cls.julian_centuries(
            cls.julian_day_from_centuries(julian_centuries) + longitude / 360.0
        )
        eq_time = cls.equation_of_time(tnoon)
        sol_noon_utc = 720 + (longitude * 4) - eq_time

        newt = cls.julian_centuries(
            cls.julian_day_from_centuries(julian_centuries) - 0.5 + sol_noon_utc / 1440.0
        )
        eq_time = cls.equation_of_time(newt)
        return 720 + (longitude * 4) - eq_time

    @classmethod
    def _event_utc_minutes(
        cls,
        julian_day: float,
        latitude: float,
        longitude: float,
        zenith: float,
        is_sunrise: bool,
    ) -> Optional[float]:
        julian_centuries = cls.julian_centuries(julian_day)

        # Declination at solar noon is a better first guess than 0h.
        noonmin = cls.solar_noon_utc(julian_centuries, longitude)
        tnoon = cls.julian_centuries(julian_day + noonmin / 1440.0)

        eq_time = cls.equation_of_time(tnoon)
        solar_dec = cls.sun_declination(tnoon)
        hour_angle = cls.sun_hour_angle(latitude, solar_dec, zenith, is_sunrise)
        if hour_angle is None:
            return None
        time_utc = 720 + 4 * (longitude - _degrees(hour_angle)) - eq_time

        # Second pass at the approximate event time.
        newt = cls.julian_centuries(
            cls.julian_day_from_centuries(julian_centuries) + time_utc / 1440.0
        )
        eq_time = cls.equation_of_time(newt)
        solar_dec = cls.sun_declination(newt)
        hour_angle = cls.sun_hour_angle(latitude, solar_dec, zenith, is_sunrise)
        if hour_angle is None:
            return None
        return 720 + 4 * (longitude - _degrees(hour_angle)) - eq_time


class SunTimesCalculator(BaseCalculator):
    """US Naval Observatory almanac approximation for sunrise and sunset.

    Cheaper than :class:`NOAACalculator` and within a few seconds of it at
    temperate latitudes; the two drift apart approaching the poles.
    """

    name = "US Naval Almanac Algorithm"

    @staticmethod
    def hours_from_meridian(longitude: float) -> float:
        """Hours between the location and Greenwich; negative west of it."""

        return longitude / DEG_PER_HOUR

    @staticmethod
    def approx_time_days(day_of_year: int, hours_from_meridian: float, is_sunrise: bool) -> float:
        # Assumes 6am and 6pm events to derive the mean anomaly.
        if is_sunrise:
            return day_of_year + ((6 - hours_from_meridian) / 24)
        return day_of_year + ((18 - hours_from_meridian) / 24)

    @classmethod
    def mean_anomaly(cls, day_of_year: int, longitude: float, is_sunrise: bool) -> float:
        approx_days = cls.approx_time_days(
            day_of_year, cls.hours_from_meridian(longitude), is_sunrise
        )
        return (0.9856 * approx_days) - 3.289

    @staticmethod
    def sun_true_longitude(sun_mean_anomaly: float) -> float:
        longitude = (
            sun_mean_anomaly
            + (1.916 * _sin_deg(sun_mean_anomaly))
            + (0.020 * _sin_deg(2 * sun_mean_anomaly))
            + 282.634
        )
        if longitude >= 360:
            longitude -= 360
        if longitude < 0:
            longitude += 360
        return longitude

    @staticmethod
    def sun_right_ascension_hours(sun_true_longitude: float) -> float:
        a = 0.91764 * _tan_deg(sun_true_longitude)
        ra = 360 / (2 * math.pi) * math.atan(a)

        # Put the right ascension in the same quadrant as the true longitude.
        l_quadrant = math.floor(sun_true_longitude / 90) * 90
        ra_quadrant = math.floor(ra / 90) * 90
        ra += l_quadrant - ra_quadrant

        return ra / DEG_PER_HOUR

    @staticmethod
    def cos_local_hour_angle(sun_true_longitude: float, latitude: float, zenith: float) -> float:
        sin_dec = 0.39782 * _sin_deg(sun_true_longitude)
        cos_dec = _cos_deg(_asin_deg(sin_dec))
        return (_cos_deg(zenith) - (sin_dec * _sin_deg(latitude))) / (
            cos_dec * _cos_deg(latitude)
        )

    @staticmethod
    def local_mean_time(
        local_hour: float, sun_right_ascension_hours: float, approx_time_days: float
    ) -> float:
        return local_hour + sun_right_ascension_hours - (0.06571 * approx_time_days) - 6.622

    def _time_utc(
        self, day: date, latitude: float, longitude: float, zenith: float, is_sunrise: bool
    ) -> Optional[float]:
        day_of_year = day.timetuple().tm_yday
        hours_from_meridian = self.hours_from_meridian(longitude)
        sun_mean_anomaly = self.mean_anomaly(day_of_year, longitude, is_sunrise)
        sun_true_long = self.sun_true_longitude(sun_mean_anomaly)
        sun_ra_hours = self.sun_right_ascension_hours(sun_true_long)

        hour_angle = _acos_deg(self.cos_local_hour_angle(sun_true_long, latitude, zenith))
        if hour_angle is None:
            return None
        local_hour_angle = 360 - hour_angle if is_sunrise else hour_angle
        local_hour = local_hour_angle / DEG_PER_HOUR

        local_mean_time = self.local_mean_time(
            local_hour,
            sun_ra_hours,
            self.approx_time_days(day_of_year, hours_from_meridian, is_sunrise),
        )
        return _wrap_hours(local_mean_time - hours_from_meridian)


def _erfa_calculator() -> BaseCalculator:
    from .ephemeris import ErfaCalculator

    return ErfaCalculator()


CALCULATORS: Dict[str, Callable[[], BaseCalculator]] = {
    "noaa": NOAACalculator,
    "suntimes": SunTimesCalculator,
    "erfa": _erfa_calculator,
}


def get_calculator(key: str) -> BaseCalculator:
    """Instantiate the calculator registered under *key*."""

    try:
        factory = CALCULATORS[key.lower()]
    except KeyError as exc:
        raise ValueError(f"Unsupported calculator: {key}") from exc
    calculator = factory()
    LOGGER.debug(json.dumps({"event": "calculator_selected", "calculator": calculator.name}))
    return calculator
