"""Numerical sunrise/sunset strategy built on ERFA's solar ephemeris."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, time, timedelta
from typing import List, Optional, Tuple

import erfa
import numpy as np

from .calculators import BaseCalculator, _wrap_hours

__all__ = ["ErfaCalculator"]

AU_KM = erfa.DAU / 1000.0
# Speed of light in AU per day.
C_AU_PER_DAY = erfa.DAYSEC * erfa.CMPS / erfa.DAU


def _julian_dates(instant: datetime) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Two-part TT and UT1 Julian dates of an aware instant, with UT1 equal to UTC."""

    utc = instant.astimezone(UTC)
    seconds = utc.second + utc.microsecond / 1_000_000
    ut1 = erfa.dtf2d("UTC", utc.year, utc.month, utc.day, utc.hour, utc.minute, seconds)
    tt = erfa.taitt(*erfa.utctai(*ut1))
    return tt, ut1


def _site_vector(lat_rad: float, lon_rad: float) -> np.ndarray:
    """Geocentric ITRS position (km) of a sea-level observer on the WGS84 ellipsoid."""

    return np.array(erfa.gd2gc(erfa.WGS84, lon_rad, lat_rad, 0.0), dtype=float) / 1000.0


def _site_up(lat_rad: float, lon_rad: float) -> np.ndarray:
    """Unit vector along the geodetic vertical."""

    return np.array(
        [
            math.cos(lat_rad) * math.cos(lon_rad),
            math.cos(lat_rad) * math.sin(lon_rad),
            math.sin(lat_rad),
        ]
    )


def _sun_gcrs_km(tt: Tuple[float, float]) -> np.ndarray:
    """Geocentric direction of the sun with annual aberration, scaled to km."""

    pvh, pvb = erfa.epv00(*tt)
    sun_au = -np.asarray(pvh["p"], dtype=float)
    distance = float(np.linalg.norm(sun_au))
    velocity = np.asarray(pvb["v"], dtype=float) / C_AU_PER_DAY
    bm1 = math.sqrt(1.0 - float(np.dot(velocity, velocity)))
    apparent = np.asarray(erfa.ab(sun_au / distance, velocity, distance, bm1), dtype=float)
    return apparent * distance * AU_KM


def _sun_altitude_degrees(dt: datetime, site_vector: np.ndarray, site_up: np.ndarray) -> float:
    """Geometric altitude of the sun's centre in degrees above the horizontal plane."""

    tt, ut1 = _julian_dates(dt)
    rotation = np.array(erfa.c2t06a(*tt, *ut1, 0.0, 0.0), dtype=float)
    sun_itrf = rotation @ _sun_gcrs_km(tt)
    topocentric = sun_itrf - site_vector
    norm = np.linalg.norm(topocentric)
    return math.degrees(
        math.asin(float(np.clip(np.dot(topocentric / norm, site_up), -1.0, 1.0)))
    )


def _refine_crossing(
    start_dt: datetime,
    end_dt: datetime,
    site_vector: np.ndarray,
    site_up: np.ndarray,
    threshold: float,
    max_iterations: int = 32,
) -> datetime:
    """Refine the crossing between *start_dt* and *end_dt* via binary search."""

    value_start = _sun_altitude_degrees(start_dt, site_vector, site_up) - threshold
    if value_start == 0:
        return start_dt
    low_dt, low_val = start_dt, value_start
    high_dt = end_dt
    for _ in range(max_iterations):
        if (high_dt - low_dt) <= timedelta(milliseconds=1):
            break
        mid_dt = low_dt + (high_dt - low_dt) / 2
        mid_val = _sun_altitude_degrees(mid_dt, site_vector, site_up) - threshold
        if mid_val == 0:
            return mid_dt
        if low_val * mid_val < 0:
            high_dt = mid_dt
        else:
            low_dt, low_val = mid_dt, mid_val
    return low_dt + (high_dt - low_dt) / 2


class ErfaCalculator(BaseCalculator):
    """Sunrise and sunset found numerically from the ERFA solar ephemeris.

    The apparent geocentric sun (``epv00`` plus annual aberration) is rotated
    into the terrestrial frame with the IAU 2006/2000A model and its altitude
    sampled across the half day before (sunrise) or after (sunset) the
    approximate local noon. The first sampled crossing of the target altitude
    is refined by bisection to the millisecond. UT1 is taken equal to UTC and
    polar motion is ignored.
    """

    name = "ERFA Apparent Solar Altitude Algorithm"

    def __init__(self, step_minutes: int = 20, **kwargs) -> None:
        super().__init__(**kwargs)
        if step_minutes <= 0:
            raise ValueError("step_minutes must be positive")
        self.step_minutes = step_minutes

    def _time_utc(
        self, day: date, latitude: float, longitude: float, zenith: float, is_sunrise: bool
    ) -> Optional[float]:
        lat_rad = math.radians(latitude)
        lon_rad = math.radians(longitude)
        site_vector = _site_vector(lat_rad, lon_rad)
        site_up = _site_up(lat_rad, lon_rad)
        threshold = 90.0 - zenith

        midnight = datetime.combine(day, time(), tzinfo=UTC)
        noon = midnight + timedelta(hours=12 - longitude / 15.0)
        window_start = noon - timedelta(hours=12) if is_sunrise else noon
        step = timedelta(minutes=self.step_minutes)
        count = int(12 * 60 / self.step_minutes)

        times: List[datetime] = [window_start + step * idx for idx in range(count + 1)]
        samples = [_sun_altitude_degrees(t, site_vector, site_up) - threshold for t in times]

        event: Optional[datetime] = None
        for idx in range(1, len(times)):
            prev_val, curr_val = samples[idx - 1], samples[idx]
            if is_sunrise and prev_val < 0 <= curr_val:
                event = _refine_crossing(times[idx - 1], times[idx], site_vector, site_up, threshold)
                break
            if not is_sunrise and prev_val >= 0 > curr_val:
                event = _refine_crossing(times[idx - 1], times[idx], site_vector, site_up, threshold)
                break

        if event is None:
            return None
        return _wrap_hours((event - midnight) / timedelta(hours=1))
