from __future__ import annotations

import math
from datetime import date

import pytest

from zmanim.calculators import (
    GEOMETRIC_ZENITH,
    BaseCalculator,
    NOAACalculator,
    SunTimesCalculator,
    get_calculator,
)
from zmanim.ephemeris import ErfaCalculator
from zmanim.geolocation import GeoLocation

DENVER_DAY = date(2020, 6, 5)
ONE_MINUTE_HOURS = 1.0 / 60.0


def _hour_difference(first: float, second: float) -> float:
    delta = abs(first - second) % 24.0
    return min(delta, 24.0 - delta)


def test_geometric_zenith_adds_refraction_and_solar_radius() -> None:
    calculator = NOAACalculator()
    assert calculator.adjust_zenith(GEOMETRIC_ZENITH, 0.0) == pytest.approx(90 + 5 / 6)


def test_named_zeniths_are_not_adjusted() -> None:
    calculator = NOAACalculator()
    assert calculator.adjust_zenith(96.0, 1636.0) == 96.0
    assert calculator.adjust_zenith(90 + 16.1, 0.0) == 90 + 16.1


def test_elevation_adjustment_grows_with_height() -> None:
    calculator = SunTimesCalculator()
    assert calculator.elevation_adjustment(0.0) == 0.0
    low = calculator.elevation_adjustment(100.0)
    high = calculator.elevation_adjustment(1636.0)
    assert 0.0 < low < high
    assert high == pytest.approx(math.degrees(math.acos(6356.9 / (6356.9 + 1.636))))
    assert calculator.adjust_zenith(GEOMETRIC_ZENITH, 1636.0) == pytest.approx(90 + 5 / 6 + high)


def test_custom_refraction() -> None:
    calculator = NOAACalculator(refraction=0.0, solar_radius=0.0)
    assert calculator.adjust_zenith(GEOMETRIC_ZENITH, 0.0) == GEOMETRIC_ZENITH


def test_julian_day() -> None:
    assert NOAACalculator.julian_day(date(2000, 1, 1)) == 2451544.5
    assert NOAACalculator.julian_day(date(2020, 6, 5)) == 2459005.5


def test_noaa_solar_series() -> None:
    june = NOAACalculator.julian_centuries(NOAACalculator.julian_day(date(2020, 6, 20)) + 0.5)
    assert NOAACalculator.sun_declination(june) == pytest.approx(23.44, abs=0.05)
    november = NOAACalculator.julian_centuries(NOAACalculator.julian_day(date(2020, 11, 3)) + 0.5)
    assert 16.0 < NOAACalculator.equation_of_time(november) < 17.0
    assert 0.0 <= NOAACalculator.sun_geometric_mean_longitude(november) <= 360.0


def test_sun_hour_angle_outside_domain() -> None:
    assert NOAACalculator.sun_hour_angle(78.2, 23.4, 90.833, True) is None
    rise = NOAACalculator.sun_hour_angle(40.0, 10.0, 90.833, True)
    set_ = NOAACalculator.sun_hour_angle(40.0, 10.0, 90.833, False)
    assert rise is not None and set_ == -rise


@pytest.mark.parametrize("calculator", [NOAACalculator(), SunTimesCalculator()])
def test_times_are_wrapped_into_day(calculator, denver: GeoLocation) -> None:
    for zenith in (90.0, 96.0, 102.0, 108.0):
        sunrise = calculator.utc_sunrise(DENVER_DAY, denver, zenith, True)
        sunset = calculator.utc_sunset(DENVER_DAY, denver, zenith, False)
        assert 0.0 <= sunrise < 24.0
        assert 0.0 <= sunset < 24.0


@pytest.mark.parametrize("calculator", [NOAACalculator(), SunTimesCalculator()])
def test_polar_day_returns_none(calculator, svalbard: GeoLocation) -> None:
    day = date(2020, 6, 21)
    assert calculator.utc_sunrise(day, svalbard, GEOMETRIC_ZENITH, True) is None
    assert calculator.utc_sunset(day, svalbard, GEOMETRIC_ZENITH, False) is None


def test_elevation_moves_events_outward(denver: GeoLocation) -> None:
    calculator = NOAACalculator()
    sunrise = calculator.utc_sunrise(DENVER_DAY, denver, GEOMETRIC_ZENITH, True)
    sea_level_sunrise = calculator.utc_sunrise(DENVER_DAY, denver, GEOMETRIC_ZENITH, False)
    assert sunrise < sea_level_sunrise


def test_almanac_tracks_noaa_at_temperate_latitude(denver: GeoLocation) -> None:
    noaa = NOAACalculator()
    almanac = SunTimesCalculator()
    for adjust in (True, False):
        assert _hour_difference(
            noaa.utc_sunrise(DENVER_DAY, denver, GEOMETRIC_ZENITH, adjust),
            almanac.utc_sunrise(DENVER_DAY, denver, GEOMETRIC_ZENITH, adjust),
        ) < 2 * ONE_MINUTE_HOURS
        assert _hour_difference(
            noaa.utc_sunset(DENVER_DAY, denver, GEOMETRIC_ZENITH, adjust),
            almanac.utc_sunset(DENVER_DAY, denver, GEOMETRIC_ZENITH, adjust),
        ) < 2 * ONE_MINUTE_HOURS


def test_almanac_right_ascension_quadrant() -> None:
    ra_hours = SunTimesCalculator.sun_right_ascension_hours(100.0)
    assert 6.0 <= ra_hours <= 12.0


def test_erfa_calculator_tracks_noaa(denver: GeoLocation) -> None:
    noaa = NOAACalculator()
    erfa_calculator = ErfaCalculator()
    for zenith in (GEOMETRIC_ZENITH, 96.0):
        assert _hour_difference(
            noaa.utc_sunrise(DENVER_DAY, denver, zenith, False),
            erfa_calculator.utc_sunrise(DENVER_DAY, denver, zenith, False),
        ) < ONE_MINUTE_HOURS
        assert _hour_difference(
            noaa.utc_sunset(DENVER_DAY, denver, zenith, False),
            erfa_calculator.utc_sunset(DENVER_DAY, denver, zenith, False),
        ) < ONE_MINUTE_HOURS


def test_erfa_calculator_polar_day(svalbard: GeoLocation) -> None:
    calculator = ErfaCalculator(step_minutes=30)
    assert calculator.utc_sunrise(date(2020, 6, 21), svalbard, GEOMETRIC_ZENITH, False) is None


def test_erfa_calculator_rejects_bad_step() -> None:
    with pytest.raises(ValueError):
        ErfaCalculator(step_minutes=0)


def test_get_calculator() -> None:
    assert isinstance(get_calculator("NOAA"), NOAACalculator)
    assert isinstance(get_calculator("suntimes"), SunTimesCalculator)
    assert isinstance(get_calculator("erfa"), ErfaCalculator)
    with pytest.raises(ValueError):
        get_calculator("meeus")


def test_calculator_equality() -> None:
    assert NOAACalculator() == NOAACalculator()
    assert NOAACalculator() != SunTimesCalculator()
    assert NOAACalculator(refraction=0.5) != NOAACalculator()


def test_base_calculator_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        BaseCalculator()
