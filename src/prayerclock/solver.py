"""Hour-angle solver — UTC time at which the sun crosses a given elevation.

All times are fractional hours after 00:00 UTC of the civil date. They are
not wrapped into [0, 24): far-east longitudes yield negative morning times
and far-west longitudes yield evening times past 24.
"""

import math
from datetime import date
from enum import Enum
from typing import Callable

from prayerclock.models import Coordinates
from prayerclock.solar import equation_of_time_and_declination, julian_century, julian_day

SUNRISE_ANGLE = 0.833  # Refraction + solar semi-diameter


class Direction(Enum):
    """Which side of solar noon to search."""

    MORNING = -1
    EVENING = 1


def _position(day: date, hours: float) -> tuple[float, float]:
    return equation_of_time_and_declination(julian_century(julian_day(day, hours)))


def _noon_from_eqt(longitude: float, eqt_minutes: float) -> float:
    return 12.0 - longitude / 15.0 - eqt_minutes / 60.0


def solar_noon(coordinates: Coordinates, day: date) -> float:
    """Local solar noon (sun on the meridian) in UTC hours.

    Args:
        coordinates: Observer position.
        day: Civil date.

    Returns:
        Fractional UTC hour of solar transit.
    """
    estimate = 12.0 - coordinates.longitude / 15.0
    eqt, _ = _position(day, estimate)
    noon = _noon_from_eqt(coordinates.longitude, eqt)
    eqt, _ = _position(day, noon)
    return _noon_from_eqt(coordinates.longitude, eqt)


def hour_angle(latitude: float, declination: float, elevation: float) -> float | None:
    """Hour angle in degrees at which the sun stands at ``elevation``.

    Returns None when the sun never reaches that elevation (|cos H| > 1) or
    at the geographic poles, where hour angle is undefined.
    """
    lat = math.radians(latitude)
    dec = math.radians(declination)
    denominator = math.cos(lat) * math.cos(dec)
    if abs(denominator) < 1e-12:
        return None
    cos_h = (math.sin(math.radians(elevation)) - math.sin(lat) * math.sin(dec)) / denominator
    if cos_h < -1.0 or cos_h > 1.0:
        return None
    return math.degrees(math.acos(cos_h))


def shadow_elevation(latitude: float, declination: float, shadow_ratio: float) -> float | None:
    """Sun elevation at which an object's shadow is ``shadow_ratio`` times its length plus the noon shadow."""
    zenith_at_noon = abs(latitude - declination)
    if zenith_at_noon >= 90.0:
        # Sun stays below the horizon at noon.
        return None
    return math.degrees(math.atan(1.0 / (shadow_ratio + math.tan(math.radians(zenith_at_noon)))))


def _solve_elevation(
    coordinates: Coordinates,
    day: date,
    target: Callable[[float], float | None],
    direction: Direction,
) -> float | None:
    """First pass from solar noon, then one fixed-point refinement at the estimate."""
    time = solar_noon(coordinates, day)
    for _ in range(2):
        eqt, dec = _position(day, time)
        elevation = target(dec)
        if elevation is None:
            return None
        h = hour_angle(coordinates.latitude, dec, elevation)
        if h is None:
            return None
        time = _noon_from_eqt(coordinates.longitude, eqt) + direction.value * h / 15.0
    return time


def solve(
    coordinates: Coordinates, day: date, angle: float, direction: Direction
) -> float | None:
    """UTC hour at which the sun's elevation equals ``-angle``.

    Args:
        coordinates: Observer position.
        day: Civil date.
        angle: Depression below the horizon in degrees (18 for astronomical
            twilight, 0.833 for sunrise/sunset). Negative values mean elevation
            above the horizon.
        direction: MORNING searches before solar noon, EVENING after.

    Returns:
        Fractional UTC hour, or None when the sun never reaches that angle.
    """
    return _solve_elevation(coordinates, day, lambda _dec: -angle, direction)


def solve_shadow_angle(
    coordinates: Coordinates, day: date, shadow_ratio: float
) -> float | None:
    """UTC hour of Asr for the given shadow ratio (1 = Shafi, 2 = Hanafi).

    Returns None only in polar cases where the required elevation is never reached.
    """
    return _solve_elevation(
        coordinates,
        day,
        lambda dec: shadow_elevation(coordinates.latitude, dec, shadow_ratio),
        Direction.EVENING,
    )
