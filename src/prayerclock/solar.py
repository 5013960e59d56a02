"""Low-precision solar ephemeris (NOAA series) — equation of time and declination."""

import math
from datetime import date

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0


def julian_day(day: date, hours: float = 0.0) -> float:
    """Julian day of a Gregorian civil date plus a UTC hour offset.

    Args:
        day: Civil date.
        hours: Fractional hours after 00:00 UTC of ``day``. May be negative or exceed 24.

    Returns:
        Julian day number (real valued).
    """
    year, month = day.year, day.month
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    jd = (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day.day
        + b
        - 1524.5
    )
    return jd + hours / 24.0


def julian_century(jd: float) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (jd - J2000) / DAYS_PER_CENTURY


def _mean_obliquity_of_ecliptic(jc: float) -> float:
    seconds = 21.448 - jc * (46.815 + jc * (0.00059 - jc * 0.001813))
    return 23.0 + (26.0 + seconds / 60.0) / 60.0


def _obliquity_correction(jc: float) -> float:
    omega = 125.04 - 1934.136 * jc
    return _mean_obliquity_of_ecliptic(jc) + 0.00256 * math.cos(math.radians(omega))


def _geom_mean_long_sun(jc: float) -> float:
    return (280.46646 + jc * (36000.76983 + 0.0003032 * jc)) % 360.0


def _geom_mean_anomaly_sun(jc: float) -> float:
    return 357.52911 + jc * (35999.05029 - 0.0001537 * jc)


def _eccentricity_earth_orbit(jc: float) -> float:
    return 0.016708634 - jc * (0.000042037 + 0.0000001267 * jc)


def _sun_eq_of_center(jc: float) -> float:
    m = math.radians(_geom_mean_anomaly_sun(jc))
    return (
        math.sin(m) * (1.914602 - jc * (0.004817 + 0.000014 * jc))
        + math.sin(2 * m) * (0.019993 - 0.000101 * jc)
        + math.sin(3 * m) * 0.000289
    )


def _sun_apparent_long(jc: float) -> float:
    true_long = _geom_mean_long_sun(jc) + _sun_eq_of_center(jc)
    omega = 125.04 - 1934.136 * jc
    return true_long - 0.00569 - 0.00478 * math.sin(math.radians(omega))


def equation_of_time(jc: float) -> float:
    """Apparent minus mean solar time, in minutes."""
    epsilon = _obliquity_correction(jc)
    l0 = math.radians(_geom_mean_long_sun(jc))
    e = _eccentricity_earth_orbit(jc)
    m = math.radians(_geom_mean_anomaly_sun(jc))
    y = math.tan(math.radians(epsilon) / 2) ** 2

    sin_m = math.sin(m)
    etime = (
        y * math.sin(2 * l0)
        - 2 * e * sin_m
        + 4 * e * y * sin_m * math.cos(2 * l0)
        - 0.5 * y * y * math.sin(4 * l0)
        - 1.25 * e * e * math.sin(2 * m)
    )
    return math.degrees(etime) * 4.0


def declination(jc: float) -> float:
    """Apparent solar declination, in degrees."""
    epsilon = math.radians(_obliquity_correction(jc))
    lam = math.radians(_sun_apparent_long(jc))
    return math.degrees(math.asin(math.sin(epsilon) * math.sin(lam)))


def equation_of_time_and_declination(jc: float) -> tuple[float, float]:
    """Solar position for a Julian century offset from J2000.0.

    Args:
        jc: Julian centuries since J2000.0 (see ``julian_century``).

    Returns:
        (equation of time in minutes, declination in degrees). Always finite.
    """
    return equation_of_time(jc), declination(jc)
