"""Prayer time engine — orchestrates solar solving, high-latitude fallbacks, adjustments and rounding."""

import dataclasses
import logging
import math
from datetime import date, datetime, timedelta

from pytz import utc

from prayerclock import highlat
from prayerclock.models import (
    CalculationParameters,
    Coordinates,
    DaySchedule,
    Prayer,
    PrayerAdjustments,
    PrayerSchedule,
    Rounding,
)
from prayerclock.solver import (
    SUNRISE_ANGLE,
    Direction,
    solar_noon,
    solve,
    solve_shadow_angle,
)

logger = logging.getLogger(__name__)

DHUHR_OFFSET_MINUTES = 1
DHUHA_AFTER_SUNRISE = timedelta(minutes=20)
TAHAJUD_NIGHT_FRACTION = 2.0 / 3.0
CIVIL_TWILIGHT_ANGLE = 6.0
_MIN_HALF_DAY_HOURS = 0.5


def _sunrise_sunset(coordinates: Coordinates, day: date) -> tuple[float, float]:
    """Sunrise and sunset in UTC hours, seeded from approximations when the sun never rises or sets.

    Order of attempts: standard refraction angle, civil twilight, then the
    standard angle at latitudes stepped one degree at a time toward the
    equator until the sun rises and sets there.
    """
    noon = solar_noon(coordinates, day)

    def attempt(coords: Coordinates, angle: float) -> tuple[float, float] | None:
        rise = solve(coords, day, angle, Direction.MORNING)
        set_ = solve(coords, day, angle, Direction.EVENING)
        if rise is None or set_ is None:
            return None
        if noon - rise < _MIN_HALF_DAY_HOURS or set_ - noon < _MIN_HALF_DAY_HOURS:
            return None
        return rise, set_

    found = attempt(coordinates, SUNRISE_ANGLE)
    if found is not None:
        return found

    found = attempt(coordinates, CIVIL_TWILIGHT_ANGLE)
    if found is not None:
        logger.debug("Sunrise/sunset seeded from civil twilight at %s on %s", coordinates, day)
        return found

    sign = 1.0 if coordinates.latitude >= 0 else -1.0
    latitude = abs(coordinates.latitude)
    while latitude > 0:
        latitude = max(0.0, math.ceil(latitude) - 1.0)
        nearest = Coordinates(latitude=sign * latitude, longitude=coordinates.longitude)
        found = attempt(nearest, SUNRISE_ANGLE)
        if found is not None:
            logger.debug(
                "Sunrise/sunset seeded from latitude %.1f for %s on %s",
                nearest.latitude,
                coordinates,
                day,
            )
            return found
    # Unreachable: the sun rises and sets every day at the equator.
    raise AssertionError(f"no sunrise/sunset found for {coordinates} on {day}")


def _to_instant(day: date, hours: float) -> datetime:
    midnight = datetime(day.year, day.month, day.day, tzinfo=utc)
    return midnight + timedelta(hours=hours)


def _round(instant: datetime, rounding: Rounding) -> datetime:
    if rounding is Rounding.NONE:
        return instant
    floor = instant.replace(second=0, microsecond=0)
    remainder = instant - floor
    if rounding is Rounding.UP:
        return floor + timedelta(minutes=1) if remainder > timedelta(0) else floor
    return floor + timedelta(minutes=1) if remainder >= timedelta(seconds=30) else floor


def _keep_apart(instants: list[datetime], gap: timedelta) -> list[datetime]:
    """Push each instant that does not follow its predecessor to ``gap`` after it."""
    result = instants[:1]
    for instant in instants[1:]:
        if instant <= result[-1]:
            instant = result[-1] + gap
        result.append(instant)
    return result


def compute(
    coordinates: Coordinates, day: date, parameters: CalculationParameters
) -> PrayerSchedule:
    """Compute the five daily prayers and sunrise for one location and civil date.

    The result is a pure function of the three inputs. Unsolvable twilight
    angles are replaced by the method's high-latitude rule, so the schedule
    is always fully populated and strictly ordered
    (Fajr < Sunrise < Dhuhr < Asr < Maghrib < Isha).

    Args:
        coordinates: Observer position. Latitude in [-90, 90] and longitude in
            [-180, 180] are preconditions, not validated at runtime.
        day: Civil date at the location.
        parameters: Calculation convention (angles, madhab, high-latitude rule,
            method adjustments, rounding).

    Returns:
        PrayerSchedule of timezone-aware UTC datetimes, without user corrections.
    """
    assert -90.0 <= coordinates.latitude <= 90.0, coordinates
    assert -180.0 <= coordinates.longitude <= 180.0, coordinates

    sunrise, sunset = _sunrise_sunset(coordinates, day)
    next_sunrise, _ = _sunrise_sunset(coordinates, day + timedelta(days=1))
    next_sunrise += 24.0
    night = next_sunrise - sunset
    rule = parameters.high_latitude_rule

    def twilight(angle: float, direction: Direction, prayer: Prayer) -> float:
        solved = solve(coordinates, day, angle, direction)
        adjusted = highlat.adjust(solved, rule, night, sunset, sunrise, angle, direction)
        if adjusted != solved:
            logger.debug(
                "%s at %s on %s resolved by high-latitude rule %s",
                prayer.value,
                coordinates,
                day,
                rule.value,
            )
        return adjusted

    dhuhr_raw = solar_noon(coordinates, day) + DHUHR_OFFSET_MINUTES / 60.0
    fajr_raw = twilight(parameters.fajr_angle, Direction.MORNING, Prayer.FAJR)

    if parameters.maghrib_angle is None:
        maghrib_raw = sunset
    else:
        maghrib_raw = twilight(parameters.maghrib_angle, Direction.EVENING, Prayer.MAGHRIB)

    if parameters.isha_interval is not None:
        isha_raw = maghrib_raw + parameters.isha_interval / 60.0
    else:
        assert parameters.isha_angle is not None
        isha_raw = twilight(parameters.isha_angle, Direction.EVENING, Prayer.ISHA)

    ratio = parameters.madhab.shadow_ratio
    asr_raw = solve_shadow_angle(coordinates, day, ratio)

    adjustments = parameters.method_adjustments

    def shifted(prayer: Prayer, h: float) -> float:
        return h + adjustments.minutes_for(prayer) / 60.0

    # Ordering guards run on the adjusted hours.
    fajr = shifted(Prayer.FAJR, fajr_raw)
    sunrise_at = shifted(Prayer.SUNRISE, sunrise)
    dhuhr = shifted(Prayer.DHUHR, dhuhr_raw)
    maghrib = shifted(Prayer.MAGHRIB, maghrib_raw)
    isha = shifted(Prayer.ISHA, isha_raw)

    if fajr >= sunrise_at:
        fajr = sunrise_at - (sunrise - fajr_raw)

    asr = None if asr_raw is None else shifted(Prayer.ASR, asr_raw)
    if asr is None or not dhuhr < asr < maghrib:
        logger.debug("Asr at %s on %s placed between Dhuhr and Maghrib", coordinates, day)
        asr = dhuhr + (maghrib - dhuhr) * ratio / (ratio + 1.0)

    if isha <= maghrib:
        isha = maghrib + (next_sunrise - maghrib) / 2.0

    hours = {
        Prayer.FAJR: fajr,
        Prayer.SUNRISE: sunrise_at,
        Prayer.DHUHR: dhuhr,
        Prayer.ASR: asr,
        Prayer.MAGHRIB: maghrib,
        Prayer.ISHA: isha,
    }
    rounded = [_round(_to_instant(day, h), parameters.rounding) for h in hours.values()]
    instants = _keep_apart(rounded, timedelta(minutes=1))
    if instants != rounded:
        logger.debug("Prayers at %s on %s moved apart after rounding", coordinates, day)
    return PrayerSchedule(
        **{prayer.name.lower(): instant for prayer, instant in zip(hours, instants)}
    )


def apply_corrections(
    schedule: PrayerSchedule, corrections: PrayerAdjustments
) -> PrayerSchedule:
    """Shift each present instant by the user's correction minutes.

    Purely additive; ordering is not re-enforced afterwards.
    """
    changes = {
        prayer.name.lower(): instant + timedelta(minutes=corrections.minutes_for(prayer))
        for prayer, instant in schedule.items()
    }
    return dataclasses.replace(schedule, **changes)


def with_sunnah(schedule: PrayerSchedule, tomorrow_fajr: datetime) -> PrayerSchedule:
    """Add Tahajud (start of the last third of the night) and Dhuha (sunrise + 20 min)."""
    night = tomorrow_fajr - schedule.isha
    return dataclasses.replace(
        schedule,
        tahajud=schedule.isha + night * TAHAJUD_NIGHT_FRACTION,
        dhuha=schedule.sunrise + DHUHA_AFTER_SUNRISE,
    )


def compute_day(
    coordinates: Coordinates,
    day: date,
    parameters: CalculationParameters,
    corrections: PrayerAdjustments | None = None,
    include_sunnah: bool = False,
) -> DaySchedule:
    """Today's corrected schedule plus tomorrow's corrected Fajr.

    Tahajud is derived from the corrected Isha and corrected next-day Fajr;
    Dhuha from the uncorrected sunrise. Sunrise, Tahajud and Dhuha
    corrections are applied last.

    Args:
        coordinates: Observer position.
        day: Civil date at the location.
        parameters: Calculation convention.
        corrections: User fine-tuning minutes; None means no corrections.
        include_sunnah: Whether to add Tahajud and Dhuha.

    Returns:
        DaySchedule for ``day``.
    """
    corrections = corrections or PrayerAdjustments()
    today = compute(coordinates, day, parameters)
    tomorrow = compute(coordinates, day + timedelta(days=1), parameters)
    tomorrow_fajr = tomorrow.fajr + timedelta(minutes=corrections.fajr)

    prayer_corrections = dataclasses.replace(corrections, sunrise=0, tahajud=0, dhuha=0)
    schedule = apply_corrections(today, prayer_corrections)
    if include_sunnah:
        schedule = with_sunnah(schedule, tomorrow_fajr)
    schedule = apply_corrections(
        schedule,
        PrayerAdjustments(
            sunrise=corrections.sunrise,
            tahajud=corrections.tahajud,
            dhuha=corrections.dhuha,
        ),
    )
    return DaySchedule(day=day, schedule=schedule, tomorrow_fajr=tomorrow_fajr)
