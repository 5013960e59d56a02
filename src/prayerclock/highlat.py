"""Night-fraction fallbacks for latitudes where twilight angles are unreachable."""

from prayerclock.models import HighLatitudeRule
from prayerclock.solver import Direction


def night_portion(rule: HighLatitudeRule, angle: float, night_hours: float) -> float:
    """Length of the twilight window, in hours, for the given rule.

    ``HighLatitudeRule.NONE`` is treated as MIDDLE_OF_NIGHT so that an
    unsolved value always has a substitute.
    """
    if rule is HighLatitudeRule.SEVENTH_OF_NIGHT:
        return night_hours / 7.0
    if rule is HighLatitudeRule.TWILIGHT_ANGLE:
        return night_hours * angle / 60.0
    return night_hours / 2.0


def fallback(
    rule: HighLatitudeRule,
    night_hours: float,
    sunset: float,
    sunrise: float,
    angle: float,
    direction: Direction,
) -> float:
    """Substitute time: sunrise - portion for morning events, sunset + portion for evening ones."""
    portion = night_portion(rule, angle, night_hours)
    if direction is Direction.MORNING:
        return sunrise - portion
    return sunset + portion


def adjust(
    time: float | None,
    rule: HighLatitudeRule,
    night_hours: float,
    sunset: float,
    sunrise: float,
    angle: float,
    direction: Direction,
) -> float:
    """Apply the high-latitude rule to a solved (or unsolved) twilight time.

    Args:
        time: Solved UTC hour, or None when the solver found no solution.
        rule: Method's high-latitude rule.
        night_hours: Sunset to next sunrise, in hours.
        sunset: Today's sunset, UTC hours.
        sunrise: Today's sunrise, UTC hours.
        angle: The method's twilight angle for this event.
        direction: MORNING for Fajr, EVENING for Maghrib/Isha.

    Returns:
        ``time`` when it is acceptable, otherwise the rule's fallback. Under
        NONE only unsolved values are replaced; other rules also replace a
        solved time that lies further from its base than the night portion.
    """
    if time is None:
        return fallback(rule, night_hours, sunset, sunrise, angle, direction)
    if rule is HighLatitudeRule.NONE:
        return time

    portion = night_portion(rule, angle, night_hours)
    distance = sunrise - time if direction is Direction.MORNING else time - sunset
    if distance > portion:
        return fallback(rule, night_hours, sunset, sunrise, angle, direction)
    return time
