"""Consumer-side helpers — civil date selection, local display times, next prayer and countdown."""

from datetime import date, datetime, timedelta

from pytz import timezone, utc

from prayerclock.models import SUNNAH_PRAYERS, DaySchedule, Prayer, PrayerSchedule

IMMINENT_SECONDS = 600


def today_in(tz_name: str, now: datetime | None = None) -> date:
    """Civil date at ``tz_name`` for the given (or current) instant."""
    now = now or datetime.now(utc)
    return now.astimezone(timezone(tz_name)).date()


def tomorrow_in(tz_name: str, now: datetime | None = None) -> date:
    return today_in(tz_name, now) + timedelta(days=1)


def to_local(schedule: PrayerSchedule, tz_name: str) -> dict[str, datetime]:
    """Display name → instant converted to ``tz_name``."""
    local_tz = timezone(tz_name)
    return {prayer.value: instant.astimezone(local_tz) for prayer, instant in schedule.items()}


def next_prayer(
    day_schedule: DaySchedule, now: datetime, include_sunnah: bool = False
) -> tuple[Prayer, datetime]:
    """The first prayer strictly after ``now``.

    Candidates are today's prayers (sunrise excluded, sunnah prayers only
    when requested) plus tomorrow's Fajr. When every candidate has passed,
    the earliest one is returned.

    Args:
        day_schedule: Today's schedule and tomorrow's Fajr.
        now: Aware datetime to compare against.
        include_sunnah: Whether Tahajud and Dhuha count as prayers.

    Returns:
        (prayer, instant) pair.
    """
    candidates = [
        (prayer, instant)
        for prayer, instant in day_schedule.schedule.items()
        if prayer is not Prayer.SUNRISE and (include_sunnah or prayer not in SUNNAH_PRAYERS)
    ]
    candidates.append((Prayer.FAJR, day_schedule.tomorrow_fajr))
    candidates.sort(key=lambda pair: pair[1])
    for prayer, instant in candidates:
        if instant > now:
            return prayer, instant
    return candidates[0]


def seconds_until(instant: datetime, now: datetime) -> int:
    return int((instant - now).total_seconds())


def format_countdown(seconds: int) -> str:
    """Menu-bar style countdown: "1h 31m", "45m", or "Now" once the time is reached.

    Minutes are shown rounded up so that "1m" is displayed until the instant itself.
    """
    if seconds <= 0:
        return "Now"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60 + 1
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def is_imminent(seconds: int) -> bool:
    """True within the last ten minutes before a prayer."""
    return 0 < seconds <= IMMINENT_SECONDS
