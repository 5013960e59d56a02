"""Schedule composition layer — location, method and corrections wired into the engine explicitly."""

from datetime import date, datetime

import httpx

from prayerclock.config import Settings
from prayerclock.engine import compute_day
from prayerclock.location import resolve_location
from prayerclock.methods import method_named
from prayerclock.models import (
    CalculationParameters,
    Method,
    ObserverContext,
    QueryInput,
    ScheduleReport,
)
from prayerclock.timeline import today_in


def select_parameters(settings: Settings) -> tuple[Method, CalculationParameters]:
    """Catalog method named in the settings, with the user's madhab applied to a copy."""
    method = method_named(settings.method_name)
    return method, method.parameters.with_madhab(settings.madhab)


def compute_report(
    context: ObserverContext,
    settings: Settings,
    when: datetime | None = None,
    day: date | None = None,
) -> ScheduleReport:
    """Compute the day's schedule for an already resolved location.

    Args:
        context: Resolved coordinates and timezone.
        settings: Method, madhab, corrections and sunnah preference.
        when: Instant used to pick "today" at the location. Defaults to now.
        day: Explicit civil date; overrides ``when``.

    Returns:
        ScheduleReport for the chosen civil date.
    """
    method, parameters = select_parameters(settings)
    day = day or today_in(context.timezone, when)
    day_schedule = compute_day(
        context.coordinates,
        day,
        parameters,
        corrections=settings.corrections,
        include_sunnah=settings.show_sunnah,
    )
    return ScheduleReport(
        context=context, method=method, parameters=parameters, day_schedule=day_schedule
    )


def run(
    query: QueryInput,
    settings: Settings,
    client: httpx.Client | None = None,
    now: datetime | None = None,
) -> ScheduleReport:
    """Top-level entry point: takes a QueryInput and returns a ScheduleReport.

    Args:
        query: User input (location string, optional civil date).
        settings: Loaded settings.
        client: Optional httpx client for the location lookup.
        now: Current instant, for choosing "today". Defaults to the clock.

    Returns:
        Fully computed ScheduleReport.

    Raises:
        GeocodingError: When the location cannot be resolved.
    """
    context = resolve_location(query.location, client=client, timezone=settings.timezone)
    return compute_report(context, settings, when=now, day=query.when)
