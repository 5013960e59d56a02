"""CLI entry point for printing a day's prayer schedule.

Settings come from the environment or a ``.env`` file; command-line flags override them:
    uv run prayerclock "21.4225,39.8262" --method "Umm al-Qura University, Makkah"
"""

import argparse
import dataclasses
import logging
import sys
from datetime import date, datetime

from dotenv import load_dotenv
from pytz import utc

load_dotenv()

from prayerclock.compute import run  # noqa: E402
from prayerclock.config import ConfigError, load_settings  # noqa: E402
from prayerclock.location import GeocodingError  # noqa: E402
from prayerclock.methods import all_methods  # noqa: E402
from prayerclock.models import Madhab, QueryInput, ScheduleReport  # noqa: E402
from prayerclock.timeline import (  # noqa: E402
    format_countdown,
    next_prayer,
    seconds_until,
    to_local,
)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="prayerclock", description="Daily prayer times.")
    parser.add_argument("location", nargs="?", help='Place name or "lat,lon"')
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        help="Civil date YYYY-MM-DD (default: today at the location)",
    )
    parser.add_argument("--method", help="Calculation method name (see --list-methods)")
    parser.add_argument("--madhab", choices=[m.value for m in Madhab])
    parser.add_argument("--sunnah", action="store_true", help="Include Tahajud and Dhuha")
    parser.add_argument("--list-methods", action="store_true")
    return parser.parse_args(argv)


def _print_report(report: ScheduleReport, now: datetime) -> None:
    ctx = report.context
    day_schedule = report.day_schedule
    print(f"{ctx.display_name} ({ctx.timezone})")
    print(f"{day_schedule.day.isoformat()} - {report.method.name}")
    for name, local in to_local(day_schedule.schedule, ctx.timezone).items():
        print(f"  {name:<8} {local.strftime('%H:%M')}")

    prayer, instant = next_prayer(
        day_schedule, now, include_sunnah=day_schedule.schedule.tahajud is not None
    )
    print(f"Next: {prayer.value} in {format_countdown(seconds_until(instant, now))}")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.list_methods:
        for method in all_methods():
            print(method.name)
        return 0

    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    overrides = {}
    if args.method:
        overrides["method_name"] = args.method
    if args.madhab:
        overrides["madhab"] = Madhab(args.madhab)
    if args.sunnah:
        overrides["show_sunnah"] = True
    settings = dataclasses.replace(settings, **overrides)

    location = args.location or settings.location
    if not location:
        print("No location given (argument or PRAYERCLOCK_LOCATION).", file=sys.stderr)
        return 2
    when = args.date

    now = datetime.now(utc)
    try:
        report = run(QueryInput(location=location, when=when), settings, now=now)
    except GeocodingError as e:
        print(f"Location error: {e}", file=sys.stderr)
        return 1

    _print_report(report, now)
    return 0


if __name__ == "__main__":
    sys.exit(main())
