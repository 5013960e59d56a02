"""Catalog of named calculation authorities.

The catalog is a tuple of frozen dataclasses built once at import time;
entries are shared freely and never mutated. Callers that need a variant
(e.g. a different madhab) build it with ``dataclasses.replace``.
"""

import logging

from prayerclock.models import (
    CalculationParameters,
    HighLatitudeRule,
    Method,
    PrayerAdjustments,
    Rounding,
)

logger = logging.getLogger(__name__)

_CATALOG: tuple[Method, ...] = (
    Method(
        name="Muslim World League",
        parameters=CalculationParameters(fajr_angle=18.0, isha_angle=17.0),
    ),
    Method(
        name="Egyptian General Authority of Survey",
        parameters=CalculationParameters(fajr_angle=19.5, isha_angle=17.5),
    ),
    Method(
        name="University of Islamic Sciences, Karachi",
        parameters=CalculationParameters(fajr_angle=18.0, isha_angle=18.0),
    ),
    Method(
        name="Umm al-Qura University, Makkah",
        parameters=CalculationParameters(fajr_angle=18.5, isha_interval=90),
    ),
    Method(
        name="Dubai",
        parameters=CalculationParameters(
            fajr_angle=18.2,
            isha_angle=18.2,
            method_adjustments=PrayerAdjustments(sunrise=-3, dhuhr=3, asr=3, maghrib=3),
        ),
    ),
    Method(
        name="Moonsighting Committee Worldwide",
        parameters=CalculationParameters(
            fajr_angle=18.0,
            isha_angle=18.0,
            high_latitude_rule=HighLatitudeRule.SEVENTH_OF_NIGHT,
            method_adjustments=PrayerAdjustments(dhuhr=5, maghrib=3),
        ),
    ),
    Method(
        name="Islamic Society of North America (ISNA)",
        parameters=CalculationParameters(fajr_angle=15.0, isha_angle=15.0),
    ),
    Method(
        name="Kuwait",
        parameters=CalculationParameters(fajr_angle=18.0, isha_angle=17.5),
    ),
    Method(
        name="Qatar",
        parameters=CalculationParameters(fajr_angle=18.0, isha_interval=90),
    ),
    Method(
        name="Majlis Ugama Islam Singapura, Singapore",
        parameters=CalculationParameters(
            fajr_angle=20.0, isha_angle=18.0, rounding=Rounding.UP
        ),
    ),
    Method(
        name="Institute of Geophysics, University of Tehran",
        parameters=CalculationParameters(
            fajr_angle=17.7, isha_angle=14.0, maghrib_angle=4.5
        ),
    ),
    Method(
        name="Diyanet İşleri Başkanlığı, Turkey",
        parameters=CalculationParameters(
            fajr_angle=18.0,
            isha_angle=17.0,
            method_adjustments=PrayerAdjustments(sunrise=-7, dhuhr=5, asr=4, maghrib=7),
        ),
    ),
    Method(
        name="Shia Ithna-Ashari, Leva Institute, Qum",
        parameters=CalculationParameters(
            fajr_angle=16.0, isha_angle=14.0, maghrib_angle=4.0
        ),
    ),
    Method(
        name="Union des Organisations Islamiques de France",
        parameters=CalculationParameters(fajr_angle=12.0, isha_angle=12.0),
    ),
    Method(
        name="Spiritual Administration of Muslims of Russia",
        parameters=CalculationParameters(fajr_angle=16.0, isha_angle=15.0),
    ),
    Method(
        name="Jabatan Kemajuan Islam Malaysia (JAKIM)",
        parameters=CalculationParameters(fajr_angle=20.0, isha_angle=18.0),
    ),
    Method(
        name="Kementerian Agama Republik Indonesia (KEMENAG)",
        parameters=CalculationParameters(fajr_angle=20.0, isha_angle=18.0),
    ),
    Method(
        name="Gulf Region",
        parameters=CalculationParameters(fajr_angle=19.5, isha_interval=90),
    ),
    Method(
        name="Tunisia",
        parameters=CalculationParameters(fajr_angle=18.0, isha_angle=18.0),
    ),
    Method(
        name="Algeria",
        parameters=CalculationParameters(
            fajr_angle=18.0,
            isha_angle=17.0,
            method_adjustments=PrayerAdjustments(maghrib=3),
        ),
    ),
)

_BY_NAME: dict[str, Method] = {m.name: m for m in _CATALOG}


def all_methods() -> tuple[Method, ...]:
    """Every catalog entry in stable order. The first entry is the default."""
    return _CATALOG


def default_method() -> Method:
    return _CATALOG[0]


def method_named(name: str | None) -> Method:
    """Look up a method by its display name.

    Unknown or empty names fall back to the default method instead of failing.

    Args:
        name: Exact catalog name ("Umm al-Qura University, Makkah").

    Returns:
        The matching Method, or the first catalog entry.
    """
    method = _BY_NAME.get(name or "")
    if method is None:
        logger.warning(
            "Unknown calculation method %r, falling back to %r", name, _CATALOG[0].name
        )
        return _CATALOG[0]
    return method
