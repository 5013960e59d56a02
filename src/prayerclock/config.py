"""Settings loaded from the environment (and a ``.env`` file via python-dotenv at entry points)."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from pytz import UnknownTimeZoneError, timezone

from prayerclock.methods import default_method
from prayerclock.models import Madhab, PrayerAdjustments

logger = logging.getLogger(__name__)

ENV_PREFIX = "PRAYERCLOCK_"
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"", "0", "false", "no", "off"}
_CORRECTABLE = ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha", "tahajud", "dhuha")


class ConfigError(Exception):
    """A setting has a malformed value."""


@dataclass(frozen=True)
class Settings:
    """User settings. Sole input besides the clock to the schedule composition."""

    method_name: str  # Catalog display name
    madhab: Madhab
    location: str | None  # Place name or "lat,lon"; None means "ask the caller"
    timezone: str | None  # IANA override; None means look it up from the coordinate
    show_sunnah: bool
    corrections: PrayerAdjustments
    log_level: str


def _get(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(ENV_PREFIX + key)
    if value is None:
        return None
    return value.strip()


def _parse_bool(key: str, value: str | None) -> bool:
    if value is None:
        return False
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{ENV_PREFIX}{key} must be a boolean, got {value!r}")


def _parse_int(key: str, value: str | None) -> int:
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{key} must be an integer, got {value!r}") from None


def _parse_madhab(value: str | None) -> Madhab:
    if not value:
        return Madhab.SHAFI
    try:
        return Madhab(value.lower())
    except ValueError:
        raise ConfigError(
            f"{ENV_PREFIX}MADHAB must be one of {[m.value for m in Madhab]}, got {value!r}"
        ) from None


def _parse_timezone(value: str | None) -> str | None:
    if not value:
        return None
    try:
        timezone(value)
    except UnknownTimeZoneError:
        raise ConfigError(f"{ENV_PREFIX}TIMEZONE is not a known IANA zone: {value!r}") from None
    return value


def _parse_log_level(value: str | None) -> str:
    if not value:
        return "WARNING"
    level = value.upper()
    if level not in logging.getLevelNamesMapping():
        raise ConfigError(f"{ENV_PREFIX}LOG_LEVEL is not a logging level: {value!r}")
    return level


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Recognized variables (all optional): ``PRAYERCLOCK_METHOD``,
    ``PRAYERCLOCK_MADHAB``, ``PRAYERCLOCK_LOCATION``, ``PRAYERCLOCK_TIMEZONE``,
    ``PRAYERCLOCK_SHOW_SUNNAH``, ``PRAYERCLOCK_<PRAYER>_CORRECTION`` and
    ``PRAYERCLOCK_LOG_LEVEL``.

    Args:
        env: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Parsed Settings.

    Raises:
        ConfigError: On a malformed value.
    """
    env = os.environ if env is None else env
    corrections = PrayerAdjustments(
        **{
            name: _parse_int(f"{name.upper()}_CORRECTION", _get(env, f"{name.upper()}_CORRECTION"))
            for name in _CORRECTABLE
        }
    )
    settings = Settings(
        method_name=_get(env, "METHOD") or default_method().name,
        madhab=_parse_madhab(_get(env, "MADHAB")),
        location=_get(env, "LOCATION") or None,
        timezone=_parse_timezone(_get(env, "TIMEZONE")),
        show_sunnah=_parse_bool("SHOW_SUNNAH", _get(env, "SHOW_SUNNAH")),
        corrections=corrections,
        log_level=_parse_log_level(_get(env, "LOG_LEVEL")),
    )
    logger.debug("Loaded settings: %s", settings)
    return settings
