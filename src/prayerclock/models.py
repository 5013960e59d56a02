"""Data model definitions — explicit boundaries between input, calculation, and display layers."""

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterator


@dataclass(frozen=True)
class QueryInput:
    """Raw user input. Not yet validated."""

    location: str  # Place name or "lat,lon" string ("Makkah", "21.4225,39.8262")
    when: date | None = None  # Civil date; None means "today" at the location


@dataclass(frozen=True)
class Coordinates:
    """A point on Earth. Callers validate ranges before handing it to the engine."""

    latitude: float  # Decimal degrees, [-90, 90]
    longitude: float  # Decimal degrees, [-180, 180], east positive


@dataclass(frozen=True)
class LocationResult:
    """A single location search hit."""

    name: str  # Locality name ("Makkah") or "Custom Coordinate"
    country: str  # Country name, or the formatted coordinate for custom input
    coordinates: Coordinates


@dataclass(frozen=True)
class ObserverContext:
    """Result of location lookup + timezone resolution. Input to schedule computation."""

    coordinates: Coordinates
    timezone: str  # IANA zone ("Asia/Riyadh"), used only to pick the civil date and display
    display_name: str  # Normalized name returned by the location provider


class Madhab(Enum):
    """Juristic school; only affects Asr."""

    SHAFI = "shafi"
    HANAFI = "hanafi"

    @property
    def shadow_ratio(self) -> int:
        return 2 if self is Madhab.HANAFI else 1


class HighLatitudeRule(Enum):
    """Night-fraction fallback used when twilight angles are unreachable."""

    NONE = "none"
    MIDDLE_OF_NIGHT = "middle_of_night"
    SEVENTH_OF_NIGHT = "seventh_of_night"
    TWILIGHT_ANGLE = "twilight_angle"


class Rounding(Enum):
    NEAREST = "nearest"
    UP = "up"
    NONE = "none"


class Prayer(Enum):
    """Prayer names. Values are the display names used as schedule keys."""

    FAJR = "Fajr"
    SUNRISE = "Sunrise"
    DHUHR = "Dhuhr"
    ASR = "Asr"
    MAGHRIB = "Maghrib"
    ISHA = "Isha"
    TAHAJUD = "Tahajud"
    DHUHA = "Dhuha"


CANONICAL_ORDER: tuple[Prayer, ...] = (
    Prayer.FAJR,
    Prayer.SUNRISE,
    Prayer.DHUHR,
    Prayer.ASR,
    Prayer.MAGHRIB,
    Prayer.ISHA,
)
SUNNAH_PRAYERS: tuple[Prayer, ...] = (Prayer.TAHAJUD, Prayer.DHUHA)


@dataclass(frozen=True)
class PrayerAdjustments:
    """Signed whole-minute offsets per prayer.

    Used for the offsets baked into a calculation method as well as for
    user fine-tuning corrections.
    """

    fajr: int = 0
    sunrise: int = 0
    dhuhr: int = 0
    asr: int = 0
    maghrib: int = 0
    isha: int = 0
    tahajud: int = 0
    dhuha: int = 0

    def minutes_for(self, prayer: Prayer) -> int:
        return getattr(self, prayer.name.lower())


@dataclass(frozen=True)
class CalculationParameters:
    """Everything a calculation convention fixes.

    Exactly one of ``isha_angle`` and ``isha_interval`` must be set.
    ``maghrib_angle`` of None means Maghrib is sunset.
    """

    fajr_angle: float  # Solar depression in degrees
    isha_angle: float | None = None  # Solar depression in degrees
    isha_interval: int | None = None  # Minutes after Maghrib
    maghrib_angle: float | None = None
    madhab: Madhab = Madhab.SHAFI
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_NIGHT
    method_adjustments: PrayerAdjustments = PrayerAdjustments()
    rounding: Rounding = Rounding.NEAREST

    def __post_init__(self) -> None:
        if (self.isha_angle is None) == (self.isha_interval is None):
            raise ValueError("exactly one of isha_angle and isha_interval must be set")

    def with_madhab(self, madhab: Madhab) -> "CalculationParameters":
        """Return a copy with a different Asr school."""
        return dataclasses.replace(self, madhab=madhab)


@dataclass(frozen=True)
class Method:
    """A named calculation authority. Catalog entries are never mutated."""

    name: str  # "Muslim World League"
    parameters: CalculationParameters


@dataclass(frozen=True)
class PrayerSchedule:
    """The engine's output. All instants are timezone-aware UTC datetimes."""

    fajr: datetime
    sunrise: datetime
    dhuhr: datetime
    asr: datetime
    maghrib: datetime
    isha: datetime
    tahajud: datetime | None = None
    dhuha: datetime | None = None

    def get(self, prayer: Prayer) -> datetime | None:
        return getattr(self, prayer.name.lower())

    def items(self) -> Iterator[tuple[Prayer, datetime]]:
        """Yield (prayer, instant) pairs, canonical prayers first, then sunnah ones if present."""
        for prayer in CANONICAL_ORDER + SUNNAH_PRAYERS:
            instant = self.get(prayer)
            if instant is not None:
                yield prayer, instant

    def as_dict(self) -> dict[str, datetime]:
        """Display name → instant mapping."""
        return {prayer.value: instant for prayer, instant in self.items()}


@dataclass(frozen=True)
class DaySchedule:
    """Today's corrected schedule plus the corrected Fajr of the following day."""

    day: date
    schedule: PrayerSchedule
    tomorrow_fajr: datetime


@dataclass(frozen=True)
class ScheduleReport:
    """The sole input to display code. Fully computed state."""

    context: ObserverContext
    method: Method
    parameters: CalculationParameters  # Method parameters with the user's madhab applied
    day_schedule: DaySchedule
