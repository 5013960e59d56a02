import dataclasses
from datetime import date, datetime, timedelta

import pytest
from pytz import timezone, utc

from prayerclock.engine import (
    _keep_apart,
    apply_corrections,
    compute,
    compute_day,
    with_sunnah,
)
from prayerclock.methods import all_methods, method_named
from prayerclock.models import (
    CANONICAL_ORDER,
    CalculationParameters,
    Coordinates,
    HighLatitudeRule,
    Madhab,
    Prayer,
    PrayerAdjustments,
    PrayerSchedule,
    Rounding,
)
from prayerclock.solver import Direction, solar_noon, solve

UMM_AL_QURA = "Umm al-Qura University, Makkah"


def assert_strictly_ordered(schedule: PrayerSchedule) -> None:
    times = [schedule.get(prayer) for prayer in CANONICAL_ORDER]
    assert all(a < b for a, b in zip(times, times[1:])), schedule


@pytest.mark.parametrize("method", all_methods(), ids=lambda m: m.name)
def test_every_method_orders_prayers_in_paris_on_equinox(method, paris, equinox):
    assert_strictly_ordered(compute(paris, equinox, method.parameters))


def test_hanafi_asr_is_later_than_shafi(mecca):
    day = date(2026, 6, 15)
    params = all_methods()[0].parameters
    shafi = compute(mecca, day, params.with_madhab(Madhab.SHAFI))
    hanafi = compute(mecca, day, params.with_madhab(Madhab.HANAFI))
    assert hanafi.asr > shafi.asr
    # Madhab only affects Asr.
    assert dataclasses.replace(hanafi, asr=shafi.asr) == shafi


def test_compute_is_deterministic(paris, equinox):
    params = method_named("Muslim World League").parameters
    assert compute(paris, equinox, params) == compute(paris, equinox, params)


def test_instants_are_utc_and_rounded_to_minutes(paris, equinox):
    schedule = compute(paris, equinox, all_methods()[0].parameters)
    for _, instant in schedule.items():
        assert instant.utcoffset() == timedelta(0)
        assert instant.second == 0 and instant.microsecond == 0


def test_mecca_umm_al_qura_sanity_bounds(mecca):
    params = method_named(UMM_AL_QURA).parameters
    schedule = compute(mecca, date(2026, 1, 15), params)
    riyadh = timezone("Asia/Riyadh")
    hour = {name: t.astimezone(riyadh).hour for name, t in schedule.as_dict().items()}
    assert 3 <= hour["Fajr"] <= 6
    assert 11 <= hour["Dhuhr"] <= 13
    assert 14 <= hour["Asr"] <= 16
    assert 17 <= hour["Maghrib"] <= 19
    assert 18 <= hour["Isha"] <= 21


def test_isha_interval_follows_maghrib(mecca):
    schedule = compute(mecca, date(2026, 1, 15), method_named(UMM_AL_QURA).parameters)
    assert schedule.isha - schedule.maghrib == timedelta(minutes=90)


def test_dhuhr_is_one_minute_past_solar_noon(paris, equinox):
    params = CalculationParameters(fajr_angle=18.0, isha_angle=17.0, rounding=Rounding.NONE)
    schedule = compute(paris, equinox, params)
    noon = datetime(2026, 3, 21, tzinfo=utc) + timedelta(hours=solar_noon(paris, equinox))
    assert abs(schedule.dhuhr - noon - timedelta(minutes=1)) < timedelta(milliseconds=1)


def test_method_adjustments_shift_instants(paris, equinox):
    base = CalculationParameters(fajr_angle=18.0, isha_angle=17.0)
    shifted = dataclasses.replace(
        base, method_adjustments=PrayerAdjustments(sunrise=-7, dhuhr=5, asr=4, maghrib=7)
    )
    a = compute(paris, equinox, base)
    b = compute(paris, equinox, shifted)
    assert b.sunrise - a.sunrise == timedelta(minutes=-7)
    assert b.dhuhr - a.dhuhr == timedelta(minutes=5)
    assert b.asr - a.asr == timedelta(minutes=4)
    assert b.maghrib - a.maghrib == timedelta(minutes=7)
    assert b.fajr == a.fajr and b.isha == a.isha


def test_rounding_up_never_moves_earlier(paris, equinox):
    exact = compute(paris, equinox, CalculationParameters(fajr_angle=20.0, isha_angle=18.0, rounding=Rounding.NONE))
    up = compute(paris, equinox, CalculationParameters(fajr_angle=20.0, isha_angle=18.0, rounding=Rounding.UP))
    for prayer in CANONICAL_ORDER:
        assert timedelta(0) <= up.get(prayer) - exact.get(prayer) < timedelta(minutes=1)


def test_maghrib_angle_is_after_sunset(paris, equinox):
    tehran_style = CalculationParameters(fajr_angle=17.7, isha_angle=14.0, maghrib_angle=4.5)
    sunset_style = CalculationParameters(fajr_angle=17.7, isha_angle=14.0)
    assert compute(paris, equinox, tehran_style).maghrib > compute(paris, equinox, sunset_style).maghrib


@pytest.mark.parametrize("delta", [-45, -1, 0, 5, 47])
def test_corrections_are_exactly_additive(delta, mecca):
    day = date(2026, 6, 15)
    params = all_methods()[0].parameters
    schedule = compute(mecca, day, params)
    corrected = apply_corrections(schedule, PrayerAdjustments(fajr=delta, isha=-delta))
    assert corrected.fajr == schedule.fajr + timedelta(minutes=delta)
    assert corrected.isha == schedule.isha - timedelta(minutes=delta)
    assert corrected.dhuhr == schedule.dhuhr

    day_schedule = compute_day(mecca, day, params, corrections=PrayerAdjustments(fajr=delta))
    assert day_schedule.schedule.fajr == schedule.fajr + timedelta(minutes=delta)
    tomorrow = compute(mecca, day + timedelta(days=1), params)
    assert day_schedule.tomorrow_fajr == tomorrow.fajr + timedelta(minutes=delta)


def test_corrections_may_reorder_prayers(mecca):
    schedule = compute(mecca, date(2026, 6, 15), all_methods()[0].parameters)
    corrected = apply_corrections(schedule, PrayerAdjustments(fajr=600))
    assert corrected.fajr > corrected.sunrise


def test_polar_summer_falls_back_and_keeps_order(tromso):
    day = date(2026, 6, 21)
    assert solve(tromso, day, 18.0, Direction.MORNING) is None
    for method in all_methods():
        for madhab in Madhab:
            assert_strictly_ordered(compute(tromso, day, method.parameters.with_madhab(madhab)))


@pytest.mark.parametrize("rule", list(HighLatitudeRule))
def test_every_high_latitude_rule_keeps_order(rule, tromso):
    params = CalculationParameters(fajr_angle=18.0, isha_angle=17.0, high_latitude_rule=rule)
    assert_strictly_ordered(compute(tromso, date(2026, 6, 21), params))


def test_middle_of_night_splits_the_night(tromso):
    params = CalculationParameters(
        fajr_angle=18.0, isha_angle=17.0, rounding=Rounding.NONE,
        high_latitude_rule=HighLatitudeRule.MIDDLE_OF_NIGHT,
    )
    schedule = compute(tromso, date(2026, 6, 21), params)
    # Fajr and Isha sit half a (short, seeded) night away from sunrise and sunset.
    morning = schedule.sunrise - schedule.fajr
    evening = schedule.isha - schedule.maghrib
    assert abs(morning - evening) < timedelta(seconds=1)


@pytest.mark.parametrize(
    "coords, day",
    [
        (Coordinates(69.6492, 18.9553), date(2026, 12, 21)),  # polar night
        (Coordinates(90.0, 0.0), date(2026, 6, 21)),
        (Coordinates(-90.0, 0.0), date(2026, 6, 21)),
        (Coordinates(-75.0, 123.0), date(2026, 12, 21)),  # southern polar day
        (Coordinates(66.5, -18.0), date(2026, 6, 21)),
    ],
)
def test_extreme_latitudes_are_fully_populated_and_ordered(coords, day):
    params = method_named(UMM_AL_QURA).parameters
    assert_strictly_ordered(compute(coords, day, params))


def test_moonsighting_adjustments_keep_dhuhr_before_asr_near_polar_circle():
    params = method_named("Moonsighting Committee Worldwide").parameters
    for coords, day in [
        (Coordinates(66.0, 10.0), date(2026, 12, 17)),
        (Coordinates(66.3, 10.0), date(2026, 12, 21)),
        (Coordinates(66.6, 10.0), date(2026, 12, 10)),
    ]:
        schedule = compute(coords, day, params)
        assert schedule.dhuhr < schedule.asr < schedule.maghrib
        assert_strictly_ordered(schedule)


POLAR_CIRCLE_DAYS = [
    date(2026, 6, 10),
    date(2026, 6, 21),
    date(2026, 12, 10),
    date(2026, 12, 17),
    date(2026, 12, 21),
]


@pytest.mark.parametrize("method", all_methods(), ids=lambda m: m.name)
@pytest.mark.parametrize("latitude", [64.0, 65.0, 66.0, 66.3, 66.6, 67.0, -66.0])
def test_every_method_keeps_order_near_polar_circle(method, latitude):
    coords = Coordinates(latitude, 10.0)
    for day in POLAR_CIRCLE_DAYS:
        for madhab in Madhab:
            assert_strictly_ordered(compute(coords, day, method.parameters.with_madhab(madhab)))


@pytest.mark.parametrize(
    "coords, tz_name",
    [
        (Coordinates(34.0522, -118.2437), "America/Los_Angeles"),
        (Coordinates(35.6762, 139.6503), "Asia/Tokyo"),
        (Coordinates(-36.8485, 174.7633), "Pacific/Auckland"),
    ],
)
def test_local_dates_match_requested_day_far_from_greenwich(coords, tz_name):
    day = date(2026, 7, 1)
    schedule = compute(coords, day, all_methods()[0].parameters)
    local_tz = timezone(tz_name)
    for prayer in CANONICAL_ORDER:
        assert schedule.get(prayer).astimezone(local_tz).date() == day, prayer


def test_with_sunnah_arithmetic():
    t = datetime(2026, 1, 15, tzinfo=utc)
    schedule = PrayerSchedule(
        fajr=t + timedelta(hours=5),
        sunrise=t + timedelta(hours=6, minutes=30),
        dhuhr=t + timedelta(hours=12),
        asr=t + timedelta(hours=15),
        maghrib=t + timedelta(hours=18),
        isha=t + timedelta(hours=20),
    )
    result = with_sunnah(schedule, tomorrow_fajr=t + timedelta(days=1, hours=5))
    assert result.tahajud == t + timedelta(days=1, hours=2)
    assert result.dhuha == t + timedelta(hours=6, minutes=50)
    assert schedule.tahajud is None


def test_compute_day_with_sunnah(mecca):
    day = date(2026, 1, 15)
    params = method_named(UMM_AL_QURA).parameters
    plain = compute(mecca, day, params)
    result = compute_day(
        mecca, day, params,
        corrections=PrayerAdjustments(isha=10, sunrise=2, dhuha=3, tahajud=-5),
        include_sunnah=True,
    )
    schedule = result.schedule
    assert schedule.isha == plain.isha + timedelta(minutes=10)
    assert schedule.sunrise == plain.sunrise + timedelta(minutes=2)
    assert schedule.dhuha == plain.sunrise + timedelta(minutes=23)
    expected_tahajud = schedule.isha + (result.tomorrow_fajr - schedule.isha) * (2.0 / 3.0)
    assert schedule.tahajud == expected_tahajud - timedelta(minutes=5)
    assert schedule.isha < schedule.tahajud < result.tomorrow_fajr
    assert list(schedule.as_dict()) == [
        "Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha", "Tahajud", "Dhuha",
    ]


def test_compute_day_without_sunnah_has_no_sunnah_entries(paris, equinox):
    result = compute_day(paris, equinox, all_methods()[0].parameters)
    assert result.schedule.tahajud is None and result.schedule.dhuha is None
    assert Prayer.TAHAJUD.value not in result.schedule.as_dict()


def test_keep_apart_pushes_collapsed_minutes_forward():
    t = datetime(2026, 12, 17, 11, 22, tzinfo=utc)
    minute = timedelta(minutes=1)
    assert _keep_apart([t, t, t - minute, t + 5 * minute], minute) == [
        t, t + minute, t + 2 * minute, t + 5 * minute,
    ]
