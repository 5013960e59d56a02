from datetime import date

import pytest

from prayerclock.models import Coordinates


@pytest.fixture
def mecca() -> Coordinates:
    return Coordinates(latitude=21.4225, longitude=39.8262)


@pytest.fixture
def paris() -> Coordinates:
    return Coordinates(latitude=48.8566, longitude=2.3522)


@pytest.fixture
def tromso() -> Coordinates:
    return Coordinates(latitude=69.6492, longitude=18.9553)


@pytest.fixture
def equinox() -> date:
    return date(2026, 3, 21)
