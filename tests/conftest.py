"""Shared fixtures for the WeatherVibe test suite."""

import random

import pytest

from core.weathervibe.engine import WeatherVibeEngine
from core.weathervibe.models import LocalTime
from core.weathervibe.settings import ConfigSource
from core.weathervibe.transport import Transport

ZONE = 12

BASE_OPTIONS = {
    "WeatherVibe.Zones": str(ZONE),
    "WeatherVibe.Tick.Seconds": 1,
    "WeatherVibe.RepeatMax": 2,
    "WeatherVibe.Fade.Step": "0.05",
    "WeatherVibe.Fade.StepSeconds.Min": 1,
    "WeatherVibe.Fade.StepSeconds.Max": 1,
    "WeatherVibe.StartOffset.MaxSeconds": 0,
    "WeatherVibe.DayPart.Mode": "morning",
    "WeatherVibe.Season": "spring",
}


class FixedClock:
    """Clock that reports whatever time the test sets."""

    def __init__(self, hour: int = 8, minute: int = 0, day_of_year: int = 100):
        self.hour = hour
        self.minute = minute
        self.day_of_year = day_of_year

    def now_local(self) -> LocalTime:
        return LocalTime(self.hour, self.minute, self.day_of_year)


class RecordingTransport(Transport):
    """Transport that records every delivery."""

    def __init__(self, recipients: bool = True):
        self.recipients = recipients
        self.broadcasts: list[tuple] = []
        self.direct: list[tuple] = []

    def broadcast_to_zone(self, zone_id, condition, intensity):
        self.broadcasts.append((zone_id, condition, intensity))
        return self.recipients

    def send_to_observer(self, observer_id, condition, intensity):
        self.direct.append((observer_id, condition, intensity))


def build_engine(options=None, transport=None, clock=None, seed=7):
    values = dict(BASE_OPTIONS)
    values.update(options or {})
    return WeatherVibeEngine(
        ConfigSource(values),
        transport=transport or RecordingTransport(),
        clock=clock or FixedClock(),
        rng=random.Random(seed),
    )


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def make_engine(transport, clock):
    """Factory for engines sharing the test's transport and clock."""

    def _make(options=None, seed=7):
        return build_engine(options, transport=transport, clock=clock, seed=seed)

    return _make
