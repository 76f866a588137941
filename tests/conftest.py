"""Shared fixtures: a controllable clock and seeded collaborators."""

import logging
import random

import pytest

from match_orchestrator._ladder.profiles import ProfileStore
from match_orchestrator._matchmaking.queue_manager import QueueManager
from match_orchestrator._rooms.registry import RoomRegistry
from match_orchestrator._shared.analytics import AnalyticsSink
from match_orchestrator.orchestrator import MatchOrchestrator
from match_orchestrator.puzzle_catalog import BuiltinPuzzleCatalog

START = 1_700_000_000.0


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = START):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def analytics(clock):
    return AnalyticsSink(clock=clock, quiet=True)


@pytest.fixture
def profiles(clock):
    return ProfileStore(clock=clock, rng=random.Random(7))


@pytest.fixture
def registry(clock, analytics):
    return RoomRegistry(clock=clock, analytics=analytics)


@pytest.fixture
def queues(profiles, registry, clock):
    return QueueManager(
        profiles, registry, catalog=BuiltinPuzzleCatalog(), clock=clock, rng=random.Random(11)
    )


@pytest.fixture
def orchestrator(clock, analytics):
    return MatchOrchestrator(clock=clock, rng=random.Random(3), analytics=analytics)


@pytest.fixture
def package_logs(caplog):
    """caplog capturing INFO records from the package logger."""
    pkg_logger = logging.getLogger("match_orchestrator")
    original = pkg_logger.propagate
    pkg_logger.propagate = True
    try:
        with caplog.at_level(logging.INFO, logger="match_orchestrator"):
            yield caplog
    finally:
        pkg_logger.propagate = original


def calibrate(profiles, handle, rating=1500):
    """Finish calibration so matchmaking uses the ladder rating."""
    profile = profiles.get_or_create(handle)
    profile.calibrations_remaining = 0
    for ladder in profile.ladders.values():
        ladder.rating = rating
    return profile
