import json

import pytest

from storage import InMemoryRepository
from tracker import WeightTracker


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, amount):
        self.now += amount


class FailingRepository(InMemoryRepository):
    """Reads work, every write raises."""

    def save_entries(self, records):
        raise OSError("disk full")

    def save_goal(self, value):
        raise OSError("disk full")


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def ms_clock():
    return FakeClock(1_704_067_200_000)


@pytest.fixture
def tracker(repo, ms_clock):
    return WeightTracker.load(repo, clock=ms_clock)


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / "weights.json"


@pytest.fixture
def write_store(data_path):
    def _write(obj):
        data_path.write_text(json.dumps(obj), encoding="utf-8")
        return data_path
    return _write


@pytest.fixture
def clock():
    return FakeClock(100.0)


@pytest.fixture
def failing_repo():
    return FailingRepository(
        entries=[{"id": 1, "date": "2024-01-01", "weight": 80.0, "notes": ""}],
        goal="70.0",
    )
