"""
Shared test fixtures and configuration.
"""

import os
from datetime import datetime, timedelta

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("COMPANION_REPLY_DELAY_SECONDS", "0")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("SEED_PREVIEW_DATA", "false")

from fastapi.testclient import TestClient  # noqa: E402

from vital.main import app  # noqa: E402
from vital.store import MetricsStore  # noqa: E402


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 1, 9, 0, 0))


@pytest.fixture
def store(clock):
    with MetricsStore("sqlite://", clock=clock) as s:
        yield s


@pytest.fixture
def client():
    # Each client runs the lifespan, which opens a fresh in-memory database
    with TestClient(app) as c:
        yield c


@pytest.fixture
def health_payload():
    """Health Auto Export style payload covering 2025-01-01 and the night into 2025-01-02."""
    return {
        "StepCount": [
            {"date": "2025-01-01 08:00:00", "qty": 4000},
            {"date": "2025-01-01 18:30:00", "qty": 3500},
            {"date": "2025-01-02 09:00:00", "qty": 1200},
            {"date": "not a date", "qty": 10},
        ],
        "HeartRate": [
            {"date": "2025-01-01 08:00:00", "Min": 60, "Avg": 66, "Max": 80},
            {"date": "2025-01-01 12:00:00", "qty": 74},
        ],
        "SleepAnalysis": [
            {"startDate": "2025-01-01 23:00:00", "endDate": "2025-01-02 07:00:00", "value": "AsleepCore"},
            {"startDate": "2025-01-01 22:30:00", "endDate": "2025-01-02 07:15:00", "value": "InBed"},
        ],
        "ActiveEnergyBurned": [
            {"date": "2025-01-01 10:00:00", "qty": 200, "units": "kcal"},
            {"date": "2025-01-01 17:00:00", "qty": 418.4, "units": "kJ"},
        ],
        "Weight": [{"date": "2025-01-01 07:00:00", "qty": 80}],
    }
