"""
Pytest configuration and shared fixtures.
"""
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Tuple

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weather_alerts.alerts.cooldown import CooldownGate
from weather_alerts.alerts.store import AlertStore
from weather_alerts.alerts.types import ConditionsSnapshot, Thresholds
from weather_alerts.core.config import reset_settings
from weather_alerts.core.models import Base
from weather_alerts.notifications.dispatcher import DispatchResult, NotificationDispatcher
from weather_alerts.sources.conditions import ConditionsProvider

from factories import make_snapshot


@pytest.fixture(scope="function")
def clean_env(monkeypatch):
    """
    Clean environment for testing.

    Removes all app-related env vars to ensure clean state.
    """
    env_vars = [
        "DATABASE_URL",
        "LOG_LEVEL",
        "COOLDOWN_HOURS",
        "POLL_INTERVAL_MINUTES",
        "MAX_CONCURRENT_SITES",
        "SITE_TIMEOUT_SECONDS",
        "RESEND_API_KEY",
        "THRESHOLD_HEAT_INDEX",
        "FORECAST_THRESHOLD_HEAT_INDEX",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)

    # Reset settings singleton
    reset_settings()

    yield

    # Reset again after test
    reset_settings()


# =============================================================================
# Database
# =============================================================================


@pytest.fixture(scope="function")
def engine():
    """
    In-memory SQLite database, fresh for each test.

    StaticPool keeps one connection so every session (and the TestClient
    worker threads) see the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeClock:
    """Naive-UTC clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)

    def aware(self) -> datetime:
        return self.current.replace(tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 7, 1, 18, 0, 0))


@pytest.fixture
def store(session_factory, clock):
    return AlertStore(session_factory, clock=clock)


@pytest.fixture
def gate(store, clock):
    return CooldownGate(store, window=timedelta(hours=4), clock=clock)


@pytest.fixture
def sample_site(store):
    """An active site with a manager contact."""
    return store.create_site({
        "name": "North Yard",
        "city": "Phoenix",
        "state": "AZ",
        "latitude": 33.45,
        "longitude": -112.07,
        "manager_name": "Jordan Lee",
        "manager_email": "jordan@example.com",
    })


# =============================================================================
# Thresholds
# =============================================================================


@pytest.fixture
def current_thresholds():
    return Thresholds(heat_index=95.0, cold_temp=20.0, wind_speed=45.0, aqi=150.0)


@pytest.fixture
def forecast_thresholds():
    return Thresholds(heat_index=95.0, cold_temp=20.0, wind_speed=45.0, aqi=150.0)


# =============================================================================
# Collaborator fakes
# =============================================================================


class FakeConditionsProvider(ConditionsProvider):
    """
    Returns canned snapshots keyed by coordinate.

    A value that is an exception instance is raised instead; `delays`
    makes a coordinate slow.
    """

    def __init__(self, default: ConditionsSnapshot = None):
        self.default = default or make_snapshot()
        self.responses: Dict[Tuple[float, float], object] = {}
        self.delays: Dict[Tuple[float, float], float] = {}
        self.calls: List[Tuple[float, float]] = []

    async def fetch(self, latitude: float, longitude: float) -> ConditionsSnapshot:
        key = (latitude, longitude)
        self.calls.append(key)
        if key in self.delays:
            await asyncio.sleep(self.delays[key])
        response = self.responses.get(key, self.default)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        pass


class RecordingDispatcher(NotificationDispatcher):
    """Records every send and answers with a fixed result after `delay` seconds."""

    def __init__(self, result: DispatchResult = None):
        self.result = result or DispatchResult(sent=True, message_id="msg_1")
        self.sent: List[Dict[str, str]] = []
        self.delay = 0.0

    async def send(self, recipient: str, subject: str, content: str) -> DispatchResult:
        self.sent.append({"recipient": recipient, "subject": subject, "content": content})
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.result


@pytest.fixture
def provider():
    return FakeConditionsProvider()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()
