"""
Shared pytest fixtures for the shvil-events test suite.

Provides an in-memory event log, a fake Kafka producer and a FastAPI
test client wired to both.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from shvil_events import kafka_producer
from shvil_events.config import settings
from shvil_events.db import get_session
from shvil_events.kafka_producer import get_kafka_producer
from shvil_events.limiter import limiter
from shvil_events.main import app
from shvil_events.models import AnalyticsEvent

APP_VERSION = "1.4.2"


class FakeProducer:
    """Records everything sent instead of talking to a broker."""

    def __init__(self, error: Exception = None):
        self.sent = []
        self.error = error
        self.flushed = False
        self.closed = False

    def send(self, topic, value=None, key=None):
        if self.error is not None:
            raise self.error
        self.sent.append((topic, value))

    def flush(self):
        self.flushed = True

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def app_version(monkeypatch):
    """Pins the app-metadata version for every test."""
    monkeypatch.setattr(settings, "APP_VERSION", APP_VERSION)
    return APP_VERSION


@pytest.fixture(autouse=True)
def reset_producer():
    """Keeps the module-level producer singleton clean between tests."""
    kafka_producer.set_kafka_producer(None)
    yield
    kafka_producer.set_kafka_producer(None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def producer():
    return FakeProducer()


@pytest.fixture
def client(engine, producer, monkeypatch):
    """TestClient with the event log and Kafka swapped for test doubles."""

    def _get_session():
        with Session(engine) as session:
            yield session

    monkeypatch.setattr(limiter, "enabled", False)
    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_kafka_producer] = lambda: producer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def timestamp():
    return datetime(2024, 6, 15, 20, 0, tzinfo=timezone.utc)


@pytest.fixture
def create_raw_event(timestamp):
    """
    Return a function that creates AnalyticsEvent objects with sensible defaults.

    Example:
        event = create_raw_event(properties={"count": 3})
    """

    def _create_raw_event(name: str = "tap_button", properties: dict = None, **kwargs) -> AnalyticsEvent:
        kwargs.setdefault("timestamp", timestamp)
        return AnalyticsEvent(name=name, properties=properties or {}, **kwargs)

    return _create_raw_event
