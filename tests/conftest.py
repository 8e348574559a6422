"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from wpmodel.config import get_settings
from wpmodel.domain.model import Model
from wpmodel.infrastructure.database import Database, reset_database, set_database
from wpmodel.infrastructure.messaging import get_event_dispatcher, reset_event_dispatcher
from wpmodel.infrastructure.wordpress import get_wordpress, reset_wordpress


@pytest.fixture(autouse=True)
def reset_state():
    """Process-wide state (boot registry, events, settings) per test."""
    get_settings.cache_clear()
    Model.clear_booted_models()
    reset_event_dispatcher()

    yield

    Model.clear_booted_models()
    reset_event_dispatcher()
    reset_wordpress()
    reset_database()
    get_settings.cache_clear()


@pytest.fixture
def database():
    """In-memory SQLite WordPress database.

    StaticPool: усі connections бачать одну й ту саму in-memory базу.
    """
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db = Database(engine, prefix="wp_")
    db.create_schema()
    set_database(db)

    yield db

    db.drop_schema()


@pytest.fixture
def wordpress(database):
    """WordPress facade bound to the test database."""
    return get_wordpress()


@pytest.fixture
def dispatcher():
    """Fresh event dispatcher (reset by reset_state)."""
    return get_event_dispatcher()


@pytest.fixture
def no_trash(monkeypatch):
    """Disable the trash (EMPTY_TRASH_DAYS = 0)."""
    monkeypatch.setenv("WP_MODEL_EMPTY_TRASH_DAYS", "0")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
