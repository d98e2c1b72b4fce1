"""
Shared pytest fixtures.

Provides an in-memory SQLite engine with the override table, a
controllable clock, and disables rate limiting for API tests.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from app.infrastructure.qualitative.override_repository import create_schema
from app.shared.security.rate_limiting import limiter


class FakeClock:
    """Manually advanced seconds source."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine() -> Engine:
    """Single-connection in-memory SQLite database with the schema applied."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture(autouse=True)
def disable_rate_limiting():
    previous = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = previous
