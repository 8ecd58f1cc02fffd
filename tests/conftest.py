"""Pytest fixtures for all tests."""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient, ASGITransport

from config import Config, GeneratorConfig, WORKER_ID_ENV
from generation.generator import IdGenerator
from generation.sequence import SequenceCounter
from ui.app import create_app
from utils.timestamp import FixedClock

FIXED_TIME = datetime(2026, 10, 18, 12, 34, 56, 789000, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def no_worker_env(monkeypatch):
    """Keep the host's APP_WORKER_ID out of the tests."""
    monkeypatch.delenv(WORKER_ID_ENV, raising=False)


@pytest.fixture
def clock():
    """Clock frozen at FIXED_TIME."""
    return FixedClock(FIXED_TIME)


@pytest.fixture
def gen_config():
    """Generator config with worker id 3 and the default epoch."""
    return GeneratorConfig(worker_id=3)


@pytest.fixture
def counter():
    return SequenceCounter()


@pytest.fixture
def generator(gen_config, clock, counter):
    """Generator bound to the frozen clock."""
    return IdGenerator(gen_config, clock, counter)


@pytest.fixture
async def app(gen_config, clock):
    """Create test FastAPI app."""
    return create_app(Config(generator=gen_config), clock=clock)


@pytest.fixture
async def client(app):
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
