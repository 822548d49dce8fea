"""
Roster Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── registry: empty StudentRegistry
    ├── test_settings: Settings with rate limiting off
    ├── roster_app: FastAPI app built by create_app() around `registry`
    ├── test_client: HTTPX AsyncClient bound to `roster_app`
    └── sample_student: a valid payload
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from app.config import Settings  # noqa: E402
from app.main import create_app  # noqa: E402
from app.services.student_registry import StudentRegistry  # noqa: E402


@pytest.fixture
def registry():
    """A fresh, empty registry for each test."""
    return StudentRegistry()


@pytest.fixture
def test_settings():
    """Settings used for app fixtures; rate limiting off, test routes on."""
    return Settings(rate_limit_enabled=False, expose_test_routes=True, log_level="WARNING")


@pytest.fixture
def roster_app(registry, test_settings):
    """
    A new application owning `registry`.

    Every test gets its own app, so no state leaks between tests and the
    reset endpoint is not needed for isolation.
    """
    return create_app(registry=registry, app_settings=test_settings)


@pytest_asyncio.fixture
async def test_client(roster_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=roster_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_student():
    return {"name": "Ana", "group": "G1"}
