"""
Global test configuration with support for different test types.
"""

from contextlib import suppress
import logging
import os

import pytest

from rendezvous.interactions import InMemoryInteractionCacheService
from tests.fixtures.catalogue import Catalogue, sample_catalogue
from tests.fixtures.clock import FakeClock
from tests.fixtures.transport import RecordingTransport


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Tests should only see environment that they explicitly set.

    Opt-in escape hatch: mark a test with @pytest.mark.allow_dotenv
    to permit .env loading for that specific test.
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(ImportError):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_rendezvous_env(request, monkeypatch):
    """Ensure a clean RENDEZVOUS_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("RENDEZVOUS_"):
            monkeypatch.delenv(key, raising=False)


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with in-memory collaborators",
        "allow_dotenv: Permit python-dotenv to load .env files",
        "allow_env_pollution: Keep RENDEZVOUS_* variables from the outer environment",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def clock() -> FakeClock:
    """A manually advanced monotonic clock."""
    return FakeClock()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def cache(clock) -> InMemoryInteractionCacheService:
    """Interaction cache with the default TTL driven by the fake clock."""
    return InMemoryInteractionCacheService(clock=clock)


@pytest.fixture
def catalogue() -> Catalogue:
    """A tournament catalogue with five visible and one hidden challenge."""
    return sample_catalogue()
