"""Pytest configuration and fixtures for Handscribe tests."""

import json
import pytest
import tempfile
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pubsub import pub

from handscribe.storage import InMemorySlotStorage, HistoryStore


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: fast tests without I/O beyond temp dirs")
    config.addinivalue_line("markers", "integration: tests wiring several components together")


@pytest.fixture(autouse=True)
def reset_pubsub():
    """Drop listeners registered by a test."""
    yield
    pub.unsubAll()


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


class FakeClock:
    """Deterministic timezone-aware clock."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.now = start or datetime(2024, 5, 17, 9, 30, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def frozen_clock():
    """Clock that always returns the same instant."""
    return FakeClock(step=timedelta(0))


@pytest.fixture
def memory_storage():
    return InMemorySlotStorage()


@pytest.fixture
def history_store(memory_storage, fake_clock):
    return HistoryStore(memory_storage, clock=fake_clock)


@pytest.fixture
def sample_image_file(temp_data_dir):
    """Small PNG-like file on disk."""
    file_path = Path(temp_data_dir) / "note.png"
    file_path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 64)
    return str(file_path)


class FakeResponse:
    """Stand-in for aiohttp.ClientResponse used as an async context manager."""

    def __init__(self, status=200, body=None, raw=None):
        self.status = status
        self._raw = raw if raw is not None else json.dumps(body)

    async def text(self):
        return self._raw

    async def json(self, content_type="application/json"):
        return json.loads(self._raw)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Records posts and replays a canned response or error."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_session_factory():
    """Build a FakeSession from a status and JSON body (or raw text)."""
    def make(status=200, body=None, raw=None, error=None):
        return FakeSession(response=FakeResponse(status=status, body=body, raw=raw), error=error)
    return make
