"""
DumbPad Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the test suite.
How:   Every test gets its own temporary data directory and, for endpoint
       tests, its own application built by create_app() from explicit
       Settings, so no state leaks between tests.

Fixtures:
    ├── data_dir: Temporary data directory (pytest tmp_path)
    ├── file_service / note_store / registry: Services rooted at data_dir
    ├── fake_clock: Manually advanced monotonic clock
    ├── make_client: Factory for an HTTPX AsyncClient over a fresh app
    ├── client: Open (no PIN) API client
    └── pin_client: API client for an app protected by TEST_PIN
"""

import os
import shutil
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the module-level app in dumbpad.main away from the working directory
_IMPORT_DATA_DIR = tempfile.mkdtemp(prefix="dumbpad_test_")
os.environ["DATA_DIR"] = _IMPORT_DATA_DIR
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("DUMBPAD_PIN", None)

from dumbpad.config import Settings  # noqa: E402
from dumbpad.main import create_app  # noqa: E402
from dumbpad.services.file_service import FileService  # noqa: E402
from dumbpad.services.note_store import NoteStore  # noqa: E402
from dumbpad.services.registry import NotepadRegistry  # noqa: E402
from tests.constants import TEST_PIN  # noqa: E402


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session", autouse=True)
def _remove_import_data_dir():
    yield
    shutil.rmtree(_IMPORT_DATA_DIR, ignore_errors=True)


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def file_service(data_dir):
    return FileService(str(data_dir))


@pytest.fixture
def note_store(file_service):
    return NoteStore(file_service)


@pytest.fixture
def registry(file_service, note_store):
    return NotepadRegistry(file_service, note_store)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_settings(data_dir):
    """Build Settings rooted at the test data directory."""

    def _make(**overrides) -> Settings:
        values = {"data_dir": str(data_dir), "pin": "", "log_level": "WARNING"}
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def make_client(make_settings):
    """
    Factory for an async HTTP client bound to a freshly created app.

    Usage:
        async with make_client(pin="1234") as client:
            response = await client.get("/api/notepads")
    """

    def _make(**overrides) -> AsyncClient:
        app = create_app(make_settings(**overrides))
        transport = ASGITransport(app=app)
        return AsyncClient(transport=transport, base_url="http://test")

    return _make


@pytest_asyncio.fixture
async def client(make_client):
    async with make_client() as c:
        yield c


@pytest_asyncio.fixture
async def pin_client(make_client):
    async with make_client(pin=TEST_PIN, max_attempts=3) as c:
        yield c
