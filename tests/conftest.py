"""
Vigia - Test Fixtures
=====================

Shared fixtures for all tests.
"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Set up test environment before importing modules
os.environ.setdefault("VIGIA_LOGS_DIR", tempfile.mkdtemp(prefix="vigia-logs-"))
os.environ.setdefault("VIGIA_DATA_DIR", tempfile.mkdtemp(prefix="vigia-data-"))
os.environ.setdefault("VIGIA_EXPORTS_DIR", tempfile.mkdtemp(prefix="vigia-exports-"))


FIXED_NOW = datetime(2024, 2, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock passed to services in place of utc_now."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def temp_db_path(tmp_path):
    """Path for a temporary database file."""
    return tmp_path / "test.db"


@pytest.fixture
def test_db(temp_db_path):
    """Create a fresh test database instance."""
    from vigia.core.database import DatabaseManager

    DatabaseManager.reset()
    db = DatabaseManager(db_path=temp_db_path)

    yield db

    DatabaseManager.reset()


@pytest.fixture
def service(test_db, clock):
    """Moderation service over the test database and the fake clock."""
    from vigia.services.moderation import ModerationService

    return ModerationService(test_db, clock=clock)


@pytest.fixture
def exports_dir(tmp_path) -> Path:
    return tmp_path / "exports"


@pytest.fixture
def reports(service, exports_dir):
    from vigia.services.reports import ReportService

    return ReportService(service, exports_dir)


@pytest.fixture
def app_config(tmp_path):
    from vigia.core.config import Config

    return Config(
        data_dir=tmp_path,
        exports_dir=tmp_path / "exports",
        frontend_dir=tmp_path / "frontend_build",
    )


@pytest.fixture
def make_client(service, reports, app_config):
    """Build a TestClient for a given APIConfig."""
    from fastapi.testclient import TestClient

    from vigia.api.app import create_app
    from vigia.api.config import APIConfig

    def _make(api_config=None):
        app = create_app(
            moderation=service,
            reports=reports,
            config=app_config,
            api_config=api_config or APIConfig(),
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    """TestClient with auth disabled and the default rate limit."""
    return make_client()
