"""
Pytest configuration and shared fixtures for SunTime tests.

This module provides:
- FastAPI TestClient configuration
- Request stats reset between tests
- Sample session histories and vitamin D report fixtures
"""

import pytest
import os
import sys
from datetime import datetime, timezone
from typing import Generator

# Quiet, text-only logs during tests (must be set before config is imported)
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOG_OUTPUT", "stdout")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Add backend and tests directories to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fastapi.testclient import TestClient

from fixtures.mock_data import make_session, make_session_history, make_report


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def app_instance():
    """Create the FastAPI app once per test session."""
    from main import app as fastapi_app
    return fastapi_app


@pytest.fixture(scope="function")
def app(app_instance):
    """Reset request statistics for each test."""
    from main import request_stats

    request_stats.reset()
    yield app_instance


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a TestClient for making requests to the app."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


# =============================================================================
# TIME FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def fixed_now() -> datetime:
    """A fixed 'now' so date-based rules are deterministic."""
    return datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# SESSION FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def single_session(fixed_now):
    """One 30 minute moderate-UV session today."""
    return make_session(duration=30, uv_index=5, skin_type=3, date=fixed_now)


@pytest.fixture(scope="function")
def three_day_history(fixed_now):
    """Sessions on each of the last three days, including today."""
    return make_session_history(fixed_now, days=3, duration=20)


@pytest.fixture(scope="function")
def broken_streak_history(fixed_now):
    """Sessions three and four days ago only."""
    return make_session_history(fixed_now, days=2, duration=15, start_offset_days=3)


# =============================================================================
# VITAMIN D FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def report_history(fixed_now):
    """An old deficient report superseded by a newer sufficient one."""
    return [
        make_report(value=15, days_ago=60, now=fixed_now),
        make_report(value=40, days_ago=10, now=fixed_now),
    ]
