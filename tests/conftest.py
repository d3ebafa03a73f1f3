"""Pytest configuration and fixtures."""

import os

import pytest

from tests.fixtures_readiness import FakeClock, InMemoryReadinessStore, scenario_sources


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["READINESS_ENV"] = "test"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sources():
    return scenario_sources()


@pytest.fixture
def store():
    return InMemoryReadinessStore()
