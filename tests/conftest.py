"""Pytest configuration and fixtures."""

import os

import pytest

from tests.fixtures_sow import MOCK_CATALOG


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["SOW_ENGINE_ENV"] = "test"


@pytest.fixture
def mock_catalog():
    """Two Sales catalog entries with full estimates."""
    return [dict(entry) for entry in MOCK_CATALOG]
