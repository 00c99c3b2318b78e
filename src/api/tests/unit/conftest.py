"""Unit test fixtures with mocked dependencies."""

import pytest
from pydantic import SecretStr


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password=SecretStr("testpass"),
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings getters are lru_cached; isolate environment changes per test."""
    from infrastructure.settings import (
        get_database_settings,
        get_oidc_settings,
        get_settings,
        get_tenancy_settings,
    )

    getters = (
        get_settings,
        get_database_settings,
        get_oidc_settings,
        get_tenancy_settings,
    )
    for getter in getters:
        getter.cache_clear()
    yield
    for getter in getters:
        getter.cache_clear()
