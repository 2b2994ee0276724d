"""
Shared test fixtures for Management API SDK tests.

Provides configuration, isolated caches and error logs, and a scripted
transport.
"""

import pytest
from hypothesis import settings

from management_api_sdk.cache import MemoryTokenCache
from management_api_sdk.config import ApiClientConfig
from management_api_sdk.sink import ErrorLog

from tests.helpers import FakeTransport, create_test_config

settings.register_profile("ci", max_examples=100)
settings.register_profile("dev", max_examples=50)
settings.load_profile("dev")


@pytest.fixture
def base_config() -> ApiClientConfig:
    """Provide a basic HS256 SDK configuration for testing."""
    return create_test_config()


@pytest.fixture
def token_cache() -> MemoryTokenCache:
    """Provide an empty cache not shared with other tests."""
    return MemoryTokenCache("test_group")


@pytest.fixture
def error_log() -> ErrorLog:
    """Provide an empty error log."""
    return ErrorLog()


@pytest.fixture
def transport() -> FakeTransport:
    """Provide a transport with no scripted responses."""
    return FakeTransport()
