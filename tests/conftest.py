from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from albatross.config import RetryPolicy, Settings, TransportConfig
from tests.fakes import RecordingSleep


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ALBATROSS_HOST="http://localhost:8080",
        REQUEST_TIMEOUT=5.0,
        MAX_RETRIES=3,
        BACKOFF_FACTOR=0.5,
    )


@pytest.fixture
def retry_config() -> TransportConfig:
    return TransportConfig(timeout=5.0, retry=RetryPolicy(max_attempts=3, backoff_unit=0.5))


@pytest.fixture
def single_attempt_config() -> TransportConfig:
    return TransportConfig(timeout=5.0, retry=None)


@pytest.fixture
def sink() -> MagicMock:
    return MagicMock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
