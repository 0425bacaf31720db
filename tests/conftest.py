"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest
import structlog
from structlog.testing import capture_logs

from retry_audit.config import Settings


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults after each test.

    configure_logging() installs a global configuration; without this reset
    it would leak into tests that capture log events.
    """
    yield
    structlog.reset_defaults()


@pytest.fixture
def test_settings() -> Settings:
    """Test settings mirroring the reference retry scenario.

    max 3 attempts, RuntimeError retryable, ValueError non-retryable,
    no backoff wait. Override fields in individual tests as needed:
        def test_something(test_settings):
            test_settings.RETRY_MAX_ATTEMPTS = 5
    """
    return Settings(
        # === Application ===
        APP_NAME="Retry Audit (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Retry Limit ===
        RETRY_MAX_ATTEMPTS=3,

        # === Backoff ===
        RETRY_INITIAL_INTERVAL_MS=0,
        RETRY_MULTIPLIER=2.0,
        RETRY_MAX_INTERVAL_MS=1000,

        # === Exception Classification ===
        RETRY_RETRYABLE_EXCEPTIONS=["builtins.RuntimeError"],
        RETRY_NON_RETRYABLE_EXCEPTIONS=["builtins.ValueError"],
        RETRY_ALLOW_IMPORT=True,
    )


@pytest.fixture
def captured_logs():
    """Capture every structlog event emitted during the test."""
    with capture_logs() as logs:
        yield logs


@pytest.fixture
def narration(captured_logs):
    """Factory returning the narrated lines so far as (level, message) tuples.

    Debug events (executor bookkeeping) are not part of the narrative.

    Usage:
        def test_something(narration):
            ...
            assert narration() == [("warning", "Attempt: 1 of 3. ...")]
    """
    def _narration() -> list[tuple[str, str]]:
        return [
            (entry["log_level"], entry["event"])
            for entry in captured_logs
            if entry["log_level"] in ("warning", "info")
        ]

    return _narration
