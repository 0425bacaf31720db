"""Unit test fixtures (policies, executors and stubs).

Provides retry components wired without settings or real waits.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from retry_audit.retry.classifier import build_classification_table
from retry_audit.retry.engine import RetryExecutor
from retry_audit.retry.policy import ExponentialBackOff, RetryLimitPolicy


@pytest.fixture
def classification():
    """RuntimeError retryable, ValueError non-retryable."""
    return build_classification_table(["RuntimeError"], ["ValueError"])


@pytest.fixture
def policy(classification) -> RetryLimitPolicy:
    """Three-attempt policy over the standard classification."""
    return RetryLimitPolicy(max_attempts=3, classification=classification)


@pytest.fixture
def mock_sleep() -> Mock:
    """Stand-in for time.sleep that records requested delays."""
    return Mock(return_value=None)


@pytest.fixture
def mock_async_sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep that records requested delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def executor(policy, mock_sleep, mock_async_sleep) -> RetryExecutor:
    """Executor with the default narrator and a 100ms x2 backoff (never actually slept)."""
    return RetryExecutor(
        policy,
        backoff=ExponentialBackOff(initial_interval_ms=100, multiplier=2.0, max_interval_ms=1000),
        sleep=mock_sleep,
        async_sleep=mock_async_sleep,
    )
