"""
Unit tests for RetryLimitPolicy and ExponentialBackOff.
"""

import pytest

from retry_audit.retry.classifier import build_classification_table
from retry_audit.retry.context import AttemptContext
from retry_audit.retry.policy import ExponentialBackOff, RetryLimitPolicy


def make_context(attempt_count: int, error: BaseException | None) -> AttemptContext:
    context = AttemptContext()
    for _ in range(attempt_count):
        context.begin_attempt()
    if error is not None:
        context.record_failure(error)
    return context


# ============================================================================
# RetryLimitPolicy
# ============================================================================


def test_policy_rejects_zero_max_attempts():
    with pytest.raises(ValueError, match="max_attempts must be >= 1"):
        RetryLimitPolicy(max_attempts=0)


def test_classify_exact_types(policy):
    assert policy.classify(RuntimeError("boom")) is True
    assert policy.classify(ValueError("bad")) is False


def test_classify_unclassified_is_not_retryable(policy):
    assert policy.classify(KeyError("missing")) is False


def test_classify_uses_nearest_classified_ancestor():
    table = build_classification_table(["OSError"], ["FileNotFoundError"])
    policy = RetryLimitPolicy(3, table)

    assert policy.classify(ConnectionResetError()) is True  # OSError subclass
    assert policy.classify(FileNotFoundError()) is False
    assert policy.classify(IsADirectoryError()) is True


def test_classify_subclass_of_non_retryable():
    class StrictValueError(ValueError):
        pass

    policy = RetryLimitPolicy(3, build_classification_table(["Exception"], ["ValueError"]))

    assert policy.classify(StrictValueError()) is False
    assert policy.classify(LookupError()) is True


def test_can_retry_before_any_attempt(policy):
    assert policy.can_retry(AttemptContext()) is True


@pytest.mark.parametrize(
    "attempt_count,error,expected",
    [
        (1, RuntimeError("retryable"), True),
        (2, RuntimeError("retryable"), True),
        (3, RuntimeError("retryable"), False),  # limit reached
        (1, ValueError("non-retryable"), False),
        (2, ValueError("non-retryable"), False),
        (1, KeyError("unclassified"), False),
    ],
)
def test_can_retry(policy, attempt_count, error, expected):
    assert policy.can_retry(make_context(attempt_count, error)) is expected


def test_single_attempt_policy_never_retries():
    policy = RetryLimitPolicy(1, build_classification_table(["RuntimeError"], None))

    assert policy.can_retry(make_context(1, RuntimeError())) is False


# ============================================================================
# ExponentialBackOff
# ============================================================================


def test_backoff_delay_series():
    backoff = ExponentialBackOff(initial_interval_ms=50, multiplier=2, max_interval_ms=1000)

    assert [backoff.delay_for(n) for n in range(1, 7)] == [
        0.05, 0.1, 0.2, 0.4, 0.8, 1.0
    ]


def test_backoff_constant_when_multiplier_is_one():
    backoff = ExponentialBackOff(initial_interval_ms=250, multiplier=1, max_interval_ms=250)

    assert backoff.delay_for(1) == backoff.delay_for(5) == 0.25


def test_backoff_zero_interval():
    assert ExponentialBackOff(0, 2.0, 0).delay_for(3) == 0.0


@pytest.mark.parametrize("attempt_count", [1025, 5000, 10**6])
def test_backoff_large_attempt_counts_stay_capped(attempt_count):
    assert ExponentialBackOff(100, 2.0, 1000).delay_for(attempt_count) == 1.0
    assert ExponentialBackOff(0, 2.0, 1000).delay_for(attempt_count) == 0.0
    assert ExponentialBackOff(1, 10.0, 10000).delay_for(attempt_count) == 10.0


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"initial_interval_ms": -1}, "initial_interval_ms"),
        ({"multiplier": 0.5}, "multiplier"),
        ({"initial_interval_ms": 500, "max_interval_ms": 100}, "max_interval_ms"),
    ],
)
def test_backoff_validation(kwargs, message):
    with pytest.raises(ValueError, match=message):
        ExponentialBackOff(**kwargs)
