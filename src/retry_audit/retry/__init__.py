"""
Exception classification and retry narration.

This package decides which exceptions a retry loop may retry and narrates
every loop as an auditable sequence of log events:

1. **Classification**: Two lists of type names -> read-only type/flag table
2. **Limit policy**: Retry only retryable errors, up to max attempts
3. **Backoff**: Exponential wait between attempts
4. **Narration**: One warning per failed attempt, one info line for the
   final disposition (fallback or success)

Main Components:
    - ExceptionClassifier: Builds the classification table from type names
    - RetryLimitPolicy: Decides whether another attempt is allowed
    - RetryEventNarrator: Logs the attempt-by-attempt narrative
    - RetryExecutor: Minimal retry loop wiring the pieces together
    - RetryExhausted: Raised when a loop gives up without a fallback

Usage:
    >>> from retry_audit.retry import build_retry_executor
    >>> executor = build_retry_executor(settings)
    >>> result = executor.execute(operation, fallback=fallback)
"""

from retry_audit.retry.classifier import (
    ClassificationTable,
    ExceptionClassifier,
    build_classification_table,
)
from retry_audit.retry.context import AttemptContext
from retry_audit.retry.engine import RetryExecutor, build_retry_executor
from retry_audit.retry.exceptions import (
    ClassificationError,
    InvalidClassificationError,
    RetryExhausted,
    TypeResolutionError,
)
from retry_audit.retry.metadata import RetryMetadata
from retry_audit.retry.narrator import (
    AttemptSnapshot,
    Disposition,
    RetryEventNarrator,
    RetryListener,
    decide_disposition,
    describe_error,
)
from retry_audit.retry.policy import ExponentialBackOff, RetryLimitPolicy
from retry_audit.retry.registry import TypeRegistry, TypeResolver

__all__ = [
    "AttemptContext",
    "AttemptSnapshot",
    "ClassificationError",
    "ClassificationTable",
    "Disposition",
    "ExceptionClassifier",
    "ExponentialBackOff",
    "InvalidClassificationError",
    "RetryEventNarrator",
    "RetryExecutor",
    "RetryExhausted",
    "RetryLimitPolicy",
    "RetryListener",
    "RetryMetadata",
    "TypeRegistry",
    "TypeResolutionError",
    "TypeResolver",
    "build_classification_table",
    "build_retry_executor",
    "decide_disposition",
    "describe_error",
]
