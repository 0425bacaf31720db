"""
Retry executor.

Runs an operation under a retry limit policy, waits between attempts per
an exponential backoff, and notifies retry listeners (by default the
RetryEventNarrator) about every failure and the eventual success.

Loop (per call):
    1. Start a fresh AttemptContext
    2. Attempt the operation (attempt_count incremented first)
    3. On error: record it, notify listeners, then either back off and
       retry (policy.can_retry) or give up
    4. Giving up: invoke the fallback, or raise RetryExhausted if none
    5. On success: notify listeners and return the result

Usage:
    executor = build_retry_executor(settings)
    result = executor.execute(lambda ctx: client.fetch(), fallback=lambda ctx: cached)
    result = await executor.execute_async(fetch_async, fallback=lambda ctx: cached)
"""

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

import structlog

from retry_audit.config import Settings
from retry_audit.retry.classifier import build_classification_table
from retry_audit.retry.context import AttemptContext
from retry_audit.retry.exceptions import RetryExhausted
from retry_audit.retry.metadata import RetryMetadata
from retry_audit.retry.narrator import (
    AttemptSnapshot,
    RetryEventNarrator,
    RetryListener,
    decide_disposition,
)
from retry_audit.retry.policy import ExponentialBackOff, RetryLimitPolicy
from retry_audit.retry.registry import TypeRegistry

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RetryExecutor:
    """
    Retry loop driven by a RetryLimitPolicy.

    Only Exception subclasses are retried; BaseExceptions such as
    KeyboardInterrupt or asyncio.CancelledError propagate immediately
    without listener notification.

    Attributes:
        policy: Retry limit policy (attempt limit + classification)
        backoff: Wait between attempts (None = no wait)
        listeners: Retry listeners notified on failure and success
    """

    def __init__(
        self,
        policy: RetryLimitPolicy,
        backoff: ExponentialBackOff | None = None,
        listeners: Iterable[RetryListener] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        async_sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.policy = policy
        self.backoff = backoff
        self.listeners: list[RetryListener] = (
            list(listeners) if listeners is not None else [RetryEventNarrator(policy)]
        )
        self._sleep = sleep
        self._async_sleep = async_sleep

    def execute(
        self,
        operation: Callable[[AttemptContext], T],
        fallback: Callable[[AttemptContext], T] | None = None,
    ) -> T:
        """
        Run ``operation`` until it succeeds or the policy gives up.

        Args:
            operation: Callable receiving the AttemptContext
            fallback: Callable invoked with the AttemptContext when the loop gives up

        Returns:
            The operation's result, or the fallback's result

        Raises:
            RetryExhausted: The loop gave up and no fallback was given
        """
        context = AttemptContext()

        while True:
            context.begin_attempt()
            try:
                result = operation(context)
            except Exception as e:
                if self._record_failure(context, e):
                    self._sleep(self._delay(context))
                    continue
                metadata = self._summarize_failure(context)
                if fallback is None:
                    raise RetryExhausted(retry_metadata=metadata, last_error=e) from e
                return fallback(context)

            self._notify_success(context)
            return result

    async def execute_async(
        self,
        operation: Callable[[AttemptContext], Awaitable[T]],
        fallback: Callable[[AttemptContext], T | Awaitable[T]] | None = None,
    ) -> T:
        """
        Async variant of execute(); the fallback may be sync or async.

        Raises:
            RetryExhausted: The loop gave up and no fallback was given
        """
        context = AttemptContext()

        while True:
            context.begin_attempt()
            try:
                result = await operation(context)
            except Exception as e:
                if self._record_failure(context, e):
                    await self._async_sleep(self._delay(context))
                    continue
                metadata = self._summarize_failure(context)
                if fallback is None:
                    raise RetryExhausted(retry_metadata=metadata, last_error=e) from e
                value = fallback(context)
                if inspect.isawaitable(value):
                    value = await value
                return value

            self._notify_success(context)
            return result

    def _record_failure(self, context: AttemptContext, error: Exception) -> bool:
        """Record the error, notify listeners, return whether to retry."""
        context.record_failure(error)
        for listener in self.listeners:
            listener.on_failure(context)
        return self.policy.can_retry(context)

    def _notify_success(self, context: AttemptContext) -> None:
        for listener in self.listeners:
            listener.on_success(context)

        logger.debug(
            "Retry loop succeeded",
            extra={
                "total_attempts": context.attempt_count,
                "total_latency_ms": context.elapsed_ms,
            },
        )

    def _delay(self, context: AttemptContext) -> float:
        if self.backoff is None:
            return 0.0
        return self.backoff.delay_for(context.attempt_count)

    def _summarize_failure(self, context: AttemptContext) -> RetryMetadata:
        """Build the summary of a loop that gave up."""
        disposition = decide_disposition(
            AttemptSnapshot(
                attempt_count=context.attempt_count,
                max_attempts=self.policy.max_attempts,
                can_retry=False,
            )
        )
        metadata = RetryMetadata(
            total_attempts=context.attempt_count,
            max_attempts=self.policy.max_attempts,
            disposition=disposition,
            error_types=list(context.error_history),
            total_latency_ms=context.elapsed_ms,
        )

        logger.debug(
            "Retry loop gave up",
            extra={
                "disposition": disposition.value,
                "total_attempts": metadata.total_attempts,
                "error_types": metadata.error_types,
            },
        )
        return metadata


def build_retry_executor(settings: Settings) -> RetryExecutor:
    """
    Build a RetryExecutor from settings.

    Fails fast on misconfigured classification lists so a bad type name
    stops startup instead of surfacing mid-request.

    Raises:
        TypeResolutionError: A configured name does not resolve
        InvalidClassificationError: A configured name is not an exception type
    """
    registry = TypeRegistry.with_builtins(allow_import=settings.RETRY_ALLOW_IMPORT)
    classification = build_classification_table(
        settings.RETRY_RETRYABLE_EXCEPTIONS,
        settings.RETRY_NON_RETRYABLE_EXCEPTIONS,
        registry,
    )
    policy = RetryLimitPolicy(settings.RETRY_MAX_ATTEMPTS, classification)
    backoff = ExponentialBackOff(
        initial_interval_ms=settings.RETRY_INITIAL_INTERVAL_MS,
        multiplier=settings.RETRY_MULTIPLIER,
        max_interval_ms=settings.RETRY_MAX_INTERVAL_MS,
    )

    logger.debug(
        "RetryExecutor initialized",
        extra={
            "max_attempts": settings.RETRY_MAX_ATTEMPTS,
            "initial_interval_ms": settings.RETRY_INITIAL_INTERVAL_MS,
            "multiplier": settings.RETRY_MULTIPLIER,
            "max_interval_ms": settings.RETRY_MAX_INTERVAL_MS,
            "classified_types": len(classification),
        },
    )

    return RetryExecutor(policy, backoff)
