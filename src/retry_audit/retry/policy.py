"""
Retry limit policy and backoff.

RetryLimitPolicy answers "may the loop try again?" from two inputs: how
the last error is classified and how many attempts have been made.
ExponentialBackOff answers "how long to wait before the next attempt?".
"""

from collections.abc import Mapping

from retry_audit.retry.classifier import ClassificationTable
from retry_audit.retry.context import AttemptContext


class RetryLimitPolicy:
    """
    Max-attempts policy backed by an exception classification table.

    Lookup walks the error's MRO, so an error inherits the classification
    of its nearest classified ancestor. Errors with no classified ancestor
    are not retryable.

    Attributes:
        max_attempts: Maximum number of attempts per loop (>= 1)
        classification: Read-only exception type -> retryable mapping
    """

    def __init__(self, max_attempts: int, classification: ClassificationTable | None = None):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.classification: Mapping[type[BaseException], bool] = (
            classification if classification is not None else {}
        )

    def classify(self, error: BaseException) -> bool:
        """Return True if the error is classified retryable."""
        for cls in type(error).__mro__:
            if cls in self.classification:
                return self.classification[cls]
        return False

    def can_retry(self, context: AttemptContext) -> bool:
        """
        Decide whether the loop may attempt again.

        True before any error, otherwise only when the last error is
        retryable and the attempt limit has not been reached.
        """
        if context.last_error is None:
            return context.attempt_count < self.max_attempts
        return (
            self.classify(context.last_error)
            and context.attempt_count < self.max_attempts
        )


class ExponentialBackOff:
    """
    Exponential backoff between attempts.

    The wait after attempt ``n`` is ``initial * multiplier ** (n - 1)``
    milliseconds, capped at ``max_interval_ms``.

    Attributes:
        initial_interval_ms: Wait after the first failed attempt
        multiplier: Growth factor per attempt (>= 1)
        max_interval_ms: Upper bound for any single wait
    """

    def __init__(
        self,
        initial_interval_ms: int = 100,
        multiplier: float = 2.0,
        max_interval_ms: int = 10000,
    ):
        if initial_interval_ms < 0:
            raise ValueError("initial_interval_ms must be >= 0")
        if multiplier < 1:
            raise ValueError("multiplier must be >= 1")
        if max_interval_ms < initial_interval_ms:
            raise ValueError("max_interval_ms must be >= initial_interval_ms")

        self.initial_interval_ms = initial_interval_ms
        self.multiplier = multiplier
        self.max_interval_ms = max_interval_ms

    def delay_for(self, attempt_count: int) -> float:
        """
        Seconds to wait after failed attempt ``attempt_count`` (1-based).

        Growth stops as soon as the cap is reached, so arbitrarily large
        attempt counts never overflow.
        """
        interval_ms = self.initial_interval_ms
        if interval_ms > 0 and self.multiplier > 1:
            for _ in range(max(attempt_count - 1, 0)):
                if interval_ms >= self.max_interval_ms:
                    break
                interval_ms *= self.multiplier
        return min(interval_ms, self.max_interval_ms) / 1000
