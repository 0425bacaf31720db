"""
Retry event narration.

The RetryEventNarrator is a retry listener that turns every failed attempt
and every late success into an auditable log narrative:

- **Every failed attempt**: one warning, "Attempt: n of max. Exception caught: ..."
- **Loop gives up**: one info line naming the disposition
    * Non-retryable error on the first attempt
    * Retry limit reached
    * Retry chain interrupted by a non-retryable error
- **Success after at least one failure**: one info line, "Attempt: n of max. Success!"

A first-try success is not noteworthy and produces no output.

Which disposition applies is decided by decide_disposition(), a pure
function over an AttemptSnapshot, so the branching can be tested without
running a retry loop.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import structlog

from retry_audit.retry.context import AttemptContext
from retry_audit.retry.policy import RetryLimitPolicy
from retry_audit.retry.registry import qualified_name

logger = structlog.get_logger(__name__)


class Disposition(str, Enum):
    """
    Outcome of a retry loop at a given attempt.

    RETRYING is transient (the loop will attempt again); the others are final.
    """

    RETRYING = "retrying"
    NON_RETRYABLE = "non_retryable"
    LIMIT_REACHED = "limit_reached"
    INTERRUPTED = "interrupted"
    SUCCESS = "success"


DISPOSITION_MESSAGES: dict[Disposition, str] = {
    Disposition.NON_RETRYABLE: "Non-retryable exception caught. Will invoke fallback method.",
    Disposition.LIMIT_REACHED: "Retry limit reached. Will invoke fallback method.",
    Disposition.INTERRUPTED: (
        "Retry chain interrupted by non-retryable exception. Will invoke fallback method."
    ),
}


@dataclass(frozen=True)
class AttemptSnapshot:
    """
    Everything the narrator needs to know about a failed attempt.

    Attributes:
        attempt_count: Ordinal of the failed attempt (1-based)
        max_attempts: Configured attempt limit
        can_retry: Whether the policy allows another attempt
    """

    attempt_count: int
    max_attempts: int
    can_retry: bool

    @classmethod
    def from_context(
        cls, context: AttemptContext, policy: RetryLimitPolicy
    ) -> "AttemptSnapshot":
        return cls(
            attempt_count=context.attempt_count,
            max_attempts=policy.max_attempts,
            can_retry=policy.can_retry(context),
        )


def decide_disposition(snapshot: AttemptSnapshot) -> Disposition:
    """
    Classify a failed attempt. First match wins:

    1. Policy allows another attempt -> RETRYING
    2. First attempt -> NON_RETRYABLE (the loop never had a second chance)
    3. Last allowed attempt -> LIMIT_REACHED, even if the error itself is
       non-retryable
    4. Anything else -> INTERRUPTED (non-retryable error before exhaustion)
    """
    if snapshot.can_retry:
        return Disposition.RETRYING
    if snapshot.attempt_count == 1:
        return Disposition.NON_RETRYABLE
    if snapshot.attempt_count == snapshot.max_attempts:
        return Disposition.LIMIT_REACHED
    return Disposition.INTERRUPTED


def describe_error(error: BaseException) -> str:
    """
    Render an error as "Type: message".

    Builtin types are shown unqualified, others as module.QualName. Falls
    back to the type name alone when the message is empty or unprintable.
    """
    cls = type(error)
    type_name = cls.__qualname__ if cls.__module__ == "builtins" else qualified_name(cls)
    try:
        message = str(error)
    except Exception:
        return type_name
    return f"{type_name}: {message}" if message else type_name


class RetryListener(Protocol):
    """
    Observer of retry loop events.

    The executor calls on_failure right after catching each attempt's error
    (before deciding retry vs. fallback) and on_success right after an
    attempt returns.
    """

    def on_failure(self, context: AttemptContext) -> None:
        ...

    def on_success(self, context: AttemptContext) -> None:
        ...


class RetryEventNarrator:
    """
    Retry listener that logs the attempt-by-attempt narrative of a loop.

    Holds no per-loop state: everything is read from the AttemptContext and
    the policy, so one narrator can serve concurrent loops.

    Attributes:
        policy: Retry limit policy the narrator reads but does not own
    """

    def __init__(self, policy: RetryLimitPolicy):
        self.policy = policy

    def on_failure(self, context: AttemptContext) -> None:
        """Log the failed attempt and, if the loop gives up, its disposition."""
        snapshot = AttemptSnapshot.from_context(context, self.policy)
        disposition = decide_disposition(snapshot)
        last_error = context.last_error
        error = describe_error(last_error) if last_error is not None else "None"
        error_type = type(last_error).__name__ if last_error is not None else None

        # A first-attempt non-retryable failure could never exceed one attempt
        effective_max = (
            1 if disposition is Disposition.NON_RETRYABLE else snapshot.max_attempts
        )

        logger.warning(
            f"Attempt: {snapshot.attempt_count} of {effective_max}. Exception caught: {error}",
            attempt=snapshot.attempt_count,
            max_attempts=effective_max,
            error_type=error_type,
            disposition=disposition.value,
        )

        if disposition is Disposition.RETRYING:
            return

        logger.info(
            f"{DISPOSITION_MESSAGES[disposition]} Exception caught: {error}",
            attempt=snapshot.attempt_count,
            max_attempts=snapshot.max_attempts,
            error_type=error_type,
            disposition=disposition.value,
        )

    def on_success(self, context: AttemptContext) -> None:
        """Log a success that needed more than one attempt."""
        if context.attempt_count <= 1:
            return

        logger.info(
            f"Attempt: {context.attempt_count} of {self.policy.max_attempts}. Success!",
            attempt=context.attempt_count,
            max_attempts=self.policy.max_attempts,
            disposition=Disposition.SUCCESS.value,
        )
