"""
Per-loop attempt state.

An AttemptContext is created by the executor for every retry loop and
discarded when the loop ends. Listeners and policies read it; only the
executor writes to it.
"""

import time
from dataclasses import dataclass, field


@dataclass
class AttemptContext:
    """
    Mutable state of one retry loop invocation.

    Attributes:
        attempt_count: Ordinal of the current attempt (1-based, 0 before the first)
        last_error: Error raised by the most recent attempt (None until one fails)
        error_history: Type names of every error seen so far, in order
        started_at: Monotonic timestamp of loop creation (seconds)
    """

    attempt_count: int = 0
    last_error: BaseException | None = None
    error_history: list[str] = field(default_factory=list)
    started_at: float = field(default_factory=time.monotonic)

    def begin_attempt(self) -> int:
        """Advance to the next attempt and return its ordinal."""
        self.attempt_count += 1
        return self.attempt_count

    def record_failure(self, error: BaseException) -> None:
        """Record the error raised by the current attempt."""
        self.last_error = error
        self.error_history.append(type(error).__name__)

    @property
    def elapsed_ms(self) -> int:
        """Milliseconds since the loop started."""
        return int((time.monotonic() - self.started_at) * 1000)
