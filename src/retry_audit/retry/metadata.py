"""
Retry metadata tracking.

This module defines the RetryMetadata dataclass that summarizes a finished
retry loop for audit trails.
"""

from dataclasses import dataclass, field

from retry_audit.retry.narrator import Disposition


@dataclass(frozen=True)
class RetryMetadata:
    """
    Summary of one finished retry loop.

    Attributes:
        total_attempts: Number of attempts made
        max_attempts: Configured attempt limit
        disposition: Final outcome (never RETRYING)
        error_types: Type names of the errors raised, in attempt order
        total_latency_ms: Time from loop start to termination (ms)
    """

    total_attempts: int
    max_attempts: int
    disposition: Disposition
    error_types: list[str] = field(default_factory=list)
    total_latency_ms: int = 0

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")

        if self.total_attempts > self.max_attempts:
            raise ValueError("total_attempts must not exceed max_attempts")

        if self.disposition is Disposition.RETRYING:
            raise ValueError("disposition of a finished loop cannot be RETRYING")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")
