"""
Retry subsystem exceptions.

Two families live here:

- Classification errors, raised while building the classification table
  from configuration. They are fatal at startup: a bad type name is a
  deployment defect, not a runtime condition to retry around.
- RetryExhausted, raised by the executor when a loop gives up and the
  caller supplied no fallback.

Errors raised by the wrapped operation are never part of this taxonomy;
they are classified and narrated, and only ever surface as the cause of
RetryExhausted.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from retry_audit.retry.metadata import RetryMetadata


class ClassificationError(ValueError):
    """
    Base exception for invalid exception classification configuration.

    Attributes:
        type_name: The configured name that could not be classified
    """

    def __init__(self, type_name: str, message: str):
        super().__init__(message)
        self.type_name = type_name
        self.message = message


class TypeResolutionError(ClassificationError):
    """Raised when a configured name does not resolve to any known type."""

    def __init__(self, type_name: str, reason: str | None = None):
        message = f"Cannot resolve exception type {type_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(type_name, message)


class InvalidClassificationError(ClassificationError):
    """Raised when a configured name resolves to something that is not an exception type."""

    def __init__(self, type_name: str):
        super().__init__(
            type_name, f"Class {type_name} is not a subclass of BaseException"
        )


class RetryExhausted(Exception):
    """
    Raised when a retry loop terminates without success and no fallback is set.

    The original operation error is chained as ``__cause__``.

    Attributes:
        retry_metadata: Summary of the finished loop
        last_error: Error raised by the final attempt
    """

    def __init__(
        self,
        retry_metadata: "RetryMetadata",
        last_error: BaseException,
    ) -> None:
        self.retry_metadata = retry_metadata
        self.last_error = last_error

        super().__init__(
            f"Retry loop gave up after {retry_metadata.total_attempts} of "
            f"{retry_metadata.max_attempts} attempts "
            f"({retry_metadata.disposition.value}). "
            f"Final error: {type(last_error).__name__}"
        )
