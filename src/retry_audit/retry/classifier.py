"""
Exception classification table builder.

Turns two ordered lists of exception type names (retryable, non-retryable)
into a read-only mapping from exception type to a "retryable" flag. The
retry limit policy does point lookups against this table to decide whether
another attempt is allowed.

Non-retryable names are applied after retryable ones, so a type listed in
both ends up non-retryable.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

import structlog

from retry_audit.retry.exceptions import InvalidClassificationError
from retry_audit.retry.registry import TypeRegistry, TypeResolver

logger = structlog.get_logger(__name__)

ClassificationTable = Mapping[type[BaseException], bool]


class ExceptionClassifier:
    """
    Builds classification tables from configured type names.

    Stateless apart from the resolver it was given, so one classifier can
    build any number of tables.

    Attributes:
        resolver: Name-to-type resolver (defaults to a builtin-aware TypeRegistry)
    """

    def __init__(self, resolver: TypeResolver | None = None):
        self.resolver = resolver if resolver is not None else TypeRegistry.with_builtins()

    def build(
        self,
        retryable_names: Iterable[str] | None,
        non_retryable_names: Iterable[str] | None,
    ) -> ClassificationTable:
        """
        Build the classification table.

        Args:
            retryable_names: Exception type names that may be retried (None = empty)
            non_retryable_names: Exception type names that must not be retried (None = empty)

        Returns:
            Read-only mapping of exception type to retryable flag

        Raises:
            TypeResolutionError: A name does not resolve to any type
            InvalidClassificationError: A name resolves to something that is not an exception type
        """
        table: dict[type[BaseException], bool] = {}

        for cls in self._exception_types(retryable_names):
            table[cls] = True
        for cls in self._exception_types(non_retryable_names):
            table[cls] = False

        logger.debug(
            "Classification table built",
            retryable=sorted(c.__name__ for c, flag in table.items() if flag),
            non_retryable=sorted(c.__name__ for c, flag in table.items() if not flag),
        )
        return MappingProxyType(table)

    def _exception_types(
        self, names: Iterable[str] | None
    ) -> list[type[BaseException]]:
        """Resolve names in order, checking each is an exception type."""
        types: list[type[BaseException]] = []
        for name in names or ():
            obj = self.resolver.resolve(name)
            if not (isinstance(obj, type) and issubclass(obj, BaseException)):
                raise InvalidClassificationError(name.strip())
            types.append(obj)
        return types


def build_classification_table(
    retryable_names: Iterable[str] | None,
    non_retryable_names: Iterable[str] | None,
    resolver: TypeResolver | None = None,
) -> ClassificationTable:
    """Shortcut for ``ExceptionClassifier(resolver).build(...)``."""
    return ExceptionClassifier(resolver).build(retryable_names, non_retryable_names)
