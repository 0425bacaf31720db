"""
Name-to-type resolution for exception classification.

Configuration names exception types as strings. The TypeRegistry turns
those strings back into classes:

1. **Registry lookup**: every builtin exception is registered under its
   bare name ("ValueError") and its qualified name ("builtins.ValueError").
   Applications register their own exception types the same way.
2. **Import fallback**: names missing from the registry are imported as
   ``package.module.QualName``. The fallback can be switched off to get a
   closed registry where only registered names resolve.

Resolution never checks what kind of object it found; deciding whether the
result is an exception type is the classifier's job.
"""

import builtins
import importlib
from typing import Protocol

import structlog

from retry_audit.retry.exceptions import TypeResolutionError

logger = structlog.get_logger(__name__)


class TypeResolver(Protocol):
    """Anything that can turn a configured type name into an object."""

    def resolve(self, name: str) -> object:
        """
        Resolve a configured name.

        Raises:
            TypeResolutionError: If the name does not resolve
        """
        ...


def qualified_name(cls: type) -> str:
    """Return ``module.QualName`` for a class."""
    return f"{cls.__module__}.{cls.__qualname__}"


def import_object(name: str) -> object:
    """
    Import an object from a dotted path.

    The longest importable module prefix wins; the remainder is walked as
    attributes, so nested classes ("pkg.mod.Outer.Inner") resolve. A bare
    name is looked up in builtins.

    Raises:
        TypeResolutionError: If the name has an empty segment, no prefix
            imports, importing a module fails or an attribute is missing
    """
    parts = name.split(".")
    if not all(parts):
        raise TypeResolutionError(name, "empty segment in dotted name")

    if len(parts) == 1:
        if hasattr(builtins, name):
            return getattr(builtins, name)
        raise TypeResolutionError(name, "no such builtin")

    for split in range(len(parts) - 1, 0, -1):
        module_path = ".".join(parts[:split])
        try:
            obj: object = importlib.import_module(module_path)
        except ImportError:
            continue
        except Exception as e:
            raise TypeResolutionError(
                name, f"importing {module_path} failed: {e}"
            ) from e

        for attr in parts[split:]:
            if not hasattr(obj, attr):
                raise TypeResolutionError(
                    name, f"module {module_path} has no attribute {attr}"
                )
            obj = getattr(obj, attr)
        return obj

    raise TypeResolutionError(name, "no importable module prefix")


class TypeRegistry:
    """
    Registry of exception types addressable by name.

    Attributes:
        allow_import: Fall back to importing names missing from the registry
    """

    def __init__(self, allow_import: bool = True):
        self.allow_import = allow_import
        self._types: dict[str, type] = {}

    @classmethod
    def with_builtins(cls, allow_import: bool = True) -> "TypeRegistry":
        """Create a registry pre-populated with every builtin exception class."""
        registry = cls(allow_import=allow_import)
        for name, obj in vars(builtins).items():
            if isinstance(obj, type) and issubclass(obj, BaseException):
                registry.register(obj, name)
                registry.register(obj, f"builtins.{name}")
        return registry

    def register(self, cls: type, name: str | None = None) -> None:
        """Register a type under ``name`` (defaults to its qualified name)."""
        self._types[name or qualified_name(cls)] = cls

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def resolve(self, name: str) -> object:
        """
        Resolve a configured type name.

        Raises:
            TypeResolutionError: If the name is neither registered nor importable
        """
        name = name.strip()
        if not name:
            raise TypeResolutionError(name, "empty type name")

        if name in self._types:
            return self._types[name]

        if not self.allow_import:
            raise TypeResolutionError(name, "not registered")

        obj = import_object(name)
        logger.debug("Resolved type by import", type_name=name)
        return obj
