"""Custom handler delegates for validatable types.

A handler is an instance method that receives a rule's candidate failure
message and may return it, replace it, or return None to force success.
Handlers are tagged with the @validation_handler decorator or registered
explicitly, and each type's name -> function table is resolved once.

Example:
    class User(Validatable):
        @validation_handler("ValidateEmailFormat")
        def _check_email(self, candidate, field):
            return None if "@" in self.email else candidate
"""

import logging
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from validatable.exceptions import HandlerNotFoundError, RuleConfigurationError
from validatable.types import FieldDescriptor, ValidationMessage

logger = logging.getLogger(__name__)

# Handler signature: (instance, candidate, field) -> ValidationMessage | None
HandlerFn = Callable[[Any, ValidationMessage | None, FieldDescriptor], Any]

HANDLER_NAMES_ATTR = "__validation_handlers__"


def validation_handler(name: str) -> Callable[[HandlerFn], HandlerFn]:
    """Decorator to tag a method as the named validation handler.

    May be stacked to expose one method under several names.
    """

    def decorator(fn: HandlerFn) -> HandlerFn:
        names = getattr(fn, HANDLER_NAMES_ATTR, ())
        setattr(fn, HANDLER_NAMES_ATTR, names + (name,))
        return fn

    return decorator


class HandlerRegistry:
    """Per-type tables of validation handlers.

    Tables are built on first use from tagged methods along the type's MRO
    (subclasses override base handlers of the same name) plus any explicit
    registrations, then cached for the life of the process.
    """

    _explicit: dict[type, dict[str, HandlerFn]] = {}
    _tables: dict[type, Mapping[str, HandlerFn]] = {}
    _generation = 0  # Bumped by every register()
    _lock = threading.Lock()

    @classmethod
    def register(cls, owner_type: type, name: str, handler_fn: HandlerFn) -> None:
        """Register a handler function for a type by name.

        Must happen before the table of the type, or of any subclass, is
        first resolved.

        Raises:
            RuleConfigurationError: If such a table is already resolved
        """
        with cls._lock:
            resolved = next((t for t in cls._tables if owner_type in t.__mro__), None)
            if resolved is not None:
                raise RuleConfigurationError(
                    f"Cannot register '{name}' for {owner_type.__qualname__}: validation "
                    f"handlers for {resolved.__qualname__} are already resolved."
                )
            cls._explicit.setdefault(owner_type, {})[name] = handler_fn
            cls._generation += 1

    @classmethod
    def table_for(cls, owner_type: type) -> Mapping[str, HandlerFn]:
        """Get (building on first use) the handler table for a type."""
        table = cls._tables.get(owner_type)
        if table is not None:
            return table

        while True:
            generation = cls._generation
            built = MappingProxyType(cls._build(owner_type))
            with cls._lock:
                if owner_type in cls._tables or cls._generation == generation:
                    return cls._tables.setdefault(owner_type, built)

    @classmethod
    def get(cls, owner_type: type, name: str) -> HandlerFn:
        """Get a handler by name.

        Raises:
            HandlerNotFoundError: If the type defines no such handler
        """
        table = cls.table_for(owner_type)
        if name not in table:
            raise HandlerNotFoundError(name, owner_type)
        return table[name]

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations and cached tables. Primarily for testing."""
        with cls._lock:
            cls._explicit.clear()
            cls._tables.clear()

    @classmethod
    def _build(cls, owner_type: type) -> dict[str, HandlerFn]:
        table: dict[str, HandlerFn] = {}
        for klass in reversed(owner_type.__mro__):
            for member in vars(klass).values():
                if not callable(member):
                    continue
                for name in getattr(member, HANDLER_NAMES_ATTR, ()):
                    table[name] = member
            table.update(cls._explicit.get(klass, {}))
        logger.debug("Resolved %d validation handler(s) for %s", len(table), owner_type.__qualname__)
        return table


def invoke_handler(
    name: str,
    instance: Any,
    candidate: ValidationMessage | None,
    field: FieldDescriptor,
) -> ValidationMessage | None:
    """Run the named handler and return its verdict.

    None means success. A returned message becomes the result. Any other
    return value keeps the candidate.
    """
    handler_fn = HandlerRegistry.get(type(instance), name)
    result = handler_fn(instance, candidate, field)
    if result is None:
        return None
    if isinstance(result, ValidationMessage):
        return result
    return candidate
