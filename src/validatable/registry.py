"""Rule registry for validatable types.

Maps each validated type to its ordered field -> rules metadata. The map is
built on first request for a type, published once, and never changed
afterwards.

Rules are declared in two ways, combined along the MRO (base classes first):
- A ``validation_rules`` class attribute mapping field names to definitions
- Explicit ``RuleRegistry.declare(cls, table)`` calls, e.g. from YAML tables
"""

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from validatable.exceptions import FieldNotRegisteredError, RuleConfigurationError
from validatable.handlers import HandlerRegistry
from validatable.rules import ValidationRule, create_rule
from validatable.types import FieldDescriptor, RuleDefinition

logger = logging.getLogger(__name__)

RULES_ATTR = "validation_rules"

RuleTable = Mapping[str, Iterable[RuleDefinition]]


class FieldRules:
    """A field and the rules declared on it, in declaration order."""

    __slots__ = ("field", "rules")

    def __init__(self, field: FieldDescriptor, rules: tuple[ValidationRule, ...]):
        self.field = field
        self.rules = rules

    def __repr__(self) -> str:
        return f"FieldRules({self.field.name!r}, {len(self.rules)} rule(s))"


class TypeRules:
    """Published, read-only rule metadata for one type."""

    def __init__(self, owner_type: type, fields: Iterable[FieldRules]):
        self.owner_type = owner_type
        self._fields = MappingProxyType({entry.field.name: entry for entry in fields})

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def get(self, name: str) -> FieldRules:
        """Get a field's rules.

        Raises:
            FieldNotRegisteredError: If the type declares no rules for the field
        """
        if name not in self._fields:
            raise FieldNotRegisteredError(name, self.owner_type)
        return self._fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldRules]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)


class RuleRegistry:
    """Process-wide cache of rule metadata per type.

    Construction is safe under concurrent first use: two threads may both
    build a new type's metadata, but only the first published result is kept
    and every caller receives that one.

    Example:
        type_rules = RuleRegistry.get_or_build(User)
        for entry in type_rules:
            print(entry.field.name, entry.rules)
    """

    _declarations: dict[type, list[tuple[str, tuple[RuleDefinition, ...]]]] = {}
    _cache: dict[type, TypeRules] = {}
    _generation = 0  # Bumped by every declare()
    _lock = threading.Lock()

    @classmethod
    def declare(cls, owner_type: type, table: RuleTable) -> None:
        """Declare rules for a type's fields.

        Rules are appended after any rules already declared for a field.

        Raises:
            RuleConfigurationError: If metadata is already published for the
                type or for any subclass that inherits its rules
        """
        with cls._lock:
            published = next(
                (t for t in cls._cache if owner_type in t.__mro__), None
            )
            if published is not None:
                via = "" if published is owner_type else f" (inherited by {published.__qualname__})"
                raise RuleConfigurationError(
                    f"Rules for {owner_type.__qualname__} are already published{via} "
                    "and can no longer be changed."
                )
            entries = cls._declarations.setdefault(owner_type, [])
            for field_name, definitions in table.items():
                entries.append((field_name, tuple(definitions)))
            cls._generation += 1

    @classmethod
    def get_or_build(cls, owner_type: type) -> TypeRules:
        """Get the type's rule metadata, building and publishing it on first use.

        A build that overlaps a declare() is discarded and repeated, so no
        accepted declaration is missing from published metadata.
        """
        cached = cls._cache.get(owner_type)
        if cached is not None:
            return cached

        while True:
            generation = cls._generation
            built = cls._build(owner_type)
            with cls._lock:
                if owner_type in cls._cache or cls._generation == generation:
                    published = cls._cache.setdefault(owner_type, built)
                    break
            logger.debug(
                "Rules declared while building %s, rebuilding", owner_type.__qualname__
            )

        if published is not built:
            logger.debug(
                "Discarded concurrently built rules for %s", owner_type.__qualname__
            )
        return published

    @classmethod
    def is_built(cls, owner_type: type) -> bool:
        """Check if a type's metadata has been published."""
        return owner_type in cls._cache

    @classmethod
    def list_built(cls) -> list[str]:
        """List the names of all types with published metadata."""
        return sorted(t.__qualname__ for t in cls._cache)

    @classmethod
    def clear(cls) -> None:
        """Clear all declarations and published metadata. Primarily for testing."""
        with cls._lock:
            cls._declarations.clear()
            cls._cache.clear()

    @classmethod
    def _collect(cls, owner_type: type) -> dict[str, list[RuleDefinition]]:
        """Gather declarations along the MRO, keeping first-declared field order."""
        with cls._lock:
            declarations = {
                klass: list(cls._declarations.get(klass, ())) for klass in owner_type.__mro__
            }

        collected: dict[str, list[RuleDefinition]] = {}
        for klass in reversed(owner_type.__mro__):
            table = vars(klass).get(RULES_ATTR)
            if table:
                for field_name, definitions in table.items():
                    collected.setdefault(field_name, []).extend(definitions)
            for field_name, definitions in declarations[klass]:
                collected.setdefault(field_name, []).extend(definitions)
        return collected

    @classmethod
    def _build(cls, owner_type: type) -> TypeRules:
        fields: list[FieldRules] = []

        for field_name, definitions in cls._collect(owner_type).items():
            missing = next((d for d in definitions if d.severity is None), None)
            if missing is not None:
                raise RuleConfigurationError(
                    f"Validation rule {missing.kind.value} does not have a severity "
                    f"assigned to it for {owner_type.__qualname__}.{field_name}."
                )
            fields.append(
                FieldRules(
                    field=FieldDescriptor(name=field_name, owner_type=owner_type),
                    rules=tuple(create_rule(d) for d in definitions),
                )
            )

        # Resolve custom handlers once, alongside the rules that use them
        HandlerRegistry.table_for(owner_type)

        logger.debug(
            "Built validation rules for %s (%d field(s))", owner_type.__qualname__, len(fields)
        )
        return TypeRules(owner_type, fields)
