"""Validation rule base class.

Every rule variant shares the same lifecycle:
1. Guard: skip the rule when its validate_if path is not "valid"
2. Evaluate: the variant's own check, producing a message or None
3. Intercept: an optional handler may override the raw verdict
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from validatable.handlers import invoke_handler
from validatable.localization import localize
from validatable.paths import FieldPath, compile_path
from validatable.types import (
    FieldDescriptor,
    RuleDefinition,
    Severity,
    ValidationMessage,
)


class ValidationRule(ABC):
    """Base class for validation rules.

    A rule object is built once per validated type from its RuleDefinition
    and shared by every instance of that type.
    """

    def __init__(self, definition: RuleDefinition):
        self.definition = definition
        self.guard: FieldPath | None = (
            compile_path(definition.validate_if) if definition.validate_if else None
        )

    @property
    def severity(self) -> Severity:
        return self.definition.severity or Severity.ERROR

    def validate(self, field: FieldDescriptor, instance: Any) -> ValidationMessage | None:
        """Validate one field of an instance.

        Args:
            field: The field being validated
            instance: The object that owns the field

        Returns:
            A message if validation failed, None on success or when skipped
        """
        if not self.can_validate(instance):
            return None

        result = self.evaluate(field, instance)
        return self.intercept(field, instance, result)

    @abstractmethod
    def evaluate(self, field: FieldDescriptor, instance: Any) -> ValidationMessage | None:
        """Run the variant's check. Override in subclasses."""
        raise NotImplementedError("Subclasses must implement evaluate()")

    def can_validate(self, instance: Any) -> bool:
        """Decide whether the guard allows this rule to run.

        Booleans are used as-is, strings are valid when non-blank, numbers
        when greater than zero, None is never valid and any other object is.
        A "!" prefix on the guard path inverts the outcome.
        """
        if self.guard is None:
            return True

        value = self.guard.resolve(instance)
        if isinstance(value, bool):
            result = value
        elif isinstance(value, str):
            result = bool(value.strip())
        elif isinstance(value, (int, float, Decimal)):
            result = self._guard_number_is_positive(instance)
        elif value is None:
            result = False
        else:
            result = True

        return not result if self.guard.negated else result

    def _guard_number_is_positive(self, instance: Any) -> bool:
        # Imported here: numeric rules subclass this module's base class
        from validatable.rules.numeric import NumberGreaterThanRule

        owner, guard_field = self.guard.resolve_descriptor(instance)
        check = NumberGreaterThanRule(
            RuleDefinition.of(
                "number_greater_than",
                self.definition.message,
                self.severity,
                bound=0,
            )
        )
        return check.validate(guard_field, owner) is None

    def intercept(
        self,
        field: FieldDescriptor,
        instance: Any,
        result: ValidationMessage | None,
    ) -> ValidationMessage | None:
        """Let the interception handler, if any, override the raw result."""
        if not self.definition.intercept:
            return result
        return invoke_handler(self.definition.intercept, instance, result, field)

    def failure_message(self) -> ValidationMessage:
        """Synthesize this rule's failure message, localized when possible."""
        text = localize(self.definition.localization_key, self.definition.message)
        return self.severity.create(text)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.definition.message!r})"
