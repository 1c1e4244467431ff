"""String length rules.

Both rules read a bound from the declaration, optionally replaced per call by
a comparison path: a string there contributes its length, a number its value.
A None field value is treated as the empty string.
"""

from typing import Any

from validatable.exceptions import RuleConfigurationError
from validatable.paths import FieldPath, compile_path
from validatable.rules.base import ValidationRule
from validatable.rules.numeric import NumberWidth
from validatable.types import FieldDescriptor, RuleDefinition, ValidationMessage


class StringLengthRule(ValidationRule):
    """Base class for string length comparisons."""

    bound_param = "bound"

    def __init__(self, definition: RuleDefinition):
        super().__init__(definition)
        raw_bound = definition.param(self.bound_param, 0)
        bound = NumberWidth.INTEGER.coerce(raw_bound)
        if bound is None:
            raise RuleConfigurationError(
                f"String length rule '{self.bound_param}' must be an integer, got {raw_bound!r}"
            )
        self.bound: int = bound
        path = definition.param("path")
        self.path: FieldPath | None = compile_path(path) if path else None

    def resolve_bound(self, instance: Any) -> int:
        """Return the bound for this call without changing the configured one."""
        if self.path is None:
            return self.bound

        comparison = self.path.resolve(instance)
        if isinstance(comparison, str):
            return len(comparison)
        # Only whole numbers replace the bound; 9.9 is not a length
        bound = NumberWidth.INTEGER.coerce(comparison)
        return self.bound if bound is None else bound


class StringLengthGreaterThanRule(StringLengthRule):
    """Fails when the string is shorter than the bound, or empty.

    Declaration:
        RuleDefinition.of(
            "string_length_greater_than",
            "Password must be greater than 6 characters.",
            min=6,
        )

    Params:
        min: Minimum length
        path: Optional comparison path replacing the minimum
    """

    bound_param = "min"

    def evaluate(self, field: FieldDescriptor, instance: Any) -> ValidationMessage | None:
        value = field.get(instance)
        if value is None:
            value = ""
        if not isinstance(value, str):
            return self.failure_message()

        minimum = self.resolve_bound(instance)
        if len(value) < minimum or len(value) == 0:
            return self.failure_message()
        return None


class StringLengthLessThanRule(StringLengthRule):
    """Fails when the string is longer than the bound.

    Params:
        max: Maximum length
        path: Optional comparison path replacing the maximum
    """

    bound_param = "max"

    def evaluate(self, field: FieldDescriptor, instance: Any) -> ValidationMessage | None:
        value = field.get(instance)
        if value is None:
            value = ""
        if not isinstance(value, str):
            return None

        return self.failure_message() if len(value) > self.resolve_bound(instance) else None
