"""Value presence rule."""

from collections.abc import Sized
from typing import Any

from validatable.rules.base import ValidationRule
from validatable.types import FieldDescriptor, ValidationMessage


class ValuePresentRule(ValidationRule):
    """Fails when the field is None, a blank string or an empty collection.

    Declaration:
        RuleDefinition.of("value_present", "E-Mail can not be left blank.")
    """

    def evaluate(self, field: FieldDescriptor, instance: Any) -> ValidationMessage | None:
        value = field.get(instance)
        return self.failure_message() if self._is_empty(value) else None

    def _is_empty(self, value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, str):
            return value.strip() == ""
        if isinstance(value, Sized):
            return len(value) == 0
        return False
