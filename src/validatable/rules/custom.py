"""Custom handler rule."""

from typing import Any

from validatable.handlers import invoke_handler
from validatable.rules.base import ValidationRule
from validatable.types import FieldDescriptor, RuleDefinition, ValidationMessage


class CustomHandlerRule(ValidationRule):
    """Delegates the verdict to a handler method on the validated instance.

    The rule's failure message is offered to the handler as the candidate;
    the handler returns it, a replacement, or None to pass.

    Declaration:
        RuleDefinition.of(
            "custom_handler",
            "Email address is not properly formatted.",
            delegate="ValidateEmailFormat",
        )
    """

    def __init__(self, definition: RuleDefinition):
        super().__init__(definition)
        self.delegate: str | None = definition.param("delegate")

    def validate(self, field: FieldDescriptor, instance: Any) -> ValidationMessage | None:
        # Interception does not apply: the handler already owns the verdict
        if not self.can_validate(instance):
            return None
        return self.evaluate(field, instance)

    def evaluate(self, field: FieldDescriptor, instance: Any) -> ValidationMessage | None:
        candidate = self.failure_message()
        if not self.delegate:
            return candidate
        return invoke_handler(self.delegate, instance, candidate, field)
