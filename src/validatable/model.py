"""Validatable base class.

Subclasses declare rules per field and get the instance-facing validation
API: message management, declared-rule validation and change notification.

Example:
    class User(Validatable):
        validation_rules = {
            "email": [RuleDefinition.of("value_present", "E-Mail can not be left blank.")],
            "age": [RuleDefinition.of("number_in_range", "Age is out of range", min=18, max=65)],
        }

        def __init__(self, email: str = "", age: int = 0):
            self.email = email
            self.age = age

    user = User(age=10)
    user.on_validation_changed(lambda event: print(event.field, event.messages))
    user.validate_all()
"""

from collections.abc import Callable
from typing import Any, ClassVar

from validatable.events import ValidationChangedHandler
from validatable.orchestrator import ValidationOrchestrator
from validatable.registry import RuleRegistry, RuleTable
from validatable.rules import ValidationRule
from validatable.state import MessageKind, ValidationState
from validatable.types import ValidationMessage


class Validatable:
    """Base class for objects that validate their own fields.

    The validation state is created with the instance and mirrors every
    field the registry knows for the type, so observers can query any of
    them before the first validation pass. It works with plain classes and
    dataclasses alike, since it is set up in __new__.

    The state is never shared: copy.copy, copy.deepcopy and pickle give the
    new instance an empty state with no subscribers.
    """

    validation_rules: ClassVar[RuleTable] = {}
    validation_orchestrator: ClassVar[ValidationOrchestrator] = ValidationOrchestrator()

    def __new__(cls, *args: Any, **kwargs: Any):
        instance = super().__new__(cls)
        instance._setup_validation()
        return instance

    def _setup_validation(self) -> None:
        type_rules = RuleRegistry.get_or_build(type(self))
        object.__setattr__(self, "_validation_state", ValidationState(type_rules.field_names))

    def __getstate__(self) -> dict[str, Any]:
        # Copies and unpickled instances get a fresh state from __new__
        state = self.__dict__.copy()
        state.pop("_validation_state", None)
        return state

    @property
    def validation_state(self) -> ValidationState:
        return self._validation_state

    # -- Subscription ---------------------------------------------------------

    def on_validation_changed(self, handler: ValidationChangedHandler) -> Callable[[], None]:
        """Subscribe to validation changes.

        Returns:
            A callable that removes the subscription
        """
        return self.validation_state.channel.subscribe(handler)

    # -- Messages -------------------------------------------------------------

    def register_fields(self, *fields: str) -> None:
        """Make extra fields observable with an empty message list."""
        self.validation_state.register(*fields)

    def add_message(self, message: ValidationMessage, field: str) -> None:
        self.validation_state.add(message, field)

    def remove_message(self, message: ValidationMessage, field: str) -> None:
        self.validation_state.remove(message, field)

    def remove_messages(self, field: str | None = None) -> None:
        self.validation_state.remove_all(field)

    def has_messages(self, field: str | None = None, kind: MessageKind | None = None) -> bool:
        return self.validation_state.has(field, kind)

    def get_messages(self, field: str | None = None):
        """Return one field's messages, or all fields' messages keyed by name."""
        return self.validation_state.snapshot(field)

    # -- Validation -----------------------------------------------------------

    def validate_all(self) -> None:
        self.validation_orchestrator.validate_all(self)

    def validate_field(self, field: str = "") -> None:
        self.validation_orchestrator.validate_field(self, field)

    def validate_with_delegate(
        self,
        predicate: Callable[[], bool],
        failure_message: ValidationMessage,
        field: str,
        proxy: "Validatable | None" = None,
    ) -> ValidationMessage | None:
        return self.validation_orchestrator.validate_with_delegate(
            self, predicate, failure_message, field, proxy
        )

    def perform_validation(
        self,
        rule: ValidationRule,
        field: str,
        proxy: "Validatable | None" = None,
    ) -> ValidationMessage | None:
        return self.validation_orchestrator.perform_validation(self, rule, field, proxy)

    def refresh_validation(self, field: str) -> None:
        self.validation_orchestrator.refresh_validation(self, field)
