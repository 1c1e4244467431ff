"""Validation orchestration.

Drives rule evaluation for validatable instances:
1. Fetch (or build) the type's rule metadata from the registry
2. Run each field's rules in declaration order against the instance
3. Replace the field's messages with the results
4. Publish one change event per field with its final messages

A rule that raises aborts the pass before anything is committed for the
field it was evaluating. Fields completed earlier in the pass stay
committed and notified.
"""

import logging
from collections.abc import Callable
from typing import Any

from validatable.registry import FieldRules, RuleRegistry
from validatable.rules import ValidationRule
from validatable.state import ValidationState
from validatable.types import ValidationMessage

logger = logging.getLogger(__name__)


class ValidationOrchestrator:
    """Runs declared and ad-hoc rules against validatable instances.

    Instances are expected to expose their ValidationState as
    ``instance.validation_state``.
    """

    def __init__(self, registry: type[RuleRegistry] = RuleRegistry):
        self.registry = registry

    def validate_all(self, instance: Any) -> None:
        """Validate every field with declared rules."""
        type_rules = self.registry.get_or_build(type(instance))
        state = self._state(instance)

        # Fields outside the rule map are only reached by ad-hoc messages
        for name in state.fields:
            if name not in type_rules:
                state.remove_all(name)

        for entry in type_rules:
            self._run_field(instance, state, entry)

    def validate_field(self, instance: Any, field: str = "") -> None:
        """Validate a single field; an empty name validates everything.

        Raises:
            FieldNotRegisteredError: If the field has no declared rules
        """
        if not field:
            self.validate_all(instance)
            return

        entry = self.registry.get_or_build(type(instance)).get(field)
        self._run_field(instance, self._state(instance), entry)

    def validate_with_delegate(
        self,
        instance: Any,
        predicate: Callable[[], bool],
        failure_message: ValidationMessage,
        field: str,
        proxy: Any = None,
    ) -> ValidationMessage | None:
        """Validate a field with an ad-hoc predicate instead of declared rules.

        On failure the message is added to the field, on success it is removed.
        With a proxy, the whole check is recorded on the proxy instead.

        Returns:
            The failure message if the predicate failed, otherwise None
        """
        if proxy is not None:
            return self.validate_with_delegate(proxy, predicate, failure_message, field)

        state = self._state(instance)
        passed = predicate()
        if passed:
            state.remove(failure_message, field)
            return None

        state.add(failure_message, field)
        return failure_message

    def perform_validation(
        self,
        instance: Any,
        rule: ValidationRule,
        field: str,
        proxy: Any = None,
    ) -> ValidationMessage | None:
        """Run an ad-hoc rule object against a registered field.

        Raises:
            FieldNotRegisteredError: If the field is not registered on the target
        """
        if proxy is not None:
            return self.perform_validation(proxy, rule, field)

        entry = self.registry.get_or_build(type(instance)).get(field)
        result = rule.validate(entry.field, instance)
        if result is not None:
            self._state(instance).add(result, field)
        return result

    def refresh_validation(self, instance: Any, field: str) -> None:
        """Re-validate a field that currently has messages.

        A field without messages just has its current state republished.

        Raises:
            ValueError: If no field name is given
        """
        if not field:
            raise ValueError(
                "You must supply a field name when refreshing validation."
            )

        state = self._state(instance)
        if state.has(field):
            self.validate_field(instance, field)
            return
        state.notify(field)

    def _run_field(self, instance: Any, state: ValidationState, entry: FieldRules) -> None:
        messages: list[ValidationMessage] = []
        for rule in entry.rules:
            result = rule.validate(entry.field, instance)
            if result is not None:
                messages.append(result)

        logger.debug(
            "Validated %s.%s: %d message(s)",
            type(instance).__qualname__,
            entry.field.name,
            len(messages),
        )
        state.replace(entry.field.name, messages)
        state.notify(entry.field.name)

    def _state(self, instance: Any) -> ValidationState:
        return instance.validation_state
