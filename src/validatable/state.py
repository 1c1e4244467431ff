"""Per-instance validation state.

Holds the current messages for each field of one validated instance and
publishes a ValidationChangedEvent whenever a field's messages change.
Every event carries the field's complete message list after the change.
"""

from collections.abc import Iterable

from validatable.events import EventChannel
from validatable.types import (
    Severity,
    ValidationChangedEvent,
    ValidationMessage,
)

MessageKind = Severity | type[ValidationMessage]


class ValidationState:
    """Field name -> ordered messages, with change notification.

    Registered fields always have an entry, possibly empty, so observers can
    query them before the first validation pass.
    """

    def __init__(
        self,
        fields: Iterable[str] = (),
        channel: EventChannel | None = None,
    ):
        self.channel = channel if channel is not None else EventChannel()
        self._messages: dict[str, list[ValidationMessage]] = {}
        self.register(*fields)

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._messages)

    def register(self, *fields: str) -> None:
        """Ensure each field has an entry, without notifying."""
        for name in fields:
            self._messages.setdefault(name, [])

    def add(self, message: ValidationMessage, field: str) -> None:
        """Add a message to a field unless an equal message is already there.

        Raises:
            ValueError: If no field name is given
        """
        if not field:
            raise ValueError(
                "You must supply a field name when adding a validation message."
            )

        messages = self._messages.setdefault(field, [])
        if message in messages:
            return

        messages.append(message)
        self.notify(field)

    def remove(self, message: ValidationMessage, field: str) -> None:
        """Remove the first message equal to the given one."""
        messages = self._messages.get(field) if field else None
        if not messages or message not in messages:
            return

        messages.remove(message)
        self.notify(field)

    def remove_all(self, field: str | None = None) -> None:
        """Clear one field's messages, or every field's when field is None.

        Clearing everything publishes one event per field.
        """
        if field is None:
            for name, messages in list(self._messages.items()):
                messages.clear()
                self.notify(name)
            return

        if field in self._messages:
            self._messages[field].clear()
            self.notify(field)

    def replace(self, field: str, messages: Iterable[ValidationMessage]) -> None:
        """Set a field's full message list without notifying.

        Equal messages are collapsed to the first occurrence.
        """
        unique: list[ValidationMessage] = []
        for message in messages:
            if message not in unique:
                unique.append(message)
        self._messages.setdefault(field, [])[:] = unique

    def has(self, field: str | None = None, kind: MessageKind | None = None) -> bool:
        """Check for messages, optionally filtered by field and message kind.

        Args:
            field: Only consider this field; None considers every field
            kind: A Severity or a message class to match
        """
        if field is None:
            candidates = [m for messages in self._messages.values() for m in messages]
        else:
            candidates = self._messages.get(field, [])
        return any(self._matches(message, kind) for message in candidates)

    def snapshot(self, field: str | None = None):
        """Return one field's messages, or a copy of the whole map.

        Returns:
            A tuple of messages when field is given (empty for unknown fields),
            otherwise a dict of field name -> tuple of messages
        """
        if field is not None:
            return tuple(self._messages.get(field, ()))
        return {name: tuple(messages) for name, messages in self._messages.items()}

    def notify(self, field: str) -> None:
        """Publish the field's current messages."""
        self.channel.publish(ValidationChangedEvent(field, self.snapshot(field)))

    def _matches(self, message: ValidationMessage, kind: MessageKind | None) -> bool:
        if kind is None:
            return True
        if isinstance(kind, Severity):
            return message.severity is kind
        return isinstance(message, kind)
