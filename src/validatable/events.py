"""Validation change notification channel."""

import logging
from collections.abc import Callable

from validatable.types import ValidationChangedEvent

logger = logging.getLogger(__name__)

ValidationChangedHandler = Callable[[ValidationChangedEvent], None]


class EventChannel:
    """Delivers ValidationChangedEvents to subscribers in subscription order.

    Delivery is synchronous on the publishing thread. A subscriber that
    raises stops delivery and the exception reaches the publisher's caller.
    """

    def __init__(self) -> None:
        self._subscribers: list[ValidationChangedHandler] = []

    def subscribe(self, handler: ValidationChangedHandler) -> Callable[[], None]:
        """Add a subscriber.

        Returns:
            A callable that removes the subscription
        """
        self._subscribers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: ValidationChangedHandler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    def publish(self, event: ValidationChangedEvent) -> None:
        logger.debug(
            "Validation changed for '%s' (%d message(s))", event.field, len(event.messages)
        )
        for handler in list(self._subscribers):
            handler(event)

    def __len__(self) -> int:
        return len(self._subscribers)
