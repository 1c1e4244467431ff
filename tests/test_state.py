"""Tests for per-instance validation state and the event channel."""

import pytest

from validatable.events import EventChannel
from validatable.state import ValidationState
from validatable.types import (
    Severity,
    ValidationChangedEvent,
    ValidationErrorMessage,
    ValidationWarningMessage,
)

REQUIRED = ValidationErrorMessage("Required")
TOO_SHORT = ValidationErrorMessage("Too short")
ODD = ValidationWarningMessage("Looks odd")


@pytest.fixture
def events():
    return []


@pytest.fixture
def state(events):
    state = ValidationState(["email", "password"])
    state.channel.subscribe(events.append)
    return state


class TestRegistration:
    def test_registered_fields_start_empty(self, state, events):
        assert state.fields == ("email", "password")
        assert state.snapshot() == {"email": (), "password": ()}
        assert events == []

    def test_register_is_silent_and_idempotent(self, state, events):
        state.add(REQUIRED, "email")
        state.register("email", "nickname")

        assert state.snapshot("email") == (REQUIRED,)
        assert state.snapshot("nickname") == ()
        assert len(events) == 1


class TestAdd:
    def test_add_notifies_with_full_snapshot(self, state, events):
        state.add(REQUIRED, "email")
        state.add(ODD, "email")

        assert events == [
            ValidationChangedEvent("email", (REQUIRED,)),
            ValidationChangedEvent("email", (REQUIRED, ODD)),
        ]

    def test_duplicate_text_is_stored_once(self, state, events):
        state.add(REQUIRED, "email")
        state.add(ValidationErrorMessage("Required"), "email")

        assert state.snapshot("email") == (REQUIRED,)
        assert len(events) == 1

    def test_duplicate_across_variants_is_stored_once(self, state):
        state.add(REQUIRED, "email")
        state.add(ValidationWarningMessage("Required"), "email")

        assert len(state.snapshot("email")) == 1
        assert type(state.snapshot("email")[0]) is ValidationErrorMessage

    def test_same_message_on_different_fields(self, state):
        state.add(REQUIRED, "email")
        state.add(REQUIRED, "password")

        assert state.snapshot("email") == (REQUIRED,)
        assert state.snapshot("password") == (REQUIRED,)

    def test_add_to_unregistered_field_creates_it(self, state):
        state.add(REQUIRED, "confirm")
        assert state.snapshot("confirm") == (REQUIRED,)

    def test_empty_field_rejected(self, state):
        with pytest.raises(ValueError, match="field name"):
            state.add(REQUIRED, "")


class TestRemove:
    def test_remove_first_equal_message(self, state, events):
        state.add(REQUIRED, "email")
        state.add(TOO_SHORT, "email")
        events.clear()

        state.remove(ValidationWarningMessage("Required"), "email")

        assert state.snapshot("email") == (TOO_SHORT,)
        assert events == [ValidationChangedEvent("email", (TOO_SHORT,))]

    def test_remove_absent_message_is_silent(self, state, events):
        state.remove(REQUIRED, "email")
        state.remove(REQUIRED, "unknown")
        assert events == []

    def test_remove_all_for_field(self, state, events):
        state.add(REQUIRED, "email")
        state.add(REQUIRED, "password")
        events.clear()

        state.remove_all("email")

        assert state.snapshot() == {"email": (), "password": (REQUIRED,)}
        assert events == [ValidationChangedEvent("email", ())]

    def test_remove_all_fires_one_event_per_field(self, state, events):
        state.add(REQUIRED, "email")
        events.clear()

        state.remove_all()

        assert [event.field for event in events] == ["email", "password"]
        assert all(event.messages == () for event in events)

    def test_remove_all_unknown_field_is_silent(self, state, events):
        state.remove_all("unknown")
        assert events == []


class TestReplace:
    def test_replace_is_silent(self, state, events):
        state.replace("email", [REQUIRED, TOO_SHORT])

        assert state.snapshot("email") == (REQUIRED, TOO_SHORT)
        assert events == []

    def test_replace_collapses_duplicates(self, state):
        state.replace("email", [REQUIRED, TOO_SHORT, ValidationErrorMessage("Required")])
        assert state.snapshot("email") == (REQUIRED, TOO_SHORT)

    def test_replace_then_notify(self, state, events):
        state.add(ODD, "email")
        events.clear()

        state.replace("email", [])
        state.notify("email")

        assert events == [ValidationChangedEvent("email", ())]


class TestQueries:
    def test_has_any(self, state):
        assert state.has() is False
        state.add(ODD, "password")
        assert state.has() is True

    def test_has_for_field(self, state):
        state.add(ODD, "password")
        assert state.has("password") is True
        assert state.has("email") is False

    def test_has_unknown_field(self, state):
        state.add(ODD, "password")
        assert state.has("unknown") is False

    def test_has_by_severity(self, state):
        state.add(ODD, "password")
        assert state.has("password", Severity.WARNING) is True
        assert state.has("password", Severity.ERROR) is False
        assert state.has(kind=Severity.WARNING) is True

    def test_has_by_message_class(self, state):
        state.add(REQUIRED, "email")
        assert state.has(kind=ValidationErrorMessage) is True
        assert state.has(kind=ValidationWarningMessage) is False

    def test_snapshot_is_a_copy(self, state):
        snapshot = state.snapshot()
        state.add(REQUIRED, "email")
        assert snapshot["email"] == ()

    def test_snapshot_unknown_field(self, state):
        assert state.snapshot("unknown") == ()


class TestEventChannel:
    def test_subscribers_called_in_order(self):
        channel = EventChannel()
        calls = []
        channel.subscribe(lambda event: calls.append(("first", event.field)))
        channel.subscribe(lambda event: calls.append(("second", event.field)))

        channel.publish(ValidationChangedEvent("email"))

        assert calls == [("first", "email"), ("second", "email")]

    def test_unsubscribe_callable(self):
        channel = EventChannel()
        received = []
        unsubscribe = channel.subscribe(received.append)

        unsubscribe()
        channel.publish(ValidationChangedEvent("email"))

        assert received == []
        assert len(channel) == 0

    def test_subscriber_errors_propagate(self, state):
        def broken(event):
            raise RuntimeError("subscriber failed")

        state.channel.subscribe(broken)
        with pytest.raises(RuntimeError, match="subscriber failed"):
            state.add(REQUIRED, "email")

        # The mutation itself happened before notification
        assert state.snapshot("email") == (REQUIRED,)

    def test_shared_channel(self):
        channel = EventChannel()
        received = []
        channel.subscribe(received.append)

        ValidationState(["a"], channel).add(REQUIRED, "a")
        ValidationState(["b"], channel).add(REQUIRED, "b")

        assert [event.field for event in received] == ["a", "b"]
