"""Tests for messages, field descriptors and rule definitions."""

import pytest

from validatable.exceptions import PathResolutionError
from validatable.types import (
    FieldDescriptor,
    RuleDefinition,
    RuleKind,
    Severity,
    ValidationChangedEvent,
    ValidationErrorMessage,
    ValidationMessage,
    ValidationWarningMessage,
)


class TestValidationMessage:
    def test_equality_is_by_text(self):
        assert ValidationErrorMessage("Required") == ValidationErrorMessage("Required")
        assert ValidationErrorMessage("Required") != ValidationErrorMessage("required")

    def test_equality_ignores_variant(self):
        assert ValidationErrorMessage("Check me") == ValidationWarningMessage("Check me")
        assert hash(ValidationErrorMessage("Check me")) == hash(ValidationWarningMessage("Check me"))

    def test_not_equal_to_plain_string(self):
        assert ValidationErrorMessage("Required") != "Required"

    def test_messages_are_immutable(self):
        message = ValidationErrorMessage("Required")
        with pytest.raises(AttributeError):
            message.text = "Changed"

    def test_variant_severity(self):
        assert ValidationErrorMessage("x").severity is Severity.ERROR
        assert ValidationWarningMessage("x").severity is Severity.WARNING

    def test_str_and_dict(self):
        message = ValidationWarningMessage("Looks odd")
        assert str(message) == "Looks odd"
        assert message.to_dict() == {"message": "Looks odd", "severity": "warning"}
        assert repr(message) == "ValidationWarningMessage('Looks odd')"


class TestSeverity:
    def test_create_synthesizes_variant(self):
        error = Severity.ERROR.create("Bad")
        warning = Severity.WARNING.create("Hmm")

        assert type(error) is ValidationErrorMessage
        assert type(warning) is ValidationWarningMessage
        assert isinstance(warning, ValidationMessage)
        assert warning.text == "Hmm"


class TestFieldDescriptor:
    def test_get_reads_attribute(self):
        class Item:
            sku = "A-1"

        assert FieldDescriptor("sku", Item).get(Item()) == "A-1"

    def test_get_missing_attribute_fails(self):
        class Item:
            pass

        with pytest.raises(PathResolutionError):
            FieldDescriptor("sku", Item).get(Item())


class TestRuleDefinition:
    def test_of_collects_params(self):
        definition = RuleDefinition.of(
            "number_in_range",
            "Age is out of range",
            min=18,
            max=65,
            validate_if="adult",
        )

        assert definition.kind is RuleKind.NUMBER_IN_RANGE
        assert definition.severity is Severity.ERROR
        assert definition.validate_if == "adult"
        assert definition.params == {"min": 18, "max": 65}
        assert definition.param("min") == 18
        assert definition.param("min_path") is None

    def test_of_accepts_enum_kind(self):
        definition = RuleDefinition.of(RuleKind.VALUE_PRESENT, "Required")
        assert definition.kind is RuleKind.VALUE_PRESENT

    def test_of_rejects_unknown_kind(self):
        with pytest.raises(ValueError):
            RuleDefinition.of("regex", "Nope")

    def test_from_dict_maps_camel_case_keys(self):
        definition = RuleDefinition.from_dict({
            "kind": "number_in_range",
            "message": "Out of range",
            "severity": "warning",
            "localizationKey": "age.range",
            "validateIf": "!retired",
            "intercept": "CheckAge",
            "min": 18,
            "maxPath": "limits.max_age",
        })

        assert definition.kind is RuleKind.NUMBER_IN_RANGE
        assert definition.severity is Severity.WARNING
        assert definition.localization_key == "age.range"
        assert definition.validate_if == "!retired"
        assert definition.intercept == "CheckAge"
        assert definition.params == {"min": 18, "max_path": "limits.max_age"}

    def test_from_dict_without_severity(self):
        definition = RuleDefinition.from_dict({"kind": "value_present"})
        assert definition.severity is None
        assert definition.message == ""

    def test_definitions_are_frozen(self):
        definition = RuleDefinition.of("value_present", "Required")
        with pytest.raises(AttributeError):
            definition.message = "Other"


class TestValidationChangedEvent:
    def test_defaults_to_no_messages(self):
        event = ValidationChangedEvent("email")
        assert event.field == "email"
        assert event.messages == ()
