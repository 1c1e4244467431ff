"""Core types for the validatable engine.

This module defines the value types shared by every layer:
- Messages: ValidationMessage and its Error/Warning variants
- Fields: FieldDescriptor, the read-only handle a rule validates
- Declarations: RuleKind and RuleDefinition, the immutable rule metadata
- Notifications: ValidationChangedEvent
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from validatable.exceptions import PathResolutionError


class Severity(Enum):
    """Message variant selector for a rule's failures.

    ERROR: The value is invalid
    WARNING: The value is accepted but should be reviewed
    """

    ERROR = "error"
    WARNING = "warning"

    @property
    def message_class(self) -> type["ValidationMessage"]:
        if self is Severity.WARNING:
            return ValidationWarningMessage
        return ValidationErrorMessage

    def create(self, text: str) -> "ValidationMessage":
        """Synthesize a message of this variant."""
        return self.message_class(text)


class ValidationMessage:
    """A human-readable validation outcome.

    Two messages are equal when their text is equal (case-sensitive), whatever
    their variant. The state container relies on this for de-duplication.
    """

    __slots__ = ("text",)

    severity: Severity = Severity.ERROR

    def __init__(self, text: str = ""):
        object.__setattr__(self, "text", text)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationMessage):
            return NotImplemented
        return self.text == other.text

    def __hash__(self) -> int:
        return hash(self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text!r})"

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.text, "severity": self.severity.value}


class ValidationErrorMessage(ValidationMessage):
    __slots__ = ()
    severity = Severity.ERROR


class ValidationWarningMessage(ValidationMessage):
    __slots__ = ()
    severity = Severity.WARNING


@dataclass(frozen=True)
class FieldDescriptor:
    """Identifies a validatable field by name on a type.

    Attributes:
        name: Attribute name on the owning instance
        owner_type: The type the field was discovered on
    """

    name: str
    owner_type: type

    def get(self, instance: Any) -> Any:
        """Read the field's current value from an instance."""
        try:
            return getattr(instance, self.name)
        except AttributeError as e:
            raise PathResolutionError(
                self.name, self.name, f"{type(instance).__qualname__} has no such field"
            ) from e


class RuleKind(Enum):
    """The closed set of rule variants."""

    VALUE_PRESENT = "value_present"
    NUMBER_IN_RANGE = "number_in_range"
    NUMBER_LESS_THAN = "number_less_than"
    NUMBER_GREATER_THAN = "number_greater_than"
    STRING_LENGTH_GREATER_THAN = "string_length_greater_than"
    STRING_LENGTH_LESS_THAN = "string_length_less_than"
    CUSTOM_HANDLER = "custom_handler"


# YAML key -> params key
_PARAM_KEYS = {
    "min": "min",
    "max": "max",
    "minPath": "min_path",
    "maxPath": "max_path",
    "bound": "bound",
    "path": "path",
    "delegate": "delegate",
}


@dataclass(frozen=True)
class RuleDefinition:
    """Declarative metadata for one rule on one field.

    This is the immutable declaration; the registry turns it into a rule
    object once per type.

    Attributes:
        kind: Which rule variant to build
        message: Static failure text
        severity: Message variant selector; None is a configuration error
        localization_key: Optional key looked up before using the static text
        validate_if: Optional guard path, "!" prefix negates it
        intercept: Optional handler name that may override the result
        params: Kind-specific parameters (bounds, comparison paths, delegate)
    """

    kind: RuleKind
    message: str = ""
    severity: Severity | None = None
    localization_key: str | None = None
    validate_if: str | None = None
    intercept: str | None = None
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def of(
        cls,
        kind: RuleKind | str,
        message: str = "",
        severity: Severity | None = Severity.ERROR,
        *,
        localization_key: str | None = None,
        validate_if: str | None = None,
        intercept: str | None = None,
        **params: Any,
    ) -> "RuleDefinition":
        """Shorthand for declaring a rule with keyword parameters."""
        return cls(
            kind=RuleKind(kind),
            message=message,
            severity=severity,
            localization_key=localization_key,
            validate_if=validate_if,
            intercept=intercept,
            params=params,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleDefinition":
        """Create RuleDefinition from YAML/JSON dict."""
        severity = data.get("severity")
        params = {
            _PARAM_KEYS[key]: value for key, value in data.items() if key in _PARAM_KEYS
        }
        return cls(
            kind=RuleKind(data["kind"]),
            message=data.get("message", ""),
            severity=Severity(severity) if severity is not None else None,
            localization_key=data.get("localizationKey"),
            validate_if=data.get("validateIf"),
            intercept=data.get("intercept"),
            params=params,
        )

    def param(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)


@dataclass(frozen=True)
class ValidationChangedEvent:
    """Published after a field's validation state changes.

    The messages are the complete current set for the field, not a delta.
    """

    field: str
    messages: tuple[ValidationMessage, ...] = ()
