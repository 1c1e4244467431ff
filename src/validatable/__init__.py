"""validatable — declarative per-instance field validation.

Objects declare rules on their fields; a shared engine evaluates them,
keeps the current messages per field and notifies observers when a field's
validation state changes.

- Rules: value presence, numeric ranges and comparisons, string lengths,
  custom handler delegates
- Guards: a rule runs only while another field (validate_if) is valid
- Interception: a handler may override any rule's verdict
- Registry: rule metadata is built once per type and shared

Usage:
    from validatable import RuleDefinition, Validatable

    class Person(Validatable):
        validation_rules = {
            "age": [RuleDefinition.of("number_in_range", "Age is out of range", min=18, max=65)],
        }

        def __init__(self, age: int):
            self.age = age

    person = Person(10)
    person.validate_all()
    person.get_messages("age")   # (ValidationErrorMessage('Age is out of range'),)
"""

from validatable.config import ValidatableConfig, configure
from validatable.events import EventChannel
from validatable.exceptions import (
    FieldNotRegisteredError,
    HandlerNotFoundError,
    NumberTypeMismatchError,
    PathResolutionError,
    RuleConfigurationError,
    RuleConversionError,
    RuleLookupError,
    ValidatableError,
)
from validatable.handlers import HandlerRegistry, validation_handler
from validatable.loader import RuleTableDefinition, RuleTableLoader
from validatable.localization import (
    LocalizationFactory,
    LocalizationService,
    MappingLocalizationService,
    YamlLocalizationService,
)
from validatable.model import Validatable
from validatable.orchestrator import ValidationOrchestrator
from validatable.paths import FieldPath, resolve, resolve_descriptor
from validatable.registry import FieldRules, RuleRegistry, TypeRules
from validatable.rules import (
    CustomHandlerRule,
    NumberGreaterThanRule,
    NumberInRangeRule,
    NumberLessThanRule,
    NumberWidth,
    StringLengthGreaterThanRule,
    StringLengthLessThanRule,
    ValidationRule,
    ValuePresentRule,
    create_rule,
)
from validatable.state import ValidationState
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

__all__ = [
    # Types
    "FieldDescriptor",
    "RuleDefinition",
    "RuleKind",
    "Severity",
    "ValidationChangedEvent",
    "ValidationErrorMessage",
    "ValidationMessage",
    "ValidationWarningMessage",
    # Errors
    "FieldNotRegisteredError",
    "HandlerNotFoundError",
    "NumberTypeMismatchError",
    "PathResolutionError",
    "RuleConfigurationError",
    "RuleConversionError",
    "RuleLookupError",
    "ValidatableError",
    # Paths
    "FieldPath",
    "resolve",
    "resolve_descriptor",
    # Rules
    "CustomHandlerRule",
    "NumberGreaterThanRule",
    "NumberInRangeRule",
    "NumberLessThanRule",
    "NumberWidth",
    "StringLengthGreaterThanRule",
    "StringLengthLessThanRule",
    "ValidationRule",
    "ValuePresentRule",
    "create_rule",
    # Registry
    "FieldRules",
    "HandlerRegistry",
    "RuleRegistry",
    "TypeRules",
    "validation_handler",
    # State and orchestration
    "EventChannel",
    "Validatable",
    "ValidationOrchestrator",
    "ValidationState",
    # Localization
    "LocalizationFactory",
    "LocalizationService",
    "MappingLocalizationService",
    "YamlLocalizationService",
    # Rule tables and config
    "RuleTableDefinition",
    "RuleTableLoader",
    "ValidatableConfig",
    "configure",
]
