"""Rule variants for the validatable engine.

Rule kinds are a closed set; each RuleKind maps to exactly one rule class.
"""

from validatable.rules.base import ValidationRule
from validatable.rules.custom import CustomHandlerRule
from validatable.rules.numeric import (
    NumberGreaterThanRule,
    NumberInRangeRule,
    NumberLessThanRule,
    NumberWidth,
    NumericRule,
)
from validatable.rules.presence import ValuePresentRule
from validatable.rules.strings import (
    StringLengthGreaterThanRule,
    StringLengthLessThanRule,
)
from validatable.types import RuleDefinition, RuleKind

RULE_CLASSES: dict[RuleKind, type[ValidationRule]] = {
    RuleKind.VALUE_PRESENT: ValuePresentRule,
    RuleKind.NUMBER_IN_RANGE: NumberInRangeRule,
    RuleKind.NUMBER_LESS_THAN: NumberLessThanRule,
    RuleKind.NUMBER_GREATER_THAN: NumberGreaterThanRule,
    RuleKind.STRING_LENGTH_GREATER_THAN: StringLengthGreaterThanRule,
    RuleKind.STRING_LENGTH_LESS_THAN: StringLengthLessThanRule,
    RuleKind.CUSTOM_HANDLER: CustomHandlerRule,
}


def create_rule(definition: RuleDefinition) -> ValidationRule:
    """Create a rule object from its definition."""
    return RULE_CLASSES[definition.kind](definition)


__all__ = [
    "RULE_CLASSES",
    "create_rule",
    "CustomHandlerRule",
    "NumberGreaterThanRule",
    "NumberInRangeRule",
    "NumberLessThanRule",
    "NumberWidth",
    "NumericRule",
    "StringLengthGreaterThanRule",
    "StringLengthLessThanRule",
    "ValidationRule",
    "ValuePresentRule",
]
