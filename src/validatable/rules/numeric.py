"""Numeric comparison rules.

The numeric width a rule works in is inferred from the first value it sees
and enforced from then on. Bounds are either static (from the declaration)
or read from a comparison path on the instance:
- NumberInRangeRule: min <= value <= max
- NumberLessThanRule: value < bound
- NumberGreaterThanRule: value > bound

A comparison value that is None, unparseable or zero falls back to the
static bound. Zero is indistinguishable from a failed parse here, so a
genuine zero override is not honoured.
"""

import threading
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from validatable.exceptions import NumberTypeMismatchError, RuleConversionError
from validatable.paths import FieldPath, compile_path
from validatable.rules.base import ValidationRule
from validatable.types import FieldDescriptor, RuleDefinition, ValidationMessage

Number = int | float | Decimal


class NumberWidth(Enum):
    """Numeric widths a rule can be bound to."""

    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"

    @classmethod
    def of(cls, value: Any) -> "NumberWidth | None":
        """Infer the width of a value; None if it is not a supported number."""
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, float):
            return cls.FLOAT
        if isinstance(value, Decimal):
            return cls.DECIMAL
        return None

    def coerce(self, raw: Any) -> Number | None:
        """Parse a bound or comparison value into this width.

        Returns None when the value cannot be represented.
        """
        if raw is None or isinstance(raw, bool):
            return None
        try:
            if self is NumberWidth.INTEGER:
                return self._to_integer(raw)
            if self is NumberWidth.FLOAT:
                if isinstance(raw, (int, float, Decimal, str)):
                    return float(raw)
                return None
            if isinstance(raw, (int, Decimal)):
                return Decimal(raw)
            if isinstance(raw, (float, str)):
                return Decimal(str(raw).strip())
        except (ValueError, ArithmeticError, InvalidOperation):
            return None
        return None

    def _to_integer(self, raw: Any) -> int | None:
        if isinstance(raw, int):
            return raw
        if isinstance(raw, str):
            return int(raw.strip())
        if isinstance(raw, float):
            return int(raw) if raw.is_integer() else None
        if isinstance(raw, Decimal):
            return int(raw) if raw == raw.to_integral_value() else None
        return None


class NumericRule(ValidationRule):
    """Base class for rules that compare a number against bounds."""

    def __init__(self, definition: RuleDefinition):
        super().__init__(definition)
        self.width: NumberWidth | None = None
        self._width_lock = threading.Lock()

    def evaluate(self, field: FieldDescriptor, instance: Any) -> ValidationMessage | None:
        value = field.get(instance)
        width = self.check_width(field, value)
        return None if self.compare(value, width, instance) else self.failure_message()

    def compare(self, value: Number, width: NumberWidth, instance: Any) -> bool:
        """Return True if the value passes. Override in subclasses."""
        raise NotImplementedError("Subclasses must implement compare()")

    def check_width(self, field: FieldDescriptor, value: Any) -> NumberWidth:
        """Infer the width on first use, then require every value to match it.

        Raises:
            NumberTypeMismatchError: If the value is not a number of the inferred width
        """
        observed = NumberWidth.of(value)
        with self._width_lock:
            if self.width is None and observed is not None:
                self.width = observed
            expected = self.width

        if observed is None or observed is not expected:
            raise NumberTypeMismatchError(
                f"The field '{field.name}' value type ({type(value).__name__}) is not "
                f"the same as the number width "
                f"({expected.value if expected else 'none'}) used for validation "
                "checks. They must be the same type."
            )
        return expected

    def effective_bound(
        self,
        instance: Any,
        width: NumberWidth,
        static: Any,
        path: FieldPath | None,
        name: str,
    ) -> Number:
        """Resolve a bound from its comparison path, falling back to the static value.

        Raises:
            RuleConversionError: If no usable bound can be produced
        """
        if path is not None:
            override = width.coerce(path.resolve(instance))
            if override:
                return override

        bound = width.coerce(static)
        if bound is None:
            raise RuleConversionError(
                f"Validation failed due to invalid data being provided for the "
                f"'{name}' bound: {static!r} is not a valid {width.value} value."
            )
        return bound

    @staticmethod
    def _optional_path(raw: str | None) -> FieldPath | None:
        return compile_path(raw) if raw else None


class NumberInRangeRule(NumericRule):
    """Passes when min <= value <= max.

    Declaration:
        RuleDefinition.of("number_in_range", "Age is out of range", min=18, max=65)

    Params:
        min, max: Static bounds
        min_path, max_path: Optional comparison paths overriding the bounds
    """

    def __init__(self, definition: RuleDefinition):
        super().__init__(definition)
        self.minimum = definition.param("min")
        self.maximum = definition.param("max")
        self.minimum_path = self._optional_path(definition.param("min_path"))
        self.maximum_path = self._optional_path(definition.param("max_path"))

    def compare(self, value: Number, width: NumberWidth, instance: Any) -> bool:
        maximum = self.effective_bound(instance, width, self.maximum, self.maximum_path, "max")
        minimum = self.effective_bound(instance, width, self.minimum, self.minimum_path, "min")
        return minimum <= value <= maximum


class _SingleBoundRule(NumericRule):
    def __init__(self, definition: RuleDefinition):
        super().__init__(definition)
        self.bound = definition.param("bound")
        self.path = self._optional_path(definition.param("path"))

    def resolve_bound(self, instance: Any, width: NumberWidth) -> Number:
        return self.effective_bound(instance, width, self.bound, self.path, "bound")


class NumberLessThanRule(_SingleBoundRule):
    """Passes when value < bound.

    Params:
        bound: Static upper bound (exclusive)
        path: Optional comparison path overriding the bound
    """

    def compare(self, value: Number, width: NumberWidth, instance: Any) -> bool:
        return value < self.resolve_bound(instance, width)


class NumberGreaterThanRule(_SingleBoundRule):
    """Passes when value > bound.

    Params:
        bound: Static lower bound (exclusive)
        path: Optional comparison path overriding the bound
    """

    def compare(self, value: Number, width: NumberWidth, instance: Any) -> bool:
        return value > self.resolve_bound(instance, width)
