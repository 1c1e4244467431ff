"""Exception taxonomy for the validation engine.

Every error raised here is a programmer-visible defect (a mis-declared rule,
wrong field wiring), not a user input problem. Ordinary validation failures
are never raised; they are recorded as messages on the validated instance.

Each class also inherits the closest builtin so callers can catch either:
- RuleConfigurationError: a rule declaration is unusable (ValueError)
- NumberTypeMismatchError: a numeric rule saw a value of another width (TypeError)
- RuleConversionError: a bound cannot be parsed and has no fallback (ValueError)
- RuleLookupError: a handler, path segment or field cannot be found (LookupError)
"""


class ValidatableError(Exception):
    """Base class for all validation engine errors."""
    pass


class RuleConfigurationError(ValidatableError, ValueError):
    """A rule declaration is invalid (raised when the registry builds a type)."""
    pass


class NumberTypeMismatchError(ValidatableError, TypeError):
    """A numeric rule received a value whose width differs from the inferred one."""
    pass


class RuleConversionError(ValidatableError, ValueError):
    """A configured bound or comparison value cannot be parsed."""
    pass


class RuleLookupError(ValidatableError, LookupError):
    """Something a rule refers to by name could not be found."""
    pass


class PathResolutionError(RuleLookupError):
    """A dotted field path could not be resolved against an object graph."""

    def __init__(self, path: str, segment: str, reason: str):
        self.path = path
        self.segment = segment
        self.reason = reason
        super().__init__(f"Cannot resolve '{path}' at segment '{segment}': {reason}")


class HandlerNotFoundError(RuleLookupError):
    """A custom handler delegate is not defined on the validated type."""

    def __init__(self, name: str, owner_type: type):
        self.name = name
        self.owner_type = owner_type
        super().__init__(
            f"Missing '{name}' validation handler for {owner_type.__qualname__} instance."
        )


class FieldNotRegisteredError(RuleLookupError):
    """A field name is not registered for validation on the type."""

    def __init__(self, field: str, owner_type: type):
        self.field = field
        self.owner_type = owner_type
        super().__init__(
            f"Field '{field}' is not registered for validation on "
            f"{owner_type.__qualname__}."
        )
