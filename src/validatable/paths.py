"""Dotted field path resolution across object graphs.

A path such as ``"address.city"`` is compiled once into a chain of accessors
and then walked against any instance. Each segment is looked up on the
runtime type of the object reached so far, so intermediate values may be of
any class. A missing segment or a None intermediate fails with
PathResolutionError.

Usage:
    path = FieldPath.parse("!account.active")
    path.negated            # True
    path.resolve(user)      # user.account.active
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from validatable.exceptions import PathResolutionError
from validatable.types import FieldDescriptor

_MISSING = object()


@dataclass(frozen=True)
class FieldPath:
    """A pre-parsed dotted path, optionally negated with a leading "!".

    Attributes:
        raw: The path as written, including any "!" prefix
        segments: Field names from the root instance to the terminal field
        negated: True when the path was written with a "!" prefix
    """

    raw: str
    segments: tuple[str, ...]
    negated: bool = False

    @classmethod
    def parse(cls, raw: str) -> "FieldPath":
        text = raw.strip()
        negated = text.startswith("!")
        if negated:
            text = text[1:].strip()
        segments = tuple(part.strip() for part in text.split("."))
        if not text or any(not part for part in segments):
            raise ValueError(f"Invalid field path: '{raw}'")
        return cls(raw=raw, segments=segments, negated=negated)

    @property
    def dotted(self) -> str:
        return ".".join(self.segments)

    @property
    def terminal(self) -> str:
        return self.segments[-1]

    def resolve_owner(self, instance: Any) -> Any:
        """Walk every segment but the last and return the terminal field's owner."""
        current = instance
        for segment in self.segments[:-1]:
            current = self._step(current, segment)
            if current is None:
                raise PathResolutionError(self.dotted, segment, "intermediate value is None")
        return current

    def resolve(self, instance: Any) -> Any:
        """Return the terminal field's value."""
        owner = self.resolve_owner(instance)
        return self._step(owner, self.terminal)

    def resolve_descriptor(self, instance: Any) -> tuple[Any, FieldDescriptor]:
        """Return the terminal field's owner and a descriptor for the field.

        Rules use this to re-run their own logic against a different field,
        for example a guard delegating into a number comparison.
        """
        owner = self.resolve_owner(instance)
        # Fail here rather than at the first read through the descriptor
        self._step(owner, self.terminal)
        return owner, FieldDescriptor(name=self.terminal, owner_type=type(owner))

    def _step(self, owner: Any, segment: str) -> Any:
        value = getattr(owner, segment, _MISSING)
        if value is _MISSING:
            raise PathResolutionError(
                self.dotted, segment, f"{type(owner).__qualname__} has no field '{segment}'"
            )
        return value


@lru_cache(maxsize=512)
def compile_path(raw: str) -> FieldPath:
    """Parse a path once and reuse the result."""
    return FieldPath.parse(raw)


def resolve(instance: Any, path: str) -> Any:
    """Resolve a dotted path against an instance and return the value."""
    return compile_path(path).resolve(instance)


def resolve_descriptor(instance: Any, path: str) -> tuple[Any, FieldDescriptor]:
    """Resolve a dotted path to the terminal owner and field descriptor."""
    return compile_path(path).resolve_descriptor(instance)
