"""Load rule tables from YAML files.

A rule table declares the rules of one validated type:

    type: User
    fields:
      email:
        - kind: value_present
          message: E-Mail can not be left blank.
          severity: error
      password:
        - kind: string_length_greater_than
          min: 6
          validateIf: email
          message: Password must be greater than 6 characters.
          severity: error
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from validatable.exceptions import RuleConfigurationError
from validatable.registry import RuleRegistry
from validatable.types import RuleDefinition

logger = logging.getLogger(__name__)


@dataclass
class RuleTableDefinition:
    """Rules for one type, as loaded from a YAML file."""

    type_name: str
    fields: dict[str, list[RuleDefinition]] = field(default_factory=dict)
    source: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> "RuleTableDefinition":
        """Create RuleTableDefinition from YAML/JSON dict."""
        type_name = data.get("type")
        if not type_name:
            location = f" {source}" if source else ""
            raise RuleConfigurationError(f"Rule table{location} has no 'type'")

        fields: dict[str, list[RuleDefinition]] = {}
        for field_name, rules in (data.get("fields") or {}).items():
            try:
                fields[field_name] = [RuleDefinition.from_dict(rule) for rule in rules or []]
            except (KeyError, TypeError, ValueError) as e:
                raise RuleConfigurationError(
                    f"Invalid rule for {type_name}.{field_name}: {e}"
                ) from e
        return cls(type_name=type_name, fields=fields, source=source)

    @property
    def rule_count(self) -> int:
        return sum(len(rules) for rules in self.fields.values())


class RuleTableLoader:
    """Loads rule tables from a YAML file or a directory of YAML files."""

    def __init__(self, rules_path: Path):
        self.rules_path = rules_path
        self.tables: dict[str, RuleTableDefinition] = {}

    def load_all(self) -> dict[str, RuleTableDefinition]:
        """Load every table; a type declared twice is a configuration error."""
        for yaml_file in self._files():
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if not data:
                logger.warning("Skipping empty rule table %s", yaml_file)
                continue

            table = RuleTableDefinition.from_dict(data, source=yaml_file)
            if table.type_name in self.tables:
                raise RuleConfigurationError(
                    f"Duplicate rule table for '{table.type_name}' in {yaml_file} "
                    f"(already loaded from {self.tables[table.type_name].source})"
                )
            self.tables[table.type_name] = table
        return self.tables

    def get_table(self, type_name: str) -> RuleTableDefinition | None:
        return self.tables.get(type_name)

    def list_types(self) -> list[str]:
        return sorted(self.tables)

    def bind(self, owner_type: type, type_name: str | None = None) -> RuleTableDefinition:
        """Declare a loaded table's rules on a class.

        Args:
            owner_type: The class to receive the rules
            type_name: Table name to use; defaults to the class name

        Raises:
            RuleConfigurationError: If no table was loaded under that name
        """
        name = type_name or owner_type.__name__
        table = self.tables.get(name)
        if table is None:
            raise RuleConfigurationError(f"No rule table loaded for type '{name}'")
        RuleRegistry.declare(owner_type, table.fields)
        return table

    def _files(self) -> list[Path]:
        if self.rules_path.is_file():
            return [self.rules_path]
        if not self.rules_path.exists():
            return []
        return sorted(
            list(self.rules_path.glob("*.yaml")) + list(self.rules_path.glob("*.yml"))
        )
