"""JSON Schema validation for YAML rule tables.

Usage:
    from validatable.schema import validate_rules_path

    issues = validate_rules_path(Path("rules"))
    for issue in issues:
        print(issue)
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as JsonSchemaError

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "rule_table.schema.json"


@dataclass
class SchemaIssue:
    """A single finding for a rule table file."""

    file: Path
    message: str
    path: str = ""  # Location within the document, e.g. "fields/email[0]"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[ERROR] {self.file}{loc}: {self.message}"


@lru_cache(maxsize=1)
def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


def _json_path(error: JsonSchemaError) -> str:
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def validate_rule_file(yaml_path: Path) -> list[SchemaIssue]:
    """Validate one rule table file against the bundled schema.

    Returns:
        A list of SchemaIssue objects (empty on success)
    """
    try:
        with yaml_path.open() as fh:
            doc = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [SchemaIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if doc is None:
        return [SchemaIssue(file=yaml_path, message="File is empty or contains only whitespace")]

    validator = Draft202012Validator(_load_schema())
    return [
        SchemaIssue(file=yaml_path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=lambda e: list(map(str, e.path)))
    ]


def validate_rules_path(rules_path: Path) -> list[SchemaIssue]:
    """Validate a single rule table file, or every YAML file in a directory."""
    if rules_path.is_file():
        return validate_rule_file(rules_path)

    if not rules_path.is_dir():
        return [SchemaIssue(file=rules_path, message=f"Rules path does not exist: {rules_path}")]

    issues: list[SchemaIssue] = []
    for yaml_file in sorted(list(rules_path.glob("*.yaml")) + list(rules_path.glob("*.yml"))):
        logger.debug("Validating rule table %s", yaml_file)
        issues.extend(validate_rule_file(yaml_file))
    return issues
