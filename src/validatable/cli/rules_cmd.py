"""Rule table CLI commands — validate and show."""

from pathlib import Path

import click

from validatable.exceptions import RuleConfigurationError
from validatable.loader import RuleTableDefinition, RuleTableLoader
from validatable.rules import create_rule
from validatable.schema import validate_rules_path


def _rules_path(ctx: click.Context, target_path: Path | None) -> Path:
    return target_path if target_path is not None else ctx.obj.rules_path


def _check_table(table: RuleTableDefinition) -> list[str]:
    """Build every rule of a table, collecting the problems found."""
    problems = []
    for field_name, definitions in table.fields.items():
        for index, definition in enumerate(definitions):
            location = f"{table.type_name}.{field_name}[{index}]"
            if definition.severity is None:
                problems.append(f"{location}: rule {definition.kind.value} has no severity")
                continue
            try:
                create_rule(definition)
            except (RuleConfigurationError, ValueError) as e:
                problems.append(f"{location}: {e}")
    return problems


@click.group()
def rules():
    """Rule table commands."""
    pass


@rules.command()
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="Rule table file or directory (defaults to VALIDATABLE_RULES_PATH or ./rules).",
)
@click.pass_context
def validate(ctx: click.Context, target_path: Path | None):
    """Validate rule table YAML files."""
    rules_path = _rules_path(ctx, target_path)

    # ── Schema (JSON Schema) validation ─────────────────────────────────────
    schema_issues = validate_rules_path(rules_path)
    for issue in schema_issues:
        click.echo(click.style(str(issue), fg="red"))

    if schema_issues:
        click.echo(
            click.style(f"\n{len(schema_issues)} schema error(s) found", fg="red", bold=True)
        )
        raise SystemExit(1)

    # ── Semantic (loader) validation ─────────────────────────────────────────
    try:
        tables = RuleTableLoader(rules_path).load_all()
    except RuleConfigurationError as e:
        click.echo(click.style(f"\nSemantic validation failed: {e}", fg="red"), err=True)
        raise SystemExit(1)

    problems = [problem for table in tables.values() for problem in _check_table(table)]
    if problems:
        for problem in problems:
            click.echo(click.style(problem, fg="red"))
        click.echo(click.style(f"\n{len(problems)} rule error(s) found", fg="red", bold=True))
        raise SystemExit(1)

    click.echo(f"Loaded {len(tables)} rule table(s):")
    for name in sorted(tables):
        table = tables[name]
        click.echo(f"  ✓ {name} ({len(table.fields)} fields, {table.rule_count} rules)")

    click.echo(click.style("\nAll rule tables are valid.", fg="green", bold=True))


@rules.command()
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="Rule table file or directory (defaults to VALIDATABLE_RULES_PATH or ./rules).",
)
@click.pass_context
def show(ctx: click.Context, target_path: Path | None):
    """Show the fields and rules declared in rule tables."""
    try:
        tables = RuleTableLoader(_rules_path(ctx, target_path)).load_all()
    except RuleConfigurationError as e:
        click.echo(click.style(f"Failed to load rule tables: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if not tables:
        click.echo("No rule tables found.")
        return

    for name in sorted(tables):
        click.echo(click.style(name, bold=True))
        for field_name, definitions in tables[name].fields.items():
            click.echo(f"  {field_name}")
            for definition in definitions:
                severity = definition.severity.value if definition.severity else "?"
                guard = f" if {definition.validate_if}" if definition.validate_if else ""
                click.echo(f"    - {definition.kind.value} [{severity}]{guard}")
