"""validatable CLI entry point."""

import logging

import click

from validatable.config import ValidatableConfig, configure


@click.group()
@click.pass_context
def cli(ctx: click.Context):
    """validatable — declarative field validation CLI."""
    config = ValidatableConfig.from_env()
    logging.basicConfig(level=config.log_level)
    configure(config)
    ctx.obj = config


# Register subcommand groups
from validatable.cli.rules_cmd import rules  # noqa: E402

cli.add_command(rules)
