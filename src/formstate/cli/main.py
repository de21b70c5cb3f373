"""formstate CLI entry point."""

import click

from formstate.config import FormConfig
from formstate.validation.registry import register_builtin_rules


@click.group()
def cli():
    """formstate: rule-set and record validation CLI."""
    FormConfig.from_env().apply_logging()
    register_builtin_rules()


# Register subcommand groups
from formstate.cli.rules_cmd import rules, validate  # noqa: E402

cli.add_command(rules)
cli.add_command(validate)
