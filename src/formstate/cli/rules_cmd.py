"""Rule-set CLI commands: list, check and validate."""

import json
from pathlib import Path

import click
import yaml

from formstate.validation.engine import validate as validate_record
from formstate.validation.loader import RuleSetError, load_ruleset
from formstate.validation.registry import RuleRegistry


def _load_ruleset_or_exit(path: Path):
    try:
        return load_ruleset(path)
    except RuleSetError as exc:
        for issue in exc.issues:
            click.echo(click.style(str(issue), fg="red"), err=True)
        raise SystemExit(1)


@click.group()
def rules():
    """Rule-set commands."""
    pass


@rules.command("list")
def list_rules():
    """List registered rule types."""
    for name in RuleRegistry.list_registered():
        click.echo(name)


@rules.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(path: Path):
    """Check a YAML rule-set document."""
    ruleset = _load_ruleset_or_exit(path)
    rule_count = sum(len(field_rules) for field_rules in ruleset.values())
    click.echo(
        click.style("✓ ", fg="green")
        + f"{path}: {len(ruleset)} fields, {rule_count} rules"
    )


@click.command()
@click.argument("rules_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("record_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(rules_path: Path, record_path: Path):
    """Validate a JSON or YAML record against a rule set.

    Prints the error mapping as JSON; exits 1 when the record fails.
    """
    ruleset = _load_ruleset_or_exit(rules_path)

    with record_path.open() as fh:
        try:
            record = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            click.echo(f"Error: cannot parse {record_path}: {exc}", err=True)
            raise SystemExit(1)

    if not isinstance(record, dict):
        click.echo(f"Error: {record_path} must contain a mapping of field values", err=True)
        raise SystemExit(1)

    outcome = validate_record(ruleset, record)
    click.echo(json.dumps(outcome.errors(), indent=2))
    if outcome.is_fail:
        raise SystemExit(1)
