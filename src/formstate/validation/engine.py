"""Validation entry point.

``validate`` runs every rule declared in a rule set against a record and
combines the outcomes with ``concat``: rules within a field left to right,
then fields in declaration order.

Usage:
    from formstate.validation import validate
    from formstate.validation.rules import is_present, max_chars

    outcome = validate({"name": [is_present(), max_chars(30)]}, {"name": ""})
    errors = outcome.errors()  # {"name": ["name is not present"]}
"""

import logging
from collections.abc import Mapping, Sequence
from functools import reduce
from typing import Any

from formstate.validation.rules import Rule
from formstate.validation.types import Ok, Outcome, RuleSet

logger = logging.getLogger(__name__)


def combine_rules(rules: Sequence[Rule]) -> Rule:
    """Fold a non-empty rule list into one rule, left to right."""
    if not rules:
        raise ValueError("Cannot combine an empty rule list")
    return reduce(lambda acc, rule: acc.concat(rule), rules)


def validate(schema: RuleSet, record: Mapping[str, Any]) -> Outcome:
    """Validate a record against a rule set.

    Only fields declared in ``schema`` are validated. A field missing from
    ``record`` is validated as ``None``; a field with no rules is skipped.

    Args:
        schema: Field name -> ordered rules for that field
        record: The values to validate (also passed to every rule as context)

    Returns:
        Ok when every rule passes, otherwise Fail with all messages collected
    """
    outcome: Outcome = Ok()

    for field_name, rules in schema.items():
        if not rules:
            continue
        rule = combine_rules(rules)
        outcome = outcome.concat(rule(field_name, record.get(field_name), record))

    if outcome.is_fail:
        logger.debug(
            "Validated %d field(s); failing: %s",
            len(schema),
            ", ".join(outcome.errors()),
        )
    else:
        logger.debug("Validated %d field(s); all passed", len(schema))

    return outcome
