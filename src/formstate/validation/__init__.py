"""formstate validation engine.

Rules are pure functions of (field name, value, record) returning an Outcome.
Outcomes combine with ``concat``: failures absorb successes, and failure
mappings merge with left-hand messages first.

Usage:
    from formstate.validation import validate, rules

    schema = {
        "email": [rules.is_present(), rules.is_email()],
        "tos": [rules.is_true()],
    }
    outcome = validate(schema, {"email": "", "tos": False})
"""

from formstate.validation import rules
from formstate.validation.engine import combine_rules, validate
from formstate.validation.loader import (
    DocumentIssue,
    RuleSetError,
    build_ruleset,
    check_ruleset_document,
    load_ruleset,
)
from formstate.validation.registry import RuleRegistry, register_builtin_rules
from formstate.validation.rules import Rule
from formstate.validation.types import (
    Fail,
    Failures,
    Ok,
    Outcome,
    RuleDefinition,
    RuleSet,
    merge_failures,
)

__all__ = [
    # Types
    "Fail",
    "Failures",
    "Ok",
    "Outcome",
    "Rule",
    "RuleDefinition",
    "RuleSet",
    "merge_failures",
    # Engine
    "combine_rules",
    "rules",
    "validate",
    # Registry
    "RuleRegistry",
    "register_builtin_rules",
    # Documents
    "DocumentIssue",
    "RuleSetError",
    "build_ruleset",
    "check_ruleset_document",
    "load_ruleset",
]
