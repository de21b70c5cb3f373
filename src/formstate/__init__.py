"""formstate: validated form state for interactive UIs.

Describe fields, per-field rules and a submit action; get back values,
errors, visited flags and a submitting flag that stay consistent after every
change.

Usage:
    from formstate import FormSession
    from formstate.validation import rules

    session = FormSession(
        schema={"email": [rules.is_present(), rules.is_email()]},
        on_submit=send,
        initial_values={"email": ""},
    )
"""

from formstate.config import FormConfig
from formstate.form import FieldChange, FormSession, FormSnapshot, FormState
from formstate.validation import Fail, Ok, Rule, rules, validate

__all__ = [
    "Fail",
    "FieldChange",
    "FormConfig",
    "FormSession",
    "FormSnapshot",
    "FormState",
    "Ok",
    "Rule",
    "rules",
    "validate",
]
