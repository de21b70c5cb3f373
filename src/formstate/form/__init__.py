"""formstate form state machine.

A FormSession holds the values, errors and visited flags for one form and
applies every transition through a pure reducer:
- SetValues: replace all values
- SetErrors: replace all errors
- ChangeField: apply one field change and mark it visited
- Reset: replace values and clear errors and visited flags

Every transition that changes values re-runs validation and replaces the
errors with the fresh outcome.
"""

from formstate.form.lifecycle import SessionLifecycle
from formstate.form.reducer import apply, initial_state, touches_values
from formstate.form.session import FormSession, FormSnapshot
from formstate.form.types import (
    ChangeField,
    ChangeKind,
    Command,
    FieldChange,
    FormState,
    Reset,
    SetErrors,
    SetValues,
)

__all__ = [
    # Types
    "ChangeKind",
    "FieldChange",
    "FormState",
    # Commands
    "ChangeField",
    "Command",
    "Reset",
    "SetErrors",
    "SetValues",
    # Reducer
    "apply",
    "initial_state",
    "touches_values",
    # Session
    "FormSession",
    "FormSnapshot",
    "SessionLifecycle",
]
