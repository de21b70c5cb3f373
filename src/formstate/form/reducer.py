"""Form reducer.

``apply`` is the single arbitration point for form state: it takes the
current state and a command and returns a new state. States are never
modified in place, so earlier snapshots stay valid.
"""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from formstate.form.types import (
    ChangeField,
    ChangeKind,
    Command,
    FormState,
    Reset,
    SetErrors,
    SetValues,
)


def initial_state(values: Mapping[str, Any]) -> FormState:
    """Build the starting state for a session: no errors, nothing visited."""
    return FormState(values=dict(values), errors={}, visited={})


def touches_values(command: Command) -> bool:
    """True when applying ``command`` replaces or changes the values."""
    return isinstance(command, (SetValues, ChangeField, Reset))


def apply(state: FormState, command: Command) -> FormState:
    """Apply a command to a state.

    Args:
        state: The current state (not modified)
        command: One of SetValues, SetErrors, ChangeField, Reset

    Returns:
        The new state

    Raises:
        TypeError: If ``command`` is not a known command
    """
    if isinstance(command, SetValues):
        return replace(state, values=dict(command.values))

    if isinstance(command, SetErrors):
        return replace(
            state,
            errors={key: list(messages) for key, messages in command.errors.items()},
        )

    if isinstance(command, ChangeField):
        change = command.change
        if change.kind == ChangeKind.CHECKBOX:
            value: Any = bool(change.checked)
        else:
            value = change.value
        return replace(
            state,
            values={**state.values, change.name: value},
            visited={**state.visited, change.name: True},
        )

    if isinstance(command, Reset):
        return FormState(values=dict(command.values), errors={}, visited={})

    raise TypeError(f"Unknown form command: {command!r}")
