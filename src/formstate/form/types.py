"""Form state machine types.

Defines the data the form reducer works on:
- FormState: values, errors and visited flags for one form session
- FieldChange: a field-change notification from the rendering layer
- Commands: SetValues, SetErrors, ChangeField, Reset
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias


@dataclass(frozen=True)
class FormState:
    """One immutable snapshot of a form session.

    Attributes:
        values: Current field values
        errors: Field name -> messages, derived from validating ``values``
        visited: Field name -> True once the field has been changed
    """

    values: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)
    visited: dict[str, bool] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) != 0


class ChangeKind(Enum):
    """How a field change carries its value.

    TEXT: native text-like input, value read from ``value``
    CHECKBOX: native checkbox, value read from ``checked``
    CUSTOM: non-native control (date picker, select widget), opaque ``value``
    """

    TEXT = "text"
    CHECKBOX = "checkbox"
    CUSTOM = "custom"


# Native input types whose value is read as-is from ``value``
_TEXT_INPUT_TYPES = frozenset({
    "text",
    "number",
    "email",
    "password",
    "search",
    "tel",
    "url",
    "textarea",
    "hidden",
    "radio",
    "select",
})


@dataclass(frozen=True)
class FieldChange:
    """A change notification for a single field.

    Attributes:
        name: Field name
        value: New value for TEXT and CUSTOM changes
        checked: New state for CHECKBOX changes
        kind: Which of ``value``/``checked`` holds the new value
    """

    name: str
    value: Any = None
    checked: bool = False
    kind: ChangeKind = ChangeKind.TEXT

    @classmethod
    def from_target(cls, target: Mapping[str, Any]) -> "FieldChange":
        """Create a FieldChange from a renderer's target descriptor.

        Accepts ``{"name", "value"}``, ``{"name", "checked", "kind": "checkbox"}``
        and ``{"name", "kind": <control>, "value"}`` for non-native controls.
        The DOM key ``"type"`` is read when ``"kind"`` is absent; neither
        means a text input.
        """
        input_type = target.get("kind") or target.get("type") or "text"
        if isinstance(input_type, ChangeKind):
            input_type = input_type.value
        if input_type == ChangeKind.CHECKBOX.value:
            return cls(
                name=target["name"],
                checked=bool(target.get("checked", False)),
                kind=ChangeKind.CHECKBOX,
            )
        kind = ChangeKind.TEXT if input_type in _TEXT_INPUT_TYPES else ChangeKind.CUSTOM
        return cls(name=target["name"], value=target.get("value"), kind=kind)


# =============================================================================
# Commands
# =============================================================================


@dataclass(frozen=True)
class SetValues:
    """Replace all values. Errors and visited flags are left alone."""

    values: Mapping[str, Any]


@dataclass(frozen=True)
class SetErrors:
    """Replace all errors."""

    errors: Mapping[str, list[str]]


@dataclass(frozen=True)
class ChangeField:
    """Apply one field change and mark the field visited."""

    change: FieldChange


@dataclass(frozen=True)
class Reset:
    """Replace values and clear errors and visited flags."""

    values: Mapping[str, Any]


Command: TypeAlias = SetValues | SetErrors | ChangeField | Reset
