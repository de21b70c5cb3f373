"""Validation rules and the built-in rule library.

A rule is a pure function ``(field_name, value, record) -> Outcome`` wrapped in
a ``Rule`` so it can be combined with ``concat``. Combining two rules runs both
and concatenates their outcomes; nothing short-circuits, so every failing rule
for a field contributes its message.

Available rules:
- is_present: value must be truthy
- pattern: value must be a string matching a regex
- is_email: pattern specialized for email addresses
- is_true: value must be exactly True
- max_chars / min_chars: string length bounds
- min_val / max_val: numeric bounds
- equals: value must equal another field's current value
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from formstate.validation.types import Fail, Ok, Outcome, Runner


# =============================================================================
# Rule
# =============================================================================


@dataclass(frozen=True)
class Rule:
    """A single validation check for one field.

    Attributes:
        run: The rule body
        name: Label used in logs and reprs (e.g. "maxChars")
    """

    run: Runner
    name: str = "rule"

    def __call__(self, field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        return self.run(field_name, value, record)

    def concat(self, other: "Rule") -> "Rule":
        """Combine with another rule; this rule's messages come first."""

        def combined(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
            return self.run(field_name, value, record).concat(
                other.run(field_name, value, record)
            )

        return Rule(run=combined, name=f"{self.name}+{other.name}")

    def __repr__(self) -> str:
        return f"Rule({self.name})"


# =============================================================================
# Patterns
# =============================================================================

# RFC 5322-light: quoted or dotted local part, bracketed IPv4 or dotted domain
EMAIL_PATTERN = re.compile(
    r"^(([^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*)|(\".+\"))"
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])"
    r"|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)


def _not_a_string(field_name: str) -> Fail:
    return Fail.single(field_name, f"{field_name} must be a string")


def _not_a_number(field_name: str) -> Fail:
    return Fail.single(field_name, f"{field_name} must be a number")


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a numeric field value
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# =============================================================================
# Built-in Rules
# =============================================================================


def is_present(message: str | None = None) -> Rule:
    """Fail when the value is falsy.

    This is a truthiness check, not a type-aware presence check: ``""``,
    ``False``, ``0``, ``None`` and empty containers all count as absent. One
    rule therefore covers text, number and checkbox fields alike. Callers who
    need ``0`` or ``False`` to count as present should use a dedicated rule.
    """

    def run(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        if value:
            return Ok()
        return Fail.single(field_name, message or f"{field_name} is not present")

    return Rule(run=run, name="isPresent")


def pattern(regex: str | re.Pattern[str], message: str | None = None) -> Rule:
    """Fail unless the value is a string in which ``regex`` matches.

    Non-string values always fail with a type message.
    """
    compiled = re.compile(regex) if isinstance(regex, str) else regex

    def run(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        if not isinstance(value, str):
            return _not_a_string(field_name)
        if compiled.search(value):
            return Ok()
        return Fail.single(field_name, message or f"{field_name} bad format")

    return Rule(run=run, name="pattern")


def is_email(message: str | None = None) -> Rule:
    """``pattern`` specialized with ``EMAIL_PATTERN``."""

    def run(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        check = pattern(EMAIL_PATTERN, message or f"{field_name} has a bad email format")
        return check(field_name, value, record)

    return Rule(run=run, name="isEmail")


def is_true(message: str | None = None) -> Rule:
    """Fail unless the value is exactly ``True``."""

    def run(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        if value is True:
            return Ok()
        return Fail.single(field_name, message or f"{field_name} must be set")

    return Rule(run=run, name="isTrue")


def max_chars(limit: int, message: str | None = None) -> Rule:
    """Fail unless the value is a string shorter than ``limit``.

    The bound is strict: a string of exactly ``limit`` characters fails.
    """

    def run(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        if not isinstance(value, str):
            return _not_a_string(field_name)
        if len(value) < limit:
            return Ok()
        return Fail.single(
            field_name,
            message or f"{field_name} has to be shorter than {limit} chars",
        )

    return Rule(run=run, name="maxChars")


def min_chars(limit: int, message: str | None = None) -> Rule:
    """Fail unless the value is a string of at least ``limit`` characters."""

    def run(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        if not isinstance(value, str):
            return _not_a_string(field_name)
        if len(value) >= limit:
            return Ok()
        return Fail.single(
            field_name,
            message or f"{field_name} has to be at least {limit} chars",
        )

    return Rule(run=run, name="minChars")


def min_val(limit: float, message: str | None = None) -> Rule:
    def run(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        if not _is_number(value):
            return _not_a_number(field_name)
        if value >= limit:
            return Ok()
        return Fail.single(field_name, message or f"{field_name} has to be at least {limit}")

    return Rule(run=run, name="minVal")


def max_val(limit: float, message: str | None = None) -> Rule:
    def run(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        if not _is_number(value):
            return _not_a_number(field_name)
        if value <= limit:
            return Ok()
        return Fail.single(field_name, message or f"{field_name} has to be at most {limit}")

    return Rule(run=run, name="maxVal")


def equals(other_field: str, message: str | None = None) -> Rule:
    """Fail unless the value equals ``other_field``'s value in the same record.

    The comparison value is read from the record each time the rule runs, so
    it always reflects the other field's current value.
    """

    def run(field_name: str, value: Any, record: Mapping[str, Any]) -> Outcome:
        if value == record.get(other_field):
            return Ok()
        return Fail.single(
            field_name,
            message or f"{field_name} does not match {other_field}",
        )

    return Rule(run=run, name="equals")
