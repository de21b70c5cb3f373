"""Core types for the formstate validation engine.

Validation outcomes form a monoid under ``concat``:
- Ok + Ok = Ok
- Ok + Fail(m) = Fail(m) + Ok = Fail(m)
- Fail(m1) + Fail(m2) = Fail(merge_failures(m1, m2))

Failures are data, never exceptions. A failing rule contributes a mapping of
field name to an ordered list of messages, and merging keeps the left-hand
messages ahead of the right-hand ones.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from formstate.validation.rules import Rule


Failures: TypeAlias = dict[str, list[str]]


def merge_failures(
    left: Mapping[str, Sequence[str]],
    right: Mapping[str, Sequence[str]],
) -> Failures:
    """Union two failure mappings.

    Keys present in both keep ``left``'s messages before ``right``'s.
    Neither input is modified.
    """
    merged: Failures = {key: list(messages) for key, messages in left.items()}
    for key, messages in right.items():
        merged[key] = merged.get(key, []) + list(messages)
    return merged


@dataclass(frozen=True)
class Ok:
    """A passing outcome. Carries nothing beyond the fact that it passed."""

    @property
    def is_fail(self) -> bool:
        return False

    def concat(self, other: "Outcome") -> "Outcome":
        return other

    def fold(
        self,
        on_fail: Callable[[Failures], Any],
        on_ok: Callable[[], Any],
    ) -> Any:
        return on_ok()

    def errors(self) -> Failures:
        return {}


@dataclass(frozen=True)
class Fail:
    """A failing outcome.

    Attributes:
        failures: Field name -> non-empty, ordered list of messages
    """

    failures: Failures

    def __post_init__(self) -> None:
        if not self.failures:
            raise ValueError("Fail requires at least one failing field")

    @property
    def is_fail(self) -> bool:
        return True

    def concat(self, other: "Outcome") -> "Outcome":
        if isinstance(other, Fail):
            return Fail(merge_failures(self.failures, other.failures))
        return self

    def fold(
        self,
        on_fail: Callable[[Failures], Any],
        on_ok: Callable[[], Any],
    ) -> Any:
        return on_fail(self.errors())

    def errors(self) -> Failures:
        return {key: list(messages) for key, messages in self.failures.items()}

    @classmethod
    def single(cls, field_name: str, message: str) -> "Fail":
        """Failure with one message for one field."""
        return cls({field_name: [message]})


@dataclass
class RuleDefinition:
    """Declarative definition of a rule (from YAML or a dict).

    This is the declarative representation; it gets resolved to an actual
    Rule by the RuleRegistry.

    Attributes:
        type: Rule type name ("isPresent", "maxChars", "equals", ...)
        params: Type-specific parameters
        message: Optional custom error message
    """

    type: str
    params: dict[str, Any] = field(default_factory=dict)
    message: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleDefinition":
        """Create RuleDefinition from YAML/JSON dict."""
        return cls(
            type=data["type"],
            params=dict(data.get("params") or {}),
            message=data.get("message"),
        )


Outcome: TypeAlias = Ok | Fail

# A rule body: (field name, field value, whole record) -> Outcome
Runner: TypeAlias = Callable[[str, Any, Mapping[str, Any]], Outcome]

# Field name -> ordered rules for that field
RuleSet: TypeAlias = Mapping[str, Sequence["Rule"]]
