"""Rule registry for formstate.

Maps rule type names, as they appear in declarative rule sets, to factories
that build configured ``Rule`` instances.
"""

import re
from collections.abc import Callable

from formstate.validation.rules import (
    Rule,
    equals,
    is_email,
    is_present,
    is_true,
    max_chars,
    max_val,
    min_chars,
    min_val,
    pattern,
)
from formstate.validation.types import RuleDefinition

RuleFactory = Callable[[RuleDefinition], Rule]


class RuleRegistry:
    """Registry for rule types.

    Rule types must be registered before a declarative rule set can refer
    to them. The built-ins are installed by ``register_builtin_rules()``;
    applications register their own at startup.

    Example:
        RuleRegistry.register("postcode", lambda d: pattern(r"^\\d{5}$", d.message))
        rule = RuleRegistry.create(RuleDefinition(type="postcode"))
    """

    _factories: dict[str, RuleFactory] = {}

    @classmethod
    def register(cls, name: str, factory: RuleFactory) -> None:
        """Register a factory that builds rules from definitions.

        Idempotent - re-registering the same name is a no-op.

        Args:
            name: Rule type name used in rule-set documents
            factory: Function that takes a RuleDefinition and returns a Rule
        """
        if name in cls._factories:
            return  # Already registered, no-op
        cls._factories[name] = factory

    @classmethod
    def create(cls, definition: RuleDefinition) -> Rule:
        """Create a rule from a definition.

        Raises:
            ValueError: If the rule type is not registered, or its
                parameters are missing
        """
        factory = cls._factories.get(definition.type)
        if factory is None:
            raise ValueError(
                f"Rule type '{definition.type}' is not registered. "
                "Available types: " + ", ".join(cls.list_registered())
            )
        try:
            return factory(definition)
        except KeyError as e:
            raise ValueError(
                f"Rule type '{definition.type}' requires parameter {e}"
            ) from e
        except re.error as e:
            raise ValueError(
                f"Rule type '{definition.type}' has an invalid pattern: {e}"
            ) from e

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a rule type is registered."""
        return name in cls._factories

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered rule type names."""
        return sorted(cls._factories)

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._factories.clear()


# =============================================================================
# Built-in Factories
# =============================================================================


def _pattern_factory(definition: RuleDefinition) -> Rule:
    return pattern(definition.params["regex"], definition.message)


def _max_chars_factory(definition: RuleDefinition) -> Rule:
    return max_chars(definition.params["max"], definition.message)


def _min_chars_factory(definition: RuleDefinition) -> Rule:
    return min_chars(definition.params["min"], definition.message)


def _min_val_factory(definition: RuleDefinition) -> Rule:
    return min_val(definition.params["min"], definition.message)


def _max_val_factory(definition: RuleDefinition) -> Rule:
    return max_val(definition.params["max"], definition.message)


def _equals_factory(definition: RuleDefinition) -> Rule:
    return equals(definition.params["field"], definition.message)


def register_builtin_rules() -> None:
    """Register all built-in rules with the RuleRegistry."""
    RuleRegistry.register("isPresent", lambda d: is_present(d.message))
    RuleRegistry.register("pattern", _pattern_factory)
    RuleRegistry.register("isEmail", lambda d: is_email(d.message))
    RuleRegistry.register("isTrue", lambda d: is_true(d.message))
    RuleRegistry.register("maxChars", _max_chars_factory)
    RuleRegistry.register("minChars", _min_chars_factory)
    RuleRegistry.register("minVal", _min_val_factory)
    RuleRegistry.register("maxVal", _max_val_factory)
    RuleRegistry.register("equals", _equals_factory)
