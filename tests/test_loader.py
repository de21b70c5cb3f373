"""Tests for the rule registry and declarative rule-set documents."""

import textwrap
from pathlib import Path

import pytest

from formstate.validation.engine import validate
from formstate.validation.loader import (
    RuleSetError,
    build_ruleset,
    check_ruleset_document,
    load_ruleset,
)
from formstate.validation.registry import RuleRegistry, register_builtin_rules
from formstate.validation.rules import Rule, pattern
from formstate.validation.types import Ok, RuleDefinition


@pytest.fixture(autouse=True)
def setup_registry():
    """Register built-in rules before each test."""
    RuleRegistry.clear()
    register_builtin_rules()
    yield
    RuleRegistry.clear()


def write_yaml(tmp_path: Path, content: str, name: str = "signup.yaml") -> Path:
    path = tmp_path / name
    path.write_text(textwrap.dedent(content))
    return path


SIGNUP_YAML = """
    description: Signup form
    fields:
      name:
        - type: isPresent
          message: ERROR_NAME_NOT_PRESENT
      email:
        - type: isPresent
        - type: isEmail
          message: Bad email format
      password:
        - type: isPresent
        - type: minChars
          params: {min: 8}
        - type: maxChars
          params: {max: 30}
      password2:
        - type: equals
          params: {field: password}
      age:
        - type: minVal
          params: {min: 18}
        - type: maxVal
          params: {max: 130}
      zip:
        - type: pattern
          params: {regex: '^\\d{5}$'}
      tos:
        - type: isTrue
"""


# =============================================================================
# RuleRegistry
# =============================================================================


class TestRuleRegistry:
    def test_builtins_registered(self):
        assert RuleRegistry.list_registered() == [
            "equals",
            "isEmail",
            "isPresent",
            "isTrue",
            "maxChars",
            "maxVal",
            "minChars",
            "minVal",
            "pattern",
        ]

    def test_create_with_message(self):
        rule = RuleRegistry.create(RuleDefinition(type="isPresent", message="Required"))
        assert rule("name", "", {}).errors() == {"name": ["Required"]}

    def test_create_with_params(self):
        rule = RuleRegistry.create(RuleDefinition(type="maxChars", params={"max": 3}))
        assert rule("code", "abc", {}).is_fail
        assert rule("code", "ab", {}) == Ok()

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="not registered"):
            RuleRegistry.create(RuleDefinition(type="nope"))

    def test_missing_param_raises(self):
        with pytest.raises(ValueError, match="requires parameter 'max'"):
            RuleRegistry.create(RuleDefinition(type="maxChars"))

    def test_invalid_pattern_raises(self):
        with pytest.raises(ValueError, match="invalid pattern"):
            RuleRegistry.create(RuleDefinition(type="pattern", params={"regex": "("}))

    def test_register_is_idempotent(self):
        first = lambda d: pattern(r"^\d{5}$", d.message)  # noqa: E731
        second = lambda d: pattern(r"^x$", d.message)  # noqa: E731
        RuleRegistry.register("postcode", first)
        RuleRegistry.register("postcode", second)
        rule = RuleRegistry.create(RuleDefinition(type="postcode"))
        assert rule("zip", "12345", {}) == Ok()

    def test_custom_rule_type(self):
        RuleRegistry.register(
            "upper",
            lambda d: Rule(
                run=lambda field, value, record: Ok(),
                name="upper",
            ),
        )
        assert RuleRegistry.is_registered("upper")

    def test_definition_from_dict(self):
        definition = RuleDefinition.from_dict({"type": "minChars", "params": {"min": 2}})
        assert definition == RuleDefinition(type="minChars", params={"min": 2}, message=None)


# =============================================================================
# Documents
# =============================================================================


class TestCheckDocument:
    def test_valid_document(self):
        doc = {"fields": {"name": [{"type": "isPresent"}]}}
        assert check_ruleset_document(doc) == []

    def test_missing_fields_key(self):
        issues = check_ruleset_document({"rules": {}})
        assert issues
        assert any("fields" in issue.message for issue in issues)

    def test_rule_without_type(self):
        issues = check_ruleset_document({"fields": {"name": [{"message": "x"}]}})
        assert len(issues) == 1
        assert issues[0].path == "fields/name[0]"

    def test_unknown_rule_type(self):
        issues = check_ruleset_document(
            {"fields": {"name": [{"type": "isPresent"}, {"type": "isBanana"}]}},
            source="form.yaml",
        )
        assert len(issues) == 1
        assert issues[0].path == "fields/name[1]"
        assert str(issues[0]) == "[ERROR] form.yaml at fields/name[1]: Unknown rule type 'isBanana'"

    def test_not_a_mapping(self):
        assert check_ruleset_document(["fields"])


class TestBuildRuleset:
    def test_builds_rules_in_order(self):
        ruleset = build_ruleset({
            "fields": {
                "password": [
                    {"type": "isPresent", "message": "R1"},
                    {"type": "minChars", "params": {"min": 8}, "message": "R2"},
                ]
            }
        })
        assert validate(ruleset, {"password": ""}).errors() == {"password": ["R1", "R2"]}

    def test_missing_param_is_reported(self):
        with pytest.raises(RuleSetError) as exc_info:
            build_ruleset({"fields": {"age": [{"type": "minVal"}]}})
        assert exc_info.value.issues[0].path == "fields/age[0]"

    def test_invalid_document_raises_with_issues(self):
        with pytest.raises(RuleSetError) as exc_info:
            build_ruleset({"fields": {"name": "isPresent"}})
        assert exc_info.value.issues

    def test_ruleset_error_is_value_error(self):
        with pytest.raises(ValueError):
            build_ruleset({})


class TestLoadRuleset:
    def test_load_signup(self, tmp_path):
        ruleset = load_ruleset(write_yaml(tmp_path, SIGNUP_YAML))
        assert list(ruleset) == ["name", "email", "password", "password2", "age", "zip", "tos"]

        errors = validate(
            ruleset,
            {
                "name": "",
                "email": "nope",
                "password": "short",
                "password2": "other",
                "age": 12,
                "zip": "1234",
                "tos": False,
            },
        ).errors()
        assert errors == {
            "name": ["ERROR_NAME_NOT_PRESENT"],
            "email": ["Bad email format"],
            "password": ["password has to be at least 8 chars"],
            "password2": ["password2 does not match password"],
            "age": ["age has to be at least 18"],
            "zip": ["zip bad format"],
            "tos": ["tos must be set"],
        }

    def test_load_valid_record(self, tmp_path):
        ruleset = load_ruleset(write_yaml(tmp_path, SIGNUP_YAML))
        record = {
            "name": "Ada",
            "email": "ada@example.com",
            "password": "analytical",
            "password2": "analytical",
            "age": 36,
            "zip": "12345",
            "tos": True,
        }
        assert validate(ruleset, record) == Ok()

    def test_yaml_parse_error(self, tmp_path):
        path = write_yaml(tmp_path, "fields: [unclosed\n")
        with pytest.raises(RuleSetError, match="YAML parse error"):
            load_ruleset(path)

    def test_empty_file(self, tmp_path):
        path = write_yaml(tmp_path, "")
        with pytest.raises(RuleSetError, match="empty"):
            load_ruleset(path)
