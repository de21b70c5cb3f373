"""
validation/loader.py: declarative rule sets from YAML documents.

A rule-set document maps each field to its ordered rule definitions:

    fields:
      email:
        - type: isPresent
          message: Email is required
        - type: isEmail
      password:
        - type: minChars
          params: {min: 8}

Documents are checked against ``schemas/ruleset.schema.json`` and every rule
type must be registered with the RuleRegistry before the document is built.

Usage:
    from formstate.validation.loader import load_ruleset

    schema = load_ruleset(Path("forms/signup.yaml"))
    outcome = validate(schema, values)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from formstate.validation.registry import RuleRegistry
from formstate.validation.rules import Rule
from formstate.validation.types import RuleDefinition

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------

_SCHEMAS_DIR = Path(__file__).parent / "schemas"
_RULESET_SCHEMA = "ruleset.schema.json"


@dataclass
class DocumentIssue:
    """A single problem found in a rule-set document."""

    source: str
    message: str
    path: str = ""          # location within the document, e.g. "fields/email[0]"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[ERROR] {self.source}{loc}: {self.message}"


class RuleSetError(ValueError):
    """Raised when a rule-set document cannot be turned into a rule set."""

    def __init__(self, issues: list[DocumentIssue]):
        self.issues = issues
        super().__init__("; ".join(str(issue) for issue in issues))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema() -> dict[str, Any]:
    with (_SCHEMAS_DIR / _RULESET_SCHEMA).open() as fh:
        return json.load(fh)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _read_yaml(path: Path) -> tuple[Any, list[DocumentIssue]]:
    try:
        with path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return None, [DocumentIssue(source=str(path), message=f"YAML parse error: {exc}")]

    if raw is None:
        return None, [
            DocumentIssue(source=str(path), message="File is empty or contains only whitespace")
        ]
    return raw, []


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def check_ruleset_document(doc: Any, source: str = "<document>") -> list[DocumentIssue]:
    """
    Check a parsed rule-set document.

    Structural problems are reported from the JSON Schema. Structurally valid
    documents are then checked for unregistered rule types.

    Returns:
        A list of :class:`DocumentIssue` objects (empty on success).
    """
    validator = Draft202012Validator(_load_schema())
    issues = [
        DocumentIssue(source=source, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=_json_path)
    ]
    if issues:
        return issues

    for field_name, definitions in doc["fields"].items():
        for index, data in enumerate(definitions):
            if not RuleRegistry.is_registered(data["type"]):
                issues.append(
                    DocumentIssue(
                        source=source,
                        message=f"Unknown rule type '{data['type']}'",
                        path=f"fields/{field_name}[{index}]",
                    )
                )
    return issues


def build_ruleset(doc: Any, source: str = "<document>") -> dict[str, tuple[Rule, ...]]:
    """
    Build a rule set from a parsed document.

    Raises:
        RuleSetError: If the document has issues, or a rule is missing a
            required parameter.
    """
    issues = check_ruleset_document(doc, source)
    if issues:
        raise RuleSetError(issues)

    ruleset: dict[str, tuple[Rule, ...]] = {}
    for field_name, definitions in doc["fields"].items():
        built = []
        for index, data in enumerate(definitions):
            try:
                built.append(RuleRegistry.create(RuleDefinition.from_dict(data)))
            except ValueError as exc:
                issues.append(
                    DocumentIssue(
                        source=source,
                        message=str(exc),
                        path=f"fields/{field_name}[{index}]",
                    )
                )
        ruleset[field_name] = tuple(built)

    if issues:
        raise RuleSetError(issues)

    logger.debug("Built rule set from %s with %d field(s)", source, len(ruleset))
    return ruleset


def load_ruleset(path: Path) -> dict[str, tuple[Rule, ...]]:
    """
    Load and build a rule set from a YAML file.

    Raises:
        RuleSetError: If the file cannot be parsed or has issues.
    """
    doc, issues = _read_yaml(path)
    if issues:
        raise RuleSetError(issues)
    return build_ruleset(doc, str(path))
