"""
Variable contract checks for prompt templates.

validate_variables() is the gate in front of rendering: a non-empty result
means the template must not be rendered.
"""

import re
from typing import Any

from fastkit.lib.constants import VARIABLE_TYPES
from fastkit.prompts.models import VariableDefinition

__all__ = ["validate_variables", "parse_definitions", "validate_definitions", "apply_defaults"]


def _type_error(definition: VariableDefinition, value: Any) -> str | None:
    if definition.type == "string" and not isinstance(value, str):
        return f"Variable {definition.name} must be a string"
    if definition.type == "boolean" and not isinstance(value, bool):
        return f"Variable {definition.name} must be a boolean"
    if definition.type == "list" and not isinstance(value, (list, tuple)):
        return f"Variable {definition.name} must be a list"
    # code and file_path are free text at this layer
    return None


def validate_variables(definitions: list[VariableDefinition], values: dict[str, Any]) -> list[str]:
    """
    Check supplied values against a template's variable definitions.

    Definitions are checked in declaration order so reports are reproducible.
    Presence, not truthiness, satisfies `required`: an empty string passes.
    A value of None is treated as explicitly cleared and skips type and
    length checks.

    Args:
        definitions: Variable contract, in declaration order
        values: Supplied variable values

    Returns:
        Error messages; empty if every definition passes
    """
    errors = []

    for definition in definitions:
        name = definition.name
        if definition.required and name not in values:
            errors.append(f"Missing required variable: {name}")
            continue

        value = values.get(name)
        if value is None:
            continue

        type_error = _type_error(definition, value)
        if type_error:
            errors.append(type_error)

        rules = definition.validation
        if not rules:
            continue

        if hasattr(value, "__len__"):
            if rules.min_length and len(value) < rules.min_length:
                errors.append(f"Variable {name} must be at least {rules.min_length} characters")
            if rules.max_length is not None and len(value) > rules.max_length:
                errors.append(f"Variable {name} must be at most {rules.max_length} characters")

        if rules.allowed_values is not None and value not in rules.allowed_values:
            allowed = ", ".join(str(v) for v in rules.allowed_values)
            errors.append(f"Variable {name} must be one of: {allowed}")

        if rules.pattern and isinstance(value, str) and not re.search(rules.pattern, value):
            errors.append(f"Variable {name} must match pattern: {rules.pattern}")

    return errors


def parse_definitions(raw: list) -> tuple[list[VariableDefinition], list[str]]:
    """Turn user-supplied definition mappings into VariableDefinitions.

    Returns:
        (definitions, errors) - definitions that could not be parsed are
        reported in errors and left out
    """
    definitions = []
    errors = []
    for index, item in enumerate(raw or []):
        if not isinstance(item, dict):
            errors.append(f"variables[{index}]: must be a mapping")
            continue
        if not item.get("name"):
            errors.append(f"variables[{index}]: name is required")
            continue
        validation = item.get("validation")
        if validation is not None and not isinstance(validation, dict):
            errors.append(f"variables[{index}]: validation must be a mapping")
            continue
        definitions.append(VariableDefinition.from_dict(item))
    return definitions, errors


def validate_definitions(definitions: list[VariableDefinition]) -> list[str]:
    """Check a variable contract itself before it is stored."""
    errors = []
    seen = set()

    for definition in definitions:
        name = definition.name
        if name in seen:
            errors.append(f"Duplicate variable name: {name}")
        seen.add(name)

        if definition.type not in VARIABLE_TYPES:
            errors.append(
                f"Variable {name} has unknown type '{definition.type}' "
                f"(expected one of: {', '.join(VARIABLE_TYPES)})"
            )

        rules = definition.validation
        if not rules:
            continue
        if rules.pattern:
            try:
                re.compile(rules.pattern)
            except re.error as e:
                errors.append(f"Variable {name} has invalid pattern: {e}")
        if (rules.min_length is not None and rules.max_length is not None
                and rules.min_length > rules.max_length):
            errors.append(f"Variable {name} has min_length greater than max_length")

    return errors


def apply_defaults(definitions: list[VariableDefinition], values: dict[str, Any]) -> dict[str, Any]:
    """Copy values, filling declared defaults for absent variables."""
    merged = dict(values)
    for definition in definitions:
        if definition.name not in merged and definition.default is not None:
            merged[definition.name] = definition.default
    return merged
