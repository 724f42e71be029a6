"""
JSON Schema validation for fast-kit.

Schemas live in fastkit/schemas/<name>.schema.json. They cover both the
stored document envelopes ("prompt_template", "spec_document") and the
per-type specification content ("prd", "rfc", "adr").
"""

import json
from pathlib import Path
from typing import Any

import jsonschema

__all__ = ["ValidationError", "SCHEMAS_DIR", "load_schema", "collect_errors", "validate", "validate_before_write"]

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


class ValidationError(Exception):
    """Schema validation failed."""

    def __init__(self, schema_name: str, message: str, path: str = None):
        self.schema_name = schema_name
        self.path = path
        super().__init__(f"[{schema_name}] {message}" + (f" at {path}" if path else ""))


# Cache loaded schemas
_schema_cache: dict[str, dict] = {}


def load_schema(schema_name: str) -> dict:
    """Load schema by name, with caching."""
    if schema_name not in _schema_cache:
        schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
        if not schema_path.exists():
            raise ValidationError(schema_name, f"Schema file not found: {schema_path}")
        _schema_cache[schema_name] = json.loads(schema_path.read_text())
    return _schema_cache[schema_name]


def _format_path(error: jsonschema.ValidationError) -> str:
    return ".".join(str(p) for p in error.absolute_path) if error.absolute_path else "(root)"


def collect_errors(data: Any, schema: dict) -> list[tuple[str, str]]:
    """
    Return every violation of schema as (path, message) pairs.

    Sorted by path then message so reports are reproducible regardless of
    the order jsonschema walks the instance.
    """
    validator_cls = jsonschema.validators.validator_for(schema)
    validator = validator_cls(schema)
    issues = [(_format_path(e), e.message) for e in validator.iter_errors(data)]
    return sorted(issues)


def validate(data: Any, schema_name: str) -> None:
    """
    Validate data against named schema.

    Args:
        data: Value to validate
        schema_name: Schema name (e.g., "prompt_template", "prd")

    Raises:
        ValidationError: If validation fails (first violation only)
    """
    schema = load_schema(schema_name)
    issues = collect_errors(data, schema)
    if issues:
        path, message = issues[0]
        raise ValidationError(schema_name, message, path)


def validate_before_write(data: dict, schema_name: str, filepath: Path) -> None:
    """
    Validate data before writing to file. Ensures we never write invalid data.

    Args:
        data: Dictionary to validate and write
        schema_name: Schema name to validate against
        filepath: Where the data will be written (for error context)

    Raises:
        ValidationError: If data doesn't match schema
    """
    try:
        validate(data, schema_name)
    except ValidationError as e:
        raise ValidationError(
            schema_name,
            f"Refusing to write invalid data to {filepath}: {e}"
        ) from None
