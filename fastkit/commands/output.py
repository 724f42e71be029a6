"""
Shared output helpers for fk commands.
"""

import sys
from pathlib import Path

import yaml

from fastkit.tools import ToolResult


def print_error(result: ToolResult) -> int:
    """Print an error payload to stderr. Returns exit code 1."""
    payload = result.payload if isinstance(result.payload, dict) else {"error": str(result.payload)}
    print(f"ERROR: {payload.get('error', 'unknown error')}", file=sys.stderr)
    for item in payload.get("validation_errors", []):
        print(f"  - {item}", file=sys.stderr)
    return 1


def print_result(result: ToolResult) -> int:
    """Print a payload (JSON for dicts, raw for text). Returns exit code."""
    if result.is_error:
        return print_error(result)
    print(result.text())
    return 0


def truncate(text: str, width: int) -> str:
    return text[:width - 3] + "..." if len(text) > width else text


def read_data_file(path: str) -> object:
    """Load a YAML (or JSON, which is valid YAML) data file."""
    return yaml.safe_load(Path(path).read_text())
