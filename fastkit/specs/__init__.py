"""
Specification family.

PRDs, RFCs, ADRs, user stories and API specs: schema validation,
completeness scoring and export.
"""

from fastkit.specs.models import Spec, SpecMetadata
from fastkit.specs.schemas import Schema, SchemaIssue, SchemaStatus, get_schema
from fastkit.specs.export import export, to_markdown, to_prompt
from fastkit.specs.manager import SpecManager

__all__ = [
    "Spec",
    "SpecMetadata",
    "Schema",
    "SchemaIssue",
    "SchemaStatus",
    "get_schema",
    "export",
    "to_markdown",
    "to_prompt",
    "SpecManager",
]
