"""
Export specifications to text.

Formats:
  yaml      - native stored form
  json      - machine-readable dump of the same structure
  markdown  - the same structure restated as headings, bullets and paragraphs
  prompt    - type-aware narrative for handing a spec to an LLM

The prompt format only projects the fields that matter for the spec's
template. Its sections are always emitted in the same order; a missing field
shows up as "N/A" rather than dropping the section.
"""

import json
from typing import Any, Callable

from fastkit.lib.constants import EXPORT_FORMATS
from fastkit.lib.errors import Unsupported
from fastkit.lib.render import build_section
from fastkit.lib.store import dump_yaml
from fastkit.specs.models import Spec

__all__ = ["to_yaml", "to_json", "to_markdown", "to_prompt", "export", "has_narrative", "MISSING"]

MISSING = "N/A"


def _humanize(key: Any) -> str:
    return str(key).replace("_", " ").replace("-", " ").title()


def _field(mapping: Any, key: str) -> Any:
    if isinstance(mapping, dict):
        return mapping.get(key)
    return None


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _text(value: Any) -> str:
    if value is None or value == "" or value == [] or value == {}:
        return MISSING
    return str(value)


def _inline(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(_inline(v) for v in value) if value else MISSING
    if isinstance(value, dict):
        return "; ".join(f"{k}: {_inline(v)}" for k, v in value.items()) if value else MISSING
    return _text(value)


def _bullets(items: Any, indent: str = "") -> str | None:
    lines = [f"{indent}- {_inline(item)}" for item in _as_list(items)]
    return "\n".join(lines) if lines else None


# ----------------------------------------------------------------------
# Generic dumps
# ----------------------------------------------------------------------

def to_yaml(spec: Spec) -> str:
    return dump_yaml(spec.to_dict())


def to_json(spec: Spec) -> str:
    return json.dumps(spec.to_dict(), indent=2, ensure_ascii=False, default=str)


def _restate(value: Any, level: int, lines: list[str]) -> None:
    """Append value to lines as markdown, mapping keys becoming headings."""
    if isinstance(value, dict):
        if not value:
            lines.extend([MISSING, ""])
        for key, sub in value.items():
            lines.extend([f"{'#' * min(level, 6)} {_humanize(key)}", ""])
            _restate(sub, level + 1, lines)
    elif isinstance(value, list):
        if not value:
            lines.append(MISSING)
        for item in value:
            if isinstance(item, dict) and item:
                pairs = list(item.items())
                first_key, first_val = pairs[0]
                lines.append(f"- **{_humanize(first_key)}**: {_inline(first_val)}")
                for key, sub in pairs[1:]:
                    lines.append(f"  - **{_humanize(key)}**: {_inline(sub)}")
            else:
                lines.append(f"- {_inline(item)}")
        lines.append("")
    else:
        lines.extend([_text(value), ""])


def to_markdown(spec: Spec) -> str:
    """Restate metadata and the full content tree as markdown."""
    meta = spec.metadata
    lines = [
        f"# {meta.title}",
        "",
        f"**Status**: {meta.status}",
        f"**Template**: {meta.template}",
        f"**Created**: {meta.created_at}",
        f"**Updated**: {meta.updated_at}",
    ]
    if meta.author:
        lines.append(f"**Author**: {meta.author}")
    if meta.tags:
        lines.append(f"**Tags**: {', '.join(meta.tags)}")
    lines.append("")

    if meta.description:
        lines.extend([meta.description, ""])

    if spec.content:
        _restate(spec.content, 2, lines)
    else:
        lines.extend(["_No content yet._", ""])

    return "\n".join(lines).rstrip("\n") + "\n"


# ----------------------------------------------------------------------
# Narrative (prompt) export
# ----------------------------------------------------------------------

def _prd_sections(content: dict) -> list[str]:
    overview = _field(content, "overview")
    requirements = _field(content, "requirements")

    overview_body = "\n".join([
        f"**Problem**: {_text(_field(overview, 'problem'))}",
        f"**Solution**: {_text(_field(overview, 'solution'))}",
    ])

    functional = []
    for idx, req in enumerate(_as_list(_field(requirements, "functional")), 1):
        functional.append(f"{idx}. **{_text(_field(req, 'title'))}** ({_text(_field(req, 'priority'))})")
        functional.append(f"   {_text(_field(req, 'description'))}")
        functional.append("   Acceptance Criteria:")
        functional.append(_bullets(_field(req, "acceptance_criteria"), indent="   ") or f"   - {MISSING}")

    non_functional = []
    for req in _as_list(_field(requirements, "non_functional")):
        line = f"- **{_text(_field(req, 'category'))}**: {_text(_field(req, 'requirement'))}"
        target = _field(req, "target")
        if target:
            line += f" (target: {target})"
        non_functional.append(line)

    return [
        build_section(overview_body, "## Overview"),
        build_section(_bullets(_field(overview, "target_users")), "## Target Users", MISSING),
        build_section(_bullets(_field(overview, "success_metrics")), "## Success Metrics", MISSING),
        build_section("\n".join(functional), "## Functional Requirements", MISSING),
        build_section("\n".join(non_functional), "## Non-Functional Requirements", MISSING),
    ]


def _rfc_sections(content: dict) -> list[str]:
    summary = _field(content, "summary")
    proposal = _field(content, "proposal")

    summary_body = "\n".join([
        f"**Problem**: {_text(_field(summary, 'problem'))}",
        f"**Proposed Solution**: {_text(_field(summary, 'proposed_solution'))}",
        f"**Impact**: {_text(_field(summary, 'impact'))}",
    ])

    alternatives = []
    for idx, alt in enumerate(_as_list(_field(proposal, "alternatives_considered")), 1):
        alternatives.append(f"{idx}. **{_text(_field(alt, 'option'))}**")
        alternatives.append("   Pros:")
        alternatives.append(_bullets(_field(alt, "pros"), indent="   ") or f"   - {MISSING}")
        alternatives.append("   Cons:")
        alternatives.append(_bullets(_field(alt, "cons"), indent="   ") or f"   - {MISSING}")

    return [
        build_section(summary_body, "## Summary"),
        build_section(_text(_field(proposal, "background")), "## Background"),
        build_section(_text(_field(proposal, "detailed_design")), "## Detailed Design"),
        build_section("\n".join(alternatives), "## Alternatives Considered", MISSING),
    ]


def _adr_sections(content: dict) -> list[str]:
    consequences = _field(content, "consequences")
    rationale = _field(content, "rationale")

    consequence_lines = []
    for kind in ("positive", "negative", "neutral"):
        consequence_lines.append(f"**{kind.capitalize()}**:")
        consequence_lines.append(_bullets(_field(consequences, kind)) or f"- {MISSING}")

    rationale_lines = []
    for kind in ("factors", "assumptions", "constraints"):
        items = _bullets(_field(rationale, kind))
        if items:
            rationale_lines.extend([f"**{kind.capitalize()}**:", items])

    return [
        build_section(_text(_field(content, "context")), "## Context"),
        build_section(_text(_field(content, "decision")), "## Decision"),
        build_section("\n".join(consequence_lines), "## Consequences"),
        build_section("\n".join(rationale_lines), "## Rationale", MISSING),
    ]


NARRATIVES: dict[str, Callable[[dict], list[str]]] = {
    "prd": _prd_sections,
    "rfc": _rfc_sections,
    "adr": _adr_sections,
}


def has_narrative(template: str) -> bool:
    return template in NARRATIVES


def _details_section(spec: Spec) -> str:
    meta = spec.metadata
    lines = [
        f"- Status: {meta.status}",
        f"- Author: {_text(meta.author)}",
        f"- Tags: {', '.join(meta.tags) if meta.tags else MISSING}",
        f"- Created: {_text(meta.created_at)}",
        f"- Updated: {_text(meta.updated_at)}",
    ]
    return build_section("\n".join(lines), "## Specification Details")


def to_prompt(spec: Spec, include_context: bool = False) -> str:
    """
    Project a spec into an LLM task prompt.

    Raises:
        Unsupported: the spec's template has no narrative projection
    """
    sections_for = NARRATIVES.get(spec.template)
    if sections_for is None:
        raise Unsupported(f"No prompt export for template '{spec.template}'")

    parts = [f"# Task: {spec.metadata.title}\n"]
    if include_context:
        parts.append(_details_section(spec))
    parts.extend(sections_for(spec.content))
    parts.append(f"---\n*Generated from {spec.template} spec: {spec.id}*\n")
    return "\n".join(parts)


def export(spec: Spec, format: str, include_context: bool = False) -> str:
    """Render spec in one of EXPORT_FORMATS."""
    if format == "yaml":
        return to_yaml(spec)
    if format == "json":
        return to_json(spec)
    if format == "markdown":
        return to_markdown(spec)
    if format == "prompt":
        return to_prompt(spec, include_context=include_context)
    raise Unsupported(f"Unknown export format '{format}' (expected one of: {', '.join(EXPORT_FORMATS)})")
