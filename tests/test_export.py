"""Tests for fastkit.specs.export module."""

import json

import pytest
import yaml

from fastkit.lib.errors import Unsupported
from fastkit.specs.export import MISSING, export, has_narrative, to_markdown, to_prompt
from fastkit.specs.models import Spec, SpecMetadata


def _spec(template, content, title="Search", **meta):
    return Spec(
        metadata=SpecMetadata(
            spec_id="abc1234567",
            template=template,
            title=title,
            created_at="2025-01-15T10:00:00+00:00",
            updated_at="2025-01-15T10:00:00+00:00",
            **meta,
        ),
        content=content,
    )


PRD_CONTENT = {
    "overview": {
        "problem": "Users cannot find documents",
        "solution": "Keyword search",
        "target_users": ["writers", "editors"],
        "success_metrics": ["p95 < 200ms"],
    },
    "requirements": {
        "functional": [
            {
                "title": "Search box",
                "description": "A search box on every page",
                "acceptance_criteria": ["Visible in header", "Submits on enter"],
                "priority": "must",
            },
        ],
        "non_functional": [
            {"category": "performance", "requirement": "Fast results", "target": "200ms"},
        ],
    },
}


class TestGenericFormats:
    """yaml, json and markdown dumps."""

    def test_yaml_round_trips(self):
        spec = _spec("prd", PRD_CONTENT)
        assert Spec.from_dict(yaml.safe_load(export(spec, "yaml"))) == spec

    def test_json_round_trips(self):
        spec = _spec("rfc", {"summary": {"problem": "p"}})
        assert Spec.from_dict(json.loads(export(spec, "json"))) == spec

    def test_markdown_header(self):
        text = to_markdown(_spec("adr", {}, author="ada", tags=["infra"]))
        lines = text.splitlines()
        assert lines[0] == "# Search"
        assert "**Status**: draft" in lines
        assert "**Template**: adr" in lines
        assert "**Author**: ada" in lines
        assert "**Tags**: infra" in lines
        assert "_No content yet._" in lines

    def test_markdown_restates_content(self):
        text = to_markdown(_spec("prd", PRD_CONTENT))
        assert "## Overview" in text
        assert "### Target Users" in text
        assert "- writers" in text
        assert "- **Title**: Search box" in text
        assert "  - **Acceptance Criteria**: Visible in header, Submits on enter" in text

    def test_unknown_format(self):
        with pytest.raises(Unsupported):
            export(_spec("prd", {}), "pdf")


class TestPromptExport:
    """Narrative (prompt) export."""

    def test_prd_sections_in_order(self):
        text = to_prompt(_spec("prd", PRD_CONTENT))
        headings = [line for line in text.splitlines() if line.startswith("#")]
        assert headings == [
            "# Task: Search",
            "## Overview",
            "## Target Users",
            "## Success Metrics",
            "## Functional Requirements",
            "## Non-Functional Requirements",
        ]

    def test_prd_requirement_formatting(self):
        text = to_prompt(_spec("prd", PRD_CONTENT))
        assert "**Problem**: Users cannot find documents" in text
        assert "1. **Search box** (must)" in text
        assert "   A search box on every page" in text
        assert "   Acceptance Criteria:" in text
        assert "   - Submits on enter" in text
        assert "- **performance**: Fast results (target: 200ms)" in text

    def test_footer(self):
        text = to_prompt(_spec("prd", PRD_CONTENT))
        assert text.endswith("---\n*Generated from prd spec: abc1234567*\n")

    def test_missing_fields_show_placeholder(self):
        text = to_prompt(_spec("prd", {}))
        assert f"**Problem**: {MISSING}" in text
        assert f"## Target Users\n{MISSING}\n" in text
        assert f"## Functional Requirements\n{MISSING}\n" in text

    def test_context_section(self):
        without = to_prompt(_spec("prd", PRD_CONTENT, author="ada"))
        with_ctx = to_prompt(_spec("prd", PRD_CONTENT, author="ada"), include_context=True)
        assert "## Specification Details" not in without
        assert "## Specification Details" in with_ctx
        assert "- Author: ada" in with_ctx

    def test_rfc(self):
        text = to_prompt(_spec("rfc", {
            "summary": {"problem": "Slow builds", "proposed_solution": "Cache", "impact": "CI"},
            "proposal": {
                "background": "Builds take 20 minutes",
                "detailed_design": "Add a remote cache",
                "alternatives_considered": [{"option": "Bigger runners", "pros": ["simple"], "cons": ["cost"]}],
            },
        }))
        assert "## Summary" in text
        assert "**Proposed Solution**: Cache" in text
        assert "## Background\nBuilds take 20 minutes\n" in text
        assert "## Detailed Design\nAdd a remote cache\n" in text
        assert "1. **Bigger runners**" in text
        assert "   - cost" in text

    def test_adr_consequences(self):
        text = to_prompt(_spec("adr", {
            "context": "We need a queue",
            "decision": "Use Redis streams",
            "consequences": {"positive": ["Simple ops"], "negative": ["Memory bound"]},
        }))
        assert "## Context\nWe need a queue\n" in text
        assert "## Decision\nUse Redis streams\n" in text
        assert "**Positive**:\n- Simple ops" in text
        assert "**Negative**:\n- Memory bound" in text
        assert f"**Neutral**:\n- {MISSING}" in text
        assert f"## Rationale\n{MISSING}\n" in text

    @pytest.mark.parametrize("template", ["user_story", "api_spec"])
    def test_unsupported_templates(self, template):
        assert not has_narrative(template)
        with pytest.raises(Unsupported):
            to_prompt(_spec(template, {"story": "As a user..."}))

    def test_via_export(self):
        spec = _spec("adr", {"context": "c", "decision": "d"})
        assert export(spec, "prompt") == to_prompt(spec)
