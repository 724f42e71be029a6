"""
Operation boundary for fast-kit.

Every operation is exposed as a named tool with a JSON input schema, ready to
be wired to a transport (MCP server, HTTP, CLI). Toolbox.call() is the only
place errors are converted to payloads:

  - invalid arguments           -> validation_failed payload
  - KitError from an operation  -> its to_payload()
  - anything else               -> logged, generic "internal" payload

so a single failing call never takes the process down.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from fastkit.lib.config import KitConfig
from fastkit.lib.constants import EXPORT_FORMATS, SPEC_FORMATS, SPEC_SOURCES, SPEC_STATUSES, SPEC_TEMPLATES
from fastkit.lib.errors import KitError, Unsupported, ValidationFailed
from fastkit.lib.validate import collect_errors
from fastkit.prompts.library import ContextProvider, PromptLibrary
from fastkit.specs.manager import SpecManager

logger = logging.getLogger(__name__)

__all__ = ["Tool", "ToolResult", "Toolbox", "TOOLS"]

_LIMIT = {"type": "integer", "minimum": 1, "description": "Maximum number of results"}
_TAGS = {"type": "array", "items": {"type": "string"}, "description": "Match any of these tags"}


@dataclass
class Tool:
    name: str
    description: str
    input_schema: dict
    handler: Callable[["Toolbox", dict], Any]


@dataclass
class ToolResult:
    """Outcome of one tool call. payload is a dict or rendered text."""
    payload: Any
    is_error: bool = False

    def text(self) -> str:
        if isinstance(self.payload, str):
            return self.payload
        return json.dumps(self.payload, indent=2, ensure_ascii=False, default=str)


def _object(properties: dict, required: Optional[list[str]] = None) -> dict:
    schema = {"type": "object", "properties": properties, "additionalProperties": False}
    if required:
        schema["required"] = required
    return schema


TOOLS = [
    # Prompt family
    Tool(
        name="list_prompts",
        description="List available prompt templates with filtering",
        input_schema=_object({
            "category": {"type": "string", "description": "Filter by category (code_generation, testing, ...)"},
            "tags": _TAGS,
            "search": {"type": "string", "description": "Substring of name or description"},
            "limit": _LIMIT,
        }),
        handler=lambda tb, a: tb.prompts.list_prompts(
            category=a.get("category"), tags=a.get("tags"), search=a.get("search"), limit=a.get("limit"),
        ),
    ),
    Tool(
        name="get_prompt",
        description="Get a specific prompt template",
        input_schema=_object({
            "prompt_id": {"type": "string"},
            "include_examples": {"type": "boolean"},
        }, required=["prompt_id"]),
        handler=lambda tb, a: tb.prompts.get_prompt(a["prompt_id"], include_examples=a.get("include_examples", False)),
    ),
    Tool(
        name="compose_prompt",
        description="Compose a prompt from a template with variables",
        input_schema=_object({
            "prompt_id": {"type": "string"},
            "variables": {"type": "object", "description": "Variables to fill in the template"},
            "inject_context": {"type": "boolean", "description": "Expose provider context to the template"},
        }, required=["prompt_id", "variables"]),
        handler=lambda tb, a: tb.prompts.compose_prompt(
            a["prompt_id"], a["variables"], inject_context=a.get("inject_context", False),
        ),
    ),
    Tool(
        name="search_prompts",
        description="Keyword search over prompt names, descriptions and tags",
        input_schema=_object({
            "query": {"type": "string", "minLength": 1},
            "limit": _LIMIT,
        }, required=["query"]),
        handler=lambda tb, a: tb.prompts.search_prompts(a["query"], limit=a.get("limit")),
    ),
    Tool(
        name="create_custom_prompt",
        description="Create a custom prompt template",
        input_schema=_object({
            "name": {"type": "string", "minLength": 1},
            "category": {"type": "string", "minLength": 1},
            "description": {"type": "string"},
            "template": {"type": "string", "description": "Jinja2 template string"},
            "variables": {"type": "array", "description": "Variable definitions"},
            "tags": _TAGS,
        }, required=["name", "category", "description", "template"]),
        handler=lambda tb, a: tb.prompts.create_custom_prompt(
            name=a["name"],
            category=a["category"],
            description=a["description"],
            template=a["template"],
            variables=a.get("variables"),
            tags=a.get("tags"),
        ),
    ),
    Tool(
        name="track_usage",
        description="Track prompt usage and effectiveness",
        input_schema=_object({
            "prompt_id": {"type": "string"},
            "success": {"type": "boolean"},
            "feedback": {"type": "string"},
            "completion_time_ms": {"type": "number", "minimum": 0},
            "token_count": {"type": "integer", "minimum": 0},
        }, required=["prompt_id", "success"]),
        handler=lambda tb, a: tb.prompts.track_usage(
            a["prompt_id"],
            a["success"],
            feedback=a.get("feedback"),
            completion_time_ms=a.get("completion_time_ms"),
            token_count=a.get("token_count"),
        ),
    ),
    # Specification family
    Tool(
        name="create_spec",
        description="Create a new specification from a template",
        input_schema=_object({
            "template": {"enum": list(SPEC_TEMPLATES)},
            "title": {"type": "string", "minLength": 1},
            "data": {"type": "object", "description": "Initial content for the spec"},
            "source": {"enum": list(SPEC_SOURCES)},
            "description": {"type": "string"},
            "tags": _TAGS,
            "author": {"type": "string"},
            "strict": {"type": "boolean", "description": "Reject content that fails the schema"},
        }, required=["template", "title"]),
        handler=lambda tb, a: tb.specs.create_spec(
            template=a["template"],
            title=a["title"],
            data=a.get("data"),
            source=a.get("source", "manual"),
            description=a.get("description", ""),
            tags=a.get("tags"),
            author=a.get("author"),
            strict=a.get("strict", False),
        ),
    ),
    Tool(
        name="get_spec",
        description="Get specification details",
        input_schema=_object({
            "spec_id": {"type": "string"},
            "format": {"enum": list(SPEC_FORMATS)},
        }, required=["spec_id"]),
        handler=lambda tb, a: tb.specs.get_spec(a["spec_id"], format=a.get("format", "yaml")),
    ),
    Tool(
        name="list_specs",
        description="List specifications with filtering",
        input_schema=_object({
            "template": {"enum": list(SPEC_TEMPLATES)},
            "status": {"enum": list(SPEC_STATUSES)},
            "tags": _TAGS,
            "search": {"type": "string"},
            "limit": _LIMIT,
        }),
        handler=lambda tb, a: tb.specs.list_specs(
            template=a.get("template"),
            status=a.get("status"),
            tags=a.get("tags"),
            search=a.get("search"),
            limit=a.get("limit"),
        ),
    ),
    Tool(
        name="search_specs",
        description="Keyword search over specification titles, descriptions and tags",
        input_schema=_object({
            "query": {"type": "string", "minLength": 1},
            "limit": _LIMIT,
        }, required=["query"]),
        handler=lambda tb, a: tb.specs.search_specs(a["query"], limit=a.get("limit")),
    ),
    Tool(
        name="validate_spec",
        description="Validate a specification against its template schema",
        input_schema=_object({
            "spec_id": {"type": "string"},
            "strict": {"type": "boolean"},
        }, required=["spec_id"]),
        handler=lambda tb, a: tb.specs.validate_spec(a["spec_id"], strict=a.get("strict", False)),
    ),
    Tool(
        name="export_spec",
        description="Export a specification as yaml, json, markdown or an LLM prompt",
        input_schema=_object({
            "spec_id": {"type": "string"},
            "format": {"enum": list(EXPORT_FORMATS)},
            "include_context": {"type": "boolean"},
        }, required=["spec_id", "format"]),
        handler=lambda tb, a: tb.specs.export_spec(
            a["spec_id"], a["format"], include_context=a.get("include_context", False),
        ),
    ),
    Tool(
        name="export_to_prompt",
        description="Export a specification to an implementation prompt",
        input_schema=_object({
            "spec_id": {"type": "string"},
            "include_context": {"type": "boolean"},
        }, required=["spec_id"]),
        handler=lambda tb, a: tb.specs.export_to_prompt(a["spec_id"], include_context=a.get("include_context", False)),
    ),
    Tool(
        name="list_templates",
        description="List available specification templates",
        input_schema=_object({}),
        handler=lambda tb, a: tb.specs.list_templates(),
    ),
]

TOOLS_BY_NAME = {tool.name: tool for tool in TOOLS}


class Toolbox:
    """Both document families behind a single call() entry point."""

    def __init__(self, config: KitConfig, context_provider: Optional[ContextProvider] = None):
        self.config = config
        self.prompts = PromptLibrary(config, context_provider=context_provider)
        self.specs = SpecManager(config)

    def initialize(self, seed_builtins: bool = True) -> int:
        """Create storage layout for both families.

        Returns:
            Number of built-in prompts seeded on this call
        """
        seeded = self.prompts.initialize(seed_builtins=seed_builtins)
        self.specs.initialize()
        return seeded

    def list_tools(self) -> list[dict]:
        return [
            {"name": t.name, "description": t.description, "inputSchema": t.input_schema}
            for t in TOOLS
        ]

    def call(self, name: str, arguments: Optional[dict] = None) -> ToolResult:
        """Run one tool and convert any failure into an error payload."""
        arguments = arguments if arguments is not None else {}
        try:
            tool = TOOLS_BY_NAME.get(name)
            if tool is None:
                raise Unsupported(f"Unknown tool: {name}")

            issues = collect_errors(arguments, tool.input_schema)
            if issues:
                raise ValidationFailed(
                    f"Invalid arguments for {name}",
                    [f"{path}: {message}" for path, message in issues],
                )

            payload = tool.handler(self, arguments)
        except KitError as e:
            logger.debug(f"Tool {name} reported {e.kind}: {e}")
            return ToolResult(e.to_payload(), is_error=True)
        except Exception:
            logger.exception(f"Unexpected failure in tool {name}")
            return ToolResult({"error": "Internal error", "kind": "internal"}, is_error=True)

        is_error = isinstance(payload, dict) and "error" in payload
        return ToolResult(payload, is_error=is_error)
