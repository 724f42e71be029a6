"""
Template rendering for prompt bodies.

Prompt templates use Jinja2 syntax:
  {{ name }}                          interpolation
  {% for item in items %}...{% endfor %}  iteration over list variables
  {% if flag %}...{% endif %}          conditionals on boolean variables

Templates are user-supplied, so rendering runs in Jinja2's sandbox. Output is
Markdown/plain text, never HTML, so autoescaping stays off.
"""

import logging
from typing import Any

from jinja2 import TemplateError
from jinja2.sandbox import SandboxedEnvironment

from fastkit.lib.errors import TemplateRenderError

logger = logging.getLogger(__name__)

__all__ = ["TemplateEngine", "build_section"]


class TemplateEngine:
    """Renders prompt template strings against a variable mapping."""

    def __init__(self):
        self.env = SandboxedEnvironment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def check(self, template_str: str) -> str | None:
        """Return a syntax error message, or None if the template parses."""
        try:
            self.env.parse(template_str)
        except TemplateError as e:
            return f"Template syntax error: {e}"
        return None

    def render(self, template_str: str, variables: dict[str, Any]) -> str:
        """
        Render a template string with the given variables.

        Raises:
            TemplateRenderError: If the template fails to parse or render
        """
        try:
            template = self.env.from_string(template_str)
            return template.render(**variables)
        except TemplateError as e:
            logger.warning(f"Error rendering template: {e}")
            raise TemplateRenderError("Template rendering failed", [str(e)]) from e


def build_section(
    content: str | None,
    header: str,
    empty_msg: str | None = None
) -> str:
    """
    Build a markdown section if content exists.

    Args:
        content: Section content (or None)
        header: Section header (e.g., "## Context")
        empty_msg: Message to show if content is empty

    Returns:
        Formatted section string. Empty string if content is empty AND empty_msg is None.
    """
    if content:
        return f"{header}\n{content}\n"
    elif empty_msg is not None:
        return f"{header}\n{empty_msg}\n"
    else:
        return ""
