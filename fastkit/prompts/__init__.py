"""
Prompt template family.

Stores reusable prompts with typed variable contracts, validates supplied
variables and renders templates.
"""

from fastkit.prompts.models import (
    PromptTemplate,
    PromptMetadata,
    PromptExample,
    VariableDefinition,
    VariableValidation,
)
from fastkit.prompts.variables import validate_variables, apply_defaults
from fastkit.prompts.library import PromptLibrary

__all__ = [
    "PromptTemplate",
    "PromptMetadata",
    "PromptExample",
    "VariableDefinition",
    "VariableValidation",
    "validate_variables",
    "apply_defaults",
    "PromptLibrary",
]
