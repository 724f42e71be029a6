"""Shared constants for fast-kit."""

import re

# Document IDs double as file names
DOC_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')
DOC_ID_LENGTH = 10
DOC_ID_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_-"
CUSTOM_PROMPT_PREFIX = "custom_"

DOC_EXTENSION = ".yaml"

# Prompt categories with their own partition; anything else lands in custom/
PROMPT_CATEGORIES = (
    "code_generation",
    "refactoring",
    "testing",
    "debugging",
    "documentation",
)
CUSTOM_CATEGORY = "custom"

VARIABLE_TYPES = ("string", "code", "file_path", "list", "boolean")

SPEC_TEMPLATES = ("prd", "rfc", "adr", "user_story", "api_spec")
SPEC_STATUSES = ("draft", "review", "approved", "deprecated")
SPEC_SOURCES = ("manual", "notion", "markdown")
SPEC_FORMATS = ("yaml", "json", "markdown")
EXPORT_FORMATS = SPEC_FORMATS + ("prompt",)

# Spec template -> partition directory name
SPEC_PARTITIONS = {
    "prd": "prd",
    "rfc": "rfc",
    "adr": "adr",
    "user_story": "user_stories",
    "api_spec": "api_specs",
}

DEFAULT_LIST_LIMIT = 50
DEFAULT_SEARCH_LIMIT = 10

# Search weights
NAME_WEIGHT = 3
DESCRIPTION_WEIGHT = 2
TAG_WEIGHT = 1

# Rough English average, used only as a cost signal
CHARS_PER_TOKEN = 4
