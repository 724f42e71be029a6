"""
Approximate token counting.

Uses a fixed characters-per-token ratio rather than a real tokenizer. The
number is a cost signal only; nothing depends on it being exact.
"""

import math

from fastkit.lib.constants import CHARS_PER_TOKEN

__all__ = ["estimate_tokens"]


def estimate_tokens(text: str) -> int:
    """Estimate tokens as ceil(len(text) / CHARS_PER_TOKEN)."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)
