"""
Filtering and keyword ranking over a loaded document collection.

Both document families are reduced to IndexEntry records first, so the same
rules apply to prompts (name/category) and specs (title/template).
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from fastkit.lib.constants import DEFAULT_SEARCH_LIMIT, DESCRIPTION_WEIGHT, NAME_WEIGHT, TAG_WEIGHT
from fastkit.lib.errors import ValidationFailed

__all__ = ["IndexEntry", "SearchHit", "filter_entries", "score_entry", "rank_entries", "matching_reason"]

REASON_NAME = "Name match"
REASON_DESCRIPTION = "Description match"
REASON_TAG = "Tag match"


@dataclass
class IndexEntry:
    """Searchable view of one document."""
    id: str
    name: str
    description: str
    type: str
    tags: list[str] = field(default_factory=list)
    status: Optional[str] = None
    document: Any = None


@dataclass
class SearchHit:
    entry: IndexEntry
    score: int

    @property
    def relevance(self) -> float:
        # Normalized against the heaviest single signal
        return self.score / NAME_WEIGHT

    @property
    def reason(self) -> str:
        return matching_reason(self.score)


def filter_entries(
    entries: Iterable[IndexEntry],
    type: Optional[str] = None,
    status: Optional[str] = None,
    tags: Optional[list[str]] = None,
    query: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[IndexEntry]:
    """
    Keep entries that satisfy every supplied filter.

    Args:
        entries: Entries in collection order
        type: Exact type/category match
        status: Exact status match
        tags: Keep entries sharing at least one tag
        query: Case-insensitive substring of name or description
        limit: Keep only the first N matches

    Returns:
        Matching entries in their original order
    """
    needle = query.lower() if query else None
    wanted_tags = set(tags) if tags else None

    results = []
    for entry in entries:
        if type and entry.type != type:
            continue
        if status and entry.status != status:
            continue
        if wanted_tags and not wanted_tags.intersection(entry.tags):
            continue
        if needle and needle not in entry.name.lower() and needle not in entry.description.lower():
            continue
        results.append(entry)

    if limit is not None:
        results = results[:limit]
    return results


def score_entry(entry: IndexEntry, query: str) -> int:
    """Weighted keyword score of entry against an already lower-cased query."""
    score = 0
    if query in entry.name.lower():
        score += NAME_WEIGHT
    if query in entry.description.lower():
        score += DESCRIPTION_WEIGHT
    if any(query in tag.lower() for tag in entry.tags):
        score += TAG_WEIGHT
    return score


def matching_reason(score: int) -> str:
    """Dominant signal behind a score, in name > description > tag priority."""
    if score >= NAME_WEIGHT:
        return REASON_NAME
    if score >= DESCRIPTION_WEIGHT:
        return REASON_DESCRIPTION
    return REASON_TAG


def rank_entries(
    entries: Iterable[IndexEntry], query: str, limit: int = DEFAULT_SEARCH_LIMIT
) -> list[SearchHit]:
    """
    Score, drop non-matches, sort by descending score and truncate.

    Equal scores keep collection order (sorted() is stable).

    Raises:
        ValidationFailed: If the query is empty or whitespace
    """
    if not query or not query.strip():
        raise ValidationFailed("Search query must not be empty", ["query: must not be empty"])

    needle = query.lower()
    hits = [SearchHit(entry=e, score=score_entry(e, needle)) for e in entries]
    hits = [h for h in hits if h.score > 0]
    hits = sorted(hits, key=lambda h: h.score, reverse=True)
    return hits[:limit]
