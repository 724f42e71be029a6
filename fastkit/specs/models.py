"""
Data models for specifications.
"""

from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass
class SpecMetadata:
    """Envelope fields shared by every specification type."""
    spec_id: str
    template: str                              # prd, rfc, adr, user_story, api_spec
    title: str
    status: str = "draft"                      # draft, review, approved, deprecated
    created_at: str = ""                       # ISO timestamp
    updated_at: str = ""                       # ISO timestamp
    author: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    description: str = ""
    source: str = "manual"                     # manual, notion, markdown

    @classmethod
    def from_dict(cls, data: dict) -> "SpecMetadata":
        return cls(
            spec_id=str(data["spec_id"]),
            template=str(data["template"]),
            title=str(data["title"]),
            status=data.get("status", "draft"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            author=data.get("author"),
            tags=[str(t) for t in data.get("tags") or []],
            description=str(data.get("description") or ""),
            source=data.get("source", "manual"),
        )


@dataclass
class Spec:
    """A specification: envelope metadata plus a type-specific content tree.

    content is an open mapping whose expected sections depend on
    metadata.template (see fastkit.specs.schemas).
    """
    metadata: SpecMetadata
    content: dict = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.metadata.spec_id

    @property
    def template(self) -> str:
        return self.metadata.template

    @classmethod
    def from_dict(cls, data: dict) -> "Spec":
        """Build from the stored mapping.

        Raises:
            KeyError, TypeError, ValueError: data is structurally unusable
        """
        content = data.get("content") or {}
        if not isinstance(content, dict):
            raise TypeError(f"content must be a mapping, got {type(content).__name__}")
        return cls(metadata=SpecMetadata.from_dict(data["metadata"]), content=content)

    def to_dict(self) -> dict:
        return {"metadata": asdict(self.metadata), "content": self.content}

    def summary(self) -> dict:
        """Short listing form."""
        return {
            "spec_id": self.metadata.spec_id,
            "template": self.metadata.template,
            "title": self.metadata.title,
            "status": self.metadata.status,
            "tags": self.metadata.tags,
            "created_at": self.metadata.created_at,
            "updated_at": self.metadata.updated_at,
        }
