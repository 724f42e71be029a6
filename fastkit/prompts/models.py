"""
Data models for prompt templates.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


def _drop_none(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class VariableValidation:
    """Optional constraints on a variable value."""
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    allowed_values: Optional[list] = None

    @classmethod
    def from_dict(cls, data: dict) -> "VariableValidation":
        return cls(
            pattern=data.get("pattern"),
            min_length=data.get("min_length"),
            max_length=data.get("max_length"),
            allowed_values=data.get("allowed_values"),
        )

    def to_dict(self) -> dict:
        return _drop_none(asdict(self))


@dataclass
class VariableDefinition:
    """One entry of a template's variable contract."""
    name: str
    type: str = "string"                       # string, code, file_path, list, boolean
    description: str = ""
    required: bool = False
    default: Any = None
    validation: Optional[VariableValidation] = None

    @classmethod
    def from_dict(cls, data: dict) -> "VariableDefinition":
        validation = data.get("validation")
        return cls(
            name=data["name"],
            type=data.get("type", "string"),
            description=data.get("description", ""),
            required=bool(data.get("required", False)),
            default=data.get("default"),
            validation=VariableValidation.from_dict(validation) if validation else None,
        )

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "required": self.required,
            "default": self.default,
            "validation": self.validation.to_dict() if self.validation else None,
        }
        return _drop_none(data)


@dataclass
class PromptExample:
    input: dict
    output: str
    explanation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "PromptExample":
        return cls(input=dict(data["input"]), output=data["output"], explanation=data.get("explanation"))

    def to_dict(self) -> dict:
        return _drop_none(asdict(self))


@dataclass
class PromptMetadata:
    author: str = "user"
    created_at: str = ""                       # ISO timestamp
    updated_at: str = ""                       # ISO timestamp
    tags: list[str] = field(default_factory=list)
    model_optimized_for: list[str] = field(default_factory=list)
    avg_success_rate: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "PromptMetadata":
        return cls(
            author=data.get("author", "user"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            tags=[str(t) for t in data.get("tags") or []],
            model_optimized_for=list(data.get("model_optimized_for") or []),
            avg_success_rate=data.get("avg_success_rate"),
        )

    def to_dict(self) -> dict:
        return _drop_none(asdict(self))


@dataclass
class PromptTemplate:
    """A reusable prompt with a typed variable contract.

    The template body uses Jinja2 syntax (see fastkit.lib.render).
    """
    id: str
    category: str
    name: str
    description: str
    template: str
    version: str = "1.0.0"
    metadata: PromptMetadata = field(default_factory=PromptMetadata)
    variables: list[VariableDefinition] = field(default_factory=list)
    examples: list[PromptExample] = field(default_factory=list)
    settings: Optional[dict] = None            # temperature, max_tokens, ...

    @classmethod
    def from_dict(cls, data: dict) -> "PromptTemplate":
        """Build from the stored mapping.

        Raises:
            KeyError, TypeError, ValueError: data is structurally unusable
        """
        return cls(
            id=str(data["id"]),
            category=str(data["category"]),
            name=str(data["name"]),
            description=str(data.get("description") or ""),
            template=str(data["template"]),
            version=str(data.get("version", "1.0.0")),
            metadata=PromptMetadata.from_dict(data.get("metadata") or {}),
            variables=[VariableDefinition.from_dict(v) for v in data.get("variables") or []],
            examples=[PromptExample.from_dict(e) for e in data.get("examples") or []],
            settings=data.get("settings"),
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "category": self.category,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "metadata": self.metadata.to_dict(),
            "variables": [v.to_dict() for v in self.variables],
            "template": self.template,
            "examples": [e.to_dict() for e in self.examples],
            "settings": self.settings,
        }
        return _drop_none(data)

    def summary(self) -> dict:
        """Short listing form."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "tags": self.metadata.tags,
            "success_rate": self.metadata.avg_success_rate,
        }
