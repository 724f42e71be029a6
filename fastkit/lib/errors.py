"""
Error taxonomy for fast-kit operations.

Every fault detected inside an operation is one of these. The tool boundary
(fastkit.tools) turns them into structured payloads via to_payload().
"""

from pathlib import Path

__all__ = ["KitError", "NotFound", "ValidationFailed", "TemplateRenderError", "MalformedStorage", "Unsupported"]


class KitError(Exception):
    """Base class for reported (non-fatal) operation errors."""

    kind = "error"

    def to_payload(self) -> dict:
        return {"error": str(self), "kind": self.kind}


class NotFound(KitError):
    """Referenced document id is absent from the store."""

    kind = "not_found"

    def __init__(self, family: str, doc_id: str):
        self.family = family
        self.doc_id = doc_id
        super().__init__(f"{family.capitalize()} not found: {doc_id}")

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["id"] = self.doc_id
        return payload


class ValidationFailed(KitError):
    """Supplied values or content failed contract checks.

    Raised before any rendering or write happens.
    """

    kind = "validation_failed"

    def __init__(self, message: str, errors: list | None = None):
        self.errors = list(errors or [])
        super().__init__(message)

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["validation_errors"] = self.errors
        return payload


class TemplateRenderError(ValidationFailed):
    """Template body could not be parsed or rendered."""


class MalformedStorage(KitError):
    """A stored file could not be deserialized."""

    kind = "malformed_storage"

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Malformed document file {self.path}: {reason}")

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["path"] = str(self.path)
        return payload


class Unsupported(KitError):
    """Operation has no implementation for the requested type or format."""

    kind = "unsupported"
