"""
File-backed document store.

Documents are stored as one YAML file per document, partitioned by type:
  <root>/<partition dir>/<id>.yaml

There is no in-memory index. Every load_all() re-reads the whole collection
so reads always reflect what is on disk at call time.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional

import yaml

from fastkit.lib.constants import DOC_EXTENSION, DOC_ID_ALPHABET, DOC_ID_LENGTH, DOC_ID_PATTERN
from fastkit.lib.errors import MalformedStorage, Unsupported, ValidationFailed

logger = logging.getLogger(__name__)

__all__ = ["DocumentStore", "StoredDocument", "Collection", "generate_id", "dump_yaml", "now_iso"]


@dataclass
class StoredDocument:
    """A deserialized document and where it came from."""
    partition: str
    path: Path
    data: dict


@dataclass
class Collection:
    """Result of a full-collection read.

    skipped holds one MalformedStorage per file that could not be read.
    """
    documents: list[StoredDocument] = field(default_factory=list)
    skipped: list[MalformedStorage] = field(default_factory=list)


def generate_id(length: int = DOC_ID_LENGTH) -> str:
    """Random URL-safe token for new document IDs."""
    return "".join(secrets.choice(DOC_ID_ALPHABET) for _ in range(length))


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def dump_yaml(data) -> str:
    """Serialize to the human-readable form used on disk."""
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


class DocumentStore:
    """Durable id -> document mapping for one document family.

    Args:
        root: Family root directory (e.g. ~/.fast-kit/specs)
        partitions: Partition key -> directory name, in enumeration order
        family: Family name used in log and error messages ("prompt", "spec")
    """

    def __init__(self, root: Path, partitions: Mapping[str, str], family: str):
        self.root = Path(root)
        self.partitions = dict(partitions)
        self.family = family

    def ensure_layout(self) -> None:
        """Create every partition directory. Safe to call repeatedly."""
        for dirname in self.partitions.values():
            (self.root / dirname).mkdir(parents=True, exist_ok=True)

    def path_for(self, partition: str, doc_id: str) -> Path:
        """Derive the file path for a document.

        Raises:
            Unsupported: partition is not declared for this family
            ValidationFailed: doc_id is not a valid document id
        """
        if partition not in self.partitions:
            raise Unsupported(f"Unknown {self.family} partition: {partition}")
        if not DOC_ID_PATTERN.match(doc_id or ""):
            raise ValidationFailed(f"Invalid {self.family} id: {doc_id!r}")
        return self.root / self.partitions[partition] / f"{doc_id}{DOC_EXTENSION}"

    def exists(self, doc_id: str) -> bool:
        if not DOC_ID_PATTERN.match(doc_id or ""):
            return False
        return any(self.path_for(p, doc_id).exists() for p in self.partitions)

    def new_id(self, prefix: str = "") -> str:
        """Generate an id not yet used in any partition."""
        while True:
            doc_id = f"{prefix}{generate_id()}"
            if not self.exists(doc_id):
                return doc_id

    def save(self, partition: str, doc_id: str, data: dict) -> Path:
        """Write the full document, replacing any existing file."""
        path = self.path_for(partition, doc_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_yaml(data), encoding="utf-8")
        logger.debug(f"Saved {self.family} {doc_id} to {path}")
        return path

    def _read(self, path: Path) -> dict:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise MalformedStorage(path, str(e)) from None
        if not isinstance(data, dict):
            raise MalformedStorage(path, f"expected a mapping, got {type(data).__name__}")
        return data

    def load(self, doc_id: str) -> Optional[StoredDocument]:
        """Load a document by id, or None if no partition holds it.

        Raises:
            MalformedStorage: the file exists but cannot be deserialized
        """
        if not DOC_ID_PATTERN.match(doc_id or ""):
            return None

        for partition in self.partitions:
            path = self.path_for(partition, doc_id)
            if path.exists():
                logger.debug(f"Loading {self.family} {doc_id} from {path}")
                return StoredDocument(partition=partition, path=path, data=self._read(path))
        return None

    def load_all(self) -> Collection:
        """Read every document in every partition.

        Partitions are visited in declaration order, files by name within a
        partition. Unreadable files are logged and reported in
        Collection.skipped instead of aborting the read.
        """
        collection = Collection()
        for partition, dirname in self.partitions.items():
            part_dir = self.root / dirname
            if not part_dir.is_dir():
                continue
            for path in sorted(part_dir.glob(f"*{DOC_EXTENSION}")):
                try:
                    data = self._read(path)
                except MalformedStorage as e:
                    logger.warning(f"Skipping malformed {self.family} file {path}: {e.reason}")
                    collection.skipped.append(e)
                    continue
                collection.documents.append(StoredDocument(partition=partition, path=path, data=data))
        return collection
