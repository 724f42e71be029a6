"""
Usage tracking for prompt templates.

Records one JSON line per use in <home>/analytics/usage.jsonl. This is
optional instrumentation: when disabled nothing is written and summaries
come back as zeros.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

USAGE_FILE = "usage.jsonl"


@dataclass
class UsageRecord:
    """A single reported use of a prompt."""
    timestamp: str
    prompt_id: str
    success: bool
    feedback: Optional[str] = None
    completion_time_ms: Optional[float] = None
    token_count: Optional[int] = None


@dataclass
class UsageSummary:
    """Aggregated usage for one prompt."""
    total_uses: int = 0
    successful_uses: int = 0
    avg_completion_time_ms: float = 0.0
    avg_tokens: float = 0.0


class UsageLog:
    """Append-only usage log."""

    def __init__(self, analytics_dir: Path, enabled: bool = True):
        self.path = Path(analytics_dir) / USAGE_FILE
        self.enabled = enabled

    def record(self, record: UsageRecord) -> bool:
        """Append a record. Returns False when analytics is disabled."""
        if not self.enabled:
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a") as f:
            f.write(json.dumps(asdict(record)) + "\n")
            f.flush()
        return True

    def load(self) -> list[UsageRecord]:
        """Load all records. Skips corrupted lines."""
        if not self.enabled or not self.path.exists():
            return []

        records = []
        for line_num, line in enumerate(self.path.read_text().splitlines(), 1):
            if not line.strip():
                continue
            try:
                records.append(UsageRecord(**json.loads(line)))
            except (json.JSONDecodeError, TypeError) as e:
                logger.warning(f"Skipping corrupted usage line {line_num} in {self.path}: {e}")
        return records

    def summary(self, prompt_id: str, records: Optional[list[UsageRecord]] = None) -> UsageSummary:
        """Aggregate usage for one prompt.

        Args:
            prompt_id: Prompt to summarize
            records: Optional pre-loaded records to avoid re-reading the file
        """
        if records is None:
            records = self.load()
        mine = [r for r in records if r.prompt_id == prompt_id]
        if not mine:
            return UsageSummary()

        timed = [r.completion_time_ms for r in mine if r.completion_time_ms is not None]
        counted = [r.token_count for r in mine if r.token_count is not None]
        return UsageSummary(
            total_uses=len(mine),
            successful_uses=sum(1 for r in mine if r.success),
            avg_completion_time_ms=sum(timed) / len(timed) if timed else 0.0,
            avg_tokens=sum(counted) / len(counted) if counted else 0.0,
        )
