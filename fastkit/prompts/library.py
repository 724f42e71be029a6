"""
Prompt library operations.

Prompts are stored under <home>/prompts/<category>/<id>.yaml. Built-in
prompts ship in fastkit/prompts/builtin/ and are copied into the store on
first run; user-created prompts always go to the custom/ partition.
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Optional

import yaml
from jinja2 import meta

from fastkit.lib.config import KitConfig
from fastkit.lib.constants import CUSTOM_CATEGORY, CUSTOM_PROMPT_PREFIX, PROMPT_CATEGORIES
from fastkit.lib.errors import MalformedStorage, NotFound, ValidationFailed
from fastkit.lib.render import TemplateEngine
from fastkit.lib.search import IndexEntry, filter_entries, rank_entries
from fastkit.lib.store import DocumentStore, StoredDocument, now_iso
from fastkit.lib.tokens import estimate_tokens
from fastkit.lib.usage import UsageLog, UsageRecord
from fastkit.lib.validate import ValidationError, collect_errors, load_schema, validate_before_write
from fastkit.prompts.models import PromptMetadata, PromptTemplate
from fastkit.prompts.variables import apply_defaults, parse_definitions, validate_definitions, validate_variables

logger = logging.getLogger(__name__)

BUILTIN_DIR = Path(__file__).parent / "builtin"

# Supplies extra template context when compose is asked to inject it
ContextProvider = Callable[[PromptTemplate], dict]


def _entry(prompt: PromptTemplate) -> IndexEntry:
    return IndexEntry(
        id=prompt.id,
        name=prompt.name,
        description=prompt.description,
        type=prompt.category,
        tags=prompt.metadata.tags,
        document=prompt,
    )


class PromptLibrary:
    """Operations over the prompt template collection."""

    def __init__(
        self,
        config: KitConfig,
        usage: Optional[UsageLog] = None,
        context_provider: Optional[ContextProvider] = None,
        builtin_dir: Path = BUILTIN_DIR,
    ):
        partitions = {category: category for category in PROMPT_CATEGORIES}
        partitions[CUSTOM_CATEGORY] = CUSTOM_CATEGORY

        self.config = config
        self.store = DocumentStore(config.prompts_dir, partitions, family="prompt")
        self.engine = TemplateEngine()
        self.usage = usage or UsageLog(config.analytics_dir, enabled=config.analytics_enabled)
        self.context_provider = context_provider
        self.builtin_dir = Path(builtin_dir)

    def initialize(self, seed_builtins: bool = True) -> int:
        """Create the storage layout and seed built-in prompts.

        Returns:
            Number of built-in prompts newly copied into the store
        """
        self.store.ensure_layout()
        if not seed_builtins:
            return 0
        return self.seed_builtins()

    def seed_builtins(self) -> int:
        """Copy shipped prompts into the store. Never overwrites existing files."""
        if not self.builtin_dir.is_dir():
            return 0

        seeded = 0
        for path in sorted(self.builtin_dir.glob("*/*.yaml")):
            try:
                prompt = PromptTemplate.from_dict(yaml.safe_load(path.read_text(encoding="utf-8")))
            except (yaml.YAMLError, KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping unreadable built-in prompt {path}: {e}")
                continue

            if self.store.exists(prompt.id):
                continue
            self.store.save(self.partition_for(prompt), prompt.id, prompt.to_dict())
            seeded += 1

        if seeded:
            logger.info(f"Seeded {seeded} built-in prompt(s) into {self.store.root}")
        return seeded

    def partition_for(self, prompt: PromptTemplate) -> str:
        if prompt.id.startswith(CUSTOM_PROMPT_PREFIX):
            return CUSTOM_CATEGORY
        if prompt.category in self.store.partitions:
            return prompt.category
        return CUSTOM_CATEGORY

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_all(self) -> tuple[list[PromptTemplate], list[MalformedStorage]]:
        """Load every prompt. Files that don't form a valid prompt are skipped."""
        collection = self.store.load_all()
        prompts = []
        skipped = list(collection.skipped)

        for stored in collection.documents:
            try:
                prompts.append(self._parse(stored))
            except MalformedStorage as e:
                logger.warning(f"Skipping invalid prompt file {stored.path}: {e.reason}")
                skipped.append(e)

        return prompts, skipped

    def get(self, prompt_id: str) -> PromptTemplate:
        """Load one prompt.

        Raises:
            NotFound: no prompt with this id
            MalformedStorage: the file exists but is unusable
        """
        stored = self.store.load(prompt_id)
        if stored is None:
            raise NotFound("prompt", prompt_id)
        return self._parse(stored)

    def _parse(self, stored: StoredDocument) -> PromptTemplate:
        """Build a prompt from its stored mapping.

        Raises:
            MalformedStorage: the mapping breaks the stored prompt contract,
                including variable rules that could never be applied
        """
        issues = collect_errors(stored.data, load_schema("prompt_template"))
        if issues:
            path, message = issues[0]
            raise MalformedStorage(stored.path, f"invalid prompt: {path}: {message}")
        try:
            prompt = PromptTemplate.from_dict(stored.data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise MalformedStorage(stored.path, f"invalid prompt: {e!r}") from None

        errors = validate_definitions(prompt.variables)
        if errors:
            raise MalformedStorage(stored.path, f"invalid prompt: {errors[0]}")
        return prompt

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def list_prompts(
        self,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> dict:
        """List prompts matching every supplied filter, in store order."""
        prompts, skipped = self.load_all()
        limit = limit or self.config.list_limit

        matches = filter_entries(
            [_entry(p) for p in prompts],
            type=category,
            tags=tags,
            query=search,
        )
        results = matches[:limit]

        categories = []
        for p in prompts:
            if p.category not in categories:
                categories.append(p.category)

        return {
            "prompts": [e.document.summary() for e in results],
            "total": len(results),
            "has_more": len(matches) > limit,
            "categories": categories,
            "skipped": [str(s.path) for s in skipped],
        }

    def get_prompt(self, prompt_id: str, include_examples: bool = False) -> dict:
        """Full prompt plus usage stats."""
        prompt = self.get(prompt_id)

        template = prompt.to_dict()
        if not include_examples:
            template.pop("examples", None)

        return {
            "template": template,
            "usage_stats": asdict(self.usage.summary(prompt_id)),
        }

    def compose_prompt(self, prompt_id: str, variables: dict[str, Any], inject_context: bool = False) -> dict:
        """
        Validate variables and render the prompt.

        Validation failures are reported in the payload, not raised, and
        nothing is rendered.
        """
        prompt = self.get(prompt_id)

        errors = validate_variables(prompt.variables, variables)
        if errors:
            logger.debug(f"Variable validation failed for {prompt_id}: {errors}")
            return {
                "error": "Variable validation failed",
                "validation_errors": errors,
            }

        render_vars = apply_defaults(prompt.variables, variables)
        if inject_context:
            if self.context_provider is None:
                logger.debug(f"inject_context requested for {prompt_id} but no context provider is configured")
            else:
                render_vars["context"] = self.context_provider(prompt)

        rendered = self.engine.render(prompt.template, render_vars)

        return {
            "rendered_prompt": rendered,
            "token_count": estimate_tokens(rendered),
            "prompt_id": prompt_id,
            "variables_used": list(variables.keys()),
        }

    def search_prompts(self, query: str, limit: Optional[int] = None) -> dict:
        """Keyword-ranked search over name, description and tags."""
        prompts, _ = self.load_all()
        hits = rank_entries([_entry(p) for p in prompts], query, limit or self.config.search_limit)

        return {
            "results": [
                {
                    "prompt": {
                        "id": h.entry.id,
                        "name": h.entry.name,
                        "category": h.entry.type,
                        "description": h.entry.description,
                    },
                    "score": h.score,
                    "relevance": h.relevance,
                    "matching_reason": h.reason,
                }
                for h in hits
            ],
        }

    def create_custom_prompt(
        self,
        name: str,
        category: str,
        description: str,
        template: str,
        variables: Optional[list] = None,
        tags: Optional[list[str]] = None,
    ) -> dict:
        """
        Create and store a user prompt.

        Raises:
            ValidationFailed: bad variable definitions or template syntax;
                nothing is written
        """
        definitions, errors = parse_definitions(variables or [])
        errors.extend(validate_definitions(definitions))
        syntax_error = self.engine.check(template)
        if syntax_error:
            errors.append(syntax_error)
        if not name.strip():
            errors.append("name: must not be empty")
        if errors:
            raise ValidationFailed("Invalid prompt template", errors)

        warnings = []
        declared = {d.name for d in definitions}
        referenced = meta.find_undeclared_variables(self.engine.env.parse(template))
        for ref in sorted(referenced - declared - {"context"}):
            warnings.append(f"Template references undeclared variable: {ref}")

        all_tags = ["custom"]
        for tag in tags or []:
            if tag not in all_tags:
                all_tags.append(tag)

        now = now_iso()
        prompt = PromptTemplate(
            id=self.store.new_id(prefix=CUSTOM_PROMPT_PREFIX),
            category=category,
            name=name,
            description=description,
            template=template,
            metadata=PromptMetadata(author="user", created_at=now, updated_at=now, tags=all_tags),
            variables=definitions,
        )

        data = prompt.to_dict()
        path = self.store.path_for(CUSTOM_CATEGORY, prompt.id)
        try:
            validate_before_write(data, "prompt_template", path)
        except ValidationError as e:
            raise ValidationFailed("Invalid prompt template", [str(e)]) from None

        self.store.save(CUSTOM_CATEGORY, prompt.id, data)
        logger.info(f"Created custom prompt {prompt.id} ({name})")

        return {
            "prompt_id": prompt.id,
            "created_at": now,
            "message": "Custom prompt created successfully",
            "warnings": warnings,
        }

    def track_usage(
        self,
        prompt_id: str,
        success: bool,
        feedback: Optional[str] = None,
        completion_time_ms: Optional[float] = None,
        token_count: Optional[int] = None,
    ) -> dict:
        """Record one use of a prompt in the usage log."""
        self.get(prompt_id)

        now = now_iso()
        tracked = self.usage.record(UsageRecord(
            timestamp=now,
            prompt_id=prompt_id,
            success=success,
            feedback=feedback,
            completion_time_ms=completion_time_ms,
            token_count=token_count,
        ))

        result = {
            "tracked": tracked,
            "prompt_id": prompt_id,
            "timestamp": now,
        }
        if not tracked:
            result["message"] = "Analytics disabled"
        return result
