"""
Knowledge source: FAQ entries returned by the knowledge store.
"""

from __future__ import annotations

from pydantic import ValidationError

from deskpilot.application.relevance import RelevanceFilter
from deskpilot.domain.candidates import Candidate, CandidateKind
from deskpilot.domain.errors import AdapterFailure
from deskpilot.domain.protocols import KnowledgeStore
from deskpilot.domain.records import KnowledgeEntry
from deskpilot.logger import get_logger
from deskpilot.utils import truncate_text

logger = get_logger("sources.knowledge")


class KnowledgeAdapter:
    """Wraps knowledge search hits as FAQ candidates, capped before merge."""

    name = "knowledge"

    def __init__(
        self,
        store: KnowledgeStore,
        relevance: RelevanceFilter | None = None,
        limit: int = 3,
        title_max_chars: int = 80,
    ) -> None:
        self._store = store
        self._relevance = relevance or RelevanceFilter()
        self._limit = limit
        self._title_max_chars = title_max_chars

    async def fetch(self, query: str, context_message: str) -> list[Candidate]:
        if not query.strip():
            return []

        try:
            entries = await self._store.search(query)
        except Exception as e:
            raise AdapterFailure(self.name, f"knowledge search failed: {e}") from e

        logger.debug(f"KnowledgeAdapter query={query!r} store returned {len(entries)} entries")
        try:
            return [self._to_candidate(query, entry) for entry in entries[: self._limit]]
        except ValidationError as e:
            raise AdapterFailure(self.name, f"invalid knowledge entry: {e.errors()[0]['msg']}") from e

    def _to_candidate(self, query: str, entry: KnowledgeEntry) -> Candidate:
        return Candidate(
            id=f"faq-{entry.id}",
            kind=CandidateKind.KNOWLEDGE_FAQ,
            title=truncate_text(entry.answer, self._title_max_chars),
            body=entry.answer,
            description=entry.question,
            source_label="FAQ",
            score=self._relevance.score(query, [entry.question, entry.answer]),
        )
