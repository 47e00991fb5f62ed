"""
Generative source: suggestions and quick replies from the text generator.

Every generator call is bounded by a timeout and any failure degrades to an
empty list. This adapter never raises to the dispatcher.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence

from deskpilot.application.relevance import select_knowledge_context
from deskpilot.config import AssistConfig
from deskpilot.domain.candidates import Candidate, CandidateKind
from deskpilot.domain.protocols import KnowledgeStore, TextGenerator
from deskpilot.domain.records import ChatMessage, KnowledgeEntry
from deskpilot.logger import get_logger
from deskpilot.utils import truncate_text

logger = get_logger("sources.generative")

HistoryProvider = Callable[[], Awaitable[Sequence[ChatMessage]]]

DEFAULT_INTENT = "other"


class GenerativeAdapter:
    """Turns generated strings into palette candidates."""

    name = "generative"

    def __init__(
        self,
        generator: TextGenerator,
        knowledge: KnowledgeStore,
        history_provider: HistoryProvider,
        config: AssistConfig | None = None,
    ) -> None:
        self._generator = generator
        self._knowledge = knowledge
        self._history_provider = history_provider
        self._config = config or AssistConfig()

    async def fetch(self, query: str, context_message: str) -> list[Candidate]:
        if query.strip():
            suggestions = await self._suggestions(query, self._config.generated_search_limit)
            return self._to_candidates(suggestions, "search", CandidateKind.GENERATED_SUGGESTION, "AI Generated")

        if not context_message.strip():
            return []

        limit = self._config.generated_contextual_limit
        suggestions, replies = await asyncio.gather(
            self._suggestions(context_message, limit),
            self._replies(context_message, limit),
        )
        return self._to_candidates(
            suggestions, "suggestion", CandidateKind.GENERATED_SUGGESTION, "AI Generated"
        ) + self._to_candidates(replies, "reply", CandidateKind.GENERATED_REPLY, "Smart Reply")

    async def complete(self, partial: str) -> str:
        """Generate a continuation for the composer text; "" on failure."""
        try:
            history = await self._history_provider()
            entries = await self._knowledge.list_all()
            context = entries[: self._config.compose_knowledge_count]
            completion = await self._bounded(self._generator.complete(partial, history, context))
        except Exception as e:
            logger.warning(f"Inline completion failed: {e}")
            return ""
        return (completion or "").strip()

    async def _suggestions(self, message: str, limit: int) -> list[str]:
        try:
            context = await self._knowledge_context(message)
            history = await self._history_provider()
            recent = list(history)[-self._config.history_window :]
            suggestions = await self._bounded(self._generator.suggest(message, context, recent))
        except Exception as e:
            logger.warning(f"Suggestion generation failed: {e}")
            return []
        return self._clean(suggestions)[:limit]

    async def _replies(self, message: str, limit: int) -> list[str]:
        try:
            intent = await self._bounded(self._generator.classify_intent(message))
        except Exception as e:
            logger.debug(f"Intent classification failed, using {DEFAULT_INTENT!r}: {e}")
            intent = DEFAULT_INTENT

        try:
            replies = await self._bounded(self._generator.quick_replies(intent or DEFAULT_INTENT))
        except Exception as e:
            logger.warning(f"Quick reply generation failed: {e}")
            return []
        return self._clean(replies)[:limit]

    async def _knowledge_context(self, message: str) -> list[KnowledgeEntry]:
        try:
            entries = await self._knowledge.list_all()
        except Exception as e:
            logger.warning(f"Knowledge context unavailable: {e}")
            return []
        return select_knowledge_context(
            message,
            entries,
            limit=self._config.knowledge_context_limit,
            fallback_count=self._config.knowledge_fallback_count,
        )

    async def _bounded(self, awaitable):
        return await asyncio.wait_for(awaitable, timeout=self._config.generation_timeout)

    @staticmethod
    def _clean(values) -> list[str]:
        if not isinstance(values, (list, tuple)):
            logger.warning(f"Generator returned {type(values).__name__} instead of a list")
            return []
        return [value.strip() for value in values if isinstance(value, str) and value.strip()]

    def _to_candidates(
        self,
        texts: list[str],
        id_prefix: str,
        kind: CandidateKind,
        source_label: str,
    ) -> list[Candidate]:
        return [
            Candidate(
                id=f"{id_prefix}-{index}",
                kind=kind,
                title=truncate_text(text, self._config.title_max_chars),
                body=text,
                description=text,
                source_label=source_label,
            )
            for index, text in enumerate(texts)
        ]
