"""
Lexical relevance checks for templates and knowledge entries.

This is a coarse filter rather than a search engine: a query matches a
record when any of its fields contains the whole query, ignoring case.
"""

from __future__ import annotations

from collections.abc import Sequence

from deskpilot.domain.records import KnowledgeEntry
from deskpilot.logger import get_logger

logger = get_logger("relevance")


class RelevanceFilter:
    """Case-insensitive substring matching over a record's text fields."""

    def score(self, query: str, fields: Sequence[str]) -> float:
        """Return 1.0 when any field contains ``query``, otherwise 0.0.

        An empty query scores 0.0; callers switch to contextual mode instead.
        """
        if not query.strip():
            return 0.0
        needle = query.lower()
        for value in fields:
            if value and needle in value.lower():
                return 1.0
        return 0.0

    def match(self, query: str, fields: Sequence[str]) -> bool:
        return self.score(query, fields) > 0


def extract_keywords(text: str, min_length: int = 4) -> list[str]:
    """Lowercased words of at least ``min_length`` characters."""
    return [word for word in text.lower().split(" ") if len(word) >= min_length]


def select_knowledge_context(
    message: str,
    entries: Sequence[KnowledgeEntry],
    limit: int = 5,
    fallback_count: int = 3,
) -> list[KnowledgeEntry]:
    """
    Pick knowledge entries to ground a generated reply.

    Args:
        message: Customer message the reply answers
        entries: Full knowledge base
        limit: Maximum number of keyword-matching entries returned
        fallback_count: Entries taken from the head of ``entries`` when no
            keyword matches (0 returns nothing in that case)

    Returns:
        Matching entries in knowledge-base order
    """
    keywords = extract_keywords(message)
    relevant = [
        entry
        for entry in entries
        if any(
            keyword in entry.question.lower() or keyword in entry.answer.lower()
            for keyword in keywords
        )
    ][:limit]

    if relevant:
        logger.debug(f"Selected {len(relevant)} knowledge entries by keyword ({len(keywords)} keywords)")
        return relevant

    fallback = list(entries[: max(0, fallback_count)])
    logger.debug(f"No keyword match; falling back to {len(fallback)} knowledge entries")
    return fallback
