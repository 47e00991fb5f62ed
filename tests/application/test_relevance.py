"""Tests for lexical relevance and knowledge context selection."""

from deskpilot.application.relevance import RelevanceFilter, extract_keywords, select_knowledge_context
from deskpilot.infrastructure.store.seed import DEFAULT_KNOWLEDGE


class TestRelevanceFilter:
    def test_substring_match_ignores_case(self):
        relevance = RelevanceFilter()
        assert relevance.score("ROUTING", ["Routing Recommendation"]) == 1.0
        assert relevance.match("studio", ["title", "Use Studio flows"])

    def test_no_match_scores_zero(self):
        assert RelevanceFilter().score("billing", ["Welcome Message", "Thank you"]) == 0.0

    def test_empty_query_never_matches(self):
        relevance = RelevanceFilter()
        assert relevance.score("", ["anything"]) == 0.0
        assert not relevance.match("   ", ["anything"])

    def test_missing_fields_are_skipped(self):
        assert RelevanceFilter().match("faq", ["", "An FAQ answer"])

    def test_surrounding_whitespace_is_part_of_the_query(self):
        relevance = RelevanceFilter()
        assert relevance.match("routing", ["How do I configure routing?"])
        assert not relevance.match("routing ", ["How do I configure routing?"])
        assert relevance.match("configure routing", ["How do I configure routing?"])


def test_extract_keywords_keeps_words_longer_than_three():
    assert extract_keywords("How do I set the occupancy limit") == ["occupancy", "limit"]


def test_knowledge_context_prefers_keyword_matches():
    entries = select_knowledge_context("Which channels support WhatsApp?", DEFAULT_KNOWLEDGE)

    assert entries
    assert all(
        any(word in (e.question + e.answer).lower() for word in ("which", "channels", "support", "whatsapp?"))
        for e in entries
    )


def test_knowledge_context_caps_matches():
    # "channel" appears in every seeded entry
    entries = select_knowledge_context("channel", DEFAULT_KNOWLEDGE, limit=5)
    assert [e.id for e in entries] == ["kb-1", "kb-2", "kb-3", "kb-4", "kb-5"]


def test_knowledge_context_falls_back_to_first_entries():
    entries = select_knowledge_context("hi", DEFAULT_KNOWLEDGE)
    assert [e.id for e in entries] == ["kb-1", "kb-2", "kb-3"]


def test_knowledge_context_fallback_can_be_disabled():
    assert select_knowledge_context("hi", DEFAULT_KNOWLEDGE, fallback_count=0) == []
