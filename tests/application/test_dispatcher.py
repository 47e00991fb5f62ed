"""Tests for the concurrent query dispatcher."""

import pytest

from deskpilot.application.dispatcher import QueryDispatcher
from deskpilot.application.sources import GenerativeAdapter, KnowledgeAdapter, StaticCommandAdapter, TemplateAdapter
from deskpilot.config import AssistConfig
from deskpilot.domain.candidates import CandidateKind, QueryMode, QueryRequest
from deskpilot.domain.errors import AdapterFailure, MalformedResponse
from deskpilot.infrastructure.store.seed import DEFAULT_TEMPLATES
from tests.conftest import FakeGenerator


class _RaisingSource:
    def __init__(self, name, error):
        self.name = name
        self._error = error

    async def fetch(self, query, context_message):
        raise self._error


def _dispatcher(store, generator, config=None, **overrides):
    config = config or AssistConfig()

    async def history():
        return await store.get_messages("default-conv")

    sources = dict(
        templates=TemplateAdapter(lambda: DEFAULT_TEMPLATES),
        knowledge=KnowledgeAdapter(store, limit=config.knowledge_limit),
        generative=GenerativeAdapter(generator, store, history, config),
        static=StaticCommandAdapter(),
    )
    sources.update(overrides)
    return QueryDispatcher(config=config, **sources)


@pytest.mark.asyncio
async def test_search_merges_all_sources_up_to_eight(store):
    dispatcher = _dispatcher(store, FakeGenerator())

    result = await dispatcher.dispatch(QueryRequest(text="digital", generation=7))

    assert result.generation == 7
    assert result.mode is QueryMode.SEARCH
    assert result.complete
    assert result.failed_sources == ()
    assert len(result) == 8
    assert [c.kind for c in result] == (
        [CandidateKind.TEMPLATE] * 2 + [CandidateKind.KNOWLEDGE_FAQ] * 3 + [CandidateKind.GENERATED_SUGGESTION] * 3
    )
    assert [c.id for c in result][:2] == ["template-welcome", "template-follow-up"]


@pytest.mark.asyncio
async def test_search_respects_configured_limit(store):
    dispatcher = _dispatcher(store, FakeGenerator(), config=AssistConfig(search_limit=4))

    result = await dispatcher.dispatch(QueryRequest(text="digital", generation=1))

    assert len(result) == 4


@pytest.mark.asyncio
async def test_failing_source_degrades_to_empty(store):
    dispatcher = _dispatcher(
        store,
        FakeGenerator(),
        knowledge=_RaisingSource("knowledge", AdapterFailure("knowledge", "offline")),
    )

    result = await dispatcher.dispatch(QueryRequest(text="digital", generation=1))

    assert result.failed_sources == ("knowledge",)
    assert CandidateKind.KNOWLEDGE_FAQ not in {c.kind for c in result}
    assert len(result) == 5


@pytest.mark.asyncio
async def test_unexpected_and_malformed_errors_are_contained(store):
    dispatcher = _dispatcher(
        store,
        FakeGenerator(),
        templates=_RaisingSource("templates", ValueError("bad data")),
        generative=_RaisingSource("generative", MalformedResponse("suggest", "not json")),
    )

    result = await dispatcher.dispatch(QueryRequest(text="digital", generation=1))

    assert set(result.failed_sources) == {"templates", "generative"}
    assert [c.kind for c in result] == [CandidateKind.KNOWLEDGE_FAQ] * 3


@pytest.mark.asyncio
async def test_contextual_without_customer_message_serves_static_commands(store):
    generator = FakeGenerator()
    dispatcher = _dispatcher(store, generator)
    partials = []

    result = await dispatcher.dispatch(QueryRequest(text="", generation=2), on_partial=partials.append)

    assert result.mode is QueryMode.CONTEXTUAL
    assert [c.id for c in result] == ["welcome", "escalate", "follow-up"]
    assert result.complete
    assert partials == []
    assert generator.calls == []


@pytest.mark.asyncio
async def test_contextual_publishes_static_part_before_generated_part(store):
    dispatcher = _dispatcher(store, FakeGenerator())
    partials = []

    result = await dispatcher.dispatch(
        QueryRequest(text="", generation=3, context_message="How do I route SMS?"),
        on_partial=partials.append,
    )

    assert len(partials) == 1
    assert not partials[0].complete
    assert partials[0].generation == 3
    assert [c.id for c in partials[0]] == ["welcome", "escalate", "follow-up"]

    assert result.complete
    assert [c.id for c in result] == [
        "welcome",
        "escalate",
        "follow-up",
        "suggestion-0",
        "suggestion-1",
        "reply-0",
        "reply-1",
    ]


@pytest.mark.asyncio
async def test_contextual_generation_failure_keeps_static_commands(store):
    generator = FakeGenerator(
        failures={"suggest": RuntimeError("down"), "quick_replies": RuntimeError("down")}
    )
    dispatcher = _dispatcher(store, generator)

    result = await dispatcher.dispatch(QueryRequest(text="", generation=1, context_message="Hi"))

    assert [c.id for c in result] == ["welcome", "escalate", "follow-up"]
    assert result.failed_sources == ()
