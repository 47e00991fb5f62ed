"""Shared fixtures and fakes for deskpilot tests."""

import asyncio
from typing import Any, Callable, Optional

import pytest

from deskpilot.application.session import ComposerSession
from deskpilot.config import AssistConfig
from deskpilot.domain.events import (
    AssistSuggestionsChanged,
    CandidateCommitted,
    ComposerTextReplaced,
    EventBus,
    InlineSuggestionChanged,
    PaletteToggled,
    SelectionMoved,
    SuggestionsUpdated,
)
from deskpilot.infrastructure.store import DEFAULT_CONVERSATION_ID, InMemoryStore


class FakeGenerator:
    """Deterministic TextGenerator with controllable delays and failures.

    Responses may be plain values or callables receiving the call's first
    argument. ``delays`` maps an operation name to seconds (or a callable
    returning seconds); ``failures`` maps an operation name to the exception
    it raises.
    """

    def __init__(
        self,
        completion: Any = "",
        suggestions: Any = None,
        replies: Any = None,
        summary: Any = "Customer asked about routing; agent explained Studio flows.",
        intent: Any = "question",
        delays: Optional[dict[str, Any]] = None,
        failures: Optional[dict[str, Exception]] = None,
    ):
        self.completion = completion
        self.suggestions = (
            suggestions
            if suggestions is not None
            else ["Suggested answer one.", "Suggested answer two.", "Suggested answer three."]
        )
        self.replies = replies if replies is not None else ["Sure!", "Let me check.", "Happy to help."]
        self.summary = summary
        self.intent = intent
        self.delays = delays or {}
        self.failures = failures or {}
        self.calls: list[tuple[str, tuple]] = []

    async def _enter(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        delay = self.delays.get(operation, 0)
        if callable(delay):
            delay = delay(*args)
        if delay:
            await asyncio.sleep(delay)
        if operation in self.failures:
            raise self.failures[operation]

    @staticmethod
    def _resolve(value: Any, argument: Any) -> Any:
        return value(argument) if callable(value) else value

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    def args_for(self, operation: str) -> list[tuple]:
        return [args for name, args in self.calls if name == operation]

    async def complete(self, prompt, history, knowledge_context):
        await self._enter("complete", prompt, history, knowledge_context)
        return self._resolve(self.completion, prompt)

    async def suggest(self, message, knowledge_context, recent_history):
        await self._enter("suggest", message, knowledge_context, recent_history)
        return self._resolve(self.suggestions, message)

    async def quick_replies(self, intent_or_context):
        await self._enter("quick_replies", intent_or_context)
        return self._resolve(self.replies, intent_or_context)

    async def summarize(self, history):
        await self._enter("summarize", history)
        return self._resolve(self.summary, history)

    async def classify_intent(self, message):
        await self._enter("classify_intent", message)
        return self._resolve(self.intent, message)


class MockClaude:
    """Mock Claude for deterministic assistant tests."""

    def __init__(
        self,
        responses: Optional[list[str]] = None,
        response_generator: Optional[Callable[[str], str]] = None,
    ):
        """Initialize with canned responses.

        Args:
            responses: List of responses to return in order
            response_generator: Function to generate response from the prompt
        """
        self.responses = responses or []
        self.response_generator = response_generator
        self.model = "mock-model"
        self.calls: list[dict[str, Any]] = []

    async def create_message(self, messages, **kwargs):
        """Mock create_message."""
        prompt = messages[-1]["content"] if messages else ""
        self.calls.append({"prompt": prompt, "kwargs": kwargs})

        if self.response_generator:
            response_text = self.response_generator(prompt)
        elif self.responses:
            response_text = self.responses.pop(0)
        else:
            response_text = "Mock response"

        class MockContent:
            def __init__(self, text):
                self.type = "text"
                self.text = text

        class MockMessage:
            def __init__(self, text):
                self.content = [MockContent(text)]
                self.stop_reason = "end_turn"

        return MockMessage(response_text)

    def text_from_message(self, message) -> str:
        return "\n".join(block.text for block in message.content if block.type == "text")


class EventRecorder:
    """Subscribes to every session event and keeps them in order."""

    EVENT_TYPES = (
        SuggestionsUpdated,
        SelectionMoved,
        PaletteToggled,
        InlineSuggestionChanged,
        CandidateCommitted,
        ComposerTextReplaced,
        AssistSuggestionsChanged,
    )

    def __init__(self, bus: EventBus):
        self.events: list[Any] = []
        for event_type in self.EVENT_TYPES:
            bus.subscribe(event_type, self.events.append)

    def of(self, event_type) -> list[Any]:
        return [event for event in self.events if isinstance(event, event_type)]


@pytest.fixture
def fast_config():
    """Config with short quiet periods so debounce tests stay quick."""
    return AssistConfig(debounce_ms=20, inline_debounce_ms=20, generation_timeout=2.0)


@pytest.fixture
def store():
    return InMemoryStore(seed=True)


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def mock_claude():
    """Factory for MockClaude instances."""
    return MockClaude


@pytest.fixture
def make_session(store, generator, fast_config):
    """Factory building a composer session over the seeded store."""

    def _make(
        generator: Optional[FakeGenerator] = generator,
        config: Optional[AssistConfig] = fast_config,
        conversation_id: str = DEFAULT_CONVERSATION_ID,
    ) -> ComposerSession:
        return ComposerSession(
            conversation_id=conversation_id,
            conversations=store,
            templates=store,
            knowledge=store,
            generator=generator,
            config=config,
        )

    return _make
