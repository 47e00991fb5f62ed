"""Tests for the Claude-backed assistant service."""

import json

import pytest

from deskpilot.application.assistant import (
    AssistantService,
    normalize_intent,
    parse_json_object,
    parse_string_list,
)
from deskpilot.domain.errors import MalformedResponse
from deskpilot.infrastructure.store.seed import DEFAULT_KNOWLEDGE, opening_messages


class TestJsonParsing:
    def test_plain_object(self):
        assert parse_json_object('{"intent": "billing"}', "op") == {"intent": "billing"}

    def test_code_fenced_object(self):
        text = '```json\n{"replies": ["Sure", "No problem"]}\n```'
        assert parse_json_object(text, "op") == {"replies": ["Sure", "No problem"]}

    def test_object_surrounded_by_prose(self):
        text = 'Here you go: {"suggestions": ["One"]} Hope that helps.'
        assert parse_string_list(text, "suggestions", "op") == ["One"]

    def test_unparsable_text_raises(self):
        with pytest.raises(MalformedResponse) as exc_info:
            parse_json_object("no json here", "suggest")
        assert exc_info.value.operation == "suggest"
        assert exc_info.value.raw == "no json here"

    def test_non_object_raises(self):
        with pytest.raises(MalformedResponse):
            parse_json_object('["a", "b"]', "op")

    def test_non_list_value_raises(self):
        with pytest.raises(MalformedResponse):
            parse_string_list('{"replies": "Sure"}', "replies", "op")

    def test_missing_key_is_empty(self):
        assert parse_string_list("{}", "replies", "op") == []

    def test_blank_and_non_string_items_are_dropped(self):
        assert parse_string_list('{"replies": ["Ok", "", 3, "  Fine "]}', "replies", "op") == ["Ok", "Fine"]


@pytest.mark.parametrize(
    "label,expected",
    [
        ("billing", "billing"),
        ("Technical Issue", "technical_issue"),
        ("technical-issue", "technical_issue"),
        ("GREETING", "greeting"),
        ("refund_request", "other"),
        ("", "other"),
        (None, "other"),
    ],
)
def test_normalize_intent(label, expected):
    assert normalize_intent(label) == expected


@pytest.mark.asyncio
async def test_suggest_renders_prompt_and_parses_list(mock_claude):
    llm = mock_claude(responses=[json.dumps({"suggestions": ["First reply.", "Second reply.", "Third reply."]})])
    service = AssistantService(llm)

    suggestions = await service.suggest(
        "How do I route SMS?", DEFAULT_KNOWLEDGE[3:4], opening_messages()
    )

    assert suggestions == ["First reply.", "Second reply.", "Third reply."]
    call = llm.calls[0]
    assert 'Customer message: "How do I route SMS?"' in call["prompt"]
    assert "Agent: What can I help you today?" in call["prompt"]
    assert "Q: What types of routing can I configure" in call["prompt"]
    assert call["kwargs"]["max_tokens"] == 800
    assert call["kwargs"]["temperature"] == 0.6
    assert "response suggestions" in call["kwargs"]["system"]


@pytest.mark.asyncio
async def test_suggest_without_history_omits_history_block(mock_claude):
    llm = mock_claude(responses=['{"suggestions": []}'])

    await AssistantService(llm).suggest("Hello", [], [])

    assert "Conversation history" not in llm.calls[0]["prompt"]
    assert "None available" in llm.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_suggest_malformed_response_raises(mock_claude):
    llm = mock_claude(responses=["I cannot answer that."])

    with pytest.raises(MalformedResponse):
        await AssistantService(llm).suggest("Hello", [], [])


@pytest.mark.asyncio
async def test_complete_uses_short_sampling_and_knowledge(mock_claude):
    llm = mock_claude(responses=["  reaching out to us.  "])

    completion = await AssistantService(llm).complete("Thanks for", opening_messages(), DEFAULT_KNOWLEDGE[:3])

    assert completion == "reaching out to us."
    call = llm.calls[0]
    assert call["kwargs"]["max_tokens"] == 80
    assert call["kwargs"]["temperature"] == 0.6
    assert 'Agent\'s partial input: "Thanks for"' in call["prompt"]
    assert "Use this knowledge base information when relevant: Q: What is Talkdesk" in call["kwargs"]["system"]


@pytest.mark.asyncio
async def test_complete_without_knowledge_has_plain_system_prompt(mock_claude):
    llm = mock_claude(responses=["done"])

    await AssistantService(llm).complete("Hi", [], [])

    assert "knowledge base" not in llm.calls[0]["kwargs"]["system"]


@pytest.mark.asyncio
async def test_quick_replies(mock_claude):
    llm = mock_claude(responses=['```json\n{"replies": ["Sure!", "One moment.", "Thanks!"]}\n```'])

    replies = await AssistantService(llm).quick_replies("greeting")

    assert replies == ["Sure!", "One moment.", "Thanks!"]
    assert 'Message type/context: "greeting"' in llm.calls[0]["prompt"]
    assert llm.calls[0]["kwargs"]["temperature"] == 0.7


@pytest.mark.asyncio
async def test_classify_intent_maps_unknown_labels_to_other(mock_claude):
    llm = mock_claude(responses=['{"intent": "billing"}', '{"intent": "sarcasm"}', '{"intent": 3}'])
    service = AssistantService(llm)

    assert await service.classify_intent("Why was I charged twice?") == "billing"
    assert await service.classify_intent("Great, just great.") == "other"
    assert await service.classify_intent("???") == "other"
    assert llm.calls[0]["kwargs"]["temperature"] == 0.3
    assert "technical_issue" in llm.calls[0]["kwargs"]["system"]


@pytest.mark.asyncio
async def test_summarize_sends_transcript(mock_claude):
    llm = mock_claude(responses=["Customer greeted; no issue yet."])

    summary = await AssistantService(llm).summarize(opening_messages())

    assert summary == "Customer greeted; no issue yet."
    call = llm.calls[0]
    assert call["prompt"].endswith("Agent: What can I help you today?")
    assert call["kwargs"]["max_tokens"] == 200
    assert call["kwargs"]["temperature"] == 0.5
