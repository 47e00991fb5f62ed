"""Claude-backed text generation for the composer.

AssistantService implements the TextGenerator protocol: inline completion,
reply suggestions, quick replies, conversation summaries and intent
classification. Prompts live in ``prompts/assist`` and are rendered with
``string.Template``. Structured answers are requested as JSON objects.
"""

import json
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Optional

from deskpilot.application.claude import Claude
from deskpilot.domain.errors import MalformedResponse
from deskpilot.domain.records import ChatMessage, KnowledgeEntry
from deskpilot.logger import get_logger
from deskpilot.utils import format_prompt, load_prompt

logger = get_logger("assistant")

INTENT_LABELS = (
    "greeting",
    "question",
    "complaint",
    "compliment",
    "goodbye",
    "technical_issue",
    "billing",
    "other",
)
FALLBACK_INTENT = "other"

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass(frozen=True)
class Sampling:
    """Per-operation generation parameters."""

    max_tokens: int
    temperature: float


COMPOSE_SAMPLING = Sampling(max_tokens=80, temperature=0.6)
SUGGESTIONS_SAMPLING = Sampling(max_tokens=800, temperature=0.6)
REPLIES_SAMPLING = Sampling(max_tokens=300, temperature=0.7)
SUMMARY_SAMPLING = Sampling(max_tokens=200, temperature=0.5)
INTENT_SAMPLING = Sampling(max_tokens=50, temperature=0.3)


def parse_json_object(text: str, operation: str) -> dict[str, Any]:
    """
    Parse a JSON object from model output, tolerating a surrounding code fence.

    Raises:
        MalformedResponse: If no JSON object can be parsed
    """
    candidate = text.strip()
    fenced = _CODE_FENCE.match(candidate)
    if fenced:
        candidate = fenced.group(1)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        # Fall back to the outermost braces when the model added prose around the object
        start, end = candidate.find("{"), candidate.rfind("}")
        if start == -1 or end <= start:
            raise MalformedResponse(operation, "no JSON object in response", raw=text) from None
        try:
            data = json.loads(candidate[start : end + 1])
        except json.JSONDecodeError as e:
            raise MalformedResponse(operation, str(e), raw=text) from e

    if not isinstance(data, dict):
        raise MalformedResponse(operation, f"expected an object, got {type(data).__name__}", raw=text)
    return data


def parse_string_list(text: str, key: str, operation: str) -> list[str]:
    """Extract ``{key: [str, ...]}`` from model output."""
    data = parse_json_object(text, operation)
    values = data.get(key, [])
    if not isinstance(values, list):
        raise MalformedResponse(operation, f"'{key}' is not a list", raw=text)
    return [value.strip() for value in values if isinstance(value, str) and value.strip()]


def normalize_intent(label: Optional[str]) -> str:
    """Map a model label onto the known intents; anything else is "other"."""
    if not label:
        return FALLBACK_INTENT
    normalized = label.strip().lower().replace(" ", "_").replace("-", "_")
    return normalized if normalized in INTENT_LABELS else FALLBACK_INTENT


def format_history(history: Sequence[ChatMessage]) -> str:
    return "\n".join(message.as_line() for message in history)


def format_knowledge(entries: Sequence[KnowledgeEntry], separator: str = "\n\n") -> str:
    return separator.join(f"Q: {entry.question}\nA: {entry.answer}" for entry in entries)


class AssistantService:
    """TextGenerator backed by Claude."""

    def __init__(self, llm: Claude):
        """Initialize the service.

        Args:
            llm: Claude instance used for every call
        """
        self.llm = llm
        self._prompts: dict[str, str] = {}

    def _prompt(self, name: str) -> str:
        if name not in self._prompts:
            self._prompts[name] = load_prompt(f"assist/{name}.txt")
        return self._prompts[name]

    async def _generate(self, operation: str, sampling: Sampling, **variables: str) -> str:
        system = format_prompt(self._prompt(f"{operation}_system"), **variables)
        prompt = format_prompt(self._prompt(operation), **variables)
        response = await self.llm.create_message(
            messages=[{"role": "user", "content": prompt}],
            system=system,
            temperature=sampling.temperature,
            max_tokens=sampling.max_tokens,
        )
        return self.llm.text_from_message(response).strip()

    async def complete(
        self,
        prompt: str,
        history: Sequence[ChatMessage],
        knowledge_context: Sequence[KnowledgeEntry],
    ) -> str:
        knowledge = ""
        if knowledge_context:
            knowledge = " Use this knowledge base information when relevant: " + format_knowledge(
                knowledge_context, separator=" "
            ).replace("\n", " ")
        completion = await self._generate(
            "compose",
            COMPOSE_SAMPLING,
            knowledge=knowledge,
            history=format_history(history),
            partial=prompt,
        )
        logger.debug(f"Completion for {prompt[:40]!r}: {completion[:80]!r}")
        return completion

    async def suggest(
        self,
        message: str,
        knowledge_context: Sequence[KnowledgeEntry],
        recent_history: Sequence[ChatMessage],
    ) -> list[str]:
        history = f"Conversation history:\n{format_history(recent_history)}\n\n" if recent_history else ""
        text = await self._generate(
            "suggestions",
            SUGGESTIONS_SAMPLING,
            message=message,
            history=history,
            knowledge=format_knowledge(knowledge_context) or "None available",
        )
        suggestions = parse_string_list(text, "suggestions", "suggest")
        logger.debug(f"Generated {len(suggestions)} suggestions")
        return suggestions

    async def quick_replies(self, intent_or_context: str) -> list[str]:
        text = await self._generate("quick_replies", REPLIES_SAMPLING, context=intent_or_context)
        return parse_string_list(text, "replies", "quick_replies")

    async def summarize(self, history: Sequence[ChatMessage]) -> str:
        return await self._generate("summary", SUMMARY_SAMPLING, conversation=format_history(history))

    async def classify_intent(self, message: str) -> str:
        text = await self._generate(
            "intent",
            INTENT_SAMPLING,
            message=message,
            labels=", ".join(INTENT_LABELS),
        )
        data = parse_json_object(text, "classify_intent")
        intent = normalize_intent(data.get("intent") if isinstance(data.get("intent"), str) else None)
        logger.debug(f"Classified intent: {intent}")
        return intent
