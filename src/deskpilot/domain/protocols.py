"""Collaborator contracts consumed by the suggestion pipeline."""

from typing import Protocol, Sequence

from deskpilot.domain.records import ChatMessage, Conversation, KnowledgeEntry, Template

__all__ = ["TextGenerator", "KnowledgeStore", "TemplateStore", "ConversationStore"]


class TextGenerator(Protocol):
    """Generative text service.

    Every call may be slow, rate limited or fail. Callers in the suggestion
    pipeline treat a failure as "no candidates from this source".
    """

    async def complete(
        self,
        prompt: str,
        history: Sequence[ChatMessage],
        knowledge_context: Sequence[KnowledgeEntry],
    ) -> str:
        """Continue the agent's partial input."""
        ...

    async def suggest(
        self,
        message: str,
        knowledge_context: Sequence[KnowledgeEntry],
        recent_history: Sequence[ChatMessage],
    ) -> list[str]:
        """Full response suggestions for a customer message (3 expected)."""
        ...

    async def quick_replies(self, intent_or_context: str) -> list[str]:
        """Short quick replies for an intent label or context (3 expected)."""
        ...

    async def summarize(self, history: Sequence[ChatMessage]) -> str:
        """Summary of a conversation."""
        ...

    async def classify_intent(self, message: str) -> str:
        """Intent label of a customer message."""
        ...


class KnowledgeStore(Protocol):
    """Read access to the knowledge base."""

    async def search(self, query: str) -> list[KnowledgeEntry]:
        """Entries lexically matching ``query``; unranked and unbounded."""
        ...

    async def list_all(self) -> list[KnowledgeEntry]:
        """Every entry in the knowledge base."""
        ...


class TemplateStore(Protocol):
    """Read-only template access."""

    async def list_templates(self) -> list[Template]:
        ...


class ConversationStore(Protocol):
    """Conversation and message persistence."""

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        ...

    async def get_messages(self, conversation_id: str) -> list[ChatMessage]:
        ...

    async def add_message(self, conversation_id: str, text: str, is_agent: bool) -> ChatMessage:
        ...
