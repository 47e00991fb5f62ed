"""In-memory store implementation.

One object serves the conversation, template and knowledge protocols. Data
lives in dictionaries for the lifetime of the process.
"""

import uuid
from collections.abc import Iterable

from deskpilot.domain.records import ChatMessage, Conversation, KnowledgeEntry, Template
from deskpilot.logger import get_logger

logger = get_logger("store.memory")


class InMemoryStore:
    """Dictionary-backed ConversationStore, TemplateStore and KnowledgeStore.

    Example:
        >>> store = InMemoryStore(seed=True)
        >>> [t.id for t in await store.list_templates()]
        ['welcome', 'routing-rec', 'follow-up']
        >>> len(await store.search("routing"))
        2
    """

    def __init__(self, seed: bool = False) -> None:
        """Initialize an empty store, optionally loaded with the default data."""
        self._conversations: dict[str, Conversation] = {}
        self._messages: dict[str, list[ChatMessage]] = {}
        self._templates: dict[str, Template] = {}
        self._knowledge: dict[str, KnowledgeEntry] = {}

        if seed:
            from deskpilot.infrastructure.store.seed import seed_store

            seed_store(self)
            logger.debug(
                f"Seeded store: {len(self._conversations)} conversations, "
                f"{len(self._templates)} templates, {len(self._knowledge)} knowledge entries"
            )

    # Conversations

    def add_conversation(self, conversation: Conversation, messages: Iterable[ChatMessage] = ()) -> None:
        self._conversations[conversation.id] = conversation
        self._messages[conversation.id] = list(messages)

    async def list_conversations(self) -> list[Conversation]:
        return list(self._conversations.values())

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    async def get_messages(self, conversation_id: str) -> list[ChatMessage]:
        return list(self._messages.get(conversation_id, []))

    async def add_message(self, conversation_id: str, text: str, is_agent: bool) -> ChatMessage:
        message = ChatMessage(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            text=text,
            is_agent=is_agent,
        )
        self._messages.setdefault(conversation_id, []).append(message)
        logger.debug(f"Stored {message.speaker.lower()} message in {conversation_id}")
        return message

    # Templates

    def add_template(self, template: Template) -> None:
        self._templates[template.id] = template

    async def list_templates(self) -> list[Template]:
        return list(self._templates.values())

    # Knowledge

    def add_knowledge_entry(self, entry: KnowledgeEntry) -> None:
        self._knowledge[entry.id] = entry

    async def list_all(self) -> list[KnowledgeEntry]:
        return list(self._knowledge.values())

    async def search(self, query: str) -> list[KnowledgeEntry]:
        """Entries whose question or answer contains ``query``, case-insensitively."""
        needle = query.lower()
        return [
            entry
            for entry in self._knowledge.values()
            if needle in entry.question.lower() or needle in entry.answer.lower()
        ]
