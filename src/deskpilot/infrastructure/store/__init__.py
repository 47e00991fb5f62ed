"""Conversation, template and knowledge stores."""

from deskpilot.infrastructure.store.memory import InMemoryStore
from deskpilot.infrastructure.store.seed import DEFAULT_CONVERSATION_ID, seed_store

__all__ = ["InMemoryStore", "DEFAULT_CONVERSATION_ID", "seed_store"]
