"""
Suggestion sources for the command palette.

Each adapter answers ``fetch(query, context_message)`` for one kind of
candidate (templates, knowledge entries, generated text, fixed commands).
"""

from .base import SourceAdapter, SourceFailed, SourceOk, SourceOutcome
from .generative import GenerativeAdapter
from .knowledge import KnowledgeAdapter
from .static import DEFAULT_COMMANDS, StaticCommandAdapter
from .templates import TemplateAdapter

__all__ = [
    "SourceAdapter",
    "SourceOk",
    "SourceFailed",
    "SourceOutcome",
    "GenerativeAdapter",
    "KnowledgeAdapter",
    "StaticCommandAdapter",
    "DEFAULT_COMMANDS",
    "TemplateAdapter",
]
