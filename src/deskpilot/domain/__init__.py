"""Domain types shared by the suggestion pipeline, stores and UI."""

from .candidates import Candidate, CandidateKind, QueryMode, QueryRequest, ResultSet
from .errors import AdapterFailure, DeskpilotError, MalformedResponse, NoActiveQuery
from .records import ChatMessage, Conversation, KnowledgeEntry, Template

__all__ = [
    "Candidate",
    "CandidateKind",
    "QueryMode",
    "QueryRequest",
    "ResultSet",
    "DeskpilotError",
    "AdapterFailure",
    "MalformedResponse",
    "NoActiveQuery",
    "ChatMessage",
    "Conversation",
    "KnowledgeEntry",
    "Template",
]
