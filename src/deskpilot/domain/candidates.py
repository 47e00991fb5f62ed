"""Suggestion candidates and the query/result envelopes around them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CandidateKind(str, Enum):
    """Discriminant for where a candidate came from."""

    TEMPLATE = "template"
    KNOWLEDGE_FAQ = "knowledge_faq"
    GENERATED_SUGGESTION = "generated_suggestion"
    GENERATED_REPLY = "generated_reply"


class QueryMode(Enum):
    """Palette behaviour selected by whether the query has text."""

    SEARCH = "search"
    CONTEXTUAL = "contextual"


class Candidate(BaseModel):
    """One suggestion offered to the agent."""

    id: str = Field(..., description="Identifier, unique within one result set")
    kind: CandidateKind = Field(..., description="Source discriminant")
    title: str = Field(..., description="Short display label")
    body: str = Field(..., description="Full text inserted when the candidate is committed")
    description: str | None = Field(None, description="Secondary display line")
    source_label: str | None = Field(None, description="Human readable provenance")
    score: float = Field(default=0.0, description="Lexical match score (knowledge only)")

    model_config = ConfigDict(frozen=True)

    @field_validator("body")
    @classmethod
    def _body_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("candidate body must not be empty")
        return value


@dataclass(frozen=True, slots=True)
class QueryRequest:
    """A palette query as dispatched to the sources."""

    text: str
    generation: int
    context_message: str = ""

    @property
    def mode(self) -> QueryMode:
        return QueryMode.SEARCH if self.text.strip() else QueryMode.CONTEXTUAL


@dataclass(frozen=True, slots=True)
class ResultSet:
    """Merged candidates answering one generation."""

    candidates: tuple[Candidate, ...]
    generation: int
    mode: QueryMode
    complete: bool = True
    failed_sources: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return len(self.candidates)

    def __len__(self) -> int:
        return len(self.candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self.candidates)

    def __getitem__(self, index: int) -> Candidate:
        return self.candidates[index]
