"""Records held by the conversation, template and knowledge stores."""

from datetime import datetime

from pydantic import BaseModel, Field


class Template(BaseModel):
    """A canned reply the agent can insert."""

    id: str = Field(..., description="Template identifier")
    title: str = Field(..., description="Display title")
    content: str = Field(..., description="Text inserted into the composer")
    category: str = Field(default="general", description="Grouping label")


class KnowledgeEntry(BaseModel):
    """A question/answer pair from the knowledge base."""

    id: str = Field(..., description="Entry identifier")
    question: str = Field(..., description="FAQ question")
    answer: str = Field(..., description="FAQ answer")
    source: str | None = Field(None, description="Document the entry came from")


class ChatMessage(BaseModel):
    """A message in a customer conversation."""

    id: str
    conversation_id: str
    text: str
    is_agent: bool = False
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def speaker(self) -> str:
        return "Agent" if self.is_agent else "Customer"

    def as_line(self) -> str:
        """Render as ``Speaker: text`` for prompts."""
        return f"{self.speaker}: {self.text}"


class Conversation(BaseModel):
    """A customer conversation handled by the agent."""

    id: str
    customer_name: str
    customer_email: str | None = None
    status: str = "active"
