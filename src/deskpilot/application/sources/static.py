"""
Fixed palette commands shown before the agent types a search.
"""

from __future__ import annotations

from deskpilot.domain.candidates import Candidate, CandidateKind

DEFAULT_COMMANDS: tuple[Candidate, ...] = (
    Candidate(
        id="welcome",
        kind=CandidateKind.TEMPLATE,
        title="Welcome Message",
        description="Greet the customer",
        body="Hello! Welcome to our support team. How can I assist you today?",
    ),
    Candidate(
        id="escalate",
        kind=CandidateKind.TEMPLATE,
        title="Escalate to Supervisor",
        description="Transfer to supervisor",
        body=(
            "I understand your concern. Let me escalate this to my supervisor "
            "who can provide additional assistance."
        ),
    ),
    Candidate(
        id="follow-up",
        kind=CandidateKind.TEMPLATE,
        title="Follow-up",
        description="Check on previous issue",
        body=(
            "I wanted to follow up on your previous inquiry. Is there anything else "
            "I can help you with regarding this matter?"
        ),
    ),
)


class StaticCommandAdapter:
    """Serves the fixed contextual commands; never touches the network."""

    name = "static"

    def __init__(self, commands: tuple[Candidate, ...] = DEFAULT_COMMANDS) -> None:
        self._commands = commands

    def commands(self) -> list[Candidate]:
        return list(self._commands)

    async def fetch(self, query: str, context_message: str) -> list[Candidate]:
        return self.commands()
