"""
AssistPanel - Suggestions and quick replies for the latest customer message.

Refreshed by the session whenever the customer writes; the agent steps
through the entries and drops one into the composer.
"""

from rich.text import Text
from textual.widgets import Static

from deskpilot.domain.candidates import Candidate, CandidateKind
from deskpilot.utils import truncate_text

ROW_LIMIT = 72


class AssistPanel(Static):
    """List of assist candidates with one highlighted entry."""

    BORDER_TITLE = "Suggestions"

    def __init__(self, **kwargs):
        super().__init__("", **kwargs)
        self._candidates: tuple[Candidate, ...] = ()
        self.highlighted = 0

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return self._candidates

    def show_candidates(self, candidates: tuple[Candidate, ...]) -> None:
        self._candidates = candidates
        self.highlighted = 0
        self.display = bool(candidates)
        self._render_rows()

    def cycle(self) -> int:
        """Move the highlight to the next entry, wrapping around."""
        if self._candidates:
            self.highlighted = (self.highlighted + 1) % len(self._candidates)
            self._render_rows()
        return self.highlighted

    def _render_rows(self) -> None:
        self.border_subtitle = "^N next · ^G insert · ^R regenerate"
        text = Text()
        for index, candidate in enumerate(self._candidates):
            if index:
                text.append("\n")
            active = index == self.highlighted
            label = "reply" if candidate.kind is CandidateKind.GENERATED_REPLY else "suggest"
            text.append("▶ " if active else "  ", style="bold cyan")
            text.append(f"{label:<8}", style="bold yellow" if label == "reply" else "bold green")
            text.append(truncate_text(candidate.body, ROW_LIMIT), style="reverse" if active else "")
        self.update(text)
