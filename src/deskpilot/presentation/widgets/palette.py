"""
CommandPalette - Candidate list shown while the agent searches with "/".

The palette only renders what the composer session tells it to; it holds no
selection logic of its own.
"""

from rich.text import Text
from textual.widgets import Static

from deskpilot.domain.candidates import Candidate, CandidateKind, ResultSet

KIND_STYLES = {
    CandidateKind.TEMPLATE: "bold magenta",
    CandidateKind.KNOWLEDGE_FAQ: "bold blue",
    CandidateKind.GENERATED_SUGGESTION: "bold green",
    CandidateKind.GENERATED_REPLY: "bold yellow",
}


class CommandPalette(Static):
    """Renders a result set with the highlighted row marked."""

    BORDER_TITLE = "Commands"

    def __init__(self, **kwargs):
        super().__init__("", **kwargs)
        self._result_set: ResultSet | None = None
        self._highlighted: int | None = None
        self._query = ""

    @property
    def highlighted(self) -> int | None:
        return self._highlighted

    def show_results(self, result_set: ResultSet, highlighted: int | None, query: str = "") -> None:
        self._result_set = result_set
        self._highlighted = highlighted
        self._query = query
        self.refresh_list()

    def move_highlight(self, index: int) -> None:
        self._highlighted = index
        self.refresh_list()

    def show_loading(self, query: str = "") -> None:
        self._result_set = None
        self._highlighted = None
        self._query = query
        self.update(Text("Searching...", style="dim italic"))

    def refresh_list(self) -> None:
        self.border_subtitle = f"/{self._query}" if self._query else "suggested"
        if self._result_set is None:
            self.update("")
            return
        if not self._result_set.candidates:
            self.update(Text("No commands found.", style="dim"))
            return

        text = Text()
        for index, candidate in enumerate(self._result_set):
            if index:
                text.append("\n")
            text.append_text(self._render_row(candidate, index == self._highlighted))
        if not self._result_set.complete:
            text.append("\n")
            text.append("Generating suggestions...", style="dim italic")
        if self._result_set.failed_sources:
            text.append("\n")
            text.append(f"Unavailable: {', '.join(self._result_set.failed_sources)}", style="dim red")
        self.update(text)

    def _render_row(self, candidate: Candidate, active: bool) -> Text:
        row = Text()
        row.append("▶ " if active else "  ", style="bold cyan")
        row.append(candidate.title, style="reverse" if active else "")
        if candidate.source_label:
            row.append(f"  [{candidate.source_label}]", style=KIND_STYLES.get(candidate.kind, "dim"))
        if candidate.description and candidate.description != candidate.title:
            row.append(f"\n    {candidate.description}", style="dim")
        return row
