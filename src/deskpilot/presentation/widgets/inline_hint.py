"""
InlineHint - Ghost text line showing the pending smart-compose continuation.
"""

from rich.text import Text
from textual.widgets import Static


class InlineHint(Static):
    """Shows the composer text followed by the dimmed continuation."""

    def __init__(self, **kwargs):
        super().__init__("", **kwargs)
        self.suffix = ""

    def show_suffix(self, text: str, suffix: str) -> None:
        self.suffix = suffix
        if not suffix:
            self.update("")
            self.display = False
            return
        hint = Text()
        hint.append(text[-40:], style="")
        hint.append(suffix, style="dim italic")
        hint.append("   Tab to accept", style="dim cyan")
        self.update(hint)
        self.display = True
