"""
ComposerInput - The agent's message field.

Key handling beyond plain editing is bound at the app level; this widget
only tracks who the agent is typing as.
"""

from textual.widgets import Input

from deskpilot.logger import get_logger

logger = get_logger("composer_input")

AGENT = "Agent"
CUSTOMER = "Customer"


class ComposerInput(Input):
    """Single-line composer with a speaker label in its border."""

    def __init__(self, trigger_char: str = "/", **kwargs):
        super().__init__(
            placeholder=f"Type a reply, {trigger_char} for commands, Enter to send",
            **kwargs,
        )
        self.speaker = AGENT
        self.border_title = f"Message as {self.speaker}"

    def toggle_speaker(self) -> str:
        self.speaker = CUSTOMER if self.speaker == AGENT else AGENT
        self.border_title = f"Message as {self.speaker}"
        logger.debug(f"Composer speaker is now {self.speaker}")
        return self.speaker

    @property
    def as_customer(self) -> bool:
        return self.speaker == CUSTOMER

    def replace_text(self, text: str) -> None:
        """Set the value and move the cursor to the end."""
        self.value = text
        self.cursor_position = len(text)
