"""
ChatPanel - Scrollable conversation transcript using RichLog with Rich markup.
"""

from rich.markup import escape
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text
from textual.widgets import RichLog

from deskpilot.domain.records import ChatMessage


class ChatPanel(RichLog):
    """
    Displays the customer conversation.

    Customer messages are left-aligned; agent messages get a right-aligned
    label and an indented body so both sides are easy to tell apart.
    """

    BORDER_TITLE = "Conversation"

    def __init__(self, customer_name: str = "Customer", **kwargs):
        super().__init__(
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs,
        )
        self.customer_name = customer_name

    def add_message(self, message: ChatMessage) -> None:
        if message.is_agent:
            self.add_agent_message(message.text)
        else:
            self.add_customer_message(message.text)

    def add_customer_message(self, text: str) -> None:
        self.write(f"[bold cyan]{escape(self.customer_name)}:[/] {escape(text)}\n")

    def add_agent_message(self, text: str) -> None:
        label = Text("Agent:", style="bold green", justify="right")
        self.write(label)
        self.write(Padding(Text(text), (0, 0, 0, 20)))
        self.write("\n")

    def add_panel(self, content: str, title: str = "", style: str = "cyan") -> None:
        """
        Add a styled panel for system notices (summaries, errors, help).

        Args:
            content: Panel content (Rich markup allowed)
            title: Optional panel title
            style: Border style/color
        """
        self.write(Panel(content, title=title, border_style=style))
        self.write("\n")

    def clear_chat(self) -> None:
        self.clear()
