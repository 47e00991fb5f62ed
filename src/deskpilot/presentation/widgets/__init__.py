"""
Deskpilot TUI Widgets - Custom Textual widgets for the composer interface.
"""

from .assist_panel import AssistPanel
from .chat_panel import ChatPanel
from .composer_input import ComposerInput
from .inline_hint import InlineHint
from .palette import CommandPalette

__all__ = [
    "AssistPanel",
    "ChatPanel",
    "ComposerInput",
    "InlineHint",
    "CommandPalette",
]
