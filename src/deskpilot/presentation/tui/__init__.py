"""TUI (Terminal User Interface) application.

This module contains the composer TUI built with Textual.
"""

from deskpilot.presentation.tui.composer_app import ComposerApp

__all__ = ["ComposerApp"]
