"""
Deskpilot Presentation Layer - UI components for the agent composer.

This package contains the Textual app and its widgets. It renders state
owned by the composer session and forwards key presses to it.
"""

from .tui import ComposerApp

__all__ = ["ComposerApp"]
