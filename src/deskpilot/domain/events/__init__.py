"""Event system for decoupled component communication.

The composer session publishes events, and the UI layer subscribes to them.

Example:
    ```python
    from deskpilot.domain.events import EventBus, PaletteToggled

    event_bus = EventBus()

    def handle_palette(event: PaletteToggled):
        print(f"Palette visible: {event.visible}")

    event_bus.subscribe(PaletteToggled, handle_palette)
    event_bus.publish(PaletteToggled(visible=True))
    ```
"""

from .bus import EventBus
from .types import (
    AssistSuggestionsChanged,
    CandidateCommitted,
    ComposerTextReplaced,
    Event,
    InlineSuggestionChanged,
    PaletteToggled,
    SelectionMoved,
    SuggestionsUpdated,
)

__all__ = [
    "EventBus",
    "Event",
    "SuggestionsUpdated",
    "SelectionMoved",
    "PaletteToggled",
    "InlineSuggestionChanged",
    "CandidateCommitted",
    "ComposerTextReplaced",
    "AssistSuggestionsChanged",
]
