"""Event types published by the composer session.

The session is the only writer of visible state; it announces every change
through these events so the UI layer can render without reaching into the
session's internals.
"""

import time
from dataclasses import dataclass, field

from deskpilot.domain.candidates import Candidate, ResultSet


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.time, init=False)
    """Timestamp when the event was created (Unix timestamp)."""


@dataclass
class SuggestionsUpdated(Event):
    """A result set passed the staleness guard and is now displayed.

    Attributes:
        result_set: The accepted result set
        highlighted: Index of the highlighted candidate, None when nothing is selectable
    """

    result_set: ResultSet
    highlighted: int | None = None


@dataclass
class SelectionMoved(Event):
    """The highlighted palette entry changed."""

    index: int
    total: int


@dataclass
class PaletteToggled(Event):
    """The palette was opened or closed."""

    visible: bool


@dataclass
class InlineSuggestionChanged(Event):
    """Ghost text after the cursor changed ("" clears it)."""

    suffix: str


@dataclass
class CandidateCommitted(Event):
    """A palette candidate was inserted into the composer."""

    candidate: Candidate


@dataclass
class ComposerTextReplaced(Event):
    """The session rewrote the composer text (commit, inline accept, send)."""

    text: str


@dataclass
class AssistSuggestionsChanged(Event):
    """Suggestions and quick replies for the latest customer message changed.

    Attributes:
        candidates: Generated suggestions followed by quick replies, empty when cleared
        generation: Assist generation the candidates answer
    """

    candidates: tuple[Candidate, ...]
    generation: int
