"""
Keyboard-independent selection state for the command palette.

The state machine receives discrete ``PaletteEvent`` values through a single
``dispatch`` method; key bindings live in the presentation layer.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Union

from deskpilot.domain.candidates import Candidate
from deskpilot.logger import get_logger

logger = get_logger("selection")


class PaletteEvent(Enum):
    NAVIGATE_UP = "navigate_up"
    NAVIGATE_DOWN = "navigate_down"
    COMMIT = "commit"
    CANCEL = "cancel"


@dataclass(frozen=True, slots=True)
class Closed:
    """Nothing is selectable."""


@dataclass(frozen=True, slots=True)
class Open:
    """A candidate is highlighted; ``0 <= index < total``."""

    index: int
    total: int


SelectionState = Union[Closed, Open]

CLOSED = Closed()


class SelectionStateMachine:
    """Tracks the highlighted candidate and resolves commit/cancel."""

    def __init__(self) -> None:
        self._state: SelectionState = CLOSED
        self._candidates: tuple[Candidate, ...] = ()

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return isinstance(self._state, Open)

    @property
    def index(self) -> int | None:
        return self._state.index if isinstance(self._state, Open) else None

    @property
    def highlighted(self) -> Candidate | None:
        if isinstance(self._state, Open):
            return self._candidates[self._state.index]
        return None

    def show(self, candidates: Sequence[Candidate]) -> SelectionState:
        """Reset to the first candidate of a newly accepted result set."""
        self._candidates = tuple(candidates)
        self._state = Open(0, len(self._candidates)) if self._candidates else CLOSED
        return self._state

    def close(self) -> None:
        self._state = CLOSED
        self._candidates = ()

    def dispatch(self, event: PaletteEvent) -> str | None:
        """
        Apply one palette event.

        Returns:
            The committed candidate's body for ``COMMIT`` while open, else None
        """
        state = self._state

        if event is PaletteEvent.CANCEL:
            self.close()
            return None

        if not isinstance(state, Open):
            logger.debug(f"Ignoring {event.value} while closed")
            return None

        if event is PaletteEvent.NAVIGATE_DOWN:
            self._state = Open((state.index + 1) % state.total, state.total)
        elif event is PaletteEvent.NAVIGATE_UP:
            self._state = Open((state.index - 1 + state.total) % state.total, state.total)
        elif event is PaletteEvent.COMMIT:
            body = self._candidates[state.index].body
            self.close()
            return body
        else:
            raise ValueError(f"Unhandled palette event: {event!r}")
        return None
