"""
Generation counter that keeps superseded results off the screen.
"""

from __future__ import annotations

from collections.abc import Callable

from deskpilot.domain.candidates import ResultSet
from deskpilot.logger import get_logger

logger = get_logger("staleness")


class GenerationGuard:
    """Monotonic generation counter owned by one composer session.

    ``advance`` is called once per dispatch. A result is applied only if its
    generation is still the current one when it arrives; a slower, older
    query resolving late is dropped.
    """

    def __init__(self, name: str = "palette") -> None:
        self._name = name
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def advance(self) -> int:
        self._current += 1
        return self._current

    def is_current(self, generation: int) -> bool:
        return generation == self._current

    def accept(self, result: ResultSet, apply: Callable[[ResultSet], None]) -> bool:
        """Apply ``result`` if it answers the current generation.

        Returns:
            True when ``apply`` was called, False when the result was stale
        """
        if not self.is_current(result.generation):
            logger.debug(
                f"[{self._name}] Dropping stale result set "
                f"(generation={result.generation}, current={self._current})"
            )
            return False
        apply(result)
        return True
