"""
Source adapter contract and per-source outcomes.

Each adapter produces candidates for one query independently of the
others. The dispatcher wraps every call so that a failing source turns
into a ``SourceFailed`` value instead of aborting the fan-out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union

from deskpilot.domain.candidates import Candidate


class SourceAdapter(Protocol):
    """Contract implemented by every suggestion source."""

    name: str

    async def fetch(self, query: str, context_message: str) -> list[Candidate]:
        """Return candidates for ``query``.

        Raises:
            AdapterFailure: When the source cannot produce results
        """

        ...


@dataclass(frozen=True, slots=True)
class SourceOk:
    """Candidates produced by one source."""

    source: str
    candidates: tuple[Candidate, ...]


@dataclass(frozen=True, slots=True)
class SourceFailed:
    """A source that failed; it contributes nothing to the result set."""

    source: str
    reason: str


SourceOutcome = Union[SourceOk, SourceFailed]
