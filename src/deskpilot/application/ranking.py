"""
Merge per-source outcomes into one ordered, capped candidate list.
"""

from __future__ import annotations

from collections.abc import Sequence

from deskpilot.domain.candidates import Candidate, CandidateKind, QueryMode
from deskpilot.logger import get_logger

from .sources.base import SourceOk, SourceOutcome

logger = get_logger("ranking")

KIND_PRIORITY: dict[QueryMode, dict[CandidateKind, int]] = {
    QueryMode.SEARCH: {
        CandidateKind.TEMPLATE: 0,
        CandidateKind.KNOWLEDGE_FAQ: 1,
        CandidateKind.GENERATED_SUGGESTION: 2,
        CandidateKind.GENERATED_REPLY: 3,
    },
    QueryMode.CONTEXTUAL: {
        CandidateKind.TEMPLATE: 0,
        CandidateKind.GENERATED_SUGGESTION: 1,
        CandidateKind.GENERATED_REPLY: 2,
        CandidateKind.KNOWLEDGE_FAQ: 3,
    },
}

for _mode, _table in KIND_PRIORITY.items():
    _missing = set(CandidateKind) - set(_table)
    if _missing:
        raise KeyError(f"No {_mode.value} priority for candidate kinds: {sorted(k.value for k in _missing)}")


def merge_outcomes(
    outcomes: Sequence[SourceOutcome],
    mode: QueryMode,
    limit: int | None = None,
) -> list[Candidate]:
    """
    Concatenate successful outcomes in source-priority order.

    Candidates keep their source's internal order (``sorted`` is stable), ids
    repeated across sources keep the first occurrence, and content duplicates
    are kept because their provenance differs.

    Args:
        outcomes: Per-source results in dispatch order
        mode: Search or contextual ordering table
        limit: Maximum number of candidates returned, None for no cap

    Returns:
        The merged candidate list
    """
    priority = KIND_PRIORITY[mode]
    combined = [
        candidate
        for outcome in outcomes
        if isinstance(outcome, SourceOk)
        for candidate in outcome.candidates
    ]
    ordered = sorted(combined, key=lambda candidate: priority[candidate.kind])

    merged: list[Candidate] = []
    seen: set[str] = set()
    for candidate in ordered:
        if candidate.id in seen:
            logger.debug(f"Dropping candidate with repeated id {candidate.id!r}")
            continue
        seen.add(candidate.id)
        merged.append(candidate)

    if limit is not None:
        merged = merged[:limit]

    logger.debug(f"Merged {len(combined)} candidates into {len(merged)} ({mode.value}, limit={limit})")
    return merged
