"""
Fan a palette query out to its sources and merge what comes back.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence

from deskpilot.config import AssistConfig
from deskpilot.domain.candidates import QueryMode, QueryRequest, ResultSet
from deskpilot.domain.errors import AdapterFailure, MalformedResponse
from deskpilot.logger import get_logger

from .ranking import merge_outcomes
from .sources.base import SourceAdapter, SourceFailed, SourceOk, SourceOutcome

logger = get_logger("dispatcher")

PartialCallback = Callable[[ResultSet], None]


class QueryDispatcher:
    """Runs the sources for one request concurrently and tolerates partial failure.

    Search mode queries templates, knowledge and generated text. Contextual
    mode (empty query) serves the fixed commands at once and appends
    generated suggestions and replies for the last customer message.
    """

    def __init__(
        self,
        *,
        templates: SourceAdapter,
        knowledge: SourceAdapter,
        generative: SourceAdapter,
        static: SourceAdapter,
        config: AssistConfig | None = None,
    ) -> None:
        self._search_sources: list[SourceAdapter] = [templates, knowledge, generative]
        self._generative = generative
        self._static = static
        self._config = config or AssistConfig()

    async def dispatch(
        self,
        request: QueryRequest,
        on_partial: PartialCallback | None = None,
    ) -> ResultSet:
        """
        Resolve ``request`` against every applicable source.

        Args:
            request: The query and its generation
            on_partial: Called with an incomplete result set when part of a
                contextual answer is available before the generated part

        Returns:
            A complete ResultSet tagged with ``request.generation``
        """
        if request.mode is QueryMode.SEARCH:
            outcomes = await self._fan_out(self._search_sources, request)
            return self._build(request, outcomes, self._config.search_limit)

        static_outcome = await self._run(self._static, request)
        if not request.context_message.strip():
            return self._build(request, [static_outcome], self._config.contextual_limit)

        if on_partial is not None:
            on_partial(self._build(request, [static_outcome], self._config.contextual_limit, complete=False))

        generated = await self._run(self._generative, request)
        return self._build(request, [static_outcome, generated], self._config.contextual_limit)

    async def _fan_out(
        self,
        sources: Sequence[SourceAdapter],
        request: QueryRequest,
    ) -> list[SourceOutcome]:
        logger.debug(
            f"Dispatching generation {request.generation} ({request.mode.value}) "
            f"to {[source.name for source in sources]}"
        )
        return list(await asyncio.gather(*(self._run(source, request) for source in sources)))

    async def _run(self, source: SourceAdapter, request: QueryRequest) -> SourceOutcome:
        try:
            candidates = await source.fetch(request.text, request.context_message)
        except AdapterFailure as e:
            logger.warning(f"Source {source.name} degraded: {e.reason}")
            return SourceFailed(source.name, e.reason)
        except MalformedResponse as e:
            logger.warning(f"Source {source.name} returned malformed data: {e.detail}")
            return SourceFailed(source.name, e.detail)
        except Exception as e:
            logger.exception(f"Source {source.name} failed")
            return SourceFailed(source.name, str(e) or type(e).__name__)
        return SourceOk(source.name, tuple(candidates))

    def _build(
        self,
        request: QueryRequest,
        outcomes: Sequence[SourceOutcome],
        limit: int | None,
        complete: bool = True,
    ) -> ResultSet:
        failed = tuple(outcome.source for outcome in outcomes if isinstance(outcome, SourceFailed))
        return ResultSet(
            candidates=tuple(merge_outcomes(outcomes, request.mode, limit)),
            generation=request.generation,
            mode=request.mode,
            complete=complete,
            failed_sources=failed,
        )
