"""
Template source: filters the agent's saved templates locally.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from pydantic import ValidationError

from deskpilot.application.relevance import RelevanceFilter
from deskpilot.domain.candidates import Candidate, CandidateKind
from deskpilot.domain.errors import AdapterFailure
from deskpilot.domain.records import Template
from deskpilot.logger import get_logger
from deskpilot.utils import truncate_text

logger = get_logger("sources.templates")


class TemplateAdapter:
    """Matches the query against template titles and content."""

    name = "templates"

    def __init__(
        self,
        template_provider: Callable[[], Sequence[Template]],
        relevance: RelevanceFilter | None = None,
        description_max_chars: int = 80,
    ) -> None:
        self._template_provider = template_provider
        self._relevance = relevance or RelevanceFilter()
        self._description_max_chars = description_max_chars

    async def fetch(self, query: str, context_message: str) -> list[Candidate]:
        if not query.strip():
            return []

        templates = list(self._template_provider())
        matches = [t for t in templates if self._relevance.match(query, [t.title, t.content])]
        logger.debug(f"TemplateAdapter query={query!r} matched {len(matches)}/{len(templates)}")

        try:
            return [self._to_candidate(template) for template in matches]
        except ValidationError as e:
            raise AdapterFailure(self.name, f"invalid template record: {e.errors()[0]['msg']}") from e

    def _to_candidate(self, template: Template) -> Candidate:
        return Candidate(
            id=f"template-{template.id}",
            kind=CandidateKind.TEMPLATE,
            title=template.title,
            body=template.content,
            description=truncate_text(template.content, self._description_max_chars),
            source_label="Template",
        )
