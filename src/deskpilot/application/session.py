"""Composer session: the single owner of the composer's visible assistance state.

Every component of the suggestion pipeline is wired here explicitly and the
session is passed by reference to whoever needs it (TUI, CLI, tests). Only
the session mutates the displayed result set, the selection and the ghost
text, and it announces each change on the event bus.

Palette flow:
    keystroke -> on_text_changed -> set_palette_query -> debounce (search mode)
    -> generation allocated -> dispatcher fan-out -> staleness guard -> selection reset

Inline flow:
    keystroke -> on_text_changed -> debounce -> generative completion
    -> continuation extraction -> ghost text (dropped if the text moved on)

Assist flow:
    load / post_customer_message / refresh_assist -> generation allocated
    -> contextual suggestions and quick replies -> assist panel
"""

from __future__ import annotations

from collections.abc import Sequence

from deskpilot.config import AssistConfig
from deskpilot.domain.candidates import Candidate, QueryRequest, ResultSet
from deskpilot.domain.errors import NoActiveQuery
from deskpilot.domain.events import (
    AssistSuggestionsChanged,
    CandidateCommitted,
    ComposerTextReplaced,
    EventBus,
    InlineSuggestionChanged,
    PaletteToggled,
    SelectionMoved,
    SuggestionsUpdated,
)
from deskpilot.domain.protocols import ConversationStore, KnowledgeStore, TemplateStore, TextGenerator
from deskpilot.domain.records import ChatMessage, Template
from deskpilot.logger import get_logger

from .continuation import extract_continuation, should_offer_continuation
from .debounce import DebounceScheduler
from .dispatcher import QueryDispatcher
from .selection import PaletteEvent, SelectionStateMachine
from .sources import GenerativeAdapter, KnowledgeAdapter, StaticCommandAdapter, TemplateAdapter
from .staleness import GenerationGuard

logger = get_logger("composer_session")

PALETTE_TOKEN = "palette"
INLINE_TOKEN = "inline"
ASSIST_TOKEN = "assist"


class ComposerSession:
    """Assistance state for one agent composing replies in one conversation."""

    def __init__(
        self,
        *,
        conversation_id: str,
        conversations: ConversationStore,
        templates: TemplateStore,
        knowledge: KnowledgeStore,
        generator: TextGenerator,
        config: AssistConfig | None = None,
        event_bus: EventBus | None = None,
        scheduler: DebounceScheduler | None = None,
    ) -> None:
        """
        Args:
            conversation_id: Conversation the composer writes into
            conversations: Message store
            templates: Template store, read once by ``load``
            knowledge: Knowledge base
            generator: Text generation service
            config: Assistance tunables
            event_bus: Bus receiving visible-state events; a private one is created if None
            scheduler: Debounce scheduler; a private one is created if None
        """
        self.conversation_id = conversation_id
        self.config = config or AssistConfig()
        self.event_bus = event_bus or EventBus()

        self._conversations = conversations
        self._template_store = templates
        self._generator = generator
        self._scheduler = scheduler or DebounceScheduler()
        self._templates: list[Template] = []

        self.generative = GenerativeAdapter(generator, knowledge, self._history, self.config)
        self.dispatcher = QueryDispatcher(
            templates=TemplateAdapter(
                lambda: self._templates,
                description_max_chars=self.config.description_max_chars,
            ),
            knowledge=KnowledgeAdapter(
                knowledge,
                limit=self.config.knowledge_limit,
                title_max_chars=self.config.description_max_chars,
            ),
            generative=self.generative,
            static=StaticCommandAdapter(),
            config=self.config,
        )
        self.selection = SelectionStateMachine()

        self._palette_guard = GenerationGuard(PALETTE_TOKEN)
        self._inline_guard = GenerationGuard(INLINE_TOKEN)
        self._assist_guard = GenerationGuard(ASSIST_TOKEN)

        self._text = ""
        self._palette_visible = False
        self._palette_anchor: int | None = None
        self._palette_query = ""
        self._result_set: ResultSet | None = None
        self._inline_suffix = ""
        self._last_customer_message = ""
        self._assist: tuple[Candidate, ...] = ()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def palette_visible(self) -> bool:
        return self._palette_visible

    @property
    def palette_query(self) -> str:
        return self._palette_query

    @property
    def result_set(self) -> ResultSet | None:
        """The result set currently displayed in the palette."""
        return self._result_set

    @property
    def inline_suggestion(self) -> str:
        return self._inline_suffix

    @property
    def last_customer_message(self) -> str:
        return self._last_customer_message

    @property
    def assist_candidates(self) -> tuple[Candidate, ...]:
        """Suggestions and quick replies for the latest customer message."""
        return self._assist

    @property
    def generation(self) -> int:
        return self._palette_guard.current

    @property
    def templates(self) -> list[Template]:
        return list(self._templates)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self, refresh: bool = True) -> None:
        """Load templates and the latest customer message for this conversation.

        With ``refresh`` the assist suggestions for that message are generated in
        the background.
        """
        try:
            self._templates = list(await self._template_store.list_templates())
        except Exception as e:
            logger.warning(f"Templates unavailable, palette search will skip them: {e}")
            self._templates = []

        messages = await self._conversations.get_messages(self.conversation_id)
        customer_messages = [m for m in messages if not m.is_agent]
        self._last_customer_message = customer_messages[-1].text if customer_messages else ""
        logger.info(
            f"Session loaded for {self.conversation_id}: {len(self._templates)} templates, "
            f"{len(messages)} messages"
        )
        if refresh and self._last_customer_message:
            self.refresh_assist()

    async def settle(self) -> None:
        """Wait for pending debounce timers and in-flight dispatches."""
        await self._scheduler.settle()

    async def shutdown(self) -> None:
        await self._scheduler.shutdown()

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def on_text_changed(self, text: str, assist: bool = True) -> None:
        """Entry point for every edit of the composer text.

        With ``assist`` False (the agent is typing on the customer's behalf)
        the text is tracked but the palette is closed and no continuation is
        offered.
        """
        if not assist:
            self._text = text
            self._cancel_inline()
            self.close_palette()
            return
        if text == self._text:
            return
        self._text = text
        self._cancel_inline()

        trigger = self.config.trigger_char
        if self._palette_visible:
            anchor = self._palette_anchor
            if anchor is not None:
                if len(text) <= anchor or text[anchor] != trigger:
                    self.close_palette()
                else:
                    self.set_palette_query(text[anchor + 1 :])
        elif text.endswith(trigger):
            self.open_palette()

        if should_offer_continuation(text, self._palette_visible, trigger, self.config.inline_min_chars):
            partial = text
            self._scheduler.schedule(
                self.config.inline_debounce_seconds,
                INLINE_TOKEN,
                lambda: self._run_continuation(partial),
            )

    # ------------------------------------------------------------------
    # Palette
    # ------------------------------------------------------------------

    def open_palette(self) -> None:
        """Show the palette in contextual mode.

        When the composer text ends with the trigger character, the palette is
        anchored to it: text typed after the trigger becomes the search query
        and deleting the trigger closes the palette. Otherwise the palette is
        detached and a commit replaces the whole composer text.
        """
        if self._palette_visible:
            return
        trigger = self.config.trigger_char
        self._palette_anchor = len(self._text) - len(trigger) if self._text.endswith(trigger) else None
        self._palette_visible = True
        self._palette_query = ""
        self._cancel_inline()
        self.event_bus.publish(PaletteToggled(visible=True))
        self._scheduler.spawn(self._contextual)

    def close_palette(self) -> None:
        if not self._palette_visible:
            return
        self._palette_visible = False
        self._palette_anchor = None
        self._palette_query = ""
        self._result_set = None
        self._scheduler.cancel_token(PALETTE_TOKEN)
        self.selection.close()
        self.event_bus.publish(PaletteToggled(visible=False))

    def set_palette_query(self, query: str) -> None:
        """Search after the quiet period, or go contextual at once for an empty query."""
        if not self._palette_visible:
            logger.debug("Ignoring palette query while the palette is closed")
            return
        self._palette_query = query
        if query.strip():
            self._scheduler.schedule(
                self.config.debounce_seconds,
                PALETTE_TOKEN,
                lambda: self._search(query),
            )
        else:
            self._scheduler.cancel_token(PALETTE_TOKEN)
            self._scheduler.spawn(self._contextual)

    def handle_palette_event(self, event: PaletteEvent) -> str | None:
        """
        Forward a navigation/commit/cancel signal to the selection state machine.

        Returns:
            The new composer text when a candidate was committed, else None
        """
        if not self._palette_visible:
            return None

        if event is PaletteEvent.CANCEL:
            self.selection.dispatch(event)
            self.close_palette()
            return None

        candidate = self.selection.highlighted
        body = self.selection.dispatch(event)

        if event is PaletteEvent.COMMIT:
            if body is None or candidate is None:
                return None
            prefix = self._text[: self._palette_anchor] if self._palette_anchor is not None else ""
            self.close_palette()
            new_text = prefix + body
            self._replace_text(new_text)
            self.event_bus.publish(CandidateCommitted(candidate=candidate))
            logger.info(f"Committed candidate {candidate.id} ({candidate.kind.value})")
            return new_text

        state = self.selection.state
        if self.selection.is_open:
            self.event_bus.publish(SelectionMoved(index=state.index, total=state.total))
        return None

    async def query(self, text: str) -> ResultSet:
        """Run a palette query immediately, bypassing the debounce timer.

        The result still goes through the staleness guard; it is returned
        whether or not it was the one that ended up displayed.
        """
        if text.strip():
            return await self._search(text)
        return await self._contextual()

    async def _search(self, query: str) -> ResultSet:
        request = QueryRequest(
            text=query,
            generation=self._palette_guard.advance(),
            context_message=self._last_customer_message,
        )
        result = await self.dispatcher.dispatch(request)
        self._palette_guard.accept(result, self._apply_result)
        return result

    async def _contextual(self) -> ResultSet:
        request = QueryRequest(
            text="",
            generation=self._palette_guard.advance(),
            context_message=self._last_customer_message,
        )
        result = await self.dispatcher.dispatch(
            request,
            on_partial=lambda partial: self._palette_guard.accept(partial, self._apply_result),
        )
        self._palette_guard.accept(result, self._apply_result)
        return result

    def _apply_result(self, result: ResultSet) -> None:
        if not self._palette_visible:
            logger.debug(f"Palette closed; not displaying generation {result.generation}")
            return
        self._result_set = result
        self.selection.show(result.candidates)
        self.event_bus.publish(SuggestionsUpdated(result_set=result, highlighted=self.selection.index))
        logger.debug(
            f"Displayed generation {result.generation}: {result.total} candidates "
            f"(complete={result.complete}, failed={list(result.failed_sources)})"
        )

    # ------------------------------------------------------------------
    # Inline continuation
    # ------------------------------------------------------------------

    def accept_inline(self) -> str | None:
        """Append the ghost text to the composer; None when there is nothing to accept."""
        if not self._inline_suffix:
            return None
        new_text = self._text + self._inline_suffix
        self._replace_text(new_text)
        return new_text

    async def continuation_for(self, partial: str) -> str:
        """Suffix the composer would offer for ``partial``.

        Raises:
            NoActiveQuery: If ``partial`` is too short to continue
        """
        if len(partial) <= self.config.inline_min_chars:
            raise NoActiveQuery(f"need more than {self.config.inline_min_chars} characters to continue")
        completion = await self.generative.complete(partial)
        return extract_continuation(partial, completion)

    async def _run_continuation(self, partial: str) -> None:
        generation = self._inline_guard.advance()
        completion = await self.generative.complete(partial)
        if not self._inline_guard.is_current(generation) or self._text != partial or self._palette_visible:
            logger.debug(f"Dropping continuation for stale text {partial!r}")
            return

        suffix = extract_continuation(partial, completion)
        if not suffix.strip():
            return
        self._inline_suffix = suffix
        self.event_bus.publish(InlineSuggestionChanged(suffix=suffix))

    def _cancel_inline(self) -> None:
        self._scheduler.cancel_token(INLINE_TOKEN)
        if self._inline_suffix:
            self._inline_suffix = ""
            self.event_bus.publish(InlineSuggestionChanged(suffix=""))

    def _replace_text(self, text: str) -> None:
        self._text = text
        self._cancel_inline()
        self.event_bus.publish(ComposerTextReplaced(text=text))

    # ------------------------------------------------------------------
    # Assist panel
    # ------------------------------------------------------------------

    def refresh_assist(self) -> None:
        """Regenerate suggestions and quick replies for the latest customer message."""
        self._scheduler.spawn(self._run_assist)

    async def _run_assist(self) -> tuple[Candidate, ...]:
        generation = self._assist_guard.advance()
        candidates: tuple[Candidate, ...] = ()
        if self._last_customer_message:
            candidates = tuple(await self.generative.fetch("", self._last_customer_message))
        if not self._assist_guard.is_current(generation):
            logger.debug(f"Dropping assist generation {generation}")
            return candidates
        self._assist = candidates
        self.event_bus.publish(AssistSuggestionsChanged(candidates=candidates, generation=generation))
        return candidates

    def insert_assist(self, index: int) -> str | None:
        """Put the assist candidate at ``index`` into the composer, replacing its text.

        Returns:
            The new composer text, None if there is no such candidate
        """
        if not 0 <= index < len(self._assist):
            return None
        candidate = self._assist[index]
        self.close_palette()
        self._replace_text(candidate.body)
        self.event_bus.publish(CandidateCommitted(candidate=candidate))
        logger.info(f"Inserted assist candidate {candidate.id}")
        return candidate.body

    # ------------------------------------------------------------------
    # Conversation
    # ------------------------------------------------------------------

    async def send(self, text: str | None = None) -> ChatMessage | None:
        """Store the composer text (or ``text``) as an agent message and clear the composer."""
        body = (self._text if text is None else text).strip()
        if not body:
            return None
        message = await self._conversations.add_message(self.conversation_id, body, is_agent=True)
        self.close_palette()
        self._replace_text("")
        return message

    async def post_customer_message(self, text: str, refresh: bool = True) -> ChatMessage | None:
        """Record a customer message; it seeds contextual suggestions from now on.

        Args:
            text: Message body
            refresh: Regenerate the assist suggestions for the new message
        """
        body = text.strip()
        if not body:
            return None
        message = await self._conversations.add_message(self.conversation_id, body, is_agent=False)
        self._last_customer_message = message.text
        if refresh:
            self.refresh_assist()
        return message

    async def messages(self) -> list[ChatMessage]:
        return list(await self._history())

    async def summarize(self) -> str:
        """Summary of the conversation so far; "" when unavailable."""
        history = await self._history()
        if not history:
            return ""
        try:
            summary = await self._generator.summarize(history)
        except Exception as e:
            logger.warning(f"Summary generation failed: {e}")
            return ""
        return (summary or "").strip()

    async def _history(self) -> Sequence[ChatMessage]:
        return await self._conversations.get_messages(self.conversation_id)
