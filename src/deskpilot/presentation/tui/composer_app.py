"""
ComposerApp - Textual application around one composer session.
"""

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.widgets import Footer, Header, Input

from deskpilot.application.selection import PaletteEvent
from deskpilot.application.session import ComposerSession
from deskpilot.domain.events import (
    AssistSuggestionsChanged,
    CandidateCommitted,
    ComposerTextReplaced,
    InlineSuggestionChanged,
    PaletteToggled,
    SelectionMoved,
    SuggestionsUpdated,
)
from deskpilot.logger import get_logger
from deskpilot.presentation.widgets.assist_panel import AssistPanel
from deskpilot.presentation.widgets.chat_panel import ChatPanel
from deskpilot.presentation.widgets.composer_input import ComposerInput
from deskpilot.presentation.widgets.inline_hint import InlineHint
from deskpilot.presentation.widgets.palette import CommandPalette

logger = get_logger("composer_tui")

PALETTE_ACTIONS = {"palette_up", "palette_down", "palette_cancel"}
ASSIST_ACTIONS = {"assist_next", "assist_insert"}


class ComposerApp(App):
    """
    The agent composer TUI.

    Layout:
    ┌─────────────────────────────────────────┐
    │               Header                    │
    ├─────────────────────────────────────────┤
    │          Chat Panel (scrollable)        │
    ├─────────────────────────────────────────┤
    │  Assist panel (latest customer message) │
    │     Command Palette (while "/" open)    │
    │     Inline hint (ghost continuation)    │
    │          Composer Input                 │
    ├─────────────────────────────────────────┤
    │               Footer                    │
    └─────────────────────────────────────────┘

    All assistance state lives in the ComposerSession; the app forwards
    edits and key presses to it and renders the events it publishes.
    """

    TITLE = "Deskpilot"
    SUB_TITLE = "Agent reply composer"

    CSS_PATH = "styles.tcss"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
        Binding("ctrl+c", "quit", "Quit", priority=True, show=False),
        Binding("ctrl+o", "toggle_speaker", "Switch speaker"),
        Binding("ctrl+s", "summarize", "Summary"),
        Binding("ctrl+l", "clear_chat", "Clear Chat"),
        Binding("ctrl+r", "assist_regenerate", "Regenerate"),
        Binding("ctrl+n", "assist_next", "Next suggestion", show=False),
        Binding("ctrl+g", "assist_insert", "Use suggestion", show=False),
        Binding("up", "palette_up", "Previous", show=False, priority=True),
        Binding("down", "palette_down", "Next", show=False, priority=True),
        Binding("enter", "palette_commit", "Insert", show=False, priority=True),
        Binding("escape", "palette_cancel", "Close", show=False, priority=True),
        Binding("tab", "accept_inline", "Accept suggestion", show=False, priority=True),
    ]

    def __init__(self, session: ComposerSession, customer_name: str = "Customer"):
        """
        Initialize the composer TUI.

        Args:
            session: Composer session owning palette, selection and inline state
            customer_name: Name shown for customer messages
        """
        super().__init__()
        self.session = session
        self.customer_name = customer_name
        self._subscribe_events()

    def compose(self) -> ComposeResult:
        """Create the UI layout."""
        yield Header()

        with Container(id="app-container"):
            with Vertical(id="main-content"):
                yield ChatPanel(customer_name=self.customer_name, id="chat")
                yield AssistPanel(id="assist")
                yield CommandPalette(id="palette")
                yield InlineHint(id="inline-hint")
                yield ComposerInput(trigger_char=self.session.config.trigger_char, id="composer")

        yield Footer()

    async def on_mount(self) -> None:
        logger.info("Composer TUI mounted")
        self._palette().display = False
        self._hint().display = False
        self._assist().display = False

        await self.session.load()
        chat = self._chat()
        messages = await self.session.messages()
        for message in messages:
            chat.add_message(message)

        if len(messages) <= 1:
            chat.add_panel(
                "[bold]Welcome to Deskpilot![/]\n\n"
                f"Type [cyan]{self.session.config.trigger_char}[/] for templates, FAQ answers and suggestions\n"
                "Press [cyan]Tab[/] to accept an inline suggestion\n"
                "Press [cyan]Ctrl+O[/] to type as the customer\n"
                "Press [cyan]Ctrl+N[/] and [cyan]Ctrl+G[/] to pick a suggestion, [cyan]Ctrl+R[/] to regenerate\n"
                "Press [cyan]Ctrl+S[/] for a conversation summary\n"
                "Press [cyan]Ctrl+Q[/] to quit",
                title="Getting Started",
                style="green",
            )
        self._composer().focus()

    # ------------------------------------------------------------------
    # Session events
    # ------------------------------------------------------------------

    def _subscribe_events(self) -> None:
        bus = self.session.event_bus
        bus.subscribe(SuggestionsUpdated, self._on_suggestions_updated)
        bus.subscribe(SelectionMoved, self._on_selection_moved)
        bus.subscribe(PaletteToggled, self._on_palette_toggled)
        bus.subscribe(InlineSuggestionChanged, self._on_inline_changed)
        bus.subscribe(ComposerTextReplaced, self._on_text_replaced)
        bus.subscribe(CandidateCommitted, self._on_candidate_committed)
        bus.subscribe(AssistSuggestionsChanged, self._on_assist_changed)

    def _on_suggestions_updated(self, event: SuggestionsUpdated) -> None:
        self._palette().show_results(event.result_set, event.highlighted, self.session.palette_query)

    def _on_selection_moved(self, event: SelectionMoved) -> None:
        self._palette().move_highlight(event.index)

    def _on_palette_toggled(self, event: PaletteToggled) -> None:
        palette = self._palette()
        palette.display = event.visible
        if event.visible:
            palette.show_loading()

    def _on_inline_changed(self, event: InlineSuggestionChanged) -> None:
        self._hint().show_suffix(self.session.text, event.suffix)

    def _on_text_replaced(self, event: ComposerTextReplaced) -> None:
        self._composer().replace_text(event.text)

    def _on_candidate_committed(self, event: CandidateCommitted) -> None:
        logger.info(f"Inserted {event.candidate.kind.value} '{event.candidate.title}'")

    def _on_assist_changed(self, event: AssistSuggestionsChanged) -> None:
        self._assist().show_candidates(event.candidates)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "composer":
            return
        self.session.on_text_changed(event.value, assist=not self._composer().as_customer)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Send the composer text as the current speaker (Enter with the palette closed)."""
        composer = self._composer()
        text = event.value.strip()
        if not text:
            return

        if composer.as_customer:
            message = await self.session.post_customer_message(text)
            composer.replace_text("")
        else:
            message = await self.session.send(text)

        if message is not None:
            self._chat().add_message(message)
        composer.focus()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Palette and inline keys are live only while there is something to act on."""
        if action in PALETTE_ACTIONS:
            return self.session.palette_visible
        if action == "palette_commit":
            return self.session.palette_visible and self.session.selection.is_open
        if action in ASSIST_ACTIONS:
            return bool(self.session.assist_candidates)
        if action == "accept_inline":
            return bool(self.session.inline_suggestion)
        return True

    def action_palette_up(self) -> None:
        self.session.handle_palette_event(PaletteEvent.NAVIGATE_UP)

    def action_palette_down(self) -> None:
        self.session.handle_palette_event(PaletteEvent.NAVIGATE_DOWN)

    def action_palette_commit(self) -> None:
        self.session.handle_palette_event(PaletteEvent.COMMIT)

    def action_palette_cancel(self) -> None:
        self.session.handle_palette_event(PaletteEvent.CANCEL)

    def action_accept_inline(self) -> None:
        self.session.accept_inline()

    def action_assist_next(self) -> None:
        self._assist().cycle()

    def action_assist_insert(self) -> None:
        self.session.insert_assist(self._assist().highlighted)
        self._composer().focus()

    def action_assist_regenerate(self) -> None:
        self.session.refresh_assist()

    def action_toggle_speaker(self) -> None:
        composer = self._composer()
        speaker = composer.toggle_speaker()
        self.session.on_text_changed(composer.value, assist=not composer.as_customer)
        self.notify(f"Typing as {speaker}")

    def action_clear_chat(self) -> None:
        chat = self._chat()
        chat.clear_chat()
        chat.add_panel("Chat history cleared", style="dim")

    def action_summarize(self) -> None:
        self.run_worker(self._show_summary(), exclusive=True, group="summary")

    async def _show_summary(self) -> None:
        chat = self._chat()
        summary = await self.session.summarize()
        if summary:
            chat.add_panel(summary, title="Conversation Summary", style="blue")
        else:
            chat.add_panel("[yellow]Summary unavailable.[/]", title="Conversation Summary", style="yellow")

    async def action_quit(self) -> None:
        """Handle app quit - cancel pending debounce timers and in-flight work."""
        logger.info("Quitting composer, cleaning up...")
        await self.session.shutdown()
        self.exit()

    # ------------------------------------------------------------------
    # Widget getters
    # ------------------------------------------------------------------

    def _chat(self) -> ChatPanel:
        return self.query_one("#chat", ChatPanel)

    def _assist(self) -> AssistPanel:
        return self.query_one("#assist", AssistPanel)

    def _palette(self) -> CommandPalette:
        return self.query_one("#palette", CommandPalette)

    def _hint(self) -> InlineHint:
        return self.query_one("#inline-hint", InlineHint)

    def _composer(self) -> ComposerInput:
        return self.query_one("#composer", ComposerInput)
