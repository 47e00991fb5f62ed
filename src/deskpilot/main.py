import asyncio
import os

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from deskpilot.application.assistant import AssistantService
from deskpilot.application.claude import Claude
from deskpilot.application.session import ComposerSession
from deskpilot.config import AssistConfig, load_assist_config
from deskpilot.domain.errors import NoActiveQuery
from deskpilot.infrastructure.store import DEFAULT_CONVERSATION_ID, InMemoryStore
from deskpilot.logger import get_logger, setup_logger

load_dotenv()

logger = get_logger("main")
console = Console()

cli = typer.Typer(
    name="deskpilot",
    help="AI-assisted reply composer for customer support agents, powered by Claude",
    epilog="""
    Examples:
    $ deskpilot compose
    $ deskpilot suggest routing
    $ deskpilot summarize
    """,
    add_completion=False,
)


@cli.callback()
def main():
    """Configure logging before any command runs."""
    setup_logger()


def _anthropic_settings() -> str:
    """Return the Claude model name, exiting when the environment is incomplete."""
    claude_model = os.getenv("CLAUDE_MODEL", "")
    anthropic_api_key = os.getenv("ANTHROPIC_API_KEY", "")
    if not claude_model:
        console.print("[bold red]Error:[/] CLAUDE_MODEL cannot be empty. Update .env")
        raise typer.Exit(code=1)
    if not anthropic_api_key:
        console.print("[bold red]Error:[/] ANTHROPIC_API_KEY cannot be empty. Update .env")
        raise typer.Exit(code=1)
    return claude_model


def build_session(
    conversation_id: str,
    config: AssistConfig | None = None,
    store: InMemoryStore | None = None,
) -> ComposerSession:
    """Wire a composer session over the seeded store and a Claude-backed assistant."""
    store = store or InMemoryStore(seed=True)
    assistant = AssistantService(llm=Claude(model=_anthropic_settings()))
    return ComposerSession(
        conversation_id=conversation_id,
        conversations=store,
        templates=store,
        knowledge=store,
        generator=assistant,
        config=config or load_assist_config(),
    )


@cli.command()
def compose(
    conversation: str = typer.Option(DEFAULT_CONVERSATION_ID, "--conversation", "-c", help="Conversation to open"),
    debug: bool = typer.Option(os.getenv("DEBUG", "false").lower() == "true", "--debug", help="Enable debug mode"),
):
    """Launch the composer TUI."""
    from deskpilot.presentation.tui import ComposerApp

    if debug:
        setup_logger(log_level="DEBUG")
    store = InMemoryStore(seed=True)
    session = build_session(conversation, store=store)

    customer = asyncio.run(store.get_conversation(conversation))
    if customer is None:
        console.print(f"[bold red]Error:[/] unknown conversation '{conversation}'")
        raise typer.Exit(code=1)

    logger.info(f"Starting composer for conversation {conversation}")
    ComposerApp(session=session, customer_name=customer.customer_name).run()


@cli.command()
def suggest(
    query: str = typer.Argument("", help="Palette query; empty for contextual suggestions"),
    conversation: str = typer.Option(DEFAULT_CONVERSATION_ID, "--conversation", "-c"),
    customer_message: str = typer.Option(
        "", "--customer-message", "-m", help="Customer message to suggest replies for"
    ),
):
    """Run one palette query and print the ranked candidates."""
    session = build_session(conversation)

    async def run():
        await session.load(refresh=False)
        if customer_message:
            await session.post_customer_message(customer_message, refresh=False)
        try:
            return await session.query(query)
        finally:
            await session.shutdown()

    result = asyncio.run(run())

    table = Table(title=f"/{query}" if query else "Suggested commands")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Description", style="dim")
    for index, candidate in enumerate(result, start=1):
        table.add_row(str(index), candidate.source_label or candidate.kind.value, candidate.title, candidate.description or "")
    console.print(table)

    if result.failed_sources:
        console.print(f"[yellow]Unavailable sources:[/] {', '.join(result.failed_sources)}")


@cli.command()
def complete(
    text: str = typer.Argument(..., help="Partial reply to continue"),
    conversation: str = typer.Option(DEFAULT_CONVERSATION_ID, "--conversation", "-c"),
):
    """Print the inline continuation offered for TEXT."""
    session = build_session(conversation)
    try:
        suffix = asyncio.run(session.continuation_for(text))
    except NoActiveQuery as e:
        console.print(f"[yellow]{e}[/]")
        raise typer.Exit(code=1)
    if suffix:
        console.print(f"{text}[dim]{suffix}[/]")
    else:
        console.print("[dim]No continuation available.[/]")


@cli.command()
def summarize(
    conversation: str = typer.Option(DEFAULT_CONVERSATION_ID, "--conversation", "-c"),
):
    """Print a summary of the conversation."""
    session = build_session(conversation)
    summary = asyncio.run(session.summarize())
    if not summary:
        console.print("[yellow]Summary unavailable.[/]")
        raise typer.Exit(code=1)
    console.print(summary)


if __name__ == "__main__":
    cli()
