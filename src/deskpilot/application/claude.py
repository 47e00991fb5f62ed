"""Claude API wrapper.

Thin async wrapper around the Anthropic Python SDK used by the assistant
service. It builds request parameters, logs the exchange and extracts text.
"""

from typing import Any, Optional

from anthropic import AsyncAnthropic
from anthropic.types import Message, MessageParam, TextBlockParam

from deskpilot.logger import get_logger

logger = get_logger(__name__)


class Claude:
    """Async Claude API wrapper.

    Example:
        >>> claude = Claude(model="claude-sonnet-4-5")
        >>> message = await claude.create_message(
        ...     messages=[{"role": "user", "content": "Hello"}],
        ...     system="You are helpful",
        ...     max_tokens=80,
        ... )
        >>> claude.text_from_message(message)
    """

    def __init__(self, model: str, client: Optional[AsyncAnthropic] = None):
        """Initialize Claude API wrapper.

        Args:
            model: Claude model ID (e.g., "claude-sonnet-4-5")
            client: Preconfigured async client; one reading ANTHROPIC_API_KEY is created if None
        """
        self.async_client = client or AsyncAnthropic()
        self.model = model

        logger.debug(f"Claude wrapper initialized with model: {model}")

    def text_from_message(self, message: Message) -> str:
        """Extract text content from a Message.

        Args:
            message: Anthropic Message object.

        Returns:
            Concatenated text from all text blocks.
        """
        return "\n".join([block.text for block in message.content if block.type == "text"])

    async def create_message(
        self,
        messages: list[MessageParam],
        system: Optional[str | list[TextBlockParam]] = None,
        temperature: float = 1.0,
        stop_sequences: Optional[list[str]] = None,
        max_tokens: int = 1024,
    ) -> Message:
        """Create a message asynchronously (non-streaming).

        Args:
            messages: List of message dictionaries.
            system: System message (string or list of text blocks).
            temperature: Sampling temperature (0.0 to 1.0).
            stop_sequences: Sequences that stop generation.
            max_tokens: Maximum tokens in response.

        Returns:
            Message object from Anthropic API.
        """
        params: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": messages,
            "temperature": temperature,
        }

        if stop_sequences:
            params["stop_sequences"] = stop_sequences

        if system:
            params["system"] = system

        logger.debug(
            f"Creating async message: {len(messages)} messages, "
            f"system={'yes' if system else 'no'}, max_tokens={max_tokens}"
        )

        message = await self.async_client.messages.create(**params)

        logger.debug(f"Async message created: {message.stop_reason}, {len(message.content)} content blocks")

        return message
