"""
Utility functions for the deskpilot application.
"""

import os
from pathlib import Path
from string import Template
from typing import Any

ELLIPSIS = "..."


def get_project_root() -> str:
    """
    Get the project root directory (parent of src/deskpilot).

    Returns:
        Absolute path to the project root directory
    """
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def load_prompt(prompt_name: str) -> str:
    """Load a prompt template from the package ``prompts`` directory.

    Args:
        prompt_name: Relative path from prompts/, e.g. "assist/compose.txt"

    Returns:
        Prompt template as string

    Raises:
        FileNotFoundError: If the prompt file doesn't exist
    """
    prompt_path = Path(__file__).parent / "prompts" / prompt_name

    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {prompt_path}")

    return prompt_path.read_text(encoding="utf-8").strip()


def format_prompt(template: str, **kwargs: Any) -> str:
    """Format a prompt template with ``${variable}`` placeholders.

    Raises:
        KeyError: If a required variable is missing
    """
    try:
        return Template(template).substitute(**kwargs)
    except KeyError as e:
        missing_var = str(e).strip("'")
        raise KeyError(
            f"Missing required variable '{missing_var}' in prompt template. "
            f"Available variables: {list(kwargs.keys())}"
        ) from e


def truncate_text(text: str, limit: int) -> str:
    """
    Shorten text for display, appending an ellipsis when it was cut.

    Args:
        text: Text to shorten
        limit: Maximum number of characters kept from ``text``

    Returns:
        ``text`` unchanged if it fits, else its first ``limit`` characters plus "..."
    """
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS
