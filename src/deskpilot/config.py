"""Configuration for the composer assistance pipeline."""

import os
from dataclasses import dataclass, fields
from typing import Optional

from deskpilot.logger import get_logger

logger = get_logger("config")

ENV_PREFIX = "DESKPILOT_"


@dataclass
class AssistConfig:
    """Tunables for palette search, inline continuation and generation."""

    # Palette
    trigger_char: str = "/"
    debounce_ms: int = 300
    search_limit: int = 8
    contextual_limit: Optional[int] = None

    # Per-source caps
    knowledge_limit: int = 3
    generated_search_limit: int = 3
    generated_contextual_limit: int = 2

    # Display truncation
    title_max_chars: int = 60
    description_max_chars: int = 80

    # Inline continuation
    inline_debounce_ms: int = 300
    inline_min_chars: int = 2  # offered only when the text is longer than this

    # Generation context
    knowledge_context_limit: int = 5
    knowledge_fallback_count: int = 3  # entries used when no keyword matches; 0 disables
    compose_knowledge_count: int = 3
    history_window: int = 5
    generation_timeout: float = 20.0

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @property
    def inline_debounce_seconds(self) -> float:
        return self.inline_debounce_ms / 1000.0


def _coerce(raw: str, default):
    if isinstance(default, bool):
        return raw.lower() == "true"
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    if default is None:
        # Only optional integer caps are declared without a default
        return None if raw.lower() in ("", "none") else int(raw)
    return raw


def load_assist_config() -> AssistConfig:
    """Build an AssistConfig, overriding defaults from ``DESKPILOT_*`` variables.

    ``DESKPILOT_DEBOUNCE_MS=150`` overrides ``debounce_ms`` and so on. Values
    that fail to parse are ignored with a warning.
    """
    config = AssistConfig()
    for f in fields(AssistConfig):
        raw = os.getenv(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None:
            continue
        try:
            setattr(config, f.name, _coerce(raw, getattr(config, f.name)))
        except ValueError:
            logger.warning(f"Ignoring invalid value {raw!r} for {ENV_PREFIX}{f.name.upper()}")
    return config
