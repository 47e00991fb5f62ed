"""
Inline continuation ("smart compose") helpers.

A generated completion either repeats the agent's partial text, in which
case the ghost text is the literal remainder, or it is a whole alternative
reply, in which case its first sentence is offered after a space.
"""

from __future__ import annotations

import re

SENTENCE_TERMINATORS = re.compile(r"[.!?]")
QUOTES = ("\"", "'")


def extract_continuation(partial: str, generated: str) -> str:
    """
    Compute the suffix rendered after the cursor.

    Args:
        partial: Text currently in the composer
        generated: Completion produced for ``partial``

    Returns:
        Suffix to append to ``partial``; "" when nothing usable remains
    """
    if not generated:
        return ""

    if generated.lower().startswith(partial.lower()):
        return generated[len(partial):]

    segment = SENTENCE_TERMINATORS.split(generated, maxsplit=1)[0].strip()
    if segment.startswith(QUOTES):
        segment = segment[1:]
    if not segment:
        return ""
    if not segment[0].isspace():
        segment = " " + segment
    return segment


def should_offer_continuation(
    text: str,
    palette_open: bool,
    trigger_char: str = "/",
    min_length: int = 2,
) -> bool:
    """True when the composer state allows requesting a continuation."""
    return len(text) > min_length and not palette_open and not text.endswith(trigger_char)
