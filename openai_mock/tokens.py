"""
Token usage heuristics.

Real tokenizers are out of scope for a mock; usage counts only need to be
consistent and plausible, so a token is approximated as four bytes of UTF-8
text.
"""

from typing import Iterable

BYTES_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Approximate the token count of a single piece of text."""
    return len(text.encode("utf-8")) // BYTES_PER_TOKEN


def estimate_messages_tokens(messages: Iterable) -> int:
    """Sum the token estimates of every message content (roles are not counted)."""
    return sum(estimate_tokens(message.content) for message in messages)
