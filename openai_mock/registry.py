"""
Model registry checks.

The configured chat and embedding model lists act as the registry of models
the mock claims to serve. An empty requested model is never an error: the
caller falls back to the first configured model instead.
"""

from typing import Sequence


class ModelNotFound(Exception):
    """Raised when a request names a model that is not configured."""

    def __init__(self, model: str):
        super().__init__(f"The model '{model}' does not exist")
        self.model = model


def check_model(requested: str, supported: Sequence[str]) -> None:
    """Reject a non-empty model name that is not in ``supported`` (exact match)."""
    if requested and requested not in supported:
        raise ModelNotFound(requested)


def resolve_model(requested: str, supported: Sequence[str]) -> str:
    """Return the requested model, or the first supported one when none was given."""
    if requested:
        return requested
    if supported:
        return supported[0]
    return ""
