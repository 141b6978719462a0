"""Completion marker detection."""

from __future__ import annotations

from snippetforge.config import COMPLETION_MARKER
from snippetforge.models.base import ModelResponse


def contains_marker(text: str | None, marker: str = COMPLETION_MARKER) -> bool:
    return bool(text) and marker in text


def completion_text(response: ModelResponse, marker: str = COMPLETION_MARKER) -> str | None:
    """Return the response text if it carries the completion marker."""
    if contains_marker(response.final_text, marker):
        return response.final_text
    return None
