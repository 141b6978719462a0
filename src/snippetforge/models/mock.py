"""Mock chat model for offline testing."""

from __future__ import annotations

from typing import Any

from snippetforge.models.base import BaseChatModel, ModelResponse


class MockChatModel(BaseChatModel):
    """Deterministic mock model used when no API key is available."""

    def __init__(self, scripted: list[ModelResponse] | None = None) -> None:
        self._scripted = list(scripted or [])
        self.calls: list[dict[str, Any]] = []

    def chat(self, messages: list[dict[str, Any]], tools: list[dict[str, Any]] | None) -> ModelResponse:
        self.calls.append({"messages": messages, "tools": tools})
        if self._scripted:
            return self._scripted.pop(0)
        last = messages[-1].get("content") if messages else ""
        return ModelResponse(final_text=f"Mock response to: {last}")
