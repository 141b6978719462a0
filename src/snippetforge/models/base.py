"""Base model interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class ToolCall(BaseModel):
    id: str = Field(default_factory=lambda: f"call_{uuid4().hex[:12]}")
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ModelResponse(BaseModel):
    final_text: str | None = None
    tool_calls: list[ToolCall] = Field(default_factory=list)


class BaseChatModel(ABC):
    """Abstract chat model interface."""

    @abstractmethod
    def chat(self, messages: list[dict[str, Any]], tools: list[dict[str, Any]] | None) -> ModelResponse:
        """Send chat request and return model response."""
        raise NotImplementedError
