"""Base tool definitions."""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

from snippetforge.sandbox.base import SandboxClient, SandboxHandle
from snippetforge.state import AgentState
from snippetforge.steps import InlineStepRunner, StepRunner, arguments_digest, tool_step_label

T = TypeVar("T")


class ToolResult(BaseModel):
    output: Any = None
    error: str | None = None
    details: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str, **details: Any) -> "ToolResult":
        return cls(error=error, details=details or None)

    def to_content(self) -> str:
        """Serialize the result for the conversation.

        A failed result that still carries text output (a failed terminal
        command) is shown to the model as that text.
        """
        if self.error is not None and self.output is None:
            payload: dict[str, Any] = {"error": self.error}
            if self.details:
                payload.update(self.details)
            return json.dumps(payload, ensure_ascii=False, default=str)
        if isinstance(self.output, str):
            return self.output
        return json.dumps(self.output, ensure_ascii=False, default=str)


@dataclass
class ToolContext:
    """Everything a handler may touch during one run."""

    run_id: str
    sandbox_id: str
    sandbox_client: SandboxClient
    state: AgentState
    steps: StepRunner = field(default_factory=InlineStepRunner)
    _occurrences: dict[str, int] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def sandbox(self) -> SandboxHandle:
        return self.sandbox_client.connect(self.sandbox_id)

    def step(self, tool_name: str, arguments: dict[str, Any], fn: Callable[[], T]) -> T:
        key = f"{tool_name}:{arguments_digest(arguments)}"
        with self._lock:
            occurrence = self._occurrences.get(key, 0)
            self._occurrences[key] = occurrence + 1
        return self.steps.run(tool_step_label(tool_name, arguments, occurrence), fn)


class Tool(ABC):
    """Abstract tool."""

    name: str
    description: str
    input_schema: type[BaseModel]

    @abstractmethod
    def run(self, data: BaseModel, context: ToolContext) -> ToolResult:
        """Execute the tool with validated input."""
        raise NotImplementedError

    def openai_schema(self) -> dict[str, Any]:
        """Return OpenAI-compatible tool schema."""
        schema = self.input_schema.model_json_schema()
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": schema,
            },
        }
