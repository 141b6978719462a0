"""Append-only conversation shared by the network and the agent."""

from __future__ import annotations

import copy
import json
from typing import Any, Iterator

from snippetforge.models.base import ModelResponse, ToolCall


class Conversation:
    """Ordered chat messages in OpenAI message format.

    Messages are only ever appended during a run.
    """

    def __init__(self, messages: list[dict[str, Any]] | None = None) -> None:
        self._messages: list[dict[str, Any]] = list(messages or [])

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.as_messages())

    def as_messages(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._messages)

    def append(self, message: dict[str, Any]) -> None:
        if "role" not in message:
            raise ValueError("Conversation messages require a role")
        self._messages.append(dict(message))

    def add_user(self, content: str) -> None:
        self.append({"role": "user", "content": content})

    def add_model_response(self, response: ModelResponse) -> None:
        # Assistant content may only be null alongside tool calls.
        message: dict[str, Any] = {"role": "assistant", "content": response.final_text or ""}
        if response.tool_calls:
            message["content"] = response.final_text
            message["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {
                        "name": call.name,
                        "arguments": json.dumps(call.arguments, ensure_ascii=False),
                    },
                }
                for call in response.tool_calls
            ]
        self.append(message)

    def add_tool_result(self, call: ToolCall, content: str) -> None:
        self.append(
            {
                "role": "tool",
                "tool_call_id": call.id,
                "name": call.name,
                "content": content,
            }
        )
