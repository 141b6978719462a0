"""Tool registry."""

from __future__ import annotations

import copy
from typing import Any, Iterable

from pydantic import ValidationError

from snippetforge.failures import FailureTag
from snippetforge.tools.base import Tool, ToolContext, ToolResult
from snippetforge.util.logging import get_logger

logger = get_logger(__name__)


class ToolRegistrationError(ValueError):
    """Raised when the registry is configured incorrectly."""


class ToolRegistry:
    """Registry of tools available to the agent."""

    def __init__(self, tools: Iterable[Tool] | None = None) -> None:
        self._tools: dict[str, Tool] = {}
        if tools:
            self.register_all(tools)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ToolRegistrationError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def register_all(self, tools: Iterable[Tool]) -> None:
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list(self) -> list[Tool]:
        return list(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools)

    def catalog(self) -> tuple[dict[str, Any], ...]:
        return tuple(copy.deepcopy(tool.openai_schema()) for tool in self._tools.values())

    def dispatch(self, name: str, arguments: Any, context: ToolContext) -> ToolResult:
        """Validate ``arguments`` and run the named tool. Never raises."""
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("Model requested unknown tool %s.", name)
            return ToolResult.failure(
                f"Unknown tool: {name}",
                error_type=FailureTag.UNKNOWN_TOOL.value,
                available_tools=self.names(),
            )
        try:
            data = tool.input_schema.model_validate(arguments)
        except ValidationError as exc:
            logger.info("Rejected arguments for %s: %s", name, exc.error_count())
            return ToolResult.failure(
                f"Invalid arguments for {name}: {exc}",
                tool=name,
                error_type=FailureTag.TOOL_VALIDATION.value,
                expected_input_schema=tool.input_schema.model_json_schema(),
                hint="Fix arguments and retry",
            )
        try:
            return tool.run(data, context)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Tool %s raised.", name)
            return ToolResult.failure(
                f"Error: {exc}",
                tool=name,
                error_type=FailureTag.TOOL_EXECUTION.value,
                exception=exc.__class__.__name__,
            )
