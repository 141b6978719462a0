"""Code agent: one model call per step plus the tool calls it requests."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from snippetforge.completion import completion_text
from snippetforge.config import COMPLETION_MARKER
from snippetforge.models.base import BaseChatModel, ModelResponse, ToolCall
from snippetforge.prompt import build_system_prompt
from snippetforge.tools.base import ToolResult
from snippetforge.tools.registry import ToolRegistry
from snippetforge.util.logging import get_logger, redact

if TYPE_CHECKING:
    from snippetforge.network import Network

logger = get_logger(__name__)


@dataclass
class AgentStepResult:
    response: ModelResponse
    tool_results: list[ToolResult] = field(default_factory=list)
    completed: bool = False


class CodeAgent:
    """Agent that edits a sandboxed project through the registry's tools."""

    def __init__(
        self,
        model: BaseChatModel,
        registry: ToolRegistry,
        name: str = "codeAgent",
        description: str = "An expert coding agent",
        system_prompt: str | None = None,
        completion_marker: str = COMPLETION_MARKER,
    ) -> None:
        self.model = model
        self.registry = registry
        self.name = name
        self.description = description
        self.system_prompt = system_prompt or build_system_prompt(completion_marker)
        self.completion_marker = completion_marker
        self.catalog = registry.catalog()

    def step(self, network: "Network") -> AgentStepResult:
        messages = [{"role": "system", "content": self.system_prompt}]
        messages.extend(network.conversation.as_messages())
        response = self.model.chat(messages, [dict(tool) for tool in self.catalog])
        network.conversation.add_model_response(response)
        if network.trace:
            network.trace.record_model_response(
                response.final_text,
                [call.model_dump() for call in response.tool_calls],
            )
        completed = self.on_response(response, network)
        tool_results = self._execute_tool_calls(response.tool_calls, network)
        return AgentStepResult(response=response, tool_results=tool_results, completed=completed)

    def on_response(self, response: ModelResponse, network: "Network") -> bool:
        """Record the summary when the response text carries the completion marker."""
        text = completion_text(response, self.completion_marker)
        if text is None:
            return False
        if not network.state.set_summary(text):
            return False
        logger.info("Completion marker detected: %s", redact(text[:200]))
        if network.trace:
            network.trace.record_completion(text)
        return True

    def _execute_tool_calls(self, calls: list[ToolCall], network: "Network") -> list[ToolResult]:
        if not calls:
            return []
        if len(calls) > 1 and network.parallel_tool_calls:
            workers = min(network.max_tool_workers, len(calls))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(lambda call: self._dispatch(call, network), calls))
        else:
            results = [self._dispatch(call, network) for call in calls]
        for call, result in zip(calls, results):
            network.conversation.add_tool_result(call, result.to_content())
        return results

    def _dispatch(self, call: ToolCall, network: "Network") -> ToolResult:
        logger.info("Dispatching tool %s.", call.name)
        if network.trace:
            network.trace.record_tool_call(call.name, call.arguments)
        result = self.registry.dispatch(call.name, call.arguments, network.context)
        if not result.ok:
            logger.info("Tool %s returned error: %s", call.name, redact(result.error or ""))
        if network.trace:
            network.trace.record_tool_result(call.name, result.ok, result.to_content())
        return result
