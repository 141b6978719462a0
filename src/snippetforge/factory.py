"""Shared construction helpers for models, sandboxes, tools and networks."""

from __future__ import annotations

import json
import threading

from snippetforge.agent import CodeAgent
from snippetforge.config import Settings
from snippetforge.models.base import BaseChatModel
from snippetforge.models.mock import MockChatModel
from snippetforge.models.openai_compat import OpenAICompatChatModel
from snippetforge.network import Network, Router
from snippetforge.sandbox.base import SandboxClient
from snippetforge.sandbox.memory import InMemorySandboxClient
from snippetforge.tools.base import ToolContext
from snippetforge.tools.builtins import (
    CreateOrUpdateFilesTool,
    ListFilesTool,
    ReadFilesTool,
    TerminalTool,
)
from snippetforge.tools.registry import ToolRegistry
from snippetforge.trace import TraceRecorder


def build_model(settings: Settings, use_mock: bool = False) -> BaseChatModel:
    if use_mock or not settings.openai_api_key:
        return MockChatModel()
    extra_headers = None
    if settings.openai_extra_headers:
        extra_headers = json.loads(settings.openai_extra_headers)
    return OpenAICompatChatModel(
        base_url=settings.openai_base_url,
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout_seconds=settings.openai_timeout_seconds,
        extra_headers=extra_headers,
        disable_tool_choice=settings.openai_disable_tool_choice,
    )


def build_sandbox_client(settings: Settings, use_mock: bool = False) -> SandboxClient:
    if use_mock:
        return InMemorySandboxClient()
    from snippetforge.sandbox.e2b import E2BSandboxClient

    return E2BSandboxClient(api_key=settings.e2b_api_key)


def build_registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(TerminalTool())
    registry.register(CreateOrUpdateFilesTool())
    registry.register(ReadFilesTool())
    registry.register(ListFilesTool())
    return registry


def build_agent(
    settings: Settings,
    model: BaseChatModel,
    registry: ToolRegistry,
    system_prompt: str | None = None,
) -> CodeAgent:
    return CodeAgent(
        model=model,
        registry=registry,
        system_prompt=system_prompt,
        completion_marker=settings.completion_marker,
    )


def build_network(
    settings: Settings,
    agent: CodeAgent,
    context: ToolContext,
    *,
    router: Router | None = None,
    trace: TraceRecorder | None = None,
    cancel_event: threading.Event | None = None,
) -> Network:
    return Network(
        agents=[agent],
        context=context,
        max_iterations=settings.max_iterations,
        router=router,
        parallel_tool_calls=settings.parallel_tool_calls,
        max_tool_workers=settings.max_tool_workers,
        trace=trace,
        cancel_event=cancel_event,
        timeout_seconds=settings.run_timeout_seconds,
    )
