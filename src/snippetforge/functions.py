"""Run entry point: inbound trigger in, RunResult out."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from snippetforge.config import DEFAULT_SETTINGS, Settings
from snippetforge.factory import build_agent, build_network, build_registry
from snippetforge.finalizer import finalize
from snippetforge.models.base import BaseChatModel
from snippetforge.network import Router, StopReason
from snippetforge.prompt import TASK_TEMPLATE
from snippetforge.sandbox.base import LEASES, SandboxClient, SandboxLeases
from snippetforge.state import AgentState, RunRequest, RunResult
from snippetforge.steps import InlineStepRunner, StepRunner
from snippetforge.tools.base import ToolContext
from snippetforge.trace import TraceRecorder
from snippetforge.util.logging import get_logger, redact

logger = get_logger(__name__)

FRAGMENT_TITLE = "Fragment"


@dataclass
class AgentRun:
    request: RunRequest
    sandbox_id: str
    result: RunResult
    iterations: int
    stop_reason: StopReason
    trace_path: str | None = None


def run_code_agent(
    request: RunRequest,
    *,
    model: BaseChatModel,
    sandbox_client: SandboxClient,
    settings: Settings = DEFAULT_SETTINGS,
    steps: StepRunner | None = None,
    trace: TraceRecorder | None = None,
    cancel_event: threading.Event | None = None,
    router: Router | None = None,
    leases: SandboxLeases = LEASES,
) -> AgentRun:
    """Create a sandbox, drive the agent network over it and finalize the result."""
    steps = steps or InlineStepRunner()
    logger.info("Run %s started for project %s.", request.run_id, request.project_id)
    logger.info("Prompt: %s", redact(request.value))

    sandbox_id = steps.run(
        "get-sandbox-id", lambda: sandbox_client.create(settings.sandbox_template)
    )
    leases.acquire(sandbox_id, request.run_id)
    try:
        context = ToolContext(
            run_id=request.run_id,
            sandbox_id=sandbox_id,
            sandbox_client=sandbox_client,
            state=AgentState(),
            steps=steps,
        )
        agent = build_agent(settings, model, build_registry())
        network = build_network(
            settings,
            agent,
            context,
            router=router,
            trace=trace,
            cancel_event=cancel_event,
        )
        outcome = network.run(TASK_TEMPLATE.format(value=request.value))
        result = finalize(
            outcome.state,
            sandbox_client,
            sandbox_id,
            port=settings.sandbox_port,
            steps=steps,
            trace=trace,
        )
    finally:
        leases.release(sandbox_id, request.run_id)

    trace_path = None
    if trace:
        trace_path = trace.finalize(
            {
                "iterations": outcome.iterations,
                "stop_reason": outcome.stop_reason.value,
                "tool_calls": outcome.tool_calls,
                "tool_failures": outcome.tool_failures,
                "status": result.status.value,
                "files": len(result.files),
            }
        )
    logger.info("Run %s finished with status %s.", request.run_id, result.status.value)
    return AgentRun(
        request=request,
        sandbox_id=sandbox_id,
        result=result,
        iterations=outcome.iterations,
        stop_reason=outcome.stop_reason,
        trace_path=trace_path,
    )


def persistence_record(result: RunResult, project_id: str) -> dict[str, Any]:
    """Build the assistant message (and fragment) the caller stores for a run."""
    if not result.ok:
        return {
            "project_id": project_id,
            "content": result.message,
            "role": "ASSISTANT",
            "type": "ERROR",
            "fragment": None,
        }
    return {
        "project_id": project_id,
        "content": result.message,
        "role": "ASSISTANT",
        "type": "RESULT",
        "fragment": {
            "sandbox_url": result.sandbox_url,
            "title": FRAGMENT_TITLE,
            "files": dict(result.files),
        },
    }
