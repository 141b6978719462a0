"""Network router: runs agent steps until completion or the iteration cap."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from snippetforge.agent import CodeAgent
from snippetforge.conversation import Conversation
from snippetforge.failures import FailureEvent, FailureTag
from snippetforge.state import AgentState
from snippetforge.tools.base import ToolContext
from snippetforge.trace import TraceRecorder
from snippetforge.util.logging import get_logger

logger = get_logger(__name__)

Router = Callable[["Network"], Optional[CodeAgent]]


class StopReason(str, Enum):
    COMPLETED = "completed"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass
class NetworkResult:
    state: AgentState
    conversation: Conversation
    iterations: int
    stop_reason: StopReason
    tool_calls: int = 0
    tool_failures: int = 0


def default_router(network: "Network") -> CodeAgent | None:
    """Pick the first agent until a summary has been recorded."""
    if network.state.summary:
        return None
    return network.agents[0]


class Network:
    """Single-run control loop over one or more agents.

    Each iteration asks the router for the next agent; ``None`` ends the
    run. The iteration cap is checked after the router so a summary set on
    the last allowed step still counts as completion. Cancellation is only
    observed between iterations, never while a tool call is in flight.
    """

    def __init__(
        self,
        agents: list[CodeAgent],
        context: ToolContext,
        name: str = "coding-agent-network",
        max_iterations: int = 15,
        router: Router | None = None,
        parallel_tool_calls: bool = True,
        max_tool_workers: int = 4,
        trace: TraceRecorder | None = None,
        cancel_event: threading.Event | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        if not agents:
            raise ValueError("Network requires at least one agent")
        if max_iterations < 1:
            raise ValueError("max_iterations must be positive")
        self.agents = list(agents)
        self.context = context
        self.name = name
        self.max_iterations = max_iterations
        self.router = router or default_router
        self.parallel_tool_calls = parallel_tool_calls
        self.max_tool_workers = max(1, max_tool_workers)
        self.trace = trace
        self.cancel_event = cancel_event
        self.timeout_seconds = timeout_seconds
        self.conversation = Conversation()
        self.iteration = 0
        self.tool_calls = 0
        self.tool_failures = 0
        self._deadline: float | None = None
        self._started = False

    @property
    def state(self) -> AgentState:
        return self.context.state

    def run(self, prompt: str) -> NetworkResult:
        if self._started:
            raise RuntimeError("A network instance runs exactly once")
        self._started = True
        if self.timeout_seconds is not None:
            self._deadline = time.monotonic() + self.timeout_seconds
        logger.info("Network %s started (run_id=%s).", self.name, self.context.run_id)
        self.conversation.add_user(prompt)

        stop_reason = self._loop()

        logger.info(
            "Network %s finished after %s iteration(s): %s.",
            self.name,
            self.iteration,
            stop_reason.value,
        )
        if self.trace and stop_reason != StopReason.COMPLETED:
            tag = (
                FailureTag.ROUTER_EXHAUSTED
                if stop_reason == StopReason.EXHAUSTED
                else FailureTag.RUN_CANCELLED
            )
            self.trace.record_failure(
                FailureEvent(tag=tag, reason=stop_reason.value, details={"iterations": self.iteration})
            )
        return NetworkResult(
            state=self.state,
            conversation=self.conversation,
            iterations=self.iteration,
            stop_reason=stop_reason,
            tool_calls=self.tool_calls,
            tool_failures=self.tool_failures,
        )

    def _loop(self) -> StopReason:
        while True:
            if self._cancelled():
                return StopReason.CANCELLED
            agent = self.router(self)
            if agent is None:
                return StopReason.COMPLETED
            if self.iteration >= self.max_iterations:
                logger.warning(
                    "Iteration cap %s reached without a summary.", self.max_iterations
                )
                return StopReason.EXHAUSTED
            logger.info(
                "Iteration %s/%s: running %s.",
                self.iteration + 1,
                self.max_iterations,
                agent.name,
            )
            if self.trace:
                self.trace.record_iteration(self.iteration + 1, agent.name)
            step = agent.step(self)
            self.iteration += 1
            self.tool_calls += len(step.tool_results)
            self.tool_failures += sum(1 for result in step.tool_results if not result.ok)
            if step.completed:
                logger.info("Summary recorded on iteration %s.", self.iteration)

    def _cancelled(self) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            logger.warning("Run %s cancelled.", self.context.run_id)
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            logger.warning("Run %s exceeded its time budget.", self.context.run_id)
            return True
        return False
