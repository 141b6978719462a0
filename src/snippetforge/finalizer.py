"""Turn terminal run state into a RunResult."""

from __future__ import annotations

from snippetforge.failures import FailureEvent, FailureTag
from snippetforge.sandbox.base import SandboxClient
from snippetforge.state import AgentState, RunResult, RunStatus
from snippetforge.steps import InlineStepRunner, StepRunner
from snippetforge.trace import TraceRecorder
from snippetforge.util.logging import get_logger

logger = get_logger(__name__)

FAILURE_MESSAGE = "Something went wrong. Please try again."
URL_UNAVAILABLE = "URL unavailable"


def is_error(state: AgentState) -> bool:
    """A run without a summary or without any written file counts as failed."""
    return not state.summary or not state.files


def resolve_sandbox_url(
    sandbox_client: SandboxClient,
    sandbox_id: str,
    port: int,
    steps: StepRunner | None = None,
    trace: TraceRecorder | None = None,
) -> str:
    def lookup() -> str | None:
        try:
            host = sandbox_client.connect(sandbox_id).public_host(port)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error getting sandbox URL: %s", exc)
            if trace:
                trace.record_failure(
                    FailureEvent(tag=FailureTag.URL_RESOLUTION, reason=str(exc))
                )
            return None
        return f"https://{host}"

    url = (steps or InlineStepRunner()).run("get-sandbox-url", lookup)
    return url or URL_UNAVAILABLE


def finalize(
    state: AgentState,
    sandbox_client: SandboxClient,
    sandbox_id: str,
    port: int = 3000,
    steps: StepRunner | None = None,
    trace: TraceRecorder | None = None,
) -> RunResult:
    if is_error(state):
        logger.info(
            "Run classified as error (summary=%s, files=%s).",
            bool(state.summary),
            len(state.files),
        )
        return RunResult(status=RunStatus.ERROR, message=FAILURE_MESSAGE)
    url = resolve_sandbox_url(sandbox_client, sandbox_id, port, steps=steps, trace=trace)
    return RunResult(
        status=RunStatus.SUCCESS,
        message=state.summary or "",
        summary=state.summary,
        files=state.snapshot_files(),
        sandbox_url=url,
    )
