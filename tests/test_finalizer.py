from __future__ import annotations

from snippetforge.finalizer import FAILURE_MESSAGE, URL_UNAVAILABLE, finalize, is_error
from snippetforge.sandbox.base import SandboxError
from snippetforge.sandbox.memory import InMemorySandbox, InMemorySandboxClient
from snippetforge.state import AgentState, RunStatus
from snippetforge.steps import MemoizedStepRunner
from snippetforge.trace import TraceRecorder

SUMMARY = "<task_summary>Created a landing page.</task_summary>"


def _client(sandbox: InMemorySandbox) -> tuple[InMemorySandboxClient, str]:
    client = InMemorySandboxClient(factory=lambda sandbox_id: sandbox)
    return client, client.create("template")


def test_missing_summary_is_an_error_even_with_files():
    client, sandbox_id = _client(InMemorySandbox())
    state = AgentState(files={"app/page.tsx": "x"})
    result = finalize(state, client, sandbox_id)
    assert result.status == RunStatus.ERROR
    assert result.message == FAILURE_MESSAGE
    assert result.files == {}
    assert result.sandbox_url is None


def test_summary_without_files_is_an_error():
    client, sandbox_id = _client(InMemorySandbox())
    state = AgentState(summary=SUMMARY)
    assert is_error(state)
    result = finalize(state, client, sandbox_id)
    assert result.status == RunStatus.ERROR
    assert result.summary is None


def test_success_carries_summary_files_and_url():
    sandbox = InMemorySandbox(sandbox_id="sbx-1", host="e2b.app")
    client, sandbox_id = _client(sandbox)
    state = AgentState(summary=SUMMARY, files={"app/page.tsx": "x"})
    result = finalize(state, client, sandbox_id, port=3000)
    assert result.ok
    assert result.summary == SUMMARY
    assert result.message == SUMMARY
    assert result.files == {"app/page.tsx": "x"}
    assert result.sandbox_url == "https://3000-sbx-1.e2b.app"


def test_host_lookup_failure_degrades_to_sentinel(tmp_path):
    sandbox = InMemorySandbox()
    sandbox.host_error = SandboxError("sandbox expired")
    client, sandbox_id = _client(sandbox)
    trace = TraceRecorder(trace_id="t", workspace_dir=str(tmp_path))
    state = AgentState(summary=SUMMARY, files={"a.txt": "1"})
    result = finalize(state, client, sandbox_id, trace=trace)
    assert result.status == RunStatus.SUCCESS
    assert result.sandbox_url == URL_UNAVAILABLE
    assert trace.events[-1]["payload"]["tag"] == "URL_RESOLUTION"


def test_result_files_are_a_copy_of_state():
    client, sandbox_id = _client(InMemorySandbox())
    state = AgentState(summary=SUMMARY, files={"a.txt": "1"})
    result = finalize(state, client, sandbox_id)
    state.merge_files({"b.txt": "2"})
    assert result.files == {"a.txt": "1"}


def test_url_lookup_runs_as_memoized_step():
    client, sandbox_id = _client(InMemorySandbox(sandbox_id="sbx-9"))
    steps = MemoizedStepRunner({"get-sandbox-url": "https://cached.example"})
    state = AgentState(summary=SUMMARY, files={"a.txt": "1"})
    result = finalize(state, client, sandbox_id, steps=steps)
    assert result.sandbox_url == "https://cached.example"
    assert steps.executed == []
