from __future__ import annotations

from snippetforge.sandbox.base import SandboxError
from snippetforge.sandbox.memory import InMemorySandbox, InMemorySandboxClient
from snippetforge.state import AgentState
from snippetforge.tools.base import ToolContext
from snippetforge.tools.builtins import CreateOrUpdateFilesTool
from snippetforge.tools.registry import ToolRegistry


def _context(sandbox: InMemorySandbox, state: AgentState | None = None) -> ToolContext:
    client = InMemorySandboxClient(factory=lambda sandbox_id: sandbox)
    sandbox_id = client.create("template")
    return ToolContext(
        run_id="run-1",
        sandbox_id=sandbox_id,
        sandbox_client=client,
        state=state or AgentState(),
    )


def _dispatch(context: ToolContext, files: list[dict[str, str]]):
    registry = ToolRegistry([CreateOrUpdateFilesTool()])
    return registry.dispatch("createOrUpdateFiles", {"files": files}, context)


def test_successful_batch_merges_into_state():
    sandbox = InMemorySandbox()
    context = _context(sandbox)
    result = _dispatch(
        context, [{"path": "a.txt", "content": "1"}, {"path": "b.txt", "content": "2"}]
    )
    assert result.ok
    assert result.output == {"written": ["a.txt", "b.txt"]}
    assert context.state.files == {"a.txt": "1", "b.txt": "2"}
    assert sandbox.files == {"a.txt": "1", "b.txt": "2"}


def test_failed_write_leaves_state_unchanged():
    sandbox = InMemorySandbox()
    sandbox.fail_writes["b.txt"] = SandboxError("disk full")
    state = AgentState(files={"existing.txt": "keep"})
    context = _context(sandbox, state)
    result = _dispatch(
        context, [{"path": "a.txt", "content": "1"}, {"path": "b.txt", "content": "2"}]
    )
    assert not result.ok
    assert "disk full" in result.error
    assert result.details["error_type"] == "PARTIAL_BATCH"
    assert result.details["written_before_failure"] == ["a.txt"]
    assert context.state.files == {"existing.txt": "keep"}
    # The first write already reached the sandbox and is not rolled back.
    assert sandbox.files["a.txt"] == "1"


def test_later_batch_overwrites_existing_paths():
    context = _context(InMemorySandbox())
    _dispatch(context, [{"path": "app/page.tsx", "content": "v1"}])
    _dispatch(context, [{"path": "app/page.tsx", "content": "v2"}])
    assert context.state.files == {"app/page.tsx": "v2"}


def test_missing_content_is_a_validation_error():
    context = _context(InMemorySandbox())
    result = _dispatch(context, [{"path": "a.txt"}])
    assert not result.ok
    assert result.details["error_type"] == "TOOL_VALIDATION"
    assert context.state.files == {}
