from __future__ import annotations

from snippetforge.sandbox.base import CommandResult
from snippetforge.sandbox.memory import InMemorySandbox, InMemorySandboxClient
from snippetforge.state import AgentState
from snippetforge.steps import MemoizedStepRunner, tool_step_label
from snippetforge.tools.base import ToolContext
from snippetforge.tools.builtins import CreateOrUpdateFilesTool, TerminalTool
from snippetforge.tools.registry import ToolRegistry


def _context(client: InMemorySandboxClient, sandbox_id: str, steps: MemoizedStepRunner) -> ToolContext:
    return ToolContext(
        run_id="run-1",
        sandbox_id=sandbox_id,
        sandbox_client=client,
        state=AgentState(),
        steps=steps,
    )


def test_label_depends_only_on_inputs():
    first = tool_step_label("terminal", {"command": "ls"})
    assert first == tool_step_label("terminal", {"command": "ls"})
    assert first != tool_step_label("terminal", {"command": "pwd"})
    assert tool_step_label("terminal", {"command": "ls"}, occurrence=1) == f"{first}:1"


def test_memoized_runner_executes_each_label_once():
    steps = MemoizedStepRunner()
    calls = []
    assert steps.run("a", lambda: calls.append(1) or "value") == "value"
    assert steps.run("a", lambda: calls.append(1) or "other") == "value"
    assert calls == [1]


def test_replayed_run_does_not_repeat_sandbox_effects():
    sandbox = InMemorySandbox(commands={"npm install": CommandResult(stdout="ok", stderr="")})
    client = InMemorySandboxClient(factory=lambda sandbox_id: sandbox)
    sandbox_id = client.create("template")
    steps = MemoizedStepRunner()
    registry = ToolRegistry([TerminalTool(), CreateOrUpdateFilesTool()])
    batch = {"files": [{"path": "a.txt", "content": "1"}]}

    first = _context(client, sandbox_id, steps)
    registry.dispatch("terminal", {"command": "npm install"}, first)
    registry.dispatch("createOrUpdateFiles", batch, first)

    replay = _context(client, sandbox_id, steps)
    output = registry.dispatch("terminal", {"command": "npm install"}, replay)
    registry.dispatch("createOrUpdateFiles", batch, replay)

    assert output.output == "ok"
    assert sandbox.executed == ["npm install"]
    assert sandbox.writes == ["a.txt"]
    assert replay.state.files == {"a.txt": "1"}


def test_repeated_identical_call_within_a_run_executes_again():
    sandbox = InMemorySandbox(commands={"npm run build": CommandResult(stdout="ok", stderr="")})
    client = InMemorySandboxClient(factory=lambda sandbox_id: sandbox)
    context = _context(client, client.create("template"), MemoizedStepRunner())
    registry = ToolRegistry([TerminalTool()])
    registry.dispatch("terminal", {"command": "npm run build"}, context)
    registry.dispatch("terminal", {"command": "npm run build"}, context)
    assert sandbox.executed == ["npm run build", "npm run build"]
