from __future__ import annotations

from snippetforge.sandbox.base import CommandResult, OutputSink, SandboxError
from snippetforge.sandbox.memory import InMemorySandbox, InMemorySandboxClient
from snippetforge.state import AgentState
from snippetforge.tools.base import ToolContext
from snippetforge.tools.builtins import TerminalTool


def _context(sandbox: InMemorySandbox) -> ToolContext:
    client = InMemorySandboxClient(factory=lambda sandbox_id: sandbox)
    sandbox_id = client.create("template")
    return ToolContext(
        run_id="run-1", sandbox_id=sandbox_id, sandbox_client=client, state=AgentState()
    )


def test_terminal_returns_command_stdout():
    sandbox = InMemorySandbox(commands={"echo hi": CommandResult(stdout="hi\n", stderr="")})
    result = TerminalTool().run(TerminalTool.input_schema(command="echo hi"), _context(sandbox))
    assert result.ok
    assert result.output == "hi\n"
    assert sandbox.executed == ["echo hi"]


def test_terminal_falls_back_to_streamed_stdout():
    def streamed(sink: OutputSink) -> CommandResult:
        sink.on_stdout("part one ")
        sink.on_stdout("part two")
        return CommandResult(stdout="", stderr="")

    sandbox = InMemorySandbox(commands={"npm run build": streamed})
    result = TerminalTool().run(
        TerminalTool.input_schema(command="npm run build"), _context(sandbox)
    )
    assert result.output == "part one part two"


def test_terminal_failure_reports_exception_and_buffers():
    def failing(sink: OutputSink) -> CommandResult:
        sink.on_stdout("compiling")
        sink.on_stderr("syntax error")
        raise SandboxError("exit status 1")

    sandbox = InMemorySandbox(commands={"npm run lint": failing})
    result = TerminalTool().run(
        TerminalTool.input_schema(command="npm run lint"), _context(sandbox)
    )
    assert result.output == (
        "Command failed: exit status 1\nstdout: compiling\nstderr: syntax error"
    )
    assert not result.ok
    assert result.error == "exit status 1"
    assert result.to_content() == result.output


def test_terminal_failure_when_sandbox_unreachable():
    sandbox = InMemorySandbox()
    context = _context(sandbox)
    context.sandbox_client.connect_error = SandboxError("connection refused")
    result = TerminalTool().run(TerminalTool.input_schema(command="ls"), context)
    assert result.output.startswith("Command failed: connection refused")
    assert result.error == "connection refused"
