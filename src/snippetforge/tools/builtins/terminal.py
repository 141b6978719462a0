"""Terminal tool running shell commands in the sandbox."""

from __future__ import annotations

from pydantic import BaseModel

from snippetforge.sandbox.base import OutputSink
from snippetforge.tools.base import Tool, ToolContext, ToolResult
from snippetforge.util.logging import get_logger

logger = get_logger(__name__)


class TerminalInput(BaseModel):
    command: str


class TerminalTool(Tool):
    name = "terminal"
    description = "Use the terminal to run commands"
    input_schema = TerminalInput

    def run(self, data: BaseModel, context: ToolContext) -> ToolResult:
        payload = TerminalInput.model_validate(data)

        def execute() -> tuple[str, str | None]:
            sink = OutputSink()
            try:
                result = context.sandbox().run_command(payload.command, sink)
                return result.stdout or sink.stdout, None
            except Exception as exc:  # noqa: BLE001
                message = (
                    f"Command failed: {exc}\nstdout: {sink.stdout}\nstderr: {sink.stderr}"
                )
                logger.error(message)
                return message, str(exc)

        output, error = context.step(self.name, payload.model_dump(), execute)
        return ToolResult(output=output, error=error)
