"""Read files from the sandbox."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from snippetforge.failures import FailureTag
from snippetforge.tools.base import Tool, ToolContext, ToolResult
from snippetforge.util.logging import get_logger

logger = get_logger(__name__)


class ReadFilesInput(BaseModel):
    files: list[str]


class ReadFilesTool(Tool):
    name = "readFiles"
    description = "Read files from the sandbox"
    input_schema = ReadFilesInput

    def run(self, data: BaseModel, context: ToolContext) -> ToolResult:
        payload = ReadFilesInput.model_validate(data)

        def read_all() -> dict[str, Any]:
            try:
                sandbox = context.sandbox()
            except Exception as exc:  # noqa: BLE001
                logger.error("Error in readFiles: %s", exc)
                return {"error": f"Failed to read files: {exc}"}
            contents: dict[str, str] = {}
            for path in payload.files:
                try:
                    contents[path] = sandbox.read_file(path)
                except Exception as exc:  # noqa: BLE001
                    logger.error("Error reading file %s: %s", path, exc)
                    contents[path] = f"Error reading file: {exc}"
            return {"contents": contents}

        outcome = context.step(self.name, payload.model_dump(), read_all)
        if "error" in outcome:
            return ToolResult.failure(
                outcome["error"], error_type=FailureTag.TOOL_EXECUTION.value
            )
        return ToolResult(output=outcome["contents"])
