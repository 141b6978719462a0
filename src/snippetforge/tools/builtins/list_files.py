"""List a sandbox directory."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from snippetforge.failures import FailureTag
from snippetforge.tools.base import Tool, ToolContext, ToolResult
from snippetforge.util.logging import get_logger

logger = get_logger(__name__)


class ListFilesInput(BaseModel):
    path: str = Field(default=".")


class ListFilesTool(Tool):
    name = "listFiles"
    description = "List files and directories in the sandbox"
    input_schema = ListFilesInput

    def run(self, data: BaseModel, context: ToolContext) -> ToolResult:
        payload = ListFilesInput.model_validate(data)

        def list_entries() -> dict[str, Any]:
            try:
                entries = context.sandbox().list_directory(payload.path)
            except Exception as exc:  # noqa: BLE001
                logger.error("Error listing files: %s", exc)
                return {"error": f"Failed to list files: {exc}"}
            return {"entries": [entry.to_dict() for entry in entries]}

        outcome = context.step(self.name, payload.model_dump(), list_entries)
        if "error" in outcome:
            return ToolResult.failure(
                outcome["error"], error_type=FailureTag.TOOL_EXECUTION.value
            )
        return ToolResult(output=outcome["entries"])
