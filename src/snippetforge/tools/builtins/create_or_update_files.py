"""Write a batch of files into the sandbox and record them in run state."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from snippetforge.failures import FailureTag
from snippetforge.tools.base import Tool, ToolContext, ToolResult
from snippetforge.util.logging import get_logger

logger = get_logger(__name__)


class FileSpec(BaseModel):
    path: str
    content: str


class CreateOrUpdateFilesInput(BaseModel):
    files: list[FileSpec]


class CreateOrUpdateFilesTool(Tool):
    """Writes files one after another.

    ``AgentState.files`` is updated only when every write in the batch
    succeeded. Writes that completed before a failure stay in the sandbox.
    """

    name = "createOrUpdateFiles"
    description = "Create or update files in the sandbox"
    input_schema = CreateOrUpdateFilesInput

    def run(self, data: BaseModel, context: ToolContext) -> ToolResult:
        payload = CreateOrUpdateFilesInput.model_validate(data)

        def write_all() -> dict[str, Any]:
            written: dict[str, str] = {}
            try:
                sandbox = context.sandbox()
                for item in payload.files:
                    sandbox.write_file(item.path, item.content)
                    written[item.path] = item.content
            except Exception as exc:  # noqa: BLE001
                logger.error("Error creating/updating files: %s", exc)
                return {
                    "error": f"Error: {exc}",
                    "written_before_failure": list(written),
                }
            return {"files": written}

        outcome = context.step(self.name, payload.model_dump(), write_all)
        if "error" in outcome:
            return ToolResult.failure(
                outcome["error"],
                error_type=FailureTag.PARTIAL_BATCH.value,
                written_before_failure=outcome["written_before_failure"],
            )
        context.state.merge_files(outcome["files"])
        return ToolResult(output={"written": list(outcome["files"])})
