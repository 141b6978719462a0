"""Default system prompt for the code agent."""

from __future__ import annotations

from snippetforge.config import COMPLETION_MARKER, COMPLETION_MARKER_CLOSE

TASK_TEMPLATE = "Write the following snippet: {value}"


def build_system_prompt(
    marker: str = COMPLETION_MARKER, closing: str = COMPLETION_MARKER_CLOSE
) -> str:
    return (
        "You are a senior software engineer working inside a sandboxed "
        "Next.js environment. Use the terminal, createOrUpdateFiles, readFiles "
        "and listFiles tools to build what the user asks for. File paths are "
        "relative to the project root. When the work is finished, reply with a "
        f"short summary wrapped in {marker} and {closing}. Do not include the "
        "summary markers until the task is complete."
    )
