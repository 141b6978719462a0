"""Sandboxed code-generation agent network."""

from snippetforge.state import AgentState, RunRequest, RunResult, RunStatus

__all__ = ["AgentState", "RunRequest", "RunResult", "RunStatus"]
