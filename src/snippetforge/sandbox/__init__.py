"""Sandbox backends."""

from snippetforge.sandbox.base import (
    LEASES,
    CommandResult,
    EntryInfo,
    OutputSink,
    SandboxBusyError,
    SandboxClient,
    SandboxError,
    SandboxHandle,
    SandboxLeases,
)

__all__ = [
    "LEASES",
    "CommandResult",
    "EntryInfo",
    "OutputSink",
    "SandboxBusyError",
    "SandboxClient",
    "SandboxError",
    "SandboxHandle",
    "SandboxLeases",
]
