"""Sandbox client interface consumed by the tool handlers.

A sandbox is a remote Linux environment identified by an id. The network
never provisions one itself: it receives a ``SandboxClient`` and connects to
the sandbox created for the run. Concrete backends live in
``snippetforge.sandbox.e2b`` (remote) and ``snippetforge.sandbox.memory``
(offline and tests).
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal

Stream = Literal["stdout", "stderr"]


class SandboxError(RuntimeError):
    """Raised when a sandbox operation fails."""


class SandboxBusyError(SandboxError):
    """Raised when a sandbox is already leased by another run."""


@dataclass
class CommandResult:
    stdout: str
    stderr: str
    exit_code: int = 0
    error: str | None = None


@dataclass(frozen=True)
class EntryInfo:
    name: str
    path: str
    type: str = "file"

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "path": self.path, "type": self.type}


@dataclass
class OutputSink:
    """Accumulates streamed command output on the caller's side."""

    stdout: str = ""
    stderr: str = ""
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def on_chunk(self, stream: Stream, data: str) -> None:
        with self._lock:
            if stream == "stdout":
                self.stdout += data
            else:
                self.stderr += data

    def on_stdout(self, data: str) -> None:
        self.on_chunk("stdout", data)

    def on_stderr(self, data: str) -> None:
        self.on_chunk("stderr", data)


class SandboxHandle(ABC):
    """Connected sandbox."""

    sandbox_id: str

    @abstractmethod
    def run_command(self, command: str, sink: OutputSink | None = None) -> CommandResult:
        """Run a shell command, streaming output chunks into ``sink``."""
        raise NotImplementedError

    @abstractmethod
    def write_file(self, path: str, content: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def read_file(self, path: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def list_directory(self, path: str) -> list[EntryInfo]:
        raise NotImplementedError

    @abstractmethod
    def public_host(self, port: int) -> str:
        """Return the externally reachable hostname for ``port``."""
        raise NotImplementedError


class SandboxClient(ABC):
    """Creates sandboxes and connects to existing ones by id."""

    @abstractmethod
    def create(self, template: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def connect(self, sandbox_id: str) -> SandboxHandle:
        raise NotImplementedError


class SandboxLeases:
    """Process-wide record of which run currently owns each sandbox."""

    def __init__(self) -> None:
        self._owners: dict[str, str] = {}
        self._lock = threading.Lock()

    def acquire(self, sandbox_id: str, run_id: str) -> None:
        with self._lock:
            owner = self._owners.get(sandbox_id)
            if owner is not None and owner != run_id:
                raise SandboxBusyError(
                    f"Sandbox {sandbox_id} is leased by run {owner}"
                )
            self._owners[sandbox_id] = run_id

    def release(self, sandbox_id: str, run_id: str) -> None:
        with self._lock:
            if self._owners.get(sandbox_id) == run_id:
                del self._owners[sandbox_id]

    def owner(self, sandbox_id: str) -> str | None:
        with self._lock:
            return self._owners.get(sandbox_id)


LEASES = SandboxLeases()
