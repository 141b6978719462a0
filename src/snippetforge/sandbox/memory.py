"""In-memory sandbox used offline and in tests."""

from __future__ import annotations

import posixpath
import threading
import time
from itertools import count
from typing import Callable, Union

from snippetforge.sandbox.base import (
    CommandResult,
    EntryInfo,
    OutputSink,
    SandboxClient,
    SandboxError,
    SandboxHandle,
)

CommandBehavior = Union[CommandResult, Exception, Callable[[OutputSink], CommandResult]]


def _normalize(path: str) -> str:
    normalized = posixpath.normpath(path.strip() or ".")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


class InMemorySandbox(SandboxHandle):
    """Dictionary-backed file system with scripted command behavior."""

    def __init__(
        self,
        sandbox_id: str = "sandbox-memory",
        files: dict[str, str] | None = None,
        commands: dict[str, CommandBehavior] | None = None,
        host: str = "sandbox.local",
        write_delay: float = 0.0,
    ) -> None:
        self.sandbox_id = sandbox_id
        self.files = {_normalize(path): content for path, content in (files or {}).items()}
        self.commands = dict(commands or {})
        self.host = host
        self.write_delay = write_delay
        self.fail_writes: dict[str, Exception] = {}
        self.fail_reads: dict[str, Exception] = {}
        self.host_error: Exception | None = None
        self.executed: list[str] = []
        self.writes: list[str] = []
        self._lock = threading.Lock()

    def run_command(self, command: str, sink: OutputSink | None = None) -> CommandResult:
        sink = sink or OutputSink()
        self.executed.append(command)
        behavior = self.commands.get(command)
        if behavior is None:
            return CommandResult(stdout="", stderr="", exit_code=0)
        if isinstance(behavior, Exception):
            raise behavior
        if callable(behavior):
            return behavior(sink)
        if behavior.stdout:
            sink.on_stdout(behavior.stdout)
        if behavior.stderr:
            sink.on_stderr(behavior.stderr)
        return behavior

    def write_file(self, path: str, content: str) -> None:
        key = _normalize(path)
        if self.write_delay:
            time.sleep(self.write_delay)
        if key in self.fail_writes:
            raise self.fail_writes[key]
        with self._lock:
            self.files[key] = content
            self.writes.append(key)

    def read_file(self, path: str) -> str:
        key = _normalize(path)
        if key in self.fail_reads:
            raise self.fail_reads[key]
        with self._lock:
            if key not in self.files:
                raise SandboxError(f"File not found: {path}")
            return self.files[key]

    def list_directory(self, path: str) -> list[EntryInfo]:
        root = _normalize(path)
        prefix = "" if root == "." else f"{root}/"
        entries: dict[str, EntryInfo] = {}
        with self._lock:
            paths = list(self.files)
        for file_path in paths:
            if not file_path.startswith(prefix):
                continue
            remainder = file_path[len(prefix) :]
            name, _, rest = remainder.partition("/")
            kind = "dir" if rest else "file"
            entries.setdefault(name, EntryInfo(name=name, path=f"{prefix}{name}", type=kind))
        if not entries and prefix:
            raise SandboxError(f"Directory not found: {path}")
        return sorted(entries.values(), key=lambda entry: entry.name)

    def public_host(self, port: int) -> str:
        if self.host_error is not None:
            raise self.host_error
        return f"{port}-{self.sandbox_id}.{self.host}"


class InMemorySandboxClient(SandboxClient):
    """Hands out ``InMemorySandbox`` instances keyed by id."""

    def __init__(self, factory: Callable[[str], InMemorySandbox] | None = None) -> None:
        self._factory = factory or (lambda sandbox_id: InMemorySandbox(sandbox_id=sandbox_id))
        self._ids = count(1)
        self.sandboxes: dict[str, InMemorySandbox] = {}
        self.templates: list[str] = []
        self.connect_error: Exception | None = None

    def create(self, template: str) -> str:
        sandbox_id = f"sbx-{next(self._ids)}"
        self.templates.append(template)
        self.sandboxes[sandbox_id] = self._factory(sandbox_id)
        return sandbox_id

    def connect(self, sandbox_id: str) -> SandboxHandle:
        if self.connect_error is not None:
            raise self.connect_error
        try:
            return self.sandboxes[sandbox_id]
        except KeyError as exc:
            raise SandboxError(f"Unknown sandbox: {sandbox_id}") from exc
