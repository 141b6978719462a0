"""E2B-backed sandbox client."""

from __future__ import annotations

from e2b_code_interpreter import Sandbox

from snippetforge.sandbox.base import (
    CommandResult,
    EntryInfo,
    OutputSink,
    SandboxClient,
    SandboxError,
    SandboxHandle,
)


class E2BSandboxHandle(SandboxHandle):
    def __init__(self, sandbox: Sandbox) -> None:
        self._sandbox = sandbox
        self.sandbox_id = sandbox.sandbox_id

    def run_command(self, command: str, sink: OutputSink | None = None) -> CommandResult:
        sink = sink or OutputSink()
        result = self._sandbox.commands.run(
            command,
            on_stdout=sink.on_stdout,
            on_stderr=sink.on_stderr,
        )
        return CommandResult(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            exit_code=result.exit_code,
            error=result.error,
        )

    def write_file(self, path: str, content: str) -> None:
        self._sandbox.files.write(path, content)

    def read_file(self, path: str) -> str:
        return self._sandbox.files.read(path)

    def list_directory(self, path: str) -> list[EntryInfo]:
        entries = self._sandbox.files.list(path)
        return [
            EntryInfo(
                name=entry.name,
                path=entry.path,
                type=getattr(entry.type, "value", str(entry.type)),
            )
            for entry in entries
        ]

    def public_host(self, port: int) -> str:
        return self._sandbox.get_host(port)


class E2BSandboxClient(SandboxClient):
    """Creates and reconnects to E2B sandboxes."""

    def __init__(self, api_key: str | None = None) -> None:
        self.api_key = api_key

    def _options(self) -> dict[str, str]:
        return {"api_key": self.api_key} if self.api_key else {}

    def create(self, template: str) -> str:
        try:
            sandbox = Sandbox.create(template=template, **self._options())
        except Exception as exc:  # noqa: BLE001
            raise SandboxError(f"Failed to create sandbox from {template}: {exc}") from exc
        return sandbox.sandbox_id

    def connect(self, sandbox_id: str) -> SandboxHandle:
        try:
            sandbox = Sandbox.connect(sandbox_id, **self._options())
        except Exception as exc:  # noqa: BLE001
            raise SandboxError(f"Failed to connect to sandbox {sandbox_id}: {exc}") from exc
        return E2BSandboxHandle(sandbox)
