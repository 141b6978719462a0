"""Trace recorder for network runs."""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from snippetforge.failures import FailureEvent
from snippetforge.util.logging import redact


@dataclass
class TraceRecorder:
    trace_id: str
    workspace_dir: str
    started_at: float = field(default_factory=time.time)
    events: list[dict[str, Any]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, event_type: str, payload: dict[str, Any]) -> None:
        with self._lock:
            self.events.append(
                {
                    "type": event_type,
                    "timestamp": time.time(),
                    "payload": payload,
                }
            )

    def record_iteration(self, iteration: int, agent_name: str) -> None:
        self.record("iteration", {"iteration": iteration, "agent": agent_name})

    def record_model_response(self, content: str | None, tool_calls: list[dict[str, Any]]) -> None:
        self.record(
            "model_response",
            {"content": redact(content or ""), "tool_calls": tool_calls},
        )

    def record_tool_call(self, tool_name: str, arguments: dict[str, Any]) -> None:
        self.record("tool_call", {"tool_name": tool_name, "arguments": arguments})

    def record_tool_result(self, tool_name: str, ok: bool, content: str) -> None:
        self.record(
            "tool_result",
            {"tool_name": tool_name, "ok": ok, "content": redact(content[:2000])},
        )

    def record_completion(self, summary: str) -> None:
        self.record("completion", {"summary": redact(summary)})

    def record_failure(self, event: FailureEvent) -> None:
        self.record("failure", event.to_dict())

    def finalize(self, stats: dict[str, Any]) -> str:
        trace_dir = Path(self.workspace_dir) / "traces"
        trace_dir.mkdir(parents=True, exist_ok=True)
        trace_path = trace_dir / f"{self.trace_id}.json"
        payload = {
            "trace_id": self.trace_id,
            "started_at": self.started_at,
            "ended_at": time.time(),
            "stats": stats,
            "events": self.events,
        }
        trace_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
        return str(trace_path)
