"""Labeled step execution.

Side-effecting work (sandbox creation, tool I/O, URL lookup) runs inside a
labeled step so a durable execution substrate can memoize it and replay a
run without repeating effects that already completed. ``InlineStepRunner``
just calls through; ``MemoizedStepRunner`` keeps results in memory by label.
"""

from __future__ import annotations

import hashlib
import json
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class StepRunner(ABC):
    @abstractmethod
    def run(self, label: str, fn: Callable[[], T]) -> T:
        raise NotImplementedError


class InlineStepRunner(StepRunner):
    def run(self, label: str, fn: Callable[[], T]) -> T:
        return fn()


class MemoizedStepRunner(StepRunner):
    """Runs each label at most once and replays the stored result afterwards.

    Exceptions are not stored, so a failed step runs again on the next call.
    """

    def __init__(self, results: dict[str, Any] | None = None) -> None:
        self.results: dict[str, Any] = dict(results or {})
        self.executed: list[str] = []
        self._lock = threading.Lock()

    def run(self, label: str, fn: Callable[[], T]) -> T:
        with self._lock:
            if label in self.results:
                return self.results[label]
        value = fn()
        with self._lock:
            self.executed.append(label)
            return self.results.setdefault(label, value)


def arguments_digest(arguments: dict[str, Any]) -> str:
    payload = json.dumps(arguments, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


def tool_step_label(tool_name: str, arguments: dict[str, Any], occurrence: int = 0) -> str:
    """Label for a tool's sandbox step.

    Derived from the call's own inputs: the tool name, a digest of its
    arguments and how many identical calls preceded it in the run.
    """
    label = f"{tool_name}:{arguments_digest(arguments)}"
    if occurrence:
        label = f"{label}:{occurrence}"
    return label
