"""Typed run state shared between the network and tool handlers."""

from __future__ import annotations

import threading
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_serializer, field_validator


class AgentState(BaseModel):
    """Mutable state threaded through one network run.

    ``files`` only grows or overwrites existing paths and ``summary`` is set at
    most once. Both are mutated through the methods below, which serialize on
    a lock owned by this instance so concurrent tool calls cannot lose updates.
    """

    files: dict[str, str] = Field(default_factory=dict)
    summary: str | None = None

    _lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    def merge_files(self, batch: Mapping[str, str]) -> None:
        with self._lock:
            for path, content in batch.items():
                self.files[path] = content

    def set_summary(self, text: str) -> bool:
        """Record the completion summary. Returns False if one was already set."""
        with self._lock:
            if self.summary:
                return False
            self.summary = text
            return True

    def snapshot_files(self) -> dict[str, str]:
        with self._lock:
            return dict(self.files)


class RunStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class RunResult(BaseModel):
    """Finalized outcome of one network run.

    ``files`` is held as a read-only mapping so the result cannot change once
    built.
    """

    model_config = ConfigDict(frozen=True)

    status: RunStatus
    message: str
    summary: str | None = None
    files: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    sandbox_url: str | None = None

    @field_validator("files", mode="after")
    @classmethod
    def _freeze_files(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("files")
    def _dump_files(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @property
    def ok(self) -> bool:
        return self.status == RunStatus.SUCCESS


class RunRequest(BaseModel):
    """Inbound trigger that starts one run."""

    run_id: str
    value: str
    project_id: str
