"""Failure taxonomy and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FailureTag(str, Enum):
    """Standardized failure categories recorded in tool results and traces."""

    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    TOOL_VALIDATION = "TOOL_VALIDATION"
    TOOL_EXECUTION = "TOOL_EXECUTION"
    PARTIAL_BATCH = "PARTIAL_BATCH"
    ROUTER_EXHAUSTED = "ROUTER_EXHAUSTED"
    RUN_CANCELLED = "RUN_CANCELLED"
    URL_RESOLUTION = "URL_RESOLUTION"


@dataclass(frozen=True)
class FailureEvent:
    """Structured failure event for traces."""

    tag: FailureTag
    reason: str
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"tag": self.tag.value, "reason": self.reason, "details": self.details}
