"""OpenAI-compatible chat model client."""

from __future__ import annotations

import json
import time
from typing import Any
from urllib.parse import urlparse, urlunparse

import httpx

from snippetforge.models.base import BaseChatModel, ModelResponse, ToolCall
from snippetforge.util.logging import get_logger, redact

logger = get_logger(__name__)


class OpenAICompatError(RuntimeError):
    """Raised when the OpenAI-compatible backend returns an error."""


class OpenAICompatChatModel(BaseChatModel):
    """HTTP client for OpenAI-compatible chat/completions."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout_seconds: int = 60,
        max_response_bytes: int = 4_000_000,
        extra_headers: dict[str, str] | None = None,
        disable_tool_choice: bool = False,
        max_attempts: int = 3,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        normalized = base_url.strip()
        if not normalized.startswith(("http://", "https://")):
            normalized = f"http://{normalized}"
        self.base_url = normalized.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.max_response_bytes = max_response_bytes
        self.extra_headers = extra_headers or {}
        self.disable_tool_choice = disable_tool_choice
        self.max_attempts = max(1, max_attempts)
        self.transport = transport

    def _request_payload(
        self, messages: list[dict[str, Any]], tools: list[dict[str, Any]] | None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": self.model, "messages": messages}
        if tools:
            payload["tools"] = list(tools)
            if not self.disable_tool_choice:
                payload["tool_choice"] = "auto"
        return payload

    def _build_url(self) -> str:
        parsed = urlparse(self.base_url)
        path = parsed.path or ""
        if path in {"", "/"}:
            base_path = "/v1"
        else:
            base_path = path.rstrip("/")
            segments = [segment for segment in base_path.split("/") if segment]
            if "v1" not in segments:
                base_path = f"{base_path}/v1"
        if base_path.endswith("/chat/completions"):
            final_path = base_path
        else:
            final_path = f"{base_path}/chat/completions"
        return urlunparse(parsed._replace(path=final_path, params="", query="", fragment=""))

    def chat(self, messages: list[dict[str, Any]], tools: list[dict[str, Any]] | None) -> ModelResponse:
        url = self._build_url()
        headers = {"Authorization": f"Bearer {self.api_key}", **self.extra_headers}
        payload = self._request_payload(messages, tools)
        timeout = httpx.Timeout(self.timeout_seconds)

        last_error: Exception | None = None
        for attempt in range(self.max_attempts):
            try:
                with httpx.Client(timeout=timeout, transport=self.transport) as client:
                    response = client.post(url, headers=headers, json=payload)
                if response.status_code in {429} or response.status_code >= 500:
                    raise OpenAICompatError(
                        f"Retryable error {response.status_code}: {response.text[:200]}"
                    )
                response.raise_for_status()
                if len(response.content) > self.max_response_bytes:
                    raise OpenAICompatError("Response too large")
                try:
                    data = response.json()
                except json.JSONDecodeError as exc:
                    raise OpenAICompatError("Malformed JSON response") from exc
                return self._parse_response(data)
            except (httpx.HTTPError, OpenAICompatError) as exc:
                last_error = exc
                logger.warning(
                    "Model request attempt %s/%s failed: %s",
                    attempt + 1,
                    self.max_attempts,
                    redact(str(exc), [self.api_key]),
                )
                if attempt == self.max_attempts - 1:
                    break
                time.sleep(2**attempt)
        raise OpenAICompatError(f"OpenAI-compatible request failed: {last_error}")

    def _parse_response(self, data: dict[str, Any]) -> ModelResponse:
        choices = data.get("choices") or [{}]
        message = choices[0].get("message") or {}
        content = message.get("content")
        text = content if isinstance(content, str) and content else None
        tool_calls = [
            call
            for call in (_parse_native_call(raw) for raw in message.get("tool_calls") or [])
            if call is not None
        ]
        if not tool_calls and text:
            fallback = _tool_call_from_content(text)
            if fallback is not None:
                return ModelResponse(tool_calls=[fallback])
        return ModelResponse(final_text=text, tool_calls=tool_calls)


def _parse_native_call(raw: Any) -> ToolCall | None:
    if not isinstance(raw, dict):
        return None
    function = raw.get("function") or {}
    name = function.get("name")
    if not isinstance(name, str) or not name:
        return None
    arguments = function.get("arguments") or {}
    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError:
            # Surface undecodable arguments so the registry reports a validation error.
            arguments = {"_raw": arguments}
    if not isinstance(arguments, dict):
        arguments = {"_raw": arguments}
    call_id = raw.get("id")
    if isinstance(call_id, str) and call_id:
        return ToolCall(id=call_id, name=name, arguments=arguments)
    return ToolCall(name=name, arguments=arguments)


def _tool_call_from_content(content: str) -> ToolCall | None:
    """Parse a JSON tool-call object emitted as plain content by weaker models."""
    try:
        payload = json.loads(content.strip())
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    name = payload.get("name") or payload.get("tool")
    arguments = payload.get("arguments")
    if payload.get("type") not in {None, "tool"}:
        return None
    if isinstance(name, str) and isinstance(arguments, dict):
        return ToolCall(name=name, arguments=arguments)
    return None
