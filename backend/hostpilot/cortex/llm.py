"""Chat completion client used by the answer generator."""

from __future__ import annotations

import json
import socket
from dataclasses import dataclass
from typing import Protocol
from urllib import error as urllib_error
from urllib import request as urllib_request

from hostpilot.config import get_settings


class CortexLLMError(RuntimeError):
    """Raised when the language model cannot produce an answer."""

    def __init__(self, message: str, *, kind: str = "unavailable") -> None:
        super().__init__(message)
        self.kind = kind


class ChatCompletionClient(Protocol):
    """Protocol for chat completion providers."""

    def complete(self, messages: list[dict[str, str]], *, temperature: float) -> str:
        """Return assistant text for the provided conversation."""


@dataclass(slots=True)
class OpenAIChatClient:
    """Minimal OpenAI chat completions client."""

    api_key: str | None
    model: str
    base_url: str = "https://api.openai.com/v1"
    timeout_seconds: int = 30

    def complete(self, messages: list[dict[str, str]], *, temperature: float) -> str:
        if not self.api_key:
            raise CortexLLMError("OPENAI_API_KEY is not configured.", kind="not_configured")

        payload = {
            "model": self.model,
            "temperature": temperature,
            "messages": messages,
        }
        url = f"{self.base_url.rstrip('/')}/chat/completions"
        req = urllib_request.Request(
            url=url,
            data=json.dumps(payload).encode("utf-8"),
            method="POST",
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )
        try:
            with urllib_request.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
        except urllib_error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise CortexLLMError(f"OpenAI HTTP {exc.code}: {detail}", kind=_kind_for_status(exc.code)) from exc
        except urllib_error.URLError as exc:
            kind = "timeout" if isinstance(exc.reason, (socket.timeout, TimeoutError)) else "unavailable"
            raise CortexLLMError(f"OpenAI request failed: {exc.reason}", kind=kind) from exc
        except TimeoutError as exc:
            raise CortexLLMError("OpenAI request timed out", kind="timeout") from exc

        try:
            decoded = json.loads(raw)
            content = decoded["choices"][0]["message"]["content"]
            if not isinstance(content, str) or not content.strip():
                raise TypeError("assistant message content missing")
            return content.strip()
        except (KeyError, IndexError, TypeError, json.JSONDecodeError) as exc:
            raise CortexLLMError(
                "OpenAI returned an unexpected chat response", kind="malformed_response"
            ) from exc


def _kind_for_status(status: int) -> str:
    if status in (401, 403):
        return "authentication"
    if status == 429:
        return "rate_limit"
    if status in (408, 504):
        return "timeout"
    return "unavailable"


def get_default_chat_client() -> ChatCompletionClient:
    """Return the configured chat client.

    A missing API key still yields a client; its calls fail with
    `kind="not_configured"` so the caller can degrade gracefully.
    """

    settings = get_settings()
    return OpenAIChatClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout_seconds=settings.openai_timeout_seconds,
    )
