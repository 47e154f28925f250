from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple

import httpx

from .config import settings

logger = logging.getLogger(__name__)


# ---------- transport ----------


class Transport(Protocol):
    async def post(self, url: str, headers: Dict[str, str], body: str) -> Tuple[int, str]: ...


def _default_timeouts() -> httpx.Timeout:
    return httpx.Timeout(
        connect=settings.connect_timeout,
        read=settings.read_timeout,
        write=settings.write_timeout,
        pool=settings.pool_timeout,
    )


class HttpxTransport:
    """
    POST a JSON body and hand back (status, text). Non-2xx statuses are
    returned, not raised; the agent decides what they mean.
    """

    def __init__(self, timeout: Optional[httpx.Timeout] = None,
                 client: Optional[httpx.AsyncClient] = None) -> None:
        self.timeout = timeout or _default_timeouts()
        self._client = client

    async def post(self, url: str, headers: Dict[str, str], body: str) -> Tuple[int, str]:
        if self._client is not None:
            r = await self._client.post(url, headers=headers, content=body)
            return r.status_code, r.text
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(url, headers=headers, content=body)
        return r.status_code, r.text


_default_transport: Optional[HttpxTransport] = None


def get_transport() -> HttpxTransport:
    """Lazily build the shared default transport."""
    global _default_transport
    if _default_transport is None:
        _default_transport = HttpxTransport()
    return _default_transport


# ---------- request building ----------


def completions_url(base_url: str) -> str:
    return base_url.rstrip("/") + "/chat/completions"


def request_headers(api_key: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }


def chat_completion_payload(
    model: str,
    messages: List[Dict[str, Any]],
    tools: List[Dict[str, Any]] | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    stream: bool = False,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"model": model, "messages": messages}
    if temperature is not None:
        payload["temperature"] = temperature
    if max_tokens is not None:
        payload["max_tokens"] = max_tokens
    if tools:
        payload["tools"] = tools
    if stream:
        payload["stream"] = True
    return payload
