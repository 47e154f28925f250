# tests/fakes.py
from __future__ import annotations
import json
from typing import Any, Dict, List


class FakeTransport:
    """
    Stands in for the HTTP layer: records every request and replays queued
    (status, body) responses in order.
    """

    def __init__(self, responses: List[Any]) -> None:
        self.responses = list(responses)
        self.requests: List[Dict[str, Any]] = []

    async def post(self, url: str, headers: Dict[str, str], body: str):
        self.requests.append({"url": url, "headers": headers, "body": json.loads(body)})
        if not self.responses:
            raise AssertionError("FakeTransport ran out of responses")
        resp = self.responses.pop(0)
        if isinstance(resp, tuple):
            return resp
        if isinstance(resp, str):
            return 200, resp
        return 200, json.dumps(resp)


def completion(content: str | None = None, tool_calls: list | None = None,
               finish_reason: str = "stop") -> Dict[str, Any]:
    message: Dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls:
        message["tool_calls"] = tool_calls
    return {"id": "chatcmpl-1", "object": "chat.completion",
            "choices": [{"index": 0, "message": message, "finish_reason": finish_reason}]}


def tool_call(call_id: str, name: str, arguments: str) -> Dict[str, Any]:
    return {"id": call_id, "type": "function",
            "function": {"name": name, "arguments": arguments}}


def sse(*chunks: Dict[str, Any], done: bool = True) -> str:
    lines = [f"data: {json.dumps(c)}" for c in chunks]
    if done:
        lines.append("data: [DONE]")
    return "\n\n".join(lines) + "\n"


def delta_chunk(delta: Dict[str, Any], finish_reason: str | None = None) -> Dict[str, Any]:
    return {"id": "chatcmpl-s", "model": "test-model",
            "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}]}
