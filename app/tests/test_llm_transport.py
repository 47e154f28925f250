# tests/test_llm_transport.py
import json

import httpx
import pytest
import respx

from tinyagent import Agent, TransportError
from tinyagent.llm import HttpxTransport, chat_completion_payload, completions_url

pytestmark = pytest.mark.asyncio

BASE = "http://llm.test/v1"


@respx.mock
async def test_httpx_transport_posts_body_and_returns_status():
    route = respx.post(f"{BASE}/chat/completions").mock(
        return_value=httpx.Response(200, json={"ok": True}))

    status, text = await HttpxTransport().post(
        f"{BASE}/chat/completions", {"Authorization": "Bearer k"}, '{"a": 1}')

    assert status == 200 and json.loads(text) == {"ok": True}
    req = route.calls.last.request
    assert req.headers["Authorization"] == "Bearer k"
    assert json.loads(req.content) == {"a": 1}


@respx.mock
async def test_httpx_transport_returns_error_status_without_raising():
    respx.post(f"{BASE}/chat/completions").mock(
        return_value=httpx.Response(500, text="upstream down"))
    status, text = await HttpxTransport().post(f"{BASE}/chat/completions", {}, "{}")
    assert (status, text) == (500, "upstream down")


@respx.mock
async def test_agent_end_to_end_over_httpx():
    respx.post(f"{BASE}/chat/completions").mock(return_value=httpx.Response(200, json={
        "choices": [{"message": {"role": "assistant", "content": "Hello"},
                     "finish_reason": "stop"}]}))
    agent = Agent(model="m", base_url=BASE, api_key="k", transport=HttpxTransport())
    result = await agent.run("hi")
    assert result.data == "Hello"


@respx.mock
async def test_agent_streams_over_httpx():
    body = "\n\n".join([
        'data: {"choices":[{"delta":{"content":"Hi"},"finish_reason":null}]}',
        'data: {"choices":[{"delta":{"content":"!"},"finish_reason":"stop"}]}',
        "data: [DONE]",
    ])
    respx.post(f"{BASE}/chat/completions").mock(
        return_value=httpx.Response(200, text=body, headers={"Content-Type": "text/event-stream"}))
    chunks = []
    agent = Agent(model="m", base_url=BASE, api_key="k", transport=HttpxTransport())
    result = await agent.run("hi", stream=True, on_chunk=lambda k, p: chunks.append(p["content"]))
    assert result.data == "Hi!"
    assert chunks == ["Hi", "!"]


@respx.mock
async def test_agent_raises_transport_error():
    respx.post(f"{BASE}/chat/completions").mock(
        return_value=httpx.Response(429, text="slow down"))
    agent = Agent(model="m", base_url=BASE, api_key="k", transport=HttpxTransport())
    with pytest.raises(TransportError, match="429"):
        await agent.run("hi")


async def test_payload_omits_unset_options():
    assert chat_completion_payload("m", []) == {"model": "m", "messages": []}
    p = chat_completion_payload("m", [], tools=[{"x": 1}], temperature=0.0,
                                max_tokens=10, stream=True)
    assert p["temperature"] == 0.0 and p["max_tokens"] == 10
    assert p["tools"] == [{"x": 1}] and p["stream"] is True
    assert completions_url("https://a/v1/") == "https://a/v1/chat/completions"
