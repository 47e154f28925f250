from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

ChunkFn = Callable[[str, Dict[str, Any]], None]

DONE_SENTINEL = "[DONE]"


def parse_sse(text: str) -> List[Dict[str, Any]]:
    """
    Turn a server-sent-events body into the list of decoded `data:` payloads.
    Parsing stops at `data: [DONE]`. Other lines and undecodable payloads
    are skipped.
    """
    chunks: List[Dict[str, Any]] = []
    for line in text.splitlines():
        if not line.startswith("data:"):
            continue
        data = line[len("data:"):].strip()
        if data == DONE_SENTINEL:
            break
        try:
            chunks.append(json.loads(data))
        except json.JSONDecodeError:
            logger.debug("skipping undecodable stream line: %r", data[:80])
            continue
    return chunks


@dataclass
class ToolCallAccumulator:
    id: str = ""
    type: str = "function"
    name: str = ""
    arguments: str = ""

    def as_tool_call(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "function": {"name": self.name, "arguments": self.arguments},
        }


class StreamAccumulator:
    """
    Rebuild one chat.completion response from streamed chunks.

    OpenAI-compatible providers send tool calls as incremental deltas keyed
    by `index`: the id and name usually arrive first and `arguments` arrives
    in fragments that must be concatenated. Indices are kept in a sparse map;
    they need not be contiguous.
    """

    def __init__(self, on_chunk: Optional[ChunkFn] = None) -> None:
        self._emit: ChunkFn = on_chunk or (lambda *_args: None)
        self.content = ""
        self.tool_calls: Dict[int, ToolCallAccumulator] = {}
        self.response_id: Optional[str] = None
        self.model: Optional[str] = None
        self.finish_reason: Optional[str] = None

    def feed(self, chunk: Dict[str, Any]) -> None:
        if chunk.get("id"):
            self.response_id = chunk["id"]
        if chunk.get("model"):
            self.model = chunk["model"]

        choices = chunk.get("choices") or []
        if not choices:
            return
        choice = choices[0] or {}
        if choice.get("finish_reason"):
            self.finish_reason = choice["finish_reason"]

        delta = choice.get("delta") or {}
        text = delta.get("content")
        if text:
            self.content += text
            self._emit("content", {"content": text})

        for tc_delta in delta.get("tool_calls") or []:
            self._feed_tool_call(tc_delta)

    def _feed_tool_call(self, tc_delta: Dict[str, Any]) -> None:
        index = tc_delta.get("index", 0)
        slot = self.tool_calls.get(index)
        if slot is None:
            slot = ToolCallAccumulator(
                id=tc_delta.get("id") or "",
                type=tc_delta.get("type") or "function",
            )
            self.tool_calls[index] = slot

        if tc_delta.get("id"):
            slot.id = tc_delta["id"]
            self._emit("tool_call_start", {"index": index, "id": slot.id})

        fn = tc_delta.get("function") or {}
        if fn.get("name"):
            slot.name += fn["name"]
        if fn.get("arguments"):
            slot.arguments += fn["arguments"]
            self._emit("tool_call_delta", {"index": index, "arguments": fn["arguments"]})

    def finish(self) -> Dict[str, Any]:
        """Emit tool_call_end for every slot and build the normalized response."""
        for index, slot in self.tool_calls.items():
            self._emit("tool_call_end", {"index": index, "tool_call": slot.as_tool_call()})

        message: Dict[str, Any] = {
            "role": "assistant",
            "content": self.content or None,
        }
        if self.tool_calls:
            message["tool_calls"] = [s.as_tool_call() for s in self.tool_calls.values()]

        return {
            "id": self.response_id,
            "object": "chat.completion",
            "created": int(time.time()),
            "model": self.model,
            "choices": [
                {"index": 0, "message": message, "finish_reason": self.finish_reason}
            ],
        }


def process_stream(raw_text: str, on_chunk: Optional[ChunkFn] = None) -> Dict[str, Any]:
    acc = StreamAccumulator(on_chunk)
    chunks = parse_sse(raw_text)
    for chunk in chunks:
        acc.feed(chunk)
    logger.debug("stream processed: %d chunks, %d tool call(s)",
                 len(chunks), len(acc.tool_calls))
    return acc.finish()
