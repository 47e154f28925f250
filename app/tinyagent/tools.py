# app/tinyagent/tools.py
from __future__ import annotations

import inspect
import json
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError, ToolError, ToolExecutionError, UnknownToolError
from .schemas import ToolCall

logger = logging.getLogger(__name__)

OUTPUT_TOOL_NAME = "final_answer"
OUTPUT_TOOL_DESCRIPTION = "Call this function to return your final answer with structured data"


class ToolDescriptor(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)
    # (ctx, args) -> value; may be a coroutine function
    handler: Callable[..., Any]

    def to_spec(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


def _decode_arguments(raw: str) -> Any:
    if not raw or not raw.strip():
        return {}
    return json.loads(raw)


def encode_result(result: Any) -> str:
    """Strings pass through untouched; everything else is JSON-encoded."""
    if isinstance(result, str):
        return result
    return json.dumps(result, ensure_ascii=False, default=str)


class ToolRegistry:
    """Named tools an agent may call, plus the structured-output tool."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}
        self.output_tool_name: Optional[str] = None

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> List[str]:
        return list(self._tools)

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def register(self, name: str, descriptor: ToolDescriptor | Dict[str, Any]) -> ToolDescriptor:
        if isinstance(descriptor, ToolDescriptor):
            tool = descriptor.model_copy(update={"name": name})
        else:
            cfg = dict(descriptor or {})
            handler = cfg.get("handler") or cfg.get("func")
            if handler is None:
                raise ConfigurationError(f"Tool '{name}' requires a handler")
            tool = ToolDescriptor(
                name=name,
                description=cfg.get("description") or "",
                parameters=cfg.get("parameters") or {},
                handler=handler,
            )
        self._tools[name] = tool
        logger.debug("registered tool %s", name)
        return tool

    def register_output_tool(self, schema: Dict[str, Any]) -> ToolDescriptor:
        if OUTPUT_TOOL_NAME in self._tools:
            raise ConfigurationError(
                f"Tool name '{OUTPUT_TOOL_NAME}' is reserved for structured output")
        self.output_tool_name = OUTPUT_TOOL_NAME
        return self.register(OUTPUT_TOOL_NAME, {
            "description": OUTPUT_TOOL_DESCRIPTION,
            "parameters": schema,
            # never dispatched by the run loop, which intercepts this call
            "handler": lambda _ctx, args: args,
        })

    def build_tool_specs(self) -> List[Dict[str, Any]]:
        return [tool.to_spec() for tool in self._tools.values()]

    async def invoke(self, tool_call: ToolCall, ctx: Any) -> Any:
        """Run the handler for `tool_call`; raises ToolError subclasses."""
        name = tool_call.function.name
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        try:
            args = _decode_arguments(tool_call.function.arguments)
            result = tool.handler(ctx, args)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise ToolExecutionError(name, e) from e
        return result

    async def execute(self, tool_call: ToolCall, ctx: Any) -> str:
        """
        Execute a tool call and return the tool-result content.

        Failures are returned as a JSON `{"error": ...}` string instead of
        raised, so the model gets to see them.
        """
        try:
            result = await self.invoke(tool_call, ctx)
        except ToolError as e:
            logger.warning("tool %s failed: %s", tool_call.function.name, e)
            return json.dumps({"error": str(e)})
        logger.info("tool %s executed", tool_call.function.name)
        return encode_result(result)
