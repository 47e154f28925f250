from __future__ import annotations

import asyncio
import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from . import llm
from .config import AgentConfig, RunOptions
from .errors import (
    AgentError,
    ConfigurationError,
    IncompleteStreamError,
    IterationLimitError,
    OutputValidationError,
    TransportError,
)
from .schemas import Message, RunResult, ToolCall
from .streaming import process_stream
from .tools import ToolRegistry
from .validation import validate_schema

logger = logging.getLogger(__name__)

ChunkFn = Callable[[str, Dict[str, Any]], None]

# "function_call" is the legacy name some OpenAI-compatible servers still send
TOOL_FINISH_REASONS = ("tool_calls", "function_call")


@dataclass
class RunContext:
    """Handed to every tool handler and to a callable system prompt."""

    deps: Dict[str, Any] = field(default_factory=dict)
    messages: List[Message] = field(default_factory=list)


def _copy_history(history: List[Any]) -> List[Message]:
    # never mutate what the caller passed in
    out: List[Message] = []
    for m in history or []:
        if isinstance(m, Message):
            out.append(m.model_copy(deep=True))
        else:
            out.append(Message.model_validate(m))
    return out


class Agent:
    """
    Conversation loop over an OpenAI-compatible chat-completions API.

      1) Send the messages (+ tool specs) to the model.
      2) If it asked for tools, run them, append the results, go again.
      3) Otherwise return its text, or, with an output schema, the
         validated arguments of its `final_answer` call.
      4) Give up after max_iterations.
    """

    def __init__(self, config: AgentConfig | str | None = None, **options: Any) -> None:
        if isinstance(config, str):
            # Agent("gpt-4o-mini", ...) shorthand
            options["model"], config = config, None
        if config is not None and options:
            raise TypeError(
                "pass either an AgentConfig or keyword options, not both "
                f"(got {', '.join(sorted(options))})")
        cfg = config or AgentConfig(**options)
        if not cfg.model:
            raise ConfigurationError("model is required")

        self.config = cfg
        self.model: str = cfg.model
        self.system_prompt = cfg.system_prompt
        self.output_schema = cfg.output_schema
        self.base_url = cfg.base_url
        self.api_key = cfg.api_key
        self.temperature = cfg.temperature
        self.max_tokens = cfg.max_tokens
        self.transport = cfg.transport

        self.tools = ToolRegistry()
        for name, tool in (cfg.tools or {}).items():
            self.tools.register(name, tool)
        if self.output_schema:
            self.tools.register_output_tool(self.output_schema)

    @classmethod
    def from_config(cls, config: AgentConfig) -> "Agent":
        return cls(config)

    @property
    def output_tool_name(self) -> Optional[str]:
        return self.tools.output_tool_name

    # ---------- prompt ----------

    def build_system_prompt(self, ctx: RunContext) -> str:
        if callable(self.system_prompt):
            base = self.system_prompt(ctx) or ""
        else:
            base = self.system_prompt or ""

        if self.output_tool_name:
            instruction = (
                "When you are ready to provide your final answer, you MUST call the "
                f"'{self.output_tool_name}' function with the structured data."
            )
            base = f"{base}\n\n{instruction}" if base else instruction
        return base

    # ---------- transport ----------

    def _resolve_api_key(self, deps: Dict[str, Any]) -> str:
        api_key = (deps or {}).get("api_key") or self.api_key
        if not api_key:
            raise ConfigurationError(
                "API key not provided. Set via config, deps, or OPENAI_API_KEY env var")
        return api_key

    async def _post(self, url: str, headers: Dict[str, str], body: str):
        transport = self.transport or llm.get_transport()
        post = getattr(transport, "post", transport)
        result = post(url, headers, body)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _call_api(
        self,
        messages: List[Message],
        tool_specs: List[Dict[str, Any]],
        deps: Dict[str, Any],
        stream: bool,
        on_chunk: Optional[ChunkFn],
    ) -> Dict[str, Any]:
        api_key = self._resolve_api_key(deps)
        url = llm.completions_url(self.base_url)
        payload = llm.chat_completion_payload(
            self.model,
            [m.to_wire() for m in messages],
            tools=tool_specs,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            stream=stream,
        )
        logger.debug("POST %s (%d messages, stream=%s)", url, len(messages), stream)
        status, text = await self._post(url, llm.request_headers(api_key), json.dumps(payload))

        if not 200 <= int(status) < 300:
            raise TransportError(int(status), text)

        if stream:
            response = process_stream(text, on_chunk)
            choice = response["choices"][0]
            # streamed tool calls are only usable once the provider says they are done
            if (choice["message"].get("tool_calls")
                    and choice["finish_reason"] not in TOOL_FINISH_REASONS):
                raise IncompleteStreamError(choice["finish_reason"])
            return response
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise TransportError(int(status), f"invalid JSON in response: {e}") from e

    # ---------- structured output ----------

    def _structured_result(self, tool_call: ToolCall) -> Any:
        try:
            parsed = json.loads(tool_call.function.arguments or "{}")
        except json.JSONDecodeError as e:
            raise OutputValidationError(
                f"Output validation failed: arguments are not valid JSON ({e})") from e
        ok, err = validate_schema(parsed, self.output_schema)
        if not ok:
            raise OutputValidationError(f"Output validation failed: {err}")
        return parsed

    # ---------- run loop ----------

    async def run(
        self,
        prompt: str,
        *,
        deps: Optional[Dict[str, Any]] = None,
        message_history: Optional[List[Any]] = None,
        max_iterations: Optional[int] = None,
        stream: bool = False,
        on_chunk: Optional[ChunkFn] = None,
    ) -> RunResult:
        opts = RunOptions(
            deps=deps if deps is not None else {},
            message_history=message_history or [],
            stream=stream,
            on_chunk=on_chunk,
            **({"max_iterations": max_iterations} if max_iterations is not None else {}),
        )

        messages = _copy_history(opts.message_history)
        ctx = RunContext(deps=opts.deps, messages=messages)

        system_prompt = self.build_system_prompt(ctx)
        if system_prompt:
            messages.insert(0, Message(role="system", content=system_prompt))
        messages.append(Message(role="user", content=prompt))

        tool_specs = self.tools.build_tool_specs()

        for iteration in range(1, opts.max_iterations + 1):
            logger.debug("iteration %d/%d", iteration, opts.max_iterations)
            response = await self._call_api(
                messages, tool_specs, opts.deps, opts.stream, opts.on_chunk)

            choices = response.get("choices") or []
            if not choices or not choices[0].get("message"):
                raise AgentError(f"Malformed response without choices: {response!r}")
            try:
                message = Message.model_validate({"role": "assistant", **choices[0]["message"]})
            except ValidationError as e:
                raise AgentError(f"Malformed assistant message: {e}") from e
            messages.append(message)

            if message.tool_calls:
                if self.output_tool_name:
                    out_call = next(
                        (tc for tc in message.tool_calls
                         if tc.function.name == self.output_tool_name),
                        None,
                    )
                    if out_call is not None:
                        data = self._structured_result(out_call)
                        logger.info("structured output returned after %d iteration(s)", iteration)
                        return RunResult(data=data, messages=messages, raw_response=response)

                # strictly sequential, in the order the model listed them
                for tc in message.tool_calls:
                    result = await self.tools.execute(tc, ctx)
                    messages.append(Message(role="tool", tool_call_id=tc.id, content=result))
                continue

            if self.output_tool_name:
                raise OutputValidationError(
                    f"Model did not call the '{self.output_tool_name}' tool for structured output")

            logger.info("run finished after %d iteration(s)", iteration)
            return RunResult(data=message.content, messages=messages, raw_response=response)

        raise IterationLimitError(opts.max_iterations)

    def run_sync(self, prompt: str, **kwargs: Any) -> RunResult:
        return asyncio.run(self.run(prompt, **kwargs))
