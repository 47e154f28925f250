# app/tinyagent/errors.py
from __future__ import annotations


class AgentError(Exception):
    """Base class for everything tinyagent raises."""


class ConfigurationError(AgentError):
    """Missing model, credential or tool handler."""


class TransportError(AgentError):
    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Chat completions API error (status {status_code}): {body}")


class ToolError(AgentError):
    """
    Tool failures. These never leave Agent.run: the registry turns them into
    an {"error": ...} tool result for the model to read.
    """


class UnknownToolError(ToolError):
    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Tool '{tool_name}' not found")


class ToolExecutionError(ToolError):
    def __init__(self, tool_name: str, cause: BaseException) -> None:
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Tool execution failed: {cause}")


class OutputValidationError(AgentError):
    """Structured output was missing or did not match the output schema."""


class IterationLimitError(AgentError):
    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(f"Max iterations ({max_iterations}) reached")


class IncompleteStreamError(AgentError):
    """A stream ended before its tool calls were complete."""

    def __init__(self, finish_reason: str | None) -> None:
        self.finish_reason = finish_reason
        super().__init__(
            f"Stream ended with finish_reason={finish_reason!r} before tool calls completed")
