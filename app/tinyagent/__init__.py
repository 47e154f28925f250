from __future__ import annotations

from .config import AgentConfig, RunOptions, Settings, settings
from .core import Agent, RunContext
from .errors import (
    AgentError,
    ConfigurationError,
    IncompleteStreamError,
    IterationLimitError,
    OutputValidationError,
    ToolError,
    ToolExecutionError,
    TransportError,
    UnknownToolError,
)
from .llm import HttpxTransport, Transport
from .providers import detect_provider
from .schemas import Message, ProviderConfig, RunResult, ToolCall, ToolCallFunction
from .streaming import StreamAccumulator, parse_sse, process_stream
from .tools import OUTPUT_TOOL_NAME, ToolDescriptor, ToolRegistry
from .validation import validate_schema

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentError",
    "ConfigurationError",
    "HttpxTransport",
    "IncompleteStreamError",
    "IterationLimitError",
    "Message",
    "OUTPUT_TOOL_NAME",
    "OutputValidationError",
    "ProviderConfig",
    "RunContext",
    "RunOptions",
    "RunResult",
    "Settings",
    "StreamAccumulator",
    "ToolCall",
    "ToolCallFunction",
    "ToolDescriptor",
    "ToolError",
    "ToolExecutionError",
    "ToolRegistry",
    "Transport",
    "TransportError",
    "UnknownToolError",
    "detect_provider",
    "parse_sse",
    "process_stream",
    "settings",
    "validate_schema",
]
