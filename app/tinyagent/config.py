from __future__ import annotations

import os
from typing import Any, Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    base_url: str = os.getenv("TINYAGENT_BASE_URL", "https://api.openai.com/v1")
    max_iterations: int = int(os.getenv("TINYAGENT_MAX_ITERATIONS", "10"))
    # transport timeouts (seconds)
    connect_timeout: float = float(os.getenv("TINYAGENT_TIMEOUT_CONNECT", "10"))
    read_timeout: float = float(os.getenv("TINYAGENT_TIMEOUT_READ", "120"))
    write_timeout: float = float(os.getenv("TINYAGENT_TIMEOUT_WRITE", "60"))
    pool_timeout: float = float(os.getenv("TINYAGENT_TIMEOUT_POOL", "60"))
    log_level: str = os.getenv("TINYAGENT_LOG_LEVEL", "WARNING")


settings = Settings()


SystemPrompt = Union[str, Callable[..., str]]


class AgentConfig(BaseModel):
    """
    Every option an Agent accepts, with its default. Resolved once when the
    agent is built; call sites read from here instead of chaining defaults.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, protected_namespaces=())

    model: Optional[str] = None
    system_prompt: Optional[SystemPrompt] = None
    output_schema: Optional[Dict[str, Any]] = None
    tools: Dict[str, Any] = Field(default_factory=dict)
    base_url: str = Field(default_factory=lambda: settings.base_url)
    api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY") or None)
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    transport: Optional[Any] = None


class RunOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Any, so pydantic keeps the caller's object instead of copying it
    deps: Any = Field(default_factory=dict)
    message_history: list = Field(default_factory=list)
    max_iterations: int = Field(default_factory=lambda: settings.max_iterations)
    stream: bool = False
    on_chunk: Optional[Callable[[str, Dict[str, Any]], None]] = None
