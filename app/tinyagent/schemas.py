# app/tinyagent/schemas.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["system", "user", "assistant", "tool"]


class ToolCallFunction(BaseModel):
    name: str = ""
    # JSON-encoded string; only decoded when the tool is executed
    arguments: str = ""

    @field_validator("arguments", mode="before")
    @classmethod
    def _encode_arguments(cls, v: Any) -> Any:
        # some servers send arguments as an object instead of a JSON string
        if v is None:
            return ""
        if isinstance(v, (dict, list)):
            return json.dumps(v, ensure_ascii=False)
        return v


class ToolCall(BaseModel):
    id: str = ""
    type: Literal["function"] = "function"
    function: ToolCallFunction = Field(default_factory=ToolCallFunction)


class Message(BaseModel):
    # extra="allow" keeps provider-specific fields so assistant turns are
    # sent back exactly as received
    model_config = ConfigDict(extra="allow")

    role: Role
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    tool_call_id: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class RunResult(BaseModel):
    data: Any = None
    messages: List[Message] = Field(default_factory=list)
    raw_response: Dict[str, Any] = Field(default_factory=dict)


class ProviderConfig(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    provider: str
    base_url: str
    model: str
    api_key: str
