# app/tinyagent/support.py
"""
Demo agents: sentiment analysis with structured output, and an order-support
agent whose tools read their "database" and permissions from `deps`.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .core import Agent, RunContext
from .schemas import ProviderConfig

SENTIMENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "sentiment": {"type": "string", "enum": ["positive", "negative", "neutral"]},
        "confidence": {"type": "number", "description": "Confidence score between 0 and 1"},
        "reasoning": {"type": "string", "description": "Brief explanation of the sentiment"},
    },
    "required": ["sentiment", "confidence", "reasoning"],
    "additionalProperties": False,
}

SUPPORT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "response": {"type": "string"},
        "order_id": {"type": "string"},
        "status": {"type": "string"},
    },
    "required": ["response"],
}


def sample_orders() -> Dict[str, str]:
    return {"ORD-123": "shipped", "ORD-456": "processing", "ORD-789": "delivered"}


def get_order_status(ctx: RunContext, args: Dict[str, Any]) -> Dict[str, Any]:
    order_id = str(args.get("order_id") or "")
    orders = ctx.deps.get("orders") or {}
    return {"order_id": order_id, "status": orders.get(order_id, "not found")}


def update_order(ctx: RunContext, args: Dict[str, Any]) -> Dict[str, Any]:
    if not ctx.deps.get("is_admin"):
        return {"error": "Unauthorized: admin access required"}

    order_id = str(args["order_id"])
    new_status = str(args["new_status"])
    orders = ctx.deps.setdefault("orders", {})
    if order_id not in orders:
        return {"error": f"Order {order_id} not found"}
    orders[order_id] = new_status
    return {"success": True, "message": f"Order {order_id} updated to {new_status}"}


SUPPORT_TOOLS: Dict[str, Dict[str, Any]] = {
    "get_order_status": {
        "description": "Get the status of an order",
        "parameters": {
            "type": "object",
            "properties": {"order_id": {"type": "string"}},
            "required": ["order_id"],
        },
        "handler": get_order_status,
    },
    "update_order": {
        "description": "Update an order (requires admin access)",
        "parameters": {
            "type": "object",
            "properties": {
                "order_id": {"type": "string"},
                "new_status": {"type": "string"},
            },
            "required": ["order_id", "new_status"],
        },
        "handler": update_order,
    },
}


def _provider_options(provider: Optional[ProviderConfig]) -> Dict[str, Any]:
    if provider is None:
        return {}
    return {"model": provider.model, "base_url": provider.base_url,
            "api_key": provider.api_key}


def create_sentiment_agent(provider: Optional[ProviderConfig] = None, **overrides: Any) -> Agent:
    options: Dict[str, Any] = {
        "system_prompt": "You analyze sentiment of text.",
        "output_schema": SENTIMENT_SCHEMA,
        **_provider_options(provider),
    }
    options.update(overrides)
    return Agent(**options)


def create_support_agent(provider: Optional[ProviderConfig] = None, **overrides: Any) -> Agent:
    options: Dict[str, Any] = {
        "system_prompt": "You are a customer service assistant. Help users with their orders.",
        "output_schema": SUPPORT_SCHEMA,
        "tools": SUPPORT_TOOLS,
        **_provider_options(provider),
    }
    options.update(overrides)
    return Agent(**options)
