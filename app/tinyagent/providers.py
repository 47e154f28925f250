from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

from .schemas import ProviderConfig

logger = logging.getLogger(__name__)

# checked in order; the first key found wins
PROVIDERS: List[Dict[str, str]] = [
    {
        "name": "xAI",
        "env_var": "XAI_API_KEY",
        "base_url": "https://api.x.ai/v1",
        "model": "grok-4-fast",
    },
    {
        "name": "Anthropic",
        "env_var": "ANTHROPIC_API_KEY",
        "base_url": "https://api.anthropic.com/v1",
        "model": "claude-4-5-haiku",
    },
    {
        "name": "OpenAI",
        "env_var": "OPENAI_API_KEY",
        "base_url": "https://api.openai.com/v1",
        "model": "gpt-4o-mini",
    },
    {
        "name": "Together AI",
        "env_var": "TOGETHER_API_KEY",
        "base_url": "https://api.together.xyz/v1",
        "model": "meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo",
    },
    {
        "name": "Groq",
        "env_var": "GROQ_API_KEY",
        "base_url": "https://api.groq.com/openai/v1",
        "model": "llama-3.1-8b-instant",
    },
]


def detect_provider() -> Optional[ProviderConfig]:
    """
    Pick the first provider whose API key env var is set (and non-empty).
    Returns None when nothing is configured.
    """
    for p in PROVIDERS:
        api_key = os.environ.get(p["env_var"])
        if api_key:
            logger.debug("detected provider %s via %s", p["name"], p["env_var"])
            return ProviderConfig(
                provider=p["name"],
                base_url=p["base_url"],
                model=p["model"],
                api_key=api_key,
            )
    return None
