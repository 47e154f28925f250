# tests/conftest.py
from __future__ import annotations
import pytest

from fakes import FakeTransport


@pytest.fixture
def fake_transport():
    def _make(*responses):
        return FakeTransport(list(responses))
    return _make


@pytest.fixture(autouse=True)
def _no_provider_env(monkeypatch):
    # keep real provider keys out of unit tests
    for var in ("OPENAI_API_KEY", "XAI_API_KEY", "ANTHROPIC_API_KEY",
                "TOGETHER_API_KEY", "GROQ_API_KEY"):
        monkeypatch.delenv(var, raising=False)
