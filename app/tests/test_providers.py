from tinyagent.providers import detect_provider


def test_no_provider(monkeypatch):
    assert detect_provider() is None


def test_first_configured_provider_wins(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "g")
    monkeypatch.setenv("OPENAI_API_KEY", "o")
    p = detect_provider()
    assert p.provider == "OpenAI"
    assert p.api_key == "o"
    assert p.base_url == "https://api.openai.com/v1"
    assert p.model == "gpt-4o-mini"


def test_empty_values_are_skipped(monkeypatch):
    monkeypatch.setenv("XAI_API_KEY", "")
    monkeypatch.setenv("GROQ_API_KEY", "g")
    p = detect_provider()
    assert p.provider == "Groq"
    assert p.base_url == "https://api.groq.com/openai/v1"
