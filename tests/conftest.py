import pytest


@pytest.fixture(autouse=True)
def _no_ambient_api_key(monkeypatch):
    """Keep a developer's GEMINI_API_KEY from switching tests into AI mode."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
