"""Tests for Langfuse tracing setup and span helpers."""

from __future__ import annotations

from contextlib import contextmanager
import sys
import types

import pytest

from pulse_news.config import LangfuseConfig
from pulse_news.llm import tracing


class _DummySpan:
    def __init__(self):
        self.updates: list[dict] = []

    def update(self, **kwargs):
        self.updates.append(kwargs)


class _DummyLangfuse:
    instances: list["_DummyLangfuse"] = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.spans: list[tuple[str, str | None, _DummySpan]] = []
        self.flushed = False
        _DummyLangfuse.instances.append(self)

    @contextmanager
    def start_as_current_span(self, name, input=None, metadata=None):
        span = _DummySpan()
        self.spans.append((name, input, span))
        yield span

    def flush(self):
        self.flushed = True


@pytest.fixture(autouse=True)
def _reset_tracer():
    yield
    tracing.setup_langfuse(LangfuseConfig())


@pytest.fixture
def fake_langfuse(monkeypatch):
    _DummyLangfuse.instances = []
    monkeypatch.setitem(sys.modules, "langfuse", types.SimpleNamespace(Langfuse=_DummyLangfuse))
    return _DummyLangfuse


def test_setup_langfuse_reads_keys_from_env(monkeypatch, fake_langfuse):
    monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk-test")
    monkeypatch.setenv("LANGFUSE_SECRET_KEY", "sk-test")
    monkeypatch.setenv("LANGFUSE_HOST", "https://us.cloud.langfuse.com")

    tracing.setup_langfuse(LangfuseConfig(enabled=True, environment="ci"))

    kwargs = fake_langfuse.instances[0].kwargs
    assert kwargs["public_key"] == "pk-test"
    assert kwargs["secret_key"] == "sk-test"
    assert kwargs["host"] == "https://us.cloud.langfuse.com"
    assert kwargs["environment"] == "ci"


def test_disabled_tracing_yields_no_span():
    tracing.setup_langfuse(LangfuseConfig(enabled=False))

    with tracing.start_span("pulse_news.run", kind="chain") as span:
        assert span is None
    tracing.flush()


def test_span_input_is_redacted_and_output_recorded(fake_langfuse):
    tracing.setup_langfuse(LangfuseConfig(enabled=True, redaction="redact_urls"))

    with tracing.start_span("gemini.analyze_headlines", kind="llm", input_value="see https://x.example/1") as span:
        tracing.set_span_output(span, {"articles": 3})
        tracing.record_span_error(span, RuntimeError("bad"))
    tracing.flush()

    tracer = fake_langfuse.instances[0]
    name, span_input, span = tracer.spans[0]
    assert name == "gemini.analyze_headlines"
    assert span_input == "see [REDACTED_URL]"
    assert span.updates[0] == {"output": '{"articles": 3}'}
    assert span.updates[1] == {"level": "ERROR", "status_message": "bad"}
    assert tracer.flushed
