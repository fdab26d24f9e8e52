"""
Langfuse tracing helpers.

The pipeline emits spans for the run, the fetch fan-out and the enrichment
call. Every helper is a no-op when tracing is disabled or the SDK is not
installed, and tracing failures never reach the pipeline.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import json
import os
from typing import Any, Iterator

from ..config import LangfuseConfig
from ..utils.logging import redact_text, truncate_text


@dataclass
class _TraceState:
    client: Any | None = None
    cfg: LangfuseConfig | None = None


_STATE = _TraceState()


def setup_langfuse(cfg: LangfuseConfig) -> None:
    """Initialize Langfuse tracing if enabled; keys fall back to LANGFUSE_* env vars."""
    _STATE.cfg = cfg
    _STATE.client = None
    if not cfg.enabled:
        return
    try:
        from langfuse import Langfuse  # type: ignore
    except ImportError:
        return

    _STATE.client = Langfuse(
        public_key=cfg.public_key or os.getenv("LANGFUSE_PUBLIC_KEY"),
        secret_key=cfg.secret_key or os.getenv("LANGFUSE_SECRET_KEY"),
        host=cfg.host or os.getenv("LANGFUSE_HOST"),
        environment=cfg.environment or os.getenv("LANGFUSE_ENVIRONMENT"),
        release=cfg.release or os.getenv("LANGFUSE_RELEASE"),
    )


@contextmanager
def start_span(
    name: str,
    kind: str,
    input_value: Any | None = None,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Any | None]:
    """Open a Langfuse span around a pipeline stage, yielding None when untraced."""
    client = _STATE.client
    if client is None:
        yield None
        return

    metadata = {"span.kind": kind}
    for key, value in (attributes or {}).items():
        if value is not None:
            metadata[key] = value if isinstance(value, (str, int, float, bool)) else str(value)

    try:
        cm = client.start_as_current_span(name=name, input=_payload(input_value), metadata=metadata)
        span = cm.__enter__()
    except Exception:  # noqa: BLE001
        yield None
        return

    try:
        yield span
    finally:
        try:
            cm.__exit__(None, None, None)
        except Exception:  # noqa: BLE001
            pass


def set_span_output(span: Any | None, output_value: Any) -> None:
    payload = _payload(output_value)
    if span is not None and payload is not None:
        _update(span, output=payload)


def record_span_error(span: Any | None, exc: Exception) -> None:
    if span is not None:
        _update(span, level="ERROR", status_message=str(exc))


def flush() -> None:
    """Send pending spans before the process exits."""
    if _STATE.client is None:
        return
    try:
        _STATE.client.flush()
    except Exception:  # noqa: BLE001
        return


def _payload(value: Any) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=True, default=str)
    cfg = _STATE.cfg
    if cfg is None:
        return text
    return truncate_text(redact_text(text, cfg.redaction), cfg.max_text_chars)


def _update(span: Any, **fields: Any) -> None:
    try:
        span.update(**fields)
    except Exception:  # noqa: BLE001
        return
