"""Google Gemini provider for batched headline enrichment."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from ...config import LoggingConfig, ProviderConfig
from ...core.types import RawItem
from ...utils.logging import log_event, redact_text, truncate_text
from ..prompts import build_enrichment_prompt
from ..tracing import record_span_error, set_span_output, start_span
from .base import BatchAnalysis, EnrichmentProvider


logger = logging.getLogger("pulse_news.llm.gemini")

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)


class GeminiProvider(EnrichmentProvider):
    """Gemini-backed provider that analyses all headlines in one request."""

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        log_cfg: LoggingConfig | None = None,
        llm_logger: logging.Logger | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        if not api_key:
            raise ValueError("Missing Gemini API key")
        self.cfg = cfg
        self.api_key = api_key
        self.log_cfg = log_cfg or LoggingConfig()
        self.llm_logger = llm_logger
        self.client = client

    async def analyze_headlines(self, items: list[RawItem]) -> BatchAnalysis:
        prompt = build_enrichment_prompt(items)
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.cfg.temperature,
                "maxOutputTokens": self.cfg.max_output_tokens,
            },
        }
        content = ""
        with start_span(
            "gemini.analyze_headlines",
            kind="llm",
            input_value=prompt,
            attributes={
                "llm.model": self.cfg.model,
                "llm.provider": "gemini",
                "batch.size": len(items),
            },
        ) as span:
            try:
                data = await self._post(payload)
                content = _extract_text(data)
                set_span_output(span, content)
                analyses = parse_analysis_array(content)
            except httpx.HTTPError as exc:
                record_span_error(span, exc)
                error = _describe_http_error(exc)
                self._log_llm_response("provider_error", error, prompt)
                log_event(
                    logger,
                    f"AI analysis failed: {error}",
                    level=logging.WARNING,
                    event="llm_provider_error",
                    error=error,
                )
                return BatchAnalysis(status="provider_error", error=error)
            except (json.JSONDecodeError, ValueError) as exc:
                record_span_error(span, exc)
                self._log_llm_response("parse_error", content, prompt)
                log_event(
                    logger,
                    f"Failed to parse AI response: {exc}",
                    level=logging.WARNING,
                    event="llm_parse_error",
                    error=str(exc),
                    raw_response=truncate_text(content, 200),
                )
                return BatchAnalysis(status="parse_error", error=str(exc))

        self._log_llm_response("ok", content, prompt)
        log_event(
            logger,
            f"AI analyzed {len(analyses)} articles",
            event="llm_analysis_ok",
            requested=len(items),
            received=len(analyses),
        )
        return BatchAnalysis(status="ok", analyses=analyses)

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.cfg.base_url.rstrip('/')}/v1beta/models/{self.cfg.model}:generateContent"
        params = {"key": self.api_key}
        if self.client is not None:
            resp = await self.client.post(url, params=params, json=payload, timeout=self.cfg.timeout_seconds)
            resp.raise_for_status()
            return resp.json()
        async with httpx.AsyncClient(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = await client.post(url, params=params, json=payload)
            resp.raise_for_status()
            return resp.json()

    def _log_llm_response(self, status: str, content: str, prompt: str) -> None:
        if self.llm_logger is None:
            return
        redaction = self.log_cfg.llm_log_redaction
        fields: dict[str, Any] = {
            "event": "llm_enrichment_response",
            "status": status,
            "model": self.cfg.model,
            "raw_response": truncate_text(redact_text(content, redaction)),
        }
        if self.log_cfg.llm_log_detail == "prompt_response":
            fields["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
        log_event(self.llm_logger, "LLM response", **fields)


def _describe_http_error(exc: httpx.HTTPError) -> str:
    # The request URL carries the API key as a query parameter; keep it out of logs.
    if isinstance(exc, httpx.HTTPStatusError):
        return f"Gemini API error: {exc.response.status_code}"
    return f"{type(exc).__name__}"


def _extract_text(data: dict[str, Any]) -> str:
    """Return the text of the first candidate.

    Thought parts are skipped when the candidate also has regular text.
    """
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(parts, list):
        return ""
    texts = [p.get("text", "") for p in parts if isinstance(p, dict) and not p.get("thought")]
    if not any(texts):
        texts = [p.get("text", "") for p in parts if isinstance(p, dict)]
    return "".join(t for t in texts if isinstance(t, str))


def strip_code_fences(content: str) -> str:
    """Remove markdown code fences (```json ... ```) around a response."""
    return _FENCE_RE.sub("", content).strip()


def parse_analysis_array(content: str) -> list[Any]:
    """Decode the model output as a JSON array.

    Raises:
        json.JSONDecodeError: If no JSON can be decoded
        ValueError: If the decoded value is not an array
    """
    text = strip_code_fences(content or "")
    if not text:
        raise json.JSONDecodeError("Empty content", text, 0)
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("[")
        end = text.rfind("]")
        if start == -1 or end <= start:
            raise
        value = json.loads(text[start : end + 1])
    if not isinstance(value, list):
        raise ValueError(f"Expected a JSON array, got {type(value).__name__}")
    return value
