"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: Generative text provider settings
- FetchConfig: Feed fetching settings
- AggregateConfig: Working set size
- StreamConfig: Per-mode stream caps
- OutputConfig: Batch artifact location
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


@dataclass
class ProviderConfig:
    """Configuration for the enrichment provider.

    Attributes:
        name: Provider name ("gemini" currently supported)
        model: Model identifier
        api_key_env: Environment variable name containing the API key
        base_url: Base URL for the provider API
        api_key: Optional inline API key (overrides env var)
        trust_env: Whether to respect system proxy settings for API requests
        timeout_seconds: Timeout for the single batched request
        temperature: Sampling temperature sent with the request
        max_output_tokens: Output token ceiling sent with the request
    """

    name: str = "gemini"
    model: str = "gemini-2.5-flash"
    api_key_env: str = "GEMINI_API_KEY"
    base_url: str = "https://generativelanguage.googleapis.com"
    api_key: str | None = None
    trust_env: bool = True
    timeout_seconds: float = 60.0
    temperature: float = 0.3
    max_output_tokens: int = 4000


@dataclass
class FetchConfig:
    """Configuration for feed fetching.

    Attributes:
        timeout_seconds: Per-request timeout
        user_agent: HTTP User-Agent header string
        trust_env: Whether to respect system proxy settings
        items_per_feed: Maximum item blocks read from a single feed body
        deadline_seconds: Optional run-wide deadline for the whole fan-out
        cache_ttl_seconds: Response cache window for the on-demand form
    """

    timeout_seconds: float = 10.0
    user_agent: str = "PulseNewsBot/1.0"
    trust_env: bool = True
    items_per_feed: int = 5
    deadline_seconds: float | None = None
    cache_ttl_seconds: float = 3600.0


@dataclass
class AggregateConfig:
    """Configuration for the aggregation stage.

    Attributes:
        max_items: Size of the working set handed to enrichment
    """

    max_items: int = 30


@dataclass
class StreamLimits:
    """Per-stream article caps."""

    tech: int = 8
    world: int = 8
    long_read: int = 5


@dataclass
class StreamConfig:
    """Stream caps for the batch artifact and the live payload."""

    batch: StreamLimits = field(default_factory=StreamLimits)
    live: StreamLimits = field(default_factory=lambda: StreamLimits(tech=10, world=10, long_read=5))


@dataclass
class OutputConfig:
    """Configuration for the batch artifact.

    Attributes:
        artifact_path: Generated data module overwritten on every batch run
    """

    artifact_path: str = "src/app/pulse/news/data.ts"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the main log file
        log_dir: Directory for log files
        llm_log_enabled: Whether to enable separate LLM interaction logging
        llm_log_detail: LLM log detail level ("response_only", "prompt_response")
        llm_log_redaction: Redaction mode for LLM logs ("none", "redact_content", "redact_urls")
        llm_log_file: Name of the LLM log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "news.jsonl"
    log_dir: str = "logs"
    llm_log_enabled: bool = False
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (optional)
        secret_key: Langfuse secret key (optional)
        host: Langfuse host URL (optional)
        environment: Langfuse environment label (optional)
        release: Langfuse release identifier (optional)
        redaction: Redaction mode for prompt/response payloads
        max_text_chars: Maximum characters for prompt/response payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    environment: str | None = None
    release: str | None = None
    redaction: str = "redact_urls"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections.

    ``sources`` stays empty unless the config file overrides the built-in
    feed catalog.
    """

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    aggregate: AggregateConfig = field(default_factory=AggregateConfig)
    streams: StreamConfig = field(default_factory=StreamConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)
    sources: list[dict[str, str]] = field(default_factory=list)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config file {path}: expected a mapping at top level")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if key == "streams" and isinstance(value, dict):
            for mode, limits in value.items():
                if mode in data["streams"] and isinstance(limits, dict):
                    data["streams"][mode].update(limits)
        elif isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    streams = data["streams"]
    return AppConfig(
        provider=ProviderConfig(**data["provider"]),
        fetch=FetchConfig(**data["fetch"]),
        aggregate=AggregateConfig(**data["aggregate"]),
        streams=StreamConfig(
            batch=StreamLimits(**streams["batch"]),
            live=StreamLimits(**streams["live"]),
        ),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
        langfuse=LangfuseConfig(**data.get("langfuse", {})),
        sources=list(data.get("sources") or []),
    )


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable.

    Returns None when neither is set; callers treat that as the
    no-credential mode rather than an error.
    """
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env) or None
