"""Provider factory and registry for enrichment backends."""

from __future__ import annotations

import logging

import httpx

from ...config import LoggingConfig, ProviderConfig
from .base import EnrichmentProvider
from .gemini import GeminiProvider


ProviderBuilder = type[EnrichmentProvider]

_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "gemini": GeminiProvider,
}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def resolve_provider(name: str) -> ProviderBuilder:
    """Look up a provider class by its configured name.

    Raises:
        ValueError: If no provider is registered under ``name``
    """
    builder = _PROVIDER_REGISTRY.get(name.lower().strip())
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {name}. Supported: {supported}")
    return builder


def create_provider(
    provider_cfg: ProviderConfig,
    api_key: str,
    log_cfg: LoggingConfig | None = None,
    llm_logger: logging.Logger | None = None,
    client: httpx.AsyncClient | None = None,
) -> EnrichmentProvider:
    """Build a provider instance from runtime config."""
    builder = resolve_provider(provider_cfg.name)
    return builder(provider_cfg, api_key, log_cfg, llm_logger, client)
