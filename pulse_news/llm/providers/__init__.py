"""Enrichment provider implementations."""

from .base import BatchAnalysis, EnrichmentProvider
from .factory import available_providers, create_provider, resolve_provider
from .gemini import GeminiProvider

__all__ = [
    "BatchAnalysis",
    "EnrichmentProvider",
    "GeminiProvider",
    "available_providers",
    "create_provider",
    "resolve_provider",
]
