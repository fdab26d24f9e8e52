"""Article enrichment."""

from .enricher import Enricher, build_enricher, merge_analysis, synthesize_article

__all__ = ["Enricher", "build_enricher", "merge_analysis", "synthesize_article"]
