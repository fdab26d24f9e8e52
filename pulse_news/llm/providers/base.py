"""Abstract interface for batched headline enrichment."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ...core.types import RawItem


@dataclass
class BatchAnalysis:
    """Outcome of one batched enrichment request.

    Attributes:
        status: "ok", "provider_error" or "parse_error"
        analyses: Decoded per-headline objects, positionally aligned with the
            input; empty unless status is "ok"
        error: Underlying cause when status is not "ok"
    """
    status: str = "ok"
    analyses: list[Any] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class EnrichmentProvider(ABC):
    """Provider interface for analysing a batch of headlines in one call."""

    @abstractmethod
    async def analyze_headlines(self, items: list[RawItem]) -> BatchAnalysis:
        """Return per-headline analysis objects for ``items``.

        Implementations must not raise for transport or decode failures;
        they report them through ``BatchAnalysis.status``.
        """
        raise NotImplementedError
