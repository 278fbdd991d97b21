"""Search provider capability."""

from __future__ import annotations

from abc import ABC, abstractmethod

from gemini_web_search.domain.models import SearchResult


class SearchProvider(ABC):
    """One backing search service.

    ``search`` receives an already-sanitized query and may raise any
    ``ProviderError`` subclass (or an arbitrary exception, which is reported
    as an unknown failure).
    """

    name: str = "base"
    display_name: str = "Search provider"

    def is_available(self) -> bool:
        return False

    @abstractmethod
    async def search(self, query: str, max_results: int) -> SearchResult:
        raise NotImplementedError


__all__ = ["SearchProvider"]
