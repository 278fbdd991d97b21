"""Request pipeline behind the ``web_search`` tool.

Per request: admission -> sanitize -> injection screen -> cache -> provider
-> sanitize output -> cache store. Every exit except success yields an
error-tagged ``ToolResponse``; provider failures never propagate.

Admission runs before the cache lookup, so cache hits consume quota too.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable

from gemini_web_search.config import ServerSettings
from gemini_web_search.domain.models import SearchResult, ToolResponse
from gemini_web_search.logging import logger
from gemini_web_search.providers.base import SearchProvider
from gemini_web_search.services.cache import SearchCache
from gemini_web_search.services.errors import ErrorKind, describe_failure, error_message
from gemini_web_search.services.exceptions import ProviderTimeout
from gemini_web_search.services.rate_limit import RateLimiter
from gemini_web_search.services.sanitizer import ContentSanitizer

BEGIN_DELIMITER = "--- BEGIN UNTRUSTED WEB CONTENT ---"
END_DELIMITER = "--- END UNTRUSTED WEB CONTENT ---"


@dataclass(slots=True)
class SearchRuntime:
    """Mutable state shared by every request for the server's lifetime."""

    cache: SearchCache
    rate_limiter: RateLimiter

    @classmethod
    def from_settings(
        cls, settings: ServerSettings, clock: Callable[[], float] = time.monotonic
    ) -> "SearchRuntime":
        return cls(
            cache=SearchCache.from_settings(settings.cache, clock=clock),
            rate_limiter=RateLimiter.from_settings(settings.rate_limit, clock=clock),
        )

    def close(self) -> None:
        self.cache.clear()
        self.rate_limiter.reset()


def format_result(summary: str, result: SearchResult) -> str:
    sources_block = ""
    if result.sources:
        lines = [
            f"{index}. {source.title} - {source.url}"
            for index, source in enumerate(result.sources, start=1)
        ]
        sources_block = "\n\nSources:\n" + "\n".join(lines)
    return "\n".join([BEGIN_DELIMITER, "", summary, sources_block, "", END_DELIMITER])


class WebSearchPipeline:
    def __init__(
        self,
        provider: SearchProvider,
        runtime: SearchRuntime,
        sanitizer: ContentSanitizer,
        *,
        timeout_seconds: float = 15.0,
    ) -> None:
        self.provider = provider
        self.runtime = runtime
        self.sanitizer = sanitizer
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(
        cls,
        provider: SearchProvider,
        settings: ServerSettings,
        runtime: SearchRuntime | None = None,
    ) -> "WebSearchPipeline":
        return cls(
            provider,
            runtime or SearchRuntime.from_settings(settings),
            ContentSanitizer.from_settings(settings.sanitizer),
            timeout_seconds=settings.provider.timeout_seconds,
        )

    @property
    def cache(self) -> SearchCache:
        return self.runtime.cache

    def _reject(self, kind: ErrorKind) -> ToolResponse:
        return ToolResponse.error(error_message(kind, provider=self.provider.display_name))

    async def handle(self, query: str, max_results: int = 5) -> ToolResponse:
        limiter = self.runtime.rate_limiter
        if not limiter.check():
            logger.warning(
                "rate_limit_exceeded",
                pending=limiter.pending(),
                max_requests=limiter.max_requests,
                window_seconds=limiter.window_seconds,
            )
            return self._reject(ErrorKind.RATE_LIMITED)

        clean_query = self.sanitizer.sanitize_query(query)
        if not clean_query:
            return self._reject(ErrorKind.EMPTY_QUERY)

        if self.sanitizer.looks_like_injection(clean_query):
            logger.warning("injection_pattern_detected", query=clean_query[:100])
            return self._reject(ErrorKind.CONTENT_FILTERED)

        cached = self.cache.get(clean_query)
        if cached is not None:
            logger.debug("cache_hit", query=clean_query[:60])
            return cached

        logger.info(
            "web_search_called",
            query=clean_query[:100],
            max_results=max_results,
            provider=self.provider.name,
        )

        try:
            result = await self._search(clean_query, max_results)
        except Exception as exc:
            kind, message = describe_failure(exc, self.provider.display_name)
            logger.error("web_search_failed", error=str(exc) or repr(exc), kind=kind.value)
            return ToolResponse.error(message)

        clean_summary = self.sanitizer.sanitize_response(result.summary)
        response = ToolResponse(text=format_result(clean_summary, result))

        logger.info(
            "web_search_completed",
            query=clean_query[:60],
            response_length=len(clean_summary),
            source_count=len(result.sources),
        )

        self.cache.set(clean_query, response)
        return response

    async def _search(self, query: str, max_results: int) -> SearchResult:
        try:
            return await asyncio.wait_for(
                self.provider.search(query, max_results),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise ProviderTimeout(
                f"{self.provider.display_name} request timeout after {self.timeout_seconds}s"
            ) from exc


__all__ = [
    "BEGIN_DELIMITER",
    "END_DELIMITER",
    "SearchRuntime",
    "WebSearchPipeline",
    "format_result",
]
