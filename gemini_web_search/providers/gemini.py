"""Gemini search provider using Google Search grounding."""

from __future__ import annotations

import os
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from gemini_web_search.config import GeminiSettings
from gemini_web_search.domain.models import SearchResult, SearchSource
from gemini_web_search.providers.base import SearchProvider
from gemini_web_search.services.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimited,
    ProviderSafetyBlocked,
    ProviderTimeout,
)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT_SECONDS = 15.0

_SAFETY_REASONS = {"SAFETY", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}


def build_prompt(query: str, max_results: int) -> str:
    return "\n".join(
        [
            f"Search the web for: {query}",
            "",
            "Respond with:",
            "1. A 1-paragraph factual summary grounded in search results",
            f"2. A numbered list of up to {max_results} sources (title and URL)",
            "",
            "Only include claims directly supported by sources.",
        ]
    )


def _enum_name(value: Any) -> str | None:
    if value is None:
        return None
    return getattr(value, "name", None) or str(value)


def translate_api_error(exc: Any) -> ProviderError:
    """Convert an SDK ``APIError`` (code/status/message) to a provider error."""

    code = getattr(exc, "code", None)
    status = (getattr(exc, "status", None) or "").upper()
    message = getattr(exc, "message", None) or str(exc)
    label = " ".join(str(part) for part in (code, status) if part)
    text = f"Gemini API error {label}: {message}"

    if code in (401, 403) or status in {"UNAUTHENTICATED", "PERMISSION_DENIED"}:
        return ProviderAuthError(text)
    if code == 429 or status == "RESOURCE_EXHAUSTED":
        return ProviderRateLimited(text)
    if code == 504 or status == "DEADLINE_EXCEEDED":
        return ProviderTimeout(text)
    return ProviderError(text)


def extract_sources(response: Any, max_results: int) -> list[SearchSource]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources: list[SearchSource] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        if not uri:
            continue
        sources.append(SearchSource(title=getattr(web, "title", None) or "Untitled", url=uri))
        if len(sources) >= max_results:
            break
    return sources


def _check_blocked(response: Any) -> None:
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = _enum_name(getattr(feedback, "block_reason", None))
    if block_reason and block_reason != "BLOCKED_REASON_UNSPECIFIED":
        raise ProviderSafetyBlocked(f"Prompt blocked by Gemini: {block_reason}")

    candidates = getattr(response, "candidates", None) or []
    if candidates:
        finish_reason = _enum_name(getattr(candidates[0], "finish_reason", None))
        if finish_reason in _SAFETY_REASONS:
            raise ProviderSafetyBlocked(f"Response blocked by Gemini: {finish_reason}")


class GeminiProvider(SearchProvider):
    name = "gemini"
    display_name = "Gemini"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key or os.getenv("GEMINI_API_KEY")
        self.model = model or os.getenv("GEMINI_MODEL") or DEFAULT_MODEL
        self.timeout_seconds = timeout_seconds
        if client is None and self._api_key:
            client = genai.Client(
                api_key=self._api_key,
                http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
            )
        self._client = client

    @classmethod
    def from_settings(cls, settings: GeminiSettings, timeout_seconds: float) -> "GeminiProvider":
        api_key = settings.api_key.get_secret_value() if settings.api_key else None
        return cls(api_key=api_key, model=settings.model, timeout_seconds=timeout_seconds)

    def is_available(self) -> bool:
        return self._client is not None

    async def search(self, query: str, max_results: int = 5) -> SearchResult:
        if self._client is None:
            raise ProviderAuthError("Gemini API key not configured")

        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=build_prompt(query, max_results),
                config=config,
            )
        except genai_errors.APIError as exc:
            raise translate_api_error(exc) from exc
        except httpx.TimeoutException as exc:
            raise ProviderTimeout(f"Gemini request timeout: {exc}") from exc
        except httpx.RequestError as exc:
            raise ProviderError(f"Gemini request failed: {exc}") from exc

        _check_blocked(response)
        return SearchResult(
            summary=getattr(response, "text", None) or "",
            sources=extract_sources(response, max_results),
        )


__all__ = [
    "DEFAULT_MODEL",
    "GeminiProvider",
    "build_prompt",
    "extract_sources",
    "translate_api_error",
]
