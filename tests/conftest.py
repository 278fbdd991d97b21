"""Shared pytest fixtures for pipeline and service tests."""

from __future__ import annotations

import pytest

from gemini_web_search.config import ServerSettings
from gemini_web_search.domain.models import SearchResult, SearchSource
from gemini_web_search.providers.base import SearchProvider


class ManualClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubProvider(SearchProvider):
    name = "stub"
    display_name = "Gemini"

    def __init__(self, result: SearchResult | None = None, error: Exception | None = None) -> None:
        self.result = result or SearchResult(
            summary="Result summary",
            sources=[SearchSource(title="Example", url="https://example.com")],
        )
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def is_available(self) -> bool:
        return True

    async def search(self, query: str, max_results: int) -> SearchResult:
        self.calls.append((query, max_results))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def settings(monkeypatch) -> ServerSettings:
    for key in ("GEMINI_API_KEY", "GEMINI_MODEL"):
        monkeypatch.delenv(key, raising=False)
    return ServerSettings(_env_file=None)
