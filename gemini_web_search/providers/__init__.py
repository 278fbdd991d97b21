"""Registry of search providers selectable by name."""

from __future__ import annotations

from typing import Callable

from gemini_web_search.config import ServerSettings
from gemini_web_search.providers.base import SearchProvider
from gemini_web_search.providers.gemini import GeminiProvider
from gemini_web_search.services.exceptions import ProviderUnavailable

ProviderFactory = Callable[[ServerSettings], SearchProvider]

PROVIDERS: dict[str, ProviderFactory] = {
    "gemini": lambda settings: GeminiProvider.from_settings(
        settings.gemini, timeout_seconds=settings.provider.timeout_seconds
    ),
}


def get_provider(name: str, settings: ServerSettings) -> SearchProvider:
    factory = PROVIDERS.get(name)
    if factory is None:
        available = ", ".join(sorted(PROVIDERS))
        raise ProviderUnavailable(f"Unknown provider: {name}. Available: {available}")
    provider = factory(settings)
    if not provider.is_available():
        raise ProviderUnavailable(
            f'Provider "{name}" is not available (missing API key or not implemented)'
        )
    return provider


def list_providers(settings: ServerSettings) -> list[dict[str, object]]:
    return [
        {"name": name, "available": factory(settings).is_available()}
        for name, factory in PROVIDERS.items()
    ]


__all__ = ["PROVIDERS", "SearchProvider", "get_provider", "list_providers"]
