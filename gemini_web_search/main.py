"""Application entrypoint: stdio tool server."""

from __future__ import annotations

import asyncio

from pydantic import ValidationError

from gemini_web_search.config import ServerSettings, get_settings
from gemini_web_search.logging import configure_logging, logger
from gemini_web_search.providers import get_provider
from gemini_web_search.server import build_server
from gemini_web_search.services.exceptions import ServiceError
from gemini_web_search.services.pipeline import SearchRuntime, WebSearchPipeline


def load_settings() -> ServerSettings:
    try:
        return get_settings()
    except ValidationError as exc:
        configure_logging()
        logger.error("settings_invalid", error=str(exc))
        raise SystemExit(1) from exc


def build_pipeline(settings: ServerSettings) -> WebSearchPipeline:
    """Build provider and runtime state; exit the process if the provider is unusable."""

    try:
        provider = get_provider(settings.provider.name, settings)
    except ServiceError as exc:
        logger.error(
            "provider_initialization_failed",
            provider=settings.provider.name,
            error=str(exc),
        )
        raise SystemExit(1) from exc

    return WebSearchPipeline.from_settings(provider, settings, SearchRuntime.from_settings(settings))


async def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    pipeline = build_pipeline(settings)
    mcp = build_server(pipeline, name=settings.server_name)

    logger.info(
        "server_starting",
        server=settings.server_name,
        provider=pipeline.provider.name,
        cache_enabled=settings.cache.enabled,
    )
    try:
        await mcp.run_async(transport="stdio")
    finally:
        pipeline.runtime.close()
        logger.info("server_stopped", server=settings.server_name)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
