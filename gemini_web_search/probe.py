"""Call the configured search provider directly, bypassing the tool transport."""

from __future__ import annotations

import argparse
import asyncio
import sys

from gemini_web_search.config import get_settings
from gemini_web_search.logging import configure_logging
from gemini_web_search.providers import get_provider, list_providers
from gemini_web_search.services.exceptions import ServiceError


async def probe(query: str, max_results: int) -> int:
    settings = get_settings()
    try:
        provider = get_provider(settings.provider.name, settings)
    except ServiceError as exc:
        print(f"Provider unavailable: {exc}", file=sys.stderr)
        return 1

    print(f"Testing {provider.display_name} web search grounding")
    print(f"  Provider: {provider.name}")
    print(f"  Query: {query}")
    print()

    try:
        result = await provider.search(query, max_results)
    except Exception as exc:
        print(f"Search failed: {exc}", file=sys.stderr)
        return 1

    print("--- Response ---")
    print(result.summary)
    print()
    if result.sources:
        print("--- Sources ---")
        for index, source in enumerate(result.sources, start=1):
            print(f"{index}. {source.title} - {source.url}")
    else:
        print("(no grounding sources returned)")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("query", nargs="?", default="latest Python release")
    parser.add_argument("--max-results", type=int, default=5, choices=range(1, 11), metavar="N")
    parser.add_argument("--list-providers", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)

    if args.list_providers:
        for entry in list_providers(get_settings()):
            state = "available" if entry["available"] else "unavailable"
            print(f"{entry['name']}: {state}")
        return 0

    return asyncio.run(probe(args.query, args.max_results))


if __name__ == "__main__":
    raise SystemExit(main())
