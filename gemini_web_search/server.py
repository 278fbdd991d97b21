"""FastMCP server exposing the ``web_search`` tool."""

from typing import Annotated

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from gemini_web_search.services.pipeline import WebSearchPipeline

TOOL_NAME = "web_search"
MAX_QUERY_CHARS = 500
MAX_RESULTS_LIMIT = 10
DEFAULT_MAX_RESULTS = 5

TOOL_DESCRIPTION = (
    "Search the web using Gemini with Google Search grounding. Returns a summary "
    "and source URLs. Use only when the user explicitly requests web/internet information."
)


def build_server(pipeline: WebSearchPipeline, name: str = "gemini-web-search") -> FastMCP:
    """Create a server whose single tool delegates to ``pipeline``.

    Argument bounds are enforced by the tool schema; a call that violates
    them never reaches the pipeline. Error responses are raised as
    ``ToolError`` so the transport marks the result with ``isError``.
    """

    mcp = FastMCP(name)

    @mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
    async def web_search(
        query: Annotated[
            str,
            Field(min_length=1, max_length=MAX_QUERY_CHARS, description="Search query"),
        ],
        max_results: Annotated[
            int,
            Field(ge=1, le=MAX_RESULTS_LIMIT, description="Maximum number of sources to return"),
        ] = DEFAULT_MAX_RESULTS,
    ) -> str:
        response = await pipeline.handle(query, max_results)
        if response.is_error:
            raise ToolError(response.text)
        return response.text

    return mcp


__all__ = ["TOOL_NAME", "TOOL_DESCRIPTION", "build_server"]
