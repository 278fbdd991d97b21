"""Pydantic models shared across the provider, pipeline and server layers."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchSource(BaseModel):
    title: str
    url: str


class SearchResult(BaseModel):
    summary: str
    sources: list[SearchSource] = Field(default_factory=list)


class ToolResponse(BaseModel):
    """Outcome of one tool invocation.

    ``is_error`` is the only tag callers need to tell failures from results.
    """

    text: str
    is_error: bool = False

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        return cls(text=f"[web_search error: {message}]", is_error=True)


__all__ = ["SearchSource", "SearchResult", "ToolResponse"]
