"""Gemini-grounded web search exposed as a single tool."""

__version__ = "0.1.0"
