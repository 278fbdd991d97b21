"""Map provider failures onto the stable user-facing error taxonomy."""

from __future__ import annotations

import asyncio
import re
from enum import Enum

from gemini_web_search.services.exceptions import (
    ProviderAuthError,
    ProviderRateLimited,
    ProviderSafetyBlocked,
    ProviderTimeout,
)

UNKNOWN_MESSAGE_LIMIT = 200


class ErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    EMPTY_QUERY = "empty_query"
    CONTENT_FILTERED = "content_filtered"
    AUTH_FAILURE = "auth_failure"
    PROVIDER_RATE_LIMITED = "provider_rate_limited"
    TIMEOUT = "timeout"
    SAFETY_BLOCKED = "safety_blocked"
    UNKNOWN = "unknown"


# Checked in order; the first match wins.
_MESSAGE_RULES: tuple[tuple[ErrorKind, re.Pattern[str]], ...] = (
    (ErrorKind.AUTH_FAILURE, re.compile(r"API_KEY|API key|UNAUTHENTICATED|PERMISSION_DENIED|\b40[13]\b", re.IGNORECASE)),
    (ErrorKind.PROVIDER_RATE_LIMITED, re.compile(r"\b429\b|quota|rate[ _-]?limit|RESOURCE_EXHAUSTED", re.IGNORECASE)),
    (ErrorKind.TIMEOUT, re.compile(r"timeout|timed out|aborted|DEADLINE", re.IGNORECASE)),
    (ErrorKind.SAFETY_BLOCKED, re.compile(r"SAFETY|blocked", re.IGNORECASE)),
)

_TYPE_RULES: tuple[tuple[type[BaseException], ErrorKind], ...] = (
    (ProviderAuthError, ErrorKind.AUTH_FAILURE),
    (ProviderRateLimited, ErrorKind.PROVIDER_RATE_LIMITED),
    (ProviderTimeout, ErrorKind.TIMEOUT),
    (asyncio.TimeoutError, ErrorKind.TIMEOUT),
    (ProviderSafetyBlocked, ErrorKind.SAFETY_BLOCKED),
)

_FIXED_MESSAGES = {
    ErrorKind.RATE_LIMITED: "rate limit exceeded, try again later",
    ErrorKind.EMPTY_QUERY: "query was empty after sanitization",
    ErrorKind.CONTENT_FILTERED: "query rejected by content filter",
    ErrorKind.AUTH_FAILURE: "authentication failed",
    ErrorKind.PROVIDER_RATE_LIMITED: "{provider} rate limit, try again later",
    ErrorKind.TIMEOUT: "request timed out",
    ErrorKind.SAFETY_BLOCKED: "query blocked by {provider} safety filters",
}


def failure_text(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def classify_failure(exc: BaseException) -> ErrorKind:
    for exc_type, kind in _TYPE_RULES:
        if isinstance(exc, exc_type):
            return kind
    message = failure_text(exc)
    for kind, pattern in _MESSAGE_RULES:
        if pattern.search(message):
            return kind
    return ErrorKind.UNKNOWN


def error_message(kind: ErrorKind, *, provider: str = "provider", detail: str = "") -> str:
    if kind is ErrorKind.UNKNOWN:
        return detail[:UNKNOWN_MESSAGE_LIMIT]
    return _FIXED_MESSAGES[kind].format(provider=provider)


def describe_failure(exc: BaseException, provider: str) -> tuple[ErrorKind, str]:
    kind = classify_failure(exc)
    return kind, error_message(kind, provider=provider, detail=failure_text(exc))


__all__ = [
    "ErrorKind",
    "UNKNOWN_MESSAGE_LIMIT",
    "classify_failure",
    "describe_failure",
    "error_message",
    "failure_text",
]
