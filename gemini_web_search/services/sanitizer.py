"""Input/output sanitization for untrusted search traffic.

Queries are cleaned before they reach the provider; provider text is cleaned
before it reaches the calling agent. Injection detection is a best-effort
phrase heuristic: it will miss rephrased or obfuscated attempts and must not
be treated as a security boundary. Extend the pattern lists through
configuration rather than editing the defaults.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from gemini_web_search.config import SanitizerSettings

DEFAULT_INJECTION_PATTERNS: tuple[str, ...] = (
    r"ignore previous",
    r"ignore above",
    r"disregard",
    r"you are now",
    r"new instructions",
    r"system prompt",
    r"execute",
    r"run command",
    r"sudo",
    r"bash -c",
)

DEFAULT_RESPONSE_PATTERNS: tuple[str, ...] = (
    r"IMPORTANT SYSTEM NOTE",
    r"INSTRUCTION FOR AGENT",
    r"EXECUTE COMMAND",
)

REDACTION_MARKER = "[content removed]"
TRUNCATION_MARKER = "\n[truncated]"

# C0 controls except \t \n \r, plus DEL.
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]*>")
_SCRIPT_RE = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
# Stands in for removed markup so a phrase glued to the preceding word
# ("Safe<script>...</script>IMPORTANT") still starts on a word boundary.
_MARKUP_GAP = "\x00"


def _phrase_regex(patterns: Iterable[str], suffix: str = r"\b") -> re.Pattern[str]:
    alternation = "|".join(f"(?:{pattern})" for pattern in patterns)
    return re.compile(rf"\b(?:{alternation}){suffix}", re.IGNORECASE)


class ContentSanitizer:
    def __init__(
        self,
        *,
        max_query_length: int = 500,
        max_response_length: int = 4000,
        redaction_context_chars: int = 200,
        injection_patterns: Sequence[str] = DEFAULT_INJECTION_PATTERNS,
        response_patterns: Sequence[str] = DEFAULT_RESPONSE_PATTERNS,
    ) -> None:
        if not injection_patterns or not response_patterns:
            raise ValueError("pattern lists must not be empty")
        self.max_query_length = max_query_length
        self.max_response_length = max_response_length
        self._injection_re = _phrase_regex(injection_patterns)
        self._response_re = _phrase_regex(
            response_patterns, suffix=rf"[:\s].{{0,{redaction_context_chars}}}"
        )

    @classmethod
    def from_settings(cls, settings: SanitizerSettings) -> "ContentSanitizer":
        return cls(
            max_query_length=settings.max_query_length,
            max_response_length=settings.max_response_length,
            redaction_context_chars=settings.redaction_context_chars,
            injection_patterns=(*DEFAULT_INJECTION_PATTERNS, *settings.extra_injection_patterns),
            response_patterns=(*DEFAULT_RESPONSE_PATTERNS, *settings.extra_response_patterns),
        )

    def sanitize_query(self, raw: str) -> str:
        """Return a cleaned query; an empty string means nothing survived."""

        query = raw.strip()
        query = _CONTROL_CHARS_RE.sub("", query)
        query = _WHITESPACE_RE.sub(" ", query)
        query = _TAG_RE.sub("", query)
        # Tag removal can leave padding behind: "<b> x </b>" -> " x ".
        query = _WHITESPACE_RE.sub(" ", query).strip()
        if len(query) > self.max_query_length:
            query = query[: self.max_query_length]
        return query

    def sanitize_response(self, text: str) -> str:
        cleaned = text.replace(_MARKUP_GAP, "")
        cleaned = _SCRIPT_RE.sub(_MARKUP_GAP, cleaned)
        cleaned = _TAG_RE.sub(_MARKUP_GAP, cleaned)
        cleaned = self._response_re.sub(REDACTION_MARKER, cleaned)
        # Second pass catches phrases split by tags ("<b>IMPORTANT</b> SYSTEM NOTE").
        cleaned = cleaned.replace(_MARKUP_GAP, "")
        cleaned = self._response_re.sub(REDACTION_MARKER, cleaned)
        if len(cleaned) > self.max_response_length:
            cleaned = cleaned[: self.max_response_length] + TRUNCATION_MARKER
        return cleaned

    def looks_like_injection(self, query: str) -> bool:
        return self._injection_re.search(query) is not None


__all__ = [
    "ContentSanitizer",
    "DEFAULT_INJECTION_PATTERNS",
    "DEFAULT_RESPONSE_PATTERNS",
    "REDACTION_MARKER",
    "TRUNCATION_MARKER",
]
