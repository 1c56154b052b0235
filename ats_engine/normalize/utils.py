from __future__ import annotations

import re
from functools import lru_cache

from ats_engine.core.errors import InvalidInputError

_BULLET_CHARS = "•◦▪▫●○■□◆◇▶►-–—*·"
_BULLET_PATTERN = re.compile(rf"^\s*(?:[{re.escape(_BULLET_CHARS)}]|(?:\d+[\.\)]))\s+")
_SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?;])\s+(?=[A-Z0-9(\"'])")
_HEADING_TRAILER_RE = re.compile(r"[:\-–—]+\s*$")
_SMART_QUOTES = str.maketrans({"‘": "'", "’": "'", "“": '"', "”": '"', "–": "-", "—": "-"})


def require_text(value: object, field: str) -> str:
    if value is None:
        raise InvalidInputError(f"'{field}' is required.", field=field)
    if not isinstance(value, str):
        raise InvalidInputError(
            f"'{field}' must be a string, got {type(value).__name__}.",
            field=field,
        )
    return value


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").translate(_SMART_QUOTES).lower()).strip()


def is_bullet_like(line: str) -> bool:
    return bool(_BULLET_PATTERN.match(line))


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PATTERN.sub("", line).strip()


def heading_key(line: str) -> str:
    """Lowercased line without bullets or trailing colon, for heading lookups."""
    stripped = strip_bullet_prefix(normalize_line(line))
    return _HEADING_TRAILER_RE.sub("", stripped).strip().lower()


def looks_like_heading(line: str, *, max_words: int = 5) -> bool:
    stripped = normalize_line(line)
    if not stripped or is_bullet_like(stripped):
        return False
    words = stripped.rstrip(":").split()
    if not words or len(words) > max_words:
        return False
    if stripped.endswith(":"):
        return True
    return stripped.isupper() and 5 <= len(stripped) <= 40


def sentence_spans(text: str) -> list[tuple[int, int]]:
    """Character spans of sentences; every line break also ends a sentence."""
    spans: list[tuple[int, int]] = []
    offset = 0
    for line in text.splitlines(keepends=True):
        body = line.rstrip("\r\n")
        cursor = 0
        for match in _SENTENCE_BREAK_RE.finditer(body):
            _append_span(spans, body, offset, cursor, match.start())
            cursor = match.end()
        _append_span(spans, body, offset, cursor, len(body))
        offset += len(line)
    return spans


def _append_span(spans: list[tuple[int, int]], body: str, offset: int, start: int, end: int) -> None:
    chunk = body[start:end]
    if not chunk.strip():
        return
    lead = len(chunk) - len(chunk.lstrip())
    trail = len(chunk) - len(chunk.rstrip())
    spans.append((offset + start + lead, offset + end - trail))


@lru_cache(maxsize=2048)
def term_pattern(term: str) -> re.Pattern[str]:
    """Case-insensitive pattern that matches ``term`` only as a whole token run."""
    escaped = re.escape(term.strip().lower())
    escaped = escaped.replace(r"\ ", r"\s+")
    return re.compile(rf"(?<![a-z0-9]){escaped}(?![a-z0-9])", re.IGNORECASE)


def contains_term(text: str, term: str) -> bool:
    if not term.strip():
        return False
    return bool(term_pattern(term).search(text))
