from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ats_engine.core.config import get_scoring_value
from ats_engine.normalize.utils import (
    contains_term,
    heading_key,
    looks_like_heading,
    require_text,
    sentence_spans,
)
from ats_engine.schemas.keywords import KeywordSet

from . import vocabulary

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\.?[A-Za-z0-9](?:[A-Za-z0-9+#./&-]*[A-Za-z0-9+#])?")
_ACRONYM_RE = re.compile(r"^(?=(?:[^A-Z]*[A-Z]){2})[A-Z0-9/&]{3,8}s?$")
_SHORT_TERMS = frozenset({"ai", "ml", "qa", "ux", "ui", "bi"})
_TECH_SYMBOL_RE = re.compile(r"[A-Za-z][+#]|^\.[A-Za-z]|[a-z]\.[a-z]", re.IGNORECASE)
_MAX_NGRAM = 3

_STRONG_MARKERS: tuple[str, ...] = tuple(
    marker for marker in vocabulary.REQUIREMENT_MARKERS if marker not in {"certified", "certification"}
)


@dataclass(frozen=True)
class PhraseHit:
    key: str
    surface: str
    start: int
    end: int
    kind: str


def _term_kind(key: str) -> str | None:
    if key in vocabulary.TOOLS:
        return "tool"
    if key in vocabulary.TECH_SKILLS:
        return "tech"
    if key in vocabulary.CERTIFICATIONS:
        return "certification"
    if key in vocabulary.COMPOUND_SKILLS:
        return "compound"
    if key in vocabulary.SOFT_SKILLS:
        return "soft"
    return None


def _is_technical_token(token: str) -> bool:
    key = token.lower()
    if key in vocabulary.STOP_WORDS or not any(char.isalpha() for char in token):
        return False
    if key in _SHORT_TERMS:
        return True
    return bool(_ACRONYM_RE.match(token) or _TECH_SYMBOL_RE.search(token))


def scan_phrases(text: str, *, start: int = 0, end: int | None = None) -> list[PhraseHit]:
    """Vocabulary phrases (longest match first) plus technical-looking tokens in ``text[start:end]``."""
    end = len(text) if end is None else end
    tokens = [(m.group(0), m.start() + start, m.end() + start) for m in _TOKEN_RE.finditer(text[start:end])]
    hits: list[PhraseHit] = []
    index = 0
    while index < len(tokens):
        matched = False
        for size in range(min(_MAX_NGRAM, len(tokens) - index), 0, -1):
            window = tokens[index : index + size]
            gaps = (text[window[i][2] : window[i + 1][1]] for i in range(size - 1))
            if any(gap.strip() for gap in gaps):
                continue
            key = " ".join(token.lower() for token, _, _ in window)
            kind = _term_kind(key)
            if kind is None and size == 1 and _is_technical_token(window[0][0]):
                kind = "technical"
            if kind is None:
                continue
            surface = " ".join(text[window[0][1] : window[-1][2]].split())
            hits.append(PhraseHit(key=key, surface=surface, start=window[0][1], end=window[-1][2], kind=kind))
            index += size
            matched = True
            break
        if not matched:
            index += 1
    return hits


def _section_kind(key: str) -> tuple[bool, str | None]:
    """(is_known_section, heading_kind) for a heading key."""
    if key in vocabulary.REQUIREMENT_HEADINGS:
        return True, "required"
    if key in vocabulary.PREFERENCE_HEADINGS:
        return True, "preferred"
    if key in vocabulary.JOB_SECTION_HEADINGS:
        return True, None
    return False, None


def _inline_label(body: str) -> tuple[bool, str | None]:
    """Section kind of a ``Label: content`` line such as ``Requirements: Python, AWS``."""
    label, sep, rest = body.partition(":")
    if not sep or not rest.strip():
        return False, None
    return _section_kind(heading_key(label))


def _line_contexts(job_text: str) -> list[tuple[int, int, str | None, bool]]:
    """(start, end, heading_kind, is_heading) for every line."""
    contexts: list[tuple[int, int, str | None, bool]] = []
    heading_kind: str | None = None
    offset = 0
    for line in job_text.splitlines(keepends=True):
        body = line.rstrip("\r\n")
        is_heading = False
        known, kind = _section_kind(heading_key(body))
        if known:
            heading_kind, is_heading = kind, True
        else:
            labelled, kind = _inline_label(body)
            if labelled:
                heading_kind = kind
            elif looks_like_heading(body):
                heading_kind, is_heading = None, True
        contexts.append((offset, offset + len(body), heading_kind, is_heading))
        offset += len(line)
    return contexts


def _context_at(contexts: list[tuple[int, int, str | None, bool]], position: int) -> tuple[str | None, bool]:
    for line_start, line_end, heading_kind, is_heading in contexts:
        if line_start <= position <= line_end:
            return heading_kind, is_heading
    return None, False


def _is_critical_sentence(sentence: str, heading_kind: str | None) -> bool:
    lowered = sentence.lower()
    if any(contains_term(lowered, marker) for marker in _STRONG_MARKERS):
        return True
    if any(hit.kind == "certification" for hit in scan_phrases(sentence)):
        return True
    if heading_kind == "required":
        return not any(contains_term(lowered, marker) for marker in vocabulary.PREFERENCE_MARKERS)
    return False


def extract_keywords(job_text: str) -> KeywordSet:
    job_text = require_text(job_text, "job_text")
    if not job_text.strip():
        return KeywordSet()

    max_total = int(get_scoring_value("keywords.max_total", 40))
    contexts = _line_contexts(job_text)
    order: list[str] = []
    surfaces: dict[str, str] = {}
    critical_keys: set[str] = set()

    for start, end in sentence_spans(job_text):
        heading_kind, is_heading = _context_at(contexts, start)
        if is_heading:
            continue
        sentence = job_text[start:end]
        if sentence.isupper():
            continue
        critical = _is_critical_sentence(sentence, heading_kind)
        for hit in scan_phrases(job_text, start=start, end=end):
            if hit.key not in surfaces:
                surfaces[hit.key] = hit.surface
                order.append(hit.key)
            if critical:
                critical_keys.add(hit.key)

    kept = order[:max_total]
    critical = [surfaces[key] for key in kept if key in critical_keys]
    optional = [surfaces[key] for key in kept if key not in critical_keys]
    logger.debug(
        "keywords_extracted critical=%s optional=%s dropped=%s",
        len(critical),
        len(optional),
        len(order) - len(kept),
    )
    return KeywordSet(critical=critical, optional=optional, all=[surfaces[key] for key in kept])
