"""Recruiter search visibility.

Estimates how a resume fares in a manual Boolean search built from a job
posting. Four factors are scored independently and combined with the
weights in ``scoring.yaml`` (scaled to sum to 1.0):

- keyword match: required keywords present, with a small bonus for preferred ones
- title alignment: the posting's job title (or a known synonym) on the resume
- skills coverage: named tools and technologies from the posting
- industry terms: domain vocabulary for the posting's detected industry

Factors with nothing to measure (no title in the posting, no industry
detected) get a neutral score instead of a penalty.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from difflib import SequenceMatcher
from typing import Any

from ats_engine.core.config import get_scoring_value
from ats_engine.normalize.utils import contains_term, normalize_text, require_text
from ats_engine.schemas.keywords import KeywordSet
from ats_engine.schemas.recruiter import FactorScore, RecruiterSearchBreakdown, RecruiterSearchResult
from ats_engine.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from . import vocabulary
from .coverage import coerce_keywords, find_keyword
from .keywords import scan_phrases

logger = logging.getLogger(__name__)

_FACTOR_ORDER: tuple[str, ...] = ("keyword_match", "title_alignment", "skills_coverage", "industry_terms")
_DEFAULT_WEIGHTS: dict[str, float] = {
    "keyword_match": 0.35,
    "title_alignment": 0.25,
    "skills_coverage": 0.25,
    "industry_terms": 0.15,
}

_TITLE_LINES = 3
_TITLE_PREFIX_RE = re.compile(r"^(?:job\s+title|position|role|title)\s*[:\-]\s*", re.IGNORECASE)
_GENERIC_TITLE_RE = re.compile(
    r"((?:[a-z][a-z/+#.-]*\s+){0,3}?"
    r"(?:engineer|developer|manager|designer|analyst|specialist|scientist|consultant|"
    r"administrator|coordinator|architect|representative|lead|director))\b"
)
_RESUME_TITLE_MAX_WORDS = 8
_WORD_RE = re.compile(r"[a-z0-9+#.]+")


def _weights() -> dict[str, float]:
    """Configured factor weights scaled to sum to 1.0."""
    raw = {
        factor: float(get_scoring_value(f"recruiter_search.weights.{factor}", _DEFAULT_WEIGHTS[factor]))
        for factor in _FACTOR_ORDER
    }
    if any(value < 0 for value in raw.values()):
        raise RuntimeError("recruiter_search weights must not be negative.")
    total = sum(raw.values())
    if total <= 0:
        raise RuntimeError("recruiter_search weights must sum to a positive value.")
    return {factor: value / total for factor, value in raw.items()}


def _weight(factor: str) -> float:
    return _weights()[factor]


def _neutral_score() -> int:
    return int(get_scoring_value("recruiter_search.neutral_score", 50))


def _percent(found: int, total: int) -> int:
    return round(100 * found / total) if total else 0


def _strip_seniority(title: str) -> str:
    words = title.split()
    while len(words) > 1 and words[0] in vocabulary.SENIORITY_LEVELS:
        words = words[1:]
    return " ".join(words)


def _known_titles() -> list[str]:
    titles: list[str] = []
    for canonical, synonyms in vocabulary.TITLE_SYNONYMS.items():
        titles.append(canonical)
        titles.extend(synonyms)
    return titles


def _title_lines(job_text: str) -> list[str]:
    lines = [normalize_text(line) for line in job_text.splitlines()]
    return [_TITLE_PREFIX_RE.sub("", line) for line in lines if line][:_TITLE_LINES]


def extract_job_title(job_text: str) -> str | None:
    """Job title from the opening lines of a posting, lowercased, without a seniority prefix."""
    job_text = require_text(job_text, "job_text")
    known = _known_titles()
    for line in _title_lines(job_text):
        matches = [title for title in known if contains_term(line, title)]
        if matches:
            return max(matches, key=len)
        generic = _GENERIC_TITLE_RE.search(line)
        if generic:
            return _strip_seniority(generic.group(1).strip())
    return None


def title_variations(title: str) -> tuple[str, ...]:
    """The title followed by every synonym in its group."""
    title = normalize_text(title)
    for canonical, synonyms in vocabulary.TITLE_SYNONYMS.items():
        group = (canonical, *synonyms)
        if title in group:
            return (title, *(variant for variant in group if variant != title))
    return (title,)


def seniority_level(text: str) -> int | None:
    """Index into ``SENIORITY_LEVELS`` of the first level named in ``text``."""
    for index, level in enumerate(vocabulary.SENIORITY_LEVELS):
        if contains_term(text, level):
            return index
    return None


def _resume_title_lines(resume_text: str) -> list[str]:
    lines: list[str] = []
    for raw in resume_text.splitlines():
        line = normalize_text(raw)
        if line and "@" not in line and len(line.split()) <= _RESUME_TITLE_MAX_WORDS:
            lines.append(line)
    return lines


def _token_overlap(title: str, line: str) -> float:
    title_tokens = set(_WORD_RE.findall(title))
    if not title_tokens:
        return 0.0
    return len(title_tokens & set(_WORD_RE.findall(line))) / len(title_tokens)


def _seniority_bonus(job_level: int | None, resume_level: int | None) -> int:
    if job_level is None or resume_level is None:
        return 0
    gap = abs(job_level - resume_level)
    if gap == 0:
        return 10
    if gap == 1:
        return 5
    return 0


def _score_keyword_match(
    resume_text: str,
    keywords: KeywordSet,
    taxonomy: TaxonomyProvider,
) -> tuple[FactorScore, list[str]]:
    weight = _weight("keyword_match")
    found_critical = [keyword for keyword in keywords.critical if find_keyword(resume_text, keyword, taxonomy)]
    found_optional = [keyword for keyword in keywords.optional if find_keyword(resume_text, keyword, taxonomy)]
    missing = [keyword for keyword in keywords.critical if keyword not in found_critical]

    if keywords.critical:
        bonus_max = int(get_scoring_value("recruiter_search.optional_bonus_max", 10))
        bonus = round(bonus_max * len(found_optional) / len(keywords.optional)) if keywords.optional else 0
        score = min(100, _percent(len(found_critical), len(keywords.critical)) + bonus)
        details = f"{len(found_critical)} of {len(keywords.critical)} required keywords found"
        if keywords.optional:
            details += f", {len(found_optional)} of {len(keywords.optional)} preferred"
    elif keywords.optional:
        score = _percent(len(found_optional), len(keywords.optional))
        details = f"{len(found_optional)} of {len(keywords.optional)} preferred keywords found"
    else:
        score = _neutral_score()
        details = "No keywords were extracted from the job description"
    return FactorScore(score=score, weight=weight, details=details), missing


def _score_title_alignment(resume_text: str, job_text: str) -> tuple[FactorScore, str | None, list[str]]:
    weight = _weight("title_alignment")
    title = extract_job_title(job_text)
    if title is None:
        details = "No job title found in the job description"
        return FactorScore(score=_neutral_score(), weight=weight, details=details), None, []

    job_lines = _title_lines(job_text)
    job_level = next((level for level in map(seniority_level, job_lines) if level is not None), None)
    resume_lines = _resume_title_lines(resume_text)
    variations = title_variations(title)

    matched = [variant for variant in variations if contains_term(resume_text, variant)]
    if title in matched:
        base, anchor = 100, title
        details = f'Exact title "{vocabulary.display_term(title)}" found'
    elif matched:
        base = int(get_scoring_value("recruiter_search.synonym_title_score", 80))
        anchor = matched[0]
        details = f'Related title "{vocabulary.display_term(anchor)}" found'
    else:
        near_ratio = float(get_scoring_value("recruiter_search.fuzzy_title_ratio", 0.85))
        synonym_score = int(get_scoring_value("recruiter_search.synonym_title_score", 80))
        base, anchor = 0, None
        for line in resume_lines:
            if SequenceMatcher(None, title, _strip_seniority(line)).ratio() >= near_ratio:
                candidate = synonym_score
            else:
                candidate = round(70 * _token_overlap(title, line))
            if candidate > base:
                base, anchor = candidate, line
        if anchor is None:
            details = f'Target title "{vocabulary.display_term(title)}" not found'
        else:
            details = f'Partial title match for "{vocabulary.display_term(title)}"'

    resume_level = None
    if anchor is not None:
        anchor_line = next((line for line in resume_lines if contains_term(line, anchor)), anchor)
        resume_level = seniority_level(anchor_line)
    score = min(100, base + _seniority_bonus(job_level, resume_level)) if base else 0
    matched_titles = [vocabulary.display_term(variant) for variant in matched]
    return FactorScore(score=score, weight=weight, details=details), title, matched_titles


def _job_skills(job_text: str) -> list[str]:
    kinds = {"tool", "tech", "technical"}
    return list(dict.fromkeys(hit.key for hit in scan_phrases(job_text) if hit.kind in kinds))


def _score_skills_coverage(
    resume_text: str,
    job_text: str,
    taxonomy: TaxonomyProvider,
) -> tuple[FactorScore, list[str]]:
    weight = _weight("skills_coverage")
    skills = _job_skills(job_text)
    if not skills:
        details = "No specific tools or technologies listed in the job description"
        return FactorScore(score=_neutral_score(), weight=weight, details=details), []
    missing = [skill for skill in skills if not find_keyword(resume_text, skill, taxonomy)]
    found = len(skills) - len(missing)
    details = f"{found} of {len(skills)} tools and technologies found"
    return FactorScore(score=_percent(found, len(skills)), weight=weight, details=details), missing


def detect_industry(job_text: str) -> str | None:
    """Industry with the most vocabulary hits in ``job_text``; at least two hits are required."""
    best, best_hits = None, 1
    for industry, terms in vocabulary.INDUSTRY_TERMS.items():
        hits = sum(1 for term in terms if contains_term(job_text, term))
        if hits > best_hits:
            best, best_hits = industry, hits
    return best


def _score_industry_terms(resume_text: str, job_text: str) -> tuple[FactorScore, str | None, list[str]]:
    weight = _weight("industry_terms")
    industry = detect_industry(job_text)
    if industry is None:
        details = "No specific industry detected"
        return FactorScore(score=_neutral_score(), weight=weight, details=details), None, []
    terms = vocabulary.INDUSTRY_TERMS[industry]
    missing = [term for term in terms if not contains_term(resume_text, term)]
    found = len(terms) - len(missing)
    score = min(100, round(100 * found / min(3, len(terms))))
    details = f"{found} {industry} industry terms found"
    return FactorScore(score=score, weight=weight, details=details), industry, missing


def _suggestions_for(
    factor: str,
    *,
    missing_keywords: list[str],
    title: str | None,
    missing_skills: list[str],
    industry: str | None,
    missing_terms: list[str],
) -> list[str]:
    suggestions: list[str] = []
    if factor == "keyword_match":
        if missing_keywords:
            listed = ", ".join(missing_keywords[:5])
            suggestions.append(f"Add the required keywords you genuinely have: {listed}.")
        suggestions.append("Use the exact keyword phrasing from the job posting so Boolean searches match.")
    elif factor == "title_alignment":
        if title:
            display = vocabulary.display_term(title)
            suggestions.append(f'Include the target title "{display}" in your headline or summary.')
        else:
            suggestions.append("Add a clear headline that states the role you are targeting.")
    elif factor == "skills_coverage":
        if missing_skills:
            listed = ", ".join(vocabulary.display_term(skill) for skill in missing_skills[:5])
            suggestions.append(f"List these tools and technologies if you have used them: {listed}.")
    elif factor == "industry_terms":
        if industry and missing_terms:
            listed = ", ".join(vocabulary.display_term(term) for term in missing_terms[:3])
            suggestions.append(f"Mention {industry} domain terms such as {listed} where they reflect your work.")
    return suggestions


def _empty_resume_result(keywords: KeywordSet) -> RecruiterSearchResult:
    factors = {
        factor: FactorScore(score=0, weight=_weight(factor), details="No resume text to search")
        for factor in _FACTOR_ORDER
    }
    return RecruiterSearchResult(
        score=0,
        breakdown=RecruiterSearchBreakdown(**factors),
        missing_keywords=list(keywords.critical),
        suggestions=["Upload a resume with extractable text before checking recruiter visibility."],
    )


def calculate_recruiter_search(
    resume_text: str,
    job_text: str,
    keywords: KeywordSet | Mapping[str, Any],
    *,
    taxonomy: TaxonomyProvider | None = None,
) -> RecruiterSearchResult:
    resume_text = require_text(resume_text, "resume_text")
    job_text = require_text(job_text, "job_text")
    keywords = coerce_keywords(keywords)
    if not resume_text.strip():
        return _empty_resume_result(keywords)

    taxonomy = taxonomy or get_default_taxonomy_provider()
    keyword_factor, missing_keywords = _score_keyword_match(resume_text, keywords, taxonomy)
    title_factor, title, matched_titles = _score_title_alignment(resume_text, job_text)
    skills_factor, missing_skills = _score_skills_coverage(resume_text, job_text, taxonomy)
    industry_factor, industry, missing_terms = _score_industry_terms(resume_text, job_text)

    breakdown = RecruiterSearchBreakdown(
        keyword_match=keyword_factor,
        title_alignment=title_factor,
        skills_coverage=skills_factor,
        industry_terms=industry_factor,
    )
    factors = breakdown.factors()
    score = max(0, min(100, round(sum(factor.score * factor.weight for factor in factors.values()))))

    threshold = int(get_scoring_value("recruiter_search.suggestion_threshold", 60))
    limit = int(get_scoring_value("recruiter_search.max_suggestions", 5))
    weakest = sorted(_FACTOR_ORDER, key=lambda name: (factors[name].score, _FACTOR_ORDER.index(name)))
    suggestions: list[str] = []
    for name in weakest:
        if factors[name].score >= threshold:
            break
        suggestions.extend(
            _suggestions_for(
                name,
                missing_keywords=missing_keywords,
                title=title,
                missing_skills=missing_skills,
                industry=industry,
                missing_terms=missing_terms,
            )
        )
    suggestions = suggestions[:limit]
    if not suggestions:
        suggestions = ["Your resume is well positioned for recruiter keyword searches."]

    ordered = keywords.all or [*keywords.critical, *keywords.optional]
    matched_keywords = [keyword for keyword in ordered if find_keyword(resume_text, keyword, taxonomy)]

    logger.debug(
        "recruiter_search_calculated score=%s keyword=%s title=%s skills=%s industry=%s",
        score,
        keyword_factor.score,
        title_factor.score,
        skills_factor.score,
        industry_factor.score,
    )
    return RecruiterSearchResult(
        score=score,
        breakdown=breakdown,
        matched_keywords=matched_keywords,
        missing_keywords=missing_keywords,
        matched_titles=matched_titles,
        suggestions=suggestions,
    )
