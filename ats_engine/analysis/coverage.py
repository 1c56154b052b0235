from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ats_engine.core.config import get_scoring_value
from ats_engine.core.errors import InvalidInputError, invalid_input_from_validation
from ats_engine.normalize.utils import contains_term, require_text
from ats_engine.schemas.findings import Finding
from ats_engine.schemas.keywords import CoverageResult, KeywordSet
from ats_engine.taxonomy import TaxonomyProvider, get_default_taxonomy_provider, skill_equivalents

from . import vocabulary
from .findings import slugify, sort_findings

logger = logging.getLogger(__name__)


def coerce_keywords(keywords: KeywordSet | Mapping[str, Any]) -> KeywordSet:
    if isinstance(keywords, KeywordSet):
        return keywords
    if isinstance(keywords, Mapping):
        try:
            return KeywordSet.model_validate(dict(keywords))
        except ValidationError as exc:
            raise invalid_input_from_validation(exc, root="keywords") from exc
    raise InvalidInputError(
        f"keywords must be a KeywordSet or mapping, got {type(keywords).__name__}.",
        field="keywords",
    )


def _word_forms(word: str, *, verbs: bool) -> list[str]:
    forms: list[str] = []
    if word.endswith("ies") and len(word) > 4:
        forms.append(word[:-3] + "y")
    elif word.endswith("es") and word[:-2].endswith(("s", "x", "ch", "sh")):
        forms.append(word[:-2])
    elif word.endswith("s") and not word.endswith("ss"):
        forms.append(word[:-1])
    elif word.endswith("y") and word[-2:-1] not in "aeiou":
        forms.append(word[:-1] + "ies")
    elif word.endswith(("s", "x", "ch", "sh")):
        forms.append(word + "es")
    else:
        forms.append(word + "s")

    if not verbs:
        return forms
    if word.endswith("ing"):
        stem = word[:-3]
        forms.extend([stem, stem + "e", stem + "ed"])
    elif word.endswith("ed"):
        stem = word[:-2]
        forms.extend([stem, word[:-1], stem + "ing"])
    elif word.endswith("e"):
        forms.extend([word[:-1] + "ing", word + "d"])
    else:
        forms.extend([word + "ing", word + "ed"])
    return forms


def keyword_variants(keyword: str, taxonomy: TaxonomyProvider | None = None) -> list[str]:
    """Spellings accepted as a match for ``keyword``; the keyword itself comes first."""
    variants: list[str] = []

    def add(value: str) -> None:
        value = " ".join(value.split())
        if value and value not in variants:
            variants.append(value)

    for spelling in skill_equivalents(keyword, taxonomy):
        add(spelling)
        if "-" in spelling:
            add(spelling.replace("-", " "))
            add(spelling.replace("-", ""))
        elif " " in spelling:
            add(spelling.replace(" ", "-"))

    for spelling in list(variants):
        head, _, last = spelling.rpartition(" ")
        if len(last) < 4 or not last.isalpha():
            continue
        for form in _word_forms(last, verbs=not vocabulary.is_named_technology(keyword)):
            add(f"{head} {form}" if head else form)
    return variants


def find_keyword(text: str, keyword: str, taxonomy: TaxonomyProvider | None = None) -> str | None:
    """Return the first accepted spelling of ``keyword`` present in ``text``."""
    for variant in keyword_variants(keyword, taxonomy):
        if contains_term(text, variant):
            return variant
    return None


def coverage_grade(score: int) -> str:
    low = int(get_scoring_value("coverage.thresholds.low", 50))
    moderate = int(get_scoring_value("coverage.thresholds.moderate", 75))
    if score < low:
        return "low"
    if score < moderate:
        return "moderate"
    return "strong"


def _summary_finding(critical_pct: int, found_critical: int, total_critical: int) -> Finding:
    grade = coverage_grade(critical_pct)
    if grade == "low":
        return Finding(
            id="low-keyword-coverage",
            severity="high",
            category="keyword",
            title="Low Keyword Coverage",
            description=f"Found {found_critical} of {total_critical} critical keywords ({critical_pct}%).",
            impact="Keyword-filtered ATS searches are unlikely to surface this resume for the role.",
            suggestion="Add the missing required skills you genuinely have, using the job's exact wording.",
        )
    if grade == "moderate":
        return Finding(
            id="moderate-keyword-coverage",
            severity="medium",
            category="keyword",
            title="Moderate Keyword Coverage",
            description=f"Found {found_critical} of {total_critical} critical keywords ({critical_pct}%).",
            impact="Some recruiter searches for required skills will miss this resume.",
            suggestion="Cover the remaining required keywords where they apply to your experience.",
        )
    return Finding(
        id="strong-keyword-coverage",
        severity="info",
        category="keyword",
        title="Strong Keyword Coverage",
        description=f"Found {found_critical} of {total_critical} critical keywords ({critical_pct}%).",
        impact="The resume is well aligned with this job posting's requirements.",
    )


def calculate_coverage(
    resume_text: str,
    keywords: KeywordSet | Mapping[str, Any],
    *,
    taxonomy: TaxonomyProvider | None = None,
) -> CoverageResult:
    resume_text = require_text(resume_text, "resume_text")
    keywords = coerce_keywords(keywords)

    if not resume_text.strip():
        return CoverageResult(
            score=0,
            missing_keywords=list(keywords.all or [*keywords.critical, *keywords.optional]),
            findings=[
                Finding(
                    id="empty-resume",
                    severity="critical",
                    category="extraction",
                    title="No Resume Text",
                    description="No text was extracted from the resume.",
                    impact="Keyword coverage cannot be measured without resume content.",
                    suggestion="Upload a text-based resume file.",
                )
            ],
        )

    if keywords.is_empty():
        return CoverageResult(
            score=100,
            findings=[
                Finding(
                    id="no-keywords",
                    severity="info",
                    category="keyword",
                    title="No Specific Keywords Identified",
                    description="No specific keywords were extracted from the job description.",
                    impact="The posting may be generic or list no concrete skills.",
                )
            ],
        )

    taxonomy = taxonomy or get_default_taxonomy_provider()
    candidates = dict.fromkeys([*keywords.critical, *keywords.optional, *keywords.all])
    found_set = {keyword for keyword in candidates if find_keyword(resume_text, keyword, taxonomy)}

    critical_weight = float(get_scoring_value("coverage.weights.critical", 1.0))
    optional_weight = float(get_scoring_value("coverage.weights.optional", 0.5))
    found_critical = [keyword for keyword in keywords.critical if keyword in found_set]
    found_optional = [keyword for keyword in keywords.optional if keyword in found_set]
    denominator = len(keywords.critical) * critical_weight + len(keywords.optional) * optional_weight
    numerator = len(found_critical) * critical_weight + len(found_optional) * optional_weight
    score = max(0, min(100, round(100 * numerator / denominator))) if denominator > 0 else 100

    ordered = keywords.all or [*keywords.critical, *keywords.optional]
    found_keywords = [keyword for keyword in ordered if keyword in found_set]
    missing_keywords = [keyword for keyword in ordered if keyword not in found_set]

    if keywords.critical:
        critical_pct = round(100 * len(found_critical) / len(keywords.critical))
    else:
        critical_pct = score
    findings = [_summary_finding(critical_pct, len(found_critical), len(keywords.critical))]

    limit = int(get_scoring_value("coverage.missing_finding_limit", 10))
    missing_critical = [keyword for keyword in keywords.critical if keyword not in found_set]
    for keyword in missing_critical[:limit]:
        findings.append(
            Finding(
                id=f"missing-keyword-{slugify(keyword)}",
                severity="low",
                category="keyword",
                title=f'Missing Keyword: "{keyword}"',
                description=f'The required keyword "{keyword}" was not found in the resume.',
                impact="Recruiters filtering on this term will not find the resume.",
                suggestion=f'If you have this skill, mention "{keyword}" explicitly.',
            )
        )

    known = {keyword.lower() for keyword in keywords.all}
    bonus_keywords = [
        vocabulary.display_term(skill)
        for skill in vocabulary.UNIVERSAL_SOFT_SKILLS
        if skill not in known and find_keyword(resume_text, skill, taxonomy)
    ]

    logger.debug(
        "coverage_calculated score=%s found=%s missing=%s bonus=%s",
        score,
        len(found_keywords),
        len(missing_keywords),
        len(bonus_keywords),
    )
    return CoverageResult(
        score=score,
        found_keywords=found_keywords,
        missing_keywords=missing_keywords,
        bonus_keywords=bonus_keywords,
        findings=sort_findings(findings),
    )
