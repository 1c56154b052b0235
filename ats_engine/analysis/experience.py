"""Minimum-experience requirements and resume tenure estimation.

Job text is scanned for year-count phrases; resume text for employment date
ranges, which are merged so overlapping roles are counted once.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date

from ats_engine.core.config import get_scoring_value
from ats_engine.core.errors import PatternEngineError
from ats_engine.normalize.utils import require_text, sentence_spans, strip_bullet_prefix
from ats_engine.schemas.knockouts import KnockoutItem, make_knockout_id

logger = logging.getLogger(__name__)

_MONTHS: dict[str, int] = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_YEARS_PHRASE_RE = re.compile(
    r"(?<![\d.])(?P<low>\d{1,2})(?:\s*(?:-|–|to)\s*(?P<high>\d{1,2}))?\s*(?P<plus>\+)?\s*(?:years?|yrs?)\b",
    re.IGNORECASE,
)
_MINIMUM_PREFIX_RE = re.compile(r"(?:at\s+least|minimum(?:\s+of)?|min\.?|no\s+less\s+than)\s*$", re.IGNORECASE)
_REQUIREMENT_CONTEXT_RE = re.compile(r"\b(?:experience|required|requires|must|minimum)\b", re.IGNORECASE)
_FIELD_RE = re.compile(r"\bexperience\s+(?:in|with)\s+([a-z0-9][a-z0-9 ,/+#.-]{1,60}?)(?:\.|;|,|\band\b|\bor\b|$)", re.IGNORECASE)

_DATE_PART = (
    r"(?:(?P<{p}month>jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+"
    r"|(?P<{p}num>0?[1-9]|1[0-2])\s*[/.-]\s*)?"
    r"(?P<{p}year>(?:19|20)\d{{2}})"
)
_DATE_RANGE_RE = re.compile(
    r"\b" + _DATE_PART.format(p="s") + r"\s*(?:-|–|—|to|until)\s*(?:"
    + _DATE_PART.format(p="e") + r"|(?P<present>present|current|now|today))\b",
    re.IGNORECASE,
)
_STATED_YEARS_RE = re.compile(
    r"(?<![\d.])(\d{1,2})\+?\s*(?:years?|yrs?)\s+of\s+(?:[a-z/+#.-]+\s+){0,3}?experience",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ExperienceRequirement:
    years: int
    max_years: int | None
    evidence: str
    position: int
    field: str | None = None

    @property
    def label(self) -> str:
        if self.max_years:
            return f"{self.years}-{self.max_years} years of experience required"
        return f"{self.years}+ years of experience required"


def _is_requirement(sentence: str, match: re.Match[str]) -> bool:
    if match.group("plus"):
        return True
    if _MINIMUM_PREFIX_RE.search(sentence[: match.start()]):
        return True
    return bool(_REQUIREMENT_CONTEXT_RE.search(sentence))


def _sentence_requirement(job_text: str, start: int, end: int) -> ExperienceRequirement | None:
    sentence = job_text[start:end]
    max_required = int(get_scoring_value("knockouts.experience.max_required_years", 30))
    try:
        for match in _YEARS_PHRASE_RE.finditer(sentence):
            years = int(match.group("low"))
            high = int(match.group("high")) if match.group("high") else None
            if not 0 < years <= max_required or not _is_requirement(sentence, match):
                continue
            if high is not None and high <= years:
                high = None
            field_match = _FIELD_RE.search(sentence)
            return ExperienceRequirement(
                years=years,
                max_years=high,
                evidence=strip_bullet_prefix(sentence),
                position=start + match.start(),
                field=field_match.group(1).strip() if field_match else None,
            )
    except (re.error, IndexError) as exc:
        raise PatternEngineError(f"experience requirement rule failed: {exc}", rule="experience.years") from exc
    return None


def extract_experience_requirements(job_text: str) -> list[ExperienceRequirement]:
    """One requirement per sentence that states a year count, in text order."""
    job_text = require_text(job_text, "job_text")
    requirements: list[ExperienceRequirement] = []
    for start, end in sentence_spans(job_text):
        requirement = _sentence_requirement(job_text, start, end)
        if requirement is not None:
            requirements.append(requirement)
    return requirements


def extract_experience_requirement(job_text: str) -> ExperienceRequirement | None:
    """The most demanding requirement; the earliest one wins a tie."""
    requirements = extract_experience_requirements(job_text)
    if not requirements:
        return None
    return max(requirements, key=lambda requirement: (requirement.years, -requirement.position))


def _month_index(year: int, month: int) -> int:
    return year * 12 + (month - 1)


def _span_from_match(match: re.Match[str], today_index: int) -> tuple[int, int] | None:
    earliest = int(get_scoring_value("knockouts.experience.earliest_year", 1970))
    start_year = int(match.group("syear"))
    if start_year < earliest:
        return None
    start_month = _MONTHS.get((match.group("smonth") or "")[:3].lower()) or int(match.group("snum") or 1)
    start = _month_index(start_year, start_month)

    if match.group("present"):
        end = today_index + 1
    else:
        end_year = int(match.group("eyear"))
        if match.group("emonth") or match.group("enum"):
            end_month = _MONTHS.get((match.group("emonth") or "")[:3].lower()) or int(match.group("enum"))
            end = _month_index(end_year, end_month) + 1
        else:
            end = _month_index(end_year, start_month if end_year > start_year else 12)
            if end_year == start_year:
                end += 1
    end = min(end, today_index + 1)
    if end <= start:
        return None
    return start, end


def resume_date_spans(resume_text: str, *, as_of: date | None = None) -> list[tuple[int, int]]:
    """Employment spans as half-open month indexes, merged and sorted."""
    today = as_of or date.today()
    today_index = _month_index(today.year, today.month)
    spans: list[tuple[int, int]] = []
    try:
        for match in _DATE_RANGE_RE.finditer(resume_text):
            span = _span_from_match(match, today_index)
            if span is not None:
                spans.append(span)
    except (re.error, IndexError, ValueError) as exc:
        raise PatternEngineError(f"resume date rule failed: {exc}", rule="experience.date_range") from exc

    merged: list[tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def estimate_resume_experience(resume_text: str, *, as_of: date | None = None) -> float | None:
    """Years of experience from date ranges, or from an explicit statement when there are none.

    Returns None when the resume gives no basis for an estimate.
    """
    resume_text = require_text(resume_text, "resume_text")
    spans = resume_date_spans(resume_text, as_of=as_of)
    if spans:
        months = sum(end - start for start, end in spans)
        return round(months / 12, 1)
    stated = [int(match.group(1)) for match in _STATED_YEARS_RE.finditer(resume_text)]
    if stated:
        return float(max(stated))
    return None


def assess_experience(
    requirement: ExperienceRequirement,
    resume_years: float | None,
) -> bool | None:
    if resume_years is None:
        return None
    margin = float(get_scoring_value("knockouts.experience.material_gap_years", 2))
    if requirement.years - resume_years >= margin:
        return False
    if resume_years >= requirement.years:
        return True
    return None


def detect_experience_knockout(
    resume_text: str,
    job_text: str,
    *,
    as_of: date | None = None,
) -> KnockoutItem | None:
    resume_text = require_text(resume_text, "resume_text")
    requirement = extract_experience_requirement(job_text)
    if requirement is None:
        return None

    resume_years = estimate_resume_experience(resume_text, as_of=as_of)
    confirmed = assess_experience(requirement, resume_years)
    logger.debug(
        "experience_knockout_assessed required=%s estimated=%s confirmed=%s",
        requirement.years,
        resume_years,
        confirmed,
    )
    return KnockoutItem(
        id=make_knockout_id("experience", requirement.evidence),
        category="experience",
        label=requirement.label,
        evidence=requirement.evidence,
        user_confirmed=confirmed,
    )
