"""Auto-assessment of knockout items against the candidate's resume.

Only high-confidence assessments pre-fill ``user_confirmed``; everything else
is left for the user. Items whose confirmation came from the user are passed
through untouched.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date

from ats_engine.normalize.utils import require_text
from ats_engine.schemas.knockouts import AutoAssessment, EnhancedKnockoutItem, KnockoutItem

from .experience import assess_experience, estimate_resume_experience, extract_experience_requirements

logger = logging.getLogger(__name__)

_EDUCATION_ORDER: dict[str, int] = {"high_school": 1, "associate": 2, "bachelor": 3, "master": 4, "phd": 5}
_EDUCATION_NAMES: dict[str, str] = {
    "high_school": "High School",
    "associate": "Associate's",
    "bachelor": "Bachelor's",
    "master": "Master's",
    "phd": "PhD",
}

# Most advanced level first.
_RESUME_EDUCATION_RES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("phd", re.compile(r"\bph\.?\s?d\b|\bdoctorate\b|\bdoctor\s+of\b", re.IGNORECASE)),
    ("master", re.compile(r"\bmaster(?:'s|’s|s)?\s+(?:degree|of)\b|\bmaster(?:'s|’s)\s+in\b|\bm\.?s\.?\s+in\b|\bm\.?a\.?\s+in\b|\bm\.?b\.?a\b|\bmsc\b", re.IGNORECASE)),
    ("bachelor", re.compile(r"\bbachelor'?s?\s+(?:degree|of|in)\b|\bb\.?s\.?\s+in\b|\bb\.?a\.?\s+in\b|\bb\.?sc\b|\bb\.?eng\b", re.IGNORECASE)),
    ("associate", re.compile(r"\bassociate(?:'s|’s|s)?\s+(?:degree|of)\b|\bassociate(?:'s|’s)\s+in\b|\ba\.?a\.?s?\.?\s+in\b", re.IGNORECASE)),
    ("high_school", re.compile(r"\bhigh\s+school\b|\bged\b", re.IGNORECASE)),
)
_REQUIRED_EDUCATION_RES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("phd", re.compile(r"\bph\.?d|\bdoctorate", re.IGNORECASE)),
    ("master", re.compile(r"\bmaster(?:'s|’s)|\bmasters?\s+(?:degree|of)\b|\bms/ma\b|\bm\.s\.|\bmba\b|(?<!under)graduate\s+degree", re.IGNORECASE)),
    ("bachelor", re.compile(r"\bbachelor|\bbs/ba\b|\bba/bs\b|\bb\.s\.|undergraduate|4[- ]year|four[- ]year|college|university", re.IGNORECASE)),
    ("associate", re.compile(r"\bassociate(?:'s|’s)|\bassociates?\s+(?:degree|of)\b|2[- ]year", re.IGNORECASE)),
    ("high_school", re.compile(r"\bhigh\s+school|\bged\b", re.IGNORECASE)),
)
_EQUIVALENT_EXPERIENCE_RE = re.compile(r"\bor\s+(?:equivalent|comparable|relevant)\s+(?:work\s+)?experience\b", re.IGNORECASE)

_AUTHORIZED_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bu\.?s\.?\s+citizen(?:ship)?\b", re.IGNORECASE),
    re.compile(r"\bamerican\s+citizen\b", re.IGNORECASE),
    re.compile(r"\bauthori[sz]ed\s+to\s+work\b", re.IGNORECASE),
    re.compile(r"\bpermanent\s+resident\b", re.IGNORECASE),
    re.compile(r"\bgreen\s+card\s+holder\b", re.IGNORECASE),
)
_SPONSORSHIP_NEEDED_RE = re.compile(
    r"\b(?:require|requires|requiring|need|needs|will\s+need)\s+(?:visa\s+)?sponsorship\b", re.IGNORECASE
)
_VISA_RE = re.compile(r"\b(?:h-?1b|f-?1|opt|cpt|l-?1|tn)\s+(?:visa|status)\b|\bvisa\s+holder\b", re.IGNORECASE)

_CLEARANCE_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(?:active\s+)?(?:top\s+secret|ts/sci|secret)(?:/sci)?\s+(?:security\s+)?clearance\b", re.IGNORECASE),
    re.compile(r"\bactive\s+(?:security\s+)?clearance\b", re.IGNORECASE),
    re.compile(r"\bclearance:\s*(?:top\s+secret|secret|ts|sci)\b", re.IGNORECASE),
    re.compile(r"\bholds?\s+(?:an?\s+)?(?:active\s+)?(?:top\s+secret|secret|ts/sci)\b", re.IGNORECASE),
)
_NO_CLEARANCE_RE = re.compile(
    r"\bno\s+(?:active\s+)?(?:security\s+)?clearance\b|\bnot\s+(?:currently\s+)?(?:hold\s+a\s+)?(?:security\s+)?cleared\b"
    r"|\bdo(?:es)?\s+not\s+hold\s+(?:an?\s+)?(?:security\s+)?clearance\b",
    re.IGNORECASE,
)

_CERTIFICATION_RES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("CISSP", re.compile(r"\bcissp\b", re.IGNORECASE)),
    ("CISM", re.compile(r"\bcism\b", re.IGNORECASE)),
    ("CISA", re.compile(r"\bcisa\b", re.IGNORECASE)),
    ("Security+", re.compile(r"\b(?:comptia\s+)?security\+|\bsec\+", re.IGNORECASE)),
    ("CCNA", re.compile(r"\bccna\b", re.IGNORECASE)),
    ("CCNP", re.compile(r"\bccnp\b", re.IGNORECASE)),
    ("AWS", re.compile(r"\baws\s+(?:certified|solutions\s+architect|developer\s+associate|sysops)\b", re.IGNORECASE)),
    ("Azure", re.compile(r"\bazure\s+(?:certified|administrator\s+associate|developer\s+associate)\b", re.IGNORECASE)),
    ("GCP", re.compile(r"\b(?:gcp|google\s+cloud)\s+certified\b", re.IGNORECASE)),
    ("PMP", re.compile(r"\bpmp\b", re.IGNORECASE)),
    ("Scrum Master", re.compile(r"\bscrum\s+master\b|\bcsm\b", re.IGNORECASE)),
    ("ITIL", re.compile(r"\bitil\b", re.IGNORECASE)),
    ("Six Sigma", re.compile(r"\bsix\s+sigma\b", re.IGNORECASE)),
    ("CPA", re.compile(r"\bcpa\b", re.IGNORECASE)),
    ("CFA", re.compile(r"\bcfa\b", re.IGNORECASE)),
    ("Nursing", re.compile(r"\b(?:rn|registered\s+nurse)\b", re.IGNORECASE)),
    ("Bar", re.compile(r"\bbar\s+(?:admission|admitted)\b|\badmitted\s+to\s+the\s+\w+\s+bar\b", re.IGNORECASE)),
)

_RESUME_LOCATION_RE = re.compile(r"\b([A-Z][a-z]+(?: [A-Z][a-z]+)?), ?([A-Z]{2})\b")
_JOB_LOCATION_RE = re.compile(r"\b(?:located|based|office)\s+in\s+([A-Z][a-z]+(?: [A-Z][a-z]+)?)")
_REMOTE_RE = re.compile(r"\b(?:fully|100%|completely)\s+remote\b|\bremote[- ]only\b", re.IGNORECASE)


@dataclass(frozen=True)
class ResumeProfile:
    years_of_experience: float | None = None
    education_level: str | None = None
    has_work_authorization: bool | None = None
    authorization_evidence: str | None = None
    needs_sponsorship: bool = False
    has_clearance: bool = False
    denies_clearance: bool = False
    clearance_evidence: str | None = None
    location: str | None = None
    certifications: list[str] = field(default_factory=list)


def _first_match(patterns: Iterable[re.Pattern[str]], text: str) -> re.Match[str] | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


def _education_level(text: str, table: tuple[tuple[str, re.Pattern[str]], ...]) -> str | None:
    for level, pattern in table:
        if pattern.search(text):
            return level
    return None


def build_resume_profile(resume_text: str, *, as_of: date | None = None) -> ResumeProfile:
    resume_text = require_text(resume_text, "resume_text")
    authorized = _first_match(_AUTHORIZED_RES, resume_text)
    needs_sponsorship = bool(_SPONSORSHIP_NEEDED_RE.search(resume_text))
    visa = _VISA_RE.search(resume_text)
    if needs_sponsorship or visa:
        has_work_authorization: bool | None = False
    elif authorized:
        has_work_authorization = True
    else:
        has_work_authorization = None

    clearance = _first_match(_CLEARANCE_RES, resume_text)
    denies = bool(_NO_CLEARANCE_RE.search(resume_text))
    location = _RESUME_LOCATION_RE.search(resume_text)
    return ResumeProfile(
        years_of_experience=estimate_resume_experience(resume_text, as_of=as_of),
        education_level=_education_level(resume_text, _RESUME_EDUCATION_RES),
        has_work_authorization=has_work_authorization,
        authorization_evidence=authorized.group(0) if authorized else (visa.group(0) if visa else None),
        needs_sponsorship=needs_sponsorship,
        has_clearance=bool(clearance) and not denies,
        denies_clearance=denies,
        clearance_evidence=clearance.group(0) if clearance else None,
        location=f"{location.group(1)}, {location.group(2)}" if location else None,
        certifications=[name for name, pattern in _CERTIFICATION_RES if pattern.search(resume_text)],
    )


def _assess_authorization(item: KnockoutItem, profile: ResumeProfile) -> tuple[AutoAssessment, str | None]:
    if profile.needs_sponsorship:
        return AutoAssessment(likely=False, confidence="high", reason="Resume states that visa sponsorship is required"), None
    if profile.has_work_authorization is False:
        return (
            AutoAssessment(likely=False, confidence="medium", reason="Resume mentions a visa status that may need sponsorship"),
            profile.authorization_evidence,
        )
    if profile.has_work_authorization:
        return (
            AutoAssessment(likely=True, confidence="high", reason="Resume states work authorization"),
            profile.authorization_evidence,
        )
    return AutoAssessment(likely=False, confidence="low", reason="Work authorization status not found in resume"), None


def _assess_clearance(item: KnockoutItem, profile: ResumeProfile) -> tuple[AutoAssessment, str | None]:
    if profile.denies_clearance:
        return AutoAssessment(likely=False, confidence="high", reason="Resume states no security clearance"), None
    if profile.has_clearance:
        return (
            AutoAssessment(likely=True, confidence="high", reason="Resume indicates an active security clearance"),
            profile.clearance_evidence,
        )
    return AutoAssessment(likely=False, confidence="medium", reason="No security clearance mentioned in resume"), None


def _assess_certification(item: KnockoutItem, profile: ResumeProfile) -> tuple[AutoAssessment, str | None]:
    haystack = f"{item.label} {item.evidence}".lower()
    matching = [name for name in profile.certifications if name.lower() in haystack]
    evidence = ", ".join(profile.certifications) or None
    if matching:
        return (
            AutoAssessment(likely=True, confidence="high", reason=f"Matching certification found: {', '.join(matching)}"),
            evidence,
        )
    if profile.certifications and item.label.startswith("Professional"):
        return (
            AutoAssessment(likely=True, confidence="low", reason="Resume lists certifications; confirm they satisfy this requirement"),
            evidence,
        )
    return AutoAssessment(likely=False, confidence="medium", reason="Required certification not found in resume"), evidence


def _assess_degree(item: KnockoutItem, profile: ResumeProfile) -> tuple[AutoAssessment, str | None]:
    required = _education_level(item.evidence, _REQUIRED_EDUCATION_RES) or "bachelor"
    flexible = bool(_EQUIVALENT_EXPERIENCE_RE.search(item.evidence))
    if profile.education_level is None:
        return AutoAssessment(likely=flexible, confidence="low", reason="Education level not clearly identified in resume"), None

    held = _EDUCATION_NAMES[profile.education_level]
    if _EDUCATION_ORDER[profile.education_level] >= _EDUCATION_ORDER[required]:
        return AutoAssessment(likely=True, confidence="high", reason=f"Resume shows a {held} degree"), held
    return (
        AutoAssessment(
            likely=flexible,
            confidence="medium",
            reason=f"Resume shows {held}, job asks for {_EDUCATION_NAMES[required]}"
            + (" or equivalent experience" if flexible else ""),
        ),
        held,
    )


def _assess_location(item: KnockoutItem, profile: ResumeProfile, job_text: str) -> tuple[AutoAssessment, str | None]:
    if _REMOTE_RE.search(job_text) and "relocat" not in item.label.lower():
        return AutoAssessment(likely=True, confidence="medium", reason="Role is advertised as remote"), None
    if profile.location is None:
        return AutoAssessment(likely=False, confidence="low", reason="Unable to determine candidate location"), None
    job_location = _JOB_LOCATION_RE.search(job_text)
    if job_location:
        city = job_location.group(1).lower()
        matches = city in profile.location.lower()
        reason = (
            f"Candidate location ({profile.location}) appears to match"
            if matches
            else f"Job is in {job_location.group(1)}, candidate appears to be in {profile.location}"
        )
        return AutoAssessment(likely=matches, confidence="medium" if matches else "low", reason=reason), profile.location
    return (
        AutoAssessment(likely=True, confidence="low", reason=f"Candidate appears to be in {profile.location}"),
        profile.location,
    )


def _assess_experience(item: KnockoutItem, profile: ResumeProfile) -> tuple[AutoAssessment, str | None]:
    requirements = extract_experience_requirements(item.evidence)
    if not requirements:
        return AutoAssessment(likely=False, confidence="low", reason="Could not read the required years"), None
    requirement = requirements[0]
    years = profile.years_of_experience
    if years is None:
        return AutoAssessment(likely=False, confidence="low", reason="No dated experience found in resume"), None

    evidence = f"~{years:g} years of experience detected"
    verdict = assess_experience(requirement, years)
    if verdict is True:
        return AutoAssessment(likely=True, confidence="high", reason=f"Resume shows about {years:g} years of experience"), evidence
    if verdict is False:
        gap = requirement.years - years
        return (
            AutoAssessment(
                likely=False,
                confidence="high",
                reason=f"Resume shows about {years:g} years ({gap:g} short of the requirement)",
            ),
            evidence,
        )
    return (
        AutoAssessment(likely=False, confidence="medium", reason=f"Resume shows about {years:g} years, slightly under the requirement"),
        evidence,
    )


def _assess(item: KnockoutItem, profile: ResumeProfile, job_text: str) -> tuple[AutoAssessment, str | None]:
    if item.category == "authorization":
        return _assess_authorization(item, profile)
    if item.category == "clearance":
        return _assess_clearance(item, profile)
    if item.category == "certification":
        return _assess_certification(item, profile)
    if item.category == "degree":
        return _assess_degree(item, profile)
    if item.category == "location":
        return _assess_location(item, profile, job_text)
    if item.category == "experience":
        return _assess_experience(item, profile)
    return AutoAssessment(likely=False, confidence="low", reason="Please review this requirement manually"), None


def _as_enhanced(item: KnockoutItem) -> EnhancedKnockoutItem:
    if isinstance(item, EnhancedKnockoutItem):
        return item
    return EnhancedKnockoutItem(**item.model_dump())


def _source_of(item: KnockoutItem) -> str | None:
    if isinstance(item, EnhancedKnockoutItem) and item.confirmation_source is not None:
        return item.confirmation_source
    if item.user_confirmed is None:
        return None
    # Only the experience detector sets a value on a plain item.
    return "auto" if item.category == "experience" else "user"


def enhance_knockouts_with_resume(
    items: Iterable[KnockoutItem],
    resume_text: str,
    job_text: str,
    *,
    as_of: date | None = None,
) -> list[EnhancedKnockoutItem]:
    resume_text = require_text(resume_text, "resume_text")
    job_text = require_text(job_text, "job_text")
    profile = build_resume_profile(resume_text, as_of=as_of)

    enhanced: list[EnhancedKnockoutItem] = []
    prefilled = 0
    for item in items:
        current = _as_enhanced(item)
        source = _source_of(item)
        assessment, resume_evidence = _assess(item, profile, job_text)

        if source == "user":
            enhanced.append(
                current.model_copy(
                    update={
                        "auto_assessment": assessment,
                        "resume_evidence": resume_evidence,
                        "confirmation_source": "user",
                    }
                )
            )
            continue

        if assessment.confidence == "high":
            confirmed: bool | None = assessment.likely
            new_source: str | None = "auto"
            prefilled += 1
        else:
            confirmed, new_source = None, None

        enhanced.append(
            current.model_copy(
                update={
                    "user_confirmed": confirmed,
                    "auto_assessment": assessment,
                    "resume_evidence": resume_evidence,
                    "confirmation_source": new_source,
                }
            )
        )

    logger.debug("knockouts_enhanced count=%s prefilled=%s", len(enhanced), prefilled)
    return enhanced


def apply_user_confirmations(
    items: Iterable[KnockoutItem],
    confirmations: Mapping[str, bool | None],
) -> list[EnhancedKnockoutItem]:
    """Merge externally held user choices by item id.

    A value of None clears an earlier user choice.
    """
    merged: list[EnhancedKnockoutItem] = []
    for item in items:
        current = _as_enhanced(item)
        if item.id in confirmations:
            value = confirmations[item.id]
            current = current.model_copy(
                update={
                    "user_confirmed": value,
                    "confirmation_source": "user" if value is not None else None,
                }
            )
        merged.append(current)
    return merged
