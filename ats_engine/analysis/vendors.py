"""Applicant tracking system detection from a job posting URL.

Knowing whether an employer's system ranks candidates automatically
(``sorter``) or leaves the search to recruiters (``processor``) tells the
candidate which scores deserve the most attention.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import parse_qs, urlparse

from ats_engine.core.errors import InvalidInputError
from ats_engine.schemas.vendors import (
    ATSVendor,
    ATSVendorType,
    DetectionConfidence,
    ScoreName,
    VendorDetectionResult,
    VendorGuidance,
)

logger = logging.getLogger(__name__)

_PROCESSOR_FOCUS = ["Parse Health", "Recruiter Search"]
_SORTER_FOCUS = ["Semantic Match", "Parse Health"]
_JOB_BOARD_FOCUS = ["Parse Health", "Recruiter Search", "Knockout Risk"]


def _vendor(
    vendor_id: str,
    name: str,
    vendor_type: ATSVendorType,
    description: str,
    focus: list[str],
    explanation: str,
    ai_addon: str | None = None,
) -> ATSVendor:
    return ATSVendor(
        id=vendor_id,
        name=name,
        type=vendor_type,
        ai_addon=ai_addon,
        description=description,
        guidance=VendorGuidance(focus=focus, explanation=explanation),
    )


ATS_VENDORS: dict[str, ATSVendor] = {
    vendor.id: vendor
    for vendor in (
        _vendor(
            "greenhouse",
            "Greenhouse",
            "processor",
            "Pure database system. Recruiters manually search and review candidates.",
            _PROCESSOR_FOCUS,
            "Greenhouse does not auto-rank candidates. Recruiters use Boolean search to filter. "
            "Focus on clean parsing and exact keyword matches.",
        ),
        _vendor(
            "workday",
            "Workday",
            "sorter",
            "AI-powered ranking system. Candidates are scored A/B/C/D based on fit.",
            _SORTER_FOCUS,
            "Workday uses HiredScore AI to rank candidates. Semantic alignment with the job description "
            "is critical. Recruiters see AI-generated scores.",
            ai_addon="HiredScore",
        ),
        _vendor(
            "lever",
            "Lever",
            "processor",
            "CRM-style system. Recruiters manually review candidates or search.",
            _PROCESSOR_FOCUS,
            "Lever is a CRM for recruiting with no AI ranking. Focus on being findable via search "
            "and having a cleanly parsed resume.",
        ),
        _vendor(
            "icims",
            "iCIMS",
            "sorter",
            "Enterprise ATS with AI-powered Role Fit scoring.",
            _SORTER_FOCUS,
            "iCIMS uses Role Fit AI to compare candidates to ideal profiles. Skills and experience "
            "alignment are weighted heavily.",
            ai_addon="Talent Cloud AI",
        ),
        _vendor(
            "taleo",
            "Taleo",
            "sorter",
            "Legacy Oracle ATS with automated scoring features.",
            _PROCESSOR_FOCUS,
            "Taleo is an older system that relies more on exact keyword matching than semantic "
            "understanding. Ensure key terms appear verbatim.",
            ai_addon="ACE (Automated Candidate Evaluation)",
        ),
        _vendor(
            "ashby",
            "Ashby",
            "processor",
            "Modern ATS focused on recruiter workflow. No AI ranking.",
            _PROCESSOR_FOCUS,
            "Ashby prioritizes clean data and recruiter experience. Human recruiters make all decisions. "
            "Focus on parse quality and keywords.",
        ),
        _vendor(
            "bamboohr",
            "BambooHR",
            "processor",
            "HR software with basic ATS functionality. No AI scoring.",
            _PROCESSOR_FOCUS,
            "BambooHR is primarily HR software with built-in recruiting. Simple filtering and manual "
            "review. Focus on clean formatting.",
        ),
        _vendor(
            "jazzhr",
            "JazzHR",
            "processor",
            "SMB-focused ATS. Simple applicant tracking without AI.",
            _PROCESSOR_FOCUS,
            "JazzHR is designed for small businesses. Manual review is the norm. Ensure your resume "
            "parses cleanly and contains relevant keywords.",
        ),
        _vendor(
            "jobvite",
            "Jobvite",
            "processor",
            "Recruiting platform focused on referrals and CRM.",
            _PROCESSOR_FOCUS,
            "Jobvite emphasizes referrals and candidate relationship management. No AI ranking by "
            "default. Focus on searchability.",
        ),
        _vendor(
            "smartrecruiters",
            "SmartRecruiters",
            "processor",
            "Enterprise recruiting platform with optional AI features.",
            ["Parse Health", "Semantic Match"],
            "SmartRecruiters has optional AI scoring. If enabled, semantic match matters. Otherwise, "
            "focus on keywords and parse quality.",
            ai_addon="SmartAssistant (optional)",
        ),
        _vendor(
            "indeed",
            "Indeed",
            "processor",
            "Job board with Easy Apply. Applications go to the employer's email or their ATS.",
            _JOB_BOARD_FOCUS,
            "Indeed is a job board, not an ATS. Your application is forwarded to the employer. Focus on "
            "keyword matching and meeting all requirements since the employer may use any ATS.",
        ),
        _vendor(
            "linkedin",
            "LinkedIn",
            "processor",
            "Professional network with Easy Apply. Applications forwarded to employer.",
            _JOB_BOARD_FOCUS,
            "LinkedIn Easy Apply sends your profile to the employer. The company may use any ATS to "
            "process applications. Focus on keywords and requirements.",
        ),
        _vendor(
            "ziprecruiter",
            "ZipRecruiter",
            "sorter",
            "Job board with AI matching that ranks candidates for employers.",
            _SORTER_FOCUS,
            "ZipRecruiter uses AI to match and rank candidates. Semantic alignment with job requirements "
            "improves your visibility to employers.",
            ai_addon="TrafficBoost AI",
        ),
        _vendor(
            "glassdoor",
            "Glassdoor",
            "processor",
            "Job board with company reviews. Applications forwarded to employer.",
            _JOB_BOARD_FOCUS,
            "Glassdoor forwards applications to employers who may use various ATS systems. Focus on "
            "universal best practices.",
        ),
    )
}

# Checked in order; the first match wins.
_URL_PATTERNS: tuple[tuple[str, re.Pattern[str], DetectionConfidence], ...] = tuple(
    (vendor_id, re.compile(source, re.IGNORECASE), confidence)
    for vendor_id, source, confidence in (
        ("greenhouse", r"boards\.greenhouse\.io", "high"),
        ("greenhouse", r"job-boards\.greenhouse\.io", "high"),
        ("greenhouse", r"greenhouse\.io/embed/job_board", "high"),
        ("workday", r"\.wd\d+\.myworkdayjobs\.com", "high"),
        ("workday", r"myworkdayjobs\.com", "high"),
        ("workday", r"workday\.com/.*/job", "medium"),
        ("lever", r"jobs\.lever\.co", "high"),
        ("lever", r"lever\.co/.*/postings", "high"),
        ("icims", r"careers.*\.icims\.com", "high"),
        ("icims", r"\.icims\.com", "high"),
        ("taleo", r"\.taleo\.net", "high"),
        ("taleo", r"taleo\.com", "medium"),
        ("ashby", r"jobs\.ashbyhq\.com", "high"),
        ("ashby", r"ashbyhq\.com.*/jobs", "high"),
        ("bamboohr", r"\.bamboohr\.com/careers", "high"),
        ("bamboohr", r"\.bamboohr\.com/jobs", "high"),
        ("jazzhr", r"\.applytojob\.com", "high"),
        ("jazzhr", r"app\.jazz\.co", "high"),
        ("jobvite", r"jobs\.jobvite\.com", "high"),
        ("jobvite", r"\.jobvite\.com", "medium"),
        ("smartrecruiters", r"jobs\.smartrecruiters\.com", "high"),
        ("smartrecruiters", r"\.smartrecruiters\.com", "medium"),
        ("indeed", r"indeed\.com/viewjob", "high"),
        ("indeed", r"indeed\.com/job/", "high"),
        ("indeed", r"indeed\.com/cmp/", "high"),
        ("indeed", r"indeed\.com/jobs", "medium"),
        ("indeed", r"\.indeed\.com", "medium"),
        ("linkedin", r"linkedin\.com/jobs/view", "high"),
        ("linkedin", r"linkedin\.com/job/", "high"),
        ("ziprecruiter", r"ziprecruiter\.com/jobs", "high"),
        ("ziprecruiter", r"ziprecruiter\.com/c/", "high"),
        ("glassdoor", r"glassdoor\.com/job-listing", "high"),
        ("glassdoor", r"glassdoor\.com/job", "medium"),
    )
)

# Hosts whose first path segment names the employer.
_PATH_COMPANY_HOSTS = ("greenhouse.io", "lever.co", "ashbyhq.com", "smartrecruiters.com")
_ICIMS_COMPANY_RE = re.compile(r"^careers-?([^.]+)")

_ALL_SCORES: tuple[ScoreName, ...] = ("parse_health", "knockout_risk", "semantic_match", "recruiter_search")


def _check_url(url: object) -> str | None:
    if url is None:
        return None
    if not isinstance(url, str):
        raise InvalidInputError(f"'job_url' must be a string, got {type(url).__name__}.", field="job_url")
    return url.strip() or None


def extract_company_from_url(url: str | None) -> str | None:
    """Employer slug for hosted job boards, e.g. ``acme`` for ``jobs.lever.co/acme/...``."""
    url = _check_url(url)
    if url is None:
        return None
    parts = urlparse(url)
    hostname = parts.hostname or ""
    if not parts.scheme or not hostname:
        return None
    segments = [segment for segment in parts.path.split("/") if segment]

    if "greenhouse.io" in hostname and segments[:1] == ["embed"]:
        board = parse_qs(parts.query).get("for")
        return board[0] if board else None
    if any(host in hostname for host in _PATH_COMPANY_HOSTS):
        return segments[0] if segments else None
    if "myworkdayjobs.com" in hostname:
        return hostname.split(".", 1)[0]
    if "icims.com" in hostname:
        match = _ICIMS_COMPANY_RE.match(hostname)
        return match.group(1) if match else None
    return None


def detect_ats_vendor(url: str | None) -> VendorDetectionResult:
    """Match a job posting URL against known ATS and job board URL patterns."""
    url = _check_url(url)
    if url is None:
        return VendorDetectionResult(detected=False)

    normalized = url.lower()
    for vendor_id, pattern, confidence in _URL_PATTERNS:
        if pattern.search(normalized):
            vendor = ATS_VENDORS[vendor_id]
            logger.debug("ats_vendor_detected vendor=%s confidence=%s", vendor.id, confidence)
            return VendorDetectionResult(
                detected=True,
                vendor=vendor,
                confidence=confidence,
                matched_pattern=pattern.pattern,
                company=extract_company_from_url(url),
            )
    logger.debug("ats_vendor_unknown")
    return VendorDetectionResult(detected=False)


def unknown_vendor_guidance() -> VendorGuidance:
    return VendorGuidance(
        focus=list(_JOB_BOARD_FOCUS),
        explanation=(
            "The ATS vendor could not be detected. Focus on universal best practices: clean formatting "
            "for parsing, exact keyword matches, and verifying you meet all requirements."
        ),
    )


def relevant_scores(vendor_type: ATSVendorType | None) -> list[ScoreName]:
    if vendor_type == "sorter":
        return ["parse_health", "semantic_match", "knockout_risk"]
    if vendor_type == "processor":
        return ["parse_health", "recruiter_search", "knockout_risk"]
    return list(_ALL_SCORES)


def is_semantic_match_relevant(vendor: ATSVendor | None) -> bool:
    # Unknown vendors keep every score relevant.
    return vendor is None or vendor.type == "sorter"


def is_recruiter_search_relevant(vendor: ATSVendor | None) -> bool:
    return vendor is None or vendor.type == "processor"
