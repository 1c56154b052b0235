"""Parse-health scoring: how reliably an ATS will extract a resume's structure.

Three independent dimensions are scored from 100 downwards:

* layout: extraction quality plus PDF layout signals when the parser supplied them
* contact: email, phone, LinkedIn and location detection
* section: canonical section headings, date anchoring and content quality

``parse_health`` is the weighted mean of the three and depends on nothing else.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ats_engine.core.config import get_scoring_value
from ats_engine.core.errors import InvalidInputError, invalid_input_from_validation
from ats_engine.normalize.utils import heading_key, looks_like_heading, normalize_line
from ats_engine.schemas.artifact import PdfLayoutSignals, ResumeAnalysis, ResumeArtifact, Scores
from ats_engine.schemas.findings import Finding, FindingLocation

from . import vocabulary
from .findings import sort_findings

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,}")
_PHONE_RE = re.compile(r"(?<!\d)(?:\+\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")
_LINKEDIN_RE = re.compile(r"linkedin\.com/in/[\w-]+", re.IGNORECASE)
_LOCATION_RE = re.compile(r"\b[A-Z][a-z]+(?: [A-Z][a-z]+)?, ?[A-Z]{2}\b")

_MONTHS = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"
_STANDARD_DATE_RES: tuple[re.Pattern[str], ...] = (
    re.compile(rf"\b{_MONTHS}\s*(?:19|20)\d{{2}}\b", re.IGNORECASE),
    re.compile(r"\b(?:0?[1-9]|1[0-2])[/-](?:19|20)\d{2}\b"),
    re.compile(r"\b(?:19|20)\d{2}\s*[-–—]\s*(?:present|current|now)\b", re.IGNORECASE),
)
_SEASON_DATE_RE = re.compile(r"\b(?:summer|fall|autumn|winter|spring)\s*(?:19|20)\d{2}\b", re.IGNORECASE)
_BARE_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_WORD_RE = re.compile(r"[a-z][a-z'+#.-]*[a-z+#]|[a-z]")


def _cfg(path: str, default: float) -> float:
    return float(get_scoring_value(f"parse_health.{path}", default))


def _clamp_score(value: float) -> int:
    return max(0, min(100, int(round(value))))


def _finding(
    finding_id: str,
    severity: str,
    category: str,
    title: str,
    description: str,
    impact: str,
    suggestion: str | None = None,
    section: str | None = None,
) -> Finding:
    return Finding(
        id=finding_id,
        severity=severity,
        category=category,
        title=title,
        description=description,
        impact=impact,
        suggestion=suggestion,
        location=FindingLocation(section=section) if section else None,
    )


def coerce_artifact(artifact: ResumeArtifact | Mapping[str, Any]) -> ResumeArtifact:
    if isinstance(artifact, ResumeArtifact):
        return artifact
    if isinstance(artifact, Mapping):
        try:
            return ResumeArtifact.model_validate(dict(artifact))
        except ValidationError as exc:
            raise invalid_input_from_validation(exc, root="artifact") from exc
    raise InvalidInputError(
        f"artifact must be a ResumeArtifact or mapping, got {type(artifact).__name__}.",
        field="artifact",
    )


def compute_parse_health(layout_score: int, contact_score: int, section_score: int) -> int:
    weights = (
        _cfg("weights.layout", 0.40),
        _cfg("weights.contact", 0.30),
        _cfg("weights.section", 0.30),
    )
    total_weight = sum(weights)
    if total_weight <= 0:
        raise RuntimeError("parse_health weights must sum to a positive value.")
    weighted = weights[0] * layout_score + weights[1] * contact_score + weights[2] * section_score
    return _clamp_score(weighted / total_weight)


# --- layout ---------------------------------------------------------------


def _check_content(text: str) -> tuple[int, list[Finding]]:
    char_count = len(text.strip())
    word_count = len(text.split())
    if char_count < _cfg("content.very_short_chars", 200):
        return int(_cfg("layout_penalties.very_short_content", 40)), [
            _finding(
                "very-short-content",
                "critical",
                "extraction",
                "Very Little Text Extracted",
                f"Only {char_count} characters ({word_count} words) were extracted.",
                "The file may be image-based or the parser could not read it. ATS systems will see an almost empty resume.",
                "Export the resume as a text-based PDF or DOCX rather than a scan or image.",
            )
        ]
    if char_count < _cfg("content.short_chars", 500) or word_count < _cfg("content.short_words", 100):
        return int(_cfg("layout_penalties.short_content", 15)), [
            _finding(
                "short-content",
                "high",
                "extraction",
                "Limited Text Extracted",
                f"Only {word_count} words were extracted.",
                "Short resumes give ATS keyword searches little to match against.",
                "Make sure every section is selectable text and describe your experience in full sentences or bullets.",
            )
        ]
    return 0, []


def _check_extraction(text: str, warnings: list[str]) -> tuple[int, list[Finding]]:
    penalty = 0
    findings: list[Finding] = []
    if warnings:
        penalty += int(_cfg("layout_penalties.extraction_warning", 5)) * min(len(warnings), 3)
        findings.append(
            _finding(
                "extraction-warnings",
                "medium",
                "extraction",
                "Extraction Warnings",
                f"The parser reported {len(warnings)} warning(s): {'; '.join(warnings[:3])}.",
                "Parts of the resume may be missing or garbled in the ATS copy.",
                "Check the plain-text preview for missing or scrambled content.",
            )
        )
    long_limit = int(_cfg("content.long_line_chars", 200))
    long_lines = sum(1 for line in text.splitlines() if len(line) > long_limit)
    if long_lines > int(_cfg("content.long_line_limit", 3)):
        penalty += int(_cfg("layout_penalties.long_lines", 8))
        findings.append(
            _finding(
                "potential-table-content",
                "medium",
                "formatting",
                "Possible Table or Complex Layout",
                f"Found {long_lines} unusually long text lines.",
                "Tables are often linearized into long lines, which can separate dates from job titles.",
                "Convert tables into simple bulleted lists.",
            )
        )
    return penalty, findings


def _check_pdf_signals(signals: PdfLayoutSignals, *, header_only_contact: bool) -> tuple[int, list[Finding]]:
    penalty = 0
    findings: list[Finding] = []

    if signals.estimated_columns > 1:
        three = signals.estimated_columns >= 3
        penalty += int(_cfg("layout_penalties.three_columns", 30) if three else _cfg("layout_penalties.two_columns", 15))
        findings.append(
            _finding(
                "multi-column-layout",
                "high" if three else "medium",
                "layout",
                f"{signals.estimated_columns}-Column Layout Detected",
                f"The PDF appears to use {signals.estimated_columns} text columns.",
                "Many ATS parsers read straight across the page and interleave text from adjacent columns.",
                "Use a single-column layout for the main content.",
            )
        )

    if signals.column_merge_risk != "low":
        high = signals.column_merge_risk == "high"
        penalty += int(
            _cfg("layout_penalties.column_merge_high", 25) if high else _cfg("layout_penalties.column_merge_medium", 10)
        )
        findings.append(
            _finding(
                "column-merge-risk",
                "high" if high else "medium",
                "layout",
                "Text May Merge Across Columns",
                f"Column merge risk is {signals.column_merge_risk}.",
                "Merged lines can attach dates and titles to the wrong job.",
                "Avoid side-by-side text blocks; keep one item per line.",
            )
        )

    if signals.text_density != "high":
        low = signals.text_density == "low"
        penalty += int(
            _cfg("layout_penalties.text_density_low", 25) if low else _cfg("layout_penalties.text_density_medium", 10)
        )
        findings.append(
            _finding(
                "low-text-density",
                "high" if low else "medium",
                "layout",
                "Low Text Density",
                f"Text density is {signals.text_density}; parts of the page may be graphics or images.",
                "Content inside images, icons or text boxes is usually invisible to an ATS.",
                "Replace graphics that carry information with plain text.",
            )
        )

    if signals.header_contact_risk != "low" and not header_only_contact:
        high = signals.header_contact_risk == "high"
        penalty += int(
            _cfg("layout_penalties.header_risk_high", 15) if high else _cfg("layout_penalties.header_risk_medium", 8)
        )
        findings.append(
            _finding(
                "header-footer-content",
                "medium" if high else "low",
                "layout",
                "Content in Page Header or Footer",
                "Some text sits in the PDF header or footer area.",
                "Several ATS parsers skip header and footer regions entirely.",
                "Move important content into the main body of the page.",
            )
        )
    return penalty, findings


def _score_layout(artifact: ResumeArtifact, *, header_only_contact: bool) -> tuple[int, list[Finding]]:
    text = artifact.extracted_text
    penalty, findings = _check_content(text)
    extraction_penalty, extraction_findings = _check_extraction(text, artifact.extraction_meta.extraction_warnings)
    penalty += extraction_penalty
    findings.extend(extraction_findings)

    signals = artifact.extraction_meta.pdf_signals
    if signals is not None:
        signal_penalty, signal_findings = _check_pdf_signals(signals, header_only_contact=header_only_contact)
        penalty += signal_penalty
        findings.extend(signal_findings)

    if not findings:
        findings.append(
            _finding(
                "layout-ok",
                "info",
                "layout",
                "Layout Parses Cleanly",
                "No extraction or layout problems were detected.",
                "ATS parsers should read the resume in the intended order.",
            )
        )
    return _clamp_score(100 - penalty), findings


# --- contact --------------------------------------------------------------


def _header_zone_only(lines: list[str], patterns: tuple[re.Pattern[str], ...]) -> bool:
    zone = int(_cfg("header_zone_lines", 4))
    hit_indexes = [index for index, line in enumerate(lines) if any(p.search(line) for p in patterns)]
    if not hit_indexes:
        return False
    body = range(zone, max(zone, len(lines) - zone))
    return not any(index in body for index in hit_indexes)


def _score_contact(text: str, signals: PdfLayoutSignals | None) -> tuple[int, list[Finding], bool]:
    penalty = 0
    findings: list[Finding] = []
    has_email = bool(_EMAIL_RE.search(text))
    has_phone = bool(_PHONE_RE.search(text))
    has_linkedin = bool(_LINKEDIN_RE.search(text))
    has_location = bool(_LOCATION_RE.search(text))

    missing = (
        (has_email, "missing-email", "high", "missing_email", 40, "No Email Address Found",
         "Recruiters cannot reach you and many ATS profiles require an email."),
        (has_phone, "missing-phone", "medium", "missing_phone", 30, "No Phone Number Found",
         "Most ATS candidate profiles expect a phone number."),
        (has_linkedin, "missing-linkedin", "low", "missing_linkedin", 15, "No LinkedIn Profile Found",
         "Recruiters commonly cross-check candidates on LinkedIn."),
        (has_location, "missing-location", "low", "missing_location", 10, "No Location Found",
         "Location filters in recruiter searches may exclude your resume."),
    )
    for present, finding_id, severity, penalty_key, default, title, impact in missing:
        if present:
            continue
        penalty += int(_cfg(f"contact_penalties.{penalty_key}", default))
        findings.append(
            _finding(
                finding_id,
                severity,
                "contact",
                title,
                f"{title.removeprefix('No ').removesuffix(' Found')} was not detected in the extracted text.",
                impact,
                "Add it as plain text near the top of the resume body.",
            )
        )

    lines = text.splitlines()
    header_only = (has_email or has_phone) and _header_zone_only(lines, (_EMAIL_RE, _PHONE_RE))
    risky_header = header_only and signals is not None and signals.header_contact_risk == "high"
    if risky_header:
        penalty += int(_cfg("contact_penalties.header_only", 20))
        findings.append(
            _finding(
                "contact-in-header",
                "high",
                "contact",
                "Contact Details Only in Page Header",
                "Your email and phone appear only in the header or footer area of the PDF.",
                "ATS parsers that skip page headers will record the resume with no contact details.",
                "Repeat the contact details in the first lines of the page body.",
            )
        )

    if not findings:
        findings.append(
            _finding(
                "contact-ok",
                "info",
                "contact",
                "Contact Information Found",
                "Email, phone, LinkedIn and location were all detected.",
                "ATS profiles will be populated with your contact details.",
            )
        )
    return _clamp_score(100 - penalty), findings, risky_header


# --- sections -------------------------------------------------------------


def detect_sections(text: str) -> list[str]:
    """Canonical section names whose heading appears in ``text``, in order of appearance."""
    found: list[str] = []
    for line in text.splitlines():
        if not normalize_line(line) or len(normalize_line(line)) > 60:
            continue
        key = heading_key(line)
        for section, patterns in vocabulary.SECTION_PATTERNS.items():
            if section in found:
                continue
            if any(pattern.fullmatch(key) for pattern in patterns):
                found.append(section)
                break
    return found


def _check_sections(text: str) -> tuple[int, list[Finding]]:
    found = detect_sections(text)
    missing_core = [section for section in vocabulary.CORE_SECTIONS if section not in found]
    core_found = len(vocabulary.CORE_SECTIONS) - len(missing_core)
    if not missing_core:
        return 0, []

    if core_found == 0:
        unrecognized = sum(1 for line in text.splitlines() if looks_like_heading(line))
        detail = f" {unrecognized} heading-like line(s) did not match a standard name." if unrecognized else ""
        return int(_cfg("section_penalties.none_found", 40)), [
            _finding(
                "no-standard-sections",
                "high",
                "structure",
                "No Standard Section Headings",
                "None of Experience, Education or Skills headings were recognized." + detail,
                "ATS parsers segment a resume by its headings; without them content may land in the wrong fields.",
                "Use plain headings such as 'Experience', 'Education' and 'Skills'.",
            )
        ]

    penalty_key, default = ("one_found", 25) if core_found == 1 else ("two_found", 10)
    names = ", ".join(section.capitalize() for section in missing_core)
    return int(_cfg(f"section_penalties.{penalty_key}", default)), [
        _finding(
            "missing-sections",
            "medium",
            "structure",
            "Missing Standard Sections",
            f"Could not find these sections: {names}.",
            "Content without a recognizable heading may be dropped or misfiled by the ATS.",
            f"Add a clearly labeled {names} section.",
            section=missing_core[0],
        )
    ]


def _check_dates(text: str) -> tuple[int, list[Finding]]:
    standard = 0
    remainder = text
    for pattern in _STANDARD_DATE_RES:
        standard += len(pattern.findall(remainder))
        remainder = pattern.sub(" ", remainder)
    seasons = len(_SEASON_DATE_RE.findall(remainder))
    remainder = _SEASON_DATE_RE.sub(" ", remainder)
    ambiguous = seasons + len(_BARE_YEAR_RE.findall(remainder))

    if standard == 0 and ambiguous == 0:
        return int(_cfg("section_penalties.no_dates", 10)), [
            _finding(
                "no-date-anchors",
                "high",
                "structure",
                "No Dates Found",
                "Could not detect any employment or education dates.",
                "ATS systems compute years of experience from dates; without them you may appear to have none.",
                "Add dates to each role, for example '06/2021 - Present'.",
                section="experience",
            )
        ]
    if standard < ambiguous:
        return int(_cfg("section_penalties.ambiguous_dates", 5)), [
            _finding(
                "ambiguous-dates",
                "medium",
                "structure",
                "Ambiguous Date Formats",
                f"Found {ambiguous} season or year-only dates and {standard} month-level dates.",
                "Parsers may miscalculate tenure from dates like 'Summer 2022' or '2019'.",
                "Use month and year for every date, for example 'Jun 2022' or '06/2022'.",
                section="experience",
            )
        ]
    return 0, []


def _check_content_quality(text: str) -> tuple[int, list[Finding]]:
    penalty = 0
    findings: list[Finding] = []
    lowered = text.lower()
    words = _WORD_RE.findall(lowered)

    if len(words) > int(_cfg("content.short_words", 100)):
        verbs = [verb for verb in vocabulary.ACTION_VERBS if re.search(rf"\b{verb}\b", lowered)]
        if not verbs:
            penalty += int(_cfg("section_penalties.no_action_verbs", 5))
            findings.append(
                _finding(
                    "no-action-verbs",
                    "low",
                    "structure",
                    "Few Action Verbs",
                    "No common action verbs such as 'developed' or 'led' were found.",
                    "Action verbs help recruiters and ATS summaries identify accomplishments.",
                    "Start bullets with verbs like 'Built', 'Improved' or 'Led'.",
                )
            )

    ratio = float(get_scoring_value("keywords.stuffing_ratio", 0.05))
    counts = Counter(word for word in words if len(word) > 3 and word not in vocabulary.STOP_WORDS)
    stuffed = sorted(word for word, count in counts.items() if count > 5 and count / max(len(words), 1) > ratio)
    if stuffed:
        penalty += int(_cfg("section_penalties.keyword_stuffing", 10))
        findings.append(
            _finding(
                "keyword-stuffing",
                "medium",
                "keyword",
                "Possible Keyword Stuffing",
                f"Some words appear unusually often: {', '.join(stuffed[:5])}.",
                "Abnormally high keyword density can be flagged as spam.",
                "Use keywords naturally and in context.",
            )
        )
    return penalty, findings


def _score_sections(text: str) -> tuple[int, list[Finding]]:
    penalty = 0
    findings: list[Finding] = []
    for check in (_check_sections, _check_dates, _check_content_quality):
        check_penalty, check_findings = check(text)
        penalty += check_penalty
        findings.extend(check_findings)
    if not findings:
        findings.append(
            _finding(
                "sections-ok",
                "info",
                "structure",
                "Clear Resume Structure",
                "Standard sections and well-formatted dates were found.",
                "ATS parsers can segment your resume reliably.",
            )
        )
    return _clamp_score(100 - penalty), findings


def analyze_resume(artifact: ResumeArtifact | Mapping[str, Any]) -> ResumeAnalysis:
    artifact = coerce_artifact(artifact)
    text = artifact.extracted_text

    if not text.strip():
        logger.debug("parse_health_empty_text file_type=%s", artifact.file_type)
        return ResumeAnalysis(
            scores=Scores(parse_health=0, layout_score=0, contact_score=0, section_score=0),
            findings=[
                _finding(
                    "no-text-extracted",
                    "critical",
                    "extraction",
                    "No Text Extracted",
                    "The resume produced no extractable text.",
                    "An ATS will store an empty profile; the resume cannot be matched to any search.",
                    "Upload a text-based PDF or DOCX instead of a scanned image.",
                )
            ],
        )

    contact_score, contact_findings, header_only = _score_contact(text, artifact.extraction_meta.pdf_signals)
    layout_score, layout_findings = _score_layout(artifact, header_only_contact=header_only)
    section_score, section_findings = _score_sections(text)

    scores = Scores(
        parse_health=compute_parse_health(layout_score, contact_score, section_score),
        layout_score=layout_score,
        contact_score=contact_score,
        section_score=section_score,
    )
    findings = sort_findings([*layout_findings, *contact_findings, *section_findings])
    logger.debug(
        "parse_health_scored parse_health=%s layout=%s contact=%s section=%s findings=%s",
        scores.parse_health,
        layout_score,
        contact_score,
        section_score,
        len(findings),
    )
    return ResumeAnalysis(scores=scores, findings=findings)
