"""Composes the analyzers into one report.

Order: resume analysis, then (with a job description) keywords, coverage,
knockout detection with the experience check merged in by id, resume-based
enhancement, user confirmations, knockout risk, recruiter search and finally
guidance. Without a job description the report carries resume scores and
guidance only. A job posting URL adds ATS vendor detection, which steers
guidance toward the scores that vendor relies on.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from ats_engine.analysis.coverage import calculate_coverage
from ats_engine.analysis.experience import detect_experience_knockout
from ats_engine.analysis.findings import sort_findings
from ats_engine.analysis.guidance import generate_guidance
from ats_engine.analysis.keywords import extract_keywords
from ats_engine.analysis.knockout_enhancer import apply_user_confirmations, enhance_knockouts_with_resume
from ats_engine.analysis.knockout_risk import calculate_knockout_risk
from ats_engine.analysis.knockouts import detect_knockouts
from ats_engine.analysis.parse_health import analyze_resume, coerce_artifact
from ats_engine.analysis.recruiter_search import calculate_recruiter_search
from ats_engine.analysis.vendors import detect_ats_vendor
from ats_engine.normalize.utils import require_text
from ats_engine.schemas.artifact import ResumeArtifact
from ats_engine.schemas.knockouts import KnockoutItem
from ats_engine.schemas.report import AnalysisReport, GuidanceInput
from ats_engine.schemas.semantic import SemanticMatchResult
from ats_engine.taxonomy import TaxonomyProvider

logger = logging.getLogger(__name__)


def merge_knockout_items(items: list[KnockoutItem], extra: KnockoutItem | None) -> list[KnockoutItem]:
    """Replace the item sharing ``extra``'s id, or append ``extra`` when none does."""
    if extra is None:
        return list(items)
    merged = [extra if item.id == extra.id else item for item in items]
    if not any(item.id == extra.id for item in items):
        merged.append(extra)
    return merged


def run_analysis(
    artifact: ResumeArtifact | Mapping[str, Any],
    job_text: str | None = None,
    confirmations: Mapping[str, bool | None] | None = None,
    *,
    as_of: date | None = None,
    semantic: SemanticMatchResult | None = None,
    has_api_key: bool = False,
    taxonomy: TaxonomyProvider | None = None,
    job_url: str | None = None,
) -> AnalysisReport:
    artifact = coerce_artifact(artifact)
    vendor = detect_ats_vendor(job_url) if job_url is not None else None
    ats_vendor = vendor.vendor if vendor is not None else None
    semantic_score = semantic.score if semantic is not None and semantic.success else None
    resume = analyze_resume(artifact)
    resume_text = artifact.extracted_text

    if job_text is not None:
        job_text = require_text(job_text, "job_text")
    if job_text is None or not job_text.strip():
        guidance = generate_guidance(
            GuidanceInput(
                parse_health=resume.scores.parse_health,
                semantic_match=semantic_score,
                has_job_description=False,
                has_api_key=has_api_key,
                ats_vendor=ats_vendor,
            )
        )
        logger.info("analysis_completed parse_health=%s job=false", resume.scores.parse_health)
        return AnalysisReport(
            scores=resume.scores,
            findings=resume.findings,
            semantic_match=semantic,
            ats_vendor=vendor,
            guidance=guidance,
        )

    keywords = extract_keywords(job_text)
    coverage = calculate_coverage(resume_text, keywords, taxonomy=taxonomy)

    items = merge_knockout_items(
        detect_knockouts(job_text),
        detect_experience_knockout(resume_text, job_text, as_of=as_of),
    )
    knockouts = enhance_knockouts_with_resume(items, resume_text, job_text, as_of=as_of)
    if confirmations:
        knockouts = apply_user_confirmations(knockouts, confirmations)
    risk = calculate_knockout_risk(knockouts)

    recruiter = calculate_recruiter_search(resume_text, job_text, keywords, taxonomy=taxonomy)

    guidance = generate_guidance(
        GuidanceInput(
            parse_health=resume.scores.parse_health,
            knockout_risk=risk.risk,
            knockout_count=len(risk.blockers),
            semantic_match=semantic_score,
            recruiter_search=recruiter.score,
            keyword_coverage=coverage.score,
            has_job_description=True,
            has_api_key=has_api_key,
            ats_vendor=ats_vendor,
        )
    )

    logger.info(
        "analysis_completed parse_health=%s job=true coverage=%s knockout_risk=%s recruiter=%s",
        resume.scores.parse_health,
        coverage.score,
        risk.risk,
        recruiter.score,
    )
    return AnalysisReport(
        scores=resume.scores,
        findings=sort_findings([*resume.findings, *coverage.findings, *risk.findings]),
        keywords=keywords,
        coverage=coverage,
        knockouts=knockouts,
        knockout_risk=risk,
        recruiter_search=recruiter,
        semantic_match=semantic,
        ats_vendor=vendor,
        guidance=guidance,
    )
