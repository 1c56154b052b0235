from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ats_engine.core.config import get_scoring_value
from ats_engine.core.errors import InvalidInputError, invalid_input_from_validation
from ats_engine.schemas.report import GuidanceInput, GuidanceItem

from .vendors import is_recruiter_search_relevant, is_semantic_match_relevant

logger = logging.getLogger(__name__)


def _threshold(name: str, default: int) -> int:
    return int(get_scoring_value(f"guidance.{name}", default))


def generate_guidance(state: GuidanceInput | Mapping[str, Any]) -> list[GuidanceItem]:
    """Prioritized next steps for the current analysis state.

    Rules are evaluated in priority order, so the returned list is already
    ranked: critical items first, then important, then suggested. A healthy
    resume with nothing to fix gets a single positive item.
    """
    if isinstance(state, Mapping):
        try:
            state = GuidanceInput.model_validate(dict(state))
        except ValidationError as exc:
            raise invalid_input_from_validation(exc, root="guidance") from exc
    elif not isinstance(state, GuidanceInput):
        raise InvalidInputError(
            f"guidance input must be a GuidanceInput or mapping, got {type(state).__name__}.",
            field="guidance",
        )

    parse_critical = _threshold("parse_critical", 40)
    parse_moderate = _threshold("parse_moderate", 60)
    items: list[GuidanceItem] = []

    if state.parse_health < parse_critical:
        items.append(
            GuidanceItem(
                id="parse-critical",
                priority="critical",
                title="Major parsing issues detected",
                description=(
                    "ATS software will struggle to read your resume. "
                    "Fix layout and formatting issues before submitting applications."
                ),
                action_label="View issues",
                action_target="findings",
            )
        )

    if state.knockout_risk == "high" and state.knockout_count:
        plural = "s" if state.knockout_count > 1 else ""
        items.append(
            GuidanceItem(
                id="knockout-critical",
                priority="critical",
                title=f"{state.knockout_count} potential disqualifier{plural} found",
                description="These requirements could auto-reject your application. Review them before applying.",
                action_label="Review knockouts",
                action_target="jobmatch",
            )
        )

    if parse_critical <= state.parse_health < parse_moderate:
        items.append(
            GuidanceItem(
                id="parse-moderate",
                priority="important",
                title="Moderate parsing issues",
                description="Some parts of your resume may not parse correctly. Fix the critical findings first.",
                action_label="View findings",
                action_target="findings",
            )
        )

    if not state.has_job_description and state.parse_health >= parse_moderate:
        items.append(
            GuidanceItem(
                id="add-jd",
                priority="important",
                title="Add a job description",
                description=(
                    "Paste the job posting to unlock keyword matching, "
                    "knockout detection and recruiter search scores."
                ),
                action_label="Add job description",
                action_target="jobmatch",
            )
        )

    if state.keyword_coverage is not None and state.keyword_coverage < _threshold("coverage_low", 50):
        items.append(
            GuidanceItem(
                id="keyword-low",
                priority="important",
                title=f"Only {state.keyword_coverage}% keyword match",
                description=(
                    "Your resume is missing many terms from the job description. "
                    "Add relevant skills and experience."
                ),
                action_label="See keywords",
                action_target="jobmatch",
            )
        )

    if state.parse_health >= parse_moderate and state.has_job_description and not state.has_api_key:
        items.append(
            GuidanceItem(
                id="unlock-ai",
                priority="suggested",
                title="Get deeper AI insights",
                description="Add your own API key to enable semantic matching against the job description.",
                action_label="Configure AI",
                action_target="ai-settings",
            )
        )

    if (
        state.semantic_match is not None
        and state.semantic_match < _threshold("semantic_low", 60)
        and is_semantic_match_relevant(state.ats_vendor)
    ):
        items.append(
            GuidanceItem(
                id="semantic-low",
                priority="suggested",
                title="Low conceptual alignment",
                description=(
                    "Your experience descriptions don't closely match the job's language. "
                    "Rewrite bullets to mirror the posting."
                ),
                action_label="See match details",
                action_target="jobmatch",
            )
        )

    if (
        state.recruiter_search is not None
        and state.recruiter_search < _threshold("recruiter_low", 50)
        and is_recruiter_search_relevant(state.ats_vendor)
    ):
        items.append(
            GuidanceItem(
                id="recruiter-low",
                priority="suggested",
                title="Low searchability score",
                description=(
                    "Recruiters searching for this role may not find you. "
                    "Use industry-standard job titles and terms."
                ),
                action_label="See search score",
                action_target="jobmatch",
            )
        )

    if not items and state.parse_health >= _threshold("healthy", 80):
        items.append(
            GuidanceItem(
                id="looking-good",
                priority="suggested",
                title="Resume is in great shape",
                description="Your resume parses well and matches the job description.",
                action_label="Fine-tune with AI",
                action_target="ai-settings",
            )
        )

    # Added last so it does not count toward the healthy-resume check.
    if state.ats_vendor is not None:
        vendor = state.ats_vendor
        items.append(
            GuidanceItem(
                id="ats-vendor",
                priority="suggested",
                title=f"This employer uses {vendor.name}",
                description=f"{vendor.guidance.explanation} Focus on: {', '.join(vendor.guidance.focus)}.",
                action_label="See focus areas",
                action_target="jobmatch",
            )
        )

    logger.debug("guidance_generated count=%s ids=%s", len(items), [item.id for item in items])
    return items
