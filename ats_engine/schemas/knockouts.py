from __future__ import annotations

import hashlib
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ats_engine.normalize.utils import normalize_text, strip_bullet_prefix

from .findings import Finding

KnockoutCategory = Literal[
    "authorization",
    "clearance",
    "certification",
    "degree",
    "location",
    "schedule",
    "physical",
    "experience",
]
AssessmentConfidence = Literal["high", "medium", "low"]
ConfirmationSource = Literal["user", "auto"]
KnockoutRisk = Literal["low", "medium", "high"]

KNOCKOUT_CATEGORY_ORDER: tuple[str, ...] = (
    "authorization",
    "clearance",
    "certification",
    "degree",
    "location",
    "schedule",
    "physical",
    "experience",
)


def normalize_evidence(evidence: str) -> str:
    return normalize_text(strip_bullet_prefix(evidence)).rstrip(" .;:,")


def make_knockout_id(category: str, evidence: str) -> str:
    """Content-derived id: re-detecting unchanged job text reproduces it exactly."""
    digest = hashlib.sha256(f"{category}|{normalize_evidence(evidence)}".encode("utf-8")).hexdigest()
    return f"ko_{digest[:16]}"


class KnockoutItem(BaseModel):
    """A requirement that can disqualify a candidate outright.

    ``user_confirmed`` is True (meets), False (fails) or None (unconfirmed).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    category: KnockoutCategory
    label: str
    evidence: str
    user_confirmed: bool | None = None


class AutoAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    likely: bool
    confidence: AssessmentConfidence
    reason: str


class EnhancedKnockoutItem(KnockoutItem):
    auto_assessment: AutoAssessment | None = None
    resume_evidence: str | None = None
    confirmation_source: ConfirmationSource | None = None


class KnockoutRiskResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    risk: KnockoutRisk
    explanation: str
    blockers: list[KnockoutItem] = Field(default_factory=list)
    unclear: list[KnockoutItem] = Field(default_factory=list)
    confirmed: list[KnockoutItem] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)
