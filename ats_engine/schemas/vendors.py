from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ATSVendorType = Literal["sorter", "processor"]
DetectionConfidence = Literal["high", "medium", "low"]
ScoreName = Literal["parse_health", "semantic_match", "knockout_risk", "recruiter_search"]


class VendorGuidance(BaseModel):
    model_config = ConfigDict(frozen=True)

    focus: list[str] = Field(default_factory=list)
    explanation: str


class ATSVendor(BaseModel):
    """An applicant tracking system or job board.

    ``sorter`` systems rank candidates automatically; ``processor`` systems
    store applications for recruiters to search and review by hand.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: ATSVendorType
    ai_addon: str | None = None
    description: str
    guidance: VendorGuidance


class VendorDetectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    detected: bool
    vendor: ATSVendor | None = None
    confidence: DetectionConfidence = "low"
    matched_pattern: str | None = None
    company: str | None = None
