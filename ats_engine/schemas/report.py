from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .artifact import Scores
from .findings import Finding
from .keywords import CoverageResult, KeywordSet
from .knockouts import EnhancedKnockoutItem, KnockoutRisk, KnockoutRiskResult
from .recruiter import RecruiterSearchResult
from .semantic import SemanticMatchResult
from .vendors import ATSVendor, VendorDetectionResult

GuidancePriority = Literal["critical", "important", "suggested"]
GuidanceActionTarget = Literal["findings", "jobmatch", "ai-settings"]


class GuidanceInput(BaseModel):
    parse_health: int = Field(ge=0, le=100)
    knockout_risk: KnockoutRisk | None = None
    knockout_count: int = Field(default=0, ge=0)
    semantic_match: int | None = Field(default=None, ge=0, le=100)
    recruiter_search: int | None = Field(default=None, ge=0, le=100)
    keyword_coverage: int | None = Field(default=None, ge=0, le=100)
    has_job_description: bool = False
    has_api_key: bool = False
    ats_vendor: ATSVendor | None = None


class GuidanceItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    priority: GuidancePriority
    title: str
    description: str
    action_label: str
    action_target: GuidanceActionTarget


class AnalysisReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    scores: Scores
    findings: list[Finding] = Field(default_factory=list)
    keywords: KeywordSet | None = None
    coverage: CoverageResult | None = None
    knockouts: list[EnhancedKnockoutItem] = Field(default_factory=list)
    knockout_risk: KnockoutRiskResult | None = None
    recruiter_search: RecruiterSearchResult | None = None
    semantic_match: SemanticMatchResult | None = None
    ats_vendor: VendorDetectionResult | None = None
    guidance: list[GuidanceItem] = Field(default_factory=list)

    @property
    def has_job_analysis(self) -> bool:
        return self.keywords is not None
