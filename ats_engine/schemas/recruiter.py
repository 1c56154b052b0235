from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FactorScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    weight: float = Field(ge=0.0, le=1.0)
    details: str


class RecruiterSearchBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword_match: FactorScore
    title_alignment: FactorScore
    skills_coverage: FactorScore
    industry_terms: FactorScore

    def factors(self) -> dict[str, FactorScore]:
        return {
            "keyword_match": self.keyword_match,
            "title_alignment": self.title_alignment,
            "skills_coverage": self.skills_coverage,
            "industry_terms": self.industry_terms,
        }


class RecruiterSearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    breakdown: RecruiterSearchBreakdown
    matched_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    matched_titles: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
