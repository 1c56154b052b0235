from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .findings import Finding

FileType = Literal["pdf", "docx", "txt"]
RiskLevel = Literal["low", "medium", "high"]


class PdfLayoutSignals(BaseModel):
    model_config = ConfigDict(frozen=True)

    estimated_columns: Literal[1, 2, 3] = 1
    column_merge_risk: RiskLevel = "low"
    header_contact_risk: RiskLevel = "low"
    text_density: RiskLevel = "high"


class ExtractionMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    char_count: int = Field(default=0, ge=0)
    page_count: int | None = Field(default=None, ge=0)
    extraction_warnings: list[str] = Field(default_factory=list)
    pdf_signals: PdfLayoutSignals | None = None


class ResumeArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: str = ""
    file_type: FileType
    file_size_bytes: int = Field(ge=0)
    extracted_text: str
    extraction_meta: ExtractionMeta

    @field_validator("file_type", mode="before")
    @classmethod
    def _normalize_file_type(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower().lstrip(".")
        return value


class Scores(BaseModel):
    model_config = ConfigDict(frozen=True)

    parse_health: int = Field(ge=0, le=100)
    layout_score: int = Field(ge=0, le=100)
    contact_score: int = Field(ge=0, le=100)
    section_score: int = Field(ge=0, le=100)


class ResumeAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    scores: Scores
    findings: list[Finding] = Field(default_factory=list)
