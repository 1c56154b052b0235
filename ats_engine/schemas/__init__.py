from .artifact import ExtractionMeta, PdfLayoutSignals, ResumeAnalysis, ResumeArtifact, Scores
from .findings import Finding, FindingCategory, FindingLocation, FindingSeverity
from .keywords import CoverageResult, KeywordSet
from .knockouts import (
    KNOCKOUT_CATEGORY_ORDER,
    AutoAssessment,
    EnhancedKnockoutItem,
    KnockoutCategory,
    KnockoutItem,
    KnockoutRiskResult,
    make_knockout_id,
    normalize_evidence,
)
from .recruiter import FactorScore, RecruiterSearchBreakdown, RecruiterSearchResult
from .report import AnalysisReport, GuidanceInput, GuidanceItem
from .semantic import SemanticMatchConfig, SemanticMatchResult
from .vendors import ATSVendor, ATSVendorType, VendorDetectionResult, VendorGuidance

__all__ = [
    "Finding",
    "FindingCategory",
    "FindingLocation",
    "FindingSeverity",
    "PdfLayoutSignals",
    "ExtractionMeta",
    "ResumeArtifact",
    "Scores",
    "ResumeAnalysis",
    "KeywordSet",
    "CoverageResult",
    "KNOCKOUT_CATEGORY_ORDER",
    "KnockoutCategory",
    "KnockoutItem",
    "AutoAssessment",
    "EnhancedKnockoutItem",
    "KnockoutRiskResult",
    "make_knockout_id",
    "normalize_evidence",
    "FactorScore",
    "RecruiterSearchBreakdown",
    "RecruiterSearchResult",
    "GuidanceInput",
    "GuidanceItem",
    "AnalysisReport",
    "SemanticMatchConfig",
    "SemanticMatchResult",
    "ATSVendor",
    "ATSVendorType",
    "VendorDetectionResult",
    "VendorGuidance",
]
