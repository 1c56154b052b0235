from .analysis.coverage import calculate_coverage
from .analysis.experience import detect_experience_knockout
from .analysis.guidance import generate_guidance
from .analysis.keywords import extract_keywords
from .analysis.knockout_enhancer import apply_user_confirmations, enhance_knockouts_with_resume
from .analysis.knockout_risk import calculate_knockout_risk
from .analysis.knockouts import detect_knockouts
from .analysis.parse_health import analyze_resume
from .analysis.recruiter_search import calculate_recruiter_search
from .analysis.vendors import detect_ats_vendor, extract_company_from_url
from .core.errors import AnalysisError, InvalidInputError, PatternEngineError, SemanticProviderError
from .pipeline import run_analysis
from .schemas import (
    AnalysisReport,
    CoverageResult,
    EnhancedKnockoutItem,
    Finding,
    GuidanceInput,
    GuidanceItem,
    KeywordSet,
    KnockoutItem,
    KnockoutRiskResult,
    RecruiterSearchResult,
    ResumeAnalysis,
    ResumeArtifact,
    Scores,
    SemanticMatchConfig,
    SemanticMatchResult,
    VendorDetectionResult,
)
from .semantic import run_semantic_match

__version__ = "0.1.0"

__all__ = [
    "analyze_resume",
    "extract_keywords",
    "calculate_coverage",
    "detect_knockouts",
    "detect_experience_knockout",
    "enhance_knockouts_with_resume",
    "apply_user_confirmations",
    "calculate_knockout_risk",
    "calculate_recruiter_search",
    "detect_ats_vendor",
    "extract_company_from_url",
    "generate_guidance",
    "run_analysis",
    "run_semantic_match",
    "AnalysisError",
    "InvalidInputError",
    "PatternEngineError",
    "SemanticProviderError",
    "AnalysisReport",
    "CoverageResult",
    "EnhancedKnockoutItem",
    "Finding",
    "GuidanceInput",
    "GuidanceItem",
    "KeywordSet",
    "KnockoutItem",
    "KnockoutRiskResult",
    "RecruiterSearchResult",
    "ResumeAnalysis",
    "ResumeArtifact",
    "Scores",
    "SemanticMatchConfig",
    "SemanticMatchResult",
    "VendorDetectionResult",
]
