from __future__ import annotations

from typing import Protocol

from ats_engine.schemas.semantic import SemanticMatchConfig, SemanticMatchResult

__all__ = ["SemanticMatchConfig", "SemanticMatchProvider", "SemanticMatchResult"]


class SemanticMatchProvider(Protocol):
    async def analyze(self, resume_text: str, job_text: str) -> int:
        """Return a 0-100 similarity score between the resume and the job description."""
