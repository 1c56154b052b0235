"""Consent-gated entry point for semantic similarity scoring.

Resume text leaves the process only through ``run_semantic_match`` and only
when the caller's config records consent. The boundary never raises: every
failure comes back as ``SemanticMatchResult(success=False, error=...)``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .factory import get_semantic_provider
from .types import SemanticMatchConfig, SemanticMatchProvider, SemanticMatchResult

logger = logging.getLogger(__name__)


def _failure(error: str) -> SemanticMatchResult:
    return SemanticMatchResult(score=0, success=False, error=error)


async def run_semantic_match(
    resume_text: str,
    job_text: str,
    config: SemanticMatchConfig | Mapping[str, Any],
    *,
    provider: SemanticMatchProvider | None = None,
) -> SemanticMatchResult:
    if isinstance(config, Mapping):
        try:
            config = SemanticMatchConfig.model_validate(dict(config))
        except ValidationError as exc:
            return _failure(f"Invalid semantic match config: {exc.error_count()} error(s)")
    if not isinstance(config, SemanticMatchConfig):
        return _failure("Invalid semantic match config")
    if not isinstance(resume_text, str) or not isinstance(job_text, str):
        return _failure("Resume and job description must be text")

    if not config.has_consented:
        return _failure("User consent required for AI features")
    if config.is_remote and not (config.api_key or "").strip():
        return _failure("API key not configured")
    if not resume_text.strip() or not job_text.strip():
        return _failure("Resume and job description are both required")

    timeout_s = config.effective_timeout_s
    try:
        provider = provider or get_semantic_provider(config)
        score = await asyncio.wait_for(provider.analyze(resume_text, job_text), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.warning("semantic_match_timeout provider=%s timeout_s=%s", config.provider, timeout_s)
        return _failure(f"Semantic match timed out after {timeout_s:g}s")
    except Exception as exc:  # noqa: BLE001 - the boundary reports every provider failure as a result
        logger.warning("semantic_match_failed provider=%s error=%s", config.provider, type(exc).__name__)
        return _failure(str(exc) or type(exc).__name__)

    try:
        score = max(0, min(100, int(score)))
    except (TypeError, ValueError):
        return _failure("Provider returned a non-numeric score")
    logger.info("semantic_match_completed provider=%s score=%s", config.provider, score)
    return SemanticMatchResult(score=score, success=True)
