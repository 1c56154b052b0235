from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ats_engine.core.config import settings

REMOTE_PROVIDERS: frozenset[str] = frozenset({"openai", "deepseek"})


class SemanticMatchConfig(BaseModel):
    """User-supplied (BYOK) provider settings. Nothing is sent without ``has_consented``."""

    model_config = ConfigDict(frozen=True)

    provider: str = Field(default_factory=lambda: settings.semantic_provider)
    api_key: str | None = Field(default=None, repr=False)
    model: str | None = None
    base_url: str | None = None
    has_consented: bool = False
    timeout_s: float | None = Field(default=None, gt=0)

    @property
    def is_remote(self) -> bool:
        return self.provider.strip().lower() in REMOTE_PROVIDERS

    @property
    def effective_timeout_s(self) -> float:
        return self.timeout_s or settings.semantic_timeout_s


class SemanticMatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(default=0, ge=0, le=100)
    success: bool
    error: str | None = None
