from __future__ import annotations

from ats_engine.core.config import settings

from .embeddings import HashedEmbeddingProvider
from .openai_provider import DEEPSEEK_BASE_URL, DEEPSEEK_MODEL, OpenAISemanticProvider
from .types import SemanticMatchConfig, SemanticMatchProvider


def get_semantic_provider(config: SemanticMatchConfig) -> SemanticMatchProvider:
    provider = config.provider.strip().lower()

    if provider == "openai":
        return OpenAISemanticProvider(
            model=config.model or settings.semantic_model,
            api_key=config.api_key or "",
            base_url=config.base_url or settings.semantic_base_url,
            timeout_s=config.effective_timeout_s,
            max_retries=settings.semantic_max_retries,
        )

    if provider == "deepseek":
        return OpenAISemanticProvider(
            model=config.model or DEEPSEEK_MODEL,
            api_key=config.api_key or "",
            base_url=config.base_url or DEEPSEEK_BASE_URL,
            timeout_s=config.effective_timeout_s,
            max_retries=settings.semantic_max_retries,
            name="deepseek",
        )

    if provider == "hashed":
        return HashedEmbeddingProvider()

    raise ValueError(f"Unsupported SEMANTIC_PROVIDER='{config.provider}'")
