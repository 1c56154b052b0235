from .boundary import run_semantic_match
from .embeddings import HashedEmbeddingProvider, cosine_similarity
from .factory import get_semantic_provider
from .openai_provider import OpenAISemanticProvider
from .types import SemanticMatchConfig, SemanticMatchProvider, SemanticMatchResult

__all__ = [
    "HashedEmbeddingProvider",
    "OpenAISemanticProvider",
    "SemanticMatchConfig",
    "SemanticMatchProvider",
    "SemanticMatchResult",
    "cosine_similarity",
    "get_semantic_provider",
    "run_semantic_match",
]
