from __future__ import annotations

import hashlib
import math
import re
from collections.abc import Iterator

_WORD_RE = re.compile(r"[a-z0-9\+#]+")
_STOP_TOKENS = frozenset({"a", "an", "and", "the", "of", "to", "in", "for", "with", "on", "or", "is", "are", "be"})
_BIGRAM_WEIGHT = 0.5


def cosine_similarity(left: list[float], right: list[float]) -> float:
    if len(left) != len(right):
        return 0.0
    dot = sum(a * b for a, b in zip(left, right))
    left_norm = math.sqrt(sum(a * a for a in left))
    right_norm = math.sqrt(sum(b * b for b in right))
    if left_norm <= 0 or right_norm <= 0:
        return 0.0
    return dot / (left_norm * right_norm)


def _features(text: str) -> Iterator[tuple[str, float]]:
    words = [word for word in _WORD_RE.findall(text.lower()) if word not in _STOP_TOKENS]
    for word in words:
        yield word, 1.0
    for first, second in zip(words, words[1:]):
        yield f"{first} {second}", _BIGRAM_WEIGHT


class HashedEmbeddingProvider:
    """Offline semantic scorer: unigrams and bigrams hashed into fixed buckets, compared by cosine."""

    def __init__(self, dimension: int = 256) -> None:
        if dimension <= 0:
            raise ValueError("dimension must be greater than 0")
        self.dimension = dimension

    def _bucket(self, feature: str) -> int:
        return int(hashlib.sha256(feature.encode("utf-8")).hexdigest()[:8], 16) % self.dimension

    def embed(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        for feature, weight in _features(text):
            vector[self._bucket(feature)] += weight
        norm = math.sqrt(sum(value * value for value in vector))
        return [value / norm for value in vector] if norm > 0 else vector

    async def analyze(self, resume_text: str, job_text: str) -> int:
        similarity = cosine_similarity(self.embed(resume_text), self.embed(job_text))
        return max(0, min(100, round(100 * similarity)))
