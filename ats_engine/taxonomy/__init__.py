"""Skill synonym lookups.

The default provider reads the packaged ``synonyms.json`` unless
``TAXONOMY_SYNONYMS_PATH`` points elsewhere.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from ats_engine.core.config import settings

from .local_taxonomy import LocalTaxonomy
from .provider import TaxonomyProvider


@lru_cache(maxsize=4)
def load_taxonomy(synonyms_path: str | None = None) -> LocalTaxonomy:
    return LocalTaxonomy(Path(synonyms_path) if synonyms_path else None)


def get_default_taxonomy_provider() -> TaxonomyProvider:
    return load_taxonomy(settings.taxonomy_synonyms_path)


def skill_equivalents(raw: str, taxonomy: TaxonomyProvider | None = None) -> tuple[str, ...]:
    """``raw`` normalized, followed by every alias of the same skill."""
    provider = taxonomy or get_default_taxonomy_provider()
    return provider.equivalents(raw)


__all__ = [
    "LocalTaxonomy",
    "TaxonomyProvider",
    "get_default_taxonomy_provider",
    "load_taxonomy",
    "skill_equivalents",
]
