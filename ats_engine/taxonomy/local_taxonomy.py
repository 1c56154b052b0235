from __future__ import annotations

import json
from pathlib import Path

from .provider import TaxonomyProvider


class LocalTaxonomy(TaxonomyProvider):
    def __init__(self, synonyms_path: str | Path | None = None) -> None:
        path = Path(synonyms_path) if synonyms_path else Path(__file__).with_name("synonyms.json")
        self._synonyms = self._load_synonyms(path)
        self._aliases: dict[str, list[str]] = {}
        for alias, canonical in self._synonyms.items():
            self._aliases.setdefault(canonical, []).append(alias)

    @staticmethod
    def _load_synonyms(path: Path) -> dict[str, str]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        return {str(key).strip().lower(): str(value) for key, value in raw.items()}

    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        normalized = " ".join(raw.strip().lower().split())
        canonical_skill_id = self._synonyms.get(normalized)
        return normalized, canonical_skill_id

    def equivalents(self, raw: str) -> tuple[str, ...]:
        normalized, canonical_skill_id = self.normalize_skill(raw)
        if canonical_skill_id is None:
            return (normalized,)
        others = [alias for alias in self._aliases[canonical_skill_id] if alias != normalized]
        return (normalized, *others)
