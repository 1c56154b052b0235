from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .findings import Finding


def _keys(keywords: list[str]) -> set[str]:
    return {keyword.strip().lower() for keyword in keywords}


class KeywordSet(BaseModel):
    """Critical and optional keywords of a posting; ``all`` is their union in first-seen order."""

    model_config = ConfigDict(frozen=True)

    critical: list[str] = Field(default_factory=list)
    optional: list[str] = Field(default_factory=list)
    all: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _default_all(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("all"):
            return data
        critical = data.get("critical") or []
        optional = data.get("optional") or []
        if isinstance(critical, (list, tuple)) and isinstance(optional, (list, tuple)):
            return {**data, "all": [*critical, *optional]}
        return data

    @model_validator(mode="after")
    def _check_unique(self) -> "KeywordSet":
        for name in ("critical", "optional", "all"):
            seen: set[str] = set()
            for keyword in getattr(self, name):
                key = keyword.strip().lower()
                if key in seen:
                    raise ValueError(f"duplicate keyword '{keyword}' in {name}")
                seen.add(key)
        overlap = _keys(self.critical) & _keys(self.optional)
        if overlap:
            raise ValueError(f"keywords both critical and optional: {', '.join(sorted(overlap))}")
        if _keys(self.all) != _keys(self.critical) | _keys(self.optional):
            raise ValueError("all must list exactly the critical and optional keywords")
        return self

    @classmethod
    def from_lists(cls, critical: list[str], optional: list[str] | None = None) -> "KeywordSet":
        optional = list(optional or [])
        critical_keys = {item.strip().lower() for item in critical}
        optional = [item for item in optional if item.strip().lower() not in critical_keys]
        return cls(critical=list(critical), optional=optional, all=list(critical) + optional)

    def is_empty(self) -> bool:
        return not self.critical and not self.optional


class CoverageResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    found_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    bonus_keywords: list[str] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)
