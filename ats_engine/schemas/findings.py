from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

FindingSeverity = Literal["critical", "high", "medium", "low", "info"]
FindingCategory = Literal[
    "extraction",
    "layout",
    "contact",
    "structure",
    "keyword",
    "formatting",
    "knockout",
]


class FindingLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int | None = None
    section: str | None = None


class Finding(BaseModel):
    """One observation produced by an analyzer.

    Severity ``info`` marks a positive result; it is never counted as an issue.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    severity: FindingSeverity
    category: FindingCategory
    title: str
    description: str
    impact: str
    suggestion: str | None = None
    location: FindingLocation | None = None
